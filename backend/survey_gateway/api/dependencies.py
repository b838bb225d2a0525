"""Shared FastAPI dependencies for objects built once by the app factory."""

from fastapi import Request

from survey_gateway.config import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
