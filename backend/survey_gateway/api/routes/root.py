"""Welcome Route - static landing payload listing the public endpoints."""

from fastapi import APIRouter, Depends, status

from survey_gateway.api.dependencies import get_app_settings
from survey_gateway.config import Settings
from survey_gateway.schemas.status import EndpointMap, WelcomePayload

router = APIRouter(tags=["root"])

ENDPOINTS = EndpointMap(
    survey="/api/v1/responses",
    auth="/api/v1/auth",
    analytics="/api/v1/analytics",
    advanced="/api/v1/adv",
)


@router.get("/", response_model=WelcomePayload, status_code=status.HTTP_200_OK)
async def welcome(settings: Settings = Depends(get_app_settings)):
    return WelcomePayload(
        message="Maternal Survey API",
        version=settings.api_version,
        endpoints=ENDPOINTS,
        documentation=settings.documentation_url,
    )
