"""Pydantic Schemas - response contracts for the gateway's own endpoints.

Invariants:
    - Domain types from core/ used for enum fields
"""
