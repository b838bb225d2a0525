"""API Layer - request pipeline, routes, and the terminal error handler.

Invariants:
    - Routes and collaborators are registered explicitly by api/pipeline.py
    - All endpoints return structured JSON responses
"""
