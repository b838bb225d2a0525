"""Route Modules - the gateway's own endpoints and collaborator slots.

Invariants:
    - Each module defines its own APIRouter; prefixes are applied by api/pipeline.py
    - Routes never contain business logic (that belongs to route collaborators)
"""
