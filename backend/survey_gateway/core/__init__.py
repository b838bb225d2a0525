"""Core Layer - pure policy and domain types, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from api/ or infrastructure/
    - All functions are pure and deterministic
"""
