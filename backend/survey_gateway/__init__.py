"""Maternal Survey API gateway package.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
