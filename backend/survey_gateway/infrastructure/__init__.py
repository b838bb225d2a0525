"""Infrastructure Layer - database connectivity, logging, and process lifecycle.

Invariants:
    - Long-lived resources are constructed once at startup and passed explicitly
"""
