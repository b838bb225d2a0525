"""Root conftest - shared test configuration."""

import os

# Module-level app in survey_gateway.main is built from these on import
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")
