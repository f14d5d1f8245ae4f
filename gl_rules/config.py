"""
Settings for the GL rules service.

Read from the process environment, after a local .env file (if any)
has been loaded into it. Nothing here imports the models.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Environment-backed settings, evaluated when this module is imported."""

    # Application
    APP_NAME: str = "GL Rules Service"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/gl_rules"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Rule evaluation order, highest priority first.
    # Parsed and validated by gl_rules.services.priority.
    RULE_PRIORITY_ORDER: str = os.getenv(
        "RULE_PRIORITY_ORDER",
        "resource,product_sub_type,product_type,default",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    The Settings object is created once and reused for all
    subsequent calls, so environment variables are read once.
    """
    return Settings()
