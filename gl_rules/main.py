"""
GL Rules Service: FastAPI Application.

This is the entry point for the application.
Logging and collation are configured and all routers are
registered here.
"""

import locale
import logging

from fastapi import FastAPI

from gl_rules.config import get_settings
from gl_rules.api.health import router as health_router
from gl_rules.api.accounts import router as accounts_router
from gl_rules.api.rule_sets import router as rule_sets_router
from gl_rules.api.rules import router as rules_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)


def configure_collation() -> None:
    """
    Take string collation from the environment (LC_ALL, LC_COLLATE, LANG).

    Rule lists sort target names with locale.strxfrm, which follows
    the C locale until this runs. An unavailable locale is logged
    and the C locale is kept.
    """
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.warning(
            "Locale from the environment is not available; "
            "rule names sort by code point"
        )


configure_collation()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="GL accounts, allocation rule sets and rule resolution",
)

# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(rule_sets_router)
app.include_router(rules_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
