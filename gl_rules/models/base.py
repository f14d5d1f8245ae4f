"""
Database engine, session management, and base model.

Every model inherits from Base. Every request gets a session
from get_db().
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from gl_rules.config import get_settings

settings = get_settings()

# pool_pre_ping=True tests connections before handing them out,
# so a restarted database does not surface as a failed request.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
)

# Services only flush. The API layer decides when to commit,
# so a rule set and its copied rules are saved together or not at all.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


def get_db():
    """
    Provide a database session for a single request.

    The session is always closed when the request finishes,
    even if an error occurs.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
