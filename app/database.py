"""
Engine and session wiring for the RC registry.
The RC table and the ownership_history audit table share one database;
each repository commits its own writes on the request's session.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # local runs only; SQLite has no server-side pool to size
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}


engine = create_engine(settings.DATABASE_URL, echo=False, **_engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: one session per request, closed once the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create rc_records and ownership_history if missing. Idempotent."""
    from app.models.rc import Rc                                  # noqa
    from app.models.ownership_history import OwnershipHistory     # noqa

    Base.metadata.create_all(bind=engine)
