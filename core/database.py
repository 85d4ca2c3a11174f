import logging
from contextlib import contextmanager
from fastapi import HTTPException, status
from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import Session, sessionmaker

from core.config import settings

logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(engine):
    """SQLite ignores REFERENCES clauses unless the pragma is set per connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Handle SQLite special case
if settings.DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        settings.DATABASE_URL,
        connect_args={"check_same_thread": False}
    )
    enable_sqlite_foreign_keys(engine)
else:
    engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

# Create a session local to the database
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# The base for all declarative SQLAlchemy models
Base = declarative_base()


# Dependency to get DB session (FastAPI style)
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def conflict_guard(db: Session, detail: str):
    """Turn a constraint violation raised inside the block into a 400.

    Guarded transitions check first and then write; the unique indexes on
    quotes, bookings and reviews catch whatever slips through that gap.
    """
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity conflict: {e.orig}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def commit_or_conflict(db: Session, detail: str) -> None:
    with conflict_guard(db, detail):
        db.commit()
