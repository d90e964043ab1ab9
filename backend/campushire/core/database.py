"""
Database connection and session management
"""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.orm.util import identity_key
from sqlalchemy.pool import QueuePool
from typing import Generator
import structlog

from campushire.core.config import settings

logger = structlog.get_logger()

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

# SQLite keeps its default pool; server databases get a sized QueuePool
if _is_sqlite:
    engine = create_engine(
        settings.DATABASE_URL,
        connect_args={"check_same_thread": False},
        echo=settings.DATABASE_ECHO,
    )
else:
    engine = create_engine(
        settings.DATABASE_URL,
        poolclass=QueuePool,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_pre_ping=True,  # Verify connections before using
        echo=settings.DATABASE_ECHO,
    )

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database session
    Yields a database session and ensures it's closed after use
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error("database_session_error", error=str(e))
        db.rollback()
        raise
    finally:
        db.close()


@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enforce foreign keys on SQLite connections"""
    if _is_sqlite:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db():
    """Initialize database tables"""
    import campushire.models  # noqa: F401  registers every table on Base.metadata
    
    Base.metadata.create_all(bind=engine)
    logger.info("database_initialized")


def expire_cached(db: Session, model, pk) -> None:
    """Expire an identity-mapped row after a Core UPDATE touched it"""
    instance = db.identity_map.get(identity_key(model, pk))
    if instance is not None:
        db.expire(instance)
