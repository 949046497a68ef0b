# saivd/infra/postgres.py

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

from saivd.core.config import DATABASE_URL

logger = logging.getLogger(__name__)

Base = declarative_base()

# =========================
# ENGINE CONFIGURATION
# =========================

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,  # Check connections before using them
    pool_size=5,
    max_overflow=10,
    pool_recycle=3600,
    echo=False,
)

# =========================
# SESSION CONFIGURATION
# =========================

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# =========================
# DATABASE FUNCTIONS
# =========================


def get_db():
    """
    FastAPI dependency to provide a DB session to routes.
    Usage:
        def my_route(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create all tables for the registered models."""
    from saivd.models.profile import Profile  # noqa: F401
    from saivd.models.video import Video  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created")


def check_connection() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
        return True
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        return False
