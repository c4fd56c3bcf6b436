# File: streetsmart/core/database/connection.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from streetsmart.core.config.settings import settings
from streetsmart.core.database.base import Base

# check_same_thread=False is needed only for SQLite (Test Mode)
connect_args = {"check_same_thread": False} if "sqlite" in settings.DATABASE_URL else {}

engine = create_engine(
    settings.DATABASE_URL,
    echo=False,
    pool_pre_ping=True,
    connect_args=connect_args
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency for obtaining a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Creates every registered table. Safe to call repeatedly."""
    # Register the models on Base before create_all
    import streetsmart.features.video_processing.data.sql_models  # noqa: F401

    Base.metadata.create_all(bind=engine)
