# File: tests/conftest.py

import os
import sys
import shutil
import tempfile

import pytest
import sqlalchemy
from sqlalchemy import text
from sqlalchemy_utils import database_exists, create_database

# 1. Add project root to path
sys.path.append(os.getcwd())

# 2. Point the app at a throwaway SQLite DB and data dir BEFORE settings import
_TEST_ROOT = tempfile.mkdtemp(prefix="streetsmart_tests_")
os.environ["USE_SQLITE"] = "true"
os.environ["SQLITE_URL"] = f"sqlite:///{os.path.join(_TEST_ROOT, 'test_streetsmart.db')}"
os.environ["STREETSMART_DATA_DIR"] = os.path.join(_TEST_ROOT, "data")

from streetsmart.core.config.settings import settings  # noqa: E402
from streetsmart.core.database.connection import engine as TEST_ENGINE, SessionLocal  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def global_setup():
    """
    Runs once per test session.
    Ensures DB exists and the schema is registered.
    """
    if not database_exists(TEST_ENGINE.url):
        create_database(TEST_ENGINE.url)

    # Import all models to ensure they are registered
    from streetsmart.core.database.base import Base
    import streetsmart.features.video_processing.data.sql_models  # noqa: F401

    Base.metadata.create_all(bind=TEST_ENGINE)
    settings.ensure_dirs()

    yield

    TEST_ENGINE.dispose()
    shutil.rmtree(_TEST_ROOT, ignore_errors=True)


@pytest.fixture(scope="function", autouse=True)
def clean_db(global_setup):
    """
    Runs before EVERY test.
    Detects DB type and cleans tables appropriately.
    """
    from streetsmart.core.database.base import Base

    # 1. Safety Check: Ensure tables exist
    Base.metadata.create_all(bind=TEST_ENGINE)

    # 2. Clean Data
    with TEST_ENGINE.connect() as conn:
        trans = conn.begin()

        is_sqlite = "sqlite" in str(TEST_ENGINE.url)

        inspector = sqlalchemy.inspect(TEST_ENGINE)
        table_names = inspector.get_table_names()

        if table_names:
            if is_sqlite:
                # No TRUNCATE in SQLite; disable FK checks to delete in any order
                conn.execute(text("PRAGMA foreign_keys = OFF;"))
                for table in table_names:
                    conn.execute(text(f'DELETE FROM "{table}";'))
                conn.execute(text("PRAGMA foreign_keys = ON;"))
            else:
                conn.execute(text("SET session_replication_role = 'replica';"))
                for table in table_names:
                    conn.execute(text(f'TRUNCATE TABLE "{table}" CASCADE;'))
                conn.execute(text("SET session_replication_role = 'origin';"))

        trans.commit()

    yield


@pytest.fixture(scope="function")
def db_session():
    """
    Provides a session for the test to inspect rows directly.
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
