import os
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_leasekeeper.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from app.main import app

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"

# Fixed "today" for every request; tests that need another date override get_today again.
TODAY = date(2024, 7, 1)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test and run migrations."""
    # Use a temporary file for SQLite database
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    # Create test engine and session with proper SQLite settings
    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
    )

    # Enable WAL mode to reduce locking issues, and enforce foreign keys
    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    # Run Alembic migrations to set up the database schema
    alembic_cfg = Config(str(ALEMBIC_INI))
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Dispose the engine to close all connections
        test_engine.dispose()

        # Clean up - remove test database file and directory
        for suffix in ["", "-wal", "-shm"]:
            path = f"{test_db_path}{suffix}"
            if os.path.exists(path):
                os.remove(path)
        if os.path.exists(temp_db_dir):
            os.rmdir(temp_db_dir)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database and clock dependency overrides."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from app.api.deps import get_db, get_today

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def set_today():
    """Pin the API's notion of today to another date for the rest of the test."""
    from app.api.deps import get_today

    def _set(today: date) -> None:
        app.dependency_overrides[get_today] = lambda: today

    return _set


@pytest.fixture(scope="function")
def property_(db: Session):
    """Create a property for testing."""
    from app.repositories.property import create_property

    return create_property(db, title="Maple Street 12", property_type="house", currency="USD")


@pytest.fixture(scope="function")
def other_property(db: Session):
    """Create a second property for testing."""
    from app.repositories.property import create_property

    return create_property(db, title="Harbour View 3B", property_type="apartment", currency="EUR")


@pytest.fixture(scope="function")
def tenant(db: Session):
    """Create a tenant for testing."""
    from app.repositories.tenant import create_tenant

    return create_tenant(
        db, first_name="Dana", last_name="Levi", email="dana@example.com", phone="+15550100"
    )


@pytest.fixture(scope="function")
def make_lease(db: Session):
    """Insert a lease directly through the repository (no overlap checks)."""
    from app.repositories.lease import create_lease

    def _make(property_id: int, lease_start: date, lease_end: date, **fields):
        values = {
            "rent_amount": Decimal("1200"),
            "currency": "USD",
            "security_deposit": Decimal("0"),
            "payment_frequency": "monthly",
        }
        values.update(fields)
        return create_lease(
            db,
            property_id=property_id,
            lease_start=lease_start,
            lease_end=lease_end,
            **values,
        )

    return _make
