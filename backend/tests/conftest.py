"""
MedTrack Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── today: fixed evaluation date used by every clock in the tests
    ├── medication_service: MedicationService bound to that fixed clock
    ├── mock_db_session: AsyncSession stand-in (no real DB needed)
    ├── make_medication: factory for transient Medication rows
    └── test_client: HTTPX AsyncClient over a fresh app with the DB overridden
"""

import os
import tempfile

# Settings are read at import time, so the environment must be set before
# anything from medtrack is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="medtrack_test_"), "test.db"
)
os.environ["TIMEZONE"] = "UTC"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date, datetime, timedelta, timezone  # noqa: E402
from unittest.mock import AsyncMock, MagicMock, patch  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from medtrack.database import get_db_session  # noqa: E402
from medtrack.models.medication import Medication  # noqa: E402
from medtrack.services.medication_service import MedicationService  # noqa: E402

TODAY = date(2026, 3, 10)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def medication_service():
    return MedicationService(clock=lambda: TODAY)


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = row
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_medication():
    """
    Factory for Medication rows that never touch a database.

    Dates are given as day offsets from TODAY so tests read like the
    day-numbered scenarios they check.
    """
    created = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def _make(
        name="Paracetamol",
        purchased_days_ago=0,
        expires_in_days=100,
        total_units=30,
        units_per_day=1,
    ):
        nonlocal created
        created += timedelta(minutes=1)
        return Medication(
            id=uuid4(),
            name=name,
            purchase_date=TODAY - timedelta(days=purchased_days_ago),
            expiry_date=TODAY + timedelta(days=expires_in_days),
            total_units=total_units,
            units_per_day=units_per_day,
            created_at=created,
        )

    return _make


@pytest_asyncio.fixture
async def test_client(mock_db_session, medication_service):
    """
    HTTPX AsyncClient talking to a fresh app instance.

    The DB dependency yields mock_db_session and the routes use the
    fixed-clock medication_service.
    """
    from medtrack.main import create_app

    app = create_app()

    async def _override_session():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = _override_session

    with patch("medtrack.routes.medications.medication_service", medication_service):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
