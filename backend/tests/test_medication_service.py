"""
MedTrack Backend: Medication Service Unit Tests
=================================================

What:  Tests for MedicationService (create, get, list, delete).
How:   Mock DB sessions and a fixed clock; no real database.

What we test:
    ✅ Create persists the row and returns its status as of the clock's today
    ✅ Create rejects an expiry date before the purchase date
    ✅ Missing records raise NotFoundError
    ✅ List evaluates every row, filters by status, pages, and summarizes
    ✅ as_of overrides the clock
    ✅ Session failures surface as DatabaseError
"""

from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from medtrack.exceptions import DatabaseError, NotFoundError, ValidationError
from medtrack.models.medication import Medication
from medtrack.schemas.medication import MedicationCreate
from medtrack.services.medication_service import MedicationService, local_today
from medtrack.services.medication_status import MedicationStatus


def scalar_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def scalars_result(values):
    result = MagicMock()
    result.scalars.return_value.all.return_value = list(values)
    return result


class TestCreateMedication:

    @pytest.mark.asyncio
    async def test_create_returns_status_as_of_clock(self, medication_service, mock_db_session, today):
        payload = MedicationCreate(
            name="  Amoxicillin ",
            purchase_date=today - timedelta(days=2),
            expiry_date=today + timedelta(days=98),
            total_units=30,
            units_per_day=3,
        )

        result = await medication_service.create_medication(mock_db_session, payload)

        mock_db_session.add.assert_called_once()
        mock_db_session.flush.assert_awaited_once()
        stored = mock_db_session.add.call_args.args[0]
        assert isinstance(stored, Medication)
        assert stored.name == "Amoxicillin"

        assert result.id == stored.id
        assert result.status == MedicationStatus.ACTIVE
        assert result.remaining_units == 24
        assert result.days_to_end == 8
        assert result.evaluated_on == today

    @pytest.mark.asyncio
    async def test_create_rejects_expiry_before_purchase(self, medication_service, mock_db_session, today):
        payload = MedicationCreate(
            name="Vitamin C",
            purchase_date=today,
            expiry_date=today - timedelta(days=1),
            total_units=10,
            units_per_day=1,
        )

        with pytest.raises(ValidationError) as exc_info:
            await medication_service.create_medication(mock_db_session, payload)

        assert exc_info.value.field == "expiry_date"
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_accepts_same_day_purchase_and_expiry(self, medication_service, mock_db_session, today):
        payload = MedicationCreate(
            name="Eye drops",
            purchase_date=today,
            expiry_date=today,
            total_units=1,
            units_per_day=0,
        )

        result = await medication_service.create_medication(mock_db_session, payload)

        assert result.status == MedicationStatus.ACTIVE
        assert result.days_to_end is None

    @pytest.mark.asyncio
    async def test_create_wraps_flush_failure(self, medication_service, mock_db_session, today):
        mock_db_session.flush = AsyncMock(side_effect=RuntimeError("connection reset"))
        payload = MedicationCreate(
            name="Ibuprofen",
            purchase_date=today,
            expiry_date=today + timedelta(days=30),
            total_units=20,
            units_per_day=2,
        )

        with pytest.raises(DatabaseError) as exc_info:
            await medication_service.create_medication(mock_db_session, payload)

        assert exc_info.value.context["error_type"] == "RuntimeError"


class TestGetMedication:

    @pytest.mark.asyncio
    async def test_get_found(self, medication_service, mock_db_session, make_medication):
        row = make_medication(purchased_days_ago=5, total_units=10, units_per_day=2)
        mock_db_session.execute.return_value = scalar_result(row)

        result = await medication_service.get_medication(mock_db_session, row.id)

        assert result.id == row.id
        assert result.status == MedicationStatus.OUT_OF_STOCK
        assert result.remaining_units == 0

    @pytest.mark.asyncio
    async def test_get_not_found(self, medication_service, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(None)

        with pytest.raises(NotFoundError):
            await medication_service.get_medication(mock_db_session, uuid4())

    @pytest.mark.asyncio
    async def test_as_of_overrides_clock(self, medication_service, mock_db_session, make_medication, today):
        row = make_medication(expires_in_days=10, total_units=1000, units_per_day=1)
        mock_db_session.execute.return_value = scalar_result(row)

        result = await medication_service.get_medication(
            mock_db_session, row.id, as_of=today + timedelta(days=11)
        )

        assert result.status == MedicationStatus.EXPIRED
        assert result.evaluated_on == today + timedelta(days=11)

    @pytest.mark.asyncio
    async def test_get_wraps_query_failure(self, medication_service, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=OSError("db down"))

        with pytest.raises(DatabaseError):
            await medication_service.get_medication(mock_db_session, uuid4())


class TestListMedications:

    @pytest.fixture
    def cabinet(self, make_medication):
        return [
            make_medication(name="Paracetamol", total_units=30, units_per_day=1),
            make_medication(name="Old syrup", purchased_days_ago=400, expires_in_days=-30),
            make_medication(name="Antibiotic", purchased_days_ago=7, total_units=14, units_per_day=2),
            make_medication(name="Vitamin D", total_units=60, units_per_day=1),
        ]

    @pytest.mark.asyncio
    async def test_list_empty(self, medication_service, mock_db_session, today):
        mock_db_session.execute.return_value = scalars_result([])

        result = await medication_service.list_medications(mock_db_session)

        assert result.medications == []
        assert result.total_count == 0
        assert result.summary.active == 0
        assert result.evaluated_on == today

    @pytest.mark.asyncio
    async def test_list_evaluates_and_summarizes(self, medication_service, mock_db_session, cabinet):
        mock_db_session.execute.return_value = scalars_result(cabinet)

        result = await medication_service.list_medications(mock_db_session)

        assert [m.name for m in result.medications] == [
            "Paracetamol", "Old syrup", "Antibiotic", "Vitamin D",
        ]
        assert [m.status for m in result.medications] == [
            MedicationStatus.ACTIVE,
            MedicationStatus.EXPIRED,
            MedicationStatus.OUT_OF_STOCK,
            MedicationStatus.ACTIVE,
        ]
        assert result.total_count == 4
        assert result.summary.active == 2
        assert result.summary.expired == 1
        assert result.summary.out_of_stock == 1

    @pytest.mark.asyncio
    async def test_list_filters_by_status_but_summarizes_everything(
        self, medication_service, mock_db_session, cabinet
    ):
        mock_db_session.execute.return_value = scalars_result(cabinet)

        result = await medication_service.list_medications(
            mock_db_session, status=MedicationStatus.ACTIVE
        )

        assert [m.name for m in result.medications] == ["Paracetamol", "Vitamin D"]
        assert result.total_count == 2
        assert result.summary.expired == 1

    @pytest.mark.asyncio
    async def test_list_pages_after_filtering(self, medication_service, mock_db_session, cabinet):
        mock_db_session.execute.return_value = scalars_result(cabinet)

        result = await medication_service.list_medications(mock_db_session, limit=2, offset=1)

        assert [m.name for m in result.medications] == ["Old syrup", "Antibiotic"]
        assert result.total_count == 4

    @pytest.mark.asyncio
    async def test_list_as_of_future_date(self, medication_service, mock_db_session, cabinet, today):
        mock_db_session.execute.return_value = scalars_result(cabinet)

        result = await medication_service.list_medications(
            mock_db_session, as_of=today + timedelta(days=45)
        )

        paracetamol, _, _, vitamin_d = result.medications
        assert paracetamol.status == MedicationStatus.OUT_OF_STOCK
        assert vitamin_d.remaining_units == 15
        assert vitamin_d.days_to_end == 15

    @pytest.mark.asyncio
    async def test_list_wraps_query_failure(self, medication_service, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(DatabaseError):
            await medication_service.list_medications(mock_db_session)


class TestDeleteMedication:

    @pytest.mark.asyncio
    async def test_delete_existing(self, medication_service, mock_db_session, make_medication):
        row = make_medication()
        mock_db_session.execute.return_value = scalar_result(row)

        await medication_service.delete_medication(mock_db_session, row.id)

        mock_db_session.delete.assert_awaited_once_with(row)
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_missing(self, medication_service, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(None)

        with pytest.raises(NotFoundError):
            await medication_service.delete_medication(mock_db_session, uuid4())

        mock_db_session.delete.assert_not_awaited()


class TestClock:

    def test_default_clock_returns_a_date(self):
        service = MedicationService()
        assert isinstance(service.today(), date)
        assert isinstance(local_today(), date)

    def test_injected_clock_is_used(self):
        service = MedicationService(clock=lambda: date(2030, 1, 1))
        assert service.today() == date(2030, 1, 1)
        assert service.today(as_of=date(2031, 5, 5)) == date(2031, 5, 5)
