"""
MedTrack Backend: Medication Service (Medication Store)
=========================================================

What:  CRUD over the `medications` table, attaching a freshly computed status
       to every record it returns.
Why:   Keeps storage and business rules out of the route handlers, and keeps
       the status calculator free of clocks and sessions.
How:   Each call receives its own AsyncSession. "Today" comes from an
       injected clock, or from an explicit `as_of` date supplied by the caller.
Who:   Called by the /api/medications route handlers.

Time Handling:
    The service never calls date.today() directly. The default clock returns
    the current date in settings.timezone; tests construct the service with a
    fixed clock instead. A status is therefore a pure function of
    (row, clock()) and re-reading a record on the same day gives the same answer.
"""

import logging
from collections import Counter
from datetime import date, datetime, timezone
from typing import Callable, Iterable, Optional
from uuid import UUID, uuid4

from sqlalchemy import asc, select
from sqlalchemy.ext.asyncio import AsyncSession

from medtrack.config import settings
from medtrack.exceptions import DatabaseError, NotFoundError, ValidationError
from medtrack.models.medication import Medication
from medtrack.schemas.medication import (
    MedicationCreate,
    MedicationListResponse,
    MedicationResponse,
    StatusSummary,
)
from medtrack.services.medication_status import MedicationStatus, status_for

logger = logging.getLogger(__name__)

Clock = Callable[[], date]


def local_today() -> date:
    """Current calendar date in the configured timezone."""
    return datetime.now(settings.tzinfo).date()


class MedicationService:
    """
    Business logic layer for medication records.

    Responsibilities:
        - create_medication(): validate date order, persist, return with status
        - get_medication(): single record with not-found handling
        - list_medications(): all records with status, filter, summary and paging
        - delete_medication(): remove a record

    Error Handling Strategy:
        Business-rule failures raise ValidationError; missing rows raise
        NotFoundError. Anything else coming out of the session is logged and
        wrapped in DatabaseError so the client only sees a generic message.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock: Clock = clock or local_today

    def today(self, as_of: Optional[date] = None) -> date:
        """The evaluation date: `as_of` when given, otherwise the clock."""
        return as_of if as_of is not None else self._clock()

    async def create_medication(
        self,
        db: AsyncSession,
        payload: MedicationCreate,
    ) -> MedicationResponse:
        """
        Store a new medication and return it with its current status.

        Raises:
            ValidationError: expiry_date is before purchase_date (→ 400)
            DatabaseError: the insert failed (→ 500)
        """
        if payload.expiry_date < payload.purchase_date:
            raise ValidationError(
                message=(
                    f"Expiry date {payload.expiry_date.isoformat()} is before "
                    f"purchase date {payload.purchase_date.isoformat()}"
                ),
                field="expiry_date",
            )

        medication = Medication(
            id=uuid4(),
            name=payload.name,
            purchase_date=payload.purchase_date,
            expiry_date=payload.expiry_date,
            total_units=payload.total_units,
            units_per_day=payload.units_per_day,
            created_at=datetime.now(timezone.utc),
        )

        try:
            db.add(medication)
            await db.flush()
        except Exception as e:
            logger.error("Database error creating medication: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the medication. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Medication %s created (units=%d, per_day=%d)",
                    medication.id, medication.total_units, medication.units_per_day)
        return self.to_response(medication, self.today())

    async def get_medication(
        self,
        db: AsyncSession,
        medication_id: UUID,
        as_of: Optional[date] = None,
    ) -> MedicationResponse:
        """
        Retrieve a single medication by ID.

        Raises:
            NotFoundError: no medication with this ID (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        medication = await self._fetch(db, medication_id)
        return self.to_response(medication, self.today(as_of))

    async def list_medications(
        self,
        db: AsyncSession,
        status: Optional[MedicationStatus] = None,
        as_of: Optional[date] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> MedicationListResponse:
        """
        List medications in the order they were added, each with its status.

        Status is derived, not stored, so filtering and paging happen after
        evaluation rather than in SQL.

        Args:
            db: Async database session
            status: Only return medications in this status
            as_of: Evaluate as of this date instead of today
            limit: Maximum items in the page
            offset: Items to skip (after filtering)
        """
        on = self.today(as_of)

        try:
            result = await db.execute(
                select(Medication).order_by(asc(Medication.created_at), asc(Medication.id))
            )
            rows = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing medications: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve medications. Please try again.",
                context={"error_type": type(e).__name__},
            )

        evaluated = [self.to_response(row, on) for row in rows]
        matching = [m for m in evaluated if status is None or m.status == status]

        return MedicationListResponse(
            medications=matching[offset:offset + limit],
            total_count=len(matching),
            summary=summarize(evaluated),
            evaluated_on=on,
        )

    async def delete_medication(self, db: AsyncSession, medication_id: UUID) -> None:
        """
        Delete a medication.

        Raises:
            NotFoundError: no medication with this ID (→ 404)
            DatabaseError: the delete failed (→ 500)
        """
        medication = await self._fetch(db, medication_id)
        try:
            await db.delete(medication)
            await db.flush()
        except Exception as e:
            logger.error("Database error deleting medication %s: %s", medication_id, str(e))
            raise DatabaseError(
                message="Could not delete the medication. Please try again.",
                context={"medication_id": str(medication_id)},
            )
        logger.info("Medication %s deleted", medication_id)

    async def _fetch(self, db: AsyncSession, medication_id: UUID) -> Medication:
        try:
            result = await db.execute(
                select(Medication).where(Medication.id == medication_id)
            )
            medication = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching medication %s: %s", medication_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the medication. Please try again.",
                context={"medication_id": str(medication_id)},
            )

        if medication is None:
            raise NotFoundError(resource="medication", resource_id=str(medication_id))
        return medication

    @staticmethod
    def to_response(medication: Medication, on: date) -> MedicationResponse:
        """Combine a stored row with its status as of `on`."""
        result = status_for(medication, on)
        created_at = medication.created_at
        # SQLite hands back DateTime(timezone=True) values without tzinfo
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return MedicationResponse(
            id=medication.id,
            name=medication.name,
            purchase_date=medication.purchase_date,
            expiry_date=medication.expiry_date,
            total_units=medication.total_units,
            units_per_day=medication.units_per_day,
            created_at=created_at,
            status=result.status,
            remaining_units=result.remaining_units,
            days_to_end=result.days_to_end,
            evaluated_on=result.evaluated_on,
        )


def summarize(medications: Iterable[MedicationResponse]) -> StatusSummary:
    """Count medications per status."""
    counts = Counter(m.status for m in medications)
    return StatusSummary(
        active=counts[MedicationStatus.ACTIVE],
        out_of_stock=counts[MedicationStatus.OUT_OF_STOCK],
        expired=counts[MedicationStatus.EXPIRED],
    )


medication_service = MedicationService()
