"""
MedTrack Backend: Medication SQLAlchemy Model
===============================================

What:  ORM model representing the `medications` table.
Who:   Used by MedicationService for CRUD and by Alembic for schema management.

Table Design:
    - UUID primary key, generated in Python so the same model works on
      PostgreSQL and SQLite
    - purchase_date / expiry_date: plain calendar dates (no time of day)
    - total_units / units_per_day: fixed at creation, never updated
    - No status or remaining-units column: both are derived on every read
      from the row and the evaluation date
    - created_at: UTC with timezone; drives the listing order
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from medtrack.database import Base


class Medication(Base):
    """
    A medication the user has logged.

    Lifecycle:
        1. Created when the user adds a medicine
        2. Read on every render of the tracking list (status derived each time)
        3. Deleted by explicit user action; there is no in-place edit
    """

    __tablename__ = "medications"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier, assigned at creation and never changed",
    )

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Display label entered by the user",
    )

    purchase_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Day the medication was acquired",
    )

    expiry_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Last day the medication is safe to use",
    )

    total_units: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Units available at purchase time",
    )

    units_per_day: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Daily consumption rate; 0 means the stock never depletes",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        comment="When this record was created (UTC)",
    )

    __table_args__ = (
        CheckConstraint("total_units >= 0", name="ck_medications_total_units_non_negative"),
        CheckConstraint("units_per_day >= 0", name="ck_medications_units_per_day_non_negative"),
        Index("idx_medications_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Medication(id={self.id}, name='{self.name}', "
            f"expiry_date='{self.expiry_date}')>"
        )
