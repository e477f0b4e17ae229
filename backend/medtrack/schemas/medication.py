"""
MedTrack Backend: Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract between the mobile client and backend.
How:   FastAPI validates request bodies against these models, serializes
       responses with them, and builds the OpenAPI docs from them.

Schemas are separate from the SQLAlchemy model because responses carry
computed fields (status, remaining_units, days_to_end) that are never stored.
All values are structured; labels, colors and date formatting are left to the client.
"""

import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from medtrack.services.medication_status import MedicationStatus

# Upper bound of the INTEGER columns holding unit counts
MAX_UNITS = 2_147_483_647


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class MedicationCreate(BaseModel):
    """
    What:  Body of POST /api/medications.
    Who:   Sent by the medicine tracker's "Add Medicine" form.

    Field checks here cover shape and sign. The cross-field rule
    (expiry not before purchase) is a business rule enforced by
    MedicationService so it can answer with a 400 and a field name.
    """
    name: str = Field(min_length=1, max_length=200, description="Medicine name")
    purchase_date: date = Field(description="Day the medicine was bought (YYYY-MM-DD)")
    expiry_date: date = Field(description="Last day the medicine is safe to use (YYYY-MM-DD)")
    total_units: int = Field(ge=0, le=MAX_UNITS, description="Tablets/units in the pack at purchase")
    units_per_day: int = Field(
        ge=0,
        le=MAX_UNITS,
        description="Units taken per day. 0 is allowed and means no depletion.",
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Name must not be blank")
        return stripped


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MedicationResponse(BaseModel):
    """
    What:  A stored medication plus its status as of `evaluated_on`.
    Who:   Returned by POST, GET list items and GET detail.

    days_to_end is null when the medicine is not expired and
    units_per_day is 0 (stock never runs out).
    """
    id: uuid.UUID = Field(description="Unique medication identifier (UUID)")
    name: str
    purchase_date: date
    expiry_date: date
    total_units: int
    units_per_day: int
    created_at: datetime = Field(description="When the record was created (UTC ISO 8601)")
    status: MedicationStatus = Field(description="active, out_of_stock or expired")
    remaining_units: int = Field(ge=0, description="Units not yet consumed")
    days_to_end: Optional[int] = Field(
        default=None,
        description="Whole days until stock runs out; null when the rate is 0",
    )
    evaluated_on: date = Field(description="The date used as 'today' for this status")


class StatusSummary(BaseModel):
    """Count of medications per status across the whole collection."""
    active: int = 0
    out_of_stock: int = 0
    expired: int = 0


class MedicationListResponse(BaseModel):
    """
    What:  Response wrapper for GET /api/medications.

    total_count counts items matching the status filter (before paging).
    summary always covers every stored medication, so the client can show
    badges such as "2 expired" while a filter is active.
    """
    medications: List[MedicationResponse] = Field(description="Page of medications")
    total_count: int = Field(description="Number of medications matching the filter")
    summary: StatusSummary = Field(description="Per-status counts over all medications")
    evaluated_on: date = Field(description="The date used as 'today' for every item")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "medication with ID '...' was not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response for monitoring and container probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    timezone: str = Field(description="Timezone used to decide 'today'")
    uptime_seconds: float = Field(description="Seconds since service started")
