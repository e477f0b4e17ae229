"""
MedTrack Backend: Medication Route Handlers
=============================================

What:  POST/GET/DELETE handlers for /api/medications.
How:   Extracts path/query/body parameters, delegates to MedicationService, returns JSON.
Who:   Called by the mobile medicine tracker screen.

Caching:
    Status depends on the current date, so every read is sent with
    Cache-Control: no-store. A cached "active" badge could otherwise outlive
    the medicine's expiry.
"""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from medtrack.config import settings
from medtrack.database import get_db_session
from medtrack.schemas.medication import (
    ErrorResponse,
    MedicationCreate,
    MedicationListResponse,
    MedicationResponse,
)
from medtrack.services.medication_service import medication_service
from medtrack.services.medication_status import MedicationStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Medications"])

_AS_OF_DESCRIPTION = (
    "Evaluate status as of this date (YYYY-MM-DD) instead of today. "
    "Useful for planning refills ahead of a trip."
)


@router.post(
    "/medications",
    status_code=201,
    response_model=MedicationResponse,
    responses={
        201: {"description": "Medication stored", "model": MedicationResponse},
        400: {"description": "Expiry date before purchase date", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Add a medication",
)
async def create_medication(
    payload: MedicationCreate,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> MedicationResponse:
    """Store a new medication and return it with its status as of today."""
    result = await medication_service.create_medication(db=db, payload=payload)
    response.headers["Location"] = f"/api/medications/{result.id}"
    response.headers["Cache-Control"] = "no-store"
    return result


@router.get(
    "/medications",
    response_model=MedicationListResponse,
    responses={
        200: {"description": "Medications with computed status", "model": MedicationListResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List medications with their current status",
    description=(
        "Returns medications in the order they were added, each with its status, "
        "remaining units and days until depletion. Optionally filtered by status."
    ),
)
async def list_medications(
    response: Response,
    status: MedicationStatus | None = Query(
        default=None,
        description="Only return medications in this status",
    ),
    as_of: date | None = Query(default=None, description=_AS_OF_DESCRIPTION),
    limit: int = Query(default=100, ge=1, le=settings.max_list_limit),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> MedicationListResponse:
    result = await medication_service.list_medications(
        db=db,
        status=status,
        as_of=as_of,
        limit=limit,
        offset=offset,
    )
    response.headers["X-Total-Count"] = str(result.total_count)
    response.headers["Cache-Control"] = "no-store"
    return result


@router.get(
    "/medications/{medication_id}",
    response_model=MedicationResponse,
    responses={
        200: {"description": "Medication with computed status", "model": MedicationResponse},
        404: {"description": "Medication not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single medication",
)
async def get_medication(
    medication_id: UUID,
    response: Response,
    as_of: date | None = Query(default=None, description=_AS_OF_DESCRIPTION),
    db: AsyncSession = Depends(get_db_session),
) -> MedicationResponse:
    """
    Get one medication with its status.

    Args:
        medication_id: UUID path parameter. Malformed UUIDs get FastAPI's 422.
    """
    result = await medication_service.get_medication(
        db=db, medication_id=medication_id, as_of=as_of
    )
    response.headers["Cache-Control"] = "no-store"
    return result


@router.delete(
    "/medications/{medication_id}",
    status_code=204,
    responses={
        404: {"description": "Medication not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a medication",
)
async def delete_medication(
    medication_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await medication_service.delete_medication(db=db, medication_id=medication_id)
    return Response(status_code=204)
