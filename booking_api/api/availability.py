from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from booking_api.api.schemas import AvailabilityResponseSchema, ErrorResponseSchema, SlotSchema
from booking_api.application.use_cases.check_availability import CheckAvailabilityUseCase
from booking_api.wiring.dependencies import get_check_availability_use_case

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/availability", response_model=AvailabilityResponseSchema)
def availability(
    date_param: str | None = Query(None, alias="date"),
    duration: str | None = Query(None),
    uc: CheckAvailabilityUseCase = Depends(get_check_availability_use_case),
):
    return _availability(date_param, duration, uc)


@router.get("/api/availability/{day}", response_model=AvailabilityResponseSchema)
def availability_for_day(
    day: str,
    duration: str | None = Query(None),
    uc: CheckAvailabilityUseCase = Depends(get_check_availability_use_case),
):
    return _availability(day, duration, uc)


def _availability(raw_date: str | None, raw_duration: str | None, uc: CheckAvailabilityUseCase):
    try:
        day = date.fromisoformat((raw_date or "").strip())
    except ValueError:
        return _bad_request("Invalid date, expected YYYY-MM-DD")

    if raw_duration in (None, ""):
        duration = uc.default_duration_minutes
    else:
        try:
            duration = int(raw_duration)
        except ValueError:
            return _bad_request("Duration must be an integer number of minutes")
    if duration <= 0:
        return _bad_request("Duration must be a positive number of minutes")

    try:
        result = uc.execute(day, duration)
    except Exception as e:
        logger.exception("Error getting availability", extra={"error": str(e)})
        return JSONResponse(
            status_code=500,
            content=ErrorResponseSchema(error="Failed to get availability").model_dump(),
        )

    logger.info("Availability computed", extra={"slot_count": len(result.slots)})
    return AvailabilityResponseSchema(
        date=day.isoformat(),
        available_slots=[SlotSchema(**slot.to_dict()) for slot in result.slots],
        duration_minutes=duration,
    )


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content=ErrorResponseSchema(error=message).model_dump())
