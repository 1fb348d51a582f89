from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from booking_api.api.schemas import (
    BookingCreatedResponseSchema,
    BookingListResponseSchema,
    BookingSchema,
    ErrorResponseSchema,
    FieldErrorSchema,
    ValidationErrorResponseSchema,
)
from booking_api.application.exceptions import PersistenceError
from booking_api.application.ports.booking_store import BookingStorePort
from booking_api.application.use_cases.create_booking import (
    CONFIRMATION_MESSAGE,
    BookingState,
    CreateBookingUseCase,
)
from booking_api.wiring.dependencies import get_create_booking_use_case, get_store

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/bookings", response_model=BookingCreatedResponseSchema)
def create_booking(
    request: Request,
    payload: Any = Body(None),
    uc: CreateBookingUseCase = Depends(get_create_booking_use_case),
):
    correlation_id = getattr(request.state, "request_id", None)
    outcome = uc.execute(payload, correlation_id=correlation_id)

    if outcome.state is BookingState.rejected:
        body = ValidationErrorResponseSchema(errors=[FieldErrorSchema(**e) for e in outcome.errors])
        return JSONResponse(status_code=400, content=body.model_dump())
    if outcome.state is BookingState.slot_taken:
        body = ErrorResponseSchema(error="The requested time slot is no longer available")
        return JSONResponse(status_code=409, content=body.model_dump())
    if not outcome.success or outcome.booking is None:
        body = ErrorResponseSchema(error="Failed to create booking")
        return JSONResponse(status_code=500, content=body.model_dump())

    return BookingCreatedResponseSchema(
        booking_id=outcome.booking.booking_id,
        calendar_event_id=outcome.calendar_event_id,
        message=CONFIRMATION_MESSAGE,
    )


@router.get("/api/bookings", response_model=BookingListResponseSchema)
def list_bookings(store: BookingStorePort = Depends(get_store)):
    try:
        bookings = store.list_bookings()
    except PersistenceError as e:
        logger.error("Error getting bookings", extra={"error": str(e)})
        return JSONResponse(
            status_code=500,
            content=ErrorResponseSchema(error="Failed to get bookings").model_dump(),
        )
    return BookingListResponseSchema(bookings=[BookingSchema.from_booking(b) for b in bookings])
