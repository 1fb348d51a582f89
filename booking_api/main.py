from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI

from booking_api.api import middleware
from booking_api.api.availability import router as availability_router
from booking_api.api.bookings import router as bookings_router
from booking_api.core.config import settings
from booking_api.core.logging_context import configure_logging
from booking_api.wiring.dependencies import Container, build_container


def create_app(container: Container | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "container", None) is None:
            app.state.container = build_container(settings)
        app.state.container.start()
        logging.getLogger(__name__).info("Booking API started")
        try:
            yield
        finally:
            app.state.container.close()

    app = FastAPI(title="Booking API", version="1.0.0", lifespan=lifespan)
    app.state.container = container

    middleware.install(app)
    app.include_router(availability_router, tags=["availability"])
    app.include_router(bookings_router, tags=["bookings"])

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


configure_logging(settings.LOG_LEVEL)
app = create_app()
