# app/main.py
from fastapi import FastAPI

from app.api.errors import register_exception_handlers
from app.api.routes import health, sessions
from app.core.config import get_settings
from app.core.logging import setup_logging


def create_app() -> FastAPI:
    """
    Application factory for the Call History service.
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Backend service listing historical LiveKit room sessions for the\n"
            "operator UI, with normalized start/end times, durations, participant\n"
            "counts and recording status derived from egress history."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(sessions.router)

    register_exception_handlers(app)

    return app


app = create_app()
