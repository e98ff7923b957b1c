# clinic_booking/main.py

import logging
from contextlib import asynccontextmanager
from logging.config import dictConfig

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .data import clinic_settings
from .db import create_db_and_tables
from .routers import appointments_routes, auth_routes, users_routes


def configure_logging(level: str = "INFO") -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": "pythonjsonlogger.json.JsonFormatter",
                    "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "level": level,
                }
            },
            "root": {"handlers": ["console"], "level": level},
        }
    )


configure_logging(settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    yield


app = FastAPI(title=f"{clinic_settings['name']} Booking", lifespan=lifespan)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    # Nothing is fatal: report a generic failure and keep serving
    logger.exception("app.unexpected_error", extra={"path": request.url.path})
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred"})


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(users_routes.router)
app.include_router(auth_routes.router)
app.include_router(appointments_routes.router)
