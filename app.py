"""
DoseKeeper Backend
FastAPI application exposing the medication adherence core
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config import settings
from database import init_db, DatabaseHealthCheck
from errors import (
    DoseKeeperError,
    InvalidTimeFormat,
    InputValidationError,
    MedicationNotFoundError,
    PersistenceError,
    get_user_message,
)
from api import include_routers
from actions.missed_dose_monitor import missed_dose_monitor

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


# ==================== LIFESPAN ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown"""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENV}")

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    if settings.MONITOR_ENABLED:
        missed_dose_monitor.start()

    yield

    await missed_dose_monitor.stop()
    logger.info(f"Shutting down {settings.APP_NAME}")


# ==================== APP INITIALIZATION ====================

app = FastAPI(
    title=settings.APP_NAME,
    description="""
    ## DoseKeeper API

    Medication adherence tracking for patients and caretakers.

    ### Features
    - **Today view**: pending / taken / missed status against daily deadlines
    - **Dose logging**: at most one taken-record per medication per day, with optional proof photo
    - **History & statistics**: daily logs rolled up into weekly and period adherence
    - **Caretaker alerts**: simulated email when a dose is missed
    """,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Attach modular API routers
include_routers(app, prefix=settings.API_PREFIX)

# Proof photos stored by LocalBlobStore
app.mount(
    "/storage",
    StaticFiles(directory=settings.BLOB_STORAGE_DIR, check_dir=False),
    name="storage"
)


# ==================== EXCEPTION HANDLERS ====================

def _error_response(status_code: int, message: str, code: str = "error") -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": True,
            "message": message,
            "code": code,
            "status_code": status_code,
            "timestamp": datetime.utcnow().isoformat()
        }
    )


DOMAIN_ERROR_STATUS = {
    InvalidTimeFormat: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InputValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    MedicationNotFoundError: status.HTTP_404_NOT_FOUND,
    PersistenceError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@app.exception_handler(DoseKeeperError)
async def domain_exception_handler(request: Request, exc: DoseKeeperError):
    status_code = next(
        (code for err_type, code in DOMAIN_ERROR_STATUS.items() if isinstance(exc, err_type)),
        status.HTTP_400_BAD_REQUEST
    )
    if status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.url.path}: {exc.message}")
    return _error_response(status_code, exc.user_message, exc.code)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return _error_response(exc.status_code, exc.detail, "http_error")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(exc) if settings.DEBUG else get_user_message(exc),
        "internal_error"
    )


# ==================== HEALTH ====================

@app.get("/health", tags=["system"])
async def health_check():
    """Service and database health"""
    db_ok = DatabaseHealthCheck.is_connected()
    return {
        "status": "healthy" if db_ok else "degraded",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "database": "connected" if db_ok else "unavailable",
        "monitor_running": missed_dose_monitor.running,
        "timestamp": datetime.utcnow().isoformat()
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
