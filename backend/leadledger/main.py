import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from leadledger.api.api import api_router
from leadledger.core.config import get_settings
from leadledger.core.database import Base, engine
from leadledger.core.errors import BulkCommitInterrupted, StoreUnavailable, ValidationError
from leadledger.core.logging import configure_logging
from leadledger.core.middleware import RequestIDMiddleware
from leadledger.models import broker, entry  # noqa: F401

settings = get_settings()
configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    docs_url="/docs" if settings.ENABLE_API_DOCS else None,
    redoc_url="/redoc" if settings.ENABLE_API_DOCS else None,
    openapi_url="/openapi.json" if settings.ENABLE_API_DOCS else None,
)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "x-request-id"],
)


@app.on_event("startup")
def on_startup() -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Starting %s (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.errors})


@app.exception_handler(BulkCommitInterrupted)
async def bulk_interrupted_handler(request: Request, exc: BulkCommitInterrupted):
    return JSONResponse(
        status_code=503,
        content={
            "detail": str(exc),
            "applied_dates": [d.isoformat() for d in exc.applied_dates],
            "failed_date": exc.failed_date.isoformat(),
        },
    )


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


app.include_router(api_router, prefix=settings.API_V1_STR)
