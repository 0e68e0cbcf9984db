"""
FastAPI Application Entry Point

Menu Delivery API - Hybrid Architecture
Supports both Mock geocoding (development) and real providers (production).

Endpoints:
    - GET /menu/{slug}/calculate-delivery: Delivery fee quote for a CEP
    - GET /health: System health check
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from menu_delivery.core.config import get_settings, setup_logging
from menu_delivery.database import dispose_engine, get_db, init_db
from menu_delivery.schemas import DeliveryEstimateResponse, ErrorResponse, HealthResponse
from menu_delivery.services.delivery import (
    BaseConfigResolver,
    DeliveryError,
    DeliveryFeeService,
    FeeEstimator,
    SqlConfigResolver,
)
from menu_delivery.services.geo import BaseGeocodingService, get_geocoding_service

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    await init_db()
    logger.info("Database initialized")

    geocoder = get_geocoding_service()
    logger.info(f"Geocoding Service: {geocoder.provider_name}")

    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"Unsafe production config: {missing}")

    logger.info("Application ready!")

    yield  # Application runs

    logger.info("Shutting down...")
    await geocoder.aclose()
    await dispose_engine()
    logger.info("Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Delivery fee estimation for restaurant menus. Resolves Brazilian "
        "postal codes (CEP) to coordinates and prices delivery by distance."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_config_resolver(db: AsyncSession = Depends(get_db)) -> BaseConfigResolver:
    """Tenant delivery settings backed by the request's session."""
    return SqlConfigResolver(db)


def get_fee_estimator() -> FeeEstimator:
    return FeeEstimator(default_prep_time_minutes=settings.default_prep_time_minutes)


def get_delivery_service(
    resolver: BaseConfigResolver = Depends(get_config_resolver),
    geocoder: BaseGeocodingService = Depends(get_geocoding_service),
    estimator: FeeEstimator = Depends(get_fee_estimator),
) -> DeliveryFeeService:
    return DeliveryFeeService(resolver=resolver, geocoder=geocoder, estimator=estimator)


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    db: AsyncSession = Depends(get_db),
    geocoder: BaseGeocodingService = Depends(get_geocoding_service),
) -> HealthResponse:
    """Verify the database and the geocoding providers are reachable."""

    db_status = "healthy"
    try:
        await db.execute(select(1))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    geo_status = "healthy" if await geocoder.health_check() else "unhealthy"

    overall = "operational" if all(
        s == "healthy" for s in [db_status, geo_status]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        database=db_status,
        geocoding_service=geo_status,
        timestamp=datetime.now(),
    )


# =============================================================================
# DELIVERY ENDPOINTS
# =============================================================================

@app.get(
    "/menu/{slug}/calculate-delivery",
    response_model=DeliveryEstimateResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    tags=["Delivery"],
    summary="Calculate Delivery Fee",
)
async def calculate_delivery(
    slug: str,
    cep: Optional[str] = Query(None, description="Customer CEP, 8 digits (formatting ignored)"),
    service: DeliveryFeeService = Depends(get_delivery_service),
) -> DeliveryEstimateResponse:
    """
    Quote the delivery fee and ETA for a customer CEP.

    The fee is distance x price per km between the business CEP and the
    customer CEP. Tenants on the lenient policy get their flat fee when
    distance pricing is unavailable.
    """
    estimate = await service.calculate(slug, cep)
    return DeliveryEstimateResponse.from_estimate(estimate)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(DeliveryError)
async def delivery_exception_handler(request: Request, exc: DeliveryError) -> JSONResponse:
    """Render delivery errors as structured JSON."""
    logger.info(f"Delivery error on {request.url.path}: {exc.error_code} - {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message, detail=exc.error_code).model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )
