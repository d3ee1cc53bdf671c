import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Depends, Security, status
from fastapi.security import APIKeyHeader
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import db
from repositories.entity_store import EntityStore, StoreError
from routes.dashboard_routes import router as dashboard_router
from routes.vehicle_routes import router as vehicle_router
from routes.driver_routes import router as driver_router
from routes.trip_routes import router as trip_router
from routes.expense_routes import router as expense_router
from routes.maintenance_routes import router as maintenance_router

# Configure logging based on settings
Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(settings.log_file),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

# API Key Authentication
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: Optional[str] = Security(api_key_header)):
    """Verify API key for authentication.

    Args:
        api_key: The API key from the X-API-Key header

    Returns:
        True if authentication successful

    Raises:
        HTTPException: If API key is invalid or missing
    """
    if not settings.api_key:  # If no API key is set, allow all requests (dev mode)
        return True
    if not api_key or api_key != settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key"
        )
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown events."""
    # Startup
    logger.info("Starting FleetOps API...")
    if not db.verify_connectivity():
        logger.warning("Cannot connect to Neo4j entity store")
    else:
        logger.info("Successfully connected to Neo4j entity store")
        try:
            EntityStore().ensure_constraints()
        except StoreError as e:
            logger.warning(f"Could not create entity store constraints: {e}")

    yield

    # Shutdown
    logger.info("Shutting down FleetOps API...")
    db.close()


tags_metadata = [
    {
        "name": "health",
        "description": "Health check endpoints for monitoring API status",
    },
    {
        "name": "dashboard",
        "description": "Fleet-wide KPIs and analytics computed from every collection",
    },
    {
        "name": "vehicles",
        "description": "Browse and register vehicles, with trip, maintenance and expense history",
    },
    {
        "name": "drivers",
        "description": "Browse and register drivers, with trip history and active trip",
    },
    {
        "name": "trips",
        "description": "Browse trips and their assigned vehicle and driver",
    },
    {
        "name": "expenses",
        "description": "Browse expenses with fuel and maintenance totals",
    },
    {
        "name": "maintenance",
        "description": "Browse maintenance logs with cost and pending-service totals",
    },
]

app = FastAPI(
    title=settings.app_name,
    description="""
    ## Overview
    FleetOps records vehicles, drivers, trips, expenses and maintenance logs
    and derives the operational picture of the fleet from them.

    ## Features
    - **Relationship resolution**: trips are joined to vehicles and drivers by
      identifier, expenses and maintenance logs to vehicles by license plate
    - **KPIs**: utilization, cost per km, fuel efficiency, status distributions
    - **Search and filters**: the same semantics on every list view

    ## Authentication
    Use the `X-API-Key` header for authentication.
    """,
    version=settings.app_version,
    lifespan=lifespan,
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint (no auth required)
@app.get("/health",
         tags=["health"],
         summary="Health Check",
         description="Check the health status of the API and entity store connectivity",
         response_description="Health status information")
async def health_check():
    """Check API and entity store health status.

    Returns:
        dict: Health status with API status, database status, and version
    """
    db_status = "healthy" if db.verify_connectivity() else "unhealthy"
    return {
        "status": "healthy",
        "database": db_status,
        "version": settings.app_version
    }


@app.get("/",
         summary="API Information",
         description="Get basic information about the FleetOps API",
         response_description="API metadata")
async def root():
    """Get basic API information.

    Returns:
        dict: API name, version, and documentation URL
    """
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "documentation": "/docs"
    }


for router in (
    dashboard_router,
    vehicle_router,
    driver_router,
    trip_router,
    expense_router,
    maintenance_router,
):
    app.include_router(router, dependencies=[Depends(verify_api_key)])


# Error handlers
@app.exception_handler(404)
async def not_found_handler(request, exc):
    """Handle 404 Not Found errors.

    Args:
        request: The incoming request
        exc: The exception that was raised
    """
    # If it's an HTTPException with a detail, preserve it
    if hasattr(exc, 'detail'):
        return JSONResponse(
            status_code=404,
            content={"detail": exc.detail}
        )
    return JSONResponse(
        status_code=404,
        content={"error": "Resource not found", "path": str(request.url)}
    )


@app.exception_handler(500)
async def internal_error_handler(request, exc):
    """Handle 500 Internal Server errors.

    Args:
        request: The incoming request
        exc: The exception that was raised
    """
    logger.error(f"Internal server error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )
