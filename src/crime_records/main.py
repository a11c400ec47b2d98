"""
Crime Records Service - Main Application

FastAPI application for incident and evidence record management.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crime_records.config.settings import settings
from crime_records.api.errors import register_exception_handlers
from crime_records.api.middleware import AccessGateMiddleware
from crime_records.api.routes.auth import router as auth_router
from crime_records.api.routes.evidence import router as evidence_router
from crime_records.api.routes.incidents import router as incidents_router
from crime_records.api.routes.users import router as users_router
from crime_records.infrastructure.database.client import db_client
from crime_records.models import HealthResponse

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info(f"Starting {settings.service_name} ({settings.environment})")

    if not settings.signing_configured:
        if settings.environment == "production":
            raise RuntimeError("JWT_SECRET must be set in production")
        logger.error("JWT_SECRET is not set: logins and protected routes will fail with 500")

    await db_client.initialize()

    yield

    # Shutdown
    logger.info("Shutting down Crime Records Service")
    await db_client.close()


# Create FastAPI app
app = FastAPI(
    title="Crime Records Service",
    description="Incident and evidence record management with bearer-token access control",
    version="0.1.0",
    lifespan=lifespan
)

register_exception_handlers(app)

# Bearer token gate; added before CORS so CORS stays outermost and 401s carry CORS headers
app.add_middleware(AccessGateMiddleware, protected_paths=settings.protected_paths)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(incidents_router)
app.include_router(evidence_router)


@app.get(
    "/",
    summary="Service Information",
    description="Returns service identification, version and environment.",
    responses={
        200: {"description": "Service information returned successfully"}
    }
)
async def root():
    """Root endpoint"""
    return {
        "service": settings.service_name,
        "version": "0.1.0",
        "status": "running",
        "environment": settings.environment
    }


@app.get(
    "/health",
    summary="Health Check",
    description="""
Lightweight liveness check.

**Storage**: No database query
**Authorization**: None required (public endpoint)

**Note**: For database and signing-secret status use `/api/health`.
    """,
    responses={
        200: {"description": "Service is healthy and operational"}
    }
)
async def health():
    """Simple health check"""
    return {"status": "healthy", "service": settings.service_name}


@app.get(
    "/api/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Detailed Health Check",
    description="""
Health check including database connectivity and token-signing configuration.

**Health Status Values**:
- healthy: Database reachable and JWT_SECRET configured
- degraded: Either check failed

**Authorization**: None required (public endpoint for monitoring)
    """,
    responses={
        200: {"description": "Health check completed (status may be healthy or degraded)"}
    }
)
async def detailed_health() -> HealthResponse:
    """Detailed health check"""
    db_ok = await db_client.health_check()
    signing_ok = settings.signing_configured

    return HealthResponse(
        status="healthy" if (db_ok and signing_ok) else "degraded",
        service=settings.service_name,
        database_available=db_ok,
        signing_configured=signing_ok,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "crime_records.main:app",
        host=settings.host,
        port=settings.port,
        reload=True if settings.environment == "development" else False
    )
