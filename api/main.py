"""
FastAPI Backend for FUELPOOL.

Provides REST API endpoints for:
- Route registry and baseline comparison
- Compliance balances per ship-year
- Banking of surplus compliance balance (FuelEU Art. 20)
- Pooling of compliance balance across ships (FuelEU Art. 21)

Version: 1.0.0
"""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
import uvicorn

from api.config import settings
from api.health import API_VERSION
from api.middleware import get_request_id, setup_middleware, structured_logger
from api.rate_limit import limiter
from api.routers import banking, compliance, pools, routes
from src.compliance.errors import ComplianceError, NotFoundError

# JSON logs are self-contained
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(message)s',
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """
    Application factory for FUELPOOL API.

    Creates the FastAPI application with middleware, exception handlers
    and routers.

    Returns:
        FastAPI: Configured application instance
    """
    application = FastAPI(
        title="FUELPOOL API",
        description="""
## FuelEU Maritime Compliance API

Compliance balance bookkeeping for ships under FuelEU Maritime.

### Features
- Route registry with baseline comparison against the target intensity
- Compliance balance per ship and reporting year
- Banking and application of surplus (Art. 20)
- Pooling of compliance balance across ships (Art. 21)

### Authentication
When enabled, write endpoints require an API key in the `X-API-Key` header.
        """,
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    setup_middleware(application, debug=settings.debug or settings.is_development)

    # CORS middleware - configured origins only
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    application.state.limiter = limiter

    @application.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={
                "error": "Rate limit exceeded",
                "detail": str(exc.detail),
                "retry_after": getattr(exc, 'retry_after', 60),
            },
            headers={"Retry-After": str(getattr(exc, 'retry_after', 60))},
        )

    @application.exception_handler(ComplianceError)
    async def compliance_error_handler(request: Request, exc: ComplianceError):
        status_code = 404 if isinstance(exc, NotFoundError) else 400
        structured_logger.warning(
            "Request rejected",
            path=request.url.path,
            error=exc.kind,
            detail=exc.message,
            ship_id=exc.ship_id,
        )
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.error(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content={"error": "ValidationError", "detail": _validation_errors(exc)},
        )

    application.include_router(routes.router)
    application.include_router(compliance.router)
    application.include_router(banking.router)
    application.include_router(pools.router)

    return application


def _validation_errors(exc: RequestValidationError):
    """Validation errors without the raw input context (may hold non-JSON values)."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


# Create the application
app = create_app()


# ============================================================================
# API Endpoints - Core
# ============================================================================

@app.get("/", tags=["System"])
async def root():
    """
    API root endpoint.

    Returns basic API information and available endpoint categories.
    """
    return {
        "name": "FUELPOOL API",
        "version": API_VERSION,
        "status": "operational",
        "docs": "/api/docs",
        "endpoints": {
            "health": "/api/health",
            "routes": "/api/routes/...",
            "compliance": "/api/compliance/...",
            "banking": "/api/banking/...",
            "pools": "/api/pools/...",
        }
    }


@app.get("/api/health", tags=["System"])
async def health_check():
    """
    Health check endpoint for load balancers and orchestrators.

    Returns overall status (healthy/degraded/unhealthy), timestamp,
    API version and per-component status for the database and Redis.
    """
    from api.health import perform_full_health_check
    result = await perform_full_health_check()
    result["request_id"] = get_request_id()
    return result


@app.get("/api/health/live", tags=["System"])
async def liveness_check():
    """Liveness check: the process is up."""
    from api.health import perform_liveness_check
    return await perform_liveness_check()


@app.get("/api/health/ready", tags=["System"])
async def readiness_check():
    """
    Readiness check endpoint.

    Returns 503 until the database answers.
    """
    from api.health import perform_readiness_check
    result = await perform_readiness_check()

    if result.get("status") != "ready":
        raise HTTPException(status_code=503, detail="Service not ready")

    return result


# ============================================================================
# Run Server
# ============================================================================

if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
