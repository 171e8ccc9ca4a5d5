"""Account Service

Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from account_service.config.settings import get_settings
from account_service.api.routes import auth
from account_service.domain.services.account_actions import RateLimitExceeded
from account_service.infrastructure.database.session import close_db, init_db
from account_service.infrastructure.redis.client import get_redis_client, close_redis_client

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    settings = get_settings()

    # Startup
    logger.info(f"Starting {settings.service_name} v{settings.service_version}")
    logger.info(f"Environment: {settings.environment}")

    if settings.rate_limit_enabled:
        try:
            await get_redis_client()
            logger.info("Redis connection established")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise

    if settings.auto_create_tables:
        await init_db()
        logger.info("Database tables ensured")

    yield

    # Shutdown
    logger.info("Shutting down Account Service")
    await close_redis_client()
    await close_db()
    logger.info("Connections closed")


# Create FastAPI application
settings = get_settings()
logging.getLogger().setLevel(settings.log_level.upper())

app = FastAPI(
    title="Account Service",
    version=settings.service_version,
    description="Sign-in and registration for library members",
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


# Health check endpoint
@app.get("/health")
async def root_health_check():
    """Root health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.service_name,
        "version": settings.service_version,
        "environment": settings.environment
    }


@app.get("/")
async def root():
    """Root endpoint with service information"""
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "description": "Library Account Service",
        "docs": "/docs",
        "health": "/health"
    }


@app.get(settings.too_fast_path)
async def too_fast():
    """Landing page for rate-limited callers"""
    return JSONResponse(
        status_code=429,
        content={
            "error": "too_many_requests",
            "message": "Too many requests. Please slow down and try again in a minute."
        }
    )


app.include_router(auth.router, tags=["authentication"])


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    """Send rate-limited callers to the too-fast page"""
    logger.info(f"Redirecting rate-limited caller {exc.identifier} to {settings.too_fast_path}")
    return RedirectResponse(url=settings.too_fast_path, status_code=303)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later."
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "account_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
