"""Account Routes

Purpose: FastAPI routes for the account actions

Key Endpoints:
- POST /api/v1/auth/sign-in: Credentials sign-in
- POST /api/v1/auth/sign-up: New member registration
- GET /api/v1/auth/health: Account system health

Rate-limited callers are redirected to the "too fast" page by the
RateLimitExceeded handler registered in main.py.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from account_service.config.settings import Settings, get_settings
from account_service.core.auth import get_auth_provider
from account_service.domain.models import ActionResult, SignInRequest, SignUpRequest
from account_service.domain.services.account_actions import AccountActions, resolve_client_ip
from account_service.infrastructure.database.session import check_db, get_db
from account_service.infrastructure.ratelimit.limiter import RateLimiter, get_rate_limit_storage
from account_service.infrastructure.redis.client import get_redis_client
from account_service.infrastructure.workflow.client import WorkflowClient

# Initialize router and logger
router = APIRouter(prefix="/api/v1/auth", tags=["authentication"])
logger = logging.getLogger(__name__)


# Dependency injection functions
async def get_rate_limiter(settings: Settings = Depends(get_settings)) -> RateLimiter:
    """Get per-IP rate limiter instance"""
    storage = get_rate_limit_storage() if settings.rate_limit_enabled else None
    return RateLimiter(
        storage,
        max_requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_period,
        prefix=settings.rate_limit_prefix,
        enabled=settings.rate_limit_enabled,
    )


def get_workflow_client(settings: Settings = Depends(get_settings)) -> WorkflowClient:
    """Get workflow trigger client"""
    return WorkflowClient(token=settings.workflow_token, timeout=settings.workflow_timeout_seconds)


async def get_account_actions(
    db: AsyncSession = Depends(get_db),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    workflow_client: WorkflowClient = Depends(get_workflow_client),
    settings: Settings = Depends(get_settings),
) -> AccountActions:
    """Get account actions wired to this request's collaborators"""
    return AccountActions(
        rate_limiter=rate_limiter,
        db=db,
        auth_provider=get_auth_provider(db, settings),
        workflow_client=workflow_client,
        settings=settings,
    )


def _set_session_cookie(response: Response, result: ActionResult, settings: Settings) -> None:
    if not result.success or not result.session_token:
        return
    response.set_cookie(
        key=settings.session_cookie_name,
        value=result.session_token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


@router.post("/sign-in", response_model=ActionResult, response_model_exclude_none=True)
async def sign_in(
    payload: SignInRequest,
    request: Request,
    response: Response,
    actions: AccountActions = Depends(get_account_actions),
    settings: Settings = Depends(get_settings),
) -> ActionResult:
    """Sign in with email and password

    Sets the session cookie on success.
    """
    client_ip = resolve_client_ip(request.headers)
    result = await actions.sign_in_with_credentials(payload.email, payload.password, client_ip)
    _set_session_cookie(response, result, settings)
    return result


@router.post("/sign-up", response_model=ActionResult, response_model_exclude_none=True)
async def sign_up(
    payload: SignUpRequest,
    request: Request,
    response: Response,
    actions: AccountActions = Depends(get_account_actions),
    settings: Settings = Depends(get_settings),
) -> ActionResult:
    """Register a new library member and sign them in

    Sets the session cookie on success.
    """
    client_ip = resolve_client_ip(request.headers)
    result = await actions.sign_up(payload, client_ip)
    _set_session_cookie(response, result, settings)
    return result


@router.get("/health")
async def auth_health_check():
    """Account system health check

    Returns the status of Redis and the database.
    """
    try:
        redis_client = await get_redis_client()
        redis_healthy = await redis_client.health_check()
    except Exception as e:
        logger.error(f"Redis health check failed: {e}")
        redis_healthy = False

    try:
        db_healthy = await check_db()
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_healthy = False

    healthy = redis_healthy and db_healthy
    return {
        "status": "healthy" if healthy else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "redis": "healthy" if redis_healthy else "unhealthy",
            "database": "healthy" if db_healthy else "unhealthy",
        },
    }
