"""Account Actions

Purpose: Credentials sign-in and new member sign-up

Both actions are rate-limited per caller IP. A rejected caller gets a
RateLimitExceeded exception, which the HTTP layer turns into a redirect to
the "too fast" page; every other outcome is an ActionResult. Specific failure
causes are logged here and collapsed to short messages for the caller.

Sign-up pipeline:
    rate limit -> duplicate email -> university details -> hash password
    -> insert -> onboarding workflow -> sign in
"""

import logging
from typing import Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from account_service.config.settings import Settings
from account_service.core.auth import AuthProvider
from account_service.core.security import hash_password_async
from account_service.domain.models import ActionResult, SignUpRequest, User
from account_service.infrastructure.ratelimit.limiter import RateLimiter
from account_service.infrastructure.workflow.client import (
    WorkflowClient,
    WorkflowTriggerError,
    onboarding_url,
)

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_IP = "127.0.0.1"

CREDENTIALS_SIGNIN_ERROR = "CredentialsSignin"
SIGN_IN_UNEXPECTED_ERROR = "An unexpected error occurred"
SIGN_UP_UNEXPECTED_ERROR = "An unexpected error occurred during signup"
USER_EXISTS_ERROR = "User already exists"
UNIVERSITY_DETAILS_REQUIRED_ERROR = "University details are required"
SIGN_IN_AFTER_REGISTRATION_ERROR = "Sign-in failed after registration"


class RateLimitExceeded(Exception):
    """Caller exceeded the per-IP request budget.

    Attributes:
        identifier: Rate limit key that was rejected
        reset: Epoch seconds when the caller may retry
    """

    def __init__(self, identifier: str, reset: Optional[int] = None):
        super().__init__(f"Rate limit exceeded for {identifier}")
        self.identifier = identifier
        self.reset = reset


def resolve_client_ip(headers: Mapping[str, str]) -> str:
    """Resolve the caller IP from proxy headers

    Uses the first hop of X-Forwarded-For, falling back to 127.0.0.1.
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return DEFAULT_CLIENT_IP


class AccountActions:
    """Sign-in and sign-up with injected collaborators

    Args:
        rate_limiter: Per-IP limiter consulted before any other work
        db: Database session for user lookup and insert
        auth_provider: Credential verification and session issuance
        workflow_client: Onboarding workflow trigger
        settings: Application settings (hash rounds, API endpoint)
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        db: AsyncSession,
        auth_provider: AuthProvider,
        workflow_client: WorkflowClient,
        settings: Settings,
    ):
        self.rate_limiter = rate_limiter
        self.db = db
        self.auth_provider = auth_provider
        self.workflow_client = workflow_client
        self.settings = settings

    async def _check_rate_limit(self, client_ip: str) -> None:
        result = await self.rate_limiter.limit(client_ip)
        if not result.success:
            raise RateLimitExceeded(client_ip, result.reset)

    async def sign_in_with_credentials(
        self, email: str, password: str, client_ip: str = DEFAULT_CLIENT_IP
    ) -> ActionResult:
        """Sign in with email and password

        Raises:
            RateLimitExceeded: If the caller IP is over its budget
        """
        await self._check_rate_limit(client_ip)

        try:
            result = await self.auth_provider.sign_in(
                "credentials", {"email": email, "password": password}
            )

            if not result.ok:
                logger.error(f"SignIn error for {email}: {result.error}")
                return ActionResult.fail(result.error or CREDENTIALS_SIGNIN_ERROR)

            return ActionResult.ok(result.session_token)

        except Exception as e:
            logger.error(f"Signin error: {type(e).__name__}: {e}", exc_info=True)
            return ActionResult.fail(SIGN_IN_UNEXPECTED_ERROR)

    async def sign_up(self, params: SignUpRequest, client_ip: str = DEFAULT_CLIENT_IP) -> ActionResult:
        """Register a new member, trigger onboarding and sign them in

        Raises:
            RateLimitExceeded: If the caller IP is over its budget
        """
        await self._check_rate_limit(client_ip)

        email = params.email
        existing = await self.db.execute(select(User).where(User.email == email).limit(1))
        if existing.scalars().first() is not None:
            logger.info(f"User already exists: {email}")
            return ActionResult.fail(USER_EXISTS_ERROR)

        if not params.university_id or not params.university_card:
            return ActionResult.fail(UNIVERSITY_DETAILS_REQUIRED_ERROR)

        hashed_password = await hash_password_async(
            params.password, self.settings.password_hash_rounds
        )

        try:
            user = User(
                full_name=params.full_name,
                email=email,
                university_id=params.university_id,
                password=hashed_password,
                university_card=params.university_card,
            )
            self.db.add(user)

            try:
                await self.db.commit()
            except IntegrityError:
                # Lost the race against a concurrent sign-up for the same email
                await self.db.rollback()
                logger.info(f"User already exists (unique constraint): {email}")
                return ActionResult.fail(USER_EXISTS_ERROR)

            logger.info(f"Registered user {user.id} ({email})")

            await self._trigger_onboarding(email, params.full_name)

            try:
                sign_in_result = await self.sign_in_with_credentials(email, params.password, client_ip)
            except RateLimitExceeded:
                logger.error(f"Sign in after registration rate limited for {email}")
                return ActionResult.fail(SIGN_IN_AFTER_REGISTRATION_ERROR)

            if not sign_in_result.success:
                logger.error(f"Sign in failed after successful registration for {email}")
                return ActionResult.fail(SIGN_IN_AFTER_REGISTRATION_ERROR)

            return ActionResult.ok(sign_in_result.session_token)

        except Exception as e:
            await self.db.rollback()
            logger.error(f"Signup error: {type(e).__name__}: {e}", exc_info=True)
            return ActionResult.fail(SIGN_UP_UNEXPECTED_ERROR)

    async def _trigger_onboarding(self, email: str, full_name: str) -> None:
        """Start the onboarding workflow; failures do not undo the sign-up"""
        try:
            await self.workflow_client.trigger(
                url=onboarding_url(self.settings.api_endpoint),
                body={"email": email, "fullName": full_name},
            )
        except WorkflowTriggerError as e:
            logger.warning(f"Onboarding workflow not triggered for {email}: {e}")
