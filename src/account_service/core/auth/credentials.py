"""Credentials authentication provider (email/password with JWT session).

Looks users up in the accounts table, checks the bcrypt hash and issues a
signed session token that the HTTP layer stores in a cookie.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import jwt, JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .provider import AuthProvider, AuthenticationError
from account_service.core.security import verify_password_async
from account_service.domain.models import SignInResult, User

logger = logging.getLogger(__name__)

CREDENTIALS_SIGNIN_ERROR = "CredentialsSignin"


class CredentialsAuthProvider(AuthProvider):
    """Email/password authentication with JWT session tokens.

    Configuration:
        AUTH_PROVIDER=credentials (default)
        SESSION_SECRET_KEY=<your-secret-key>
        SESSION_ALGORITHM=HS256 (default)
        SESSION_MAX_AGE_SECONDS=2592000 (default, 30 days)
    """

    method = "credentials"

    def __init__(
        self,
        session: AsyncSession,
        secret_key: str,
        algorithm: str = "HS256",
        session_max_age_seconds: int = 30 * 24 * 60 * 60,
    ):
        """Initialize credentials provider.

        Args:
            session: Database session used for user lookup
            secret_key: Secret key for JWT signing
            algorithm: JWT signing algorithm
            session_max_age_seconds: Session token TTL in seconds
        """
        self.session = session
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.session_max_age = timedelta(seconds=session_max_age_seconds)

        if secret_key == "dev-secret-change-in-production":
            logger.warning(
                "Using default SESSION_SECRET_KEY! "
                "Set SESSION_SECRET_KEY environment variable in production!"
            )

    async def sign_in(self, method: str, credentials: Dict[str, Any]) -> SignInResult:
        """Authenticate user with email and password.

        Args:
            method: Must be "credentials"
            credentials: Dict with "email" and "password"

        Returns:
            SignInResult with session token, or error "CredentialsSignin"

        Raises:
            ValueError: If method is not "credentials"
        """
        if method != self.method:
            raise ValueError(f"Unsupported sign-in method: {method}")

        email = credentials.get("email")
        password = credentials.get("password")
        if not email or not password:
            return SignInResult(error=CREDENTIALS_SIGNIN_ERROR)

        result = await self.session.execute(select(User).where(User.email == email).limit(1))
        user = result.scalar_one_or_none()

        if not user:
            logger.warning(f"Sign-in failed: User not found (email: {email})")
            return SignInResult(error=CREDENTIALS_SIGNIN_ERROR)

        if not await verify_password_async(password, user.password):
            logger.warning(f"Sign-in failed: Invalid password (email: {email})")
            return SignInResult(error=CREDENTIALS_SIGNIN_ERROR)

        token = self.create_session_token(str(user.id), user.email, user.full_name)
        logger.info(f"User authenticated successfully: {user.email} ({user.id})")

        return SignInResult(session_token=token, user_id=str(user.id))

    def create_session_token(self, user_id: str, email: str, name: str) -> str:
        """Create a signed JWT session token.

        Args:
            user_id: User ID
            email: User email
            name: User full name

        Returns:
            Encoded JWT session token
        """
        now = datetime.now(timezone.utc)

        payload = {
            "sub": user_id,
            "email": email,
            "name": name,
            "iat": now,
            "exp": now + self.session_max_age,
            "jti": str(uuid.uuid4()),
        }

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_session_token(self, token: str) -> Dict[str, Any]:
        """Validate a session token and return its claims.

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"Session token validation failed: {e}")
            raise AuthenticationError(f"Invalid session token: {e}")

        if not payload.get("sub") or not payload.get("email"):
            raise AuthenticationError("Invalid session token payload")

        return payload
