"""Authentication provider factory.

Selects and instantiates the auth provider based on configuration.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .provider import AuthProvider
from account_service.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def get_auth_provider(session: AsyncSession, settings: Optional[Settings] = None) -> AuthProvider:
    """Build the configured authentication provider for one request.

    Provider is selected via the AUTH_PROVIDER setting:
    - credentials: email/password with JWT session (default)

    Args:
        session: Database session the provider reads users from
        settings: Settings override (defaults to cached settings)

    Returns:
        Configured AuthProvider instance

    Raises:
        ValueError: If AUTH_PROVIDER is invalid
    """
    settings = settings or get_settings()
    mode = settings.auth_provider.lower()

    if mode == "credentials":
        from .credentials import CredentialsAuthProvider
        return CredentialsAuthProvider(
            session=session,
            secret_key=settings.session_secret_key,
            algorithm=settings.session_algorithm,
            session_max_age_seconds=settings.session_max_age_seconds,
        )

    raise ValueError(
        f"Unknown AUTH_PROVIDER: {mode}. "
        f"Valid options: credentials"
    )
