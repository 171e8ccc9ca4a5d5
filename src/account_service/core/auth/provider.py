"""Abstract authentication provider interface.

This module defines the contract the account actions rely on for credential
verification and session issuance.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from account_service.domain.models import SignInResult


class AuthProvider(ABC):
    """Abstract interface for authentication providers.

    Implementation is chosen via the AUTH_PROVIDER environment variable.

    Example:
        AUTH_PROVIDER=credentials  # email/password, signed JWT session
    """

    @abstractmethod
    async def sign_in(self, method: str, credentials: Dict[str, Any]) -> SignInResult:
        """Verify credentials and issue a session.

        Providers never redirect and never raise for bad credentials; the
        outcome is reported through SignInResult.error.

        Args:
            method: Sign-in method name (e.g. "credentials")
            credentials: Method-specific payload (email/password)

        Returns:
            SignInResult with a session token or an error code

        Raises:
            ValueError: If the method is not supported by this provider
        """
        pass


class AuthenticationError(Exception):
    """Authentication failed."""
    pass
