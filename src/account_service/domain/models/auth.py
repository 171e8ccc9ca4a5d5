"""Authentication Data Models

Purpose: Internal result types exchanged between the account actions and
their collaborators (rate limiter, auth provider).

Key Components:
- RateLimitResult: Verdict for one rate limiter hit
- SignInResult: Outcome of an auth provider sign-in attempt
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RateLimitResult:
    """Result of a rate limiter check

    Attributes:
        success: True if the request is within the allowed budget
        limit: Maximum requests per window
        remaining: Requests left in the current window
        reset: Epoch seconds at which the current window ends
    """
    success: bool
    limit: int
    remaining: int
    reset: int


@dataclass
class SignInResult:
    """Result of an auth provider sign-in

    Providers report bad credentials through ``error`` instead of raising.

    Attributes:
        error: Provider error code (e.g. "CredentialsSignin"), None on success
        session_token: Signed session token on success
        user_id: Authenticated user identifier on success
    """
    error: Optional[str] = None
    session_token: Optional[str] = None
    user_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        """Check if sign-in succeeded"""
        return self.error is None and self.session_token is not None
