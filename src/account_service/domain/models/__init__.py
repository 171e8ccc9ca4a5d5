"""Domain models for Account Service"""

from account_service.domain.models.api_auth import (
    ActionResult,
    SignInRequest,
    SignUpRequest,
)
from account_service.domain.models.auth import (
    RateLimitResult,
    SignInResult,
)
from account_service.domain.models.user import (
    Base,
    User,
    UserRole,
    UserStatus,
)

__all__ = [
    # Auth models
    "RateLimitResult",
    "SignInResult",
    # API models
    "SignInRequest",
    "SignUpRequest",
    "ActionResult",
    # ORM models
    "Base",
    "User",
    "UserRole",
    "UserStatus",
]
