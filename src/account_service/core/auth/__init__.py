"""Authentication provider abstraction layer.

Supports pluggable providers:
- credentials: Email/password with signed JWT session (default)
"""

from .provider import AuthProvider, AuthenticationError
from .factory import get_auth_provider

__all__ = [
    "AuthProvider",
    "AuthenticationError",
    "get_auth_provider",
]
