"""
DBEN Authentication Package.

This package provides authentication and authorization functionality:
- PlatformAuth: sign-in, sign-up, sign-out and token refresh
- Middleware: authentication beforeware and helpers
"""

from .platform import (
    PlatformAuth,
    AuthenticationError,
    TOKEN_REFRESH_BUFFER_SECONDS,
    needs_refresh,
    session_to_auth,
)

from .middleware import (
    auth_beforeware,
    get_current_user_id,
    is_public_path,
)

__all__ = [
    'PlatformAuth',
    'AuthenticationError',
    'TOKEN_REFRESH_BUFFER_SECONDS',
    'needs_refresh',
    'session_to_auth',
    'auth_beforeware',
    'get_current_user_id',
    'is_public_path',
]
