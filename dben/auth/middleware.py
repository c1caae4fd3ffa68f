"""Authentication beforeware and helpers for DBEN."""
import logging
from typing import Optional

from fasthtml.common import RedirectResponse

from .platform import needs_refresh

logger = logging.getLogger(__name__)

# Pages anyone may see; everything else requires a signed-in user
PUBLIC_PATHS = ('/',)
PUBLIC_PREFIXES = ('/static/', '/auth/', '/favicon.ico')


def is_public_path(path: str) -> bool:
    return path in PUBLIC_PATHS or any(path.startswith(prefix) for prefix in PUBLIC_PREFIXES)


def auth_beforeware(req, sess, platform_auth=None):
    """Beforeware to handle authentication state.

    Puts the session's auth dict on ``req.scope['auth']`` (FastHTML injects it
    into handlers as ``auth``), redirects anonymous visitors away from
    protected pages, and refreshes access tokens that are about to expire.
    """
    auth_data = sess.get('auth')

    if is_public_path(req.url.path):
        req.scope['auth'] = auth_data
        return None

    if not auth_data:
        # Come back here after signing in; HTMX partials are not pages to return to
        if not req.headers.get('HX-Request'):
            sess['next_url'] = str(req.url.path)
        return RedirectResponse('/auth/login', status_code=303)

    if platform_auth and needs_refresh(auth_data):
        logger.info(f"Access token expiring soon for user {auth_data.get('user_id')}, refreshing...")
        refreshed = platform_auth.refresh(auth_data)
        if not refreshed:
            logger.warning(f"Session refresh failed for user {auth_data.get('user_id')}, requiring re-auth")
            sess.clear()
            sess['error'] = "Your session has expired. Please sign in again."
            return RedirectResponse('/auth/login', status_code=303)
        sess['auth'] = refreshed
        auth_data = refreshed

    req.scope['auth'] = auth_data
    return None


def get_current_user_id(auth) -> Optional[str]:
    """Extract the user id from auth data."""
    return auth.get('user_id') if auth else None
