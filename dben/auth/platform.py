"""Sign-in, sign-up and session refresh against the hosted auth service."""
import os
import time
import logging
from typing import Optional, Dict, Any

import httpx
from dotenv import load_dotenv
from fasthtml.common import *
from fasthtml.pico import Container
from supabase import AuthError

load_dotenv()

logger = logging.getLogger(__name__)

# Refresh access tokens this many seconds before they expire
TOKEN_REFRESH_BUFFER_SECONDS = int(os.getenv('TOKEN_REFRESH_BUFFER_SECONDS', '300'))


class AuthenticationError(Exception):
    """Raised when the auth service rejects a sign-in or sign-up."""


def session_to_auth(session, user) -> Dict[str, Any]:
    """Build the auth dict kept in the session cookie from an auth response."""
    metadata = getattr(user, 'user_metadata', None) or {}
    email = getattr(user, 'email', '') or ''
    return {
        'user_id': user.id,
        'email': email,
        'username': metadata.get('username') or email.split('@')[0],
        'display_name': metadata.get('full_name') or metadata.get('username') or email.split('@')[0],
        'access_token': session.access_token,
        'refresh_token': session.refresh_token,
        'expires_at': session.expires_at,
    }


def needs_refresh(auth: Optional[Dict[str, Any]], now: Optional[float] = None) -> bool:
    """True when the stored access token expires within the refresh buffer."""
    if not auth or not auth.get('expires_at'):
        return False
    now = time.time() if now is None else now
    return auth['expires_at'] - now <= TOKEN_REFRESH_BUFFER_SECONDS


class PlatformAuth:
    """Handle platform authentication and session management."""

    def __init__(self, database):
        self.database = database

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """Sign in with e-mail and password and return the session auth dict.

        Raises:
            AuthenticationError: If the credentials are rejected or the service is unreachable.
        """
        try:
            with self.database.connect() as client:
                response = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            logger.warning(f"Sign-in rejected for {email}: {e.message}")
            raise AuthenticationError(e.message) from e
        except httpx.HTTPError as e:
            logger.error(f"Auth service unreachable during sign-in: {e}", exc_info=True)
            raise AuthenticationError("The sign-in service is unavailable. Please try again.") from e

        if not response.session or not response.user:
            raise AuthenticationError("Sign in failed. Please check your credentials.")
        return session_to_auth(response.session, response.user)

    def sign_up(self, email: str, password: str, username: str,
                full_name: str = "") -> Optional[Dict[str, Any]]:
        """Register a new account.

        The username and full name travel as user metadata; the platform creates
        the profile row from them. Returns the auth dict, or None when the
        platform requires e-mail confirmation before the first sign-in.

        Raises:
            AuthenticationError: If the service rejects the registration.
        """
        metadata = {"username": username.strip()}
        if full_name and full_name.strip():
            metadata["full_name"] = full_name.strip()
        try:
            with self.database.connect() as client:
                response = client.auth.sign_up({
                    "email": email,
                    "password": password,
                    "options": {"data": metadata},
                })
        except AuthError as e:
            logger.warning(f"Sign-up rejected for {email}: {e.message}")
            raise AuthenticationError(e.message) from e
        except httpx.HTTPError as e:
            logger.error(f"Auth service unreachable during sign-up: {e}", exc_info=True)
            raise AuthenticationError("The sign-up service is unavailable. Please try again.") from e

        if not response.user:
            raise AuthenticationError("Sign up failed. Please try again.")
        if not response.session:
            logger.info(f"Sign-up for {email} awaiting e-mail confirmation")
            return None
        return session_to_auth(response.session, response.user)

    def refresh(self, auth: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Exchange the refresh token for a new session. Returns None on failure."""
        try:
            with self.database.connect() as client:
                response = client.auth.refresh_session(auth.get('refresh_token'))
        except (AuthError, httpx.HTTPError) as e:
            logger.error(f"Failed to refresh session for user {auth.get('user_id')}: {e}", exc_info=True)
            return None

        if not response.session or not response.user:
            return None

        refreshed = session_to_auth(response.session, response.user)
        # Keep names resolved from the profile at sign-in
        refreshed['username'] = auth.get('username', refreshed['username'])
        refreshed['display_name'] = auth.get('display_name', refreshed['display_name'])
        logger.info(f"Refreshed session for user {refreshed['user_id']}")
        return refreshed

    def sign_out(self, auth: Optional[Dict[str, Any]]) -> None:
        """Revoke the session remotely. Failures are logged, never raised."""
        if not auth:
            return
        try:
            with self.database.connect() as client:
                client.auth.set_session(auth.get('access_token'), auth.get('refresh_token'))
                client.auth.sign_out()
        except (AuthError, httpx.HTTPError) as e:
            logger.warning(f"Remote sign-out failed for user {auth.get('user_id')}: {e}")

    def create_login_form(self, error_msg: str = None, info_msg: str = None):
        """Create the sign-in page with optional error or info message."""
        # Import here to avoid circular imports
        from dben.components import Alert, NavBar, UniversalFooter

        return (
            Title("Sign In - DBEN"),
            NavBar(),
            Container(
                Div(
                    H1("Welcome Back", cls="auth-title"),
                    P("Sign in to continue exchanging books", cls="auth-subtitle"),
                    Alert(error_msg, "error") if error_msg else None,
                    Alert(info_msg, "info") if info_msg else None,
                    Form(
                        Fieldset(
                            Label("Email", Input(
                                name="email",
                                type="email",
                                placeholder="you@example.com",
                                autocomplete="email",
                                required=True,
                            )),
                            Label("Password", Input(
                                name="password",
                                type="password",
                                autocomplete="current-password",
                                required=True,
                            )),
                        ),
                        Button("Sign In", type="submit", cls="primary"),
                        action="/auth/login",
                        method="post",
                        cls="auth-form"
                    ),
                    P("New to DBEN? ", A("Create an account", href="/auth/signup"), cls="auth-switch"),
                    cls="auth-card"
                )
            ),
            UniversalFooter()
        )

    def create_signup_form(self, error_msg: str = None):
        """Create the sign-up page with optional error message."""
        from dben.components import Alert, NavBar, UniversalFooter

        return (
            Title("Create Account - DBEN"),
            NavBar(),
            Container(
                Div(
                    H1("Join DBEN", cls="auth-title"),
                    P("Lend, swap, or give away books in your community", cls="auth-subtitle"),
                    Alert(error_msg, "error") if error_msg else None,
                    Form(
                        Fieldset(
                            Label("Email", Input(name="email", type="email", autocomplete="email", required=True)),
                            Label("Password", Input(
                                name="password",
                                type="password",
                                autocomplete="new-password",
                                minlength=6,
                                required=True,
                            )),
                            Label("Username", Input(
                                name="username",
                                type="text",
                                placeholder="bookworm42",
                                pattern="[A-Za-z0-9_]{3,30}",
                                required=True,
                            )),
                            Label("Full Name (Optional)", Input(name="full_name", type="text")),
                        ),
                        Button("Create Account", type="submit", cls="primary"),
                        action="/auth/signup",
                        method="post",
                        cls="auth-form"
                    ),
                    P("Already have an account? ", A("Sign in", href="/auth/login"), cls="auth-switch"),
                    cls="auth-card"
                )
            ),
            UniversalFooter()
        )
