"""Remote database setup and connection management for DBEN.

All rows live on the hosted platform; this module reads the two required
settings from the environment and builds platform clients. A fresh client is
created for every unit of work so that each one carries only its caller's
access token, and its HTTP sessions are closed when that work ends.
"""

import os
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from dotenv import load_dotenv
from supabase import Client, ClientOptions, create_client

load_dotenv()

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS = ('SUPABASE_URL', 'SUPABASE_ANON_KEY')


class ConfigurationError(RuntimeError):
    """Raised when required startup configuration is missing."""


class DataAccessError(Exception):
    """Raised when a call to the hosted database fails."""

    def __init__(self, action: str, detail: str = "", code: Optional[str] = None):
        self.action = action
        self.detail = detail
        # Postgres error code reported by the platform, e.g. '23505'
        self.code = code
        message = f"Could not {action}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


@dataclass(frozen=True)
class PlatformConfig:
    url: str
    anon_key: str


def load_platform_config() -> PlatformConfig:
    """Read the platform endpoint and anon key from the environment.

    Raises:
        ConfigurationError: If either setting is missing or blank.
    """
    values = {name: os.getenv(name, '').strip() for name in REQUIRED_SETTINGS}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )
    return PlatformConfig(url=values['SUPABASE_URL'], anon_key=values['SUPABASE_ANON_KEY'])


class RemoteDatabase:
    """Factory for platform clients bound to one project."""

    def __init__(self, config: PlatformConfig):
        self.config = config

    def _options(self) -> ClientOptions:
        # Sessions are kept in the signed cookie, never inside the client
        return ClientOptions(auto_refresh_token=False, persist_session=False)

    def client(self, access_token: Optional[str] = None) -> Client:
        """Create a client, authenticated as the caller when a token is given."""
        client = create_client(self.config.url, self.config.anon_key, options=self._options())
        if access_token:
            client.postgrest.auth(access_token)
        return client

    @contextmanager
    def connect(self, access_token: Optional[str] = None) -> Iterator[Client]:
        """Client for one unit of work; its HTTP sessions are closed on exit."""
        client = self.client(access_token)
        try:
            yield client
        finally:
            client.postgrest.session.close()
            client.auth.close()

    def connect_for(self, auth):
        """Connect as the session auth dict (anonymous when auth is None)."""
        return self.connect(auth.get('access_token') if auth else None)


def setup_database(config: Optional[PlatformConfig] = None) -> RemoteDatabase:
    """Validate configuration and return the remote database factory.

    Args:
        config: Explicit configuration; read from the environment when omitted.

    Raises:
        ConfigurationError: If the environment is missing required settings.
    """
    config = config or load_platform_config()
    logger.info(f"Remote database configured for {config.url}")
    return RemoteDatabase(config)
