"""Authentication module for WordPress application passwords.

This module resolves optional HTTP Basic credentials for the WordPress REST
API. Explicit values (from CLI options or the config file) win; otherwise
credentials are loaded from environment variables using python-dotenv.
Anonymous access is the default when nothing is configured.
"""

import base64
import os
from typing import Dict, NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """WordPress username and application password."""
    username: str
    app_password: str

    def basic_auth_header(self) -> Dict[str, str]:
        """Build the HTTP Basic Authorization header for these credentials."""
        token = base64.b64encode(
            f"{self.username}:{self.app_password}".encode("utf-8")
        ).decode("ascii")
        return {"Authorization": f"Basic {token}"}


class Authenticator:
    """Resolves optional WordPress credentials.

    Credentials are never cached beyond the lifetime of the returned tuple
    and never logged.

    Optional environment variables:
        WP_USERNAME: WordPress user name or e-mail
        WP_APP_PASSWORD: Application password created in WP Admin

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials(username="admin", app_password="xxxx xxxx")
        >>> creds.basic_auth_header()
    """

    def __init__(self, use_env: bool = True):
        """Initialize the authenticator.

        Args:
            use_env: Load a .env file and fall back to WP_* environment variables
        """
        self._use_env = use_env
        if use_env:
            load_dotenv()

    def get_credentials(
        self,
        username: Optional[str] = None,
        app_password: Optional[str] = None
    ) -> Optional[Credentials]:
        """Resolve credentials from explicit values or the environment.

        Args:
            username: Explicit user name (takes precedence over WP_USERNAME)
            app_password: Explicit application password (takes precedence over WP_APP_PASSWORD)

        Returns:
            Credentials, or None for anonymous access

        Raises:
            InvalidCredentialsError: If only one half of the pair is present
        """
        if self._use_env:
            username = username or os.getenv('WP_USERNAME')
            app_password = app_password or os.getenv('WP_APP_PASSWORD')

        if not username and not app_password:
            return None

        if not username:
            raise InvalidCredentialsError("", "application password given without a username")
        if not app_password:
            raise InvalidCredentialsError(username, "username given without an application password")

        return Credentials(username=username, app_password=app_password)
