"""
Microsoft Graph Authentication Module

Handles authentication to Microsoft Graph using MSAL (Microsoft Authentication Library).
Uses the interactive browser flow with a localhost redirect and caches tokens on disk,
so the browser only opens when no cached account can be refreshed silently.

Nothing here may print to stdout: the MCP server speaks its protocol on stdout.

@author: Generated for outlook_mcp repository
"""

import logging
import threading
import msal
from typing import Optional, Dict, Any, List
from pathlib import Path
from urllib.parse import urlparse

from .config import Config, CONFIG_DIR, GRAPH_ENDPOINT, REDIRECT_URI
from .errors import AuthenticationError


logger = logging.getLogger("outlook_mcp")

GRAPH_DEFAULT_SCOPE = "https://graph.microsoft.com/.default"


class GraphAuthenticator:
    """
    Handles Microsoft Graph authentication with token caching.

    Tries silent acquisition for the cached account first and falls back
    to the interactive browser flow.
    """

    def __init__(
        self,
        client_id: str,
        tenant_id: str = "common",
        redirect_uri: str = REDIRECT_URI,
        scopes: Optional[List[str]] = None,
        cache_file: Optional[Path] = None,
    ):
        """
        Initialize the authenticator.

        Args:
            client_id: Azure AD application (client) ID
            tenant_id: Azure AD tenant ID or "common" for multi-tenant
            redirect_uri: Localhost redirect registered on the app
            scopes: Scopes to request, Graph's default scope if omitted
            cache_file: Token cache location (default ~/.outlook_mcp/token_cache.json)
        """
        self.client_id = client_id
        self.tenant_id = tenant_id
        self.redirect_uri = redirect_uri
        self.scopes = scopes or [GRAPH_DEFAULT_SCOPE]

        self.authority = f"https://login.microsoftonline.com/{self.tenant_id}"

        if cache_file is None:
            CONFIG_DIR.mkdir(parents=True, exist_ok=True)
            cache_file = CONFIG_DIR / "token_cache.json"
        self.cache_file = Path(cache_file)

        self.token_cache = msal.SerializableTokenCache()
        if self.cache_file.exists():
            self.token_cache.deserialize(self.cache_file.read_text())

        self.app = msal.PublicClientApplication(
            client_id=self.client_id,
            authority=self.authority,
            token_cache=self.token_cache
        )
        self._lock = threading.Lock()

    @property
    def redirect_port(self) -> Optional[int]:
        """Port the interactive flow listens on, taken from the redirect URI."""
        return urlparse(self.redirect_uri).port

    def _save_cache(self):
        """Save token cache to disk if it has changed."""
        if self.token_cache.has_state_changed:
            self.cache_file.write_text(self.token_cache.serialize())

    def get_access_token(self) -> str:
        """
        Get a valid access token, using cached token if available.

        Returns:
            Access token string

        Raises:
            AuthenticationError: If sign-in failed or was cancelled
        """
        with self._lock:
            accounts = self.app.get_accounts()
            if accounts:
                result = self.app.acquire_token_silent(self.scopes, account=accounts[0])
                if result and "access_token" in result:
                    self._save_cache()
                    return result["access_token"]

            return self._authenticate_interactive()

    def _authenticate_interactive(self) -> str:
        """
        Authenticate using interactive browser flow.
        Opens browser for user to sign in.
        """
        logger.info("Opening browser for Microsoft sign-in...")

        try:
            result = self.app.acquire_token_interactive(
                scopes=self.scopes,
                port=self.redirect_port,
            )
        except Exception as e:
            raise AuthenticationError(f"Interactive sign-in failed: {e}") from e

        if "access_token" not in result:
            error = result.get("error_description", result.get("error", "Unknown error"))
            raise AuthenticationError(f"Authentication failed: {error}")

        self._save_cache()
        username = result.get("id_token_claims", {}).get("preferred_username", "Unknown")
        logger.info(f"Signed in as: {username}")
        return result["access_token"]

    def get_account_info(self) -> Optional[Dict[str, Any]]:
        """
        Get information about the currently authenticated account.

        Returns:
            Dictionary with account info, or None if not authenticated.
        """
        accounts = self.app.get_accounts()
        if accounts:
            return accounts[0]
        return None


class GraphClient:
    """
    Authenticated handle for Microsoft Graph. Holds the base URL and builds
    request headers; the mail and calendar clients issue the HTTP calls.
    """

    def __init__(self, authenticator: GraphAuthenticator, base_url: str = GRAPH_ENDPOINT):
        """
        Initialize Graph API client.

        Args:
            authenticator: GraphAuthenticator instance
            base_url: Graph endpoint including API version
        """
        self.authenticator = authenticator
        self.base_url = base_url

    def get_headers(self) -> Dict[str, str]:
        """
        Get HTTP headers with authorization.

        MSAL refreshes expired tokens from its cache, so the token is
        looked up on every request rather than held here.

        Returns:
            Dictionary of HTTP headers
        """
        token = self.authenticator.get_access_token()
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json"
        }


def create_authenticator_from_config(config: Config) -> GraphAuthenticator:
    """
    Create a GraphAuthenticator from the configuration record.

    Tokens are requested for Graph's default scope, which grants the
    delegated permissions consented on the app registration.
    """
    return GraphAuthenticator(
        client_id=config.client_id,
        tenant_id=config.tenant_id,
        redirect_uri=config.redirect_uri,
        scopes=[GRAPH_DEFAULT_SCOPE],
    )


def create_graph_client(config: Config) -> GraphClient:
    """
    Bootstrap the authenticated Graph client.

    Signs in eagerly so that configuration and authentication problems
    surface here. Nothing is retried.

    Raises:
        ConfigError: If the configuration is incomplete
        AuthenticationError: If sign-in fails
    """
    config.validate()
    authenticator = create_authenticator_from_config(config)
    authenticator.get_access_token()
    logger.info("Microsoft Graph client initialized")
    return GraphClient(authenticator, config.graph_endpoint)
