"""
Configuration Management Module

Loads the server configuration record with priority:
1. Environment variables (highest priority)
2. config.json file written by the setup wizard
3. Default values (lowest priority)

Unlike a best-effort loader, a missing or malformed file is an error: the
server cannot sign in without a client id.

@author: Generated for outlook_mcp repository
"""

import os
import json
import copy
import logging
from pathlib import Path
from typing import Dict, Any, Optional, List

from .errors import ConfigError


logger = logging.getLogger("outlook_mcp")

CONFIG_DIR = Path.home() / ".outlook_mcp"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "config.json"
CONFIG_ENV_VAR = "OUTLOOK_MCP_CONFIG"

GRAPH_ENDPOINT = "https://graph.microsoft.com/v1.0"
REDIRECT_URI = "http://localhost:3000"

DEFAULT_SCOPES = [
    "https://graph.microsoft.com/Mail.Read",
    "https://graph.microsoft.com/Mail.ReadWrite",
    "https://graph.microsoft.com/Mail.Send",
    "https://graph.microsoft.com/Calendars.Read",
    "https://graph.microsoft.com/Calendars.ReadWrite",
    "https://graph.microsoft.com/User.Read",
]


def resolve_config_path(config_file: Optional[Path] = None) -> Path:
    """
    Work out which config file to use.

    Args:
        config_file: Explicit path, wins over everything else

    Returns:
        Path given, else $OUTLOOK_MCP_CONFIG, else ~/.outlook_mcp/config.json
    """
    if config_file is not None:
        return Path(config_file)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


class Config:
    """
    Configuration record for the Outlook MCP server.

    Keys mirror the file written by the setup wizard:
    clientId, tenantId, redirectUri, scopes.
    """

    DEFAULTS = {
        "clientId": None,  # Must be provided by user
        "tenantId": "common",
        "redirectUri": REDIRECT_URI,
        "scopes": DEFAULT_SCOPES,
    }

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to config.json. If None, the path is resolved
                from the environment or the default location.

        Raises:
            ConfigError: If the file is missing, unreadable or not a JSON object
        """
        self.path = resolve_config_path(config_file)
        self._config = {}
        self._load_config()

    def _load_config(self):
        """
        Load configuration from all sources.

        Priority: Environment variables > config.json > defaults
        """
        self._config = copy.deepcopy(self.DEFAULTS)

        if not self.path.exists():
            raise ConfigError(
                f"Config file not found: {self.path}. Run 'outlook-mcp-setup' first."
            )

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                file_config = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Failed to load config file {self.path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {self.path} must contain a JSON object")

        self._config.update(file_config)
        logger.info(f"Loaded configuration from: {self.path}")

        self._load_from_env()

    def _load_from_env(self):
        """Load configuration overrides from environment variables."""
        env_mappings = {
            "GRAPH_TENANT_ID": "tenantId",
            "GRAPH_CLIENT_ID": "clientId",
            "GRAPH_SCOPES": "scopes",
        }

        for env_var, config_key in env_mappings.items():
            value = os.environ.get(env_var)
            if value:
                # Scopes are a comma-separated string
                if config_key == "scopes":
                    value = [s.strip() for s in value.split(",") if s.strip()]
                self._config[config_key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key (camelCase, as stored in the file)
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return self._config.get(key, default)

    @property
    def client_id(self) -> str:
        """Get Azure AD application (client) ID."""
        client_id = self._config.get("clientId")
        if not client_id:
            raise ConfigError(
                "Client ID not configured. Run 'outlook-mcp-setup', set GRAPH_CLIENT_ID "
                "or add 'clientId' to config.json"
            )
        return client_id

    @property
    def tenant_id(self) -> str:
        """Get Azure AD tenant ID."""
        return self._config.get("tenantId") or "common"

    @property
    def redirect_uri(self) -> str:
        """Get the redirect URI registered for interactive sign-in."""
        return self._config.get("redirectUri") or REDIRECT_URI

    @property
    def scopes(self) -> List[str]:
        """Get Microsoft Graph permission scopes."""
        return self._config.get("scopes", DEFAULT_SCOPES)

    @property
    def graph_endpoint(self) -> str:
        """Get full Microsoft Graph endpoint URL."""
        return GRAPH_ENDPOINT

    def to_dict(self) -> Dict[str, Any]:
        """
        Get configuration as dictionary.

        Returns:
            Configuration dictionary
        """
        return copy.deepcopy(self._config)

    def validate(self) -> bool:
        """
        Validate that required configuration is present.

        Only clientId is required. scopes documents the delegated permissions
        of the app registration; tokens are requested for the .default scope.

        Returns:
            True if valid, raises ConfigError otherwise
        """
        if not self.client_id:
            raise ConfigError("clientId is required")

        return True

    def __repr__(self) -> str:
        """String representation of configuration."""
        safe_config = self._config.copy()
        if safe_config.get("clientId"):
            safe_config["clientId"] = safe_config["clientId"][:8] + "..."
        return f"Config({safe_config})"


def build_config_record(client_id: str, tenant_id: str) -> Dict[str, Any]:
    """Build the record the setup wizard persists."""
    return {
        "clientId": client_id,
        "tenantId": tenant_id,
        "redirectUri": REDIRECT_URI,
        "scopes": list(DEFAULT_SCOPES),
    }


def save_config(record: Dict[str, Any], config_file: Optional[Path] = None) -> Path:
    """
    Write a configuration record to disk as indented JSON.

    Args:
        record: Configuration dictionary
        config_file: Target path (resolved like Config does when None)

    Returns:
        Path the record was written to
    """
    path = resolve_config_path(config_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(record, indent=2), encoding="utf-8")
    logger.info(f"Saved configuration to: {path}")
    return path


# Global config instance (lazy-loaded)
_global_config: Optional[Config] = None


def get_config(config_file: Optional[Path] = None) -> Config:
    """
    Get global configuration instance.

    Args:
        config_file: Optional path to config file

    Returns:
        Config instance
    """
    global _global_config
    if _global_config is None:
        _global_config = Config(config_file)
    return _global_config


def reload_config(config_file: Optional[Path] = None) -> Config:
    """
    Reload global configuration from sources.

    Args:
        config_file: Optional path to config file

    Returns:
        New Config instance
    """
    global _global_config
    _global_config = Config(config_file)
    return _global_config
