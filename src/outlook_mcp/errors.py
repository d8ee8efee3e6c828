"""
Exceptions raised by the Outlook MCP server.

@author: Generated for outlook_mcp repository
"""

from typing import Optional


class OutlookMCPError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(OutlookMCPError):
    """Configuration file missing, unreadable or incomplete."""


class AuthenticationError(OutlookMCPError):
    """Sign-in to Microsoft Graph failed or was cancelled."""


class GraphError(OutlookMCPError):
    """A Microsoft Graph request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
