"""
Outlook MCP Server Package

Exposes Outlook mail and calendar operations as Model Context Protocol tools,
backed by the Microsoft Graph REST API.

Provides modules for:
- Authentication (auth.py)
- Configuration management (config.py)
- Mail operations (mail.py)
- Calendar operations (calendar.py)
- Tool catalog and handlers (tools.py)
- MCP server and dispatcher (server.py)
- Interactive setup (setup_wizard.py)

@author: Generated for outlook_mcp repository
"""

__version__ = "1.0.0"
__author__ = "Generated for outlook_mcp repository"

from .errors import OutlookMCPError, ConfigError, AuthenticationError, GraphError
from .auth import GraphAuthenticator, GraphClient, create_authenticator_from_config, create_graph_client
from .config import Config, get_config, reload_config, save_config
from .calendar import CalendarClient, build_event_payload, EVENT_TIMEZONE
from .mail import MailClient
from .tools import TOOLS, HANDLERS, ToolResult
from .server import ToolDispatcher, create_server

__all__ = [
    # Errors
    "OutlookMCPError",
    "ConfigError",
    "AuthenticationError",
    "GraphError",
    # Auth
    "GraphAuthenticator",
    "GraphClient",
    "create_authenticator_from_config",
    "create_graph_client",
    # Config
    "Config",
    "get_config",
    "reload_config",
    "save_config",
    # Calendar
    "CalendarClient",
    "build_event_payload",
    "EVENT_TIMEZONE",
    # Mail
    "MailClient",
    # Tools
    "TOOLS",
    "HANDLERS",
    "ToolResult",
    # Server
    "ToolDispatcher",
    "create_server",
]
