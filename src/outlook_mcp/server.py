"""
Outlook MCP Server

Serves the mail and calendar tools over the Model Context Protocol on stdio.

The Graph client is created once, on the first tool call, and shared by all
handlers afterwards. Handler failures come back to the host as "Erro: ..." text.
Bootstrap failures (bad config, failed sign-in) are not converted: they propagate
out of ToolDispatcher.call_tool and reach the host as a protocol-level error.

@author: Generated for outlook_mcp repository
"""

import sys
import asyncio
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from . import __version__
from .auth import GraphClient, create_graph_client
from .config import get_config
from .tools import HANDLERS, TOOLS, InvalidArguments, ToolResult
from .utils import setup_logging


logger = logging.getLogger("outlook_mcp")

SERVER_NAME = "outlook-mcp-server"


class ToolDispatcher:
    """
    Routes tool calls to their handlers.

    Args:
        client_factory: Builds the authenticated GraphClient; called at most once
    """

    def __init__(self, client_factory: Callable[[], GraphClient]):
        self._client_factory = client_factory
        self._client: Optional[GraphClient] = None
        self._lock = threading.Lock()

    def list_tools(self) -> List[Tool]:
        return TOOLS

    def ensure_client(self) -> GraphClient:
        """Create the Graph client on first use. Errors propagate to the caller."""
        if self._client is None:
            with self._lock:
                if self._client is None:
                    logger.info("Initializing Microsoft Graph client...")
                    self._client = self._client_factory()
        return self._client

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> ToolResult:
        """
        Run one tool call.

        Args:
            name: Tool name
            arguments: Call arguments matching the tool's input schema

        Returns:
            ToolResult; never raises for handler failures

        Raises:
            ConfigError, AuthenticationError: If the client cannot be created
        """
        client = self.ensure_client()

        handler = HANDLERS.get(name)
        if handler is None:
            logger.warning(f"Unknown tool requested: {name}")
            return ToolResult.failure("unknown_tool", f"Ferramenta desconhecida: {name}")

        logger.info(f"Calling tool: {name}")
        try:
            result = handler(client, arguments or {})
        except InvalidArguments as e:
            result = ToolResult.failure("invalid_arguments", str(e))
        except Exception as e:
            logger.exception(f"Tool {name} failed")
            result = ToolResult.failure("internal", str(e))

        if result.is_error:
            logger.warning(f"Tool {name} returned error ({result.error_kind}): {result.message}")
        return result


def create_server(dispatcher: ToolDispatcher) -> Server:
    """
    Build the MCP server and register the list/call handlers.

    Tool calls run in a worker thread: Graph requests and the browser
    sign-in block, and the stdio loop must keep reading meanwhile.
    """
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return dispatcher.list_tools()

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
        result = await asyncio.to_thread(dispatcher.call_tool, name, arguments)
        return [TextContent(type="text", text=result.to_text())]

    return server


async def serve(dispatcher: ToolDispatcher):
    """Run the server over stdin/stdout until the host disconnects."""
    server = create_server(dispatcher)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Outlook MCP server started")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> int:
    """Entry point for the outlook-mcp command."""
    setup_logging()
    dispatcher = ToolDispatcher(lambda: create_graph_client(get_config()))

    try:
        asyncio.run(serve(dispatcher))
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("Unhandled exception running MCP server")
        return 1

    logger.info("Outlook MCP server shut down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
