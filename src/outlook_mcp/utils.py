"""
Utility Functions Module

Provides shared helper functions for:
- Translating failed Graph HTTP calls into GraphError
- JSON rendering of tool output
- Logging

@author: Generated for outlook_mcp repository
"""

import sys
import json
import logging
import requests
from pathlib import Path
from typing import Any, Optional

from .errors import GraphError


# -----------------------------------------------------------------------------
# Graph Error Helpers
# -----------------------------------------------------------------------------

def graph_error_message(response: Optional[requests.Response]) -> Optional[str]:
    """
    Extract the human-readable message from a Graph error response.

    Graph returns: {"error": {"code": "ErrorItemNotFound", "message": "..."}}

    Args:
        response: Failed HTTP response, may be None

    Returns:
        The error message, or None if the body carries none
    """
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return None


def to_graph_error(exc: requests.exceptions.RequestException, action: str) -> GraphError:
    """
    Convert a requests failure into a GraphError, logging the response body.

    Args:
        exc: Exception raised by requests (HTTPError, ConnectionError, ...)
        action: What was being attempted, for the log line

    Returns:
        GraphError carrying Graph's message when available
    """
    logger = logging.getLogger("outlook_mcp")
    response = getattr(exc, "response", None)
    status_code = response.status_code if response is not None else None

    logger.error(f"Error {action}: {exc}")
    if response is not None:
        logger.error(f"Response: {response.text}")

    message = graph_error_message(response) or str(exc)
    return GraphError(message, status_code=status_code)


# -----------------------------------------------------------------------------
# Output Helpers
# -----------------------------------------------------------------------------

def to_json_text(payload: Any) -> str:
    """Render a tool payload as two-space indented JSON."""
    return json.dumps(payload, indent=2, ensure_ascii=False)


# -----------------------------------------------------------------------------
# Logging Functions
# -----------------------------------------------------------------------------

def setup_logging(log_file: Optional[Path] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure Python logging to file and stderr.

    stdout is reserved for the MCP protocol stream, so console output
    goes to stderr.

    Args:
        log_file: Path to log file (default ~/.outlook_mcp/server.log)
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    if log_file is None:
        log_file = Path.home() / ".outlook_mcp" / "server.log"
    log_file = Path(log_file)

    logger = logging.getLogger("outlook_mcp")
    logger.setLevel(level)

    # Remove existing handlers
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
    except OSError as e:
        print(f"[WARNING] Cannot write log file {log_file}: {e}", file=sys.stderr)
    else:
        file_handler.setLevel(level)
        file_formatter = logging.Formatter('[%(asctime)s] [%(levelname)s] %(message)s', datefmt='%Y-%m-%d %H:%M:%S')
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    # Console handler (less verbose)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_formatter = logging.Formatter('[%(levelname)s] %(message)s')
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    return logger
