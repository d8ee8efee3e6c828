"""
Tool Catalog and Handlers

Defines the five MCP tools exposed by the server and the handler behind each one.
Handlers take the shared GraphClient plus the call arguments and return a ToolResult;
only the server turns results into protocol text.

@author: Generated for outlook_mcp repository
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from mcp.types import Tool

from .auth import GraphClient
from .calendar import CalendarClient, build_event_payload
from .errors import GraphError
from .mail import MailClient
from .utils import to_json_text


# -----------------------------------------------------------------------------
# Results
# -----------------------------------------------------------------------------

@dataclass
class ToolResult:
    """
    Outcome of a tool call: either a payload or an error kind plus message.

    Error kinds: "remote" (Graph call failed), "unknown_tool",
    "invalid_arguments" and "internal".
    """

    payload: Any = None
    error_kind: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, payload: Any) -> "ToolResult":
        """
        Build a successful result.

        Args:
            payload: String shown verbatim, or a JSON-serializable object

        Returns:
            ToolResult without error
        """
        return cls(payload=payload)

    @classmethod
    def failure(cls, error_kind: str, message: str) -> "ToolResult":
        """
        Build an error result.

        Args:
            error_kind: One of "remote", "unknown_tool", "invalid_arguments", "internal"
            message: Human-readable message, shown after the "Erro: " prefix

        Returns:
            ToolResult carrying the error
        """
        return cls(error_kind=error_kind, message=message)

    @property
    def is_error(self) -> bool:
        return self.error_kind is not None

    def to_text(self) -> str:
        """Render for the protocol text body."""
        if self.is_error:
            return f"Erro: {self.message}"
        if isinstance(self.payload, str):
            return self.payload
        return to_json_text(self.payload)


class InvalidArguments(ValueError):
    """A required tool argument is missing or has the wrong type."""


def _require(arguments: Dict[str, Any], name: str) -> Any:
    value = arguments.get(name)
    if value is None:
        raise InvalidArguments(f"Argumento obrigatório ausente: {name}")
    return value


def _limit(arguments: Dict[str, Any], default: int) -> int:
    """Read the optional "limit" argument; an explicit null means the default."""
    value = arguments.get("limit")
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidArguments(f"Argumento inválido: limit ({value!r})")


# -----------------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------------

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

TOOLS: List[Tool] = [
    Tool(
        name="list_emails",
        description="Lista emails da caixa de entrada",
        inputSchema={
            "type": "object",
            "properties": {
                "folder": {
                    "type": "string",
                    "description": "Pasta do email (inbox, sent, drafts)",
                    "default": "inbox",
                },
                "limit": {
                    "type": "number",
                    "description": "Número máximo de emails",
                    "default": 10,
                },
                "search": {
                    "type": "string",
                    "description": "Termo de busca opcional",
                },
            },
        },
    ),
    Tool(
        name="read_email",
        description="Lê o conteúdo completo de um email",
        inputSchema={
            "type": "object",
            "properties": {
                "emailId": {"type": "string", "description": "ID do email"},
            },
            "required": ["emailId"],
        },
    ),
    Tool(
        name="send_email",
        description="Envia um novo email",
        inputSchema={
            "type": "object",
            "properties": {
                "to": dict(_STRING_LIST, description="Lista de destinatários"),
                "subject": {"type": "string", "description": "Assunto do email"},
                "body": {"type": "string", "description": "Corpo do email"},
                "cc": dict(_STRING_LIST, description="Lista de emails em cópia", default=[]),
                "isHtml": {
                    "type": "boolean",
                    "description": "Se o corpo é HTML",
                    "default": False,
                },
            },
            "required": ["to", "subject", "body"],
        },
    ),
    Tool(
        name="list_calendar_events",
        description="Lista eventos do calendário",
        inputSchema={
            "type": "object",
            "properties": {
                "startDate": {"type": "string", "description": "Data inicial (ISO 8601)"},
                "endDate": {"type": "string", "description": "Data final (ISO 8601)"},
                "limit": {
                    "type": "number",
                    "description": "Número máximo de eventos",
                    "default": 20,
                },
            },
        },
    ),
    Tool(
        name="create_calendar_event",
        description="Cria um novo evento no calendário",
        inputSchema={
            "type": "object",
            "properties": {
                "subject": {"type": "string", "description": "Título do evento"},
                "start": {"type": "string", "description": "Data/hora de início (ISO 8601)"},
                "end": {"type": "string", "description": "Data/hora de fim (ISO 8601)"},
                "body": {"type": "string", "description": "Descrição do evento", "default": ""},
                "location": {"type": "string", "description": "Local do evento", "default": ""},
                "attendees": dict(_STRING_LIST, description="Lista de emails dos participantes", default=[]),
                "isOnline": {
                    "type": "boolean",
                    "description": "Se é um evento online",
                    "default": False,
                },
            },
            "required": ["subject", "start", "end"],
        },
    ),
]


# -----------------------------------------------------------------------------
# Projections
# -----------------------------------------------------------------------------

def _address(resource: Dict[str, Any], field: str) -> Optional[str]:
    return ((resource.get(field) or {}).get("emailAddress") or {}).get("address")


def summarize_email(message: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce a Graph message to the fields list_emails reports."""
    return {
        "id": message.get("id"),
        "subject": message.get("subject"),
        "from": _address(message, "from"),
        "received": message.get("receivedDateTime"),
        "hasAttachments": message.get("hasAttachments"),
        "preview": message.get("bodyPreview"),
    }


def summarize_attachment(attachment: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": attachment.get("name"),
        "size": attachment.get("size"),
        "contentType": attachment.get("contentType"),
    }


def summarize_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce a Graph event to the fields list_calendar_events reports."""
    return {
        "id": event.get("id"),
        "subject": event.get("subject"),
        "start": (event.get("start") or {}).get("dateTime"),
        "end": (event.get("end") or {}).get("dateTime"),
        "location": (event.get("location") or {}).get("displayName"),
        "isOnlineMeeting": event.get("isOnlineMeeting"),
        "organizer": _address(event, "organizer"),
    }


# -----------------------------------------------------------------------------
# Handlers
# -----------------------------------------------------------------------------

def list_emails(graph_client: GraphClient, arguments: Dict[str, Any]) -> ToolResult:
    """
    List the newest messages of a folder.

    Args:
        graph_client: Authenticated GraphClient
        arguments: folder (default "inbox"), limit (default 10), optional search

    Returns:
        ToolResult with a list of summarize_email() entries
    """
    folder = arguments.get("folder", "inbox")
    limit = _limit(arguments, 10)
    search = arguments.get("search")

    try:
        messages = MailClient(graph_client).list_messages(folder, limit, search)
    except GraphError as e:
        return ToolResult.failure("remote", f"Erro ao listar emails: {e}")

    return ToolResult.ok([summarize_email(message) for message in messages])


def read_email(graph_client: GraphClient, arguments: Dict[str, Any]) -> ToolResult:
    """
    Fetch one message, plus its attachment list when it has attachments.

    Args:
        graph_client: Authenticated GraphClient
        arguments: emailId (required)

    Returns:
        ToolResult with the message fields and an "attachments" list
    """
    email_id = _require(arguments, "emailId")
    mail = MailClient(graph_client)

    try:
        email = mail.get_message(email_id)
        attachments = []
        if email.get("hasAttachments"):
            attachments = [summarize_attachment(att) for att in mail.list_attachments(email_id)]
    except GraphError as e:
        return ToolResult.failure("remote", f"Erro ao ler email: {e}")

    return ToolResult.ok(dict(email, attachments=attachments))


def send_email(graph_client: GraphClient, arguments: Dict[str, Any]) -> ToolResult:
    """
    Send a message and keep a copy in Sent Items.

    Args:
        graph_client: Authenticated GraphClient
        arguments: to, subject, body (required); cc (default []), isHtml (default False)

    Returns:
        ToolResult with a confirmation string
    """
    to = _require(arguments, "to")
    subject = _require(arguments, "subject")
    body = _require(arguments, "body")
    cc = arguments.get("cc", [])
    is_html = arguments.get("isHtml", False)

    try:
        MailClient(graph_client).send_mail(
            to=to,
            subject=subject,
            body=body,
            cc=cc,
            content_type="HTML" if is_html else "Text",
        )
    except GraphError as e:
        return ToolResult.failure("remote", f"Erro ao enviar email: {e}")

    return ToolResult.ok("Email enviado com sucesso!")


def list_calendar_events(graph_client: GraphClient, arguments: Dict[str, Any]) -> ToolResult:
    """
    List calendar events ordered by start time.

    Args:
        graph_client: Authenticated GraphClient
        arguments: optional startDate/endDate (range applied only when both are given),
            limit (default 20)

    Returns:
        ToolResult with a list of summarize_event() entries
    """
    start_date = arguments.get("startDate")
    end_date = arguments.get("endDate")
    limit = _limit(arguments, 20)

    try:
        events = CalendarClient(graph_client).list_events(start_date, end_date, limit)
    except GraphError as e:
        return ToolResult.failure("remote", f"Erro ao listar eventos: {e}")

    return ToolResult.ok([summarize_event(event) for event in events])


def create_calendar_event(graph_client: GraphClient, arguments: Dict[str, Any]) -> ToolResult:
    """
    Create an event in the default calendar.

    Args:
        graph_client: Authenticated GraphClient
        arguments: subject, start, end (required); body, location, attendees, isOnline

    Returns:
        ToolResult with a confirmation string carrying the new event ID
    """
    event = build_event_payload(
        subject=_require(arguments, "subject"),
        start=_require(arguments, "start"),
        end=_require(arguments, "end"),
        body=arguments.get("body", ""),
        location=arguments.get("location", ""),
        attendees=arguments.get("attendees", []),
        is_online=arguments.get("isOnline", False),
    )

    try:
        created = CalendarClient(graph_client).create_event(event)
    except GraphError as e:
        return ToolResult.failure("remote", f"Erro ao criar evento: {e}")

    return ToolResult.ok(f"Evento criado com sucesso! ID: {created.get('id')}")


ToolHandler = Callable[[GraphClient, Dict[str, Any]], ToolResult]

HANDLERS: Dict[str, ToolHandler] = {
    "list_emails": list_emails,
    "read_email": read_email,
    "send_email": send_email,
    "list_calendar_events": list_calendar_events,
    "create_calendar_event": create_calendar_event,
}
