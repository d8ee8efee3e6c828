"""
Integration tests for Outlook MCP Server

Tests the Graph mail and calendar clients and full tool calls with mocked
Graph API responses. This ensures the complete functionality works correctly
without requiring actual authentication or live API calls.

@author: Generated for outlook_mcp repository
"""

import pytest
from unittest.mock import Mock, patch
from pathlib import Path
import sys
import json

import requests

# Add src to path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from outlook_mcp import (
    CalendarClient,
    MailClient,
    GraphError,
    ToolDispatcher,
    build_event_payload,
    EVENT_TIMEZONE,
)


def create_graph_client():
    """Create a mock GraphClient."""
    graph_client = Mock()
    graph_client.get_headers.return_value = {"Authorization": "Bearer test-token"}
    graph_client.base_url = "https://graph.microsoft.com/v1.0"
    return graph_client


def create_response(payload=None, status_code=200):
    """Create a successful mock HTTP response."""
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload if payload is not None else {}
    response.raise_for_status = Mock()
    return response


def create_error_response(status_code, message):
    """Create a mock HTTP response whose raise_for_status raises like requests does."""
    response = Mock()
    response.status_code = status_code
    response.text = json.dumps({"error": {"code": "Error", "message": message}})
    response.json.return_value = {"error": {"code": "Error", "message": message}}
    response.raise_for_status.side_effect = requests.exceptions.HTTPError(
        f"{status_code} Client Error", response=response
    )
    return response


def create_sample_message(index, has_attachments=False):
    """Create a sample Graph API message object."""
    return {
        "id": f"msg-{index}",
        "subject": f"Subject {index}",
        "from": {"emailAddress": {"name": "Sender", "address": f"sender{index}@example.com"}},
        "receivedDateTime": f"2025-01-15T0{index}:00:00Z",
        "hasAttachments": has_attachments,
        "bodyPreview": f"Preview {index}",
        "importance": "normal",
        "isRead": False,
    }


class TestMailOperationsIntegration:
    """Integration tests for mail operations."""

    @patch('requests.get')
    def test_list_messages_request(self, mock_get):
        """Test the folder, ordering and page size sent to Graph."""
        mock_get.return_value = create_response({"value": [create_sample_message(1)]})

        mail_client = MailClient(create_graph_client())
        messages = mail_client.list_messages("inbox", 10)

        assert len(messages) == 1
        url = mock_get.call_args[0][0]
        params = mock_get.call_args[1]["params"]
        assert url == "https://graph.microsoft.com/v1.0/me/mailFolders/inbox/messages"
        assert params["$top"] == 10
        assert params["$orderby"] == "receivedDateTime desc"
        assert "$search" not in params

    @patch('requests.get')
    def test_list_messages_with_search(self, mock_get):
        mock_get.return_value = create_response({"value": []})

        MailClient(create_graph_client()).list_messages("sentitems", 5, search="foo")

        params = mock_get.call_args[1]["params"]
        assert params["$search"] == '"foo"'
        assert "/mailFolders/sentitems/messages" in mock_get.call_args[0][0]

    @patch('requests.get')
    def test_get_message_selects_fields(self, mock_get):
        mock_get.return_value = create_response({"id": "msg-1", "hasAttachments": False})

        message = MailClient(create_graph_client()).get_message("msg-1")

        assert message["id"] == "msg-1"
        assert mock_get.call_args[0][0].endswith("/me/messages/msg-1")
        select = mock_get.call_args[1]["params"]["$select"]
        assert "receivedDateTime" in select
        assert "hasAttachments" in select

    @patch('requests.get')
    def test_get_message_error_carries_graph_message(self, mock_get):
        """Test that Graph's error message survives into GraphError."""
        mock_get.return_value = create_error_response(404, "The specified object was not found in the store.")

        with pytest.raises(GraphError, match="not found in the store") as exc_info:
            MailClient(create_graph_client()).get_message("missing")

        assert exc_info.value.status_code == 404

    @patch('requests.get')
    def test_network_failure_raises_graph_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("connection refused")

        with pytest.raises(GraphError, match="connection refused") as exc_info:
            MailClient(create_graph_client()).list_messages()

        assert exc_info.value.status_code is None

    @patch('requests.post')
    def test_send_mail_payload(self, mock_post):
        """Test the sendMail body without CC recipients."""
        mock_post.return_value = create_response(status_code=202)

        MailClient(create_graph_client()).send_mail(
            to=["a@example.com", "b@example.com"],
            subject="Hello",
            body="Body",
        )

        url = mock_post.call_args[0][0]
        request_body = mock_post.call_args[1]["json"]
        assert url.endswith("/me/sendMail")
        assert request_body["saveToSentItems"] is True
        message = request_body["message"]
        assert message["subject"] == "Hello"
        assert message["body"] == {"contentType": "Text", "content": "Body"}
        assert [r["emailAddress"]["address"] for r in message["toRecipients"]] == ["a@example.com", "b@example.com"]
        assert "ccRecipients" not in message

    @patch('requests.post')
    def test_send_mail_with_cc(self, mock_post):
        """Test sending with CC recipients and an HTML body."""
        mock_post.return_value = create_response(status_code=202)

        MailClient(create_graph_client()).send_mail(
            to=["to@example.com"],
            subject="Test",
            body="<p>Body</p>",
            cc=["cc1@example.com", "cc2@example.com"],
            content_type="HTML",
        )

        message = mock_post.call_args[1]["json"]["message"]
        assert message["body"]["contentType"] == "HTML"
        assert [r["emailAddress"]["address"] for r in message["ccRecipients"]] == ["cc1@example.com", "cc2@example.com"]

    @patch('requests.post')
    def test_send_mail_error(self, mock_post):
        mock_post.return_value = create_error_response(403, "Access is denied.")

        with pytest.raises(GraphError, match="Access is denied."):
            MailClient(create_graph_client()).send_mail(["to@example.com"], "s", "b")


class TestCalendarOperationsIntegration:
    """Integration tests for calendar operations."""

    @patch('requests.get')
    def test_list_events_without_range(self, mock_get):
        mock_get.return_value = create_response({"value": [{"id": "evt-1"}]})

        events = CalendarClient(create_graph_client()).list_events(limit=20)

        assert events == [{"id": "evt-1"}]
        assert mock_get.call_args[0][0] == "https://graph.microsoft.com/v1.0/me/events"
        params = mock_get.call_args[1]["params"]
        assert params["$top"] == 20
        assert params["$orderby"] == "start/dateTime"
        assert "$filter" not in params

    @patch('requests.get')
    def test_list_events_with_range(self, mock_get):
        """Test the range filter uses the bounds exactly as given."""
        mock_get.return_value = create_response({"value": []})

        CalendarClient(create_graph_client()).list_events("2025-01-13T00:00:00", "2025-01-17T23:59:59", 5)

        params = mock_get.call_args[1]["params"]
        assert params["$filter"] == (
            "start/dateTime ge '2025-01-13T00:00:00' and end/dateTime le '2025-01-17T23:59:59'"
        )

    @patch('requests.get')
    def test_list_events_single_bound_ignored(self, mock_get):
        mock_get.return_value = create_response({"value": []})

        CalendarClient(create_graph_client()).list_events(start_date="2025-01-13T00:00:00")

        assert "$filter" not in mock_get.call_args[1]["params"]

    @patch('requests.get')
    def test_list_events_error_handling(self, mock_get):
        """Test error handling when listing events fails."""
        mock_get.return_value = create_error_response(401, "Access token is empty.")

        with pytest.raises(GraphError, match="Access token is empty."):
            CalendarClient(create_graph_client()).list_events()

    @patch('requests.post')
    def test_create_event_success(self, mock_post):
        mock_post.return_value = create_response({"id": "new-event", "subject": "Planning"}, status_code=201)

        created = CalendarClient(create_graph_client()).create_event({"subject": "Planning"})

        assert created["id"] == "new-event"
        assert mock_post.call_args[0][0].endswith("/me/events")
        assert mock_post.call_args[1]["json"] == {"subject": "Planning"}

    def test_build_event_payload_fixed_timezone(self):
        event = build_event_payload("Planning", "2025-01-15T09:00:00", "2025-01-15T10:00:00")

        assert event["start"] == {"dateTime": "2025-01-15T09:00:00", "timeZone": EVENT_TIMEZONE}
        assert event["end"] == {"dateTime": "2025-01-15T10:00:00", "timeZone": EVENT_TIMEZONE}
        assert event["body"] == {"contentType": "HTML", "content": ""}
        assert event["location"] == {"displayName": ""}
        assert event["isOnlineMeeting"] is False
        assert "attendees" not in event

    def test_build_event_payload_attendees_required(self):
        event = build_event_payload(
            "Planning", "2025-01-15T09:00:00Z", "2025-01-15T10:00:00+02:00",
            attendees=["a@example.com", "b@example.com"], is_online=True,
        )

        assert event["start"]["timeZone"] == EVENT_TIMEZONE
        assert event["end"]["timeZone"] == EVENT_TIMEZONE
        assert event["isOnlineMeeting"] is True
        assert event["attendees"] == [
            {"emailAddress": {"address": "a@example.com"}, "type": "required"},
            {"emailAddress": {"address": "b@example.com"}, "type": "required"},
        ]


class TestEndToEndWorkflow:
    """End-to-end tests simulating full tool calls through the dispatcher."""

    @patch('requests.get')
    def test_list_emails_default_call(self, mock_get):
        """list_emails({}) hits the inbox with top=10, newest first, no search."""
        mock_get.return_value = create_response({
            "value": [create_sample_message(1), create_sample_message(2, has_attachments=True)]
        })
        dispatcher = ToolDispatcher(create_graph_client)

        result = dispatcher.call_tool("list_emails", {})

        url = mock_get.call_args[0][0]
        params = mock_get.call_args[1]["params"]
        assert url.endswith("/me/mailFolders/inbox/messages")
        assert params == {"$top": 10, "$orderby": "receivedDateTime desc"}

        emails = json.loads(result.to_text())
        assert len(emails) == 2
        for email in emails:
            assert set(email.keys()) == {"id", "subject", "from", "received", "hasAttachments", "preview"}
        assert emails[0]["from"] == "sender1@example.com"
        assert emails[1]["hasAttachments"] is True

    @patch('requests.get')
    def test_read_email_with_attachments(self, mock_get):
        """Test read_email merges attachment metadata from a second request."""
        mock_get.side_effect = [
            create_response({"id": "msg-1", "subject": "Report", "hasAttachments": True}),
            create_response({"value": [
                {"name": "report.pdf", "size": 1024, "contentType": "application/pdf", "contentBytes": "JVBERi0="},
                {"name": "data.csv", "size": 10, "contentType": "text/csv"},
            ]}),
        ]
        dispatcher = ToolDispatcher(create_graph_client)

        result = dispatcher.call_tool("read_email", {"emailId": "msg-1"})

        assert mock_get.call_count == 2
        assert mock_get.call_args[0][0].endswith("/me/messages/msg-1/attachments")
        email = json.loads(result.to_text())
        assert email["subject"] == "Report"
        assert email["attachments"] == [
            {"name": "report.pdf", "size": 1024, "contentType": "application/pdf"},
            {"name": "data.csv", "size": 10, "contentType": "text/csv"},
        ]

    @patch('requests.post')
    def test_send_email_remote_failure(self, mock_post):
        mock_post.return_value = create_error_response(400, "Invalid recipient")
        dispatcher = ToolDispatcher(create_graph_client)

        result = dispatcher.call_tool("send_email", {"to": ["x"], "subject": "s", "body": "b"})

        assert result.to_text() == "Erro: Erro ao enviar email: Invalid recipient"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
