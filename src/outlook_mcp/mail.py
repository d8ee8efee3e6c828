"""
Mail Operations Module

Provides functions for interacting with Microsoft Graph Mail API:
- List messages in a mail folder
- Read a single message and its attachment metadata
- Send email messages

All failures raise GraphError; callers decide how to present them.

@author: Generated for outlook_mcp repository
"""

import requests
import logging
from typing import List, Dict, Any, Optional
from .auth import GraphClient
from .utils import to_graph_error


logger = logging.getLogger("outlook_mcp")

MESSAGE_FIELDS = "subject,body,from,toRecipients,ccRecipients,receivedDateTime,hasAttachments"


def _recipients(addresses: List[str]) -> List[Dict[str, Any]]:
    return [{"emailAddress": {"address": addr}} for addr in addresses]


class MailClient:
    """
    Client for Microsoft Graph Mail API operations.
    """

    def __init__(self, graph_client: GraphClient):
        """
        Initialize mail client.

        Args:
            graph_client: Authenticated GraphClient instance
        """
        self.graph_client = graph_client
        self.base_url = f"{graph_client.base_url}/me"

    def list_messages(self, folder: str = "inbox", limit: int = 10, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List the newest messages of a mail folder.

        Args:
            folder: Folder id or well-known name (inbox, sentitems, drafts)
            limit: Maximum number of messages ($top)
            search: Optional full-text search term

        Returns:
            List of message dictionaries from Graph API
        """
        url = f"{self.base_url}/mailFolders/{folder}/messages"
        params = {
            "$top": limit,
            "$orderby": "receivedDateTime desc",
        }
        if search:
            params["$search"] = f'"{search}"'

        try:
            logger.info(f"Listing {limit} messages from folder '{folder}'")
            headers = self.graph_client.get_headers()
            response = requests.get(url, headers=headers, params=params)
            response.raise_for_status()
            return response.json().get("value", [])

        except requests.exceptions.RequestException as e:
            raise to_graph_error(e, f"listing messages in {folder}")

    def get_message(self, message_id: str) -> Dict[str, Any]:
        """
        Get a single email message by ID.

        Args:
            message_id: Message ID from Microsoft Graph

        Returns:
            Message dictionary restricted to MESSAGE_FIELDS
        """
        try:
            url = f"{self.base_url}/messages/{message_id}"
            headers = self.graph_client.get_headers()
            response = requests.get(url, headers=headers, params={"$select": MESSAGE_FIELDS})
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as e:
            raise to_graph_error(e, f"retrieving message {message_id}")

    def list_attachments(self, message_id: str) -> List[Dict[str, Any]]:
        """
        List the attachments of a message.

        Args:
            message_id: Message ID from Microsoft Graph

        Returns:
            List of attachment dictionaries from Graph API
        """
        try:
            url = f"{self.base_url}/messages/{message_id}/attachments"
            headers = self.graph_client.get_headers()
            response = requests.get(url, headers=headers)
            response.raise_for_status()
            return response.json().get("value", [])

        except requests.exceptions.RequestException as e:
            raise to_graph_error(e, f"listing attachments of {message_id}")

    def send_mail(
        self,
        to: List[str],
        subject: str,
        body: str,
        cc: Optional[List[str]] = None,
        content_type: str = "Text"
    ) -> None:
        """
        Send an email message and keep a copy in Sent Items.

        Args:
            to: Recipient email addresses
            subject: Email subject
            body: Email body content
            cc: List of CC email addresses (optional)
            content_type: Content type - "Text" or "HTML" (default: "Text")
        """
        message = {
            "subject": subject,
            "body": {
                "contentType": content_type,
                "content": body
            },
            "toRecipients": _recipients(to)
        }

        if cc:
            message["ccRecipients"] = _recipients(cc)

        try:
            logger.info(f"Sending email to: {', '.join(to)}")
            url = f"{self.base_url}/sendMail"
            headers = self.graph_client.get_headers()
            response = requests.post(url, headers=headers, json={"message": message, "saveToSentItems": True})
            response.raise_for_status()
            logger.info("Email sent successfully")

        except requests.exceptions.RequestException as e:
            raise to_graph_error(e, "sending email")
