"""
Calendar Operations Module

Provides functions for interacting with Microsoft Graph Calendar API:
- List calendar events
- Create event

@author: Generated for outlook_mcp repository
"""

import requests
import logging
from typing import List, Dict, Any, Optional
from .auth import GraphClient
from .utils import to_graph_error


logger = logging.getLogger("outlook_mcp")

# Applied to every created event, independent of input and configuration.
EVENT_TIMEZONE = "America/Sao_Paulo"


class CalendarClient:
    """
    Client for Microsoft Graph Calendar API operations.
    """

    def __init__(self, graph_client: GraphClient):
        """
        Initialize calendar client.

        Args:
            graph_client: Authenticated GraphClient instance
        """
        self.graph_client = graph_client
        self.base_url = f"{graph_client.base_url}/me"

    def list_events(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        limit: int = 20
    ) -> List[Dict[str, Any]]:
        """
        Retrieve calendar events ordered by start time.

        The range filter only applies when both bounds are given. Bounds are
        passed to Graph exactly as received, without timezone conversion.

        Args:
            start_date: Inclusive lower bound on start/dateTime (ISO 8601)
            end_date: Inclusive upper bound on end/dateTime (ISO 8601)
            limit: Maximum number of events ($top)

        Returns:
            List of event dictionaries from Graph API
        """
        url = f"{self.base_url}/events"
        params = {
            "$top": limit,
            "$orderby": "start/dateTime",
        }
        if start_date and end_date:
            params["$filter"] = f"start/dateTime ge '{start_date}' and end/dateTime le '{end_date}'"

        try:
            logger.info(f"Retrieving up to {limit} calendar events")
            headers = self.graph_client.get_headers()
            response = requests.get(url, headers=headers, params=params)
            response.raise_for_status()

            events = response.json().get("value", [])
            logger.info(f"Retrieved {len(events)} calendar events from Microsoft Graph")
            return events

        except requests.exceptions.RequestException as e:
            raise to_graph_error(e, "retrieving calendar events")

    def create_event(self, event_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a new calendar event.

        Args:
            event_data: Event data dictionary (Graph API format)

        Returns:
            Created event dictionary
        """
        try:
            url = f"{self.base_url}/events"
            headers = self.graph_client.get_headers()
            response = requests.post(url, headers=headers, json=event_data)
            response.raise_for_status()

            created_event = response.json()
            logger.info(f"Created event: {created_event.get('subject', 'Untitled')}")
            return created_event

        except requests.exceptions.RequestException as e:
            raise to_graph_error(e, "creating event")


def build_event_payload(
    subject: str,
    start: str,
    end: str,
    body: str = "",
    location: str = "",
    attendees: Optional[List[str]] = None,
    is_online: bool = False
) -> Dict[str, Any]:
    """
    Build a Graph event resource.

    Args:
        subject: Event title
        start: Start date/time (ISO 8601, local to EVENT_TIMEZONE)
        end: End date/time (ISO 8601, local to EVENT_TIMEZONE)
        body: HTML description
        location: Location display name
        attendees: Email addresses, all invited as required attendees
        is_online: Whether to create an online meeting

    Returns:
        Event dictionary in Graph API format
    """
    event = {
        "subject": subject,
        "body": {
            "contentType": "HTML",
            "content": body
        },
        "start": {
            "dateTime": start,
            "timeZone": EVENT_TIMEZONE
        },
        "end": {
            "dateTime": end,
            "timeZone": EVENT_TIMEZONE
        },
        "location": {
            "displayName": location
        },
        "isOnlineMeeting": is_online
    }

    if attendees:
        event["attendees"] = [
            {"emailAddress": {"address": addr}, "type": "required"} for addr in attendees
        ]

    return event
