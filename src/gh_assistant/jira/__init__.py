"""Jira integration."""

from gh_assistant.jira.client import JiraClient, TicketError
from gh_assistant.jira.ticket_service import JiraTicketService

__all__ = ["JiraClient", "JiraTicketService", "TicketError"]
