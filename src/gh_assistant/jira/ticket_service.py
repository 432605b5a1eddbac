"""Jira ticket creation for first pushes of a new branch.

A ticket is created from the commit message and moved to "In Progress".
The transition is best-effort: the ticket exists either way.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from gh_assistant.config import JiraConfig
from gh_assistant.jira.client import JiraClient, JiraTransition, TicketError

logger = logging.getLogger(__name__)

TITLE_SEPARATOR = " - "
IN_PROGRESS_STATUS = "In Progress"
IN_PROGRESS_TRANSITION_NAMES = frozenset({"In Progress", "Start Progress", "Start"})


def select_in_progress_transition(
    transitions: Sequence[JiraTransition],
) -> JiraTransition | None:
    for t in transitions:
        if t.name in IN_PROGRESS_TRANSITION_NAMES or t.to.name == IN_PROGRESS_STATUS:
            return t
    return None


def format_title(issue_key: str, message: str) -> str:
    return f"{issue_key}{TITLE_SEPARATOR}{message}"


class JiraTicketService:
    """High-level, testable ticket creation."""

    def __init__(self, config: JiraConfig, client: JiraClient | None = None) -> None:
        self._config = config
        self._client = client

    def is_configured(self) -> bool:
        c = self._config
        return bool(c.base_url and c.email and c.api_token and c.project)

    @property
    def client(self) -> JiraClient:
        if self._client is None:
            self._client = JiraClient(
                base_url=self._config.base_url,
                email=self._config.email,
                api_token=self._config.api_token,
                timeout_seconds=self._config.timeout_seconds,
            )
        return self._client

    def create_with_title(self, message: str) -> str:
        """Create a Task for `message` and return "<KEY> - <first line of message>".

        Jira summaries are single-line, so only the first line of a multi-line
        commit message becomes the summary and the returned title.

        Raises:
            TicketError: If the issue could not be created.
        """
        if not self.is_configured():
            raise TicketError("Jira is not configured")

        summary = message.strip().splitlines()[0] if message.strip() else message
        issue = self.client.create_issue(project=self._config.project, summary=summary)

        try:
            self.transition_to_in_progress(issue.key)
        except TicketError as e:
            logger.warning(
                "Could not transition issue to In Progress",
                extra={"key": issue.key, "error": str(e)},
            )

        return format_title(issue.key, summary)

    def transition_to_in_progress(self, issue_key: str) -> None:
        transitions = self.client.get_transitions(issue_key)
        chosen = select_in_progress_transition(transitions)
        if chosen is None:
            raise TicketError(f"No 'In Progress' transition available for issue {issue_key}")
        self.client.do_transition(issue_key, chosen.id)

    def issue_url(self, issue_key: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/browse/{issue_key}"
