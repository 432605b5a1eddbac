"""Jira REST API client.

This intentionally wraps requests to keep HTTP calls out of workflow code and make tests easy.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

API_PREFIX = "/rest/api/3"


class TicketError(Exception):
    """Raised when a Jira request fails."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class JiraIssue(BaseModel):
    """Minimal issue metadata returned from Jira on creation."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    key: str
    self_url: str = Field(default="", alias="self")


class JiraStatus(BaseModel):
    name: str = ""


class JiraTransition(BaseModel):
    id: str
    name: str = ""
    to: JiraStatus = Field(default_factory=JiraStatus)


class JiraClient:
    """Small wrapper around the Jira Cloud REST API (v3)."""

    def __init__(
        self,
        *,
        base_url: str,
        email: str,
        api_token: str,
        timeout_seconds: float = 60.0,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("Jira base URL is required")

        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._session = session or requests.Session()
        self._session.auth = (email, api_token)
        self._session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": "gh-assistant",
            }
        )

    def _url(self, path: str) -> str:
        return f"{self._base_url}{API_PREFIX}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, *, payload: dict[str, Any] | None = None) -> Any:
        url = self._url(path)
        try:
            resp = self._session.request(method, url, json=payload, timeout=self._timeout)
        except requests.RequestException as e:
            raise TicketError(f"Jira request failed: {e}") from e

        if resp.status_code < 200 or resp.status_code >= 300:
            raise TicketError(
                f"Jira API error (status {resp.status_code}): {resp.text}",
                status_code=resp.status_code,
            )

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise TicketError(f"Failed to parse Jira response: {e}") from e

    def create_issue(self, *, project: str, summary: str, issue_type: str = "Task") -> JiraIssue:
        payload = {
            "fields": {
                "project": {"key": project},
                "summary": summary,
                "issuetype": {"name": issue_type},
            }
        }
        data = self._request("POST", "issue", payload=payload)
        try:
            issue = JiraIssue.model_validate(data)
        except ValidationError as e:
            raise TicketError(f"Unexpected Jira create response: {e}") from e

        logger.info("Jira issue created", extra={"key": issue.key, "project": project})
        return issue

    def get_transitions(self, issue_key: str) -> list[JiraTransition]:
        data = self._request("GET", f"issue/{issue_key}/transitions")
        raw = data.get("transitions", []) if isinstance(data, dict) else []
        try:
            return [JiraTransition.model_validate(item) for item in raw]
        except ValidationError as e:
            raise TicketError(f"Unexpected Jira transitions response: {e}") from e

    def do_transition(self, issue_key: str, transition_id: str) -> None:
        self._request(
            "POST",
            f"issue/{issue_key}/transitions",
            payload={"transition": {"id": transition_id}},
        )
        logger.info(
            "Jira issue transitioned", extra={"key": issue_key, "transition_id": transition_id}
        )
