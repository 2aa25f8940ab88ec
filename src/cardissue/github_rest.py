from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import requests

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"
USER_AGENT = "cardissue-rest/0.1.0"
HTTP_ERROR_STATUS = 400
REQUEST_TIMEOUT = 30

CONVERT_CARD_MUTATION = """
mutation($input: ConvertProjectCardNoteToIssueInput!) {
    convertProjectCardNoteToIssue(input: $input) {
        projectCard {
            content {
                ... on Issue {
                    number
                }
            }
        }
    }
}
"""

CARD_ISSUE_QUERY = """
query($cardId: ID!) {
    node(id: $cardId) {
        ... on ProjectCard {
            content {
                ... on Issue {
                    number
                }
            }
        }
    }
}
"""


class GitHubAPIError(RuntimeError):
    """Raised when the GitHub REST/GraphQL API returns an error."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        response_text: str | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.response_text = response_text


def _issue_number(card: Any) -> int | None:
    """Issue number from a ``ProjectCard`` shaped GraphQL object."""
    if not isinstance(card, dict):
        return None
    content = card.get("content")
    if not isinstance(content, dict):
        return None
    number = content.get("number")
    # bool is an int subclass; reject it explicitly
    if isinstance(number, int) and not isinstance(number, bool):
        return number
    return None


@dataclass
class GitHubRestClient:
    """Lightweight REST/GraphQL client for the calls a card conversion needs.

    Every call is made once; failures surface as ``GitHubAPIError`` (or the
    underlying ``requests`` exception for transport errors).
    """

    token: str
    repo: str
    base_url: str = DEFAULT_API_URL
    graphql_url: str = DEFAULT_GRAPHQL_URL
    session: requests.Session | None = None
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:  # pragma: no cover - simple wiring
        self._session = self.session or requests.Session()
        self._session.headers.setdefault("Authorization", f"Bearer {self.token}")
        self._session.headers.setdefault("Accept", "application/vnd.github+json")
        self._session.headers.setdefault("User-Agent", USER_AGENT)

    # ---- REST helpers -------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Any:
        url = (
            path
            if path.startswith("http")
            else f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        )
        response = self._session.request(
            method,
            url,
            params=params,
            json=json_body,
            headers=self._session.headers,
            timeout=REQUEST_TIMEOUT,
        )
        if response.status_code >= HTTP_ERROR_STATUS:
            raise GitHubAPIError(
                f"GitHub API {method} {url} failed with {response.status_code}",
                status=response.status_code,
                response_text=response.text,
            )
        if response.text:
            try:
                return response.json()
            except ValueError as exc:
                raise GitHubAPIError(
                    f"GitHub API {method} {url} returned invalid JSON",
                    status=response.status_code,
                    response_text=response.text,
                ) from exc
        return None

    def _paginate(
        self, path: str, *, params: dict[str, Any] | None = None
    ) -> list[Any]:
        params = dict(params or {})
        per_page = params.setdefault("per_page", 100)
        params.setdefault("page", 1)
        results: list[Any] = []
        while True:
            data = self._request("GET", path, params=params)
            if not isinstance(data, list):
                break
            results.extend(data)
            if len(data) < per_page:
                break
            params["page"] = params.get("page", 1) + 1
        return results

    # ---- Label / issue operations --------------------------------------
    def list_labels(self) -> list[dict[str, Any]]:
        data = self._paginate(f"/repos/{self.repo}/labels")
        return [entry for entry in data if isinstance(entry, dict)]

    def update_issue(
        self,
        *,
        number: int,
        assignees: Iterable[str] | None = None,
        labels: Iterable[str] | None = None,
        body: str | None = None,
    ) -> Any:
        payload: dict[str, Any] = {}
        if assignees is not None:
            payload["assignees"] = list(assignees)
        if labels is not None:
            payload["labels"] = list(labels)
        if body is not None:
            payload["body"] = body
        return self._request(
            "PATCH", f"/repos/{self.repo}/issues/{number}", json_body=payload
        )

    # ---- GraphQL ------------------------------------------------------
    def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        payload = {"query": query, "variables": variables or {}}
        data = self._request("POST", self.graphql_url, json_body=payload)
        if not isinstance(data, dict):
            raise GitHubAPIError("GraphQL response was not an object")
        if "errors" in data:
            raise GitHubAPIError(f"GraphQL query failed: {data['errors']}")
        result = data.get("data")
        return result if isinstance(result, dict) else {}

    def convert_card_to_issue(
        self,
        *,
        repository_id: str | None,
        card_id: str | None,
        title: str,
        body: str,
    ) -> int | None:
        data = self.graphql(
            CONVERT_CARD_MUTATION,
            {
                "input": {
                    "repositoryId": repository_id,
                    "projectCardId": card_id,
                    "title": title,
                    "body": body,
                }
            },
        )
        converted = data.get("convertProjectCardNoteToIssue")
        if not isinstance(converted, dict):
            return None
        return _issue_number(converted.get("projectCard"))

    def card_issue_number(self, *, card_id: str | None) -> int | None:
        data = self.graphql(CARD_ISSUE_QUERY, {"cardId": card_id})
        return _issue_number(data.get("node"))


__all__ = [
    "CARD_ISSUE_QUERY",
    "CONVERT_CARD_MUTATION",
    "DEFAULT_API_URL",
    "DEFAULT_GRAPHQL_URL",
    "GitHubAPIError",
    "GitHubRestClient",
]
