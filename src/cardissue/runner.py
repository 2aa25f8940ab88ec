"""One card-to-issue run.

The steps are strictly sequential; each external call depends on the
previous result and none is retried. Any failure after parsing aborts the
run before the issue update, so an issue is either fully updated or left
as the conversion produced it.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol

import requests

from .config import ActionConfig
from .event import Trigger, TriggerKind
from .github_rest import GitHubAPIError
from .labels import LabelResolver, LabelStore
from .logging import StructuredLogger, get_logger
from .models import ParsedNote
from .parser import apply_author_fallback, parse_note

_API_ERRORS = (GitHubAPIError, requests.RequestException)


class RunError(RuntimeError):
    pass


class IssueClient(LabelStore, Protocol):
    def convert_card_to_issue(
        self,
        *,
        repository_id: str | None,
        card_id: str | None,
        title: str,
        body: str,
    ) -> int | None: ...

    def card_issue_number(self, *, card_id: str | None) -> int | None: ...

    def update_issue(
        self,
        *,
        number: int,
        assignees: Iterable[str] | None = None,
        labels: Iterable[str] | None = None,
        body: str | None = None,
    ) -> Any: ...


@dataclass
class RunResult:
    kind: TriggerKind
    note: ParsedNote
    issue_number: int | None
    dry_run: bool = False


def _log_parsed(logger: StructuredLogger, note: ParsedNote) -> None:
    logger.debug(
        "parsed data:\n"
        f"title: {note.title}\n"
        f"assignees: {', '.join(note.assignees)}\n"
        f"labels: {', '.join(note.labels)}\n"
        f"body: {note.body}"
    )


def _resolve_issue_number(
    trigger: Trigger, note: ParsedNote, client: IssueClient, logger: StructuredLogger
) -> int | None:
    if trigger.kind is TriggerKind.CREATED:
        try:
            number = client.convert_card_to_issue(
                repository_id=trigger.repository_node_id,
                card_id=trigger.card_node_id,
                title=note.title,
                body=note.body,
            )
        except _API_ERRORS as exc:
            raise RunError(f"failed to convert card to issue: {exc}") from exc
        logger.log_issue_action("converted", trigger.card_node_id, number)
        return number
    # converted by hand: the webhook payload does not name the new issue
    try:
        return client.card_issue_number(card_id=trigger.card_node_id)
    except _API_ERRORS as exc:
        raise RunError(f"failed to get information of converted issue: {exc}") from exc


def run(
    trigger: Trigger,
    cfg: ActionConfig,
    client: IssueClient,
    logger: StructuredLogger | None = None,
) -> RunResult:
    logger = logger or get_logger()
    logger.log_operation(f"card_{trigger.kind.value}", card_id=trigger.card_node_id)
    logger.debug(f"rawNote:\n{trigger.raw_note}")

    resolver = LabelResolver(client, logger=logger)
    note = parse_note(trigger.raw_note, resolver)
    note = apply_author_fallback(
        note, trigger.actor, enabled=cfg.assign_author, logger=logger
    )
    _log_parsed(logger, note)

    if cfg.dry_run:
        logger.log_issue_action(
            f"{trigger.kind.value}_planned",
            trigger.card_node_id,
            dry_run=True,
            plan=json.dumps(note.to_dict()),
        )
        return RunResult(kind=trigger.kind, note=note, issue_number=None, dry_run=True)

    number = _resolve_issue_number(trigger, note, client, logger)
    if not isinstance(number, int) or isinstance(number, bool):
        raise RunError("failed to get issueId")
    logger.info(f"new issue number: #{number}")

    # a hand-converted issue still carries the raw note as its body
    body = note.body if trigger.kind is TriggerKind.CONVERTED else None
    with logger.timed_operation("issue_update", issue_number=number):
        try:
            client.update_issue(
                number=number,
                assignees=note.assignees,
                labels=note.labels,
                body=body,
            )
        except _API_ERRORS as exc:
            raise RunError(f"failed to set labels and assignees to issue: {exc}") from exc
    logger.log_issue_action("updated", trigger.card_node_id, number)
    logger.info("Done!")
    return RunResult(kind=trigger.kind, note=note, issue_number=number)


__all__ = ["IssueClient", "RunError", "RunResult", "run"]
