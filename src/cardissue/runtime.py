"""Runtime helpers for CardIssue CLI orchestration."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from cardissue.config import ActionConfig, ConfigError, load_config
from cardissue.errors import classify_error, redact
from cardissue.event import EventError
from cardissue.logging import get_logger
from cardissue.parser import NoteError
from cardissue.runner import RunError

# Failures that end a run with a failed status instead of a traceback.
FATAL_ERRORS: tuple[type[Exception], ...] = (ConfigError, EventError, NoteError, RunError)


class _HandlerCallable(Protocol):
    def __call__(self) -> Any: ...


def prepare_config(
    args: Any, *, loader: Callable[[Any], ActionConfig] = load_config
) -> ActionConfig:
    """Load ActionConfig and apply command line overrides."""
    if not hasattr(args, "config"):
        raise AttributeError("Command namespace is missing 'config' attribute")
    cfg = loader(args.config)
    repo_override = getattr(args, "repo", None)
    if repo_override:
        cfg.repo = repo_override
    if getattr(args, "dry_run", False):
        cfg.dry_run = True
    if getattr(args, "quiet", False):
        cfg.logging_level = "WARNING"
    return cfg


def execute_command(handler: _HandlerCallable, command: str) -> int:
    """Run a command handler; fatal errors mark the run failed (exit 1)."""
    try:
        result = handler()
    except FATAL_ERRORS as exc:
        info = classify_error(exc)
        get_logger().error(info.message, category=info.category, command=command)
        return 1
    except Exception as exc:
        get_logger().log_error(f"unhandled error: {redact(str(exc))}", command=command)
        raise
    return int(result) if result is not None else 0


__all__ = ["FATAL_ERRORS", "execute_command", "prepare_config"]
