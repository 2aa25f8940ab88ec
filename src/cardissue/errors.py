"""Error classification & redaction for run failures.

Failure messages end up in workflow logs, which are often public, so every
message that leaves the fatal-error boundary passes through ``redact``.
``classify_error`` gives each failure a coarse category for structured logs.

Public API:
- classify_error(exc) -> ErrorInfo
- redact(text) -> str

Exceptions may carry a class attribute ``category`` to classify themselves
(``NoteError`` -> ``note``, ``ConfigError`` -> ``config``); message keyword
matching covers API and transport failures.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"ghp_[A-Za-z0-9]{20,40}"),  # GitHub classic tokens
    re.compile(r"ghs_[A-Za-z0-9]{20,40}"),  # Actions installation tokens
    re.compile(r"github_pat_\w{20,}"),  # GitHub fine-grained tokens
    re.compile(r"(?i)bearer\s+[A-Za-z0-9_.\-]{20,}"),
]

_REDACTION_PLACEHOLDER = "<redacted>"


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    transient: bool = False
    details: dict[str, Any] | None = None


def redact(text: str) -> str:
    """Replace token-looking substrings with a placeholder."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def classify_error(exc: BaseException) -> ErrorInfo:
    """Best-effort classification of an exception.

    - Self-declared ``category`` attribute wins
    - Rate limit / abuse wording -> 'github.rate_limit' / 'github.abuse', transient
    - Network-y keywords -> 'network', transient
    - Fallback -> 'generic'
    """
    msg = str(exc) if exc else ""
    low = msg.lower()
    name = exc.__class__.__name__

    declared = getattr(exc, "category", None)
    if isinstance(declared, str) and declared:
        return ErrorInfo(declared, redact(msg), name)
    if "rate limit" in low or "secondary rate" in low:
        return ErrorInfo("github.rate_limit", redact(msg), name, transient=True)
    if "abuse" in low:
        return ErrorInfo("github.abuse", redact(msg), name, transient=True)
    if any(k in low for k in ("timeout", "timed out", "connection", "temporarily unavailable")):
        return ErrorInfo("network", redact(msg), name, transient=True)
    return ErrorInfo("generic", redact(msg), name)


__all__ = ["ErrorInfo", "classify_error", "redact"]
