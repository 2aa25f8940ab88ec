"""CardIssue CLI.

Subcommands:
  run    -> convert the triggering project card into an issue (GitHub Actions step)
  parse  -> parse a note offline against a fixed label list and print JSON
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from cardissue.config import ConfigError
from cardissue.env_auth import EnvironmentAuthManager
from cardissue.event import load_trigger
from cardissue.github_rest import GitHubRestClient
from cardissue.labels import LabelResolver, StaticLabelStore
from cardissue.logging import configure_logging
from cardissue.parser import apply_author_fallback, parse_note
from cardissue.runner import run
from cardissue.runtime import execute_command, prepare_config

REPO_HELP = "Override target repository (owner/repo)"

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    p = _FormatterArgumentParser(
        prog="cardissue", description="Turn project card notes into GitHub issues"
    )
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )

    pr = sub.add_parser("run", help="Convert the triggering card and update the issue")
    pr.add_argument("--config", help="YAML config (default: card_issue.config.yaml if present)")
    pr.add_argument("--event", help="Event payload JSON (default: $GITHUB_EVENT_PATH)")
    pr.add_argument("--repo", help=REPO_HELP)
    pr.add_argument("--dry-run", action="store_true", help="Parse and log, but do not write")
    pr.add_argument("--quiet", action="store_true", help="Only log warnings and errors")

    pp = sub.add_parser("parse", help="Parse a note and print the issue fields as JSON")
    pp.add_argument("--file", help="Read the note from a file instead of stdin")
    pp.add_argument(
        "--label",
        action="append",
        default=[],
        metavar="NAME",
        help="Repository label name (repeatable)",
    )
    pp.add_argument("--actor", help="Login used by --assign-author")
    pp.add_argument(
        "--assign-author",
        action="store_true",
        help="Assign --actor when the note names nobody",
    )
    return p


def _default_log_format() -> str:
    return "actions" if EnvironmentAuthManager.is_actions_environment() else "text"


def _cmd_run(args: argparse.Namespace) -> int:
    trigger, payload = load_trigger(args.event)
    cfg = prepare_config(args)
    logger = configure_logging(cfg.logging_format, cfg.logging_level)
    logger.debug(f"github.context.payload:\n{json.dumps(payload, indent=4)}")
    if not cfg.token:
        raise ConfigError("GitHub token is not provided. See README and fix your workflow.")
    repo = cfg.repo or trigger.repo
    if not repo:
        raise ConfigError("target repository is unknown; set GITHUB_REPOSITORY or pass --repo")
    client = GitHubRestClient(
        token=cfg.token, repo=repo, base_url=cfg.api_url, graphql_url=cfg.graphql_url
    )
    run(trigger, cfg, client, logger)
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    if args.assign_author and not args.actor:
        raise ConfigError("--assign-author needs --actor")
    text = Path(args.file).read_text(encoding="utf-8") if args.file else sys.stdin.read()
    logger = configure_logging("text", "WARNING")
    resolver = LabelResolver(StaticLabelStore(args.label), logger=logger)
    note = parse_note(text, resolver)
    note = apply_author_fallback(
        note, args.actor or "", enabled=args.assign_author, logger=logger
    )
    print(json.dumps(note.to_dict(), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(_default_log_format())
    handlers = {"run": _cmd_run, "parse": _cmd_parse}
    handler = handlers.get(args.cmd)
    if handler is None:  # pragma: no cover - argparse enforces valid choices
        parser.print_help()
        return 1
    return execute_command(lambda: handler(args), args.cmd)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
