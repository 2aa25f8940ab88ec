from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import yaml

from .env_auth import EnvAuthConfig, EnvironmentAuthManager, create_env_auth_manager
from .github_rest import DEFAULT_API_URL, DEFAULT_GRAPHQL_URL
from .logging import LOG_FORMATS

CONFIG_DEFAULT = "card_issue.config.yaml"

TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


class ConfigError(RuntimeError):
    category = "config"


@dataclass
class ActionConfig:
    token: str
    repo: str | None
    assign_author: bool
    dry_run: bool
    api_url: str
    graphql_url: str
    # Logging configuration
    logging_format: str
    logging_level: str


def get_input(name: str) -> str:
    """Value of an action input as exposed to the step (``INPUT_<NAME>``)."""
    return os.environ.get(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()


def get_boolean_input(name: str, default: bool) -> bool:
    """Boolean action input, YAML 1.2 core schema spellings only.

    An absent or empty input yields ``default``.
    """
    value = get_input(name)
    if not value:
        return default
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigError(
        f'Input does not meet YAML 1.2 "Core Schema" specification: {name}\n'
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


def _resolve_env_var(value: Any) -> Any:
    """Resolve environment variable if value starts with $."""
    if isinstance(value, str) and value.startswith('$'):
        return os.getenv(value[1:], '')
    return value


def _env_or(name: str, default: str) -> str:
    value = (os.environ.get(name) or "").strip()
    return value or default


def _load_raw(path: str | Path | None) -> dict[str, Any]:
    if path is None:
        default = Path(CONFIG_DEFAULT)
        if not default.is_file():
            return {}
        path = default
    p = Path(path)
    if not p.exists():
        raise ConfigError(f'Configuration file not found: {p}')
    try:
        loaded = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f'Invalid YAML in {p}: {exc}') from exc
    if not isinstance(loaded, dict):
        raise ConfigError(f'Configuration file {p} must contain a mapping')
    return cast(dict[str, Any], loaded)


def load_config(path: str | Path | None = None) -> ActionConfig:
    """Build the run configuration.

    Precedence: action inputs, then the YAML file, then environment
    defaults. ``path=None`` reads ``card_issue.config.yaml`` only if it
    exists in the working directory.
    """
    raw = _load_raw(path)
    gh = cast(dict[str, Any], raw.get('github', {}) or {})
    behavior = cast(dict[str, Any], raw.get('behavior', {}) or {})
    logging_config = cast(dict[str, Any], raw.get('logging', {}) or {})
    env_auth = cast(dict[str, Any], raw.get('environment', {}) or {})

    token = get_input('token') or str(_resolve_env_var(gh.get('token')) or '').strip()
    if not token:
        manager = create_env_auth_manager(
            EnvAuthConfig(
                load_dotenv=bool(env_auth.get('load_dotenv', True)),
                dotenv_path=env_auth.get('dotenv_path'),
            )
        )
        token = manager.get_github_token() or ''

    in_actions = EnvironmentAuthManager.is_actions_environment()
    logging_format = str(logging_config.get('format', 'actions' if in_actions else 'text'))
    if logging_format not in LOG_FORMATS:
        raise ConfigError(
            f"Unknown logging format {logging_format!r}; expected one of {', '.join(LOG_FORMATS)}"
        )

    return ActionConfig(
        token=token,
        repo=gh.get('repo') or _env_or('GITHUB_REPOSITORY', '') or None,
        assign_author=get_boolean_input(
            'assign_author', bool(behavior.get('assign_author', False))
        ),
        dry_run=get_boolean_input('dry_run', bool(behavior.get('dry_run', False))),
        api_url=str(gh.get('api_url') or _env_or('GITHUB_API_URL', DEFAULT_API_URL)),
        graphql_url=str(
            gh.get('graphql_url') or _env_or('GITHUB_GRAPHQL_URL', DEFAULT_GRAPHQL_URL)
        ),
        logging_format=logging_format,
        logging_level=str(
            logging_config.get('level', 'DEBUG' if logging_format == 'actions' else 'INFO')
        ),
    )


__all__ = [
    "ActionConfig",
    "CONFIG_DEFAULT",
    "ConfigError",
    "get_boolean_input",
    "get_input",
    "load_config",
]
