"""Reconcile synchronization configuration from file, action inputs, and environment."""

import json
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from github_ado_sync.configuration.env import Settings, get_settings
from github_ado_sync.configuration.exceptions import (
    ConfigurationError,
    InvalidConfigurationSourceError,
    RequiredConfigurationElementError,
)
from github_ado_sync.configuration.models import SyncConfig

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def load_configuration_file(config_file: Path | None) -> dict[str, Any]:
    """Load the JSON configuration file, if one is configured.

    A configured but missing file is logged and treated as empty, matching the
    behavior of running the action without a configuration file.
    """
    if config_file is None:
        return {}
    if not config_file.exists():
        logger.error("JSON configuration file not found", config_file=str(config_file))
        return {}
    try:
        with open(config_file, encoding="utf-8") as f:
            content = json.load(f)
    except json.JSONDecodeError as exc:
        raise InvalidConfigurationSourceError(str(config_file), str(exc)) from exc
    if not isinstance(content, dict):
        raise InvalidConfigurationSourceError(str(config_file), "top-level value must be an object")
    logger.debug("JSON configuration file loaded", config_file=str(config_file))
    return content


async def parse_action_input(raw: str | None, key: str) -> dict[str, Any]:
    """Parse an action input shaped like `{"<key>": {...}}` and return the inner object."""
    if not raw:
        return {}
    try:
        content = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidConfigurationSourceError(f"action input '{key}'", str(exc)) from exc
    if not isinstance(content, dict):
        raise InvalidConfigurationSourceError(f"action input '{key}'", "value must be an object")
    section = content.get(key, {})
    if not isinstance(section, dict):
        raise InvalidConfigurationSourceError(f"action input '{key}'", f"'{key}' must be an object")
    return section


async def validate_sync_configuration(config: SyncConfig) -> SyncConfig:
    """Validates that every element needed to reach Azure DevOps is present.

    Raises:
        RequiredConfigurationElementError: If a required element is missing.
    """
    if not config.ado.organization:
        raise RequiredConfigurationElementError("Azure DevOps organization", "ado.organization")
    if not config.ado.project:
        raise RequiredConfigurationElementError("Azure DevOps project", "ado.project")
    if not config.ado.wit:
        raise RequiredConfigurationElementError("Azure DevOps work item type", "ado.wit")
    if not config.ado.token:
        raise RequiredConfigurationElementError("Azure DevOps personal access token", "ado.token", "ADO_TOKEN")
    return config


async def reconcile_sync_configuration(
    cli_config_file: Path | None = None,
    cli_log_level: str | None = None,
    cli_ado_token: str | None = None,
    cli_github_token: str | None = None,
    cli_repository: str | None = None,
    settings: Settings | None = None,
) -> SyncConfig:
    """Merge configuration sources into a validated `SyncConfig`.

    Precedence, lowest first: JSON configuration file, action inputs,
    environment variables, command line options.
    """
    settings = settings or get_settings()
    file_config = await load_configuration_file(cli_config_file or settings.CONFIG_FILE)
    input_ado = await parse_action_input(settings.INPUT_ADO, "ado")
    input_github = await parse_action_input(settings.INPUT_GITHUB, "github")

    ado: dict[str, Any] = {**file_config.get("ado", {}), **input_ado}
    github: dict[str, Any] = {**file_config.get("github", {}), **input_github}
    ado_token = cli_ado_token or settings.ADO_TOKEN
    if ado_token:
        ado["token"] = ado_token
    github_token = cli_github_token or settings.GITHUB_TOKEN
    if github_token:
        github["token"] = github_token
    github.setdefault("api_url", settings.GITHUB_API_URL)

    raw_config: dict[str, Any] = {
        "log_level": cli_log_level or settings.LOG_LEVEL or file_config.get("log_level") or "info",
        "repository": cli_repository or settings.GITHUB_REPOSITORY,
        "repository_owner": settings.GITHUB_REPOSITORY_OWNER,
        "ado": ado,
        "github": github,
    }
    if file_config.get("exclude_label"):
        raw_config["exclude_label"] = file_config["exclude_label"]

    try:
        config = SyncConfig.model_validate(raw_config)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid synchronization configuration: {exc}") from exc

    if config.repository and not config.repository_owner:
        config.repository_owner = config.repository.split("/")[0]

    return await validate_sync_configuration(config)
