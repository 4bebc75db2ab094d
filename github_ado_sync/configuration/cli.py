"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import sys
from pathlib import Path

import structlog
import typer
from dotenv import load_dotenv
from typer import Option
from typing_extensions import Annotated

from github_ado_sync.configuration.driver import get_sync_config
from github_ado_sync.configuration.exceptions import ConfigurationError
from github_ado_sync.configuration.models import SyncConfig
from github_ado_sync.schemas.github_event import GitHubIssueEvent
from github_ado_sync.synchronize.driver import load_event_payload, run_event_workflow
from github_ado_sync.synchronize.results import SyncRunResult
from github_ado_sync.utils.logging import configure_logging

load_dotenv()

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

typer_app = typer.Typer(pretty_exceptions_show_locals=False)

ConfigFileOption = Annotated[Path | None, Option(envvar="CONFIG_FILE", help="Path to the JSON configuration file.")]
LogLevelOption = Annotated[str | None, Option(envvar="LOG_LEVEL", help="Log level: trace, debug, info, warn, error or silent.")]
AdoTokenOption = Annotated[str | None, Option(envvar="ADO_TOKEN", help="Azure DevOps personal access token.")]
GitHubTokenOption = Annotated[str | None, Option(envvar="GITHUB_TOKEN", help="GitHub token used to update issues.")]
RepositoryOption = Annotated[str | None, Option(envvar="GITHUB_REPOSITORY", help="Repository name (owner/repo).")]


def _load_config(
    config_file: Path | None,
    log_level: str | None,
    ado_token: str | None,
    github_token: str | None,
    repository: str | None,
) -> SyncConfig:
    try:
        config = get_sync_config(
            config_file=config_file,
            log_level=log_level,
            ado_token=ado_token,
            github_token=github_token,
            repository=repository,
        )
    except ConfigurationError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        sys.exit(1)
    configure_logging(config.log_level)
    return config


def _report(result: SyncRunResult) -> None:
    if result.reverse_result is not None:
        typer.echo(f"Updated {result.reverse_result.updated_count} issue(s) from Azure DevOps")
        for error in result.reverse_result.errors:
            typer.echo(f"Work item {error['work_item_id']}: {error['error']}", err=True)
    if result.failed:
        typer.echo("Error(s) encountered while synchronizing:", err=True)
        for err in result.errors:
            typer.echo(str(err), err=True)
        sys.exit(1)


@typer_app.command(name="sync-event")
def sync_event_cli(
    event_path: Annotated[Path, Option(envvar="GITHUB_EVENT_PATH", help="Path to the GitHub event payload JSON.")],
    config_file: ConfigFileOption = None,
    log_level: LogLevelOption = None,
    ado_token: AdoTokenOption = None,
    github_token: GitHubTokenOption = None,
    repository: RepositoryOption = None,
) -> None:
    """Synchronize the GitHub issue event in EVENT_PATH with Azure DevOps."""
    config = _load_config(config_file, log_level, ado_token, github_token, repository)
    try:
        event = load_event_payload(event_path)
    except (ConfigurationError, ValueError) as exc:
        typer.echo(f"Cannot read GitHub event payload: {exc}", err=True)
        sys.exit(1)
    logger.info("Loaded GitHub event payload", event_path=str(event_path), action=event.action)
    _report(asyncio.run(run_event_workflow(event, config)))


@typer_app.command(name="update-issues")
def update_issues_cli(
    config_file: ConfigFileOption = None,
    log_level: LogLevelOption = None,
    ado_token: AdoTokenOption = None,
    github_token: GitHubTokenOption = None,
    repository: RepositoryOption = None,
) -> None:
    """Update GitHub issues from work items changed in Azure DevOps during the last day."""
    config = _load_config(config_file, log_level, ado_token, github_token, repository)
    event = GitHubIssueEvent(inputs={"manual_trigger": True})
    _report(asyncio.run(run_event_workflow(event, config)))


if __name__ == "__main__":
    typer_app()
