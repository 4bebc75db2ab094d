"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio
from pathlib import Path

from github_ado_sync.configuration import reconcile
from github_ado_sync.configuration.models import SyncConfig


def get_sync_config(
    config_file: Path | None = None,
    log_level: str | None = None,
    ado_token: str | None = None,
    github_token: str | None = None,
    repository: str | None = None,
) -> SyncConfig:
    """Synchronously get the reconciled synchronization configuration."""
    return asyncio.run(
        reconcile.reconcile_sync_configuration(
            cli_config_file=config_file,
            cli_log_level=log_level,
            cli_ado_token=ado_token,
            cli_github_token=github_token,
            cli_repository=repository,
        )
    )
