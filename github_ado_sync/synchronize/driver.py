"""Orchestrates the synchronization of one GitHub event with Azure DevOps."""

import json
import time
from pathlib import Path

import structlog
from githubkit.exception import RequestFailed

from github_ado_sync.azure_devops.abc import WorkItemClientBase
from github_ado_sync.azure_devops.adapter import AzureDevOpsAdapter
from github_ado_sync.azure_devops.exceptions import WorkItemServiceError
from github_ado_sync.configuration.exceptions import ConfigurationError, RequiredConfigurationElementError
from github_ado_sync.configuration.models import SyncConfig
from github_ado_sync.github.abc import GitHubClientBase
from github_ado_sync.github.adapter import GitHubKitAdapter
from github_ado_sync.schemas.github_event import GitHubIssueEvent
from github_ado_sync.synchronize.executor import apply_event
from github_ado_sync.synchronize.mutations import MutationContext
from github_ado_sync.synchronize.results import SyncRunResult
from github_ado_sync.synchronize.reverse import update_issues
from github_ado_sync.utils.markup import MarkdownConverter, TextConverter

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def load_event_payload(event_path: Path) -> GitHubIssueEvent:
    """Load the webhook payload GitHub Actions writes to GITHUB_EVENT_PATH."""
    if not event_path.exists():
        raise ConfigurationError(f"GitHub event payload not found: {event_path}")
    with open(event_path, encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"GitHub event payload is not valid JSON: {exc}") from exc
    return GitHubIssueEvent.model_validate(payload)


async def create_ado_adapter(config: SyncConfig) -> AzureDevOpsAdapter:
    """Create the Azure DevOps adapter for the configured project and work item type."""
    if not config.ado.token:
        raise RequiredConfigurationElementError("Azure DevOps personal access token", "ado.token", "ADO_TOKEN")
    return await AzureDevOpsAdapter.create(
        org_url=config.ado.org_url,
        token=config.ado.token,
        project=config.ado.project or "",
        work_item_type=config.ado.wit or "",
    )


async def create_github_adapter(config: SyncConfig) -> GitHubKitAdapter:
    """Create the GitHub adapter needed to write work item changes back onto issues."""
    if not config.github.token:
        raise RequiredConfigurationElementError("GitHub token", "github.token", "GITHUB_TOKEN")
    if not config.repository:
        raise RequiredConfigurationElementError("GitHub repository", "repository", "GITHUB_REPOSITORY")
    return await GitHubKitAdapter.create(
        repo=config.repository,
        github_token=config.github.token,
        github_api_url=config.github.api_url,
    )


async def _run(
    event: GitHubIssueEvent,
    config: SyncConfig,
    converter: TextConverter,
    ado_adapter: WorkItemClientBase,
    github_adapter: GitHubClientBase | None,
    run_result: SyncRunResult,
) -> None:
    if event.issue is not None:
        context = MutationContext(event, config, converter)
        run_result.sync_result = await apply_event(context, ado_adapter)
        logger.info(
            "Processed issue event",
            issue_number=event.issue.number,
            action=event.action,
            outcome=run_result.sync_result.outcome.value,
            work_item_id=run_result.sync_result.work_item_id,
        )

    if event.requests_issue_update:
        if github_adapter is None:
            github_adapter = await create_github_adapter(config)
        run_result.reverse_result = await update_issues(config, ado_adapter, github_adapter, converter)


async def run_event_workflow(
    event: GitHubIssueEvent,
    config: SyncConfig,
    converter: TextConverter | None = None,
    ado_adapter: WorkItemClientBase | None = None,
    github_adapter: GitHubClientBase | None = None,
) -> SyncRunResult:
    """Run one synchronization pass for an event.

    Issue events are applied to their work item. Scheduled or manually
    triggered runs then reconcile recently changed work items back onto their
    issues. Failures are collected on the returned result rather than raised.
    """
    run_result = SyncRunResult()
    if event.issue is not None and event.issue.is_pull_request:
        logger.info("Event concerns a pull request, skipping", issue_number=event.issue.number, node_id=event.issue.node_id)
        return run_result
    if event.issue is None and not event.requests_issue_update:
        logger.info("Event carries no issue and requests no issue update, nothing to do", action=event.action)
        return run_result

    converter = converter or MarkdownConverter()
    owns_ado_adapter = ado_adapter is None
    start_time = time.time()
    try:
        if ado_adapter is None:
            ado_adapter = await create_ado_adapter(config)
        await _run(event, config, converter, ado_adapter, github_adapter, run_result)
    except (WorkItemServiceError, RequestFailed, ConfigurationError, ValueError) as exc:
        logger.error("Synchronization failed", error=str(exc), error_type=type(exc).__name__)
        run_result.errors.append(str(exc))
    finally:
        if owns_ado_adapter and isinstance(ado_adapter, AzureDevOpsAdapter):
            await ado_adapter.aclose()

    logger.info("Synchronization finished", duration=round(time.time() - start_time, 2), failed=run_result.failed)
    return run_result
