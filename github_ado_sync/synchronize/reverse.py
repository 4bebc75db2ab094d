"""Reconciles recently changed Azure DevOps work items back onto their GitHub issues."""

import asyncio
from dataclasses import dataclass
from typing import Any, Literal

import structlog

from github_ado_sync.azure_devops.abc import WorkItemClientBase
from github_ado_sync.configuration.models import SyncConfig
from github_ado_sync.github.abc import GitHubClientBase
from github_ado_sync.schemas.work_item import WorkItem
from github_ado_sync.synchronize.fields import derive_state_key, issue_state_for_key, repository_tag, resolve_github_handle
from github_ado_sync.synchronize.models import ReverseSyncDecision
from github_ado_sync.synchronize.results import ReverseSyncBatchResult, ReverseSyncResult
from github_ado_sync.synchronize.utils import has_label, is_strictly_newer, login_of
from github_ado_sync.utils.constants import LINE_BREAK_MARKER, REVERSE_SYNC_FIELDS
from github_ado_sync.utils.markup import TextConverter

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

# Work items changed since this many days ago are reconciled on each scheduled run.
RECENTLY_CHANGED_DAYS = 1


@dataclass
class IssueCandidate:
    """The issue values derived from a work item."""

    title: str
    body: str
    state: Literal["open", "closed"] | None
    assignee: str | None

    def matches(self, issue: Any) -> bool:
        """Whether the issue already carries these values.

        A candidate without a state leaves the issue state alone, so it never
        counts as a difference. Assignees compare case-insensitively.
        """
        if self.title != (issue.title or ""):
            return False
        if self.body != (issue.body or ""):
            return False
        if self.state is not None and self.state != issue.state:
            return False
        current_assignee = login_of(issue.assignee)
        return (self.assignee or "").lower() == (current_assignee or "").lower()


def build_issue_candidate(work_item: WorkItem, config: SyncConfig, converter: TextConverter) -> IssueCandidate:
    """Derive title, body, state, and assignee for the issue from the work item."""
    body = converter.to_markdown(work_item.description or "").replace(LINE_BREAK_MARKER, "").strip()
    state_key = derive_state_key(config.ado.states, work_item.state)
    return IssueCandidate(
        title=work_item.title or "",
        body=body,
        state=issue_state_for_key(state_key),
        assignee=resolve_github_handle(config.ado.handles, work_item.assigned_to),
    )


async def reconcile_work_item(
    work_item_id: int,
    config: SyncConfig,
    ado_adapter: WorkItemClientBase,
    github_adapter: GitHubClientBase,
    converter: TextConverter,
) -> ReverseSyncResult:
    """Bring one GitHub issue in line with its work item when the work item is newer.

    The work item must have changed strictly after the issue, and the issue
    must not carry the exclude label. At most one issue update is issued.
    """
    log = logger.bind(work_item_id=work_item_id)
    work_item = await ado_adapter.get_work_item(work_item_id, fields=REVERSE_SYNC_FIELDS)

    tags = work_item.tags
    issue_number = tags.issue_number
    if issue_number is None:
        log.debug("No issue number tag on work item, skipping")
        return ReverseSyncResult(work_item_id, ReverseSyncDecision.UNLINKED)
    if config.repository and tags.repository and tags.repository != config.repository:
        log.debug("Work item belongs to another repository, skipping", work_item_repository=tags.repository)
        return ReverseSyncResult(work_item_id, ReverseSyncDecision.UNLINKED, issue_number)

    log = log.bind(issue_number=issue_number)
    issue = await github_adapter.get_issue(issue_number)

    if has_label(issue.labels, config.exclude_label):
        log.info("Issue carries the exclude label, skipping", exclude_label=config.exclude_label)
        return ReverseSyncResult(work_item_id, ReverseSyncDecision.EXCLUDED, issue_number)

    if not is_strictly_newer(work_item.changed_date, issue.updated_at):
        log.debug(
            "Issue is as recent as the work item, skipping",
            work_item_changed_date=str(work_item.changed_date),
            issue_updated_at=str(issue.updated_at),
        )
        return ReverseSyncResult(work_item_id, ReverseSyncDecision.STALE, issue_number)

    candidate = build_issue_candidate(work_item, config, converter)
    if candidate.matches(issue):
        log.debug("Issue already matches work item, nothing to update")
        return ReverseSyncResult(work_item_id, ReverseSyncDecision.NOOP, issue_number)

    log.info("Updating issue from work item", state=candidate.state, assignee=candidate.assignee)
    updated = await github_adapter.update_issue(
        issue_number,
        title=candidate.title,
        body=candidate.body,
        state=candidate.state,
        assignees=[candidate.assignee] if candidate.assignee else [],
    )
    log.info("Successfully updated issue from work item")
    return ReverseSyncResult(work_item_id, ReverseSyncDecision.UPDATE, issue_number, updated)


async def update_issues(
    config: SyncConfig,
    ado_adapter: WorkItemClientBase,
    github_adapter: GitHubClientBase,
    converter: TextConverter,
) -> ReverseSyncBatchResult:
    """Reconcile every work item of the repository changed within the last day.

    Items are processed concurrently. A failure on one item is logged and
    recorded without affecting the others; a failing query propagates.
    """
    if not config.repository:
        raise ValueError("Reverse synchronization requires the GitHub repository")

    logger.info("Checking for recently changed work items", repository=config.repository)
    references = await ado_adapter.query_by_tags(
        [repository_tag(config.repository)],
        changed_within_days=RECENTLY_CHANGED_DAYS,
    )
    logger.info("Found recently changed work items", count=len(references))

    outcomes = await asyncio.gather(
        *(reconcile_work_item(reference.id, config, ado_adapter, github_adapter, converter) for reference in references),
        return_exceptions=True,
    )

    results: list[ReverseSyncResult] = []
    errors: list[dict[str, Any]] = []
    for reference, outcome in zip(references, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            logger.error("Failed to reconcile work item", work_item_id=reference.id, error=str(outcome))
            errors.append({"work_item_id": reference.id, "error": str(outcome)})
        else:
            results.append(outcome)

    batch = ReverseSyncBatchResult(results, errors)
    logger.info("Finished updating issues", updated=batch.updated_count, failed=len(errors))
    return batch
