"""Applies the mutation set built for a GitHub event to its Azure DevOps work item."""

import structlog

from github_ado_sync.azure_devops.abc import WorkItemClientBase
from github_ado_sync.schemas.work_item import WorkItem
from github_ado_sync.synchronize.locator import locate_work_item
from github_ado_sync.synchronize.models import SyncOutcome
from github_ado_sync.synchronize.mutations import MutationContext, build_create_mutations, build_mutation_set
from github_ado_sync.synchronize.results import SyncResult

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def _submit_create(context: MutationContext, ado_adapter: WorkItemClientBase) -> WorkItem:
    mutation = build_create_mutations(context)
    work_item = await ado_adapter.create_work_item(mutation.to_patch(), bypass_rules=context.config.ado.bypass_rules)
    logger.info("Successfully created work item", work_item_id=work_item.id, issue_number=context.issue.number)
    return work_item


async def create_work_item(context: MutationContext, ado_adapter: WorkItemClientBase, skip_query: bool = False) -> SyncResult:
    """Create the work item for an issue unless one already exists.

    The lookup runs first so repeated `opened` deliveries never create a
    second work item for the same issue.
    """
    logger.info("Creating work item", issue_number=context.issue.number, repository=context.repository)
    existing = await locate_work_item(ado_adapter, context.repository, context.issue.number, skip_query=skip_query)
    if existing is not None:
        logger.warning("Work item already exists, canceling creation", work_item_id=existing.id, issue_number=context.issue.number)
        return SyncResult(SyncOutcome.ALREADY_EXISTS, existing.id, existing.changed_date)

    work_item = await _submit_create(context, ado_adapter)
    return SyncResult(SyncOutcome.CREATED, work_item.id, work_item.changed_date)


async def apply_event(context: MutationContext, ado_adapter: WorkItemClientBase) -> SyncResult:
    """Apply the event in `context` to its work item.

    Remote failures propagate; nothing is retried.
    """
    mutation = build_mutation_set(context)
    if mutation is None:
        return SyncResult(SyncOutcome.SKIPPED)

    if not mutation.requires_existing_work_item:
        return await create_work_item(context, ado_adapter)

    issue_number = context.issue.number
    work_item = await locate_work_item(ado_adapter, context.repository, issue_number)
    if work_item is None:
        if context.config.ado.auto_create:
            logger.warning("Cannot find work item, creating it", issue_number=issue_number, action=mutation.action.value)
            work_item = await _submit_create(context, ado_adapter)
        else:
            logger.warning("Cannot find work item, canceling update", issue_number=issue_number, action=mutation.action.value)
            return SyncResult(SyncOutcome.SKIPPED)

    # Rebuild against the located item so tag changes start from its current tags.
    mutation = build_mutation_set(context, work_item)
    if mutation is None:
        return SyncResult(SyncOutcome.SKIPPED, work_item.id)

    logger.info("Updating work item", work_item_id=work_item.id, issue_number=issue_number, action=mutation.action.value)
    updated = await ado_adapter.update_work_item(work_item.id, mutation.to_patch(), bypass_rules=context.config.ado.bypass_rules)
    logger.info("Successfully updated work item", work_item_id=updated.id, issue_number=issue_number)
    return SyncResult(SyncOutcome.UPDATED, updated.id, updated.changed_date)
