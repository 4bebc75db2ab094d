"""Finds the Azure DevOps work item that mirrors a GitHub issue."""

import structlog

from github_ado_sync.azure_devops.abc import WorkItemClientBase
from github_ado_sync.schemas.work_item import WorkItem
from github_ado_sync.synchronize.fields import issue_tag, repository_tag

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def locate_work_item(
    ado_adapter: WorkItemClientBase,
    repository: str,
    issue_number: int,
    skip_query: bool = False,
) -> WorkItem | None:
    """Return the work item tagged with the issue number and repository, or None.

    When several work items match, the first one the query returns is used and
    the others are reported, since the query gives no ordering guarantee.
    Transport failures propagate to the caller.
    """
    if skip_query:
        logger.info("Skipping work item query", repository=repository, issue_number=issue_number)
        return None

    logger.info("Searching for work item", repository=repository, issue_number=issue_number)
    references = await ado_adapter.query_by_tags([issue_tag(issue_number), repository_tag(repository)])

    if not references:
        logger.info("Work item not found", repository=repository, issue_number=issue_number)
        return None

    if len(references) > 1:
        logger.warning(
            "More than one work item found, taking the first one",
            repository=repository,
            issue_number=issue_number,
            work_item_ids=[reference.id for reference in references],
            selected_work_item_id=references[0].id,
        )

    logger.info("Work item found", work_item_id=references[0].id, issue_number=issue_number)
    return await ado_adapter.get_work_item(references[0].id)
