"""Azure DevOps Work Item Tracking adapter built on httpx."""

from functools import wraps
from typing import Any, Awaitable, Callable, Self, Sequence, TypeVar
from urllib.parse import quote

import httpx
import structlog

from github_ado_sync.schemas.work_item import PatchOperation, WorkItem, WorkItemReference
from github_ado_sync.utils.constants import JSON_PATCH_CONTENT_TYPE

from .abc import WorkItemClientBase
from .client import get_ado_client
from .exceptions import WorkItemAuthenticationError, WorkItemNotFoundError, WorkItemServiceError

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_ado_errors(func: F) -> F:
    """Decorator to translate transport and HTTP errors into WorkItemServiceError, logging details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            try:
                error_data = exc.response.json()
            except ValueError:
                error_data = {}
            message = error_data.get("message", exc.response.reason_phrase) if isinstance(error_data, dict) else exc.response.reason_phrase
            url = str(exc.request.url)
            logger.error(
                "Azure DevOps request failed",
                function=func.__name__,
                message=message,
                url=url,
                status_code=status_code,
            )
            error_cls: type[WorkItemServiceError] = WorkItemServiceError
            if status_code in (401, 403):
                error_cls = WorkItemAuthenticationError
            elif status_code == 404:
                error_cls = WorkItemNotFoundError
            raise error_cls(f"Azure DevOps error {status_code} in {func.__name__}: {message}", status_code=status_code, url=url) from exc
        except httpx.RequestError as exc:
            try:
                url: str | None = str(exc.request.url)
            except RuntimeError:
                url = None
            logger.error("Cannot connect to Azure DevOps organization", function=func.__name__, url=url, error=str(exc))
            raise WorkItemServiceError(f"Azure DevOps connection failure in {func.__name__}: {exc}", url=url) from exc
        except ValueError as exc:
            logger.error("Malformed response from Azure DevOps", function=func.__name__, error=str(exc))
            raise WorkItemServiceError(f"Malformed Azure DevOps response in {func.__name__}: {exc}") from exc

    return wrapper  # type: ignore


def escape_wiql(value: str) -> str:
    """Escape a value for use inside a single-quoted WIQL string literal."""
    return value.replace("'", "''")


class AzureDevOpsAdapter(WorkItemClientBase):
    """Azure DevOps Work Item Tracking adapter scoped to one project and work item type."""

    def __init__(self, client: httpx.AsyncClient, project: str, work_item_type: str) -> None:
        """Initialize the adapter with an already-initialized client."""
        self.client = client
        self.project = project
        self.work_item_type = work_item_type

    @classmethod
    async def create(cls, org_url: str, token: str, project: str, work_item_type: str) -> Self:
        """Create a new Azure DevOps adapter.

        Args:
            org_url: Organization URL, e.g. https://dev.azure.com/contoso
            token: Personal access token with work item read/write scope
            project: Team project name
            work_item_type: Work item type name, e.g. Bug

        Returns:
            Configured AzureDevOpsAdapter instance
        """
        logger.info("Creating client for Azure DevOps organization", org_url=org_url, project=project, work_item_type=work_item_type)
        client = await get_ado_client(org_url, token)
        return cls(client, project, work_item_type)

    async def aclose(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def _project_path(self) -> str:
        return quote(self.project, safe="")

    def build_tag_query(self, required_tags: Sequence[str], changed_within_days: int | None = None) -> str:
        """Build the WIQL query selecting work items that carry every required tag."""
        query = (
            "SELECT [System.Id], [System.Description], [System.Title], [System.AssignedTo], [System.State], [System.Tags] "
            "FROM workitems WHERE [System.TeamProject] = @project "
            f"AND [System.WorkItemType] = '{escape_wiql(self.work_item_type)}'"
        )
        for tag in required_tags:
            query += f" AND [System.Tags] CONTAINS '{escape_wiql(tag)}'"
        if changed_within_days is not None:
            query += f" AND [System.ChangedDate] > @Today - {changed_within_days}"
        return query

    # Queries
    @handle_ado_errors
    async def query_by_tags(self, required_tags: Sequence[str], changed_within_days: int | None = None) -> list[WorkItemReference]:
        """Run a WIQL tag query in the configured project and return matching references."""
        query = self.build_tag_query(required_tags, changed_within_days)
        logger.debug("Running WIQL query", project=self.project, query=query)
        response = await self.client.post(f"{self._project_path}/_apis/wit/wiql", json={"query": query})
        response.raise_for_status()
        result = response.json()
        if not isinstance(result, dict) or "workItems" not in result:
            raise ValueError("WIQL response is missing 'workItems'")
        return [WorkItemReference.model_validate(item) for item in result["workItems"]]

    # Work Item CRUD
    @handle_ado_errors
    async def get_work_item(self, work_item_id: int, fields: Sequence[str] | None = None) -> WorkItem:
        """Get a work item; without `fields` it is expanded with relations."""
        params: dict[str, str] = {"fields": ",".join(fields)} if fields else {"$expand": "all"}
        response = await self.client.get(f"{self._project_path}/_apis/wit/workitems/{work_item_id}", params=params)
        response.raise_for_status()
        return WorkItem.model_validate(response.json())

    @handle_ado_errors
    async def create_work_item(self, operations: Sequence[PatchOperation], bypass_rules: bool = False) -> WorkItem:
        """Create a work item of the configured type."""
        response = await self.client.post(
            f"{self._project_path}/_apis/wit/workitems/${quote(self.work_item_type, safe='')}",
            params={"bypassRules": str(bypass_rules).lower()},
            json=[operation.to_json() for operation in operations],
            headers={"Content-Type": JSON_PATCH_CONTENT_TYPE},
        )
        response.raise_for_status()
        return WorkItem.model_validate(response.json())

    @handle_ado_errors
    async def update_work_item(self, work_item_id: int, operations: Sequence[PatchOperation], bypass_rules: bool = False) -> WorkItem:
        """Apply patch operations to an existing work item atomically."""
        response = await self.client.patch(
            f"{self._project_path}/_apis/wit/workitems/{work_item_id}",
            params={"bypassRules": str(bypass_rules).lower()},
            json=[operation.to_json() for operation in operations],
            headers={"Content-Type": JSON_PATCH_CONTENT_TYPE},
        )
        response.raise_for_status()
        return WorkItem.model_validate(response.json())
