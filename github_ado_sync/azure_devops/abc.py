"""Base ABC for Azure DevOps Work Item Tracking clients."""

from abc import ABC, abstractmethod
from typing import Sequence

from github_ado_sync.schemas.work_item import PatchOperation, WorkItem, WorkItemReference


class WorkItemClientBase(ABC):
    """Base ABC for Azure DevOps Work Item Tracking clients."""

    # Queries
    @abstractmethod
    async def query_by_tags(self, required_tags: Sequence[str], changed_within_days: int | None = None) -> list[WorkItemReference]:
        """Find work items of the configured project and type carrying every tag."""
        pass

    # Work Item CRUD
    @abstractmethod
    async def get_work_item(self, work_item_id: int, fields: Sequence[str] | None = None) -> WorkItem:
        """Get a work item, either fully expanded or restricted to `fields`."""
        pass

    @abstractmethod
    async def create_work_item(self, operations: Sequence[PatchOperation], bypass_rules: bool = False) -> WorkItem:
        """Create a work item of the configured type from patch operations."""
        pass

    @abstractmethod
    async def update_work_item(self, work_item_id: int, operations: Sequence[PatchOperation], bypass_rules: bool = False) -> WorkItem:
        """Apply patch operations to an existing work item."""
        pass
