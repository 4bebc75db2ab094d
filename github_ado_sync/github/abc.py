"""Base ABC for GitHub clients used to write work item changes back onto issues."""

from abc import ABC, abstractmethod
from typing import Any, Literal


class GitHubClientBase(ABC):
    """Base ABC for GitHub clients scoped to one repository."""

    @abstractmethod
    async def get_issue(self, issue_number: int) -> Any:
        """Fetch the current state of an issue, including labels and updated_at."""
        pass

    @abstractmethod
    async def update_issue(
        self,
        issue_number: int,
        title: str | None = None,
        body: str | None = None,
        assignees: list[str] | None = None,
        state: Literal["open", "closed"] | None = None,
        **kwargs: Any,
    ) -> Any:
        """Write title, body, state, and assignees onto an issue in a single call."""
        pass
