"""GitHub issue adapter for the githubkit library."""

from functools import wraps
from typing import Any, Awaitable, Callable, Literal, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import Issue

from github_ado_sync.utils.github import split_repository_in_configuration

from .abc import GitHubClientBase
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_github_422(func: F) -> F:
    """Decorator turning GitHub validation failures (422) into ValueError with the reported details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            if exc.response.status_code != 422:
                raise
            try:
                error_data = exc.response.json()
            except ValueError:
                error_data = {}
            message = error_data.get("message", "Unprocessable Entity")
            errors = error_data.get("errors", [])
            url = getattr(exc.response, "url", None)
            logger.error("GitHub rejected the issue update", function=func.__name__, message=message, errors=errors, url=url, status_code=422)
            raise ValueError(f"GitHub 422 error in {func.__name__}: {message} | errors: {errors} | url: {url}") from exc

    return wrapper  # type: ignore


class GitHubKitAdapter(GitHubClientBase):
    """Reads and updates the issues of one repository through githubkit."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    @classmethod
    async def create(
        cls,
        repo: str,
        github_token: str | None,
        github_api_url: str = "https://api.github.com",
    ) -> Self:
        """Create an adapter for `repo` ('owner/repo').

        Raises:
            ValueError: If the repository is not in 'owner/repo' format
            RuntimeError: If no token is available
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.info("Creating GitHub client for issue updates", github_api_url=github_api_url, owner=owner, repo_name=repo_name)
        client = await get_github_client(github_token=github_token, github_api_url=github_api_url)
        return cls(client, owner, repo_name)

    async def get_issue(self, issue_number: int) -> Issue:
        response: Response[Issue] = await self.client.rest.issues.async_get(
            owner=self.owner,
            repo=self.repo_name,
            issue_number=issue_number,
        )
        return response.parsed_data

    @handle_github_422
    async def update_issue(
        self,
        issue_number: int,
        title: str | None = None,
        body: str | None = None,
        assignees: list[str] | None = None,
        state: Literal["open", "closed"] | None = None,
        **kwargs: Any,
    ) -> Issue:
        """Update an issue; None values are left out of the request.

        An empty `assignees` list is sent as-is and clears the assignees.
        """
        changes = {name: value for name, value in dict(title=title, body=body, assignees=assignees, state=state, **kwargs).items() if value is not None}
        logger.debug("Updating GitHub issue", issue_number=issue_number, fields=sorted(changes))
        response: Response[Issue] = await self.client.rest.issues.async_update(
            owner=self.owner,
            repo=self.repo_name,
            issue_number=issue_number,
            **changes,
        )
        return response.parsed_data
