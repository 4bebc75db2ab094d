"""Contains utility functions for GitHub interactions."""

from github_ado_sync.utils.constants import PULL_REQUEST_NODE_ID_PREFIX


async def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits the repository in the configuration into owner and repository."""
    if repo is None:
        raise ValueError("Synchronization requires the GitHub repository (owner/repo) in config.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


def is_pull_request_node_id(node_id: str | None) -> bool:
    """Returns True when a GitHub global node ID identifies a pull request."""
    if not node_id:
        return False
    return node_id.startswith(PULL_REQUEST_NODE_ID_PREFIX)
