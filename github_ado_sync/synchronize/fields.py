"""Maps GitHub issue attributes onto Azure DevOps work item field values and back."""

from html import escape
from typing import Iterable, Literal

import structlog

from github_ado_sync.schemas.github_event import GitHubIssue, GitHubUser
from github_ado_sync.schemas.work_item import TagSet
from github_ado_sync.utils.constants import ISSUE_TAG_PREFIX, LABEL_TAG_PREFIX, REPO_TAG_PREFIX

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def issue_tag(issue_number: int) -> str:
    """Tag joining a work item to its GitHub issue number."""
    return f"{ISSUE_TAG_PREFIX}{issue_number}"


def repository_tag(repository: str) -> str:
    """Tag joining a work item to its GitHub repository."""
    return f"{REPO_TAG_PREFIX}{repository}"


def label_tag(label_name: str) -> str:
    """Tag mirroring one GitHub label."""
    return f"{LABEL_TAG_PREFIX}{label_name}"


def map_labels_to_tags(base_tags: TagSet, labels: Iterable[str]) -> TagSet:
    """Return a copy of `base_tags` with one label tag appended per label, in input order."""
    tags = base_tags.copy()
    for label in labels:
        tags.add(label_tag(label))
    return tags


def build_issue_tags(repository: str, issue_number: int, labels: Iterable[str] = ()) -> TagSet:
    """Build the full tag set of a new work item: issue and repository join tags, then labels."""
    return map_labels_to_tags(TagSet([issue_tag(issue_number), repository_tag(repository)]), labels)


def sanitize_cross_link(url: str) -> str:
    """Rewrite a GitHub API URL into the browsable github.com URL."""
    return url.replace("api.github.com/repos/", "github.com/")


def build_assignee(
    issue: GitHubIssue,
    handles: dict[str, str] | None,
    use_default_fallback: bool,
    default_assignee: str | None = None,
) -> str | None:
    """Resolve the Azure DevOps principal a work item should be assigned to.

    Resolution order is the explicit handle mapping for the issue's assignee,
    then (only when `use_default_fallback` is set) the configured default.
    """
    assignee: str | None = None
    login = issue.assignee.login if issue.assignee is not None else None
    if login and handles:
        assignee = handles.get(login)
        if assignee is None:
            logger.debug("No mapping found for GitHub handle", handle=login)

    if assignee:
        return assignee
    if use_default_fallback and default_assignee:
        return default_assignee
    return None


def invert_handle_table(handles: dict[str, str] | None) -> dict[str, str]:
    """Build the reverse lookup from Azure DevOps principal (lower-cased) to GitHub handle.

    Configuration validation guarantees the table is a bijection, so no two
    handles collide here.
    """
    return {principal.lower(): handle for handle, principal in (handles or {}).items()}


def resolve_github_handle(handles: dict[str, str] | None, principal: str | None) -> str | None:
    """Find the GitHub handle mapped to an Azure DevOps principal, ignoring case."""
    if not principal:
        return None
    return invert_handle_table(handles).get(principal.lower())


def derive_state_key(states: dict[str, str], mirror_state: str | None) -> str | None:
    """Reverse lookup from an Azure DevOps state value to its transition key."""
    for key, value in states.items():
        if value == mirror_state:
            return key
    return None


def issue_state_for_key(state_key: str | None) -> Literal["open", "closed"] | None:
    """GitHub issue state corresponding to a transition key, if it has one."""
    if state_key == "reopened":
        return "open"
    if state_key in ("closed", "deleted"):
        return "closed"
    return None


def build_history_entry(issue: GitHubIssue, repository: str, action: str, actor: GitHubUser) -> str:
    """Build the HTML audit line naming the issue, the repository, the action, and who did it."""
    issue_link = f'<a href="{sanitize_cross_link(issue.url)}" target="_new">{escape(issue.title)}</a>'
    repository_link = f'<a href="{sanitize_cross_link(issue.repository_url)}" target="_blank">{repository}</a>'
    actor_link = f'<a href="{actor.html_url}" target="_blank">{actor.login}</a>' if actor.html_url else actor.login
    return f"GitHub issue #{issue.number}: {issue_link} in {repository_link} {action} by {actor_link}"
