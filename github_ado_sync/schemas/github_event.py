"""Pydantic schema for the GitHub issue and issue comment webhook payloads."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from github_ado_sync.utils.github import is_pull_request_node_id


class GitHubUser(BaseModel):
    """Pydantic model for a GitHub user reference."""

    model_config = ConfigDict(extra="ignore")

    login: str
    html_url: str | None = None


class GitHubLabel(BaseModel):
    """Pydantic model for a GitHub label reference."""

    model_config = ConfigDict(extra="ignore")

    name: str


class GitHubRepository(BaseModel):
    """Pydantic model for the repository an event was raised in."""

    model_config = ConfigDict(extra="ignore")

    full_name: str
    owner: GitHubUser | None = None
    html_url: str | None = None


class GitHubIssue(BaseModel):
    """Pydantic model for a GitHub issue as delivered in an event payload."""

    model_config = ConfigDict(extra="ignore")

    number: int
    node_id: str | None = None
    title: str
    body: str | None = None
    state: str = "open"
    labels: list[GitHubLabel] = []
    assignee: GitHubUser | None = None
    user: GitHubUser
    url: str
    html_url: str | None = None
    repository_url: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    pull_request: dict[str, Any] | None = None

    @property
    def label_names(self) -> list[str]:
        """Names of the labels on the issue, in payload order."""
        return [label.name for label in self.labels]

    @property
    def is_pull_request(self) -> bool:
        """Whether this "issue" is actually a pull request."""
        return self.pull_request is not None or is_pull_request_node_id(self.node_id)

    def has_label(self, name: str) -> bool:
        """Case-insensitive check for a label on the issue."""
        return any(label.name.lower() == name.lower() for label in self.labels)


class GitHubComment(BaseModel):
    """Pydantic model for a GitHub issue comment."""

    model_config = ConfigDict(extra="ignore")

    id: int
    body: str | None = None
    user: GitHubUser
    html_url: str


class GitHubIssueEvent(BaseModel):
    """Pydantic model for an `issues` or `issue_comment` event payload.

    Scheduled and manually dispatched workflow runs deliver a payload without
    an issue; `schedule` or `inputs.manual_trigger` is set instead.
    """

    model_config = ConfigDict(extra="ignore")

    action: str | None = None
    issue: GitHubIssue | None = None
    comment: GitHubComment | None = None
    label: GitHubLabel | None = None
    assignee: GitHubUser | None = None
    repository: GitHubRepository | None = None
    sender: GitHubUser | None = None
    schedule: str | None = None
    inputs: dict[str, Any] | None = None

    @property
    def actor(self) -> GitHubUser | None:
        """Who triggered the event; falls back to the issue author."""
        if self.sender is not None:
            return self.sender
        return self.issue.user if self.issue is not None else None

    @property
    def requests_issue_update(self) -> bool:
        """Whether this run should reconcile work items back onto issues."""
        return bool(self.schedule) or bool((self.inputs or {}).get("manual_trigger"))
