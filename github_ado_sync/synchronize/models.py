"""Internal data models for synchronization decisions and outcomes."""

from enum import Enum


class IssueAction(str, Enum):
    """GitHub event actions that drive a work item mutation."""

    OPENED = "opened"
    CLOSED = "closed"
    DELETED = "deleted"
    REOPENED = "reopened"
    EDITED = "edited"
    LABELED = "labeled"
    UNLABELED = "unlabeled"
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"
    COMMENTED = "created"


class SyncOutcome(Enum):
    """Enum for the outcome of applying one event to Azure DevOps."""

    CREATED = "created"
    UPDATED = "updated"
    ALREADY_EXISTS = "already_exists"
    SKIPPED = "skipped"


class ReverseSyncDecision(Enum):
    """Enum for reverse reconciliation decisions for one work item."""

    UPDATE = "update"
    NOOP = "noop"
    STALE = "stale"
    EXCLUDED = "excluded"
    UNLINKED = "unlinked"
