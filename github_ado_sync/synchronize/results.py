"""Contains results of application execution."""

from datetime import datetime
from typing import Any

from github_ado_sync.synchronize.models import ReverseSyncDecision, SyncOutcome


class SyncResult:
    """Contains the result of applying one GitHub event to Azure DevOps."""

    def __init__(
        self,
        outcome: SyncOutcome,
        work_item_id: int | None = None,
        changed_date: datetime | None = None,
    ) -> None:
        """Initialize the result with the outcome and the identity of the touched work item."""
        self.outcome = outcome
        self.work_item_id = work_item_id
        self.changed_date = changed_date

    def __repr__(self) -> str:
        return f"SyncResult(outcome={self.outcome}, work_item_id={self.work_item_id})"


class ReverseSyncResult:
    """Contains the result of reconciling one work item back onto its GitHub issue."""

    def __init__(
        self,
        work_item_id: int,
        decision: ReverseSyncDecision,
        issue_number: int | None = None,
        updated_issue: Any | None = None,
    ) -> None:
        """Initialize the result with the decision taken for the work item."""
        self.work_item_id = work_item_id
        self.decision = decision
        self.issue_number = issue_number
        self.updated_issue = updated_issue


class ReverseSyncBatchResult:
    """Contains the results of reconciling every recently changed work item."""

    def __init__(self, results: list[ReverseSyncResult], errors: list[dict[str, Any]] | None = None) -> None:
        """Initialize the batch result with per-item results and per-item errors."""
        self.results = results
        self.errors = errors or []

    @property
    def updated_count(self) -> int:
        return sum(1 for result in self.results if result.decision == ReverseSyncDecision.UPDATE)


class SyncRunResult:
    """Contains results of one invocation: the forward event and the optional reverse batch."""

    def __init__(
        self,
        sync_result: SyncResult | None = None,
        reverse_result: ReverseSyncBatchResult | None = None,
        errors: list[str] | None = None,
    ) -> None:
        """Initialize the run result with results and errors."""
        self.sync_result = sync_result
        self.reverse_result = reverse_result
        self.errors = errors or []

    @property
    def failed(self) -> bool:
        """A run fails on any error in the forward path; batch item errors are reported separately."""
        return bool(self.errors)
