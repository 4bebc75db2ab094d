"""Contains exceptions raised by the Azure DevOps Work Item Tracking adapter."""


class WorkItemServiceError(Exception):
    """Raised when a call to the Azure DevOps Work Item Tracking API fails."""

    def __init__(self, message: str, status_code: int | None = None, url: str | None = None) -> None:
        """Initializes the exception with the HTTP status and URL of the failed call."""
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class WorkItemAuthenticationError(WorkItemServiceError):
    """Raised when Azure DevOps rejects the personal access token."""

    pass


class WorkItemNotFoundError(WorkItemServiceError):
    """Raised when a project, work item type, or work item does not exist."""

    pass
