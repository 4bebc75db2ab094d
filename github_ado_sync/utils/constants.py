"""Shared constants used across the application."""

# Tag Encoding Constants
# ----------------------

ISSUE_TAG_PREFIX = "GitHub Issue #"
"""Prefix of the tag that records the GitHub issue number on a work item."""

REPO_TAG_PREFIX = "GitHub Repo: "
"""Prefix of the tag that records the GitHub repository full name on a work item."""

LABEL_TAG_PREFIX = "GitHub Label: "
"""Prefix of the tags that mirror GitHub issue labels on a work item."""

TAG_DELIMITER = ";"
"""Delimiter between tags in the flat System.Tags field value."""

DEFAULT_EXCLUDE_LABEL = "noado"
"""GitHub label that removes an issue from synchronization."""

PULL_REQUEST_NODE_ID_PREFIX = "PR_"
"""Global node ID prefix GitHub uses for pull requests."""

# Azure DevOps Field Paths
# ------------------------

FIELD_TITLE = "System.Title"
FIELD_DESCRIPTION = "System.Description"
FIELD_REPRO_STEPS = "Microsoft.VSTS.TCM.ReproSteps"
FIELD_STATE = "System.State"
FIELD_TAGS = "System.Tags"
FIELD_HISTORY = "System.History"
FIELD_ASSIGNED_TO = "System.AssignedTo"
FIELD_AREA_PATH = "System.AreaPath"
FIELD_ITERATION_PATH = "System.IterationPath"
FIELD_CREATED_BY = "System.CreatedBy"
FIELD_CHANGED_DATE = "System.ChangedDate"

DEFAULT_RESOLUTION_FIELD = "Microsoft.VSTS.Common.ResolvedReason"
"""Field that receives the resolution sentinel when a work item is removed."""

DELETED_RESOLUTION_REASON = "Won't Fix"
"""Resolution sentinel written when the GitHub issue is deleted or excluded."""

RELATION_HYPERLINK = "Hyperlink"
RELATION_PARENT = "System.LinkTypes.Hierarchy-Reverse"

REVERSE_SYNC_FIELDS = [
    FIELD_TITLE,
    FIELD_DESCRIPTION,
    FIELD_STATE,
    FIELD_CHANGED_DATE,
    FIELD_ASSIGNED_TO,
    FIELD_TAGS,
]
"""Fields fetched for each work item during reverse reconciliation."""

# Azure DevOps API Settings
# -------------------------

DEFAULT_ADO_BASE_URL = "https://dev.azure.com"
"""Base URL that the organization name is appended to."""

ADO_API_VERSION = "7.1"
"""Azure DevOps REST API version used for all Work Item Tracking calls."""

JSON_PATCH_CONTENT_TYPE = "application/json-patch+json"

LINE_BREAK_MARKER = "<br>"
"""Literal marker stripped from Markdown converted back from a work item description."""
