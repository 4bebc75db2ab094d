"""Models for configuration merged from file, action inputs, and environment variables."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from github_ado_sync.utils.constants import DEFAULT_ADO_BASE_URL, DEFAULT_EXCLUDE_LABEL, DEFAULT_RESOLUTION_FIELD

DEFAULT_STATES: dict[str, str] = {
    "closed": "Closed",
    "deleted": "Removed",
    "reopened": "New",
}


class HandleMappings(BaseModel):
    """GitHub handle to Azure DevOps principal mappings."""

    model_config = ConfigDict(extra="ignore")

    handles: dict[str, str] = {}

    @field_validator("handles")
    @classmethod
    def handles_must_be_bijective(cls, handles: dict[str, str]) -> dict[str, str]:
        """Reject tables where two GitHub handles map to the same principal."""
        seen: dict[str, str] = {}
        for handle, principal in handles.items():
            key = principal.lower()
            if key in seen:
                raise ValueError(f"Azure DevOps principal '{principal}' is mapped from both '{seen[key]}' and '{handle}'")
            seen[key] = handle
        return handles


class AzureDevOpsConfig(BaseModel):
    """Azure DevOps side of the synchronization configuration."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    organization: str | None = None
    base_url: str = Field(default=DEFAULT_ADO_BASE_URL, alias="baseUrl")
    token: str | None = None
    project: str | None = None
    wit: str | None = None
    states: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_STATES))
    area_path: str | None = Field(default=None, alias="areaPath")
    iteration_path: str | None = Field(default=None, alias="iterationPath")
    auto_create: bool = Field(default=False, alias="autoCreate")
    bypass_rules: bool = Field(default=False, alias="bypassRules")
    assigned_to: str | None = Field(default=None, alias="assignedTo")
    parent_url: str | None = Field(default=None, alias="parentUrl")
    resolution_field: str = Field(default=DEFAULT_RESOLUTION_FIELD, alias="resolutionField")
    mappings: HandleMappings = Field(default_factory=HandleMappings)

    @field_validator("states")
    @classmethod
    def states_must_be_invertible(cls, states: dict[str, str]) -> dict[str, str]:
        """Fill in default transitions and reject duplicate state values."""
        merged = {**DEFAULT_STATES, **states}
        seen: dict[str, str] = {}
        for key, value in merged.items():
            if value in seen:
                raise ValueError(f"Azure DevOps state '{value}' is configured for both '{seen[value]}' and '{key}'")
            seen[value] = key
        return merged

    @property
    def org_url(self) -> str:
        """URL of the Azure DevOps organization."""
        return f"{self.base_url.rstrip('/')}/{self.organization}"

    @property
    def handles(self) -> dict[str, str]:
        return self.mappings.handles


class GitHubConfig(BaseModel):
    """GitHub side of the synchronization configuration."""

    model_config = ConfigDict(extra="ignore")

    token: str | None = None
    api_url: str = "https://api.github.com"


class SyncConfig(BaseModel):
    """Fully reconciled configuration passed to every synchronization component."""

    model_config = ConfigDict(extra="ignore")

    log_level: str = "info"
    exclude_label: str = DEFAULT_EXCLUDE_LABEL
    repository: str | None = None
    repository_owner: str | None = None
    ado: AzureDevOpsConfig = Field(default_factory=AzureDevOpsConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
