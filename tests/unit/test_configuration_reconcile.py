"""Unit tests for the configuration.reconcile module."""

import json
from pathlib import Path
from typing import Any, Generator

import pytest
from pytest import MonkeyPatch

from github_ado_sync.configuration.env import Settings
from github_ado_sync.configuration.exceptions import (
    ConfigurationError,
    InvalidConfigurationSourceError,
    RequiredConfigurationElementError,
)
from github_ado_sync.configuration.reconcile import (
    load_configuration_file,
    parse_action_input,
    reconcile_sync_configuration,
)

ENV_NAMES = [
    "LOG_LEVEL",
    "CONFIG_FILE",
    "INPUT_ADO",
    "INPUT_GITHUB",
    "ADO_TOKEN",
    "GITHUB_TOKEN",
    "GITHUB_API_URL",
    "GITHUB_EVENT_NAME",
    "GITHUB_EVENT_PATH",
    "GITHUB_REPOSITORY",
    "GITHUB_REPOSITORY_OWNER",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: MonkeyPatch) -> Generator[None, None, None]:
    """Keep the runner's own GitHub Actions variables out of these tests."""
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    yield


def write_config(tmp_path: Path, content: dict[str, Any]) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(content), encoding="utf-8")
    return path


def make_settings(**values: Any) -> Settings:
    return Settings(_env_file=None, **values)  # type: ignore[call-arg]


BASE_ADO = {"organization": "contoso", "project": "Widgets", "wit": "Bug"}


@pytest.mark.asyncio
async def test_missing_configuration_file_is_empty(tmp_path: Path) -> None:
    """A configured file that does not exist is treated as empty."""
    assert await load_configuration_file(tmp_path / "missing.json") == {}
    assert await load_configuration_file(None) == {}


@pytest.mark.asyncio
async def test_invalid_configuration_file_raises(tmp_path: Path) -> None:
    """A file that is not JSON is a configuration error."""
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidConfigurationSourceError):
        await load_configuration_file(path)


@pytest.mark.asyncio
async def test_parse_action_input() -> None:
    """Action inputs are unwrapped from their top-level key."""
    assert await parse_action_input('{"ado": {"project": "P"}}', "ado") == {"project": "P"}
    assert await parse_action_input(None, "ado") == {}
    with pytest.raises(InvalidConfigurationSourceError):
        await parse_action_input('{"ado": "P"}', "ado")


@pytest.mark.asyncio
async def test_reconcile_merges_sources_by_precedence(tmp_path: Path) -> None:
    """Action inputs override the file, the environment overrides inputs, and the command line overrides all."""
    path = write_config(
        tmp_path,
        {
            "log_level": "debug",
            "exclude_label": "skip-ado",
            "ado": {**BASE_ADO, "areaPath": "Widgets\\File", "autoCreate": True, "token": "file-token"},
        },
    )
    settings = make_settings(
        INPUT_ADO=json.dumps({"ado": {"areaPath": "Widgets\\Input"}}),
        ADO_TOKEN="env-token",
        GITHUB_TOKEN="env-gh",
        GITHUB_REPOSITORY="acme/widgets",
        LOG_LEVEL="warn",
    )

    config = await reconcile_sync_configuration(cli_config_file=path, cli_ado_token="cli-token", settings=settings)

    assert config.ado.area_path == "Widgets\\Input"
    assert config.ado.auto_create is True
    assert config.ado.token == "cli-token"
    assert config.github.token == "env-gh"
    assert config.log_level == "warn"
    assert config.exclude_label == "skip-ado"
    assert config.repository == "acme/widgets"
    assert config.repository_owner == "acme"
    assert config.ado.org_url == "https://dev.azure.com/contoso"


@pytest.mark.asyncio
async def test_reconcile_defaults(tmp_path: Path) -> None:
    """Omitted settings take their documented defaults."""
    path = write_config(tmp_path, {"ado": BASE_ADO})

    config = await reconcile_sync_configuration(cli_config_file=path, settings=make_settings(ADO_TOKEN="t"))

    assert config.log_level == "info"
    assert config.exclude_label == "noado"
    assert config.ado.states == {"closed": "Closed", "deleted": "Removed", "reopened": "New"}
    assert config.ado.resolution_field == "Microsoft.VSTS.Common.ResolvedReason"
    assert config.ado.auto_create is False
    assert config.github.api_url == "https://api.github.com"


@pytest.mark.asyncio
async def test_reconcile_merges_partial_states(tmp_path: Path) -> None:
    """Configured states are merged over the defaults."""
    path = write_config(tmp_path, {"ado": {**BASE_ADO, "states": {"closed": "Done", "active": "Doing"}}})

    config = await reconcile_sync_configuration(cli_config_file=path, settings=make_settings(ADO_TOKEN="t"))

    assert config.ado.states == {"closed": "Done", "deleted": "Removed", "reopened": "New", "active": "Doing"}


@pytest.mark.asyncio
async def test_duplicate_state_values_are_rejected(tmp_path: Path) -> None:
    """Two transitions mapped to one state could not be told apart in reverse."""
    path = write_config(tmp_path, {"ado": {**BASE_ADO, "states": {"closed": "Removed"}}})

    with pytest.raises(ConfigurationError):
        await reconcile_sync_configuration(cli_config_file=path, settings=make_settings(ADO_TOKEN="t"))


@pytest.mark.asyncio
async def test_non_bijective_handle_table_is_rejected(tmp_path: Path) -> None:
    """Two GitHub handles mapped to one principal, ignoring case, are rejected."""
    handles = {"octocat": "octo@contoso.com", "octo2": "OCTO@contoso.com"}
    path = write_config(tmp_path, {"ado": {**BASE_ADO, "mappings": {"handles": handles}}})

    with pytest.raises(ConfigurationError):
        await reconcile_sync_configuration(cli_config_file=path, settings=make_settings(ADO_TOKEN="t"))


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["organization", "project", "wit"])
async def test_required_ado_elements(tmp_path: Path, missing: str) -> None:
    """Organization, project, and work item type are required."""
    ado = {key: value for key, value in BASE_ADO.items() if key != missing}
    path = write_config(tmp_path, {"ado": ado})

    with pytest.raises(RequiredConfigurationElementError) as exc_info:
        await reconcile_sync_configuration(cli_config_file=path, settings=make_settings(ADO_TOKEN="t"))
    assert exc_info.value.config_key == f"ado.{missing}"


@pytest.mark.asyncio
async def test_missing_ado_token(tmp_path: Path) -> None:
    """The Azure DevOps token is required and names its environment variable."""
    path = write_config(tmp_path, {"ado": BASE_ADO})

    with pytest.raises(RequiredConfigurationElementError) as exc_info:
        await reconcile_sync_configuration(cli_config_file=path, settings=make_settings())
    assert exc_info.value.env_name == "ADO_TOKEN"
