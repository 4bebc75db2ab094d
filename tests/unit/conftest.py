"""Fixtures for unit tests."""

from typing import Any, Callable, Generator

import pytest
import structlog

from github_ado_sync.configuration.models import SyncConfig
from github_ado_sync.schemas.github_event import GitHubIssueEvent


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


class StubConverter:
    """Deterministic converter: wraps Markdown in a paragraph and unwraps it again."""

    def to_html(self, text: str | None) -> str:
        if not text:
            return ""
        return f"<p>{text}</p>"

    def to_markdown(self, html: str | None) -> str:
        if not html:
            return ""
        return html.replace("<p>", "").replace("</p>", "")


@pytest.fixture
def converter() -> StubConverter:
    """A converter whose output is easy to predict."""
    return StubConverter()


@pytest.fixture
def sync_config() -> SyncConfig:
    """A complete configuration for the acme/widgets repository."""
    return SyncConfig.model_validate(
        {
            "repository": "acme/widgets",
            "repository_owner": "acme",
            "ado": {
                "organization": "contoso",
                "token": "ado-pat",
                "project": "Widgets",
                "wit": "Bug",
                "states": {"active": "Active"},
                "mappings": {"handles": {"octocat": "octo@contoso.com", "hubot": "Hubot@Contoso.com"}},
            },
            "github": {"token": "gh-token"},
        }
    )


def issue_payload(**overrides: Any) -> dict[str, Any]:
    """Build an issue payload for acme/widgets#42."""
    payload: dict[str, Any] = {
        "number": 42,
        "node_id": "I_kwDOAcme42",
        "title": "Widget breaks",
        "body": "It **breaks**",
        "state": "open",
        "labels": [{"name": "bug"}],
        "assignee": None,
        "user": {"login": "octocat", "html_url": "https://github.com/octocat"},
        "url": "https://api.github.com/repos/acme/widgets/issues/42",
        "html_url": "https://github.com/acme/widgets/issues/42",
        "repository_url": "https://api.github.com/repos/acme/widgets",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_event() -> Callable[..., GitHubIssueEvent]:
    """Factory for issue events; keyword arguments override top-level payload keys."""

    def _make_event(action: str, issue: dict[str, Any] | None = None, **overrides: Any) -> GitHubIssueEvent:
        payload: dict[str, Any] = {
            "action": action,
            "issue": issue if issue is not None else issue_payload(),
            "repository": {"full_name": "acme/widgets"},
            "sender": {"login": "hubot", "html_url": "https://github.com/hubot"},
        }
        payload.update(overrides)
        return GitHubIssueEvent.model_validate(payload)

    return _make_event


@pytest.fixture
def make_issue() -> Callable[..., dict[str, Any]]:
    """Factory for issue payloads; keyword arguments override issue keys."""
    return issue_payload
