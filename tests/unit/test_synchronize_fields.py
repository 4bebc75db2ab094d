"""Unit tests for the synchronize.fields module."""

from typing import Any, Callable

import pytest

from github_ado_sync.schemas.github_event import GitHubIssue, GitHubUser
from github_ado_sync.schemas.work_item import TagSet
from github_ado_sync.synchronize.fields import (
    build_assignee,
    build_history_entry,
    build_issue_tags,
    derive_state_key,
    invert_handle_table,
    issue_state_for_key,
    label_tag,
    map_labels_to_tags,
    resolve_github_handle,
    sanitize_cross_link,
)

HANDLES = {"octocat": "octo@contoso.com", "hubot": "Hubot@Contoso.com"}


def test_build_issue_tags_orders_join_tags_before_labels() -> None:
    """The issue and repository tags come first, then one tag per label in order."""
    tags = build_issue_tags("acme/widgets", 42, ["bug", "ui"])
    assert list(tags) == ["GitHub Issue #42", "GitHub Repo: acme/widgets", "GitHub Label: bug", "GitHub Label: ui"]
    assert tags.serialize() == "GitHub Issue #42;GitHub Repo: acme/widgets;GitHub Label: bug;GitHub Label: ui;"


def test_map_labels_to_tags_does_not_mutate_base() -> None:
    """Mapping labels returns a new set and leaves the input untouched."""
    base = TagSet(["GitHub Issue #1"])
    result = map_labels_to_tags(base, ["bug", "bug"])
    assert list(base) == ["GitHub Issue #1"]
    assert list(result) == ["GitHub Issue #1", label_tag("bug")]


def test_sanitize_cross_link_rewrites_api_urls() -> None:
    """API URLs become browsable github.com URLs; other URLs are unchanged."""
    assert sanitize_cross_link("https://api.github.com/repos/acme/widgets/issues/42") == "https://github.com/acme/widgets/issues/42"
    assert sanitize_cross_link("https://github.com/acme/widgets/issues/42") == "https://github.com/acme/widgets/issues/42"


def test_build_assignee_uses_mapping(make_issue: Callable[..., dict[str, Any]]) -> None:
    """A mapped GitHub handle resolves to its principal."""
    issue = GitHubIssue.model_validate(make_issue(assignee={"login": "octocat"}))
    assert build_assignee(issue, HANDLES, use_default_fallback=False) == "octo@contoso.com"


def test_build_assignee_unmapped_without_fallback(make_issue: Callable[..., dict[str, Any]]) -> None:
    """An unmapped handle resolves to nothing when the default may not be used."""
    issue = GitHubIssue.model_validate(make_issue(assignee={"login": "stranger"}))
    assert build_assignee(issue, HANDLES, use_default_fallback=False, default_assignee="team@contoso.com") is None


def test_build_assignee_falls_back_to_default(make_issue: Callable[..., dict[str, Any]]) -> None:
    """The configured default is used only when fallback is allowed."""
    issue = GitHubIssue.model_validate(make_issue(assignee=None))
    assert build_assignee(issue, HANDLES, use_default_fallback=True, default_assignee="team@contoso.com") == "team@contoso.com"
    assert build_assignee(issue, None, use_default_fallback=True) is None


def test_invert_handle_table_is_case_insensitive() -> None:
    """Principals are looked up regardless of case."""
    assert invert_handle_table(HANDLES) == {"octo@contoso.com": "octocat", "hubot@contoso.com": "hubot"}
    assert resolve_github_handle(HANDLES, "HUBOT@contoso.com") == "hubot"
    assert resolve_github_handle(HANDLES, "nobody@contoso.com") is None
    assert resolve_github_handle(HANDLES, None) is None


@pytest.mark.parametrize(
    "mirror_state,expected_key,expected_issue_state",
    [
        ("Closed", "closed", "closed"),
        ("Removed", "deleted", "closed"),
        ("New", "reopened", "open"),
        ("Active", "active", None),
        ("Resolved", None, None),
    ],
)
def test_state_key_and_issue_state(mirror_state: str, expected_key: str | None, expected_issue_state: str | None) -> None:
    """Mirror states map back to their transition key and then onto an issue state."""
    states = {"closed": "Closed", "deleted": "Removed", "reopened": "New", "active": "Active"}
    key = derive_state_key(states, mirror_state)
    assert key == expected_key
    assert issue_state_for_key(key) == expected_issue_state


def test_build_history_entry_links_issue_repository_and_actor(make_issue: Callable[..., dict[str, Any]]) -> None:
    """The audit line names the issue, the repository, the action, and the actor."""
    issue = GitHubIssue.model_validate(make_issue(title="A <b> title"))
    actor = GitHubUser(login="hubot", html_url="https://github.com/hubot")
    entry = build_history_entry(issue, "acme/widgets", "edited", actor)
    assert entry.startswith('GitHub issue #42: <a href="https://github.com/acme/widgets/issues/42" target="_new">A &lt;b&gt; title</a>')
    assert '<a href="https://github.com/acme/widgets" target="_blank">acme/widgets</a>' in entry
    assert entry.endswith(' edited by <a href="https://github.com/hubot" target="_blank">hubot</a>')


def test_state_mapping_round_trips_configured_keys() -> None:
    """Every configured transition key survives mapping to its state and back."""
    states = {"closed": "Done", "deleted": "Cut", "reopened": "To Do"}
    for key, value in states.items():
        assert derive_state_key(states, value) == key
