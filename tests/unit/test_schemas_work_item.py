"""Unit tests for the work item schema, tag sets, and patch operations."""

from datetime import datetime, timezone

from github_ado_sync.schemas.work_item import PatchOperation, TagSet, WorkItem


def test_tag_set_parses_both_delimiter_styles() -> None:
    """Azure DevOps returns `a; b` while the tool writes `a;b;`; both parse the same."""
    written = TagSet.parse("GitHub Issue #42;GitHub Repo: acme/widgets;GitHub Label: bug;")
    returned = TagSet.parse("GitHub Issue #42; GitHub Repo: acme/widgets; GitHub Label: bug")
    assert written == returned
    assert list(written) == ["GitHub Issue #42", "GitHub Repo: acme/widgets", "GitHub Label: bug"]


def test_tag_set_parse_empty() -> None:
    """A missing or empty tag field is an empty set."""
    assert len(TagSet.parse(None)) == 0
    assert TagSet.parse("").serialize() == ""


def test_tag_set_add_and_discard_are_exact() -> None:
    """Adding keeps order without duplicates; discarding removes only the exact tag."""
    tags = TagSet(["GitHub Label: bug", "GitHub Label: bugfix"])
    tags.add("GitHub Label: bug")
    tags.discard("GitHub Label: bug")
    assert list(tags) == ["GitHub Label: bugfix"]
    tags.discard("GitHub Label: missing")
    assert "GitHub Label: bugfix" in tags


def test_tag_set_discard_ignoring_case() -> None:
    """Discarding without case removes every casing of the tag and still leaves longer tags alone."""
    tags = TagSet(["GitHub Label: Bug", "GitHub Label: bugfix", "Triage"])
    tags.discard("GitHub Label: bug")
    assert "GitHub Label: Bug" in tags
    tags.discard("GitHub Label: bug", ignore_case=True)
    assert list(tags) == ["GitHub Label: bugfix", "Triage"]


def test_tag_set_join_keys() -> None:
    """The issue number and repository are read back from the join tags."""
    tags = TagSet.parse("Triage; GitHub Issue #42; GitHub Repo: acme/widgets")
    assert tags.issue_number == 42
    assert tags.repository == "acme/widgets"
    assert TagSet.parse("Triage").issue_number is None
    assert TagSet.parse("GitHub Issue #abc").issue_number is None


def test_patch_operation_json() -> None:
    """Remove operations carry no value; relations append to the relation list."""
    assert PatchOperation.field("remove", "System.AssignedTo").to_json() == {"op": "remove", "path": "/fields/System.AssignedTo"}
    assert PatchOperation.field("add", "System.Title", "T").to_json() == {"op": "add", "path": "/fields/System.Title", "value": "T"}
    relation = PatchOperation.relation("Hyperlink", "https://github.com/acme/widgets/issues/42")
    assert relation.to_json() == {
        "op": "add",
        "path": "/relations/-",
        "value": {"rel": "Hyperlink", "url": "https://github.com/acme/widgets/issues/42"},
    }
    assert relation.field_name is None
    assert PatchOperation.field("add", "System.Tags", "x;").field_name == "System.Tags"


def test_work_item_properties() -> None:
    """Field accessors unwrap identity objects and parse the change timestamp."""
    work_item = WorkItem.model_validate(
        {
            "id": 7,
            "rev": 3,
            "fields": {
                "System.Title": "Widget breaks",
                "System.State": "Active",
                "System.Tags": "GitHub Issue #42; GitHub Repo: acme/widgets",
                "System.AssignedTo": {"displayName": "Octo", "uniqueName": "octo@contoso.com"},
                "System.ChangedDate": "2024-05-01T10:00:00.123Z",
            },
            "_links": {},
        }
    )
    assert work_item.title == "Widget breaks"
    assert work_item.state == "Active"
    assert work_item.description is None
    assert work_item.assigned_to == "octo@contoso.com"
    assert work_item.tags.issue_number == 42
    assert work_item.changed_date == datetime(2024, 5, 1, 10, 0, 0, 123000, tzinfo=timezone.utc)


def test_work_item_without_optional_fields() -> None:
    """A bare work item has no assignee and no change timestamp."""
    work_item = WorkItem(id=1)
    assert work_item.assigned_to is None
    assert work_item.changed_date is None
    assert len(work_item.tags) == 0
