"""Pydantic schema for Azure DevOps work items, tags, and JSON Patch operations."""

from datetime import datetime
from typing import Any, Iterable, Iterator, Literal

from pydantic import BaseModel, ConfigDict

from github_ado_sync.utils.constants import (
    FIELD_ASSIGNED_TO,
    FIELD_CHANGED_DATE,
    FIELD_DESCRIPTION,
    FIELD_STATE,
    FIELD_TAGS,
    FIELD_TITLE,
    ISSUE_TAG_PREFIX,
    REPO_TAG_PREFIX,
    TAG_DELIMITER,
)


class TagSet:
    """Ordered, duplicate-free set of work item tags.

    Azure DevOps stores tags as one delimited string. That string is only
    parsed and produced here; everything else works with tag values.
    """

    def __init__(self, tags: Iterable[str] = ()) -> None:
        """Initialize the set, keeping the first occurrence of each tag."""
        self._tags: list[str] = []
        for tag in tags:
            self.add(tag)

    @classmethod
    def parse(cls, value: str | None) -> "TagSet":
        """Parse a System.Tags field value (`a; b; c` or `a;b;c;`)."""
        if not value:
            return cls()
        return cls(tag.strip() for tag in value.split(TAG_DELIMITER) if tag.strip())

    def serialize(self) -> str:
        """Produce the System.Tags field value, each tag followed by the delimiter."""
        return "".join(f"{tag}{TAG_DELIMITER}" for tag in self._tags)

    def add(self, tag: str) -> None:
        """Append a tag unless it is already present."""
        tag = tag.strip()
        if tag and tag not in self._tags:
            self._tags.append(tag)

    def discard(self, tag: str, ignore_case: bool = False) -> None:
        """Remove a tag if it is present.

        With `ignore_case`, every tag equal to `tag` apart from case is
        removed; Azure DevOps keeps the casing a tag was first created with.
        """
        tag = tag.strip()
        if ignore_case:
            self._tags = [existing for existing in self._tags if existing.lower() != tag.lower()]
        elif tag in self._tags:
            self._tags.remove(tag)

    def copy(self) -> "TagSet":
        """Return an independent copy of this set."""
        return TagSet(self._tags)

    def find_prefixed(self, prefix: str) -> str | None:
        """Return the remainder of the first tag that starts with `prefix`."""
        for tag in self._tags:
            if tag.startswith(prefix):
                return tag[len(prefix) :]
        return None

    @property
    def issue_number(self) -> int | None:
        """The GitHub issue number recorded in the tags, if any."""
        value = self.find_prefixed(ISSUE_TAG_PREFIX)
        if value is None or not value.strip().isdigit():
            return None
        return int(value.strip())

    @property
    def repository(self) -> str | None:
        """The GitHub repository full name recorded in the tags, if any."""
        return self.find_prefixed(REPO_TAG_PREFIX)

    def __contains__(self, tag: object) -> bool:
        return tag in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TagSet):
            return NotImplemented
        return self._tags == other._tags

    def __repr__(self) -> str:
        return f"TagSet({self._tags!r})"


class PatchOperation(BaseModel):
    """A single JSON Patch operation applied to a work item."""

    op: Literal["add", "replace", "remove"]
    path: str
    value: Any = None

    @classmethod
    def field(cls, op: Literal["add", "replace", "remove"], field_name: str, value: Any = None) -> "PatchOperation":
        """Build an operation against `/fields/<field_name>`."""
        return cls(op=op, path=f"/fields/{field_name}", value=value)

    @classmethod
    def relation(cls, rel: str, url: str) -> "PatchOperation":
        """Build an operation that appends a relation."""
        return cls(op="add", path="/relations/-", value={"rel": rel, "url": url})

    @property
    def field_name(self) -> str | None:
        """Field reference name targeted by this operation, if any."""
        if self.path.startswith("/fields/"):
            return self.path[len("/fields/") :]
        return None

    def to_json(self) -> dict[str, Any]:
        """Serialize to a JSON Patch document entry."""
        document: dict[str, Any] = {"op": self.op, "path": self.path}
        if self.op != "remove":
            document["value"] = self.value
        return document


class WorkItem(BaseModel):
    """Pydantic model for an Azure DevOps work item snapshot."""

    model_config = ConfigDict(extra="ignore")

    id: int
    rev: int | None = None
    fields: dict[str, Any] = {}
    relations: list[dict[str, Any]] | None = None
    url: str | None = None

    @property
    def title(self) -> str | None:
        return self.fields.get(FIELD_TITLE)

    @property
    def description(self) -> str | None:
        return self.fields.get(FIELD_DESCRIPTION)

    @property
    def state(self) -> str | None:
        return self.fields.get(FIELD_STATE)

    @property
    def tags(self) -> TagSet:
        return TagSet.parse(self.fields.get(FIELD_TAGS))

    @property
    def assigned_to(self) -> str | None:
        """Unique name of the assignee; Azure DevOps returns an identity object."""
        value = self.fields.get(FIELD_ASSIGNED_TO)
        if value is None:
            return None
        if isinstance(value, dict):
            return value.get("uniqueName")
        return str(value)

    @property
    def changed_date(self) -> datetime | None:
        value = self.fields.get(FIELD_CHANGED_DATE)
        if value is None:
            return None
        if isinstance(value, datetime):
            return value
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


class WorkItemReference(BaseModel):
    """Identifier returned by a WIQL query."""

    model_config = ConfigDict(extra="ignore")

    id: int
    url: str | None = None
