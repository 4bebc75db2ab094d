"""Contains utility functions for synchronization actions."""

from datetime import datetime, timezone
from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class HasName(Protocol):
    """Label objects from githubkit expose their name as an attribute."""

    name: str


LabelType = str | dict[str, Any] | HasName


def extract_label_names(labels: Sequence[LabelType] | None) -> set[str]:
    """Extract label names from a list of GitHub label objects, strings, or dicts."""
    names: set[str] = set()
    for label in labels or []:
        if isinstance(label, str):
            names.add(label)
        elif isinstance(label, dict) and "name" in label:
            names.add(label["name"])
        elif isinstance(label, HasName) and label.name is not None:
            names.add(label.name)
    return names


def has_label(labels: Sequence[LabelType] | None, name: str) -> bool:
    """Case-insensitive check for a label in a list of GitHub labels."""
    return name.lower() in {label_name.lower() for label_name in extract_label_names(labels)}


def as_utc(value: datetime | str) -> datetime:
    """Normalize a timestamp to an aware UTC datetime; naive values are taken as UTC."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_strictly_newer(candidate: datetime | str | None, reference: datetime | str | None) -> bool:
    """True only when `candidate` is later than `reference`; equal or unknown timestamps are never newer."""
    if candidate is None or reference is None:
        return False
    return as_utc(candidate) > as_utc(reference)


def login_of(user: Any) -> str | None:
    """Login of a GitHub user object or dict, if any."""
    if user is None:
        return None
    if isinstance(user, dict):
        return user.get("login")
    return getattr(user, "login", None)
