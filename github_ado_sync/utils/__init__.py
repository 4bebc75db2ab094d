"""Utility modules for shared functionality."""

from .constants import (
    ISSUE_TAG_PREFIX,
    LABEL_TAG_PREFIX,
    REPO_TAG_PREFIX,
    TAG_DELIMITER,
)
from .logging import configure_logging

__all__ = [
    "ISSUE_TAG_PREFIX",
    "REPO_TAG_PREFIX",
    "LABEL_TAG_PREFIX",
    "TAG_DELIMITER",
    "configure_logging",
]
