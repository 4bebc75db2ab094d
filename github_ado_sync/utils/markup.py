"""Conversion between GitHub Markdown and Azure DevOps HTML."""

from typing import Protocol, runtime_checkable

import markdown
from markdownify import markdownify


@runtime_checkable
class TextConverter(Protocol):
    """Protocol for objects that translate issue text between the two systems."""

    def to_html(self, text: str | None) -> str:
        """Convert GitHub Markdown into HTML for a work item field."""
        ...

    def to_markdown(self, html: str | None) -> str:
        """Convert work item HTML back into GitHub Markdown."""
        ...


class MarkdownConverter:
    """Default converter using python-markdown and markdownify.

    The reverse direction is lossy; only semantic equivalence is expected.
    """

    extensions = ["fenced_code", "tables", "sane_lists", "nl2br"]

    def to_html(self, text: str | None) -> str:
        """Convert GitHub Markdown into HTML; empty input yields an empty string."""
        if not text:
            return ""
        return markdown.markdown(text, extensions=self.extensions)

    def to_markdown(self, html: str | None) -> str:
        """Convert HTML into Markdown with ATX headings and dash bullets.

        `nl2br` turns single newlines into `<br />`, which markdownify renders
        as a two-space hard break. Trailing whitespace is dropped from every
        line so such breaks come back as the plain newline they started as.
        """
        if not html:
            return ""
        markdown_text = markdownify(html, heading_style="ATX", bullets="-")
        return "\n".join(line.rstrip() for line in markdown_text.splitlines()).strip()
