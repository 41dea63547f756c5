"""Markdown post-processing: tidy the assembled output of the converter."""

from __future__ import annotations

import re


def strip_edges(markdown: str) -> str:
    """Drop leading newlines/tabs and all trailing whitespace.

    Leading spaces are kept: they may open an indented code block.
    """
    markdown = re.sub(r"^[\t\r\n]+", "", markdown)
    return re.sub(r"[\t\r\n\s]+$", "", markdown)


def collapse_whitespace_lines(markdown: str) -> str:
    r"""Turn whitespace-only lines between newlines into plain blank lines.

    "A\n  \t\nB" -> "A\n\nB"
    """
    return re.sub(r"\n\s+\n", "\n\n", markdown)


def collapse_blank_lines(markdown: str) -> str:
    """Collapse 3+ consecutive newlines down to 2 (one blank line)."""
    return re.sub(r"\n{3,}", "\n\n", markdown)


def clean_markdown(markdown: str) -> str:
    """Run all markdown post-processing fixups.

    Order matters:
    1. Strip edges (so no blank lines survive at either end)
    2. Normalise whitespace-only lines (they may create new newline runs)
    3. Cap newline runs at one blank line
    """
    if not markdown:
        return markdown

    markdown = strip_edges(markdown)
    markdown = collapse_whitespace_lines(markdown)
    markdown = collapse_blank_lines(markdown)
    return markdown
