"""Narrow an HTML page down to the part worth converting."""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup
from readability import Document

logger = logging.getLogger(__name__)


def extract_content(
    html: str,
    url: str = "",
    selector: str | None = None,
    strip_boilerplate: bool = False,
) -> str:
    """Return the HTML to convert.

    1. A CSS selector takes priority; matches are joined with newlines
    2. Otherwise (or if the selector matches nothing) readability-lxml
       extracts the main content, if strip_boilerplate is set
    3. Otherwise the HTML is returned unchanged
    """
    if not html or not html.strip():
        return ""

    if selector:
        soup = BeautifulSoup(html, "lxml")
        selected = soup.select(selector)
        if selected:
            logger.debug("Selector %r matched %d elements", selector, len(selected))
            return "\n".join(str(el) for el in selected)
        logger.debug("Selector %r matched nothing", selector)

    if strip_boilerplate:
        return _readability_extract(html, url)

    return html


def _readability_extract(html: str, url: str = "") -> str:
    """Extract main content using Mozilla's Readability algorithm."""
    doc = Document(html, url=url)
    return doc.summary()
