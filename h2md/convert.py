"""HTML -> markdown conversion: bottom-up processing of a BeautifulSoup tree."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from bs4 import Tag

from h2md._postprocess import clean_markdown
from h2md.collapse import collapse_whitespace
from h2md.dom import (
    BLOCK_TAGS,
    VOID_TAGS,
    bfs_order,
    inner_html,
    is_block,
    is_element,
    is_text,
    is_void,
    outer_html,
    parse_html,
    tag_name,
    trim,
)
from h2md.registry import ConversionContext, ConverterConfigError, build_registry

__all__ = [
    "BLOCK_TAGS",
    "VOID_TAGS",
    "html_to_markdown",
    "is_block",
    "is_void",
    "outer_html",
    "trim",
]

logger = logging.getLogger(__name__)

_ORDERED_LIST_TRIGGER = re.compile(r"(\d+)\. ")


@dataclass(frozen=True)
class Flanking:
    leading: str = ""
    trailing: str = ""


def html_to_markdown(
    html: str,
    gfm: bool = False,
    converters: Iterable | None = None,
) -> str:
    """Convert HTML to markdown.

    Pipeline:
    1. Escape "1. "-style text so it cannot turn into an ordered list
    2. Parse with BeautifulSoup/lxml and collapse insignificant whitespace
    3. Convert every element of <body>, deepest first
    4. Join the top-level results and clean up blank lines

    `converters` take precedence over the GFM rules (enabled by `gfm`),
    which take precedence over the base rules.
    """
    if not isinstance(html, str):
        raise TypeError(f"{html!r} is not a string")
    if not html.strip():
        return ""

    html = _ORDERED_LIST_TRIGGER.sub(r"\1\\. ", html)

    soup = parse_html(html)
    collapse_whitespace(soup, is_block, is_void)
    root = soup.body
    if root is None:
        # Head-only documents have nothing to render
        return ""

    context = ConversionContext(build_registry(gfm=gfm, converters=converters))
    nodes = bfs_order(root)

    # Reverse breadth-first order: children are done before their parents
    for node in reversed(nodes):
        process_node(node, context)

    return clean_markdown(context.content_of(root))


def process_node(node: Tag, context: ConversionContext) -> str:
    """Convert one element and record its replacement in `context`.

    All element children must already be converted.
    """
    content = context.content_of(node)

    if _is_blank(node, content):
        context.set_replacement(node, "")
        return ""

    converter = context.registry.find(node, context)
    if converter is None:
        raise ConverterConfigError(f"no converter matches <{tag_name(node)}>")

    whitespace = flanking_whitespace(node)
    if whitespace.leading or whitespace.trailing:
        content = trim(content)

    replacement = (
        whitespace.leading
        + converter.replacement(content, node, context)
        + whitespace.trailing
    )
    logger.debug("<%s> -> %r", tag_name(node), replacement)

    context.set_replacement(node, replacement)
    return replacement


def _is_blank(node: Tag, content: str) -> bool:
    """Empty non-void elements vanish; anchors survive as link targets."""
    return (
        not is_void(node)
        and tag_name(node) != "a"
        and re.fullmatch(r"\s*", content) is not None
    )


def flanking_whitespace(node: Tag) -> Flanking:
    """Single spaces to put back around an inline element.

    Whitespace at the edge of the element's own markup is kept as one space,
    unless the neighbouring sibling already provides it.
    """
    if is_block(node):
        return Flanking()

    markup = inner_html(node)
    has_leading = re.match(r"[ \r\n\t]", markup) is not None
    has_trailing = re.search(r"[ \r\n\t]\Z", markup) is not None

    leading = " " if has_leading and not _is_flanked_by_whitespace("left", node) else ""
    trailing = " " if has_trailing and not _is_flanked_by_whitespace("right", node) else ""
    return Flanking(leading, trailing)


def _is_flanked_by_whitespace(side: str, node: Tag) -> bool:
    if side == "left":
        sibling = node.previous_sibling
        pattern = re.compile(r" $")
    else:
        sibling = node.next_sibling
        pattern = re.compile(r"^ ")

    if sibling is None:
        return False
    if is_text(sibling):
        return pattern.search(str(sibling)) is not None
    if is_element(sibling) and not is_block(sibling):
        return pattern.search(sibling.get_text()) is not None
    return False
