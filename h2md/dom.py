"""BeautifulSoup tree helpers: parsing, classification, flattening."""

from __future__ import annotations

import re
from collections import deque

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

BLOCK_TAGS = frozenset([
    "address", "article", "aside", "audio", "blockquote", "body",
    "canvas", "center", "dd", "dir", "div", "dl", "dt", "fieldset", "figcaption",
    "figure", "footer", "form", "frameset", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hgroup", "hr", "html", "isindex", "li", "main", "menu", "nav",
    "noframes", "noscript", "ol", "output", "p", "pre", "section", "table",
    "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
])

VOID_TAGS = frozenset([
    "area", "base", "br", "col", "command", "embed", "hr", "img", "input",
    "keygen", "link", "meta", "param", "source", "track", "wbr",
])

_EDGE_WHITESPACE = re.compile(r"^[ \r\n\t]+|[ \r\n\t]+$")


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (lxml builder)."""
    return BeautifulSoup(html, "lxml")


def is_element(node) -> bool:
    return isinstance(node, Tag)


def is_text(node) -> bool:
    """True for plain character data; comments, doctypes and CDATA are not text."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def tag_name(node) -> str:
    return (node.name or "").lower() if is_element(node) else ""


def is_block(node) -> bool:
    return tag_name(node) in BLOCK_TAGS


def is_void(node) -> bool:
    return tag_name(node) in VOID_TAGS


def trim(string: str) -> str:
    """Strip spaces, tabs and newlines from both ends (not other unicode space)."""
    return _EDGE_WHITESPACE.sub("", string)


def inner_html(node: Tag) -> str:
    return node.decode_contents()


def outer_html(node: Tag, content: str = "") -> str:
    """Render `node` as HTML with its descendants replaced by `content`.

    The element is re-created without children so that only its own tag and
    attributes are serialized, e.g. ``<span class="x">content</span>``.
    Void elements render self-closed and ignore `content`.
    """
    shell = Tag(
        name=node.name,
        attrs=dict(node.attrs),
        can_be_empty_element=is_void(node),
    )
    return str(shell).replace("><", f">{content}<", 1)


def element_children(node: Tag) -> list[Tag]:
    return [child for child in node.contents if is_element(child)]


def index_in(children: list, node) -> int:
    """Position of `node` in `children`, compared by identity.

    Equal-looking siblings (two ``<li>a</li>``) compare equal in bs4, so
    ``list.index`` cannot be used.
    """
    for i, child in enumerate(children):
        if child is node:
            return i
    raise ValueError(f"{node.name!r} is not among the given children")


def bfs_order(root: Tag) -> list[Tag]:
    """Flatten the element descendants of `root` in breadth-first order.

    `root` itself is excluded and text nodes are skipped. Every node comes
    before all of its descendants, so iterating the result in reverse visits
    children before their parents.
    """
    queue = deque([root])
    ordered: list[Tag] = []

    while queue:
        elem = queue.popleft()
        ordered.append(elem)
        for child in elem.contents:
            if is_element(child):
                queue.append(child)

    return ordered[1:]
