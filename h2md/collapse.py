"""Collapse insignificant whitespace in a parsed tree before conversion.

Runs of spaces, tabs and newlines in text become a single space; spaces at
the edges of block-level elements disappear; comments and other non-text,
non-element nodes are dropped. ``<pre>`` content is left untouched.
"""

from __future__ import annotations

import re
from typing import Callable

from bs4 import NavigableString, Tag

from h2md.dom import is_element, is_text, tag_name

_WHITESPACE_RUN = re.compile(r"[ \r\n\t]+")


def collapse_whitespace(
    root: Tag,
    is_block: Callable[[Tag], bool],
    is_void: Callable[[Tag], bool],
) -> None:
    """Rewrite the text nodes below `root` in place."""
    if not root.contents or tag_name(root) == "pre":
        return

    prev_text = None
    prev_void = False

    prev = None
    node = _next(prev, root)

    while node is not root:
        if is_text(node):
            text = _WHITESPACE_RUN.sub(" ", str(node))

            if (prev_text is None or prev_text.endswith(" ")) and not prev_void \
                    and text.startswith(" "):
                text = text[1:]

            if not text:
                node = _remove(node)
                continue

            node = _set_text(node, text)
            prev_text = node

        elif is_element(node):
            if is_block(node) or tag_name(node) == "br":
                if prev_text is not None:
                    replaced = _strip_trailing_space(prev_text)
                    if prev is prev_text:
                        prev = replaced
                prev_text = None
                prev_void = False
            elif is_void(node):
                # Keep the space around inline void elements such as <img>
                prev_text = None
                prev_void = True

        else:
            node = _remove(node)
            continue

        next_node = _next(prev, node)
        prev = node
        node = next_node

    if prev_text is not None:
        prev_text = _strip_trailing_space(prev_text)
        if not prev_text:
            prev_text.extract()


def _strip_trailing_space(text_node: NavigableString) -> NavigableString:
    if text_node.endswith(" "):
        return _set_text(text_node, text_node[:-1])
    return text_node


def _set_text(text_node: NavigableString, text: str) -> NavigableString:
    """Swap `text_node` for a new string node; bs4 strings are immutable."""
    if str(text_node) == text:
        return text_node
    replacement = NavigableString(text)
    text_node.replace_with(replacement)
    return replacement


def _remove(node):
    """Detach `node` and return the next node the walk should visit."""
    following = _first_present(node.next_sibling, node.parent)
    node.extract()
    return following


def _next(prev, current):
    if (prev is not None and prev.parent is current) or tag_name(current) == "pre":
        return _first_present(current.next_sibling, current.parent)
    first_child = current.contents[0] if is_element(current) and current.contents else None
    return _first_present(first_child, current.next_sibling, current.parent)


def _first_present(*nodes):
    # Empty strings are falsy, so `or` chaining would skip them.
    for node in nodes:
        if node is not None:
            return node
    return None
