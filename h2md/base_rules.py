"""Base Markdown conversion rules.

Each rule is a `Converter`; order matters because the first match wins. The
last two rules keep unknown block and inline elements as HTML, so every
element has a converter.
"""

from __future__ import annotations

import re

from h2md.dom import element_children, index_in, tag_name
from h2md.registry import Converter

CONTAINER_TAGS = ["div", "section", "article", "main", "header", "footer"]


def _paragraph(content, node, context):
    return f"\n\n{content}\n\n"


def _line_break(content, node, context):
    return "  \n"


def _heading(content, node, context):
    level = int(tag_name(node)[1])
    return f"\n\n{'#' * level} {content}\n\n"


def _rule(content, node, context):
    return "\n\n* * *\n\n"


def _emphasis(content, node, context):
    return f"_{content}_"


def _strong(content, node, context):
    return f"**{content}**"


def _is_inline_code(node, context):
    has_siblings = node.previous_sibling is not None or node.next_sibling is not None
    is_code_block = tag_name(node.parent) == "pre" and not has_siblings
    return tag_name(node) == "code" and not is_code_block


def _inline_code(content, node, context):
    return f"`{content}`"


def _is_link(node, context):
    return tag_name(node) == "a" and bool(node.get("href"))


def _title_part(node) -> str:
    title = node.get("title")
    return f' "{title}"' if title else ""


def _link(content, node, context):
    return f"[{content}]({node['href']}{_title_part(node)})"


def _image(content, node, context):
    alt = node.get("alt") or ""
    src = node.get("src") or ""
    return f"![{alt}]({src}{_title_part(node)})" if src else ""


def _first_child(node):
    return node.contents[0] if node.contents else None


def _is_code_block(node, context):
    return tag_name(node) == "pre" and tag_name(_first_child(node)) == "code"


def _code_block(content, node, context):
    code = _first_child(node).get_text()
    return "\n\n    " + code.replace("\n", "\n    ") + "\n\n"


def _blockquote(content, node, context):
    content = context.trim(content)
    content = re.sub(r"\n{3,}", "\n\n", content)
    content = re.sub(r"^", "> ", content, flags=re.M)
    return f"\n\n{content}\n\n"


def _list_item(content, node, context):
    content = re.sub(r"^\s+", "", content).replace("\n", "\n    ")
    parent = node.parent
    if tag_name(parent) == "ol":
        start = parent.get("start")
        offset = int(start) - 1 if start and start.isdigit() else 0
        index = index_in(element_children(parent), node) + 1 + offset
        prefix = f"{index}.  "
    else:
        prefix = "*   "
    return prefix + content


def _list(content, node, context):
    items = [context.replacement_of(child) for child in element_children(node)]
    if tag_name(node.parent) == "li":
        return "\n" + "\n".join(items)
    return "\n\n" + "\n".join(items) + "\n\n"


def _container(content, node, context):
    return f"\n\n{content}\n\n"


def _is_block(node, context):
    return context.is_block(node)


def _block_html(content, node, context):
    return "\n\n" + context.outer(node, content) + "\n\n"


def _anything(node, context):
    return True


def _inline_html(content, node, context):
    return context.outer(node, content)


BASE_RULES: tuple[Converter, ...] = (
    Converter("p", _paragraph),
    Converter("br", _line_break),
    Converter(["h1", "h2", "h3", "h4", "h5", "h6"], _heading),
    Converter("hr", _rule),
    Converter(["em", "i"], _emphasis),
    Converter(["strong", "b"], _strong),
    Converter(_is_inline_code, _inline_code),
    Converter(_is_link, _link),
    Converter("img", _image),
    Converter(_is_code_block, _code_block),
    Converter("blockquote", _blockquote),
    Converter("li", _list_item),
    Converter(["ul", "ol"], _list),
    Converter(CONTAINER_TAGS, _container),
    Converter(_is_block, _block_html),
    Converter(_anything, _inline_html),
)
