"""GitHub Flavored Markdown rules, layered in front of the base rules."""

from __future__ import annotations

import re

from h2md.dom import element_children, index_in, tag_name
from h2md.registry import Converter

_HIGHLIGHT = re.compile(r"highlight highlight-(\S+)")

_ALIGN_BORDERS = {"left": ":--", "right": "--:", "center": ":-:"}


def _class_name(node) -> str:
    classes = node.get("class") or []
    return classes if isinstance(classes, str) else " ".join(classes)


def _cell(content, node):
    prefix = "| " if index_in(node.parent.contents, node) == 0 else " "
    return f"{prefix}{content} |"


def _line_break(content, node, context):
    return "\n"


def _strikethrough(content, node, context):
    return f"~~{content}~~"


def _is_task_checkbox(node, context):
    return (
        tag_name(node) == "input"
        and (node.get("type") or "").lower() == "checkbox"
        and tag_name(node.parent) == "li"
    )


def _task_checkbox(content, node, context):
    return ("[x]" if node.has_attr("checked") else "[ ]") + " "


def _table_cell(content, node, context):
    return _cell(content, node)


def _table_row(content, node, context):
    border_cells = ""
    if tag_name(node.parent) == "thead":
        for cell in element_children(node):
            align = (cell.get("align") or "").lower()
            border_cells += _cell(_ALIGN_BORDERS.get(align, "---"), cell)
    return "\n" + content + ("\n" + border_cells if border_cells else "")


def _table(content, node, context):
    return f"\n\n{content}\n\n"


def _table_section(content, node, context):
    return content


def _is_fenced_code(node, context):
    return (
        tag_name(node) == "pre"
        and bool(node.contents)
        and tag_name(node.contents[0]) == "code"
    )


def _fenced_code(content, node, context):
    return "\n\n```\n" + node.contents[0].get_text() + "\n```\n\n"


def _is_highlighted_pre(node, context):
    parent = node.parent
    return (
        tag_name(node) == "pre"
        and tag_name(parent) == "div"
        and _HIGHLIGHT.search(_class_name(parent)) is not None
    )


def _highlighted_pre(content, node, context):
    language = _HIGHLIGHT.search(_class_name(node.parent)).group(1)
    return f"\n\n```{language}\n{node.get_text()}\n```\n\n"


def _is_highlight_wrapper(node, context):
    return tag_name(node) == "div" and _HIGHLIGHT.search(_class_name(node)) is not None


def _highlight_wrapper(content, node, context):
    return f"\n\n{content}\n\n"


GFM_RULES: tuple[Converter, ...] = (
    Converter("br", _line_break),
    Converter(["del", "s", "strike"], _strikethrough),
    Converter(_is_task_checkbox, _task_checkbox),
    Converter(["th", "td"], _table_cell),
    Converter("tr", _table_row),
    Converter("table", _table),
    Converter(["thead", "tbody", "tfoot"], _table_section),
    Converter(_is_fenced_code, _fenced_code),
    Converter(_is_highlighted_pre, _highlighted_pre),
    Converter(_is_highlight_wrapper, _highlight_wrapper),
)
