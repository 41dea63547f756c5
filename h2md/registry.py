"""Converter definitions, filter matching and the per-call conversion context."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from bs4 import Tag

from h2md import dom

logger = logging.getLogger(__name__)


class ConverterConfigError(TypeError):
    """A converter definition is malformed or no converter fits a node."""


@dataclass(frozen=True)
class ExactTag:
    name: str


@dataclass(frozen=True)
class TagSet:
    names: frozenset[str]


@dataclass(frozen=True)
class Predicate:
    func: Callable[[Tag, "ConversionContext"], bool]


Filter = ExactTag | TagSet | Predicate


def make_filter(value) -> Filter:
    """Normalise a filter definition: tag name, collection of tag names, or callable."""
    if isinstance(value, (ExactTag, TagSet, Predicate)):
        return value
    if isinstance(value, str):
        return ExactTag(value.lower())
    if isinstance(value, (list, tuple, set, frozenset)) and all(isinstance(s, str) for s in value):
        return TagSet(frozenset(s.lower() for s in value))
    if callable(value):
        return Predicate(value)
    raise ConverterConfigError("`filter` needs to be a string, a list of strings, or a function")


def matches(node: Tag, filter: Filter, context: ConversionContext) -> bool:
    name = dom.tag_name(node)
    if isinstance(filter, ExactTag):
        return name == filter.name
    if isinstance(filter, TagSet):
        return name in filter.names
    if isinstance(filter, Predicate):
        return bool(filter.func(node, context))
    raise ConverterConfigError(f"unknown filter type: {type(filter).__name__}")


@dataclass(frozen=True)
class Converter:
    """A filter paired with a `replacement(content, node, context) -> str` function."""

    filter: Filter
    replacement: Callable[[str, Tag, "ConversionContext"], str]

    def __post_init__(self):
        object.__setattr__(self, "filter", make_filter(self.filter))
        _check_replacement(self.replacement)

    @classmethod
    def from_definition(cls, definition) -> Converter:
        """Build a converter from a `Converter`, a mapping, or any object with
        `filter` and `replacement` attributes."""
        if isinstance(definition, Converter):
            return definition
        if isinstance(definition, Mapping):
            try:
                return cls(definition["filter"], definition["replacement"])
            except KeyError as e:
                raise ConverterConfigError(f"converter definition is missing {e.args[0]!r}") from e
        if hasattr(definition, "filter") and hasattr(definition, "replacement"):
            return cls(definition.filter, definition.replacement)
        raise ConverterConfigError(
            f"{definition!r} is not a converter definition (needs `filter` and `replacement`)"
        )


def _check_replacement(replacement) -> None:
    if not callable(replacement):
        raise ConverterConfigError("`replacement` needs to be a function that returns a string")


@dataclass(frozen=True)
class Registry:
    """Ordered, immutable converter list; the first match wins."""

    converters: tuple[Converter, ...]

    def find(self, node: Tag, context: ConversionContext) -> Converter | None:
        for converter in self.converters:
            if matches(node, converter.filter, context):
                _check_replacement(converter.replacement)
                return converter
        return None

    def __len__(self) -> int:
        return len(self.converters)


def build_registry(
    gfm: bool = False,
    converters: Iterable | None = None,
) -> Registry:
    """Compose `converters ++ GFM rules (if gfm) ++ base rules`."""
    from h2md.base_rules import BASE_RULES
    from h2md.gfm_rules import GFM_RULES

    ordered: list[Converter] = []
    if converters:
        ordered.extend(Converter.from_definition(c) for c in converters)
    user_count = len(ordered)
    if gfm:
        ordered.extend(GFM_RULES)
    ordered.extend(BASE_RULES)

    logger.debug(
        "Registry built: %d user, %d gfm, %d base converters",
        user_count, len(GFM_RULES) if gfm else 0, len(BASE_RULES),
    )
    return Registry(tuple(ordered))


@dataclass
class ConversionContext:
    """State for a single conversion: the registry and each node's Markdown.

    Replacements live in a side table keyed by node identity rather than on
    the nodes themselves. The context is handed to every filter predicate and
    replacement function, which also gives them the classification and
    rendering helpers.
    """

    registry: Registry
    _replacements: dict[int, str] = field(default_factory=dict, init=False, repr=False)

    is_block = staticmethod(dom.is_block)
    is_void = staticmethod(dom.is_void)
    trim = staticmethod(dom.trim)
    outer = staticmethod(dom.outer_html)

    def set_replacement(self, node: Tag, text: str) -> None:
        key = id(node)
        if key in self._replacements:
            raise RuntimeError(f"<{node.name}> was already converted")
        self._replacements[key] = text

    def replacement_of(self, node: Tag) -> str:
        """Markdown computed for `node`; raises KeyError if not converted yet."""
        try:
            return self._replacements[id(node)]
        except KeyError:
            raise KeyError(f"<{node.name}> has not been converted yet") from None

    def has_replacement(self, node: Tag) -> bool:
        return id(node) in self._replacements

    def content_of(self, node: Tag) -> str:
        """Concatenate converted element children and raw text children in order."""
        parts = []
        for child in node.contents:
            if dom.is_element(child):
                parts.append(self.replacement_of(child))
            elif dom.is_text(child):
                parts.append(str(child))
        return "".join(parts)
