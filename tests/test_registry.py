"""Tests for h2md.registry module."""

from types import SimpleNamespace

import pytest
from bs4 import BeautifulSoup

from h2md.base_rules import BASE_RULES
from h2md.gfm_rules import GFM_RULES
from h2md.registry import (
    ConversionContext,
    Converter,
    ConverterConfigError,
    ExactTag,
    Predicate,
    Registry,
    TagSet,
    build_registry,
    make_filter,
    matches,
)


def _identity(content, node, context):
    return content


@pytest.fixture
def soup():
    return BeautifulSoup("<div><p>x</p><em>y</em></div>", "lxml")


@pytest.fixture
def context():
    return ConversionContext(Registry(()))


class TestMakeFilter:
    def test_string(self):
        assert make_filter("P") == ExactTag("p")

    def test_list(self):
        assert make_filter(["EM", "i"]) == TagSet(frozenset({"em", "i"}))

    def test_tuple_and_set(self):
        assert make_filter(("a", "b")) == TagSet(frozenset({"a", "b"}))
        assert make_filter({"a"}) == TagSet(frozenset({"a"}))

    def test_callable(self):
        assert isinstance(make_filter(lambda node, ctx: True), Predicate)

    def test_already_normalised(self):
        f = ExactTag("p")
        assert make_filter(f) is f

    @pytest.mark.parametrize("bad", [None, 42, {"p": 1}, ["p", 3]])
    def test_rejects_other_shapes(self, bad):
        with pytest.raises(ConverterConfigError):
            make_filter(bad)


class TestMatches:
    def test_exact_tag(self, soup, context):
        assert matches(soup.p, ExactTag("p"), context)
        assert not matches(soup.em, ExactTag("p"), context)

    def test_tag_set(self, soup, context):
        assert matches(soup.em, TagSet(frozenset({"em", "i"})), context)
        assert not matches(soup.p, TagSet(frozenset({"em", "i"})), context)

    def test_predicate_receives_context(self, soup, context):
        calls = []

        def pred(node, ctx):
            calls.append((node.name, ctx))
            return True

        assert matches(soup.p, Predicate(pred), context)
        assert calls == [("p", context)]


class TestConverter:
    def test_normalises_filter(self):
        converter = Converter("STRONG", _identity)
        assert converter.filter == ExactTag("strong")

    def test_rejects_non_callable_replacement(self):
        with pytest.raises(ConverterConfigError, match="replacement"):
            Converter("p", "not a function")

    def test_from_mapping(self):
        converter = Converter.from_definition({"filter": "p", "replacement": _identity})
        assert converter.filter == ExactTag("p")

    def test_from_object(self):
        definition = SimpleNamespace(filter=["a"], replacement=_identity)
        assert Converter.from_definition(definition).filter == TagSet(frozenset({"a"}))

    def test_from_converter(self):
        converter = Converter("p", _identity)
        assert Converter.from_definition(converter) is converter

    def test_missing_key(self):
        with pytest.raises(ConverterConfigError, match="replacement"):
            Converter.from_definition({"filter": "p"})

    def test_not_a_definition(self):
        with pytest.raises(ConverterConfigError):
            Converter.from_definition("p")


class TestRegistry:
    def test_first_match_wins(self, soup, context):
        first = Converter("p", _identity)
        second = Converter(lambda node, ctx: True, _identity)
        registry = Registry((first, second))
        assert registry.find(soup.p, context) is first
        assert registry.find(soup.em, context) is second

    def test_no_match(self, soup, context):
        assert Registry((Converter("p", _identity),)).find(soup.em, context) is None

    def test_replacement_checked_at_match_time(self, soup, context):
        broken = object.__new__(Converter)
        object.__setattr__(broken, "filter", ExactTag("p"))
        object.__setattr__(broken, "replacement", None)
        with pytest.raises(ConverterConfigError):
            Registry((broken,)).find(soup.p, context)

    def test_build_base_only(self):
        registry = build_registry()
        assert registry.converters == BASE_RULES

    def test_build_order(self):
        user = Converter("p", _identity)
        registry = build_registry(gfm=True, converters=[user])
        assert registry.converters[0] is user
        assert registry.converters[1:1 + len(GFM_RULES)] == GFM_RULES
        assert registry.converters[1 + len(GFM_RULES):] == BASE_RULES
        assert len(registry) == 1 + len(GFM_RULES) + len(BASE_RULES)

    def test_bad_definition_fails_at_build(self):
        with pytest.raises(ConverterConfigError):
            build_registry(converters=[{"filter": 1.5, "replacement": _identity}])

    def test_base_rules_end_with_catch_all(self, soup, context):
        registry = build_registry()
        for node in soup.find_all(True):
            assert registry.find(node, context) is not None


class TestConversionContext:
    def test_replacement_roundtrip(self, soup, context):
        context.set_replacement(soup.p, "x")
        assert context.replacement_of(soup.p) == "x"
        assert context.has_replacement(soup.p)

    def test_unset_replacement_raises(self, soup, context):
        with pytest.raises(KeyError):
            context.replacement_of(soup.p)

    def test_set_twice_raises(self, soup, context):
        context.set_replacement(soup.p, "x")
        with pytest.raises(RuntimeError):
            context.set_replacement(soup.p, "y")

    def test_content_of_mixes_text_and_elements(self, context):
        soup = BeautifulSoup("<p>a<em>b</em>c<!-- skip --></p>", "lxml")
        context.set_replacement(soup.em, "_b_")
        assert context.content_of(soup.p) == "a_b_c"

    def test_equal_looking_nodes_kept_apart(self, context):
        soup = BeautifulSoup("<ul><li>x</li><li>x</li></ul>", "lxml")
        first, second = soup.find_all("li")
        context.set_replacement(first, "1")
        context.set_replacement(second, "2")
        assert context.replacement_of(first) == "1"
        assert context.replacement_of(second) == "2"

    def test_helpers(self, soup, context):
        assert context.is_block(soup.div)
        assert not context.is_void(soup.em)
        assert context.trim("  x ") == "x"
        assert context.outer(soup.em, "z") == "<em>z</em>"
