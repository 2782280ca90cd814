"""Tests for templatization of cached markup."""

from __future__ import annotations

import pytest

from rendervault.core.path_codec import MISSING
from rendervault.core.template import (
    Template,
    collect_values,
    compile_template,
    escape_text,
    placeholder,
    restore,
    rewrite_instance_id,
    templatize,
)
from rendervault.shared.errors import TemplateError


class TestEscapeText:
    """Leaf values as markup text."""

    def test_markup_characters_are_escaped(self) -> None:
        assert escape_text('<b class="x">&</b>') == "&lt;b class=&quot;x&quot;&gt;&amp;&lt;/b&gt;"

    @pytest.mark.parametrize(("value", "expected"), [(None, ""), (MISSING, ""), (True, "true"), (3, "3")])
    def test_non_string_leaves(self, value, expected: str) -> None:
        assert escape_text(value) == expected


class TestTemplatize:
    """Placeholder substitution in a props copy."""

    def test_leaves_become_placeholders(self) -> None:
        props = {"text": "hi", "data": {"items": ["a", "b"]}, "other": 1}
        tokenized = templatize(props, ["text", "data.items"])
        assert tokenized == {
            "text": "${text}",
            "data": {"items": ["${data_.items_.0}", "${data_.items_.1}"]},
            "other": 1,
        }

    def test_absent_attribute_gets_a_placeholder(self) -> None:
        assert templatize({"name": "Ada"}, ["text"]) == {"name": "Ada", "text": "${text}"}

    def test_absent_nested_attribute_creates_intermediates(self) -> None:
        props = {"data": {}}
        assert templatize(props, ["data.label", "meta.title"]) == {
            "data": {"label": "${data_.label}"},
            "meta": {"title": "${meta_.title}"},
        }
        assert props == {"data": {}}

    def test_caller_props_untouched(self) -> None:
        props = {"data": {"items": ["a"]}}
        templatize(props, ["data.items"])
        assert props == {"data": {"items": ["a"]}}

    def test_collect_values_escapes_and_records_shapes(self) -> None:
        collected = collect_values({"items": ["<a>", "b"]}, ["items"])
        assert collected.values == {"items_.0": "&lt;a&gt;", "items_.1": "b"}
        assert collected.shapes == [("items", 2)]

    def test_absent_attribute_collects_empty_value(self) -> None:
        collected = collect_values({}, ["text"])
        assert collected.values == {"text": ""}


class TestCompileAndRestore:
    """Compiling markup into a template and splicing values back."""

    def test_round_trip_through_template(self) -> None:
        markup = f"<p>{placeholder('text')}</p><i>{placeholder('name')}</i>"
        template = compile_template(markup, ["text", "name"])

        assert template.slots == ("text", "name")
        assert restore(template, {"text": "Hi", "name": "Ada"}) == "<p>Hi</p><i>Ada</i>"

    def test_repeated_placeholder_fills_every_occurrence(self) -> None:
        template = compile_template("${text}|${text}", ["text"])
        assert template.render({"text": "x"}) == "x|x"

    def test_unknown_placeholders_stay_literal(self) -> None:
        template = compile_template("${other} ${text}", ["text"])
        assert template.render({"text": "v"}) == "${other} v"

    def test_longer_flat_key_is_not_split_by_prefix(self) -> None:
        markup = "${items_.1}${items_.10}"
        flat_keys = [f"items_.{index}" for index in range(11)]
        template = compile_template(markup, flat_keys)
        assert template.slots == ("items_.1", "items_.10")

    def test_escaped_placeholder_is_recognized(self) -> None:
        template = compile_template("<p>${a&amp;b}</p>", ["a&b"])
        assert template.render({"a&b": "ok"}) == "<p>ok</p>"

    def test_missing_slot_renders_empty(self) -> None:
        template = compile_template("<p>${text}</p>", ["text"])
        assert template.render({}) == "<p></p>"

    def test_markup_without_placeholders(self) -> None:
        template = compile_template("<p>static</p>", [])
        assert template.slots == ()
        assert template.render({"text": "x"}) == "<p>static</p>"

    def test_template_requires_matching_chunks(self) -> None:
        with pytest.raises(TemplateError, match="one more chunk"):
            Template(("a",), ("slot",))


class TestRewriteInstanceId:
    """Instance id markers in cached markup."""

    def test_root_and_derived_ids_are_rewritten(self) -> None:
        markup = '<div data-instance-id="r1"><span data-instance-id="r1.0"></span></div>'
        result = rewrite_instance_id(markup, "r1", "r9", "data-instance-id")
        assert result == '<div data-instance-id="r9"><span data-instance-id="r9.0"></span></div>'

    def test_no_rewrite_without_ids(self) -> None:
        markup = '<div data-instance-id="r1"></div>'
        assert rewrite_instance_id(markup, None, "r2", "data-instance-id") == markup
        assert rewrite_instance_id(markup, "r1", "r1", "data-instance-id") == markup
