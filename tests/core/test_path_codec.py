"""Tests for the props path codec (FlatKey escaping, flatten, unflatten)."""

from __future__ import annotations

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

from rendervault.core.path_codec import (
    MISSING,
    assign_path,
    check_collisions,
    copy_tree,
    flatten,
    from_flat_key,
    parse_path,
    read_path,
    to_flat_key,
    unflatten,
)
from rendervault.core.template import templatize
from rendervault.shared.errors import ConfigurationError, ErrorCode

segments_strategy = st.lists(st.text(max_size=6), min_size=1, max_size=4).map(tuple)

leaf_strategy = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-1000, max_value=1000),
    st.text(max_size=8),
)

tree_strategy = st.recursive(
    leaf_strategy,
    lambda children: st.one_of(
        st.lists(children, max_size=3),
        st.dictionaries(st.text(min_size=1, max_size=5), children, max_size=3),
    ),
    max_leaves=12,
)


class TestFlatKeyEscaping:
    """FlatKey construction and decoding."""

    def test_segments_joined_with_separator(self) -> None:
        assert to_flat_key(("foo", "bar")) == "foo_.bar"

    def test_literal_underscore_doubled(self) -> None:
        assert to_flat_key(("foo_bar",)) == "foo__bar"

    def test_dotted_path_and_underscored_name_stay_distinct(self) -> None:
        """``foo.bar`` and ``foo_bar`` must never share a FlatKey."""
        assert to_flat_key(parse_path("foo.bar")) != to_flat_key(parse_path("foo_bar"))

    def test_boundary_underscores_stay_distinct(self) -> None:
        assert to_flat_key(("a_", "b")) != to_flat_key(("a", "_b"))

    def test_decode_inverts_encode(self) -> None:
        assert from_flat_key("a___.b") == ("a_", "b")
        assert from_flat_key("a_.__b") == ("a", "_b")

    @pytest.mark.parametrize("malformed", ["a_b", "trailing_", "_x"])
    def test_decode_rejects_malformed_keys(self, malformed: str) -> None:
        with pytest.raises(ValueError, match="Malformed FlatKey"):
            from_flat_key(malformed)

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(segments_strategy, segments_strategy)
    def test_encoding_is_injective(self, first: tuple[str, ...], second: tuple[str, ...]) -> None:
        if first != second:
            assert to_flat_key(first) != to_flat_key(second)

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(segments_strategy)
    def test_decoding_round_trips(self, segments: tuple[str, ...]) -> None:
        assert from_flat_key(to_flat_key(segments)) == segments


class TestParseAndRead:
    """Attribute path parsing and reading."""

    def test_empty_path_is_rejected(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            parse_path("")
        assert exc_info.value.code == ErrorCode.INVALID_ATTRIBUTE_PATH

    def test_reads_through_mappings_and_sequences(self) -> None:
        props = {"data": {"items": [{"label": "a"}, {"label": "b"}]}}
        assert read_path(props, "data.items.1.label") == "b"

    def test_absent_segments_yield_missing(self) -> None:
        props = {"data": {"items": []}}
        assert read_path(props, "data.items.0.label") is MISSING
        assert read_path(props, "data.nope") is MISSING
        assert read_path(props, "data.items.x") is MISSING

    def test_default_replaces_missing(self) -> None:
        assert read_path({}, "a.b", default="fallback") == "fallback"

    def test_integer_mapping_keys_match_digit_segments(self) -> None:
        assert read_path({"rows": {3: "three"}}, "rows.3") == "three"

    def test_strings_are_leaves(self) -> None:
        assert read_path({"text": "hello"}, "text.0") is MISSING

    def test_missing_sentinel_is_falsy_singleton(self) -> None:
        assert not MISSING
        assert copy_tree(MISSING) is MISSING
        assert repr(MISSING) == "MISSING"


class TestFlatten:
    """Flattening subtrees into FlatKey tables."""

    def test_leaf_path(self) -> None:
        assert flatten({"text": "hi"}, "text") == {"text": "hi"}

    def test_nested_subtree_with_shapes(self) -> None:
        props = {"a": {"b": 1, "c": [2, 3]}}
        shapes: list = []

        flat = flatten(props, "a", shapes)

        assert flat == {"a_.b": 1, "a_.c_.0": 2, "a_.c_.1": 3}
        assert shapes == [("a_.c", 2)]

    def test_sequence_at_path_is_recorded_first(self) -> None:
        shapes: list = []
        flatten({"items": [[1], [2, 3]]}, "items", shapes)
        assert shapes == [("items", 2), ("items_.0", 1), ("items_.1", 2)]

    def test_absent_path_yields_single_missing_entry(self) -> None:
        assert flatten({}, "x.y") == {"x_.y": MISSING}

    def test_empty_containers_yield_no_leaves(self) -> None:
        shapes: list = []
        assert flatten({"items": []}, "items", shapes) == {}
        assert shapes == [("items", 0)]

    def test_underscored_keys_escaped_inside_subtree(self) -> None:
        flat = flatten({"data": {"first_name": "Ada"}}, "data")
        assert flat == {"data_.first__name": "Ada"}


class TestUnflatten:
    """Writing FlatKey tables back into trees."""

    def test_replaces_leaves_in_place(self) -> None:
        tree = {"a": {"b": 1, "c": [2, 3]}}
        result = unflatten(tree, "a", {"a_.b": "x", "a_.c_.0": "y", "a_.c_.1": "z"})
        assert result is tree
        assert tree == {"a": {"b": "x", "c": ["y", "z"]}}

    def test_missing_table_entries_become_none(self) -> None:
        tree = {"a": {"b": 1}}
        unflatten(tree, "a", {})
        assert tree == {"a": {"b": None}}

    def test_absent_path_is_a_no_op(self) -> None:
        tree = {"a": 1}
        assert unflatten(tree, "b.c", {"b_.c": 2}) == {"a": 1}

    def test_assign_creates_missing_intermediates(self) -> None:
        assert assign_path({"a": 1}, "b.c", "x") == {"a": 1, "b": {"c": "x"}}

    def test_assign_pads_short_lists(self) -> None:
        tree = {"items": ["a"]}
        assign_path(tree, "items.2", "c")
        assert tree == {"items": ["a", None, "c"]}

    def test_assign_replaces_leaf_in_the_way(self) -> None:
        assert assign_path({"text": "hi"}, "text.label", "x") == {"text": {"label": "x"}}

    def test_tuples_are_rebuilt(self) -> None:
        tree = {"pair": (1, 2)}
        result = unflatten(tree, "pair", {"pair_.0": "a", "pair_.1": "b"})
        assert result == {"pair": ("a", "b")}

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(tree_strategy)
    def test_flatten_then_unflatten_restores_subtree(self, subtree) -> None:
        tree = {"root": subtree}
        table = flatten(tree, "root")
        tokenized = templatize(tree, ["root"])

        assert unflatten(tokenized, "root", table) == tree


class TestCheckCollisions:
    """Configuration-time FlatKey collision detection."""

    def test_distinct_paths_map_to_flat_keys(self) -> None:
        result = check_collisions(["foo.bar", "foo_bar"])
        assert result == {"foo.bar": "foo_.bar", "foo_bar": "foo__bar"}

    def test_duplicate_paths_collide(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            check_collisions(["text", "text"], component="Greeter")
        assert exc_info.value.code == ErrorCode.FLAT_KEY_COLLISION
        assert exc_info.value.context.component == "Greeter"

    def test_index_spellings_collide(self) -> None:
        with pytest.raises(ConfigurationError, match="items.0"):
            check_collisions(["items.0", "items.00"])

    def test_nested_paths_collide(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            check_collisions(["data.items", "data"], component="List")
        assert exc_info.value.context.additional_data == {
            "flat_key": "data_.items",
            "first_path": "data.items",
            "second_path": "data",
        }

    def test_sibling_prefix_names_do_not_collide(self) -> None:
        assert check_collisions(["item", "items"]) == {"item": "item", "items": "items"}
