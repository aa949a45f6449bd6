"""Tests for the range/attribute model and its resolution order."""

from types import MappingProxyType

import pytest

from tinct.attributes import EMPTY_ATTRIBUTES, freeze_attributes, merge_attributes
from tinct.errors import InvalidRangeError, StyleError
from tinct.model import AttributedText, RangeEntry, apply_entries, ordered_entries, resolve_attributes
from tinct.ranges import TextRange

TEXT = "0123456789"


def _colors(result: AttributedText) -> list[str | None]:
    return [attrs.get("color") for _, attrs in result]


class TestAttributeSets:
    """freeze_attributes and merge_attributes."""

    def test_freeze_is_read_only(self) -> None:
        frozen = freeze_attributes({"color": "red"})
        with pytest.raises(TypeError):
            frozen["color"] = "blue"  # type: ignore[index]

    def test_freeze_copies(self) -> None:
        source = {"color": "red"}
        frozen = freeze_attributes(source)
        source["color"] = "blue"
        assert frozen["color"] == "red"

    def test_freeze_copies_read_only_views(self) -> None:
        source = {"color": "red"}
        frozen = freeze_attributes(MappingProxyType(source))
        source["color"] = "blue"
        assert frozen["color"] == "red"

    def test_freeze_none_is_empty(self) -> None:
        assert freeze_attributes(None) is EMPTY_ATTRIBUTES

    def test_freeze_rejects_non_mapping(self) -> None:
        with pytest.raises(StyleError):
            freeze_attributes(["color"])  # type: ignore[arg-type]

    def test_merge_overrides_and_keeps(self) -> None:
        merged = merge_attributes({"color": "red", "font": "Body"}, {"color": "blue"})
        assert dict(merged) == {"color": "blue", "font": "Body"}


class TestRangeEntry:
    """RangeEntry construction."""

    def test_attributes_are_frozen(self) -> None:
        entry = RangeEntry({"color": "red"}, TextRange(0, 1), 1)
        with pytest.raises(TypeError):
            entry.attributes["color"] = "blue"  # type: ignore[index]

    def test_negative_level_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            RangeEntry({}, TextRange(0, 1), -1)

    def test_ordering_is_level_then_insertion(self) -> None:
        a = RangeEntry({"k": "a"}, TextRange(0, 1), 2)
        b = RangeEntry({"k": "b"}, TextRange(0, 1), 1)
        c = RangeEntry({"k": "c"}, TextRange(0, 1), 2)
        d = RangeEntry({"k": "d"}, TextRange(0, 1), 1)
        assert ordered_entries([a, b, c, d]) == [b, d, a, c]


class TestResolution:
    """Override and union laws."""

    def test_no_entries_is_base_everywhere(self) -> None:
        result = resolve_attributes(TEXT, {"font": "Body"}, [])
        assert all(dict(attrs) == {"font": "Body"} for _, attrs in result)
        assert len(result.runs()) == 1

    def test_override_law(self) -> None:
        entries = [
            RangeEntry({"color": "red"}, TextRange(0, 10), 1),
            RangeEntry({"color": "blue"}, TextRange(5, 10), 2),
        ]
        result = resolve_attributes(TEXT, {}, entries)
        assert _colors(result) == ["red"] * 5 + ["blue"] * 5

    def test_override_law_independent_of_insertion_order(self) -> None:
        entries = [
            RangeEntry({"color": "blue"}, TextRange(5, 10), 2),
            RangeEntry({"color": "red"}, TextRange(0, 10), 1),
        ]
        result = resolve_attributes(TEXT, {}, entries)
        assert _colors(result) == ["red"] * 5 + ["blue"] * 5

    def test_union_law(self) -> None:
        entries = [
            RangeEntry({"color": "red"}, TextRange(0, 10), 1),
            RangeEntry({"underline": True}, TextRange(0, 10), 2),
        ]
        result = resolve_attributes(TEXT, {}, entries)
        for i in range(10):
            assert dict(result.attributes_at(i)) == {"color": "red", "underline": True}

    def test_falls_through_to_base(self) -> None:
        entries = [RangeEntry({"color": "red"}, TextRange(2, 4), 1)]
        result = resolve_attributes(TEXT, {"color": "black", "font": "Body"}, entries)
        assert result.value_at(0, "color") == "black"
        assert result.value_at(2, "color") == "red"
        assert result.value_at(2, "font") == "Body"

    def test_equal_levels_apply_in_insertion_order(self) -> None:
        entries = [
            RangeEntry({"color": "red"}, TextRange(0, 10), 1),
            RangeEntry({"color": "blue"}, TextRange(0, 10), 1),
        ]
        result = resolve_attributes(TEXT, {}, entries)
        assert set(_colors(result)) == {"blue"}

    def test_absent_key_stays_absent(self) -> None:
        entries = [RangeEntry({"color": "red"}, TextRange(0, 3), 1)]
        result = resolve_attributes(TEXT, {}, entries)
        assert "color" not in result.attributes_at(5)

    def test_empty_attributes_are_skipped(self) -> None:
        calls: list[TextRange] = []

        class RecordingSink:
            def begin(self, text, base_attributes) -> None:
                pass

            def add_attributes(self, attributes, span) -> None:
                calls.append(span)

            def finish(self) -> list[TextRange]:
                return calls

        entries = [
            RangeEntry({}, TextRange(0, 2), 1),
            RangeEntry({"color": "red"}, TextRange(3, 4), 1),
        ]
        assert apply_entries(RecordingSink(), TEXT, {}, entries) == [TextRange(3, 4)]

    def test_entry_outside_text_rejected(self) -> None:
        entries = [RangeEntry({"color": "red"}, TextRange(5, 11), 1)]
        with pytest.raises(InvalidRangeError, match="length 10"):
            resolve_attributes(TEXT, {}, entries)


class TestAttributedText:
    """The default sink."""

    def test_runs_coalesce_equal_sets(self) -> None:
        at = AttributedText("aabbcc")
        at.add_attributes({"color": "red"}, TextRange(2, 4))
        runs = [(str(span), dict(attrs)) for span, attrs in at.runs()]
        assert runs == [("[0, 2)", {}), ("[2, 4)", {"color": "red"}), ("[4, 6)", {})]

    def test_runs_of_empty_text(self) -> None:
        assert AttributedText("").runs() == []

    def test_add_outside_text_rejected(self) -> None:
        at = AttributedText("abc")
        with pytest.raises(InvalidRangeError):
            at.add_attributes({"color": "red"}, TextRange(1, 4))

    def test_attributes_at_out_of_range(self) -> None:
        with pytest.raises(InvalidRangeError):
            AttributedText("abc").attributes_at(3)

    def test_begin_resets(self) -> None:
        at = AttributedText("abc", {"color": "red"})
        at.begin("xy", freeze_attributes({"font": "Mono"}))
        assert at.text == "xy"
        assert dict(at.attributes_at(1)) == {"font": "Mono"}

    def test_equality(self) -> None:
        a = AttributedText("ab", {"color": "red"})
        b = AttributedText("ab", {"color": "red"})
        c = AttributedText("ab", {"color": "blue"})
        assert a == b
        assert a != c

    def test_iteration_pairs_characters(self) -> None:
        at = AttributedText("ab", {"k": 1})
        assert [(ch, dict(attrs)) for ch, attrs in at] == [("a", {"k": 1}), ("b", {"k": 1})]
