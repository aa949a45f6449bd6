"""Property-based tests for resolution and parsing using Hypothesis.

These tests verify invariants that should hold for any input:
1. Resolving with no layers yields the base attributes everywhere
2. Every key resolves to the highest-priority covering layer that sets it
3. Each styling call lands strictly above everything before it
4. The markup parser never raises and reports ranges inside its text
"""

import random

from hypothesis import given, settings
from hypothesis import strategies as st

from tinct import StyleBuilder, parse_markup
from tinct.model import RangeEntry, resolve_attributes
from tinct.ranges import TextRange

keys = st.sampled_from(["color", "bold", "font", "size"])
values = st.one_of(st.integers(0, 3), st.sampled_from(["red", "blue", "Body"]))
attribute_sets = st.dictionaries(keys, values, max_size=3)
texts = st.text(alphabet="ab #@x1", max_size=20)


@st.composite
def ranges_in(draw: st.DrawFn, length: int) -> TextRange:
    start = draw(st.integers(0, length))
    end = draw(st.integers(start, length))
    return TextRange(start, end)


@st.composite
def layered_texts(draw: st.DrawFn) -> tuple[str, dict, list[RangeEntry]]:
    text = draw(texts)
    base = draw(attribute_sets)
    entries = draw(
        st.lists(
            st.builds(
                RangeEntry,
                attribute_sets,
                ranges_in(len(text)),
                st.integers(0, 4),
            ),
            max_size=8,
        )
    )
    return text, base, entries


def _expected(text: str, base: dict, entries: list[RangeEntry], index: int) -> dict:
    """Reference resolution for one character, straight from the layering rule."""
    result = dict(base)
    for key in {k for e in entries for k in e.attributes} | set(base):
        winners = [
            (e.level, order, e.attributes[key])
            for order, e in enumerate(entries)
            if e.range.start <= index < e.range.end and key in e.attributes
        ]
        if winners:
            result[key] = max(winners, key=lambda w: (w[0], w[1]))[2]
    return result


class TestResolutionProperties:
    @given(text=texts, base=attribute_sets)
    def test_no_layers_is_base_everywhere(self, text: str, base: dict) -> None:
        result = resolve_attributes(text, base, [])
        assert result.text == text
        assert all(dict(attrs) == base for _, attrs in result)

    @given(case=layered_texts())
    @settings(max_examples=200)
    def test_highest_covering_layer_wins(self, case: tuple[str, dict, list[RangeEntry]]) -> None:
        text, base, entries = case
        result = resolve_attributes(text, base, entries)
        for i in range(len(text)):
            assert dict(result.attributes_at(i)) == _expected(text, base, entries, i)

    @given(case=layered_texts(), seed=st.integers(0, 2**16))
    def test_order_only_matters_within_a_level(
        self, case: tuple[str, dict, list[RangeEntry]], seed: int
    ) -> None:
        text, base, entries = case
        # Give every entry its own level, then shuffle the input order
        distinct = [RangeEntry(e.attributes, e.range, i) for i, e in enumerate(entries)]
        shuffled = distinct[:]
        random.Random(seed).shuffle(shuffled)
        assert resolve_attributes(text, base, distinct) == resolve_attributes(text, base, shuffled)

    @given(case=layered_texts())
    def test_runs_cover_text(self, case: tuple[str, dict, list[RangeEntry]]) -> None:
        text, base, entries = case
        runs = resolve_attributes(text, base, entries).runs()
        assert sum(len(r) for r, _ in runs) == len(text)
        for (left, left_attrs), (right, right_attrs) in zip(runs, runs[1:]):
            assert left.end == right.start
            assert left_attrs != right_attrs


class TestBuilderProperties:
    @given(text=texts, calls=st.lists(st.sampled_from(["hashtags", "mentions", "regex"]), max_size=6))
    def test_each_call_raises_level_by_one(self, text: str, calls: list[str]) -> None:
        builder = StyleBuilder(text)
        for n, call in enumerate(calls, start=1):
            before = builder.entries
            if call == "regex":
                builder.style_regex(r"\d+", {"k": n})
            else:
                getattr(builder, f"style_{call}")({"k": n})
            assert builder.current_max_level == n
            new = builder.entries[len(before) :]
            assert all(e.level == n for e in new)
            assert all(e.level > old.level for e in new for old in before)

    @given(text=texts)
    def test_resolve_is_idempotent(self, text: str) -> None:
        builder = StyleBuilder(text, {"font": "Body"}).style_hashtags({"color": "blue"})
        assert builder.resolve() == builder.resolve()


markup_alphabet = st.sampled_from(
    ["<b>", "</b>", "<i>", "</i>", "<br>", "<br/>", "<!--", "-->", "&amp;", "&", "<", ">", "x", " ", '"']
)


class TestParserProperties:
    @given(parts=st.lists(markup_alphabet, max_size=30))
    @settings(max_examples=300)
    def test_never_raises_and_ranges_fit(self, parts: list[str]) -> None:
        parsed = parse_markup("".join(parts))
        for info in parsed.tags:
            assert 0 <= info.range.start <= info.range.end <= len(parsed.text)
            assert info.level == len(info.outer_tags) + 1
        assert parsed.max_level == max((t.level for t in parsed.tags), default=0)

    @given(text=st.text(alphabet="abc xyz.,!?", max_size=40))
    def test_plain_text_unchanged(self, text: str) -> None:
        parsed = parse_markup(text)
        assert parsed.text == text
        assert parsed.tags == ()
