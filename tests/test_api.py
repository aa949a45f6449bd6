"""Tests for the high-level Tinct API."""


class TestStringEntryPoints:
    """Tests for the string-level convenience functions."""

    def test_style_tags(self) -> None:
        from tinct import style_tags

        builder = style_tags("<b>hi</b> there", {"b": {"bold": True}})
        assert builder.text == "hi there"
        assert builder.resolve().value_at(0, "bold") is True
        assert builder.resolve().value_at(3, "bold") is None

    def test_style_base(self) -> None:
        from tinct import style_base

        result = style_base("abc", {"font": "Body"}).resolve()
        assert all(attrs["font"] == "Body" for _, attrs in result)

    def test_style_hashtags(self) -> None:
        from tinct import style_hashtags

        builder = style_hashtags("see #rust now", {"color": "red"})
        assert [str(e.range) for e in builder.entries] == ["[4, 9)"]

    def test_style_mentions_and_links(self) -> None:
        from tinct import style_links, style_mentions

        assert len(style_mentions("@a and @b", {"k": 1}).entries) == 2
        assert len(style_links("https://x.org and www.y.org", {"k": 1}).entries) == 2

    def test_style_phone_numbers(self) -> None:
        from tinct import style_phone_numbers

        builder = style_phone_numbers("call 555-123-4567", {"k": 1})
        assert builder.text[builder.entries[0].range.slice()] == "555-123-4567"

    def test_style_regex(self) -> None:
        from tinct import TextRange, style_regex

        builder = style_regex("see #rust now", r"#\w+", {"color": "red"})
        assert builder.entries[0].range == TextRange(4, 9)

    def test_style_types(self) -> None:
        from tinct import DetectionType, style_types

        builder = style_types("#a @b", DetectionType.HASHTAG | DetectionType.MENTION, {"k": 1})
        assert len(builder.entries) == 2
        assert builder.current_max_level == 1

    def test_style_range(self) -> None:
        from tinct import style_range

        builder = style_range("abcdef", (2, 4), {"bold": True})
        assert builder.resolve().value_at(2, "bold") is True
        assert builder.resolve().value_at(4, "bold") is None

    def test_chaining_from_entry_point(self) -> None:
        from tinct import style_tags

        builder = style_tags("<b>#x</b>", {"b": {"color": "red"}}).style_hashtags({"color": "blue"})
        assert builder.resolve().value_at(0, "color") == "blue"


class TestRenderMarkup:
    """Tests for the one-shot render_markup() function."""

    def test_markup(self) -> None:
        from tinct import AttributedText, render_markup

        result = render_markup("<i>x</i>y", {"i": {"italic": True}}, {"font": "Body"})
        assert isinstance(result, AttributedText)
        assert result.text == "xy"
        assert dict(result.attributes_at(0)) == {"font": "Body", "italic": True}
        assert dict(result.attributes_at(1)) == {"font": "Body"}

    def test_plain_text_skips_parser(self) -> None:
        from tinct import render_markup

        assert render_markup("Tom &amp; Jerry").text == "Tom &amp; Jerry"
        assert render_markup("<b>Tom &amp; Jerry</b>").text == "Tom & Jerry"

    def test_custom_sink(self) -> None:
        from tinct import render_markup

        class RunCounter:
            def begin(self, text, base_attributes) -> None:
                self.layers = 0

            def add_attributes(self, attributes, span) -> None:
                self.layers += 1

            def finish(self) -> int:
                return self.layers

        assert render_markup("<b>a</b><i>b</i>", {"b": {"k": 1}, "i": {"k": 2}}, sink=RunCounter()) == 2


class TestPublicSurface:
    def test_all_exports_resolve(self) -> None:
        import tinct

        for name in tinct.__all__:
            assert hasattr(tinct, name), name

    def test_rich_sink_is_opt_in(self) -> None:
        import tinct
        import tinct.renderers

        assert "RichSink" not in tinct.__all__
        assert tinct.renderers.__all__ == ["RenderSink"]
