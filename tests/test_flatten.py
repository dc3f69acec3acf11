"""Component -> markdown flattening and serialization."""

from __future__ import annotations

from reserializer.component import ClickEvent, Component, Decoration, HoverEvent
from reserializer.flatten import SEPARATOR, escape_text, flatten, serialize
from reserializer.options import DiscordOptions
from reserializer.render import to_component

MASKED = DiscordOptions(masked_links=True)
RAW = DiscordOptions(escape_markdown=False)


class TestRuns:
    def test_inherited_decorations(self) -> None:
        component = Component.of("a").decorate(Decoration.BOLD).append(Component.of("b"))
        runs = flatten(component)
        assert len(runs) == 1
        assert runs[0].text == "ab"
        assert runs[0].bold

    def test_explicit_false_overrides_parent(self) -> None:
        component = Component.of("a").decorate(Decoration.BOLD).append(
            Component.of("b").with_decoration(Decoration.BOLD, False)
        )
        runs = flatten(component)
        assert [(r.text, r.bold) for r in runs] == [("a", True), ("b", False)]

    def test_empty_containers_produce_no_runs(self) -> None:
        component = Component.empty().append(Component.empty(), Component.of("x"))
        assert [r.text for r in flatten(component)] == ["x"]

    def test_link_and_hover_recorded(self) -> None:
        component = Component.of("Discord").with_click(
            ClickEvent.open_url("https://discord.com")
        ).with_hover(HoverEvent.show_text("hover"))
        (run,) = flatten(component)
        assert run.open_url == "https://discord.com"
        assert run.url_hover_text == "hover"

    def test_different_links_not_merged(self) -> None:
        component = Component.empty().append(
            Component.of("a").with_click(ClickEvent.open_url("https://a.com")),
            Component.of("b").with_click(ClickEvent.open_url("https://b.com")),
        )
        assert len(flatten(component)) == 2


class TestSerialize:
    def test_plain(self) -> None:
        assert serialize(Component.of("hello")) == "hello"

    def test_empty(self) -> None:
        assert serialize(Component.empty()) == ""

    def test_bold(self) -> None:
        assert serialize(Component.of("bold").decorate(Decoration.BOLD)) == "**bold**"

    def test_each_decoration(self) -> None:
        assert serialize(Component.of("s").decorate(Decoration.STRIKETHROUGH)) == "~~s~~"
        assert serialize(Component.of("i").decorate(Decoration.ITALIC)) == "_i_"
        assert serialize(Component.of("u").decorate(Decoration.UNDERLINED)) == "__u__"

    def test_delimiter_order(self) -> None:
        component = Component.of("x").decorate(
            Decoration.UNDERLINED, Decoration.ITALIC, Decoration.STRIKETHROUGH, Decoration.BOLD
        )
        assert serialize(component) == "**~~___x___~~**"

    def test_obfuscated_has_no_markdown(self) -> None:
        assert serialize(Component.of("x").decorate(Decoration.OBFUSCATED)) == "x"

    def test_round_trip_bold(self) -> None:
        assert serialize(to_component("**bold**")) == "**bold**"

    def test_bold_underline(self) -> None:
        assert serialize(to_component("**__bold underline__**")) == "**__bold underline__**"

    def test_bold_parent_with_bold_underlined_child(self) -> None:
        component = Component.of("bold").decorate(Decoration.BOLD).append(
            Component.of("bold underline").decorate(Decoration.UNDERLINED)
        )
        assert serialize(component) == "**bold**\u200b**__bold underline__**"

    def test_runs_separated(self) -> None:
        component = Component.empty().append(
            Component.of("a").decorate(Decoration.BOLD),
            Component.of("b").decorate(Decoration.ITALIC),
        )
        assert serialize(component) == f"**a**{SEPARATOR}_b_"

    def test_equal_runs_merged(self) -> None:
        component = Component.empty().append(
            Component.of("A").decorate(Decoration.BOLD),
            Component.of("B").decorate(Decoration.BOLD),
        )
        assert serialize(component) == "**AB**"

    def test_no_trailing_separator(self) -> None:
        component = Component.of("a").append(Component.of("b").decorate(Decoration.BOLD))
        result = serialize(component)
        assert result == f"a{SEPARATOR}**b**"
        assert not result.endswith(SEPARATOR)


class TestEscaping:
    def test_specials_escaped(self) -> None:
        assert serialize(Component.of("*not bold*")) == "\\*not bold\\*"

    def test_all_specials(self) -> None:
        assert escape_text("* ~ _ ` |") == "\\* \\~ \\_ \\` \\|"

    def test_escaping_disabled(self) -> None:
        assert serialize(Component.of("*not bold*"), RAW) == "*not bold*"

    def test_urls_untouched(self) -> None:
        text = "see https://example.com/a_b_c"
        assert serialize(Component.of(text)) == text

    def test_escape_resumes_after_url(self) -> None:
        assert escape_text("https://a.com/_x_ and _y_") == "https://a.com/_x_ and \\_y\\_"

    def test_backslash_escaped(self) -> None:
        assert serialize(Component.of("a\\*b")) == "a\\\\\\*b"

    def test_formatting_after_url_escaped(self) -> None:
        result = serialize(Component.of("(see https://a.com)_x_"))
        assert result == "(see https://a.com)\\_x\\_"

    def test_balanced_parentheses_stay_in_url(self) -> None:
        text = "https://en.wikipedia.org/wiki/A_(b_c)"
        assert escape_text(text) == text

    def test_trailing_punctuation_not_in_url(self) -> None:
        assert escape_text("https://a.com/x_y. _z_") == "https://a.com/x_y. \\_z\\_"


class TestMaskedLinks:
    def _link(self) -> Component:
        return Component.of("Discord").with_click(ClickEvent.open_url("https://discord.com"))

    def test_masked(self) -> None:
        assert serialize(self._link(), MASKED) == "[Discord](<https://discord.com>)"

    def test_masked_with_hover(self) -> None:
        component = self._link().with_hover(HoverEvent.show_text("hover"))
        assert serialize(component, MASKED) == '[Discord](<https://discord.com> "hover")'

    def test_masked_inside_delimiters(self) -> None:
        component = self._link().decorate(Decoration.BOLD)
        assert serialize(component, MASKED) == "**[Discord](<https://discord.com>)**"

    def test_hover_quotes_escaped(self) -> None:
        component = self._link().with_hover(HoverEvent.show_text('say "hi"'))
        assert serialize(component, MASKED) == (
            '[Discord](<https://discord.com> "say \\"hi\\"")'
        )

    def test_links_plain_without_masking(self) -> None:
        assert serialize(self._link()) == "Discord"


class TestNonTextContent:
    def test_keybind_default_resolver(self) -> None:
        assert serialize(Component.keybind_of("key.jump")) == "key.jump"

    def test_keybind_custom_resolver(self) -> None:
        options = DiscordOptions().with_keybind_resolver(lambda c: "Space")
        assert serialize(Component.keybind_of("key.jump"), options) == "Space"

    def test_translation_resolver(self) -> None:
        options = DiscordOptions().with_translation_resolver(
            lambda c: f"{c.translate}({len(c.translate_args)})"
        )
        component = Component.translatable("chat.type.text", Component.of("a"))
        assert serialize(component, options) == "chat.type.text(1)"

    def test_score_value(self) -> None:
        assert serialize(Component.score_of("player", "kills", "12")) == "12"

    def test_selector(self) -> None:
        assert serialize(Component.selector_of("@p")) == "@p"


class TestPackageApi:
    def test_markdown_round_trip(self) -> None:
        import reserializer

        component = reserializer.to_component("**a** _b_")
        assert reserializer.to_markdown(component) == f"**a**{SEPARATOR} {SEPARATOR}_b_"
