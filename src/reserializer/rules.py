"""Markdown rules: anchored patterns that turn a match into an AST node.

A rule's parse function returns a ParseSpec. A terminal ParseSpec carries a
finished node. A non-terminal ParseSpec carries a node shell plus the span of
the input that the parser must parse again (with the same rule list and
the ParseSpec's state) to produce the node's children.

Rule order is precedence: the first rule that matches at the cursor wins.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

from reserializer.ast import Node, StyleNode, TextNode
from reserializer.errors import ConfigError
from reserializer.styles import (
    Bold,
    CodeBlock,
    CodeInline,
    Emoji,
    Italic,
    Link,
    Mention,
    MentionKind,
    Quote,
    Spoiler,
    Strikethrough,
    Underline,
)


@dataclass(frozen=True, slots=True)
class ParseState:
    """State threaded into recursive parses. Quotes do not nest."""

    in_quote: bool = False

    def with_quote(self, in_quote: bool) -> ParseState:
        return replace(self, in_quote=in_quote)


DEFAULT_STATE = ParseState()


@dataclass(frozen=True, slots=True)
class ParseSpec:
    """What a rule produced: a node, the state for its children, and
    optionally the [start, end) span to parse into children."""

    node: Node
    state: ParseState
    start: int | None = None
    end: int | None = None

    @property
    def is_terminal(self) -> bool:
        return self.start is None

    @classmethod
    def terminal(cls, node: Node, state: ParseState) -> ParseSpec:
        return cls(node, state)

    @classmethod
    def nonterminal(cls, node: StyleNode, state: ParseState, start: int, end: int) -> ParseSpec:
        return cls(node, state, start, end)


ParseFunc = Callable[[re.Match[str], ParseState], ParseSpec]


class Rule:
    """An anchored pattern plus the function that builds a node from a match."""

    def __init__(
        self,
        name: str,
        pattern: str | re.Pattern[str],
        parse: ParseFunc,
        *,
        catch_all: bool = False,
    ) -> None:
        self.name = name
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self._parse = parse
        self.catch_all = catch_all

    def match(self, source: str, pos: int, end: int, state: ParseState) -> re.Match[str] | None:
        """Match anchored at pos. Look-behinds still see text before pos."""
        return self.pattern.match(source, pos, end)

    def parse(self, match: re.Match[str], state: ParseState) -> ParseSpec:
        return self._parse(match, state)

    def __repr__(self) -> str:
        return f"Rule({self.name!r})"


class QuoteRule(Rule):
    """Refuses to match while already inside quote content."""

    def match(self, source: str, pos: int, end: int, state: ParseState) -> re.Match[str] | None:
        if state.in_quote:
            return None
        return super().match(source, pos, end, state)


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

PATTERN_ESCAPE = re.compile(r"\\([^0-9A-Za-z\s])")
PATTERN_NEWLINE = re.compile(r"(?:\n *)*\n")
PATTERN_BOLD = re.compile(r"\*\*([\s\S]+?)\*\*(?!\*)")
PATTERN_UNDERLINE = re.compile(r"__([\s\S]+?)__(?!_)")
PATTERN_STRIKETHROUGH = re.compile(r"~~(?=\S)([\s\S]+?\S)~~")
PATTERN_ITALICS = re.compile(
    # _ only around words
    r"\b_((?:__|\\[\s\S]|[^\\_])+?)_\b"
    r"|"
    # * followed by a non-space; ** inside does not close the italics
    r"(?<!\*)\*(?=\S)((?:\*\*|\s+(?:[^*\s]|\*\*)|[^\s*])+?)\*(?!\*)"
)
PATTERN_TEXT = re.compile(
    "[\\s\\S]+?(?=[^0-9A-Za-z\\s\u00c0-\uffff]|\\n| {2,}\\n|\\w+:\\S|\\Z)"
)
PATTERN_MATCH_ALL = re.compile(r"[\s\S]+")

PATTERN_QUOTE = re.compile(r"^(?:>>> ([\s\S]+)|> (.+(?:\n> .+)*))", re.MULTILINE)
PATTERN_SPOILER = re.compile(r"\|\|([\s\S]+?)\|\|")
PATTERN_CODE_BLOCK = re.compile(r"```(?:([\w+#.-]+)\n)?\n*([\s\S]+?)\n*```")
PATTERN_CODE_INLINE = re.compile(r"`([^`]+?)`")
PATTERN_LINK = re.compile(r"<(https?://[^\s>]+)>|(https?://[^\s<]+[^<.,:;\"')\]\s])")

PATTERN_EMOJI = re.compile(r"<(a?):(\w+):(\d+)>")
PATTERN_CHANNEL_MENTION = re.compile(r"<#(\d+)>")
PATTERN_USER_MENTION = re.compile(r"<@!?(\d+)>")
PATTERN_ROLE_MENTION = re.compile(r"<@&(\d+)>")


# ---------------------------------------------------------------------------
# Basic markdown rules
# ---------------------------------------------------------------------------


def escape_rule() -> Rule:
    """A backslash before punctuation yields the punctuation as text."""
    return Rule(
        "escape",
        PATTERN_ESCAPE,
        lambda m, state: ParseSpec.terminal(TextNode(m.group(1)), state),
    )


def newline_rule() -> Rule:
    def parse(m: re.Match[str], state: ParseState) -> ParseSpec:
        return ParseSpec.terminal(TextNode("\n" * m.group().count("\n")), state)

    return Rule("newline", PATTERN_NEWLINE, parse)


def _wrapping_rule(
    name: str, pattern: re.Pattern[str], style: Bold | Underline | Strikethrough
) -> Rule:
    def parse(m: re.Match[str], state: ParseState) -> ParseSpec:
        return ParseSpec.nonterminal(StyleNode((style,)), state, m.start(1), m.end(1))

    return Rule(name, pattern, parse)


def bold_rule() -> Rule:
    return _wrapping_rule("bold", PATTERN_BOLD, Bold())


def underline_rule() -> Rule:
    return _wrapping_rule("underline", PATTERN_UNDERLINE, Underline())


def strikethrough_rule() -> Rule:
    return _wrapping_rule("strikethrough", PATTERN_STRIKETHROUGH, Strikethrough())


def italic_rule() -> Rule:
    """Italics by `_word_` or `*text*`; the style records which one matched."""

    def parse(m: re.Match[str], state: ParseState) -> ParseSpec:
        group = 1 if m.group(1) is not None else 2
        node = StyleNode((Italic(asterisk=group == 2),))
        return ParseSpec.nonterminal(node, state, m.start(group), m.end(group))

    return Rule("italic", PATTERN_ITALICS, parse)


def text_rule() -> Rule:
    """Catch-all: text up to the next special character, newline or end."""
    return Rule(
        "text",
        PATTERN_TEXT,
        lambda m, state: ParseSpec.terminal(TextNode(m.group()), state),
        catch_all=True,
    )


def match_all_text_rule() -> Rule:
    """Catch-all that consumes the rest of the input as one text node."""
    return Rule(
        "match_all_text",
        PATTERN_MATCH_ALL,
        lambda m, state: ParseSpec.terminal(TextNode(m.group()), state),
        catch_all=True,
    )


# ---------------------------------------------------------------------------
# Discord rules
# ---------------------------------------------------------------------------


def quote_rule() -> Rule:
    """`> ` lines (or `>>> ` to end of message); raw content is kept for the renderer."""

    def parse(m: re.Match[str], state: ParseState) -> ParseSpec:
        if m.group(1) is not None:
            content = m.group(1)
        else:
            content = m.group(2).replace("\n> ", "\n")
        return ParseSpec.terminal(StyleNode((Quote(content.strip()),)), state.with_quote(True))

    return QuoteRule("quote", PATTERN_QUOTE, parse)


def spoiler_rule() -> Rule:
    def parse(m: re.Match[str], state: ParseState) -> ParseSpec:
        return ParseSpec.terminal(StyleNode((Spoiler(m.group(1), state.in_quote),)), state)

    return Rule("spoiler", PATTERN_SPOILER, parse)


def code_block_rule() -> Rule:
    def parse(m: re.Match[str], state: ParseState) -> ParseSpec:
        node = StyleNode.with_text(m.group(2), CodeBlock(m.group(1)))
        return ParseSpec.terminal(node, state)

    return Rule("code_block", PATTERN_CODE_BLOCK, parse)


def code_inline_rule() -> Rule:
    def parse(m: re.Match[str], state: ParseState) -> ParseSpec:
        return ParseSpec.terminal(StyleNode.with_text(m.group(1), CodeInline()), state)

    return Rule("code_inline", PATTERN_CODE_INLINE, parse)


def link_rule() -> Rule:
    """Bare links, and `<url>` links with the embed suppressed."""

    def parse(m: re.Match[str], state: ParseState) -> ParseSpec:
        url = m.group(1) if m.group(1) is not None else m.group(2)
        return ParseSpec.terminal(StyleNode((Link(url),)), state)

    return Rule("link", PATTERN_LINK, parse)


def emoji_rule() -> Rule:
    def parse(m: re.Match[str], state: ParseState) -> ParseSpec:
        emoji = Emoji(id=m.group(3), name=m.group(2), animated=bool(m.group(1)))
        return ParseSpec.terminal(StyleNode((emoji,)), state)

    return Rule("emoji", PATTERN_EMOJI, parse)


def _mention_rule(name: str, pattern: re.Pattern[str], kind: MentionKind) -> Rule:
    def parse(m: re.Match[str], state: ParseState) -> ParseSpec:
        return ParseSpec.terminal(StyleNode((Mention(kind, m.group(1)),)), state)

    return Rule(name, pattern, parse)


def channel_mention_rule() -> Rule:
    return _mention_rule("channel_mention", PATTERN_CHANNEL_MENTION, MentionKind.CHANNEL)


def user_mention_rule() -> Rule:
    return _mention_rule("user_mention", PATTERN_USER_MENTION, MentionKind.USER)


def role_mention_rule() -> Rule:
    return _mention_rule("role_mention", PATTERN_ROLE_MENTION, MentionKind.ROLE)


# ---------------------------------------------------------------------------
# Rule groups
# ---------------------------------------------------------------------------


def simple_markdown_rules(include_text: bool = True) -> list[Rule]:
    """Escape, newline, bold, underline, italics, strikethrough (and text)."""
    rules = [
        escape_rule(),
        newline_rule(),
        bold_rule(),
        underline_rule(),
        italic_rule(),
        strikethrough_rule(),
    ]
    if include_text:
        rules.append(text_rule())
    return rules


def mention_rules() -> list[Rule]:
    return [emoji_rule(), channel_mention_rule(), user_mention_rule(), role_mention_rule()]


def style_rules() -> list[Rule]:
    """Discord-only styles. Code blocks come before inline code."""
    return [code_block_rule(), code_inline_rule(), spoiler_rule(), quote_rule()]


def discord_rules() -> list[Rule]:
    return [*style_rules(), *mention_rules()]


def default_rules(include_text: bool = True) -> tuple[Rule, ...]:
    """The full Discord rule list, in precedence order."""
    escape, newline, *emphasis = simple_markdown_rules(include_text=False)
    rules: list[Rule] = [escape, link_rule(), newline, *style_rules(), *emphasis, *mention_rules()]
    if include_text:
        rules.append(text_rule())
    return tuple(rules)


def validate_rules(rules: Iterable[object]) -> tuple[Rule, ...]:
    """Check a rule list can always make progress; return it as a tuple."""
    result = tuple(rules)
    if not result:
        raise ConfigError("rule list is empty")
    for rule in result:
        if not isinstance(rule, Rule):
            raise ConfigError(f"not a rule: {rule!r}")
    if not any(rule.catch_all for rule in result):
        raise ConfigError("rule list has no catch-all text rule")
    return result
