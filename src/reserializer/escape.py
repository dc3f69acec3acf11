"""Escaping renderer: re-emits a Discord message so it displays literally."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from reserializer.ast import Node, TextNode
from reserializer.flatten import escape_text
from reserializer.parser import Parser
from reserializer.rules import ParseState, Rule
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
    Style,
    Underline,
)

_MENTION_PREFIX = {
    MentionKind.USER: "<@",
    MentionKind.ROLE: "<@&",
    MentionKind.CHANNEL: "<#",
}


def escape_markdown(message: str, rules: Iterable[Rule] | None = None) -> str:
    """Parse message and re-emit it with every style delimiter escaped."""
    parser = Parser(rules)
    return _escape_nodes(parser.parse(message), parser)


def _escape_nodes(nodes: Sequence[Node], parser: Parser) -> str:
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, TextNode):
            parts.append(escape_text(node.content))
            continue
        closers: list[str] = []
        for style in node.styles:
            opener, closer = _delimiters(style, parser)
            parts.append(opener)
            closers.append(closer)
        parts.append(_escape_nodes(node.children, parser))
        parts.extend(reversed(closers))
    return "".join(parts)


def _delimiters(style: Style, parser: Parser) -> tuple[str, str]:
    match style:
        case Bold():
            return "\\*\\*", "\\*\\*"
        case Underline():
            return "\\_\\_", "\\_\\_"
        case Strikethrough():
            return "\\~\\~", "\\~\\~"
        case Italic(asterisk=True):
            return "\\*", "\\*"
        case Italic():
            return "\\_", "\\_"
        case CodeInline():
            return "\\`", "\\`"
        case CodeBlock(language=language):
            return "\\`\\`\\`" + (f"{language}\n" if language else ""), "\\`\\`\\`"
        case Spoiler(raw_content=content, in_quote=in_quote):
            inner = _escape_nodes(parser.parse(content, ParseState(in_quote=in_quote)), parser)
            return f"\\|\\|{inner}", "\\|\\|"
        case Quote(raw_content=content):
            inner = _escape_nodes(parser.parse(content, ParseState(in_quote=True)), parser)
            return "\n".join(f"\\> {line}" for line in inner.split("\n")), ""
        case Link(url=url):
            return url, ""
        case Mention(kind=kind, id=id_):
            return f"{_MENTION_PREFIX[kind]}{id_}>", ""
        case Emoji(id=id_, name=name, animated=animated):
            return f"<{'a' if animated else ''}:{name}:{id_}>", ""
    return "", ""
