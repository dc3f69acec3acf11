"""AST node types for parsed Discord markdown."""

from __future__ import annotations

from dataclasses import dataclass

from reserializer.styles import Emoji, Link, Quote, Spoiler, Style


@dataclass(frozen=True, slots=True)
class TextNode:
    """Literal text."""

    content: str


@dataclass(frozen=True, slots=True)
class StyleNode:
    """Styles applied to every child; several styles may stack on one node."""

    styles: tuple[Style, ...]
    children: tuple[Node, ...] = ()

    @classmethod
    def with_text(cls, content: str, *styles: Style) -> StyleNode:
        return cls(styles, (TextNode(content),))


Node = TextNode | StyleNode


def merge_text_nodes(nodes: tuple[Node, ...] | list[Node]) -> tuple[Node, ...]:
    """Coalesce directly-adjacent TextNodes, at every depth of the tree."""
    result: list[Node] = []
    for node in nodes:
        if isinstance(node, StyleNode) and node.children:
            node = StyleNode(node.styles, merge_text_nodes(node.children))
        if isinstance(node, TextNode) and result and isinstance(result[-1], TextNode):
            result[-1] = TextNode(result[-1].content + node.content)
        else:
            result.append(node)
    return tuple(result)


def plain_text(nodes: tuple[Node, ...] | list[Node]) -> str:
    """Concatenated visible text of a node sequence (markers excluded)."""
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, TextNode):
            parts.append(node.content)
            continue
        for style in node.styles:
            match style:
                case Quote(raw_content=content) | Spoiler(raw_content=content):
                    parts.append(content)
                case Link(url=url):
                    parts.append(url)
                case Emoji(name=name):
                    parts.append(f":{name}:")
        parts.append(plain_text(node.children))
    return "".join(parts)
