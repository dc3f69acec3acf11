"""Node renderers: the pluggable steps that turn AST nodes into components.

Renderers are tried in order for every node; the first that returns a
component wins. DEFAULT_RENDERER always runs last and never declines.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from reserializer.ast import Node, StyleNode, TextNode
from reserializer.component import ClickEvent, Component, Decoration, HoverEvent, NamedColor
from reserializer.rules import ParseState
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

if TYPE_CHECKING:
    from reserializer.options import MinecraftOptions

RenderNode = Callable[[Node], Component]
RenderFunc = Callable[[Component, Node, "MinecraftOptions", RenderNode], Component | None]

QUOTE_MARKER = Component.of("| ", NamedColor.DARK_GRAY, Decoration.BOLD)


class NodeRenderer:
    """Base class for renderers. Return None to let the next renderer try."""

    def render(
        self,
        component: Component,
        node: Node,
        options: MinecraftOptions,
        render_node: RenderNode,
    ) -> Component | None:
        return None

    def render_after_children(
        self,
        component: Component,
        node: Node,
        options: MinecraftOptions,
        render_node: RenderNode,
    ) -> Component | None:
        return None


@dataclass(frozen=True, eq=True)
class FunctionRenderer(NodeRenderer):
    """Adapts plain functions to the renderer interface."""

    func: RenderFunc
    after: RenderFunc | None = None

    def render(
        self,
        component: Component,
        node: Node,
        options: MinecraftOptions,
        render_node: RenderNode,
    ) -> Component | None:
        return self.func(component, node, options, render_node)

    def render_after_children(
        self,
        component: Component,
        node: Node,
        options: MinecraftOptions,
        render_node: RenderNode,
    ) -> Component | None:
        if self.after is None:
            return None
        return self.after(component, node, options, render_node)


# ---------------------------------------------------------------------------
# Helpers shared with the tree walk
# ---------------------------------------------------------------------------


def append_rendered(
    component: Component, nodes: Sequence[Node], render_node: RenderNode
) -> Component:
    """Append rendered nodes as children.

    Every node goes through the renderer chain. A leading text node whose
    rendering is bare text is folded into the component's own text when
    the component has neither text nor children yet.
    """
    for index, node in enumerate(nodes):
        rendered = render_node(node)
        if (
            index == 0
            and isinstance(node, TextNode)
            and not component.text
            and not component.children
            and rendered == Component(text=rendered.text)
        ):
            component = component.with_text(rendered.text)
        else:
            component = component.append(rendered)
    return component


def collapse(container: Component) -> Component:
    """Unwrap an unstyled, textless container holding exactly one child."""
    if not container.text and not container.has_styling() and len(container.children) == 1:
        return container.children[0]
    return container


def render_markdown(
    content: str, state: ParseState, options: MinecraftOptions, render_node: RenderNode
) -> Component:
    """Parse nested markdown (quote and spoiler content) and render it."""
    from reserializer.parser import Parser

    nodes = Parser(options.rules, options.debug).parse(content, state)
    return collapse(append_rendered(Component.empty(), nodes, render_node))


# ---------------------------------------------------------------------------
# Default renderer
# ---------------------------------------------------------------------------


class DefaultRenderer(NodeRenderer):
    """Renders every node kind; mentions and emoji as their raw placeholders."""

    def render(
        self,
        component: Component,
        node: Node,
        options: MinecraftOptions,
        render_node: RenderNode,
    ) -> Component | None:
        if isinstance(node, TextNode):
            return component.with_text(component.text + node.content)
        for style in node.styles:
            component = self._apply(component, style, options, render_node)
        return component

    def render_after_children(
        self,
        component: Component,
        node: Node,
        options: MinecraftOptions,
        render_node: RenderNode,
    ) -> Component | None:
        if isinstance(node, StyleNode) and any(isinstance(s, Quote) for s in node.styles):
            return component.replace_text("\n", QUOTE_MARKER.with_text("\n| "))
        return component

    def _apply(
        self,
        component: Component,
        style: Style,
        options: MinecraftOptions,
        render_node: RenderNode,
    ) -> Component:
        match style:
            case Bold():
                return component.with_decoration(Decoration.BOLD, True)
            case Italic():
                return component.with_decoration(Decoration.ITALIC, True)
            case Underline():
                return component.with_decoration(Decoration.UNDERLINED, True)
            case Strikethrough():
                return component.with_decoration(Decoration.STRIKETHROUGH, True)
            case CodeInline() | CodeBlock():
                return component.with_color(NamedColor.DARK_GRAY)
            case Link(url=url):
                return component.append(Component.of(url).with_click(ClickEvent.open_url(url)))
            case Spoiler(raw_content=content, in_quote=in_quote):
                state = ParseState(in_quote=in_quote)
                rendered = render_markdown(content, state, options, render_node)
                hidden = (
                    rendered.with_decoration(Decoration.OBFUSCATED, True)
                    .with_color(NamedColor.DARK_GRAY)
                    .with_hover(HoverEvent.show_text(rendered))
                )
                return component.append(hidden)
            case Quote(raw_content=content):
                rendered = render_markdown(content, ParseState(in_quote=True), options, render_node)
                return component.append(QUOTE_MARKER, rendered)
            case Mention(kind=MentionKind.USER, id=ident):
                return component.append(Component.of(f"<@{ident}>"))
            case Mention(kind=MentionKind.ROLE, id=ident):
                return component.append(Component.of(f"<@&{ident}>"))
            case Mention(kind=MentionKind.CHANNEL, id=ident):
                return component.append(Component.of(f"<#{ident}>"))
            case Emoji(name=name):
                return component.append(Component.of(f":{name}:"))
        raise TypeError(f"unknown style: {style!r}")


DEFAULT_RENDERER = DefaultRenderer()
