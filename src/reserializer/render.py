"""Component renderer: converts a markdown AST into a chat component tree."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from reserializer.ast import Node, StyleNode
from reserializer.component import Component
from reserializer.errors import RenderError
from reserializer.options import DEFAULT_MINECRAFT_OPTIONS, MinecraftOptions
from reserializer.parser import Parser
from reserializer.renderers import DEFAULT_RENDERER, RenderNode, append_rendered, collapse

logger = logging.getLogger(__name__)


def render(
    nodes: Sequence[Node], options: MinecraftOptions = DEFAULT_MINECRAFT_OPTIONS
) -> Component:
    """Render top-level nodes. A single result is returned unwrapped."""

    def render_node(node: Node) -> Component:
        return _render_node(node, options, render_node)

    return collapse(append_rendered(Component.empty(), nodes, render_node))


def to_component(
    message: str, options: MinecraftOptions = DEFAULT_MINECRAFT_OPTIONS
) -> Component:
    """Parse a Discord message and render it to a component."""
    nodes = Parser(options.rules, options.debug).parse(message)
    if options.debug:
        logger.debug("parsed %d top-level node(s) from %d character(s)", len(nodes), len(message))
    return render(nodes, options)


# ---------------------------------------------------------------------------
# Tree walk
# ---------------------------------------------------------------------------


def _render_node(node: Node, options: MinecraftOptions, render_node: RenderNode) -> Component:
    component = Component.empty()

    output: Component | None = None
    for renderer in options.renderers:
        output = renderer.render(component, node, options, render_node)
        if output is not None:
            break
    if output is None:
        output = DEFAULT_RENDERER.render(component, node, options, render_node)
        if output is None:
            raise RenderError("default renderer returned no component", node)

    if isinstance(node, StyleNode):
        output = append_rendered(output, node.children, render_node)

    for renderer in options.renderers:
        after = renderer.render_after_children(output, node, options, render_node)
        if after is not None:
            return after
    after = DEFAULT_RENDERER.render_after_children(output, node, options, render_node)
    if after is None:
        raise RenderError("default renderer returned no component after children", node)
    return after
