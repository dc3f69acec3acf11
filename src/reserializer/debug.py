"""--debug dumps to stderr: markdown AST, component tree, text runs."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from dataclasses import fields
from typing import TextIO

from reserializer.ast import Node, StyleNode, TextNode
from reserializer.component import Component, Decoration
from reserializer.flatten import TextRun
from reserializer.styles import style_name


def dump_ast(nodes: Sequence[Node], *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    file.write("Message\n")
    for node in nodes:
        _dump_node(node, 1, file)


def dump_component(component: Component, *, file: TextIO = sys.stderr) -> None:
    """Print a component tree, one component per line, to *file*."""
    _dump_component(component, 0, file)


def dump_runs(runs: Sequence[TextRun], *, file: TextIO = sys.stderr) -> None:
    """Print flattened text runs with their formatting to *file*."""
    for i, run in enumerate(runs):
        flags = [
            name
            for name, on in (
                ("bold", run.bold),
                ("strikethrough", run.strikethrough),
                ("italic", run.italic),
                ("underline", run.underline),
            )
            if on
        ]
        line = f"Run {i} {run.text!r}"
        if flags:
            line += f" [{', '.join(flags)}]"
        if run.open_url is not None:
            line += f" -> {run.open_url}"
            if run.url_hover_text:
                line += f" ({run.url_hover_text!r})"
        file.write(line + "\n")


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_node(node: Node, depth: int, f: TextIO) -> None:
    if isinstance(node, TextNode):
        f.write(f"{_indent(depth)}Text({node.content!r})\n")
        return
    assert isinstance(node, StyleNode)
    names = " ".join(style_name(s) for s in node.styles)
    f.write(f"{_indent(depth)}Style {names}")
    _dump_style_detail(node, f)
    f.write("\n")
    for child in node.children:
        _dump_node(child, depth + 1, f)


def _dump_style_detail(node: StyleNode, f: TextIO) -> None:
    details: list[str] = []
    for style in node.styles:
        for fld in fields(style):
            value = getattr(style, fld.name)
            if value is not None:
                details.append(f"{fld.name}={value!r}")
    if details:
        f.write(f" ({', '.join(details)})")


def _dump_component(component: Component, depth: int, f: TextIO) -> None:
    parts = [_describe_content(component)]
    if component.color is not None:
        parts.append(f"color={component.color}")
    for decoration in Decoration:
        state = component.decoration(decoration)
        if state is not None:
            parts.append(f"{decoration.value}={str(state).lower()}")
    if component.click_event is not None:
        click = component.click_event
        parts.append(f"click={click.action.value}:{click.value}")
    if component.hover_event is not None:
        parts.append(f"hover={component.hover_event.contents.plain_text()!r}")
    f.write(f"{_indent(depth)}Component {' '.join(parts)}\n")
    for child in component.children:
        _dump_component(child, depth + 1, f)


def _describe_content(component: Component) -> str:
    if component.keybind is not None:
        return f"keybind({component.keybind})"
    if component.translate is not None:
        return f"translate({component.translate}, {len(component.translate_args)} arg(s))"
    if component.score is not None:
        return f"score({component.score.name}, {component.score.objective})"
    if component.selector is not None:
        return f"selector({component.selector})"
    return repr(component.text)
