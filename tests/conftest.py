"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from reserializer.ast import Node, StyleNode, TextNode
from reserializer.parser import parse
from reserializer.styles import Style


@pytest.fixture
def parse_message():
    """Return a helper that parses a message with the default rules."""

    def _parse(source: str) -> tuple[Node, ...]:
        return parse(source)

    return _parse


def styled(style: Style, *children: Node | str) -> StyleNode:
    """Build a StyleNode; string children become TextNodes."""
    return StyleNode(
        (style,),
        tuple(TextNode(c) if isinstance(c, str) else c for c in children),
    )


def assert_single(nodes: tuple[Node, ...]) -> Node:
    """Assert that exactly one node was produced and return it."""
    assert len(nodes) == 1, f"Expected 1 node, got {len(nodes)}: {nodes!r}"
    return nodes[0]
