"""Markdown parser: applies an ordered rule list to produce an AST."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from reserializer.ast import Node, StyleNode, merge_text_nodes
from reserializer.errors import ParseError
from reserializer.rules import DEFAULT_STATE, ParseState, Rule, default_rules

logger = logging.getLogger(__name__)

_DEFAULT_RULES = default_rules()


class Parser:
    """Rule-driven parser. Stateless between calls; safe to share."""

    def __init__(self, rules: Sequence[Rule] | None = None, debug: bool = False) -> None:
        self._rules = tuple(rules) if rules is not None else _DEFAULT_RULES
        self._debug = debug

    def parse(self, source: str, state: ParseState | None = None) -> tuple[Node, ...]:
        nodes = self._parse_range(source, 0, len(source), state or DEFAULT_STATE, 0)
        return merge_text_nodes(nodes)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _parse_range(
        self, source: str, start: int, end: int, state: ParseState, depth: int
    ) -> list[Node]:
        nodes: list[Node] = []
        pos = start

        while pos < end:
            rule, match = self._match(source, pos, end, state)
            if match.end() <= pos:
                raise ParseError(f"rule '{rule.name}' matched zero characters", pos, source)

            if self._debug:
                logger.debug(
                    "%s%s matched at %d: %r", "  " * depth, rule.name, pos, match.group()
                )

            spec = rule.parse(match, state)
            if spec.is_terminal:
                nodes.append(spec.node)
            else:
                assert isinstance(spec.node, StyleNode)
                assert spec.start is not None and spec.end is not None
                children = self._parse_range(source, spec.start, spec.end, spec.state, depth + 1)
                nodes.append(StyleNode(spec.node.styles, tuple(children)))

            pos = match.end()

        return nodes

    def _match(
        self, source: str, pos: int, end: int, state: ParseState
    ) -> tuple[Rule, re.Match[str]]:
        for rule in self._rules:
            match = rule.match(source, pos, end, state)
            if match is not None:
                return rule, match
        raise ParseError("no rule matched (rule list has no catch-all text rule)", pos, source)


def parse(
    source: str,
    state: ParseState | None = None,
    rules: Sequence[Rule] | None = None,
    debug: bool = False,
) -> tuple[Node, ...]:
    """Convenience function: parse markdown and return the top-level nodes."""
    return Parser(rules, debug).parse(source, state)
