"""Immutable option values for both transcoding directions.

Options are frozen; every modifier returns a new value. The module-level
defaults are shared and can never be changed in place.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace

from reserializer.component import Component
from reserializer.errors import ConfigError
from reserializer.renderers import DefaultRenderer, FunctionRenderer, NodeRenderer
from reserializer.rules import Rule, default_rules, validate_rules

Resolver = Callable[[Component], str]


def _coerce_renderer(renderer: object) -> NodeRenderer:
    if isinstance(renderer, DefaultRenderer):
        raise ConfigError("the default renderer cannot be added to the renderer chain")
    if isinstance(renderer, NodeRenderer):
        return renderer
    if callable(renderer):
        return FunctionRenderer(renderer)
    raise ConfigError(f"not a renderer: {renderer!r}")


@dataclass(frozen=True, slots=True)
class MinecraftOptions:
    """Options for markdown -> component transcoding."""

    rules: tuple[Rule, ...] = field(default_factory=default_rules)
    renderers: tuple[NodeRenderer, ...] = ()
    debug: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", validate_rules(self.rules))
        renderers: list[NodeRenderer] = []
        for renderer in self.renderers:
            coerced = _coerce_renderer(renderer)
            if coerced in renderers:
                raise ConfigError("the renderer chain contains the same renderer twice")
            renderers.append(coerced)
        object.__setattr__(self, "renderers", tuple(renderers))

    def add_renderer(
        self, renderer: NodeRenderer | Callable[..., Component | None], index: int | None = None
    ) -> MinecraftOptions:
        """Return options with renderer inserted (appended when index is None)."""
        coerced = _coerce_renderer(renderer)
        if coerced in self.renderers:
            raise ConfigError("the renderer is already in the renderer chain")
        renderers = list(self.renderers)
        if index is None:
            renderers.append(coerced)
        else:
            renderers.insert(index, coerced)
        return replace(self, renderers=tuple(renderers))

    def remove_renderer(
        self, renderer: NodeRenderer | Callable[..., Component | None]
    ) -> MinecraftOptions:
        target = renderer if isinstance(renderer, NodeRenderer) else FunctionRenderer(renderer)
        if target not in self.renderers:
            raise ConfigError("the renderer is not in the renderer chain")
        return replace(self, renderers=tuple(r for r in self.renderers if r != target))

    def with_rules(self, rules: Sequence[Rule]) -> MinecraftOptions:
        return replace(self, rules=tuple(rules))

    def with_debug(self, debug: bool) -> MinecraftOptions:
        return replace(self, debug=debug)


def keybind_name(component: Component) -> str:
    """Default keybind resolver: the raw keybind identifier."""
    return component.keybind or ""


def translation_key(component: Component) -> str:
    """Default translation resolver: the raw translation key."""
    return component.translate or ""


@dataclass(frozen=True, slots=True)
class DiscordOptions:
    """Options for component -> markdown transcoding."""

    escape_markdown: bool = True
    masked_links: bool = False
    keybind_resolver: Resolver = keybind_name
    translation_resolver: Resolver = translation_key

    def with_escape_markdown(self, escape_markdown: bool) -> DiscordOptions:
        return replace(self, escape_markdown=escape_markdown)

    def with_masked_links(self, masked_links: bool) -> DiscordOptions:
        return replace(self, masked_links=masked_links)

    def with_keybind_resolver(self, resolver: Resolver) -> DiscordOptions:
        return replace(self, keybind_resolver=resolver)

    def with_translation_resolver(self, resolver: Resolver) -> DiscordOptions:
        return replace(self, translation_resolver=resolver)


DEFAULT_MINECRAFT_OPTIONS = MinecraftOptions()
DEFAULT_DISCORD_OPTIONS = DiscordOptions()
