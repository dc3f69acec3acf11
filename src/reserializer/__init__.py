"""Transcoder between Discord markdown and Minecraft chat components."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reserializer.component import Component
    from reserializer.options import DiscordOptions, MinecraftOptions

__version__ = "0.1.0"


def to_component(message: str, options: MinecraftOptions | None = None) -> Component:
    """Parse a Discord message and render it to a chat component."""
    from reserializer.options import DEFAULT_MINECRAFT_OPTIONS
    from reserializer.render import to_component as _to_component

    return _to_component(message, options or DEFAULT_MINECRAFT_OPTIONS)


def to_markdown(component: Component, options: DiscordOptions | None = None) -> str:
    """Serialize a chat component to Discord markdown."""
    from reserializer.flatten import serialize
    from reserializer.options import DEFAULT_DISCORD_OPTIONS

    return serialize(component, options or DEFAULT_DISCORD_OPTIONS)
