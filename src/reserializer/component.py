"""Rich-text chat components (the Minecraft chat model).

Components are immutable; every modifier returns a new component. A
decoration is tri-state: True, False, or None (unset, inherit from the
nearest ancestor that sets it).
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, replace
from enum import Enum


class Decoration(Enum):
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINED = "underlined"
    STRIKETHROUGH = "strikethrough"
    OBFUSCATED = "obfuscated"


class ClickAction(Enum):
    OPEN_URL = "open_url"
    RUN_COMMAND = "run_command"
    SUGGEST_COMMAND = "suggest_command"
    COPY_TO_CLIPBOARD = "copy_to_clipboard"
    CHANGE_PAGE = "change_page"


class NamedColor:
    """The sixteen named chat colours."""

    BLACK = "black"
    DARK_BLUE = "dark_blue"
    DARK_GREEN = "dark_green"
    DARK_AQUA = "dark_aqua"
    DARK_RED = "dark_red"
    DARK_PURPLE = "dark_purple"
    GOLD = "gold"
    GRAY = "gray"
    DARK_GRAY = "dark_gray"
    BLUE = "blue"
    GREEN = "green"
    AQUA = "aqua"
    RED = "red"
    LIGHT_PURPLE = "light_purple"
    YELLOW = "yellow"
    WHITE = "white"


NAMED_COLORS = frozenset(
    value for name, value in vars(NamedColor).items() if not name.startswith("_")
)
_HEX_COLOR = re.compile(r"#[0-9a-fA-F]{6}")


def is_color(value: str) -> bool:
    """Return True if value is a named colour or a #rrggbb string."""
    return value in NAMED_COLORS or _HEX_COLOR.fullmatch(value) is not None


@dataclass(frozen=True, slots=True)
class ClickEvent:
    action: ClickAction
    value: str

    @classmethod
    def open_url(cls, url: str) -> ClickEvent:
        return cls(ClickAction.OPEN_URL, url)


@dataclass(frozen=True, slots=True)
class HoverEvent:
    """Show-text hover; contents is shown when the pointer is over the text."""

    contents: Component

    @classmethod
    def show_text(cls, contents: Component | str) -> HoverEvent:
        if isinstance(contents, str):
            contents = Component.of(contents)
        return cls(contents)


@dataclass(frozen=True, slots=True)
class Score:
    name: str
    objective: str
    value: str | None = None


@dataclass(frozen=True, slots=True)
class Component:
    """A chat component. Exactly one content kind is meaningful per component;
    a plain text component only uses `text`."""

    text: str = ""
    keybind: str | None = None
    translate: str | None = None
    translate_args: tuple[Component, ...] = ()
    score: Score | None = None
    selector: str | None = None

    color: str | None = None
    bold: bool | None = None
    italic: bool | None = None
    underlined: bool | None = None
    strikethrough: bool | None = None
    obfuscated: bool | None = None
    click_event: ClickEvent | None = None
    hover_event: HoverEvent | None = None

    children: tuple[Component, ...] = ()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def empty(cls) -> Component:
        return cls()

    @classmethod
    def of(cls, text: str, color: str | None = None, *decorations: Decoration) -> Component:
        """A text component, optionally coloured and decorated."""
        return cls(text=text, color=color).decorate(*decorations)

    @classmethod
    def keybind_of(cls, keybind: str) -> Component:
        return cls(keybind=keybind)

    @classmethod
    def translatable(cls, key: str, *args: Component) -> Component:
        return cls(translate=key, translate_args=args)

    @classmethod
    def score_of(cls, name: str, objective: str, value: str | None = None) -> Component:
        return cls(score=Score(name, objective, value))

    @classmethod
    def selector_of(cls, pattern: str) -> Component:
        return cls(selector=pattern)

    # ------------------------------------------------------------------
    # Style
    # ------------------------------------------------------------------

    def decoration(self, decoration: Decoration) -> bool | None:
        return getattr(self, decoration.value)

    def with_decoration(self, decoration: Decoration, state: bool | None) -> Component:
        return replace(self, **{decoration.value: state})

    def decorate(self, *decorations: Decoration) -> Component:
        if not decorations:
            return self
        return replace(self, **{d.value: True for d in decorations})

    def with_color(self, color: str | None) -> Component:
        return replace(self, color=color)

    def with_click(self, click_event: ClickEvent | None) -> Component:
        return replace(self, click_event=click_event)

    def with_hover(self, hover_event: HoverEvent | None) -> Component:
        return replace(self, hover_event=hover_event)

    def merge_style(self, other: Component) -> Component:
        """Copy every style property that other sets onto this component."""
        changes: dict[str, object] = {}
        for decoration in Decoration:
            state = other.decoration(decoration)
            if state is not None:
                changes[decoration.value] = state
        if other.color is not None:
            changes["color"] = other.color
        if other.click_event is not None:
            changes["click_event"] = other.click_event
        if other.hover_event is not None:
            changes["hover_event"] = other.hover_event
        return replace(self, **changes) if changes else self

    def has_styling(self) -> bool:
        return (
            self.color is not None
            or self.click_event is not None
            or self.hover_event is not None
            or any(self.decoration(d) is not None for d in Decoration)
        )

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    def append(self, *children: Component) -> Component:
        return replace(self, children=(*self.children, *children))

    def with_children(self, children: tuple[Component, ...] | list[Component]) -> Component:
        return replace(self, children=tuple(children))

    def with_text(self, text: str) -> Component:
        return replace(self, text=text)

    def iter_tree(self) -> Iterator[Component]:
        """Yield this component and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.iter_tree()

    def plain_text(self) -> str:
        """Flattened text of the tree; non-literal content shows its raw value."""
        return "".join(c._own_text() for c in self.iter_tree())

    def _own_text(self) -> str:
        if self.keybind is not None:
            return self.keybind
        if self.translate is not None:
            return self.translate
        if self.score is not None:
            return self.score.value or ""
        if self.selector is not None:
            return self.selector
        return self.text

    def replace_text(
        self, old: str | re.Pattern[str], replacement: str | Component
    ) -> Component:
        """Replace every occurrence of old in the literal text of the tree.

        A component replacement is spliced in as a child, with the text that
        followed the match moved into a sibling after it.
        """
        pattern = old if isinstance(old, re.Pattern) else re.compile(re.escape(old))
        return _replace_text(self, pattern, replacement)


def _replace_text(
    component: Component, pattern: re.Pattern[str], replacement: str | Component
) -> Component:
    children = tuple(_replace_text(c, pattern, replacement) for c in component.children)
    text = component.text

    if isinstance(replacement, str):
        return replace(component, text=pattern.sub(lambda _m: replacement, text), children=children)

    segments: list[str] = []
    last = 0
    for m in pattern.finditer(text):
        segments.append(text[last : m.start()])
        last = m.end()
    if not segments:
        return replace(component, children=children)
    segments.append(text[last:])

    spliced: list[Component] = []
    for segment in segments[1:]:
        spliced.append(replacement)
        if segment:
            spliced.append(Component.of(segment))
    return replace(component, text=segments[0], children=(*spliced, *children))
