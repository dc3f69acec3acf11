"""Markdown serializer: flattens a component tree into Discord markdown.

Two phases: the tree is flattened into text runs (inherited decorations
resolved, formatting-equal neighbours merged), then each run is emitted
with its delimiters. Runs are separated by a zero-width space so that
adjacent delimiters never read as one (`**a****__b__**`).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace

from reserializer.component import ClickAction, Component
from reserializer.options import DEFAULT_DISCORD_OPTIONS, DiscordOptions

SEPARATOR = "\u200b"  # zero-width space

_SPECIAL = re.compile(r"([\\*~_`|])")
# Parentheses only inside a URL when balanced; trailing punctuation is not part of it
_URL = re.compile(
    r"https?://(?:[^\s<()]|\([^\s<()]*\))*"
    r"(?:[^\s<().,:;\"'\]]|\([^\s<()]*\))"
)


@dataclass(frozen=True, slots=True)
class _Format:
    bold: bool = False
    strikethrough: bool = False
    underline: bool = False
    italic: bool = False
    open_url: str | None = None
    url_hover_text: str | None = None


@dataclass(slots=True)
class TextRun:
    """A span of text sharing one formatting and link target."""

    content: list[str] = field(default_factory=list)
    bold: bool = False
    strikethrough: bool = False
    underline: bool = False
    italic: bool = False
    open_url: str | None = None
    url_hover_text: str | None = None

    @property
    def text(self) -> str:
        return "".join(self.content)

    def formatting_matches(self, other: TextRun | _Format) -> bool:
        return (
            self.bold == other.bold
            and self.strikethrough == other.strikethrough
            and self.underline == other.underline
            and self.italic == other.italic
            and self.open_url == other.open_url
            and self.url_hover_text == other.url_hover_text
        )


class _RunAccumulator:
    """Holds the open run; it is committed only when the formatting changes."""

    def __init__(self) -> None:
        self.runs: list[TextRun] = []
        self._current: TextRun | None = None

    def push(self, content: str, fmt: _Format) -> None:
        if self._current is not None and self._current.formatting_matches(fmt):
            self._current.content.append(content)
            return
        if self._current is not None:
            self.runs.append(self._current)
        self._current = TextRun(
            [content],
            bold=fmt.bold,
            strikethrough=fmt.strikethrough,
            underline=fmt.underline,
            italic=fmt.italic,
            open_url=fmt.open_url,
            url_hover_text=fmt.url_hover_text,
        )

    def finish(self) -> list[TextRun]:
        if self._current is not None:
            self.runs.append(self._current)
            self._current = None
        return self.runs


# ---------------------------------------------------------------------------
# Phase 1: flatten
# ---------------------------------------------------------------------------


def flatten(
    component: Component, options: DiscordOptions = DEFAULT_DISCORD_OPTIONS
) -> list[TextRun]:
    """Flatten a component tree into merged text runs."""
    acc = _RunAccumulator()
    _collect(component, _Format(), acc, options)
    return acc.finish()


def _resolve(state: bool | None, inherited: bool) -> bool:
    return inherited if state is None else state


def _collect(
    component: Component, parent: _Format, acc: _RunAccumulator, options: DiscordOptions
) -> None:
    fmt = _Format(
        bold=_resolve(component.bold, parent.bold),
        strikethrough=_resolve(component.strikethrough, parent.strikethrough),
        underline=_resolve(component.underlined, parent.underline),
        italic=_resolve(component.italic, parent.italic),
        open_url=parent.open_url,
        url_hover_text=parent.url_hover_text,
    )

    click = component.click_event
    if click is not None and click.action is ClickAction.OPEN_URL:
        hover = component.hover_event
        fmt = replace(
            fmt,
            open_url=click.value,
            url_hover_text=hover.contents.plain_text() if hover is not None else None,
        )

    content = _content(component, options)
    if content or (fmt.open_url is not None and not component.children):
        acc.push(content, fmt)

    for child in component.children:
        _collect(child, fmt, acc, options)


def _content(component: Component, options: DiscordOptions) -> str:
    if component.keybind is not None:
        return options.keybind_resolver(component)
    if component.translate is not None:
        return options.translation_resolver(component)
    if component.score is not None:
        return component.score.value or ""
    if component.selector is not None:
        return component.selector
    return component.text


# ---------------------------------------------------------------------------
# Phase 2: emit
# ---------------------------------------------------------------------------


def escape_text(text: str) -> str:
    """Backslash-escape Discord formatting characters outside of URLs."""
    parts: list[str] = []
    last = 0
    for m in _URL.finditer(text):
        parts.append(_SPECIAL.sub(r"\\\1", text[last : m.start()]))
        parts.append(m.group())
        last = m.end()
    parts.append(_SPECIAL.sub(r"\\\1", text[last:]))
    return "".join(parts)


def _masked_link(content: str, url: str, hover: str | None) -> str:
    if hover:
        escaped_hover = hover.replace('"', '\\"')
        return f'[{content}](<{url}> "{escaped_hover}")'
    return f"[{content}](<{url}>)"


def serialize(component: Component, options: DiscordOptions = DEFAULT_DISCORD_OPTIONS) -> str:
    """Serialize a component tree to Discord markdown."""
    out: list[str] = []
    for run in flatten(component, options):
        content = run.text
        if options.escape_markdown:
            content = escape_text(content)
        if options.masked_links and run.open_url is not None:
            content = _masked_link(content, run.open_url, run.url_hover_text)
        if not content:
            continue

        # Openers: bold, strikethrough, italic, underline; closers reversed
        if run.bold:
            out.append("**")
        if run.strikethrough:
            out.append("~~")
        if run.italic:
            out.append("_")
        if run.underline:
            out.append("__")

        out.append(content)

        if run.underline:
            out.append("__")
        if run.italic:
            out.append("_")
        if run.strikethrough:
            out.append("~~")
        if run.bold:
            out.append("**")

        out.append(SEPARATOR)

    result = "".join(out)
    return result[: -len(SEPARATOR)] if result else ""
