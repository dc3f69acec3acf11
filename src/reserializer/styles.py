"""Style variants carried by StyleNode, and their display names."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class MentionKind(Enum):
    ROLE = auto()  # <@&id>
    USER = auto()  # <@id> or <@!id>
    CHANNEL = auto()  # <#id>


@dataclass(frozen=True, slots=True)
class Bold:
    pass


@dataclass(frozen=True, slots=True)
class Italic:
    """Italic text; asterisk records whether `*` (True) or `_` delimited it."""

    asterisk: bool = True


@dataclass(frozen=True, slots=True)
class Underline:
    pass


@dataclass(frozen=True, slots=True)
class Strikethrough:
    pass


@dataclass(frozen=True, slots=True)
class CodeInline:
    pass


@dataclass(frozen=True, slots=True)
class CodeBlock:
    language: str | None = None


@dataclass(frozen=True, slots=True)
class Quote:
    """Quoted block; raw_content has the `> ` markers already removed."""

    raw_content: str


@dataclass(frozen=True, slots=True)
class Spoiler:
    """Hidden text; in_quote records whether it was parsed inside a quote."""

    raw_content: str
    in_quote: bool = False


@dataclass(frozen=True, slots=True)
class Link:
    url: str


@dataclass(frozen=True, slots=True)
class Mention:
    kind: MentionKind
    id: str


@dataclass(frozen=True, slots=True)
class Emoji:
    id: str
    name: str
    animated: bool = False


Style = (
    Bold
    | Italic
    | Underline
    | Strikethrough
    | CodeInline
    | CodeBlock
    | Quote
    | Spoiler
    | Link
    | Mention
    | Emoji
)


def style_name(style: Style) -> str:
    """Return the upper-case kind name of a style (for debug output)."""
    match style:
        case Bold():
            return "BOLD"
        case Italic():
            return "ITALICS"
        case Underline():
            return "UNDERLINE"
        case Strikethrough():
            return "STRIKETHROUGH"
        case CodeInline():
            return "CODE_STRING"
        case CodeBlock():
            return "CODE_BLOCK"
        case Quote():
            return "QUOTE"
        case Spoiler():
            return "SPOILER"
        case Link():
            return "LINK"
        case Mention(kind=kind):
            return f"MENTION_{kind.name}"
        case Emoji():
            return "MENTION_EMOJI"
    raise TypeError(f"not a style: {style!r}")
