"""Error types: configuration errors and internal parser/renderer failures."""

from __future__ import annotations


class ConfigError(Exception):
    """Raised when a rule list or renderer chain is unusable."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ParseError(Exception):
    """Raised on an internal parser failure, with offset and source context.

    Malformed markdown never raises this; it means the rule list cannot
    make progress at some offset.
    """

    def __init__(self, message: str, offset: int, source: str) -> None:
        self.message = message
        self.offset = offset
        self.source = source
        super().__init__(self.format())

    @property
    def line(self) -> int:
        return self.source.count("\n", 0, self.offset) + 1

    @property
    def column(self) -> int:
        return self.offset - (self.source.rfind("\n", 0, self.offset) + 1) + 1

    def format(self, filename: str = "<message>") -> str:
        """Render the error with the offending line and a caret under the offset."""
        start = self.source.rfind("\n", 0, self.offset) + 1
        stop = self.source.find("\n", self.offset)
        if stop == -1:
            stop = len(self.source)
        text = self.source[start:stop].rstrip("\r")
        gutter = " " * len(str(self.line))
        return "\n".join(
            [
                f"error: {self.message}",
                f"{gutter} --> {filename}:{self.line}:{self.column}",
                f"{gutter} |",
                f"{self.line} | {text}",
                f"{gutter} | {' ' * (self.column - 1)}^",
            ]
        )


class RenderError(Exception):
    """Raised when the default renderer declines a node."""

    def __init__(self, message: str, node: object) -> None:
        self.message = message
        self.node = node
        super().__init__(f"{message}: {node!r}")


class ComponentError(Exception):
    """Raised on malformed chat component JSON."""

    def __init__(self, message: str, path: str = "$") -> None:
        self.message = message
        self.path = path
        super().__init__(f"{message} (at {path})")
