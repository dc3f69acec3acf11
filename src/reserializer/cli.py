"""Command-line interface for reserializer."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from reserializer.errors import ComponentError, ConfigError, ParseError, RenderError

CONFIG_NAME = "reserializer.toml"
DIRECTIONS = ("component", "markdown", "escaped")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None  # None reads stdin
    output_file: Path | None
    direction: str
    escape_markdown: bool
    masked_links: bool
    indent: int | None
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="reserializer",
        description="Transcode between Discord markdown and Minecraft chat components",
    )
    p.add_argument("input", help="Input file, or - for stdin")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--to",
        choices=DIRECTIONS,
        default="component",
        help="component: markdown to chat JSON (default); "
        "markdown: chat JSON to markdown; escaped: markdown to escaped markdown",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    escape = p.add_mutually_exclusive_group()
    escape.add_argument(
        "--escape",
        dest="escape",
        action="store_true",
        default=None,
        help="Escape formatting characters in markdown output (default)",
    )
    escape.add_argument(
        "--no-escape",
        dest="escape",
        action="store_false",
        help="Emit text content unescaped",
    )
    p.add_argument(
        "--masked-links",
        action="store_true",
        default=None,
        help="Emit links as [text](<url>) masked links",
    )
    p.add_argument(
        "--indent",
        type=int,
        default=None,
        metavar="N",
        help="Indent chat JSON output by N spaces",
    )
    p.add_argument("--debug", action="store_true", help="Dump AST or runs to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: {exc}") from None


def _table(config: dict[str, Any], name: str) -> dict[str, Any]:
    table = config.get(name)
    if table is None:
        return {}
    if not isinstance(table, dict):
        raise ConfigError(f"[{name}] must be a table")
    return table


def _bool_setting(table: dict[str, Any], table_name: str, key: str, default: bool) -> bool:
    value = table.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigError(f"{table_name}.{key} must be a boolean")
    return value


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    if args.input == "-":
        input_file = None
        input_dir = Path(".")
    else:
        input_file = Path(args.input)
        input_dir = input_file.parent
        if not input_dir.parts:
            input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    discord = _table(config, "discord")
    escape_markdown = _bool_setting(discord, "discord", "escape_markdown", True)
    if args.escape is not None:
        escape_markdown = args.escape
    masked_links = _bool_setting(discord, "discord", "masked_links", False)
    if args.masked_links is not None:
        masked_links = args.masked_links

    minecraft = _table(config, "minecraft")
    debug = _bool_setting(minecraft, "minecraft", "debug", False) or args.debug

    indent: int | None = None
    cfg_indent = _table(config, "output").get("indent")
    if cfg_indent is not None:
        if isinstance(cfg_indent, bool) or not isinstance(cfg_indent, int):
            raise ConfigError("output.indent must be an integer")
        indent = cfg_indent
    if args.indent is not None:
        indent = args.indent

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        direction=args.to,
        escape_markdown=escape_markdown,
        masked_links=masked_links,
        indent=indent,
        debug=debug,
    )


def convert(source: str, options: CliOptions) -> str:
    """Run one transcoding direction over source text."""
    from reserializer import chatjson
    from reserializer.debug import dump_ast, dump_runs
    from reserializer.escape import escape_markdown
    from reserializer.flatten import flatten, serialize
    from reserializer.options import DiscordOptions, MinecraftOptions
    from reserializer.parser import Parser
    from reserializer.render import render

    if options.direction == "markdown":
        component = chatjson.loads(source)
        discord_options = DiscordOptions(
            escape_markdown=options.escape_markdown,
            masked_links=options.masked_links,
        )
        if options.debug:
            dump_runs(flatten(component, discord_options), file=sys.stderr)
        return serialize(component, discord_options)

    if options.direction == "escaped":
        return escape_markdown(source)

    minecraft_options = MinecraftOptions(debug=options.debug)
    nodes = Parser(minecraft_options.rules, minecraft_options.debug).parse(source)
    if options.debug:
        dump_ast(nodes, file=sys.stderr)
    return chatjson.dumps(render(nodes, minecraft_options), indent=options.indent)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if options.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        if options.input_file is None:
            source = sys.stdin.read()
        else:
            source = options.input_file.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        result = convert(source, options)
    except ParseError as exc:
        print(exc.format(str(options.input_file or "<stdin>")), file=sys.stderr)
        return 1
    except (RenderError, ComponentError, ConfigError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if options.output_file:
        options.output_file.write_text(result + "\n", encoding="utf-8")
    else:
        sys.stdout.write(result + "\n")

    return 0


def main_entry() -> None:
    sys.exit(main())
