"""Command-line interface for NuDoc."""

from __future__ import annotations

import argparse
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from nudoc.body import MAX_BODY_LINES
from nudoc.errors import ParseError
from nudoc.render import DEFAULT_TEMPLATE, HeaderTemplate, OutputFormat

CONFIG_NAME = "nudoc.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    fmt: OutputFormat
    template: HeaderTemplate
    max_body_lines: int
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="nudoc",
        description="Render NuDoc documents to HTML, Markdown or canonical text",
    )
    p.add_argument("input", help="Input .nudoc file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=[f.value for f in OutputFormat],
        default=None,
        help="Output format (default: html)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--date-format",
        default=None,
        metavar="STRFTIME",
        help="Display format for the header date (default: %%Y-%%m-%%d)",
    )
    p.add_argument(
        "--tag-url",
        default=None,
        metavar="PATTERN",
        help="Link tags using PATTERN, where {tag} is replaced by the tag",
    )
    p.add_argument(
        "--max-body-lines",
        type=int,
        default=None,
        metavar="N",
        help=f"Reject documents with more than N body lines (default: {MAX_BODY_LINES})",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-render")
    p.add_argument("--debug", action="store_true", help="Dump parsed nodes to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def parse_format_arg(s: str) -> OutputFormat:
    """Parse an output format name."""
    try:
        return OutputFormat(s)
    except ValueError:
        choices = ", ".join(f.value for f in OutputFormat)
        raise argparse.ArgumentTypeError(
            f"invalid format {s!r} (expected one of: {choices})"
        ) from None


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, input_dir)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from exc

    # Output format: config < CLI
    fmt = OutputFormat.HTML
    cfg_format = config.get("format")
    if isinstance(cfg_format, str):
        fmt = parse_format_arg(cfg_format)
    if args.format is not None:
        fmt = parse_format_arg(args.format)

    # Header template: config < CLI
    date_format = DEFAULT_TEMPLATE.date_format
    tag_url: str | None = None
    cfg_render = config.get("render")
    if isinstance(cfg_render, dict):
        cfg_date_format = cfg_render.get("date_format")
        if isinstance(cfg_date_format, str):
            date_format = cfg_date_format
        cfg_tag_url = cfg_render.get("tag_url")
        if isinstance(cfg_tag_url, str):
            tag_url = cfg_tag_url
    if args.date_format is not None:
        date_format = args.date_format
    if args.tag_url is not None:
        tag_url = args.tag_url

    # Body line limit: config < CLI
    max_body_lines = MAX_BODY_LINES
    cfg_parse = config.get("parse")
    if isinstance(cfg_parse, dict):
        cfg_max = cfg_parse.get("max_body_lines")
        if isinstance(cfg_max, int) and not isinstance(cfg_max, bool):
            max_body_lines = cfg_max
        elif cfg_max is not None:
            raise argparse.ArgumentTypeError(
                f"invalid max_body_lines in config: {cfg_max!r} (expected an integer)"
            )
    if args.max_body_lines is not None:
        max_body_lines = args.max_body_lines
    if max_body_lines < 1:
        raise argparse.ArgumentTypeError(f"max body lines must be positive: {max_body_lines}")

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        fmt=fmt,
        template=HeaderTemplate(date_format=date_format, tag_url=tag_url),
        max_body_lines=max_body_lines,
        watch=args.watch,
        debug=args.debug,
    )


def compile_file(options: CliOptions) -> str:
    """Read, parse, and render a NuDoc file."""
    from nudoc.debug import dump_document
    from nudoc.parser import parse
    from nudoc.render import render

    with options.input_file.open("rb") as f:
        doc = parse(f, max_body_lines=options.max_body_lines)

    if options.debug:
        dump_document(doc)

    return render(doc, options.fmt, options.template)


def _write_output(options: CliOptions, text: str) -> None:
    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, re-render on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    _write_output(options, compile_file(options))
                    print(f"Rendered {options.input_file}", file=sys.stderr)
                except ParseError as exc:
                    print(exc.format(str(options.input_file)), file=sys.stderr)
                except OSError as exc:
                    print(f"error: {exc}", file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    try:
        text = compile_file(options)
    except ParseError as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    _write_output(options, text)
    return 0
