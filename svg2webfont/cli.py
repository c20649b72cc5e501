#!/usr/bin/env python3
"""Превращает папку с SVG-иконками в веб-шрифты.

    svg2webfont path/to/icons -o dist -p icon-
    svg2webfont path/to/icons -o dist -n "My Icons" -b icon

Пишет ``<file>.svg/.ttf/.woff/.woff2/.eot`` и рядом ``<file>.css``,
``<file>.html`` (предпросмотр) и ``<file>.js`` (camelCase-имя -> классы).
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .errors import BuildError
from .models import DEFAULT_FONT_HEIGHT, DEFAULT_START_CODEPOINT, BuildConfiguration
from .pipeline import run

PROG = "svg2webfont"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, description="Converts a directory full of SVG icons into webfonts")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("src", type=Path, help="Source directory")
    parser.add_argument("-o", "--out-dir", type=Path, default=None, help="Output directory (default: current directory)")
    parser.add_argument("-n", "--font-name", help="Font name (default: name of the source directory)")
    parser.add_argument("-f", "--file", help="Output filenames without extension (default: sanitized font name)")
    parser.add_argument("-p", "--prefix", help="CSS class name prefix")
    parser.add_argument("-b", "--base", help="CSS class name added to all icons")
    parser.add_argument(
        "--start-codepoint",
        type=lambda s: int(s, 0),
        default=DEFAULT_START_CODEPOINT,
        help=f"First code point to assign (default: {DEFAULT_START_CODEPOINT:#X}, private use area)",
    )
    parser.add_argument(
        "--font-height",
        type=int,
        default=DEFAULT_FONT_HEIGHT,
        help=f"Design grid height every icon is scaled to (default: {DEFAULT_FONT_HEIGHT})",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Read the built TTF back and check its cmap against the icon mapping",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = BuildConfiguration.resolve(
            args.src,
            output_dir=args.out_dir,
            font_name=args.font_name,
            file_stem=args.file,
            prefix=args.prefix,
            base=args.base,
            start_code_point=args.start_codepoint,
            font_height=args.font_height,
            verify=args.verify,
        )
        report = run(config)
    except BuildError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        return 1

    for failure in report.failures:
        print(f"{PROG}: {failure.stage}: {failure}", file=sys.stderr)
    if not report.ok:
        return 1

    print(f"Done: {len(report.entries)} icons in {config.output_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
