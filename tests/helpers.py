from __future__ import annotations

import time
from pathlib import Path

from svg2webfont.models import BuildConfiguration
from svg2webfont.transcode import TranscodeStage

SQUARE_SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24"><path d="M0 0 H24 V24 H0 Z"/></svg>"""

CIRCLE_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="32px" height="16px">
  <defs><path d="M0 0 L1 1"/></defs>
  <circle cx="8" cy="8" r="8"/>
</svg>"""

TRIANGLE_SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 50">
  <g><polygon points="0,50 50,0 100,50"/></g>
</svg>"""


def write_icon(root: Path, relative: str, content: str = SQUARE_SVG) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def make_config(src: Path, out: Path, **overrides) -> BuildConfiguration:
    options = {"prefix": "icon-", "font_name": "icons"}
    options.update(overrides)
    return BuildConfiguration.resolve(src, output_dir=out, **options)


def fake_stage(extension: str, payload: bytes, delay: float = 0.0, log: list | None = None) -> TranscodeStage:
    """Stage that returns a fixed payload; records its extension in ``log`` when done."""

    def convert(data: bytes) -> bytes:
        if delay:
            time.sleep(delay)
        if log is not None:
            log.append(extension)
        return payload

    return TranscodeStage(extension, convert)


def failing_stage(extension: str, message: str = "boom") -> TranscodeStage:
    def convert(data: bytes) -> bytes:
        raise RuntimeError(message)

    return TranscodeStage(extension, convert)


def fake_variants(log: list | None = None, eot_delay: float = 0.0) -> tuple:
    return (
        fake_stage("woff", b"WOFF", log=log),
        fake_stage("woff2", b"WOFF2", log=log),
        fake_stage("eot", b"EOT", delay=eot_delay, log=log),
    )
