"""Потоковая сборка SVG-шрифта из контуров отдельных иконок.

Иконки подаются в порядке кодов. Каждая подача сразу запускает чтение контура
в рабочем потоке, а единственный потребитель пишет элементы ``<glyph>`` в файл
строго в порядке подачи. Шрифт готов только после возврата ``completed()``.
При любой ошибке недописанный файл удаляется, а ``completed()`` бросает
исключение.
"""

from __future__ import annotations

import asyncio
import html
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from svgpathtools import CubicBezier, Line, QuadraticBezier

from .errors import ArtifactWriteError, BuildError, GlyphReadError
from .models import DEFAULT_FONT_HEIGHT, FontArtifact, IconEntry
from .outline import GlyphOutline, Segment, read_glyph_outline

OutlineReader = Callable[[Path], GlyphOutline]

SVG_FONT_FOOTER = """  </font>
</defs>
</svg>
"""


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _pt(z: complex) -> str:
    return f"{_fmt(z.real)} {_fmt(z.imag)}"


def path_data(segments: Tuple[Segment, ...]) -> str:
    """Сегменты в path data, каждая под-петля явно замкнута."""
    parts: List[str] = []
    start: Optional[complex] = None
    current: Optional[complex] = None
    for seg in segments:
        if start is None or seg.start != current:
            if start is not None:
                parts.append("Z")
            parts.append(f"M{_pt(seg.start)}")
            start = seg.start
        if isinstance(seg, Line):
            parts.append(f"L{_pt(seg.end)}")
        elif isinstance(seg, QuadraticBezier):
            parts.append(f"Q{_pt(seg.control)} {_pt(seg.end)}")
        else:
            parts.append(f"C{_pt(seg.control1)} {_pt(seg.control2)} {_pt(seg.end)}")
        current = seg.end
        if current == start:
            parts.append("Z")
            start = None
    if start is not None:
        parts.append("Z")
    return " ".join(parts)


def _transform(segments: Tuple[Segment, ...], tf: Callable[[complex], complex]) -> Tuple[Segment, ...]:
    out = []
    for seg in segments:
        if isinstance(seg, Line):
            out.append(Line(tf(seg.start), tf(seg.end)))
        elif isinstance(seg, QuadraticBezier):
            out.append(QuadraticBezier(tf(seg.start), tf(seg.control), tf(seg.end)))
        else:
            out.append(CubicBezier(tf(seg.start), tf(seg.control1), tf(seg.control2), tf(seg.end)))
    return tuple(out)


def render_glyph(
    outline: GlyphOutline,
    name: str,
    code_point: int,
    font_height: int = DEFAULT_FONT_HEIGHT,
    normalize: bool = True,
    fixed_width: bool = False,
    center_horizontally: bool = False,
) -> str:
    """Один элемент ``<glyph>`` в координатах шрифта (y вверх, базовая линия 0)."""
    ratio = font_height / outline.height if normalize else 1.0
    segments = _transform(
        outline.segments,
        lambda z: complex((z.real - outline.x) * ratio, font_height - (z.imag - outline.y) * ratio),
    )
    advance = font_height if fixed_width else round(outline.width * ratio)

    if center_horizontally and segments:
        boxes = [seg.bbox() for seg in segments]
        xmin = min(box[0] for box in boxes)
        xmax = max(box[1] for box in boxes)
        shift = (advance - (xmax - xmin)) / 2 - xmin
        segments = _transform(segments, lambda z: complex(z.real + shift, z.imag))

    return (
        f'    <glyph glyph-name="{html.escape(name)}" unicode="&#x{code_point:X};" '
        f'horiz-adv-x="{advance}" d="{path_data(segments)}" />\n'
    )


def svg_font_header(font_name: str, font_height: int) -> str:
    family = html.escape(font_name)
    return (
        '<?xml version="1.0" standalone="no"?>\n'
        '<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN" "http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd" >\n'
        '<svg xmlns="http://www.w3.org/2000/svg">\n'
        "<defs>\n"
        f'  <font id="{family}" horiz-adv-x="{font_height}">\n'
        f'    <font-face font-family="{family}" units-per-em="{font_height}" ascent="{font_height}" descent="0" />\n'
        '    <missing-glyph horiz-adv-x="0" />\n'
    )


class FontAssemblyStream:
    """Приёмник глифов: ``start()``, ``submit(entry)`` на каждую иконку, ``finish()``, затем ``await completed()``."""

    def __init__(
        self,
        destination: Path,
        font_name: str,
        *,
        font_height: int = DEFAULT_FONT_HEIGHT,
        normalize: bool = True,
        fixed_width: bool = False,
        center_horizontally: bool = False,
        read_outline: OutlineReader = read_glyph_outline,
    ) -> None:
        self.destination = Path(destination)
        self.font_name = font_name
        self.font_height = font_height
        self.normalize = normalize
        self.fixed_width = fixed_width
        self.center_horizontally = center_horizontally
        self._read_outline = read_outline
        self._queue: Optional[asyncio.Queue] = None
        self._consumer: Optional[asyncio.Task] = None
        self._reads: List[asyncio.Task] = []
        self._finished = False

    def start(self) -> None:
        if self._consumer is not None:
            raise RuntimeError("Font stream already started")
        self._queue = asyncio.Queue()
        self._consumer = asyncio.get_running_loop().create_task(self._drain())

    def submit(self, entry: IconEntry) -> None:
        if self._consumer is None:
            raise RuntimeError("Font stream not started")
        if self._finished:
            raise RuntimeError("Font stream already finished")
        read = asyncio.ensure_future(asyncio.to_thread(self._read_outline, entry.source_path))
        self._reads.append(read)
        self._queue.put_nowait((entry, read))

    def finish(self) -> None:
        if self._consumer is None:
            raise RuntimeError("Font stream not started")
        if not self._finished:
            self._finished = True
            self._queue.put_nowait(None)

    async def completed(self) -> FontArtifact:
        if self._consumer is None:
            raise RuntimeError("Font stream not started")
        return await self._consumer

    async def _drain(self) -> FontArtifact:
        chunks: List[str] = []
        handle = None
        try:
            try:
                handle = await asyncio.to_thread(self.destination.open, "w", encoding="utf-8")
            except OSError as exc:
                raise ArtifactWriteError(self.destination, exc.strerror or str(exc)) from exc
            await self._write(handle, chunks, svg_font_header(self.font_name, self.font_height))

            while True:
                item = await self._queue.get()
                if item is None:
                    break
                entry, read = item
                try:
                    outline = await read
                    glyph = render_glyph(
                        outline,
                        entry.name,
                        entry.code_point,
                        self.font_height,
                        self.normalize,
                        self.fixed_width,
                        self.center_horizontally,
                    )
                except GlyphReadError:
                    raise
                except Exception as exc:  # noqa: BLE001
                    raise GlyphReadError(entry.source_path, str(exc)) from exc
                await self._write(handle, chunks, glyph)

            await self._write(handle, chunks, SVG_FONT_FOOTER)
            await asyncio.to_thread(handle.close)
        except BuildError:
            self._abandon_reads()
            await asyncio.to_thread(self._discard_partial, handle)
            raise

        data = "".join(chunks).encode("utf-8")
        return FontArtifact(data=data, extension="svg", path=self.destination)

    async def _write(self, handle, chunks: List[str], text: str) -> None:
        try:
            await asyncio.to_thread(handle.write, text)
        except OSError as exc:
            raise ArtifactWriteError(self.destination, exc.strerror or str(exc)) from exc
        chunks.append(text)

    def _abandon_reads(self) -> None:
        for read in self._reads:
            if not read.done():
                read.cancel()
            elif not read.cancelled():
                read.exception()

    def _discard_partial(self, handle) -> None:
        if handle is not None:
            handle.close()
        self.destination.unlink(missing_ok=True)
