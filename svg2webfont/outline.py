"""Чтение контура одной иконки из SVG-файла.

Собираем все рисуемые фигуры (path, polygon, polyline, rect, circle,
ellipse, line), переводим их в path data и разбираем через svgpathtools.
Дуги сразу аппроксимируются кубиками, чтобы дальше по конвейеру
оставались только Line/QuadraticBezier/CubicBezier. Атрибуты transform
фигур и групп перемножаются сверху вниз и применяются к готовым сегментам.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from svgpathtools import Arc, CubicBezier, Line, QuadraticBezier, parse_path, parse_transform
from svgpathtools.path import transform

from .errors import GlyphReadError

SKIPPED_ELEMENTS = {"defs", "clipPath", "mask", "symbol", "pattern", "marker", "title", "desc", "style", "metadata"}
LENGTH_PATTERN = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*(px|pt)?\s*$")
VIEWBOX_SPLIT = re.compile(r"[\s,]+")

Segment = Union[Line, QuadraticBezier, CubicBezier]


@dataclass(frozen=True)
class GlyphOutline:
    segments: Tuple[Segment, ...]
    x: float
    y: float
    width: float
    height: float


def _local(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def _length(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    match = LENGTH_PATTERN.match(value)
    if not match:
        return None
    return float(match.group(1))


def _num(el: ET.Element, attr: str) -> float:
    return _length(el.get(attr)) or 0.0


def _points_to_path(points: str, close: bool) -> Optional[str]:
    coords = points.strip().replace(",", " ").split()
    if len(coords) < 4:
        return None
    data = f"M {coords[0]},{coords[1]}"
    for i in range(2, len(coords) - 1, 2):
        data += f" L {coords[i]},{coords[i + 1]}"
    return data + " Z" if close else data


def _ellipse_to_path(cx: float, cy: float, rx: float, ry: float) -> Optional[str]:
    if rx <= 0 or ry <= 0:
        return None
    return (
        f"M {cx - rx},{cy} A {rx},{ry} 0 1,0 {cx + rx},{cy} "
        f"A {rx},{ry} 0 1,0 {cx - rx},{cy} Z"
    )


def _rect_to_path(el: ET.Element) -> Optional[str]:
    x, y = _num(el, "x"), _num(el, "y")
    w, h = _num(el, "width"), _num(el, "height")
    if w <= 0 or h <= 0:
        return None
    rx = _length(el.get("rx"))
    ry = _length(el.get("ry"))
    rx = rx if rx is not None else (ry or 0.0)
    ry = ry if ry is not None else rx
    rx, ry = min(rx, w / 2), min(ry, h / 2)

    if rx == 0 or ry == 0:
        return f"M {x},{y} H {x + w} V {y + h} H {x} Z"
    return (
        f"M {x + rx},{y} H {x + w - rx} A {rx},{ry} 0 0,1 {x + w},{y + ry} "
        f"V {y + h - ry} A {rx},{ry} 0 0,1 {x + w - rx},{y + h} "
        f"H {x + rx} A {rx},{ry} 0 0,1 {x},{y + h - ry} "
        f"V {y + ry} A {rx},{ry} 0 0,1 {x + rx},{y} Z"
    )


def _shape_to_path(el: ET.Element) -> Optional[str]:
    tag = _local(el.tag)
    if tag == "path":
        return el.get("d") or None
    if tag in ("polygon", "polyline"):
        return _points_to_path(el.get("points", ""), close=tag == "polygon")
    if tag == "rect":
        return _rect_to_path(el)
    if tag == "circle":
        r = _num(el, "r")
        return _ellipse_to_path(_num(el, "cx"), _num(el, "cy"), r, r)
    if tag == "ellipse":
        return _ellipse_to_path(_num(el, "cx"), _num(el, "cy"), _num(el, "rx"), _num(el, "ry"))
    if tag == "line":
        return f"M {_num(el, 'x1')},{_num(el, 'y1')} L {_num(el, 'x2')},{_num(el, 'y2')}"
    return None


def _iter_shapes(el: ET.Element, matrix) -> Iterator[Tuple[str, object]]:
    """Обходит дерево и отдаёт path data каждой фигуры вместе с накопленной матрицей transform."""
    for child in el:
        if _local(child.tag) in SKIPPED_ELEMENTS:
            continue
        local = matrix.dot(parse_transform(child.get("transform")))
        data = _shape_to_path(child)
        if data:
            yield data, local
        yield from _iter_shapes(child, local)


def _flatten(data: str, matrix) -> List[Segment]:
    segments: List[Segment] = []
    for segment in parse_path(data):
        if isinstance(segment, Arc):
            segments.extend(segment.as_cubic_curves())
        elif isinstance(segment, (Line, QuadraticBezier, CubicBezier)):
            segments.append(segment)
        else:
            raise ValueError(f"Unknown segment type: {type(segment).__name__}")
    # Дуги уже переведены в кубики, поэтому матрица применяется к опорным точкам
    return [transform(segment, matrix) for segment in segments]


def _view_box(root: ET.Element, segments: List[Segment]) -> Tuple[float, float, float, float]:
    raw = root.get("viewBox")
    if raw:
        parts = VIEWBOX_SPLIT.split(raw.strip())
        if len(parts) == 4:
            x, y, w, h = (float(p) for p in parts)
            return x, y, w, h

    width, height = _length(root.get("width")), _length(root.get("height"))
    if width is not None and height is not None:
        return 0.0, 0.0, width, height

    # Нет ни viewBox, ни размеров: берём габариты самого контура
    xmax = ymax = 0.0
    for segment in segments:
        _, sx, _, sy = segment.bbox()
        xmax, ymax = max(xmax, sx), max(ymax, sy)
    return 0.0, 0.0, xmax, ymax


def read_glyph_outline(path: Path) -> GlyphOutline:
    """Читает SVG-иконку и возвращает её контур и область видимости."""
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise GlyphReadError(path, f"malformed SVG: {exc}") from exc
    except OSError as exc:
        raise GlyphReadError(path, exc.strerror or str(exc)) from exc

    if _local(root.tag) != "svg":
        raise GlyphReadError(path, f"root element is <{_local(root.tag)}>, expected <svg>")

    segments: List[Segment] = []
    try:
        shapes = list(_iter_shapes(root, parse_transform(None)))
    except ValueError as exc:
        raise GlyphReadError(path, f"invalid transform: {exc}") from exc
    for data, matrix in shapes:
        try:
            segments.extend(_flatten(data, matrix))
        except Exception as exc:  # noqa: BLE001
            raise GlyphReadError(path, f"invalid path data '{data[:40]}': {exc}") from exc

    try:
        x, y, width, height = _view_box(root, segments)
    except ValueError as exc:
        raise GlyphReadError(path, f"invalid viewBox: {exc}") from exc
    if height <= 0 or width < 0:
        raise GlyphReadError(path, f"icon has no usable size ({width}x{height})")

    return GlyphOutline(segments=tuple(segments), x=x, y=y, width=width, height=height)
