import asyncio
import time
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest
from helpers import SQUARE_SVG, TRIANGLE_SVG, write_icon
from svgpathtools import Line

from svg2webfont.codepoints import assign_code_points
from svg2webfont.discovery import discover_icons
from svg2webfont.errors import GlyphReadError
from svg2webfont.outline import GlyphOutline, read_glyph_outline
from svg2webfont.svgfont import FontAssemblyStream, path_data, render_glyph

SVG_NS = {"svg": "http://www.w3.org/2000/svg"}


def square_outline(size=24.0):
    corners = [0, complex(size, 0), complex(size, size), complex(0, size)]
    segments = tuple(Line(corners[i], corners[(i + 1) % 4]) for i in range(4))
    return GlyphOutline(segments=segments, x=0, y=0, width=size, height=size)


def test_path_data_closes_every_subpath():
    segments = (Line(0, 10), Line(10, 10 + 10j), Line(20, 30))
    assert path_data(segments) == "M0 0 L10 0 L10 10 Z M20 0 L30 0 Z"


def test_render_glyph_normalizes_to_font_height():
    glyph = render_glyph(square_outline(24), "square", 0xF000, font_height=5000)
    el = ET.fromstring(glyph)

    assert el.get("glyph-name") == "square"
    assert el.get("unicode") == "\uf000"
    assert el.get("horiz-adv-x") == "5000"
    assert el.get("d") == "M0 5000 L5000 5000 L5000 0 L0 0 L0 5000 Z"


def test_render_glyph_keeps_aspect_ratio(tmp_path):
    outline = read_glyph_outline(write_icon(tmp_path, "triangle.svg", TRIANGLE_SVG))
    el = ET.fromstring(render_glyph(outline, "triangle", 0xF001, font_height=1000))

    # 100x50 view box scaled to height 1000 -> width 2000
    assert el.get("horiz-adv-x") == "2000"
    assert el.get("d").startswith("M0 0 L1000 1000 L2000 0")


def test_render_glyph_fixed_width_and_centering():
    outline = GlyphOutline(segments=(Line(0, 10), Line(10, 10 + 10j)), x=0, y=0, width=10, height=10)
    el = ET.fromstring(
        render_glyph(outline, "half", 0xF000, font_height=100, fixed_width=True, center_horizontally=True)
    )

    assert el.get("horiz-adv-x") == "100"
    # 100 wide outline inside a 100 advance: nothing to shift
    assert el.get("d").startswith("M0 100")


def test_render_glyph_escapes_name():
    el = ET.fromstring(render_glyph(square_outline(), 'a"<b>', 0xF000))
    assert el.get("glyph-name") == 'a"<b>'


def _entries(root):
    return assign_code_points(discover_icons(root), prefix="i-")


def test_stream_writes_glyphs_in_order(tmp_path):
    src = tmp_path / "src"
    for name in ("b10", "a", "b2"):
        write_icon(src, f"{name}.svg", SQUARE_SVG)
    entries = _entries(src)
    target = tmp_path / "font.svg"

    async def scenario():
        stream = FontAssemblyStream(target, "My Icons", font_height=1000)
        stream.start()
        for entry in entries:
            stream.submit(entry)
        stream.finish()
        return await stream.completed()

    artifact = asyncio.run(scenario())

    assert artifact.path == target
    assert artifact.data == target.read_bytes()
    root = ET.fromstring(artifact.data)
    face = root.find(".//svg:font-face", SVG_NS)
    assert face.get("font-family") == "My Icons"
    assert face.get("units-per-em") == "1000"
    glyphs = root.findall(".//svg:glyph", SVG_NS)
    assert [g.get("glyph-name") for g in glyphs] == ["a", "b2", "b10"]
    assert [ord(g.get("unicode")) for g in glyphs] == [0xF000, 0xF001, 0xF002]


def test_stream_completion_waits_for_slow_reads(tmp_path):
    src = tmp_path / "src"
    for name in ("a", "b", "c"):
        write_icon(src, f"{name}.svg")
    entries = _entries(src)

    def slow_first(path: Path):
        if path.stem == "a":
            time.sleep(0.2)
        return square_outline()

    async def scenario():
        stream = FontAssemblyStream(tmp_path / "font.svg", "f", read_outline=slow_first)
        stream.start()
        for entry in entries:
            stream.submit(entry)
        stream.finish()
        return await stream.completed()

    artifact = asyncio.run(scenario())
    glyphs = ET.fromstring(artifact.data).findall(".//svg:glyph", SVG_NS)
    assert [g.get("glyph-name") for g in glyphs] == ["a", "b", "c"]


def test_stream_failure_aborts_and_removes_file(tmp_path):
    src = tmp_path / "src"
    for name in ("a", "b", "c"):
        write_icon(src, f"{name}.svg")
    entries = _entries(src)
    target = tmp_path / "font.svg"

    def reader(path: Path):
        if path.stem == "b":
            raise GlyphReadError(path, "malformed SVG")
        return square_outline()

    async def scenario():
        stream = FontAssemblyStream(target, "f", read_outline=reader)
        stream.start()
        for entry in entries:
            stream.submit(entry)
        stream.finish()
        return await stream.completed()

    with pytest.raises(GlyphReadError) as excinfo:
        asyncio.run(scenario())
    assert excinfo.value.path.name == "b.svg"
    assert not target.exists()


def test_unexpected_reader_errors_become_glyph_errors(tmp_path):
    src = tmp_path / "src"
    write_icon(src, "a.svg")
    entries = _entries(src)

    def reader(path: Path):
        raise ValueError("bad outline")

    async def scenario():
        stream = FontAssemblyStream(tmp_path / "font.svg", "f", read_outline=reader)
        stream.start()
        for entry in entries:
            stream.submit(entry)
        stream.finish()
        return await stream.completed()

    with pytest.raises(GlyphReadError, match="bad outline"):
        asyncio.run(scenario())


def test_submit_requires_start(tmp_path):
    stream = FontAssemblyStream(tmp_path / "font.svg", "f")
    with pytest.raises(RuntimeError):
        stream.finish()
