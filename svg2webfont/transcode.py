#!/usr/bin/env python3
"""Конвертация SVG-шрифта в TTF, WOFF, WOFF2 и EOT с помощью fontTools.

SVG-шрифт (теги <font>/<font-face>/<glyph>) разбирается, каждый глиф
рисуется через Cu2QuPen в TTGlyphPen (кубики переводятся в квадратичные
кривые), и собирается TTF. Остальные форматы получаются только из байтов
TTF: WOFF/WOFF2 меняют flavor у TTFont, EOT оборачивает TTF в заголовок
Embedded OpenType 2.1.

Запуск отдельно от сборки иконок:

    python -m svg2webfont.transcode out/icons.svg --out-dir out
"""

from __future__ import annotations

import argparse
import re
import struct
import sys
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Tuple

from fontTools.fontBuilder import FontBuilder
from fontTools.pens.cu2quPen import Cu2QuPen
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTFont
from svgpathtools import Arc, CubicBezier, Line, Path as SvgPath, QuadraticBezier, parse_path

GLYPH_NAME_PATTERN = re.compile(r"[^A-Za-z0-9._-]")
MAX_GLYPH_NAME = 63

EOT_VERSION = 0x00020001
EOT_MAGIC = 0x504C
EOT_CHARSET_DEFAULT = 1
EOT_HEADER = struct.Struct("<LLLL10sBBLHH4L2LL4LH")


@dataclass(frozen=True)
class TranscodeStage:
    extension: str
    convert: Callable[[bytes], bytes]


def _parse_svg_font(data: bytes) -> Tuple[str, int, int, int, int, Iterable[Dict[str, object]]]:
    """Читает SVG-шрифт и возвращает семейство, метрики и глифы."""
    if not data:
        raise ValueError("SVG font is empty")

    root = ET.fromstring(data)
    ns = {"svg": root.tag.split("}")[0].strip("{") if "}" in root.tag else ""}

    font_el = root.find(".//svg:font", ns) if ns["svg"] else root.find(".//font")
    if font_el is None:
        raise ValueError("No <font> element found")

    font_face = font_el.find("svg:font-face", ns) if ns["svg"] else font_el.find("font-face")
    units_per_em = int(font_face.attrib.get("units-per-em", "1000")) if font_face is not None else 1000
    ascent = int(font_face.attrib.get("ascent", str(int(units_per_em * 0.8)))) if font_face is not None else int(
        units_per_em * 0.8
    )
    descent_raw = font_face.attrib.get("descent") if font_face is not None else None
    descent = abs(int(descent_raw)) if descent_raw is not None else int(units_per_em * 0.2)
    family = font_face.attrib.get("font-family") if font_face is not None else None
    family = family or font_el.attrib.get("id") or "Icons"
    default_advance = int(font_el.attrib.get("horiz-adv-x", str(units_per_em)))

    glyph_elements = font_el.findall("svg:glyph", ns) if ns["svg"] else font_el.findall("glyph")
    glyphs = []
    for glyph_el in glyph_elements:
        unicode_val = glyph_el.attrib.get("unicode")
        if unicode_val is None:
            # Пропускаем глифы без юникода
            continue
        glyphs.append({
            "name": glyph_el.attrib.get("glyph-name", ""),
            "unicode": unicode_val,
            "path": glyph_el.attrib.get("d"),
            "advance": int(float(glyph_el.attrib.get("horiz-adv-x", default_advance))),
        })

    return family, units_per_em, ascent, descent, default_advance, glyphs


def _glyph_name(raw: str, unicode_val: str, taken: set) -> str:
    """Имя глифа для post-таблицы: только безопасные символы, без повторов."""
    name = GLYPH_NAME_PATTERN.sub("", raw)[:MAX_GLYPH_NAME]
    if not name or name[0].isdigit() or name == ".notdef":
        name = f"uni{ord(unicode_val):04X}" if len(unicode_val) == 1 else "glyph"
    candidate, idx = name, 1
    while candidate in taken:
        candidate = f"{name}.{idx}"
        idx += 1
    taken.add(candidate)
    return candidate


def _draw_path_to_pen(path: SvgPath, pen: Cu2QuPen) -> None:
    """Рисует сегменты SVG-пути в pen, каждая под-петля замыкается отдельно."""
    contour_start = None
    current_point = None

    for segment in path:
        start = (segment.start.real, segment.start.imag)
        end = (segment.end.real, segment.end.imag)

        if contour_start is None or start != current_point:
            if contour_start is not None:
                pen.closePath()
            # Новая под-петля, даже если она начинается в точке, где закончилась прошлая
            pen.moveTo(start)
            contour_start = start

        if isinstance(segment, Line):
            pen.lineTo(end)
        elif isinstance(segment, QuadraticBezier):
            pen.qCurveTo((segment.control.real, segment.control.imag), end)
        elif isinstance(segment, CubicBezier):
            pen.curveTo(
                (segment.control1.real, segment.control1.imag),
                (segment.control2.real, segment.control2.imag),
                end,
            )
        elif isinstance(segment, Arc):
            for cubic in segment.as_cubic_curves():
                pen.curveTo(
                    (cubic.control1.real, cubic.control1.imag),
                    (cubic.control2.real, cubic.control2.imag),
                    (cubic.end.real, cubic.end.imag),
                )
        else:
            raise ValueError(f"Unknown segment type: {type(segment).__name__}")

        current_point = end

        if end == contour_start:
            pen.closePath()
            contour_start = None
            current_point = None

    if contour_start is not None:
        pen.closePath()


def _build_glyph(path_data: str):
    """Создаёт TTGlyph из атрибута d (координаты уже в системе шрифта, y вверх)."""
    tt_pen = TTGlyphPen(None)
    cu2qu_pen = Cu2QuPen(tt_pen, max_err=1.0, reverse_direction=False)
    _draw_path_to_pen(parse_path(path_data), cu2qu_pen)
    return tt_pen.glyph()


def build_postscript_name(family: str) -> str:
    compact = family.replace(" ", "")
    sanitized = re.sub(r"[^A-Za-z0-9-]", "", compact)[:63]
    return sanitized or "Icons"


def svg_font_to_ttf(data: bytes) -> bytes:
    family, upm, ascent, descent, default_adv, glyph_entries = _parse_svg_font(data)

    glyph_order = [".notdef"]
    glyphs = {".notdef": TTGlyphPen(None).glyph()}
    advances: Dict[str, int] = {".notdef": default_adv}
    cmap: Dict[int, str] = {}
    taken = {".notdef"}

    for entry in glyph_entries:
        path_data = entry["path"]
        unicode_val = entry["unicode"]  # type: ignore[index]
        name = _glyph_name(entry["name"], unicode_val, taken)  # type: ignore[arg-type]

        if not path_data:
            # Разрешаем пустые глифы
            glyph_obj = TTGlyphPen(None).glyph()
        else:
            glyph_obj = _build_glyph(path_data)  # type: ignore[arg-type]

        glyph_order.append(name)
        glyphs[name] = glyph_obj
        advances[name] = entry["advance"]  # type: ignore[assignment]
        if len(unicode_val) == 1:
            cmap[ord(unicode_val)] = name

    fb = FontBuilder(upm, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap(cmap)
    fb.setupGlyf(glyphs)
    glyf = fb.font["glyf"]
    fb.setupHorizontalMetrics({name: (adv, getattr(glyf[name], "xMin", 0)) for name, adv in advances.items()})
    fb.setupHorizontalHeader(ascent=ascent, descent=-descent)
    fb.setupOS2(
        sTypoAscender=ascent,
        sTypoDescender=-descent,
        sTypoLineGap=0,
        usWinAscent=ascent,
        usWinDescent=descent,
    )
    ps_name = build_postscript_name(family)
    fb.setupNameTable({
        "familyName": family,
        "styleName": "Regular",
        "uniqueFontIdentifier": f"{ps_name}-Regular",
        "fullName": family,
        "psName": ps_name,
        "version": "Version 1.0",
    })
    fb.setupPost()
    fb.setupMaxp()

    out = BytesIO()
    fb.save(out)
    return out.getvalue()


def _reflavor(data: bytes, flavor: str) -> bytes:
    font = TTFont(BytesIO(data))
    font.flavor = flavor
    out = BytesIO()
    font.save(out)
    return out.getvalue()


def ttf_to_woff(data: bytes) -> bytes:
    return _reflavor(data, "woff")


def ttf_to_woff2(data: bytes) -> bytes:
    # woff2 требует установленного brotli
    return _reflavor(data, "woff2")


def _eot_name(font: TTFont, name_id: int) -> bytes:
    record = font["name"].getName(name_id, 3, 1, 0x409) or font["name"].getName(name_id, 1, 0, 0)
    text = record.toUnicode() if record is not None else ""
    encoded = text.encode("utf-16-le")
    return struct.pack("<H", len(encoded)) + encoded


def ttf_to_eot(data: bytes) -> bytes:
    """Оборачивает TTF в EOT 2.1 (без сжатия и XOR-шифрования)."""
    font = TTFont(BytesIO(data))
    os2 = font["OS/2"]
    panose = os2.panose
    panose_bytes = bytes([
        panose.bFamilyType, panose.bSerifStyle, panose.bWeight, panose.bProportion, panose.bContrast,
        panose.bStrokeVariation, panose.bArmStyle, panose.bLetterForm, panose.bMidline, panose.bXHeight,
    ])

    # Family, Style, Version, Full name; после каждого имени 2 байта выравнивания
    names = b"".join(_eot_name(font, name_id) + b"\x00\x00" for name_id in (1, 2, 5, 4))
    root_string = struct.pack("<H", 0)
    size = EOT_HEADER.size + len(names) + len(root_string) + len(data)

    header = EOT_HEADER.pack(
        size,
        len(data),
        EOT_VERSION,
        0,
        panose_bytes,
        EOT_CHARSET_DEFAULT,
        os2.fsSelection & 0x01,
        os2.usWeightClass,
        os2.fsType,
        EOT_MAGIC,
        os2.ulUnicodeRange1,
        os2.ulUnicodeRange2,
        os2.ulUnicodeRange3,
        os2.ulUnicodeRange4,
        getattr(os2, "ulCodePageRange1", 0),
        getattr(os2, "ulCodePageRange2", 0),
        font["head"].checkSumAdjustment,
        0,
        0,
        0,
        0,
        0,
    )
    return header + names + root_string + data


OUTLINE_STAGE = TranscodeStage("ttf", svg_font_to_ttf)
VARIANT_STAGES = (
    TranscodeStage("woff", ttf_to_woff),
    TranscodeStage("woff2", ttf_to_woff2),
    TranscodeStage("eot", ttf_to_eot),
)


def convert(svg_path: Path, out_dir: Path) -> List[Path]:
    if not svg_path.exists():
        raise FileNotFoundError(f"SVG font not found: {svg_path}")

    out_dir.mkdir(parents=True, exist_ok=True)
    ttf = OUTLINE_STAGE.convert(svg_path.read_bytes())
    written = [out_dir / f"{svg_path.stem}.{OUTLINE_STAGE.extension}"]
    written[0].write_bytes(ttf)
    for stage in VARIANT_STAGES:
        target = out_dir / f"{svg_path.stem}.{stage.extension}"
        target.write_bytes(stage.convert(ttf))
        written.append(target)
    return written


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Convert an SVG font into TTF/WOFF/WOFF2/EOT")
    parser.add_argument("src", type=Path, help="Source SVG font")
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=None,
        help="Output directory (default: next to the source file)",
    )
    args = parser.parse_args(argv)

    try:
        written = convert(args.src, args.out_dir or args.src.parent)
    except Exception as exc:  # noqa: BLE001
        print(f"Conversion failed: {exc}", file=sys.stderr)
        return 1

    for path in written:
        print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
