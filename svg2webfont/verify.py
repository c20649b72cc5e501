from __future__ import annotations

from io import BytesIO
from typing import List, Sequence, Set

from fontTools.ttLib import TTFont

from .models import IconEntry


def load_families(font: TTFont) -> Set[str]:
    families = set()
    for record in font["name"].names:
        if record.nameID == 1:
            try:
                families.add(record.toUnicode())
            except Exception as exc:  # pragma: no cover
                raise ValueError(f"Unable to decode family name: {exc}") from exc
    return families


def check_font_mapping(ttf_data: bytes, entries: Sequence[IconEntry], family: str) -> List[str]:
    """Сверяет собранный TrueType-шрифт с раскладкой иконок, из которой он собран.

    Возвращает список найденных проблем. Пустой список значит, что в cmap ровно
    назначенные коды и у каждого свой глиф.
    """
    font = TTFont(BytesIO(ttf_data))
    cmap = font.getBestCmap() or {}
    problems: List[str] = []

    expected = {entry.code_point: entry.name for entry in entries}
    missing = sorted(set(expected) - set(cmap))
    if missing:
        problems.append(
            "code points missing from cmap: " + ", ".join(f"U+{cp:04X} ({expected[cp]})" for cp in missing)
        )
    extra = sorted(set(cmap) - set(expected))
    if extra:
        problems.append("unexpected code points in cmap: " + ", ".join(f"U+{cp:04X}" for cp in extra))

    seen = {}
    for cp in sorted(set(expected) & set(cmap)):
        glyph = cmap[cp]
        if glyph in seen:
            problems.append(f"U+{cp:04X} and U+{seen[glyph]:04X} share glyph '{glyph}'")
        seen[glyph] = cp

    families = load_families(font)
    if family not in families:
        problems.append(f"family '{family}' not found in name table (found: {sorted(families)})")
    return problems
