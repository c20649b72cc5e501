from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .errors import CodePointOverflowError
from .models import (
    DEFAULT_START_CODEPOINT,
    MAX_CODEPOINT,
    SURROGATE_MAX,
    SURROGATE_MIN,
    IconEntry,
    IconSource,
)


def check_code_point_range(start: int, count: int) -> None:
    """Ошибка, если ``count`` кодов подряд от ``start`` выходят за допустимый Unicode."""
    if count == 0:
        return
    last = start + count - 1
    if last > MAX_CODEPOINT:
        raise CodePointOverflowError(
            f"{count} icons starting at U+{start:04X} overflow the Unicode range (last would be U+{last:X})"
        )
    if start <= SURROGATE_MAX and last >= SURROGATE_MIN:
        raise CodePointOverflowError(
            f"{count} icons starting at U+{start:04X} run into the surrogate block U+D800..U+DFFF"
        )


def assign_code_points(
    icons: Sequence[IconSource],
    prefix: str = "",
    base: Optional[str] = None,
    start: int = DEFAULT_START_CODEPOINT,
) -> Tuple[IconEntry, ...]:
    """Назначает подряд идущие коды уже упорядоченным иконкам.

    Один и тот же упорядоченный вход всегда даёт одну и ту же раскладку,
    на этом держится воспроизводимость CSS и карты имён.
    """
    check_code_point_range(start, len(icons))

    entries = []
    for offset, icon in enumerate(icons):
        css_class = f"{prefix}{icon.name}"
        html_class = f"{base} {css_class}" if base else css_class
        entries.append(
            IconEntry(
                source_path=icon.path,
                name=icon.name,
                code_point=start + offset,
                css_class=css_class,
                html_class=html_class,
            )
        )
    return tuple(entries)
