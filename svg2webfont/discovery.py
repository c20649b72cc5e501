"""Поиск иконок во входной папке и их упорядочивание.

Имя иконки = путь относительно корня без расширения, разделители
каталогов заменены на ``-`` (``weather/rain.svg`` -> ``weather-rain``).
Порядок задаётся естественной сортировкой без учёта регистра, поэтому
``icon-2`` идёт раньше ``icon-10`` на любой платформе.
"""

from __future__ import annotations

import os
import re
import unicodedata
from collections import defaultdict
from pathlib import Path
from typing import Callable, Dict, List, Sequence, Tuple

from .errors import DiscoveryError, DuplicateNameError
from .models import IconSource

NAME_JOINER = "-"
SEPARATOR_RUN = re.compile(r"[/\\]+")
# Цифры, буквы, любой другой одиночный символ
TOKEN = re.compile(r"(\d+)|([^\W\d_]+)|(.)", re.DOTALL)
RANK_OTHER, RANK_DIGITS, RANK_LETTERS = 0, 1, 2

SortKey = Callable[[str], object]


def natural_sort_key(name: str) -> Tuple[List[Tuple[int, int, str]], str]:
    """Ключ сортировки: числа сравниваются как числа, регистр и диакритика игнорируются.

    Как и в ICU-сортировке, знаки препинания и пробелы идут раньше цифр,
    а цифры раньше букв: ``a-`` < ``a1`` < ``ab``. Второй элемент кортежа
    (исходная строка) нужен только для стабильного порядка имён, которые
    отличаются лишь регистром.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    parts: List[Tuple[int, int, str]] = []
    for match in TOKEN.finditer(base):
        digits, letters, other = match.groups()
        if digits is not None:
            parts.append((RANK_DIGITS, int(digits), ""))
        elif letters is not None:
            parts.append((RANK_LETTERS, 0, letters))
        else:
            parts.append((RANK_OTHER, 0, other))
    return parts, name


def icon_name(relative: str) -> str:
    stem, _ = os.path.splitext(relative)
    return SEPARATOR_RUN.sub(NAME_JOINER, stem)


def iter_icon_files(root: Path) -> List[Path]:
    """Рекурсивно собирает обычные файлы (симлинки разыменовываются)."""
    if not root.exists():
        raise DiscoveryError(f"Source directory not found: {root}")
    if not root.is_dir():
        raise DiscoveryError(f"Source is not a directory: {root}")
    if not os.access(root, os.R_OK | os.X_OK):
        raise DiscoveryError(f"Source directory is not readable: {root}")

    def _fail(exc: OSError) -> None:
        raise DiscoveryError(f"Unable to read {exc.filename}: {exc.strerror}") from exc

    files: List[Path] = []
    seen_dirs = set()
    for dirpath, dirnames, filenames in os.walk(root, onerror=_fail, followlinks=True):
        real = os.path.realpath(dirpath)
        if real in seen_dirs:
            # Симлинк на уже пройденный каталог: не уходим в цикл
            dirnames[:] = []
            continue
        seen_dirs.add(real)
        for filename in filenames:
            path = Path(dirpath) / filename
            if path.is_file():
                files.append(path)
    return files


def find_duplicates(icons: Sequence[IconSource]) -> Dict[str, List[Path]]:
    by_name: Dict[str, List[Path]] = defaultdict(list)
    for icon in icons:
        by_name[icon.name].append(icon.path)
    return {name: paths for name, paths in by_name.items() if len(paths) > 1}


def discover_icons(root: Path, sort_key: SortKey = natural_sort_key) -> List[IconSource]:
    """Возвращает иконки из ``root`` в детерминированном порядке.

    Бросает DiscoveryError, если корень недоступен, и DuplicateNameError,
    если два файла дают одно и то же имя.
    """
    root = Path(root)
    icons = [
        IconSource(path=path.absolute(), name=icon_name(os.path.relpath(path, root)))
        for path in iter_icon_files(root)
    ]

    duplicates = find_duplicates(icons)
    if duplicates:
        raise DuplicateNameError(duplicates)

    icons.sort(key=lambda icon: sort_key(icon.name))
    return icons
