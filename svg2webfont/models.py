from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError
from .escape import sanitize_file_name

DEFAULT_START_CODEPOINT = 0xF000
DEFAULT_FONT_HEIGHT = 5000
MAX_CODEPOINT = 0x10FFFF
SURROGATE_MIN = 0xD800
SURROGATE_MAX = 0xDFFF

FONT_EXTENSIONS = ("svg", "ttf", "woff", "woff2", "eot")


@dataclass(frozen=True)
class IconSource:
    """Файл иконки на диске, код ещё не назначен."""

    path: Path
    name: str


@dataclass(frozen=True)
class IconEntry:
    source_path: Path
    name: str
    code_point: int
    css_class: str
    html_class: str

    @property
    def char(self) -> str:
        return chr(self.code_point)


@dataclass(frozen=True)
class FontArtifact:
    """Результат одного этапа сборки шрифта. ``path`` появляется, когда байты записаны."""

    data: bytes
    extension: str
    path: Optional[Path] = None


@dataclass(frozen=True)
class BuildConfiguration:
    input_dir: Path
    output_dir: Path
    font_name: str
    file_stem: str
    css_prefix: str = ""
    css_base: Optional[str] = None
    start_code_point: int = DEFAULT_START_CODEPOINT
    font_height: int = DEFAULT_FONT_HEIGHT
    verify: bool = False

    @classmethod
    def resolve(
        cls,
        input_dir: str | Path | None,
        output_dir: str | Path | None = None,
        font_name: str | None = None,
        file_stem: str | None = None,
        prefix: str | None = None,
        base: str | None = None,
        start_code_point: int = DEFAULT_START_CODEPOINT,
        font_height: int = DEFAULT_FONT_HEIGHT,
        verify: bool = False,
    ) -> "BuildConfiguration":
        """Подставляет значения по умолчанию и проверяет опции. Файловую систему не трогает."""
        if not prefix and not base:
            raise ConfigurationError("Not enough arguments. Either --prefix, --base or both must be provided.")
        if not input_dir:
            raise ConfigurationError("Source directory is required")
        if font_height <= 0:
            raise ConfigurationError(f"Font height must be positive, got {font_height}")
        if not 0 <= start_code_point <= MAX_CODEPOINT:
            raise ConfigurationError(f"Start code point out of Unicode range: {start_code_point:#x}")
        if SURROGATE_MIN <= start_code_point <= SURROGATE_MAX:
            raise ConfigurationError(f"Start code point is a surrogate: {start_code_point:#x}")

        src = Path(input_dir)
        name = font_name or os.path.basename(os.path.abspath(os.fspath(src)))
        if not name:
            raise ConfigurationError(f"Cannot derive a font name from {src}; pass --font-name")
        stem = file_stem or sanitize_file_name(name)
        if not stem:
            raise ConfigurationError(f"Font name '{name}' leaves no usable file name; pass --file")

        return cls(
            input_dir=src,
            output_dir=Path(output_dir or "."),
            font_name=name,
            file_stem=stem,
            css_prefix=prefix or "",
            css_base=base or None,
            start_code_point=start_code_point,
            font_height=font_height,
            verify=verify,
        )

    def artifact_path(self, extension: str) -> Path:
        return self.output_dir / f"{self.file_stem}.{extension}"
