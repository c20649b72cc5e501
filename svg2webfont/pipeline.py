"""Оркестрация сборки.

Поиск иконок и назначение кодов завершаются до первой записи на диск. Потом
в одном event loop работают две независимые ветки:

* шрифт: поток SVG-шрифта -> TTF -> (WOFF | WOFF2 | EOT), последние три параллельно;
* ассеты: CSS, HTML-предпросмотр и JS-карта имён, каждый пишется сам по себе.

Ошибки отдельных этапов собираются в отчёт и не останавливают другую ветку.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Tuple

from .codepoints import assign_code_points
from .discovery import discover_icons
from .emitters import render_name_map, render_preview, render_stylesheet
from .errors import ArtifactWriteError, BuildError, FontVerificationError, TranscodingError
from .models import BuildConfiguration, FontArtifact, IconEntry
from .outline import read_glyph_outline
from .svgfont import FontAssemblyStream, OutlineReader
from .transcode import OUTLINE_STAGE, VARIANT_STAGES, TranscodeStage
from .verify import check_font_mapping


@dataclass
class BuildReport:
    entries: Tuple[IconEntry, ...] = ()
    written: List[Path] = field(default_factory=list)
    failures: List[BuildError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def prepare_entries(config: BuildConfiguration) -> Tuple[IconEntry, ...]:
    icons = discover_icons(config.input_dir)
    return assign_code_points(icons, config.css_prefix, config.css_base, config.start_code_point)


async def write_artifact(path: Path, data: bytes, report: BuildReport) -> Path:
    try:
        await asyncio.to_thread(path.write_bytes, data)
    except OSError as exc:
        raise ArtifactWriteError(path, exc.strerror or str(exc)) from exc
    report.written.append(path)
    print(f"Wrote {path}")
    return path


def _collect(results: Sequence[object], report: BuildReport) -> None:
    for result in results:
        if isinstance(result, BuildError):
            report.failures.append(result)
        elif isinstance(result, BaseException):
            raise result


async def assemble_font(
    entries: Sequence[IconEntry],
    config: BuildConfiguration,
    read_outline: OutlineReader = read_glyph_outline,
) -> FontArtifact:
    stream = FontAssemblyStream(
        config.artifact_path("svg"),
        config.font_name,
        font_height=config.font_height,
        normalize=True,
        fixed_width=False,
        center_horizontally=False,
        read_outline=read_outline,
    )
    stream.start()
    for entry in entries:
        stream.submit(entry)
    stream.finish()
    return await stream.completed()


async def transcode(stage: TranscodeStage, source: bytes, config: BuildConfiguration, report: BuildReport) -> FontArtifact:
    try:
        data = await asyncio.to_thread(stage.convert, source)
    except Exception as exc:  # noqa: BLE001
        raise TranscodingError(stage.extension, str(exc) or type(exc).__name__) from exc
    path = await write_artifact(config.artifact_path(stage.extension), data, report)
    return FontArtifact(data=data, extension=stage.extension, path=path)


async def run_transcoding_chain(
    svg: FontArtifact,
    entries: Sequence[IconEntry],
    config: BuildConfiguration,
    report: BuildReport,
    outline_stage: TranscodeStage = OUTLINE_STAGE,
    variant_stages: Sequence[TranscodeStage] = VARIANT_STAGES,
) -> None:
    """SVG-шрифт -> TTF, затем все варианты из TTF параллельно."""
    ttf = await transcode(outline_stage, svg.data, config, report)

    if config.verify:
        problems = await asyncio.to_thread(check_font_mapping, ttf.data, entries, config.font_name)
        if problems:
            report.failures.append(FontVerificationError(problems))

    results = await asyncio.gather(
        *(transcode(stage, ttf.data, config, report) for stage in variant_stages),
        return_exceptions=True,
    )
    _collect(results, report)


async def build_fonts(
    entries: Sequence[IconEntry],
    config: BuildConfiguration,
    report: BuildReport,
    read_outline: OutlineReader = read_glyph_outline,
    outline_stage: TranscodeStage = OUTLINE_STAGE,
    variant_stages: Sequence[TranscodeStage] = VARIANT_STAGES,
) -> None:
    svg = await assemble_font(entries, config, read_outline)
    report.written.append(svg.path)
    print(f"Wrote {svg.path}")
    await run_transcoding_chain(svg, entries, config, report, outline_stage, variant_stages)


async def emit(path: Path, text: str, report: BuildReport) -> Path:
    return await write_artifact(path, text.encode("utf-8"), report)


async def build(
    config: BuildConfiguration,
    *,
    read_outline: OutlineReader = read_glyph_outline,
    outline_stage: TranscodeStage = OUTLINE_STAGE,
    variant_stages: Sequence[TranscodeStage] = VARIANT_STAGES,
) -> BuildReport:
    """Полная сборка. Фатальные ошибки поиска и назначения кодов пробрасываются, остальные попадают в отчёт."""
    entries = await asyncio.to_thread(prepare_entries, config)

    try:
        await asyncio.to_thread(config.output_dir.mkdir, parents=True, exist_ok=True)
    except OSError as exc:
        raise ArtifactWriteError(config.output_dir, exc.strerror or str(exc)) from exc

    report = BuildReport(entries=entries)
    results = await asyncio.gather(
        build_fonts(entries, config, report, read_outline, outline_stage, variant_stages),
        emit(config.artifact_path("css"), render_stylesheet(entries, config), report),
        emit(config.artifact_path("html"), render_preview(entries, config), report),
        emit(config.artifact_path("js"), render_name_map(entries), report),
        return_exceptions=True,
    )
    _collect(results, report)
    return report


def run(config: BuildConfiguration, **kwargs) -> BuildReport:
    return asyncio.run(build(config, **kwargs))
