from __future__ import annotations

from pathlib import Path
from typing import Dict, List


class BuildError(Exception):
    """Базовый класс для всех ошибок сборки."""

    stage = "build"


class ConfigurationError(BuildError):
    stage = "config"


class DiscoveryError(BuildError):
    stage = "discovery"


class DuplicateNameError(BuildError):
    stage = "discovery"

    def __init__(self, duplicates: Dict[str, List[Path]]) -> None:
        self.duplicates = duplicates
        details = "; ".join(
            f"'{name}' <- {', '.join(str(p) for p in paths)}" for name, paths in sorted(duplicates.items())
        )
        super().__init__(f"Several icon files resolve to the same name: {details}")


class CodePointOverflowError(BuildError):
    stage = "allocation"


class GlyphReadError(BuildError):
    stage = "svg"

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class TranscodingError(BuildError):
    def __init__(self, stage: str, reason: str) -> None:
        self.stage = stage
        self.reason = reason
        super().__init__(f"{stage} conversion failed: {reason}")


class FontVerificationError(BuildError):
    stage = "verify"

    def __init__(self, problems: List[str]) -> None:
        self.problems = problems
        super().__init__("; ".join(problems))


class ArtifactWriteError(BuildError):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.stage = path.suffix.lstrip(".") or "artifact"
        super().__init__(f"Unable to write {path}: {reason}")
