from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional


class SysdocError(Exception):
    """Base error for document assembly, attributable to a source file and line."""

    def __init__(self, message: str, source: Optional[Path] = None, line: Optional[int] = None) -> None:
        self.message = message
        self.source = Path(source) if source is not None else None
        self.line = line
        super().__init__(self._format())

    @property
    def location(self) -> str:
        if self.source is None:
            return ""
        if self.line is None:
            return str(self.source)
        return f"{self.source}:{self.line}"

    def _format(self) -> str:
        if not self.location:
            return self.message
        return f"{self.location}: {self.message}"


class SectionNumberError(SysdocError):
    pass


class SourceReadError(SysdocError):
    pass


class SectionMetadataError(SysdocError):
    pass


class ConfigError(SysdocError):
    pass


class DuplicateSectionError(SysdocError):
    def __init__(self, number: str, first: Path, second: Path) -> None:
        self.number = number
        self.first = Path(first)
        super().__init__(
            f"duplicate section numbering {number} (already used by {first})",
            source=second,
        )


class DocumentBuildError(SysdocError):
    """Raised when one or more source files prevent the document from being assembled."""

    def __init__(self, errors: Iterable[SysdocError]) -> None:
        self.errors: List[SysdocError] = list(errors)
        count = len(self.errors)
        noun = "error" if count == 1 else "errors"
        details = "; ".join(str(err) for err in self.errors)
        super().__init__(f"document build failed with {count} {noun}: {details}")
