from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from markdown_it import MarkdownIt

from .markdown_parser import Image, MarkdownBlock, TableReference, parse_markdown
from .section_metadata import SectionMetadata
from .section_number import SectionNumber, parse_section_filename


@dataclass(frozen=True)
class MarkdownSection:
    """One source file, mapped to a numbered node of the document."""

    heading_level: int
    heading_text: str
    section_number: SectionNumber
    line_number: int
    source_file: Path
    content: Tuple[MarkdownBlock, ...] = ()
    metadata: Optional[SectionMetadata] = None

    def images(self) -> List[Image]:
        return [block for block in self.content if isinstance(block, Image)]

    def table_references(self) -> List[TableReference]:
        return [block for block in self.content if isinstance(block, TableReference)]


@dataclass(frozen=True)
class TableSource:
    """A CSV-backed table referenced from a section."""

    path: Path
    section_number: SectionNumber
    source_file: Path
    label: str = ""
    line: Optional[int] = None

    def resolve(self, root: Path) -> Path:
        """Path of the CSV file, relative links resolved against the owning file's folder."""
        if self.path.is_absolute():
            return self.path
        base = self.source_file.parent
        if not base.is_absolute():
            base = root / base
        return base / self.path

    @classmethod
    def from_reference(cls, reference: TableReference, section: MarkdownSection) -> "TableSource":
        return cls(
            path=Path(reference.path),
            section_number=section.section_number,
            source_file=section.source_file,
            label=reference.label,
            line=reference.line,
        )


def parse_section(path: Path, text: str, md: Optional[MarkdownIt] = None) -> MarkdownSection:
    """Parse one source file into a section.

    Raises SectionNumberError for a malformed filename prefix and
    SectionMetadataError for a bad sysdoc block, both carrying the path.
    """
    path = Path(path)
    number, title = parse_section_filename(path)
    parsed = parse_markdown(text, source=path, md=md)
    return MarkdownSection(
        heading_level=number.depth() + 1,
        heading_text=title,
        section_number=number,
        line_number=1,
        source_file=path,
        content=parsed.blocks,
        metadata=parsed.metadata,
    )
