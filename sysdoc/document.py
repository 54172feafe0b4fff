"""Unified document model produced by assembling every section of a source tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .errors import DuplicateSectionError
from .markdown_parser import Image
from .section_number import SectionNumber
from .source_model import MarkdownSection, TableSource

DEFAULT_HEADING_COLOR = "#2B579A"


@dataclass(frozen=True)
class Person:
    name: str
    email: str = ""


@dataclass(frozen=True)
class RevisionHistoryEntry:
    version: str
    date: str
    description: str = ""


@dataclass(frozen=True)
class DocumentMetadata:
    document_id: str
    title: str
    doc_type: str
    owner: Person
    approver: Person
    standard: str = ""
    template: str = ""
    system_id: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    modified: Optional[str] = None
    revision_history: Tuple[RevisionHistoryEntry, ...] = field(default_factory=tuple)
    protection_mark: Optional[str] = None
    title_page_background: Optional[str] = None
    heading_color: str = DEFAULT_HEADING_COLOR


@dataclass(frozen=True)
class UnifiedDocument:
    metadata: DocumentMetadata
    root: Path
    sections: Tuple[MarkdownSection, ...] = ()
    tables: Tuple[TableSource, ...] = ()

    def section_count(self) -> int:
        return len(self.sections)

    def table_count(self) -> int:
        return len(self.tables)

    def image_count(self) -> int:
        return sum(1 for section in self.sections for block in section.content if isinstance(block, Image))

    def word_count(self) -> int:
        """Approximate document size: the number of content blocks summed over all sections.

        This is not a tokenized word count and should only be used as a size indicator.
        """
        return sum(len(section.content) for section in self.sections)

    def find_section(self, number: Union[SectionNumber, str]) -> Optional[MarkdownSection]:
        if isinstance(number, str):
            parsed = SectionNumber.parse(number)
            if parsed is None:
                return None
            number = parsed
        for section in self.sections:
            if section.section_number == number:
                return section
        return None


def find_duplicate_sections(sections: Iterable[MarkdownSection]) -> List[DuplicateSectionError]:
    seen: Dict[SectionNumber, MarkdownSection] = {}
    duplicates: List[DuplicateSectionError] = []
    for section in sorted(sections, key=lambda section: section.section_number):
        previous = seen.get(section.section_number)
        if previous is None:
            seen[section.section_number] = section
            continue
        first, second = sorted([previous.source_file, section.source_file], key=str)
        duplicates.append(DuplicateSectionError(str(section.section_number), first, second))
    return duplicates


class DocumentBuilder:
    """Accumulates independently parsed sections and finalizes them into a UnifiedDocument."""

    def __init__(self, metadata: DocumentMetadata, root: Path) -> None:
        self.metadata = metadata
        self.root = Path(root)
        self.sections: List[MarkdownSection] = []
        self.tables: List[TableSource] = []

    def add_section(self, section: MarkdownSection) -> None:
        self.sections.append(section)

    def add_table(self, table: TableSource) -> None:
        self.tables.append(table)

    def build(self) -> UnifiedDocument:
        """Sort sections by number and collect table references in document order.

        Raises DuplicateSectionError if two sections share a number; duplicates are
        never resolved by path or discovery order.
        """
        ordered = sorted(self.sections, key=lambda section: section.section_number)
        duplicates = find_duplicate_sections(ordered)
        if duplicates:
            raise duplicates[0]

        tables: List[TableSource] = []
        for section in ordered:
            for reference in section.table_references():
                tables.append(TableSource.from_reference(reference, section))
        tables.extend(self.tables)

        logging.debug(
            "Built unified document",
            extra={"sections": len(ordered), "tables": len(tables), "root": str(self.root)},
        )
        return UnifiedDocument(
            metadata=self.metadata,
            root=self.root,
            sections=tuple(ordered),
            tables=tuple(tables),
        )
