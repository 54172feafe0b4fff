"""Forward (section id -> traced ids) and reverse (traced id -> section ids) tables.

Both tables are built from every section of the document, whichever section
requests them, and are sorted lexically so they do not depend on the order in
which files were discovered.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Set, Tuple

import pandas as pd

from .document import UnifiedDocument
from .section_metadata import SectionMetadata
from .section_number import SectionNumber

FORWARD = "section_id_to_traced_ids"
REVERSE = "traced_ids_to_section_ids"

FORWARD_HEADERS = ("Section ID", "Traced IDs")
REVERSE_HEADERS = ("Traced ID", "Section IDs")

ID_JOINER = ","


@dataclass(frozen=True)
class TraceabilityTable:
    kind: str
    headers: Tuple[str, str]
    rows: Tuple[Tuple[str, str], ...]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(list(self.rows), columns=list(self.headers))

    def to_csv(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.to_frame().to_csv(path, index=False)


@dataclass(frozen=True)
class GeneratedTable:
    """A table to be inserted at the end of the section that requested it."""

    section_number: SectionNumber
    table: TraceabilityTable


def _join(ids: Iterable[str]) -> str:
    return ID_JOINER.join(sorted(set(ids)))


def forward_table(metadata_items: Iterable[SectionMetadata]) -> TraceabilityTable:
    traced: Dict[str, Set[str]] = defaultdict(set)
    for metadata in metadata_items:
        if metadata.section_id is None:
            continue
        traced[metadata.section_id].update(metadata.traced_ids or ())
    rows = tuple((section_id, _join(traced[section_id])) for section_id in sorted(traced))
    return TraceabilityTable(kind=FORWARD, headers=FORWARD_HEADERS, rows=rows)


def reverse_table(metadata_items: Iterable[SectionMetadata]) -> TraceabilityTable:
    citing: Dict[str, Set[str]] = defaultdict(set)
    for metadata in metadata_items:
        if metadata.section_id is None:
            continue
        for traced_id in metadata.traced_ids or ():
            citing[traced_id].add(metadata.section_id)
    rows = tuple((traced_id, _join(citing[traced_id])) for traced_id in sorted(citing))
    return TraceabilityTable(kind=REVERSE, headers=REVERSE_HEADERS, rows=rows)


def collect_metadata(document: UnifiedDocument) -> List[SectionMetadata]:
    return [
        section.metadata
        for section in document.sections
        if section.metadata is not None and section.metadata.has_traceability()
    ]


def plan_generated_tables(document: UnifiedDocument) -> List[GeneratedTable]:
    """One entry per table request, in document order, forward before reverse within a section."""
    requesting = [
        section
        for section in document.sections
        if section.metadata is not None and section.metadata.requests_table_generation()
    ]
    if not requesting:
        return []

    metadata_items = collect_metadata(document)
    forward = forward_table(metadata_items)
    reverse = reverse_table(metadata_items)

    planned: List[GeneratedTable] = []
    for section in requesting:
        if section.metadata.generate_section_id_to_traced_ids_table:
            planned.append(GeneratedTable(section_number=section.section_number, table=forward))
        if section.metadata.generate_traced_ids_to_section_ids_table:
            planned.append(GeneratedTable(section_number=section.section_number, table=reverse))
    return planned
