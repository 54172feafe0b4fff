"""Walk a document source tree, parse every section file and assemble the document."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import Settings, load_document_config
from .document import DocumentBuilder, DocumentMetadata, UnifiedDocument, find_duplicate_sections
from .errors import DocumentBuildError, SourceReadError, SysdocError
from .markdown_parser import build_markdown
from .revision import TagRecord, build_revision_history
from .section_number import SECTION_SUFFIX, is_section_candidate
from .source_model import MarkdownSection, parse_section

SourceFile = Tuple[Path, str]


def find_section_files(source_dir: Path) -> List[Path]:
    if not source_dir.is_dir():
        raise FileNotFoundError(f"Source directory not found: {source_dir}")
    files: List[Path] = []
    # suffix match is case-insensitive (".MD" counts)
    for path in sorted(source_dir.rglob("*")):
        if not path.is_file() or path.suffix.lower() != SECTION_SUFFIX:
            continue
        if not is_section_candidate(path):
            logging.debug("Skipping non-section markdown file %s", path)
            continue
        files.append(path)
    return files


def read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise SourceReadError(f"not valid UTF-8 text: {exc.reason} at byte {exc.start}", source=path) from exc
    except OSError as exc:
        raise SourceReadError(f"cannot read file: {exc.strerror or exc}", source=path) from exc


def read_sources(paths: Iterable[Path]) -> Tuple[List[SourceFile], List[SysdocError]]:
    """Read every path, returning the readable sources and one error per unreadable file."""
    sources: List[SourceFile] = []
    errors: List[SysdocError] = []
    for path in paths:
        try:
            sources.append((path, read_source(path)))
        except SourceReadError as exc:
            errors.append(exc)
    return sources, errors


def _parse_one(source: SourceFile) -> MarkdownSection | SysdocError:
    path, text = source
    try:
        return parse_section(path, text)
    except SysdocError as exc:
        return exc


def parse_sources(
    sources: Iterable[SourceFile],
    workers: int = 1,
) -> Tuple[List[MarkdownSection], List[SysdocError]]:
    """Parse every source independently, returning parsed sections and per-file errors."""
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(_parse_one, sources))
    else:
        md = build_markdown()
        results = []
        for path, text in sources:
            try:
                results.append(parse_section(path, text, md=md))
            except SysdocError as exc:
                results.append(exc)

    sections = [result for result in results if isinstance(result, MarkdownSection)]
    errors = [result for result in results if isinstance(result, SysdocError)]
    return sections, errors


def assemble_document(
    metadata: DocumentMetadata,
    root: Path,
    sources: Iterable[SourceFile],
    workers: int = 1,
    read_errors: Sequence[SysdocError] = (),
) -> UnifiedDocument:
    """Parse and merge all sources into one document.

    read_errors are failures from reading files, reported together with parse errors.
    Raises DocumentBuildError listing every offending file; a partial document is
    never returned.
    """
    sections, parse_errors = parse_sources(sources, workers=workers)
    errors: List[SysdocError] = [*read_errors, *parse_errors]
    errors.extend(find_duplicate_sections(sections))
    if errors:
        for error in errors:
            logging.error("%s", error)
        raise DocumentBuildError(errors)

    builder = DocumentBuilder(metadata, root)
    for section in sections:
        builder.add_section(section)
    document = builder.build()

    logging.info(
        "Assembled document",
        extra={
            "document_id": metadata.document_id,
            "sections": document.section_count(),
            "tables": document.table_count(),
        },
    )
    return document


def load_project(
    project_dir: Path,
    settings: Settings,
    config_path: Optional[Path] = None,
    source_dir: Optional[Path] = None,
    tags: Optional[Sequence[TagRecord]] = None,
) -> UnifiedDocument:
    """Load config, revision history and every section of a document project."""
    project_dir = project_dir.resolve()
    config_path = config_path or project_dir / settings.config_name
    source_dir = source_dir or project_dir / settings.source_dir

    metadata = load_document_config(config_path)
    if tags:
        history = tuple(build_revision_history(tags))
        metadata = replace(metadata, revision_history=history, version=metadata.version or tags[-1].name)

    paths = find_section_files(source_dir)
    logging.info("Found section files", extra={"count": len(paths), "source_dir": str(source_dir)})
    sources, read_errors = read_sources(paths)
    return assemble_document(
        metadata,
        project_dir,
        sources,
        workers=settings.parse_workers,
        read_errors=read_errors,
    )
