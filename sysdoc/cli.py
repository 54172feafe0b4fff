"""Command line entry point: assemble a document project and export its traceability tables."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .config import load_settings
from .document import UnifiedDocument
from .errors import DocumentBuildError, SysdocError
from .loader import load_project
from .revision import TagRecord, load_tag_records
from .traceability import collect_metadata, forward_table, plan_generated_tables, reverse_table


def configure_logging(verbosity: int) -> None:
    level = logging.DEBUG if verbosity > 0 else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Assemble numbered markdown sections into one document and derive traceability tables.",
    )
    parser.add_argument(
        "project_dir",
        type=Path,
        nargs="?",
        default=Path.cwd(),
        help="Document project directory (contains the config file and the source folder).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML or TOML document config (defaults to SYSDOC_CONFIG_NAME in the project).",
    )
    parser.add_argument(
        "--source-dir",
        type=Path,
        help="Folder holding the numbered markdown sections (defaults to SYSDOC_SOURCE_DIR).",
    )
    parser.add_argument(
        "--tags-file",
        type=Path,
        help="JSON or YAML list of {tag, date, message} used for the revision history.",
    )
    parser.add_argument(
        "--trace-dir",
        type=Path,
        help="Write the forward and reverse traceability tables as CSV into this folder.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Number of threads used to parse section files.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (repeatable).",
    )
    return parser.parse_args(argv)


def resolve_path(base_dir: Path, path: Optional[Path]) -> Optional[Path]:
    if path is None:
        return None
    return path if path.is_absolute() else base_dir / path


def log_summary(document: UnifiedDocument) -> None:
    logging.info(
        "%s (%s): %d sections, %d tables, %d images, size %d blocks",
        document.metadata.title,
        document.metadata.document_id,
        document.section_count(),
        document.table_count(),
        document.image_count(),
        document.word_count(),
    )
    for generated in plan_generated_tables(document):
        logging.info(
            "Section %s requests %s table (%d rows)",
            generated.section_number,
            generated.table.kind,
            len(generated.table.rows),
        )


def export_traceability(document: UnifiedDocument, trace_dir: Path) -> List[Path]:
    metadata_items = collect_metadata(document)
    written: List[Path] = []
    for table in (forward_table(metadata_items), reverse_table(metadata_items)):
        path = trace_dir / f"{table.kind}.csv"
        table.to_csv(path)
        logging.info("Wrote traceability table", extra={"path": str(path), "rows": len(table.rows)})
        written.append(path)
    return written


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.verbose)

    settings = load_settings()
    if args.workers:
        settings.parse_workers = max(1, args.workers)

    base_dir = Path.cwd()
    tags: List[TagRecord] = []
    tags_file = resolve_path(base_dir, args.tags_file)
    if tags_file is not None:
        tags = load_tag_records(tags_file)

    try:
        document = load_project(
            args.project_dir,
            settings,
            config_path=resolve_path(base_dir, args.config),
            source_dir=resolve_path(base_dir, args.source_dir),
            tags=tags,
        )
    except DocumentBuildError as exc:
        logging.error("Document build failed: %d file error(s)", len(exc.errors))
        raise SystemExit(1) from exc
    except SysdocError as exc:
        logging.error("%s", exc)
        raise SystemExit(1) from exc

    log_summary(document)
    trace_dir = resolve_path(base_dir, args.trace_dir)
    if trace_dir is not None:
        export_traceability(document, trace_dir)


if __name__ == "__main__":
    main()
