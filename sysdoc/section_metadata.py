"""Traceability metadata embedded in a section through a ``sysdoc`` fenced block.

    ```sysdoc
    section_id = "SDD-3.2.1"
    traced_ids = ["SRS-001", "SRS-002"]
    generate_section_id_to_traced_ids_table = true
    ```

The body is TOML. Every key is optional.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .errors import SectionMetadataError

METADATA_TAG = "sysdoc"

KNOWN_KEYS = (
    "section_id",
    "traced_ids",
    "generate_section_id_to_traced_ids_table",
    "generate_traced_ids_to_section_ids_table",
)


@dataclass(frozen=True)
class SectionMetadata:
    section_id: Optional[str] = None
    traced_ids: Optional[Tuple[str, ...]] = None
    generate_section_id_to_traced_ids_table: bool = False
    generate_traced_ids_to_section_ids_table: bool = False

    @classmethod
    def parse(
        cls,
        content: str,
        source: Optional[Path] = None,
        line: Optional[int] = None,
    ) -> "SectionMetadata":
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            raise SectionMetadataError(f"invalid {METADATA_TAG} block: {exc}", source=source, line=line) from exc
        return cls.from_dict(data, source=source, line=line)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        source: Optional[Path] = None,
        line: Optional[int] = None,
    ) -> "SectionMetadata":
        unknown = sorted(set(data) - set(KNOWN_KEYS))
        if unknown:
            logging.warning(
                "Ignoring unknown %s keys %s",
                METADATA_TAG,
                unknown,
                extra={"source": str(source) if source else None, "line": line},
            )

        def fail(message: str) -> SectionMetadataError:
            return SectionMetadataError(f"invalid {METADATA_TAG} block: {message}", source=source, line=line)

        section_id = data.get("section_id")
        if section_id is not None and not isinstance(section_id, str):
            raise fail("'section_id' must be a string")

        traced_ids = data.get("traced_ids")
        if traced_ids is not None:
            if not isinstance(traced_ids, list) or not all(isinstance(item, str) for item in traced_ids):
                raise fail("'traced_ids' must be a list of strings")
            traced_ids = tuple(traced_ids)

        flags = {}
        for key in KNOWN_KEYS[2:]:
            value = data.get(key, False)
            if not isinstance(value, bool):
                raise fail(f"'{key}' must be a boolean")
            flags[key] = value

        return cls(section_id=section_id, traced_ids=traced_ids, **flags)

    def has_traceability(self) -> bool:
        return self.section_id is not None or self.traced_ids is not None

    def requests_table_generation(self) -> bool:
        return self.generate_section_id_to_traced_ids_table or self.generate_traced_ids_to_section_ids_table
