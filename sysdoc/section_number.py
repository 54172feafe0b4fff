"""Hierarchical section numbers parsed from source filenames.

Example:
    "01.02_overview.md" -> SectionNumber((1, 2)), "Overview"
    "02.03.01_api-surface.md" -> SectionNumber((2, 3, 1)), "Api Surface"
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from .errors import SectionNumberError

SECTION_SUFFIX = ".md"

# <prefix><sep><slug>; the prefix is validated separately so a bad prefix is reported, not skipped
FILENAME_RE = re.compile(r"^(?P<prefix>[^_\s-]+)(?:[_\s-]+(?P<slug>.*))?$")


@dataclass(frozen=True, order=True)
class SectionNumber:
    parts: Tuple[int, ...]

    @classmethod
    def parse(cls, value: str) -> Optional["SectionNumber"]:
        """Parse a dot separated prefix such as "01.02" into (1, 2).

        Returns None if any component is not a non-negative integer.
        """
        if not value:
            return None
        parts = []
        for part in value.split("."):
            if not (part.isascii() and part.isdigit()):
                return None
            parts.append(int(part))
        return cls(tuple(parts))

    def depth(self) -> int:
        return max(0, len(self.parts) - 1)

    def __str__(self) -> str:
        return ".".join(str(part) for part in self.parts)


def is_section_candidate(path: Union[str, Path]) -> bool:
    name = Path(path).name
    return name.lower().endswith(SECTION_SUFFIX) and name[:1].isdigit()


def title_from_slug(slug: str) -> str:
    words = [word for word in re.split(r"[-_\s]+", slug) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def parse_section_filename(path: Union[str, Path]) -> Tuple[SectionNumber, str]:
    """Split a section filename into its number and display title."""
    path = Path(path)
    match = FILENAME_RE.match(path.stem)
    prefix = match.group("prefix") if match else path.stem
    number = SectionNumber.parse(prefix)
    if number is None:
        raise SectionNumberError(f"malformed section number prefix {prefix!r}", source=path)
    slug = (match.group("slug") if match else None) or ""
    return number, title_from_slug(slug)
