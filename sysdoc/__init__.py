"""
Document assembly and traceability engine: numbered markdown sections in,
one ordered, cross-referenced document model out.
"""

from .document import (  # noqa: F401
    DocumentBuilder,
    DocumentMetadata,
    Person,
    RevisionHistoryEntry,
    UnifiedDocument,
    find_duplicate_sections,
)
from .errors import (  # noqa: F401
    ConfigError,
    DocumentBuildError,
    DuplicateSectionError,
    SectionMetadataError,
    SectionNumberError,
    SourceReadError,
    SysdocError,
)
from .markdown_parser import (  # noqa: F401
    CodeBlock,
    Image,
    MarkdownBlock,
    ParsedMarkdown,
    TableReference,
    Text,
    parse_markdown,
)
from .revision import TagRecord, build_revision_history, format_display_date  # noqa: F401
from .section_metadata import SectionMetadata  # noqa: F401
from .section_number import SectionNumber, parse_section_filename  # noqa: F401
from .source_model import MarkdownSection, TableSource, parse_section  # noqa: F401
from .traceability import (  # noqa: F401
    GeneratedTable,
    TraceabilityTable,
    forward_table,
    plan_generated_tables,
    reverse_table,
)

__all__ = [
    "DocumentBuilder",
    "DocumentMetadata",
    "Person",
    "RevisionHistoryEntry",
    "UnifiedDocument",
    "find_duplicate_sections",
    "ConfigError",
    "DocumentBuildError",
    "DuplicateSectionError",
    "SectionMetadataError",
    "SectionNumberError",
    "SourceReadError",
    "SysdocError",
    "CodeBlock",
    "Image",
    "MarkdownBlock",
    "ParsedMarkdown",
    "TableReference",
    "Text",
    "parse_markdown",
    "TagRecord",
    "build_revision_history",
    "format_display_date",
    "SectionMetadata",
    "SectionNumber",
    "parse_section_filename",
    "MarkdownSection",
    "TableSource",
    "parse_section",
    "GeneratedTable",
    "TraceabilityTable",
    "forward_table",
    "plan_generated_tables",
    "reverse_table",
]
