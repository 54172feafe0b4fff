from pathlib import Path

import pytest

from sysdoc.document import DocumentBuilder, DocumentMetadata, Person, UnifiedDocument
from sysdoc.errors import DuplicateSectionError
from sysdoc.markdown_parser import Image, TableReference, Text
from sysdoc.section_number import SectionNumber
from sysdoc.source_model import MarkdownSection, TableSource, parse_section


def make_metadata() -> DocumentMetadata:
    return DocumentMetadata(
        document_id="TEST-001",
        title="Test Document",
        doc_type="SDD",
        owner=Person("John Doe", "john@example.com"),
        approver=Person("Jane Smith", "jane@example.com"),
        standard="DI-IPSC-81435B",
    )


def make_section(number: str, path: str, content=()) -> MarkdownSection:
    parsed = SectionNumber.parse(number)
    return MarkdownSection(
        heading_level=parsed.depth() + 1,
        heading_text=f"Section {number}",
        section_number=parsed,
        line_number=1,
        source_file=Path(path),
        content=tuple(content),
    )


def test_builder_sorts_sections_by_number():
    builder = DocumentBuilder(make_metadata(), Path("."))
    for number in ["2.1", "1.10", "1", "1.2"]:
        builder.add_section(make_section(number, f"{number}_x.md"))
    doc = builder.build()

    assert doc.section_count() == 4
    assert [str(s.section_number) for s in doc.sections] == ["1", "1.2", "1.10", "2.1"]


def test_duplicate_numbers_are_fatal():
    builder = DocumentBuilder(make_metadata(), Path("."))
    builder.add_section(make_section("01.01", "src/b/01.01_second.md"))
    builder.add_section(make_section("1.1", "src/a/01.01_first.md"))

    with pytest.raises(DuplicateSectionError) as excinfo:
        builder.build()
    assert excinfo.value.number == "1.1"
    assert excinfo.value.first == Path("src/a/01.01_first.md")
    assert excinfo.value.source == Path("src/b/01.01_second.md")


def test_tables_collected_in_document_order_with_owner():
    builder = DocumentBuilder(make_metadata(), Path("."))
    builder.add_section(make_section("2", "src/02_b.md", [TableReference("b.csv", "B", 3)]))
    builder.add_section(
        make_section("1", "src/01_a.md", [TableReference("a1.csv", "A1", 1), TableReference("a2.csv", "A2", 5)])
    )
    extra = TableSource(Path("extra.csv"), SectionNumber((9,)), Path("src/09_z.md"))
    builder.add_table(extra)
    doc = builder.build()

    assert doc.table_count() == 4
    assert [t.path for t in doc.tables] == [Path("a1.csv"), Path("a2.csv"), Path("b.csv"), Path("extra.csv")]
    assert doc.tables[0].section_number == SectionNumber((1,))
    assert doc.tables[2].source_file == Path("src/02_b.md")
    assert doc.tables[2].line == 3


def test_image_count_only_counts_images():
    doc = UnifiedDocument(
        make_metadata(),
        Path("."),
        sections=(make_section("1", "01_a.md", [Image("a.png"), Text("x")]),),
    )
    assert doc.image_count() == 1

    doc = UnifiedDocument(
        make_metadata(),
        Path("."),
        sections=(
            make_section("1", "01_a.md", [Image("a.png"), Text("x"), Text("y"), TableReference("t.csv")]),
            make_section("2", "02_b.md", [Image("b.png")]),
        ),
    )
    assert doc.image_count() == 2
    assert doc.word_count() == 5


def test_empty_document_counts():
    doc = UnifiedDocument(make_metadata(), Path("."))
    assert doc.section_count() == 0
    assert doc.table_count() == 0
    assert doc.image_count() == 0
    assert doc.word_count() == 0


def test_find_section():
    builder = DocumentBuilder(make_metadata(), Path("."))
    builder.add_section(make_section("3.2", "03.02_x.md"))
    doc = builder.build()
    assert doc.find_section("03.02").heading_text == "Section 3.2"
    assert doc.find_section(SectionNumber((3, 2))) is doc.sections[0]
    assert doc.find_section("4") is None
    assert doc.find_section("bad") is None


def test_parse_section_from_file_text():
    text = "Body with ![logo](logo.png) and [data](tables/data.csv).\n"
    section = parse_section(Path("src/03-design/03.02.01_data-model.md"), text)
    assert section.section_number == SectionNumber((3, 2, 1))
    assert section.heading_level == 3
    assert section.heading_text == "Data Model"
    assert section.line_number == 1
    assert [img.url for img in section.images()] == ["logo.png"]
    assert [ref.path for ref in section.table_references()] == ["tables/data.csv"]
    assert section.metadata is None


def test_table_source_resolves_against_owning_file():
    table = TableSource(Path("tables/data.csv"), SectionNumber((1,)), Path("src/01-intro/01_a.md"))
    assert table.resolve(Path("/project")) == Path("/project/src/01-intro/tables/data.csv")
