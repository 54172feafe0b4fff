from itertools import permutations
from pathlib import Path

import pandas as pd

from sysdoc.document import DocumentBuilder, DocumentMetadata, Person
from sysdoc.section_metadata import SectionMetadata
from sysdoc.section_number import SectionNumber
from sysdoc.source_model import MarkdownSection
from sysdoc.traceability import (
    FORWARD,
    REVERSE,
    collect_metadata,
    forward_table,
    plan_generated_tables,
    reverse_table,
)


def test_forward_and_reverse_tables():
    items = [
        SectionMetadata(section_id="A", traced_ids=("y", "x")),
        SectionMetadata(section_id="B", traced_ids=("x",)),
    ]
    assert forward_table(items).rows == (("A", "x,y"), ("B", "x"))
    assert reverse_table(items).rows == (("x", "A,B"), ("y", "A"))


def test_tables_do_not_depend_on_input_order():
    items = [
        SectionMetadata(section_id="SDD-2", traced_ids=("SRS-3", "SRS-1")),
        SectionMetadata(section_id="SDD-1", traced_ids=("SRS-1",)),
        SectionMetadata(section_id="SDD-3", traced_ids=("SRS-2", "SRS-3")),
    ]
    expected_forward = forward_table(items).rows
    expected_reverse = reverse_table(items).rows
    for ordering in permutations(items):
        assert forward_table(ordering).rows == expected_forward
        assert reverse_table(ordering).rows == expected_reverse
    assert expected_reverse == (("SRS-1", "SDD-1,SDD-2"), ("SRS-2", "SDD-3"), ("SRS-3", "SDD-2,SDD-3"))


def test_duplicate_ids_are_merged_within_a_row():
    items = [
        SectionMetadata(section_id="A", traced_ids=("x", "x", "b")),
        SectionMetadata(section_id="A", traced_ids=("c",)),
    ]
    assert forward_table(items).rows == (("A", "b,c,x"),)
    assert reverse_table(items).rows == (("b", "A"), ("c", "A"), ("x", "A"))


def test_sections_without_ids_or_traces():
    items = [
        SectionMetadata(section_id="A"),
        SectionMetadata(traced_ids=("orphan",)),
    ]
    assert forward_table(items).rows == (("A", ""),)
    assert reverse_table(items).rows == ()


def test_to_frame_uses_headers():
    frame = forward_table([SectionMetadata(section_id="A", traced_ids=("x",))]).to_frame()
    assert list(frame.columns) == ["Section ID", "Traced IDs"]
    assert frame.iloc[0].tolist() == ["A", "x"]


def test_to_csv_round_trips_joined_ids(tmp_path):
    table = reverse_table([SectionMetadata(section_id="A", traced_ids=("x",)), SectionMetadata(section_id="B", traced_ids=("x",))])
    path = tmp_path / "out" / "reverse.csv"
    table.to_csv(path)
    frame = pd.read_csv(path)
    assert frame.to_dict(orient="list") == {"Traced ID": ["x"], "Section IDs": ["A,B"]}


def _section(number: str, metadata=None) -> MarkdownSection:
    parsed = SectionNumber.parse(number)
    return MarkdownSection(
        heading_level=parsed.depth() + 1,
        heading_text=number,
        section_number=parsed,
        line_number=1,
        source_file=Path(f"{number}_s.md"),
        metadata=metadata,
    )


def _document(*sections):
    metadata = DocumentMetadata("D-1", "Doc", "SDD", Person("o"), Person("a"))
    builder = DocumentBuilder(metadata, Path("."))
    for section in sections:
        builder.add_section(section)
    return builder.build()


def test_generated_tables_use_the_whole_document():
    doc = _document(
        _section("3", SectionMetadata(generate_section_id_to_traced_ids_table=True, generate_traced_ids_to_section_ids_table=True)),
        _section("1", SectionMetadata(section_id="A", traced_ids=("y", "x"))),
        _section("2", SectionMetadata(section_id="B", traced_ids=("x",))),
        _section("4"),
        _section("5", SectionMetadata(generate_section_id_to_traced_ids_table=True)),
    )

    assert len(collect_metadata(doc)) == 2
    planned = plan_generated_tables(doc)
    assert [(str(p.section_number), p.table.kind) for p in planned] == [
        ("3", FORWARD),
        ("3", REVERSE),
        ("5", FORWARD),
    ]
    assert planned[0].table.rows == (("A", "x,y"), ("B", "x"))
    assert planned[1].table.rows == (("x", "A,B"), ("y", "A"))
    # each request gets its own copy of the same full-document table
    assert planned[2].table == planned[0].table


def test_no_requests_no_tables():
    doc = _document(_section("1", SectionMetadata(section_id="A", traced_ids=("x",))))
    assert plan_generated_tables(doc) == []
