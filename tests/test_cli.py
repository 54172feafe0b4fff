from pathlib import Path

import pandas as pd
import pytest

from sysdoc.cli import main, parse_args

CONFIG = """
document_id: SDD-001
title: CLI SDD
doc_type: SDD
owner: John Doe
approver: Jane Smith
"""


def make_project(root: Path, extra=None) -> Path:
    (root / "sysdoc.yaml").write_text(CONFIG, encoding="utf-8")
    src = root / "src"
    src.mkdir()
    (src / "01_a.md").write_text('```sysdoc\nsection_id = "A"\ntraced_ids = ["y", "x"]\n```\n', encoding="utf-8")
    (src / "02_b.md").write_text('```sysdoc\nsection_id = "B"\ntraced_ids = ["x"]\n```\n', encoding="utf-8")
    for name, text in (extra or {}).items():
        (src / name).write_text(text, encoding="utf-8")
    return root


def test_parse_args_defaults():
    args = parse_args(["proj"])
    assert args.project_dir == Path("proj")
    assert args.trace_dir is None
    assert args.verbose == 0


def test_main_writes_traceability_tables(tmp_path):
    project = tmp_path / "proj"
    project.mkdir()
    make_project(project)
    trace_dir = tmp_path / "trace"
    main([str(project), "--trace-dir", str(trace_dir), "--workers", "2"])

    forward = pd.read_csv(trace_dir / "section_id_to_traced_ids.csv")
    reverse = pd.read_csv(trace_dir / "traced_ids_to_section_ids.csv")
    assert forward.values.tolist() == [["A", "x,y"], ["B", "x"]]
    assert reverse.values.tolist() == [["x", "A,B"], ["y", "A"]]


def test_main_exits_nonzero_on_build_errors(tmp_path):
    project = make_project(tmp_path, extra={"02_duplicate.md": "dup\n"})
    with pytest.raises(SystemExit) as excinfo:
        main([str(project)])
    assert excinfo.value.code == 1


def test_main_exits_nonzero_on_undecodable_source(tmp_path):
    project = make_project(tmp_path)
    (project / "src" / "03_c.md").write_bytes(b"\xff\xfe broken\n")
    with pytest.raises(SystemExit) as excinfo:
        main([str(project)])
    assert excinfo.value.code == 1
