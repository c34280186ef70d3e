import pytest
from csv_colstats import EmptyInputError, compute_report, report_to_dict, split_lines
from make_csv import generate_rows, write_csv, JUNK

SAMPLE = "name,score\na,10\nb,oops\nc,20\n"

def test_sample_report():
    out = report_to_dict(compute_report(SAMPLE))
    assert out["rowsProcessed"] == 3
    assert out["columns"]["score"] == {"countNumbers": 2, "invalidCells": 1, "min": 10, "max": 20, "mean": 15}
    assert out["columns"]["name"] == {"countNumbers": 0, "invalidCells": 2, "min": None, "max": None, "mean": None}

def test_columns_keep_header_order():
    rep = compute_report("z,a,m\n1,2,3\n")
    assert list(rep.columns) == ["z", "a", "m"]

def test_report_columns_are_read_only():
    rep = compute_report(SAMPLE)
    with pytest.raises(TypeError):
        rep.columns["score"] = None

def test_split_lines_handles_crlf_and_trims():
    assert split_lines("a\r\n  b  \nc") == ["a", "b", "c"]

def test_lone_carriage_return_is_not_a_line_break():
    rep = compute_report("a\n1\r2\n")
    assert rep.rows_processed == 1
    assert rep.columns["a"].invalid_cells == 1

def test_blank_lines_are_skipped_everywhere():
    text = "\n   \n\nx,y\n\n1,2\n \n3,4\n\n\n"
    rep = compute_report(text)
    assert rep.rows_processed == 2
    assert rep.columns["x"].count_numbers == 2
    assert rep.columns["y"].invalid_cells == 0

def test_short_rows_are_padded_with_empty_cells():
    rep = compute_report("a,b,c\n1\n2,3\n")
    assert rep.rows_processed == 2
    assert rep.columns["b"].count_numbers == 1
    assert rep.columns["c"].count_numbers == 0
    assert rep.columns["c"].invalid_cells == 0

def test_extra_cells_are_ignored():
    rep = compute_report("a\n1,foo,bar\n")
    assert list(rep.columns) == ["a"]
    assert rep.columns["a"].invalid_cells == 0

def test_quoted_cells_in_rows():
    rep = compute_report('label,value\n"x, y","1.5"\n"say ""hi""",2\n')
    assert rep.columns["value"].count_numbers == 2
    assert rep.columns["value"].mean == 1.75
    assert rep.columns["label"].invalid_cells == 2

def test_duplicate_header_names_merge_into_one_column():
    rep = compute_report("v,v\n1,2\n3,x\n")
    assert list(rep.columns) == ["v"]
    s = rep.columns["v"]
    assert s.count_numbers == 3
    assert s.invalid_cells == 1
    assert (s.min, s.max) == (1.0, 3.0)

@pytest.mark.parametrize("text", ["", "\n\n", "  \r\n \t \n"])
def test_no_header_raises(text):
    with pytest.raises(EmptyInputError, match="no header found"):
        compute_report(text)

def test_header_only_file():
    out = report_to_dict(compute_report("a,b\n"))
    assert out["rowsProcessed"] == 0
    assert out["columns"]["a"] == {"countNumbers": 0, "invalidCells": 0, "min": None, "max": None, "mean": None}

def test_non_integral_values_stay_floats():
    out = report_to_dict(compute_report("a\n1\n2\n"))
    assert out["columns"]["a"]["mean"] == 1.5
    assert isinstance(out["columns"]["a"]["min"], int)

def test_progress_lines_go_to_stderr(capsys):
    text = "a\n" + "\n".join(str(i) for i in range(10)) + "\n"
    compute_report(text, progress_every_rows=4, show_progress=True)
    captured = capsys.readouterr()
    assert captured.out == ""
    lines = [ln for ln in captured.err.splitlines() if ln.startswith("[progress]")]
    # rows 4, 8 and the final 10
    assert len(lines) == 3
    assert "100.0%" in lines[-1]

def test_generated_file_counts_line_up(tmp_path):
    header, rows = generate_rows(500, 3, 2, 0.1, 0.05, seed=1337)
    path = tmp_path / "messy.csv"
    write_csv(path, header, rows, blank_rate=0.1, seed=1337)
    rep = compute_report(path.read_text(encoding="utf-8"))
    assert rep.rows_processed == len(rows)
    for i, name in enumerate(header):
        col = [r[i] for r in rows]
        s = rep.columns[name]
        empties = sum(1 for c in col if c == "")
        assert s.count_numbers + s.invalid_cells + empties == len(rows)
        if name.startswith("n"):
            junk = [c for c in col if c in JUNK]
            nums = [float(c) for c in col if c and c not in JUNK]
            assert s.invalid_cells == len(junk)
            assert s.count_numbers == len(nums)
            assert s.min == min(nums) and s.max == max(nums)
        else:
            assert s.count_numbers == 0

def test_header_without_columns_raises(monkeypatch):
    import csv_colstats
    monkeypatch.setattr(csv_colstats, "tokenize", lambda line: [])
    with pytest.raises(EmptyInputError, match="Header row is empty"):
        compute_report("a,b\n1,2\n")
