import json, os, subprocess, sys, tempfile
import pytest

SCRIPT = os.path.join(os.path.dirname(os.path.abspath(__file__)), "csv_colstats.py")

def _run(*args, stdin=None):
    return subprocess.run([sys.executable, SCRIPT, *args], input=stdin, capture_output=True, text=True)

def _tmp_csv(text):
    with tempfile.NamedTemporaryFile("w", delete=False, suffix=".csv", encoding="utf-8", newline="") as f:
        f.write(text); return f.name

def test_report_to_stdout():
    path = _tmp_csv("name,score\r\na,10\r\nb,oops\r\nc,20\r\n")
    try:
        r = _run("--input", path)
        assert r.returncode == 0
        out = json.loads(r.stdout)
        assert out == {
            "rowsProcessed": 3,
            "columns": {
                "name": {"countNumbers": 0, "invalidCells": 2, "min": None, "max": None, "mean": None},
                "score": {"countNumbers": 2, "invalidCells": 1, "min": 10, "max": 20, "mean": 15},
            },
        }
        assert '"min": 10,' in r.stdout
    finally:
        os.remove(path)

def test_positional_path_and_out_file():
    path = _tmp_csv("\ufeffx\n1\n2\n")
    out_path = path + ".json"
    try:
        r = _run(path, "--out", out_path)
        assert r.returncode == 0
        assert r.stdout == ""
        assert f"Wrote report to: {out_path}" in r.stderr
        with open(out_path, encoding="utf-8") as f:
            rep = json.load(f)
        assert rep["columns"]["x"]["mean"] == 1.5
    finally:
        os.remove(path)
        if os.path.exists(out_path):
            os.remove(out_path)

def test_stdin_input():
    r = _run("-", stdin="a,b\n1,2\n")
    assert r.returncode == 0
    assert json.loads(r.stdout)["rowsProcessed"] == 1

def test_missing_input_prints_help_and_exits_2():
    r = _run()
    assert r.returncode == 2
    assert "Usage:" in r.stderr

def test_help_without_input_exits_2():
    r = _run("--help")
    assert r.returncode == 2
    assert "Usage:" in r.stdout

def test_help_with_input_keeps_stdout_json():
    path = _tmp_csv("a\n1\n")
    try:
        r = _run("-h", path)
        assert r.returncode == 0
        assert "Usage:" in r.stderr
        assert json.loads(r.stdout)["rowsProcessed"] == 1
    finally:
        os.remove(path)

def test_empty_file_exits_2():
    path = _tmp_csv("\n   \n")
    try:
        r = _run(path)
        assert r.returncode == 2
        assert "no header found" in r.stderr
        assert r.stdout == ""
    finally:
        os.remove(path)

def test_unreadable_file_is_fatal():
    r = _run(os.path.join(tempfile.gettempdir(), "definitely-missing-colstats.csv"))
    assert r.returncode == 1
    assert r.stderr.startswith("Fatal:")

def test_timing_line_on_stderr():
    path = _tmp_csv("a\n1\n")
    try:
        r = _run(path, "--timing")
        assert r.returncode == 0
        assert "[timing]" in r.stderr
        assert "rss" in r.stderr
    finally:
        os.remove(path)

def _run_bytes(*args, stdin=b"", encoding="ascii"):
    env = dict(os.environ, PYTHONIOENCODING=encoding)
    return subprocess.run([sys.executable, SCRIPT, *args], input=stdin, capture_output=True, env=env)

def test_non_ascii_header_is_utf8_on_stdout_regardless_of_locale():
    path = _tmp_csv("hé\n1\n")
    try:
        r = _run_bytes(path, encoding="ascii")
        assert r.returncode == 0
        assert list(json.loads(r.stdout.decode("utf-8"))["columns"]) == ["hé"]
    finally:
        os.remove(path)

def test_stdin_is_decoded_as_utf8_regardless_of_locale():
    r = _run_bytes("-", stdin="\ufeffhé\n1\n".encode("utf-8"), encoding="latin-1")
    assert r.returncode == 0
    assert list(json.loads(r.stdout.decode("utf-8"))["columns"]) == ["hé"]

def test_invalid_utf8_byte_does_not_abort_the_report():
    with tempfile.NamedTemporaryFile("wb", delete=False, suffix=".csv") as f:
        f.write(b"name,score\ncaf\xe9,10\nb,20\n"); path = f.name
    try:
        r = _run(path)
        assert r.returncode == 0
        out = json.loads(r.stdout)
        assert out["rowsProcessed"] == 2
        assert out["columns"]["name"]["invalidCells"] == 2
        assert out["columns"]["score"]["mean"] == 15
    finally:
        os.remove(path)

def test_invalid_utf8_on_stdin_does_not_abort_the_report():
    r = _run_bytes("-", stdin=b"v\n\xff\n3\n", encoding="utf-8")
    assert r.returncode == 0
    out = json.loads(r.stdout.decode("utf-8"))
    assert out["columns"]["v"] == {"countNumbers": 1, "invalidCells": 1, "min": 3, "max": 3, "mean": 3}

def test_generator_is_not_an_installed_module():
    tomllib = pytest.importorskip("tomllib")
    root = os.path.dirname(os.path.abspath(__file__))
    with open(os.path.join(root, "pyproject.toml"), "rb") as f:
        conf = tomllib.load(f)
    assert conf["tool"]["setuptools"]["py-modules"] == ["csv_colstats"]
