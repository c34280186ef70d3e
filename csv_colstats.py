#!/usr/bin/env python3
import sys, os, re, math, json, time, argparse
from types import MappingProxyType
from typing import Dict, List, Mapping, NamedTuple, Optional
from collections import deque  # progress window

# optional psutil (only used for --timing)
try:
    import psutil  # type: ignore
except Exception:
    psutil = None

MB = 1024 * 1024

HELP_TEXT = """csv-colstats

Usage:
  csv-colstats --input <file.csv> [--out report.json]
  csv-colstats <file.csv> [--out report.json]
  csv-colstats --help

Notes:
  - First non-empty row is treated as header.
  - Quoted fields with "" escapes are supported.
  - Non-numeric cells increase 'invalidCells' but do not fail the run.
  - Use '-' as the input path to read from stdin."""


class EmptyInputError(ValueError):
    """Input has no header line, or the header has no columns."""


# ---- Line tokenizer ----
def tokenize(line: str) -> List[str]:
    """Split one line into cells. Commas inside double quotes are literal and
    a doubled quote inside a quoted field is one literal quote. Never fails:
    an unterminated quote just runs to the end of the line."""
    out: List[str] = []
    buf: List[str] = []
    in_quotes = False
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < n and line[i + 1] == '"':
                buf.append('"')
                i += 1  # skip the second quote of the pair
            else:
                in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            out.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
        i += 1
    out.append("".join(buf))
    return out


# ---- Numeric coercion ----
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

def parse_numeric(text: str) -> Optional[float]:
    """Return the finite float spelled by a plain decimal literal, else None.

    Only ``[+-]digits[.digits][e[+-]digits]`` forms are accepted; surrounding
    whitespace, underscores, hex prefixes, inf/nan spellings and values that
    overflow to infinity all yield None.
    """
    if not _DECIMAL_RE.fullmatch(text):
        return None
    x = float(text)
    if not math.isfinite(x):
        return None
    return x


# ---- Per-column aggregation ----
class Stats(NamedTuple):
    count_numbers: int
    invalid_cells: int
    min: Optional[float]
    max: Optional[float]
    mean: Optional[float]


class ColumnAccumulator:
    __slots__ = ("count_numbers", "invalid_cells", "sum", "min", "max", "_stats")
    def __init__(self):
        self.count_numbers = 0
        self.invalid_cells = 0
        self.sum = 0.0
        self.min: Optional[float] = None
        self.max: Optional[float] = None
        self._stats: Optional[Stats] = None
    @property
    def finalized(self) -> bool:
        return self._stats is not None
    def add_cell(self, cell: str):
        if self._stats is not None:
            raise RuntimeError("accumulator already finalized")
        trimmed = cell.strip()
        if trimmed == "":
            return
        x = parse_numeric(trimmed)
        if x is None:
            self.invalid_cells += 1
            return
        self.count_numbers += 1
        self.sum += x
        if self.min is None or x < self.min: self.min = x
        if self.max is None or x > self.max: self.max = x
    def finalize(self) -> Stats:
        if self._stats is None:
            mean = self.sum / self.count_numbers if self.count_numbers > 0 else None
            self._stats = Stats(self.count_numbers, self.invalid_cells, self.min, self.max, mean)
        return self._stats


class Report(NamedTuple):
    rows_processed: int
    columns: Mapping[str, Stats]


# ---- Driver ----
_LINE_SPLIT_RE = re.compile(r"\r?\n")

def split_lines(text: str) -> List[str]:
    return [ln.strip() for ln in _LINE_SPLIT_RE.split(text)]

def compute_report(text: str, *, progress_every_rows: int = 0, show_progress: bool = False) -> Report:
    lines = split_lines(text)
    header_idx = next((i for i, ln in enumerate(lines) if ln), None)
    if header_idx is None:
        raise EmptyInputError("Empty file (no header found).")
    headers = tokenize(lines[header_idx])
    # tokenize always yields at least one cell; kept as a guard on the header contract
    if not headers:
        raise EmptyInputError("Header row is empty after parsing.")

    # duplicate names share a slot
    acc: Dict[str, ColumnAccumulator] = {}
    for h in headers:
        acc[h] = ColumnAccumulator()
    width = len(headers)

    data_lines = lines[header_idx + 1:]
    total_rows = sum(1 for ln in data_lines if ln)
    rows = 0
    start = time.time()
    window = deque()  # (time, rows)
    last_report = 0
    def report():
        nonlocal last_report
        now = time.time()
        # maintain 5s window
        while window and now - window[0][0] > 5:
            window.popleft()
        if len(window) >= 2:
            dt = window[-1][0] - window[0][0]
            dr = window[-1][1] - window[0][1]
            rps = dr / dt if dt > 0 else 0
        else:
            rps = rows / (now - start) if (now - start) > 0 else 0
        pct = min(100.0, (rows / total_rows) * 100) if total_rows else 100.0
        print(f"[progress] {pct:5.1f}% | {rps:,.0f} rows/s", file=sys.stderr)
        last_report = rows

    for line in data_lines:
        if not line:
            continue
        cells = tokenize(line)
        # ragged rows: pad short ones, drop extras
        if len(cells) < width:
            cells += [""] * (width - len(cells))
        rows += 1
        for name, cell in zip(headers, cells):
            acc[name].add_cell(cell)
        if show_progress and progress_every_rows > 0 and rows % progress_every_rows == 0:
            window.append((time.time(), rows))
            report()
    if show_progress and progress_every_rows > 0 and rows != last_report:
        window.append((time.time(), rows))
        report()

    columns = {name: a.finalize() for name, a in acc.items()}
    return Report(rows, MappingProxyType(columns))


# ---- JSON rendering ----
def _json_num(x: Optional[float]):
    # integral values print as 10, not 10.0
    if x is not None and x.is_integer() and abs(x) < 2 ** 53:
        return int(x)
    return x

def report_to_dict(report: Report) -> dict:
    return {
        "rowsProcessed": report.rows_processed,
        "columns": {
            name: {
                "countNumbers": s.count_numbers,
                "invalidCells": s.invalid_cells,
                "min": _json_num(s.min),
                "max": _json_num(s.max),
                "mean": _json_num(s.mean),
            }
            for name, s in report.columns.items()
        },
    }

def render_json(report: Report) -> str:
    return json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)


# ---- I/O helpers ----
def read_input(path: str) -> str:
    # undecodable bytes become U+FFFD and land in invalidCells like any junk cell
    if path == "-":
        return sys.stdin.buffer.read().decode("utf-8-sig", errors="replace")
    with open(path, newline="", encoding="utf-8-sig", errors="replace") as f:
        return f.read()

def _mb(n_bytes: Optional[int]) -> str:
    if not n_bytes:
        return "N/A"
    return f"{n_bytes/MB:.1f} MB"

def current_rss() -> Optional[int]:
    if psutil is None:
        return None
    try:
        return int(psutil.Process(os.getpid()).memory_info().rss)
    except psutil.Error:
        return None


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="csv-colstats", add_help=False,
                                 description="Per-column numeric stats for a CSV file, as JSON")
    ap.add_argument("file", nargs="?", help="CSV path or '-' for stdin")
    ap.add_argument("--input", help="CSV path (takes precedence over the positional path)")
    ap.add_argument("--out", help="Write the JSON report here instead of stdout")
    ap.add_argument("-h", "--help", action="store_true", help="Show usage notes")
    ap.add_argument("--progress", action="store_true", help="Show row-processing progress on stderr")
    ap.add_argument("--progress-every-rows", type=int, default=100_000, help="Emit progress every N rows when --progress is set (0=disable)")
    ap.add_argument("--timing", action="store_true", help="Print elapsed time and RSS on stderr after the run")
    return ap

def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    path = args.input or args.file
    if path is None:
        # explicit --help goes to stdout, a missing input is an error on stderr
        print(HELP_TEXT, file=sys.stdout if args.help else sys.stderr)
        return 2
    if args.help:
        print(HELP_TEXT, file=sys.stderr)

    t0 = time.time()
    text = read_input(path)
    try:
        report = compute_report(text, progress_every_rows=args.progress_every_rows, show_progress=args.progress)
    except EmptyInputError as e:
        print(str(e), file=sys.stderr)
        return 2

    out = render_json(report) + "\n"
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(out)
        print(f"Wrote report to: {args.out}", file=sys.stderr)
    else:
        sys.stdout.flush()
        sys.stdout.buffer.write(out.encode("utf-8"))

    if args.timing:
        print(f"[timing] {time.time() - t0:.3f}s | rss {_mb(current_rss())}", file=sys.stderr)
    return 0

def main():
    try:
        code = run()
    except Exception as e:
        print(f"Fatal: {e}", file=sys.stderr)
        code = 1
    sys.exit(code)

if __name__ == "__main__":
    main()
