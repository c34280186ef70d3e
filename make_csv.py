#!/usr/bin/env python3
import csv, random, sys
from pathlib import Path
from typing import List, Tuple

# Usage: python make_csv.py out.csv rows num_cols str_cols null_rate invalid_rate seed
# Example: python make_csv.py /tmp/messy.csv 10_000 4 2 0.05 0.02 1337

JUNK = ["n/a", "oops", "1.2.3", "--", "0x1F", "inf", "NaN", "1_000", "12abc"]
LETTERS = "abcdefxyz"

def generate_rows(rows: int, nnum: int, nstr: int, null_rate: float, invalid_rate: float, seed: int) -> Tuple[List[str], List[List[str]]]:
    """Deterministic header + rows. Numeric columns get ints and 6-decimal
    floats plus blanks and junk tokens; text columns sometimes carry commas
    and double quotes so the writer has to quote them."""
    rng = random.Random(seed)
    header = [f"n{i}" for i in range(nnum)] + [f"s{j}" for j in range(nstr)]
    rr = rng.random
    ri = rng.randint
    ru = rng.uniform
    choice = rng.choice
    out = []
    for _ in range(rows):
        row = []
        for _ in range(nnum):
            if rr() < null_rate:
                row.append("")
            elif rr() < invalid_rate:
                row.append(choice(JUNK))
            elif rr() < 0.5:
                row.append(str(ri(-10**6, 10**6)))
            else:
                row.append(f"{ru(-1e6,1e6):.6f}")
        for _ in range(nstr):
            if rr() < null_rate:
                row.append("")
                continue
            k = ri(3, 10)
            s = "".join(choice(LETTERS) for _ in range(k))
            if rr() < 0.1:
                s = s[:2] + ',"' + s[2:]
            row.append(s)
        out.append(row)
    return header, out

def write_csv(path, header: List[str], rows: List[List[str]], blank_rate: float = 0.0, seed: int = 0):
    """Write rows with csv.writer; blank lines are sprinkled in at blank_rate."""
    rng = random.Random(seed)
    p = Path(path)
    with p.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f, lineterminator="\n")
        w.writerow(header)
        for row in rows:
            if rng.random() < blank_rate:
                f.write("\n")
            w.writerow(row)

def main():
    if len(sys.argv) != 8:
        print("Usage: python make_csv.py out.csv rows num_cols str_cols null_rate invalid_rate seed", file=sys.stderr)
        sys.exit(2)
    out, rows, nnum, nstr, null_rate, invalid_rate, seed = (
        sys.argv[1], int(sys.argv[2].replace('_','')), int(sys.argv[3]),
        int(sys.argv[4]), float(sys.argv[5]), float(sys.argv[6]), int(sys.argv[7])
    )
    header, data = generate_rows(rows, nnum, nstr, null_rate, invalid_rate, seed)
    write_csv(out, header, data, blank_rate=null_rate, seed=seed)

if __name__ == "__main__":
    main()
