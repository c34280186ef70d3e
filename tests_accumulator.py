import math
import pytest
from csv_colstats import ColumnAccumulator, Stats, parse_numeric

@pytest.mark.parametrize("text,expected", [
    ("0", 0.0),
    ("42", 42.0),
    ("-1", -1.0),
    ("+3.5", 3.5),
    ("1.", 1.0),
    (".5", 0.5),
    ("-.25", -0.25),
    ("1e3", 1000.0),
    ("2.5E-2", 0.025),
    ("007", 7.0),
])
def test_parse_numeric_accepts_decimal_literals(text, expected):
    assert parse_numeric(text) == expected

@pytest.mark.parametrize("text", [
    "", " ", " 1", "1 ", "abc", "1.2.3", ".", "-", "+", "e5", "1e", "1e+",
    "0x1F", "1_000", "inf", "-inf", "Infinity", "nan", "NaN", "1e999", "-1e999",
    "1,5", "12abc", "٣",
])
def test_parse_numeric_rejects_everything_else(text):
    assert parse_numeric(text) is None

def _feed(cells):
    acc = ColumnAccumulator()
    for c in cells:
        acc.add_cell(c)
    return acc

def test_empty_and_blank_cells_change_nothing():
    acc = _feed(["", "   ", "\t"])
    assert (acc.count_numbers, acc.invalid_cells, acc.sum, acc.min, acc.max) == (0, 0, 0.0, None, None)

def test_non_numeric_cell_counts_invalid_once():
    acc = _feed(["5", "abc"])
    assert acc.invalid_cells == 1
    assert (acc.count_numbers, acc.sum, acc.min, acc.max) == (1, 5.0, 5.0, 5.0)

def test_cells_are_trimmed_before_parsing():
    acc = _feed([" 7 ", "\t-2"])
    assert acc.count_numbers == 2
    assert acc.min == -2.0 and acc.max == 7.0

def test_infinite_values_are_invalid():
    acc = _feed(["1e400", "Infinity"])
    assert acc.invalid_cells == 2
    assert acc.count_numbers == 0

def test_finalize_three_values():
    s = _feed(["3", "-1", "4"]).finalize()
    assert s == Stats(count_numbers=3, invalid_cells=0, min=-1.0, max=4.0, mean=2.0)

def test_no_numbers_means_no_min_max_mean():
    s = _feed(["x", "y", ""]).finalize()
    assert s.count_numbers == 0
    assert s.invalid_cells == 2
    assert s.min is None and s.max is None and s.mean is None

def test_min_never_exceeds_max():
    acc = _feed(["10", "-3.5", "2e1", "0"])
    assert acc.min <= acc.max
    assert (acc.min, acc.max) == (-3.5, 20.0)

def test_mean_of_fractions():
    s = _feed(["0.1", "0.2"]).finalize()
    assert math.isclose(s.mean, 0.15)

def test_finalized_accumulator_rejects_updates():
    acc = _feed(["1"])
    first = acc.finalize()
    assert acc.finalized
    with pytest.raises(RuntimeError):
        acc.add_cell("2")
    assert acc.finalize() is first

def test_stats_are_immutable():
    s = _feed(["1"]).finalize()
    with pytest.raises(AttributeError):
        s.mean = 5.0
