import random
from csv_colstats import tokenize

def test_quoted_comma_stays_in_cell():
    assert tokenize('a,"b,c",d') == ["a", "b,c", "d"]

def test_doubled_quote_is_literal():
    assert tokenize('"he said ""hi"""') == ['he said "hi"']

def test_empty_line_is_one_empty_cell():
    assert tokenize("") == [""]

def test_n_commas_give_n_plus_one_cells():
    assert tokenize(",,") == ["", "", ""]
    assert tokenize("a,,b,") == ["a", "", "b", ""]

def test_quote_free_lines_rejoin_exactly():
    rng = random.Random(7)
    alphabet = "ab1. ,-x"
    for _ in range(200):
        line = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 20)))
        assert ",".join(tokenize(line)) == line

def test_unterminated_quote_flushes_buffer():
    assert tokenize('a,"b,c') == ["a", "b,c"]
    assert tokenize('"') == [""]

def test_quotes_mid_cell_toggle_state():
    assert tokenize('x"y,z"w,v') == ["xy,zw", "v"]

def test_doubled_quote_outside_quotes_is_empty_toggle():
    # "" outside a quoted field opens and closes one, adding nothing
    assert tokenize('a"",b') == ["a", "b"]

def test_whitespace_is_kept():
    assert tokenize(" a , b ") == [" a ", " b "]
