import pytest

from softver.softver_ast import Numeral
from softver.softver_errors import IndexOutOfRange, UnbalancedParentheses
from softver.softver_lexer import Token, tokenize
from softver.softver_sequence import NodeSequence, describe, is_token


def test_get_remove_insert_len() -> None:
    seq = NodeSequence(tokenize("1 + 2"))
    assert len(seq) == 3
    plus = seq.remove(1)
    assert plus == Token("PLUS", "+")
    assert len(seq) == 2
    seq.insert(1, Numeral(9))
    assert seq.get(1) == Numeral(9)


def test_insert_at_end_appends() -> None:
    seq = NodeSequence()
    seq.insert(0, Numeral(1))
    seq.insert(1, Numeral(2))
    assert list(seq) == [Numeral(1), Numeral(2)]


@pytest.mark.parametrize("index", [-1, 3, 10])  # type: ignore[misc]
def test_out_of_range_access(index: int) -> None:
    seq = NodeSequence(tokenize("1 + 2"))
    with pytest.raises(IndexOutOfRange):
        seq.get(index)
    with pytest.raises(IndexError):
        seq.remove(index)


def test_insert_past_end_is_out_of_range() -> None:
    with pytest.raises(IndexOutOfRange):
        NodeSequence().insert(1, Numeral(1))


def test_splice_replaces_run_with_one_slot() -> None:
    seq = NodeSequence(tokenize("( 1 ) * 2"))
    removed = seq.splice(0, 3, Numeral(1))
    assert [describe(n) for n in removed] == ["(", "1", ")"]
    assert len(seq) == 3
    assert seq.get(0) == Numeral(1)


def test_splice_rejects_bad_ranges() -> None:
    seq = NodeSequence(tokenize("1 2"))
    with pytest.raises(IndexOutOfRange):
        seq.splice(1, 1, Numeral(0))
    with pytest.raises(IndexOutOfRange):
        seq.splice(1, 3, Numeral(0))


def test_find_closer_is_nesting_aware() -> None:
    seq = NodeSequence(tokenize("( ( 1 ) + ( 2 ) ) * 3"))
    assert seq.find_closer(0) == 8
    assert seq.find_closer(1) == 3


def test_find_closer_unbalanced() -> None:
    seq = NodeSequence(tokenize("( ( 1 )"))
    with pytest.raises(UnbalancedParentheses) as excinfo:
        seq.find_closer(0)
    assert excinfo.value.position == 0


def test_is_token_and_describe() -> None:
    tok = Token("LPAREN", "(")
    assert is_token(tok)
    assert is_token(tok, "LPAREN", "RPAREN")
    assert not is_token(tok, "PLUS")
    assert not is_token(Numeral(1))
    assert describe(Numeral(1)) == "Numeral"
    assert describe(tok) == "("
