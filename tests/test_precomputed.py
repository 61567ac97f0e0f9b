import warnings

import pytest

from pairdist.core.errors import ConflictingPrecomputedEntry, FormatError
from pairdist.core.metrics import EXCEEDED
from pairdist.core.precomputed import (
    ExceededDistance,
    PrecomputedIndex,
    effective_distance,
    pair_key,
    parse_distance,
)


def test_pair_key_is_unordered():
    assert pair_key("b", "a") == pair_key("a", "b") == ("a", "b")


def test_lookup_either_order():
    index = PrecomputedIndex.build([("s2", "s1", "4")])
    assert index.lookup("s1", "s2") == 4
    assert index.lookup(("s2", "s1")) == 4
    assert index.lookup("s1", "s3") is None
    assert ("s1", "s2") in index
    assert len(index) == 1


def test_conflict_last_seen_wins():
    with pytest.warns(ConflictingPrecomputedEntry):
        index = PrecomputedIndex.build([("a", "b", "3"), ("b", "a", "7")])
    assert index.conflicts == 1
    assert index.lookup("a", "b") == 7


def test_repeated_identical_rows_are_not_conflicts():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        index = PrecomputedIndex.build([("a", "b", "3"), ("b", "a", 3), ("a", "c", "1")])
    assert index.conflicts == 0
    assert len(index) == 2


def test_self_pairs_ignored():
    index = PrecomputedIndex.build([("a", "a", "0"), ("a", "b", "2")])
    assert index.self_pairs == 1
    assert len(index) == 1


def test_parse_distance():
    assert parse_distance("12") == 12
    assert parse_distance(" 0 ") == 0
    assert parse_distance(5) == 5
    assert parse_distance(">10") == ExceededDistance(10)
    assert str(ExceededDistance(10)) == ">10"
    for bad in ["", "x", "-1", "1.5", "> "]:
        with pytest.raises(FormatError):
            parse_distance(bad)


def test_effective_distance():
    assert effective_distance(4, None) == 4
    # exact values are kept even above the current limit
    assert effective_distance(40, 5) == 40
    assert effective_distance(ExceededDistance(10), 10) == EXCEEDED
    assert effective_distance(ExceededDistance(10), 3) == EXCEEDED
    assert effective_distance(ExceededDistance(10), 11) is None
    assert effective_distance(ExceededDistance(10), None) is None


def test_exceeded_and_exact_for_same_pair_conflict():
    with pytest.warns(ConflictingPrecomputedEntry):
        index = PrecomputedIndex.build([("a", "b", ">5"), ("a", "b", "9")])
    assert index.lookup("a", "b") == 9
