import numpy as np
import pytest

from pairdist.core.errors import FormatError
from pairdist.core.formats import CGMLST, CGMLST_HASH, FASTA, FASTA_ALL
from pairdist.core.metrics import EXCEEDED, DistanceMetric, distance
from pairdist.core.samples import SampleStore


def _pairwise(records, input_format, limit=None):
    store = SampleStore.load(records, input_format)
    metric = DistanceMetric.for_store(store)
    n = store.count()
    return {
        (store.name_of(i), store.name_of(j)): metric(store.tokens_of(i), store.tokens_of(j), limit)
        for i in range(n) for j in range(n) if i != j
    }


def test_fasta_example():
    d = _pairwise([("A", "ACGT"), ("B", "ACGA"), ("C", "TTTT")], FASTA)
    assert d["A", "B"] == 1
    assert d["A", "C"] == 3
    assert d["B", "C"] == 4


def test_fasta_example_with_limit():
    d = _pairwise([("A", "ACGT"), ("B", "ACGA"), ("C", "TTTT")], FASTA, limit=2)
    assert d["A", "B"] == 1
    assert d["A", "C"] == EXCEEDED
    assert d["B", "C"] == EXCEEDED


def test_fasta_ignores_ambiguous_positions():
    d = _pairwise([("r1", "ACGTn-"), ("r2", "An---n"), ("r3", "CCGTn-")], FASTA)
    assert d["r1", "r2"] == 0
    assert d["r1", "r3"] == 1
    assert d["r2", "r3"] == 1


def test_fasta_partially_masked_samples():
    d = _pairwise([("ref", "TACCGTG"), ("a", "CGTTACT"), ("b", "NNCNGTN")], FASTA)
    assert d["ref", "a"] == 7
    assert d["ref", "b"] == 0
    assert d["a", "b"] == 3


def test_fasta_all_counts_every_difference():
    d = _pairwise([("r1", "ACGTn-"), ("r2", "An---n"), ("r3", "CCGTn-")], FASTA_ALL)
    assert d["r1", "r2"] == 5
    assert d["r1", "r3"] == 1
    assert d["r2", "r3"] == 6


def test_fasta_all_is_case_sensitive():
    d = _pairwise([("x", "ACGT"), ("y", "acgT")], FASTA_ALL)
    assert d["x", "y"] == 3


def test_cgmlst_missing_never_matches_missing():
    d = _pairwise([("X", ["5", "-"]), ("Y", ["5", "-"])], CGMLST)
    assert d["X", "Y"] == 1


def test_cgmlst_chewbbaca_calls():
    d = _pairwise([
        ("r1", ["-", "1", "2", "3", "1"]),
        ("r2", ["-", "1", "1", "2", "1"]),
        ("r3", ["-", "1", "2", "INF-3", "PLOT5"]),
    ], CGMLST)
    assert d["r1", "r3"] == 2
    assert d["r2", "r3"] == 4
    assert d["r1", "r2"] == 3


def test_cgmlst_hash():
    x1 = "6bc8d04609de559621859873ef301f221cf5d991"
    x2 = "1e354c3d41dc0d3c403db19f22de23299a33a1c8"
    x3 = "beb636132e9cb496f1c1d37ecafdd62ed02060b0"
    d = _pairwise([
        ("r1", ["-", x1, x2, x3, x1]),
        ("r2", ["-", x1, x1, x2, x1]),
        ("r3", [x1, x1, x2, x3, x1]),
    ], CGMLST_HASH)
    assert d["r1", "r2"] == 3
    assert d["r1", "r3"] == 1
    assert d["r2", "r3"] == 3


def test_hash_differing_in_last_word_only():
    a = "00" * 16 + "00000001"
    b = "00" * 16 + "00000002"
    d = _pairwise([("a", [a]), ("b", [b])], CGMLST_HASH)
    assert d["a", "b"] == 1


def test_symmetric_and_reflexive():
    records = [("a", "ACGTNACGT"), ("b", "ACCTNAGGT"), ("c", "TCGTAACGA")]
    for fmt in (FASTA, FASTA_ALL):
        d = _pairwise(records, fmt)
        for (x, y), value in d.items():
            assert d[y, x] == value
        store = SampleStore.load(records, fmt)
        metric = DistanceMetric.for_store(store)
        for i in range(store.count()):
            assert metric(store.tokens_of(i), store.tokens_of(i)) == 0


@pytest.mark.parametrize("fmt", [FASTA, FASTA_ALL])
def test_limit_matches_exact_distance(fmt):
    rng = np.random.default_rng(7)
    seqs = ["".join(rng.choice(list("ACGTN-"), size=60)) for _ in range(8)]
    store = SampleStore.load([(f"s{i}", s) for i, s in enumerate(seqs)], fmt)
    metric = DistanceMetric.for_store(store)
    for i in range(store.count()):
        for j in range(i):
            exact = metric(store.tokens_of(i), store.tokens_of(j))
            for limit in (0, exact - 1, exact, exact + 1, 1000):
                if limit < 0:
                    continue
                got = metric(store.tokens_of(i), store.tokens_of(j), limit)
                assert got == (exact if exact <= limit else EXCEEDED)


def test_negative_limit_rejected():
    store = SampleStore.load([("a", "AC"), ("b", "AG")], FASTA)
    metric = DistanceMetric.for_store(store)
    with pytest.raises(ValueError):
        metric(store.tokens_of(0), store.tokens_of(1), -1)


def test_rows_of_different_length_rejected():
    metric = DistanceMetric(FASTA)
    with pytest.raises(FormatError):
        metric(np.array([1, 2, 3], dtype=np.uint8), np.array([1, 2], dtype=np.uint8))


@pytest.mark.parametrize(
    "tokens_a, tokens_b, fmt, expected",
    [
        ([1, 2, 3, 4], [1, 2, 3, 1], FASTA, 1),
        ([1, 0, 3, 4], [2, 2, 0, 4], FASTA, 1),
        ([65, 67, 71, 84], [97, 67, 71, 78], FASTA_ALL, 2),
        ([5, 0, 7], [5, 0, 8], CGMLST, 2),
        ([1, 2, 3, 4, 5, 0, 0, 0, 0, 0], [1, 2, 3, 4, 5, 0, 0, 0, 0, 0], CGMLST_HASH, 1),
        ([1, 2, 3, 4, 5, 9, 9, 9, 9, 9], [1, 2, 3, 4, 6, 9, 9, 9, 9, 9], CGMLST_HASH, 1),
    ],
)
def test_distance_on_plain_lists(tokens_a, tokens_b, fmt, expected):
    assert distance(tokens_a, tokens_b, fmt) == expected
    assert distance(tokens_b, tokens_a, fmt) == expected


def test_distance_on_plain_lists_with_limit():
    assert distance([1, 2, 3], [4, 5, 6], CGMLST, limit=3) == 3
    assert distance([1, 2, 3], [4, 5, 6], CGMLST, limit=2) == EXCEEDED
