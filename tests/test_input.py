import gzip

import pytest

from pairdist.core.errors import FormatError
from pairdist.core.formats import CGMLST, FASTA
from pairdist.core.input import read_fasta_records, read_precomputed_rows, read_profile_records
from pairdist.core.samples import SampleStore


def test_read_fasta(tmp_path):
    p = tmp_path / "aln.fasta"
    p.write_text(">s1 first sample\nACGT\nAC\n>s2\nACGTAA\n")
    assert read_fasta_records(str(p)) == [("s1", "ACGTAC"), ("s2", "ACGTAA")]


def test_read_fasta_gzip(tmp_path):
    p = tmp_path / "aln.fasta.gz"
    with gzip.open(p, "wt") as fout:
        fout.write(">a\nAC\n>b\nAG\n")
    assert read_fasta_records(str(p)) == [("a", "AC"), ("b", "AG")]


def test_read_empty_fasta(tmp_path):
    p = tmp_path / "empty.fasta"
    p.write_text("")
    records = read_fasta_records(str(p))
    assert records == []
    assert SampleStore.load(records, FASTA).count() == 0


def test_read_profiles_with_header(tmp_path):
    p = tmp_path / "profiles.tsv"
    p.write_text("FILE\tl1\tl2\nx\t1\tINF-2\ny\t3\tLNF\n")
    records = read_profile_records(str(p), skip_header=True)
    assert records == [("x", ["1", "INF-2"]), ("y", ["3", "LNF"])]


def test_read_profiles_comma_separated(tmp_path):
    p = tmp_path / "profiles.csv"
    p.write_text("x,1,2\ny,3,\n")
    records = read_profile_records(str(p), sep=",")
    assert records == [("x", ["1", "2"]), ("y", ["3", ""])]


def test_long_row_is_format_error(tmp_path):
    p = tmp_path / "ragged.tsv"
    p.write_text("x\t1\t2\ny\t1\t2\t3\n")
    with pytest.raises(FormatError):
        SampleStore.load(read_profile_records(str(p)), CGMLST)


def test_read_precomputed(tmp_path):
    p = tmp_path / "pre.tsv"
    p.write_text("b\ta\t3\nc\ta\t>5\n")
    assert read_precomputed_rows(str(p)) == [("b", "a", "3"), ("c", "a", ">5")]


def test_read_precomputed_needs_three_columns(tmp_path):
    p = tmp_path / "pre.tsv"
    p.write_text("b\ta\nc\ta\n")
    with pytest.raises(FormatError):
        read_precomputed_rows(str(p))


def test_read_precomputed_empty(tmp_path):
    p = tmp_path / "pre.tsv"
    p.write_text("")
    assert read_precomputed_rows(str(p)) == []
