# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import numpy as np
import pytest
import seqalign.sequence as seq
from ..util import mutate, random_sequence


@pytest.mark.parametrize(
    "seq1, seq2, expected",
    [
        ("AAAA", "AAAT", 1),
        ("ACGT", "acgt", 0),
        ("ACGT", "TGCA", 4),
        ("AAAA", "TTTT", 4),
        ("", "", 0),
    ],
)
def test_hamming_distance(seq1, seq2, expected):
    assert seq.hamming_distance(seq1, seq2) == expected


def test_hamming_distance_of_sequences():
    assert seq.hamming_distance(seq.NucleotideSequence("ACGT"), "ACGA") == 1


def test_hamming_distance_length_mismatch():
    with pytest.raises(seq.LengthMismatchError, match="got 3 and 4"):
        seq.hamming_distance("AAA", "AAAA")
    # The error is also a 'ValueError'
    with pytest.raises(ValueError):
        seq.hamming_distance("A", "")


@pytest.mark.parametrize(
    "seq1, seq2, expected",
    [
        ("kitten", "sitting", 3),
        ("GATTACA", "GCATGCU", 4),
        ("", "ACG", 3),
        ("ACG", "", 3),
        ("ACGT", "ACGT", 0),
        ("ACGT", "AGT", 1),
    ],
)
def test_edit_distance(seq1, seq2, expected):
    assert seq.edit_distance(seq1, seq2) == expected


@pytest.mark.parametrize("seed", range(10))
def test_edit_distance_symmetry(seed):
    """
    The edit distance is symmetric and bounded by the number of
    introduced edits.
    """
    rng = np.random.default_rng(seed)
    original = random_sequence(rng, 50)
    mutant = mutate(rng, original, 2, 2, 2)
    distance = seq.edit_distance(original, mutant)
    assert distance == seq.edit_distance(mutant, original)
    assert distance <= 6
    assert distance >= abs(len(original) - len(mutant))


def test_find_with_mismatches():
    matches = seq.find_with_mismatches("ACGTACGA", "ACGT", 1)
    assert [m.position for m in matches] == [0, 4]
    assert matches[0].is_exact
    assert matches[1] == seq.ApproximateMatch(4, "ACGA", 1, (3,))


def test_find_with_mismatches_exact():
    """
    Without a budget only exact occurrences are reported.
    """
    matches = seq.find_with_mismatches("ACGTACGTAC", "GTA", 0)
    assert [m.position for m in matches] == [2, 6]
    assert all(m.distance == 0 for m in matches)


@pytest.mark.parametrize("pattern", ["", "ACGTACGTA"])
def test_find_with_mismatches_no_window(pattern):
    assert seq.find_with_mismatches("ACGTACGT", pattern, 2) == []


def test_find_with_edits():
    assert seq.find_with_edits("ACGT", "AGT", 1) == [
        seq.ApproximateMatch(1, "CGT", 1)
    ]
    matches = seq.find_with_edits("ACGTACGT", "ACGT", 0)
    assert [(m.position, m.matched) for m in matches] == [(0, "ACGT"), (4, "ACGT")]


@pytest.mark.parametrize("seed", range(5))
def test_find_with_edits_distances(seed):
    """
    The reported distance of each match is the edit distance between
    pattern and matched region.
    """
    rng = np.random.default_rng(seed)
    text = random_sequence(rng, 100)
    pattern = mutate(rng, text[40:50], 1, 1, 0)
    matches = seq.find_with_edits(text, pattern, 2)
    assert len(matches) > 0
    for match in matches:
        assert match.distance <= 2
        assert seq.edit_distance(pattern, match.matched) == match.distance


def test_find_best_match():
    match = seq.find_best_match("TTTTTTTT", "ACGT")
    assert match.position == 0
    assert match.distance == 3
    assert match.mismatch_positions == (0, 1, 2)
    match = seq.find_best_match("GGGACCTGGG", "ACGT")
    assert match.position == 3
    assert match.matched == "ACCT"
    assert seq.find_best_match("AC", "ACGT") is None
    assert seq.find_best_match("", "A") is None


def test_count_approximate_occurrences():
    assert seq.count_approximate_occurrences("ACGTACGT", "ACGG", 1) == 2
    assert seq.count_approximate_occurrences("ACGTACGT", "ACGT", 0, "edit") == 2
    with pytest.raises(ValueError):
        seq.count_approximate_occurrences("ACGT", "A", 1, "manhattan")


def test_frequent_kmers():
    assert seq.find_frequent_kmers_with_mismatches("AAAAAA", 4, 0) == [("AAAA", 3)]
    assert seq.find_frequent_kmers_with_mismatches("ACG", 4, 1) == []
    result = seq.find_frequent_kmers_with_mismatches(
        "ACGTTGCATGTCGCATGATGCATGAGAGCT", 4, 1
    )
    assert [kmer for kmer, _ in result] == ["ATGC", "ATGT", "GATG"]
    assert len(set(count for _, count in result)) == 1


@pytest.mark.parametrize(
    "kmer, expected", [("TTG", "CAA"), ("ACG", "ACG"), ("acgt", "ACGT")]
)
def test_canonical_kmer(kmer, expected):
    assert seq.canonical_kmer(kmer) == expected
    assert seq.canonical_kmer(seq.NucleotideSequence(kmer)) == expected


def test_invalid_arguments():
    with pytest.raises(ValueError):
        seq.find_with_mismatches("ACGT", "A", -1)
    with pytest.raises(ValueError):
        seq.find_with_edits("ACGT", "A", -1)
    with pytest.raises(ValueError):
        seq.find_frequent_kmers_with_mismatches("ACGT", 0, 0)
    with pytest.raises(TypeError):
        seq.hamming_distance(None, "A")
    with pytest.raises(TypeError):
        seq.edit_distance("A", None)
