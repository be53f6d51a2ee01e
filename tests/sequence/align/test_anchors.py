# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import warnings
import numpy as np
import pytest
import seqalign.sequence as seq
import seqalign.sequence.align as align
from ...util import mutate, random_sequence


def test_anchor_ends():
    anchor = align.Anchor(3, 5, 4)
    assert (anchor.end1, anchor.end2) == (7, 9)


def test_find_anchors():
    tree = seq.SuffixTree("TTTTACGTACGTTTTT")
    anchors = align.find_anchors(tree, "GGACGTACGTGG", min_length=4)
    assert anchors == [align.Anchor(4, 2, 8)]
    assert align.find_anchors(tree, "GGACGTACGTGG", min_length=9) == []


def test_find_anchors_in_order():
    tree = seq.SuffixTree("AAAAAAAACCCCCCCCGGGGGGGG")
    anchors = align.find_anchors(tree, "GGGGGGTTAAAAAA", min_length=5)
    assert anchors == [align.Anchor(16, 0, 6), align.Anchor(0, 8, 6)]


def test_find_anchors_invalid_length():
    with pytest.raises(ValueError):
        align.find_anchors(seq.SuffixTree("ACGT"), "ACGT", min_length=0)


@pytest.mark.parametrize(
    "anchors, expected",
    [
        ([], []),
        ([(0, 0, 5)], [(0, 0, 5)]),
        # Crossing anchors, the first one is kept
        ([(0, 10, 5), (10, 0, 5)], [(0, 10, 5)]),
        # Collinear anchors in unsorted order
        ([(20, 20, 5), (0, 0, 5), (10, 10, 5)], [(0, 0, 5), (10, 10, 5), (20, 20, 5)]),
        # Overlapping anchors, the longer one replaces the shorter one
        ([(0, 0, 5), (3, 3, 8)], [(3, 3, 8)]),
        ([(0, 0, 8), (3, 3, 5)], [(0, 0, 8)]),
        # A longer crossing anchor replaces the preceding one
        ([(0, 30, 5), (10, 0, 9), (20, 10, 5)], [(10, 0, 9), (20, 10, 5)]),
    ],
)
def test_chain_anchors(anchors, expected):
    chain = align.chain_anchors([align.Anchor(*anchor) for anchor in anchors])
    assert chain == [align.Anchor(*anchor) for anchor in expected]


def test_anchored_alignment():
    ali = align.align_anchored(
        "ACGTACGTTTGCATGCATAAAA", "ACGTACGTCCGCATGCATAAAA", min_anchor_length=6
    )
    assert ali.get_gapped_sequences() == [
        "ACGTACGTTTGCATGCATAAAA",
        "ACGTACGTCCGCATGCATAAAA",
    ]
    assert ali.score == 18
    assert ali.alignment_type == align.AlignmentType.GLOBAL


@pytest.mark.parametrize("seed", range(10))
def test_anchored_alignment_of_related_sequences(seed):
    """
    The anchored alignment of closely related sequences is a valid
    global alignment, whose score is consistent with its trace and
    does not exceed the optimal score.
    """
    rng = np.random.default_rng(seed)
    seq1 = random_sequence(rng, 300)
    seq2 = mutate(rng, seq1, 5, 3, 3)
    ali = align.align_anchored(seq1, seq2, align.BLAST_DNA, min_anchor_length=12)
    gapped1, gapped2 = ali.get_gapped_sequences()
    assert gapped1.replace("-", "") == seq1
    assert gapped2.replace("-", "") == seq2
    assert align.score(ali, align.BLAST_DNA) == ali.score
    optimal = align.align_pairwise(seq1, seq2, align.BLAST_DNA)
    assert ali.score <= optimal.score


def test_no_anchor():
    """
    Without anchors a complete global alignment is performed.
    """
    with pytest.warns(UserWarning, match="No anchor"):
        ali = align.align_anchored("ACGTACGT", "TGCATGCA", align.SIMPLE_DNA)
    assert ali == align.align_pairwise("ACGTACGT", "TGCATGCA", align.SIMPLE_DNA)


def test_empty_sequence():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        ali = align.align_anchored("", "ACGT", align.SIMPLE_DNA)
    assert ali.score == -5


def test_invalid_input():
    with pytest.raises(TypeError):
        align.align_anchored(None, "ACGT")
    with pytest.raises(TypeError):
        align.align_anchored("ACGT", None)
