# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import dataclasses
import pytest
import seqalign.sequence as seq
import seqalign.sequence.align as align


def test_gapped_strings():
    stats = align.compute_statistics(("AC-GT", "ACTGT"))
    assert stats.matches == 4
    assert stats.mismatches == 0
    assert stats.gaps == 1
    assert stats.alignment_length == 5
    assert stats.identity == pytest.approx(0.8)
    assert stats.similarity == pytest.approx(0.8)
    assert stats.gap_fraction == pytest.approx(0.2)


def test_alignment_input():
    ali = align.Alignment.from_strings(["ACGT-A", "ACCTTA"], seq.NucleotideSequence)
    stats = align.compute_statistics(ali)
    assert (stats.matches, stats.mismatches, stats.gaps) == (4, 1, 1)
    # Without a predicate, every mismatch counts as similar
    assert stats.similarity == pytest.approx(5 / 6)


def test_similarity_predicate():
    similar = align.positive_substitution(
        align.SubstitutionMatrix.std_protein_matrix()
    )
    stats = align.compute_statistics(("IW-A", "VGAA"), similar)
    assert (stats.matches, stats.mismatches, stats.gaps) == (1, 2, 1)
    assert stats.identity == pytest.approx(0.25)
    assert stats.similarity == pytest.approx(0.5)


def test_positive_substitution():
    similar = align.positive_substitution(
        align.SubstitutionMatrix.std_protein_matrix()
    )
    assert similar("I", "V")
    assert similar("i", "v")
    assert not similar("W", "G")
    # Symbols outside of the matrix are never similar
    assert not similar("J", "J")


def test_case_insensitive():
    stats = align.compute_statistics(("acgt", "ACGT"))
    assert stats.matches == 4
    assert stats.identity == 1.0


def test_ratios_sum_up():
    stats = align.compute_statistics(("AC-GTTA-", "AGTG-TAC"))
    assert stats.matches + stats.mismatches + stats.gaps == stats.alignment_length
    assert stats.identity + stats.gap_fraction + (
        stats.mismatches / stats.alignment_length
    ) == pytest.approx(1.0)


def test_empty_alignment():
    stats = align.compute_statistics(("", ""))
    assert stats == align.AlignmentStatistics(0, 0, 0, 0, 0.0, 0.0, 0.0)


def test_immutability():
    stats = align.compute_statistics(("A", "A"))
    with pytest.raises(dataclasses.FrozenInstanceError):
        stats.matches = 2


def test_invalid_input():
    with pytest.raises(TypeError):
        align.compute_statistics(None)
    with pytest.raises(TypeError):
        align.compute_statistics((None, "ACGT"))
    with pytest.raises(ValueError):
        align.compute_statistics(("ACG", "ACGT"))
    three = align.Alignment.from_strings(["A", "A", "A"])
    with pytest.raises(ValueError):
        align.compute_statistics(three)
