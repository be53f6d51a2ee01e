# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import numpy as np
import pytest
import seqalign.sequence as seq
import seqalign.sequence.align as align


@pytest.mark.parametrize(
    "db_entry", [entry for entry in align.SubstitutionMatrix.list_db()]
)
def test_matrices(db_entry):
    """
    Test for exceptions when reading matrix files.
    """
    alph1 = seq.ProteinSequence.alphabet
    alph2 = seq.NucleotideSequence.alphabet_amb
    try:
        align.SubstitutionMatrix(alph1, alph1, db_entry)
    except KeyError:
        align.SubstitutionMatrix(alph2, alph2, db_entry)


def test_list_db():
    assert align.SubstitutionMatrix.list_db() == ["BLOSUM62", "NUC"]


def test_unknown_matrix():
    alph = seq.ProteinSequence.alphabet
    with pytest.raises(ValueError, match="Unknown substitution matrix"):
        align.SubstitutionMatrix(alph, alph, "PAM250")


@pytest.mark.parametrize(
    "symbol1, symbol2, expected",
    [("A", "A", 4), ("W", "W", 11), ("W", "G", -2), ("*", "*", 1), ("I", "V", 3)],
)
def test_blosum62_scores(symbol1, symbol2, expected):
    matrix = align.SubstitutionMatrix.std_protein_matrix()
    assert matrix.get_score(symbol1, symbol2) == expected


def test_nucleotide_matrix():
    matrix = align.SubstitutionMatrix.std_nucleotide_matrix()
    assert matrix.get_score("A", "A") == 5
    assert matrix.get_score("A", "T") == -4
    assert matrix.get_score("A", "W") == 1
    # The ambiguous matrix is usable for unambiguous sequences
    assert matrix.covers(
        seq.NucleotideSequence.alphabet_unamb, seq.NucleotideSequence.alphabet_unamb
    )
    assert not matrix.covers(seq.ProteinSequence.alphabet, seq.ProteinSequence.alphabet)


@pytest.mark.parametrize(
    "matrix",
    [
        align.SubstitutionMatrix.std_protein_matrix(),
        align.SubstitutionMatrix.std_nucleotide_matrix(),
    ],
)
def test_symmetry(matrix):
    assert matrix.is_symmetric()
    assert matrix.transpose() == matrix


def test_read_only():
    matrix = align.SubstitutionMatrix.std_protein_matrix()
    with pytest.raises(ValueError):
        matrix.score_matrix()[0, 0] = 100


def test_dict_from_str():
    string = """
    # A comment
        A   B
    A   1   2
    B   3   4
    C   5   6
    """
    matrix_dict = align.SubstitutionMatrix.dict_from_str(string)
    assert matrix_dict == {
        ("A", "A"): 1,
        ("A", "B"): 2,
        ("B", "A"): 3,
        ("B", "B"): 4,
        ("C", "A"): 5,
        ("C", "B"): 6,
    }
    matrix = align.SubstitutionMatrix(
        seq.LetterAlphabet("ABC"), seq.LetterAlphabet("AB"), matrix_dict
    )
    assert matrix.shape() == (3, 2)
    assert not matrix.is_symmetric()
    transposed = matrix.transpose()
    assert transposed.shape() == (2, 3)
    assert transposed.get_score("B", "C") == 6


def test_missing_pair():
    alph = seq.LetterAlphabet("AB")
    with pytest.raises(KeyError):
        align.SubstitutionMatrix(alph, alph, {("A", "A"): 1})


def test_invalid_matrix():
    alph = seq.LetterAlphabet("AB")
    with pytest.raises(ValueError):
        align.SubstitutionMatrix(alph, alph, np.zeros((3, 2)))
    with pytest.raises(TypeError):
        align.SubstitutionMatrix(alph, alph, 42)


def test_str():
    alph = seq.NucleotideSequence.alphabet_unamb
    matrix = align.SubstitutionMatrix(alph, alph, np.identity(len(alph)))
    assert str(matrix).split("\n") == [
        "    A   C   G   T",
        "A   1   0   0   0",
        "C   0   1   0   0",
        "G   0   0   1   0",
        "T   0   0   0   1",
    ]
