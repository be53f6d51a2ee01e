# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import numpy as np
import pytest
import seqalign.sequence as seq
import seqalign.sequence.align as align


@pytest.fixture
def alignment():
    return align.Alignment.from_strings(
        ["CGTCAT--", "--TCATGC"], seq.NucleotideSequence
    )


def test_from_strings(alignment):
    assert alignment.trace.tolist() == [
        [0, -1], [1, -1], [2, 0], [3, 1], [4, 2], [5, 3], [-1, 4], [-1, 5]
    ]  # fmt: skip
    assert [str(sequence) for sequence in alignment.sequences] == ["CGTCAT", "TCATGC"]
    assert alignment.get_gapped_sequences() == ["CGTCAT--", "--TCATGC"]
    assert alignment.aligned_sequence1 == "CGTCAT--"
    assert alignment.aligned_sequence2 == "--TCATGC"
    assert alignment.score is None
    assert alignment.alignment_type == align.AlignmentType.GLOBAL


def test_from_strings_unequal_length():
    with pytest.raises(IndexError):
        align.Alignment.from_strings(["AC-", "ACGT"])


def test_general_sequences():
    """
    Without a sequence type, any letters are accepted.
    """
    ali = align.Alignment.from_strings(["HELLO-", "HE-LOW"])
    assert str(ali) == "HELLO-\nHE-LOW"


def test_trace_is_read_only(alignment):
    with pytest.raises(ValueError):
        alignment.trace[0, 0] = 5


def test_region_coordinates(alignment):
    assert (alignment.start1, alignment.end1) == (0, 5)
    assert (alignment.start2, alignment.end2) == (0, 5)
    # A trace, that covers only a region of the sequences
    sub_ali = alignment[2:6]
    assert (sub_ali.start1, sub_ali.end1) == (2, 5)
    assert (sub_ali.start2, sub_ali.end2) == (0, 3)


def test_empty_region():
    ali = align.Alignment(
        [seq.NucleotideSequence("ACGT"), seq.NucleotideSequence("")],
        np.zeros((0, 2), dtype=int),
        starts=(2, 0),
    )
    assert len(ali) == 0
    assert (ali.start1, ali.end1) == (2, 1)
    assert (ali.start2, ali.end2) == (0, -1)
    assert str(ali) == ""


def test_invalid_starts():
    with pytest.raises(IndexError):
        align.Alignment(
            [seq.NucleotideSequence("A"), seq.NucleotideSequence("A")],
            [[0, 0]],
            starts=(0,),
        )


def test_indexing(alignment):
    assert alignment[1:4].trace.tolist() == [[1, -1], [2, 0], [3, 1]]
    swapped = alignment[:, ::-1]
    assert swapped.get_gapped_sequences() == ["--TCATGC", "CGTCAT--"]
    single = alignment[:, [1]]
    assert single.get_gapped_sequences() == ["--TCATGC"]
    masked = alignment[:, np.array([True, False])]
    assert masked.get_gapped_sequences() == ["CGTCAT--"]
    with pytest.raises(IndexError):
        alignment[2, :]
    with pytest.raises(IndexError):
        alignment[:, :, :]


def test_not_iterable(alignment):
    with pytest.raises(TypeError):
        iter(alignment)


def test_equality(alignment):
    same = align.Alignment.from_strings(
        ["CGTCAT--", "--TCATGC"], seq.NucleotideSequence
    )
    assert alignment == same
    assert alignment != align.Alignment(alignment.sequences, alignment.trace, score=3)
    assert alignment != alignment[1:]
    assert alignment != "CGTCAT--"


def test_str_wrapping():
    """
    Long alignments are wrapped into blocks of the same width for each
    sequence.
    """
    ali = align.Alignment.from_strings(["A" * 100, "A" * 90 + "-" * 10])
    blocks = str(ali).split("\n\n")
    assert len(blocks) == 2
    assert blocks[0] == "A" * 70 + "\n" + "A" * 70
    assert blocks[1] == "A" * 30 + "\n" + "A" * 20 + "-" * 10


def test_get_codes(alignment):
    assert align.get_codes(alignment).tolist() == [
        [1, 2, 3, 1, 0, 3, -1, -1],
        [-1, -1, 3, 1, 0, 3, 2, 1],
    ]


@pytest.mark.parametrize(
    "mode, expected", [("all", 0.375), ("not_terminal", 0.5), ("shortest", 0.6)]
)
def test_sequence_identity(mode, expected):
    ali = align.Alignment.from_strings(["--HAKLPRDD--WL--", "FRHA--QRTDADWLHH"])
    assert align.get_sequence_identity(ali, mode) == pytest.approx(expected)


def test_sequence_identity_is_case_insensitive():
    ali = align.Alignment.from_strings(["ACGT", "acgt"])
    assert align.get_sequence_identity(ali, "all") == 1.0


def test_sequence_identity_invalid_mode(alignment):
    with pytest.raises(ValueError):
        align.get_sequence_identity(alignment, "longest")


def test_sequence_identity_without_overlap():
    ali = align.Alignment.from_strings(["AA---", "---AA"])
    with pytest.raises(ValueError):
        align.get_sequence_identity(ali, "not_terminal")
    assert align.get_sequence_identity(ali, "all") == 0.0


@pytest.mark.parametrize(
    "gapped_strings, scoring, expected",
    [
        (["AC--GT", "ACTTGA"], align.SIMPLE_DNA, -1),
        (["ACGT", "ACGT"], align.BLAST_DNA, 8),
        (["A---A", "AAAAA"], align.BLAST_DNA, -5 - 2 - 2 + 4),
        # Two separate gaps are opened twice
        (["A-A-A", "AAAAA"], align.BLAST_DNA, 2 * -5 + 3 * 2),
        # Gaps in both sequences
        (["AC-T", "A-GT"], align.SIMPLE_DNA, 1 - 2 - 2 + 1),
    ],
)
def test_score(gapped_strings, scoring, expected):
    ali = align.Alignment.from_strings(gapped_strings)
    assert align.score(ali, scoring) == expected


def test_score_with_matrix():
    ali = align.Alignment.from_strings(["ACG-T", "ACGAT"], seq.NucleotideSequence)
    matrix = align.SubstitutionMatrix.std_nucleotide_matrix()
    assert align.score(ali, align.SIMPLE_DNA, matrix) == 4 * 5 - 2
    protein_matrix = align.SubstitutionMatrix.std_protein_matrix()
    with pytest.raises(ValueError):
        align.score(ali, align.SIMPLE_DNA, protein_matrix)


def test_score_of_multiple_sequences():
    """
    The substitution scores of all sequence pairs are summed up.
    """
    ali = align.Alignment.from_strings(["AC", "AC", "AG"])
    # Column 0: 3 matches, column 1: 1 match and 2 mismatches
    assert align.score(ali, align.SIMPLE_DNA) == 3 + 1 - 2


def test_terminal_gaps():
    ali = align.Alignment.from_strings(
        ["AAAAACTGATTC---", "--AAACTG-TTCA--", "-----CTGATTCAAA"]
    )
    assert align.find_terminal_gaps(ali) == (5, 12)
    assert align.remove_terminal_gaps(ali).get_gapped_sequences() == [
        "CTGATTC",
        "CTG-TTC",
        "CTGATTC",
    ]
    no_overlap = align.Alignment.from_strings(["AA---", "---AA"])
    with pytest.raises(ValueError):
        align.remove_terminal_gaps(no_overlap)


def test_format_alignment():
    ali = align.Alignment.from_strings(["AC-GTA", "ACTGTC"])
    assert align.format_alignment(ali) == "AC-GTA\n|| ||.\nACTGTC"
    assert align.format_alignment(ali, line_width=4) == (
        "AC-G\n|| |\nACTG\n\nTA\n|.\nTC"
    )


def test_format_alignment_case_insensitive():
    ali = align.Alignment.from_strings(["acgt", "ACGA"])
    assert align.format_alignment(ali).split("\n")[1] == "|||."


def test_format_empty_alignment():
    ali = align.Alignment.from_strings(["", ""])
    assert align.format_alignment(ali) == ""


def test_format_invalid_arguments(alignment):
    with pytest.raises(ValueError):
        align.format_alignment(alignment, line_width=0)
    three = align.Alignment.from_strings(["A", "A", "A"])
    with pytest.raises(ValueError):
        align.format_alignment(three)
