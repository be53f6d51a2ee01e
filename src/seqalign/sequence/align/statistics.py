# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqalign.sequence.align"
__author__ = "Seqalign contributors"
__all__ = ["AlignmentStatistics", "compute_statistics", "positive_substitution"]

from dataclasses import dataclass
from .alignment import GAP_SYMBOL, Alignment


@dataclass(frozen=True)
class AlignmentStatistics:
    """
    Column statistics of a pairwise alignment.

    Each alignment column counts either as match, as mismatch or as
    gap, if any of both sequences has a gap in this column.
    The ratios are relative to the alignment length and are *0.0* for
    an empty alignment.

    Attributes
    ----------
    matches, mismatches, gaps : int
        The number of columns of each kind.
    alignment_length : int
        The number of alignment columns.
    identity : float
        The fraction of matches.
    similarity : float
        The fraction of matches and similar mismatches.
    gap_fraction : float
        The fraction of gap columns.
    """

    matches: int
    mismatches: int
    gaps: int
    alignment_length: int
    identity: float
    similarity: float
    gap_fraction: float


def compute_statistics(alignment, similar=None):
    """
    Count matches, mismatches and gaps of a pairwise alignment.

    Parameters
    ----------
    alignment : Alignment or tuple of str
        A pairwise alignment or a pair of gapped strings with equal
        length.
    similar : callable, optional
        A predicate ``similar(symbol1, symbol2)``, that decides whether
        a mismatch contributes to the similarity.
        By default, every mismatch does.

    Returns
    -------
    statistics : AlignmentStatistics
        The alignment statistics.

    See also
    --------
    positive_substitution

    Examples
    --------

    >>> stats = compute_statistics(("AC-GT", "ACTGT"))
    >>> print(stats.matches, stats.mismatches, stats.gaps)
    4 0 1
    >>> print(stats.identity, stats.gap_fraction)
    0.8 0.2
    """
    if alignment is None:
        raise TypeError("'alignment' must not be None")
    if isinstance(alignment, Alignment):
        if len(alignment.sequences) != 2:
            raise ValueError("Statistics require a pairwise alignment")
        gapped1, gapped2 = alignment.get_gapped_sequences()
    else:
        gapped1, gapped2 = alignment
        if gapped1 is None or gapped2 is None:
            raise TypeError("Gapped strings must not be None")
        if len(gapped1) != len(gapped2):
            raise ValueError(
                f"Gapped strings have different lengths "
                f"({len(gapped1)} and {len(gapped2)})"
            )

    matches = 0
    mismatches = 0
    similar_mismatches = 0
    gaps = 0
    for symbol1, symbol2 in zip(gapped1, gapped2):
        if symbol1 == GAP_SYMBOL or symbol2 == GAP_SYMBOL:
            gaps += 1
        elif symbol1.upper() == symbol2.upper():
            matches += 1
        else:
            mismatches += 1
            if similar is None or similar(symbol1, symbol2):
                similar_mismatches += 1

    length = len(gapped1)
    if length == 0:
        return AlignmentStatistics(0, 0, 0, 0, 0.0, 0.0, 0.0)
    return AlignmentStatistics(
        matches=matches,
        mismatches=mismatches,
        gaps=gaps,
        alignment_length=length,
        identity=matches / length,
        similarity=(matches + similar_mismatches) / length,
        gap_fraction=gaps / length,
    )


def positive_substitution(matrix):
    """
    Create a similarity predicate, that accepts all symbol pairs with a
    positive substitution score (*positives* in *BLAST* terms).

    Parameters
    ----------
    matrix : SubstitutionMatrix
        The substitution matrix.

    Returns
    -------
    similar : callable
        The predicate for :func:`compute_statistics()`.
        Pairs with symbols that are not in the matrix are not similar.

    Examples
    --------

    >>> similar = positive_substitution(SubstitutionMatrix.std_protein_matrix())
    >>> print(similar("I", "V"), similar("W", "G"))
    True False
    """
    alph1 = matrix.get_alphabet1()
    alph2 = matrix.get_alphabet2()

    def similar(symbol1, symbol2):
        symbol1 = symbol1.upper()
        symbol2 = symbol2.upper()
        if symbol1 not in alph1 or symbol2 not in alph2:
            return False
        return matrix.get_score(symbol1, symbol2) > 0

    return similar
