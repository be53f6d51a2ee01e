# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqalign.sequence"
__author__ = "Seqalign contributors"
__all__ = ["find_subsequence", "count_subsequence"]

from .suffixtree import SuffixTree


def find_subsequence(sequence, query):
    """
    Find all occurrences of a subsequence in a sequence.

    Parameters
    ----------
    sequence : Sequence or str or SuffixTree
        The sequence to find the subsequence in.
        A prebuilt :class:`SuffixTree` can be given to avoid rebuilding
        the index for repeated queries.
    query : Sequence or str
        The potential subsequence.

    Returns
    -------
    match_indices : ndarray
        The sorted start indices in `sequence`, where `query` has been
        found. The array is empty if no match has been found.

    Examples
    --------

    >>> main_seq = NucleotideSequence("ACTGAATGA")
    >>> sub_seq = NucleotideSequence("TGA")
    >>> print(find_subsequence(main_seq, sub_seq))
    [2 6]
    """
    return _as_tree(sequence).find_all(query)


def count_subsequence(sequence, query):
    """
    Count the occurrences of a subsequence in a sequence, including
    overlapping ones.

    Parameters
    ----------
    sequence : Sequence or str or SuffixTree
        The sequence to count the subsequence in.
    query : Sequence or str
        The potential subsequence.

    Returns
    -------
    count : int
        The number of occurrences.

    Examples
    --------

    >>> print(count_subsequence(NucleotideSequence("AAAAA"), "AA"))
    4
    """
    return _as_tree(sequence).count(query)


def _as_tree(sequence):
    if isinstance(sequence, SuffixTree):
        return sequence
    return SuffixTree(sequence)
