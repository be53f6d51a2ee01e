# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
Functions for approximate string matching with a fixed distance budget.
The distances used here are unit-cost metrics, independent of the
scores used by the alignment functions.
"""

__name__ = "seqalign.sequence"
__author__ = "Seqalign contributors"
__all__ = [
    "LengthMismatchError",
    "ApproximateMatch",
    "hamming_distance",
    "edit_distance",
    "find_with_mismatches",
    "find_with_edits",
    "find_best_match",
    "count_approximate_occurrences",
    "find_frequent_kmers_with_mismatches",
    "canonical_kmer",
]

import itertools
from collections import Counter
from dataclasses import dataclass, field
import numpy as np
from .alphabet import LetterAlphabet
from .sequence import Sequence
from .seqtypes import NucleotideSequence
from .suffixtree import SuffixTree


class LengthMismatchError(ValueError):
    """
    This exception is raised, when a comparison that requires sequences
    of equal length is given sequences of different length.
    """

    pass


@dataclass(frozen=True)
class ApproximateMatch:
    """
    An occurrence of a pattern in a text within a distance budget.

    Parameters
    ----------
    position : int
        The start position of the occurrence in the text.
    matched : str or tuple
        The matched region of the text.
    distance : int
        The Hamming or edit distance between pattern and matched
        region.
    mismatch_positions : tuple of int
        The positions within the pattern that are mismatched.
        Only filled for Hamming distance matches.
    """

    position: int
    matched: object
    distance: int
    mismatch_positions: tuple = field(default=())

    @property
    def is_exact(self):
        return self.distance == 0


def _as_text(sequence, name):
    """
    Convert the input into an upper case string or, for sequences with
    non-letter symbols, a tuple of symbols.
    """
    if sequence is None:
        raise TypeError(f"'{name}' must be a 'str' or a 'Sequence', not None")
    if isinstance(sequence, str):
        return sequence.upper()
    if isinstance(sequence, Sequence):
        if isinstance(sequence.get_alphabet(), LetterAlphabet):
            return str(sequence)
        return tuple(sequence.symbols)
    raise TypeError(
        f"'{name}' must be a 'str' or a 'Sequence', "
        f"not '{type(sequence).__name__}'"
    )


def _to_codes(*texts):
    """
    Map the symbols of all texts into integer arrays with a shared
    mapping, so that equal symbols get equal values.
    """
    if all(isinstance(text, str) for text in texts):
        return [
            np.frombuffer(text.encode("utf-32-le"), dtype=np.uint32).astype(np.int64)
            for text in texts
        ]
    mapping = {}
    return [
        np.array(
            [mapping.setdefault(symbol, len(mapping)) for symbol in text],
            dtype=np.int64,
        )
        for text in texts
    ]


def _check_budget(budget, name):
    if budget < 0:
        raise ValueError(f"'{name}' must not be negative, got {budget}")


def hamming_distance(sequence1, sequence2):
    """
    Count the positions at which two equally long sequences differ.

    The comparison is case-insensitive.

    Parameters
    ----------
    sequence1, sequence2 : str or Sequence
        The sequences to compare.

    Returns
    -------
    distance : int
        The number of differing positions.

    Raises
    ------
    LengthMismatchError
        If the sequences have different lengths.

    Examples
    --------

    >>> print(hamming_distance("AAAA", "AAAT"))
    1
    >>> try:
    ...     hamming_distance("AAA", "AAAA")
    ... except LengthMismatchError as e:
    ...     print(e)
    Hamming distance requires sequences of equal length, got 3 and 4
    """
    text1 = _as_text(sequence1, "sequence1")
    text2 = _as_text(sequence2, "sequence2")
    if len(text1) != len(text2):
        raise LengthMismatchError(
            f"Hamming distance requires sequences of equal length, "
            f"got {len(text1)} and {len(text2)}"
        )
    codes1, codes2 = _to_codes(text1, text2)
    return int(np.count_nonzero(codes1 != codes2))


def edit_distance(sequence1, sequence2):
    """
    Calculate the Levenshtein distance between two sequences.

    Insertions, deletions and substitutions have unit cost each.
    The comparison is case-insensitive.

    Parameters
    ----------
    sequence1, sequence2 : str or Sequence
        The sequences to compare.

    Returns
    -------
    distance : int
        The minimum number of edit operations.

    Examples
    --------

    >>> print(edit_distance("kitten", "sitting"))
    3
    >>> print(edit_distance("GATTACA", "GCATGCU"))
    4
    """
    text1 = _as_text(sequence1, "sequence1")
    text2 = _as_text(sequence2, "sequence2")
    codes1, codes2 = _to_codes(text1, text2)
    offsets = np.arange(len(codes2) + 1)
    # Distance of every prefix of 'sequence2' to the empty prefix
    previous = offsets.copy()
    for i in range(1, len(codes1) + 1):
        current = np.empty(len(codes2) + 1, dtype=np.int64)
        current[0] = i
        current[1:] = np.minimum(
            previous[:-1] + (codes2 != codes1[i - 1]),
            previous[1:] + 1,
        )
        # Insertions within the row:
        # current[j] = min over k <= j of (current[k] + j - k)
        current = np.minimum.accumulate(current - offsets) + offsets
        previous = current
    return int(previous[-1])


def find_with_mismatches(sequence, pattern, max_mismatches):
    """
    Find all start positions at which the pattern matches the text
    with at most the given number of mismatches (Hamming distance).

    Without a mismatch budget the exact occurrences are taken from a
    :class:`SuffixTree`.

    Parameters
    ----------
    sequence : str or Sequence
        The text to search in.
    pattern : str or Sequence
        The pattern to search.
    max_mismatches : int
        The maximum allowed number of mismatches.

    Returns
    -------
    matches : list of ApproximateMatch
        The matches in order of their position.
        Empty, if the pattern is empty or longer than the text.

    Raises
    ------
    ValueError
        If `max_mismatches` is negative.

    Examples
    --------

    >>> for match in find_with_mismatches("ACGTACGA", "ACGT", 1):
    ...     print(match.position, match.matched, match.distance, match.mismatch_positions)
    0 ACGT 0 ()
    4 ACGA 1 (3,)
    """
    text = _as_text(sequence, "sequence")
    query = _as_text(pattern, "pattern")
    _check_budget(max_mismatches, "max_mismatches")
    if len(query) == 0 or len(query) > len(text):
        return []
    if max_mismatches == 0:
        return [
            ApproximateMatch(int(pos), text[pos : pos + len(query)], 0)
            for pos in SuffixTree(text).find_all(query)
        ]
    text_codes, query_codes = _to_codes(text, query)
    windows = np.lib.stride_tricks.sliding_window_view(text_codes, len(query))
    differences = windows != query_codes
    distances = np.count_nonzero(differences, axis=1)
    return [
        ApproximateMatch(
            int(pos),
            text[pos : pos + len(query)],
            int(distances[pos]),
            tuple(int(i) for i in np.nonzero(differences[pos])[0]),
        )
        for pos in np.nonzero(distances <= max_mismatches)[0]
    ]


def find_with_edits(sequence, pattern, max_edits):
    """
    Find all regions of the text that match the pattern within the
    given edit distance.

    The search is a dynamic programming over the pattern and the text,
    where a match may start at any text position without cost.
    For each end position in the text at most one match is reported,
    whose start is chosen by preferring substitutions over gaps in the
    backward direction.

    Parameters
    ----------
    sequence : str or Sequence
        The text to search in.
    pattern : str or Sequence
        The pattern to search.
    max_edits : int
        The maximum allowed edit distance.

    Returns
    -------
    matches : list of ApproximateMatch
        The matches in order of their end position.
        Empty, if the pattern is empty or longer than the text.

    Raises
    ------
    ValueError
        If `max_edits` is negative.

    Examples
    --------

    >>> for match in find_with_edits("ACGTACGT", "ACGT", 0):
    ...     print(match.position, match.matched)
    0 ACGT
    4 ACGT
    """
    text = _as_text(sequence, "sequence")
    query = _as_text(pattern, "pattern")
    _check_budget(max_edits, "max_edits")
    if len(query) == 0 or len(query) > len(text):
        return []
    text_codes, query_codes = (codes.tolist() for codes in _to_codes(text, query))
    m = len(query_codes)
    # Costs and match start positions for the previous text position
    prev_cost = list(range(m + 1))
    prev_start = [0] * (m + 1)
    matches = []
    for j in range(1, len(text_codes) + 1):
        symbol = text_codes[j - 1]
        cost = [0] * (m + 1)
        start = [j] * (m + 1)
        for i in range(1, m + 1):
            best = prev_cost[i - 1] + (query_codes[i - 1] != symbol)
            best_start = prev_start[i - 1]
            if cost[i - 1] + 1 < best:
                best = cost[i - 1] + 1
                best_start = start[i - 1]
            if prev_cost[i] + 1 < best:
                best = prev_cost[i] + 1
                best_start = prev_start[i]
            cost[i] = best
            start[i] = best_start
        if cost[m] <= max_edits:
            matches.append(
                ApproximateMatch(start[m], text[start[m] : j], cost[m])
            )
        prev_cost = cost
        prev_start = start
    return matches


def find_best_match(sequence, pattern):
    """
    Find the text window with the lowest Hamming distance to the
    pattern.

    Parameters
    ----------
    sequence : str or Sequence
        The text to search in.
    pattern : str or Sequence
        The pattern to search.

    Returns
    -------
    match : ApproximateMatch or None
        The best match.
        On ties the leftmost window is chosen.
        ``None``, if the text or pattern is empty or the pattern is
        longer than the text.

    Examples
    --------

    >>> match = find_best_match("TTTTTTTT", "ACGT")
    >>> print(match.position, match.distance)
    0 3
    """
    text = _as_text(sequence, "sequence")
    query = _as_text(pattern, "pattern")
    if len(text) == 0 or len(query) == 0 or len(query) > len(text):
        return None
    text_codes, query_codes = _to_codes(text, query)
    windows = np.lib.stride_tricks.sliding_window_view(text_codes, len(query))
    differences = windows != query_codes
    distances = np.count_nonzero(differences, axis=1)
    pos = int(np.argmin(distances))
    return ApproximateMatch(
        pos,
        text[pos : pos + len(query)],
        int(distances[pos]),
        tuple(int(i) for i in np.nonzero(differences[pos])[0]),
    )


def count_approximate_occurrences(sequence, pattern, max_distance, metric="hamming"):
    """
    Count the approximate occurrences of a pattern in a text.

    Parameters
    ----------
    sequence : str or Sequence
        The text to search in.
    pattern : str or Sequence
        The pattern to search.
    max_distance : int
        The maximum allowed distance.
    metric : {'hamming', 'edit'}, optional
        The distance metric.
        For *hamming* every qualifying start position is counted,
        for *edit* every qualifying end position.

    Returns
    -------
    count : int
        The number of occurrences.

    Examples
    --------

    >>> print(count_approximate_occurrences("ACGTACGT", "ACGG", 1))
    2
    """
    if metric == "hamming":
        return len(find_with_mismatches(sequence, pattern, max_distance))
    elif metric == "edit":
        return len(find_with_edits(sequence, pattern, max_distance))
    else:
        raise ValueError(f"'{metric}' is an invalid distance metric")


def find_frequent_kmers_with_mismatches(sequence, k, max_mismatches):
    """
    Find the most frequent *k-mers* in a text, where an occurrence may
    differ from the *k-mer* in up to the given number of positions.

    The candidate *k-mers* are the neighbourhoods of every *k-mer* in
    the text, built from the symbols that occur in the text.

    Parameters
    ----------
    sequence : str or Sequence
        The text.
    k : int
        The *k-mer* length.
    max_mismatches : int
        The maximum number of mismatches of an occurrence.

    Returns
    -------
    kmers : list of tuple(str, int)
        Every *k-mer* with the maximum occurrence count, together with
        this count, in lexicographical order.
        Empty, if the text is shorter than `k`.

    Raises
    ------
    ValueError
        If `k` is not positive or `max_mismatches` is negative.

    Examples
    --------

    >>> print(find_frequent_kmers_with_mismatches("AAAAAA", 4, 0))
    [('AAAA', 3)]
    """
    if k <= 0:
        raise ValueError(f"'k' must be positive, got {k}")
    _check_budget(max_mismatches, "max_mismatches")
    text = _as_text(sequence, "sequence")
    if len(text) < k:
        return []
    symbols = sorted(set(text), key=str)
    counts = Counter()
    for i in range(len(text) - k + 1):
        for neighbor in _neighborhood(text[i : i + k], max_mismatches, symbols):
            counts[neighbor] += 1
    max_count = max(counts.values())
    kmers = [kmer for kmer, count in counts.items() if count == max_count]
    if isinstance(text, str):
        kmers = ["".join(kmer) for kmer in kmers]
    return sorted([(kmer, max_count) for kmer in kmers], key=lambda e: str(e[0]))


def _neighborhood(kmer, max_mismatches, symbols):
    """
    Enumerate all *k-mers* within the given Hamming distance of `kmer`.
    """
    kmer = tuple(kmer)
    for distance in range(min(max_mismatches, len(kmer)) + 1):
        for positions in itertools.combinations(range(len(kmer)), distance):
            alternatives = [
                [symbol for symbol in symbols if symbol != kmer[pos]]
                for pos in positions
            ]
            for replacement in itertools.product(*alternatives):
                neighbor = list(kmer)
                for pos, symbol in zip(positions, replacement):
                    neighbor[pos] = symbol
                yield tuple(neighbor)


def canonical_kmer(kmer):
    """
    Get the canonical form of a nucleotide *k-mer*, the
    lexicographically smaller one of the *k-mer* and its reverse
    complement.

    Parameters
    ----------
    kmer : str or NucleotideSequence
        The *k-mer*.

    Returns
    -------
    canonical : str
        The canonical *k-mer*.

    Examples
    --------

    >>> print(canonical_kmer("TTG"))
    CAA
    """
    if not isinstance(kmer, NucleotideSequence):
        kmer = NucleotideSequence(_as_text(kmer, "kmer"))
    return min(str(kmer), str(kmer.reverse_complement()))
