# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqalign.sequence.align"
__author__ = "Seqalign contributors"
__all__ = ["MultipleAlignment", "align_multiple"]

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
import numpy as np
from ..alphabet import LetterAlphabet
from ..seqtypes import GeneralSequence, NucleotideSequence
from ..sequence import Sequence
from .alignment import GAP_SYMBOL, Alignment, AlignmentType
from .pairwise import align_pairwise
from .scoring import ScoringScheme

_logger = logging.getLogger("seqalign.sequence.align.multiple")


class MultipleAlignment(Alignment):
    """
    An :class:`Alignment` of any number of sequences with a consensus
    sequence.

    Parameters
    ----------
    sequences : list of Sequence
        The aligned sequences.
    trace : ndarray, dtype=int, shape=(m,n)
        The alignment trace.
    score : int
        The sum of the pairwise scores, the alignment was built from.
    consensus : str
        The consensus of the alignment columns.

    Attributes
    ----------
    consensus : str
        The most frequent symbol of each alignment column.
        A gap symbol in the consensus means, that gaps are the most
        frequent entry of the column.
    """

    def __init__(self, sequences, trace, score, consensus):
        super().__init__(sequences, trace, score, AlignmentType.GLOBAL)
        self.consensus = consensus

    def __repr__(self):
        """Represent MultipleAlignment a string for debugging."""
        return (
            f"MultipleAlignment([{', '.join([repr(seq) for seq in self.sequences])}], "
            f"np.{np.array_repr(self.trace)}, score={self.score}, "
            f"consensus={self.consensus!r})"
        )

    @property
    def aligned_sequences(self):
        return self.get_gapped_sequences()

    def __eq__(self, item):
        if not isinstance(item, MultipleAlignment):
            return False
        return super().__eq__(item) and self.consensus == item.consensus


def align_multiple(sequences, scoring=None, matrix=None, max_workers=None, cancel=None):
    """
    Perform a center star multiple sequence alignment.

    Each sequence is globally aligned to the first sequence, the center,
    with :func:`align_pairwise()`.
    The pairwise alignments are merged into a single alignment:
    Before each position of the center, the alignment reserves as many
    columns, as the pairwise alignment with the most insertions at this
    position requires.
    Insertions of shorter length are padded with gaps at their end.

    Parameters
    ----------
    sequences : iterable of Sequence or str
        The sequences to be aligned.
        Strings are converted into sequences over a common
        :class:`LetterAlphabet` of their upper case symbols.
    scoring : ScoringScheme, optional
        The scoring of the pairwise alignments.
        By default :data:`SIMPLE_DNA`.
    matrix : SubstitutionMatrix, optional
        The substitution matrix of the pairwise alignments.
    max_workers : int, optional
        If given, the pairwise alignments are computed in a thread pool
        with this number of threads.
        The result does not depend on it.
    cancel : object, optional
        A cancellation token with an ``is_set()`` method, that is
        passed to each pairwise alignment.

    Returns
    -------
    alignment : MultipleAlignment
        The multiple alignment.
        Its score is the sum of all pairwise alignment scores.

    Raises
    ------
    TypeError
        If the sequence collection or any of its elements is ``None``.

    Examples
    --------

    >>> ali = align_multiple(["ACGTACGT", "ACGACGT", "ACGTTACGT"])
    >>> print(ali)
    ACG-TACGT
    ACG--ACGT
    ACGTTACGT
    >>> print(ali.consensus)
    ACG-TACGT
    >>> print(ali.score)
    11
    """
    if sequences is None:
        raise TypeError("'sequences' must be an iterable of sequences, not None")
    sequences = list(sequences)
    for i, seq in enumerate(sequences):
        if seq is None:
            raise TypeError(f"Sequence at index {i} is None")
    if scoring is None:
        scoring = ScoringScheme.default()

    if len(sequences) == 0:
        return MultipleAlignment([], np.zeros((0, 0), dtype=np.int64), 0, "")
    sequences = _to_sequences(sequences, matrix)
    center = sequences[0]
    if len(sequences) == 1:
        trace = np.arange(len(center), dtype=np.int64)[:, np.newaxis]
        return MultipleAlignment([center], trace, 0, str(center))

    _logger.debug(
        "Center star alignment of %d sequences, center length %d",
        len(sequences), len(center),
    )

    def align_to_center(seq):
        return align_pairwise(
            center, seq, scoring, AlignmentType.GLOBAL, matrix, cancel=cancel
        )

    if max_workers is None:
        pairwise = [align_to_center(seq) for seq in sequences[1:]]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            # 'map()' keeps the input order
            pairwise = list(executor.map(align_to_center, sequences[1:]))

    trace = _merge_traces(len(center), [ali.trace for ali in pairwise])
    score = sum(ali.score for ali in pairwise)
    alignment = MultipleAlignment(sequences, trace, score, "")
    alignment.consensus = _consensus(alignment.get_gapped_sequences())
    return alignment


def _to_sequences(sequences, matrix):
    if all(isinstance(seq, Sequence) for seq in sequences):
        return sequences
    for seq in sequences:
        if not isinstance(seq, (Sequence, str)):
            raise TypeError(
                f"Expected a sequence or a string, not '{type(seq).__name__}'"
            )
    given = [seq for seq in sequences if isinstance(seq, Sequence)]
    if matrix is not None:
        alphabet = matrix.get_alphabet1()
    elif len(given) > 0:
        alphabet = given[0].get_alphabet()
    else:
        symbols = sorted(set("".join(sequences).upper()))
        if len(symbols) == 0:
            alphabet = NucleotideSequence.alphabet_unamb
        else:
            alphabet = LetterAlphabet(symbols)
    converted = []
    for seq in sequences:
        if isinstance(seq, str):
            if isinstance(alphabet, LetterAlphabet):
                seq = seq.upper()
            seq = GeneralSequence(alphabet, seq)
        converted.append(seq)
    return converted


def _insertions(center_length, trace):
    """
    Count the alignment columns, where the other sequence is aligned to
    a gap in the center, before each center position.
    The last element counts the insertions after the center.
    """
    counts = np.zeros(center_length + 1, dtype=np.int64)
    pos = 0
    for center_index in trace[:, 0]:
        if center_index == -1:
            counts[pos] += 1
        else:
            pos = center_index + 1
    return counts


def _merge_traces(center_length, traces):
    """
    Merge pairwise traces, whose first sequence is the center, into a
    single trace.
    """
    gaps_before = np.zeros(center_length + 1, dtype=np.int64)
    for trace in traces:
        gaps_before = np.maximum(gaps_before, _insertions(center_length, trace))
    # Column of the first reserved insertion slot before each position
    slot_start = np.arange(center_length + 1) + np.concatenate(
        ([0], np.cumsum(gaps_before)[:-1])
    )
    center_columns = slot_start[:-1] + gaps_before[:-1]
    length = center_length + int(gaps_before.sum())

    merged = np.full((length, len(traces) + 1), -1, dtype=np.int64)
    merged[center_columns, 0] = np.arange(center_length)
    for k, trace in enumerate(traces, start=1):
        pos = 0
        inserted = 0
        for center_index, other_index in trace:
            if center_index == -1:
                merged[slot_start[pos] + inserted, k] = other_index
                inserted += 1
            else:
                merged[center_columns[center_index], k] = other_index
                pos = center_index + 1
                inserted = 0
    return merged


def _consensus(gapped_sequences):
    consensus = []
    for column in zip(*gapped_sequences):
        # Ties are resolved by the first encountered symbol
        symbol, _ = Counter(column).most_common(1)[0]
        consensus.append(symbol)
    return "".join(consensus)
