# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqalign.sequence.align"
__author__ = "Seqalign contributors"
__all__ = ["align_pairwise"]

import logging
import numpy as np
from ..alphabet import LetterAlphabet
from ..seqtypes import GeneralSequence, NucleotideSequence
from ..sequence import Sequence
from .alignment import Alignment, AlignmentType
from .error import AlignmentCancelledError
from .scoring import ScoringScheme

_logger = logging.getLogger("seqalign.sequence.align.pairwise")

# Low enough to never win a maximum,
# high enough to never overflow when penalties are added
NEG_INF = np.iinfo(np.int64).min // 4

# Traceback states, their order is the tie-breaking order
_M = 0
_G2 = 1
_G1 = 2


def align_pairwise(
    seq1,
    seq2,
    scoring=None,
    mode=AlignmentType.GLOBAL,
    matrix=None,
    free_ends="second",
    cancel=None,
    progress=None,
):
    """
    Perform an optimal alignment of two sequences with affine gap
    penalties, based on the dynamic programming algorithm by
    *Gotoh* [1]_.

    The alignment maximizes the sum of substitution scores and gap
    scores, where a gap of length *n* scores
    ``gap_open + (n-1) * gap_extend``.
    Time and memory scale with the product of both sequence lengths.

    This function either performs a global alignment, based on the
    *Needleman-Wunsch* algorithm [2]_, a local alignment, based on the
    *Smith-Waterman* algorithm [3]_, or a semi-global alignment, where
    a query sequence is aligned end to end to a region of a reference
    sequence.

    Parameters
    ----------
    seq1, seq2 : Sequence or str
        The sequences to be aligned.
        Strings are converted into sequences over a common
        :class:`LetterAlphabet` of their upper case symbols, or over
        the alphabets of `matrix`, if given.
    scoring : ScoringScheme, optional
        The gap penalties and, if no `matrix` is given, the
        match/mismatch scores.
        By default :data:`SIMPLE_DNA`.
    mode : AlignmentType, optional
        The kind of alignment.
    matrix : SubstitutionMatrix, optional
        If given, substitution scores are taken from this matrix
        instead of the `scoring` match/mismatch scores.
        The matrix alphabets must extend the sequence alphabets.
    free_ends : {'second', 'first'}, optional
        Only for semi-global alignments:
        The sequence, whose overhangs are not penalized, i.e. the
        reference.
        The other sequence is the query, that is aligned completely.
    cancel : object, optional
        A cancellation token with an ``is_set()`` method, e.g. a
        :class:`threading.Event`.
        It is checked once per table row.
    progress : callable, optional
        Called with the fraction of filled table rows.

    Returns
    -------
    alignment : Alignment
        The optimal alignment.
        For local and semi-global alignments only the aligned region
        is part of the trace.

    Raises
    ------
    TypeError
        If any of the sequences is ``None``.
    ValueError
        If the substitution matrix does not cover the sequence
        alphabets.
    AlignmentCancelledError
        If `cancel` was set, before the alignment was finished.

    Notes
    -----
    If multiple alignments reach the optimal score, the traceback
    prefers a diagonal step over a gap in the second sequence over a
    gap in the first sequence.
    Inside a gap, closing the gap is preferred over extending it.
    Local alignments start at the first maximum cell in row-major order.

    References
    ----------

    .. [1] O Gotoh,
       "An improved algorithm for matching biological sequences."
       J Mol Biol, 162, 705-708 (1982).
    .. [2] SB Needleman, CD Wunsch,
       "A general method applicable to the search for similarities
       in the amino acid sequence of two proteins."
       J Mol Biol, 48, 443-453 (1970).
    .. [3] TF Smith, MS Waterman,
       "Identification of common molecular subsequences."
       J Mol Biol, 147, 195-197 (1981).

    Examples
    --------

    >>> seq1 = NucleotideSequence("ATACGCTTGCT")
    >>> seq2 = NucleotideSequence("ATACGCGCT")
    >>> ali = align_pairwise(seq1, seq2, BLAST_DNA)
    >>> print(ali)
    ATACGCTTGCT
    ATACGC--GCT
    >>> print(ali.score)
    11

    >>> ali = align_pairwise("TTTTGATTACATTTT", "GATTACA", mode=AlignmentType.LOCAL)
    >>> print(ali)
    GATTACA
    GATTACA
    >>> print(ali.start1, ali.end1)
    4 10
    """
    if seq1 is None:
        raise TypeError("'seq1' must be a sequence or a string, not None")
    if seq2 is None:
        raise TypeError("'seq2' must be a sequence or a string, not None")
    if scoring is None:
        scoring = ScoringScheme.default()
    mode = AlignmentType(mode)
    if free_ends not in ("first", "second"):
        raise ValueError(f"'{free_ends}' is not a valid value for 'free_ends'")

    if mode == AlignmentType.SEMI_GLOBAL and free_ends == "first":
        # The query is always the first sequence in the table
        swapped = align_pairwise(
            seq2, seq1, scoring, mode, matrix and matrix.transpose(),
            "second", cancel, progress,
        )
        return Alignment(
            swapped.sequences[::-1],
            swapped.trace[:, ::-1],
            swapped.score,
            swapped.alignment_type,
            starts=(swapped.start2, swapped.start1),
        )

    seq1, seq2 = _to_sequences(seq1, seq2, matrix)
    if matrix is None:
        matrix = scoring.substitution_matrix(seq1.get_alphabet(), seq2.get_alphabet())
    elif not matrix.covers(seq1.get_alphabet(), seq2.get_alphabet()):
        raise ValueError(
            "Substitution matrix is inappropriate for the given sequences"
        )

    _logger.debug(
        "%s alignment of sequences with length %d and %d",
        mode.name.lower(), len(seq1), len(seq2),
    )
    m_table, g1_table, g2_table = _init_tables(
        len(seq1), len(seq2), scoring, mode
    )
    _fill_tables(
        seq1.code, seq2.code, matrix.score_matrix(),
        m_table, g1_table, g2_table,
        scoring.gap_open, scoring.gap_extend,
        mode, cancel, progress,
    )
    trace, score, starts = _follow_trace(
        m_table, g1_table, g2_table,
        scoring.gap_open, scoring.gap_extend,
        mode, cancel,
    )
    _logger.debug("Alignment of length %d with score %d", len(trace), score)
    return Alignment([seq1, seq2], trace, score, mode, starts)


def _to_sequences(seq1, seq2, matrix):
    """
    Convert strings into :class:`Sequence` objects.
    """
    if isinstance(seq1, Sequence) and isinstance(seq2, Sequence):
        return seq1, seq2
    for seq in (seq1, seq2):
        if not isinstance(seq, (Sequence, str)):
            raise TypeError(
                f"Expected a sequence or a string, not '{type(seq).__name__}'"
            )
    if matrix is not None:
        alphabets = (matrix.get_alphabet1(), matrix.get_alphabet2())
    elif isinstance(seq1, Sequence):
        alphabets = (seq1.get_alphabet(), seq1.get_alphabet())
    elif isinstance(seq2, Sequence):
        alphabets = (seq2.get_alphabet(), seq2.get_alphabet())
    else:
        symbols = sorted(set(seq1.upper()) | set(seq2.upper()))
        if len(symbols) == 0:
            alphabet = NucleotideSequence.alphabet_unamb
        else:
            alphabet = LetterAlphabet(symbols)
        alphabets = (alphabet, alphabet)
    converted = []
    for seq, alphabet in zip((seq1, seq2), alphabets):
        if isinstance(seq, str):
            if isinstance(alphabet, LetterAlphabet):
                seq = seq.upper()
            seq = GeneralSequence(alphabet, seq)
        converted.append(seq)
    return tuple(converted)


def _init_tables(n, m, scoring, mode):
    """
    Create the three score tables with mode specific borders.

    The ``m_table`` holds the scores of alignments ending with two
    aligned symbols, the ``g1_table`` of alignments ending with a gap
    in the first sequence and the ``g2_table`` of alignments ending
    with a gap in the second sequence.
    The origin of the ``m_table`` is the start of every alignment.
    """
    gap_open = scoring.gap_open
    gap_ext = scoring.gap_extend
    m_table = np.full((n + 1, m + 1), NEG_INF, dtype=np.int64)
    g1_table = np.full((n + 1, m + 1), NEG_INF, dtype=np.int64)
    g2_table = np.full((n + 1, m + 1), NEG_INF, dtype=np.int64)
    m_table[0, 0] = 0
    if mode == AlignmentType.GLOBAL:
        g1_table[0, 1:] = np.arange(m) * gap_ext + gap_open
        g2_table[1:, 0] = np.arange(n) * gap_ext + gap_open
    elif mode == AlignmentType.SEMI_GLOBAL:
        # Leading overhang of the reference is free
        m_table[0, 1:] = 0
        g2_table[1:, 0] = np.arange(n) * gap_ext + gap_open
    else:
        m_table[0, 1:] = 0
        m_table[1:, 0] = 0
    return m_table, g1_table, g2_table


def _fill_tables(code1, code2, score_matrix, m_table, g1_table, g2_table,
                 gap_open, gap_ext, mode, cancel, progress):
    """
    Fill the score tables row by row.

    The ``m_table`` and ``g2_table`` depend only on the previous row.
    The ``g1_table`` depends on the current row, its recurrence
    ``g1[j] = max(b[j-1] + gap_open, g1[j-1] + gap_ext)`` is solved
    as running maximum over ``b[k] - k * gap_ext``, where ``b`` is the
    maximum of the two other tables.
    """
    n = m_table.shape[0] - 1
    m = m_table.shape[1] - 1
    # Scores are floored at 0 in local alignments
    floor = 0 if mode == AlignmentType.LOCAL else NEG_INF
    ext_steps = np.arange(m, dtype=np.int64) * gap_ext
    for i in range(1, n + 1):
        if cancel is not None and cancel.is_set():
            raise AlignmentCancelledError(
                f"Alignment was cancelled after {i-1} of {n} rows"
            )
        similarity = score_matrix[code1[i - 1], code2].astype(np.int64)
        # Best score of the previous row, that does not end with a gap
        # in the second sequence
        prev_no_g2 = np.maximum(np.maximum(m_table[i - 1], g1_table[i - 1]), floor)
        prev_best = np.maximum(prev_no_g2, g2_table[i - 1])
        m_table[i, 1:] = prev_best[:-1] + similarity
        g2_table[i, 1:] = np.maximum(
            prev_no_g2[1:] + gap_open, g2_table[i - 1, 1:] + gap_ext
        )
        no_g1 = np.maximum(np.maximum(m_table[i], g2_table[i]), floor)
        g1_table[i, 1:] = (
            gap_open + ext_steps + np.maximum.accumulate(no_g1[:-1] - ext_steps)
        )
        if progress is not None:
            progress(i / n)


def _follow_trace(m_table, g1_table, g2_table, gap_open, gap_ext, mode, cancel):
    """
    Trace back a single optimal path through the score tables.

    Returns
    -------
    trace : ndarray, shape=(l,2), dtype=int64
        The alignment trace.
    score : int
        The alignment score.
    starts : tuple of int
        The start positions of the aligned region in both sequences.
    """
    tables = (m_table, g2_table, g1_table)
    n = m_table.shape[0] - 1
    m = m_table.shape[1] - 1
    local = mode == AlignmentType.LOCAL
    floor = 0 if local else NEG_INF

    def best(i, j, exclude=None):
        values = [
            NEG_INF if state == exclude else int(tables[state][i, j])
            for state in (_M, _G2, _G1)
        ]
        return max(max(values), floor)

    # Start cell
    if mode == AlignmentType.GLOBAL:
        i, j = n, m
    elif mode == AlignmentType.SEMI_GLOBAL:
        i = n
        last_row = np.maximum(np.maximum(m_table[n], g1_table[n]), g2_table[n])
        # 'argmax()' returns the first occurrence of the maximum
        j = int(np.argmax(last_row))
    else:
        best_table = np.maximum(
            np.maximum(np.maximum(m_table, g1_table), g2_table), 0
        )
        i, j = np.unravel_index(np.argmax(best_table), best_table.shape)
        i, j = int(i), int(j)
    score = best(i, j)

    # The target score of the next state, that is not fixed yet
    target = score
    exclude = None
    state = None
    trace = []
    steps = 0
    while True:
        steps += 1
        if cancel is not None and steps % (m + 1) == 0 and cancel.is_set():
            raise AlignmentCancelledError("Alignment was cancelled during traceback")
        if state is None:
            # Choose the table, the path continues in
            if mode == AlignmentType.GLOBAL and i == 0 and j == 0:
                break
            if mode == AlignmentType.SEMI_GLOBAL and i == 0:
                break
            if local and (target == 0 or i == 0 or j == 0):
                break
            for candidate in (_M, _G2, _G1):
                if candidate != exclude and tables[candidate][i, j] == target:
                    state = candidate
                    break
            else:
                raise ValueError("Inconsistent score tables")
        if state == _M:
            trace.append((i - 1, j - 1))
            i -= 1
            j -= 1
            target = best(i, j)
            exclude = None
            state = None
        elif state == _G2:
            trace.append((i - 1, -1))
            value = g2_table[i, j]
            i -= 1
            if value == best(i, j, exclude=_G2) + gap_open:
                # Gap opening
                target = value - gap_open
                exclude = _G2
                state = None
            elif value == g2_table[i, j] + gap_ext:
                pass
            else:
                raise ValueError("Inconsistent score tables")
        else:
            trace.append((-1, j - 1))
            value = g1_table[i, j]
            j -= 1
            if value == best(i, j, exclude=_G1) + gap_open:
                target = value - gap_open
                exclude = _G1
                state = None
            elif value == g1_table[i, j] + gap_ext:
                pass
            else:
                raise ValueError("Inconsistent score tables")

    trace = np.array(trace[::-1], dtype=np.int64).reshape(-1, 2)
    return trace, score, (i, j)
