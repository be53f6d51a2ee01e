# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqalign.sequence.align"
__author__ = "Seqalign contributors"
__all__ = [
    "AlignmentType",
    "Alignment",
    "get_codes",
    "get_sequence_identity",
    "score",
    "find_terminal_gaps",
    "remove_terminal_gaps",
    "format_alignment",
]

import enum
import numbers
import textwrap
import numpy as np
from ..alphabet import LetterAlphabet
from ..seqtypes import GeneralSequence
from .scoring import ScoringScheme

GAP_SYMBOL = "-"


class AlignmentType(enum.Enum):
    """
    The kind of a pairwise alignment.

    - **GLOBAL** - Both sequences are aligned end to end
      (*Needleman-Wunsch*).
    - **LOCAL** - The best scoring pair of subsequences is aligned
      (*Smith-Waterman*).
    - **SEMI_GLOBAL** - A query is aligned end to end to a region of a
      reference, whose overhangs are not penalized.
    """

    GLOBAL = "global"
    LOCAL = "local"
    SEMI_GLOBAL = "semi_global"


class Alignment(object):
    """
    An :class:`Alignment` stores which symbols of *n* sequences are
    aligned to each other, together with the alignment score.

    Instead of gapped strings, the object keeps the original sequences
    and a *trace*, a *(m x n)* :class:`ndarray` for an alignment of
    length *m*.
    Each element of the trace is an index into the corresponding
    sequence, a gap is represented by *-1*.
    The gapped strings are derived from the trace on demand.

    For local and semi-global alignments the trace only covers the
    aligned region.
    Its position in the original sequences is given by the inclusive
    coordinates :attr:`start1`, :attr:`end1`, :attr:`start2` and
    :attr:`end2`; an empty region has ``end == start - 1``.

    Objects of this class are immutable, the trace is read-only.

    Parameters
    ----------
    sequences : list of Sequence
        The aligned sequences.
    trace : ndarray, dtype=int, shape=(m,n)
        The alignment trace.
    score : int, optional
        Alignment score.
    alignment_type : AlignmentType, optional
        The kind of alignment, that created the trace.
    starts : iterable of int, optional
        The start position of the aligned region in each sequence.
        Only required, if the region is empty for any sequence.
        By default, the first trace index of each sequence is used.

    Attributes
    ----------
    sequences : list
        The aligned sequences.
    trace : ndarray, dtype=int, shape=(m,n)
        The alignment trace.
    score : int
        Alignment score.
    alignment_type : AlignmentType
        The kind of alignment.

    Examples
    --------

    >>> ali = Alignment.from_strings(["CGTCAT--", "--TCATGC"], NucleotideSequence)
    >>> print(ali)
    CGTCAT--
    --TCATGC
    >>> print(ali.trace)
    [[ 0 -1]
     [ 1 -1]
     [ 2  0]
     [ 3  1]
     [ 4  2]
     [ 5  3]
     [-1  4]
     [-1  5]]
    >>> print(ali[1:4].trace)
    [[ 1 -1]
     [ 2  0]
     [ 3  1]]
    """

    def __init__(
        self,
        sequences,
        trace,
        score=None,
        alignment_type=AlignmentType.GLOBAL,
        starts=None,
    ):
        self.sequences = list(sequences)
        trace = np.array(trace, dtype=np.int64)
        if trace.ndim != 2:
            if len(self.sequences) == 0:
                trace = trace.reshape(0, 0)
            else:
                trace = trace.reshape(-1, len(self.sequences))
        trace.setflags(write=False)
        self.trace = trace
        self.score = score
        self.alignment_type = alignment_type
        if starts is None:
            starts = []
            for i in range(len(self.sequences)):
                indices = trace[:, i][trace[:, i] != -1]
                starts.append(int(indices[0]) if len(indices) > 0 else 0)
        self._starts = tuple(int(start) for start in starts)
        if len(self._starts) != len(self.sequences):
            raise IndexError(
                f"{len(self._starts)} start positions were given "
                f"for {len(self.sequences)} sequences"
            )

    def __repr__(self):
        """Represent Alignment a string for debugging."""
        return (
            f"Alignment([{', '.join([repr(seq) for seq in self.sequences])}], "
            f"np.{np.array_repr(self.trace)}, score={self.score}, "
            f"alignment_type={self.alignment_type})"
        )

    def _gapped_str(self, seq_index):
        column = self.trace[:, seq_index]
        sequence = self.sequences[seq_index]
        symbols = [GAP_SYMBOL] * len(column)
        aligned = column != -1
        for pos, symbol in zip(
            np.nonzero(aligned)[0], sequence.get_alphabet().decode_multiple(
                sequence.code[column[aligned]]
            )
        ):
            symbols[pos] = str(symbol)
        return "".join(symbols)

    def get_gapped_sequences(self):
        """
        Get the gapped string representation of the aligned sequences.

        Returns
        -------
        sequences : list of str
            The gapped sequence strings, in the same order as
            :attr:`sequences`.
        """
        return [self._gapped_str(i) for i in range(len(self.sequences))]

    @property
    def aligned_sequence1(self):
        return self._gapped_str(0)

    @property
    def aligned_sequence2(self):
        return self._gapped_str(1)

    def get_start(self, seq_index):
        """
        Get the position of the first aligned symbol of a sequence.

        Parameters
        ----------
        seq_index : int
            The index of the sequence in the alignment.

        Returns
        -------
        start : int
            The start position in the ungapped sequence.
        """
        return self._starts[seq_index]

    def get_end(self, seq_index):
        """
        Get the position of the last aligned symbol of a sequence.

        Parameters
        ----------
        seq_index : int
            The index of the sequence in the alignment.

        Returns
        -------
        end : int
            The inclusive end position in the ungapped sequence,
            ``start - 1`` if no symbol of the sequence is aligned.
        """
        return (
            self._starts[seq_index]
            + int(np.count_nonzero(self.trace[:, seq_index] != -1))
            - 1
        )

    @property
    def start1(self):
        return self.get_start(0)

    @property
    def end1(self):
        return self.get_end(0)

    @property
    def start2(self):
        return self.get_start(1)

    @property
    def end2(self):
        return self.get_end(1)

    def __str__(self):
        if len(self.trace) == 0:
            return ""
        if all(isinstance(seq.get_alphabet(), LetterAlphabet) for seq in self.sequences):
            wrapper = textwrap.TextWrapper(break_on_hyphens=False)
            # First dimension: sequence, second dimension: line
            wrapped = [wrapper.wrap(self._gapped_str(i)) for i in range(len(self.sequences))]
            blocks = []
            for line_i in range(len(wrapped[0])):
                blocks.append("\n".join(lines[line_i] for lines in wrapped))
            return "\n\n".join(blocks)
        else:
            return super().__str__()

    def __getitem__(self, index):
        if isinstance(index, tuple):
            if len(index) > 2:
                raise IndexError("Only 1D or 2D indices are allowed")
            if isinstance(index[0], numbers.Integral) or isinstance(
                index[1], numbers.Integral
            ):
                raise IndexError(
                    "Integers are invalid indices for alignments, "
                    "a single sequence or alignment column cannot be "
                    "selected"
                )
            return Alignment(
                Alignment._index_sequences(self.sequences, index[1]),
                self.trace[index],
                self.score,
                self.alignment_type,
            )
        else:
            return Alignment(
                self.sequences, self.trace[index], self.score, self.alignment_type
            )

    def __iter__(self):
        raise TypeError("'Alignment' object is not iterable")

    def __len__(self):
        return len(self.trace)

    def __eq__(self, item):
        if not isinstance(item, Alignment):
            return False
        if self.sequences != item.sequences:
            return False
        if not np.array_equal(self.trace, item.trace):
            return False
        return (
            self.score == item.score
            and self.alignment_type == item.alignment_type
            and self._starts == item._starts
        )

    __hash__ = None

    @staticmethod
    def _index_sequences(sequences, index):
        if isinstance(index, (list, tuple)) or (
            isinstance(index, np.ndarray) and index.dtype != bool
        ):
            return [sequences[i] for i in index]
        elif isinstance(index, np.ndarray) and index.dtype == bool:
            return [seq for seq, mask in zip(sequences, index) if mask]
        if isinstance(index, slice):
            return sequences[index]
        else:
            raise IndexError(f"Invalid alignment index type '{type(index).__name__}'")

    @staticmethod
    def trace_from_strings(seq_str_list):
        """
        Create a trace from gapped strings.

        Parameters
        ----------
        seq_str_list : list of str
            The gapped strings, each one representing a sequence in an
            alignment.
            A ``-`` is interpreted as gap.

        Returns
        -------
        trace : ndarray, dtype=int, shape=(m,n)
            The created trace.
        """
        lengths = {len(seq_str) for seq_str in seq_str_list}
        if len(lengths) > 1:
            raise IndexError("The gapped strings have different lengths")
        trace = np.full(
            (lengths.pop() if lengths else 0, len(seq_str_list)), -1, dtype=np.int64
        )
        for j, seq_str in enumerate(seq_str_list):
            is_symbol = np.array([c != GAP_SYMBOL for c in seq_str], dtype=bool)
            trace[is_symbol, j] = np.arange(np.count_nonzero(is_symbol))
        return trace

    @staticmethod
    def from_strings(seq_str_list, sequence_type=None):
        """
        Create an :class:`Alignment` from gapped strings.

        Parameters
        ----------
        seq_str_list : list of str
            The gapped strings.
        sequence_type : type, optional
            The :class:`Sequence` subclass the ungapped strings are
            converted into, e.g. :class:`NucleotideSequence`.
            By default, a :class:`GeneralSequence` is created over a
            :class:`LetterAlphabet` of all symbols in the strings.

        Returns
        -------
        alignment : Alignment
            The alignment, without a score.

        Examples
        --------

        >>> ali = Alignment.from_strings(["AC-GT", "ACTGT"], NucleotideSequence)
        >>> print(ali)
        AC-GT
        ACTGT
        """
        ungapped = [seq_str.replace(GAP_SYMBOL, "") for seq_str in seq_str_list]
        if sequence_type is None:
            symbols = sorted(set("".join(ungapped)))
            alphabet = LetterAlphabet(symbols if symbols else ["A"])
            sequences = [GeneralSequence(alphabet, seq_str) for seq_str in ungapped]
        else:
            sequences = [sequence_type(seq_str) for seq_str in ungapped]
        return Alignment(sequences, Alignment.trace_from_strings(seq_str_list))


def get_codes(alignment):
    """
    Get the symbol codes of the aligned sequences, arranged like the
    trace.

    Parameters
    ----------
    alignment : Alignment
        The alignment to get the sequence codes for.

    Returns
    -------
    codes : ndarray, dtype=int, shape=(n,m)
        The codes of *n* sequences in *m* alignment columns.
        Gaps are represented by *-1*.

    Examples
    --------

    >>> ali = Alignment.from_strings(["CGTCAT--", "--TCATGC"], NucleotideSequence)
    >>> print(get_codes(ali))
    [[ 1  2  3  1  0  3 -1 -1]
     [-1 -1  3  1  0  3  2  1]]
    """
    trace = alignment.trace
    codes = np.full((trace.shape[1], trace.shape[0]), -1, dtype=np.int64)
    for i, sequence in enumerate(alignment.sequences):
        aligned = trace[:, i] != -1
        codes[i, aligned] = sequence.code[trace[aligned, i]]
    return codes


def _symbol_columns(alignment):
    """
    Get the aligned symbols as object array of shape *(n,m)*, with
    ``None`` for gaps.
    Symbols of letter alphabets are compared case-insensitively.
    """
    trace = alignment.trace
    symbols = np.full((trace.shape[1], trace.shape[0]), None, dtype=object)
    for i, sequence in enumerate(alignment.sequences):
        aligned = trace[:, i] != -1
        decoded = sequence.get_alphabet().decode_multiple(
            sequence.code[trace[aligned, i]]
        )
        symbols[i, aligned] = [
            str(s).upper() if isinstance(s, str) else s for s in decoded
        ]
    return symbols


def get_sequence_identity(alignment, mode="not_terminal"):
    """
    Calculate the sequence identity for an alignment.

    The identity is equal to the number of columns, in which all
    sequences have the same symbol, divided by a measure for the
    length of the alignment that depends on `mode`.

    Parameters
    ----------
    alignment : Alignment
        The alignment to calculate the identity for.
    mode : {'all', 'not_terminal', 'shortest'}, optional
        The calculation mode for alignment length.

            - **all** - The number of matches divided by the number of
              all alignment columns.
            - **not_terminal** - The number of matches divided by the
              number of alignment columns that are not terminal gaps in
              any of the sequences.
            - **shortest** - The number of matches divided by the
              length of the shortest sequence.

    Returns
    -------
    identity : float
        The sequence identity, ranging between 0 and 1.

    Examples
    --------

    >>> ali = Alignment.from_strings(["--HAKLPRDD--WL--", "FRHA--QRTDADWLHH"])
    >>> print(get_sequence_identity(ali, mode="all"))
    0.375
    >>> print(get_sequence_identity(ali, mode="not_terminal"))
    0.5
    """
    symbols = _symbol_columns(alignment)
    matches = 0
    for column in symbols.T:
        if column[0] is not None and all(s == column[0] for s in column[1:]):
            matches += 1

    if mode == "all":
        length = len(alignment)
    elif mode == "not_terminal":
        start, stop = find_terminal_gaps(alignment)
        if stop <= start:
            raise ValueError(
                "Cannot calculate non-terminal identity, "
                "at least two sequences have no overlap"
            )
        length = stop - start
    elif mode == "shortest":
        length = min([len(seq) for seq in alignment.sequences])
    else:
        raise ValueError(f"'{mode}' is an invalid calculation mode")
    if length == 0:
        return 0.0
    return matches / length


def score(alignment, scoring=None, matrix=None):
    """
    Calculate the score of an alignment with the affine gap model of
    :func:`align_pairwise()`.

    If the alignment contains more than two sequences, the
    substitution scores of all sequence pairs are summed up, while
    gaps are penalized once per sequence.

    Parameters
    ----------
    alignment : Alignment
        The alignment to calculate the score for.
    scoring : ScoringScheme, optional
        The gap penalties and, if no `matrix` is given, the
        match/mismatch scores.
        By default :data:`SIMPLE_DNA`.
    matrix : SubstitutionMatrix, optional
        The substitution scores.
        Its alphabets must extend the alphabets of the sequences.

    Returns
    -------
    score : int
        The alignment score.

    Examples
    --------

    >>> ali = Alignment.from_strings(["AC--GT", "ACTTGA"])
    >>> print(score(ali, SIMPLE_DNA))
    -1
    """

    if scoring is None:
        scoring = ScoringScheme.default()
    n_seq = len(alignment.sequences)
    total = 0

    if matrix is not None:
        codes = get_codes(alignment)
        scores = matrix.score_matrix()
        for i in range(n_seq):
            for j in range(i + 1, n_seq):
                if not matrix.covers(
                    alignment.sequences[i].get_alphabet(),
                    alignment.sequences[j].get_alphabet(),
                ):
                    raise ValueError(
                        "The substitution matrix does not cover "
                        "the alphabets of the sequences"
                    )
                both = (codes[i] != -1) & (codes[j] != -1)
                total += int(scores[codes[i, both], codes[j, both]].sum())
    else:
        symbols = _symbol_columns(alignment)
        for column in symbols.T:
            for i in range(n_seq):
                for j in range(i + 1, n_seq):
                    if column[i] is not None and column[j] is not None:
                        total += (
                            scoring.match if column[i] == column[j] else scoring.mismatch
                        )

    for seq_trace in alignment.trace.T:
        in_gap = False
        for index in seq_trace:
            if index == -1:
                total += scoring.gap_extend if in_gap else scoring.gap_open
                in_gap = True
            else:
                in_gap = False
    return total


def find_terminal_gaps(alignment):
    """
    Find the slice indices that would remove terminal gaps from an
    alignment.

    Terminal gaps are gaps that appear before all sequences start and
    after any sequence ends.

    Parameters
    ----------
    alignment : Alignment
        The alignment, where the slice indices should be found in.

    Returns
    -------
    start, stop : int
        The start and exclusive stop of the alignment columns without
        terminal gaps.

    See also
    --------
    remove_terminal_gaps

    Examples
    --------

    >>> ali = Alignment.from_strings([
    ...     "AAAAACTGATTC---",
    ...     "--AAACTG-TTCA--",
    ...     "-----CTGATTCAAA",
    ... ])
    >>> print(find_terminal_gaps(ali))
    (5, 12)
    """
    trace = alignment.trace
    firsts = []
    lasts = []
    for i in range(trace.shape[1]):
        no_gap_pos = np.nonzero(trace[:, i] != -1)[0]
        if len(no_gap_pos) == 0:
            # A sequence without aligned symbols overlaps with nothing
            return 0, 0
        firsts.append(no_gap_pos[0])
        lasts.append(no_gap_pos[-1])
    if len(firsts) == 0:
        return 0, 0
    return int(np.max(firsts)), int(np.min(lasts)) + 1


def remove_terminal_gaps(alignment):
    """
    Remove terminal gaps from an alignment.

    Parameters
    ----------
    alignment : Alignment
        The alignment, where the terminal gaps should be removed from.

    Returns
    -------
    truncated_alignment : Alignment
        A shallow copy of the input `alignment` with a truncated trace,
        that does not contain alignment columns with terminal gaps.

    See also
    --------
    find_terminal_gaps

    Examples
    --------

    >>> ali = Alignment.from_strings([
    ...     "AAAAACTGATTC---",
    ...     "--AAACTG-TTCA--",
    ...     "-----CTGATTCAAA",
    ... ])
    >>> print(remove_terminal_gaps(ali))
    CTGATTC
    CTG-TTC
    CTGATTC
    """
    start, stop = find_terminal_gaps(alignment)
    if stop < start:
        raise ValueError(
            "Cannot remove terminal gaps, since at least two sequences have "
            "no overlap and the resulting alignment would be empty"
        )
    return alignment[start:stop]


def format_alignment(alignment, line_width=60):
    """
    Render a pairwise alignment as blocks of three lines: the first
    gapped sequence, a match line and the second gapped sequence.

    In the match line ``|`` marks identical symbols, ``.`` different
    symbols and a space a gap.
    Blocks of `line_width` columns are separated by an empty line.

    Parameters
    ----------
    alignment : Alignment
        A pairwise alignment.
    line_width : int, optional
        The number of columns per block.

    Returns
    -------
    text : str
        The formatted alignment, empty for an empty alignment.

    Examples
    --------

    >>> ali = Alignment.from_strings(["AC-GTA", "ACTGTC"])
    >>> print(format_alignment(ali, line_width=4))
    AC-G
    || |
    ACTG
    <BLANKLINE>
    TA
    |.
    TC
    """
    if len(alignment.sequences) != 2:
        raise ValueError("Only pairwise alignments can be formatted")
    if line_width <= 0:
        raise ValueError(f"'line_width' must be positive, got {line_width}")
    gapped1, gapped2 = alignment.get_gapped_sequences()
    symbols = _symbol_columns(alignment)
    match_line = "".join(
        " " if s1 is None or s2 is None else ("|" if s1 == s2 else ".")
        for s1, s2 in zip(symbols[0], symbols[1])
    )
    blocks = []
    for start in range(0, len(gapped1), line_width):
        stop = start + line_width
        blocks.append(
            "\n".join(
                [gapped1[start:stop], match_line[start:stop], gapped2[start:stop]]
            )
        )
    return "\n\n".join(blocks)
