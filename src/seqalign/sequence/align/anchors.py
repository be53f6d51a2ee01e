# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqalign.sequence.align"
__author__ = "Seqalign contributors"
__all__ = ["Anchor", "find_anchors", "chain_anchors", "align_anchored"]

import logging
import warnings
from collections import namedtuple
import numpy as np
from ..suffixtree import SuffixTree
from .alignment import Alignment, AlignmentType, score
from .pairwise import _to_sequences, align_pairwise
from .scoring import ScoringScheme

_logger = logging.getLogger("seqalign.sequence.align.anchors")


class Anchor(namedtuple("Anchor", ["start1", "start2", "length"])):
    """
    An exact match of `length` symbols at `start1` in the first
    sequence and at `start2` in the second sequence.
    """

    __slots__ = ()

    @property
    def end1(self):
        return self.start1 + self.length

    @property
    def end2(self):
        return self.start2 + self.length


def find_anchors(tree, query, min_length=8):
    """
    Find exact matches between an indexed sequence and a query.

    The query is scanned from left to right:
    At each position the longest prefix of the remaining query, that
    occurs in the indexed sequence, becomes an anchor, if it has at
    least `min_length` symbols.
    The scan continues behind the anchor, or at the next position if no
    anchor was found.

    Parameters
    ----------
    tree : SuffixTree
        The index of the first sequence.
    query : Sequence or str
        The second sequence.
    min_length : int, optional
        The minimum anchor length.

    Returns
    -------
    anchors : list of Anchor
        The anchors in order of their query position.
        The first sequence position is the leftmost occurrence.

    Examples
    --------

    >>> tree = SuffixTree("TTTTACGTACGTTTTT")
    >>> for anchor in find_anchors(tree, "GGACGTACGTGG", min_length=4):
    ...     print(anchor)
    Anchor(start1=4, start2=2, length=8)
    """
    if min_length <= 0:
        raise ValueError(f"The minimum anchor length must be positive, got {min_length}")
    # Decode once, instead of once per position
    symbols = list(query)
    anchors = []
    pos = 0
    while pos < len(symbols):
        length, position = tree.longest_prefix_match(symbols, pos)
        if length >= min_length:
            anchors.append(Anchor(position, pos, length))
            pos += length
        else:
            pos += 1
    return anchors


def chain_anchors(anchors):
    """
    Select the largest set of anchors, that is collinear in both
    sequences.

    Anchors overlapping with a preceding anchor are dropped, unless
    they are longer, in which case they replace it.
    The remaining anchors are chained by a longest increasing
    subsequence, where each anchor must end before the next one starts
    in both sequences.

    Parameters
    ----------
    anchors : iterable of Anchor
        The anchors to chain.

    Returns
    -------
    chain : list of Anchor
        The chained anchors, ordered by position.
    """
    anchors = sorted(anchors, key=lambda anchor: (anchor.start1, anchor.start2))
    cleaned = []
    for anchor in anchors:
        if len(cleaned) > 0:
            last = cleaned[-1]
            if anchor.start1 < last.end1 or anchor.start2 < last.end2:
                if anchor.length > last.length:
                    cleaned[-1] = anchor
                continue
        cleaned.append(anchor)
    if len(cleaned) == 0:
        return []

    # 'chain_lengths[i]' is the length of the longest chain ending at i
    chain_lengths = np.ones(len(cleaned), dtype=int)
    predecessors = np.full(len(cleaned), -1, dtype=int)
    for i in range(1, len(cleaned)):
        for j in range(i):
            if (
                cleaned[j].end1 <= cleaned[i].start1
                and cleaned[j].end2 <= cleaned[i].start2
                and chain_lengths[j] + 1 > chain_lengths[i]
            ):
                chain_lengths[i] = chain_lengths[j] + 1
                predecessors[i] = j
    chain = []
    i = int(np.argmax(chain_lengths))
    while i != -1:
        chain.append(cleaned[i])
        i = predecessors[i]
    return chain[::-1]


def align_anchored(
    seq1, seq2, scoring=None, min_anchor_length=8, matrix=None, cancel=None
):
    """
    Perform a global alignment of two similar sequences, guided by
    exact matches.

    Exact matches of at least `min_anchor_length` symbols are found
    with a :class:`SuffixTree` of the first sequence and chained with
    :func:`chain_anchors()`.
    Only the segments between the anchors are aligned with
    :func:`align_pairwise()`, which is much faster than a complete
    alignment for closely related sequences.
    If no anchor is found, a complete global alignment is performed.

    The result is not necessarily an optimal alignment.

    Parameters
    ----------
    seq1, seq2 : Sequence or str
        The sequences to be aligned.
    scoring : ScoringScheme, optional
        The scoring of the segment alignments.
        By default :data:`SIMPLE_DNA`.
    min_anchor_length : int, optional
        The minimum length of exact matches used as anchors.
    matrix : SubstitutionMatrix, optional
        The substitution matrix of the segment alignments.
    cancel : object, optional
        A cancellation token with an ``is_set()`` method.

    Returns
    -------
    alignment : Alignment
        The global alignment.
        The score is calculated with :func:`score()` over the complete
        alignment.

    Warns
    -----
    UserWarning
        If no anchor was found.

    Examples
    --------

    >>> seq1 = "ACGTACGTTTGCATGCATAAAA"
    >>> seq2 = "ACGTACGTCCGCATGCATAAAA"
    >>> ali = align_anchored(seq1, seq2, min_anchor_length=6)
    >>> print(ali)
    ACGTACGTTTGCATGCATAAAA
    ACGTACGTCCGCATGCATAAAA
    >>> print(ali.score)
    18
    """
    if seq1 is None:
        raise TypeError("'seq1' must be a sequence or a string, not None")
    if seq2 is None:
        raise TypeError("'seq2' must be a sequence or a string, not None")
    if scoring is None:
        scoring = ScoringScheme.default()
    seq1, seq2 = _to_sequences(seq1, seq2, matrix)
    if len(seq1) == 0 or len(seq2) == 0:
        return align_pairwise(seq1, seq2, scoring, matrix=matrix, cancel=cancel)

    tree = SuffixTree(seq1)
    chain = chain_anchors(find_anchors(tree, seq2, min_anchor_length))
    _logger.debug("Chained %d anchors", len(chain))
    if len(chain) == 0:
        warnings.warn(
            "No anchor was found, falling back to a complete global alignment"
        )
        return align_pairwise(seq1, seq2, scoring, matrix=matrix, cancel=cancel)

    traces = []
    pos1 = 0
    pos2 = 0
    for anchor in chain + [Anchor(len(seq1), len(seq2), 0)]:
        segment = align_pairwise(
            seq1[pos1 : anchor.start1],
            seq2[pos2 : anchor.start2],
            scoring,
            AlignmentType.GLOBAL,
            matrix,
            cancel=cancel,
        )
        traces.append(_shift(segment.trace, pos1, pos2))
        offsets = np.arange(anchor.length, dtype=np.int64)
        traces.append(
            np.stack([anchor.start1 + offsets, anchor.start2 + offsets], axis=-1)
        )
        pos1 = anchor.end1
        pos2 = anchor.end2

    alignment = Alignment([seq1, seq2], np.concatenate(traces), None)
    return Alignment(
        alignment.sequences,
        alignment.trace,
        score(alignment, scoring, matrix),
        AlignmentType.GLOBAL,
    )


def _shift(trace, offset1, offset2):
    shifted = trace.copy()
    shifted[trace[:, 0] != -1, 0] += offset1
    shifted[trace[:, 1] != -1, 1] += offset2
    return shifted
