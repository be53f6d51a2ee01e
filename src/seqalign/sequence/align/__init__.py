# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This subpackage provides functionality for sequence alignments.

An alignment cannot be directly represented as list of :class:`Sequence`
objects, since a gap indicates the absence of any symbol.
Instead, the aligning functions return :class:`Alignment` instances.
These objects contain the original sequences and a *trace*, that
describes which positions (indices) in the sequences are aligned,
together with the alignment score.

Alignments are scored with an affine gap model:
A :class:`ScoringScheme` holds match and mismatch scores and the gap
opening and extension penalties.
For sequences, where not all mismatches are equal, the match and
mismatch scores are replaced by a :class:`SubstitutionMatrix`, that
provides a score for each symbol combination of two alphabets.

The aligning functions are

    - :func:`align_pairwise()` for optimal global, local and
      semi-global alignments of two sequences,
    - :func:`align_multiple()` for center star alignments of multiple
      sequences and
    - :func:`align_anchored()` for fast global alignments of closely
      related sequences, guided by exact matches.

Long running alignments can be stopped via a cancellation token, which
raises an :class:`AlignmentCancelledError`.
"""

__name__ = "seqalign.sequence.align"
__author__ = "Seqalign contributors"

from .matrix import *
from .scoring import *
from .alignment import *
from .error import *
from .pairwise import *
from .multiple import *
from .statistics import *
from .anchors import *
