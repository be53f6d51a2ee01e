# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
A subpackage for handling sequences.

A :class:`Sequence` is an immutable succession of symbols.
The set of symbols, that can occur in a sequence, is defined by an
:class:`Alphabet`.
For example, an unambiguous DNA sequence has an :class:`Alphabet`, that
includes the 4 letters ``'A'``, ``'C'``, ``'G'`` and ``'T'``.
If a :class:`Sequence` is created with a symbol, that is not in its
:class:`Alphabet`, an :class:`AlphabetError` is raised.

Internally, a :class:`Sequence` is saved as a read-only *NumPy*
:class:`ndarray` of integer values, the *sequence code*, where each
integer represents a symbol in the :class:`Alphabet`.
These codes are directly indices into substitution matrices, which
makes alignments over whole sequences vectorizable.

The concrete subclasses :class:`NucleotideSequence` and
:class:`ProteinSequence` provide defined alphabets and sequence type
specific methods.
The class :class:`GeneralSequence` allows the usage of a custom
:class:`Alphabet` without the need to subclass :class:`Sequence`.

Exact substring queries are answered by a :class:`SuffixTree`,
which is also the basis of :func:`find_subsequence()` and the
anchor search of the alignment subpackage.
Approximate matching, i.e. searching with a budget of mismatches or
edits, is covered by functions like :func:`find_with_mismatches()`
and :func:`edit_distance()`.
"""

__name__ = "seqalign.sequence"
__author__ = "Seqalign contributors"

from .alphabet import *
from .sequence import *
from .seqtypes import *
from .suffixtree import *
from .search import *
from .approximate import *
