# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This is the top-level package of *Seqalign*.
It does not provide alignment functionality by itself, but it holds
the base classes shared by the subpackages.
The sequence model, the exact and approximate matching functions and
the alignment engines live in :mod:`seqalign.sequence` and
:mod:`seqalign.sequence.align`.
"""

__version__ = "0.3.0"
__name__ = "seqalign"
__author__ = "Seqalign contributors"

from .copyable import *
