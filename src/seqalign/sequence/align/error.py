# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqalign.sequence.align"
__author__ = "Seqalign contributors"
__all__ = ["AlignmentCancelledError"]


class AlignmentCancelledError(Exception):
    """
    Indicates that an alignment was stopped, because its cancellation
    token was set.
    """

    pass
