# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqalign.sequence.align"
__author__ = "Seqalign contributors"
__all__ = ["ScoringScheme", "SIMPLE_DNA", "BLAST_DNA", "HIGH_IDENTITY_DNA"]

from dataclasses import dataclass
import numpy as np
from .matrix import SubstitutionMatrix


@dataclass(frozen=True)
class ScoringScheme:
    """
    The scores and penalties of an alignment with an affine gap model.

    The first gap symbol of a contiguous gap run is scored with
    `gap_open`, every further gap symbol of the same run with
    `gap_extend`.
    Hence, a gap of length *n* costs
    ``gap_open + (n-1) * gap_extend``.

    No sign constraints are enforced, but penalties are usually
    negative and `match` should exceed `mismatch`.
    Objects of this class are immutable and can be shared between
    alignment calls.

    Parameters
    ----------
    match : int
        Score for two identical symbols.
    mismatch : int
        Score for two different symbols.
    gap_open : int
        Score for the first symbol of a gap.
    gap_extend : int
        Score for each further symbol of a gap.

    Examples
    --------

    >>> scoring = ScoringScheme(match=2, mismatch=-3, gap_open=-5, gap_extend=-2)
    >>> print(scoring.gap_cost(3))
    -9
    >>> scoring == BLAST_DNA
    True
    """

    match: int
    mismatch: int
    gap_open: int
    gap_extend: int

    def __post_init__(self):
        for name in ("match", "mismatch", "gap_open", "gap_extend"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise TypeError(
                    f"'{name}' must be an integer, not '{type(value).__name__}'"
                )

    def gap_cost(self, length):
        """
        Get the score of a contiguous gap.

        Parameters
        ----------
        length : int
            The length of the gap.

        Returns
        -------
        cost : int
            The gap score, 0 for a length of 0.
        """
        if length <= 0:
            return 0
        return self.gap_open + (length - 1) * self.gap_extend

    def substitution_matrix(self, alphabet, alphabet2=None):
        """
        Create the :class:`SubstitutionMatrix` that scores identical
        symbols with `match` and all other pairs with `mismatch`.

        Parameters
        ----------
        alphabet : Alphabet
            The alphabet of the first sequence.
        alphabet2 : Alphabet, optional
            The alphabet of the second sequence.
            By default the same as `alphabet`.

        Returns
        -------
        matrix : SubstitutionMatrix
            The match/mismatch matrix.
        """
        if alphabet2 is None:
            alphabet2 = alphabet
        symbols1 = [_fold_case(s) for s in alphabet.get_symbols()]
        symbols2 = [_fold_case(s) for s in alphabet2.get_symbols()]
        identical = np.array(
            [[s1 == s2 for s2 in symbols2] for s1 in symbols1], dtype=bool
        ).reshape(len(symbols1), len(symbols2))
        scores = np.where(identical, self.match, self.mismatch)
        return SubstitutionMatrix(alphabet, alphabet2, scores)

    @staticmethod
    def default():
        """
        Get the default scoring, which is :data:`SIMPLE_DNA`.

        Returns
        -------
        scoring : ScoringScheme
            The default scoring.
        """
        return SIMPLE_DNA


def _fold_case(symbol):
    return symbol.upper() if isinstance(symbol, str) else symbol


#: Unit scores: match 1, mismatch -1, gap open -2, gap extension -1
SIMPLE_DNA = ScoringScheme(match=1, mismatch=-1, gap_open=-2, gap_extend=-1)
#: The *BLASTN* defaults: match 2, mismatch -3, gap open -5, gap extension -2
BLAST_DNA = ScoringScheme(match=2, mismatch=-3, gap_open=-5, gap_extend=-2)
#: For closely related sequences: match 5, mismatch -4, gap open -10,
#: gap extension -1
HIGH_IDENTITY_DNA = ScoringScheme(match=5, mismatch=-4, gap_open=-10, gap_extend=-1)
