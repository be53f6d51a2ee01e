# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import numpy as np


def random_sequence(rng, length, symbols="ACGT"):
    """
    Create a random string from the given symbols.
    """
    indices = rng.integers(len(symbols), size=length)
    return "".join(np.array(list(symbols))[indices])


def mutate(rng, sequence, n_substitutions=0, n_insertions=0, n_deletions=0,
           symbols="ACGT"):
    """
    Introduce random substitutions, insertions and deletions into a
    string.
    """
    sequence = list(sequence)
    for _ in range(n_substitutions):
        pos = rng.integers(len(sequence))
        sequence[pos] = symbols[rng.integers(len(symbols))]
    for _ in range(n_insertions):
        pos = rng.integers(len(sequence) + 1)
        sequence.insert(pos, symbols[rng.integers(len(symbols))])
    for _ in range(n_deletions):
        if len(sequence) == 0:
            break
        del sequence[rng.integers(len(sequence))]
    return "".join(sequence)
