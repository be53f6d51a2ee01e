import numpy as np
import pytest


@pytest.fixture(scope="session")
def related_sequences():
    """
    A random nucleotide sequence and a mutated copy of it, to avoid
    biasing benchmarks with the time needed to create them.
    """
    LENGTH = 1000
    N_MUTATIONS = 30

    rng = np.random.default_rng(0)
    seq1 = rng.choice(list("ACGT"), size=LENGTH)
    seq2 = seq1.copy()
    positions = rng.choice(LENGTH, size=N_MUTATIONS, replace=False)
    seq2[positions] = rng.choice(list("ACGT"), size=N_MUTATIONS)
    # Delete a block to enforce a gap
    seq2 = np.delete(seq2, np.arange(500, 520))
    return "".join(seq1), "".join(seq2)
