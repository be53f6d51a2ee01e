# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqalign.sequence.align"
__author__ = "Seqalign contributors"
__all__ = ["SubstitutionMatrix"]

import functools
import os
import numpy as np
from ..seqtypes import NucleotideSequence, ProteinSequence


class SubstitutionMatrix(object):
    """
    A :class:`SubstitutionMatrix` assigns a score to each pairing of a
    symbol from a first alphabet with a symbol from a second alphabet.

    The scores are stored in a read-only *(m x n)* :class:`ndarray`
    (dtype :attr:`numpy.int32`), indexed by the symbol codes of the
    *m*-length alphabet 1 and the *n*-length alphabet 2.
    Hence, an alignment can look up the scores of whole sequence code
    arrays at once.

    A matrix is created from

        - a score :class:`ndarray` of matching shape,
        - a dictionary mapping each ``(symbol1, symbol2)`` pair to a
          score or
        - the name of a matrix in the bundled database
          (see :meth:`list_db()`):

            - **BLOSUM62** - The NCBI BLOSUM62 protein matrix
            - **NUC** - The NCBI NUC.4.4 nucleotide matrix,
              usable with the ambiguous nucleotide alphabet

    Objects of this class are immutable and can be shared freely
    between threads.

    Parameters
    ----------
    alphabet1 : Alphabet, length=m
        The first alphabet of the substitution matrix.
    alphabet2 : Alphabet, length=n
        The second alphabet of the substitution matrix.
    score_matrix : ndarray, shape=(m,n) or dict or str
        The scores as code indexed array, as dictionary or as name of
        a database matrix.

    Raises
    ------
    KeyError
        If the matrix dictionary misses a symbol pair.

    Examples
    --------

    >>> alph1 = Alphabet(["foo","bar"])
    >>> alph2 = Alphabet([1,2,3])
    >>> matrix_dict = {("foo",1):5,  ("foo",2):10, ("foo",3):15,
    ...                ("bar",1):42, ("bar",2):42, ("bar",3):42}
    >>> matrix = SubstitutionMatrix(alph1, alph2, matrix_dict)
    >>> print(matrix.score_matrix())
    [[ 5 10 15]
     [42 42 42]]
    >>> print(matrix.get_score("foo", 2))
    10

    >>> alph = NucleotideSequence.alphabet_unamb
    >>> matrix = SubstitutionMatrix(alph, alph, np.identity(len(alph)))
    >>> print(matrix)
        A   C   G   T
    A   1   0   0   0
    C   0   1   0   0
    G   0   0   1   0
    T   0   0   0   1
    """

    _db_dir = os.path.join(os.path.dirname(os.path.realpath(__file__)), "matrix_data")

    def __init__(self, alphabet1, alphabet2, score_matrix):
        self._alph1 = alphabet1
        self._alph2 = alphabet2
        if isinstance(score_matrix, dict):
            self._matrix = self._matrix_from_dict(score_matrix)
        elif isinstance(score_matrix, np.ndarray):
            alph_shape = (len(alphabet1), len(alphabet2))
            if score_matrix.shape != alph_shape:
                raise ValueError(
                    f"Matrix has shape {score_matrix.shape}, "
                    f"but {alph_shape} is required"
                )
            self._matrix = score_matrix.astype(np.int32)
        elif isinstance(score_matrix, str):
            self._matrix = self._matrix_from_dict(
                SubstitutionMatrix.dict_from_db(score_matrix)
            )
        else:
            raise TypeError(
                "Matrix must be either a dictionary, an 2-D ndarray or a string"
            )
        self._matrix.setflags(write=False)

    def __repr__(self):
        """Represent SubstitutionMatrix as a string for debugging."""
        return (
            f"SubstitutionMatrix({self._alph1!r}, {self._alph2!r}, "
            f"np.{np.array_repr(self._matrix)})"
        )

    def __eq__(self, item):
        if not isinstance(item, SubstitutionMatrix):
            return False
        if self._alph1 != item.get_alphabet1():
            return False
        if self._alph2 != item.get_alphabet2():
            return False
        return np.array_equal(self._matrix, item.score_matrix())

    def __hash__(self):
        return hash((self._alph1, self._alph2, self._matrix.tobytes()))

    def _matrix_from_dict(self, matrix_dict):
        matrix = np.zeros((len(self._alph1), len(self._alph2)), dtype=np.int32)
        for i, sym1 in enumerate(self._alph1):
            for j, sym2 in enumerate(self._alph2):
                matrix[i, j] = int(matrix_dict[sym1, sym2])
        return matrix

    def get_alphabet1(self):
        """
        Get the first alphabet.

        Returns
        -------
        alphabet : Alphabet
            The first alphabet.
        """
        return self._alph1

    def get_alphabet2(self):
        """
        Get the second alphabet.

        Returns
        -------
        alphabet : Alphabet
            The second alphabet.
        """
        return self._alph2

    def score_matrix(self):
        """
        Get the 2-D :class:`ndarray` containing the score values.

        Returns
        -------
        matrix : ndarray, shape=(m,n), dtype=np.int32
            The symbol code indexed score matrix.
            The array is read-only.
        """
        return self._matrix

    def transpose(self):
        """
        Get a copy of this instance, where the alphabets are
        interchanged.

        Returns
        -------
        transposed : SubstitutionMatrix
            The transposed substitution matrix.
        """
        return SubstitutionMatrix(self._alph2, self._alph1, self._matrix.T)

    def is_symmetric(self):
        """
        Check whether both alphabets are identical and the score matrix
        is symmetric.

        Returns
        -------
        is_symmetric : bool
            True, if the matrix is symmetric.
        """
        return self._alph1 == self._alph2 and np.array_equal(
            self._matrix, self._matrix.T
        )

    def covers(self, alphabet1, alphabet2):
        """
        Check whether the codes of sequences with the given alphabets
        are valid indices of this matrix.

        Parameters
        ----------
        alphabet1, alphabet2 : Alphabet
            The alphabets of the first and second sequence.

        Returns
        -------
        covers : bool
            True, if the matrix alphabets extend the given alphabets.
        """
        return self._alph1.extends(alphabet1) and self._alph2.extends(alphabet2)

    def get_score_by_code(self, code1, code2):
        """
        Get the substitution score of two symbols,
        represented by their code.

        Parameters
        ----------
        code1, code2 : int
            Symbol codes of the two symbols to be aligned.

        Returns
        -------
        score : int
            The substitution score.
        """
        return int(self._matrix[code1, code2])

    def get_score(self, symbol1, symbol2):
        """
        Get the substitution score of two symbols.

        Parameters
        ----------
        symbol1, symbol2 : object
            Symbols to be aligned.

        Returns
        -------
        score : int
            The substitution score.
        """
        code1 = self._alph1.encode(symbol1)
        code2 = self._alph2.encode(symbol2)
        return int(self._matrix[code1, code2])

    def shape(self):
        """
        Get the shape (i.e. the length of both alphabets)
        of the substitution matrix.

        Returns
        -------
        shape : tuple
            Matrix shape.
        """
        return (len(self._alph1), len(self._alph2))

    def __str__(self):
        # NCBI matrix format
        lines = [" " + "".join(f" {symbol:>3}" for symbol in self._alph2)]
        for i, symbol in enumerate(self._alph1):
            lines.append(
                f"{symbol:>1}"
                + "".join(f" {int(score):>3d}" for score in self._matrix[i])
            )
        return "\n".join(lines)

    @staticmethod
    def dict_from_str(string):
        """
        Create a matrix dictionary from a string in NCBI matrix format.

        Symbols of the first alphabet are taken from the left column,
        symbols of the second alphabet are taken from the top row.
        Lines starting with ``#`` are comments.

        Parameters
        ----------
        string : str
            The matrix in NCBI format.

        Returns
        -------
        matrix_dict : dict
            A dictionary mapping symbol pairs to scores.
        """
        lines = [line.strip() for line in string.split("\n")]
        lines = [line for line in lines if len(line) != 0 and line[0] != "#"]
        symbols1 = [line.split()[0] for line in lines[1:]]
        symbols2 = lines[0].split()
        scores = np.array([line.split()[1:] for line in lines[1:]]).astype(int)
        if scores.shape != (len(symbols1), len(symbols2)):
            raise ValueError(
                f"Matrix has {scores.shape[0]} rows and {scores.shape[1]} "
                f"columns, but {len(symbols1)}x{len(symbols2)} symbols"
            )
        return {
            (symbols1[i], symbols2[j]): int(scores[i, j])
            for i in range(len(symbols1))
            for j in range(len(symbols2))
        }

    @staticmethod
    def dict_from_db(matrix_name):
        """
        Create a matrix dictionary from the name of a matrix in the
        bundled database.

        Parameters
        ----------
        matrix_name : str
            The matrix name, as given by :meth:`list_db()`.

        Returns
        -------
        matrix_dict : dict
            A dictionary mapping symbol pairs to scores.

        Raises
        ------
        ValueError
            If there is no matrix with the given name.
        """
        if matrix_name not in SubstitutionMatrix.list_db():
            raise ValueError(f"Unknown substitution matrix '{matrix_name}'")
        filename = os.path.join(SubstitutionMatrix._db_dir, matrix_name + ".mat")
        with open(filename, "r") as f:
            return SubstitutionMatrix.dict_from_str(f.read())

    @staticmethod
    def list_db():
        """
        List all matrix names in the bundled database.

        Returns
        -------
        db_list : list
            List of matrix names.
        """
        return [
            file[:-4]
            for file in sorted(os.listdir(SubstitutionMatrix._db_dir))
            if file.endswith(".mat")
        ]

    @staticmethod
    @functools.cache
    def std_protein_matrix():
        """
        Get the default :class:`SubstitutionMatrix` for protein sequence
        alignments, which is BLOSUM62.

        Returns
        -------
        matrix : SubstitutionMatrix
            Default matrix.
        """
        return SubstitutionMatrix(
            ProteinSequence.alphabet, ProteinSequence.alphabet, "BLOSUM62"
        )

    @staticmethod
    @functools.cache
    def std_nucleotide_matrix():
        """
        Get the default :class:`SubstitutionMatrix` for nucleotide
        sequence alignments, which is NUC.4.4.

        Returns
        -------
        matrix : SubstitutionMatrix
            Default matrix.
        """
        return SubstitutionMatrix(
            NucleotideSequence.alphabet_amb, NucleotideSequence.alphabet_amb, "NUC"
        )
