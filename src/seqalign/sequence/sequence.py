# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
The module contains the :class:`Sequence` superclass.
"""

__name__ = "seqalign.sequence"
__author__ = "Seqalign contributors"
__all__ = ["Sequence"]

import abc
import numbers
import numpy as np
from ..copyable import Copyable
from .alphabet import LetterAlphabet


_size_uint8 = np.iinfo(np.uint8).max + 1
_size_uint16 = np.iinfo(np.uint16).max + 1
_size_uint32 = np.iinfo(np.uint32).max + 1


class Sequence(Copyable, metaclass=abc.ABCMeta):
    """
    The abstract base class for all sequence types.

    A :class:`Sequence` is an immutable succession of symbols from the
    :class:`Alphabet` returned by :func:`get_alphabet()`.
    Internally the symbols are stored as *sequence code*, a read-only
    :class:`ndarray` of symbol codes, that is accessible via
    :attr:`code`.
    The dtype of the code array is the smallest unsigned integer type
    that can hold every code of the alphabet.

    Symbols are validated, when the sequence is created:
    An :class:`AlphabetError` is raised for a symbol that is not in the
    alphabet.
    Afterwards the sequence cannot be changed anymore.
    Operations like :func:`reverse()` or indexing with a slice create
    new sequence objects.

    Parameters
    ----------
    sequence : iterable object, optional
        The symbols of the sequence.
        Sequences with a :class:`LetterAlphabet` also accept a
        :class:`str`.
        By default the sequence is empty.

    Attributes
    ----------
    code : ndarray
        The read-only sequence code.
    symbols : list
        The symbols, decoded from the sequence code.
    """

    def __init__(self, sequence=()):
        self._seq_code = self._encode(sequence)

    def _encode(self, symbols):
        alphabet = self.get_alphabet()
        dtype = Sequence.dtype(len(alphabet))
        code = alphabet.encode_multiple(symbols, dtype)
        return Sequence._freeze(code.astype(dtype, copy=False))

    @staticmethod
    def _freeze(code):
        code = np.array(code, copy=True)
        code.setflags(write=False)
        return code

    def __copy_create__(self):
        return type(self)()

    def __copy_fill__(self, clone):
        super().__copy_fill__(clone)
        clone._seq_code = self._seq_code

    def copy(self, new_seq_code=None):
        """
        Copy the object.

        Parameters
        ----------
        new_seq_code : ndarray, optional
            If this parameter is set, the sequence code of the copy is
            replaced by this array, with its codes checked against the
            alphabet.

        Returns
        -------
        copy
            A copy of this object.
        """
        clone = super().copy()
        if new_seq_code is not None:
            new_seq_code = np.asarray(new_seq_code)
            alph_length = len(self.get_alphabet())
            if len(new_seq_code) > 0 and (
                new_seq_code.min() < 0 or new_seq_code.max() >= alph_length
            ):
                raise ValueError(
                    "The sequence code contains codes that are not valid "
                    "in the alphabet"
                )
            clone._seq_code = Sequence._freeze(
                new_seq_code.astype(Sequence.dtype(alph_length))
            )
        return clone

    @property
    def code(self):
        return self._seq_code

    @property
    def symbols(self):
        symbols = self.get_alphabet().decode_multiple(self._seq_code)
        if isinstance(symbols, np.ndarray):
            # Python objects instead of NumPy scalars
            return symbols.tolist()
        return list(symbols)

    @abc.abstractmethod
    def get_alphabet(self):
        """
        Get the :class:`Alphabet` of the :class:`Sequence`.

        This method must be overwritten, when subclassing
        :class:`Sequence`.

        Returns
        -------
        alphabet : Alphabet
            :class:`Sequence` alphabet.
        """
        pass

    def reverse(self):
        """
        Reverse the :class:`Sequence`.

        Returns
        -------
        reversed : Sequence
            The reversed :class:`Sequence`.

        Examples
        --------

        >>> dna_seq = NucleotideSequence("ACGTA")
        >>> print(dna_seq.reverse())
        ATGCA
        """
        return self.copy(self._seq_code[::-1])

    def get_symbol_frequency(self):
        """
        Get the number of occurrences of each symbol in the alphabet.

        Returns
        -------
        frequency : dict
            A dictionary mapping each alphabet symbol to its count.

        Examples
        --------

        >>> print(NucleotideSequence("ACGAA").get_symbol_frequency())
        {'A': 3, 'C': 1, 'G': 1, 'T': 0}
        """
        alphabet = self.get_alphabet()
        counts = np.bincount(self._seq_code, minlength=len(alphabet))
        return {symbol: int(count) for symbol, count in zip(alphabet, counts)}

    def __getitem__(self, index):
        alph = self.get_alphabet()
        sub_seq = self._seq_code.__getitem__(index)
        if isinstance(sub_seq, np.ndarray):
            return self.copy(sub_seq)
        else:
            return alph.decode(sub_seq)

    def __setitem__(self, index, item):
        raise TypeError(f"'{type(self).__name__}' objects are immutable")

    def __len__(self):
        return len(self._seq_code)

    def __iter__(self):
        alph = self.get_alphabet()
        for code in self._seq_code:
            yield alph.decode(code)

    def __eq__(self, item):
        if not isinstance(item, Sequence):
            return False
        if self.get_alphabet() != item.get_alphabet():
            return False
        return np.array_equal(self._seq_code, item._seq_code)

    def __hash__(self):
        return hash((self.get_alphabet(), self._seq_code.tobytes()))

    def __str__(self):
        alph = self.get_alphabet()
        if isinstance(alph, LetterAlphabet):
            return alph.decode_multiple(self._seq_code, as_bytes=True).tobytes().decode(
                "ASCII"
            )
        else:
            return ", ".join([str(e) for e in alph.decode_multiple(self._seq_code)])

    def __add__(self, sequence):
        if self.get_alphabet().extends(sequence.get_alphabet()):
            new_seq = self.copy(np.concatenate((self._seq_code, sequence.code)))
        elif sequence.get_alphabet().extends(self.get_alphabet()):
            new_seq = sequence.copy(np.concatenate((self._seq_code, sequence.code)))
        else:
            raise ValueError("The sequences alphabets are not compatible")
        return new_seq

    @staticmethod
    def dtype(alphabet_size):
        """
        Get the sequence code dtype required for the given size of the
        alphabet.

        Parameters
        ----------
        alphabet_size : int
            The number of symbols in the alphabet.

        Returns
        -------
        dtype
            The :class:`numpy.dtype` suitable for the alphabet.
        """
        if not isinstance(alphabet_size, numbers.Integral) or alphabet_size < 0:
            raise ValueError(f"Invalid alphabet size {alphabet_size}")
        if alphabet_size <= _size_uint8:
            return np.uint8
        elif alphabet_size <= _size_uint16:
            return np.uint16
        elif alphabet_size <= _size_uint32:
            return np.uint32
        else:
            return np.uint64

