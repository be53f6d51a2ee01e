# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqalign.sequence"
__author__ = "Seqalign contributors"
__all__ = [
    "Alphabet",
    "LetterAlphabet",
    "AlphabetMapper",
    "AlphabetError",
    "common_alphabet",
]

import string
from numbers import Integral
import numpy as np


class Alphabet(object):
    """
    An :class:`Alphabet` defines the symbols a :class:`Sequence` may
    contain and translates between symbols and *symbol codes*.

    The symbol code of a symbol is its index in the symbol list given
    to the constructor.
    Symbols may be any hashable Python object, although for biological
    sequences they are usually single letters.
    Encoding a symbol that is not part of the alphabet raises an
    :class:`AlphabetError`.

    An alphabet *1* *extends* an alphabet *2*, if alphabet *1* starts
    with exactly the symbols of alphabet *2* (in the same order) and
    optionally appends further symbols.
    Hence, codes from alphabet *2* are valid codes in alphabet *1*.
    Every alphabet extends itself.

    Objects of this class are immutable.

    Parameters
    ----------
    symbols : iterable object
        The allowed symbols.
        The code of a symbol is its index in this list.

    Examples
    --------

    >>> alph = Alphabet(["A","C","G","T"])
    >>> print(alph.encode("G"))
    2
    >>> print(alph.decode(2))
    G
    >>> try:
    ...    alph.encode("foo")
    ... except AlphabetError as e:
    ...    print(e)
    Symbol 'foo' is not in the alphabet

    >>> Alphabet(["A","C","G","T","U"]).extends(Alphabet(["A","C","G","T"]))
    True
    >>> Alphabet(["A","C","G","T"]).extends(Alphabet(["A","C","T","G"]))
    False
    """

    def __init__(self, symbols):
        if len(symbols) == 0:
            raise ValueError("Symbol list is empty")
        self._symbols = tuple(symbols)
        self._symbol_dict = {symbol: i for i, symbol in enumerate(self._symbols)}

    def __repr__(self):
        """Represent Alphabet as a string for debugging."""
        return f"Alphabet({self._symbols})"

    def get_symbols(self):
        """
        Get the symbols in the alphabet.

        Returns
        -------
        symbols : tuple
            The symbols.
        """
        return self._symbols

    def extends(self, alphabet):
        """
        Check, if this alphabet extends another alphabet.

        Parameters
        ----------
        alphabet : Alphabet
            The potential parent alphabet.

        Returns
        -------
        result : bool
            True, if this object extends `alphabet`, false otherwise.
        """
        if alphabet is self:
            return True
        elif len(alphabet) > len(self):
            return False
        else:
            return alphabet.get_symbols() == self.get_symbols()[: len(alphabet)]

    def encode(self, symbol):
        """
        Encode a single symbol.

        Parameters
        ----------
        symbol : object
            The symbol to encode.

        Returns
        -------
        code : int
            The symbol code of `symbol`.

        Raises
        ------
        AlphabetError
            If `symbol` is not in the alphabet.
        """
        try:
            return self._symbol_dict[symbol]
        except (KeyError, TypeError):
            raise AlphabetError(f"Symbol {repr(symbol)} is not in the alphabet")

    def decode(self, code):
        """
        Decode a single symbol code.

        Parameters
        ----------
        code : int
            The symbol code to decode.

        Returns
        -------
        symbol : object
            The symbol belonging to `code`.

        Raises
        ------
        AlphabetError
            If `code` is not a valid code in the alphabet.
        """
        if code < 0 or code >= len(self._symbols):
            raise AlphabetError(f"'{code:d}' is not a valid code")
        return self._symbols[code]

    def encode_multiple(self, symbols, dtype=np.int64):
        """
        Encode an iterable of symbols into a sequence code.

        Parameters
        ----------
        symbols : iterable object
            The symbols to encode.
        dtype : dtype, optional
            The dtype of the returned array.

        Returns
        -------
        code : ndarray
            The sequence code.
        """
        return np.array([self.encode(e) for e in symbols], dtype=dtype)

    def decode_multiple(self, code):
        """
        Decode a sequence code into a list of symbols.

        Parameters
        ----------
        code : ndarray
            The sequence code to decode.

        Returns
        -------
        symbols : list
            The decoded symbols.
        """
        return [self.decode(c) for c in code]

    def is_letter_alphabet(self):
        """
        Check whether all symbols are single printable letters, so that
        the alphabet could be expressed as :class:`LetterAlphabet`.

        Returns
        -------
        is_letter_alphabet : bool
            True, if all symbols are ``str`` or ``bytes`` of length 1
            and printable.
        """
        for symbol in self:
            if not isinstance(symbol, (str, bytes)) or len(symbol) != 1:
                return False
            if isinstance(symbol, str):
                if not symbol.isascii():
                    return False
                symbol = symbol.encode("ASCII")
            if symbol not in LetterAlphabet.PRINTABLES:
                return False
        return True

    def __str__(self):
        return str(self.get_symbols())

    def __len__(self):
        return len(self.get_symbols())

    def __iter__(self):
        return self.get_symbols().__iter__()

    def __contains__(self, symbol):
        return symbol in self.get_symbols()

    def __hash__(self):
        return hash(tuple(self.get_symbols()))

    def __eq__(self, item):
        if item is self:
            return True
        if not isinstance(item, Alphabet):
            return False
        return self.get_symbols() == item.get_symbols()


class LetterAlphabet(Alphabet):
    """
    :class:`Alphabet` subclass for single letter symbols, as used by
    nucleotide and protein sequences.

    The symbols are limited to the 94 printable, non-whitespace ASCII
    characters.
    Encoding and decoding is performed with *NumPy* lookup tables
    instead of a dictionary, so that whole strings are converted in a
    single vectorized step.

    Parameters
    ----------
    symbols : iterable object or str or bytes
        The allowed symbols.
        The code of a symbol is its index in this list.

    Examples
    --------

    >>> alph = LetterAlphabet("ACGT")
    >>> print(alph.encode_multiple("GATTACA"))
    [2 0 3 3 0 1 0]
    >>> print("".join(alph.decode_multiple([3, 2, 1, 0])))
    TGCA
    """

    PRINTABLES = (string.digits + string.ascii_letters + string.punctuation).encode(
        "ASCII"
    )
    # Marks bytes without a symbol code in the encoding table
    _NO_CODE = np.iinfo(np.int16).max

    def __init__(self, symbols):
        if len(symbols) == 0:
            raise ValueError("Symbol list is empty")
        byte_symbols = []
        for symbol in symbols:
            if not isinstance(symbol, (str, bytes)) or len(symbol) != 1:
                raise ValueError(f"Symbol '{symbol}' is not a single letter")
            if isinstance(symbol, str):
                if not symbol.isascii():
                    raise ValueError(f"Symbol {repr(symbol)} is not ASCII")
                symbol = symbol.encode("ASCII")
            if symbol not in LetterAlphabet.PRINTABLES:
                raise ValueError(
                    f"Symbol {repr(symbol)} is not printable or whitespace"
                )
            byte_symbols.append(symbol)
        self._symbols = np.frombuffer(b"".join(byte_symbols), dtype=np.ubyte).copy()
        self._symbols.setflags(write=False)
        # Lookup table from byte value to symbol code,
        # the first occurrence of a symbol determines its code
        self._encoding_table = np.full(256, LetterAlphabet._NO_CODE, dtype=np.int16)
        for code in range(len(self._symbols) - 1, -1, -1):
            self._encoding_table[self._symbols[code]] = code
        self._encoding_table.setflags(write=False)

    def __repr__(self):
        """Represent LetterAlphabet as a string for debugging."""
        return f"LetterAlphabet({self.get_symbols()})"

    def extends(self, alphabet):
        if alphabet is self:
            return True
        elif isinstance(alphabet, LetterAlphabet):
            if len(alphabet._symbols) > len(self._symbols):
                return False
            return bool(
                np.all(alphabet._symbols == self._symbols[: len(alphabet._symbols)])
            )
        else:
            return super().extends(alphabet)

    def get_symbols(self):
        return tuple(chr(byte) for byte in self._symbols)

    def encode(self, symbol):
        if not isinstance(symbol, (str, bytes)) or len(symbol) != 1:
            raise AlphabetError(f"Symbol {repr(symbol)} is not a single letter")
        byte = ord(symbol)
        code = self._encoding_table[byte] if byte < 256 else LetterAlphabet._NO_CODE
        if code == LetterAlphabet._NO_CODE:
            raise AlphabetError(f"Symbol {repr(symbol)} is not in the alphabet")
        return int(code)

    def decode(self, code):
        if code < 0 or code >= len(self._symbols):
            raise AlphabetError(f"'{code:d}' is not a valid code")
        return chr(self._symbols[code])

    def encode_multiple(self, symbols, dtype=None):
        """
        Encode multiple symbols.

        Parameters
        ----------
        symbols : iterable object or str or bytes
            The symbols to encode.
            A :class:`str` or :class:`bytes` object is encoded fastest.
        dtype : dtype, optional
            For compatibility with the superclass. The value is ignored,
            the code always has the *uint8* dtype.

        Returns
        -------
        code : ndarray, dtype=uint8
            The sequence code.

        Raises
        ------
        AlphabetError
            If any of the symbols is not in the alphabet.
        """
        if isinstance(symbols, str):
            try:
                symbols = symbols.encode("ASCII")
            except UnicodeEncodeError:
                raise AlphabetError("Symbols contain non-ASCII characters")
        elif not isinstance(symbols, bytes):
            symbols = list(symbols)
            for symbol in symbols:
                if not isinstance(symbol, (str, bytes)) or len(symbol) != 1:
                    raise AlphabetError(
                        f"Symbol {repr(symbol)} is not a single letter"
                    )
            return self.encode_multiple("".join(
                [s.decode("ASCII") if isinstance(s, bytes) else s for s in symbols]
            ))
        byte_values = np.frombuffer(symbols, dtype=np.ubyte)
        code = self._encoding_table[byte_values]
        invalid = code == LetterAlphabet._NO_CODE
        if invalid.any():
            first_invalid = chr(byte_values[np.argmax(invalid)])
            raise AlphabetError(
                f"Symbol {repr(first_invalid)} is not in the alphabet"
            )
        return code.astype(np.uint8)

    def decode_multiple(self, code, as_bytes=False):
        """
        Decode a sequence code into an array of symbols.

        Parameters
        ----------
        code : ndarray, dtype=uint8
            The sequence code to decode.
        as_bytes : bool, optional
            If true, the returned array contains `bytes` (dtype 'S1'),
            otherwise `str` (dtype 'U1').

        Returns
        -------
        symbols : ndarray, dtype='U1' or dtype='S1'
            The decoded symbols.
        """
        code = np.asarray(code, dtype=np.int64)
        if len(code) > 0 and (code.min() < 0 or code.max() >= len(self._symbols)):
            raise AlphabetError("Sequence code contains invalid codes")
        symbols = self._symbols[code].view("|S1")
        if not as_bytes:
            symbols = symbols.astype("U1")
        return symbols

    def is_letter_alphabet(self):
        return True

    def __contains__(self, symbol):
        if not isinstance(symbol, (str, bytes)) or len(symbol) != 1:
            return False
        return ord(symbol) in self._symbols

    def __len__(self):
        return len(self._symbols)


class AlphabetMapper(object):
    """
    Convert symbol codes from a source alphabet into a target alphabet,
    preserving the symbols they stand for.

    Parameters
    ----------
    source_alphabet, target_alphabet : Alphabet
        The codes are converted from the source alphabet into the
        target alphabet.
        The target alphabet must contain every symbol of the source
        alphabet, but not necessarily in the same order.

    Examples
    --------

    >>> source_alph = Alphabet(["A","C","G","T"])
    >>> target_alph = Alphabet(["T","U","A","G","C"])
    >>> mapper = AlphabetMapper(source_alph, target_alph)
    >>> print(mapper[0])
    2
    >>> print(mapper[[1,1,3]])
    [4 4 0]
    """

    def __init__(self, source_alphabet, target_alphabet):
        if target_alphabet.extends(source_alphabet):
            self._mapper = None
        else:
            self._mapper = np.array(
                [
                    target_alphabet.encode(source_alphabet.decode(code))
                    for code in range(len(source_alphabet))
                ],
                dtype=AlphabetMapper._dtype(len(target_alphabet)),
            )

    def __getitem__(self, code):
        if self._mapper is None:
            return code if isinstance(code, Integral) else np.asarray(code)
        if isinstance(code, Integral):
            return self._mapper[code]
        return self._mapper[np.asarray(code, dtype=np.int64)]

    @staticmethod
    def _dtype(alphabet_size):
        if alphabet_size <= np.iinfo(np.uint8).max + 1:
            return np.uint8
        elif alphabet_size <= np.iinfo(np.uint16).max + 1:
            return np.uint16
        else:
            return np.uint32


class AlphabetError(Exception):
    """
    This exception is raised, when a code or a symbol is not in an
    :class:`Alphabet`.
    """

    pass


def common_alphabet(alphabets):
    """
    Determine the alphabet from a list of alphabets, that
    extends all alphabets.

    Parameters
    ----------
    alphabets : iterable of Alphabet
        The alphabets from which the common one should be identified.

    Returns
    -------
    common_alphabet : Alphabet or None
        The alphabet from `alphabets` that extends all alphabets.
        ``None`` if no such common alphabet exists.
    """
    common = None
    for alphabet in alphabets:
        if common is None:
            common = alphabet
        elif not common.extends(alphabet):
            if alphabet.extends(common):
                common = alphabet
            else:
                return None
    return common
