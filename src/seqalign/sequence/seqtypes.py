# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqalign.sequence"
__author__ = "Seqalign contributors"
__all__ = ["GeneralSequence", "NucleotideSequence", "ProteinSequence"]

import numpy as np
from .alphabet import AlphabetError, AlphabetMapper, LetterAlphabet
from .sequence import Sequence


class GeneralSequence(Sequence):
    """
    A sequence over a custom :class:`Alphabet`, without the need to
    subclass :class:`Sequence`.

    Parameters
    ----------
    alphabet : Alphabet
        The alphabet of this sequence.
    sequence : iterable object, optional
        The symbols of the sequence.
        For a :class:`LetterAlphabet` this may also be a :class:`str`.
        By default the sequence is empty.

    Examples
    --------

    >>> alph = LetterAlphabet("AX")
    >>> print(GeneralSequence(alph, "AAAXXXAAA"))
    AAAXXXAAA
    """

    def __init__(self, alphabet, sequence=()):
        self._alphabet = alphabet
        super().__init__(sequence)

    def __repr__(self):
        """Represent GeneralSequence as a string for debugging."""
        return (
            f"GeneralSequence({self._alphabet!r}, "
            f"[{', '.join([repr(symbol) for symbol in self.symbols])}])"
        )

    def __copy_create__(self):
        return GeneralSequence(self._alphabet)

    def get_alphabet(self):
        return self._alphabet


class NucleotideSequence(Sequence):
    """
    Representation of a nucleotide sequence (DNA or RNA).

    The class uses one of two alphabets:
    :func:`unambiguous_alphabet()` contains only the letters
    ``A``, ``C``, ``G`` and ``T``.
    :func:`ambiguous_alphabet()` extends it by ``U`` and the IUPAC
    ambiguity codes.
    Since the ambiguous alphabet extends the unambiguous one, the codes
    of both alphabets are interchangeable for the unambiguous letters.

    Parameters
    ----------
    sequence : iterable object, optional
        The nucleotides, as :class:`str` or list of letters.
        Lower case letters are converted to upper case.
        By default the sequence is empty.
    ambiguous : bool, optional
        If true, the ambiguous alphabet is used.
        If false, the unambiguous alphabet is enforced.
        By default, the unambiguous alphabet is used, unless the
        sequence contains letters that require the ambiguous one.

    Raises
    ------
    AlphabetError
        If the sequence contains a letter that is not a nucleotide.

    Examples
    --------

    >>> print(NucleotideSequence("acgt"))
    ACGT
    >>> NucleotideSequence("ACGN").get_alphabet() == NucleotideSequence.ambiguous_alphabet()
    True
    """

    alphabet_unamb = LetterAlphabet(["A", "C", "G", "T"])
    alphabet_amb = LetterAlphabet(
        ["A", "C", "G", "T", "U",
         "R", "Y", "W", "S", "M", "K", "H", "B", "V", "D", "N"]
    )  # fmt: skip

    compl_symbol_dict = {
        "A": "T",
        "C": "G",
        "G": "C",
        "T": "A",
        "U": "A",
        "M": "K",
        "R": "Y",
        "W": "W",
        "S": "S",
        "Y": "R",
        "K": "M",
        "V": "B",
        "H": "D",
        "D": "H",
        "B": "V",
        "N": "N",
    }
    # Interpreting a code in this alphabet yields the complementary
    # symbol, the mapper translates it back into the ambiguous alphabet
    # Class variables are not visible inside a comprehension here
    _compl_symbols = []
    for _symbol in alphabet_amb.get_symbols():
        _compl_symbols.append(compl_symbol_dict[_symbol])
    _compl_alphabet = LetterAlphabet(_compl_symbols)
    _compl_mapper = AlphabetMapper(_compl_alphabet, alphabet_amb)

    def __init__(self, sequence=(), ambiguous=None):
        if isinstance(sequence, str):
            sequence = sequence.upper()
        else:
            sequence = [symbol.upper() for symbol in sequence]
        if ambiguous is None:
            try:
                self._alphabet = NucleotideSequence.alphabet_unamb
                super().__init__(sequence)
            except AlphabetError:
                self._alphabet = NucleotideSequence.alphabet_amb
                super().__init__(sequence)
        elif not ambiguous:
            self._alphabet = NucleotideSequence.alphabet_unamb
            super().__init__(sequence)
        else:
            self._alphabet = NucleotideSequence.alphabet_amb
            super().__init__(sequence)

    def __repr__(self):
        """Represent NucleotideSequence as a string for debugging."""
        ambiguous = self._alphabet == NucleotideSequence.alphabet_amb
        return f'NucleotideSequence("{self}", ambiguous={ambiguous})'

    def __copy_create__(self):
        return NucleotideSequence(
            ambiguous=self._alphabet == NucleotideSequence.alphabet_amb
        )

    def get_alphabet(self):
        return self._alphabet

    def complement(self):
        """
        Get the complementary nucleotide sequence.

        ``U`` is complemented to ``A``.

        Returns
        -------
        complement : NucleotideSequence
            The complement sequence.

        Examples
        --------

        >>> dna_seq = NucleotideSequence("ACGCTT")
        >>> print(dna_seq.complement())
        TGCGAA
        """
        return self.copy(NucleotideSequence._compl_mapper[self.code])

    def reverse_complement(self):
        """
        Get the reverse complement of the nucleotide sequence.

        Returns
        -------
        reverse_complement : NucleotideSequence
            The reverse complement.

        Examples
        --------

        >>> print(NucleotideSequence("ACGCTT").reverse_complement())
        AAGCGT
        """
        return self.reverse().complement()

    def gc_content(self):
        """
        Get the fraction of ``G`` and ``C`` in the sequence.

        Returns
        -------
        gc_content : float
            The GC fraction. 0 for an empty sequence.

        Examples
        --------

        >>> print(NucleotideSequence("ACGCTT").gc_content())
        0.5
        """
        if len(self) == 0:
            return 0.0
        gc_codes = [self._alphabet.encode("G"), self._alphabet.encode("C")]
        return np.count_nonzero(np.isin(self.code, gc_codes)) / len(self)

    @staticmethod
    def unambiguous_alphabet():
        """
        Get the unambiguous nucleotide alphabet containing the symbols
        ``A``, ``C``, ``G`` and ``T``.

        Returns
        -------
        alphabet : LetterAlphabet
            The unambiguous nucleotide alphabet.
        """
        return NucleotideSequence.alphabet_unamb

    @staticmethod
    def ambiguous_alphabet():
        """
        Get the ambiguous nucleotide alphabet containing ``U`` and the
        IUPAC ambiguity codes in addition to ``A``, ``C``, ``G`` and
        ``T``.

        Returns
        -------
        alphabet : LetterAlphabet
            The ambiguous nucleotide alphabet.
        """
        return NucleotideSequence.alphabet_amb


class ProteinSequence(Sequence):
    """
    Representation of a protein sequence.

    The alphabet contains the 20 standard amino acids, the ambiguous
    symbols ``B`` (asparagine or aspartic acid), ``Z`` (glutamine or
    glutamic acid), ``X`` (any amino acid) and ``*`` (stop).
    It has the same order as the symbols of the bundled BLOSUM62
    matrix.

    Parameters
    ----------
    sequence : iterable object, optional
        The amino acids in one-letter code.
        Lower case letters are converted to upper case.
        By default the sequence is empty.

    Examples
    --------

    >>> print(ProteinSequence("malwmr"))
    MALWMR
    """

    alphabet = LetterAlphabet(
        ["A", "R", "N", "D", "C", "Q", "E", "G", "H", "I", "L", "K",
         "M", "F", "P", "S", "T", "W", "Y", "V", "B", "Z", "X", "*"]
    )  # fmt: skip

    def __init__(self, sequence=()):
        if isinstance(sequence, str):
            sequence = sequence.upper()
        else:
            sequence = [symbol.upper() for symbol in sequence]
        super().__init__(sequence)

    def __repr__(self):
        """Represent ProteinSequence as a string for debugging."""
        return f'ProteinSequence("{self}")'

    def get_alphabet(self):
        return ProteinSequence.alphabet
