# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import numpy as np
import pytest
import seqalign.sequence as seq
from ..util import random_sequence


def naive_find_all(text, pattern):
    return [
        i for i in range(len(text) - len(pattern) + 1)
        if text[i : i + len(pattern)] == pattern
    ]


def naive_longest_repeat_length(text):
    best = 0
    for length in range(1, len(text)):
        substrings = [text[i : i + length] for i in range(len(text) - length + 1)]
        if len(set(substrings)) < len(substrings):
            best = length
        else:
            break
    return best


def naive_longest_common_length(text1, text2):
    best = 0
    for i in range(len(text1)):
        for j in range(i + 1, len(text1) + 1):
            if j - i > best and text1[i:j] in text2:
                best = j - i
    return best


@pytest.mark.parametrize(
    "text, pattern, expected",
    [
        ("banana", "ana", [1, 3]),
        ("banana", "a", [1, 3, 5]),
        ("banana", "banana", [0]),
        ("banana", "bananas", []),
        ("banana", "x", []),
        ("aaaa", "aa", [0, 1, 2]),
        ("", "a", []),
        ("ACGT", "", [0, 1, 2, 3]),
    ],
)
def test_find_all(text, pattern, expected):
    tree = seq.SuffixTree(text)
    assert tree.find_all(pattern).tolist() == expected
    assert tree.count(pattern) == len(expected)
    assert tree.contains(pattern) == (len(expected) > 0 or pattern == "")
    assert tree.find_first(pattern) == (expected[0] if len(expected) > 0 else -1)


def test_empty_pattern_is_contained():
    tree = seq.SuffixTree("")
    assert tree.contains("")
    assert tree.count("") == 0
    assert len(tree) == 0


def test_case_sensitive():
    tree = seq.SuffixTree("ACGT")
    assert tree.contains("CG")
    assert not tree.contains("cg")


@pytest.mark.parametrize("seed", range(20))
def test_find_all_random(seed):
    """
    Compare the positions from the suffix tree with a naive scan for
    random texts and patterns.
    """
    rng = np.random.default_rng(seed)
    text = random_sequence(rng, 200, symbols="AC")
    tree = seq.SuffixTree(text)
    for length in (1, 2, 5, 8):
        pos = rng.integers(len(text) - length)
        pattern = text[pos : pos + length]
        assert tree.find_all(pattern).tolist() == naive_find_all(text, pattern)
    assert tree.count("ACCA") == len(naive_find_all(text, "ACCA"))


def test_sequence_text():
    """
    A suffix tree over a :class:`Sequence` is queried with symbols.
    """
    tree = seq.SuffixTree(seq.NucleotideSequence("ACTGAATGA"))
    assert tree.find_all("TGA").tolist() == [2, 6]
    assert tree.find_all(seq.NucleotideSequence("GA")).tolist() == [3, 7]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("banana", "ana"),
        ("mississippi", "issi"),
        ("abcd", ""),
        ("", ""),
        ("aaaa", "aaa"),
        ("abcabxabcd", "abc"),
    ],
)
def test_longest_repeated_substring(text, expected):
    assert seq.SuffixTree(text).longest_repeated_substring() == expected


@pytest.mark.parametrize("seed", range(10))
def test_longest_repeated_substring_random(seed):
    rng = np.random.default_rng(seed)
    text = random_sequence(rng, 100)
    repeat = seq.SuffixTree(text).longest_repeated_substring()
    assert len(repeat) == naive_longest_repeat_length(text)
    assert len(naive_find_all(text, repeat)) >= 2


@pytest.mark.parametrize(
    "text, other, expected",
    [
        ("banana", "ananas", ("anana", 1, 0)),
        ("xabcy", "zzabczz", ("abc", 1, 2)),
        ("ACGT", "TTTT", ("T", 3, 0)),
        ("ACGT", "WXYZ", ("", -1, -1)),
        ("ACGT", "", ("", -1, -1)),
    ],
)
def test_longest_common_substring(text, other, expected):
    assert seq.SuffixTree(text).longest_common_substring(other) == expected


@pytest.mark.parametrize("seed", range(10))
def test_longest_common_substring_random(seed):
    rng = np.random.default_rng(seed)
    text1 = random_sequence(rng, 60)
    text2 = random_sequence(rng, 40)
    substring, pos1, pos2 = seq.SuffixTree(text1).longest_common_substring(text2)
    assert len(substring) == naive_longest_common_length(text2, text1)
    assert text1[pos1 : pos1 + len(substring)] == substring
    assert text2[pos2 : pos2 + len(substring)] == substring


@pytest.mark.parametrize(
    "pattern, start, expected",
    [
        ("ACGTT", 0, (4, 0)),
        ("GGACGTAC", 2, (6, 0)),
        ("TTT", 0, (1, 3)),
        ("WWW", 0, (0, -1)),
        ("", 0, (0, -1)),
    ],
)
def test_longest_prefix_match(pattern, start, expected):
    tree = seq.SuffixTree("ACGTACGA")
    assert tree.longest_prefix_match(pattern, start) == expected


def test_none_text():
    with pytest.raises(TypeError):
        seq.SuffixTree(None)
