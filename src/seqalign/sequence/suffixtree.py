# This source code is part of the Seqalign package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This module provides a suffix tree for exact substring queries.
"""

__name__ = "seqalign.sequence"
__author__ = "Seqalign contributors"
__all__ = ["SuffixTree"]

import logging
import numpy as np
from .sequence import Sequence


_logger = logging.getLogger("seqalign.sequence.suffixtree")


class _Terminator:
    """
    Unique end-of-text symbol, that is unequal to every other symbol.
    """

    def __repr__(self):
        return "$"


_TERMINATOR = _Terminator()


class _Node:
    __slots__ = (
        "start", "end", "children", "suffix_link",
        "suffix_index", "depth", "leaf_count", "first_index"
    )  # fmt: skip

    def __init__(self, start, end):
        # Edge label is 'text[start : end+1]', 'end' is None for leaves,
        # whose edges always reach the end of the text
        self.start = start
        self.end = end
        self.children = {}
        self.suffix_link = None
        self.suffix_index = -1
        self.depth = 0
        self.leaf_count = 0
        self.first_index = -1

    def is_leaf(self):
        return self.end is None


class SuffixTree(object):
    """
    A suffix tree over a text, built with Ukkonen's algorithm in
    linear time.

    The tree answers exact substring queries in time proportional to
    the pattern length (plus the number of reported positions) and
    finds repeated or shared substrings.

    The text is either a :class:`str`, that is matched
    case-sensitively, or a :class:`Sequence`, that is matched via its
    symbols.
    Patterns can be given in both forms, independent of the text type.

    Parameters
    ----------
    text : str or Sequence
        The indexed text.

    Examples
    --------

    >>> tree = SuffixTree("banana")
    >>> print(tree.contains("nan"))
    True
    >>> print(tree.find_all("ana"))
    [1 3]
    >>> print(tree.count("a"))
    3
    >>> print(tree.longest_repeated_substring())
    ana
    >>> print(tree.longest_common_substring("ananas"))
    ('anana', 1, 0)
    """

    def __init__(self, text):
        if text is None:
            raise TypeError("The text must be a 'str' or a 'Sequence', not None")
        self._is_str = isinstance(text, str)
        self._symbols = SuffixTree._to_symbols(text)
        self._text = self._symbols + [_TERMINATOR]
        self._root = _Node(-1, -1)
        self._root.suffix_link = self._root
        self._build()
        self._annotate()
        _logger.debug("Built suffix tree over %d symbols", len(self._symbols))

    def __len__(self):
        return len(self._symbols)

    def __repr__(self):
        """Represent SuffixTree as a string for debugging."""
        return f"SuffixTree({self._joined(self._symbols)!r})"

    @staticmethod
    def _to_symbols(obj):
        if isinstance(obj, str):
            return list(obj)
        elif isinstance(obj, Sequence):
            return list(obj.symbols)
        elif obj is None:
            raise TypeError("Expected a 'str' or a 'Sequence', not None")
        else:
            return list(obj)

    def _joined(self, symbols):
        if all(isinstance(s, str) and len(s) == 1 for s in symbols):
            return "".join(symbols)
        return list(symbols)

    def _edge_end(self, node, leaf_end):
        return leaf_end if node.end is None else node.end

    def _build(self):
        text = self._text
        root = self._root
        active_node = root
        active_edge = 0
        active_length = 0
        remainder = 0
        for pos, symbol in enumerate(text):
            leaf_end = pos
            remainder += 1
            last_internal = None
            while remainder > 0:
                if active_length == 0:
                    active_edge = pos
                edge_symbol = text[active_edge]
                child = active_node.children.get(edge_symbol)
                if child is None:
                    leaf = _Node(pos, None)
                    leaf.suffix_index = pos - remainder + 1
                    active_node.children[edge_symbol] = leaf
                    if last_internal is not None:
                        last_internal.suffix_link = active_node
                        last_internal = None
                else:
                    edge_length = self._edge_end(child, leaf_end) - child.start + 1
                    if active_length >= edge_length:
                        # Walk down to the next node
                        active_edge += edge_length
                        active_length -= edge_length
                        active_node = child
                        continue
                    if text[child.start + active_length] == symbol:
                        # The suffix is already implicitly present
                        if last_internal is not None and active_node is not root:
                            last_internal.suffix_link = active_node
                            last_internal = None
                        active_length += 1
                        break
                    split = _Node(child.start, child.start + active_length - 1)
                    split.suffix_link = root
                    active_node.children[edge_symbol] = split
                    leaf = _Node(pos, None)
                    leaf.suffix_index = pos - remainder + 1
                    split.children[symbol] = leaf
                    child.start += active_length
                    split.children[text[child.start]] = child
                    if last_internal is not None:
                        last_internal.suffix_link = split
                    last_internal = split
                remainder -= 1
                if active_node is root and active_length > 0:
                    active_length -= 1
                    active_edge = pos - remainder + 1
                elif active_node is not root:
                    active_node = active_node.suffix_link
        self._leaf_end = len(text) - 1

    def _annotate(self):
        """
        Set string depth, leaf count and leftmost suffix position of
        every node in a single iterative post-order pass.
        """
        n = len(self._symbols)
        stack = [(self._root, False)]
        while stack:
            node, visited = stack.pop()
            if not visited:
                if node is not self._root:
                    parent_depth = node.depth
                    node.depth = (
                        parent_depth
                        + self._edge_end(node, self._leaf_end)
                        - node.start
                        + 1
                    )
                stack.append((node, True))
                for child in node.children.values():
                    # The parent depth is passed via the child's field
                    child.depth = node.depth
                    stack.append((child, False))
            elif node.is_leaf():
                # The terminator-only suffix is not a position in the text
                if node.suffix_index < n:
                    node.leaf_count = 1
                    node.first_index = node.suffix_index
            else:
                node.leaf_count = sum(c.leaf_count for c in node.children.values())
                indices = [
                    c.first_index for c in node.children.values() if c.first_index >= 0
                ]
                node.first_index = min(indices) if indices else -1

    def _locate(self, pattern):
        """
        Find the node at or below the end of the path spelling
        `pattern`, or ``None`` if the pattern is not in the text.
        """
        text = self._text
        node = self._root
        i = 0
        while i < len(pattern):
            child = node.children.get(pattern[i])
            if child is None:
                return None
            j = child.start
            edge_end = self._edge_end(child, self._leaf_end)
            while j <= edge_end and i < len(pattern):
                if text[j] != pattern[i]:
                    return None
                i += 1
                j += 1
            node = child
        return node

    def _leaf_positions(self, node):
        positions = []
        stack = [node]
        while stack:
            current = stack.pop()
            if current.is_leaf():
                if current.first_index >= 0:
                    positions.append(current.suffix_index)
            else:
                stack.extend(current.children.values())
        return positions

    def contains(self, pattern):
        """
        Check whether the pattern occurs in the text.

        Parameters
        ----------
        pattern : str or Sequence
            The pattern to search.

        Returns
        -------
        contains : bool
            True, if the pattern occurs at least once.
            An empty pattern is always contained.
        """
        return self._locate(SuffixTree._to_symbols(pattern)) is not None

    def count(self, pattern):
        """
        Count the occurrences of the pattern in the text, overlapping
        occurrences included.

        Parameters
        ----------
        pattern : str or Sequence
            The pattern to count.

        Returns
        -------
        count : int
            The number of occurrences.
            For an empty pattern, this is the text length.
        """
        node = self._locate(SuffixTree._to_symbols(pattern))
        if node is None:
            return 0
        return node.leaf_count

    def find_all(self, pattern):
        """
        Find all start positions of the pattern in the text.

        Parameters
        ----------
        pattern : str or Sequence
            The pattern to search.

        Returns
        -------
        positions : ndarray, dtype=int
            The sorted start positions.
            For an empty pattern, every position of the text is
            returned.
        """
        node = self._locate(SuffixTree._to_symbols(pattern))
        if node is None:
            return np.zeros(0, dtype=int)
        return np.sort(np.array(self._leaf_positions(node), dtype=int))

    def find_first(self, pattern):
        """
        Find the leftmost start position of the pattern in the text.

        Parameters
        ----------
        pattern : str or Sequence
            The pattern to search.

        Returns
        -------
        position : int
            The leftmost start position, -1 if the pattern does not
            occur.
        """
        node = self._locate(SuffixTree._to_symbols(pattern))
        if node is None:
            return -1
        return node.first_index

    def longest_prefix_match(self, pattern, start=0):
        """
        Find the longest prefix of ``pattern[start:]`` that occurs in
        the text.

        Parameters
        ----------
        pattern : str or Sequence
            The pattern.
        start : int, optional
            The position in `pattern` the prefix begins at.

        Returns
        -------
        length : int
            The length of the longest occurring prefix.
        position : int
            The leftmost position of this prefix in the text,
            -1 if the length is 0.
        """
        if isinstance(pattern, list):
            symbols = pattern
        else:
            symbols = SuffixTree._to_symbols(pattern)
        text = self._text
        node = self._root
        i = start
        while i < len(symbols):
            child = node.children.get(symbols[i])
            if child is None:
                break
            j = child.start
            edge_end = self._edge_end(child, self._leaf_end)
            while j <= edge_end and i < len(symbols) and text[j] == symbols[i]:
                i += 1
                j += 1
            node = child
            if j <= edge_end:
                break
        length = i - start
        return length, (node.first_index if length > 0 else -1)

    def longest_repeated_substring(self):
        """
        Find the longest substring that occurs at least twice in the
        text, overlapping occurrences included.

        Returns
        -------
        substring : str or list
            The longest repeated substring.
            If several substrings have the maximum length, the one
            occurring first in the text is returned.
            Empty, if no symbol is repeated.

        Examples
        --------

        >>> print(SuffixTree("mississippi").longest_repeated_substring())
        issi
        """
        best_depth = 0
        best_index = -1
        stack = [self._root]
        while stack:
            node = stack.pop()
            for child in node.children.values():
                if not child.is_leaf():
                    stack.append(child)
            if node is self._root or node.leaf_count < 2:
                continue
            if node.depth > best_depth or (
                node.depth == best_depth and node.first_index < best_index
            ):
                best_depth = node.depth
                best_index = node.first_index
        if best_depth == 0:
            return self._joined([])
        return self._joined(self._symbols[best_index : best_index + best_depth])

    def longest_common_substring(self, other):
        """
        Find the longest substring shared by the text and another
        sequence, using the suffix links of the tree to stream through
        `other` in linear time.

        Parameters
        ----------
        other : str or Sequence
            The other sequence.

        Returns
        -------
        substring : str or list
            The longest common substring.
            If several substrings have the maximum length, the one
            ending first in `other` is returned.
        position : int
            The leftmost position of the substring in the text,
            -1 if there is no common substring.
        other_position : int
            The position of the substring in `other`,
            -1 if there is no common substring.
        """
        other = SuffixTree._to_symbols(other)
        text = self._text
        root = self._root
        # Matched string = path to 'node' + 'offset' symbols of 'edge'
        node = root
        edge = None
        offset = 0
        length = 0
        best_length = 0
        best_end = -1
        best_node = None
        for i, symbol in enumerate(other):
            while True:
                if edge is None:
                    child = node.children.get(symbol)
                    if child is not None:
                        edge = child
                        offset = 0
                if edge is not None and text[edge.start + offset] == symbol:
                    offset += 1
                    length += 1
                    if edge.start + offset > self._edge_end(edge, self._leaf_end):
                        node, edge, offset = edge, None, 0
                    break
                if edge is not None and offset == 0:
                    edge = None
                if length == 0:
                    break
                # Drop the first symbol of the match and rescan
                length -= 1
                node = node.suffix_link if node is not root else root
                remaining = length - node.depth
                pos = i - remaining
                edge, offset = None, 0
                while remaining > 0:
                    child = node.children[other[pos]]
                    edge_length = (
                        self._edge_end(child, self._leaf_end) - child.start + 1
                    )
                    if edge_length <= remaining:
                        node = child
                        pos += edge_length
                        remaining -= edge_length
                    else:
                        edge, offset = child, remaining
                        remaining = 0
            if length > best_length:
                best_length = length
                best_end = i
                best_node = edge if edge is not None else node
        if best_length == 0:
            return self._joined([]), -1, -1
        substring = self._joined(other[best_end - best_length + 1 : best_end + 1])
        return substring, best_node.first_index, best_end - best_length + 1
