"""
    Restricted co-occurrences (RCO): the candidate stem graph.

    Two co-occurring terms become candidates when they start with the same
    `prefix_length` characters and the pair of suffixes left after removing
    their common prefix is not made of two suffixes that are both frequent
    among co-occurring terms. A candidate pair is weighted by its own
    co-occurrence plus `rco_weight` times the co-occurrence it shares through
    common neighbours. A CO matrix paged to disk is weighed one column block
    at a time against one row block at a time, so only the neighbours of the
    two resident blocks are held in memory. keep_strong_edges then reduces the
    graph to edges that are the strongest edge of at least one of their
    endpoints.
"""
from collections import Counter, defaultdict
from itertools import groupby
from typing import Dict, Iterable, List

import numpy as np
from tqdm import tqdm

from disk_matrix import COLUMN_DIR, ROW_DIR, DiskSparseMatrix
from postings import Lexicon
from prefixes import lcp_length
from term_matrix import Entry, Matrix, SymmetricMatrix, symmetric_sparse_matrix


def neighbour_map(co: Matrix) -> Dict[int, Dict[int, float]]:
    neighbours: Dict[int, Dict[int, float]] = defaultdict(dict)
    for x, y, value in co.non_zero_entries():
        if x != y:
            neighbours[x][y] = value
            neighbours[y][x] = value
    return neighbours


def block_neighbours(entries: Iterable[Entry], axis: str) -> Dict[int, Dict[int, float]]:
    """Neighbours of the ids one block file covers: x for a column block, y for a row block."""
    neighbours: Dict[int, Dict[int, float]] = defaultdict(dict)
    for x, y, value in entries:
        if x == y:
            continue
        if axis == ROW_DIR:
            neighbours[y][x] = value
        else:
            neighbours[x][y] = value
    return neighbours


class RestrictedCoOccurrences:
    def __init__(self, min_lcp_length: int, prefix_length: int, rco_weight: float, quiet: bool = False):
        self.min_lcp_length = min_lcp_length
        self.prefix_length = prefix_length
        self.rco_weight = rco_weight
        self.quiet = quiet

    def suffix_census(self, co: Matrix, lexicon: Lexicon) -> Counter:
        """Count the suffixes left by co-occurring pairs sharing a long enough prefix."""
        census: Counter = Counter()
        for a, b, _ in co.non_zero_entries():
            if b <= a:
                continue
            word_a, word_b = lexicon.word(a), lexicon.word(b)
            common = lcp_length(word_a, word_b)
            if common >= self.min_lcp_length:
                for suffix in (word_a[common:], word_b[common:]):
                    if suffix:
                        census[suffix] += 1
        return census

    def prefixes_equal(self, word_a: str, word_b: str) -> bool:
        return word_a[: self.prefix_length] == word_b[: self.prefix_length]

    @staticmethod
    def suffixes_frequent(word_a: str, word_b: str, census: Counter) -> bool:
        common = lcp_length(word_a, word_b)
        return census[word_a[common:]] > 1 and census[word_b[common:]] > 1

    def is_candidate(self, word_a: str, word_b: str, census: Counter) -> bool:
        return self.prefixes_equal(word_a, word_b) and not self.suffixes_frequent(word_a, word_b, census)

    def transitive_weight(self, value, near_a: Dict[int, float], near_b: Dict[int, float]) -> float:
        # shared neighbours in ascending order, so every CO layout sums alike
        weight = float(value)
        for w in sorted(near_a.keys() & near_b.keys()):
            weight += min(near_a[w], near_b[w]) * self.rco_weight
        return weight

    def __call__(self, co: Matrix, lexicon: Lexicon) -> SymmetricMatrix:
        census = self.suffix_census(co, lexicon)
        rco = symmetric_sparse_matrix(co.row_count, dtype=np.float64)
        if isinstance(co, DiskSparseMatrix):
            self._weigh_blocks(co, lexicon, census, rco)
        else:
            self._weigh_in_memory(co, lexicon, census, rco)
        return rco

    def _weigh_in_memory(self, co: Matrix, lexicon: Lexicon, census: Counter, rco: Matrix) -> None:
        neighbours = neighbour_map(co)
        entries = co.non_zero_entries()
        for a, b, value in tqdm(entries, desc="restricted co-occurrences", disable=self.quiet):
            if b <= a:
                continue
            if not self.is_candidate(lexicon.word(a), lexicon.word(b), census):
                continue
            rco.set(a, b, self.transitive_weight(value, neighbours[a], neighbours[b]))

    def _weigh_blocks(self, co: DiskSparseMatrix, lexicon: Lexicon, census: Counter, rco: Matrix) -> None:
        for number in tqdm(range(co.block_count), desc="restricted co-occurrences", disable=self.quiet):
            # sorted by row, so the pairs falling in one row block are contiguous
            entries = co.column_block_entries(number)
            candidates = [
                (a, b, value)
                for a, b, value in entries
                if b > a and self.is_candidate(lexicon.word(a), lexicon.word(b), census)
            ]
            if not candidates:
                continue
            near_column = block_neighbours(entries, COLUMN_DIR)
            del entries
            for row_block, pairs in groupby(candidates, key=lambda e: e[1] // co.block_size):
                near_row = block_neighbours(co.row_block_entries(row_block), ROW_DIR)
                for a, b, value in pairs:
                    rco.set(a, b, self.transitive_weight(value, near_column[a], near_row[b]))


def row_argmax(matrix: Matrix) -> List[int]:
    """Column of the largest value in every row; the lowest column wins ties, 0 for empty rows."""
    size = matrix.row_count
    best = [0] * size
    best_value = [0.0] * size
    for x, y, value in matrix.non_zero_entries():
        for row, column in ((y, x), (x, y)):
            if value > best_value[row] or (value == best_value[row] and column < best[row]):
                best[row] = column
                best_value[row] = value
    return best


def keep_strong_edges(rco: Matrix) -> int:
    """Zero every edge that is the strongest edge of neither endpoint. Returns the number removed."""
    argmax = row_argmax(rco)
    removed = 0
    for a, b, _ in list(rco.non_zero_entries()):
        if argmax[a] != b and argmax[b] != a:
            rco.set(a, b, 0)
            rco.set(b, a, 0)
            removed += 1
    return removed
