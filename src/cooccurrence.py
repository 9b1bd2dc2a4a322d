"""
    Strategies that build the CO matrix from an inverted index.

    CO(a, b) is the sum, over every document holding both a and b, of the
    smaller of the two term frequencies. The diagonal is always zero.

    A strategy is any callable taking an InvertedIndex and returning a Matrix.
"""
from pathlib import Path

import numpy as np
from tqdm import tqdm

from disk_matrix import COLUMN_DIR, ROW_DIR, DiskSparseMatrix, block_file_name, write_block
from postings import InvertedIndex
from term_matrix import SymmetricMatrix, symmetric_sparse_matrix


def co_occurrences_in_memory(inverted: InvertedIndex, quiet: bool = False) -> SymmetricMatrix:
    size = inverted.term_count
    co = symmetric_sparse_matrix(size, dtype=np.int64)
    for a in tqdm(range(size - 1), desc="co-occurrences", disable=quiet):
        for b in range(a + 1, size):
            value = inverted.co_occurrence(a, b)
            if value:
                co.set(a, b, value)
    return co


class DiskCoOccurrences:
    """
    Builds CO one chunk of terms at a time and pages it out to block files.

    Each chunk of `block_size` consecutive term ids is measured against the
    whole vocabulary in a dense (chunk x n) array. The array is written both
    as the column block and, transposed, as the row block of the same id range
    before the next chunk starts, so at most one chunk is held in memory.
    A pair inside one chunk is intersected once; a pair spanning two chunks is
    intersected once for each of them.
    Chunks depend only on the index, so an interrupted build can be re-run
    and overwrites the same files.
    """

    def __init__(self, base_path, block_size: int, prefix: str = "CO", cache_capacity: int = 1, quiet: bool = False):
        if block_size < 1:
            raise ValueError(f"block size must be at least 1, got {block_size}")
        self.base_path = Path(base_path)
        self.block_size = block_size
        self.prefix = prefix
        self.cache_capacity = cache_capacity
        self.quiet = quiet

    def chunk(self, inverted: InvertedIndex, first: int, last: int) -> np.ndarray:
        size = inverted.term_count
        block = np.zeros((last - first + 1, size), dtype=np.int64)
        for a in range(first, last + 1):
            for b in range(size):
                if first <= b < a:
                    block[a - first, b] = block[b - first, a]
                elif b != a:
                    block[a - first, b] = inverted.co_occurrence(a, b)
        return block

    def __call__(self, inverted: InvertedIndex) -> DiskSparseMatrix:
        size = inverted.term_count
        column_dir = self.base_path / COLUMN_DIR
        row_dir = self.base_path / ROW_DIR
        column_dir.mkdir(parents=True, exist_ok=True)
        row_dir.mkdir(parents=True, exist_ok=True)

        starts = range(0, size, self.block_size)
        for first in tqdm(starts, desc="co-occurrence blocks", disable=self.quiet):
            last = min(first + self.block_size, size) - 1
            block = self.chunk(inverted, first, last)
            name = block_file_name(self.prefix, first, last)

            offsets, columns = np.nonzero(block)
            write_block(
                column_dir / name,
                ((first + int(i), int(y), int(block[i, y])) for i, y in zip(offsets, columns)),
            )
            columns, offsets = np.nonzero(block.T)
            write_block(
                row_dir / name,
                ((int(x), first + int(i), int(block[i, x])) for x, i in zip(columns, offsets)),
            )
            del block

        if not self.quiet:
            print(f"[✓] wrote {len(starts)} CO blocks to {self.base_path}")
        return DiskSparseMatrix(
            self.base_path,
            prefix=self.prefix,
            size=size,
            block_size=self.block_size,
            cache_capacity=self.cache_capacity,
            quiet=self.quiet,
        )
