"""
    Out-of-core symmetric term matrix.

    The matrix lives on disk as blocks of consecutive ids, stored twice: once
    per block of columns and once per block of rows. Under the base path there
    must be two sub-directories:

        indexed_by_x/<prefix>-<first>-<last>   columns first..last (inclusive)
        indexed_by_y/<prefix>-<first>-<last>   rows first..last (inclusive)

    Every file has one line per nonzero element, "column row value", separated
    by single spaces. The files are written by a batch builder (see
    cooccurrence.DiskCoOccurrences); this class only reads them, so every
    mutating call raises UnsupportedMatrixOperation.

    Only a few blocks are resident at a time (one per axis by default). Reads
    that jump between distant blocks reload files on every access, so callers
    should keep their access block-local. The block cache is not thread-safe:
    give every thread its own DiskSparseMatrix.
"""
from collections import OrderedDict
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from sns_io import ParseError
from term_matrix import Entry, Matrix, SparseMatrix, UnsupportedMatrixOperation

COLUMN_DIR = "indexed_by_x"
ROW_DIR = "indexed_by_y"


def block_file_name(prefix: str, first: int, last: int) -> str:
    return f"{prefix}-{first}-{last}"


def write_block(path: Path, entries: Iterable[Entry]) -> int:
    written = 0
    with open(path, "w", encoding="utf-8") as fh:
        for x, y, value in entries:
            fh.write(f"{x} {y} {value}\n")
            written += 1
    return written


def _parse_number(token: str):
    try:
        return int(token)
    except ValueError:
        return float(token)


def read_block(path: Path) -> List[Entry]:
    entries: List[Entry] = []
    with open(path, encoding="utf-8") as fh:
        for line_no, line in enumerate(fh, start=1):
            parts = line.split()
            if not parts:
                continue
            if len(parts) != 3:
                raise ParseError(path, line_no, f"expected 'column row value', got {line.strip()!r}")
            try:
                entries.append((int(parts[0]), int(parts[1]), _parse_number(parts[2])))
            except ValueError:
                raise ParseError(path, line_no, f"non-numeric field in {line.strip()!r}") from None
    return entries


def _block_ranges(directory: Path, prefix: str) -> List[Tuple[int, int]]:
    ranges = []
    if not directory.is_dir():
        return ranges
    for path in directory.iterdir():
        parts = path.name.rsplit("-", 2)
        if len(parts) != 3 or parts[0] != prefix:
            continue
        try:
            ranges.append((int(parts[1]), int(parts[2])))
        except ValueError:
            continue
    return sorted(ranges)


class Block:
    """Resident copy of one block file, addressed with global coordinates."""

    def __init__(self, axis: str, first: int, last: int, size: int, entries: List[Entry]):
        self.axis = axis
        self.first = first
        self.last = last
        width = last - first + 1
        dtype = np.int64 if all(isinstance(v, int) for _, _, v in entries) else np.float64
        if axis == COLUMN_DIR:
            self._matrix = SparseMatrix(width, size, dtype=dtype)
        else:
            self._matrix = SparseMatrix(size, width, dtype=dtype)
        for x, y, value in entries:
            self._matrix.set(*self._local(x, y), value)

    def __contains__(self, index: int) -> bool:
        return self.first <= index <= self.last

    def _local(self, x: int, y: int) -> Tuple[int, int]:
        if self.axis == COLUMN_DIR:
            return x - self.first, y
        return x, y - self.first

    def get(self, x: int, y: int):
        return self._matrix.get(*self._local(x, y))

    def entries(self) -> Iterator[Entry]:
        for x, y, value in self._matrix.non_zero_entries():
            if self.axis == COLUMN_DIR:
                yield x + self.first, y, value
            else:
                yield x, y + self.first, value


class BlockCache:
    """
    Resident blocks of one axis, keyed by block number.

    With capacity 1 this is a single slot: loading a block discards the one
    before it. Larger capacities evict the least recently used block.
    """

    def __init__(self, capacity: int = 1):
        if capacity < 1:
            raise ValueError(f"cache capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._blocks: "OrderedDict[int, Block]" = OrderedDict()

    def __contains__(self, number: int) -> bool:
        return number in self._blocks

    def __len__(self) -> int:
        return len(self._blocks)

    def resident(self) -> List[int]:
        return list(self._blocks)

    def get(self, number: int) -> Optional[Block]:
        block = self._blocks.get(number)
        if block is not None:
            self._blocks.move_to_end(number)
        return block

    def put(self, number: int, block: Block) -> None:
        self._blocks[number] = block
        self._blocks.move_to_end(number)
        while len(self._blocks) > self.capacity:
            self._blocks.popitem(last=False)

    def clear(self) -> None:
        self._blocks.clear()


class DiskSparseMatrix(Matrix):
    def __init__(
        self,
        base_path,
        prefix: str = "CO",
        size: Optional[int] = None,
        block_size: Optional[int] = None,
        cache_capacity: int = 1,
        quiet: bool = False,
    ):
        self.base_path = Path(base_path)
        self.prefix = prefix
        self.quiet = quiet
        if size is None or block_size is None:
            size, block_size = self._discover_layout()
        if size < 0 or (size > 0 and block_size < 1):
            raise ValueError(f"invalid layout: size={size}, block_size={block_size}")
        self._size = size
        self.block_size = block_size
        self._column_cache = BlockCache(cache_capacity)
        self._row_cache = BlockCache(cache_capacity)
        self.loads: Dict[str, int] = {COLUMN_DIR: 0, ROW_DIR: 0}

    def _discover_layout(self) -> Tuple[int, int]:
        directory = self.base_path / COLUMN_DIR
        ranges = _block_ranges(directory, self.prefix)
        if not ranges:
            raise FileNotFoundError(f"no '{self.prefix}' block files in {directory}")
        first, last = ranges[0]
        if first != 0:
            raise ValueError(f"first block in {directory} starts at {first}, expected 0")
        return ranges[-1][1] + 1, last + 1

    @property
    def row_count(self) -> int:
        return self._size

    @property
    def column_count(self) -> int:
        return self._size

    @property
    def block_count(self) -> int:
        if self._size == 0:
            return 0
        return (self._size + self.block_size - 1) // self.block_size

    @property
    def column_cache(self) -> BlockCache:
        return self._column_cache

    @property
    def row_cache(self) -> BlockCache:
        return self._row_cache

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self._size and 0 <= y < self._size):
            raise IndexError(f"({x}, {y}) is outside a {self._size}x{self._size} matrix")

    def _block_range(self, number: int) -> Tuple[int, int]:
        first = number * self.block_size
        return first, min(first + self.block_size - 1, self._size - 1)

    def _load(self, axis: str, number: int) -> Block:
        first, last = self._block_range(number)
        path = self.base_path / axis / block_file_name(self.prefix, first, last)
        if not self.quiet:
            print(f"[i] reading block file {path}")
        # a block that was never written holds only zeros
        entries = read_block(path) if path.exists() else []
        block = Block(axis, first, last, self._size, entries)
        cache = self._column_cache if axis == COLUMN_DIR else self._row_cache
        cache.put(number, block)
        self.loads[axis] += 1
        return block

    def _column_block(self, number: int) -> Block:
        block = self._column_cache.get(number)
        if block is None:
            block = self._load(COLUMN_DIR, number)
        return block

    def _row_block(self, number: int) -> Block:
        block = self._row_cache.get(number)
        if block is None:
            block = self._load(ROW_DIR, number)
        return block

    def get(self, x: int, y: int):
        self._check(x, y)
        block = self._column_cache.get(x // self.block_size)
        if block is None:
            block = self._row_cache.get(y // self.block_size)
        if block is None:
            block = self._load(COLUMN_DIR, x // self.block_size)
        return block.get(x, y)

    def load_column(self, x: int) -> None:
        self._check(x, 0)
        if x // self.block_size not in self._column_cache:
            self._load(COLUMN_DIR, x // self.block_size)

    def load_row(self, y: int) -> None:
        self._check(0, y)
        if y // self.block_size not in self._row_cache:
            self._load(ROW_DIR, y // self.block_size)

    def column_block_entries(self, block_number: int) -> List[Entry]:
        if not 0 <= block_number < self.block_count:
            raise IndexError(f"block {block_number} out of range 0..{self.block_count - 1}")
        entries = list(self._column_block(block_number).entries())
        entries.sort(key=lambda e: (e[1], e[0]))
        return entries

    def row_block_entries(self, block_number: int) -> List[Entry]:
        if not 0 <= block_number < self.block_count:
            raise IndexError(f"block {block_number} out of range 0..{self.block_count - 1}")
        return list(self._row_block(block_number).entries())

    def non_zero_entries(self) -> Iterator[Entry]:
        for number in range(self.block_count):
            yield from self._column_block(number).entries()

    def is_empty(self) -> bool:
        return next(iter(self.non_zero_entries()), None) is None

    def set(self, x: int, y: int, value) -> None:
        raise UnsupportedMatrixOperation("DiskSparseMatrix is read-only")

    def clear(self) -> None:
        raise UnsupportedMatrixOperation("DiskSparseMatrix is read-only")
