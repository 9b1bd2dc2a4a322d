"""
    Sparse term x term matrices used by the SNS stemmer.

    Coordinates are given as (x, y) = (column, row). Only nonzero values are
    stored; reading a position that was never written returns zero.
"""
from abc import ABC, abstractmethod
from typing import Iterator, Tuple

import numpy as np
from scipy.sparse import dok_matrix

Entry = Tuple[int, int, float]


class UnsupportedMatrixOperation(NotImplementedError):
    pass


class Matrix(ABC):
    @property
    @abstractmethod
    def row_count(self) -> int: ...

    @property
    @abstractmethod
    def column_count(self) -> int: ...

    @abstractmethod
    def is_empty(self) -> bool: ...

    @abstractmethod
    def get(self, x: int, y: int): ...

    @abstractmethod
    def set(self, x: int, y: int, value) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def non_zero_entries(self) -> Iterator[Entry]:
        """Yield (x, y, value) for every stored nonzero value."""

    def get_int(self, x: int, y: int) -> int:
        return int(self.get(x, y))

    def get_float(self, x: int, y: int) -> float:
        return float(self.get(x, y))

    def set_int(self, x: int, y: int, value: int) -> None:
        self.set(x, y, int(value))

    def set_float(self, x: int, y: int, value: float) -> None:
        self.set(x, y, float(value))


class SparseMatrix(Matrix):
    def __init__(self, columns: int, rows: int, dtype=np.int64):
        self._shape = (columns, rows)
        self._dtype = np.dtype(dtype)
        self._cast = int if np.issubdtype(self._dtype, np.integer) else float
        self._matrix = dok_matrix(self._shape, dtype=self._dtype)

    @property
    def row_count(self) -> int:
        return self._shape[1]

    @property
    def column_count(self) -> int:
        return self._shape[0]

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    def is_empty(self) -> bool:
        return self._matrix.nnz == 0

    def get(self, x: int, y: int):
        return self._cast(self._matrix[x, y])

    def set(self, x: int, y: int, value) -> None:
        # dok_matrix drops the key when a zero is written
        self._matrix[x, y] = value

    def clear(self) -> None:
        self._matrix = dok_matrix(self._shape, dtype=self._dtype)

    def non_zero_entries(self) -> Iterator[Entry]:
        coo = self._matrix.tocoo()
        order = np.lexsort((coo.col, coo.row))
        for k in order:
            value = self._cast(coo.data[k])
            if value:
                yield int(coo.row[k]), int(coo.col[k]), value

    def __len__(self) -> int:
        return self._matrix.nnz


class SymmetricMatrix(Matrix):
    """
    Square matrix where (x, y) and (y, x) share one stored value.

    Every access is canonicalised to (min(x, y), max(x, y)) before it reaches
    the backing matrix, so only the upper triangle is ever materialised.
    """

    def __init__(self, backing: Matrix):
        if backing.row_count != backing.column_count:
            raise ValueError(
                f"symmetric matrix needs a square backing store, got "
                f"{backing.column_count}x{backing.row_count}"
            )
        self._backing = backing

    @property
    def backing(self) -> Matrix:
        return self._backing

    @property
    def row_count(self) -> int:
        return self._backing.row_count

    @property
    def column_count(self) -> int:
        return self._backing.column_count

    def is_empty(self) -> bool:
        return self._backing.is_empty()

    def get(self, x: int, y: int):
        if x > y:
            x, y = y, x
        return self._backing.get(x, y)

    def set(self, x: int, y: int, value) -> None:
        if x > y:
            x, y = y, x
        self._backing.set(x, y, value)

    def clear(self) -> None:
        self._backing.clear()

    def non_zero_entries(self) -> Iterator[Entry]:
        return self._backing.non_zero_entries()


def symmetric_sparse_matrix(size: int, dtype=np.int64) -> SymmetricMatrix:
    return SymmetricMatrix(SparseMatrix(size, size, dtype=dtype))
