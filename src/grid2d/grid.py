import logging
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Generic, NamedTuple, Optional, TypeVar

import numpy as np

from .config import Grid2DConfig
from .grid_errors import InvalidKeyError, KeyCollisionError

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Hashable)
C = TypeVar("C", bound=Hashable)
V = TypeVar("V")
R2 = TypeVar("R2", bound=Hashable)
C2 = TypeVar("C2", bound=Hashable)
V2 = TypeVar("V2")


class Entry(NamedTuple):
    row: Any
    column: Any
    value: Any


def _values_equal(stored, value) -> bool:
    # array == array is elementwise, compare arrays as whole values
    if isinstance(stored, np.ndarray) or isinstance(value, np.ndarray):
        return np.array_equal(stored, value)
    return stored is value or bool(stored == value)


@dataclass(eq=False, repr=False)
class Grid2D(Generic[R, C, V]):
    """
    Two-dimensional map from (row key, column key) pairs to values.

    Values are stored as a mapping of rows to mappings of columns to values.
    Row-oriented operations touch a single row; column-oriented operations
    scan every row. Views are read-only snapshots, later changes to the grid
    do not show up in them.

    None is a legal value but never a legal key. get() returns None both for
    a missing entry and for a stored None; use has_key() to tell them apart.

    The container is not synchronized. Callers sharing a grid between
    threads must guard every call themselves.
    """

    data_store: dict[R, dict[C, V]] = field(default_factory=dict)
    config: Grid2DConfig = field(default_factory=Grid2DConfig)

    def __post_init__(self) -> None:
        self.config.validate()
        # copy the initial rows so the caller's mappings are never aliased
        initial = self.data_store if self.data_store is not None else {}
        self.data_store = {}
        for row, columns in initial.items():
            self.put_all_to_row(columns, row)

    @classmethod
    def from_entries(cls, entries: Iterable[tuple[R, C, V]], config: Optional[Grid2DConfig] = None) -> 'Grid2D[R, C, V]':
        """Build a grid from (row, column, value) triples, later triples overwrite earlier ones."""
        grid = cls(config=config if config is not None else Grid2DConfig())
        for row, column, value in entries:
            grid.put(row, column, value)
        return grid

    # ************************************
    # single entry access
    # ************************************

    def put(self, row: R, column: C, value: V) -> Optional[V]:
        """Store a value at (row, column), replacing any existing value.

        Args:
            row: Row part of the key.
            column: Column part of the key.
            value: Value to store, may be None.

        Returns:
            The value previously stored at (row, column), or None if there was none.

        Raises:
            InvalidKeyError: If row or column is None.
        """
        if row is None or column is None:
            raise InvalidKeyError(row, column)
        columns = self.data_store.setdefault(row, {})
        previous = columns.get(column)
        columns[column] = value
        return previous

    def get(self, row: R, column: C) -> Optional[V]:
        """Get the value at (row, column), or None if nothing is stored there."""
        columns = self.data_store.get(row)
        if columns is None:
            return None
        return columns.get(column)

    def get_or_default(self, row: R, column: C, default: V) -> V:
        """Get the value at (row, column), or default whenever get() would return None."""
        value = self.get(row, column)
        if value is None:
            return default
        return value

    def remove(self, row: R, column: C) -> Optional[V]:
        """Remove the entry at (row, column).

        Returns:
            The removed value, or None if the key held no entry.
        """
        columns = self.data_store.get(row)
        if columns is None or column not in columns:
            return None
        previous = columns.pop(column)
        if not columns and self.config.prune_empty_rows:
            del self.data_store[row]
            logger.debug("pruned empty row %r", row)
        return previous

    # ************************************
    # size and membership
    # ************************************

    def is_empty(self) -> bool:
        return not any(self.data_store.values())

    def non_empty(self) -> bool:
        return not self.is_empty()

    def size(self) -> int:
        """Number of values stored in the grid."""
        return sum(len(columns) for columns in self.data_store.values())

    def clear(self) -> None:
        """Removes all entries from the grid."""
        self.data_store.clear()

    def has_value(self, value: V) -> bool:
        """Whether any stored value equals value. Scans every entry."""
        return any(_values_equal(stored, value)
                   for columns in self.data_store.values()
                   for stored in columns.values())

    def has_key(self, row: R, column: C) -> bool:
        columns = self.data_store.get(row)
        return columns is not None and column in columns

    def has_row(self, row: R) -> bool:
        return bool(self.data_store.get(row))

    def has_column(self, column: C) -> bool:
        """Whether at least one row holds a value in column. Scans every row."""
        return any(column in columns for columns in self.data_store.values())

    # ************************************
    # views
    # ************************************

    def row_view(self, row: R) -> Mapping[C, V]:
        """Read-only snapshot of a row as a column -> value mapping.

        An empty mapping is returned when the row holds no values.
        """
        return MappingProxyType(dict(self.data_store.get(row, {})))

    def column_view(self, column: C) -> Mapping[R, V]:
        """Read-only snapshot of a column as a row -> value mapping.

        An empty mapping is returned when the column holds no values.
        """
        return MappingProxyType(self._collect_column(column))

    def row_map_view(self) -> Mapping[R, Mapping[C, V]]:
        """Read-only snapshot of the whole grid, row-major."""
        return MappingProxyType({
            row: MappingProxyType(dict(columns))
            for row, columns in self.data_store.items()
            if columns
        })

    def column_map_view(self) -> Mapping[C, Mapping[R, V]]:
        """Read-only snapshot of the whole grid, column-major.

        Columns are ordered by first appearance in a row-major scan.
        """
        transposed: dict[C, dict[R, V]] = {}
        for row, columns in self.data_store.items():
            for column, value in columns.items():
                transposed.setdefault(column, {})[row] = value
        return MappingProxyType({column: MappingProxyType(rows) for column, rows in transposed.items()})

    def _collect_column(self, column: C) -> dict[R, V]:
        return {row: columns[column] for row, columns in self.data_store.items() if column in columns}

    # ************************************
    # bulk operations, all return self for chaining
    # ************************************

    def fill_map_from_row(self, target: MutableMapping[C, V], row: R) -> 'Grid2D[R, C, V]':
        """Copy every column -> value pair of row into target. No-op if the row is absent."""
        target.update(self.data_store.get(row, {}))
        return self

    def fill_map_from_column(self, target: MutableMapping[R, V], column: C) -> 'Grid2D[R, C, V]':
        """Copy every row -> value pair of column into target. No-op if the column is absent."""
        target.update(self._collect_column(column))
        return self

    def put_all(self, source: 'Grid2D[R, C, V]') -> 'Grid2D[R, C, V]':
        """Copy every entry of source into this grid, overwriting on key collision.

        Not transactional, entries written before a failure are kept.
        """
        if source is self:
            return self
        count = 0
        for row, column, value in source.entries():
            self.put(row, column, value)
            count += 1
        logger.debug("put_all copied %d entries", count)
        return self

    def put_all_to_row(self, source: Mapping[C, V], row: R) -> 'Grid2D[R, C, V]':
        """Store every column -> value pair of source under row.

        Args:
            source: Mapping whose keys become column keys.
            row: Row key shared by every new entry.

        Returns:
            Self, with the entries of source added.

        Raises:
            InvalidKeyError: If a source key is None, or row is None even for an empty source.
        """
        if row is None:
            raise InvalidKeyError(row, None, missing=['row'])
        for column, value in source.items():
            self.put(row, column, value)
        return self

    def put_all_to_column(self, source: Mapping[R, V], column: C) -> 'Grid2D[R, C, V]':
        """Store every row -> value pair of source under column.

        Args:
            source: Mapping whose keys become row keys.
            column: Column key shared by every new entry.

        Returns:
            Self, with the entries of source added.

        Raises:
            InvalidKeyError: If a source key is None, or column is None even for an empty source.
        """
        if column is None:
            raise InvalidKeyError(None, column, missing=['column'])
        for row, value in source.items():
            self.put(row, column, value)
        return self

    def copy_with_conversion(self,
                             row_function: Callable[[R], R2],
                             column_function: Callable[[C], C2],
                             value_function: Callable[[V], V2]) -> 'Grid2D[R2, C2, V2]':
        """Build a new grid by converting every row key, column key and value.

        Entries are visited row-major in insertion order. When two entries
        convert to the same (row, column) pair, config.on_collision decides:
        'last' keeps the later one, 'first' keeps the earlier one and 'raise'
        raises KeyCollisionError. The new grid gets a copy of this grid's config.

        Args:
            row_function: Converts row keys.
            column_function: Converts column keys.
            value_function: Converts values.

        Returns:
            New Grid2D holding the converted entries.

        Raises:
            InvalidKeyError: If a converted key is None.
            KeyCollisionError: On a collision when config.on_collision is 'raise'.
        """
        result: Grid2D[R2, C2, V2] = Grid2D(config=replace(self.config))
        policy = self.config.on_collision
        collisions = 0
        for row, column, value in self.entries():
            new_row = row_function(row)
            new_column = column_function(column)
            if result.has_key(new_row, new_column):
                if policy == 'raise':
                    raise KeyCollisionError(new_row, new_column)
                collisions += 1
                if policy == 'first':
                    continue
            result.put(new_row, new_column, value_function(value))
        if collisions:
            logger.debug("copy_with_conversion resolved %d key collisions with policy '%s'", collisions, policy)
        return result

    # ************************************
    # iteration
    # ************************************

    def entries(self) -> Iterator[Entry]:
        """Yield (row, column, value) triples row-major."""
        for row, columns in self.data_store.items():
            for column, value in columns.items():
                yield Entry(row, column, value)

    def row_keys(self) -> list[R]:
        """Row keys holding at least one value, in insertion order."""
        return [row for row, columns in self.data_store.items() if columns]

    def column_keys(self) -> list[C]:
        """Column keys holding at least one value, by first appearance."""
        return list(dict.fromkeys(column for columns in self.data_store.values() for column in columns))

    def keys(self) -> list[tuple[R, C]]:
        """Returns the (row, column) keys of all entries."""
        return list(self)

    def values(self) -> list[V]:
        """Returns all stored values, row-major."""
        return [value for columns in self.data_store.values() for value in columns.values()]

    def items(self) -> list[tuple[tuple[R, C], V]]:
        """Returns a list of ((row, column), value) pairs, mimicking dict.items()."""
        return [((row, column), value) for row, column, value in self.entries()]

    def copy(self) -> 'Grid2D[R, C, V]':
        """Returns a copy of the grid. Values are shared, row mappings are not."""
        return Grid2D(data_store=self.data_store, config=replace(self.config))

    # ************************************
    # python protocols
    # ************************************

    @staticmethod
    def _split_key(key) -> tuple[Any, Any]:
        if isinstance(key, tuple) and len(key) == 2:
            return key
        raise KeyError("Grid2D indices must be a tuple of length 2")

    def __getitem__(self, key) -> V:
        """Returns the value at grid[row, column].

        Raises:
            KeyError: If nothing is stored at the key, or the key is not a (row, column) tuple.
        """
        row, column = self._split_key(key)
        columns = self.data_store.get(row)
        if columns is None or column not in columns:
            raise KeyError(key)
        return columns[column]

    def __setitem__(self, key, value: V) -> None:
        row, column = self._split_key(key)
        self.put(row, column, value)

    def __delitem__(self, key) -> None:
        row, column = self._split_key(key)
        if not self.has_key(row, column):
            raise KeyError(key)
        self.remove(row, column)

    def __contains__(self, key) -> bool:
        if isinstance(key, tuple) and len(key) == 2:
            return self.has_key(*key)
        return False

    def __len__(self) -> int:
        return self.size()

    def __bool__(self) -> bool:
        return self.non_empty()

    def __iter__(self) -> Iterator[tuple[R, C]]:
        """Iterates over (row, column) keys, row-major."""
        for row, column, _ in self.entries():
            yield row, column

    def __eq__(self, other) -> bool:
        """Grids are equal when they hold the same entries, configs are ignored."""
        if not isinstance(other, Grid2D):
            return NotImplemented
        return self._non_empty_rows() == other._non_empty_rows()

    def __ior__(self, other: 'Grid2D[R, C, V]') -> 'Grid2D[R, C, V]':
        if not isinstance(other, Grid2D):
            return NotImplemented
        return self.put_all(other)

    def __or__(self, other: 'Grid2D[R, C, V]') -> 'Grid2D[R, C, V]':
        if not isinstance(other, Grid2D):
            return NotImplemented
        return self.copy().put_all(other)

    def __repr__(self) -> str:
        return f"Grid2D({self._non_empty_rows()!r})"

    def _non_empty_rows(self) -> dict[R, dict[C, V]]:
        return {row: columns for row, columns in self.data_store.items() if columns}
