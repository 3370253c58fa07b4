import logging
import numbers
from typing import Optional, Sequence

import numpy as np
import pandas as pd
from scipy import sparse

from .config import Grid2DConfig
from .constants import FrameColumn
from .grid import Grid2D
from .grid_errors import InvalidKeyError, LabelCountError, MissingFrameColumnError, NonNumericValueError

logger = logging.getLogger(__name__)


def to_frame(grid: Grid2D) -> pd.DataFrame:
    """
    Convert a grid into a long-form DataFrame with one row per entry.

    Columns are named by FrameColumn (row, column, value) and rows follow the
    grid's row-major order.
    """
    records = [tuple(entry) for entry in grid.entries()]
    df = pd.DataFrame(records, columns=[FrameColumn.ROW, FrameColumn.COLUMN, FrameColumn.VALUE])
    logger.debug("to_frame built %d records", len(df))
    return df


def from_frame(df: pd.DataFrame,
               row_col: str = FrameColumn.ROW,
               column_col: str = FrameColumn.COLUMN,
               value_col: str = FrameColumn.VALUE,
               config: Optional[Grid2DConfig] = None) -> Grid2D:
    """
    Build a grid from a long-form DataFrame.

    Args:
        df: DataFrame holding one entry per record.
        row_col: Name of the column holding row keys.
        column_col: Name of the column holding column keys.
        value_col: Name of the column holding values.
        config: Config of the new grid, defaults to Grid2DConfig().

    Returns:
        New Grid2D. Later records overwrite earlier records with the same key.

    Raises:
        MissingFrameColumnError: If any of the named columns is missing.
        InvalidKeyError: If a row or column key is missing (None, NaN, NaT or NA).
    """
    for col in (row_col, column_col, value_col):
        if col not in df.columns:
            raise MissingFrameColumnError(col, df.columns.tolist())

    # pandas marks missing keys as NaN/NaT/NA rather than None
    missing = df[row_col].isna() | df[column_col].isna()
    if missing.any():
        pos = int(np.flatnonzero(missing.to_numpy())[0])
        row, column = df[row_col].iloc[pos], df[column_col].iloc[pos]
        names = [name for name, col in (('row', row_col), ('column', column_col)) if pd.isna(df[col].iloc[pos])]
        raise InvalidKeyError(row, column, missing=names)

    grid = Grid2D(config=config if config is not None else Grid2DConfig())
    # tolist() unwraps numpy scalars so keys hash like plain python values
    for row, column, value in zip(df[row_col].tolist(), df[column_col].tolist(), df[value_col].tolist()):
        grid.put(row, column, value)
    logger.debug("from_frame read %d records into %d entries", len(df), grid.size())
    return grid


def to_dense(grid: Grid2D, fill_value=np.nan) -> pd.DataFrame:
    """
    Convert a grid into a wide DataFrame indexed by row keys with one column per column key.

    Keys are ordered by first appearance. Missing entries hold fill_value.
    """
    rows = grid.row_keys()
    cols = grid.column_keys()
    row_map = grid.row_map_view()
    values = [[row_map[row].get(col, fill_value) for col in cols] for row in rows]
    return pd.DataFrame(values,
                        index=pd.Index(rows, dtype=object, tupleize_cols=False),
                        columns=pd.Index(cols, dtype=object, tupleize_cols=False))


def to_sparse(grid: Grid2D) -> tuple[sparse.coo_array, list, list]:
    """
    Convert a grid of numeric values into a scipy COO sparse array.

    Returns:
        Tuple of (matrix, row_labels, col_labels) where matrix[i, j] holds the
        value stored at (row_labels[i], col_labels[j]).

    Raises:
        NonNumericValueError: If any stored value is not a number.
    """
    row_labels = grid.row_keys()
    col_labels = grid.column_keys()
    row_idx = {row: i for i, row in enumerate(row_labels)}
    col_idx = {col: j for j, col in enumerate(col_labels)}

    i_ids, j_ids, data = [], [], []
    for row, column, value in grid.entries():
        if not isinstance(value, numbers.Number):
            raise NonNumericValueError(row, column, value)
        i_ids.append(row_idx[row])
        j_ids.append(col_idx[column])
        data.append(value)

    matrix = sparse.coo_array(
        (np.asarray(data, dtype=np.float64 if len(data) == 0 else None),
         (np.asarray(i_ids, dtype=np.intp), np.asarray(j_ids, dtype=np.intp))),
        shape=(len(row_labels), len(col_labels)),
    )
    logger.debug("to_sparse built a %dx%d matrix with %d entries", len(row_labels), len(col_labels), len(data))
    return matrix, row_labels, col_labels


def from_sparse(matrix,
                row_labels: Optional[Sequence] = None,
                col_labels: Optional[Sequence] = None,
                config: Optional[Grid2DConfig] = None) -> Grid2D:
    """
    Build a grid from a scipy sparse matrix or a dense 2D numpy array.

    Every explicitly stored nonzero element becomes an entry. Row and column
    labels default to the integer indices.

    Raises:
        LabelCountError: If row_labels or col_labels does not match the matrix shape.
    """
    csr = sparse.csr_array(matrix, copy=True)
    csr.sum_duplicates()
    csr.eliminate_zeros()
    coo = csr.tocoo()
    n_rows, n_cols = coo.shape

    if row_labels is None:
        row_labels = list(range(n_rows))
    if col_labels is None:
        col_labels = list(range(n_cols))
    if len(row_labels) != n_rows:
        raise LabelCountError('row', n_rows, len(row_labels))
    if len(col_labels) != n_cols:
        raise LabelCountError('column', n_cols, len(col_labels))

    grid = Grid2D(config=config if config is not None else Grid2DConfig())
    for i, j, value in zip(coo.row.tolist(), coo.col.tolist(), coo.data.tolist()):
        grid.put(row_labels[i], col_labels[j], value)
    logger.debug("from_sparse read %d entries", grid.size())
    return grid
