import pytest
import os
import sys
import numpy as np
import pandas as pd
from scipy import sparse

# Add the src directory to Python path to import local grid2d
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from grid2d import (
    Grid2D,
    Grid2DConfig,
    FrameColumn,
    Grid2DRuntimeError,
    InvalidKeyError,
    LabelCountError,
    MissingFrameColumnError,
    NonNumericValueError,
    to_frame,
    from_frame,
    to_dense,
    to_sparse,
    from_sparse,
)
from test_utils import build_example_grid, validate_contents


@pytest.fixture
def grid() -> Grid2D:
    return build_example_grid()


class TestFrames:

    def test_to_frame(self, grid):
        df = to_frame(grid)
        expected = pd.DataFrame({
            FrameColumn.ROW: ["r1", "r1", "r2"],
            FrameColumn.COLUMN: ["c1", "c2", "c1"],
            FrameColumn.VALUE: [10, 20, 30],
        })
        pd.testing.assert_frame_equal(df, expected)

    def test_to_frame_empty(self):
        df = to_frame(Grid2D())
        assert len(df) == 0
        assert df.columns.tolist() == [FrameColumn.ROW, FrameColumn.COLUMN, FrameColumn.VALUE]

    def test_frame_round_trip(self, grid):
        assert from_frame(to_frame(grid)) == grid

    def test_from_frame_custom_columns(self):
        df = pd.DataFrame({
            'frame': [1, 1, 2, 2],
            'object_id': [7, 8, 7, 7],
            'score': [0.5, 0.25, 0.75, 1.0],
        })
        grid = from_frame(df, row_col='frame', column_col='object_id', value_col='score',
                          config=Grid2DConfig(prune_empty_rows=False))
        # the duplicate (2, 7) record overwrites the earlier one
        validate_contents(grid, {(1, 7): 0.5, (1, 8): 0.25, (2, 7): 1.0})
        assert grid.config.prune_empty_rows is False
        assert type(grid.row_keys()[0]) is int

    def test_from_frame_missing_column(self):
        df = pd.DataFrame({'row': [1], 'value': [2]})
        with pytest.raises(MissingFrameColumnError) as excinfo:
            from_frame(df)
        assert excinfo.value.column == 'column'
        assert excinfo.value.available == ['row', 'value']

    def test_from_frame_none_key(self):
        df = pd.DataFrame({
            'row': pd.Series(['a', None], dtype=object),
            'column': ['x', 'y'],
            'value': [1, 2],
        })
        with pytest.raises(InvalidKeyError):
            from_frame(df)

    def test_from_frame_nan_row_key(self):
        df = pd.DataFrame({'row': [1.0, np.nan, np.nan], 'column': ['x', 'x', 'y'], 'value': [1, 2, 3]})
        with pytest.raises(InvalidKeyError) as excinfo:
            from_frame(df)
        assert excinfo.value.missing == ['row']

    def test_from_frame_nan_column_key(self):
        df = pd.DataFrame({'row': ['a', 'b'], 'column': [1.0, np.nan], 'value': [1, 2]})
        with pytest.raises(InvalidKeyError) as excinfo:
            from_frame(df)
        assert excinfo.value.missing == ['column']
        assert excinfo.value.row == 'b'


class TestDense:

    def test_to_dense(self, grid):
        df = to_dense(grid)
        assert df.index.tolist() == ["r1", "r2"]
        assert df.columns.tolist() == ["c1", "c2"]
        np.testing.assert_array_equal(df.to_numpy(dtype=np.float64), np.array([[10.0, 20.0], [30.0, np.nan]]))

    def test_to_dense_fill_value(self, grid):
        df = to_dense(grid, fill_value=0)
        assert df.loc["r2", "c2"] == 0
        assert df.loc["r1", "c2"] == 20

    def test_to_dense_tuple_keys(self):
        grid = Grid2D.from_entries([((0, 0), "a", 1), ((0, 1), "a", 2)])
        df = to_dense(grid)
        assert df.index.tolist() == [(0, 0), (0, 1)]
        assert df.index.nlevels == 1


class TestSparse:

    def test_to_sparse(self, grid):
        matrix, row_labels, col_labels = to_sparse(grid)
        assert row_labels == ["r1", "r2"]
        assert col_labels == ["c1", "c2"]
        assert matrix.shape == (2, 2)
        np.testing.assert_array_equal(matrix.toarray(), np.array([[10, 20], [30, 0]]))

    def test_to_sparse_empty(self):
        matrix, row_labels, col_labels = to_sparse(Grid2D())
        assert matrix.shape == (0, 0)
        assert matrix.nnz == 0
        assert row_labels == []
        assert col_labels == []

    def test_to_sparse_rejects_non_numeric(self, grid):
        grid.put("r3", "c3", "text")
        with pytest.raises(NonNumericValueError) as excinfo:
            to_sparse(grid)
        assert excinfo.value.value == "text"
        assert excinfo.value.row == "r3"

    def test_to_sparse_rejects_none(self, grid):
        grid.put("r3", "c3", None)
        with pytest.raises(NonNumericValueError):
            to_sparse(grid)

    def test_sparse_round_trip(self, grid):
        matrix, row_labels, col_labels = to_sparse(grid)
        assert from_sparse(matrix, row_labels, col_labels) == grid

    def test_from_dense_array(self):
        arr = np.array([[0.0, 1.5], [2.5, 0.0], [0.0, 0.0]])
        grid = from_sparse(arr)
        validate_contents(grid, {(0, 1): 1.5, (1, 0): 2.5})
        assert not grid.has_row(2)

    def test_from_sparse_drops_explicit_zeros(self):
        matrix = sparse.coo_array((np.array([0.0, 4.0]), (np.array([0, 1]), np.array([0, 1]))), shape=(2, 2))
        grid = from_sparse(matrix, row_labels=["a", "b"], col_labels=["x", "y"])
        validate_contents(grid, {("b", "y"): 4.0})

    def test_from_sparse_label_mismatch(self):
        with pytest.raises(LabelCountError) as excinfo:
            from_sparse(np.eye(2), row_labels=["only_one"])
        assert excinfo.value.axis == 'row'
        assert excinfo.value.expected == 2
        assert excinfo.value.got == 1
        assert isinstance(excinfo.value, Grid2DRuntimeError)

    def test_from_sparse_column_label_mismatch(self):
        with pytest.raises(LabelCountError) as excinfo:
            from_sparse(np.eye(2), col_labels=["a", "b", "c"])
        assert excinfo.value.axis == 'column'
