"""
Two-dimensional associative container.

A mapping keyed by (row key, column key) pairs with row and column views,
bulk merges, and key/value converting copies.
"""

__version__ = "0.1.0"

from .grid import Grid2D, Entry
from .config import Grid2DConfig
from .constants import FrameColumn
from .interop import to_frame, from_frame, to_dense, to_sparse, from_sparse
from .grid_errors import (
    Grid2DConfigError,
    Grid2DRuntimeError,
    InvalidConfigError,
    InvalidCollisionPolicyError,
    InvalidKeyError,
    LabelCountError,
    KeyCollisionError,
    MissingFrameColumnError,
    NonNumericValueError,
)

__all__ = [
    "Grid2D",
    "Entry",
    "Grid2DConfig",
    "FrameColumn",
    "to_frame",
    "from_frame",
    "to_dense",
    "to_sparse",
    "from_sparse",
    "Grid2DConfigError",
    "Grid2DRuntimeError",
    "InvalidConfigError",
    "InvalidCollisionPolicyError",
    "InvalidKeyError",
    "LabelCountError",
    "KeyCollisionError",
    "MissingFrameColumnError",
    "NonNumericValueError",
]
