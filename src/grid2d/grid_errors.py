
class Grid2DConfigError(ValueError):
    """Base class for Grid2D configuration errors."""
    pass

class Grid2DRuntimeError(ValueError):
    """Base class for Grid2D runtime errors."""
    pass



class InvalidConfigError(Grid2DConfigError):
    """Raised when a configuration field holds a value of the wrong kind."""

    def __init__(self, field_name: str, value):
        self.field_name = field_name
        self.value = value
        message = f"Invalid value for config field '{field_name}': {value!r}"
        super().__init__(message)


class InvalidCollisionPolicyError(Grid2DConfigError):
    """Raised when an unknown key collision policy is provided."""

    def __init__(self, policy: str, valid_policies: list):
        self.policy = policy
        self.valid_policies = valid_policies
        message = f"Invalid collision policy '{policy}'. Must be one of: {valid_policies}"
        super().__init__(message)


class InvalidKeyError(Grid2DRuntimeError):
    """Raised when a write is attempted with a missing (None) row or column key."""

    def __init__(self, row, column, missing: list = None):
        self.row = row
        self.column = column

        if missing is None:
            missing = [name for name, key in (('row', row), ('column', column)) if key is None]
        self.missing = missing
        message = f"Grid2D keys cannot be missing, got a missing key for: {', '.join(missing)} (row={row!r}, column={column!r})"
        super().__init__(message)


class LabelCountError(Grid2DRuntimeError):
    """Raised when the number of axis labels does not match the matrix shape."""

    def __init__(self, axis: str, expected: int, got: int):
        self.axis = axis
        self.expected = expected
        self.got = got
        message = f"Expected {expected} {axis} labels, got {got}"
        super().__init__(message)


class KeyCollisionError(Grid2DRuntimeError):
    """Raised when two source entries convert to the same (row, column) pair and collisions are forbidden."""

    def __init__(self, row, column):
        self.row = row
        self.column = column
        message = f"Converted key ({row!r}, {column!r}) collides with an entry already written"
        super().__init__(message)


class MissingFrameColumnError(Grid2DRuntimeError):
    """Raised when a DataFrame lacks a column needed to build a Grid2D."""

    def __init__(self, column: str, available: list):
        self.column = column
        self.available = available
        message = f'Column "{column}" not found in DataFrame, available columns: {available}'
        super().__init__(message)


class NonNumericValueError(Grid2DRuntimeError):
    """Raised when a non-numeric value is found while building a numeric sparse matrix."""

    def __init__(self, row, column, value):
        self.row = row
        self.column = column
        self.value = value

        message = f"Value at ({row!r}, {column!r}) is not numeric: {value!r}. Cannot build a sparse matrix."
        super().__init__(message)
