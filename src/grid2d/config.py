from typing import Literal
from dataclasses import dataclass

from .constants import COLLISION_POLICIES
from .grid_errors import InvalidCollisionPolicyError, InvalidConfigError


@dataclass
class Grid2DConfig:
    """
    Configuration for a Grid2D container.

    Controls how empty rows are stored and how key collisions are resolved
    when copying a grid with key conversion.
    """

    prune_empty_rows: bool = True
    """Whether to drop a row's column mapping once its last entry is removed.
    Observable behavior (has_row, size, views) is the same either way."""

    on_collision: Literal['last', 'first', 'raise'] = 'last'
    """How copy_with_conversion resolves two entries converting to the same key.
    Entries are visited row-major in insertion order:
    - 'last': the later entry overwrites the earlier one
    - 'first': the earlier entry is kept
    - 'raise': a KeyCollisionError is raised
    """

    def validate(self) -> None:
        """Validate configuration parameters."""
        if not isinstance(self.prune_empty_rows, bool):
            raise InvalidConfigError('prune_empty_rows', self.prune_empty_rows)
        if self.on_collision not in COLLISION_POLICIES:
            raise InvalidCollisionPolicyError(self.on_collision, COLLISION_POLICIES)
