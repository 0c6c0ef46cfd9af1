"""
Edge costs for the seam grid.

The overlap band is the last `margin` columns of image 1 and the first
`margin` columns of image 2. Each cell of the band is a node of the cut
grid; cutting the edge between a cell and one of its 4-neighbours is
penalized by how different the two images look across that edge,
evaluated both ways:

    cost = d(I1[p], I2[q]) + d(I1[q], I2[p])

where p is the cell, q its neighbour, and d is the absolute difference
(intensity variant) or squared Euclidean distance (gradient variant).

Vertical edges in the first and last column of the band get a sentinel
cost so the seam cannot run along the outer edges of the band.
"""

import torch
from abc import ABC, abstractmethod
from enum import Enum
from typing import Tuple

from .config import LARGE_COST_SCALE
from .errors import ValidationError


class Direction(Enum):
    """Neighbour direction of a grid edge, as a (dy, dx) offset."""

    NORTH = (-1, 0)
    SOUTH = (1, 0)
    EAST = (0, 1)
    WEST = (0, -1)

    @property
    def offset(self) -> Tuple[int, int]:
        return self.value

    @property
    def is_vertical(self) -> bool:
        return self.value[1] == 0


class SeamCost(ABC):
    """
    Cost of cutting a grid edge of the overlap band.

    Holds read-only references to both fields for the duration of one
    stitch; instances carry no other state, so they can be called any
    number of times in any order.

    Calls accept either python ints (and return a float) or equally
    shaped index tensors (and return a tensor of costs), which lets a
    solver evaluate edges one by one or a whole direction at once.

    An edge whose neighbour lies outside the band does not exist and costs
    0, except for the sentinel on the vertical edges of the first and last
    band column, which applies to every row.
    """

    def __init__(self, field1: torch.Tensor, field2: torch.Tensor, margin: int):
        self.field1 = field1
        self.field2 = field2
        self.margin = margin
        self.height = field1.shape[-2]
        self.offset = field1.shape[-1] - margin
        self.large = LARGE_COST_SCALE * margin * self.height

    def __call__(self, row, col, direction: Direction):
        direction = Direction(direction)
        dy, dx = direction.offset

        H, margin = self.height, self.margin
        scalar = isinstance(row, int) and isinstance(col, int)

        rows = torch.as_tensor(row, device=self.field1.device)
        cols = torch.as_tensor(col, device=self.field1.device)
        if ((rows < 0) | (rows >= H) | (cols < 0) | (cols >= margin)).any():
            raise ValidationError(f"Cell ({row}, {col}) is outside the {H}x{margin} overlap band")

        rows2, cols2 = rows + dy, cols + dx
        inside = (rows2 >= 0) & (rows2 < H) & (cols2 >= 0) & (cols2 < margin)
        # clamped so missing neighbours index a valid cell; masked to 0 below
        weight = self.difference(rows, cols, rows2.clamp(0, H - 1),
                                 cols2.clamp(0, margin - 1)).to(torch.float64)
        weight = torch.where(inside, weight, torch.zeros_like(weight))

        if direction.is_vertical:
            boundary = (cols == 0) | (cols == margin - 1)
            weight = torch.where(boundary, torch.full_like(weight, self.large), weight)
        return weight.item() if scalar else weight

    @abstractmethod
    def difference(self, row, col, row2, col2) -> torch.Tensor:
        """Cross-image difference between overlap cells (row, col) and (row2, col2)."""


class IntensityCost(SeamCost):
    """Sum of absolute intensity differences on scalar fields (H, W)."""

    def difference(self, row, col, row2, col2) -> torch.Tensor:
        f1, f2, off = self.field1, self.field2, self.offset
        return ((f1[row, off + col] - f2[row2, col2]).abs()
                + (f1[row2, off + col2] - f2[row, col]).abs())


class GradientCost(SeamCost):
    """Sum of squared gradient-vector distances on vector fields (2, H, W)."""

    def difference(self, row, col, row2, col2) -> torch.Tensor:
        g1, g2, off = self.field1, self.field2, self.offset
        forward = g1[:, row, off + col] - g2[:, row2, col2]
        backward = g1[:, row2, off + col2] - g2[:, row, col]
        return (forward ** 2).sum(dim=0) + (backward ** 2).sum(dim=0)
