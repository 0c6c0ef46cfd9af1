"""
Seam search over the overlap band of two fields.

The band is turned into a (height, margin) cut grid whose edge costs come
from a SeamCost model. Image 1 owns the source at cell (0, 0), image 2 the
sink at cell (0, margin - 1); the sentinel cost on the vertical edges of
the first and last band columns ties those whole columns to their terminal.
"""

import torch
from typing import Type

from .cost import IntensityCost, SeamCost
from .errors import ValidationError
from .grid import CutGrid


def validate_overlap(field1: torch.Tensor, field2: torch.Tensor, margin: int):
    """
    Check that two fields can be stitched with the given overlap.

    Raises:
        ValidationError: if the margin is not a positive integer no wider
            than either field, or the fields differ in height or element
            shape, or either field is empty
    """
    if isinstance(margin, bool) or not isinstance(margin, int):
        raise ValidationError(f"Margin must be an integer, got {margin!r}")
    if margin <= 0:
        raise ValidationError(f"Margin must be positive, got {margin}")
    if field1.dim() < 2 or field1.dim() != field2.dim() or field1.shape[:-2] != field2.shape[:-2]:
        raise ValidationError(
            f"Fields have incompatible shapes {tuple(field1.shape)} and {tuple(field2.shape)}")
    if field1.shape[-2] != field2.shape[-2]:
        raise ValidationError(f"Image heights differ: {field1.shape[-2]} vs {field2.shape[-2]}")
    if field1.numel() == 0 or field2.numel() == 0:
        raise ValidationError("Cannot stitch an empty image")

    W1, W2 = field1.shape[-1], field2.shape[-1]
    if margin > W1 or margin > W2:
        raise ValidationError(f"Margin {margin} exceeds image width ({W1}, {W2})")


def find_seam(field1: torch.Tensor, field2: torch.Tensor, margin: int,
              cost_type: Type[SeamCost] = IntensityCost) -> torch.Tensor:
    """
    Find the minimum-cost seam through the overlap band.

    Args:
        field1: Left image, scalar (H, W1) or vector (2, H, W1) field
        field2: Right image, same element type, (..., H, W2)
        margin: Width of the overlap band
        cost_type: SeamCost subclass matching the field type

    Returns:
        Boolean labels (H, margin); True where the band takes image 2

    Raises:
        ValidationError: on invalid inputs, before any graph is built
        SolverError: if the cut grid is degenerate (e.g. margin == 1)
    """
    validate_overlap(field1, field2, margin)
    height = field1.shape[-2]

    grid = CutGrid(height, margin)
    grid.set_edge_cost_function(cost_type(field1, field2, margin))
    grid.set_source(0, 0)
    grid.set_sink(0, margin - 1)
    grid.solve()

    return grid.labels()
