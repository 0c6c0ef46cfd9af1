"""
Assemble the composite from two fields and the seam labels.

Works on (..., H, W) tensors so scalar and gradient fields share the same
code. There is no blending: each band pixel comes from exactly one image.
"""

import torch

from .errors import ValidationError
from .graphcut import validate_overlap


def compose(field1: torch.Tensor, field2: torch.Tensor, margin: int,
            labels: torch.Tensor) -> torch.Tensor:
    """
    Merge two fields across a seam.

    Output columns [0, W1 - margin) come from field1, the band
    [W1 - margin, W1) from field1 where labels is False and from the
    matching column of field2 where it is True, and the remaining
    columns from field2 past its first `margin` columns.

    Args:
        field1: Left field (..., H, W1)
        field2: Right field (..., H, W2)
        margin: Width of the overlap band
        labels: Boolean (H, margin); True selects field2

    Returns:
        Composite field (..., H, W1 + W2 - margin)

    Raises:
        ValidationError: if the fields cannot overlap by `margin` columns or
            the labels do not cover the band
    """
    validate_overlap(field1, field2, margin)
    H, W1 = field1.shape[-2:]
    W2 = field2.shape[-1]
    if tuple(labels.shape) != (H, margin):
        raise ValidationError(f"Labels have shape {tuple(labels.shape)}, expected {(H, margin)}")

    offset = W1 - margin
    out = field1.new_empty(field1.shape[:-1] + (W1 + W2 - margin,))

    out[..., :offset] = field1[..., :offset]
    out[..., offset:W1] = torch.where(labels.to(torch.bool), field2[..., :margin],
                                      field1[..., offset:])
    out[..., W1:] = field2[..., margin:]

    return out
