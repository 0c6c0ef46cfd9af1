"""
Pipeline driver: decoded buffers in, encoded buffer out.

    DIRECT          - intensity seam on the scalar fields
    GRADIENT_VIEW   - gradient of the first image, no cut
    GRADIENT_STITCH - seam on the gradient fields, output visualized
"""

import numpy as np
import torch
from typing import List, Sequence, Tuple

from .composite import compose
from .config import StitchMode
from .cost import GradientCost, IntensityCost
from .errors import ValidationError
from .fields import field_size, gradient, gradient_to_buffer, to_buffer, to_scalar_field
from .graphcut import find_seam

Image = Tuple[np.ndarray, int, int]


def stitch_images(field1: torch.Tensor, field2: torch.Tensor, margin: int) -> torch.Tensor:
    """Stitch two scalar fields along the least visible intensity seam."""
    labels = find_seam(field1, field2, margin, cost_type=IntensityCost)
    return compose(field1, field2, margin, labels)


def stitch_gradients(field1: torch.Tensor, field2: torch.Tensor, margin: int) -> torch.Tensor:
    """Stitch the gradient fields of two scalar fields.

    Returns:
        Vector field (2, H, W1 + W2 - margin)
    """
    grad1 = gradient(field1)
    grad2 = gradient(field2)
    labels = find_seam(grad1, grad2, margin, cost_type=GradientCost)
    return compose(grad1, grad2, margin, labels)


def load_fields(mode: StitchMode, images: Sequence[Image]) -> List[torch.Tensor]:
    """
    Convert the decoded images a mode needs into scalar fields.

    Raises:
        ValidationError: if fewer images than the mode needs are given
        DecodeError: if a pixel buffer is malformed
    """
    mode = StitchMode.parse(mode)
    if len(images) < mode.n_inputs:
        raise ValidationError(f"Mode {mode.name} needs {mode.n_inputs} images, got {len(images)}")
    return [to_scalar_field(*image) for image in images[:mode.n_inputs]]


def execute(mode: StitchMode, fields: Sequence[torch.Tensor], margin: int) -> Image:
    """Run one pipeline mode on scalar fields and encode the result as RGBA."""
    mode = StitchMode.parse(mode)

    if mode is StitchMode.DIRECT:
        result = stitch_images(fields[0], fields[1], margin)
        buffer = to_buffer(result)
    elif mode is StitchMode.GRADIENT_VIEW:
        result = gradient(fields[0])
        buffer = gradient_to_buffer(result)
    else:
        result = stitch_gradients(fields[0], fields[1], margin)
        buffer = gradient_to_buffer(result)

    width, height = field_size(result)
    return buffer, width, height


def run(mode: StitchMode, images: Sequence[Image], margin: int) -> Image:
    """
    Run one pipeline mode on decoded images.

    Args:
        mode: Pipeline mode
        images: Decoded (buffer, width, height) tuples; GRADIENT_VIEW reads
            only the first
        margin: Overlap width for the stitching modes

    Returns:
        (buffer, width, height) of the result
    """
    return execute(mode, load_fields(mode, images), margin)
