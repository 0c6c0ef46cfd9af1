"""
Min-cut image stitching.

Two images overlapping by a known number of columns are merged along the
seam through the overlap that minimizes the visible difference between
them, found as a minimum cut on a grid graph. Seams can be computed on
intensities or on gradient vectors.
"""

__version__ = "0.1.0"

from .errors import StitchError, DecodeError, ValidationError, SolverError, EncodeError
from .config import StitchMode, StitchConfig, LARGE_COST_SCALE
from .fields import to_scalar_field, to_buffer, gradient, gradient_to_buffer, field_size
from .cost import Direction, SeamCost, IntensityCost, GradientCost
from .grid import CutGrid, Label
from .graphcut import validate_overlap, find_seam
from .composite import compose
from .pipeline import stitch_images, stitch_gradients, load_fields, execute, run

__all__ = [
    'StitchError',
    'DecodeError',
    'ValidationError',
    'SolverError',
    'EncodeError',
    'StitchMode',
    'StitchConfig',
    'LARGE_COST_SCALE',
    'to_scalar_field',
    'to_buffer',
    'gradient',
    'gradient_to_buffer',
    'field_size',
    'Direction',
    'SeamCost',
    'IntensityCost',
    'GradientCost',
    'CutGrid',
    'Label',
    'validate_overlap',
    'find_seam',
    'compose',
    'stitch_images',
    'stitch_gradients',
    'load_fields',
    'execute',
    'run',
]
