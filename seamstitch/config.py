"""
Configuration for the stitching pipeline.

Defaults used by the command line, the pipeline mode enumeration and the
constant that scales the boundary sentinel cost.
"""

from dataclasses import dataclass
from enum import Enum

from .errors import ValidationError


# Boundary edges cost LARGE_COST_SCALE * grid_width * grid_height
LARGE_COST_SCALE = 1_000_000.0


class StitchMode(Enum):
    """Pipeline modes selectable from the command line."""

    DIRECT = 0
    GRADIENT_VIEW = 1
    GRADIENT_STITCH = 2

    @property
    def n_inputs(self) -> int:
        """Number of input images the mode reads."""
        return 1 if self is StitchMode.GRADIENT_VIEW else 2

    @classmethod
    def parse(cls, value) -> 'StitchMode':
        """Convert an integer code (or its string form) into a mode.

        Raises:
            ValidationError: for anything that is not a known mode code
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            codes = ', '.join(f"{m.value} ({m.name.lower()})" for m in cls)
            raise ValidationError(f"Invalid mode: {value!r}. Must be one of {codes}.") from None


@dataclass
class StitchConfig:
    """Command line defaults."""

    image1: str = 'goat2.png'
    image2: str = 'cat.png'
    margin: int = 100
    output: str = 'result.png'
    mode: StitchMode = StitchMode.DIRECT
