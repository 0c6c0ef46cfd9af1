"""
Error types raised by the stitching pipeline.

Every error is fatal: callers abort and report, nothing is retried.
"""


class StitchError(Exception):
    """Base class for all stitching failures."""


class DecodeError(StitchError):
    """An input image is missing, unreadable, or its pixel buffer is malformed."""


class ValidationError(StitchError, ValueError):
    """Inputs cannot be stitched (bad margin, mismatched heights, bad labels)."""


class SolverError(StitchError):
    """The cut grid is degenerate or the max-flow solve cannot proceed."""


class EncodeError(StitchError):
    """The composite could not be written."""
