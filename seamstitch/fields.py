"""
Conversion between interleaved RGBA pixel buffers and torch fields.

A scalar field is a (H, W) float tensor of intensities in [0, 1].
A vector field is a (2, H, W) tensor holding the x and y gradient
components of a scalar field.

Buffers are flat uint8 arrays with 4 interleaved channels per pixel,
row-major. Both directions of the conversion are lossy: intensities are
truncated to 8 bits and gradients lose their sign.
"""

import numpy as np
import torch
from typing import Tuple

from .errors import DecodeError


def _as_uint8(buffer) -> np.ndarray:
    if isinstance(buffer, np.ndarray):
        if buffer.dtype != np.uint8:
            raise DecodeError(f"Pixel buffer must hold uint8 values, got {buffer.dtype}")
        return np.ascontiguousarray(buffer).reshape(-1)
    try:
        return np.frombuffer(buffer, dtype=np.uint8)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"Unsupported pixel buffer: {exc}") from exc


def field_size(field: torch.Tensor) -> Tuple[int, int]:
    """Return (width, height) of a scalar (H, W) or vector (2, H, W) field."""
    return field.shape[-1], field.shape[-2]


def to_scalar_field(buffer, width: int, height: int) -> torch.Tensor:
    """
    Read the first channel of an RGBA buffer as a normalized scalar field.

    Args:
        buffer: Interleaved 4-channel 8-bit pixels (bytes, bytearray or ndarray)
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        Scalar field (H, W), float32 in [0, 1]

    Raises:
        DecodeError: if the dimensions are not positive or the buffer is
            shorter than 4 * width * height bytes
    """
    if width <= 0 or height <= 0:
        raise DecodeError(f"Invalid image size {width}x{height}")

    data = _as_uint8(buffer)
    n_bytes = 4 * width * height
    if data.size < n_bytes:
        raise DecodeError(
            f"Pixel buffer holds {data.size} bytes, expected {n_bytes} for {width}x{height} RGBA")

    red = data[:n_bytes].reshape(height, width, 4)[:, :, 0]
    return torch.from_numpy(red.astype(np.float32)) / 255.0


def to_buffer(field: torch.Tensor) -> np.ndarray:
    """
    Pack a scalar field into a grayscale RGBA buffer.

    The value is copied to R, G and B and alpha is set to 255. Scaling back
    to [0, 255] truncates toward zero, so the conversion does not round-trip
    exactly.

    Args:
        field: Scalar field (H, W)

    Returns:
        Flat uint8 buffer of length 4 * H * W
    """
    H, W = field.shape
    # float -> uint8 cast truncates; clamp first so out-of-range values cannot wrap
    gray = (field.float().clamp(0.0, 1.0) * 255.0).to(torch.uint8)

    pixels = torch.empty(H, W, 4, dtype=torch.uint8)
    pixels[:, :, 0] = gray
    pixels[:, :, 1] = gray
    pixels[:, :, 2] = gray
    pixels[:, :, 3] = 255
    return pixels.numpy().reshape(-1)


def gradient(field: torch.Tensor) -> torch.Tensor:
    """
    Central-difference gradient with replicated borders.

    grad_x[y, x] = (f[y, min(x+1, W-1)] - f[y, max(x-1, 0)]) / 2
    grad_y[y, x] = (f[min(y+1, H-1), x] - f[max(y-1, 0), x]) / 2

    Args:
        field: Scalar field (H, W)

    Returns:
        Vector field (2, H, W); channel 0 is x, channel 1 is y
    """
    H, W = field.shape

    cols = torch.arange(W, device=field.device)
    rows = torch.arange(H, device=field.device)
    right = field[:, (cols + 1).clamp(max=W - 1)]
    left = field[:, (cols - 1).clamp(min=0)]
    below = field[(rows + 1).clamp(max=H - 1), :]
    above = field[(rows - 1).clamp(min=0), :]

    grad_x = (right - left) / 2.0
    grad_y = (below - above) / 2.0
    return torch.stack([grad_x, grad_y], dim=0)


def gradient_to_buffer(vector_field: torch.Tensor) -> np.ndarray:
    """
    Visualize a gradient field as an RGBA buffer.

    R holds max(0, grad_x) and G holds max(0, grad_y), both scaled to
    [0, 255] and truncated; B is 0 and A is 255. Negative components are
    discarded, so this is a visualization, not an invertible encoding.

    Args:
        vector_field: Vector field (2, H, W)

    Returns:
        Flat uint8 buffer of length 4 * H * W
    """
    _, H, W = vector_field.shape
    packed = (vector_field.float().clamp(0.0, 1.0) * 255.0).to(torch.uint8)

    pixels = torch.zeros(H, W, 4, dtype=torch.uint8)
    pixels[:, :, 0] = packed[0]
    pixels[:, :, 1] = packed[1]
    pixels[:, :, 3] = 255
    return pixels.numpy().reshape(-1)
