"""
PNG (and other Pillow-supported) file I/O for RGBA pixel buffers.
"""

import io
import os
import tempfile

import numpy as np
from PIL import Image

from .errors import DecodeError, EncodeError


def decode(path: str):
    """
    Load an image file as an interleaved RGBA buffer.

    Returns:
        (buffer, width, height) with buffer a flat uint8 array

    Raises:
        DecodeError: if the file is missing or cannot be parsed
    """
    try:
        with Image.open(path) as img:
            rgba = img.convert('RGBA')
    except (OSError, ValueError) as exc:
        raise DecodeError(f"Cannot open {path}: {exc}") from exc

    width, height = rgba.size
    return np.asarray(rgba, dtype=np.uint8).reshape(-1), width, height


def encode(path: str, buffer, width: int, height: int):
    """
    Write an RGBA buffer to `path`, format chosen by the file extension.

    The file is encoded in memory and moved into place only once complete,
    so a failed save leaves no partial output.

    Raises:
        EncodeError: if the buffer does not match the size, the extension
            is unknown, or writing fails
    """
    ext = os.path.splitext(path)[1].lower()
    fmt = Image.registered_extensions().get(ext)
    if fmt is None:
        raise EncodeError(f"Unknown image format for {path}")

    pixels = np.asarray(buffer, dtype=np.uint8).reshape(-1)
    if pixels.size != 4 * width * height:
        raise EncodeError(f"Buffer of {pixels.size} bytes does not match {width}x{height} RGBA")

    data = io.BytesIO()
    try:
        img = Image.fromarray(pixels.reshape(height, width, 4))
        if fmt == 'JPEG':
            img = img.convert('RGB')
        img.save(data, format=fmt)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"Cannot encode {path}: {exc}") from exc

    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(dir=directory, suffix=ext, delete=False) as tmp:
            tmp_path = tmp.name
            tmp.write(data.getvalue())
        os.replace(tmp_path, path)
    except OSError as exc:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise EncodeError(f"Cannot write {path}: {exc}") from exc
