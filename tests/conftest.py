"""Shared test fixtures for the seamstitch test suite."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import torch
import pytest
from PIL import Image


def make_rgba_buffer(values: np.ndarray) -> np.ndarray:
    """Flat RGBA buffer whose R, G, B all hold `values` (H, W) uint8."""
    H, W = values.shape
    pixels = np.empty((H, W, 4), dtype=np.uint8)
    pixels[:, :, :3] = values[:, :, None]
    pixels[:, :, 3] = 255
    return pixels.reshape(-1)


def make_ramp_field(H, W):
    """Horizontal ramp: 0 on the left, 1 on the right."""
    return torch.linspace(0, 1, W).unsqueeze(0).expand(H, W).clone()


def save_gray_png(path, values: np.ndarray):
    """Write an (H, W) uint8 array as an RGBA PNG."""
    rgba = make_rgba_buffer(values).reshape(values.shape[0], values.shape[1], 4)
    Image.fromarray(rgba).save(str(path))
    return str(path)


@pytest.fixture
def random_pair():
    """Two random 12x10 scalar fields with a shared 4-column overlap."""
    torch.manual_seed(0)
    return torch.rand(12, 10), torch.rand(12, 10), 4
