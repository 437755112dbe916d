"""
Shared fixtures for unit tests
"""

import io

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def make_image_bytes():
    """Factory for encoded test images"""
    def _make(
        width=640,
        height=480,
        fmt="JPEG",
        color=(200, 30, 30),
        mode="RGB",
        noise=False,
        **save_kwargs
    ):
        if noise:
            rng = np.random.default_rng(0)
            pixels = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
            image = Image.fromarray(pixels)
        else:
            image = Image.new(mode, (width, height), color)

        buffer = io.BytesIO()
        image.save(buffer, format=fmt, **save_kwargs)
        return buffer.getvalue()

    return _make
