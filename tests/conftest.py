import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def write_palette(tmp_path):
    """Write palette text to a file and return its path."""

    def _write(text: str, name: str = "palette.txt") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_image(tmp_path):
    """Save a uint8 (H,W,3|4) array with Pillow and return its path."""

    def _write(arr: np.ndarray, name: str = "input.png") -> Path:
        path = tmp_path / name
        Image.fromarray(np.asarray(arr, dtype=np.uint8)).save(path)
        return path

    return _write


@pytest.fixture
def random_linear_image():
    """Deterministic float32 linear RGB test image."""

    def _make(height: int = 23, width: int = 37, seed: int = 7) -> np.ndarray:
        rng = np.random.default_rng(seed)
        return rng.random((height, width, 3), dtype=np.float32)

    return _make
