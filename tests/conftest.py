import io
import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

# Ensure the repo root is on sys.path for direct pytest runs
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def solid_rgba(h, w, rgb, alpha=255):
    out = np.empty((h, w, 4), dtype=np.uint8)
    out[..., :3] = rgb
    out[..., 3] = alpha
    return out


def png_bytes(rgba):
    buf = io.BytesIO()
    Image.fromarray(rgba).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_rgba(rng):
    return rng.integers(0, 256, size=(24, 31, 4), dtype=np.uint8)
