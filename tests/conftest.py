import sys
from pathlib import Path

import pytest


# Ensure tests can import project packages regardless of how pytest is invoked.
ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)


@pytest.fixture
def storage_paths(tmp_path):
    from engine.paths import build_storage_paths

    return build_storage_paths(tmp_path / "storage")


@pytest.fixture
def make_image(tmp_path):
    from PIL import Image

    def _make(name="input.png", size=(640, 360), color=(200, 40, 40)):
        path = tmp_path / name
        Image.new("RGB", size, color).save(path)
        return path

    return _make
