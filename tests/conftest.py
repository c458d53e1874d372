from __future__ import annotations

from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image


def make_image_bytes(fmt: str, size=(16, 12), color=(200, 40, 40)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def jpeg_path(tmp_path: Path) -> Path:
    p = tmp_path / "photo.jpg"
    p.write_bytes(make_image_bytes("JPEG"))
    return p


@pytest.fixture
def png_path(tmp_path: Path) -> Path:
    p = tmp_path / "live1.png"
    p.write_bytes(make_image_bytes("PNG"))
    return p


@pytest.fixture
def gif_path(tmp_path: Path) -> Path:
    p = tmp_path / "live2.gif"
    p.write_bytes(make_image_bytes("GIF"))
    return p


@pytest.fixture(autouse=True)
def _no_bws_env(monkeypatch):
    # Keep the developer's shell credentials out of the tests.
    for key in ("BWS_APP_ID", "BWS_APP_SECRET", "BWS_ENDPOINT", "BWS_TIMEOUT_S", "BWS_CONFIG_PATH"):
        monkeypatch.delenv(key, raising=False)
