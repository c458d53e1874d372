# services/encoding/image_encoder.py
from __future__ import annotations

import base64
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Union

from PIL import Image

from services.errors import FileReadError, UnsupportedFormatError

SUPPORTED_MIME_TYPES = ("image/jpeg", "image/png")

OCTET_STREAM = "application/octet-stream"
EMPTY_CONTENT = "text/plain; charset=utf-8"

# Leading-byte signatures of the accepted formats.
SIGNATURES = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
)


@dataclass(frozen=True)
class EncodedImage:
    mime_type: str
    payload: str
    source: str = ""

    def __post_init__(self) -> None:
        if self.mime_type not in SUPPORTED_MIME_TYPES:
            raise UnsupportedFormatError(self.mime_type, self.source)

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.payload}"

    def __str__(self) -> str:
        return self.data_uri


def detect_mime_type(data: bytes) -> str:
    """
    Sniff the content type from the leading bytes.
    JPEG and PNG are decided by signature alone; other content is named by
    Pillow for the error message, or application/octet-stream.
    """
    if not data:
        return EMPTY_CONTENT
    for magic, mime_type in SIGNATURES:
        if data.startswith(magic):
            return mime_type
    try:
        with Image.open(BytesIO(data)) as img:
            fmt = img.format or ""
    except (OSError, Image.DecompressionBombError):
        return OCTET_STREAM
    return Image.MIME.get(fmt, OCTET_STREAM)


def read_image_bytes(path: Union[str, Path]) -> bytes:
    p = Path(path)
    try:
        return p.read_bytes()
    except OSError as e:
        raise FileReadError(str(path), e) from e


def encode_image(path: Union[str, Path]) -> EncodedImage:
    data = read_image_bytes(path)

    mime_type = detect_mime_type(data)
    if mime_type not in SUPPORTED_MIME_TYPES:
        raise UnsupportedFormatError(mime_type, str(path))

    return EncodedImage(
        mime_type=mime_type,
        payload=base64.b64encode(data).decode("ascii"),
        source=str(path),
    )
