from __future__ import annotations

from typing import Optional


class PhotoVerifyError(RuntimeError):
    """Base for every failure that aborts a verification run."""

    stage = "run"
    exit_code = 1
    context = ""

    def with_context(self, context: str) -> "PhotoVerifyError":
        self.context = context
        return self

    def __str__(self) -> str:
        msg = super().__str__()
        return f"{self.context}: {msg}" if self.context else msg


class InputError(PhotoVerifyError):
    """Missing or invalid arguments / configuration. Reported before the pipeline starts."""

    stage = "input"
    exit_code = 2


class FileReadError(PhotoVerifyError):
    stage = "encode"

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        reason = f": {cause}" if cause else ""
        super().__init__(f"failed to read file {path}{reason}")


class UnsupportedFormatError(PhotoVerifyError):
    stage = "encode"

    def __init__(self, mime_type: str, path: str) -> None:
        self.mime_type = mime_type
        self.path = path
        super().__init__(f"unsupported mime type {mime_type} for file {path}")


class RequestConstructionError(PhotoVerifyError):
    stage = "request"


class TransportError(PhotoVerifyError):
    stage = "transport"

    def __init__(self, message: str, *, timed_out: bool = False) -> None:
        self.timed_out = timed_out
        super().__init__(message)


class HTTPStatusError(PhotoVerifyError):
    stage = "response"

    def __init__(self, status_code: int, body_excerpt: str = "") -> None:
        self.status_code = status_code
        self.body_excerpt = body_excerpt
        super().__init__(f"received HTTP response code != 200: {status_code}")


class MalformedResponseError(PhotoVerifyError):
    stage = "response"
