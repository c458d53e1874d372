# services/photoverify.py
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import requests

from services.bws.request_builder import PHOTOVERIFY_ENDPOINT, VerificationRequest, build_request
from services.bws.response import VerificationResult, decode_response
from services.bws.transport import DEFAULT_TIMEOUT_S, TransportOutcome, send
from services.encoding.image_encoder import EncodedImage, encode_image
from services.errors import PhotoVerifyError

# Failure precedence after the join barrier follows this order.
IMAGE_ROLES: Tuple[str, ...] = ("photo", "image1", "image2")


@dataclass(frozen=True)
class RunSettings:
    app_id: str
    app_secret: str
    photo_path: str
    image1_path: str
    image2_path: str = ""
    endpoint: str = PHOTOVERIFY_ENDPOINT
    timeout_s: float = DEFAULT_TIMEOUT_S


@dataclass(frozen=True)
class VerificationReport:
    result: VerificationResult
    elapsed_s: float


class PhotoVerifyClient:
    def __init__(
        self,
        settings: RunSettings,
        *,
        encode_fn: Callable[[str], EncodedImage] = encode_image,
        send_fn: Callable[..., TransportOutcome] = send,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings
        self.encode_fn = encode_fn
        self.send_fn = send_fn
        self.session = session

    def _jobs(self) -> List[Tuple[str, str]]:
        s = self.settings
        jobs = [("photo", s.photo_path), ("image1", s.image1_path)]
        if s.image2_path:
            jobs.append(("image2", s.image2_path))
        return jobs

    async def _encode_concurrently(self, jobs: List[Tuple[str, str]]) -> list:
        # gather is the barrier: every task finishes before any slot is read.
        return await asyncio.gather(
            *(asyncio.to_thread(self.encode_fn, path) for _, path in jobs),
            return_exceptions=True,
        )

    def encode_images(self) -> VerificationRequest:
        jobs = self._jobs()
        slots = asyncio.run(self._encode_concurrently(jobs))

        encoded = {}
        for (role, _), slot in zip(jobs, slots):
            if isinstance(slot, PhotoVerifyError):
                raise slot.with_context(f"failed to encode {role}")
            if isinstance(slot, BaseException):
                raise slot
            encoded[role] = slot

        return VerificationRequest(
            idphoto=encoded["photo"],
            liveimage1=encoded["image1"],
            liveimage2=encoded.get("image2"),
        )

    def verify(self, verification: VerificationRequest) -> VerificationResult:
        s = self.settings
        prepared = build_request(s.app_id, s.app_secret, verification, endpoint=s.endpoint)
        outcome = self.send_fn(prepared, timeout_s=s.timeout_s, session=self.session)
        return decode_response(outcome.status_code, outcome.body)

    def run(self) -> VerificationReport:
        t0 = time.perf_counter()
        verification = self.encode_images()
        result = self.verify(verification)
        return VerificationReport(result=result, elapsed_s=time.perf_counter() - t0)


def run_verification(settings: RunSettings, **kwargs) -> VerificationReport:
    return PhotoVerifyClient(settings, **kwargs).run()


def render_report(report: VerificationReport) -> List[str]:
    """
    Plain-text lines for the console. Only samples that carry errors are
    listed, numbered from 1.
    """
    result = report.result
    lines = [
        f"Total execution time: {report.elapsed_s:.3f}s",
        "",
        f"Verification Status: {result.success}",
        f"Verification Accuracy Level: {result.accuracy_level}",
    ]
    for i, sample in enumerate(result.samples, start=1):
        if not sample.errors:
            continue
        lines.append(f"Sample {i} Errors:")
        for e in sample.errors:
            lines.append(f"\tCode: {e.code}, Message: {e.message}, Details: {e.details}")
    return lines
