# services/bws/response.py
from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, Optional, Tuple

import jsonschema

from services.errors import HTTPStatusError, MalformedResponseError

SCHEMA_PACKAGE = "services.bws.schemas"
SCHEMA_NAME = "photoverify_response.schema.json"


@dataclass(frozen=True)
class EyeCenters:
    right_eye_x: float = 0.0
    right_eye_y: float = 0.0
    left_eye_x: float = 0.0
    left_eye_y: float = 0.0


@dataclass(frozen=True)
class SampleError:
    code: str = ""
    message: str = ""
    details: str = ""


@dataclass(frozen=True)
class Sample:
    errors: Tuple[SampleError, ...] = ()
    eye_centers: EyeCenters = field(default_factory=EyeCenters)


@dataclass(frozen=True)
class VerificationResult:
    success: bool = False
    job_id: str = ""
    accuracy_level: int = 0
    state: str = ""
    samples: Tuple[Sample, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Success": self.success,
            "JobID": self.job_id,
            "AccuracyLevel": self.accuracy_level,
            "State": self.state,
            "Samples": [
                {
                    "Errors": [
                        {"Code": e.code, "Message": e.message, "Details": e.details}
                        for e in s.errors
                    ],
                    "EyeCenters": {
                        "RightEyeX": s.eye_centers.right_eye_x,
                        "RightEyeY": s.eye_centers.right_eye_y,
                        "LeftEyeX": s.eye_centers.left_eye_x,
                        "LeftEyeY": s.eye_centers.left_eye_y,
                    },
                }
                for s in self.samples
            ],
        }


@lru_cache(maxsize=1)
def _load_schema() -> dict:
    schema = resources.files(SCHEMA_PACKAGE).joinpath(SCHEMA_NAME)
    return json.loads(schema.read_text(encoding="utf-8"))


def _or(v: Any, default: Any) -> Any:
    # JSON null and missing keys both fall back to the zero value.
    return default if v is None else v


def _parse_eye_centers(obj: Optional[Dict[str, Any]]) -> EyeCenters:
    obj = obj or {}
    return EyeCenters(
        right_eye_x=float(_or(obj.get("RightEyeX"), 0.0)),
        right_eye_y=float(_or(obj.get("RightEyeY"), 0.0)),
        left_eye_x=float(_or(obj.get("LeftEyeX"), 0.0)),
        left_eye_y=float(_or(obj.get("LeftEyeY"), 0.0)),
    )


def _parse_sample(obj: Dict[str, Any]) -> Sample:
    errors = tuple(
        SampleError(
            code=_or(e.get("Code"), ""),
            message=_or(e.get("Message"), ""),
            details=_or(e.get("Details"), ""),
        )
        for e in (obj.get("Errors") or [])
    )
    return Sample(errors=errors, eye_centers=_parse_eye_centers(obj.get("EyeCenters")))


def parse_result(data: Any) -> VerificationResult:
    """
    Validate a decoded JSON document against the response schema and map it
    onto VerificationResult. Absent optional fields take their zero values.
    """
    try:
        jsonschema.validate(instance=data, schema=_load_schema())
    except jsonschema.exceptions.ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise MalformedResponseError(f"response does not match expected shape at {where}: {e.message}") from e

    return VerificationResult(
        success=bool(_or(data.get("Success"), False)),
        job_id=_or(data.get("JobID"), ""),
        accuracy_level=int(_or(data.get("AccuracyLevel"), 0)),
        state=_or(data.get("State"), ""),
        samples=tuple(_parse_sample(s) for s in (data.get("Samples") or [])),
    )


def decode_response(status_code: int, body: bytes) -> VerificationResult:
    if status_code != 200:
        excerpt = body[:300].decode("utf-8", errors="replace") if body else ""
        raise HTTPStatusError(status_code, excerpt)

    try:
        data = json.loads(body)
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedResponseError(f"failed to unmarshal JSON response: {e}") from e

    return parse_result(data)
