# services/bws/request_builder.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from services.bws.credentials import basic_auth
from services.encoding.image_encoder import EncodedImage
from services.errors import RequestConstructionError

PHOTOVERIFY_ENDPOINT = "https://bws.bioid.com/extension/photoverify2"
CONTENT_TYPE = "application/json;charset=utf-8"


@dataclass(frozen=True)
class VerificationRequest:
    idphoto: EncodedImage
    liveimage1: EncodedImage
    liveimage2: Optional[EncodedImage] = None

    def to_payload(self) -> Dict[str, str]:
        values = {
            "idphoto": self.idphoto.data_uri,
            "liveimage1": self.liveimage1.data_uri,
        }
        if self.liveimage2 is not None:
            values["liveimage2"] = self.liveimage2.data_uri
        return values


def build_request(
    app_id: str,
    app_secret: str,
    verification: VerificationRequest,
    *,
    endpoint: str = PHOTOVERIFY_ENDPOINT,
) -> requests.PreparedRequest:
    try:
        body = json.dumps(verification.to_payload()).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise RequestConstructionError(f"failed to serialize request payload: {e}") from e

    req = requests.Request(
        "POST",
        endpoint,
        data=body,
        headers={
            "Content-Type": CONTENT_TYPE,
            "Authorization": "Basic " + basic_auth(app_id, app_secret),
        },
    )
    try:
        return req.prepare()
    except requests.exceptions.RequestException as e:
        raise RequestConstructionError(f"failed to create request: {e}") from e
