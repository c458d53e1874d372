from __future__ import annotations

import base64


def basic_auth(app_id: str, app_secret: str) -> str:
    """base64("<app_id>:<app_secret>") for the Authorization: Basic header."""
    return base64.b64encode(f"{app_id}:{app_secret}".encode("utf-8")).decode("ascii")
