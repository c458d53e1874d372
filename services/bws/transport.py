# services/bws/transport.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from services.errors import TransportError

DEFAULT_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class TransportOutcome:
    status_code: int
    body: bytes


def send(
    prepared: requests.PreparedRequest,
    *,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    session: Optional[requests.Session] = None,
) -> TransportOutcome:
    """
    Execute the request exactly once. Non-200 statuses are returned as-is;
    only network failures and timeouts raise.
    """
    owns_session = session is None
    sess = session or requests.Session()
    try:
        r = sess.send(prepared, timeout=timeout_s)
        body = r.content
    except requests.exceptions.Timeout as e:
        raise TransportError(
            f"request to {prepared.url} timed out after {timeout_s:g}s: {e}", timed_out=True
        ) from e
    except requests.exceptions.RequestException as e:
        raise TransportError(f"error sending request to API endpoint: {e}") from e
    finally:
        if owns_session:
            sess.close()

    return TransportOutcome(status_code=int(r.status_code), body=body)
