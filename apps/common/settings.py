# apps/common/settings.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from services.bws.request_builder import PHOTOVERIFY_ENDPOINT
from services.bws.transport import DEFAULT_TIMEOUT_S
from services.errors import InputError
from services.photoverify import RunSettings


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise InputError(f"invalid config file {path}: {e}") from e
    if data is not None and not isinstance(data, dict):
        raise InputError(f"config file {path} must contain a mapping")
    return data or {}


def _env(key: str) -> Optional[str]:
    v = os.getenv(key)
    return v.strip() if isinstance(v, str) and v.strip() else None


def _pick(*vs: Any) -> Optional[str]:
    for v in vs:
        if v is not None and str(v).strip():
            return str(v).strip()
    return None


def _as_timeout(v: str) -> float:
    try:
        t = float(v)
    except ValueError:
        raise InputError(f"timeout_s must be a number, got {v!r}") from None
    if t <= 0:
        raise InputError(f"timeout_s must be positive, got {v!r}")
    return t


def load_settings(
    *,
    app_id: Optional[str] = None,
    app_secret: Optional[str] = None,
    photo: Optional[str] = None,
    image1: Optional[str] = None,
    image2: Optional[str] = None,
    endpoint: Optional[str] = None,
    timeout_s: Optional[float] = None,
    config_path: Optional[str] = None,
) -> RunSettings:
    """
    Resolution order (highest -> lowest):
      1) Explicit function argument (CLI flag)
      2) Environment variable
      3) Config file: config_path, else BWS_CONFIG_PATH, else config/app.yaml
      4) Built-in default (endpoint, timeout only)
    Environment variables:
      - BWS_APP_ID
      - BWS_APP_SECRET
      - BWS_ENDPOINT
      - BWS_TIMEOUT_S
    Image paths only come from arguments.
    """
    cfg_path = (
        Path(config_path)
        if config_path
        else Path(_env("BWS_CONFIG_PATH") or "config/app.yaml")
    )
    cfg = _read_yaml(cfg_path)

    resolved_id = _pick(app_id, _env("BWS_APP_ID"), cfg.get("app_id"))
    resolved_secret = _pick(app_secret, _env("BWS_APP_SECRET"), cfg.get("app_secret"))
    resolved_endpoint = _pick(endpoint, _env("BWS_ENDPOINT"), cfg.get("endpoint")) or PHOTOVERIFY_ENDPOINT
    resolved_timeout = _pick(timeout_s, _env("BWS_TIMEOUT_S"), cfg.get("timeout_s"))

    missing = []
    if not resolved_id:
        missing.append("BWSAppID / BWS_APP_ID")
    if not resolved_secret:
        missing.append("BWSAppSecret / BWS_APP_SECRET")
    if not _pick(photo):
        missing.append("photo")
    if not _pick(image1):
        missing.append("image1")

    if missing:
        raise InputError(
            "Missing required configuration: " + ", ".join(missing) +
            f". Config file used: {cfg_path}"
        )

    return RunSettings(
        app_id=str(resolved_id),
        app_secret=str(resolved_secret),
        photo_path=str(_pick(photo)),
        image1_path=str(_pick(image1)),
        image2_path=_pick(image2) or "",
        endpoint=resolved_endpoint,
        timeout_s=_as_timeout(resolved_timeout) if resolved_timeout else DEFAULT_TIMEOUT_S,
    )
