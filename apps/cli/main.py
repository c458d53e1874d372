#!/usr/bin/env python3
# apps/cli/main.py
from __future__ import annotations

import argparse
import json
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import List, Optional

from rich.console import Console

from apps.common.settings import load_settings
from services.errors import InputError, PhotoVerifyError
from services.photoverify import render_report, run_verification

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

TITLE = "BioIDWebService PhotoVerify REST client"
USAGE = "-BWSAppID <BWSAppID> -BWSAppSecret <BWSAppSecret> -photo <photo> -image1 <image1> [-image2 <image2>]"


def _version() -> str:
    try:
        return version("bws-photoverify")
    except PackageNotFoundError:
        return "development"


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="bws-photoverify",
        description=f"{TITLE}. Version: {_version()}",
        usage=f"%(prog)s {USAGE}",
    )
    ap.add_argument("-BWSAppID", "--BWSAppID", "--app-id", dest="app_id", default=None, help="BioIDWebService AppID.")
    ap.add_argument("-BWSAppSecret", "--BWSAppSecret", "--app-secret", dest="app_secret", default=None, help="BioIDWebService AppSecret.")
    ap.add_argument("-photo", "--photo", dest="photo", default=None, help="Path to the reference photo image.")
    ap.add_argument("-image1", "--image1", dest="image1", default=None, help="Path to the first live image.")
    ap.add_argument("-image2", "--image2", dest="image2", default="", help="Path to the second live image (optional).")
    ap.add_argument("--endpoint", default=None, help="PhotoVerify endpoint URL (default from config).")
    ap.add_argument("--timeout-s", type=float, default=None, help="HTTP timeout in seconds (default 30).")
    ap.add_argument("--config", default=None, help="YAML config file (default config/app.yaml).")
    ap.add_argument("--json", action="store_true", help="Also print the decoded result as JSON.")
    ap.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    return ap


def _print_lines(lines: List[str]) -> None:
    for line in lines:
        console.print(line, markup=False, soft_wrap=True)


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    try:
        settings = load_settings(
            app_id=args.app_id,
            app_secret=args.app_secret,
            photo=args.photo,
            image1=args.image1,
            image2=args.image2,
            endpoint=args.endpoint,
            timeout_s=args.timeout_s,
            config_path=args.config,
        )
    except InputError as e:
        ap.print_usage(sys.stderr)
        err_console.print(f"Error [{e.stage}]: {e}", markup=False, soft_wrap=True)
        return e.exit_code

    try:
        report = run_verification(settings)
    except PhotoVerifyError as e:
        err_console.print(f"Error [{e.stage}]: {e}", markup=False, soft_wrap=True)
        return e.exit_code

    _print_lines(render_report(report))
    if args.json:
        console.print(json.dumps(report.result.to_dict(), indent=2), markup=False, soft_wrap=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
