#!/usr/bin/env python3
"""
Trigger the retention sweep on a running checklist server.

Meant for cron; exits non-zero when the server rejects or fails the sweep.

    python scripts/purge_expired.py \
        --server http://127.0.0.1:8000 \
        --cron-secret "$SECURITY__CRON_SECRET"
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Optional

import urllib.error
import urllib.request


def http_post_json(url: str, payload: dict[str, Any], headers: Optional[dict[str, str]] = None,
                   timeout: int = 60) -> tuple[int, bytes]:
    data = json.dumps(payload).encode("utf-8")
    req_headers = {"Content-Type": "application/json"}
    if headers:
        req_headers.update(headers)
    req = urllib.request.Request(url, data=data, headers=req_headers, method="POST")
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            return resp.status, resp.read()
    except urllib.error.HTTPError as exc:
        return exc.code, exc.read()


def purge(server: str, cron_secret: str, api_prefix: str = "/api") -> dict[str, Any]:
    url = f"{server.rstrip('/')}{api_prefix}/maintenance/purge-expired"
    status, body = http_post_json(url, {}, headers={"x-cron-secret": cron_secret})
    try:
        payload = json.loads(body.decode("utf-8") or "{}")
    except json.JSONDecodeError:
        payload = {"message": body.decode("utf-8", errors="replace")}
    if status != 200:
        raise SystemExit(f"[purge] failed ({status}): {payload.get('message') or payload.get('detail')}")
    return payload.get("data") or {}


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Delete expired checklist archives")
    parser.add_argument("--server", default=os.environ.get("CHECKLIST_SERVER", "http://127.0.0.1:8000"))
    parser.add_argument("--cron-secret", default=os.environ.get("SECURITY__CRON_SECRET", ""))
    parser.add_argument("--api-prefix", default="/api")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    if not args.cron_secret:
        print("[purge] --cron-secret or SECURITY__CRON_SECRET is required", file=sys.stderr)
        return 2

    report = purge(args.server, args.cron_secret, args.api_prefix)
    print(f"[purge] deleted rows: {report.get('deleted_rows', 0)}")
    print(f"[purge] files removed: {report.get('deleted_files_attempted', 0)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
