#!/usr/bin/env python3
"""Environment checks for the iOS simulator MCP server.

Read-only: nothing is launched, only PATH lookups and settings are
inspected. Answers "will the tools be able to reach xcrun and idb?"
before an agent starts calling them.
"""

from __future__ import annotations

import json
import os
import shutil
import sys
from pathlib import Path

from dotenv import load_dotenv

from simbridge import idbwrap
from simbridge.operations import OPERATIONS
from simbridge.settings import Settings


def _check_executable(name: str) -> dict:
    resolved = shutil.which(name) or ""
    return {"ok": bool(resolved), "configured": name, "resolved": resolved}


def _check_tmpdir(path: str) -> dict:
    return {
        "ok": os.path.isdir(path) and os.access(path, os.W_OK),
        "path": path,
    }


def collect_checks(settings: Settings | None = None) -> dict:
    settings = settings or Settings.from_env()
    enabled = sorted(name for name in OPERATIONS if name not in settings.filtered_tools)

    checks: dict = {
        "python": {"executable": sys.executable, "version": sys.version.split()[0]},
        "tools": {
            "xcrun": _check_executable(settings.xcrun),
            "idb": _check_executable(idbwrap.idb_executable(settings)),
        },
        "tmpdir": _check_tmpdir(settings.tmpdir),
        "default_udid": settings.udid or "",
        "enabled_tools": enabled,
        "filtered_tools": sorted(settings.filtered_tools),
        "hints": {
            "xcrun": "Install Xcode and its command line tools (xcode-select --install).",
            "idb": "Install idb: brew install facebook/fb/idb-companion && pip install fb-idb",
        },
    }

    problems: list[str] = []
    if not checks["tools"]["xcrun"]["ok"]:
        problems.append(f"{settings.xcrun} not found (simulator listing, boot and screenshots will fail)")
    if not checks["tools"]["idb"]["ok"]:
        problems.append("idb not found (ui_* tools will fail)")
    if not checks["tmpdir"]["ok"]:
        problems.append(f"temp dir not writable: {settings.tmpdir}")

    checks["problems"] = problems
    checks["ok"] = not problems
    return checks


def main() -> int:
    # Same env sources the server reads, without ever printing secrets.
    load_dotenv(Path.cwd() / ".env")
    load_dotenv(Path.home() / ".env")
    payload = collect_checks()
    print(json.dumps(payload, indent=2))
    return 0 if payload.get("ok") else 1


if __name__ == "__main__":
    raise SystemExit(main())
