"""idbwrap.py - Locate Facebook idb and build `idb ui ...` invocations."""

import os
import shutil
import sys

from simbridge.parsing import format_coordinate
from simbridge.runner import ProcessInvocation
from simbridge.settings import Settings

_idb_path: str | None = None


def _log(msg: str) -> None:
    print(f"[idb] {msg}", file=sys.stderr)


def _find_idb() -> str | None:
    """Look for idb beside the interpreter, then on PATH.

    The outcome, including a miss, is cached for the life of the process.
    """
    global _idb_path
    if _idb_path is not None:
        return _idb_path if _idb_path else None

    # Check venv bin directory (same dir as the running Python)
    venv_idb = os.path.join(os.path.dirname(sys.executable), "idb")
    if os.path.isfile(venv_idb) and os.access(venv_idb, os.X_OK):
        _idb_path = venv_idb
        _log(f"idb found in venv: {_idb_path}")
        return _idb_path

    system_idb = shutil.which("idb")
    if system_idb:
        _idb_path = system_idb
        _log(f"idb found on PATH: {_idb_path}")
        return _idb_path

    _idb_path = ""  # empty string = not found (but cached)
    _log("idb CLI not found; ui_* commands will run bare \"idb\" and report the spawn error")
    return None


def idb_executable(settings: Settings) -> str:
    """The configured idb, else the discovered one, else the bare name.

    Falling back to "idb" lets a missing install surface as a spawn
    failure from the runner instead of a crash here.
    """
    return settings.idb_path or _find_idb() or "idb"


def _ui(settings: Settings, subcommand: str, udid: str | None, *args: str) -> ProcessInvocation:
    argv = ["ui", subcommand]
    target = settings.resolve_udid(udid)
    if target:
        argv += ["--udid", target]
    argv += args
    return ProcessInvocation(idb_executable(settings), tuple(argv))


def _duration_flag(duration: float | None) -> tuple[str, ...]:
    if duration is None:
        return ()
    return ("--duration", str(duration))


def describe_all(settings: Settings, udid: str | None = None) -> ProcessInvocation:
    return _ui(settings, "describe-all", udid, "--json", "--nested")


def describe_point(settings: Settings, x: float, y: float, udid: str | None = None) -> ProcessInvocation:
    return _ui(settings, "describe-point", udid, "--json", format_coordinate(x), format_coordinate(y))


def tap(
    settings: Settings, x: float, y: float, duration: float | None = None, udid: str | None = None
) -> ProcessInvocation:
    return _ui(
        settings, "tap", udid,
        *_duration_flag(duration),
        format_coordinate(x), format_coordinate(y),
    )


def swipe(
    settings: Settings,
    x_start: float,
    y_start: float,
    x_end: float,
    y_end: float,
    duration: float | None = None,
    udid: str | None = None,
) -> ProcessInvocation:
    return _ui(
        settings, "swipe", udid,
        *_duration_flag(duration),
        format_coordinate(x_start), format_coordinate(y_start),
        format_coordinate(x_end), format_coordinate(y_end),
    )


def type_text(settings: Settings, text: str, udid: str | None = None) -> ProcessInvocation:
    """Type into the focused field. `--` keeps text like "-v" from parsing as a flag."""
    return _ui(settings, "text", udid, "--", text)
