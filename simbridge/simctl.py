"""Invocation builders for xcrun simctl."""

from __future__ import annotations

from simbridge.runner import ProcessInvocation
from simbridge.settings import Settings

# simctl alias for "whichever simulator is booted"
BOOTED_ALIAS = "booted"


def _simctl(settings: Settings, *args: str) -> ProcessInvocation:
    return ProcessInvocation(settings.xcrun, ("simctl", *args))


def list_devices(settings: Settings) -> ProcessInvocation:
    return _simctl(settings, "list", "devices")


def boot(settings: Settings, udid: str) -> ProcessInvocation:
    return _simctl(settings, "boot", udid)


def screenshot(
    settings: Settings, dest: str, image_type: str = "png", udid: str | None = None
) -> ProcessInvocation:
    """Capture the simulator display into `dest` as `image_type`."""
    target = settings.resolve_udid(udid) or BOOTED_ALIAS
    return _simctl(settings, "io", target, "screenshot", f"--type={image_type}", dest)
