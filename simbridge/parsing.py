"""Pure helpers for interpreting simctl output and screenshot data."""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass

BOOTED_MARKER = "Booted"

# Matches the first parenthesized hex/hyphen run, e.g. "(50ADC92B-...)"
_UDID_PATTERN = re.compile(r"\(([-0-9A-F]+)\)")

SCREENSHOT_MIME_TYPES: dict[str, str] = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "tiff": "image/tiff",
    "bmp": "image/bmp",
}

_IMAGE_MIME_TYPES = frozenset(SCREENSHOT_MIME_TYPES.values()) | {"image/webp", "image/svg+xml"}


@dataclass(frozen=True)
class BootedSimulator:
    name: str
    udid: str


def find_booted_simulator(listing: str) -> BootedSimulator | None:
    """Return the first booted simulator in `simctl list devices` output.

    A line counts only if it mentions the booted marker AND carries a
    parenthesized identifier; marker lines without one are skipped, so a
    later well-formed line can still match.
    """
    for line in listing.split("\n"):
        if BOOTED_MARKER not in line:
            continue
        m = _UDID_PATTERN.search(line)
        if not m:
            continue
        return BootedSimulator(name=line.split("(")[0].strip(), udid=m.group(1))
    return None


def format_booted(sim: BootedSimulator) -> str:
    return f"Booted Simulator: {sim.name}\nUUID: {sim.udid}"


def mime_type_for(image_format: str) -> str:
    """Map a simctl screenshot --type value to its MIME type."""
    try:
        return SCREENSHOT_MIME_TYPES[image_format]
    except KeyError:
        raise ValueError(f"unsupported screenshot format: {image_format!r}") from None


def is_valid_mime_type(mime_type: str) -> bool:
    return mime_type in _IMAGE_MIME_TYPES


def encode_image(data: bytes) -> str:
    """Base64-encode image bytes for an MCP image content block."""
    if not data:
        raise ValueError("image data is empty")
    return base64.b64encode(data).decode("ascii")


def format_coordinate(value: float) -> str:
    """Render a coordinate as a CLI token: 100 rather than 100.0."""
    if float(value).is_integer():
        return str(int(value))
    return str(float(value))
