#!/usr/bin/env python3
"""MCP server exposing iOS Simulator control to agents.

Each tool runs exactly one `xcrun simctl` or `idb` command and returns its
output as MCP content (text, or a base64 image for screenshots). Command
failures come back as text starting with "Error"; only invalid arguments
are reported as tool errors.

Sample config for ~/.claude/mcp_servers.json:

    {
      "mcpServers": {
        "ios-simulator": {
          "command": "/path/to/ios-simulator-mcp/.venv/bin/ios-simulator-mcp",
          "env": {"IOS_SIMULATOR_MCP_FILTERED_TOOLS": "ui_type"}
        }
      }
    }

Run standalone:  python mcp_server.py
"""

import json
import os
import sys
from typing import Any, Literal

# Ensure project root is on sys.path so simbridge imports work
_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP
from mcp.types import ImageContent, TextContent

load_dotenv(os.path.join(_PROJECT_ROOT, ".env"))
load_dotenv(os.path.expanduser("~/.env"))

from simbridge import content, doctor
from simbridge.adapter import CommandAdapter
from simbridge.settings import Settings

ImageFormat = Literal["png", "tiff", "bmp", "gif", "jpeg"]

SETTINGS = Settings.from_env()
_adapter = CommandAdapter(settings=SETTINGS)


def _log(msg: str) -> None:
    print(f"[mcp] {msg}", file=sys.stderr)


def _to_mcp(response: content.Response) -> list[TextContent | ImageContent]:
    """Flatten a simbridge Response into MCP content blocks."""
    blocks: list[TextContent | ImageContent] = []
    for item in response.content:
        if isinstance(item, content.ImageContent):
            blocks.append(ImageContent(type="image", data=item.data, mimeType=item.mime_type))
        else:
            blocks.append(TextContent(type="text", text=item.text))
    return blocks


async def _call(operation: str, **parameters: Any):
    response = await _adapter.execute(operation, parameters)
    return _to_mcp(response)


def _is_enabled(name: str, settings: Settings) -> bool:
    return name not in settings.filtered_tools


# ---------------------------------------------------------------------------
# MCP server
# ---------------------------------------------------------------------------

mcp = FastMCP(
    "ios-simulator",
    instructions="iOS Simulator control: list and boot simulators, capture screenshots, "
    "inspect accessibility elements, tap, swipe and type",
)


def _tool():
    """Register with FastMCP unless the tool is filtered out by configuration."""

    def decorator(fn):
        if not _is_enabled(fn.__name__, SETTINGS):
            _log(f"Tool filtered out by configuration: {fn.__name__}")
            return fn
        return mcp.tool()(fn)

    return decorator


@_tool()
async def get_booted_sim_id():
    """Get the name and UUID of the currently booted iOS simulator."""
    return await _call("get_booted_sim_id")


@_tool()
async def get_all_simulators():
    """List all available iOS simulators and their states (simctl list devices)."""
    return await _call("get_all_simulators")


@_tool()
async def boot_simulator(udid: str):
    """Boot a specific simulator.

    Args:
        udid: The UUID of the simulator to boot.
    """
    return await _call("boot_simulator", udid=udid)


@_tool()
async def screenshot(type: ImageFormat = "png", compress: bool = False, udid: str = ""):
    """Capture the simulator screen and return it as an image.

    Args:
        type: Image type to capture (default: png).
        compress: Capture as JPEG to keep the payload small (default: false).
        udid: Simulator UUID (default: configured simulator, else the booted one).
    """
    return await _call("screenshot", type=type, compress=compress, udid=udid or None)


@_tool()
async def ui_view(udid: str = ""):
    """Get a compressed JPEG of the current simulator screen, for a quick look."""
    return await _call("ui_view", udid=udid or None)


@_tool()
async def ui_describe_all(udid: str = ""):
    """Describe every accessibility element on screen as JSON (idb ui describe-all).

    Args:
        udid: Simulator UUID (default: configured simulator, else idb's target).
    """
    return await _call("ui_describe_all", udid=udid or None)


@_tool()
async def ui_describe_point(x: float, y: float, udid: str = ""):
    """Describe the accessibility element at screen point (x, y) as JSON.

    Args:
        x: Horizontal coordinate in points.
        y: Vertical coordinate in points.
        udid: Simulator UUID (default: configured simulator, else idb's target).
    """
    return await _call("ui_describe_point", x=x, y=y, udid=udid or None)


@_tool()
async def ui_tap(x: float, y: float, duration: float = 0, udid: str = ""):
    """Tap the screen at (x, y).

    Args:
        x: Horizontal coordinate in points.
        y: Vertical coordinate in points.
        duration: Press duration in seconds (default: 0, a plain tap).
        udid: Simulator UUID (default: configured simulator, else idb's target).
    """
    return await _call(
        "ui_tap", x=x, y=y, duration=(duration if duration > 0 else None), udid=udid or None
    )


@_tool()
async def ui_swipe(
    x_start: float,
    y_start: float,
    x_end: float,
    y_end: float,
    duration: float = 0,
    udid: str = "",
):
    """Swipe from (x_start, y_start) to (x_end, y_end).

    Args:
        duration: Swipe duration in seconds (default: 0, idb's default speed).
        udid: Simulator UUID (default: configured simulator, else idb's target).
    """
    return await _call(
        "ui_swipe",
        x_start=x_start,
        y_start=y_start,
        x_end=x_end,
        y_end=y_end,
        duration=(duration if duration > 0 else None),
        udid=udid or None,
    )


@_tool()
async def ui_type(text: str, udid: str = ""):
    """Type text into the focused field.

    Args:
        text: Text to enter.
        udid: Simulator UUID (default: configured simulator, else idb's target).
    """
    return await _call("ui_type", text=text, udid=udid or None)


@_tool()
def runtime_health() -> str:
    """Report whether xcrun and idb are reachable and which tools are enabled."""
    return json.dumps(doctor.collect_checks(SETTINGS), indent=2)


def main() -> None:
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
