import asyncio
import base64
import json

import pytest
from mcp.types import ImageContent, TextContent

import mcp_server
from simbridge.adapter import CommandAdapter
from simbridge.errors import PreconditionError
from simbridge.settings import Settings

ALL_TOOLS = {
    "get_booted_sim_id",
    "get_all_simulators",
    "boot_simulator",
    "screenshot",
    "ui_view",
    "ui_describe_all",
    "ui_describe_point",
    "ui_tap",
    "ui_swipe",
    "ui_type",
    "runtime_health",
}


@pytest.fixture
def use_adapter(monkeypatch, make_adapter):
    def install(**runner_kwargs):
        adapter, runner = make_adapter(**runner_kwargs)
        monkeypatch.setattr(mcp_server, "_adapter", adapter)
        return runner

    return install


def test_all_tools_registered():
    tools = asyncio.run(mcp_server.mcp.list_tools())
    assert {t.name for t in tools} == ALL_TOOLS


def test_is_enabled_honours_filtered_tools():
    settings = Settings(filtered_tools=frozenset({"ui_type", "ui_tap"}))

    assert mcp_server._is_enabled("ui_type", settings) is False
    assert mcp_server._is_enabled("screenshot", settings) is True


def test_get_booted_sim_id_returns_text_block(use_adapter):
    use_adapter(stdout="iPhone 15 (ABCD-1234-EF) (Booted)\n")

    blocks = asyncio.run(mcp_server.get_booted_sim_id())

    assert len(blocks) == 1
    assert isinstance(blocks[0], TextContent)
    assert blocks[0].text == "Booted Simulator: iPhone 15\nUUID: ABCD-1234-EF"


def test_screenshot_returns_image_block(use_adapter, write_screenshot):
    use_adapter(on_run=write_screenshot(b"\x89PNG-data"))

    blocks = asyncio.run(mcp_server.screenshot(type="png"))

    assert isinstance(blocks[0], ImageContent)
    assert blocks[0].mimeType == "image/png"
    assert base64.b64decode(blocks[0].data) == b"\x89PNG-data"


def test_ui_view_returns_jpeg(use_adapter, write_screenshot):
    use_adapter(on_run=write_screenshot(b"\xff\xd8jpeg"))

    blocks = asyncio.run(mcp_server.ui_view())

    assert blocks[0].mimeType == "image/jpeg"


def test_boot_simulator_empty_udid_raises(use_adapter):
    runner = use_adapter()

    with pytest.raises(PreconditionError):
        asyncio.run(mcp_server.boot_simulator(""))

    assert runner.invocations == []


def test_ui_tap_zero_duration_is_omitted(use_adapter):
    runner = use_adapter()

    blocks = asyncio.run(mcp_server.ui_tap(100, 200))

    assert blocks[0].text == "Tapped successfully at (100, 200)"
    assert "--duration" not in runner.invocations[0].args


def test_ui_swipe_passes_duration(use_adapter):
    runner = use_adapter()

    asyncio.run(mcp_server.ui_swipe(10, 20, 30, 40, duration=0.3))

    assert runner.invocations[0].args[-6:] == ("--duration", "0.3", "10", "20", "30", "40")


def test_ui_type_failure_is_ordinary_text(use_adapter):
    use_adapter(error="keyboard not shown")

    blocks = asyncio.run(mcp_server.ui_type("hello"))

    assert blocks[0].text == "Error typing text: keyboard not shown"


def test_call_tool_reports_precondition_as_tool_error(use_adapter):
    use_adapter()

    with pytest.raises(Exception, match="must not be empty"):
        asyncio.run(mcp_server.mcp.call_tool("boot_simulator", {"udid": ""}))


def test_runtime_health_reports_checks(monkeypatch):
    monkeypatch.setattr(
        mcp_server.doctor,
        "collect_checks",
        lambda settings: {"ok": True, "problems": [], "enabled_tools": ["ui_tap"]},
    )

    payload = json.loads(mcp_server.runtime_health())

    assert payload["ok"] is True
    assert payload["enabled_tools"] == ["ui_tap"]


def test_default_adapter_uses_server_settings():
    assert isinstance(mcp_server._adapter, CommandAdapter)
    assert mcp_server._adapter.settings is mcp_server.SETTINGS


def test_screenshot_accepts_type_argument(use_adapter, write_screenshot):
    runner = use_adapter(on_run=write_screenshot(b"II*\x00tiff"))

    result = asyncio.run(mcp_server.mcp.call_tool("screenshot", {"type": "tiff"}))

    blocks = result[0] if isinstance(result, tuple) else result
    assert blocks[0].mimeType == "image/tiff"
    assert "--type=tiff" in runner.invocations[0].args


def test_screenshot_schema_names_type_parameter():
    tools = {t.name: t for t in asyncio.run(mcp_server.mcp.list_tools())}
    properties = tools["screenshot"].inputSchema["properties"]

    assert "type" in properties
    assert "image_format" not in properties
