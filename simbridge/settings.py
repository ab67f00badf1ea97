"""settings.py - Environment-driven configuration for the simulator bridge."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass

ENV_UDID = "IOS_SIMULATOR_UDID"
ENV_XCRUN = "IOS_SIMULATOR_MCP_XCRUN"
ENV_IDB_PATH = "IOS_SIMULATOR_MCP_IDB_PATH"
ENV_TMPDIR = "IOS_SIMULATOR_MCP_TMPDIR"
ENV_FILTERED_TOOLS = "IOS_SIMULATOR_MCP_FILTERED_TOOLS"


def _split_names(raw: str) -> frozenset[str]:
    return frozenset(name.strip() for name in raw.split(",") if name.strip())


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one server process."""

    xcrun: str = "xcrun"
    idb_path: str | None = None
    udid: str | None = None
    tmpdir: str = ""
    filtered_tools: frozenset[str] = frozenset()

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> "Settings":
        """Build Settings from environment variables (os.environ by default)."""
        env = os.environ if environ is None else environ
        return Settings(
            xcrun=env.get(ENV_XCRUN, "").strip() or "xcrun",
            idb_path=env.get(ENV_IDB_PATH, "").strip() or None,
            udid=env.get(ENV_UDID, "").strip() or None,
            tmpdir=env.get(ENV_TMPDIR, "").strip() or tempfile.gettempdir(),
            filtered_tools=_split_names(env.get(ENV_FILTERED_TOOLS, "")),
        )

    def resolve_udid(self, udid: str | None) -> str | None:
        """Per-call udid wins over the configured default."""
        return udid or self.udid
