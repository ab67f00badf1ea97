"""operations.py - Operation names, parameter schemas and request validation."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from simbridge.errors import PreconditionError
from simbridge.parsing import SCREENSHOT_MIME_TYPES

GET_ALL_SIMULATORS = "get_all_simulators"
GET_BOOTED_SIM_ID = "get_booted_sim_id"
BOOT_SIMULATOR = "boot_simulator"
SCREENSHOT = "screenshot"
UI_VIEW = "ui_view"
UI_DESCRIBE_ALL = "ui_describe_all"
UI_DESCRIBE_POINT = "ui_describe_point"
UI_TAP = "ui_tap"
UI_SWIPE = "ui_swipe"
UI_TYPE = "ui_type"


@dataclass(frozen=True)
class Param:
    """One parameter of an operation.

    kind is "string", "number", "boolean" or "enum" (a string restricted
    to `choices`). Required strings must be non-empty; with `strip` set,
    whitespace-only values are rejected too.
    """

    name: str
    kind: str
    required: bool = False
    default: Any = None
    choices: tuple[str, ...] = ()
    strip: bool = False

    def check(self, operation: str, value: Any) -> Any:
        where = f"{operation}: '{self.name}'"
        if self.kind == "number":
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise PreconditionError(f"{where} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise PreconditionError(f"{where} must be finite, got {value!r}")
            return value
        if self.kind == "boolean":
            if not isinstance(value, bool):
                raise PreconditionError(f"{where} must be a boolean, got {value!r}")
            return value
        if not isinstance(value, str):
            raise PreconditionError(f"{where} must be a string, got {value!r}")
        if self.kind == "enum" and value not in self.choices:
            allowed = ", ".join(self.choices)
            raise PreconditionError(f"{where} must be one of: {allowed}; got {value!r}")
        if self.required and not (value.strip() if self.strip else value):
            raise PreconditionError(f"{where} must not be empty")
        return value


_UDID = Param("udid", "string")
_DURATION = Param("duration", "number")

OPERATIONS: dict[str, tuple[Param, ...]] = {
    GET_ALL_SIMULATORS: (),
    GET_BOOTED_SIM_ID: (),
    BOOT_SIMULATOR: (Param("udid", "string", required=True, strip=True),),
    SCREENSHOT: (
        Param("type", "enum", default="png", choices=tuple(SCREENSHOT_MIME_TYPES)),
        Param("compress", "boolean", default=False),
        _UDID,
    ),
    UI_VIEW: (_UDID,),
    UI_DESCRIBE_ALL: (_UDID,),
    UI_DESCRIBE_POINT: (
        Param("x", "number", required=True),
        Param("y", "number", required=True),
        _UDID,
    ),
    UI_TAP: (
        Param("x", "number", required=True),
        Param("y", "number", required=True),
        _DURATION,
        _UDID,
    ),
    UI_SWIPE: (
        Param("x_start", "number", required=True),
        Param("y_start", "number", required=True),
        Param("x_end", "number", required=True),
        Param("y_end", "number", required=True),
        _DURATION,
        _UDID,
    ),
    UI_TYPE: (Param("text", "string", required=True), _UDID),
}


@dataclass(frozen=True)
class Request:
    """A validated operation call. Build with Request.build()."""

    operation: str
    parameters: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(cls, operation: str, parameters: Mapping[str, Any] | None = None) -> "Request":
        """Validate `parameters` against the operation's schema.

        Unknown operations or keys, missing required values and values of
        the wrong type raise PreconditionError. Optional parameters that are
        absent (or None) take their default.
        """
        schema = OPERATIONS.get(operation)
        if schema is None:
            raise PreconditionError(f"unknown operation: {operation!r}")

        given = dict(parameters or {})
        known = {p.name for p in schema}
        unexpected = sorted(set(given) - known)
        if unexpected:
            raise PreconditionError(f"{operation}: unexpected parameter(s): {', '.join(unexpected)}")

        resolved: dict[str, Any] = {}
        for param in schema:
            value = given.get(param.name)
            if value is None:
                if param.required:
                    raise PreconditionError(f"{operation}: '{param.name}' is required")
                resolved[param.name] = param.default
                continue
            resolved[param.name] = param.check(operation, value)

        return cls(operation=operation, parameters=MappingProxyType(resolved))
