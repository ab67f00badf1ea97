"""adapter.py - Turn an operation request into one external command and a Response.

Every operation follows the same path: validate the request, build exactly
one ProcessInvocation, await it, and convert the output (or the failure)
into an Outcome. Process failures never raise out of `execute`; they come
back as a text item describing what went wrong. Only request validation
(PreconditionError) raises, and it does so before anything is spawned.
"""

from __future__ import annotations

import asyncio
import os
import sys
import uuid
from collections.abc import Awaitable, Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from simbridge import idbwrap, simctl
from simbridge.content import Failed, ImageContent, Ok, Outcome, Response, ok_text
from simbridge.errors import ProcessError
from simbridge.operations import (
    BOOT_SIMULATOR,
    GET_ALL_SIMULATORS,
    GET_BOOTED_SIM_ID,
    SCREENSHOT,
    UI_DESCRIBE_ALL,
    UI_DESCRIBE_POINT,
    UI_SWIPE,
    UI_TAP,
    UI_TYPE,
    UI_VIEW,
    Request,
)
from simbridge.parsing import (
    encode_image,
    find_booted_simulator,
    format_booted,
    format_coordinate,
    mime_type_for,
)
from simbridge.runner import CommandRunner, ProcessInvocation, ProcessResult, SubprocessRunner
from simbridge.settings import Settings

NO_BOOTED_SIMULATOR = "No booted simulator found."

Handler = Callable[[Mapping[str, Any]], Awaitable[Outcome]]


def _log(msg: str) -> None:
    print(f"[adapter] {msg}", file=sys.stderr)


def _error_text(exc: BaseException) -> str:
    return str(exc) or repr(exc)


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


@contextmanager
def _scratch_file(directory: str, suffix: str) -> Iterator[str]:
    """Yield a unique path in `directory`; remove whatever is there on exit."""
    path = os.path.join(directory, f"ios-sim-{uuid.uuid4().hex}.{suffix}")
    try:
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


class CommandAdapter:
    """Executes simulator operations against a CommandRunner."""

    def __init__(self, runner: CommandRunner | None = None, settings: Settings | None = None):
        self.runner = runner or SubprocessRunner()
        self.settings = settings or Settings.from_env()
        self._handlers: dict[str, Handler] = {
            GET_ALL_SIMULATORS: self._get_all_simulators,
            GET_BOOTED_SIM_ID: self._get_booted_sim_id,
            BOOT_SIMULATOR: self._boot_simulator,
            SCREENSHOT: self._screenshot,
            UI_VIEW: self._ui_view,
            UI_DESCRIBE_ALL: self._ui_describe_all,
            UI_DESCRIBE_POINT: self._ui_describe_point,
            UI_TAP: self._ui_tap,
            UI_SWIPE: self._ui_swipe,
            UI_TYPE: self._ui_type,
        }

    async def execute(self, operation: str, parameters: Mapping[str, Any] | None = None) -> Response:
        """Run `operation` with `parameters` and return its Response.

        Raises PreconditionError for invalid requests; never raises for
        external command failures.
        """
        request = Request.build(operation, parameters)
        _log(f"{request.operation} {dict(request.parameters)}")
        outcome = await self._handlers[request.operation](request.parameters)
        return Response.from_outcome(outcome)

    async def _run(self, invocation: ProcessInvocation) -> ProcessResult | str:
        """Run one invocation; a ProcessError comes back as its message."""
        try:
            return await self.runner.run(invocation)
        except ProcessError as exc:
            return _error_text(exc)

    async def _passthrough(self, invocation: ProcessInvocation, error_prefix: str = "Error") -> Outcome:
        result = await self._run(invocation)
        if isinstance(result, str):
            return Failed(f"{error_prefix}: {result}")
        return ok_text(result.stdout_text)

    # -- simctl ----------------------------------------------------------

    async def _get_all_simulators(self, params: Mapping[str, Any]) -> Outcome:
        return await self._passthrough(simctl.list_devices(self.settings))

    async def _get_booted_sim_id(self, params: Mapping[str, Any]) -> Outcome:
        result = await self._run(simctl.list_devices(self.settings))
        if isinstance(result, str):
            return Failed(f"Error: {result}")
        sim = find_booted_simulator(result.stdout_text)
        if sim is None:
            return ok_text(NO_BOOTED_SIMULATOR)
        return ok_text(format_booted(sim))

    async def _boot_simulator(self, params: Mapping[str, Any]) -> Outcome:
        udid = params["udid"]
        result = await self._run(simctl.boot(self.settings, udid))
        if isinstance(result, str):
            return Failed(f"Error booting simulator: {result}")
        return ok_text(f"Successfully booted simulator with ID: {udid}\n{result.stdout_text}")

    async def _capture(self, image_type: str, compress: bool, udid: str | None) -> Outcome:
        # simctl has no compression switch; JPEG is its only lossy type.
        if compress:
            image_type = "jpeg"
        mime_type = mime_type_for(image_type)

        with _scratch_file(self.settings.tmpdir, image_type) as dest:
            result = await self._run(simctl.screenshot(self.settings, dest, image_type, udid))
            if isinstance(result, str):
                return Failed(f"Error: {result}")
            try:
                data = encode_image(await asyncio.to_thread(_read_bytes, dest))
            except (OSError, ValueError) as exc:
                return Failed(f"Error: could not read screenshot: {_error_text(exc)}")

        return Ok((ImageContent(data=data, mime_type=mime_type),))

    async def _screenshot(self, params: Mapping[str, Any]) -> Outcome:
        return await self._capture(params["type"], params["compress"], params["udid"])

    async def _ui_view(self, params: Mapping[str, Any]) -> Outcome:
        return await self._capture("jpeg", True, params["udid"])

    # -- idb -------------------------------------------------------------

    async def _ui_describe_all(self, params: Mapping[str, Any]) -> Outcome:
        return await self._passthrough(idbwrap.describe_all(self.settings, params["udid"]))

    async def _ui_describe_point(self, params: Mapping[str, Any]) -> Outcome:
        invocation = idbwrap.describe_point(self.settings, params["x"], params["y"], params["udid"])
        return await self._passthrough(invocation)

    async def _ui_tap(self, params: Mapping[str, Any]) -> Outcome:
        x, y = format_coordinate(params["x"]), format_coordinate(params["y"])
        invocation = idbwrap.tap(
            self.settings, params["x"], params["y"], params["duration"], params["udid"]
        )
        result = await self._run(invocation)
        if isinstance(result, str):
            return Failed(f"Error tapping at ({x}, {y}): {result}")
        return ok_text(f"Tapped successfully at ({x}, {y})")

    async def _ui_swipe(self, params: Mapping[str, Any]) -> Outcome:
        invocation = idbwrap.swipe(
            self.settings,
            params["x_start"], params["y_start"],
            params["x_end"], params["y_end"],
            params["duration"], params["udid"],
        )
        result = await self._run(invocation)
        if isinstance(result, str):
            return Failed(f"Error swiping: {result}")
        start = f"({format_coordinate(params['x_start'])}, {format_coordinate(params['y_start'])})"
        end = f"({format_coordinate(params['x_end'])}, {format_coordinate(params['y_end'])})"
        return ok_text(f"Swiped successfully from {start} to {end}")

    async def _ui_type(self, params: Mapping[str, Any]) -> Outcome:
        result = await self._run(idbwrap.type_text(self.settings, params["text"], params["udid"]))
        if isinstance(result, str):
            return Failed(f"Error typing text: {result}")
        return ok_text("Typed successfully")
