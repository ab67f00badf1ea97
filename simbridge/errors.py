"""Exception types shared by the simbridge modules."""

from __future__ import annotations


class SimBridgeError(Exception):
    """Base class for simbridge failures."""


class PreconditionError(SimBridgeError, ValueError):
    """A request was rejected before any external process was started."""


class ProcessError(SimBridgeError):
    """An external command could not be started or exited non-zero.

    `invocation` is the ProcessInvocation that failed; `result` is the
    ProcessResult when the process ran at all (None on spawn failure).
    """

    def __init__(self, message: str, invocation=None, result=None):
        super().__init__(message)
        self.invocation = invocation
        self.result = result
