"""Response content items and the ok/failed outcome of an operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from simbridge.parsing import is_valid_mime_type


@dataclass(frozen=True)
class TextContent:
    text: str


@dataclass(frozen=True)
class ImageContent:
    """Base64 image payload plus its MIME type."""

    data: str
    mime_type: str

    def __post_init__(self):
        if not is_valid_mime_type(self.mime_type):
            raise ValueError(f"not an image MIME type: {self.mime_type!r}")


ContentItem = Union[TextContent, ImageContent]


@dataclass(frozen=True)
class Ok:
    content: tuple[ContentItem, ...]


@dataclass(frozen=True)
class Failed:
    message: str


Outcome = Union[Ok, Failed]


def ok_text(text: str) -> Ok:
    return Ok((TextContent(text),))


@dataclass(frozen=True)
class Response:
    """What an operation hands back across the protocol boundary.

    Failed outcomes flatten to a single text item and keep is_error False:
    tool failures travel as ordinary content the caller has to read.
    """

    content: tuple[ContentItem, ...]
    is_error: bool = False

    @classmethod
    def from_outcome(cls, outcome: Outcome) -> "Response":
        if isinstance(outcome, Failed):
            return cls((TextContent(outcome.message),))
        return cls(tuple(outcome.content))
