"""Error kinds raised while building and delivering Slack requests."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class SlackResourceError(Exception):
    """Base resource error."""

    message: str
    code: str = "resource_error"

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class ValidationError(SlackResourceError):
    """Missing or conflicting input fields, or an unknown operation."""

    code: str = "validation"


@dataclass(slots=True)
class InputFileError(SlackResourceError):
    """A local attachments or upload file could not be read."""

    code: str = "input_file"
    path: str = ""


@dataclass(slots=True)
class NetworkError(SlackResourceError):
    """Request could not be sent or the response could not be read."""

    code: str = "network"


@dataclass(slots=True)
class ProtocolError(SlackResourceError):
    """Slack answered with a non-200 HTTP status."""

    code: str = "protocol"
    status_code: int = 0
    body: str = ""


@dataclass(slots=True)
class DecodeError(SlackResourceError):
    """Response body is not a Slack API envelope."""

    code: str = "decode"
    body: str = ""


@dataclass(slots=True)
class ApiError(SlackResourceError):
    """Slack returned `ok: false` and no fallback applied."""

    code: str = "api"
    error_code: str = ""
    body: str = ""
