"""JSON contracts exchanged with Concourse and the Slack Web API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from slack_resource.errors import DecodeError, ValidationError

VERSION_OUTPUT: dict[str, Any] = {"version": {"ref": "none"}}

# Form fields sent to Slack. Uploaded file content stays as raw bytes.
FormPayload = dict[str, str | bytes]


@dataclass(slots=True, frozen=True)
class ResourceSource:
    """The `source` stanza configured on the Concourse resource."""

    token: str = ""
    operation: str = ""


@dataclass(slots=True, frozen=True)
class ResourceParams:
    """The `params` stanza of a put step."""

    fallback_channel: str = ""

    content: str = ""
    file: str = ""
    title: str = ""
    channels: str = ""

    channel: str = ""
    attachments: str = ""
    attachments_file: str = ""
    icon_url: str = ""
    username: str = ""
    link_names: int = 0


@dataclass(slots=True, frozen=True)
class ResourceVersion:
    """The `version` stanza Concourse passes along with the request."""

    ref: str = ""


@dataclass(slots=True, frozen=True)
class TaskInput:
    """Validated request read from stdin."""

    source: ResourceSource = field(default_factory=ResourceSource)
    params: ResourceParams = field(default_factory=ResourceParams)
    version: ResourceVersion = field(default_factory=ResourceVersion)


@dataclass(slots=True, frozen=True)
class AttachmentEntry:
    """One Slack message attachment, reduced to its visible text."""

    text: str = ""
    title: str = ""

    @property
    def is_blank(self) -> bool:
        return not self.text and not self.title


@dataclass(slots=True)
class SlackResponse:
    """Parsed Slack Web API response envelope."""

    ok: bool
    error: str = ""
    file_id: str = ""
    raw: str = ""
    attempts: int = 1


# Wire names accepted for each field. The first entry is the snake_case name used by
# existing pipelines; the camelCase spelling is accepted as well.
_SOURCE_FIELDS: dict[str, tuple[str, ...]] = {
    "token": ("token",),
    "operation": ("operation", "method"),
}
_PARAM_STRING_FIELDS: dict[str, tuple[str, ...]] = {
    "fallback_channel": ("fallback_channel", "fallbackChannel"),
    "content": ("content",),
    "file": ("file",),
    "title": ("title",),
    "channels": ("channels",),
    "channel": ("channel",),
    "attachments": ("attachments",),
    "attachments_file": ("attachments_file", "attachmentsFile"),
    "icon_url": ("icon_url", "iconUrl"),
    "username": ("username",),
}
_LINK_NAMES_KEYS = ("link_names", "linkNames")


def read_task_input(raw: str) -> TaskInput:
    """Deserialize and validate the request document received on stdin."""

    text = raw.strip()
    if not text:
        raise ValidationError("no input received")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"input is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValidationError("input must be a JSON object")

    source = _section(payload, "source")
    params = _section(payload, "params")
    version = _section(payload, "version")

    return TaskInput(
        source=ResourceSource(
            **{name: _string(source, keys, "source") for name, keys in _SOURCE_FIELDS.items()},
        ),
        params=ResourceParams(
            **{
                name: _string(params, keys, "params")
                for name, keys in _PARAM_STRING_FIELDS.items()
            },
            link_names=_link_names(params),
        ),
        version=ResourceVersion(ref=_string(version, ("ref",), "version")),
    )


def parse_slack_response(raw: str) -> SlackResponse:
    """Parse a Slack API response body into a `SlackResponse`."""

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"unable to decode Slack response: {exc}", body=raw) from exc
    if not isinstance(payload, dict):
        raise DecodeError("Slack response must be a JSON object", body=raw)

    ok = payload.get("ok", False)
    if not isinstance(ok, bool):
        raise DecodeError("Slack response field 'ok' must be a boolean", body=raw)
    error = payload.get("error") or ""
    file_info = payload.get("file")
    file_id = ""
    if isinstance(file_info, dict) and isinstance(file_info.get("id"), str):
        file_id = file_info["id"]
    return SlackResponse(ok=ok, error=str(error), file_id=file_id, raw=raw)


def render_version_output() -> str:
    """Serialize the fixed version document printed on success."""

    return json.dumps(VERSION_OUTPUT, separators=(",", ":"))


def _section(payload: dict[str, Any], name: str) -> dict[str, Any]:
    value = payload.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"input.{name} must be an object")
    return value


def _string(section: dict[str, Any], keys: tuple[str, ...], section_name: str) -> str:
    for key in keys:
        value = section.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValidationError(f"input.{section_name}.{key} must be a string")
        return value
    return ""


def _link_names(params: dict[str, Any]) -> int:
    for key in _LINK_NAMES_KEYS:
        value = params.get(key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"input.params.{key} must be an integer")
        return value
    return 0
