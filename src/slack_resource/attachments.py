"""Attachment source resolution and emptiness checks for chat messages."""

from __future__ import annotations

import json
from pathlib import Path

from slack_resource.contracts import AttachmentEntry
from slack_resource.errors import InputFileError, ValidationError

INTERNAL_ERROR_ATTACHMENTS = (
    '[{"title": "[INTERNAL ERROR] Failed to parse string to post to slack", "color": "danger"}]'
)


def resolve_attachments(attachments: str, attachments_file: str) -> str:
    """Return the raw attachments string, given inline or read from a file."""

    if attachments and attachments_file:
        raise ValidationError(
            "cannot supply both attachments_file and attachments for chat.postMessage",
        )
    if not attachments and not attachments_file:
        raise ValidationError(
            "must supply one of attachments_file or attachments for chat.postMessage",
        )
    if attachments:
        return attachments

    content = read_text_file(attachments_file)
    if not content:
        raise ValidationError("attachments file is empty")
    return content


def read_file_bytes(path: str) -> bytes:
    """Read a local file, mapping OS failures to `InputFileError`."""

    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise InputFileError(f"unable to read {path}: {exc.strerror or exc}", path=path) from exc


def read_text_file(path: str) -> str:
    return read_file_bytes(path).decode("utf-8", errors="replace")


def parse_attachments(raw: str) -> list[AttachmentEntry] | None:
    """Parse an attachments string, or return None when it is not a list of objects."""

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, list):
        return None

    entries: list[AttachmentEntry] = []
    for item in payload:
        if item is None:
            entries.append(AttachmentEntry())
            continue
        if not isinstance(item, dict):
            return None
        text = _field(item, "text") or ""
        title = _field(item, "title") or ""
        if not isinstance(text, str) or not isinstance(title, str):
            return None
        entries.append(AttachmentEntry(text=text, title=title))
    return entries


def is_meaningless(entries: list[AttachmentEntry]) -> bool:
    """True when there is at least one attachment and none carries text or a title."""

    return bool(entries) and all(entry.is_blank for entry in entries)


def _field(item: dict[str, object], name: str) -> object:
    # Exact key first, then any key differing only in case ("Title").
    if name in item:
        return item[name]
    for key, value in item.items():
        if key.lower() == name:
            return value
    return None
