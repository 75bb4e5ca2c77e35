"""Form payload builders for the supported Slack API operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from slack_resource.attachments import (
    INTERNAL_ERROR_ATTACHMENTS,
    is_meaningless,
    parse_attachments,
    read_file_bytes,
    resolve_attachments,
)
from slack_resource.contracts import FormPayload, TaskInput
from slack_resource.errors import SlackResourceError, ValidationError
from slack_resource.interpolation import expand_env

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BuiltPayload:
    """Form fields for one request; `empty` means there is nothing worth sending."""

    payload: FormPayload = field(default_factory=dict)
    empty: bool = False


def build_post_message(task: TaskInput) -> BuiltPayload:
    """Build the `chat.postMessage` form payload."""

    params = task.params
    try:
        raw_attachments = resolve_attachments(params.attachments, params.attachments_file)
    except SlackResourceError as exc:
        logger.warning("Error validating attachments contents: %s", exc)
        raw_attachments = INTERNAL_ERROR_ATTACHMENTS
    attachments = expand_env(raw_attachments)

    if not task.source.token:
        raise ValidationError("token is a required param")
    if not params.channel:
        raise ValidationError("channel is a required param")

    # Attachments that fail to parse are forwarded unchanged and left for Slack to judge.
    entries = parse_attachments(attachments)
    if entries is not None and is_meaningless(entries):
        return BuiltPayload(empty=True)

    payload: FormPayload = {
        "attachments": attachments,
        "token": task.source.token,
        "channel": params.channel,
        "link_names": str(params.link_names),
    }
    if params.icon_url:
        payload["icon_url"] = params.icon_url
    if params.username:
        payload["username"] = params.username
    return BuiltPayload(payload=payload)


def build_files_upload(task: TaskInput) -> BuiltPayload:
    """Build the `files.upload` form payload. Uploads are never reported empty."""

    params = task.params
    if params.file and params.content:
        raise ValidationError("cannot supply both file and content for files.upload")
    if not params.file and not params.content:
        raise ValidationError("must supply one of file or content for files.upload")

    content: str | bytes = read_file_bytes(params.file) if params.file else params.content
    return BuiltPayload(
        payload={
            "content": content,
            "token": task.source.token,
            "channels": params.channels,
            "title": params.title,
        },
    )
