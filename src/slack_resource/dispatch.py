"""Map a declared operation to its Slack API path and payload builder."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from slack_resource.builders import BuiltPayload, build_files_upload, build_post_message
from slack_resource.contracts import FormPayload, TaskInput
from slack_resource.errors import ValidationError

logger = logging.getLogger(__name__)

OPERATION_FILES_UPLOAD = "files.upload"
OPERATION_CHAT_POST_MESSAGE = "chat.postMessage"

OPERATION_PATHS: Mapping[str, str] = MappingProxyType(
    {
        OPERATION_FILES_UPLOAD: "api/files.upload",
        OPERATION_CHAT_POST_MESSAGE: "api/chat.postMessage",
    },
)
_BUILDERS: Mapping[str, Callable[[TaskInput], BuiltPayload]] = MappingProxyType(
    {
        OPERATION_FILES_UPLOAD: build_files_upload,
        OPERATION_CHAT_POST_MESSAGE: build_post_message,
    },
)


@dataclass(slots=True, frozen=True)
class RequestPlan:
    """Validated request ready for delivery."""

    operation: str
    api_path: str
    payload: FormPayload
    empty: bool = False


def dispatch(task: TaskInput) -> RequestPlan:
    """Validate the task and build the request for its operation."""

    operation = task.source.operation
    api_path = OPERATION_PATHS.get(operation)
    if api_path is None:
        raise ValidationError(f"operation '{operation}' does not exist")

    built = _BUILDERS[operation](task)
    logger.info("Built %s request (empty=%s)", operation, built.empty)
    return RequestPlan(
        operation=operation,
        api_path=api_path,
        payload=built.payload,
        empty=built.empty,
    )
