from __future__ import annotations

import json

import allure
import pytest

from slack_resource.contracts import read_task_input
from slack_resource.dispatch import OPERATION_PATHS, dispatch
from slack_resource.errors import ValidationError

pytestmark = [
    allure.epic("Request Building"),
    allure.feature("Operation Dispatch"),
]


def test_dispatch_files_upload_end_to_end() -> None:
    task = read_task_input(
        json.dumps(
            {
                "source": {"token": "T", "operation": "files.upload"},
                "params": {"content": "hi", "title": "T1", "channels": "C1"},
            },
        ),
    )

    plan = dispatch(task)

    assert plan.api_path == "api/files.upload"
    assert plan.payload == {"content": "hi", "token": "T", "channels": "C1", "title": "T1"}
    assert not plan.empty


def test_dispatch_post_message_reports_empty_flag() -> None:
    task = read_task_input(
        json.dumps(
            {
                "source": {"token": "T", "method": "chat.postMessage"},
                "params": {"channel": "C1", "attachments": '[{"text": ""}]'},
            },
        ),
    )

    plan = dispatch(task)

    assert plan.api_path == "api/chat.postMessage"
    assert plan.empty


def test_dispatch_rejects_unknown_operation() -> None:
    task = read_task_input('{"source": {"operation": "invalid.method"}}')

    with pytest.raises(ValidationError, match="operation 'invalid.method' does not exist"):
        dispatch(task)


def test_operation_paths_are_read_only() -> None:
    with pytest.raises(TypeError):
        OPERATION_PATHS["chat.delete"] = "api/chat.delete"  # type: ignore[index]
