from __future__ import annotations

import json

import allure
import pytest

from slack_resource.config import Settings
from slack_resource.controllers import OutCommand, ResourceCliController, StageError
from slack_resource.delivery import SlackClient
from slack_resource.errors import ApiError, ValidationError

pytestmark = [
    allure.epic("Concourse Contract"),
    allure.feature("Out Step"),
]


def _controller(slack_stub) -> ResourceCliController:
    return ResourceCliController(
        client_factory=lambda **kwargs: SlackClient(transport=slack_stub.transport, **kwargs),
    )


def _command(source: dict[str, object], params: dict[str, object]) -> OutCommand:
    return OutCommand(
        raw_input=json.dumps({"source": source, "params": params}),
        settings=Settings(api_url="https://slack.test"),
    )


def test_run_out_delivers_and_returns_version(slack_stub) -> None:
    slack_stub.reply(ok=True, file={"id": "F9"})

    result = _controller(slack_stub).run_out(
        _command({"token": "T", "operation": "files.upload"}, {"content": "hi", "channels": "C"}),
    )

    assert not result.skipped
    assert result.version_json == '{"version":{"ref":"none"}}'
    assert result.response is not None
    assert result.response.file_id == "F9"
    assert str(slack_stub.requests[0].url) == "https://slack.test/api/files.upload"


def test_run_out_skips_empty_message_without_request(slack_stub) -> None:
    result = _controller(slack_stub).run_out(
        _command(
            {"token": "T", "operation": "chat.postMessage"},
            {"channel": "C", "attachments": '[{"title": ""}]'},
        ),
    )

    assert result.skipped
    assert result.response is None
    assert slack_stub.requests == []


@pytest.mark.parametrize(
    ("raw_input", "stage", "error_type"),
    [
        ("{", "getting concourse input", ValidationError),
        ('{"source": {"operation": "nope"}}', "validating input", ValidationError),
    ],
)
def test_run_out_labels_input_failures(
    slack_stub,
    raw_input: str,
    stage: str,
    error_type: type[Exception],
) -> None:
    with pytest.raises(StageError) as exc_info:
        _controller(slack_stub).run_out(OutCommand(raw_input=raw_input))

    assert exc_info.value.stage == stage
    assert isinstance(exc_info.value.error, error_type)
    assert str(exc_info.value).startswith(f"Error while {stage}: ")


def test_run_out_labels_delivery_failures(slack_stub) -> None:
    slack_stub.reply(ok=False, error="channel_not_found")

    with pytest.raises(StageError) as exc_info:
        _controller(slack_stub).run_out(
            _command(
                {"token": "T", "operation": "chat.postMessage"},
                {"channel": "C", "attachments": '[{"text": "x"}]'},
            ),
        )

    assert exc_info.value.stage == "posting to slack"
    assert isinstance(exc_info.value.error, ApiError)
