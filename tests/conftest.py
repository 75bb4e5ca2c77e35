"""Shared test fixtures."""

from __future__ import annotations

import logging
from urllib.parse import parse_qsl

import httpx
import pytest


class SlackStub:
    """Replays queued Slack responses and records the form payloads posted."""

    def __init__(self) -> None:
        self.responses: list[httpx.Response] = []
        self.requests: list[httpx.Request] = []

    def reply(self, status_code: int = 200, **body: object) -> None:
        self.responses.append(httpx.Response(status_code, json=body))

    def reply_text(self, status_code: int, text: str) -> None:
        self.responses.append(httpx.Response(status_code, text=text))

    @property
    def forms(self) -> list[dict[str, str]]:
        return [dict(parse_qsl(request.content.decode("utf-8"))) for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"unexpected request to {request.url}")
        return self.responses.pop(0)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture()
def slack_stub() -> SlackStub:
    return SlackStub()


@pytest.fixture(autouse=True)
def _restore_resource_logger():
    """Undo the stderr handler the CLI installs so later tests keep default logging."""
    logger = logging.getLogger("slack_resource")
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
