"""Controller for the Concourse `out` step."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from slack_resource.config import Settings
from slack_resource.contracts import SlackResponse, read_task_input, render_version_output
from slack_resource.delivery import SlackClient
from slack_resource.dispatch import dispatch
from slack_resource.errors import SlackResourceError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OutCommand:
    """CLI inputs for the out step."""

    raw_input: str
    settings: Settings = field(default_factory=Settings)


@dataclass(slots=True)
class OutResult:
    """Outcome of one out step."""

    version_json: str
    skipped: bool
    response: SlackResponse | None = None


@dataclass(slots=True)
class StageError(Exception):
    """Fatal error annotated with the stage that raised it."""

    stage: str
    error: SlackResourceError

    def __str__(self) -> str:
        return f"Error while {self.stage}: {self.error}"


class ResourceCliController:
    """Coordinates the read, build and deliver stages of the out step."""

    def __init__(self, client_factory: Callable[..., SlackClient] = SlackClient) -> None:
        self._client_factory = client_factory

    def run_out(self, command: OutCommand) -> OutResult:
        try:
            task = read_task_input(command.raw_input)
        except SlackResourceError as exc:
            raise StageError("getting concourse input", exc) from exc

        try:
            plan = dispatch(task)
        except SlackResourceError as exc:
            raise StageError("validating input", exc) from exc

        if plan.empty:
            logger.warning("Skipping %s: attachments carry no text or title", plan.operation)
            return OutResult(version_json=render_version_output(), skipped=True)

        settings = command.settings
        try:
            with self._client_factory(
                api_url=settings.api_url,
                timeout_seconds=settings.timeout_seconds,
            ) as client:
                response = client.deliver(
                    plan.api_path,
                    plan.payload,
                    task.params.fallback_channel,
                )
        except SlackResourceError as exc:
            raise StageError("posting to slack", exc) from exc

        return OutResult(
            version_json=render_version_output(),
            skipped=False,
            response=response,
        )
