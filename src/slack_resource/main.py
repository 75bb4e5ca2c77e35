"""CLI entrypoint for slack-resource."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import rich_click as click

from slack_resource import __version__
from slack_resource.config import Settings
from slack_resource.controllers import OutCommand, ResourceCliController, StageError
from slack_resource.errors import ApiError, DecodeError, ProtocolError

click.rich_click.USE_MARKDOWN = True
OUT_CONTROLLER = ResourceCliController()


@click.group()
@click.version_option(version=__version__, prog_name="slack-resource")
def slack_resource() -> None:
    """Concourse resource that posts messages and files to Slack."""


@slack_resource.command("out")
@click.argument(
    "workdir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
def out(workdir: Path) -> None:
    """Read a put request from stdin and deliver it to Slack.

    Relative `file` and `attachments_file` paths resolve against **WORKDIR**.
    """

    try:
        settings = Settings.from_env()
        settings.validate()
    except ValueError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    _configure_logging(settings.log_level)

    os.chdir(workdir)
    raw_input = click.get_text_stream("stdin").read()
    try:
        result = OUT_CONTROLLER.run_out(OutCommand(raw_input=raw_input, settings=settings))
    except StageError as exc:
        _echo_response_body(exc)
        raise click.ClickException(str(exc)) from exc

    click.echo(result.version_json)


def _configure_logging(level: str) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger("slack_resource")
    root.handlers[:] = [handler]
    root.setLevel(level)
    root.propagate = False


def _echo_response_body(exc: StageError) -> None:
    if isinstance(exc.error, ProtocolError | ApiError | DecodeError) and exc.error.body:
        click.echo(exc.error.body, err=True)


if __name__ == "__main__":  # pragma: no cover
    slack_resource()
