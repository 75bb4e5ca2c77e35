"""Slack Web API client with single fallback-channel retry."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

import httpx

from slack_resource import __version__
from slack_resource.config import DEFAULT_API_URL, DEFAULT_TIMEOUT_SECONDS
from slack_resource.contracts import FormPayload, SlackResponse, parse_slack_response
from slack_resource.errors import ApiError, NetworkError, ProtocolError

logger = logging.getLogger(__name__)

FALLBACK_ERROR_CODES: frozenset[str] = frozenset(
    {"channel_not_found", "invalid_channel", "is_archived"},
)
DESTINATION_FIELDS = ("channel", "channels")
MAX_ATTEMPTS = 2
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
DEFAULT_USER_AGENT = f"slack-resource/{__version__}"


class SlackClient:
    """Form-encoded POST client for the Slack Web API."""

    def __init__(
        self,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout_seconds, connect=10.0),
            headers={"User-Agent": DEFAULT_USER_AGENT},
            transport=transport,
        )

    def deliver(
        self,
        api_path: str,
        payload: FormPayload,
        fallback_channel: str = "",
        *,
        allow_fallback: bool = True,
    ) -> SlackResponse:
        """Post the payload, retrying once against the fallback channel when eligible."""

        current = dict(payload)
        attempt = 1
        response = self._post(api_path, current)
        while not response.ok:
            retry_payload = None
            if allow_fallback and attempt < MAX_ATTEMPTS:
                retry_payload = _fallback_payload(current, response.error, fallback_channel)
            if retry_payload is None:
                raise ApiError(
                    f"Slack API returned 'ok': false ({response.error or 'no error code'})",
                    error_code=response.error,
                    body=response.raw,
                )
            logger.warning(
                "Slack rejected destination with %s, retrying with fallback channel %s",
                response.error,
                fallback_channel,
            )
            current = retry_payload
            attempt += 1
            response = self._post(api_path, current)

        response.attempts = attempt
        logger.info("Slack accepted %s after %d attempt(s)", api_path, attempt)
        return response

    def _post(self, api_path: str, payload: FormPayload) -> SlackResponse:
        url = f"{self._api_url}/{api_path.lstrip('/')}"
        try:
            response = self._client.post(
                url,
                content=urlencode(payload).encode("ascii"),
                headers={"Content-Type": FORM_CONTENT_TYPE},
            )
            body = response.text
        except httpx.TimeoutException as exc:
            raise NetworkError(f"timeout posting to {url}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"HTTP error posting to {url}: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise ProtocolError(
                f"expected 200 response code but got {response.status_code}",
                status_code=response.status_code,
                body=body,
            )
        return parse_slack_response(body)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> SlackClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


def _fallback_payload(
    payload: FormPayload,
    error_code: str,
    fallback_channel: str,
) -> FormPayload | None:
    """Copy of the payload aimed at the fallback channel, or None when not eligible."""

    if error_code not in FALLBACK_ERROR_CODES or not fallback_channel.strip():
        return None
    for name in DESTINATION_FIELDS:
        if payload.get(name):
            return {**payload, name: fallback_channel}
    return None
