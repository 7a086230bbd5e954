"""HTTP client for the remote translation service."""

import logging

import httpx

from .errors import (
    AuthError,
    ConnectionFailed,
    NotFoundError,
    ServerError,
    UnexpectedError,
)
from .models import Settings

logger = logging.getLogger(__name__)

HEALTH_TIMEOUT = 5.0
SRT_MIME_TYPE = "application/x-subrip"

# Keys a JSON success payload may carry the translated document under
TEXT_KEYS = ("translated", "content", "result", "translation")


def _json_payload(response: httpx.Response) -> dict | None:
    """Decode the body as a JSON object, if it looks like one."""
    content_type = response.headers.get("content-type", "")
    if "json" not in content_type and not response.text.lstrip().startswith("{"):
        return None
    try:
        payload = response.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def _error_message(payload: dict | None) -> str | None:
    if not payload:
        return None
    for key in ("error", "detail", "message"):
        value = payload.get(key)
        if value:
            return value if isinstance(value, str) else str(value)
    return None


class BackendClient:
    """Talks to the translation service's HTTP API.

    Args:
        api_url: Base URL of the service
        timeout: Seconds to wait for a translation before giving up
        transport: Optional httpx transport, used to fake the service in tests
    """

    def __init__(
        self,
        api_url: str,
        timeout: float = 600.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    def _check_status(self, response: httpx.Response) -> dict | None:
        """Raise the matching TransferError for a failed response."""
        payload = _json_payload(response)
        status = response.status_code
        if status == 404:
            raise NotFoundError(
                f"API endpoint not found. Please check the service is running at: {self.api_url}"
            )
        if status in (401, 403):
            raise AuthError(
                _error_message(payload)
                or f"The translation service rejected the request ({status})"
            )
        if status >= 400:
            raise ServerError(
                _error_message(payload)
                or f"Server error ({status}): {response.reason_phrase}",
                status_code=status,
            )
        return payload

    async def check_connection(self) -> dict | str:
        """Ping the service root.

        Returns:
            The service's status payload (or plain text body)

        Raises:
            TransferError: If the service is unreachable or unhealthy
        """
        try:
            response = await self._get_client().get("/", timeout=HEALTH_TIMEOUT)
        except httpx.TransportError as e:
            logger.warning("API connection test failed: %s", e)
            raise ConnectionFailed(self.api_url) from e
        payload = self._check_status(response)
        return payload if payload is not None else response.text

    async def translate(self, content: str, filename: str, settings: Settings) -> str:
        """Upload a subtitle document and wait for its translation.

        Exactly one request is made; failures are not retried.

        Args:
            content: SRT document text
            filename: Name reported for the uploaded file
            settings: Batch size and quality mode

        Returns:
            The translated SRT document

        Raises:
            TransferError: Classified failure, safe to show to the user
        """
        files = {"file": (filename, content.encode("utf-8"), SRT_MIME_TYPE)}
        logger.info("Sending translation request to %s", self.api_url)
        try:
            response = await self._get_client().post(
                "/translate", files=files, data=settings.to_form()
            )
        except httpx.TransportError as e:
            raise ConnectionFailed(self.api_url) from e
        except httpx.HTTPError as e:
            raise UnexpectedError(str(e) or "An unexpected error occurred") from e

        payload = self._check_status(response)
        return self._translated_text(response, payload)

    def _translated_text(self, response: httpx.Response, payload: dict | None) -> str:
        if payload is None:
            if not response.text.strip():
                raise ServerError("Translation service returned an empty file")
            return response.text

        if payload.get("status") == "error" or (
            "error" in payload and not any(key in payload for key in TEXT_KEYS)
        ):
            raise ServerError(_error_message(payload) or "Server error occurred")

        for key in TEXT_KEYS:
            text = payload.get(key)
            if isinstance(text, str) and text.strip():
                return text
        raise ServerError("Translation service returned no translated text")

