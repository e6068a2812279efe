"""Entry point of the OneDrive client.

``OneDrive`` owns the HTTP transport and the throttle gate, builds requests
(``new_request``) and turns responses into models or errors (``do``). The
endpoint services (``drives``, ``items``) are thin routing on top of it.

Example:
    >>> with OneDrive.from_config() as od:
    ...     drive = od.drives.get_default()
    ...     children = od.items.list_children("root")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ClientConfig, load_config
from .drives import DriveService
from .errors import (
    APIError,
    InvalidRequestError,
    MalformedResponseError,
    MalformedThrottleHeaderError,
    TransportError,
)
from .items import ItemService
from .models import ErrorEnvelope, OneDriveModel
from .throttle import ThrottleGate

if TYPE_CHECKING:
    from typing import Self

VERSION = "0.1.0"

BASE_URL = DEFAULT_BASE_URL
USER_AGENT = f"pyonedrive; version {VERSION}"

# Inclusive range of statuses whose body is an error envelope
ERROR_STATUS_RANGE = (400, 507)

HTTP_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"})

M = TypeVar("M", bound=BaseModel)

logger = logging.getLogger(__name__)


def _send_options(follow_redirects: bool | None) -> dict[str, Any]:
    # None keeps the transport's own redirect setting
    if follow_redirects is None:
        return {}
    return {"follow_redirects": follow_redirects}


class OneDrive:
    """Client for the OneDrive REST API.

    Authentication is not handled here: pass an ``httpx.Client`` (and/or
    ``httpx.AsyncClient``) that already carries credentials, or use
    ``from_config`` with a configured access token.

    Attributes:
        base_url: Prefix of every request path.
        debug: When True, the service is asked for pretty printed JSON.
        throttle: Gate tracking server imposed rate limits.
        drives: Drive endpoints.
        items: Item endpoints.
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        *,
        async_http_client: httpx.AsyncClient | None = None,
        debug: bool = False,
        base_url: str = BASE_URL,
        throttle: ThrottleGate | None = None,
    ) -> None:
        self._http_client = http_client
        self._async_http_client = async_http_client
        self._owns_http_client = http_client is None
        self._owns_async_http_client = async_http_client is None
        self.debug = debug
        self.base_url = base_url.rstrip("/")
        self.throttle = throttle or ThrottleGate()
        # Services
        self.drives = DriveService(self)
        self.items = ItemService(self)

    @property
    def http_client(self) -> httpx.Client:
        """Get the synchronous transport, creating a default one if needed."""
        if self._http_client is None:
            self._http_client = httpx.Client(
                timeout=DEFAULT_TIMEOUT, follow_redirects=True
            )
        return self._http_client

    @property
    def async_http_client(self) -> httpx.AsyncClient:
        """Get the asynchronous transport, creating a default one if needed."""
        if self._async_http_client is None:
            self._async_http_client = httpx.AsyncClient(
                timeout=DEFAULT_TIMEOUT, follow_redirects=True
            )
        return self._async_http_client

    # -------------------------------------------------------------------------
    # Request construction
    # -------------------------------------------------------------------------

    def new_request(
        self,
        method: str,
        path: str,
        headers: dict[str, str] | None = None,
        *,
        json: Any = None,
        content: bytes | Any = None,
    ) -> httpx.Request:
        """Build a request for the synchronous transport.

        Args:
            method: HTTP method.
            path: Path relative to ``base_url``, or an absolute URL.
            headers: Overrides applied after the default headers.
            json: Body to encode as JSON (a model or plain data).
            content: Raw body (bytes or byte stream), sent unchanged.

        Returns:
            The request, ready to pass to ``do``.

        Raises:
            RateLimitedError: If the throttle gate refuses the request.
            InvalidRequestError: If the request cannot be built.
        """
        return self._build_request(
            self.http_client, method, path, headers, json=json, content=content
        )

    def new_async_request(
        self,
        method: str,
        path: str,
        headers: dict[str, str] | None = None,
        *,
        json: Any = None,
        content: bytes | Any = None,
    ) -> httpx.Request:
        """Build a request for the asynchronous transport (see ``new_request``)."""
        return self._build_request(
            self.async_http_client, method, path, headers, json=json, content=content
        )

    def _build_request(
        self,
        client: httpx.Client | httpx.AsyncClient,
        method: str,
        path: str,
        headers: dict[str, str] | None,
        *,
        json: Any,
        content: Any,
    ) -> httpx.Request:
        self.throttle.check_and_admit()

        if json is not None and content is not None:
            raise InvalidRequestError("A request body is either JSON or raw content")

        method = method.upper()
        if method not in HTTP_METHODS:
            raise InvalidRequestError(f"Unsupported HTTP method: {method}")

        request_headers = httpx.Headers(self._default_headers())
        for name, value in (headers or {}).items():
            request_headers[name] = value

        if isinstance(json, OneDriveModel):
            json = json.to_payload()
        elif isinstance(json, BaseModel):
            json = json.model_dump(by_alias=True, exclude_none=True, mode="json")

        try:
            return client.build_request(
                method,
                self._resolve_url(path),
                headers=request_headers,
                json=json,
                content=content,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise InvalidRequestError(f"Cannot build {method} {path}: {e}") from e

    def _default_headers(self) -> dict[str, str]:
        accept = "application/json"
        if self.debug:
            accept += ";format=pretty"
        return {
            "Accept": accept,
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

    def _resolve_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            raise InvalidRequestError(f"Path must start with '/': {path!r}")
        return self.base_url + path

    # -------------------------------------------------------------------------
    # Response handling
    # -------------------------------------------------------------------------

    def do(
        self,
        request: httpx.Request,
        into: type[M] | None = None,
        *,
        follow_redirects: bool | None = None,
    ) -> tuple[M | None, httpx.Response]:
        """Send a request and decode its response.

        The response is always closed before returning.

        Args:
            request: Request from ``new_request``.
            into: Model to decode a successful body into. When None the body
                is not decoded, nor is the body of an unfollowed redirect.
            follow_redirects: Overrides the transport's redirect setting
                for this request.

        Returns:
            The decoded model (or None) and the response.

        Raises:
            TransportError: If the request could not be sent or read.
            APIError: If the service answered with an error envelope.
            MalformedResponseError: If the body could not be decoded.
            MalformedThrottleHeaderError: If a 429 carried a bad Retry-After.
        """
        logger.debug("%s %s", request.method, request.url)
        try:
            response = self.http_client.send(
                request, stream=True, **_send_options(follow_redirects)
            )
        except httpx.RequestError as e:
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e

        try:
            response.read()
            return self._decode(response, into), response
        except httpx.RequestError as e:
            raise TransportError(
                f"Reading response of {request.method} {request.url} failed: {e}"
            ) from e
        finally:
            response.close()

    async def do_async(
        self,
        request: httpx.Request,
        into: type[M] | None = None,
        *,
        follow_redirects: bool | None = None,
    ) -> tuple[M | None, httpx.Response]:
        """Send a request and decode its response (async version of ``do``)."""
        logger.debug("%s %s", request.method, request.url)
        try:
            response = await self.async_http_client.send(
                request, stream=True, **_send_options(follow_redirects)
            )
        except httpx.RequestError as e:
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e

        try:
            await response.aread()
            return self._decode(response, into), response
        except httpx.RequestError as e:
            raise TransportError(
                f"Reading response of {request.method} {request.url} failed: {e}"
            ) from e
        finally:
            await response.aclose()

    def _decode(self, response: httpx.Response, into: type[M] | None) -> M | None:
        status = response.status_code
        logger.debug("Response %d from %s", status, response.request.url)

        low, high = ERROR_STATUS_RANGE
        if low <= status <= high:
            try:
                envelope = ErrorEnvelope.model_validate_json(response.content)
            except ValidationError as e:
                raise MalformedResponseError(
                    f"Undecodable error response: {status} - {response.text}",
                    status,
                ) from e

            api_error = APIError(status, envelope.error)
            if status == httpx.codes.TOO_MANY_REQUESTS:
                try:
                    self.throttle.record_throttle(response.headers.get("Retry-After"))
                except MalformedThrottleHeaderError as e:
                    raise MalformedThrottleHeaderError(e.value, api_error) from api_error
            raise api_error

        if into is None or response.is_redirect:
            return None

        try:
            return into.model_validate_json(response.content)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Undecodable {into.__name__} response: {status}", status
            ) from e

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @classmethod
    def from_config(cls, config_path: str | Path | None = None) -> Self:
        """Create a client from the configuration file.

        Args:
            config_path: Path to config file. If None, uses default location.

        Returns:
            Client whose transport carries the configured access token.
        """
        config = load_config(config_path)
        return cls.from_client_config(config)

    @classmethod
    def from_client_config(cls, config: ClientConfig) -> Self:
        client = cls(
            config.build_http_client(),
            async_http_client=config.build_async_http_client(),
            debug=config.debug,
            base_url=config.base_url,
        )
        # Transports built from the config belong to this client
        client._owns_http_client = True
        client._owns_async_http_client = True
        return client

    def close(self) -> None:
        """Close the synchronous transport if this client created it."""
        if self._owns_http_client and self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    async def aclose(self) -> None:
        """Close both transports if this client created them."""
        if self._owns_async_http_client and self._async_http_client is not None:
            await self._async_http_client.aclose()
            self._async_http_client = None
        self.close()

    def __enter__(self) -> Self:
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit - close owned transports."""
        self.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.aclose()
