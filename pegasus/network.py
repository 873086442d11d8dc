"""HTTP client for requests to the refinement service."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional, Type

import httpx
from pydantic import BaseModel, ValidationError

from .log import get_logger
from .models import DEFAULT_LLM_TIMEOUT

_REACHABLE_STATUSES = (httpx.codes.OK, httpx.codes.NOT_FOUND)


class NetworkError(RuntimeError):
    """Raised when talking to a remote service fails."""


class InvalidURLError(NetworkError):
    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Invalid service URL: '{url}'. Please check your configuration file.")


class RequestFailedError(NetworkError):
    def __init__(self) -> None:
        super().__init__(
            "Failed to connect to service. Please verify the service is running and accessible."
        )


class ResponseError(NetworkError):
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(
            f"Service returned an error (HTTP {status_code}). "
            "Please check the service logs and try again."
        )


class DecodeError(NetworkError):
    def __init__(self) -> None:
        super().__init__(
            "Failed to decode service response. The service may be experiencing issues "
            "or the format may be unsupported."
        )


class HttpClient:
    """Issue JSON POST requests against a base URL.

    Every request is preceded by a reachability check of the base URL. Each call
    opens its own ``httpx.Client``; nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_LLM_TIMEOUT,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.logger = logger or get_logger("network")
        self.transport = transport

    @contextmanager
    def _client(self) -> Iterator[httpx.Client]:
        with httpx.Client(
            timeout=self.timeout, transport=self.transport, follow_redirects=True
        ) as client:
            yield client

    def _endpoint_url(self, endpoint: str) -> str:
        if self.base_url.endswith("/"):
            return f"{self.base_url}{endpoint}"
        return f"{self.base_url}/{endpoint}"

    def post_with_json(
        self,
        body: Any,
        endpoint: str,
        headers: Optional[Mapping[str, str]] = None,
        response_model: Optional[Type[BaseModel]] = None,
    ) -> Any:
        """POST ``body`` as JSON and decode the reply.

        ``body`` may be a pydantic model or any JSON-serialisable value. The reply
        is validated into ``response_model`` when given, otherwise returned as the
        decoded JSON value.
        """
        self.check_url()

        url = self._endpoint_url(endpoint)
        payload = body.model_dump() if isinstance(body, BaseModel) else body
        request_headers: Dict[str, str] = dict(headers or {})

        self.logger.debug("Sending POST request to: %s", url)
        try:
            with self._client() as client:
                response = client.post(url, json=payload, headers=request_headers)
        except httpx.RequestError as exc:
            self.logger.debug("POST %s failed: %s", url, exc)
            raise RequestFailedError() from exc

        self.logger.debug("Received response from service. Status: %s", response.status_code)
        if not response.is_success:
            raise ResponseError(response.status_code)

        if response_model is not None:
            try:
                return response_model.model_validate_json(response.content)
            except ValidationError as exc:
                self.logger.debug("Response did not match %s: %s", response_model.__name__, exc)
                raise DecodeError() from exc
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError() from exc

    def check_url(self) -> None:
        """Ensure the base URL is well formed and answers with 200 or 404."""
        self.logger.debug("Checking if service URL is reachable...")
        try:
            parsed = httpx.URL(self.base_url)
        except httpx.InvalidURL as exc:
            self.logger.debug("Invalid URL format: %s", exc)
            raise InvalidURLError(self.base_url) from exc
        if parsed.scheme not in ("http", "https") or not parsed.host:
            self.logger.debug("Invalid URL format: missing scheme or host")
            raise InvalidURLError(self.base_url)

        try:
            with self._client() as client:
                response = client.get(parsed)
        except httpx.RequestError as exc:
            self.logger.debug("Failed to connect to URL: %s", exc)
            raise RequestFailedError() from exc

        if response.status_code not in _REACHABLE_STATUSES:
            self.logger.debug("URL returned unexpected status: %s", response.status_code)
            raise InvalidURLError(self.base_url)
        self.logger.debug("Service URL is reachable with status: %s", response.status_code)
