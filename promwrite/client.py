"""HTTP client that pushes write requests to a remote-write endpoint."""

from __future__ import annotations

import base64
import http.client
import logging
from collections.abc import Callable
from typing import Any

from .errors import ConfigurationError, EncodeError, SendError, SendResult
from .write_request import WriteRequest

logger = logging.getLogger(__name__)

USER_AGENT = "promwrite/0.2.2"
DEFAULT_TIMEOUT = 15.0

ConnectionFactory = Callable[[str, int, float], Any]


class PromClient:
    """Sends snappy-compressed protobuf write requests over a kept-alive connection.

    ``connection_factory`` is called as ``factory(host, port, timeout)`` and must
    return an object with the interface of ``http.client.HTTPConnection``.
    """

    def __init__(
        self,
        url: str | None = None,
        path: str | None = None,
        port: int | None = None,
        user: str | None = None,
        password: str | None = None,
        use_tls: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        connection_factory: ConnectionFactory | None = None,
    ) -> None:
        self.url = url
        self.path = path
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout
        self.connection_factory = connection_factory
        self._connection: Any = None
        self._connect_count = 0

    @property
    def connect_count(self) -> int:
        """How many times a new connection to the server has been opened."""
        return self._connect_count

    def _default_factory(self, host: str, port: int, timeout: float) -> http.client.HTTPConnection:
        cls = http.client.HTTPSConnection if self.use_tls else http.client.HTTPConnection
        return cls(host, port, timeout=timeout)

    def begin(self) -> None:
        """Check the settings and prepare the connection."""
        if not self.url:
            raise ConfigurationError("you must set a url")
        if not self.path:
            raise ConfigurationError("you must set a path")
        if not self.port:
            raise ConfigurationError("you must set a port")
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"port {self.port} is out of range")
        factory = self.connection_factory or self._default_factory
        self._connection = factory(self.url, self.port, self.timeout)

    def send(self, request: WriteRequest) -> int:
        """Push ``request`` and return the HTTP status; raise SendError on failure."""
        if self._connection is None:
            raise ConfigurationError("call begin() before send()")
        try:
            payload = request.to_snappy_proto()
        except EncodeError as exc:
            raise SendError(str(exc), SendResult.FAILED_DONT_RETRY) from exc
        return self._send(payload)

    def _drop_connection(self) -> None:
        self._connection.close()

    def _ensure_connected(self) -> None:
        conn = self._connection
        if getattr(conn, "sock", None) is not None:
            logger.debug("Connection already open")
            return
        logger.debug("Connecting...")
        try:
            conn.connect()
        except OSError as exc:
            logger.debug("Connection failed: %s", exc)
            self._drop_connection()
            raise SendError(
                f"Failed to connect to server: {exc}", SendResult.FAILED_RETRYABLE
            ) from exc
        logger.debug("Connected.")
        self._connect_count += 1

    def _headers(self, length: int) -> dict[str, str]:
        headers = {
            "Host": self.url or "",
            "Content-Type": "application/x-protobuf",
            "Content-Encoding": "snappy",
        }
        if self.user and self.password:
            credentials = f"{self.user}:{self.password}".encode("utf-8")
            headers["Authorization"] = "Basic " + base64.b64encode(credentials).decode("ascii")
        headers["User-Agent"] = USER_AGENT
        headers["Content-Length"] = str(length)
        return headers

    def _send(self, payload: bytes) -> int:
        logger.debug("Sending to Prometheus")
        self._ensure_connected()
        conn = self._connection
        try:
            conn.request("POST", self.path, body=payload, headers=self._headers(len(payload)))
            logger.debug("Sent, waiting for response")
            response = conn.getresponse()
            body = response.read()
        except TimeoutError as exc:
            self._drop_connection()
            raise SendError("Timed out waiting for the server", SendResult.FAILED_RETRYABLE) from exc
        except http.client.HTTPException as exc:
            self._drop_connection()
            raise SendError(
                "Invalid response from server, correct address and port?",
                SendResult.FAILED_RETRYABLE,
            ) from exc
        except OSError as exc:
            self._drop_connection()
            raise SendError(
                f"Connection to server failed: {exc}", SendResult.FAILED_RETRYABLE
            ) from exc

        status = response.status
        status_class = status // 100
        if status_class == 2:
            logger.debug("Prom send succeeded: %r", body)
            return status
        logger.debug("Prom send failed with code %d: %r", status, body)
        if status_class == 4:
            raise SendError(
                "Failed to send to prometheus, 4xx response",
                SendResult.FAILED_DONT_RETRY,
                status,
            )
        raise SendError(
            "Failed to send to prometheus, 5xx or unexpected status code",
            SendResult.FAILED_RETRYABLE,
            status,
        )

    def close(self) -> None:
        """Close the connection; call begin() again before sending more."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def __enter__(self) -> PromClient:
        self.begin()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()