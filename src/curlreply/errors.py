from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Domain classification of a failed transfer.

    HTTP error statuses (4xx/5xx) are not represented here: a transfer that
    reached the server and got any status back is a successful transfer.
    """

    PROTOCOL_UNSUPPORTED = "protocol_unsupported"
    PROTOCOL_FAILURE = "protocol_failure"
    TIMEOUT = "timeout"
    CONNECTION_REFUSED = "connection_refused"
    TLS_HANDSHAKE_FAILED = "tls_handshake_failed"
    TOO_MANY_REDIRECTS = "too_many_redirects"
    HOST_NOT_FOUND = "host_not_found"
    PROXY_NOT_FOUND = "proxy_not_found"
    CONTENT_MALFORMED = "content_malformed"
    CONTENT_ACCESS_DENIED = "content_access_denied"
    UNKNOWN_NETWORK_ERROR = "unknown_network_error"

    @property
    def description(self) -> str:
        return self.value.replace("_", " ").capitalize()


@dataclass(frozen=True)
class TransferError:
    """Failure of one transfer, as reported by the engine.

    Attributes:
        kind: Domain classification of the failure
        message: The engine's human-readable message
        code: The raw engine result code
    """

    kind: ErrorKind
    message: str
    code: int

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class CurlReplyError(Exception):
    pass


class RequestError(CurlReplyError, ValueError):
    pass


class ConfigError(CurlReplyError, ValueError):
    pass


class SessionClosedError(CurlReplyError, RuntimeError):
    pass


class TransferFailedError(CurlReplyError):
    def __init__(self, error: TransferError, url: str = "") -> None:
        target = f" ({url})" if url else ""
        super().__init__(f"Transfer failed{target}: {error}")
        self.error = error
        self.url = url

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind
