from __future__ import annotations

import logging
import os
from typing import Any, Protocol

import pycurl

from .error_mapping import from_pycurl_error
from .errors import SessionClosedError
from .headers import HEADER_ENCODING, content_length_line, encode_header_lines, serialize_headers
from .models import CertificateFormat, TransferRequest
from .options import TransferOptions
from .reply import CurlReply

logger = logging.getLogger(__name__)

# libcurl debug record type -> (label, minimum verbosity level)
_DEBUG_RECORDS: dict[int, tuple[str, int]] = {
    pycurl.INFOTYPE_TEXT: ("*", 1),
    pycurl.INFOTYPE_HEADER_IN: ("<", 2),
    pycurl.INFOTYPE_HEADER_OUT: (">", 2),
    pycurl.INFOTYPE_DATA_IN: ("<<", 3),
    pycurl.INFOTYPE_DATA_OUT: (">>", 3),
    pycurl.INFOTYPE_SSL_DATA_IN: ("<<ssl", 3),
    pycurl.INFOTYPE_SSL_DATA_OUT: (">>ssl", 3),
}


class CurlHandleProtocol(Protocol):
    def setopt(self, option: int, value: Any) -> None: ...

    def unsetopt(self, option: int) -> None: ...

    def getinfo(self, info: int) -> Any: ...

    def perform(self) -> None: ...

    def close(self) -> None: ...


class TransferSession:
    """Blocking HTTP transfers over one libcurl easy handle.

    A session owns its handle for its whole lifetime and runs one transfer at
    a time; it is not safe to share between threads. Every ``send`` returns a
    fresh CurlReply. Transfer failures never raise: they are reported through
    ``CurlReply.error``.
    """

    def __init__(
        self,
        handle: CurlHandleProtocol | None = None,
        options: TransferOptions | None = None,
    ) -> None:
        self._handle: CurlHandleProtocol | None = handle if handle is not None else pycurl.Curl()
        self._header_lines: list[str] = []
        self._reply: CurlReply | None = None
        self._verbosity = 0
        self.options = options or TransferOptions()
        try:
            self._handle.setopt(pycurl.WRITEFUNCTION, self._on_body_chunk)
            self._handle.setopt(pycurl.HEADERFUNCTION, self._on_header_chunk)
            self.configure(self.options)
        except Exception:
            self.close()
            raise

    def __enter__(self) -> "TransferSession":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    @property
    def handle(self) -> CurlHandleProtocol:
        if self._handle is None:
            raise SessionClosedError("Transfer session is closed")
        return self._handle

    @property
    def closed(self) -> bool:
        return self._handle is None

    @property
    def header_lines(self) -> tuple[str, ...]:
        """Header lines handed to libcurl by the most recent ``send``."""
        return tuple(self._header_lines)

    def close(self) -> None:
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        self._header_lines = []
        handle.close()

    def configure(self, options: TransferOptions) -> None:
        handle = self.handle
        options.apply(handle)
        self.options = options
        self.set_verbosity_level(options.verbosity)

    def send(self, request: TransferRequest, body: bytes = b"") -> CurlReply:
        """Run one blocking transfer and return its reply.

        Args:
            request: URL and headers of the request
            body: Request payload; empty means no payload (GET)

        Returns:
            A finished CurlReply holding either a status code or an error.
        """
        handle = self.handle
        reply = CurlReply(request.url)

        self._header_lines = serialize_headers(request.headers)
        handle.setopt(pycurl.URL, request.url)
        if body:
            payload = bytes(body)
            self._header_lines.append(content_length_line(payload))
            handle.setopt(pycurl.POSTFIELDS, payload)
        else:
            handle.setopt(pycurl.HTTPGET, 1)
        if self._header_lines:
            handle.setopt(pycurl.HTTPHEADER, encode_header_lines(self._header_lines))
        else:
            # pycurl ignores an empty HTTPHEADER list
            handle.unsetopt(pycurl.HTTPHEADER)

        logger.debug(
            "Sending %s (%d header lines, %d body bytes)",
            request.url,
            len(self._header_lines),
            len(body),
        )
        self._reply = reply
        try:
            handle.perform()
        except pycurl.error as exc:
            error = from_pycurl_error(exc)
            logger.info("Transfer to %s failed: %s", request.url, error)
            reply.finish_failure(error)
        else:
            status = int(handle.getinfo(pycurl.RESPONSE_CODE))
            reply.load_headers()
            logger.debug("Transfer to %s completed with status %d", request.url, status)
            reply.finish_success(status)
        finally:
            self._reply = None
        return reply

    def set_certificate(
        self,
        path: str | os.PathLike[str],
        fmt: CertificateFormat | str = CertificateFormat.PEM,
    ) -> None:
        handle = self.handle
        handle.setopt(pycurl.SSLCERTTYPE, CertificateFormat.parse(fmt).value)
        handle.setopt(pycurl.SSLCERT, os.fspath(path))

    def set_ssl_key(self, path: str | os.PathLike[str], algorithm: str = "rsa") -> None:
        # libcurl detects the key algorithm from the file itself
        self.handle.setopt(pycurl.SSLKEY, os.fspath(path))

    def set_verbosity_level(self, level: int) -> None:
        """Route libcurl's debug output to this module's logger.

        Level 0 disables it, 1 logs informational text, 2 adds header
        traffic and 3 or more adds body and TLS data.
        """
        handle = self.handle
        self._verbosity = max(int(level), 0)
        if self._verbosity == 0:
            handle.setopt(pycurl.VERBOSE, 0)
            return
        handle.setopt(pycurl.DEBUGFUNCTION, self._on_debug)
        handle.setopt(pycurl.VERBOSE, 1)

    def _active_reply(self) -> CurlReply:
        if self._reply is None:
            raise RuntimeError("No transfer in progress")
        return self._reply

    def _on_body_chunk(self, chunk: bytes) -> int:
        return self._active_reply().on_body_chunk(chunk)

    def _on_header_chunk(self, chunk: bytes) -> int:
        return self._active_reply().on_header_chunk(chunk)

    def _on_debug(self, info_type: int, data: bytes) -> None:
        label, threshold = _DEBUG_RECORDS.get(info_type, ("?", 3))
        if self._verbosity < threshold:
            return
        text = data.decode(HEADER_ENCODING, errors="replace").rstrip("\r\n")
        logger.debug("%s %s", label, text)


def send(request: TransferRequest, body: bytes = b"", options: TransferOptions | None = None) -> CurlReply:
    """Run one transfer on a throwaway session."""
    with TransferSession(options=options) as session:
        return session.send(request, body)

