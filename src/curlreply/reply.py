"""Reply object produced by one transfer.

libcurl pushes body and header bytes into the reply through callbacks while
``perform`` blocks. Once the transfer returns, the reply is read like a
forward-only stream. It also behaves as an already-completed future
(``done``/``result``/``add_done_callback``/``await``) so code written against
an asynchronous reply can consume it directly.
"""

from __future__ import annotations

import io
from collections.abc import Callable, Generator, Mapping
from types import MappingProxyType
from typing import Any

from .errors import TransferError, TransferFailedError
from .headers import iter_header_pairs, parse_headers, split_header_blocks

DoneCallback = Callable[["CurlReply"], object]


class CurlReply(io.RawIOBase):
    def __init__(self, url: str = "") -> None:
        super().__init__()
        self.url = url
        self._cursor = 0
        self._body = bytearray()
        self._raw_headers = bytearray()
        self._headers: dict[str, str] = {}
        self._status: int | None = None
        self._error: TransferError | None = None
        self._finished = False
        self._callbacks: list[DoneCallback] = []

    def __repr__(self) -> str:
        if self._error is not None:
            outcome = f"error={self._error.kind.value}"
        elif self._status is not None:
            outcome = f"status={self._status}"
        else:
            outcome = "pending"
        return f"<CurlReply {self.url!r} {outcome}>"

    # transfer callbacks

    def on_body_chunk(self, chunk: bytes) -> int:
        self._body += chunk
        return len(chunk)

    def on_header_chunk(self, chunk: bytes) -> int:
        self._raw_headers += chunk
        return len(chunk)

    # completion

    def load_headers(self) -> None:
        self._headers = parse_headers(bytes(self._raw_headers))

    def finish_success(self, status: int) -> None:
        self._check_not_finished()
        self._status = int(status)
        self._error = None
        self._mark_finished()

    def finish_failure(self, error: TransferError) -> None:
        self._check_not_finished()
        self._error = error
        self._status = None
        self._mark_finished()

    def reset(self) -> None:
        """Clear all transfer state so the reply can be filled again."""
        self._cursor = 0
        self._body.clear()
        self._raw_headers.clear()
        self._headers = {}
        self._status = None
        self._error = None
        self._finished = False
        self._callbacks.clear()

    def _check_not_finished(self) -> None:
        if self._finished:
            raise RuntimeError("reply already finished; call reset() before reuse")

    def _mark_finished(self) -> None:
        self._finished = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)

    # stream interface

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def read(self, size: int | None = -1) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed reply")
        end = len(self._body)
        if size is not None and size >= 0:
            end = min(self._cursor + size, end)
        if self._cursor >= end:
            return b""
        data = bytes(self._body[self._cursor : end])
        self._cursor = end
        return data

    def readall(self) -> bytes:
        return self.read(-1)

    def readinto(self, buffer: Any) -> int:
        view = memoryview(buffer).cast("B")
        data = self.read(len(view))
        view[: len(data)] = data
        return len(data)

    def bytes_available(self) -> int:
        return len(self._body) - self._cursor

    # outcome accessors

    @property
    def status_code(self) -> int | None:
        return self._status

    @property
    def error(self) -> TransferError | None:
        return self._error

    @property
    def failed(self) -> bool:
        return self._error is not None

    @property
    def headers(self) -> Mapping[str, str]:
        return MappingProxyType(self._headers)

    def header(self, name: str, default: str | None = None) -> str | None:
        if name in self._headers:
            return self._headers[name]
        lowered = name.lower()
        for key, value in reversed(self._headers.items()):
            if key.lower() == lowered:
                return value
        return default

    @property
    def header_pairs(self) -> list[tuple[str, str]]:
        """Every header line received, including earlier redirect hops."""
        return list(iter_header_pairs(bytes(self._raw_headers)))

    @property
    def header_blocks(self) -> list[bytes]:
        return split_header_blocks(bytes(self._raw_headers))

    @property
    def raw_headers(self) -> bytes:
        return bytes(self._raw_headers)

    def raise_for_error(self) -> CurlReply:
        if self._error is not None:
            raise TransferFailedError(self._error, self.url)
        return self

    # future-like interface

    @property
    def finished(self) -> bool:
        return self._finished

    def done(self) -> bool:
        return self._finished

    def result(self) -> CurlReply:
        if not self._finished:
            raise RuntimeError("transfer has not completed")
        return self

    def add_done_callback(self, callback: DoneCallback) -> None:
        if self._finished:
            callback(self)
        else:
            self._callbacks.append(callback)

    def __await__(self) -> Generator[Any, None, CurlReply]:
        return self.result()
        yield
