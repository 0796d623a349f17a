from __future__ import annotations

import pytest

from curlreply.errors import ErrorKind, TransferError, TransferFailedError
from curlreply.reply import CurlReply


def _filled(body: bytes, raw_headers: bytes = b"", status: int = 200) -> CurlReply:
    reply = CurlReply("http://example.test/")
    reply.on_header_chunk(raw_headers)
    reply.on_body_chunk(body)
    reply.load_headers()
    reply.finish_success(status)
    return reply


class TestStreamRead:
    def test_reads_in_pieces(self) -> None:
        reply = _filled(b"abcdefgh")
        assert reply.read(3) == b"abc"
        assert reply.bytes_available() == 5
        assert reply.read(3) == b"def"
        assert reply.read(3) == b"gh"
        assert reply.read(3) == b""

    def test_exhausted_read_is_stable(self) -> None:
        reply = _filled(b"xy")
        assert reply.read() == b"xy"
        for _ in range(3):
            assert reply.read(10) == b""
            assert reply.bytes_available() == 0

    def test_readinto(self) -> None:
        reply = _filled(b"hello")
        buffer = bytearray(3)
        assert reply.readinto(buffer) == 3
        assert bytes(buffer) == b"hel"
        assert reply.readall() == b"lo"
        assert reply.readinto(buffer) == 0

    def test_zero_length_read(self) -> None:
        reply = _filled(b"abc")
        assert reply.read(0) == b""
        assert reply.read() == b"abc"

    def test_stream_flags(self) -> None:
        reply = _filled(b"")
        assert reply.readable()
        assert not reply.seekable()

    def test_closed_reply_rejects_reads(self) -> None:
        reply = _filled(b"abc")
        reply.close()
        with pytest.raises(ValueError):
            reply.read()

    def test_chunks_accumulate_in_order(self) -> None:
        reply = CurlReply()
        assert reply.on_body_chunk(b"ab") == 2
        assert reply.on_body_chunk(b"") == 0
        assert reply.on_body_chunk(b"cd") == 2
        reply.finish_success(200)
        assert reply.read() == b"abcd"


class TestOutcome:
    def test_success_has_status_only(self) -> None:
        reply = _filled(b"", status=404)
        assert reply.status_code == 404
        assert reply.error is None
        assert not reply.failed

    def test_failure_has_error_only(self) -> None:
        reply = CurlReply()
        error = TransferError(kind=ErrorKind.TIMEOUT, message="timed out", code=28)
        reply.finish_failure(error)
        assert reply.status_code is None
        assert reply.error is error
        assert reply.failed

    def test_cannot_finish_twice(self) -> None:
        reply = _filled(b"")
        with pytest.raises(RuntimeError):
            reply.finish_failure(TransferError(kind=ErrorKind.TIMEOUT, message="late", code=28))
        assert reply.error is None

    def test_raise_for_error(self) -> None:
        assert _filled(b"").raise_for_error().status_code == 200
        reply = CurlReply("http://example.test/")
        reply.finish_failure(TransferError(kind=ErrorKind.HOST_NOT_FOUND, message="nope", code=6))
        with pytest.raises(TransferFailedError) as excinfo:
            reply.raise_for_error()
        assert excinfo.value.kind is ErrorKind.HOST_NOT_FOUND

    def test_reset_clears_everything(self) -> None:
        reply = _filled(b"abc", b"HTTP/1.1 200 OK\r\nX-A: 1\r\n\r\n")
        reply.read(1)
        reply.reset()
        assert reply.read() == b""
        assert reply.headers == {}
        assert reply.raw_headers == b""
        assert reply.status_code is None
        assert reply.error is None
        assert not reply.done()
        reply.on_body_chunk(b"new")
        reply.finish_success(201)
        assert reply.read() == b"new"
        assert reply.status_code == 201


class TestHeaders:
    RAW = (
        b"HTTP/1.1 302 Found\r\nLocation: /next\r\nX-Hop: first\r\n\r\n"
        b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\nX-Hop: final\r\n\r\n"
    )

    def test_mapping_and_lookup(self) -> None:
        reply = _filled(b"{}", self.RAW)
        assert reply.headers["Content-Type"] == "application/json"
        assert reply.header("X-Hop") == "final"
        assert reply.header("content-type") == "application/json"
        assert reply.header("X-Missing") is None
        assert reply.header("X-Missing", "fallback") == "fallback"

    def test_headers_are_read_only(self) -> None:
        reply = _filled(b"", self.RAW)
        with pytest.raises(TypeError):
            reply.headers["X-New"] = "1"  # type: ignore[index]

    def test_history_is_available(self) -> None:
        reply = _filled(b"", self.RAW)
        assert ("X-Hop", "first") in reply.header_pairs
        assert ("X-Hop", "final") in reply.header_pairs
        assert len(reply.header_blocks) == 2
        assert reply.raw_headers == self.RAW


class TestFutureContract:
    def test_done_and_result(self) -> None:
        reply = CurlReply()
        assert not reply.done()
        with pytest.raises(RuntimeError):
            reply.result()
        reply.finish_success(200)
        assert reply.done()
        assert reply.finished
        assert reply.result() is reply

    def test_callback_runs_on_completion(self) -> None:
        seen: list[CurlReply] = []
        reply = CurlReply()
        reply.add_done_callback(seen.append)
        assert seen == []
        reply.finish_success(200)
        assert seen == [reply]

    def test_callback_runs_immediately_when_finished(self) -> None:
        seen: list[CurlReply] = []
        reply = _filled(b"")
        reply.add_done_callback(seen.append)
        assert seen == [reply]

    @pytest.mark.anyio
    async def test_await_returns_reply(self) -> None:
        reply = _filled(b"body")
        result = await reply
        assert result is reply
        assert result.read() == b"body"
