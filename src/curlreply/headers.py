"""Header codec for the libcurl wire format.

Outgoing headers are handed to libcurl as ``"Name: value"`` lines (libcurl
appends the CRLF). Incoming headers arrive through the header callback one
raw line at a time and are accumulated verbatim, so the buffer parsed here is
``"Name: value\\r\\n"`` lines, possibly spanning several response blocks when
libcurl follows redirects internally. Blocks are separated by blank lines and
each starts with a status line.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

CONTENT_LENGTH = "Content-Length"
HEADER_ENCODING = "iso-8859-1"


def format_header_line(name: str, value: str) -> str:
    return f"{name}: {value}"


def serialize_headers(headers: Mapping[str, str]) -> list[str]:
    """Serialize request headers into wire lines, preserving mapping order.

    Content-Length is always dropped: the transfer computes it from the
    actual body instead.
    """
    return [
        format_header_line(name, value)
        for name, value in headers.items()
        if name.lower() != CONTENT_LENGTH.lower()
    ]


def content_length_line(body: bytes) -> str:
    return format_header_line(CONTENT_LENGTH, str(len(body)))


def encode_header_lines(lines: list[str]) -> list[bytes]:
    """Encode wire lines as ISO-8859-1, the charset the parser decodes with."""
    return [line.encode(HEADER_ENCODING) for line in lines]


def iter_header_pairs(raw: bytes) -> Iterator[tuple[str, str]]:
    """Yield ``(name, value)`` for every header line in ``raw``.

    Lines without a colon, or with the colon in the first position, are
    skipped. This discards status lines and the blank separators between
    redirect hops.
    """
    for line in raw.split(b"\n"):
        separator = line.find(b":")
        if separator <= 0:
            continue
        name = line[:separator]
        value = line[separator + 1 :]
        if value.startswith(b" "):
            value = value[1:]
        if value.endswith(b"\r"):
            value = value[:-1]
        yield name.decode(HEADER_ENCODING), value.decode(HEADER_ENCODING)


def parse_headers(raw: bytes) -> dict[str, str]:
    """Parse a raw header buffer into a mapping.

    The last value seen for an exact name wins, so when several redirect hops
    are present the final response's values are the visible ones.
    """
    headers: dict[str, str] = {}
    for name, value in iter_header_pairs(raw):
        headers[name] = value
    return headers


def split_header_blocks(raw: bytes) -> list[bytes]:
    """Split a raw header buffer into one block per response hop."""
    blocks: list[bytes] = []
    current: list[bytes] = []
    for line in raw.splitlines(keepends=True):
        if line.startswith(b"HTTP/") and current:
            blocks.append(b"".join(current))
            current = []
        current.append(line)
    if current:
        blocks.append(b"".join(current))
    return [block for block in blocks if block.strip()]
