from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from .errors import ConfigError, RequestError
from .headers import HEADER_ENCODING, format_header_line


@dataclass(frozen=True)
class TransferRequest:
    """Descriptor of one request.

    Attributes:
        url: Target URL, passed to libcurl as-is
        headers: Request headers; iteration order is the wire order
    """

    url: str
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.url:
            raise RequestError("Request URL must not be empty")
        for name, value in self.headers.items():
            try:
                format_header_line(name, value).encode(HEADER_ENCODING)
            except UnicodeEncodeError:
                raise RequestError(f"Header {name!r} is not representable in {HEADER_ENCODING}") from None
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @classmethod
    def from_pairs(
        cls,
        url: str,
        pairs: Iterable[tuple[str, str] | str],
    ) -> "TransferRequest":
        """Build a request from ``(name, value)`` tuples or ``"Name: value"`` strings."""
        headers: dict[str, str] = {}
        for pair in pairs:
            if isinstance(pair, str):
                name, separator, value = pair.partition(":")
                if not separator or not name.strip():
                    raise RequestError(f"Invalid header line: {pair!r}")
                headers[name.strip()] = value.strip()
            else:
                name, value = pair
                headers[name] = value
        return cls(url=url, headers=headers)


class CertificateFormat(str, Enum):
    PEM = "PEM"
    DER = "DER"

    @classmethod
    def parse(cls, value: "str | CertificateFormat") -> "CertificateFormat":
        if isinstance(value, CertificateFormat):
            return value
        try:
            return cls(value.upper())
        except ValueError:
            raise ConfigError(f"Unsupported certificate format: {value!r}") from None
