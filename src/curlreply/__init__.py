from .error_mapping import ERROR_KINDS, classify, map_transfer_error
from .errors import (
    ConfigError,
    CurlReplyError,
    ErrorKind,
    RequestError,
    SessionClosedError,
    TransferError,
    TransferFailedError,
)
from .headers import parse_headers, serialize_headers
from .log import configure_logging, get_logger
from .models import CertificateFormat, TransferRequest
from .options import TransferOptions
from .reply import CurlReply
from .session import CurlHandleProtocol, TransferSession, send

__version__ = "0.1.0"

__all__ = [
    "CurlReplyError",
    "ConfigError",
    "RequestError",
    "SessionClosedError",
    "TransferFailedError",
    "ErrorKind",
    "TransferError",
    "ERROR_KINDS",
    "classify",
    "map_transfer_error",
    "parse_headers",
    "serialize_headers",
    "configure_logging",
    "get_logger",
    "CertificateFormat",
    "TransferRequest",
    "TransferOptions",
    "CurlReply",
    "CurlHandleProtocol",
    "TransferSession",
    "send",
]
