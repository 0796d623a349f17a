"""Translate libcurl result codes into the domain error taxonomy."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

import pycurl

from .errors import ErrorKind, TransferError

ERROR_KINDS: Mapping[int, ErrorKind] = MappingProxyType(
    {
        pycurl.E_UNSUPPORTED_PROTOCOL: ErrorKind.PROTOCOL_UNSUPPORTED,
        pycurl.E_HTTP_POST_ERROR: ErrorKind.PROTOCOL_FAILURE,
        pycurl.E_HTTP_RETURNED_ERROR: ErrorKind.PROTOCOL_FAILURE,
        pycurl.E_OPERATION_TIMEDOUT: ErrorKind.TIMEOUT,
        pycurl.E_COULDNT_CONNECT: ErrorKind.CONNECTION_REFUSED,
        pycurl.E_SSL_CONNECT_ERROR: ErrorKind.TLS_HANDSHAKE_FAILED,
        pycurl.E_PEER_FAILED_VERIFICATION: ErrorKind.TLS_HANDSHAKE_FAILED,
        pycurl.E_SSL_CERTPROBLEM: ErrorKind.TLS_HANDSHAKE_FAILED,
        pycurl.E_SSL_CIPHER: ErrorKind.TLS_HANDSHAKE_FAILED,
        pycurl.E_SSL_CACERT_BADFILE: ErrorKind.TLS_HANDSHAKE_FAILED,
        pycurl.E_SSL_ENGINE_NOTFOUND: ErrorKind.TLS_HANDSHAKE_FAILED,
        pycurl.E_TOO_MANY_REDIRECTS: ErrorKind.TOO_MANY_REDIRECTS,
        pycurl.E_COULDNT_RESOLVE_HOST: ErrorKind.HOST_NOT_FOUND,
        pycurl.E_COULDNT_RESOLVE_PROXY: ErrorKind.PROXY_NOT_FOUND,
        pycurl.E_GOT_NOTHING: ErrorKind.CONTENT_MALFORMED,
        pycurl.E_PARTIAL_FILE: ErrorKind.CONTENT_MALFORMED,
        pycurl.E_READ_ERROR: ErrorKind.CONTENT_MALFORMED,
        pycurl.E_FILE_COULDNT_READ_FILE: ErrorKind.CONTENT_MALFORMED,
        pycurl.E_BAD_CONTENT_ENCODING: ErrorKind.CONTENT_MALFORMED,
        pycurl.E_REMOTE_ACCESS_DENIED: ErrorKind.CONTENT_ACCESS_DENIED,
        pycurl.E_LOGIN_DENIED: ErrorKind.CONTENT_ACCESS_DENIED,
        pycurl.E_SEND_ERROR: ErrorKind.UNKNOWN_NETWORK_ERROR,
        pycurl.E_RECV_ERROR: ErrorKind.UNKNOWN_NETWORK_ERROR,
    }
)


def classify(code: int) -> ErrorKind:
    return ERROR_KINDS.get(code, ErrorKind.UNKNOWN_NETWORK_ERROR)


def map_transfer_error(code: int, message: str = "") -> TransferError:
    """Build the TransferError for a failed transfer.

    Args:
        code: libcurl result code
        message: libcurl's message for the failure, passed through unchanged

    Returns:
        TransferError with a non-empty message; a generic one is composed
        only when libcurl supplied none.
    """
    kind = classify(code)
    if not message:
        message = f"{kind.description} (curl error {code})"
    return TransferError(kind=kind, message=message, code=code)


def from_pycurl_error(exc: pycurl.error) -> TransferError:
    args = exc.args
    code = int(args[0]) if args else -1
    message = str(args[1]) if len(args) > 1 else ""
    return map_transfer_error(code, message)
