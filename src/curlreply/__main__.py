from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import BinaryIO

from .errors import CurlReplyError
from .log import configure_logging
from .models import CertificateFormat, TransferRequest
from .options import TransferOptions
from .reply import CurlReply
from .session import TransferSession

EXIT_HTTP_ERROR = 22


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="curlreply", description="Perform one blocking HTTP transfer with libcurl.")
    parser.add_argument("url", help="Target URL")
    parser.add_argument("-H", "--header", action="append", default=[], help="Request header, 'Name: value'")
    body_group = parser.add_mutually_exclusive_group()
    body_group.add_argument("-d", "--data", help="Request body (sent as POST)")
    body_group.add_argument("--data-file", type=Path, help="Read the request body from a file")
    parser.add_argument("--cert", type=Path, help="Client certificate file")
    parser.add_argument("--cert-type", default="PEM", choices=[fmt.value for fmt in CertificateFormat])
    parser.add_argument("--key", type=Path, help="Client private key file")
    parser.add_argument("--timeout", type=float, help="Whole transfer timeout in seconds")
    parser.add_argument("--connect-timeout", type=float, help="Connect timeout in seconds")
    parser.add_argument("-L", "--location", action="store_true", help="Follow redirects")
    parser.add_argument("--max-redirs", type=int, help="Maximum number of redirects to follow")
    parser.add_argument("-k", "--insecure", action="store_true", help="Skip TLS peer verification")
    parser.add_argument("-A", "--user-agent", help="User-Agent header value")
    parser.add_argument("-x", "--proxy", help="Proxy URL; pass an empty string to connect directly")
    parser.add_argument("-i", "--include", action="store_true", help="Print status and headers before the body")
    parser.add_argument("-f", "--fail", action="store_true", help="Exit with 22 on HTTP status >= 400")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log libcurl activity (repeat for more)")

    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)

    try:
        request = TransferRequest.from_pairs(args.url, args.header)
        body = _read_body(args)
        options = _build_options(args)
        with TransferSession(options=options) as session:
            if args.cert is not None:
                session.set_certificate(args.cert, args.cert_type)
            if args.key is not None:
                session.set_ssl_key(args.key)
            reply = session.send(request, body)
    except CurlReplyError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if reply.error is not None:
        print(f"error: {reply.error}", file=sys.stderr)
        return 1

    out = sys.stdout.buffer
    if args.include:
        _write_head(reply, out)
    out.write(reply.readall())
    out.flush()
    if args.fail and (reply.status_code or 0) >= 400:
        return EXIT_HTTP_ERROR
    return 0


def _read_body(args: argparse.Namespace) -> bytes:
    if args.data_file is not None:
        return args.data_file.read_bytes()
    if args.data is not None:
        return args.data.encode("utf-8")
    return b""


def _build_options(args: argparse.Namespace) -> TransferOptions:
    options = TransferOptions.from_env()
    changes: dict[str, object] = {}
    if args.timeout is not None:
        changes["timeout"] = args.timeout
    if args.connect_timeout is not None:
        changes["connect_timeout"] = args.connect_timeout
    if args.location:
        changes["follow_redirects"] = True
    if args.max_redirs is not None:
        changes["max_redirects"] = args.max_redirs
    if args.insecure:
        changes["verify_peer"] = False
    if args.user_agent is not None:
        changes["user_agent"] = args.user_agent
    if args.proxy is not None:
        changes["proxy"] = args.proxy
    if args.verbose:
        changes["verbosity"] = args.verbose
    return options.replace(**changes) if changes else options


def _write_head(reply: CurlReply, out: BinaryIO) -> None:
    blocks = reply.header_blocks
    if blocks:
        out.write(blocks[-1])
        return
    out.write(f"HTTP {reply.status_code}\r\n".encode("ascii"))
    for name, value in reply.headers.items():
        out.write(f"{name}: {value}\r\n".encode("iso-8859-1"))
    out.write(b"\r\n")


if __name__ == "__main__":
    raise SystemExit(main())
