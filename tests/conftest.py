from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any, cast

import pytest

from curlreply.session import CurlHandleProtocol, TransferSession

from fakes import FakeCurl


@pytest.fixture()
def fake_curl() -> FakeCurl:
    return FakeCurl()


@pytest.fixture()
def session(fake_curl: FakeCurl) -> TransferSession:
    return TransferSession(handle=cast(CurlHandleProtocol, fake_curl))


@pytest.fixture()
def session_factory(fake_curl: FakeCurl) -> Callable[..., TransferSession]:
    def factory(**kwargs: Any) -> TransferSession:
        return TransferSession(handle=cast(CurlHandleProtocol, fake_curl), **kwargs)

    return factory


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo configure_logging so caplog keeps seeing curlreply records."""
    yield
    base = logging.getLogger("curlreply")
    for handler in list(base.handlers):
        base.removeHandler(handler)
    base.setLevel(logging.NOTSET)
    base.propagate = True
