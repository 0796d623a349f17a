from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import pycurl

from .errors import ConfigError

ENV_PREFIX = "CURLREPLY_"
# libcurl's MAXREDIRS value for "no limit"
DEFAULT_MAX_REDIRECTS = -1

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class TransferOptions:
    """Engine settings that persist across every transfer of a session.

    Attributes:
        timeout: Whole-transfer timeout in seconds (None keeps libcurl's default)
        connect_timeout: Connection phase timeout in seconds
        follow_redirects: Let libcurl follow Location headers internally
        max_redirects: Redirect limit when following (None keeps libcurl's default)
        verify_peer: Verify the server certificate and host name
        user_agent: User-Agent sent when the request does not set one
        proxy: Proxy URL; an empty string forces direct connections, None
            leaves libcurl to read the proxy environment variables
        verbosity: libcurl debug output level, see TransferSession.set_verbosity_level
    """

    timeout: float | None = None
    connect_timeout: float | None = None
    follow_redirects: bool = False
    max_redirects: int | None = None
    verify_peer: bool = True
    user_agent: str | None = None
    proxy: str | None = None
    verbosity: int = 0

    def __post_init__(self) -> None:
        for name in ("timeout", "connect_timeout"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ConfigError(f"{name} must not be negative")
        if self.max_redirects is not None and self.max_redirects < -1:
            raise ConfigError("max_redirects must be -1 (unlimited) or greater")
        if self.verbosity < 0:
            raise ConfigError("verbosity must not be negative")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "TransferOptions":
        """Read options from ``CURLREPLY_*`` environment variables.

        Unset or empty variables keep the defaults.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for field_ in dataclasses.fields(cls):
            raw = env.get(ENV_PREFIX + field_.name.upper(), "").strip()
            if not raw:
                continue
            values[field_.name] = _coerce(field_.name, raw)
        return cls(**values)

    def replace(self, **changes: Any) -> "TransferOptions":
        return dataclasses.replace(self, **changes)

    def apply(self, handle: Any) -> None:
        """Write these options onto a libcurl handle.

        Unset (None) options are written back to libcurl's defaults, so a
        handle configured twice keeps nothing from the first configuration.
        """
        handle.setopt(pycurl.TIMEOUT_MS, _milliseconds(self.timeout))
        handle.setopt(pycurl.CONNECTTIMEOUT_MS, _milliseconds(self.connect_timeout))
        handle.setopt(pycurl.FOLLOWLOCATION, 1 if self.follow_redirects else 0)
        handle.setopt(pycurl.MAXREDIRS, DEFAULT_MAX_REDIRECTS if self.max_redirects is None else self.max_redirects)
        handle.setopt(pycurl.SSL_VERIFYPEER, 1 if self.verify_peer else 0)
        handle.setopt(pycurl.SSL_VERIFYHOST, 2 if self.verify_peer else 0)
        for option, value in ((pycurl.USERAGENT, self.user_agent), (pycurl.PROXY, self.proxy)):
            if value is None:
                handle.unsetopt(option)
            else:
                handle.setopt(option, value)


def _milliseconds(seconds: float | None) -> int:
    # 0 selects the libcurl default
    return 0 if seconds is None else int(seconds * 1000)


def _coerce(name: str, raw: str) -> Any:
    if name in ("timeout", "connect_timeout"):
        try:
            return float(raw)
        except ValueError:
            raise ConfigError(f"{ENV_PREFIX}{name.upper()} must be a number, got {raw!r}") from None
    if name in ("max_redirects", "verbosity"):
        try:
            return int(raw)
        except ValueError:
            raise ConfigError(f"{ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}") from None
    if name in ("follow_redirects", "verify_peer"):
        lowered = raw.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigError(f"{ENV_PREFIX}{name.upper()} must be a boolean, got {raw!r}")
    return raw
