"""URL and hostname validation.

``is_url`` checks a candidate string against ``ValidatorSettings``. It works on
the raw string (scheme, auth, host, port) rather than going through
``urlparse``, which accepts far more than a scrapable URL.
"""

from __future__ import annotations

import ipaddress
import re
from typing import Any, Iterable, Mapping, Union

from ..models.options import HostMatcher, ValidatorSettings


_FORBIDDEN_CHARS = re.compile(r"[\s<>]")
_WRAPPED_IPV6 = re.compile(r"\[([^\]]+)\](?::([0-9]+))?")
_TLD = re.compile(
    r"([a-z\u00a1-\u00a8\u00aa-\ud7ff\uf900-\ufdcf\ufdf0-\uffef]{2,}|xn[a-z0-9-]{2,})",
    re.IGNORECASE,
)
_LABEL = re.compile(r"[a-z_\u00a1-\uffff0-9-]+", re.IGNORECASE)
_FULL_WIDTH = re.compile(r"[\uff01-\uff5e]")
_DIGITS = re.compile(r"[0-9]+")

SettingsLike = Union[ValidatorSettings, Mapping[str, Any], None]


def as_validator_settings(settings: SettingsLike) -> ValidatorSettings:
    """Coerce a mapping (any subset of keys) into ``ValidatorSettings``."""
    if isinstance(settings, ValidatorSettings):
        return settings
    return ValidatorSettings.model_validate(dict(settings or {}))


def is_fqdn(
    value: str,
    *,
    require_tld: bool = True,
    allow_underscores: bool = False,
    allow_trailing_dot: bool = False,
) -> bool:
    if allow_trailing_dot and value.endswith("."):
        value = value[:-1]

    parts = value.split(".")
    tld = parts[-1]

    if require_tld:
        if len(parts) < 2:
            return False
        if not _TLD.fullmatch(tld):
            return False

    if _DIGITS.fullmatch(tld):
        return False

    for part in parts:
        if len(part) > 63:
            return False
        if not _LABEL.fullmatch(part):
            return False
        if _FULL_WIDTH.search(part):
            return False
        if part.startswith("-") or part.endswith("-"):
            return False
        if not allow_underscores and "_" in part:
            return False
    return True


def _is_ip(value: str, version: int | None = None) -> bool:
    try:
        addr = ipaddress.ip_address(value)
    except ValueError:
        return False
    return version is None or addr.version == version


def _host_matches(host: str, matchers: Iterable[HostMatcher]) -> bool:
    for matcher in matchers:
        if isinstance(matcher, str):
            if host == matcher:
                return True
        elif matcher.search(host):
            return True
    return False


def is_url(url: str, settings: SettingsLike = None) -> bool:
    opts = as_validator_settings(settings)

    if not url or _FORBIDDEN_CHARS.search(url):
        return False
    if url.startswith("mailto:"):
        return False
    if opts.validate_length and len(url) > opts.max_allowed_length:
        return False
    if not opts.allow_fragments and "#" in url:
        return False
    if not opts.allow_query_components and ("?" in url or "&" in url):
        return False

    url = url.split("#", 1)[0]
    url = url.split("?", 1)[0]

    split = url.split("://")
    if len(split) > 1:
        protocol = split.pop(0).lower()
        if opts.require_valid_protocol and protocol not in opts.protocols:
            return False
    elif opts.require_protocol:
        return False
    elif url.startswith("//"):
        if not opts.allow_protocol_relative_urls:
            return False
        split[0] = url[2:]
    url = "://".join(split)

    if url == "":
        return False

    authority = url.split("/", 1)[0]
    if authority == "" and not opts.require_host:
        return True

    split = authority.split("@")
    if len(split) > 1:
        if opts.disallow_auth:
            return False
        if split[0] == "":
            return False
        auth = split.pop(0)
        credentials = auth.split(":")
        if len(credentials) > 2:
            return False
        if credentials[0] == "" and len(credentials) == 2 and credentials[1] == "":
            return False
    hostname = "@".join(split)

    ipv6 = None
    port_str = None
    wrapped = _WRAPPED_IPV6.fullmatch(hostname)
    if wrapped:
        host = ""
        ipv6 = wrapped.group(1)
        port_str = wrapped.group(2)
    else:
        host, sep, rest = hostname.partition(":")
        if sep:
            port_str = rest

    if port_str:
        if not _DIGITS.fullmatch(port_str):
            return False
        port = int(port_str)
        if port <= 0 or port > 65535:
            return False
    elif opts.require_port:
        return False

    if opts.host_whitelist is not None:
        return _host_matches(host, opts.host_whitelist)

    if host == "" and not opts.require_host:
        return True

    if not (
        _is_ip(host, 4)
        or is_fqdn(
            host,
            require_tld=opts.require_tld,
            allow_underscores=opts.allow_underscores,
            allow_trailing_dot=opts.allow_trailing_dot,
        )
        or (ipv6 is not None and _is_ip(ipv6, 6))
    ):
        return False

    host = host or ipv6 or ""
    if opts.host_blacklist and _host_matches(host, opts.host_blacklist):
        return False
    return True
