"""Reduce URL-like inputs (strings, URL objects, property bags) to one URI string."""

from __future__ import annotations

from collections.abc import Mapping, Sequence, Set
from dataclasses import asdict, dataclass, is_dataclass
import json
import logging
import math
from numbers import Number
from types import ModuleType
from typing import Any
from urllib.parse import ParseResult, SplitResult, quote, urljoin, urlsplit, urlunsplit

from pydantic import AnyUrl, BaseModel

from meetinguri.properties import UrlPropertyBag, load_url_properties, resolve_properties
from meetinguri.scheme import fix_uri_scheme
from meetinguri.standard import UriRecord, parse_standard_uri_string, render_uri

logger = logging.getLogger("meetinguri.stringify")

# Characters encodeURIComponent leaves untouched besides alphanumerics.
_URI_COMPONENT_SAFE = "-_.!~*'()"

# Printable ASCII a browser leaves as-is when resolving a relative path;
# space, '"', '<', '>', '`', '{', '}' and non-ASCII get percent-encoded.
_RELATIVE_REF_SAFE = "!#$%&'()*+,/:;=?@[\\]^|~"

_DEFAULT_PORTS = {"http": 80, "https": 443}


class URIJoinError(ValueError):
    """Raised when a room cannot be resolved against a server URL."""


@dataclass(frozen=True, slots=True)
class EncodedParam:
    """Outcome of encoding one fragment parameter: a value or a diagnostic."""

    key: str
    encoded: str | None = None
    error: str | None = None


def _replace_non_finite(value: Any, active: frozenset[int] = frozenset()) -> Any:
    """Map NaN and infinities to ``None``, which JSON renders as ``null``."""

    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (dict, list, tuple)):
        if id(value) in active:
            # Left in place so json.dumps reports the circular reference.
            return value
        active = active | {id(value)}
        if isinstance(value, dict):
            return {key: _replace_non_finite(item, active) for key, item in value.items()}
        return [_replace_non_finite(item, active) for item in value]
    return value


def _encode_url_param(key: str, value: Any) -> EncodedParam:
    try:
        serialized = json.dumps(
            _replace_non_finite(value),
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
        # Lone surrogates cannot be UTF-8 encoded; quote raises UnicodeEncodeError.
        encoded = quote(serialized, safe=_URI_COMPONENT_SAFE)
    except (TypeError, ValueError) as exc:
        return EncodedParam(key=key, error=str(exc))
    return EncodedParam(key=key, encoded=f"{key}={encoded}")


def _object_to_url_params(namespace: str, values: Mapping[str, Any] | None) -> list[str]:
    if not values:
        return []

    results = [_encode_url_param(str(key), value) for key, value in values.items()]
    for result in results:
        if result.error is not None:
            logger.warning(
                "fragment_param_skipped namespace=%s key=%s error=%s",
                namespace,
                result.key,
                result.error,
            )
    return [result.encoded for result in results if result.encoded is not None]


def _build_joined_netloc(parts: SplitResult) -> str:
    host = parts.hostname or ""
    if ":" in host and not host.startswith("["):
        # Re-wrap IPv6 literals in brackets for proper URL formatting.
        host = f"[{host}]"

    port = parts.port
    if port is not None and port != _DEFAULT_PORTS.get(parts.scheme):
        return f"{host}:{port}"
    return host


def _join_server_url(server_url: str, room: str) -> str:
    # urljoin only resolves hierarchical schemes it knows about, so fix the
    # scheme first; the joined string is scheme-fixed again anyway.
    base = fix_uri_scheme(server_url)
    try:
        parts = urlsplit(base)
    except ValueError as exc:
        raise URIJoinError(f"Invalid server URL {server_url!r}") from exc
    if not parts.scheme or not parts.netloc:
        raise URIJoinError(f"Cannot resolve room {room!r} against server URL {server_url!r}")

    try:
        joined = urlsplit(urljoin(base, quote(room, safe=_RELATIVE_REF_SAFE)))
        netloc = _build_joined_netloc(joined)
    except ValueError as exc:
        raise URIJoinError(f"Invalid server URL {server_url!r}") from exc
    return urlunsplit((joined.scheme, netloc, joined.path or "/", joined.query, joined.fragment))


def url_object_to_string(properties: UrlPropertyBag | Mapping[str, Any]) -> str | None:
    """
    Build a URI string out of a property bag like the one embedding APIs accept.

    The URL comes either as ``url`` or split into ``serverURL`` and ``room``;
    ``domain``/``appLinkScheme``, ``roomName``, ``jwt`` and the
    ``config``/``interfaceConfig``/``devices`` overrides are then merged in.

    Raises:
        URIJoinError: when ``room`` cannot be resolved against ``serverURL``.
        URLPropertiesError: when ``properties`` does not validate.
    """

    resolved = resolve_properties(load_url_properties(properties))

    if resolved.server_url and resolved.base_room:
        base = _join_server_url(resolved.server_url, resolved.base_room)
    elif resolved.base_room:
        base = resolved.base_room
    else:
        base = resolved.url or ""

    url = parse_standard_uri_string(fix_uri_scheme(base))

    # protocol
    if not url.protocol and resolved.protocol:
        protocol = resolved.protocol
        # Tolerate a protocol given without its final ':'.
        if not protocol.endswith(":"):
            protocol += ":"
        url.protocol = protocol

    # authority & pathname
    pathname = url.pathname
    if not url.host and resolved.domain and resolved.app_link_scheme:
        # domain may carry a pathname denoting the tenant; the app link
        # scheme makes sure it is not taken for a pathname only.
        authority = parse_standard_uri_string(
            fix_uri_scheme(f"{resolved.app_link_scheme}//{resolved.domain}")
        )
        if authority.host:
            url.host = authority.host
            url.hostname = authority.hostname
            url.port = authority.port
        if pathname == "/" and authority.pathname != "/":
            pathname = authority.pathname

    # room
    room = resolved.room
    if room and (url.pathname.endswith("/") or not url.pathname.endswith(f"/{room}")):
        if not pathname.endswith("/"):
            pathname += "/"
        pathname += room
    url.pathname = pathname

    # query
    if resolved.jwt:
        search = url.search
        if "?jwt=" not in search and "&jwt=" not in search:
            if not search.startswith("?"):
                search = f"?{search}"
            if len(search) != 1:
                search += "&"
            search += f"jwt={resolved.jwt}"
            url.search = search

    # fragment
    hash_ = url.hash
    for namespace, values in resolved.overrides:
        params = _object_to_url_params(namespace, values)
        if not params:
            continue
        block = f"{namespace}." + f"&{namespace}.".join(params)
        if hash_:
            block = f"&{block}"
        else:
            hash_ = "#"
        hash_ += block
    url.hash = hash_

    return render_uri(url) or None


def to_url_string(obj: object) -> str | None:
    """
    Return the string form of something that is supposed to represent a URL.

    Strings are returned as-is, URL objects yield their absolute form and
    mappings or attribute objects are treated as property bags. Anything else
    has no URL representation.
    """

    if isinstance(obj, str):
        return str(obj)
    if isinstance(obj, UriRecord):
        return render_uri(obj)
    if isinstance(obj, (SplitResult, ParseResult)):
        return obj.geturl()
    if isinstance(obj, AnyUrl):
        return str(obj)
    if isinstance(obj, (UrlPropertyBag, Mapping)):
        return url_object_to_string(obj)
    if isinstance(obj, BaseModel):
        return url_object_to_string(obj.model_dump(by_alias=True))
    if is_dataclass(obj) and not isinstance(obj, type):
        return url_object_to_string(asdict(obj))
    if isinstance(obj, (Number, Sequence, Set, bytes, bytearray, ModuleType)) or callable(obj):
        return None
    if hasattr(obj, "__dict__"):
        return url_object_to_string(vars(obj))
    return None
