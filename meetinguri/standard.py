"""Structural parsing of URI strings into browser Location-like records."""

from __future__ import annotations

from dataclasses import dataclass

from meetinguri.scheme import scan_scheme

_AUTHORITY_END_CHARS = "/?#"
_PATH_END_CHARS = "?#"


@dataclass(slots=True)
class UriRecord:
    """The well-known properties of a browser ``URL``/``Location``."""

    protocol: str | None = None
    host: str | None = None
    hostname: str | None = None
    port: str | None = None
    pathname: str = "/"
    search: str = ""
    hash: str = ""

    @property
    def href(self) -> str:
        return render_uri(self)

    def __str__(self) -> str:
        return render_uri(self)


def render_uri(record: UriRecord) -> str:
    """Reassemble a URI string from the fields of ``record``."""

    parts: list[str] = []
    if record.protocol:
        parts.append(record.protocol)
    # TODO: render userinfo once records keep it.
    if record.host:
        parts.append(f"//{record.host}")
    parts.append(record.pathname or "/")
    if record.search:
        parts.append(record.search)
    if record.hash:
        parts.append(record.hash)
    return "".join(parts)


def _scan_until(text: str, start: int, stop_chars: str) -> int:
    index = start
    while index < len(text) and text[index] not in stop_chars:
        index += 1
    return index


def _parse_protocol(text: str, pos: int) -> tuple[str | None, int]:
    end = scan_scheme(text, pos)
    if end is None:
        return None, pos
    return text[pos:end].lower(), end


def _parse_authority(text: str, pos: int) -> tuple[str | None, int]:
    if not text.startswith("//", pos):
        return None, pos
    end = _scan_until(text, pos + 2, _AUTHORITY_END_CHARS)
    if end == pos + 2:
        # "///path" has no authority; the slashes belong to the path.
        return None, pos
    return text[pos + 2 : end], end


def _apply_authority(record: UriRecord, authority: str) -> None:
    userinfo_end = authority.find("@")
    if userinfo_end != -1:
        authority = authority[userinfo_end + 1 :]

    record.host = authority

    port_begin = authority.rfind(":")
    if port_begin != -1:
        record.port = authority[port_begin + 1 :]
        authority = authority[:port_begin]

    record.hostname = authority


def _parse_path(text: str, pos: int) -> tuple[str, int]:
    end = _scan_until(text, pos, _PATH_END_CHARS)
    pathname = text[pos:end]
    if not pathname:
        return "/", end
    if not pathname.startswith("/"):
        pathname = f"/{pathname}"
    return pathname, end


def _parse_query(text: str, pos: int) -> tuple[str, int]:
    if not text.startswith("?", pos):
        # Browsers report an absent query as "" rather than leaving it unset.
        return "", pos
    end = text.find("#", pos + 1)
    if end == -1:
        end = len(text)
    return text[pos:end], end


def _parse_fragment(text: str, pos: int) -> str:
    if text.startswith("#", pos):
        return text[pos:]
    return ""


def parse_standard_uri_string(text: str) -> UriRecord:
    """
    Parse ``text`` into a :class:`UriRecord` following a subset of RFC 3986.

    Parsing never fails. Whitespace is stripped first because a URI cannot
    contain unencoded whitespace; anything unrecognised ends up in the
    pathname, which always starts with ``/``.
    """

    text = "".join(text.split())
    record = UriRecord()

    record.protocol, pos = _parse_protocol(text, 0)

    authority, pos = _parse_authority(text, pos)
    if authority is not None:
        _apply_authority(record, authority)

    record.pathname, pos = _parse_path(text, pos)
    record.search, pos = _parse_query(text, pos)
    record.hash = _parse_fragment(text, pos)
    return record
