"""Scheme fixing for meeting URIs that arrive with app-specific schemes."""

from __future__ import annotations

# Regular-expression form of the scheme grammar scanned by ``scan_scheme``.
URI_PROTOCOL_PATTERN = r"^([a-z][a-z0-9\.\+-]*:)"

WELL_KNOWN_PROTOCOLS = frozenset({"http:", "https:"})
DEFAULT_PROTOCOL = "https:"

_SCHEME_EXTRA_CHARS = frozenset(".+-")


def _is_scheme_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char in _SCHEME_EXTRA_CHARS)


def scan_scheme(text: str, start: int = 0) -> int | None:
    """Return the index just past a ``scheme:`` token at ``start``, if any."""

    if start >= len(text) or not (text[start].isascii() and text[start].isalpha()):
        return None

    index = start + 1
    while index < len(text) and _is_scheme_char(text[index]):
        index += 1

    if index < len(text) and text[index] == ":":
        return index + 1
    return None


def fix_uri_scheme(uri: str) -> str:
    """
    Translate the leading scheme(s) of ``uri`` into a well-known one.

    Mobile clients prefix links with an app-specific scheme which may precede
    or replace ``https:``. Only the last of several chained schemes is kept and
    anything other than ``http:``/``https:`` becomes ``https:``. A scheme that
    is not followed by an authority is dropped because the input was a room
    name rather than a full URI.
    """

    end = 0
    protocol: str | None = None
    while True:
        next_end = scan_scheme(uri, end)
        if next_end is None:
            break
        protocol = uri[end:next_end].lower()
        end = next_end

    if protocol is None:
        return uri

    if protocol not in WELL_KNOWN_PROTOCOLS:
        protocol = DEFAULT_PROTOCOL

    remainder = uri[end:]
    if remainder.startswith("//"):
        return f"{protocol}{remainder}"
    return remainder
