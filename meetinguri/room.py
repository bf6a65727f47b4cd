"""Helpers for sanitizing room names before they reach a conference server."""

from __future__ import annotations

# Based on RFC 3986 delimiters plus the characters the XMPP focus rejects in
# a room localpart.
ROOM_EXCLUDE_CHARS = ":?#[]@!$&'()*+,;=></\""

_ROOM_EXCLUDE_TABLE = str.maketrans("", "", ROOM_EXCLUDE_CHARS)


def fix_room(room: str | None) -> str | None:
    """Remove characters that are unsafe in a room name."""

    if not room:
        return room
    return room.translate(_ROOM_EXCLUDE_TABLE)
