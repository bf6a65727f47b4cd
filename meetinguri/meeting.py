"""Parsing of URIs that reference a meeting room on a conference server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from meetinguri.room import fix_room
from meetinguri.scheme import fix_uri_scheme
from meetinguri.standard import UriRecord, parse_standard_uri_string


@dataclass(slots=True)
class MeetingUriRecord(UriRecord):
    """A :class:`UriRecord` plus the web application context root and room."""

    context_root: str = "/"
    room: str | None = None


def get_location_context_root(location: Any) -> str:
    """
    Return the context root of a location: its pathname up to the last ``/``.

    ``location`` is either a pathname or any object with a ``pathname``.
    """

    pathname = location if isinstance(location, str) else location.pathname
    end = pathname.rfind("/")
    if end == -1:
        return "/"
    return pathname[: end + 1]


def parse_uri_string(uri: object) -> MeetingUriRecord | None:
    """Parse a URI which (supposedly) references a meeting room."""

    if not isinstance(uri, str):
        return None

    standard = parse_standard_uri_string(fix_uri_scheme(uri))
    record = MeetingUriRecord(
        protocol=standard.protocol,
        host=standard.host,
        hostname=standard.hostname,
        port=standard.port,
        pathname=standard.pathname,
        search=standard.search,
        hash=standard.hash,
    )
    record.context_root = get_location_context_root(record)

    # The room is the last segment of the pathname. Segments are URI encoded
    # but some characters are still rejected by clients and servers.
    context_root_end = record.pathname.rfind("/")
    room = record.pathname[context_root_end + 1 :] or None

    if room:
        fixed_room = fix_room(room)
        if fixed_room != room:
            room = fixed_room or None
            # room is derived from pathname so keep the two in sync.
            record.pathname = record.pathname[: context_root_end + 1] + (room or "")

    record.room = room
    return record
