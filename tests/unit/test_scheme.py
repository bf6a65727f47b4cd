from meetinguri.scheme import fix_uri_scheme, scan_scheme


def test_scan_scheme_finds_token_end() -> None:
    assert scan_scheme("https://meet.example.com") == 6
    assert scan_scheme("org.jitsi.meet:https://meet.example.com") == 15
    assert scan_scheme("org.jitsi.meet:https://meet.example.com", 15) == 21
    assert scan_scheme("//meet.example.com") is None
    assert scan_scheme("1abc:room") is None
    assert scan_scheme("room") is None
    assert scan_scheme("") is None


def test_fix_uri_scheme_translates_app_schemes() -> None:
    assert fix_uri_scheme("org.jitsi.meet://meet.example.com/room") == "https://meet.example.com/room"
    assert fix_uri_scheme("ftp://meet.example.com/room") == "https://meet.example.com/room"


def test_fix_uri_scheme_keeps_last_of_chained_schemes() -> None:
    assert (
        fix_uri_scheme("org.jitsi.meet:https://meet.example.com/room")
        == "https://meet.example.com/room"
    )
    assert (
        fix_uri_scheme("org.jitsi.meet:http://meet.example.com/room")
        == "http://meet.example.com/room"
    )


def test_fix_uri_scheme_preserves_well_known_schemes() -> None:
    assert fix_uri_scheme("http://meet.example.com/room") == "http://meet.example.com/room"
    assert fix_uri_scheme("HTTPS://Meet.example.com/Room") == "https://Meet.example.com/Room"


def test_fix_uri_scheme_drops_scheme_without_authority() -> None:
    assert fix_uri_scheme("org.jitsi.meet:room") == "room"
    assert fix_uri_scheme("https:room") == "room"


def test_fix_uri_scheme_leaves_schemeless_input_alone() -> None:
    assert fix_uri_scheme("room") == "room"
    assert fix_uri_scheme("/tenant/room") == "/tenant/room"
    assert fix_uri_scheme("//meet.example.com/room") == "//meet.example.com/room"
    assert fix_uri_scheme("") == ""


def test_fix_uri_scheme_is_idempotent() -> None:
    samples = [
        "org.jitsi.meet://meet.example.com/room",
        "org.jitsi.meet:https://meet.example.com/room",
        "a:b:c",
        "a:b:c:",
        "https:",
        "mailto:someone@example.com",
        "room?x=1#y",
        "HTTP://meet.example.com",
        "",
    ]
    for sample in samples:
        once = fix_uri_scheme(sample)
        assert fix_uri_scheme(once) == once
