from types import SimpleNamespace

import pytest

from app_settings import DEFAULT_SETTINGS, normalize_settings
from lyric_parser import parse_lyrics
from lyric_session import LyricSession


def _make_loader():
    loader = SimpleNamespace(requests=[])

    def request(path, on_loaded, on_not_found):
        loader.requests.append((path, on_loaded, on_not_found))
        return len(loader.requests)

    loader.request = request
    return loader


def test_update_without_track_has_no_highlight():
    session = LyricSession(DEFAULT_SETTINGS, loader=_make_loader())
    assert session.update(500, 2000) == (-1, 0.0, False)


def test_loaded_track_drives_index_and_offset():
    loader = _make_loader()
    session = LyricSession(normalize_settings({"lyrics_line_height": 40}), loader=loader)
    seen = []
    session.on_track_changed = lambda track, msg: seen.append((track, msg))

    session.load("/music/song.lrc")
    assert session.status_msg == "Loading Lyrics..."
    _path, on_loaded, _on_not_found = loader.requests[0]
    on_loaded(parse_lyrics("[00:00.00]a\n[00:01.00]b"))

    assert session.status_msg is None
    assert len(seen) == 1
    idx, offset_px, changed = session.update(500, 2000)
    assert (idx, changed) == (0, True)
    assert offset_px == pytest.approx(20.0)
    assert session.update(600, 2000)[2] is False
    assert session.update(1500, 2000)[:1] == (1,)


def test_not_found_clears_track():
    loader = _make_loader()
    session = LyricSession(DEFAULT_SETTINGS, loader=loader)
    session.load("/music/song.lrc")
    loader.requests[0][1](parse_lyrics("[00:00.00]a"))
    loader.requests[0][2]()
    assert not session.track
    assert session.status_msg == "No lyrics available for this track."


def test_user_offset_is_clamped_and_applied():
    loader = _make_loader()
    session = LyricSession(DEFAULT_SETTINGS, loader=loader)
    session.load("/music/song.lrc")
    loader.requests[0][1](parse_lyrics("[00:00.00]a\n[00:01.00]b"))
    session.set_user_offset(9999)
    assert session.user_offset_ms == 2000
    session.set_user_offset(600)
    assert session.update(500, 3000)[0] == 1


def test_empty_track_status_differs_from_not_found():
    loader = _make_loader()
    session = LyricSession(DEFAULT_SETTINGS, loader=loader)
    seen = []
    session.on_track_changed = lambda track, msg: seen.append((track, msg))
    session.load("/music/song.lrc")
    loader.requests[0][1](parse_lyrics("plain words only"))
    loader.requests[0][2]()

    empty_msg = seen[0][1]
    missing_msg = seen[1][1]
    assert empty_msg == "This lyrics file has no timed lines."
    assert missing_msg == "No lyrics available for this track."
    assert seen[0][0] is not None and not seen[0][0]
    assert seen[1][0] is None
