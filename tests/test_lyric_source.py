import pytest

from app_errors import LyricFileNotFound, classify_exception
from lyric_parser import LyricEntry
from lyric_source import load_lyric_file, read_lyric_text, resolve_lyric_path


def test_resolve_existing_path(tmp_path):
    path = tmp_path / "song.lrc"
    path.write_text("[00:01.00]a", encoding="gbk")
    assert resolve_lyric_path(str(path)) == str(path)


def test_resolve_falls_back_to_txt(tmp_path):
    fallback = tmp_path / "song.txt"
    fallback.write_text("[00:01.00]a", encoding="gbk")
    assert resolve_lyric_path(str(tmp_path / "song.lrc")) == str(fallback)


def test_resolve_custom_fallback_extension(tmp_path):
    fallback = tmp_path / "song.lyric"
    fallback.write_text("x", encoding="gbk")
    assert resolve_lyric_path(str(tmp_path / "song.lrc"), ".lyric") == str(fallback)


def test_resolve_missing_raises(tmp_path):
    with pytest.raises(LyricFileNotFound) as exc_info:
        resolve_lyric_path(str(tmp_path / "missing.lrc"))
    assert exc_info.value.path.endswith("missing.lrc")
    assert classify_exception(exc_info.value) == "not_found"


def test_read_uses_legacy_encoding(tmp_path):
    path = tmp_path / "song.lrc"
    path.write_bytes("[00:01.00]寂寞的夜和谁说话".encode("gbk"))
    assert read_lyric_text(str(path)) == "[00:01.00]寂寞的夜和谁说话"


def test_read_decode_failure_surfaces_as_not_found(tmp_path):
    path = tmp_path / "song.lrc"
    path.write_bytes(b"[00:01.00]\xff\xff\xff")
    with pytest.raises(LyricFileNotFound) as exc_info:
        read_lyric_text(str(path), encoding="utf-8")
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


def test_read_unknown_encoding_surfaces_as_not_found(tmp_path):
    path = tmp_path / "song.lrc"
    path.write_text("x", encoding="utf-8")
    with pytest.raises(LyricFileNotFound):
        read_lyric_text(str(path), encoding="no-such-codec")


def test_load_lyric_file_parses(tmp_path):
    path = tmp_path / "song.lrc"
    path.write_bytes("[00:02.00]b\n[00:01.00][00:03.00]雨\n".encode("gbk"))
    track = load_lyric_file(str(path))
    assert list(track) == [LyricEntry(1000, "雨"), LyricEntry(2000, "b"), LyricEntry(3000, "雨")]


def test_load_lyric_file_normalizes_when_asked(tmp_path):
    path = tmp_path / "song.txt"
    path.write_text("[00:01.04]a", encoding="gbk")
    track = load_lyric_file(str(tmp_path / "song.lrc"), normalize_fraction=True)
    assert track.timestamps == (1040,)


def test_load_empty_file_gives_empty_track(tmp_path):
    path = tmp_path / "song.lrc"
    path.write_text("", encoding="gbk")
    track = load_lyric_file(str(path))
    assert len(track) == 0
