import logging

from app_errors import user_message
from lyric_loader import LyricLoader
from lyric_parser import LyricTrack
from lyric_progress import resolve_progress, scroll_offset

logger = logging.getLogger(__name__)


class LyricSession:
    """
    Keeps the lyric track for the current song and turns playback ticks into
    (active index, pixel offset) for a lyric view.
    """

    def __init__(self, settings, dispatch=None, loader=None):
        self.loader = loader or LyricLoader.from_settings(settings, dispatch=dispatch)
        self.user_offset_ms = int(settings.get("lyrics_user_offset_ms", 0) or 0)
        self.line_height = int(settings.get("lyrics_line_height", 48) or 48)
        self.track = LyricTrack()
        self.status_msg = None
        self.current_index = -1
        self.on_track_changed = None

    def load(self, path):
        self.status_msg = "Loading Lyrics..."
        return self.loader.request(path, self._apply_track, self._apply_not_found)

    def _apply_track(self, track):
        # Swap in one step; readers never see a half-built track.
        self.track = track
        self.current_index = -1
        self.status_msg = None if track else user_message("empty")
        logger.debug("Lyric session track set. entries=%s", len(track))
        if self.on_track_changed:
            self.on_track_changed(track, self.status_msg)

    def _apply_not_found(self):
        self.track = LyricTrack()
        self.current_index = -1
        self.status_msg = user_message("not_found")
        if self.on_track_changed:
            self.on_track_changed(None, self.status_msg)

    def set_user_offset(self, offset_ms):
        self.user_offset_ms = max(-2000, min(2000, int(offset_ms)))

    def update(self, progress_ms, duration_ms):
        """Returns (active_index or -1, scroll offset in px, index changed)."""
        position = resolve_progress(self.track, progress_ms, duration_ms, self.user_offset_ms)
        active_idx = position.active_index if position else -1
        changed = active_idx != self.current_index
        self.current_index = active_idx
        return active_idx, scroll_offset(position, self.line_height), changed
