from bisect import bisect_left
from typing import NamedTuple, Optional


class LyricPosition(NamedTuple):
    active_index: int
    offset_fraction: float


def resolve_progress(track, progress_ms, duration_ms, user_offset_ms=0) -> Optional[LyricPosition]:
    """
    Find the lyric line playing at progress_ms.

    Line i covers the window (start_i, start_{i+1}]; the last line ends at
    duration_ms. Returns the active index and how far through its window
    playback is (0..1), or None when nothing is due.
    """
    if not track:
        return None

    progress = int(progress_ms) + int(user_offset_ms or 0)
    timestamps = track.timestamps

    # First line whose start is >= progress; the one before it is the only
    # candidate with start < progress <= next start.
    idx = bisect_left(timestamps, progress) - 1
    if idx < 0:
        return None

    start = timestamps[idx]
    if idx + 1 < len(timestamps):
        end = timestamps[idx + 1]
    else:
        end = int(duration_ms)
        if progress > end:
            return None

    if end == start:
        return LyricPosition(idx, 0.0)
    return LyricPosition(idx, (progress - start) / (end - start))


def scroll_offset(position, line_height) -> float:
    if position is None:
        return 0.0
    return position.offset_fraction * float(line_height)
