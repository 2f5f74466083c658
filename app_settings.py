import codecs
import json
import os
from typing import Any


CURRENT_SETTINGS_VERSION = 1

DEFAULT_SETTINGS = {
    "settings_version": CURRENT_SETTINGS_VERSION,
    "lyrics_encoding": "gbk",
    "lyrics_fallback_extension": ".txt",
    "lyrics_normalize_fraction": False,
    "lyrics_user_offset_ms": 0,
    "lyrics_line_height": 48,
}


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    return default


def _as_str(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _as_int(value: Any, default: int, minimum: int | None = None, maximum: int | None = None) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        return default
    if minimum is not None and value < minimum:
        return default
    if maximum is not None and value > maximum:
        return default
    return value


def _as_encoding(value: Any, default: str) -> str:
    name = _as_str(value, default)
    try:
        codecs.lookup(name)
    except LookupError:
        return default
    return name


def _as_extension(value: Any, default: str) -> str:
    ext = _as_str(value, default)
    if not ext.startswith("."):
        ext = "." + ext
    return ext


def normalize_settings(raw: dict[str, Any] | None) -> dict[str, Any]:
    raw = raw or {}
    normalized = dict(DEFAULT_SETTINGS)
    normalized["lyrics_encoding"] = _as_encoding(raw.get("lyrics_encoding"), DEFAULT_SETTINGS["lyrics_encoding"])
    normalized["lyrics_fallback_extension"] = _as_extension(raw.get("lyrics_fallback_extension"), DEFAULT_SETTINGS["lyrics_fallback_extension"])
    normalized["lyrics_normalize_fraction"] = _as_bool(raw.get("lyrics_normalize_fraction"), DEFAULT_SETTINGS["lyrics_normalize_fraction"])
    normalized["lyrics_user_offset_ms"] = _as_int(raw.get("lyrics_user_offset_ms"), DEFAULT_SETTINGS["lyrics_user_offset_ms"], minimum=-2000, maximum=2000)
    normalized["lyrics_line_height"] = _as_int(raw.get("lyrics_line_height"), DEFAULT_SETTINGS["lyrics_line_height"], minimum=8, maximum=512)
    normalized["settings_version"] = CURRENT_SETTINGS_VERSION
    return normalized


def load_settings(path: str) -> dict[str, Any]:
    if not os.path.exists(path):
        return dict(DEFAULT_SETTINGS)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except Exception:
        return dict(DEFAULT_SETTINGS)

    if not isinstance(data, dict):
        return dict(DEFAULT_SETTINGS)
    return normalize_settings(data)


def save_settings(path: str, settings: dict[str, Any]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    data = normalize_settings(settings)
    temp_file = f"{path}.tmp"
    with open(temp_file, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    os.replace(temp_file, path)
