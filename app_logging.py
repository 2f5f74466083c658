import logging
import os
from pathlib import Path
from logging.handlers import RotatingFileHandler

LIBRARY_LOGGERS = (
    "lyric_parser",
    "lyric_progress",
    "lyric_source",
    "lyric_loader",
    "lyric_session",
)


def _parse_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = int(raw)
        if val < 1:
            return default
        return val
    except ValueError:
        return default


def _parse_level(level_name: str, default: int) -> int:
    level = getattr(logging, level_name.upper(), default)
    return level if isinstance(level, int) else default


def _parse_module_levels(default_level: int) -> dict[str, int]:
    """
    LYRICSYNC_LOG_MODULE_LEVELS="parser=DEBUG,lyric_loader=WARNING"
    Names may drop the "lyric_" prefix; unknown names are reported and ignored.
    """
    raw = os.getenv("LYRICSYNC_LOG_MODULE_LEVELS", "").strip()
    out: dict[str, int] = {}
    if not raw:
        return out

    for item in raw.split(","):
        entry = item.strip()
        module_name, sep, level_name = entry.partition("=")
        module_name = module_name.strip()
        level_name = level_name.strip()
        if not sep or not module_name or not level_name:
            logging.getLogger("lyric_session").warning("Invalid module-level logging entry: %s", entry)
            continue
        if module_name not in LIBRARY_LOGGERS:
            module_name = f"lyric_{module_name}"
        if module_name not in LIBRARY_LOGGERS:
            logging.getLogger("lyric_session").warning("Unknown lyricsync logger: %s", entry)
            continue
        out[module_name] = _parse_level(level_name, default_level)
    return out


def _drop_own_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, "_lyricsync", False):
            logger.removeHandler(handler)
            handler.close()


def setup_logging() -> list[logging.Handler]:
    """
    Attach handlers to the lyricsync module loggers only; the host's root
    logger is left alone. Safe to call again, previous handlers are replaced.

    Env vars:
    - LYRICSYNC_LOG_LEVEL: DEBUG/INFO/WARNING/ERROR (default: INFO)
    - LYRICSYNC_LOG_FILE: optional path to a log file
    - LYRICSYNC_LOG_ROTATE_BYTES: max file size before rotation (default: 5242880)
    - LYRICSYNC_LOG_BACKUP_COUNT: number of rotated files to keep (default: 3)
    - LYRICSYNC_LOG_MODULE_LEVELS: per-module overrides, e.g. "parser=DEBUG"
    - LYRICSYNC_LOG_PROPAGATE: "1" to also pass records up to the host's root logger
    """
    level = _parse_level(os.getenv("LYRICSYNC_LOG_LEVEL", "INFO"), logging.INFO)
    propagate = os.getenv("LYRICSYNC_LOG_PROPAGATE", "").strip() == "1"

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    log_file = os.getenv("LYRICSYNC_LOG_FILE")
    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                path,
                maxBytes=_parse_int_env("LYRICSYNC_LOG_ROTATE_BYTES", 5 * 1024 * 1024),
                backupCount=_parse_int_env("LYRICSYNC_LOG_BACKUP_COUNT", 3),
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler._lyricsync = True
        handler.setFormatter(formatter)

    overrides = _parse_module_levels(level)
    for name in LIBRARY_LOGGERS:
        logger = logging.getLogger(name)
        _drop_own_handlers(logger)
        logger.setLevel(overrides.get(name, level))
        logger.propagate = propagate
        for handler in handlers:
            logger.addHandler(handler)
        if name in overrides:
            logger.info("Log level override: %s=%s", name, logging.getLevelName(overrides[name]))
    return handlers
