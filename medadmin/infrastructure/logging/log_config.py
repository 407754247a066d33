"""Centralized logging configuration.

Each ``log_level_*`` setting controls a group of loggers, so the chatty
third-party ones (SQL statements, outbound HTTP) can be turned down while
the sync core keeps reporting every upload, write and reload.

Usage:
    from medadmin.infrastructure.logging.log_config import setup_logging
    setup_logging(settings)   # once, from the FastAPI lifespan
"""

import logging
import sys

from medadmin.config import Settings, get_settings

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# ── Settings field → logger names ───────────────────────────────────

_CATEGORY_MAP: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite"),
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_sync": ("MutationCoordinator", "medadmin.application.services"),
    "log_level_firebase": ("medadmin.infrastructure.firebase", "medadmin.infrastructure.auth"),
}


def setup_logging(settings: Settings | None = None) -> None:
    """Apply the root level, attach a stderr handler if none exists, then set each category."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    # Under uvicorn a handler is already installed; under pytest or a script there may be none
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)

    applied: dict[str, str] = {}
    for settings_field, logger_names in _CATEGORY_MAP.items():
        raw_level = getattr(settings, settings_field, "INFO")
        level = _parse_level(raw_level)
        for name in logger_names:
            logging.getLogger(name).setLevel(level)
        applied[settings_field.removeprefix("log_level_")] = logging.getLevelName(level)

    logging.getLogger(__name__).debug(
        "Logging configured: root=%s %s",
        logging.getLevelName(root.level),
        " ".join(f"{category}={level}" for category, level in applied.items()),
    )


def _parse_level(raw: str) -> int:
    """Level name to logging constant; unknown names fall back to INFO."""
    return logging.getLevelNamesMapping().get(str(raw).upper(), logging.INFO)
