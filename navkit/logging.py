from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from .settings import Settings


def _resolve_log_dir(settings: object) -> Path:
    """Resolve the log directory.

    - If NAVKIT_LOG_DIR is absolute, use it directly.
    - Otherwise, treat it as relative to the current working directory.
    """

    raw = getattr(settings, "NAVKIT_LOG_DIR", Path("_logs"))
    p = raw if isinstance(raw, Path) else Path(str(raw))
    if p.is_absolute():
        return p
    return Path.cwd() / p


def setup_logging(settings: Settings) -> Path | None:
    """Configure root logging for navkit.

    Returns the log file path when file logging is enabled, else None.

    Notes:
      - Console output always goes to stderr.
      - With NAVKIT_LOG_TO_FILE, logs also rotate daily at midnight, keeping
        the last `NAVKIT_LOG_BACKUP_COUNT` files.
      - Safe to call multiple times (it resets handlers).
    """

    level_name = str(getattr(settings, "NAVKIT_LOG_LEVEL", "INFO") or "INFO").upper().strip()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt))

    # Reset root handlers so we don't duplicate logs on repeated setup.
    root = logging.getLogger()
    root.handlers = []
    root.setLevel(level)
    root.addHandler(console_handler)

    log_file: Path | None = None
    if bool(getattr(settings, "NAVKIT_LOG_TO_FILE", False)):
        log_dir = _resolve_log_dir(settings)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / "navkit.log"

        file_handler = TimedRotatingFileHandler(
            filename=str(log_file),
            when="midnight",
            interval=1,
            backupCount=max(0, int(getattr(settings, "NAVKIT_LOG_BACKUP_COUNT", 7) or 0)),
            encoding="utf-8",
            utc=False,
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(file_handler)

    logging.getLogger("navkit").debug(
        "navkit logging enabled (file=%s, level=%s)",
        log_file,
        level_name,
    )
    return log_file
