from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

ROOT_LOGGER_NAME = "lone_wolf"
GAMEPLAY_LOGGER_NAME = "lone_wolf.gameplay"


@dataclass(slots=True)
class AppLoggerBundle:
    app: logging.Logger
    gameplay: logging.Logger
    latest_log_path: Path
    gameplay_log_path: Path


def _rotate_latest_log(logs_dir: Path, keep_archives: int = 5) -> Path:
    logs_dir.mkdir(parents=True, exist_ok=True)
    latest = logs_dir / "latest.log"
    if latest.exists():
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        latest.replace(logs_dir / f"latest_{stamp}.log")

    archives = sorted(
        (path for path in logs_dir.glob("latest_*.log") if path.is_file()),
        key=lambda p: p.name,
        reverse=True,
    )
    for stale in archives[keep_archives:]:
        stale.unlink(missing_ok=True)
    return latest


def configure_logging(logs_dir: Path, level: int = logging.INFO, keep_archives: int = 5) -> AppLoggerBundle:
    """Route the ``lone_wolf`` loggers to the console, ``latest.log`` and ``gameplay.log``.

    The previous ``latest.log`` is archived with a timestamp; only the newest
    ``keep_archives`` archives survive.
    """
    latest = _rotate_latest_log(logs_dir, keep_archives=keep_archives)
    gameplay_log_path = logs_dir / "gameplay.log"

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.setLevel(level)
    for handler in list(app_logger.handlers):
        handler.close()
    app_logger.handlers.clear()
    app_logger.propagate = False

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(logging.WARNING)

    file_handler = logging.FileHandler(latest, mode="w", encoding="utf-8")
    file_handler.setFormatter(formatter)

    app_logger.addHandler(stream_handler)
    app_logger.addHandler(file_handler)

    gameplay_logger = logging.getLogger(GAMEPLAY_LOGGER_NAME)
    gameplay_logger.setLevel(logging.INFO)
    for handler in list(gameplay_logger.handlers):
        handler.close()
    gameplay_logger.handlers.clear()
    gameplay_logger.propagate = False

    gameplay_handler = logging.FileHandler(gameplay_log_path, mode="w", encoding="utf-8")
    gameplay_handler.setFormatter(logging.Formatter("%(asctime)s %(message)s"))
    gameplay_logger.addHandler(gameplay_handler)

    return AppLoggerBundle(
        app=app_logger,
        gameplay=gameplay_logger,
        latest_log_path=latest,
        gameplay_log_path=gameplay_log_path,
    )
