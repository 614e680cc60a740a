import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from pythonjsonlogger import jsonlogger

LOG_RETENTION_DAYS = 30


def _cleanup_old_logs(log_path: Path, retention_days: int = LOG_RETENTION_DAYS) -> None:
    if retention_days <= 0:
        return
    cutoff = time.time() - (retention_days * 24 * 60 * 60)
    for entry in log_path.glob("*.log"):
        try:
            if entry.is_file() and entry.stat().st_mtime < cutoff:
                entry.unlink()
        except FileNotFoundError:
            continue


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
    return logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )


def setup_logging(log_level: str = "INFO", log_path: Optional[Path] = Path("./logs"), log_format: str = "text") -> Optional[Path]:
    """Route the root logger to stdout and, when ``log_path`` is set, to a dated run log.

    Returns the log file path, or None for stdout-only logging.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = _build_formatter(log_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = [logging.StreamHandler(sys.stdout)]
    log_file = None
    if log_path is not None:
        log_path = Path(log_path)
        log_path.mkdir(parents=True, exist_ok=True)
        log_file = log_path / f"tidy_har_{datetime.now().strftime('%Y%m%d')}.log"
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.info("Logging initialized - Level: %s, Format: %s, File: %s", log_level, log_format, log_file)
    if log_path is not None:
        _cleanup_old_logs(log_path)
    return log_file
