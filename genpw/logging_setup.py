"""Secure logging setup: no secrets in logs, rotation, OS-appropriate dir."""

from __future__ import annotations

import logging
import logging.handlers
import os
import platform
from pathlib import Path

from genpw.config import Config
from genpw.paths import get_log_path
from genpw.util.memory import SecureBuffer

# Longest string argument logged verbatim; anything longer is summarised.
MAX_PLAIN_ARG = 40


class SecureFormatter(logging.Formatter):
    """Formatter that masks arguments that may carry password material."""

    def format(self, record):
        if hasattr(record, "args") and record.args and isinstance(record.args, tuple):
            safe = []
            for arg in record.args:
                if isinstance(arg, (bytes, bytearray, memoryview)):
                    safe.append(f"<{len(arg)} bytes>")
                elif isinstance(arg, SecureBuffer):
                    safe.append(f"<secure buffer, {len(arg)} bytes>")
                elif isinstance(arg, str) and len(arg) > MAX_PLAIN_ARG:
                    safe.append(f"<{len(arg)} chars>")
                else:
                    safe.append(arg)
            record.args = tuple(safe)
        return super().format(record)


def setup_secure_logging(log_dir: Path, level: int = logging.INFO) -> logging.Logger:
    """Configure the *genpw* logger with rotation and safe formatting."""
    log_dir.mkdir(parents=True, exist_ok=True)
    if platform.system() != "Windows":
        try:
            os.chmod(log_dir, 0o700)
        except OSError:
            pass

    log_file = get_log_path(log_dir)

    formatter = SecureFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=Config.LOG_MAX_BYTES,
        backupCount=Config.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)

    root_logger = logging.getLogger("genpw")
    root_logger.setLevel(level)
    # one log file per process; repeated calls keep the first
    if not any(
        isinstance(h, logging.handlers.RotatingFileHandler) for h in root_logger.handlers
    ):
        root_logger.addHandler(handler)
    else:
        handler.close()
    root_logger.propagate = False

    try:
        if platform.system() != "Windows":
            os.chmod(log_file, 0o600)
    except OSError:
        pass

    return root_logger
