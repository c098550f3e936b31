"""Process hardening before password generation and SecurityWarning.

Generated passwords and the scratch character pools live in process memory,
so core dumps are disabled and the memory-locking limit is checked.
"""

from __future__ import annotations

import ctypes
import logging
import platform
import time
import warnings
from typing import Dict

import psutil

logger = logging.getLogger("genpw.harden")

# Two character pools (26 + 10 bytes) share at most two pages.
MIN_MEMLOCK_BYTES = 2 * 4096


# ---------------------------------------------------------------------------
#  SecurityWarning
# ---------------------------------------------------------------------------
class SecurityWarning(UserWarning):
    """Categorised security warning with auto-logging."""

    _warning_counts: Dict[str, int] = {
        "memory_protection": 0,
        "process_protection": 0,
        "other": 0,
    }

    def __init__(
        self,
        message: str,
        category: str = "other",
        severity: str = "medium",
        recommendation: str | None = None,
    ):
        super().__init__(message)
        self.category = category
        self.severity = severity
        self.recommendation = recommendation
        self.timestamp = time.time()

        if category in self._warning_counts:
            self._warning_counts[category] += 1
        else:
            self._warning_counts["other"] += 1

        self._auto_log()

    def _auto_log(self):
        msg = f"[{self.severity.upper()}] {self.category}: {self}"
        if self.recommendation:
            msg += f" | Recommendation: {self.recommendation}"
        level = {
            "critical": logging.CRITICAL,
            "high": logging.ERROR,
            "medium": logging.WARNING,
        }.get(self.severity, logging.INFO)
        logger.log(level, msg)

    @classmethod
    def get_security_metrics(cls) -> Dict[str, int]:
        return cls._warning_counts.copy()

    @classmethod
    def reset_metrics(cls):
        for key in cls._warning_counts:
            cls._warning_counts[key] = 0

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base} [{self.category}]"


def warn_memory_protection(
    message: str, severity: str = "medium", recommendation: str | None = None
):
    warnings.warn(
        SecurityWarning(message, "memory_protection", severity, recommendation),
        stacklevel=2,
    )


def warn_process_protection(message: str, severity: str = "medium"):
    warnings.warn(SecurityWarning(message, "process_protection", severity), stacklevel=2)


# ---------------------------------------------------------------------------
#  Platform hardening
# ---------------------------------------------------------------------------
def apply_platform_hardening() -> None:
    """Keep generated secrets out of core dumps and injected DLLs."""
    system = platform.system()
    if system == "Windows":
        _harden_windows()
    elif system in ("Linux", "Darwin"):
        _harden_unix()


def _harden_windows() -> None:
    try:
        kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
        if hasattr(kernel32, "SetDllDirectoryW"):
            kernel32.SetDllDirectoryW("")
            logger.debug("DLL directory restricted to system")
    except Exception as exc:
        logger.error("Error applying Windows protections: %s", exc)
        warn_process_protection(
            "Some process protections could not be applied", severity="high"
        )


def _harden_unix() -> None:
    try:
        import resource

        resource.setrlimit(resource.RLIMIT_CORE, (0, 0))
        logger.debug("Core dumps disabled")
    except Exception as exc:
        logger.error("Error applying Unix protections: %s", exc)
        warn_process_protection(f"Error applying Unix protections: {exc}", severity="medium")


# ---------------------------------------------------------------------------
#  Memory-locking check
# ---------------------------------------------------------------------------
def check_memory_locking() -> bool:
    """Return False (and warn) when the scratch pools cannot be mlocked.

    Platforms where psutil exposes no RLIMIT_MEMLOCK are assumed fine.
    """
    if not hasattr(psutil, "RLIMIT_MEMLOCK"):
        return True
    soft, _hard = psutil.Process().rlimit(psutil.RLIMIT_MEMLOCK)
    if soft == psutil.RLIM_INFINITY or soft >= MIN_MEMLOCK_BYTES:
        return True
    warn_memory_protection(
        f"RLIMIT_MEMLOCK is {soft} bytes; character pools may be swapped out",
        recommendation="raise the memlock limit (ulimit -l)",
    )
    return False
