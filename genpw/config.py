"""Centralised configuration and config.ini I/O."""

from __future__ import annotations

import configparser
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from genpw.paths import get_config_path
from genpw.strength import FULL_RANGE_TARGETS, MAX_BASE_LENGTH, MIN_BASE_LENGTH, TARGETS

logger = logging.getLogger("genpw.config")

_SECTION = "genpw"

DEFAULT_BIT_STRENGTH = 80


# ============================================================================
#  Settings
# ============================================================================
@dataclass
class Settings:
    """User defaults for the command-line wrapper."""

    bit_strength: int = DEFAULT_BIT_STRENGTH
    uppercase: bool = False
    symbol: bool = False
    count: int = 1
    full_range: bool = False
    calculate_probability: bool = False


# ============================================================================
#  Config class
# ============================================================================
class Config:
    """Centralised settings."""

    MIN_BASE_LENGTH = MIN_BASE_LENGTH
    MAX_BASE_LENGTH = MAX_BASE_LENGTH
    MAX_BIT_STRENGTH = TARGETS[-1][0]
    DEFAULT_BIT_STRENGTH = DEFAULT_BIT_STRENGTH
    # 36 base characters, optional symbol, NUL terminator
    BUFFER_SIZE = MAX_BASE_LENGTH + 2
    MAX_COUNT = 100

    # Log rotation
    LOG_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
    LOG_BACKUP_COUNT = 3

    @staticmethod
    def config_path(data_dir: Path) -> Path:
        return get_config_path(data_dir)

    @staticmethod
    def config_exists(data_dir: Path) -> bool:
        return Config.config_path(data_dir).exists()

    @staticmethod
    def load(data_dir: Path | None = None) -> Settings:
        """Read config.ini, falling back to defaults for bad or missing keys."""
        if data_dir is None:
            from genpw.paths import get_data_dir

            data_dir = get_data_dir()

        defaults = Settings()
        config_path = Config.config_path(data_dir)
        if not config_path.exists():
            return defaults

        cfg = configparser.ConfigParser()
        try:
            cfg.read(config_path, encoding="utf-8")
        except configparser.Error as exc:
            logger.warning("Ignoring unreadable %s: %s", config_path, exc)
            return defaults
        if not cfg.has_section(_SECTION):
            return defaults

        settings = Settings(
            bit_strength=_read(cfg, "bit_strength", cfg.getint, defaults.bit_strength),
            uppercase=_read(cfg, "uppercase", cfg.getboolean, defaults.uppercase),
            symbol=_read(cfg, "symbol", cfg.getboolean, defaults.symbol),
            count=_read(cfg, "count", cfg.getint, defaults.count),
            full_range=_read(cfg, "full_range", cfg.getboolean, defaults.full_range),
            calculate_probability=_read(
                cfg,
                "calculate_probability",
                cfg.getboolean,
                defaults.calculate_probability,
            ),
        )

        max_bits = FULL_RANGE_TARGETS[-1] if settings.full_range else Config.MAX_BIT_STRENGTH
        if not 0 <= settings.bit_strength <= max_bits:
            logger.warning(
                "bit_strength=%d out of range; using %d",
                settings.bit_strength,
                defaults.bit_strength,
            )
            settings.bit_strength = defaults.bit_strength
        if not 1 <= settings.count <= Config.MAX_COUNT:
            logger.warning("count=%d out of range; using %d", settings.count, defaults.count)
            settings.count = defaults.count
        if settings.full_range:
            logger.warning(
                "full_range is enabled: strengths map to every base length "
                "instead of the suggested targets"
            )
        return settings

    @staticmethod
    def write_default(data_dir: Path) -> Path:
        """Write a config.ini holding the default settings."""
        _write_config(data_dir, Settings())
        logger.info("Default configuration written to %s", Config.config_path(data_dir))
        return Config.config_path(data_dir)


def _read(cfg: configparser.ConfigParser, key: str, getter, fallback):
    try:
        return getter(_SECTION, key, fallback=fallback)
    except ValueError:
        logger.warning("Invalid value for '%s'; using default %r", key, fallback)
        return fallback


# ============================================================================
#  Atomic config writer
# ============================================================================
def _write_config(data_dir: Path, settings: Settings) -> None:
    data_dir.mkdir(parents=True, exist_ok=True)
    if os.name != "nt":
        try:
            os.chmod(data_dir, 0o700)
        except OSError:
            pass

    config_path = Config.config_path(data_dir)
    cfg = configparser.ConfigParser()
    cfg[_SECTION] = {
        "bit_strength": str(settings.bit_strength),
        "uppercase": "yes" if settings.uppercase else "no",
        "symbol": "yes" if settings.symbol else "no",
        "count": str(settings.count),
        "full_range": "yes" if settings.full_range else "no",
        "calculate_probability": "yes" if settings.calculate_probability else "no",
    }

    fd = tempfile.NamedTemporaryFile(
        mode="w", dir=data_dir, prefix="cfg_tmp_", suffix=".ini", delete=False
    )
    try:
        cfg.write(fd)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        tmp = Path(fd.name)
        if os.name != "nt":
            os.chmod(tmp, 0o600)
        tmp.replace(config_path)
    except BaseException:
        fd.close()
        try:
            Path(fd.name).unlink(missing_ok=True)
        except OSError:
            pass
        raise
