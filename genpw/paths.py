"""Cross-platform directory resolution."""

from __future__ import annotations

import os
from pathlib import Path

_APP_NAME = "genpw"
_APP_AUTHOR = "genpw"

# Overrides the platform directory, e.g. for sandboxed runs.
DATA_DIR_ENV = "GENPW_DATA_DIR"


def get_data_dir() -> Path:
    """Return the platform-appropriate data directory (XDG on Linux)."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()

    import platformdirs

    return Path(platformdirs.user_data_dir(_APP_NAME, _APP_AUTHOR))


# -- path helpers -----------------------------------------------------------
def get_config_path(data_dir: Path) -> Path:
    return data_dir / "config.ini"


def get_log_path(data_dir: Path) -> Path:
    return data_dir / "genpw.log"
