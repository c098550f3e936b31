"""Allow running as ``python -m genpw``."""

from __future__ import annotations

import sys
from pathlib import Path

# Support direct execution via file path (e.g., ``python genpw/__main__.py``)
if __package__ in (None, ""):
    _project_root = Path(__file__).resolve().parent.parent
    if str(_project_root) not in sys.path:
        sys.path.insert(0, str(_project_root))

from genpw import check_dependencies  # noqa: E402

check_dependencies()

from genpw.cli import main  # noqa: E402

main()
