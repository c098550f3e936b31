"""genpw - random passwords of known bit strength."""

__version__ = "1.0.0"


def check_dependencies():
    """Halt with a clear message if a runtime dependency is missing."""
    import importlib.util
    import sys

    required = ["click", "platformdirs", "psutil"]
    missing = [pkg for pkg in required if importlib.util.find_spec(pkg) is None]
    if missing:
        print("ERROR: Missing dependencies ->", ", ".join(missing), file=sys.stderr)
        print("Install with:  pip install " + " ".join(missing), file=sys.stderr)
        sys.exit(1)


from genpw.generator import (  # noqa: E402
    GenFlags,
    GenResult,
    Status,
    fill_password,
    generate,
    generate_by_length,
)
from genpw.strength import get_base_length, get_bit_strength  # noqa: E402

__all__ = [
    "__version__",
    "check_dependencies",
    "GenFlags",
    "GenResult",
    "Status",
    "fill_password",
    "generate",
    "generate_by_length",
    "get_base_length",
    "get_bit_strength",
]
