"""Shared test fixtures."""

from __future__ import annotations

import logging
import logging.handlers
import string

import pytest


class ScriptedRandom:
    """Random source replaying fixed draws, then zeros; records every call."""

    def __init__(self, values=()):
        self._values = list(values)
        self.calls = []

    def _next(self, kind: str, max_inclusive: int) -> int:
        self.calls.append((kind, max_inclusive))
        value = self._values.pop(0) if self._values else 0
        assert 0 <= value <= max_inclusive, (kind, value, max_inclusive)
        return value

    def random_uint8(self, max_inclusive: int) -> int:
        return self._next("uint8", max_inclusive)

    def random_uint32(self, max_inclusive: int) -> int:
        return self._next("uint32", max_inclusive)


@pytest.fixture
def scripted():
    """Factory for ScriptedRandom sources."""
    return ScriptedRandom


@pytest.fixture(autouse=True)
def reset_log_files():
    """Detach genpw log-file handlers so each test logs to its own directory."""

    def _detach():
        logger = logging.getLogger("genpw")
        for handler in list(logger.handlers):
            if isinstance(handler, logging.handlers.RotatingFileHandler):
                logger.removeHandler(handler)
                handler.close()

    _detach()
    yield
    _detach()


@pytest.fixture
def data_dir(tmp_path):
    """A temporary data directory for config.ini and logs."""
    path = tmp_path / "genpw_data"
    path.mkdir()
    return path


def assert_well_formed(password: str, base_length: int, flags: int = 0) -> None:
    """Check every structural property of a generated password."""
    from genpw.generator import GenFlags

    if flags & GenFlags.NEED_SYMBOL:
        assert len(password) == base_length + 1
        assert password[-1] == "!"
        base = password[:-1]
    else:
        assert len(password) == base_length
        base = password

    assert all(c in string.ascii_letters + string.digits for c in base)

    letters = [c for c in base if c.isalpha()]
    digits = [c for c in base if c.isdigit()]
    assert len(set(c.lower() for c in letters)) == len(letters)
    assert len(set(digits)) == len(digits)

    positions = [i for i, c in enumerate(base) if c.isdigit()]
    assert positions[-1] - positions[0] + 1 != len(positions), base

    uppers = [i for i, c in enumerate(base) if c.isupper()]
    if flags & GenFlags.NEED_UPPERCASE:
        first_letter = next(i for i, c in enumerate(base) if c.isalpha())
        assert uppers == [first_letter]
    else:
        assert uppers == []
