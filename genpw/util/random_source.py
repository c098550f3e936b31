"""Uniform integer sources for the password builder."""

from __future__ import annotations

import secrets
from typing import Protocol

UINT8_MAX = 0xFF
UINT32_MAX = 0xFFFF_FFFF


class RandomSource(Protocol):
    """Uniform integers in ``[0, max_inclusive]``."""

    def random_uint8(self, max_inclusive: int) -> int: ...

    def random_uint32(self, max_inclusive: int) -> int: ...


class SystemRandomSource:
    """OS CSPRNG via :mod:`secrets`. Stateless, safe to share across threads."""

    @staticmethod
    def _check(max_inclusive: int, limit: int) -> None:
        if max_inclusive < 0 or max_inclusive > limit:
            raise ValueError(f"max_inclusive must be in [0, {limit}], got {max_inclusive}")

    def random_uint8(self, max_inclusive: int) -> int:
        self._check(max_inclusive, UINT8_MAX)
        return secrets.randbelow(max_inclusive + 1)

    def random_uint32(self, max_inclusive: int) -> int:
        self._check(max_inclusive, UINT32_MAX)
        return secrets.randbelow(max_inclusive + 1)


_DEFAULT_SOURCE = SystemRandomSource()


def default_source() -> SystemRandomSource:
    return _DEFAULT_SOURCE
