"""Scratch-memory hygiene: secure_wipe and SecureBuffer."""

from __future__ import annotations

import ctypes
import logging
import platform
import secrets
from typing import Union

logger = logging.getLogger("genpw.memory")


# ---------------------------------------------------------------------------
#  secure_wipe
# ---------------------------------------------------------------------------
def secure_wipe(buf: bytearray) -> None:
    """Zero *buf* in place through its raw address.

    The write goes through ``ctypes.memset`` so it lands in the buffer the
    caller owns rather than in a rebound copy.
    """
    size = len(buf)
    if size == 0:
        return
    view = ctypes.c_char.from_buffer(buf)
    try:
        ctypes.memset(ctypes.addressof(view), 0, size)
    finally:
        del view


# ---------------------------------------------------------------------------
#  SecureBuffer
# ---------------------------------------------------------------------------
class SecureBuffer:
    """Fixed-size mutable buffer kept in locked (non-swappable) memory.

    Used for short-lived scratch state such as the character pools of the
    password builder. ``clear()`` overwrites the contents with several
    patterns, zeroes them with :func:`secure_wipe` and unlocks the pages.
    """

    def __init__(self, data: Union[bytes, bytearray, str]):
        if isinstance(data, str):
            data = data.encode("ascii")
        self._size = len(data)
        self._data = bytearray(data)
        self._locked = False
        self._protect_memory()

    # -- memory protection --------------------------------------------------
    def _protect_memory(self) -> None:
        if self._size == 0:
            return
        try:
            address = ctypes.addressof(ctypes.c_char.from_buffer(self._data))
            if platform.system() == "Windows":
                kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
                if kernel32.VirtualLock(
                    ctypes.c_void_p(address), ctypes.c_size_t(self._size)
                ):
                    self._locked = True
            else:
                libc = ctypes.CDLL(None)
                if (
                    libc.mlock(ctypes.c_void_p(address), ctypes.c_size_t(self._size))
                    == 0
                ):
                    self._locked = True
        except Exception as exc:
            logger.debug("Memory locking unavailable: %s", exc)

    def _unlock_memory(self) -> None:
        try:
            address = ctypes.addressof(ctypes.c_char.from_buffer(self._data))
            if platform.system() == "Windows":
                k32 = ctypes.WinDLL("kernel32", use_last_error=True)
                k32.VirtualUnlock(ctypes.c_void_p(address), ctypes.c_size_t(self._size))
            else:
                libc = ctypes.CDLL(None)
                libc.munlock(ctypes.c_void_p(address), ctypes.c_size_t(self._size))
        except Exception as exc:
            logger.debug("Memory unlock failed: %s", exc)

    # -- item access --------------------------------------------------------
    def __getitem__(self, index: int) -> int:
        if self._size == 0:
            raise ValueError("Buffer already cleared")
        return self._data[index]

    def __setitem__(self, index: int, value: int) -> None:
        if self._size == 0:
            raise ValueError("Buffer already cleared")
        self._data[index] = value

    def __len__(self) -> int:
        return self._size

    def get_bytes(self) -> bytes:
        if self._size == 0:
            raise ValueError("Buffer already cleared")
        return bytes(self._data)

    # -- wiping -------------------------------------------------------------
    def clear(self) -> None:
        if self._size == 0:
            return
        try:
            patterns = [
                bytes([0xFF] * self._size),
                bytes([0x55] * self._size),
                bytes([0xAA] * self._size),
                secrets.token_bytes(self._size),
            ]
            for pat in patterns:
                self._data[:] = pat
            secure_wipe(self._data)
            if self._locked:
                self._unlock_memory()
        finally:
            self._size = 0
            self._locked = False

    def __enter__(self) -> "SecureBuffer":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.clear()

    def __del__(self):
        if getattr(self, "_size", 0):
            self.clear()

    def __repr__(self) -> str:
        return f"<SecureBuffer {self._size} bytes>"

    @property
    def is_cleared(self) -> bool:
        return self._size == 0

    @property
    def is_protected(self) -> bool:
        return self._locked
