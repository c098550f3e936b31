"""Password builder: unique lowercase letters and digits, shuffled so the
digits never form a single block, with optional uppercase/symbol flags."""

from __future__ import annotations

import enum
import logging
import string
from typing import NamedTuple, Optional, Tuple

from genpw.config import Config
from genpw.strength import (
    MAX_BASE_LENGTH,
    extra_letter_odds,
    get_base_length,
    is_valid_base_length,
    split_counts,
)
from genpw.util.memory import SecureBuffer, secure_wipe
from genpw.util.random_source import RandomSource, default_source

logger = logging.getLogger("genpw.generator")

LETTERS = string.ascii_lowercase.encode("ascii")
DIGITS = string.digits.encode("ascii")
SYMBOL = ord("!")

BUFFER_SIZE = Config.BUFFER_SIZE

_LAST_DIGIT = ord("9")
_FIRST_LOWER = ord("a")
_CASE_OFFSET = ord("a") - ord("A")


class GenFlags(enum.IntFlag):
    NONE = 0
    NEED_UPPERCASE = 1
    NEED_SYMBOL = 2


class Status(enum.IntEnum):
    OK = 0
    INVALID_RANGE = 1


class GenResult(NamedTuple):
    password: str
    status: Status

    @property
    def ok(self) -> bool:
        return self.status is Status.OK


# ============================================================================
#  CharacterPool
# ============================================================================
class CharacterPool(SecureBuffer):
    """Alphabet sampled without replacement.

    Each draw picks a slot in ``[0, max]``, returns its character, swaps it
    with the slot at ``max`` and shrinks ``max`` by one.
    """

    def __init__(self, alphabet: bytes):
        super().__init__(alphabet)
        self._max = len(alphabet) - 1

    @property
    def remaining(self) -> int:
        return self._max + 1

    def draw(self, rng: RandomSource) -> int:
        if self._max < 0:
            raise ValueError("Character pool exhausted")
        j = rng.random_uint8(self._max)
        char = self[j]
        self[j] = self[self._max]
        self[self._max] = char
        self._max -= 1
        return char


# ============================================================================
#  Builder steps
# ============================================================================
def _choose_split(
    base_length: int, rng: RandomSource, calculate_probability: bool
) -> Tuple[int, int]:
    num_digits, num_letters = split_counts(base_length)
    if base_length == MAX_BASE_LENGTH:
        # whole alphabet and all ten digits
        return num_digits, num_letters + 1

    letter, total = extra_letter_odds(base_length, calculate=calculate_probability)
    if rng.random_uint32(total - 1) < letter:
        num_letters += 1
    else:
        num_digits += 1
    return num_digits, num_letters


def _shuffle(buffer: bytearray, length: int, rng: RandomSource) -> None:
    # Every position swaps with a partner drawn from the whole range.
    for i in range(length):
        j = rng.random_uint8(length - 1)
        if i != j:
            tmp = buffer[i]
            buffer[i] = buffer[j]
            buffer[j] = tmp


def _last_digit_run(buffer: bytearray, length: int) -> int:
    """Length of the right-most block of consecutive digits."""
    run = 0
    previous_is_digit = False
    for i in range(length):
        is_digit = buffer[i] <= _LAST_DIGIT
        if is_digit:
            if not previous_is_digit:
                run = 0
            run += 1
        previous_is_digit = is_digit
    return run


def _uppercase_first_letter(buffer: bytearray, length: int) -> None:
    for i in range(length):
        if buffer[i] >= _FIRST_LOWER:
            buffer[i] -= _CASE_OFFSET
            return


# ============================================================================
#  Public API
# ============================================================================
def fill_password(
    buffer: bytearray,
    base_length: int,
    flags: int = 0,
    rng: Optional[RandomSource] = None,
    calculate_probability: bool = False,
) -> Status:
    """Write a NUL-terminated password of *base_length* characters into *buffer*.

    *buffer* must hold at least ``base_length + 2`` bytes (``BUFFER_SIZE``
    fits every length). ``NEED_SYMBOL`` adds a trailing ``!`` and
    ``NEED_UPPERCASE`` uppercases the leftmost letter.

    Returns ``Status.INVALID_RANGE`` without touching *buffer* when
    *base_length* is outside 8..36.
    """
    if not is_valid_base_length(base_length):
        logger.debug("Rejected base length %d", base_length)
        return Status.INVALID_RANGE
    if len(buffer) < base_length + 2:
        raise ValueError(
            f"Password buffer too small: {len(buffer)} bytes, "
            f"need {base_length + 2}"
        )
    if rng is None:
        rng = default_source()

    num_digits, num_letters = _choose_split(base_length, rng, calculate_probability)

    with CharacterPool(LETTERS) as letters:
        for i in range(num_letters):
            buffer[i] = letters.draw(rng)
    with CharacterPool(DIGITS) as digits:
        for i in range(num_digits):
            buffer[num_letters + i] = digits.draw(rng)
    buffer[base_length] = 0

    shuffles = 0
    while True:
        _shuffle(buffer, base_length, rng)
        shuffles += 1
        if _last_digit_run(buffer, base_length) != num_digits:
            break

    logger.debug(
        "Built base password: %d letters, %d digits, %d shuffle(s)",
        num_letters,
        num_digits,
        shuffles,
    )

    if flags & GenFlags.NEED_UPPERCASE:
        _uppercase_first_letter(buffer, base_length)
    if flags & GenFlags.NEED_SYMBOL:
        buffer[base_length] = SYMBOL
        buffer[base_length + 1] = 0

    return Status.OK


def generate_by_length(
    base_length: int,
    flags: int = 0,
    rng: Optional[RandomSource] = None,
    calculate_probability: bool = False,
) -> GenResult:
    """Generate a password with *base_length* base characters."""
    buffer = bytearray(BUFFER_SIZE)
    try:
        status = fill_password(
            buffer,
            base_length,
            flags,
            rng=rng,
            calculate_probability=calculate_probability,
        )
        if status is not Status.OK:
            return GenResult("", status)
        end = buffer.index(0)
        with memoryview(buffer) as view:
            password = str(view[:end], "ascii")
        return GenResult(password, Status.OK)
    finally:
        secure_wipe(buffer)


def generate(
    bit_strength: int,
    flags: int = 0,
    rng: Optional[RandomSource] = None,
    full_range: bool = False,
    calculate_probability: bool = False,
) -> GenResult:
    """Generate a password of at least *bit_strength* bits (128 at most)."""
    base_length = get_base_length(bit_strength, full_range=full_range)
    if base_length == 0:
        logger.debug("Rejected bit strength %d", bit_strength)
        return GenResult("", Status.INVALID_RANGE)
    return generate_by_length(
        base_length, flags, rng=rng, calculate_probability=calculate_probability
    )
