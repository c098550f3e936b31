"""Bit strength <-> base length mapping and the key-space arithmetic behind it.

A generated base password of length ``n`` (8..36) holds ``d`` digits and
``l`` lowercase letters, where ``d = (10*n + n//8) // 36`` and
``l = n - d - 1``, plus one extra character that is either a letter or a
digit. Characters never repeat and the digits are never all adjacent, so the
number of producible passwords is::

    P(26, l+1) * P(10, d)   * (C(n, d)   - (l+2))    # extra is a letter
  + P(26, l)   * P(10, d+1) * (C(n, d+1) - (l+1))    # extra is a digit

The ``C(n, k) - (n-k+1)`` factors count digit placements that are not one
contiguous block. Length 36 uses the whole alphabet and all ten digits, so
there is only the first term with ``l = 26``, ``d = 10``.

The 10.125/36 digit ratio (instead of 10/36) puts one more digit into
lengths 25 and 32, growing their key space by 0.7617% and 0.8001%.
"""

from __future__ import annotations

import bisect
import logging
import math
from typing import Tuple

logger = logging.getLogger("genpw.strength")

MIN_BASE_LENGTH = 8
MAX_BASE_LENGTH = 36

NUM_LETTERS = 26
NUM_DIGITS = 10

# log2(key_space(n)) for n = 8..36, accurate to 15 significant figures.
BIT_STRENGTHS: Tuple[float, ...] = (
    39.1200670699161, 43.9960948472761, 48.7440594403916, 53.4676318261445,
    58.1764480484353, 62.7665238278741, 67.2404445074635, 71.7042336853753,
    76.1312709240191, 80.4365604507374, 84.6200519662894, 88.8587015762423,
    92.9647168662745, 96.9323853082289, 100.856654071890, 104.721219076432,
    108.426520544345, 111.970933247131, 115.534965175914, 118.907050614862,
    122.065883975916, 125.129460745934, 128.052654673660, 130.687036809517,
    132.984838512222, 135.221877995274, 136.987412956791, 138.094328330543,
    138.094328478112,
)  # fmt: skip

# Suggested menu: 48, 56, 64, 72, 80, 96, 100 and 128 bits. The stored
# strengths are the floors of what the paired lengths actually deliver
# (48.74, 58.18, 67.24, 76.13, 80.44, 96.93, 100.86, 128.05).
TARGETS: Tuple[Tuple[int, int], ...] = (
    (48, 10),
    (58, 12),
    (67, 14),
    (76, 16),
    (80, 17),
    (96, 21),
    (100, 22),
    (128, 30),
)

# One entry per base length 8..35, floor(BIT_STRENGTHS[i]).
FULL_RANGE_TARGETS: Tuple[int, ...] = (
    39, 43, 48, 53, 58, 62, 67, 71, 76, 80, 84, 88, 92, 96,
    100, 104, 108, 111, 115, 118, 122, 125, 128, 130, 132, 135, 136, 138,
)  # fmt: skip

# Odds that the extra character is a letter, for n = 8..35:
# EXTRA_LETTER[n-8] / (EXTRA_CHAR_MAX[n-8] + 1). These are the exact
# probabilities reduced to lowest terms, small enough for 32-bit draws.
EXTRA_LETTER: Tuple[int, ...] = (
    441, 10, 171, 1482, 10, 935, 256, 41, 9035, 1274, 9212, 1659, 61952, 55913,
    205139, 5937, 44859, 160227, 5770, 2072021, 592009, 4292123, 1330205,
    342987, 696864, 38567075, 20980492, 5431341,
)  # fmt: skip
EXTRA_CHAR_MAX: Tuple[int, ...] = (
    840, 20, 394, 2608, 18, 1921, 570, 74, 17746, 2698, 16346, 3148, 126526,
    123722, 375666, 11704, 96130, 280399, 10908, 4292075, 1369029, 7630450,
    2630852, 781248, 1097560, 69420746, 47206114, 19552830,
)  # fmt: skip


def is_valid_base_length(base_length: int) -> bool:
    return MIN_BASE_LENGTH <= base_length <= MAX_BASE_LENGTH


# ============================================================================
#  Mapping
# ============================================================================
def get_bit_strength(base_length: int) -> float:
    """Return the bit strength of passwords with *base_length* characters.

    Returns 0.0 when *base_length* is outside 8..36.
    """
    if not is_valid_base_length(base_length):
        return 0.0
    return BIT_STRENGTHS[base_length - MIN_BASE_LENGTH]


def get_base_length(bit_strength: int, full_range: bool = False) -> int:
    """Return the base length that delivers at least *bit_strength* bits.

    In the default mode *bit_strength* is rounded up to one of the eight
    suggested targets; callers should present those targets (48, 56, 64, 72,
    80, 96, 100, 128) rather than the exact strengths. ``full_range`` maps
    onto every base length 8..35 instead.

    Returns 0 when *bit_strength* is negative or above the largest target.
    """
    if full_range:
        strengths = FULL_RANGE_TARGETS
    else:
        strengths = tuple(bits for bits, _ in TARGETS)

    if bit_strength < 0 or bit_strength > strengths[-1]:
        return 0

    # The search stops short of the last entry: anything past the
    # second-to-last target lands on the last one.
    index = bisect.bisect_left(strengths, bit_strength, 0, len(strengths) - 1)

    if full_range:
        return index + MIN_BASE_LENGTH
    return TARGETS[index][1]


# ============================================================================
#  Combinatorics
# ============================================================================
def split_counts(base_length: int) -> Tuple[int, int]:
    """Return ``(num_digits, num_letters)`` before the extra character."""
    if not is_valid_base_length(base_length):
        raise ValueError(f"Base length must be in [8, 36], got {base_length}")
    num_digits = (10 * base_length + base_length // 8) // 36
    num_letters = base_length - num_digits - 1
    return num_digits, num_letters


def _noncontiguous_placements(length: int, digits: int) -> int:
    # all digit position sets minus the (length - digits + 1) single blocks
    return math.comb(length, digits) - (length - digits + 1)


def key_space(base_length: int) -> int:
    """Exact number of distinct base passwords of *base_length* (0 if invalid)."""
    if not is_valid_base_length(base_length):
        return 0
    digits, letters = split_counts(base_length)
    extra_letter = (
        math.perm(NUM_LETTERS, letters + 1)
        * math.perm(NUM_DIGITS, digits)
        * _noncontiguous_placements(base_length, digits)
    )
    if base_length == MAX_BASE_LENGTH:
        return extra_letter
    extra_digit = (
        math.perm(NUM_LETTERS, letters)
        * math.perm(NUM_DIGITS, digits + 1)
        * _noncontiguous_placements(base_length, digits + 1)
    )
    return extra_letter + extra_digit


def exact_bit_strength(base_length: int) -> float:
    space = key_space(base_length)
    if space == 0:
        return 0.0
    return math.log2(space)


def extra_letter_odds(base_length: int, calculate: bool = False) -> Tuple[int, int]:
    """Return ``(letter, total)``: the extra character is a letter when a
    uniform draw from ``[0, total - 1]`` is below ``letter``.

    With ``calculate`` the odds are derived from the key-space terms instead
    of read from the table. Dividing both terms by
    ``P(26, l) * P(10, d) * (26 - l) * (10 - d)`` leaves

        x = (26 - l) * (C(n, d)   - (l+2))
        y = (10 - d) * (C(n, d+1) - (l+1))

    and ``x / (x + y)`` reduced to lowest terms equals the table entry.
    """
    if not MIN_BASE_LENGTH <= base_length < MAX_BASE_LENGTH:
        raise ValueError(f"No extra-character odds for base length {base_length}")

    if not calculate:
        index = base_length - MIN_BASE_LENGTH
        return EXTRA_LETTER[index], EXTRA_CHAR_MAX[index] + 1

    digits, letters = split_counts(base_length)
    x = (NUM_LETTERS - letters) * _noncontiguous_placements(base_length, digits)
    y = (NUM_DIGITS - digits) * _noncontiguous_placements(base_length, digits + 1)
    divisor = math.gcd(x, y)
    return x // divisor, (x + y) // divisor
