"""Tests for the bit strength / base length mapping."""

from __future__ import annotations

from fractions import Fraction
from math import comb, perm

import pytest

from genpw.strength import (
    BIT_STRENGTHS,
    EXTRA_CHAR_MAX,
    EXTRA_LETTER,
    FULL_RANGE_TARGETS,
    TARGETS,
    exact_bit_strength,
    extra_letter_odds,
    get_base_length,
    get_bit_strength,
    key_space,
    split_counts,
)

ALL_LENGTHS = range(8, 37)


class TestGetBitStrength:
    def test_table_shape(self):
        assert len(BIT_STRENGTHS) == 29
        assert len(FULL_RANGE_TARGETS) == 28
        assert len(EXTRA_LETTER) == len(EXTRA_CHAR_MAX) == 28

    def test_known_values(self):
        assert get_bit_strength(8) == 39.1200670699161
        assert get_bit_strength(17) == 80.4365604507374
        assert get_bit_strength(30) == 128.052654673660
        assert get_bit_strength(36) == 138.094328478112

    def test_monotonic(self):
        values = [get_bit_strength(n) for n in ALL_LENGTHS]
        assert values == sorted(values)

    @pytest.mark.parametrize("base_length", [-1, 0, 7, 37, 100])
    def test_out_of_range_is_zero(self, base_length):
        assert get_bit_strength(base_length) == 0.0

    @pytest.mark.parametrize("base_length", ALL_LENGTHS)
    def test_matches_key_space(self, base_length):
        assert exact_bit_strength(base_length) == pytest.approx(
            get_bit_strength(base_length), abs=1e-9
        )

    def test_full_range_targets_are_floors(self):
        for i, bits in enumerate(FULL_RANGE_TARGETS):
            assert bits == int(BIT_STRENGTHS[i])


class TestGetBaseLength:
    @pytest.mark.parametrize("bits,length", TARGETS)
    def test_exact_targets(self, bits, length):
        assert get_base_length(bits) == length

    def test_targets_strictly_increasing(self):
        assert [b for b, _ in TARGETS] == sorted({b for b, _ in TARGETS})
        assert [n for _, n in TARGETS] == sorted({n for _, n in TARGETS})

    @pytest.mark.parametrize("bits,length", TARGETS)
    def test_target_lengths_deliver_target(self, bits, length):
        assert get_bit_strength(length) >= bits

    @pytest.mark.parametrize(
        "bits,length",
        [(0, 10), (1, 10), (49, 12), (56, 12), (64, 14), (72, 16), (77, 17),
         (81, 21), (97, 22), (101, 30), (127, 30)],
    )  # fmt: skip
    def test_between_targets_rounds_up(self, bits, length):
        assert get_base_length(bits) == length

    @pytest.mark.parametrize("bits", [-1, 129, 138, 1000])
    def test_out_of_range_is_zero(self, bits):
        assert get_base_length(bits) == 0

    def test_full_range(self):
        assert get_base_length(0, full_range=True) == 8
        assert get_base_length(39, full_range=True) == 8
        assert get_base_length(40, full_range=True) == 9
        assert get_base_length(128, full_range=True) == 30
        assert get_base_length(137, full_range=True) == 35
        assert get_base_length(138, full_range=True) == 35
        assert get_base_length(139, full_range=True) == 0

    def test_full_range_exact_hits(self):
        for i, bits in enumerate(FULL_RANGE_TARGETS[:-1]):
            assert get_base_length(bits, full_range=True) == i + 8


class TestSplit:
    def test_ten_point_one_two_five_ratio(self):
        assert split_counts(10) == (2, 7)
        assert split_counts(24) == (6, 17)
        # lengths that gain a digit over a plain 10/36 split
        assert split_counts(25) == (7, 17)
        assert split_counts(32) == (9, 22)
        assert split_counts(36) == (10, 25)

    @pytest.mark.parametrize("base_length", [7, 37])
    def test_out_of_range_raises(self, base_length):
        with pytest.raises(ValueError):
            split_counts(base_length)

    def test_key_space_invalid(self):
        assert key_space(7) == 0
        assert exact_bit_strength(37) == 0.0


class TestExtraLetterOdds:
    @pytest.mark.parametrize("base_length", range(8, 36))
    def test_table_matches_calculation(self, base_length):
        table = extra_letter_odds(base_length)
        calculated = extra_letter_odds(base_length, calculate=True)
        assert table == calculated

    @pytest.mark.parametrize("base_length", range(8, 36))
    def test_odds_match_key_space_terms(self, base_length):
        letter, total = extra_letter_odds(base_length)
        digits, letters = split_counts(base_length)
        # letter-extra share of the key space
        extra_letter = (
            perm(26, letters + 1)
            * perm(10, digits)
            * (comb(base_length, digits) - (letters + 2))
        )
        assert Fraction(letter, total) == Fraction(extra_letter, key_space(base_length))

    def test_small_lengths(self):
        assert extra_letter_odds(8) == (441, 841)
        assert extra_letter_odds(9) == (10, 21)

    @pytest.mark.parametrize("base_length", [7, 36])
    def test_no_odds(self, base_length):
        with pytest.raises(ValueError):
            extra_letter_odds(base_length)
        with pytest.raises(ValueError):
            extra_letter_odds(base_length, calculate=True)
