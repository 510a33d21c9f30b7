"""Tests for ether <-> wei conversions and address derivation."""

from __future__ import annotations

import pytest

from nftmarket.core.hasher import derive_address
from nftmarket.core.units import format_units, parse_units


class TestParseUnits:
    def test_whole_ether(self):
        assert parse_units("100") == 100 * 10**18

    def test_fractional_ether(self):
        assert parse_units("0.025") == 25 * 10**15

    def test_custom_decimals(self):
        assert parse_units("1.5", decimals=6) == 1_500_000

    @pytest.mark.parametrize("bad", ["abc", "-1", "1e-19", "nan"])
    def test_invalid(self, bad: str):
        with pytest.raises(ValueError):
            parse_units(bad)


class TestFormatUnits:
    def test_trims_trailing_zeros(self):
        assert format_units(25 * 10**15) == "0.025"
        assert format_units(100 * 10**18) == "100"

    def test_zero(self):
        assert format_units(0) == "0"


class TestDeriveAddress:
    def test_deterministic(self):
        assert derive_address("0xalice", "1") == derive_address("0xalice", "1")

    def test_salt_changes_address(self):
        assert derive_address("0xalice", "1") != derive_address("0xalice", "2")

    def test_shape(self):
        address = derive_address("0xalice", "1")
        assert address.startswith("0x")
        assert len(address) == 42
