"""Tests for hardware profiles."""

from __future__ import annotations

import pytest

from rupower.energy import OPTION_NAMES, PROFILES, HardwareProfile, get_profile
from rupower.exceptions import ConfigurationError


class TestHardwareProfile:
    """Tests for HardwareProfile validation and conversion."""

    def test_default_profile(self):
        """Test the default hardware profile."""
        profile = HardwareProfile()

        assert profile.eta_pa == 0.3
        assert profile.num_trx == 64
        assert profile.vdc == 48.0
        assert profile.losses_in_sleep is False

    @pytest.mark.parametrize(
        "field, value",
        [
            ("eta_pa", 0.0),
            ("eta_pa", -0.2),
            ("eta_pa", 1.2),
            ("delta_af", 1.0),
            ("delta_dc", 1.5),
            ("delta_ms", -0.01),
            ("delta_cool", 1.0),
            ("vdc", 0.0),
            ("vdc", -48.0),
            ("fixed_overhead_w", -1.0),
            ("mmwave_overhead_w", -1.0),
            ("sleep_power_w", -0.5),
            ("num_trx", -1),
            ("num_trx", 2.5),
            ("num_trx", True),
            ("sleep_threshold_dbm", float("nan")),
            ("vdc", float("inf")),
            ("losses_in_sleep", "yes"),
        ],
    )
    def test_rejects_out_of_domain(self, field, value):
        """Test that out-of-domain parameter values are rejected."""
        with pytest.raises(ConfigurationError):
            HardwareProfile(**{field: value})

    def test_configuration_error_is_value_error(self):
        """Test that configuration errors are ValueErrors."""
        with pytest.raises(ValueError):
            HardwareProfile(eta_pa=0.0)

    def test_boundary_values_accepted(self):
        """Test parameter values on the edge of their domain."""
        profile = HardwareProfile(
            eta_pa=1.0,
            delta_af=0.0,
            fixed_overhead_w=0.0,
            sleep_power_w=0.0,
            sleep_threshold_dbm=-200.0,
        )
        assert profile.eta_pa == 1.0

    def test_zero_trx_is_degenerate_but_valid(self):
        """Test that zero transceivers is accepted."""
        profile = HardwareProfile(num_trx=0)
        assert profile.num_trx == 0

    def test_frozen(self):
        """Test that profiles are immutable."""
        profile = HardwareProfile()
        with pytest.raises(AttributeError):
            profile.eta_pa = 0.5

    def test_with_changes_revalidates(self):
        """Test that derived profiles are validated again."""
        profile = HardwareProfile()

        updated = profile.with_changes(eta_pa=0.4, num_trx=32)
        assert updated.eta_pa == 0.4
        assert updated.num_trx == 32
        assert profile.eta_pa == 0.3

        with pytest.raises(ConfigurationError):
            profile.with_changes(delta_dc=1.0)
        with pytest.raises(ConfigurationError):
            profile.with_changes(not_a_field=1.0)

    def test_supply_chain_factor(self):
        """Test the combined supply-chain efficiency."""
        profile = HardwareProfile(delta_dc=0.1, delta_ms=0.2, delta_cool=0.5)
        assert profile.supply_chain_factor == pytest.approx(1 / (0.9 * 0.8 * 0.5))

    def test_from_dict_option_names(self):
        """Test creating a profile from option names."""
        profile = HardwareProfile.from_dict(
            {"EtaPA": 0.25, "NumTrx": 8, "Vdc": 54.0, "LossesInSleep": True}
        )

        assert profile.eta_pa == 0.25
        assert profile.num_trx == 8
        assert profile.vdc == 54.0
        assert profile.losses_in_sleep is True
        assert profile.fixed_overhead_w == 80.0

    def test_from_dict_field_names(self):
        """Test creating a profile from field names."""
        profile = HardwareProfile.from_dict({"eta_pa": 0.5, "delta_cool": 0.0})
        assert profile.eta_pa == 0.5
        assert profile.delta_cool == 0.0

    def test_from_dict_unknown_or_duplicate_key(self):
        """Test unknown and duplicated keys."""
        with pytest.raises(ConfigurationError):
            HardwareProfile.from_dict({"EtaPa": 0.3})
        with pytest.raises(ConfigurationError):
            HardwareProfile.from_dict({"EtaPA": 0.3, "eta_pa": 0.4})

    def test_from_dict_rejects_invalid_values(self):
        """Test invalid values given through a dictionary."""
        with pytest.raises(ConfigurationError):
            HardwareProfile.from_dict({"DeltaMS": 1.0})

    def test_to_dict(self):
        """Test profile serialization."""
        profile = HardwareProfile(num_trx=4)

        by_field = profile.to_dict()
        assert by_field["num_trx"] == 4

        by_option = profile.to_dict(option_names=True)
        assert set(by_option) == set(OPTION_NAMES)
        assert by_option["NumTrx"] == 4
        assert HardwareProfile.from_dict(by_option) == profile


class TestNamedProfiles:
    """Tests for the predefined profiles."""

    def test_profiles_are_valid(self):
        """Test that every named profile validates."""
        for profile in PROFILES.values():
            assert isinstance(profile, HardwareProfile)

    def test_get_profile_case_insensitive(self):
        """Test profile lookup ignoring case."""
        assert get_profile("Small_Cell") is PROFILES["small_cell"]

    def test_get_unknown_profile(self):
        """Test looking up an unknown profile name."""
        with pytest.raises(KeyError):
            get_profile("pico")
