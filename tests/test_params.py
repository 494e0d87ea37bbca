"""Tests for the analysis parameters and defaults."""
import pytest

from supportspots import DEFAULTS, Params


class TestParams:

    def test_defaults_follow_default_config(self):
        params = Params()
        assert params.bridge_distance == DEFAULTS["BRIDGE_DISTANCE"]
        assert params.min_distance_between_support_points == DEFAULTS["MIN_DISTANCE_BETWEEN_SUPPORT_POINTS"]
        assert params.standard_extruder_conflict_force == pytest.approx(20.0 * DEFAULTS["GRAVITY_CONSTANT"])

    def test_from_dict_accepts_any_case(self):
        params = Params.from_dict({"BRIDGE_DISTANCE": "8", "filament_density": 1e-3})
        assert params.bridge_distance == 8.0
        assert params.filament_density == 1e-3

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="Unknown parameter"):
            Params.from_dict({"nozzle_diameter": 0.4})

    @pytest.mark.parametrize("name", ["bridge_distance", "gravity_constant", "filament_density"])
    def test_non_positive_values_raise(self, name):
        with pytest.raises(ValueError):
            Params(**{name: 0.0})

    def test_negative_values_raise(self):
        with pytest.raises(ValueError):
            Params(max_acceleration=-1.0)

    def test_updated_returns_a_copy(self):
        params = Params()
        other = params.updated(bridge_distance=5.0)
        assert other.bridge_distance == 5.0
        assert params.bridge_distance == DEFAULTS["BRIDGE_DISTANCE"]

    def test_params_are_frozen(self):
        with pytest.raises(Exception):
            Params().bridge_distance = 1.0
