"""Tests for threshold configuration loading."""

import json

import pytest

from mixomicsio.config import (
    DEFAULT_THRESHOLDS,
    ConversionThresholds,
    load_config,
    thresholds_from_config,
)


class TestConversionThresholds:

    def test_defaults(self):
        assert DEFAULT_THRESHOLDS.max_missing_fraction == 0.10
        assert DEFAULT_THRESHOLDS.max_levels == 10
        assert DEFAULT_THRESHOLDS.min_group_size == 3
        assert DEFAULT_THRESHOLDS.max_imbalance_ratio == 5.0
        assert DEFAULT_THRESHOLDS.min_observations == 3
        assert DEFAULT_THRESHOLDS.min_features == 2
        assert DEFAULT_THRESHOLDS.min_obs_feature_ratio == 0.1
        assert DEFAULT_THRESHOLDS.high_dimension_features == 100

    @pytest.mark.parametrize("kwargs", [
        {'max_missing_fraction': 1.5},
        {'max_levels': 0},
        {'min_observations': 2.5},
        {'max_imbalance_ratio': 0.5},
        {'min_obs_feature_ratio': -0.1},
    ])
    def test_out_of_range_rejected(self, kwargs):
        with pytest.raises(ValueError):
            ConversionThresholds(**kwargs)


class TestLoadConfig:

    def test_yaml(self, tmp_path):
        path = tmp_path / "conversion.yaml"
        path.write_text("thresholds:\n  max_levels: 20\n  max_missing_fraction: 0.05\n")

        thresholds = thresholds_from_config(load_config(path))

        assert thresholds.max_levels == 20
        assert thresholds.max_missing_fraction == 0.05
        assert thresholds.min_group_size == 3

    def test_json_top_level(self, tmp_path):
        path = tmp_path / "conversion.json"
        path.write_text(json.dumps({'min_group_size': 5}))

        assert thresholds_from_config(load_config(path)).min_group_size == 5

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")

        assert load_config(path) == {}
        assert thresholds_from_config({}) == DEFAULT_THRESHOLDS

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "conversion.toml"
        path.write_text("x = 1")

        with pytest.raises(ValueError, match="Unsupported config format"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("thresholds: [unclosed\n")

        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping_top_level(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ValueError, match="dictionary"):
            load_config(path)

    def test_unknown_threshold(self):
        with pytest.raises(ValueError, match="Unknown threshold.*max_lvls"):
            thresholds_from_config({'thresholds': {'max_lvls': 3}})
