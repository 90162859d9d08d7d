"""Tests for cscv.config: CSCVConfig validation, YAML loading, overrides."""

from __future__ import annotations

import logging

import pytest

from cscv.config import CSCVConfig, load_config, merge_overrides


# ===================================================================
# CSCVConfig
# ===================================================================

class TestCSCVConfig:
    def test_defaults(self):
        c = CSCVConfig()
        assert c.n_blocks == 16
        assert c.metric == "sharpe"
        assert c.max_combinations == 1_000_000
        assert c.n_workers == 1
        assert c.backend == "thread"

    @pytest.mark.parametrize("n_blocks", [0, 1, 3, 15])
    def test_invalid_n_blocks(self, n_blocks):
        with pytest.raises(ValueError, match="n_blocks"):
            CSCVConfig(n_blocks=n_blocks)

    def test_invalid_metric(self):
        with pytest.raises(ValueError, match="metric"):
            CSCVConfig(metric="calmar")

    def test_custom_metric_allowed(self):
        assert CSCVConfig(metric="custom").metric == "custom"

    def test_invalid_ceiling(self):
        with pytest.raises(ValueError, match="max_combinations"):
            CSCVConfig(max_combinations=0)

    def test_invalid_workers(self):
        with pytest.raises(ValueError, match="n_workers"):
            CSCVConfig(n_workers=-2)

    def test_invalid_backend(self):
        with pytest.raises(ValueError, match="backend"):
            CSCVConfig(backend="dask")

    def test_frozen(self):
        c = CSCVConfig()
        with pytest.raises(AttributeError):
            c.n_blocks = 8


# ===================================================================
# YAML loading
# ===================================================================

class TestLoadConfig:
    def test_bundled_defaults(self):
        assert load_config() == CSCVConfig()

    def test_custom_file(self, tmp_path):
        p = tmp_path / "cscv.yml"
        p.write_text("n_blocks: 8\nmetric: mean\nn_workers: 0\n", encoding="utf-8")
        c = load_config(p)
        assert c.n_blocks == 8
        assert c.metric == "mean"
        assert c.n_workers == 0
        assert c.backend == "thread"

    def test_unknown_keys_ignored(self, tmp_path, caplog):
        p = tmp_path / "cscv.yml"
        p.write_text("n_blocks: 4\nshuffle: true\n", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="cscv.config"):
            c = load_config(p)
        assert c.n_blocks == 4
        assert "shuffle" in caplog.text

    def test_empty_file(self, tmp_path):
        p = tmp_path / "empty.yml"
        p.write_text("", encoding="utf-8")
        assert load_config(p) == CSCVConfig()

    def test_invalid_value_rejected(self, tmp_path):
        p = tmp_path / "bad.yml"
        p.write_text("n_blocks: 5\n", encoding="utf-8")
        with pytest.raises(ValueError, match="n_blocks"):
            load_config(p)


# ===================================================================
# Overrides
# ===================================================================

class TestMergeOverrides:
    def test_no_overrides(self):
        base = CSCVConfig()
        assert merge_overrides(base, None) is base
        assert merge_overrides(base, {}) is base

    def test_known_fields_applied(self, caplog):
        with caplog.at_level(logging.INFO, logger="cscv.config"):
            c = merge_overrides(CSCVConfig(), {"n_blocks": 4, "metric": "mean"})
        assert c.n_blocks == 4
        assert c.metric == "mean"
        assert "n_blocks=4" in caplog.text

    def test_none_values_skipped(self):
        c = merge_overrides(CSCVConfig(n_blocks=8), {"n_blocks": None, "backend": "process"})
        assert c.n_blocks == 8
        assert c.backend == "process"

    def test_unknown_fields_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="cscv.config"):
            c = merge_overrides(CSCVConfig(), {"seed": 42})
        assert c == CSCVConfig()
        assert "seed" in caplog.text

    def test_nothing_applicable_returns_base(self):
        base = CSCVConfig(n_blocks=8)
        assert merge_overrides(base, {"n_blocks": None, "metric": None}) is base
        assert merge_overrides(base, {"seed": 1}) is base

    def test_invalid_override_rejected(self):
        with pytest.raises(ValueError, match="n_blocks"):
            merge_overrides(CSCVConfig(), {"n_blocks": 5})

    def test_base_not_mutated(self):
        base = CSCVConfig()
        merge_overrides(base, {"n_blocks": 4})
        assert base.n_blocks == 16
