# SPDX-License-Identifier: Apache-2.0
"""Tests for zbench_utils.config module."""

import pytest

from zbench_utils.config import (
    CompressConfig,
    DecompressConfig,
    GenerateConfig,
    Settings,
    TrainConfig,
    build_config,
    reload_settings,
)
from zbench_utils.validation import ValidationError


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ZBENCH_PUSHGATEWAY_URL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.pushgateway_url == "http://localhost:9091"
        assert settings.log_level == "INFO"
        assert settings.log_format == "json"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("ZBENCH_PUSHGATEWAY_URL", "http://gateway:9091")
        monkeypatch.setenv("ZBENCH_LOG_LEVEL", "debug")
        try:
            settings = reload_settings()
            assert settings.pushgateway_url == "http://gateway:9091"
            assert settings.log_level == "DEBUG"
        finally:
            monkeypatch.undo()
            reload_settings()

    def test_reject_bad_log_format(self):
        with pytest.raises(Exception, match="Log format"):
            Settings(_env_file=None, log_format="xml")


class TestBuildConfig:
    def test_none_values_use_defaults(self):
        config = build_config(TrainConfig, input_dir="data", out_file=None)
        assert config.input_dir == "data"
        assert config.dict_size == 128 * 1024
        assert config.max_samples == 1000
        assert config.max_sample_bytes == 32 * 1024
        assert config.out_file is None

    def test_blank_out_file_is_none(self):
        assert build_config(TrainConfig, out_file="  ").out_file is None

    @pytest.mark.parametrize(
        "field,flag",
        [("dict_size", "dict-size"), ("max_samples", "max-samples"), ("max_sample_bytes", "max-sample-bytes")],
    )
    def test_train_rejects_non_positive(self, field, flag):
        with pytest.raises(ValidationError, match=f"{flag} must be positive"):
            build_config(TrainConfig, **{field: 0})

    def test_generate_normalizes_type(self):
        config = build_config(GenerateConfig, record_type=" People", count=5)
        assert config.record_type == "people"
        assert config.out_dir == "output"

    def test_generate_rejects_unknown_type(self):
        with pytest.raises(ValidationError, match="unknown type"):
            build_config(GenerateConfig, record_type="cars", count=5)

    def test_compress_requires_dict_path(self):
        with pytest.raises(ValidationError, match="-dict is required"):
            build_config(CompressConfig, use_dict=True)

    def test_compress_level_range(self):
        assert build_config(CompressConfig, level=19).level == 19
        with pytest.raises(ValidationError, match="between 0 and 22"):
            build_config(CompressConfig, level=30)

    def test_decompress_config(self):
        config = build_config(DecompressConfig, run_id="r1", use_dict=True, dict_path=" d.zdict ")
        assert config.dict_path == "d.zdict"
        assert config.on_missing_suffix == "error"
        assert config.input_dir == "compressed"

    def test_decompress_rejects_unknown_policy(self):
        with pytest.raises(ValidationError, match="on-missing-suffix"):
            build_config(DecompressConfig, run_id="r1", on_missing_suffix="ignore")

    def test_configs_are_frozen(self):
        config = build_config(CompressConfig)
        with pytest.raises(Exception):
            config.level = 5
