# SPDX-License-Identifier: Apache-2.0
"""
Configuration management module for the zstd benchmark tools.

Two layers:

* ``Settings``: process-wide defaults from the environment (``ZBENCH_``
  prefix, optional ``.env`` file) such as the Pushgateway URL and logging.
* Per-tool run configs (``GenerateConfig``, ``TrainConfig``,
  ``CompressConfig``, ``DecompressConfig``): fully-resolved parameters the
  pipelines run with. Flags, prompts and environment are merged before one
  of these is built; the pipelines never look anywhere else.

Example:
    >>> from zbench_utils.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.pushgateway_url)
    http://localhost:9091
"""

from functools import lru_cache
from typing import Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .validation import InputValidator, ValidationError

DEFAULT_PUSHGATEWAY = "http://localhost:9091"

MISSING_SUFFIX_POLICIES = ("error", "append")


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables with the
    ZBENCH_ prefix (e.g., ZBENCH_PUSHGATEWAY_URL=http://gateway:9091).
    """

    model_config = SettingsConfigDict(
        env_prefix="ZBENCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Metrics settings
    pushgateway_url: str = Field(default=DEFAULT_PUSHGATEWAY, description="Pushgateway base URL")
    push_timeout: float = Field(default=10.0, ge=1, le=300, description="Pushgateway request timeout in seconds")

    # Logging settings
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    log_format: str = Field(default="json", description="Log format (json or text)")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(sorted(valid_levels))}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is supported."""
        v_lower = v.lower()
        if v_lower not in {"json", "text"}:
            raise ValueError("Log format must be one of: json, text")
        return v_lower


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with configuration loaded from environment
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Force reload of settings (clears cache).

    Example:
        >>> os.environ['ZBENCH_LOG_FORMAT'] = 'text'
        >>> settings = reload_settings()
        >>> print(settings.log_format)
        text
    """
    get_settings.cache_clear()
    return get_settings()


class _RunConfig(BaseModel):
    """Fields shared by every tool."""

    model_config = {"frozen": True}

    pushgateway_url: str = DEFAULT_PUSHGATEWAY
    push_timeout: float = 10.0

    @field_validator("pushgateway_url")
    @classmethod
    def validate_pushgateway_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("pushgateway URL cannot be empty")
        return v


class GenerateConfig(_RunConfig):
    """Resolved parameters for a data generation run."""

    record_type: str
    count: int
    out_dir: str = "output"
    seed: Optional[int] = None

    @field_validator("record_type")
    @classmethod
    def validate_record_type(cls, v: str) -> str:
        return InputValidator.validate_record_type(v)

    @field_validator("count")
    @classmethod
    def validate_count(cls, v: int) -> int:
        return InputValidator.validate_positive(v, "n")


class TrainConfig(_RunConfig):
    """Resolved parameters for a dictionary training run."""

    input_dir: str = "output"
    out_dir: str = "dict-out"
    out_file: Optional[str] = None
    dict_size: int = 128 * 1024
    max_samples: int = 1000
    max_sample_bytes: int = 32 * 1024
    train_level: int = 0

    @field_validator("dict_size")
    @classmethod
    def validate_dict_size(cls, v: int) -> int:
        return InputValidator.validate_positive(v, "dict-size")

    @field_validator("max_samples")
    @classmethod
    def validate_max_samples(cls, v: int) -> int:
        return InputValidator.validate_positive(v, "max-samples")

    @field_validator("max_sample_bytes")
    @classmethod
    def validate_max_sample_bytes(cls, v: int) -> int:
        return InputValidator.validate_positive(v, "max-sample-bytes")

    @field_validator("train_level")
    @classmethod
    def validate_train_level(cls, v: int) -> int:
        return InputValidator.validate_train_level(v)

    @field_validator("out_file")
    @classmethod
    def blank_out_file_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class _DictionaryConfig(_RunConfig):
    use_dict: bool = False
    dict_path: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def check_dict_option(cls, data):
        if isinstance(data, dict):
            data = dict(data)
            data["dict_path"] = InputValidator.validate_dict_option(
                bool(data.get("use_dict", False)), data.get("dict_path")
            )
        return data


class CompressConfig(_DictionaryConfig):
    """Resolved parameters for a compression run."""

    input_dir: str = "output"
    out_dir: str = "compressed"
    level: int = 0

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: int) -> int:
        return InputValidator.validate_compression_level(v)


class DecompressConfig(_DictionaryConfig):
    """Resolved parameters for a decompression run."""

    input_dir: str = "compressed"
    out_dir: str = "decompressed"
    run_id: str
    on_missing_suffix: str = "error"

    @field_validator("run_id")
    @classmethod
    def validate_run_id(cls, v: str) -> str:
        return InputValidator.validate_run_id(v.strip())

    @field_validator("on_missing_suffix")
    @classmethod
    def validate_missing_suffix_policy(cls, v: str) -> str:
        if v not in MISSING_SUFFIX_POLICIES:
            raise ValueError(f"on-missing-suffix must be one of: {', '.join(MISSING_SUFFIX_POLICIES)}")
        return v


ConfigT = TypeVar("ConfigT", bound=_RunConfig)


def build_config(model: Type[ConfigT], **values) -> ConfigT:
    """
    Build a run config, reporting problems as ValidationError.

    ``None`` values are dropped so that model defaults apply.

    Raises:
        ValidationError: With one line per invalid field
    """
    values = {k: v for k, v in values.items() if v is not None}
    try:
        return model(**values)
    except pydantic.ValidationError as e:
        problems = []
        for err in e.errors():
            loc = ".".join(str(part) for part in err["loc"])
            msg = err["msg"]
            # field validators raising ValueError are prefixed by pydantic
            msg = msg.replace("Value error, ", "", 1)
            problems.append(f"{loc}: {msg}" if loc else msg)
        raise ValidationError("; ".join(problems)) from e
