# SPDX-License-Identifier: Apache-2.0
"""Shared utilities for the zstd benchmark command-line tools."""

from .logging import configure_logging, get_logger
from .config import (
    Settings,
    get_settings,
    build_config,
    GenerateConfig,
    TrainConfig,
    CompressConfig,
    DecompressConfig,
)
from .validation import InputValidator, ValidationError
from .metrics import MetricsPushError, RunStats, SampleStats
from .codec import Codec, CodecError, ZstdCodec
from .fsutils import NoFilesError, list_files
from .samples import InsufficientSamplesError, collect_samples
from .transform import MissingSuffixError, compress_tree, decompress_tree
from .runner import run_tool

__all__ = [
    "configure_logging",
    "get_logger",
    "Settings",
    "get_settings",
    "build_config",
    "GenerateConfig",
    "TrainConfig",
    "CompressConfig",
    "DecompressConfig",
    "InputValidator",
    "ValidationError",
    "MetricsPushError",
    "RunStats",
    "SampleStats",
    "Codec",
    "CodecError",
    "ZstdCodec",
    "NoFilesError",
    "list_files",
    "InsufficientSamplesError",
    "collect_samples",
    "MissingSuffixError",
    "compress_tree",
    "decompress_tree",
    "run_tool",
]
