#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
"""
train_dict.py

Trains a zstandard compression dictionary from the files under an input
directory. Every file is cut into chunks of at most --max-sample-bytes,
trimmed, and fed to zstandard's dictionary trainer; the resulting blob is
written to --out-file, or to <out>/zstd_dict_<timestamp>.zdict.

Usage example:
  python3 train_dict.py -in output -out dict-out -dict-size 4096 -max-sample-bytes 4096

Run metrics are pushed to the Pushgateway under job "train-dict".
"""

import argparse
import hashlib
import os
import time
from datetime import datetime
from typing import List, NamedTuple, Optional

from zbench_utils import (
    TrainConfig,
    ZstdCodec,
    build_config,
    collect_samples,
    configure_logging,
    get_logger,
    get_settings,
    run_tool,
)
from zbench_utils.codec import Codec, dictionary_id
from zbench_utils.fsutils import source_label
from zbench_utils.metrics import SampleStats, push_train_metrics
from zbench_utils.samples import check_sample_count

logger = get_logger("train_dict")


class TrainResult(NamedTuple):
    path: str
    dict_bytes: int
    stats: SampleStats
    duration_seconds: float


def default_output_path(out_dir: str, now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return os.path.join(out_dir, f"zstd_dict_{stamp}.zdict")


def train_dictionary(samples: List[bytes], dict_size: int, codec: Codec, train_level: int = 0) -> bytes:
    """
    Train a dictionary from ``samples``.

    The two-sample minimum is enforced here as well as during collection,
    so callers passing their own samples get the same failure regardless
    of ``dict_size``.

    Raises:
        InsufficientSamplesError: With fewer than two samples
        CodecError: If the trainer rejects the samples
    """
    check_sample_count(len(samples))
    return codec.train(samples, dict_size, train_level)


def run(config: TrainConfig, codec: Optional[Codec] = None) -> TrainResult:
    """Collect samples, train, write the dictionary and push metrics."""
    codec = codec or ZstdCodec()

    os.makedirs(config.out_dir, exist_ok=True)
    output_path = config.out_file or default_output_path(config.out_dir)

    start = time.perf_counter()
    samples, stats = collect_samples(config.input_dir, config.max_samples, config.max_sample_bytes)
    logger.info("samples_collected", source=config.input_dir, **stats.to_dict())

    trained = train_dictionary(samples, config.dict_size, codec, config.train_level)

    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(output_path, "wb") as f:
        f.write(trained)
    duration = time.perf_counter() - start

    sha = hashlib.sha256(trained).hexdigest()[:16]
    logger.info(
        "dictionary_written",
        path=output_path,
        size=len(trained),
        dict_id=dictionary_id(trained),
        sha256=sha,
        duration_s=f"{duration:.3f}",
    )

    push_train_metrics(
        config.pushgateway_url,
        stats,
        len(trained),
        config.dict_size,
        duration,
        source_label(config.input_dir, "output"),
        timeout=config.push_timeout,
    )
    return TrainResult(output_path, len(trained), stats, duration)


def build_parser(default_gateway: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Train a zstandard dictionary from sample files")
    parser.add_argument("-in", "--in", dest="input_dir", default="output", help="Input directory with sample data (default: output)")
    parser.add_argument("-out", "--out", dest="out_dir", default="dict-out", help="Output directory for dictionaries (default: dict-out)")
    parser.add_argument("-out-file", "--out-file", dest="out_file", default=None, help="Optional full output file path")
    parser.add_argument("-dict-size", "--dict-size", dest="dict_size", type=int, default=128 * 1024, help="Dictionary size in bytes (default: 131072)")
    parser.add_argument("-max-samples", "--max-samples", dest="max_samples", type=int, default=1000, help="Maximum number of samples to use (default: 1000)")
    parser.add_argument("-max-sample-bytes", "--max-sample-bytes", dest="max_sample_bytes", type=int, default=32 * 1024, help="Maximum bytes per sample (default: 32768)")
    parser.add_argument(
        "-zstd-level",
        "--zstd-level",
        dest="train_level",
        type=int,
        default=0,
        help="Training level (0=default, 1=fastest, 2=default, 3=better, 4=best)",
    )
    parser.add_argument("-pushgateway", "--pushgateway", dest="pushgateway_url", default=default_gateway, help="Pushgateway base URL")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    args = build_parser(settings.pushgateway_url).parse_args(argv)

    def body() -> None:
        config = build_config(TrainConfig, push_timeout=settings.push_timeout, **vars(args))
        result = run(config)
        print(f"trained dictionary {result.path} ({result.dict_bytes} bytes) from {result.stats.samples} samples")

    return run_tool(logger, body)


if __name__ == "__main__":
    raise SystemExit(main())
