#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
"""
compress_dir.py

Compresses every non-empty file under an input directory with zstandard,
optionally using a trained dictionary, into a mirrored tree of ``.zst``
files.

Usage example:
  python3 compress_dir.py -in output -out compressed -level 3 -use-dict -dict dict-out/zstd_dict.zdict

Run metrics are pushed to the Pushgateway under job "compress".
"""

import argparse
import os
import time
from typing import List, NamedTuple, Optional

from zbench_utils import (
    CompressConfig,
    RunStats,
    ZstdCodec,
    build_config,
    compress_tree,
    configure_logging,
    get_logger,
    get_settings,
    run_tool,
)
from zbench_utils.codec import Codec, load_dictionary
from zbench_utils.fsutils import require_files, source_label
from zbench_utils.metrics import push_compress_metrics

logger = get_logger("compress")


class CompressResult(NamedTuple):
    stats: RunStats
    duration_seconds: float


def run(config: CompressConfig, codec: Optional[Codec] = None) -> CompressResult:
    """Compress the input tree and push metrics."""
    os.makedirs(config.out_dir, exist_ok=True)
    paths = require_files(config.input_dir)

    if codec is None:
        dict_data = load_dictionary(config.use_dict, config.dict_path, logger)
        codec = ZstdCodec(level=config.level, dict_data=dict_data)

    start = time.perf_counter()
    stats = compress_tree(paths, config.input_dir, config.out_dir, codec)
    duration = time.perf_counter() - start

    logger.info("compression_complete", out=config.out_dir, duration_s=f"{duration:.3f}", **stats.to_dict())

    push_compress_metrics(
        config.pushgateway_url,
        stats,
        duration,
        source_label(config.input_dir, "output"),
        config.level,
        config.use_dict,
        timeout=config.push_timeout,
    )
    return CompressResult(stats, duration)


def build_parser(default_gateway: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compress a directory tree with zstandard")
    parser.add_argument("-in", "--in", dest="input_dir", default="output", help="Input directory with files to compress (default: output)")
    parser.add_argument("-out", "--out", dest="out_dir", default="compressed", help="Output directory for compressed files (default: compressed)")
    parser.add_argument("-level", "--level", dest="level", type=int, default=0, help="zstd compression level (0=default, 1..22)")
    parser.add_argument("-use-dict", "--use-dict", dest="use_dict", action="store_true", help="Enable dictionary compression")
    parser.add_argument("-dict", "--dict", dest="dict_path", default=None, help="Path to zstd dictionary file")
    parser.add_argument("-pushgateway", "--pushgateway", dest="pushgateway_url", default=default_gateway, help="Pushgateway base URL")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    args = build_parser(settings.pushgateway_url).parse_args(argv)

    def body() -> None:
        config = build_config(CompressConfig, push_timeout=settings.push_timeout, **vars(args))
        result = run(config)
        stats = result.stats
        print(
            f"compressed {stats.files_processed} files "
            f"({stats.bytes_in} bytes -> {stats.bytes_out} bytes) into {config.out_dir}"
        )

    return run_tool(logger, body)


if __name__ == "__main__":
    raise SystemExit(main())
