#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
"""
decompress_dir.py

Restores a tree of ``.zst`` files written by compress_dir.py. The same
dictionary used for compression must be given with -use-dict/-dict.

Inputs without the ``.zst`` suffix are rejected before anything is
written; ``--on-missing-suffix append`` instead writes them with an added
``.out`` suffix.

Usage example:
  python3 decompress_dir.py -in compressed -out decompressed -use-dict -dict dict-out/zstd_dict.zdict -run-id nightly

Run metrics are pushed to the Pushgateway under job "decompress".
"""

import argparse
import os
import time
from datetime import datetime
from typing import List, NamedTuple, Optional

from zbench_utils import (
    DecompressConfig,
    RunStats,
    ZstdCodec,
    build_config,
    configure_logging,
    decompress_tree,
    get_logger,
    get_settings,
    run_tool,
)
from zbench_utils.codec import Codec, load_dictionary
from zbench_utils.config import MISSING_SUFFIX_POLICIES
from zbench_utils.fsutils import require_files, source_label
from zbench_utils.metrics import push_decompress_metrics

logger = get_logger("decompress")


class DecompressResult(NamedTuple):
    stats: RunStats
    duration_seconds: float


def default_run_id(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")


def run(config: DecompressConfig, codec: Optional[Codec] = None) -> DecompressResult:
    """Decompress the input tree and push metrics."""
    os.makedirs(config.out_dir, exist_ok=True)
    paths = require_files(config.input_dir)

    if codec is None:
        codec = ZstdCodec(dict_data=load_dictionary(config.use_dict, config.dict_path, logger))

    start = time.perf_counter()
    stats = decompress_tree(paths, config.input_dir, config.out_dir, codec, config.on_missing_suffix)
    duration = time.perf_counter() - start

    logger.info(
        "decompression_complete", out=config.out_dir, run_id=config.run_id, duration_s=f"{duration:.3f}", **stats.to_dict()
    )

    push_decompress_metrics(
        config.pushgateway_url,
        stats,
        duration,
        source_label(config.input_dir, "compressed"),
        config.use_dict,
        config.run_id,
        timeout=config.push_timeout,
    )
    return DecompressResult(stats, duration)


def build_parser(default_gateway: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Decompress a tree of .zst files")
    parser.add_argument("-in", "--in", dest="input_dir", default="compressed", help="Input directory with .zst files (default: compressed)")
    parser.add_argument("-out", "--out", dest="out_dir", default="decompressed", help="Output directory for decompressed files (default: decompressed)")
    parser.add_argument("-use-dict", "--use-dict", dest="use_dict", action="store_true", help="Enable dictionary decompression")
    parser.add_argument("-dict", "--dict", dest="dict_path", default=None, help="Path to zstd dictionary file")
    parser.add_argument("-run-id", "--run-id", dest="run_id", default="", help="Run identifier for metrics grouping (default: current timestamp)")
    parser.add_argument(
        "--on-missing-suffix",
        dest="on_missing_suffix",
        choices=MISSING_SUFFIX_POLICIES,
        default="error",
        help="What to do with inputs lacking .zst: fail the run, or append .out to the output name",
    )
    parser.add_argument("-pushgateway", "--pushgateway", dest="pushgateway_url", default=default_gateway, help="Pushgateway base URL")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    args = build_parser(settings.pushgateway_url).parse_args(argv)
    if not args.run_id.strip():
        args.run_id = default_run_id()

    def body() -> None:
        config = build_config(DecompressConfig, push_timeout=settings.push_timeout, **vars(args))
        result = run(config)
        stats = result.stats
        print(
            f"decompressed {stats.files_processed} files "
            f"({stats.bytes_in} bytes -> {stats.bytes_out} bytes) into {config.out_dir}"
        )

    return run_tool(logger, body)


if __name__ == "__main__":
    raise SystemExit(main())
