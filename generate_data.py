#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
"""
generate_data.py

Generates synthetic movies, books or people as a JSON array file named
``<type>_<timestamp>.json`` in the output directory. Missing -type or -n
are asked for interactively.

Usage example:
  python3 generate_data.py -type people -n 50 -out output

Run metrics are pushed to the Pushgateway under job "generate-data".
"""

import argparse
from typing import List, Optional, TextIO

from zbench_utils import GenerateConfig, build_config, configure_logging, get_logger, get_settings, run_tool
from zbench_utils.metrics import push_generate_metrics
from zbench_utils.prompts import prompt_int, prompt_string
from zbench_utils.records import GenerateResult, generate

logger = get_logger("generate_data")


def resolve_config(
    args: argparse.Namespace,
    push_timeout: float = 10.0,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> GenerateConfig:
    """Fill in missing flags from prompts and validate the result."""
    record_type = args.record_type
    if not record_type:
        record_type = prompt_string("Select type (movies, books, people): ", stdin, stdout)

    count = args.count
    if count is None or count <= 0:
        count = prompt_int("How many items do you want to generate? ", stdin, stdout)

    return build_config(
        GenerateConfig,
        record_type=record_type,
        count=count,
        out_dir=args.out_dir,
        seed=args.seed,
        pushgateway_url=args.pushgateway_url,
        push_timeout=push_timeout,
    )


def run(config: GenerateConfig) -> GenerateResult:
    """Generate the file and push metrics."""
    result = generate(config)
    push_generate_metrics(
        config.pushgateway_url, config.record_type, result.count, result.duration_seconds, timeout=config.push_timeout
    )
    return result


def build_parser(default_gateway: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate synthetic JSON records")
    parser.add_argument("-type", "--type", dest="record_type", default="", help="Data type to generate: movies, books, people")
    parser.add_argument("-n", "--count", dest="count", type=int, default=None, help="Number of items to generate")
    parser.add_argument("-out", "--out", dest="out_dir", default="output", help="Output directory (default: output)")
    parser.add_argument("-seed", "--seed", dest="seed", type=int, default=None, help="Random seed (default: wall clock)")
    parser.add_argument("-pushgateway", "--pushgateway", dest="pushgateway_url", default=default_gateway, help="Pushgateway base URL")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    args = build_parser(settings.pushgateway_url).parse_args(argv)

    def body() -> None:
        config = resolve_config(args, settings.push_timeout)
        result = run(config)
        print(f"generated {result.count} {config.record_type} into {result.path}")

    return run_tool(logger, body)


if __name__ == "__main__":
    raise SystemExit(main())
