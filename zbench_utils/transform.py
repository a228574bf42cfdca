# SPDX-License-Identifier: Apache-2.0
"""
Batch compress/decompress of a directory tree.

Both passes are all-or-nothing at the batch level: the first I/O or codec
error aborts the run. Files written before the failure are left in place.
"""

import os
from typing import List, Optional

from .codec import Codec
from .fsutils import relative_output_path
from .logging import get_logger
from .metrics import RunStats

logger = get_logger("transform")

COMPRESSED_SUFFIX = ".zst"
FALLBACK_SUFFIX = ".out"


class MissingSuffixError(ValueError):
    """Raised when a decompression input lacks the compressed-file suffix."""

    def __init__(self, paths: List[str]):
        shown = ", ".join(paths[:5])
        more = f" (and {len(paths) - 5} more)" if len(paths) > 5 else ""
        super().__init__(f"input files without {COMPRESSED_SUFFIX} suffix: {shown}{more}")
        self.paths = paths


def compress_tree(paths: List[str], base_dir: str, out_dir: str, codec: Codec) -> RunStats:
    """
    Compress each file into ``out_dir`` as ``<relative path>.zst``.

    Args:
        paths: Files to compress, all beneath ``base_dir``
        base_dir: Input root the output tree mirrors
        out_dir: Output root
        codec: Codec reused for every file

    Returns:
        RunStats with bytes read and bytes written
    """
    stats = RunStats()

    for path in paths:
        out_path = relative_output_path(path, base_dir, out_dir, COMPRESSED_SUFFIX)
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)

        with open(path, "rb") as src, open(out_path, "wb") as dst:
            read, written = codec.encode_stream(src, dst)

        stats.record_file(read, written)
        logger.debug("file_compressed", path=path, out=out_path, bytes_in=read, bytes_out=written)

    return stats


def decompressed_output_path(path: str, base_dir: str, out_dir: str, on_missing_suffix: str = "error") -> Optional[str]:
    """
    Output path for a compressed input: the mirrored path minus ``.zst``.

    Returns None for an unsuffixed input under the "error" policy; under
    "append" the mirrored path gets ``.out`` instead.
    """
    rel = os.path.relpath(path, base_dir)
    if rel.endswith(COMPRESSED_SUFFIX):
        return os.path.join(out_dir, rel[: -len(COMPRESSED_SUFFIX)])
    if on_missing_suffix == "append":
        return os.path.join(out_dir, rel) + FALLBACK_SUFFIX
    return None


def plan_decompression(paths: List[str], base_dir: str, out_dir: str, on_missing_suffix: str = "error") -> List[tuple]:
    """
    Pair every input with its output path before anything is written.

    Raises:
        MissingSuffixError: If any input lacks the suffix under the "error" policy
    """
    plan = []
    missing = []
    for path in paths:
        out_path = decompressed_output_path(path, base_dir, out_dir, on_missing_suffix)
        if out_path is None:
            missing.append(path)
            continue
        if not path.endswith(COMPRESSED_SUFFIX):
            logger.warning("missing_suffix_appended", path=path, out=out_path)
        plan.append((path, out_path))

    if missing:
        raise MissingSuffixError(missing)
    return plan


def decompress_tree(
    paths: List[str], base_dir: str, out_dir: str, codec: Codec, on_missing_suffix: str = "error"
) -> RunStats:
    """
    Decompress each ``.zst`` file into ``out_dir``, stripping the suffix.

    Returns:
        RunStats with compressed bytes read and bytes written
    """
    stats = RunStats()

    for path, out_path in plan_decompression(paths, base_dir, out_dir, on_missing_suffix):
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)

        with open(path, "rb") as src, open(out_path, "wb") as dst:
            _read, written = codec.decode_stream(src, dst)

        stats.record_file(os.path.getsize(path), written)
        logger.debug("file_decompressed", path=path, out=out_path, bytes_out=written)

    return stats
