# SPDX-License-Identifier: Apache-2.0
"""
Sample collection for dictionary training.

Input files are cut into sequential chunks of at most ``max_sample_bytes``.
Each chunk is trimmed of surrounding ASCII whitespace; chunks that trim to
nothing are dropped. Collection stops at the global sample cap.

Example:
    >>> from zbench_utils.samples import collect_samples
    >>> samples, stats = collect_samples("output", max_samples=1000, max_sample_bytes=4096)
    >>> stats.samples == len(samples)
    True
"""

from typing import List, Tuple

from .fsutils import require_files
from .metrics import SampleStats

# Dictionary training needs at least two distinct inputs to find shared content
MIN_SAMPLES = 2

_WHITESPACE = b" \t\n\r"


class InsufficientSamplesError(ValueError):
    """Raised when too few non-empty samples are available for training."""

    def __init__(self, count: int):
        super().__init__(
            f"not enough samples to train (got {count}). "
            "Increase data or lower max-sample-bytes to create more chunks"
        )
        self.count = count


def trim_sample(data: bytes) -> bytes:
    """Strip ASCII space, tab, CR and LF from both ends."""
    return data.strip(_WHITESPACE)


def read_samples_from_file(path: str, max_bytes: int, max_samples: int) -> Tuple[List[bytes], int]:
    """
    Read up to ``max_samples`` trimmed chunks of ``max_bytes`` from ``path``.

    Returns:
        (samples, total bytes across the trimmed samples)
    """
    samples: List[bytes] = []
    total = 0

    with open(path, "rb") as f:
        while len(samples) < max_samples:
            chunk = f.read(max_bytes)
            if not chunk:
                break
            data = trim_sample(chunk)
            if not data:
                continue
            samples.append(data)
            total += len(data)

    return samples, total


def check_sample_count(count: int) -> None:
    """Raise InsufficientSamplesError below the training minimum."""
    if count < MIN_SAMPLES:
        raise InsufficientSamplesError(count)


def collect_samples(root: str, max_samples: int, max_sample_bytes: int) -> Tuple[List[bytes], SampleStats]:
    """
    Walk ``root`` and collect training samples.

    Args:
        root: Input directory
        max_samples: Global cap on the number of samples
        max_sample_bytes: Chunk size per sample

    Returns:
        (samples, statistics)

    Raises:
        NoFilesError: If the tree holds no non-empty files
        InsufficientSamplesError: If fewer than two samples were collected
        OSError: On read failures
    """
    paths = require_files(root)

    samples: List[bytes] = []
    stats = SampleStats()

    for path in paths:
        if len(samples) >= max_samples:
            break

        chunks, read_bytes = read_samples_from_file(path, max_sample_bytes, max_samples - len(samples))
        if not chunks:
            continue

        samples.extend(chunks)
        stats.record_file(len(chunks), read_bytes)

    check_sample_count(len(samples))
    return samples, stats
