# SPDX-License-Identifier: Apache-2.0
"""
Run statistics and Pushgateway reporting for the zstd benchmark tools.

Each tool accumulates a plain statistics object during its single pass,
then pushes a fixed set of gauges/counters to a Prometheus Pushgateway.
Every push builds a fresh registry; the gateway keeps the last push per
job and grouping key.

Example:
    >>> from zbench_utils.metrics import RunStats, push_compress_metrics
    >>> stats = RunStats()
    >>> stats.record_file(5000, 1250)
    >>> stats.compression_ratio
    0.25
    >>> push_compress_metrics("http://localhost:9091", stats, 0.4, "output", 3, False)
"""

import time
from dataclasses import dataclass
from typing import Dict, Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, push_to_gateway

from .logging import get_logger

logger = get_logger("metrics")


class MetricsPushError(Exception):
    """Raised when metrics cannot be delivered to the Pushgateway."""

    pass


@dataclass
class RunStats:
    """Aggregate counters for one compress or decompress run."""

    files_processed: int = 0
    bytes_in: int = 0
    bytes_out: int = 0

    @property
    def compression_ratio(self) -> float:
        """Output/input size ratio (0.0 when nothing was read)."""
        if self.bytes_in == 0:
            return 0.0
        return self.bytes_out / self.bytes_in

    def record_file(self, bytes_in: int, bytes_out: int) -> None:
        """
        Record one transformed file.

        Args:
            bytes_in: Bytes read from the source file
            bytes_out: Bytes written to the destination file
        """
        self.files_processed += 1
        self.bytes_in += bytes_in
        self.bytes_out += bytes_out

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "files_processed": self.files_processed,
            "bytes_in": self.bytes_in,
            "bytes_out": self.bytes_out,
            "compression_ratio": self.compression_ratio,
        }


@dataclass
class SampleStats:
    """Aggregate counters for one sample collection pass."""

    files_scanned: int = 0
    samples: int = 0
    sample_bytes: int = 0

    def record_file(self, sample_count: int, sample_bytes: int) -> None:
        """Record a file that contributed at least one sample."""
        self.files_scanned += 1
        self.samples += sample_count
        self.sample_bytes += sample_bytes

    def to_dict(self) -> Dict:
        return {
            "files_scanned": self.files_scanned,
            "samples": self.samples,
            "sample_bytes": self.sample_bytes,
        }


def push_registry(
    gateway: str,
    job: str,
    registry: CollectorRegistry,
    grouping_key: Dict[str, str],
    timeout: Optional[float] = 10.0,
) -> None:
    """
    Push a registry to the gateway, replacing the job's metrics for the
    grouping key.

    Raises:
        MetricsPushError: On any delivery failure
    """
    try:
        push_to_gateway(gateway, job=job, registry=registry, grouping_key=grouping_key, timeout=timeout)
    except Exception as e:
        # prometheus_client surfaces URLError, HTTPError, OSError and ValueError here
        logger.error("metrics_push_failed", gateway=gateway, job=job, error=str(e))
        raise MetricsPushError(f"metrics push to {gateway} failed: {e}") from e

    logger.debug("metrics_pushed", gateway=gateway, job=job, **grouping_key)


def _gauge(registry: CollectorRegistry, name: str, documentation: str, value: Optional[float]) -> Gauge:
    gauge = Gauge(name, documentation, registry=registry)
    if value is not None:
        gauge.set(value)
    return gauge


def push_generate_metrics(
    gateway: str,
    record_type: str,
    count: int,
    duration_seconds: float,
    timeout: Optional[float] = 10.0,
) -> CollectorRegistry:
    """Push generation metrics under job ``generate-data``, grouped by type."""
    registry = CollectorRegistry()

    counter = Counter("generated_items", "Total number of generated items by type.", registry=registry)
    counter.inc(count)
    _gauge(registry, "generate_duration_seconds", "Duration of the last generation run in seconds by type.", duration_seconds)
    _gauge(registry, "last_run_timestamp_seconds", "Unix timestamp of the last generation run by type.", int(time.time()))

    push_registry(gateway, "generate-data", registry, {"type": record_type}, timeout)
    return registry


def push_train_metrics(
    gateway: str,
    stats: SampleStats,
    output_bytes: int,
    dict_size: int,
    duration_seconds: float,
    source: str,
    timeout: Optional[float] = 10.0,
) -> CollectorRegistry:
    """Push dictionary training metrics under job ``train-dict``."""
    registry = CollectorRegistry()

    _gauge(registry, "dict_train_duration_seconds", "Duration of the last dictionary training run in seconds.", duration_seconds)
    _gauge(registry, "dict_samples_count", "Number of samples used in the last dictionary training run.", stats.samples)
    _gauge(registry, "dict_sample_bytes", "Total bytes of samples used in the last dictionary training run.", stats.sample_bytes)
    _gauge(registry, "dict_files_scanned", "Number of files scanned in the last dictionary training run.", stats.files_scanned)
    _gauge(registry, "dict_output_bytes", "Size of the generated dictionary in bytes.", output_bytes)
    _gauge(registry, "dict_target_size_bytes", "Target dictionary size requested for training.", dict_size)
    _gauge(registry, "dict_last_run_timestamp_seconds", "Unix timestamp of the last dictionary training run.", int(time.time()))

    grouping = {"source": source.strip() or "output", "dict_size": str(dict_size)}
    push_registry(gateway, "train-dict", registry, grouping, timeout)
    return registry


def _push_transform_metrics(
    gateway: str,
    job: str,
    prefix: str,
    noun: str,
    stats: RunStats,
    duration_seconds: float,
    grouping: Dict[str, str],
    timeout: Optional[float],
) -> CollectorRegistry:
    registry = CollectorRegistry()

    ratio = stats.compression_ratio if stats.bytes_in > 0 else None
    _gauge(registry, f"{prefix}_duration_seconds", f"Duration of the last {noun} run in seconds.", duration_seconds)
    _gauge(registry, f"{prefix}_files_processed", f"Number of files processed in the last {noun} run.", stats.files_processed)
    _gauge(registry, f"{prefix}_input_bytes", f"Total input bytes {prefix}ed in the last run.", stats.bytes_in)
    _gauge(registry, f"{prefix}_output_bytes", "Total output bytes produced in the last run.", stats.bytes_out)
    _gauge(registry, f"{prefix}_ratio", f"Output/input size ratio for the last {noun} run.", ratio)
    _gauge(registry, f"{prefix}_last_run_timestamp_seconds", f"Unix timestamp of the last {noun} run.", int(time.time()))

    push_registry(gateway, job, registry, grouping, timeout)
    return registry


def push_compress_metrics(
    gateway: str,
    stats: RunStats,
    duration_seconds: float,
    source: str,
    level: int,
    use_dict: bool,
    timeout: Optional[float] = 10.0,
) -> CollectorRegistry:
    """Push compression metrics under job ``compress``, grouped by source, use_dict and level."""
    grouping = {
        "source": source.strip() or "output",
        "use_dict": "true" if use_dict else "false",
        "level": str(level) if level != 0 else "default",
    }
    return _push_transform_metrics(gateway, "compress", "compress", "compression", stats, duration_seconds, grouping, timeout)


def push_decompress_metrics(
    gateway: str,
    stats: RunStats,
    duration_seconds: float,
    source: str,
    use_dict: bool,
    run_id: str,
    timeout: Optional[float] = 10.0,
) -> CollectorRegistry:
    """Push decompression metrics under job ``decompress``, grouped by source, use_dict and run_id."""
    grouping = {
        "source": source.strip() or "compressed",
        "use_dict": "true" if use_dict else "false",
        "run_id": run_id,
    }
    return _push_transform_metrics(
        gateway, "decompress", "decompress", "decompression", stats, duration_seconds, grouping, timeout
    )
