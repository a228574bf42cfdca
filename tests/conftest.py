# SPDX-License-Identifier: Apache-2.0
"""Pytest configuration and shared fixtures."""

from typing import List

import pytest

from zbench_utils import metrics as metrics_module
from zbench_utils.codec import Codec, CodecError


class FakeCodec(Codec):
    """
    Reversible stand-in for zstd.

    Output is a marker, the dictionary key byte, then the input XOR-ed with
    that key, so decoding with a different dictionary fails loudly.
    """

    MAGIC = b"FAKE"

    def __init__(self, dict_data: bytes = b""):
        self.key = sum(dict_data) % 251 + 1 if dict_data else 0
        self.train_calls: List[tuple] = []

    def encode(self, data: bytes) -> bytes:
        return self.MAGIC + bytes([self.key]) + bytes(b ^ self.key for b in data)

    def decode(self, data: bytes) -> bytes:
        if not data.startswith(self.MAGIC):
            raise CodecError("decompression failed: not a fake frame")
        if data[len(self.MAGIC)] != self.key:
            raise CodecError("decompression failed: dictionary mismatch")
        return bytes(b ^ self.key for b in data[len(self.MAGIC) + 1 :])

    def train(self, samples: List[bytes], dict_size: int, level: int = 0) -> bytes:
        self.train_calls.append((len(samples), dict_size, level))
        return b"".join(samples)[:dict_size]


class PushRecorder:
    """Collects push_to_gateway calls instead of sending them."""

    def __init__(self):
        self.calls: List[dict] = []
        self.fail_with = None

    def __call__(self, gateway, job, registry, grouping_key=None, timeout=None, **kwargs):
        if self.fail_with is not None:
            raise self.fail_with
        self.calls.append(
            {"gateway": gateway, "job": job, "registry": registry, "grouping_key": grouping_key, "timeout": timeout}
        )

    def value(self, index: int, name: str):
        """Sample value of metric ``name`` in the ``index``-th push."""
        return self.calls[index]["registry"].get_sample_value(name)


@pytest.fixture
def fake_codec():
    """A codec that needs no real compression library."""
    return FakeCodec()


@pytest.fixture
def pushed(monkeypatch):
    """Capture Pushgateway pushes."""
    recorder = PushRecorder()
    monkeypatch.setattr(metrics_module, "push_to_gateway", recorder)
    return recorder


@pytest.fixture
def sample_tree(tmp_path):
    """An input tree with nested, empty and whitespace-padded files."""
    root = tmp_path / "output"
    (root / "nested").mkdir(parents=True)
    (root / "b.json").write_bytes(b'[\n{"id":1,"name":"Ava"},\n{"id":2,"name":"Liam"}\n]\n')
    (root / "a.json").write_bytes(b'  {"id":3,"city":"Oslo"}  \n')
    (root / "nested" / "c.txt").write_bytes(b"hello world\n" * 20)
    (root / "empty.txt").write_bytes(b"")
    return root
