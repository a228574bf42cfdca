# SPDX-License-Identifier: Apache-2.0
"""Tests for zbench_utils.codec module (real zstandard)."""

import io
import json
import random

import pytest
import zstandard as zstd
from zbench_utils.codec import CodecError, ZstdCodec, dictionary_id, finalize_raw_dictionary, load_dictionary


def _json_samples(count: int = 400) -> list:
    rng = random.Random(42)
    cities = ["Austin", "Seattle", "Denver", "Toronto", "Dublin", "Oslo"]
    return [
        json.dumps(
            {"id": i, "name": f"user{i}", "city": rng.choice(cities), "age": rng.randrange(18, 70)}
        ).encode()
        for i in range(count)
    ]


@pytest.fixture(scope="module")
def trained_dict():
    return ZstdCodec().train(_json_samples(), 2048)


class TestZstdCodec:
    def test_buffer_round_trip(self):
        codec = ZstdCodec(level=3)
        data = b"hello zstd " * 100
        encoded = codec.encode(data)
        assert len(encoded) < len(data)
        assert codec.decode(encoded) == data

    def test_stream_round_trip_reuses_codec(self):
        codec = ZstdCodec(level=1)
        for payload in (b"first file " * 50, b"second file " * 70):
            compressed = io.BytesIO()
            read, written = codec.encode_stream(io.BytesIO(payload), compressed)
            assert read == len(payload)
            assert written == len(compressed.getvalue())

            restored = io.BytesIO()
            codec.decode_stream(io.BytesIO(compressed.getvalue()), restored)
            assert restored.getvalue() == payload

    def test_output_is_standard_zstd(self):
        data = b"interoperable " * 20
        assert zstd.ZstdDecompressor().decompressobj().decompress(ZstdCodec().encode(data)) == data

    def test_dictionary_round_trip(self, trained_dict):
        codec = ZstdCodec(level=3, dict_data=trained_dict)
        record = _json_samples(1)[0]
        assert codec.decode(codec.encode(record)) == record

    def test_dictionary_mismatch_fails(self, trained_dict):
        encoded = ZstdCodec(dict_data=trained_dict).encode(_json_samples(1)[0])
        with pytest.raises(CodecError):
            ZstdCodec().decode(encoded)

    def test_corrupt_input(self):
        with pytest.raises(CodecError, match="decompression failed"):
            ZstdCodec().decode(b"definitely not zstd")

    def test_corrupt_stream(self):
        with pytest.raises(CodecError, match="decompression failed"):
            ZstdCodec().decode_stream(io.BytesIO(b"definitely not zstd"), io.BytesIO())


class TestTraining:
    def test_trained_dictionary_size_and_id(self, trained_dict):
        assert 0 < len(trained_dict) <= 2048
        assert dictionary_id(trained_dict) != 0

    @pytest.mark.parametrize("level", [1, 4])
    def test_training_levels(self, level):
        trained = ZstdCodec().train(_json_samples(), 2048, level=level)
        assert 0 < len(trained) <= 2048

    def test_few_samples_still_train(self):
        # three chunks is below what the COVER trainer accepts
        blob = b"".join(_json_samples(300))
        samples = [blob[i : i + 4096] for i in range(0, 3 * 4096, 4096)]
        trained = ZstdCodec().train(samples, 4096)

        assert 0 < len(trained) <= 4096
        assert dictionary_id(trained) != 0
        codec = ZstdCodec(dict_data=trained)
        assert codec.decode(codec.encode(samples[1])) == samples[1]

    def test_two_samples_finalize(self):
        records = _json_samples(200)
        samples = [b"".join(records[:100]), b"".join(records[100:])]
        trained = finalize_raw_dictionary(samples, 1024)
        assert dictionary_id(trained) != 0

    def test_training_failure_is_codec_error(self):
        with pytest.raises(CodecError, match="failed to train dictionary"):
            ZstdCodec().train([b"ab", b"cd"], 16)


class TestConcatenatedFrames:
    def test_decode_reads_every_frame(self):
        codec = ZstdCodec()
        data = codec.encode(b"first frame ") + codec.encode(b"second frame")
        assert codec.decode(data) == b"first frame second frame"


class TestLoadDictionary:
    def test_disabled(self, tmp_path):
        assert load_dictionary(False, str(tmp_path / "missing.zdict")) is None

    def test_reads_file(self, tmp_path, trained_dict):
        path = tmp_path / "d.zdict"
        path.write_bytes(trained_dict)
        assert load_dictionary(True, str(path)) == trained_dict

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_dictionary(True, str(tmp_path / "missing.zdict"))
