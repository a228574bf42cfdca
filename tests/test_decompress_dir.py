# SPDX-License-Identifier: Apache-2.0
"""Tests for decompress_dir module."""

from datetime import datetime

import pytest

import compress_dir
import decompress_dir
from zbench_utils.config import DecompressConfig
from zbench_utils.fsutils import NoFilesError
from zbench_utils.transform import MissingSuffixError


@pytest.fixture
def packed(tmp_path, sample_tree, pushed):
    """sample_tree compressed with the real codec at the default level."""
    out = tmp_path / "compressed"
    assert compress_dir.main(["-in", str(sample_tree), "-out", str(out)]) == 0
    pushed.calls.clear()
    return out


class TestRun:
    def test_restores_tree(self, tmp_path, sample_tree, packed, pushed):
        config = DecompressConfig(input_dir=str(packed), out_dir=str(tmp_path / "restored"), run_id="r1")
        result = decompress_dir.run(config)

        assert result.stats.files_processed == 3
        assert (tmp_path / "restored" / "b.json").read_bytes() == (sample_tree / "b.json").read_bytes()
        assert (tmp_path / "restored" / "nested" / "c.txt").read_bytes() == (sample_tree / "nested" / "c.txt").read_bytes()

        call = pushed.calls[0]
        assert call["job"] == "decompress"
        assert call["grouping_key"] == {"source": "compressed", "use_dict": "false", "run_id": "r1"}

    def test_only_empty_files(self, tmp_path, fake_codec, pushed):
        src = tmp_path / "src"
        src.mkdir()
        (src / "a.zst").write_bytes(b"")

        config = DecompressConfig(input_dir=str(src), out_dir=str(tmp_path / "out"), run_id="r1")
        with pytest.raises(NoFilesError):
            decompress_dir.run(config, codec=fake_codec)

    def test_unsuffixed_rejected(self, tmp_path, packed, pushed):
        (packed / "notes.txt").write_bytes(b"plain")

        config = DecompressConfig(input_dir=str(packed), out_dir=str(tmp_path / "restored"), run_id="r1")
        with pytest.raises(MissingSuffixError, match="notes.txt"):
            decompress_dir.run(config)
        assert pushed.calls == []


class TestMain:
    def test_default_run_id(self, tmp_path, packed, pushed, monkeypatch):
        monkeypatch.setattr(decompress_dir, "default_run_id", lambda: "20240101_000000")

        code = decompress_dir.main(["-in", str(packed), "-out", str(tmp_path / "restored")])

        assert code == 0
        assert pushed.calls[0]["grouping_key"]["run_id"] == "20240101_000000"

    def test_explicit_run_id(self, tmp_path, packed, pushed, capsys):
        code = decompress_dir.main(["-in", str(packed), "-out", str(tmp_path / "restored"), "-run-id", "nightly"])
        assert code == 0
        assert pushed.calls[0]["grouping_key"]["run_id"] == "nightly"
        assert "decompressed 3 files" in capsys.readouterr().out

    def test_invalid_run_id(self, tmp_path, packed, pushed):
        code = decompress_dir.main(["-in", str(packed), "-out", str(tmp_path / "r"), "-run-id", "x" * 129])
        assert code == 1
        assert not (tmp_path / "r").exists()

    def test_run_id_reaches_grouping_key_unchanged(self, tmp_path, packed, pushed):
        code = decompress_dir.main(["-in", str(packed), "-out", str(tmp_path / "r"), "-run-id", "nightly run/2"])
        assert code == 0
        assert pushed.calls[0]["grouping_key"]["run_id"] == "nightly run/2"

    def test_append_policy(self, tmp_path, packed, pushed):
        (packed / "legacy").write_bytes((packed / "a.json.zst").read_bytes())

        code = decompress_dir.main(
            ["-in", str(packed), "-out", str(tmp_path / "r"), "-run-id", "x", "--on-missing-suffix", "append"]
        )
        assert code == 0
        assert (tmp_path / "r" / "legacy.out").read_bytes() == (tmp_path / "r" / "a.json").read_bytes()

    def test_corrupt_input_exit_code(self, tmp_path, pushed):
        src = tmp_path / "compressed"
        src.mkdir()
        (src / "bad.zst").write_bytes(b"not zstd at all")

        code = decompress_dir.main(["-in", str(src), "-out", str(tmp_path / "r"), "-run-id", "x"])
        assert code == 1
        assert pushed.calls == []

    def test_default_run_id_format(self):
        assert decompress_dir.default_run_id(datetime(2024, 1, 2, 3, 4, 5)) == "20240102_030405"
