# SPDX-License-Identifier: Apache-2.0
"""Tests for zbench_utils.fsutils module."""

import os

import pytest
from zbench_utils.fsutils import NoFilesError, list_files, relative_output_path, require_files, source_label


class TestListFiles:
    def test_sorted_non_empty_files(self, sample_tree):
        paths = list_files(str(sample_tree))
        rels = [os.path.relpath(p, sample_tree) for p in paths]
        assert rels == ["a.json", "b.json", os.path.join("nested", "c.txt")]

    def test_only_empty_files(self, tmp_path):
        (tmp_path / "one").write_bytes(b"")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "two").write_bytes(b"")
        assert list_files(str(tmp_path)) == []

        with pytest.raises(NoFilesError, match="no files found"):
            require_files(str(tmp_path))

    def test_missing_root(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            list_files(str(tmp_path / "missing"))

    def test_root_is_file(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("x")
        with pytest.raises(NotADirectoryError):
            list_files(str(target))


class TestPaths:
    def test_relative_output_path(self):
        out = relative_output_path(os.path.join("output", "sub", "a.json"), "output", "compressed", ".zst")
        assert out == os.path.join("compressed", "sub", "a.json.zst")

    @pytest.mark.parametrize(
        "input_dir,expected",
        [("output", "output"), ("data/run1/", "run1"), (".", "fallback"), ("/", "fallback"), ("", "fallback")],
    )
    def test_source_label(self, input_dir, expected):
        assert source_label(input_dir, "fallback") == expected
