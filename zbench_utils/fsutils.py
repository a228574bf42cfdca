# SPDX-License-Identifier: Apache-2.0
"""Directory walking helpers shared by the trainer, compressor and decompressor."""

import os
from typing import List


class NoFilesError(Exception):
    """Raised when an input tree holds no non-empty regular files."""

    def __init__(self, root: str):
        super().__init__(f"no files found in {root}")
        self.root = root


def _raise(err: OSError) -> None:
    raise err


def list_files(root: str) -> List[str]:
    """
    Return the sorted paths of regular, non-empty files beneath ``root``.

    Zero-byte files are skipped. Walk errors (missing or unreadable root,
    unreadable subdirectory) propagate as OSError.

    Example:
        >>> list_files("output")
        ['output/books_20240101_120000.json', 'output/people_20240101_120500.json']
    """
    if not os.path.isdir(root):
        if os.path.exists(root):
            raise NotADirectoryError(f"not a directory: {root}")
        raise FileNotFoundError(f"input directory does not exist: {root}")

    paths: List[str] = []
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise):
        for name in filenames:
            path = os.path.join(dirpath, name)
            if not os.path.isfile(path):
                continue
            if os.path.getsize(path) == 0:
                continue
            paths.append(path)
    paths.sort()
    return paths


def require_files(root: str) -> List[str]:
    """Like list_files, but raise NoFilesError when nothing is found."""
    paths = list_files(root)
    if not paths:
        raise NoFilesError(root)
    return paths


def relative_output_path(path: str, base_dir: str, out_dir: str, suffix: str = "") -> str:
    """
    Mirror ``path`` (a file under ``base_dir``) into ``out_dir``.

    Example:
        >>> relative_output_path("output/sub/a.json", "output", "compressed", ".zst")
        'compressed/sub/a.json.zst'
    """
    rel = os.path.relpath(path, base_dir)
    return os.path.join(out_dir, rel) + suffix


def source_label(input_dir: str, fallback: str) -> str:
    """
    Metrics label for an input directory: its basename, or ``fallback``
    when the basename is empty, "." or a separator.
    """
    base = os.path.basename(os.path.normpath(input_dir.strip())) if input_dir.strip() else ""
    if base in ("", ".", os.sep):
        return fallback
    return base
