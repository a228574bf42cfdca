# SPDX-License-Identifier: Apache-2.0
"""
Codec abstraction over zstandard.

The pipelines only ever talk to a ``Codec``: ``encode``/``decode`` for
whole buffers, ``encode_stream``/``decode_stream`` for file objects and
``train`` for dictionaries. ``ZstdCodec`` is the real implementation; tests
substitute a fake that implements just the three abstract methods.

Example:
    >>> from zbench_utils.codec import ZstdCodec
    >>> codec = ZstdCodec(level=3)
    >>> codec.decode(codec.encode(b"hello hello hello")) == b"hello hello hello"
    True
"""

import abc
from typing import BinaryIO, Dict, List, Optional, Tuple

import pyzstd
import zstandard as zstd


class CodecError(Exception):
    """Raised when encoding, decoding or dictionary training fails."""

    pass


# Training speed levels (1 fastest .. 4 best) to the zstd compression level
# the trainer optimizes its parameters for.
TRAIN_LEVELS: Dict[int, int] = {
    1: 1,
    2: 3,
    3: 7,
    4: 11,
}


class Codec(abc.ABC):
    """Narrow codec interface used by the batch pipelines."""

    @abc.abstractmethod
    def encode(self, data: bytes) -> bytes:
        """Compress a buffer."""

    @abc.abstractmethod
    def decode(self, data: bytes) -> bytes:
        """Decompress a buffer."""

    @abc.abstractmethod
    def train(self, samples: List[bytes], dict_size: int, level: int = 0) -> bytes:
        """Train a dictionary of at most ``dict_size`` bytes from ``samples``."""

    def encode_stream(self, src: BinaryIO, dst: BinaryIO) -> Tuple[int, int]:
        """Compress ``src`` into ``dst``; returns (bytes read, bytes written)."""
        data = src.read()
        out = self.encode(data)
        dst.write(out)
        return len(data), len(out)

    def decode_stream(self, src: BinaryIO, dst: BinaryIO) -> Tuple[int, int]:
        """Decompress ``src`` into ``dst``; returns (bytes read, bytes written)."""
        data = src.read()
        out = self.decode(data)
        dst.write(out)
        return len(data), len(out)


class ZstdCodec(Codec):
    """
    zstandard-backed codec.

    One compressor and one decompressor are created up front and reused for
    every file; zstandard resets their contexts between operations.

    Args:
        level: Compression level, 0 for the library default
        dict_data: Raw dictionary bytes, or None
    """

    def __init__(self, level: int = 0, dict_data: Optional[bytes] = None):
        self.level = level
        self.dictionary = zstd.ZstdCompressionDict(dict_data) if dict_data else None

        cctx_kwargs = {}
        if level != 0:
            cctx_kwargs["level"] = level
        if self.dictionary is not None:
            cctx_kwargs["dict_data"] = self.dictionary

        try:
            self._compressor = zstd.ZstdCompressor(**cctx_kwargs)
            if self.dictionary is not None:
                self._decompressor = zstd.ZstdDecompressor(dict_data=self.dictionary)
            else:
                self._decompressor = zstd.ZstdDecompressor()
        except zstd.ZstdError as e:
            raise CodecError(f"failed to initialize zstd codec: {e}") from e

    def encode(self, data: bytes) -> bytes:
        try:
            return self._compressor.compress(data)
        except zstd.ZstdError as e:
            raise CodecError(f"compression failed: {e}") from e

    def decode(self, data: bytes) -> bytes:
        try:
            # frames may lack a content size, and a file may hold several
            return self._decompressor.decompressobj(read_across_frames=True).decompress(data)
        except zstd.ZstdError as e:
            raise CodecError(f"decompression failed: {e}") from e

    def encode_stream(self, src: BinaryIO, dst: BinaryIO) -> Tuple[int, int]:
        try:
            return self._compressor.copy_stream(src, dst)
        except zstd.ZstdError as e:
            raise CodecError(f"compression failed: {e}") from e

    def decode_stream(self, src: BinaryIO, dst: BinaryIO) -> Tuple[int, int]:
        try:
            return self._decompressor.copy_stream(src, dst)
        except zstd.ZstdError as e:
            raise CodecError(f"decompression failed: {e}") from e

    def train(self, samples: List[bytes], dict_size: int, level: int = 0) -> bytes:
        """
        Train a dictionary with the COVER trainer.

        COVER refuses small sample sets (fewer than five, or too little
        data). In that case the joined samples become the raw content and
        zstd finalizes it into a regular dictionary with entropy tables
        and an id, which works from two samples up.
        """
        target_level = TRAIN_LEVELS.get(level, TRAIN_LEVELS[4]) if level else 0
        kwargs = {"level": target_level} if target_level else {}
        try:
            return zstd.train_dictionary(dict_size, samples, **kwargs).as_bytes()
        except zstd.ZstdError as e:
            cover_error = e

        try:
            return finalize_raw_dictionary(samples, dict_size, target_level)
        except (pyzstd.ZstdError, ValueError) as e:
            raise CodecError(f"failed to train dictionary: {cover_error}; finalize: {e}") from e


def finalize_raw_dictionary(samples: List[bytes], dict_size: int, level: int = 0) -> bytes:
    """Turn the leading ``dict_size`` bytes of ``samples`` into a finalized zstd dictionary."""
    content = pyzstd.ZstdDict(b"".join(samples)[:dict_size], is_raw=True)
    return pyzstd.finalize_dict(content, samples, dict_size, level).dict_content


def dictionary_id(dict_data: bytes) -> int:
    """Return the zstd dictionary id embedded in ``dict_data`` (0 for raw content)."""
    return zstd.ZstdCompressionDict(dict_data).dict_id()


def load_dictionary(use_dict: bool, dict_path: Optional[str], logger=None) -> Optional[bytes]:
    """Read the dictionary file when dictionary mode is on, else return None."""
    if not use_dict:
        return None
    with open(dict_path, "rb") as f:
        data = f.read()
    if logger is not None:
        logger.info("dictionary_loaded", path=dict_path, size=len(data))
    return data
