"""Deflate data into a sequence of fixed-size chunks."""

from __future__ import annotations

import zlib
from typing import List, Union

DEFAULT_COMPRESS_CHUNK_SIZE = 8192
COMPRESSION_LEVEL = 5

BytesLike = Union[bytes, bytearray, memoryview]


def compress_chunks(
    data: BytesLike, chunk_size: int = DEFAULT_COMPRESS_CHUNK_SIZE
) -> List[bytes]:
    """Compress ``data`` with zlib and split the result into chunks.

    Every chunk but the last holds exactly ``chunk_size`` bytes. When the
    compressed output fills the final chunk exactly, an empty chunk follows
    it, marking the end of the stream.
    """
    if chunk_size <= 0:
        raise ValueError("chunk size must be positive")
    compressor = zlib.compressobj(COMPRESSION_LEVEL)
    output = compressor.compress(bytes(data)) + compressor.flush(zlib.Z_FINISH)
    chunks = [output[start : start + chunk_size] for start in range(0, len(output), chunk_size)]
    if len(output) % chunk_size == 0:
        chunks.append(b"")
    return chunks