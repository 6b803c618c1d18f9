"""
Lazy gzip compression of request bodies.
"""
import zlib
from typing import BinaryIO, Iterable, Iterator

# zlib window bits for a gzip header and trailer
GZIP_WBITS = 16 + zlib.MAX_WBITS


def iter_chunks(stream: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    """Read a binary stream chunk by chunk until exhausted."""
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        yield chunk


def gzip_bytes(data: bytes, level: int = 9) -> bytes:
    """Compress an in-memory body in one step."""
    compressor = zlib.compressobj(level, zlib.DEFLATED, GZIP_WBITS)
    return compressor.compress(data) + compressor.flush()


def gzip_chunks(chunks: Iterable[bytes], level: int = 9) -> Iterator[bytes]:
    """Compress a body as it is read, never holding more than one chunk."""
    compressor = zlib.compressobj(level, zlib.DEFLATED, GZIP_WBITS)
    for chunk in chunks:
        compressed = compressor.compress(chunk)
        if compressed:
            yield compressed
    yield compressor.flush()
