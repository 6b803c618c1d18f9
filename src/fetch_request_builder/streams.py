"""
Request body streams for streamed and compressed payloads.
"""
import io
from typing import Any, AsyncIterator, Iterable, Iterator, Optional

import httpx


class BodyStream(httpx.SyncByteStream, httpx.AsyncByteStream):
    """
    Single-pass request body usable by both httpx.Client and httpx.AsyncClient.

    Chunks are pulled from the wrapped iterable only while the transport
    sends the request.
    """

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks = chunks

    def __iter__(self) -> Iterator[bytes]:
        for chunk in self._chunks:
            yield chunk

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self._chunks:
            yield chunk


def remaining_length(stream: Any) -> Optional[int]:
    """
    Bytes left between the current position of a stream and its end.

    Returns None when the stream cannot seek.
    """
    try:
        if not stream.seekable():
            return None
        position = stream.tell()
        end = stream.seek(0, io.SEEK_END)
        stream.seek(position)
    except (AttributeError, OSError):
        return None
    return end - position
