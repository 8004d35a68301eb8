# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

import codecs
import json
from typing import AsyncIterable, AsyncIterator, List, Optional

from ollama_async.types import Message
from ollama_async.utils.logging import build_logger

logger = build_logger("ollama_async.streaming.decoder", "ollama_async_stream.log")


class LineDecoder:
    """
    Splits a stream of byte chunks into text lines.

    Chunk boundaries are arbitrary, so a multi-byte character may arrive in
    two pieces; the incremental decoder keeps the first piece until the rest
    shows up.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> List[str]:
        """
        Consumes one chunk and returns the lines it completed.

        :param chunk: Raw bytes in arrival order.
        :return: Complete lines without their trailing newline.
        """
        self._buffer += self._decoder.decode(chunk)
        if "\n" not in self._buffer:
            return []
        *lines, self._buffer = self._buffer.split("\n")
        return lines

    def finish(self) -> Optional[str]:
        """
        Flushes the decoder at end of input.

        :return: The trailing unterminated line, or None if nothing is left.
        """
        self._buffer += self._decoder.decode(b"", final=True)
        remainder, self._buffer = self._buffer, ""
        if not remainder.strip():
            return None
        return remainder


def _parse_line(line: str) -> Optional[Message]:
    if not line.strip():
        return None
    try:
        document = json.loads(line)
    except ValueError:
        logger.warning(f"Skipping invalid JSON line: {line!r}")
        return None
    if not isinstance(document, dict):
        logger.warning(f"Skipping non-object JSON line: {line!r}")
        return None
    return Message(document)


async def parse_json_lines(chunks: AsyncIterable[bytes]) -> AsyncIterator[Message]:
    """
    Parses newline-delimited JSON from raw byte chunks.

    Yields one ``Message`` per line, in order. Malformed lines are logged and
    dropped without ending the sequence.
    """
    decoder = LineDecoder()
    async for chunk in chunks:
        for line in decoder.feed(chunk):
            message = _parse_line(line)
            if message is not None:
                yield message
    remainder = decoder.finish()
    if remainder is not None:
        message = _parse_line(remainder)
        if message is not None:
            yield message
