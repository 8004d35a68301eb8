# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

from typing import AsyncIterator, Optional

import httpx

from ollama_async.constants import MESSAGES
from ollama_async.errors import ProtocolError, ResponseError
from ollama_async.streaming.cancellation import CancellationToken
from ollama_async.streaming.decoder import parse_json_lines
from ollama_async.types import Message
from ollama_async.utils.logging import build_logger

logger = build_logger("ollama_async.streaming.stream", "ollama_async_stream.log")


async def _next_chunk(chunks: AsyncIterator[bytes]) -> Optional[bytes]:
    try:
        return await chunks.__anext__()
    except StopAsyncIteration:
        return None


class MessageStream:
    """
    Lazy sequence of ``Message`` objects read from one streaming response.

    The sequence ends right after the first terminal message. An error
    document raises ``ResponseError``; running out of input before a
    terminal message raises ``ProtocolError``. Each chunk read goes through
    the request's cancellation token. A stream can be iterated only once.
    """

    def __init__(self, response: httpx.Response, token: CancellationToken) -> None:
        self._response = response
        self._token = token
        self._bytes_received = 0
        self._finished = False
        self._closed = False
        self._chunks = self._raw_chunks()
        self._messages = parse_json_lines(self._chunks)

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def status_code(self) -> int:
        return self._response.status_code

    async def _raw_chunks(self) -> AsyncIterator[bytes]:
        chunks = self._response.aiter_bytes()
        try:
            while True:
                chunk = await self._token.guard(_next_chunk(chunks))
                if chunk is None:
                    return
                self._bytes_received += len(chunk)
                yield chunk
        finally:
            await chunks.aclose()

    def __aiter__(self) -> "MessageStream":
        return self

    async def __anext__(self) -> Message:
        if self._finished:
            raise StopAsyncIteration
        try:
            message = await self._messages.__anext__()
        except StopAsyncIteration:
            await self._finish()
            if self._bytes_received == 0:
                raise ProtocolError(MESSAGES["MISSING_BODY"])
            raise ProtocolError(MESSAGES["STREAM_NOT_TERMINATED"])
        except BaseException:
            await self._finish()
            raise

        if message.is_error:
            await self._finish()
            raise ResponseError(message.error or "", self._response.status_code)
        if message.is_terminal:
            await self._finish()
        return message

    async def single(self) -> Message:
        """
        Reads the one reply of a non-streaming request.

        :raises ProtocolError: If the reply is missing or not terminal.
        """
        message = await self.__anext__()
        if not message.is_terminal:
            await self._finish()
            raise ProtocolError(MESSAGES["EXPECTED_COMPLETED"])
        return message

    async def _finish(self) -> None:
        self._finished = True
        await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._finished = True
        try:
            await self._messages.aclose()
            await self._chunks.aclose()
        finally:
            await self._response.aclose()
        logger.debug(
            f"Closed stream {self._response.request.url} after {self._bytes_received} bytes"
        )

    async def __aenter__(self) -> "MessageStream":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
