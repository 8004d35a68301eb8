# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Optional, Sequence, Union

import httpx

from ollama_async.blobs.create import prepare_create_request
from ollama_async.blobs.store import BlobStore
from ollama_async.configs import ClientConfig
from ollama_async.constants import STATUS_SUCCESS
from ollama_async.streaming.cancellation import CancellationToken, TokenSource
from ollama_async.streaming.stream import MessageStream
from ollama_async.types import Message, StreamRequest
from ollama_async.utils.host_utils import format_host
from ollama_async.utils.http_utils import default_headers, raise_for_response
from ollama_async.utils.image_utils import Image, encode_images, encode_message_images
from ollama_async.utils.logging import build_logger, set_log_dir

logger = build_logger("ollama_async.client", "ollama_async.log")

StreamResult = Union[Message, MessageStream]


class AsyncClient:
    """
    Asynchronous client of a local inference server.

    Generation, chat, pull, push and create take a ``stream`` flag: with
    ``stream=True`` they return a ``MessageStream`` to iterate, otherwise the
    final ``Message``.

    Every request captures the client's current cancellation token when it
    is issued, unless a ``token`` is passed explicitly. ``abort()`` cancels
    all requests holding the current token and installs a new one.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if config is None:
            config = ClientConfig.from_env()
        self.config = dataclasses.replace(config, headers=dict(config.headers))
        if host is not None:
            self.config.host = host
        if headers:
            self.config.headers.update(headers)
        if timeout is not None:
            self.config.timeout = timeout
        if self.config.log_dir:
            set_log_dir(self.config.log_dir)

        self.host = format_host(self.config.host)
        self.headers = {**default_headers(), **self.config.headers}
        self._client = httpx.AsyncClient(
            base_url=self.host,
            headers=self.headers,
            timeout=httpx.Timeout(self.config.timeout),
            transport=transport,
        )
        self._tokens = TokenSource()
        self._blobs = BlobStore(self._client, self.config.chunk_size)

    @property
    def blobs(self) -> BlobStore:
        return self._blobs

    # ======================
    # Cancellation
    # ======================
    def current_token(self) -> CancellationToken:
        return self._tokens.current()

    def abort(self) -> None:
        """Cancels every request issued under the current token."""
        cancelled = self._tokens.cancel()
        logger.info(f"Aborted requests of token generation {cancelled.generation}")

    # ======================
    # Transport
    # ======================
    async def _request(
        self,
        method: str,
        path: str,
        token: Optional[CancellationToken] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        token = self._tokens.resolve(token)
        response = await token.guard(self._client.request(method, path, **kwargs))
        await raise_for_response(response)
        return response

    async def _stream_request(
        self, request: StreamRequest, token: Optional[CancellationToken] = None
    ) -> StreamResult:
        """
        Issues one streamable call.

        :return: A ``MessageStream`` when the request streams, otherwise the
            single terminal ``Message``.
        """
        token = self._tokens.resolve(token)
        http_request = self._client.build_request(
            "POST", f"/api/{request.endpoint}", json=request.body
        )
        response = await token.guard(self._client.send(http_request, stream=True))
        await raise_for_response(response)

        stream = MessageStream(response, token)
        if request.stream:
            return stream
        return await stream.single()

    # ======================
    # Streamable endpoints
    # ======================
    async def generate(
        self,
        model: str,
        prompt: str = "",
        suffix: Optional[str] = None,
        system: Optional[str] = None,
        template: Optional[str] = None,
        context: Optional[Sequence[int]] = None,
        raw: Optional[bool] = None,
        format: Optional[Union[str, Dict[str, Any]]] = None,
        images: Optional[Sequence[Image]] = None,
        options: Optional[Dict[str, Any]] = None,
        keep_alive: Optional[Union[str, float]] = None,
        think: Optional[Union[bool, str]] = None,
        stream: bool = False,
        token: Optional[CancellationToken] = None,
    ) -> StreamResult:
        body = {
            "model": model,
            "prompt": prompt,
            "suffix": suffix,
            "system": system,
            "template": template,
            "context": list(context) if context is not None else None,
            "raw": raw,
            "format": format,
            "images": await encode_images(images),
            "options": options,
            "keep_alive": keep_alive,
            "think": think,
            "stream": stream,
        }
        return await self._stream_request(StreamRequest.build("generate", body), token)

    async def chat(
        self,
        model: str,
        messages: Optional[Sequence[Dict[str, Any]]] = None,
        tools: Optional[Sequence[Dict[str, Any]]] = None,
        format: Optional[Union[str, Dict[str, Any]]] = None,
        options: Optional[Dict[str, Any]] = None,
        keep_alive: Optional[Union[str, float]] = None,
        think: Optional[Union[bool, str]] = None,
        stream: bool = False,
        token: Optional[CancellationToken] = None,
    ) -> StreamResult:
        body = {
            "model": model,
            "messages": await encode_message_images(messages),
            "tools": list(tools) if tools is not None else None,
            "format": format,
            "options": options,
            "keep_alive": keep_alive,
            "think": think,
            "stream": stream,
        }
        return await self._stream_request(StreamRequest.build("chat", body), token)

    async def pull(
        self,
        model: str,
        insecure: bool = False,
        stream: bool = False,
        token: Optional[CancellationToken] = None,
    ) -> StreamResult:
        body = {"model": model, "insecure": insecure, "stream": stream}
        return await self._stream_request(StreamRequest.build("pull", body), token)

    async def push(
        self,
        model: str,
        insecure: bool = False,
        stream: bool = False,
        token: Optional[CancellationToken] = None,
    ) -> StreamResult:
        body = {"model": model, "insecure": insecure, "stream": stream}
        return await self._stream_request(StreamRequest.build("push", body), token)

    async def create(
        self,
        model: str,
        from_: Optional[str] = None,
        files: Optional[Sequence[Any]] = None,
        modelfile: Optional[str] = None,
        path: Optional[str] = None,
        quantize: Optional[str] = None,
        template: Optional[str] = None,
        license: Optional[Union[str, Sequence[str]]] = None,
        system: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
        messages: Optional[Sequence[Dict[str, Any]]] = None,
        adapters: Optional[Dict[str, str]] = None,
        stream: bool = False,
        token: Optional[CancellationToken] = None,
    ) -> StreamResult:
        """
        Creates a model, uploading any local files it needs first.

        Blob uploads and the create call share one token, so ``abort()``
        stops the whole operation.
        """
        token = self._tokens.resolve(token)
        body = await prepare_create_request(
            self._blobs,
            token,
            model,
            from_=from_,
            files=files,
            modelfile=modelfile,
            path=path,
            quantize=quantize,
            template=template,
            license=license,
            system=system,
            parameters=parameters,
            messages=list(messages) if messages is not None else None,
            adapters=adapters,
            stream=stream,
        )
        return await self._stream_request(StreamRequest.build("create", body), token)

    # ======================
    # Plain endpoints
    # ======================
    async def list(self, token: Optional[CancellationToken] = None) -> Message:
        response = await self._request("GET", "/api/tags", token)
        return Message(response.json())

    async def ps(self, token: Optional[CancellationToken] = None) -> Message:
        response = await self._request("GET", "/api/ps", token)
        return Message(response.json())

    async def show(self, model: str, token: Optional[CancellationToken] = None) -> Message:
        response = await self._request("POST", "/api/show", token, json={"model": model})
        return Message(response.json())

    async def copy(
        self, source: str, destination: str, token: Optional[CancellationToken] = None
    ) -> Message:
        await self._request(
            "POST", "/api/copy", token, json={"source": source, "destination": destination}
        )
        return Message(status=STATUS_SUCCESS)

    async def delete(self, model: str, token: Optional[CancellationToken] = None) -> Message:
        await self._request("DELETE", "/api/delete", token, json={"model": model})
        return Message(status=STATUS_SUCCESS)

    async def embed(
        self,
        model: str,
        input: Union[str, Sequence[str]],
        truncate: Optional[bool] = None,
        options: Optional[Dict[str, Any]] = None,
        keep_alive: Optional[Union[str, float]] = None,
        token: Optional[CancellationToken] = None,
    ) -> Message:
        body = {
            "model": model,
            "input": input if isinstance(input, str) else list(input),
            "truncate": truncate,
            "options": options,
            "keep_alive": keep_alive,
        }
        body = {key: value for key, value in body.items() if value is not None}
        response = await self._request("POST", "/api/embed", token, json=body)
        return Message(response.json())

    async def version(self, token: Optional[CancellationToken] = None) -> Message:
        response = await self._request("GET", "/api/version", token)
        return Message(response.json())

    # ======================
    # Lifecycle
    # ======================
    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
