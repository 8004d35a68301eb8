# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

from ollama_async.client import AsyncClient
from ollama_async.configs import ClientConfig
from ollama_async.constants import VERSION
from ollama_async.errors import (
    CancelledRequestError,
    OllamaError,
    ProtocolError,
    ResponseError,
    ValidationError,
)
from ollama_async.streaming import CancellationToken, MessageStream, TokenSource
from ollama_async.types import BlobDigest, FileReference, Message, StreamRequest

__version__ = VERSION

__all__ = [
    "AsyncClient",
    "BlobDigest",
    "CancellationToken",
    "CancelledRequestError",
    "ClientConfig",
    "FileReference",
    "Message",
    "MessageStream",
    "OllamaError",
    "ProtocolError",
    "ResponseError",
    "StreamRequest",
    "TokenSource",
    "ValidationError",
]
