# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ollama_async.constants import MESSAGES, SHA256, STATUS_SUCCESS
from ollama_async.errors import ValidationError


class Message(dict):
    """
    One JSON document read from a response stream.

    Generation replies finish with ``done: true``; progress replies of pull,
    push and create finish with ``status: "success"``. A document carrying an
    ``error`` key is an error report.
    """

    @property
    def done(self) -> bool:
        return self.get("done") is True

    @property
    def status(self) -> Optional[str]:
        return self.get("status")

    @property
    def error(self) -> Optional[str]:
        error = self.get("error")
        return None if error is None else str(error)

    @property
    def is_error(self) -> bool:
        return "error" in self

    @property
    def is_terminal(self) -> bool:
        return self.done or self.status == STATUS_SUCCESS

    @property
    def digest(self) -> Optional[str]:
        return self.get("digest")

    @property
    def total(self) -> Optional[int]:
        return self.get("total")

    @property
    def completed(self) -> Optional[int]:
        return self.get("completed")


@dataclass(frozen=True)
class StreamRequest:
    endpoint: str
    body: Dict[str, Any] = field(default_factory=dict)
    stream: bool = False

    @staticmethod
    def build(endpoint: str, body: Dict[str, Any]) -> "StreamRequest":
        """Resolves the streaming flag once and writes it back into the body."""
        payload = {key: value for key, value in body.items() if value is not None}
        stream = bool(payload.get("stream", False))
        payload["stream"] = stream
        return StreamRequest(endpoint=endpoint, body=payload, stream=stream)


@dataclass(frozen=True)
class BlobDigest:
    hex: str
    algorithm: str = SHA256

    @staticmethod
    def parse(value: str) -> "BlobDigest":
        """Accepts ``"<hex>"`` or ``"<algorithm>:<hex>"``."""
        value = value.strip()
        if ":" in value:
            algorithm, _, hex_value = value.partition(":")
            return BlobDigest(hex=hex_value.lower(), algorithm=algorithm.lower())
        return BlobDigest(hex=value.lower())

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.hex}"


@dataclass
class FileReference:
    path: str
    sha256: Optional[str] = None

    @staticmethod
    def from_value(value: Any) -> "FileReference":
        if isinstance(value, FileReference):
            return value
        if isinstance(value, dict):
            path = value.get("filepath") or value.get("path")
            if not path:
                raise ValidationError(MESSAGES["MISSING_FILE_PATH"].format(entry=value))
            return FileReference(path=os.fspath(path), sha256=value.get("sha256"))
        return FileReference(path=os.fspath(value))

    @property
    def basename(self) -> str:
        return os.path.basename(self.path)

    @property
    def digest(self) -> Optional[BlobDigest]:
        if self.sha256 is None:
            return None
        return BlobDigest.parse(self.sha256)
