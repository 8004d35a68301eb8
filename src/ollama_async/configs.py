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

import toml

from ollama_async.constants import CHUNK_SIZE, DEFAULT_HOST

HOST_ENV = "OLLAMA_HOST"


@dataclass
class ClientConfig:
    host: str = DEFAULT_HOST
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: Optional[float] = None
    chunk_size: int = CHUNK_SIZE
    log_dir: Optional[str] = None

    @classmethod
    def from_toml(cls, path: Optional[str]) -> "ClientConfig":
        config = cls.from_env()
        if path:
            config.apply_toml(path)
        return config

    @classmethod
    def from_env(cls) -> "ClientConfig":
        config = cls()
        host = os.environ.get(HOST_ENV)
        if host:
            config.host = host
        return config

    def apply_toml(self, path: str) -> None:
        config = toml.load(path)

        if "client" in config:
            client = config["client"]
            self.host = client.get("host", self.host)
            self.timeout = self._empty_float(client.get("timeout", self.timeout))
            self.chunk_size = int(client.get("chunk-size", self.chunk_size))
            self.log_dir = self._empty_str(client.get("log-dir", self.log_dir))

        if "headers" in config:
            self.headers.update({str(k): str(v) for k, v in config["headers"].items()})

    @staticmethod
    def _empty_str(value: Optional[str]) -> Optional[str]:
        if value is None or value == "":
            return None
        return value

    @staticmethod
    def _empty_float(value: Any) -> Optional[float]:
        if value is None or value == "":
            return None
        return float(value)
