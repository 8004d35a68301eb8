# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

from typing import Optional
from urllib.parse import urlparse

from ollama_async.constants import (
    DEFAULT_HOST,
    DEFAULT_HTTP_PORT,
    DEFAULT_HTTPS_PORT,
    DEFAULT_PORT,
)


def format_host(host: Optional[str]) -> str:
    """
    Normalizes a host string into ``scheme://hostname:port[/path]``.

    A bare hostname gets ``http://`` and the service's default port, while an
    explicit scheme without a port gets the scheme's well-known port.

    :param host: The host string, e.g. ``"localhost"``, ``":8000"`` or
        ``"https://example.com/ollama/"``.
    :return: The normalized base URL without a trailing slash.
    :raises ValueError: If the port is not a number.
    """
    if host is None or not host.strip():
        return DEFAULT_HOST
    host = host.strip()

    explicit_scheme = "://" in host
    if host.startswith(":"):
        host = f"http://127.0.0.1{host}"
        explicit_scheme = True
    if not explicit_scheme:
        host = f"http://{host}"

    parsed = urlparse(host)
    port = parsed.port
    if port is None:
        if not explicit_scheme:
            port = DEFAULT_PORT
        elif parsed.scheme == "https":
            port = DEFAULT_HTTPS_PORT
        else:
            port = DEFAULT_HTTP_PORT

    hostname = parsed.hostname or "127.0.0.1"
    if ":" in hostname:
        hostname = f"[{hostname}]"

    formatted = f"{parsed.scheme}://{hostname}:{port}{parsed.path}"
    return formatted.rstrip("/")
