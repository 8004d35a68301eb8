# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

import json
import platform
from typing import Dict, Optional

import httpx

from ollama_async.constants import CONTENT_TYPE_JSON, VERSION
from ollama_async.errors import ResponseError


def user_agent() -> str:
    return (
        f"ollama-async/{VERSION} "
        f"({platform.machine().lower()} {platform.system().lower()} "
        f"Python/{platform.python_version()})"
    )


def default_headers() -> Dict[str, str]:
    return {
        "Content-Type": CONTENT_TYPE_JSON,
        "Accept": CONTENT_TYPE_JSON,
        "User-Agent": user_agent(),
    }


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def error_message(response: httpx.Response, default_message: Optional[str] = None) -> str:
    """
    Extracts the server's error text from an already read response.

    The ``error`` field of a JSON body wins, then the raw body text, then
    ``default_message``, then a generic ``Error <status>: <reason>``.
    """
    fallback = default_message or f"Error {response.status_code}: {response.reason_phrase}"
    text = response.text
    if not text:
        return fallback
    try:
        data = json.loads(text)
    except ValueError:
        return fallback if default_message else text
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return fallback


async def raise_for_response(
    response: httpx.Response, default_message: Optional[str] = None
) -> None:
    """Reads the body of a failed response and raises a ``ResponseError``."""
    if is_success(response.status_code):
        return
    try:
        await response.aread()
    finally:
        await response.aclose()
    raise ResponseError(error_message(response, default_message), response.status_code)
