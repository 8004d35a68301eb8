# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

"""Exceptions raised by the client.

Transport failures are not wrapped: they surface as the ``httpx`` exception
that caused them.
"""

from typing import Optional


class OllamaError(Exception):
    """Base exception for all client errors."""


class ResponseError(OllamaError):
    """The server reported an error, either by status code or by an error document."""

    def __init__(self, error: str, status_code: Optional[int] = None) -> None:
        super().__init__(error)
        self.error = error
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.error
        return f"{self.error} (status code: {self.status_code})"


class ProtocolError(OllamaError):
    """The response body broke the NDJSON stream contract."""


class ValidationError(OllamaError):
    """A local precondition failed before any request was sent."""


class CancelledRequestError(OllamaError):
    """The request was aborted through its cancellation token."""

    def __init__(self, message: str, generation: int = 0) -> None:
        super().__init__(message)
        self.generation = generation
