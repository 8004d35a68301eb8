# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

import asyncio
from typing import Awaitable, List, Optional, TypeVar

from ollama_async.constants import MESSAGES
from ollama_async.errors import CancelledRequestError

T = TypeVar("T")


class CancellationToken:
    """
    Cancellation flag shared by every request issued under it.

    Requests take the token when they start and pass each transport await
    through ``guard``; cancelling the token aborts those awaits.
    """

    def __init__(self, generation: int = 0) -> None:
        self.generation = generation
        self._cancelled = False
        self._waiters: List[asyncio.Future] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        for waiter in self._waiters:
            if not waiter.done():
                waiter.set_result(None)
        self._waiters.clear()

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise CancelledRequestError(MESSAGES["REQUEST_CANCELLED"], self.generation)

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """
        Awaits ``awaitable`` unless the token is cancelled first.

        :raises CancelledRequestError: If the token is, or becomes, cancelled.
        """
        if self._cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self.raise_if_cancelled()

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except BaseException:
            task.cancel()
            raise
        finally:
            if waiter in self._waiters:
                self._waiters.remove(waiter)
            if not waiter.done():
                waiter.cancel()

        if task.done():
            return task.result()
        task.cancel()
        await asyncio.wait({task})
        raise CancelledRequestError(MESSAGES["REQUEST_CANCELLED"], self.generation)

    def __repr__(self) -> str:
        return f"CancellationToken(generation={self.generation}, cancelled={self._cancelled})"


class TokenSource:
    """Holds the one active token of a client."""

    def __init__(self) -> None:
        self._current = CancellationToken()

    def current(self) -> CancellationToken:
        return self._current

    def cancel(self) -> CancellationToken:
        """
        Cancels the active token and installs a fresh one.

        :return: The token that was cancelled.
        """
        cancelled = self._current
        self._current = CancellationToken(generation=cancelled.generation + 1)
        cancelled.cancel()
        return cancelled

    def resolve(self, token: Optional[CancellationToken]) -> CancellationToken:
        """Returns ``token`` if given, else a snapshot of the active token."""
        return token if token is not None else self._current
