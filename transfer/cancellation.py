"""Cooperative cancellation token for in-flight transfers."""

import asyncio
from typing import List


class CancellationToken:
    """
    Collects cancellation requests until the running transfer observes them.

    Each request gets its own future; all of them complete together when the
    transfer acknowledges (abort finished) or rejects (transfer ended some
    other way).
    """

    def __init__(self):
        self._waiters: List[asyncio.Future] = []

    @property
    def requested(self) -> bool:
        """True while at least one request is waiting to be honored."""
        return any(not waiter.done() for waiter in self._waiters)

    def request(self) -> asyncio.Future:
        """
        Register a cancellation request.

        Returns:
            Future resolved once the transfer has aborted
        """
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        return waiter

    def acknowledge(self) -> None:
        """Resolve every pending request."""
        for waiter in self._drain():
            waiter.set_result(None)

    def reject(self, exc: BaseException) -> None:
        """
        Fail every pending request.

        Args:
            exc: Exception delivered to each waiting caller
        """
        for waiter in self._drain():
            waiter.set_exception(exc)

    def _drain(self) -> List[asyncio.Future]:
        waiters, self._waiters = self._waiters, []
        return [waiter for waiter in waiters if not waiter.done()]
