"""
Generation-based cancellation shared by every in-flight request of a client.
"""

import asyncio


class CancellationToken:
    """One generation of the client's cancellation flag.

    Every request captures the token current at dispatch time. Cancelling
    flips the flag for all of them at once; there is no per-request cancel.
    """

    def __init__(self, generation: int = 0):
        self.generation = generation
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    def next(self) -> "CancellationToken":
        """Fresh, active token for the following generation."""
        return CancellationToken(self.generation + 1)
