import asyncio
from collections.abc import Awaitable, Callable

Sleep = Callable[[float], Awaitable[None]]


class PolitenessPolicy:
    """Delays between outbound requests to the club directory.

    Injected into the pagination walker and the batch runner; tests build it
    with zero delays.
    """

    def __init__(
        self,
        item_delay: float = 1.0,
        page_delay: float = 1.0,
        partition_delay: float = 2.0,
        sleep: Sleep = asyncio.sleep,
    ):
        self.item_delay = item_delay
        self.page_delay = page_delay
        self.partition_delay = partition_delay
        self._sleep = sleep

    async def _pause(self, seconds: float) -> None:
        if seconds > 0:
            await self._sleep(seconds)

    async def before_item(self) -> None:
        await self._pause(self.item_delay)

    async def between_pages(self) -> None:
        await self._pause(self.page_delay)

    async def between_partitions(self) -> None:
        await self._pause(self.partition_delay)

    @classmethod
    def immediate(cls) -> "PolitenessPolicy":
        return cls(item_delay=0, page_delay=0, partition_delay=0)
