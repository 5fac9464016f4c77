"""Join-all helper for concurrent fan-out.

settle_all() waits for every awaitable and returns one Settled per input, in
input order. A failing branch does not cancel the others; its exception is
returned as a value instead of raised.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Settled(Generic[T]):
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def value_or(self, default: T) -> T:
        return self.value if self.error is None and self.value is not None else default


async def settle_all(*aws: Awaitable[T]) -> list[Settled[T]]:
    results = await asyncio.gather(*aws, return_exceptions=True)
    settled: list[Settled[T]] = []
    for res in results:
        if isinstance(res, Exception):
            settled.append(Settled(error=res))
        elif isinstance(res, BaseException):
            # CancelledError / KeyboardInterrupt are not branch failures.
            raise res
        else:
            settled.append(Settled(value=res))
    return settled
