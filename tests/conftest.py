import asyncio
from typing import Any

import pytest


class FakeStream:
    """Async-iterable stream with a `close()` like anthropic's AsyncStream.

    Yields `items`, then raises `error` if given, or hangs forever when
    `hang` is set.
    """

    def __init__(
        self,
        items: list[Any],
        *,
        error: Exception | None = None,
        hang: bool = False,
        log: list[str] | None = None,
    ) -> None:
        self._items = list(items)
        self._error = error
        self._hang = hang
        self._log = log
        self.closed = False

    def __aiter__(self) -> "FakeStream":
        return self

    async def __anext__(self) -> Any:
        await asyncio.sleep(0)
        if self._items:
            item = self._items.pop(0)
            if self._log is not None:
                self._log.append(f"produce:{item}")
            return item
        if self._error is not None:
            raise self._error
        if self._hang:
            await asyncio.Event().wait()
        raise StopAsyncIteration

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_stream() -> type[FakeStream]:
    return FakeStream
