# src/code_kit/streaming/accumulator.py

import inspect
import logging
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable
from contextlib import aclosing, asynccontextmanager
from dataclasses import dataclass
from typing import Any

from code_kit.errors import StreamError

from .fragments import text_of

logger = logging.getLogger(__name__)

Observer = Callable[[str], None]


@dataclass(frozen=True)
class AccumulatedResult:
    """Final text of one streamed call."""

    text: str
    char_count: int
    fragment_count: int
    completed: bool  # True when the source sent an explicit completion signal


@asynccontextmanager
async def _closing(source: Any) -> AsyncIterator[Any]:
    """Release the source on every exit path: end, error, break, cancel."""
    try:
        yield source
    finally:
        close = getattr(source, "aclose", None) or getattr(source, "close", None)
        if close is not None:
            result = close()
            if inspect.isawaitable(result):
                await result
            logger.debug("Closed stream source %s", type(source).__name__)


class StreamAccumulator:
    """Assemble streamed fragments into one ordered result.

    Fragments are consumed strictly in delivery order. For each fragment the
    text is appended to the buffer, then forwarded synchronously to every
    observer, and only then is the next fragment requested.

    Single-use: one accumulator owns the buffer of one call.
    """

    def __init__(
        self,
        extract: Callable[[Any], str | None] = text_of,
        *,
        is_complete: Callable[[Any], bool] | None = None,
        observers: Iterable[Observer] = (),
    ) -> None:
        self._extract = extract
        self._is_complete = is_complete
        self._observers: list[Observer] = list(observers)
        self._parts: list[str] = []
        self._completed = False
        self._used = False

    def add_observer(self, observer: Observer) -> None:
        self._observers.append(observer)

    @property
    def text(self) -> str:
        """Text accumulated so far. Still readable after a failure."""
        return "".join(self._parts)

    def result(self) -> AccumulatedResult:
        text = self.text
        return AccumulatedResult(
            text=text,
            char_count=len(text),
            fragment_count=len(self._parts),
            completed=self._completed,
        )

    @asynccontextmanager
    async def open(
        self, source: AsyncIterable[Any]
    ) -> AsyncIterator[AsyncIterator[str]]:
        """Scope one stream and yield an iterator over appended fragments.

        Each fragment is yielded after observers have seen it. The caller may
        stop iterating at any point; the source is closed when the block
        exits, whether by break, error or cancellation:

            async with accumulator.open(source) as fragments:
                async for text in fragments:
                    if "```" in text:
                        break

        Raises:
            StreamError: The source failed. `partial_text` holds the buffer.
            RuntimeError: The accumulator was already used.
        """
        if self._used:
            raise RuntimeError("StreamAccumulator is single-use")
        self._used = True

        async with _closing(source):
            async with aclosing(self._iter_text(source)) as fragments:
                yield fragments

    async def consume(self, source: AsyncIterable[Any]) -> AccumulatedResult:
        async with self.open(source) as fragments:
            async for _ in fragments:
                pass
        result = self.result()
        logger.debug(
            "Stream finished: %d fragments, %d characters, completed=%s",
            result.fragment_count,
            result.char_count,
            result.completed,
        )
        return result

    async def _iter_text(self, source: AsyncIterable[Any]) -> AsyncIterator[str]:
        iterator = aiter(source)
        while True:
            try:
                fragment = await anext(iterator)
            except StopAsyncIteration:
                break
            except Exception as exc:
                partial = self.text
                logger.warning(
                    "Stream failed after %d characters: %r", len(partial), exc
                )
                raise StreamError(
                    f"Stream failed: {exc}", partial_text=partial
                ) from exc

            if self._is_complete is not None and self._is_complete(fragment):
                self._completed = True
                break

            text = self._extract(fragment)
            if not text:
                continue

            self._parts.append(text)
            for observer in self._observers:
                observer(text)
            yield text
