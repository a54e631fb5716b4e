import asyncio
import logging
import sys
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TextIO

logger = logging.getLogger(__name__)

SPINNER_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")


@dataclass(frozen=True)
class ProgressState:
    current_frame_index: int
    running: bool


class ProgressIndicator:
    """Spinner on a single status line while a long call is outstanding.

    Purely cosmetic. The periodic callback is scheduled with
    `loop.call_later` and the handle is owned by this instance; at most one
    is pending at any time. `start` while running is a no-op.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        *,
        interval: float = 0.1,
        frames: Sequence[str] = SPINNER_FRAMES,
    ) -> None:
        if not frames:
            raise ValueError("frames must not be empty")
        self._stream = stream if stream is not None else sys.stdout
        self._interval = interval
        self._frames = tuple(frames)
        self._frame_index = 0
        self._message = ""
        self._handle: asyncio.TimerHandle | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def state(self) -> ProgressState:
        return ProgressState(
            current_frame_index=self._frame_index, running=self.running
        )

    def start(self, message: str = "Processing") -> None:
        """Begin the animation. Must be called from a running event loop."""
        if self.running:
            logger.debug("Progress indicator already running")
            return
        self._message = message
        self._tick()

    def stop(self, final_message: str | None = None) -> None:
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        if final_message:
            self._stream.write(f"\r✅ {final_message}\n")
        else:
            self._stream.write("\r")
        self._stream.flush()

    @asynccontextmanager
    async def running_while(
        self, message: str = "Processing", final_message: str | None = None
    ) -> AsyncIterator["ProgressIndicator"]:
        self.start(message)
        try:
            yield self
        finally:
            self.stop(final_message)

    def _tick(self) -> None:
        self._stream.write(f"\r{self._frames[self._frame_index]} {self._message}...")
        self._stream.flush()
        self._frame_index = (self._frame_index + 1) % len(self._frames)
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._interval, self._tick)
