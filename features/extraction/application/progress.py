"""
Progress model for extraction runs.

ProgressReporter is created fresh for every run, so progress starts over at zero
each time. It fans events out to observers (plain callables) and refuses to let
the page number or percentage go backwards.

ProgressChannel turns the callback stream into an async iterator for consumers
that want to stream events (e.g. NDJSON responses).
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Callable, List, Optional, Tuple

from features.extraction.domain.entities import PipelineState, ProgressState

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressState], None]


class ProgressReporter:
    """Emits monotonically non-decreasing ProgressState events."""

    def __init__(self, *observers: Optional[ProgressCallback]):
        self._observers: List[ProgressCallback] = [o for o in observers if o is not None]
        self._history: List[ProgressState] = []

    @property
    def history(self) -> Tuple[ProgressState, ...]:
        return tuple(self._history)

    @property
    def last(self) -> Optional[ProgressState]:
        return self._history[-1] if self._history else None

    def emit(
        self,
        current_page: int,
        total_pages: int,
        percent_complete: int,
        status_message: str,
        state: PipelineState,
    ) -> ProgressState:
        last = self.last
        if last is not None and (
            current_page < last.current_page or percent_complete < last.percent_complete
        ):
            raise ValueError(
                f"Progress must not regress: {last.current_page}/{last.percent_complete}% "
                f"-> {current_page}/{percent_complete}%"
            )

        event = ProgressState(
            current_page=current_page,
            total_pages=total_pages,
            percent_complete=percent_complete,
            status_message=status_message,
            state=state,
        )
        self._history.append(event)
        logger.debug(
            "Progress: page %d/%d (%d%%) %s", current_page, total_pages, percent_complete, status_message
        )

        for observer in self._observers:
            observer(event)
        return event

    def fail(self, status_message: str = "Error during extraction") -> ProgressState:
        """Emit a terminal FAILED event that keeps the last page and percentage."""
        last = self.last
        if last is None:
            return self.emit(0, 0, 0, status_message, PipelineState.FAILED)
        return self.emit(
            last.current_page,
            last.total_pages,
            last.percent_complete,
            status_message,
            PipelineState.FAILED,
        )


_CLOSED = object()


class ProgressChannel:
    """
    Async iterator over progress events.

    Pass ``channel.publish`` as the pipeline's ``on_progress`` callback and call
    ``close()`` when the run ends. Must be used from the event loop thread.
    """

    def __init__(self):
        self._queue: "asyncio.Queue[object]" = asyncio.Queue()
        self._closed = False

    def publish(self, event: ProgressState) -> None:
        if self._closed:
            return
        self._queue.put_nowait(event)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSED)

    async def __aiter__(self) -> AsyncIterator[ProgressState]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item
