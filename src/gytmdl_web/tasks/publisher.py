"""Observer side of a task: live result stream and SSE encoding."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from queue import Empty

from gytmdl_web.core import TaskNotFoundError
from gytmdl_web.tasks.models import Result, Task
from gytmdl_web.tasks.registry import TaskRegistry

logger = logging.getLogger(__name__)

# Seconds an observer waits for a result before re-checking its state
DEFAULT_POLL_INTERVAL = 0.25

CLOSED_CHANNEL_MESSAGE = "Updates channel closed unexpectedly on server."
COMPLETE_MESSAGE = "Task completed"


class EventKind(Enum):
    """Kind of event delivered to an observer."""

    RESULT = "result"
    COMPLETE = "complete"
    ERROR = "error"


class ObserverState(Enum):
    """Lifecycle state of an observer."""

    CONNECTED = "connected"
    CLOSED = "closed"


@dataclass(frozen=True)
class StreamEvent:
    """One event on a task's stream.

    Attributes:
        kind: What the event carries.
        result: The processed link, for RESULT events.
        message: Text for COMPLETE and ERROR events.
    """

    kind: EventKind
    result: Result | None = None
    message: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.kind is not EventKind.RESULT

    def to_sse(self) -> str:
        """Encode the event as a Server-Sent Events frame."""
        if self.kind is EventKind.RESULT:
            assert self.result is not None  # nosec B101 - set for RESULT events
            return f"data: {self.result.to_json()}\n\n"
        if self.kind is EventKind.COMPLETE:
            return f"event: complete\ndata: {json.dumps({'message': self.message})}\n\n"
        return f"event: error\ndata: {json.dumps({'error': self.message})}\n\n"


def connection_comment(task_id: str) -> str:
    """SSE comment sent once when an observer attaches."""
    return f": connection established for task {task_id}\n\n"


class TaskObserver:
    """Reads one task's channels until the terminal event.

    Several observers of the same task compete for results: each Result
    is delivered to at most one of them. Every observer gets its own
    terminal event. Creating an observer marks the task as attached,
    which releases results the executor is holding back.
    """

    def __init__(self, task: Task, poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {poll_interval}")
        self.task = task
        self.poll_interval = poll_interval
        self.state = ObserverState.CONNECTED
        task.attached.set()

    @classmethod
    def attach(
        cls,
        registry: TaskRegistry,
        task_id: str,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> TaskObserver:
        """Attach to a live task.

        Raises:
            TaskNotFoundError: If the id is unknown or the task already completed.
        """
        task = registry.lookup(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        logger.info("Observer attached to task %s", task_id)
        return cls(task, poll_interval)

    @property
    def connected(self) -> bool:
        return self.state is ObserverState.CONNECTED

    def close(self) -> None:
        """Move to CLOSED. Further calls to next_event return None."""
        self.state = ObserverState.CLOSED

    def next_event(self, timeout: float | None = None) -> StreamEvent | None:
        """Wait up to ``timeout`` seconds for the next event.

        Results are always drained before the completion signal is
        honoured: the executor publishes every Result before it sets the
        signal, so an empty queue after the signal means nothing is left.

        Returns:
            The next event, or None if nothing arrived in time or the
            observer is closed.
        """
        if not self.connected:
            return None

        wait = self.poll_interval if timeout is None else timeout
        try:
            result = self.task.updates.get(timeout=wait)
        except Empty:
            pass
        else:
            return self._result_event(result)

        if self.task.done.is_set():
            try:
                return self._result_event(self.task.updates.get_nowait())
            except Empty:
                pass
            self.close()
            logger.info("Task %s: All items processed. Sending completion event.", self.task.id)
            return StreamEvent(kind=EventKind.COMPLETE, message=COMPLETE_MESSAGE)

        if self.task.closed:
            self.close()
            logger.warning("Task %s: Updates channel closed unexpectedly.", self.task.id)
            return StreamEvent(kind=EventKind.ERROR, message=CLOSED_CHANNEL_MESSAGE)

        return None

    def events(
        self, is_disconnected: Callable[[], bool] | None = None
    ) -> Iterator[StreamEvent]:
        """Yield events until the terminal event or a disconnect.

        Args:
            is_disconnected: Checked between waits; when it returns True
                the observer closes silently. Task processing is unaffected.

        Yields:
            RESULT events in link order, then one COMPLETE or ERROR event.
        """
        while self.connected:
            if is_disconnected is not None and is_disconnected():
                logger.info("Task %s: Client disconnected.", self.task.id)
                self.close()
                return
            event = self.next_event()
            if event is not None:
                yield event

    async def stream(
        self, is_disconnected: Callable[[], Awaitable[bool]] | None = None
    ) -> AsyncIterator[StreamEvent]:
        """Asynchronous counterpart of :meth:`events`.

        Never blocks the event loop: the queue is only read without
        waiting, and the observer sleeps ``poll_interval`` seconds between
        empty reads.

        Args:
            is_disconnected: Awaited before every read; when it returns True
                the observer closes silently. Task processing is unaffected.

        Yields:
            RESULT events in link order, then one COMPLETE or ERROR event.
        """
        while self.connected:
            if is_disconnected is not None and await is_disconnected():
                logger.info("Task %s: Client disconnected.", self.task.id)
                self.close()
                return
            event = self.next_event(timeout=0)
            if event is not None:
                yield event
            elif self.connected:
                await asyncio.sleep(self.poll_interval)

    def _result_event(self, result: Result) -> StreamEvent:
        logger.debug("Task %s: Sending update: %s", self.task.id, result.to_json())
        return StreamEvent(kind=EventKind.RESULT, result=result)
