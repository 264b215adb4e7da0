"""Task lifecycle - registry, background executor and observer stream."""

from __future__ import annotations

from gytmdl_web.tasks.executor import DEFAULT_ATTACH_GRACE, TaskExecutor
from gytmdl_web.tasks.models import Result, ResultStatus, Task
from gytmdl_web.tasks.publisher import (
    DEFAULT_POLL_INTERVAL,
    EventKind,
    ObserverState,
    StreamEvent,
    TaskObserver,
    connection_comment,
)
from gytmdl_web.tasks.registry import TaskRegistry

__all__ = [
    "DEFAULT_ATTACH_GRACE",
    "DEFAULT_POLL_INTERVAL",
    "EventKind",
    "ObserverState",
    "Result",
    "ResultStatus",
    "StreamEvent",
    "Task",
    "TaskExecutor",
    "TaskObserver",
    "TaskRegistry",
    "connection_comment",
]
