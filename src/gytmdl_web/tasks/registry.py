"""Process-wide registry of live tasks."""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Iterable

from gytmdl_web.tasks.models import Task

logger = logging.getLogger(__name__)

# Attempts at drawing an unused id before giving up
MAX_ID_ATTEMPTS = 8


class TaskRegistry:
    """Mapping from task id to live Task.

    Every read and write takes the same lock, and the lock is held only
    for the dict operation itself.
    """

    def __init__(self, id_factory: Callable[[], str] | None = None) -> None:
        self._tasks: dict[str, Task] = {}
        self._lock = threading.Lock()
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def create(self, links: Iterable[str], credential: str = "") -> str:
        """Create and register a new task.

        Args:
            links: Links the task will process, in order.
            credential: Credential presented at submission.

        Returns:
            The new task id.

        Raises:
            RuntimeError: If no unused id could be generated.
        """
        links = tuple(links)
        for _ in range(MAX_ID_ATTEMPTS):
            task = Task(id=self._id_factory(), links=links, credential=credential)
            with self._lock:
                if task.id not in self._tasks:
                    self._tasks[task.id] = task
                    return task.id
            logger.warning("Task id collision on %s, drawing another", task.id)
        raise RuntimeError("Could not allocate a unique task id")

    def lookup(self, task_id: str) -> Task | None:
        """Return the live task for ``task_id``, or None if unknown."""
        with self._lock:
            return self._tasks.get(task_id)

    def remove(self, task_id: str) -> None:
        """Forget a task. Removing an unknown id is a no-op."""
        with self._lock:
            self._tasks.pop(task_id, None)

    def __contains__(self, task_id: object) -> bool:
        with self._lock:
            return task_id in self._tasks

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)
