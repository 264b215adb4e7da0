"""Background executor that drives one task's links to completion."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from gytmdl_web.download import JobRunner, run_job
from gytmdl_web.tasks.models import Result, Task
from gytmdl_web.tasks.registry import TaskRegistry

logger = logging.getLogger(__name__)

# Seconds a task holds its results back waiting for the first observer
DEFAULT_ATTACH_GRACE = 30.0


@dataclass
class TaskExecutor:
    """Runs each submitted task on its own background thread.

    Links of a task are processed strictly in order, one at a time. Every
    link yields exactly one Result, and every task ends with exactly one
    terminal signal followed by removal from the registry, whatever
    happens in between.

    Attributes:
        registry: Registry that owns the live tasks.
        output_dir: Destination directory handed to the job runner.
        runner: Callable that downloads one link.
        attach_grace: Seconds to hold results back until an observer attaches.
    """

    registry: TaskRegistry
    output_dir: Path
    runner: JobRunner = field(default=run_job)
    attach_grace: float = DEFAULT_ATTACH_GRACE

    def submit(self, links: Iterable[str], credential: str = "") -> str:
        """Register a new task and start processing it in the background.

        Returns immediately, without waiting for any link.

        Args:
            links: Links to download, in order.
            credential: Credential presented at submission.

        Returns:
            The new task id.
        """
        task_id = self.registry.create(links, credential)
        task = self.registry.lookup(task_id)
        assert task is not None  # nosec B101 - just created, only the executor removes it
        self.start(task)
        logger.info("Task %s created for %d links.", task_id, len(task.links))
        return task_id

    def start(self, task: Task) -> threading.Thread:
        """Spawn the worker thread for a registered task."""
        thread = threading.Thread(
            target=self.run,
            args=(task,),
            name=f"task-{task.id[:8]}",
            daemon=True,
        )
        thread.start()
        return thread

    def run(self, task: Task) -> None:
        """Process every link of ``task`` and clean up.

        Runs on the task's worker thread. Results are held back until an
        observer attaches or ``attach_grace`` seconds have passed since the
        task started, so a client that subscribes right after submitting
        still sees every Result of a task that fails instantly.
        """
        deadline = time.monotonic() + self.attach_grace
        try:
            error = self._prepare_destination()
            if error is not None:
                # Observers still get one Result per link
                for link in task.links:
                    self._publish(task, Result.fail(link, error), deadline)
                return

            for link in task.links:
                self._publish(task, self._process_link(task, link), deadline)
        finally:
            task.finish()
            self.registry.remove(task.id)
            logger.info("Task %s completed and cleaned up.", task.id)

    def _publish(self, task: Task, result: Result, deadline: float) -> None:
        if not task.attached.wait(max(deadline - time.monotonic(), 0)):
            logger.debug("Task %s: No observer attached, buffering %s", task.id, result.link)
        task.publish(result)

    def _prepare_destination(self) -> str | None:
        """Create the output directory.

        Returns:
            Diagnostic text if the directory could not be created.
        """
        if self.output_dir.is_dir():
            return None

        logger.info("Music directory %s does not exist, creating it.", self.output_dir)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Error creating music directory %s: %s", self.output_dir, e)
            return f"could not create music directory: {e}"
        return None

    def _process_link(self, task: Task, link: str) -> Result:
        """Download one link and turn the outcome into a Result."""
        logger.info("Task %s: Downloading %s...", task.id, link)

        try:
            outcome = self.runner(link, self.output_dir)
        except Exception as e:
            logger.exception("Task %s: Runner crashed for link %s", task.id, link)
            return Result.fail(link, str(e))

        if not outcome.success:
            logger.warning(
                "Task %s: CLI Error for link %s: %s\nCLI Output: %s",
                task.id,
                link,
                outcome.error,
                outcome.output,
            )
            return Result.fail(link, f"{outcome.error} | Output: {outcome.output}")

        logger.info(
            "Task %s: Successfully downloaded %s. Output: %s",
            task.id,
            link,
            outcome.output,
        )
        return Result.success(link)
