"""Shared pytest fixtures for gytmdl-web tests."""

from __future__ import annotations

import tempfile
import threading
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from gytmdl_web.download import JobOutcome
from gytmdl_web.tasks import TaskExecutor, TaskRegistry

if TYPE_CHECKING:
    from collections.abc import Generator


class FakeRunner:
    """Job runner that fails the links listed in ``failures``.

    When ``gate`` is given, every call waits for it before finishing.
    """

    def __init__(
        self,
        failures: Iterable[str] = (),
        gate: threading.Event | None = None,
        crash_on: Iterable[str] = (),
    ) -> None:
        self.failures = set(failures)
        self.crash_on = set(crash_on)
        self.gate = gate
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, link: str, output_dir: Path) -> JobOutcome:
        if self.gate is not None:
            self.gate.wait(timeout=5)
        with self._lock:
            self.calls.append(link)
        if link in self.crash_on:
            raise RuntimeError(f"runner crashed on {link}")
        if link in self.failures:
            return JobOutcome(
                link=link,
                success=False,
                output="ERROR: Video unavailable",
                error="exit status 1",
            )
        return JobOutcome(link=link, success=True, output=f"Downloaded {link}")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    """Factory for fake job runners."""
    return FakeRunner


@pytest.fixture
def registry() -> TaskRegistry:
    return TaskRegistry()


@pytest.fixture
def make_executor(
    registry: TaskRegistry, temp_dir: Path
) -> Callable[..., TaskExecutor]:
    """Build an executor writing into ``temp_dir / "Music"``.

    The attach grace is short so tasks nobody observes finish quickly.
    """

    def factory(
        runner: FakeRunner,
        output_dir: Path | None = None,
        attach_grace: float = 0.05,
    ) -> TaskExecutor:
        return TaskExecutor(
            registry=registry,
            output_dir=output_dir or temp_dir / "Music",
            runner=runner,
            attach_grace=attach_grace,
        )

    return factory


@pytest.fixture
def wait_until() -> Callable[[Callable[[], bool]], bool]:
    """Poll a condition for up to five seconds."""

    def poll(condition: Callable[[], bool], timeout: float = 5.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if condition():
                return True
            time.sleep(0.01)
        return condition()

    return poll
