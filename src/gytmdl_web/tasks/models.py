"""Task and Result entities."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from enum import Enum
from queue import Queue

from gytmdl_web.core import ChannelClosedError


class ResultStatus(Enum):
    """Outcome of one processed link."""

    SUCCESS = "success"
    FAIL = "fail"


@dataclass(frozen=True)
class Result:
    """Outcome record for one processed link.

    Attributes:
        link: The link this result belongs to.
        status: Whether the download succeeded.
        error: Diagnostic text, only set for failed links.
    """

    link: str
    status: ResultStatus
    error: str | None = None

    @classmethod
    def success(cls, link: str) -> Result:
        """Create a successful result."""
        return cls(link=link, status=ResultStatus.SUCCESS)

    @classmethod
    def fail(cls, link: str, error: str) -> Result:
        """Create a failed result."""
        return cls(link=link, status=ResultStatus.FAIL, error=error)

    @property
    def succeeded(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    def to_dict(self) -> dict[str, str]:
        """Serialize to the wire shape; ``error`` is omitted when empty."""
        data = {"link": self.link, "status": self.status.value}
        if self.error:
            data["error"] = self.error
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(eq=False)
class Task:
    """One accepted batch of links and its event channels.

    The progress channel is a queue the executor starts filling only once
    an observer has attached, or once its grace period ran out. The
    completion channel is a one-shot event. Exactly one executor writes to
    both; any number of observers read from them.

    Attributes:
        id: Unique task identifier.
        links: Links to process, in order.
        credential: Credential presented when the task was submitted.
        updates: Progress channel carrying one Result per processed link.
        done: Completion channel, set exactly once.
        attached: Set once the first observer attaches.
    """

    id: str
    links: tuple[str, ...]
    credential: str = ""
    updates: Queue[Result] = field(default_factory=Queue, repr=False)
    done: threading.Event = field(default_factory=threading.Event, repr=False)
    attached: threading.Event = field(default_factory=threading.Event, repr=False)
    _closed: threading.Event = field(
        default_factory=threading.Event, init=False, repr=False
    )

    def __post_init__(self) -> None:
        """Validate task fields after initialization."""
        if not self.id:
            raise ValueError("Task id must not be empty")
        self.links = tuple(self.links)

    @property
    def closed(self) -> bool:
        """Whether the executor has closed the task's channels."""
        return self._closed.is_set()

    def publish(self, result: Result) -> None:
        """Publish one result on the progress channel.

        Raises:
            ChannelClosedError: If the channels were already closed.
        """
        if self.closed:
            raise ChannelClosedError(self.id)
        self.updates.put(result)

    def finish(self) -> bool:
        """Send the terminal signal, then close both channels.

        Returns:
            False if the task was already finished.
        """
        if self.closed:
            return False
        self.done.set()
        self._closed.set()
        return True
