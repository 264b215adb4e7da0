"""gytmdl wrapper for single-link downloads."""

from __future__ import annotations

import logging
import subprocess  # nosec B404
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "gytmdl"


@dataclass(frozen=True)
class JobOutcome:
    """Outcome of one gytmdl invocation.

    Attributes:
        link: The link that was downloaded.
        success: Whether the download succeeded.
        output: Combined stdout and stderr of the process.
        error: Short error description if the download failed.
    """

    link: str
    success: bool
    output: str = ""
    error: str | None = None


class JobRunner(Protocol):
    """Callable that downloads one link into a destination directory."""

    def __call__(self, link: str, output_dir: Path) -> JobOutcome: ...


def build_command(link: str, output_dir: Path, command: str = DEFAULT_COMMAND) -> list[str]:
    """Build the gytmdl command line for one link."""
    return [
        command,
        "--output-path",
        str(output_dir),
        link,
    ]


def run_job(link: str, output_dir: Path, command: str = DEFAULT_COMMAND) -> JobOutcome:
    """Download one link with gytmdl.

    Blocks until the process exits. No timeout is applied, so a hanging
    gytmdl process stalls the caller.

    Args:
        link: The YouTube Music link to download.
        output_dir: Directory gytmdl writes into.
        command: Name or path of the gytmdl executable.

    Returns:
        JobOutcome with the combined process output.
    """
    cmd = build_command(link, output_dir, command)
    logger.debug("Running: %s", " ".join(cmd))

    try:
        result = subprocess.run(  # nosec B603
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        return JobOutcome(
            link=link,
            success=False,
            error=f"{command} not found. Please install gytmdl.",
        )
    except (subprocess.SubprocessError, OSError) as e:
        return JobOutcome(link=link, success=False, error=str(e))

    output = result.stdout or ""
    if result.returncode != 0:
        return JobOutcome(
            link=link,
            success=False,
            output=output,
            error=f"exit status {result.returncode}",
        )

    return JobOutcome(link=link, success=True, output=output)
