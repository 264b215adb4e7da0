"""Download feature - runs gytmdl for a single link."""

from gytmdl_web.download.downloader import (
    DEFAULT_COMMAND,
    JobOutcome,
    JobRunner,
    build_command,
    run_job,
)

__all__ = [
    "DEFAULT_COMMAND",
    "JobOutcome",
    "JobRunner",
    "build_command",
    "run_job",
]
