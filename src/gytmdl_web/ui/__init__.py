"""UI feature - Rich console output and logging."""

from gytmdl_web.ui.progress import (
    console,
    create_task_progress,
    print_error,
    print_info,
    print_success,
    print_warning,
    setup_logging,
)

__all__ = [
    "console",
    "create_task_progress",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "setup_logging",
]
