"""A small web service that downloads YouTube Music links with gytmdl."""

from gytmdl_web.core import (
    ConfigError,
    GytmdlWebError,
    TaskNotFoundError,
    UnauthorizedError,
)

__version__ = "0.1.0"
__metadata__ = {
    "name": "gytmdl-web",
    "version": __version__,
    "license": "MIT",
    "python": ">=3.12",
}
__all__ = [
    "ConfigError",
    "GytmdlWebError",
    "TaskNotFoundError",
    "UnauthorizedError",
    "__metadata__",
    "__version__",
]
