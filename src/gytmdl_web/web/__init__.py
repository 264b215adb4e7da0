"""HTTP gateway - FastAPI application and Server-Sent Events stream."""

from gytmdl_web.web.app import AUTH_HEADER, create_app
from gytmdl_web.web.schemas import DownloadRequest, ErrorResponse, TaskCreationResponse

__all__ = [
    "AUTH_HEADER",
    "DownloadRequest",
    "ErrorResponse",
    "TaskCreationResponse",
    "create_app",
]
