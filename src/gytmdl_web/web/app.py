"""FastAPI application: task submission and live status stream."""

from __future__ import annotations

import functools
import hmac
import logging
from collections.abc import AsyncIterator

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from gytmdl_web import __version__
from gytmdl_web.config import Settings
from gytmdl_web.core import (
    GytmdlWebError,
    InvalidRequestError,
    TaskNotFoundError,
    UnauthorizedError,
)
from gytmdl_web.download import run_job
from gytmdl_web.tasks import (
    TaskExecutor,
    TaskObserver,
    TaskRegistry,
    connection_comment,
)
from gytmdl_web.web.schemas import DownloadRequest, ErrorResponse, TaskCreationResponse

logger = logging.getLogger(__name__)

# Header carrying the shared secret, sent as-is without a scheme
AUTH_HEADER = "Authorization"

STATUS_PREFIX = "/api/download/status"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}

_OTHER_METHODS = ["GET", "PUT", "PATCH", "DELETE"]


def _error_response(status_code: int, message: str) -> JSONResponse:
    if status_code > 499:
        logger.error("Responding with 5XX error: %s", message)
    return JSONResponse(status_code=status_code, content={"error": message})


def _matches(presented: str | None, expected: str) -> bool:
    return hmac.compare_digest((presented or "").encode(), expected.encode())


def _presented_credential(request: Request) -> str:
    return request.headers.get(AUTH_HEADER, "")


def require_credential(request: Request) -> str:
    """Check the shared secret, if one is configured.

    Returns:
        The credential presented by the client.

    Raises:
        UnauthorizedError: If a secret is configured and does not match.
    """
    settings: Settings = request.app.state.settings
    credential = _presented_credential(request)
    if settings.auth_enabled and not _matches(credential, settings.password):
        raise UnauthorizedError()
    return credential


def _status_code_for(error: GytmdlWebError) -> int:
    if isinstance(error, InvalidRequestError):
        return 400
    if isinstance(error, UnauthorizedError):
        return 401
    if isinstance(error, TaskNotFoundError):
        return 404
    return 500


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(GytmdlWebError)
    async def _domain_error(_request: Request, exc: GytmdlWebError) -> JSONResponse:
        if isinstance(exc, TaskNotFoundError):
            return _error_response(404, "Task ID not found or already completed")
        return _error_response(_status_code_for(exc), getattr(exc, "message", str(exc)))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Rejected request body: %s", exc.errors())
        return _error_response(400, "cannot decode request body")

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def _unexpected_error(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error: %s", exc)
        return _error_response(500, "internal server error")


async def _event_stream(request: Request, observer: TaskObserver) -> AsyncIterator[str]:
    """Relay an observer's events to the client until terminal or disconnect."""
    task_id = observer.task.id
    logger.info("SSE connection established for task %s", task_id)
    yield connection_comment(task_id)

    async for event in observer.stream(request.is_disconnected):
        yield event.to_sse()


def create_app(
    settings: Settings | None = None,
    registry: TaskRegistry | None = None,
    executor: TaskExecutor | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Service configuration; defaults are used when None.
        registry: Task registry; a fresh one is created when None.
        executor: Task executor; when None one is built that runs the
            configured gytmdl command into ``settings.output_dir``.

    Returns:
        The configured FastAPI application.
    """
    if settings is None:
        settings = Settings()
    if registry is None:
        registry = executor.registry if executor is not None else TaskRegistry()
    if executor is None:
        executor = TaskExecutor(
            registry=registry,
            output_dir=settings.output_dir,
            runner=functools.partial(run_job, command=settings.downloader),
            attach_grace=settings.attach_grace,
        )

    app = FastAPI(title="gytmdl-web", version=__version__)
    app.state.settings = settings
    app.state.registry = registry
    app.state.executor = executor
    _register_error_handlers(app)

    @app.post(
        "/api/download",
        status_code=202,
        response_model=TaskCreationResponse,
        responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    )
    def submit_download(
        body: DownloadRequest,
        credential: str = Depends(require_credential),
    ) -> TaskCreationResponse:
        """Accept a batch of links and start downloading them in the background."""
        if not body.links:
            raise InvalidRequestError("no links provided")
        task_id = executor.submit(body.links, credential)
        return TaskCreationResponse(task_id=task_id)

    @app.api_route("/api/download", methods=_OTHER_METHODS, include_in_schema=False)
    def submit_wrong_method() -> JSONResponse:
        return _error_response(405, "only POST method allowed")

    @app.get(STATUS_PREFIX + "/", include_in_schema=False)
    def status_missing_id() -> JSONResponse:
        return _error_response(400, "Task ID missing in URL path")

    @app.get(STATUS_PREFIX + "/{task_id}")
    def download_status(task_id: str, request: Request) -> StreamingResponse:
        """Stream the task's results as Server-Sent Events."""
        task = registry.lookup(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)

        if settings.auth_enabled and not _matches(
            _presented_credential(request), task.credential
        ):
            raise UnauthorizedError("Unauthorized for task status")

        observer = TaskObserver(task, poll_interval=settings.poll_interval)
        return StreamingResponse(
            _event_stream(request, observer),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    @app.api_route(
        STATUS_PREFIX + "/{task_id}",
        methods=["POST", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
    def status_wrong_method(task_id: str) -> JSONResponse:  # noqa: ARG001
        return _error_response(405, "only GET method allowed for status")

    if settings.ui_dir is not None:
        if settings.ui_dir.is_dir():
            app.mount("/", StaticFiles(directory=settings.ui_dir, html=True), name="ui")
        else:
            logger.warning("UI directory %s does not exist, not serving it", settings.ui_dir)

    return app
