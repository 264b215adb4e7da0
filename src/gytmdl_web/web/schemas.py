"""Request and response bodies of the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DownloadRequest(BaseModel):
    """Body of a submission: links to download, in order."""

    links: list[str] = Field(default_factory=list)


class TaskCreationResponse(BaseModel):
    task_id: str


class ErrorResponse(BaseModel):
    error: str
