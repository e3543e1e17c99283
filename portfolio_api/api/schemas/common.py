from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(CamelModel):
    success: bool = False
    error: str
    details: str | None = None
    timestamp: str


class NotFoundResponse(ErrorResponse):
    path: str
    method: str
    suggestion: str


class CacheStatsResponse(CamelModel):
    size: int
    ttl_seconds: float
    fresh: int
    stale: int


class MessageResponse(CamelModel):
    success: bool = True
    message: str
    timestamp: str
