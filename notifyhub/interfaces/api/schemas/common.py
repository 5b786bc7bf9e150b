"""Shared building blocks for the camelCase API payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from notifyhub.utils import now_utc, to_iso

IsoDatetime = Annotated[datetime, PlainSerializer(to_iso, return_type=str)]


class CamelModel(BaseModel):
    """Base model exposing snake_case attributes as camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimestampedResponse(CamelModel):
    timestamp: IsoDatetime = Field(default_factory=now_utc)


class OperationResult(TimestampedResponse):
    """Outcome of a mutating request."""

    success: bool = True
    message: str


class HealthResponse(TimestampedResponse):
    status: str
    uptime: float
    environment: str
    websocket_clients: int


class ErrorDetail(BaseModel):
    field: str
    message: str


class ErrorResponse(TimestampedResponse):
    error: str
    message: str
    details: list[ErrorDetail] | None = None
    stack: str | None = None


__all__ = [
    "CamelModel",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "IsoDatetime",
    "OperationResult",
    "TimestampedResponse",
]
