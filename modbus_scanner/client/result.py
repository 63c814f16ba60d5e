"""Outcome of one client request."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class RequestResult(Generic[T]):
    """Success value or failure of a request.

    ``superseded`` is set when a scan finished after a newer one was
    submitted; its value is returned but was not rendered.
    """

    value: Optional[T] = None
    error: Optional[Exception] = None
    superseded: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T, superseded: bool = False) -> "RequestResult[T]":
        return cls(value=value, superseded=superseded)

    @classmethod
    def failure(cls, error: Exception, superseded: bool = False) -> "RequestResult[T]":
        return cls(error=error, superseded=superseded)
