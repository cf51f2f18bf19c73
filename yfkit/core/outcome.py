"""
Success/failure container returned by every fetch operation.

Operations never raise across their public boundary: they return either
``Success(value)`` or ``Failure(message, kind, cause)``. Callers branch on the
variant (or on ``Failure.kind``); ``value_or_raise`` is the only place a
``YahooFinanceError`` is raised.
"""

import asyncio
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar, Union

import httpx
from pydantic import ValidationError

T = TypeVar("T")
U = TypeVar("U")


class ErrorKind(str, Enum):
    """Closed taxonomy of failure causes."""

    NETWORK_ERROR = "network_error"
    INVALID_SYMBOL = "invalid_symbol"
    INVALID_PARAMETERS = "invalid_parameters"
    PARSING_ERROR = "parsing_error"
    UPSTREAM_ERROR = "upstream_error"
    RATE_LIMITED = "rate_limited"
    UNKNOWN = "unknown"


class YahooFinanceError(Exception):
    """Raised when a caller unwraps a Failure with value_or_raise()."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.cause = cause


class ParsingError(Exception):
    """Raised by decoders and mappers when a required value is missing or malformed."""
    pass


@dataclass(frozen=True)
class Success(Generic[T]):
    """A fully constructed result value."""

    value: T

    def is_success(self) -> bool:
        return True

    def is_error(self) -> bool:
        return False

    def value_or_none(self) -> Optional[T]:
        return self.value

    def value_or_raise(self) -> T:
        return self.value

    def map_success(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.value))

    def on_success(self, fn: Callable[[T], Any]) -> "Success[T]":
        fn(self.value)
        return self

    def on_failure(self, fn: Callable[["Failure"], Any]) -> "Success[T]":
        return self


@dataclass(frozen=True)
class Failure:
    """
    A failed operation.

    Attributes:
        message: Human-readable description
        kind: Most specific applicable ErrorKind
        cause: Underlying exception, if any
        status: HTTP status when the failure came from a non-success response
    """

    message: str
    kind: ErrorKind = ErrorKind.UNKNOWN
    cause: Optional[BaseException] = None
    status: Optional[int] = None

    def is_success(self) -> bool:
        return False

    def is_error(self) -> bool:
        return True

    def value_or_none(self) -> None:
        return None

    def value_or_raise(self):
        raise YahooFinanceError(self.message, self.kind, self.cause) from self.cause

    def map_success(self, fn: Callable[[Any], Any]) -> "Failure":
        return self

    def on_success(self, fn: Callable[[Any], Any]) -> "Failure":
        return self

    def on_failure(self, fn: Callable[["Failure"], Any]) -> "Failure":
        fn(self)
        return self


Outcome = Union[Success[T], Failure]


def failure_from_exception(exc: BaseException, context: str = "") -> Failure:
    """
    Classify an exception into a Failure.

    Args:
        exc: Exception raised somewhere inside an operation
        context: Optional prefix for the message (e.g. "history AAPL")

    Returns:
        Failure with the most specific ErrorKind for the exception
    """
    prefix = f"{context}: " if context else ""

    if isinstance(exc, YahooFinanceError):
        return Failure(f"{prefix}{exc.message}", exc.kind, exc.cause or exc)

    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return Failure(f"{prefix}request timed out: {exc}", ErrorKind.NETWORK_ERROR, exc)

    if isinstance(exc, (httpx.TransportError, ConnectionError)):
        return Failure(f"{prefix}network error: {exc}", ErrorKind.NETWORK_ERROR, exc)

    if isinstance(exc, (ValidationError, json.JSONDecodeError, ParsingError)):
        return Failure(f"{prefix}could not parse response: {exc}", ErrorKind.PARSING_ERROR, exc)

    return Failure(f"{prefix}unexpected error: {exc}", ErrorKind.UNKNOWN, exc)
