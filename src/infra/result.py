"""Rust-style Result helpers shared by the organogram core.

This module provides:
- ``Ok`` / ``Err`` wrappers and the ``Result`` union
- chaining helpers (``map``, ``and_then``, ``unwrap_or``)
- the base ``Error`` hierarchy used across the navigator
- ``collect`` for all-or-first-error validation and per-type error counters
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    Mapping,
    TypeVar,
    Union,
    cast,
)

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


# --- internal constants ---

# Contact details of club members end up in error context; keep them out of logs.
_SENSITIVE_KEYS: tuple[str, ...] = (
    "email",
    "phone",
    "password",
    "secret",
    "token",
)

_ERROR_COUNTERS: Counter[str] = Counter()


def _sanitize_context(context: Mapping[str, Any] | None) -> dict[str, Any]:
    """Mask sensitive values in an error context.

    Only keys whose name contains a sensitive fragment are masked; nested
    dicts are walked recursively and everything else is kept untouched.
    """
    if not context:
        return {}

    def _sanitize(value: Any) -> Any:
        if isinstance(value, dict):
            mapping = cast(Mapping[str, Any], value)
            inner: dict[str, Any] = {}
            for k, v in mapping.items():
                key_lower = str(k).lower()
                inner[k] = _sanitize(
                    "***redacted***" if any(sk in key_lower for sk in _SENSITIVE_KEYS) else v
                )
            return inner
        return value

    sanitized: dict[str, Any] = {}
    for key, value in context.items():
        key_lower = str(key).lower()
        if any(sk in key_lower for sk in _SENSITIVE_KEYS):
            sanitized[key] = "***redacted***"
        else:
            sanitized[key] = _sanitize(value)
    return sanitized


def _record_error(error: "Error") -> None:
    key = type(error).__name__
    _ERROR_COUNTERS[key] += 1
    _ERROR_COUNTERS["__total__"] += 1


def get_error_metrics() -> dict[str, int]:
    """Return error counts grouped by error type name."""
    return dict(_ERROR_COUNTERS)


def reset_error_metrics() -> None:
    """Reset the error counters (tests only)."""
    _ERROR_COUNTERS.clear()


# --- error hierarchy ---


class Error(Exception):
    """Base error carried by ``Err``: a message, optional context and cause."""

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})
        self.cause: BaseException | None = cause
        _record_error(self)

    def __str__(self) -> str:  # pragma: no cover - delegates to message
        return self.message

    def log_safe_context(self) -> dict[str, Any]:
        """Context with sensitive values masked, safe to hand to the logger."""
        return _sanitize_context(self.context)


class ValidationError(Error):
    """Input data failed validation."""


class ConfigurationError(Error):
    """Static configuration is missing, malformed or inconsistent."""


class NotFoundError(Error):
    """A looked-up entity does not exist."""


class StorageError(Error):
    """Durable storage could not be read or written."""


# --- Result / Ok / Err ---


@dataclass(slots=True)
class Ok(Generic[T, E]):
    """Successful result."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> E:
        raise RuntimeError("Called unwrap_err() on Ok value.")

    def map(self, fn: Callable[[T], U]) -> "Result[U, E]":
        return Ok(fn(self.value))

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        return fn(self.value)

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(slots=True)
class Err(Generic[T, E]):
    """Failed result."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        raise RuntimeError(f"Called unwrap() on Err value: {self.error!r}")

    def unwrap_err(self) -> E:
        return self.error

    def map(self, fn: Callable[[T], U]) -> "Result[U, E]":
        return Err(self.error)

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        return Err(self.error)

    def unwrap_or(self, default: T) -> T:
        return default


Result = Union[Ok[T, E], Err[T, E]]


# --- helpers ---


def collect(results: Iterable[Result[T, E]]) -> Result[list[T], E]:
    """Collect results into ``Ok[list]`` or return the first ``Err``."""
    values: list[T] = []
    for item in results:
        if isinstance(item, Ok):
            values.append(item.value)
        else:
            return Err(item.error)
    return Ok(values)


__all__ = [
    "Ok",
    "Err",
    "Result",
    "Error",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "StorageError",
    "collect",
    "get_error_metrics",
    "reset_error_metrics",
]
