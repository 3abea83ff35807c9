"""
Calculation Errors

Error kinds raised by the calculation engine, and a small tagged result
type for callers that prefer to branch on an outcome instead of catching.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional


class ErrorKind(str, Enum):
    """Caller-visible classification of calculation failures."""

    invalid_argument = "invalid_argument"
    domain_error = "domain_error"
    convergence_error = "convergence_error"


class FinanceError(Exception):
    """Base class for all calculation failures."""

    kind: ErrorKind


class InvalidArgument(FinanceError, ValueError):
    """Input has the wrong shape (empty series, negative nper, bad timing)."""

    kind = ErrorKind.invalid_argument


class DomainError(FinanceError, ValueError):
    """Input is well formed but the equation has no solution."""

    kind = ErrorKind.domain_error


class ConvergenceError(FinanceError, ArithmeticError):
    """Newton-Raphson did not reach the tolerance."""

    kind = ErrorKind.convergence_error

    def __init__(
        self,
        message: str,
        iterations: int = 0,
        last_value: Optional[float] = None,
    ):
        super().__init__(message)
        self.iterations = iterations
        self.last_value = last_value


@dataclass(frozen=True)
class Result:
    """Outcome of a calculation: either a value or a FinanceError."""

    value: Optional[Any] = None
    error: Optional[FinanceError] = None

    @classmethod
    def success(cls, value: Any) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: FinanceError) -> "Result":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None

    @property
    def message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None

    def unwrap(self) -> Any:
        """Return the value, re-raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.value


def attempt(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Result:
    """
    Run a calculation and capture its outcome as a Result.

    Only FinanceError subclasses are captured; anything else is a bug
    and propagates.

    Args:
        func: Calculation function to call
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Result holding either the return value or the error raised
    """
    try:
        return Result.success(func(*args, **kwargs))
    except FinanceError as e:
        return Result.failure(e)
