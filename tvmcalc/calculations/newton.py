"""
Newton-Raphson Root Finding

Generic scalar solver used by RATE and IRR. Each call gets its residual
and derivative as plain callables, so extra parameters travel in
closures and concurrent solves never share state.
"""

import logging
import math
import sys
from dataclasses import dataclass
from typing import Callable

from tvmcalc.calculations.errors import ConvergenceError, InvalidArgument

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-6
DEFAULT_GUESS = 0.1

MACHINE_EPSILON = sys.float_info.epsilon

Function = Callable[[float], float]


@dataclass(frozen=True)
class RootFindingProblem:
    """A residual/derivative pair with its solver settings."""

    function: Function
    derivative: Function
    guess: float = DEFAULT_GUESS
    tolerance: float = TOLERANCE
    max_iterations: int = MAX_ITERATIONS


def _evaluate(func: Function, x: float, what: str, iteration: int) -> float:
    try:
        value = func(x)
    except (ZeroDivisionError, OverflowError) as e:
        raise ConvergenceError(
            f"{what} could not be evaluated at {x!r}: {e}",
            iterations=iteration,
            last_value=x,
        ) from e
    if isinstance(value, complex) or not math.isfinite(value):
        raise ConvergenceError(
            f"{what} is not finite at {x!r}",
            iterations=iteration,
            last_value=x,
        )
    return float(value)


def newton_raphson(
    function: Function,
    derivative: Function,
    guess: float = DEFAULT_GUESS,
    tolerance: float = TOLERANCE,
    max_iterations: int = MAX_ITERATIONS,
) -> float:
    """
    Find a root of function using Newton-Raphson iteration.

    Iterates x = x - f(x)/f'(x) until |f(x)| < tolerance.

    Args:
        function: Residual f(x) whose root is sought
        derivative: Analytic derivative f'(x)
        guess: Starting point
        tolerance: Absolute tolerance on |f(x)|
        max_iterations: Maximum number of Newton steps

    Returns:
        x with |f(x)| < tolerance

    Raises:
        InvalidArgument: If tolerance or max_iterations is not positive
        ConvergenceError: If the derivative vanishes, an evaluation
            blows up, or the iteration cap is reached
    """
    if not tolerance > 0:
        raise InvalidArgument("Tolerance must be positive")
    if max_iterations < 1:
        raise InvalidArgument("Maximum iterations must be at least 1")

    x = float(guess)

    for iteration in range(max_iterations):
        fx = _evaluate(function, x, "Function", iteration)

        if abs(fx) < tolerance:
            logger.debug("Converged to %r after %d iterations", x, iteration)
            return x

        dfx = _evaluate(derivative, x, "Derivative", iteration)

        if abs(dfx) <= MACHINE_EPSILON:
            logger.warning("Derivative vanished at %r (iteration %d)", x, iteration)
            raise ConvergenceError(
                "Newton-Raphson failed: derivative too small",
                iterations=iteration,
                last_value=x,
            )

        x = x - fx / dfx
        logger.debug("Iteration %d: x=%r f(x)=%r", iteration + 1, x, fx)

    # the last step still counts if it landed within tolerance
    fx = _evaluate(function, x, "Function", max_iterations)
    if abs(fx) < tolerance:
        return x

    logger.warning(
        "No convergence after %d iterations (last x=%r)", max_iterations, x
    )
    raise ConvergenceError(
        f"Newton-Raphson did not converge in {max_iterations} iterations",
        iterations=max_iterations,
        last_value=x,
    )


def solve(problem: RootFindingProblem) -> float:
    """Solve a RootFindingProblem. See newton_raphson."""
    return newton_raphson(
        problem.function,
        problem.derivative,
        guess=problem.guess,
        tolerance=problem.tolerance,
        max_iterations=problem.max_iterations,
    )
