"""
NPV, IRR and MIRR Calculations

Cash flow profitability measures matching Excel's NPV, IRR and MIRR
functions. Cash flows are periodic: values[0] falls at the end of
period 1, values[i] at the end of period i+1.
"""

import math
from collections.abc import Iterable, Mapping
from typing import List

import numpy as np

from tvmcalc.calculations.errors import DomainError, InvalidArgument
from tvmcalc.calculations.newton import (
    DEFAULT_GUESS,
    MAX_ITERATIONS,
    TOLERANCE,
    RootFindingProblem,
    solve,
)


def _as_cash_flows(values: Iterable[float]) -> np.ndarray:
    """Materialise a cash flow series as a float64 array, in order."""
    if isinstance(values, (str, bytes, Mapping)) or not isinstance(values, Iterable):
        raise InvalidArgument("The cash flow series must be a sequence of numbers")
    try:
        flows = np.array([float(v) for v in values], dtype=np.float64)
    except (TypeError, ValueError):
        raise InvalidArgument("The cash flow series must contain only numbers") from None
    if flows.size == 0:
        raise InvalidArgument("The cash flow series is empty")
    if not np.all(np.isfinite(flows)):
        raise InvalidArgument("The cash flow series contains non-finite values")
    return flows


def _check_sign_change(flows: np.ndarray) -> None:
    if flows.min() * flows.max() >= 0:
        raise DomainError(
            "Cash flow must contain at least one positive value and one negative value"
        )


def _npv(rate: float, flows: np.ndarray) -> float:
    periods = np.arange(1, flows.size + 1)
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        return float(np.sum(flows / (1 + rate) ** periods))


def _npv_derivative(rate: float, flows: np.ndarray) -> float:
    """Derivative of NPV with respect to rate (for Newton-Raphson)."""
    periods = np.arange(1, flows.size + 1)
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        terms = flows * -periods * (1 + rate) ** (periods - 1) / (1 + rate) ** (2 * periods)
        return float(np.sum(terms))


def net_present_value(rate: float, values: Iterable[float]) -> float:
    """
    Calculate NPV (Net Present Value) of periodic cash flows.

    Matches Excel's NPV() function: the first value is discounted one
    full period.

    Args:
        rate: Discount rate per period (e.g., 0.10 for 10%)
        values: Cash flows (negative = outflow, positive = inflow)

    Returns:
        NPV value

    Raises:
        InvalidArgument: If values is not a non-empty sequence of numbers
        DomainError: If rate is -100% or the NPV is not finite
    """
    flows = _as_cash_flows(values)
    if rate == -1:
        raise DomainError("NPV is undefined at a discount rate of -100%")

    npv = _npv(rate, flows)
    if not math.isfinite(npv):
        raise DomainError(f"NPV overflows at a discount rate of {rate!r}")
    return npv


def internal_rate_of_return(
    values: Iterable[float],
    guess: float = DEFAULT_GUESS,
    tolerance: float = TOLERANCE,
    max_iterations: int = MAX_ITERATIONS,
) -> float:
    """
    Calculate IRR (Internal Rate of Return) using Newton-Raphson.

    Matches Excel's IRR() function.

    Args:
        values: Periodic cash flows
        guess: Initial guess for rate (default 0.1 = 10%)
        tolerance: Absolute tolerance on NPV at the returned rate
        max_iterations: Solver iteration cap

    Returns:
        Periodic IRR as decimal (e.g., 0.15 for 15%)

    Raises:
        InvalidArgument: If values is not a non-empty sequence of numbers
        DomainError: If cash flows do not change sign
        ConvergenceError: If the solver fails
    """
    flows = _as_cash_flows(values)
    _check_sign_change(flows)

    return solve(
        RootFindingProblem(
            function=lambda r: _npv(r, flows),
            derivative=lambda r: _npv_derivative(r, flows),
            guess=guess,
            tolerance=tolerance,
            max_iterations=max_iterations,
        )
    )


def split_flows(flows: np.ndarray) -> List[np.ndarray]:
    """
    Split cash flows into [inflows, outflows], keeping period positions.

    Zero counts as an inflow.
    """
    positive = np.where(flows >= 0, flows, 0.0)
    negative = np.where(flows < 0, flows, 0.0)
    return [positive, negative]


def modified_internal_rate_of_return(
    values: Iterable[float],
    finance_rate: float,
    reinvest_rate: float,
) -> float:
    """
    Calculate MIRR (Modified Internal Rate of Return).

    Matches Excel's MIRR() function. Outflows are financed at
    finance_rate and inflows reinvested at reinvest_rate.

    Args:
        values: Periodic cash flows
        finance_rate: Rate paid on money used in the cash flows
        reinvest_rate: Rate received on reinvested cash flows

    Returns:
        Periodic MIRR as decimal

    Raises:
        InvalidArgument: If values is not a non-empty sequence of numbers
        DomainError: If there is a single flow, no sign change, or
            the result is not real
    """
    flows = _as_cash_flows(values)
    n = flows.size
    if n == 1:
        raise DomainError("MIRR needs at least two cash flows")
    _check_sign_change(flows)

    positive, negative = split_flows(flows)
    reinvested = -net_present_value(reinvest_rate, positive) * (1 + reinvest_rate) ** n
    financed = net_present_value(finance_rate, negative) * (1 + finance_rate)

    ratio = reinvested / financed
    if ratio < 0:
        raise DomainError("MIRR is not a real number for these rates")
    return ratio ** (1 / (n - 1)) - 1
