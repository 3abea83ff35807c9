"""
Periodic Rate Solver

Solves the annuity identity for the rate, matching Excel's RATE()
function. There is no closed form, so the residual and its derivative
are handed to the Newton-Raphson solver.
"""

from typing import Tuple

from tvmcalc.calculations.errors import DomainError
from tvmcalc.calculations.newton import (
    DEFAULT_GUESS,
    MAX_ITERATIONS,
    TOLERANCE,
    Function,
    RootFindingProblem,
    solve,
)
from tvmcalc.calculations.tvm import (
    PaymentTiming,
    TimingLike,
    TVMParameters,
    as_timing,
    check_periods,
    compound_factors,
)


def tvm_residual(
    nper: float,
    pmt: float,
    pv: float,
    fv: float = 0.0,
    timing: TimingLike = PaymentTiming.END,
) -> Tuple[Function, Function]:
    """
    Build the annuity residual g(r) and its derivative g'(r).

    Both divide by r and are undefined at r == 0.

    Returns:
        (g, dg) closures over the given parameters
    """
    t = int(as_timing(timing))

    def g(r: float) -> float:
        growth, factor = compound_factors(r, nper)
        return pv * growth + pmt * (1 + r * t) * factor + fv

    def dg(r: float) -> float:
        _, factor = compound_factors(r, nper)
        growth_prev = (1 + r) ** (nper - 1)
        # d/dr of factor is (n*r*(1+r)^(n-1) - (1+r)^n + 1) / r^2
        return nper * pv * growth_prev + pmt * (
            t * factor + (1 + r * t) * (nper * growth_prev - factor) / r
        )

    return g, dg


def rate(
    nper: float,
    pmt: float,
    pv: float,
    fv: float = 0.0,
    timing: TimingLike = PaymentTiming.END,
    guess: float = DEFAULT_GUESS,
    tolerance: float = TOLERANCE,
    max_iterations: int = MAX_ITERATIONS,
) -> float:
    """
    Calculate the interest rate per period of an annuity.

    Matches Excel's RATE() function.

    Args:
        nper: Number of periods
        pmt: Payment made each period
        pv: Present value
        fv: Future value after the last payment
        timing: PaymentTiming.END (default) or PaymentTiming.BEGIN
        guess: Starting rate for the solver (must not be 0)
        tolerance: Absolute tolerance on the residual
        max_iterations: Solver iteration cap

    Returns:
        Periodic rate as decimal

    Raises:
        InvalidArgument: If nper is negative or timing is not END/BEGIN
        DomainError: If guess is exactly 0
        ConvergenceError: If the solver fails
    """
    check_periods(nper)
    g, dg = tvm_residual(nper, pmt, pv, fv, timing)

    if guess == 0:
        raise DomainError("Rate guess can't be zero: the residual divides by the rate")

    return solve(
        RootFindingProblem(
            function=g,
            derivative=dg,
            guess=guess,
            tolerance=tolerance,
            max_iterations=max_iterations,
        )
    )


def rate_of(params: TVMParameters, guess: float = DEFAULT_GUESS) -> float:
    """RATE for a TVMParameters value; params.rate is ignored."""
    return rate(
        params.nper, params.pmt, params.pv, params.fv, params.timing, guess=guess
    )
