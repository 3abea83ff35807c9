"""
Time Value of Money Calculations

Closed-form annuity calculations matching Excel's PV, FV, PMT and NPER
functions. All four solve for one term of the same identity:

    pv*(1+r)^n + pmt*(1+r*type)*((1+r)^n - 1)/r + fv = 0

Cash flows follow the spreadsheet sign convention: money paid out is
negative, money received is positive.
"""

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple, Union

from tvmcalc.calculations.errors import DomainError, InvalidArgument


class PaymentTiming(IntEnum):
    """When each period's payment is made."""

    END = 0
    BEGIN = 1


TimingLike = Union[PaymentTiming, int]


def as_timing(timing: TimingLike) -> PaymentTiming:
    """Coerce 0/1 (or a PaymentTiming) to PaymentTiming."""
    if isinstance(timing, bool):
        raise InvalidArgument("Payment type must be END (0) or BEGIN (1)")
    try:
        return PaymentTiming(timing)
    except ValueError:
        raise InvalidArgument("Payment type must be END (0) or BEGIN (1)") from None


def check_periods(nper: float) -> None:
    if nper < 0:
        raise InvalidArgument("Number of periods must be positive")


def compound_factors(rate: float, nper: float) -> Tuple[float, float]:
    """
    Return ((1+rate)^nper, ((1+rate)^nper - 1)/rate).

    Above -100% the annuity factor goes through expm1/log1p so that
    tiny non-zero rates keep their precision. Divides by rate.
    """
    if rate > -1:
        growth_minus_one = math.expm1(nper * math.log1p(rate))
        factor = growth_minus_one / rate
        if factor == 0:
            # expm1 underflowed on a subnormal rate
            factor = float(nper)
        return growth_minus_one + 1, factor

    growth = (1 + rate) ** nper
    return growth, (growth - 1) / rate


def _growth(rate: float, nper: float) -> Tuple[float, float]:
    """compound_factors, real-valued only."""
    growth, factor = compound_factors(rate, nper)
    if isinstance(growth, complex):
        raise DomainError("Rate below -100% needs a whole number of periods")
    return growth, factor


@dataclass(frozen=True)
class TVMParameters:
    """Inputs of the annuity identity. Any one term can be solved for."""

    rate: float = 0.0
    nper: float = 0.0
    pmt: float = 0.0
    pv: float = 0.0
    fv: float = 0.0
    timing: TimingLike = PaymentTiming.END

    def validate(self) -> "TVMParameters":
        check_periods(self.nper)
        as_timing(self.timing)
        return self


def present_value(
    rate: float,
    nper: float,
    pmt: float,
    fv: float = 0.0,
    timing: TimingLike = PaymentTiming.END,
) -> float:
    """
    Calculate the present value of an annuity.

    Matches Excel's PV() function.

    Args:
        rate: Interest rate per period
        nper: Number of periods
        pmt: Payment made each period
        fv: Future value after the last payment
        timing: PaymentTiming.END (default) or PaymentTiming.BEGIN

    Returns:
        Present value (opposite sign to pmt under the Excel convention)

    Raises:
        InvalidArgument: If nper is negative or timing is not END/BEGIN
    """
    check_periods(nper)
    t = as_timing(timing)

    if rate == 0:
        return -fv - pmt * nper

    growth, factor = _growth(rate, nper)
    if growth == 0:
        raise DomainError("Present value is undefined at a rate of -100%")
    return (-pmt * (1 + rate * t) * factor - fv) / growth


def future_value(
    rate: float,
    nper: float,
    pmt: float,
    pv: float = 0.0,
    timing: TimingLike = PaymentTiming.END,
) -> float:
    """
    Calculate the future value of an annuity.

    Matches Excel's FV() function.

    Raises:
        InvalidArgument: If nper is negative or timing is not END/BEGIN
    """
    check_periods(nper)
    t = as_timing(timing)

    if rate == 0:
        return -pv - pmt * nper

    growth, factor = _growth(rate, nper)
    return -pv * growth - pmt * (1 + rate * t) * factor


def payment(
    rate: float,
    nper: float,
    pv: float,
    fv: float = 0.0,
    timing: TimingLike = PaymentTiming.END,
) -> float:
    """
    Calculate the constant payment of an annuity.

    Matches Excel's PMT() function.

    Args:
        rate: Interest rate per period
        nper: Number of periods
        pv: Present value (e.g., loan principal)
        fv: Future value after the last payment
        timing: PaymentTiming.END (default) or PaymentTiming.BEGIN

    Returns:
        Payment per period (negative for a positive loan principal)

    Raises:
        InvalidArgument: If nper is negative or timing is not END/BEGIN
        DomainError: If nper is zero
    """
    check_periods(nper)
    t = as_timing(timing)

    if nper == 0:
        raise DomainError("Payment is undefined over zero periods")

    if rate == 0:
        return (-pv - fv) / nper

    growth, factor = _growth(rate, nper)
    if factor == 0 or 1 + rate * t == 0:
        raise DomainError("Payment is undefined for this rate")
    return (-fv - pv * growth) / (1 + rate * t) / factor


def periods(
    rate: float,
    pmt: float,
    pv: float,
    fv: float = 0.0,
    timing: TimingLike = PaymentTiming.END,
) -> float:
    """
    Calculate the number of periods of an annuity.

    Matches Excel's NPER() function.

    Raises:
        InvalidArgument: If timing is not END/BEGIN
        DomainError: If no number of periods satisfies the inputs
    """
    t = as_timing(timing)

    if rate == 0:
        if pmt == 0:
            raise DomainError("Rate and Payment can't be both zero")
        return (-pv - fv) / pmt

    if pmt == 0 and pv == 0:
        raise DomainError(
            "Payment and Present Value can't be both zero when the rate is not zero"
        )
    if rate <= -1:
        raise DomainError("Rate must be greater than -100%")

    annuity = pmt * (1 + rate * t) / rate
    denominator = pv + annuity
    if denominator == 0:
        raise DomainError("Number of periods is unbounded for these inputs")

    ratio = (annuity - fv) / denominator
    if ratio <= 0:
        raise DomainError("No number of periods solves these inputs")
    return math.log(ratio) / math.log(1 + rate)


def present_value_of(params: TVMParameters) -> float:
    return present_value(
        params.rate, params.nper, params.pmt, params.fv, params.timing
    )


def future_value_of(params: TVMParameters) -> float:
    return future_value(
        params.rate, params.nper, params.pmt, params.pv, params.timing
    )


def payment_of(params: TVMParameters) -> float:
    return payment(params.rate, params.nper, params.pv, params.fv, params.timing)


def periods_of(params: TVMParameters) -> float:
    return periods(params.rate, params.pmt, params.pv, params.fv, params.timing)
