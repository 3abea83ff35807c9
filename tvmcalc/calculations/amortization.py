"""
Loan Amortization Calculations

Splits each constant annuity payment into interest and principal,
matching Excel's IPMT and PPMT functions. The payment comes from PMT();
the split walks the periods sequentially on a running capital balance.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator, Optional, Tuple

from dateutil.relativedelta import relativedelta

from tvmcalc.calculations.errors import InvalidArgument
from tvmcalc.calculations.tvm import (
    PaymentTiming,
    TimingLike,
    as_timing,
    check_periods,
    payment,
)


@dataclass(frozen=True)
class AmortizationEntry:
    """One period of an amortization schedule."""

    period: int  # 1-based
    payment: float
    interest: float
    principal: float
    balance: float  # capital after this period's payment
    payment_date: Optional[date] = None

    def as_dict(self) -> dict:
        return {
            "period": self.period,
            "date": self.payment_date.isoformat() if self.payment_date else None,
            "payment": self.payment,
            "interest": self.interest,
            "principal": self.principal,
            "balance": self.balance,
        }


class AmortizationSchedule:
    """
    Lazy amortization schedule for periods 1..nper.

    Iterating starts a fresh walk from the opening balance, so the same
    schedule can be consumed any number of times.
    """

    def __init__(
        self,
        rate: float,
        nper: int,
        pv: float,
        fv: float = 0.0,
        timing: TimingLike = PaymentTiming.END,
        start_date: Optional[date] = None,
    ):
        check_periods(nper)
        if not math.isfinite(nper) or int(nper) != nper:
            raise InvalidArgument("Number of periods must be a whole number")
        self.rate = rate
        self.nper = int(nper)
        self.pv = pv
        self.fv = fv
        self.timing = as_timing(timing)
        self.start_date = start_date
        self.payment = payment(rate, nper, pv, fv, self.timing)

    def __len__(self) -> int:
        return self.nper

    def __iter__(self) -> Iterator[AmortizationEntry]:
        return self.walk(self.nper)

    def walk(self, last_period: int) -> Iterator[AmortizationEntry]:
        """Yield entries for periods 1..last_period."""
        pmt = self.payment
        capital = self.pv

        for period in range(1, last_period + 1):
            # No interest accrues before the first payment in advance
            if self.timing == PaymentTiming.BEGIN and period == 1:
                interest = 0.0
            else:
                interest = -capital * self.rate
            principal = pmt - interest
            capital += principal

            payment_date = None
            if self.start_date is not None:
                payment_date = self.start_date + relativedelta(months=period - 1)

            yield AmortizationEntry(
                period=period,
                payment=pmt,
                interest=interest,
                principal=principal,
                balance=capital,
                payment_date=payment_date,
            )


def amortization_schedule(
    rate: float,
    nper: int,
    pv: float,
    fv: float = 0.0,
    timing: TimingLike = PaymentTiming.END,
    start_date: Optional[date] = None,
) -> AmortizationSchedule:
    """
    Build the amortization schedule of an annuity.

    Args:
        rate: Interest rate per period
        nper: Number of periods
        pv: Present value (loan principal)
        fv: Future value after the last payment
        timing: PaymentTiming.END (default) or PaymentTiming.BEGIN
        start_date: Date of the first payment; later payments are
            spaced one month apart

    Returns:
        Restartable iterable of AmortizationEntry
    """
    return AmortizationSchedule(rate, nper, pv, fv, timing, start_date)


def split_period(
    rate: float,
    per: int,
    nper: int,
    pv: float,
    fv: float = 0.0,
    timing: TimingLike = PaymentTiming.END,
) -> Tuple[float, float]:
    """
    Calculate the (interest, principal) split of one period's payment.

    Raises:
        InvalidArgument: If per is not a period in 1..nper, nper is
            not a whole number or timing is not END/BEGIN
    """
    schedule = AmortizationSchedule(rate, nper, pv, fv, timing)
    if not math.isfinite(per) or int(per) != per or not 1 <= per <= nper:
        raise InvalidArgument(f"Period must be a whole number between 1 and {nper}")

    entry = None
    for entry in schedule.walk(int(per)):
        pass
    return entry.interest, entry.principal


def interest_payment(
    rate: float,
    per: int,
    nper: int,
    pv: float,
    fv: float = 0.0,
    timing: TimingLike = PaymentTiming.END,
) -> float:
    """
    Calculate the interest part of a period's payment.

    Matches Excel's IPMT() function.
    """
    return split_period(rate, per, nper, pv, fv, timing)[0]


def principal_payment(
    rate: float,
    per: int,
    nper: int,
    pv: float,
    fv: float = 0.0,
    timing: TimingLike = PaymentTiming.END,
) -> float:
    """
    Calculate the principal part of a period's payment.

    Matches Excel's PPMT() function.
    """
    return split_period(rate, per, nper, pv, fv, timing)[1]


def total_interest(entries: Iterable[AmortizationEntry]) -> float:
    """Calculate total interest paid over a schedule."""
    return sum(entry.interest for entry in entries)


def total_principal(entries: Iterable[AmortizationEntry]) -> float:
    """Calculate total principal repaid over a schedule."""
    return sum(entry.principal for entry in entries)
