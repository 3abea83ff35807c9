"""
Financial Calculation Engine

Time value of money, cash flow and amortization calculations.
All calculations are designed to match Excel formula behavior.
"""

from tvmcalc.calculations.errors import (
    ConvergenceError,
    DomainError,
    ErrorKind,
    FinanceError,
    InvalidArgument,
    Result,
    attempt,
)
from tvmcalc.calculations.interest import effective_rate, nominal_rate
from tvmcalc.calculations.tvm import (
    PaymentTiming,
    TVMParameters,
    future_value,
    future_value_of,
    payment,
    payment_of,
    periods,
    periods_of,
    present_value,
    present_value_of,
)
from tvmcalc.calculations.newton import RootFindingProblem, newton_raphson, solve
from tvmcalc.calculations.rate import rate, rate_of
from tvmcalc.calculations.irr import (
    internal_rate_of_return,
    modified_internal_rate_of_return,
    net_present_value,
)
from tvmcalc.calculations.amortization import (
    AmortizationEntry,
    AmortizationSchedule,
    amortization_schedule,
    interest_payment,
    principal_payment,
    split_period,
    total_interest,
    total_principal,
)

__all__ = [
    "ConvergenceError",
    "DomainError",
    "ErrorKind",
    "FinanceError",
    "InvalidArgument",
    "Result",
    "attempt",
    "effective_rate",
    "nominal_rate",
    "PaymentTiming",
    "TVMParameters",
    "present_value",
    "future_value",
    "payment",
    "periods",
    "present_value_of",
    "future_value_of",
    "payment_of",
    "periods_of",
    "RootFindingProblem",
    "newton_raphson",
    "solve",
    "rate",
    "rate_of",
    "net_present_value",
    "internal_rate_of_return",
    "modified_internal_rate_of_return",
    "AmortizationEntry",
    "AmortizationSchedule",
    "amortization_schedule",
    "split_period",
    "interest_payment",
    "principal_payment",
    "total_interest",
    "total_principal",
]
