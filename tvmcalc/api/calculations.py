"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results. Calculation
failures map to 400 (invalid argument) or 422 (no solution).
"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from tvmcalc.calculations import (
    ErrorKind,
    FinanceError,
    amortization_schedule,
    attempt,
    effective_rate,
    future_value,
    internal_rate_of_return,
    modified_internal_rate_of_return,
    net_present_value,
    nominal_rate,
    payment,
    periods,
    present_value,
    rate,
    split_period,
    total_interest,
    total_principal,
)
from tvmcalc.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

STATUS_BY_KIND = {
    ErrorKind.invalid_argument: 400,
    ErrorKind.domain_error: 422,
    ErrorKind.convergence_error: 422,
}


def _http_error(e: FinanceError) -> HTTPException:
    logger.info("Rejected calculation (%s): %s", e.kind.value, e)
    return HTTPException(
        status_code=STATUS_BY_KIND[e.kind],
        detail={"error": e.kind.value, "message": str(e)},
    )


def _guess(guess: Optional[float]) -> float:
    return get_settings().default_guess if guess is None else guess


def _solver_options() -> dict:
    settings = get_settings()
    return {
        "tolerance": settings.solver_tolerance,
        "max_iterations": settings.solver_max_iterations,
    }


class ValueResponse(BaseModel):
    """Single calculated value."""

    value: float


# -----------------------------------------------------------------------------
# Rate conversions
# -----------------------------------------------------------------------------


class EffectiveRateInput(BaseModel):
    nominal_rate: float
    periods_per_year: int


class NominalRateInput(BaseModel):
    effective_rate: float
    periods_per_year: int


@router.post("/rates/effective", response_model=ValueResponse)
async def calculate_effective_rate(inputs: EffectiveRateInput):
    """Convert a nominal annual rate to an effective one (EFFECT)."""
    try:
        return ValueResponse(
            value=effective_rate(inputs.nominal_rate, inputs.periods_per_year)
        )
    except FinanceError as e:
        raise _http_error(e)


@router.post("/rates/nominal", response_model=ValueResponse)
async def calculate_nominal_rate(inputs: NominalRateInput):
    """Convert an effective annual rate to a nominal one (NOMINAL)."""
    try:
        return ValueResponse(
            value=nominal_rate(inputs.effective_rate, inputs.periods_per_year)
        )
    except FinanceError as e:
        raise _http_error(e)


# -----------------------------------------------------------------------------
# Time value of money
# -----------------------------------------------------------------------------


class TVMInput(BaseModel):
    """Terms of the annuity identity; unused terms are ignored."""

    rate: float = 0.0
    nper: float = 0.0
    pmt: float = 0.0
    pv: float = 0.0
    fv: float = 0.0
    timing: int = 0  # 0 = end of period, 1 = beginning


class RateInput(BaseModel):
    nper: float
    pmt: float
    pv: float
    fv: float = 0.0
    timing: int = 0
    guess: Optional[float] = None


@router.post("/tvm/pv", response_model=ValueResponse)
async def calculate_present_value(inputs: TVMInput):
    """Present value (PV)."""
    try:
        return ValueResponse(
            value=present_value(
                inputs.rate, inputs.nper, inputs.pmt, inputs.fv, inputs.timing
            )
        )
    except FinanceError as e:
        raise _http_error(e)


@router.post("/tvm/fv", response_model=ValueResponse)
async def calculate_future_value(inputs: TVMInput):
    """Future value (FV)."""
    try:
        return ValueResponse(
            value=future_value(
                inputs.rate, inputs.nper, inputs.pmt, inputs.pv, inputs.timing
            )
        )
    except FinanceError as e:
        raise _http_error(e)


@router.post("/tvm/pmt", response_model=ValueResponse)
async def calculate_payment(inputs: TVMInput):
    """Constant periodic payment (PMT)."""
    try:
        return ValueResponse(
            value=payment(inputs.rate, inputs.nper, inputs.pv, inputs.fv, inputs.timing)
        )
    except FinanceError as e:
        raise _http_error(e)


@router.post("/tvm/nper", response_model=ValueResponse)
async def calculate_periods(inputs: TVMInput):
    """Number of periods (NPER)."""
    try:
        return ValueResponse(
            value=periods(inputs.rate, inputs.pmt, inputs.pv, inputs.fv, inputs.timing)
        )
    except FinanceError as e:
        raise _http_error(e)


@router.post("/tvm/rate", response_model=ValueResponse)
async def calculate_rate(inputs: RateInput):
    """Periodic interest rate (RATE)."""
    try:
        return ValueResponse(
            value=rate(
                inputs.nper,
                inputs.pmt,
                inputs.pv,
                inputs.fv,
                inputs.timing,
                guess=_guess(inputs.guess),
                **_solver_options(),
            )
        )
    except FinanceError as e:
        raise _http_error(e)


# -----------------------------------------------------------------------------
# Cash flows
# -----------------------------------------------------------------------------


class NPVInput(BaseModel):
    rate: float
    values: List[float]


class IRRInput(BaseModel):
    values: List[float]
    guess: Optional[float] = None


class MIRRInput(BaseModel):
    values: List[float]
    finance_rate: float
    reinvest_rate: float


class CashFlowSummaryInput(BaseModel):
    """Input for a combined NPV/IRR/MIRR evaluation."""

    values: List[float]
    discount_rate: float = 0.10
    finance_rate: float = 0.10
    reinvest_rate: float = 0.10
    guess: Optional[float] = None


class CashFlowSummary(BaseModel):
    """Combined metrics; a metric that cannot be computed is null."""

    npv: float
    irr: Optional[float] = None
    irr_error: Optional[str] = None
    mirr: Optional[float] = None
    mirr_error: Optional[str] = None


@router.post("/npv", response_model=ValueResponse)
async def calculate_npv(inputs: NPVInput):
    """Net present value (NPV)."""
    try:
        return ValueResponse(value=net_present_value(inputs.rate, inputs.values))
    except FinanceError as e:
        raise _http_error(e)


@router.post("/irr", response_model=ValueResponse)
async def calculate_irr(inputs: IRRInput):
    """Internal rate of return (IRR)."""
    try:
        return ValueResponse(
            value=internal_rate_of_return(
                inputs.values, guess=_guess(inputs.guess), **_solver_options()
            )
        )
    except FinanceError as e:
        raise _http_error(e)


@router.post("/mirr", response_model=ValueResponse)
async def calculate_mirr(inputs: MIRRInput):
    """Modified internal rate of return (MIRR)."""
    try:
        return ValueResponse(
            value=modified_internal_rate_of_return(
                inputs.values, inputs.finance_rate, inputs.reinvest_rate
            )
        )
    except FinanceError as e:
        raise _http_error(e)


@router.post("/cashflows/summary", response_model=CashFlowSummary)
async def summarize_cash_flows(inputs: CashFlowSummaryInput):
    """NPV plus IRR and MIRR where they exist."""
    try:
        npv = net_present_value(inputs.discount_rate, inputs.values)
    except FinanceError as e:
        raise _http_error(e)

    irr_result = attempt(
        internal_rate_of_return,
        inputs.values,
        guess=_guess(inputs.guess),
        **_solver_options(),
    )
    mirr_result = attempt(
        modified_internal_rate_of_return,
        inputs.values,
        inputs.finance_rate,
        inputs.reinvest_rate,
    )

    return CashFlowSummary(
        npv=npv,
        irr=irr_result.value,
        irr_error=irr_result.error_kind.value if not irr_result.ok else None,
        mirr=mirr_result.value,
        mirr_error=mirr_result.error_kind.value if not mirr_result.ok else None,
    )


# -----------------------------------------------------------------------------
# Amortization
# -----------------------------------------------------------------------------


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    rate: float
    nper: int
    pv: float
    fv: float = 0.0
    timing: int = 0
    start_date: Optional[date] = None


class SplitInput(BaseModel):
    rate: float
    per: int
    nper: int
    pv: float
    fv: float = 0.0
    timing: int = 0


class SplitResponse(BaseModel):
    interest: float
    principal: float


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate the amortization schedule of an annuity."""
    try:
        schedule = amortization_schedule(
            inputs.rate,
            inputs.nper,
            inputs.pv,
            inputs.fv,
            inputs.timing,
            start_date=inputs.start_date,
        )
    except FinanceError as e:
        raise _http_error(e)

    entries = list(schedule)
    return {
        "payment": schedule.payment,
        "schedule": [entry.as_dict() for entry in entries],
        "total_interest": total_interest(entries),
        "total_principal": total_principal(entries),
    }


@router.post("/amortization/split", response_model=SplitResponse)
async def calculate_split(inputs: SplitInput):
    """Interest and principal parts of one period's payment (IPMT/PPMT)."""
    try:
        interest, principal = split_period(
            inputs.rate, inputs.per, inputs.nper, inputs.pv, inputs.fv, inputs.timing
        )
    except FinanceError as e:
        raise _http_error(e)
    return SplitResponse(interest=interest, principal=principal)
