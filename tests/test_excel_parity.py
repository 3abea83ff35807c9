"""
Excel Parity Tests

These tests verify that our calculations match Excel's financial
functions. Benchmark values were computed in Excel and are checked to
six decimal places.
"""

import pytest

from tvmcalc.calculations import (
    PaymentTiming,
    effective_rate,
    future_value,
    interest_payment,
    internal_rate_of_return,
    nominal_rate,
    payment,
    periods,
    present_value,
    principal_payment,
)


# =============================================================================
# BENCHMARK DATA FROM EXCEL
# =============================================================================

TOL = 1e-6

END = PaymentTiming.END
BEGIN = PaymentTiming.BEGIN

# =EFFECT(nominal, npery)
EXCEL_EFFECT = [
    ((0.141, 2), 0.14597025),
    ((0.139, 3), 0.14553980),
    ((0.009, 4), 0.00903042),
    ((0.4, 2), 0.44),
    ((0.141, 1), 0.141),
    ((0.139, 5), 0.14694625),
    ((0.009, 77), 0.00904009),
    ((0.40, 13), 0.48285538),
]

# =NOMINAL(effect, npery)
EXCEL_NOMINAL = [
    ((0.56, 2), 0.497999),
    ((0.34, 4), 0.303643),
    ((0.745, 3), 0.611767),
    ((0.1245, 88), 0.117417),
    ((0.032, 9), 0.031554),
    ((0.293, 5), 0.263683),
]

# =PV(rate, nper, pmt)
EXCEL_PV = [
    ((0.08, 20, 500), -4909.073704),
    ((0.03, 5, 200), -915.941437),
    ((0.29, 7, 100), -286.821438),
    ((0, 7, 100), -700.0),
]

# =FV(rate, nper, pmt)
EXCEL_FV = [
    ((0.08, 20, 500), -22880.982149),
    ((0.03, 5, 200), -1061.827162),
    ((0.29, 7, 100), -1705.059664),
    ((0, 7, 100), -700.0),
]

# =PMT(rate, nper, pv, fv, type)
EXCEL_PMT = [
    ((0.08, 20, 355), -36.157534),
    ((0.03, 5, 828), -180.797585),
    ((0.29, 7, 477), -166.305561),
    ((0, 7, 435), -62.142857),
    ((0.1 / 12, 36, 8000, 0, END), -258.137498),
    ((0.1 / 12, 36, 8000, 0, BEGIN), -256.004130),
]

# =NPER(rate, pmt, pv)
EXCEL_NPER = [
    ((0.08, -500, 355), 0.759825),
    ((0.03, -200, 828), 4.486566),
    ((0.45, -5000, 344), 0.084641),
    ((0, -100, 435), 4.35),
]

# =IPMT(rate, per, nper, pv, fv, type) and =PPMT(...)
EXCEL_IPMT_PPMT = [
    ((0.1 / 12, 3, 36, 8000, 0, END), -63.462189, -194.675308),
    ((0.1 / 12, 13, 36, 8000, 0, END), -46.617168, -211.5203289),
    ((0.1 / 12, 33, 36, 8000, 0, END), -8.428265, -249.709231),
    ((0.1 / 12, 3, 36, 8000, 0, BEGIN), -62.937708, -193.066421),
]

# =IRR(values, guess)
EXCEL_IRR = [
    (([-70000, 12000, 15000, 18000, 21000], 0.1), -0.02124485),
    (([-70000, 12000, 15000, 18000, 21000, 26000], 0.1), 0.086630),
    (([-70000, 12000, 15000], -0.40), -0.443507),
]


@pytest.mark.parametrize("args,expected", EXCEL_EFFECT)
def test_effect(args, expected):
    assert effective_rate(*args) == pytest.approx(expected, abs=TOL)


@pytest.mark.parametrize("args,expected", EXCEL_NOMINAL)
def test_nominal(args, expected):
    assert nominal_rate(*args) == pytest.approx(expected, abs=TOL)


@pytest.mark.parametrize("args,expected", EXCEL_PV)
def test_pv(args, expected):
    assert present_value(*args) == pytest.approx(expected, abs=TOL)


@pytest.mark.parametrize("args,expected", EXCEL_FV)
def test_fv(args, expected):
    assert future_value(*args) == pytest.approx(expected, abs=TOL)


@pytest.mark.parametrize("args,expected", EXCEL_PMT)
def test_pmt(args, expected):
    assert payment(*args) == pytest.approx(expected, abs=TOL)


@pytest.mark.parametrize("args,expected", EXCEL_NPER)
def test_nper(args, expected):
    assert periods(*args) == pytest.approx(expected, abs=TOL)


@pytest.mark.parametrize("args,interest,principal", EXCEL_IPMT_PPMT)
def test_ipmt_ppmt(args, interest, principal):
    assert interest_payment(*args) == pytest.approx(interest, abs=TOL)
    assert principal_payment(*args) == pytest.approx(principal, abs=TOL)


@pytest.mark.parametrize("args,expected", EXCEL_IRR)
def test_irr(args, expected):
    values, guess = args
    assert internal_rate_of_return(values, guess) == pytest.approx(expected, abs=TOL)
