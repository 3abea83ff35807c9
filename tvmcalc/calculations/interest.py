"""
Interest Rate Conversions

Effective/nominal annual rate conversions, matching Excel's EFFECT and
NOMINAL functions.
"""

from tvmcalc.calculations.errors import InvalidArgument


def _compounding_periods(periods_per_year: float) -> int:
    # Excel truncates the compounding count to an integer
    npery = int(periods_per_year)
    if npery < 0:
        raise InvalidArgument(
            "Number of compounding payments per year is not positive"
        )
    if npery == 0:
        raise InvalidArgument("Number of compounding payments per year is zero")
    return npery


def effective_rate(nominal_rate: float, periods_per_year: float) -> float:
    """
    Calculate the effective annual rate.

    Matches Excel's EFFECT() function.

    Args:
        nominal_rate: Nominal annual rate as decimal (e.g., 0.141 for 14.1%)
        periods_per_year: Compounding periods per year

    Returns:
        Effective annual rate as decimal

    Raises:
        InvalidArgument: If periods_per_year is not positive
    """
    npery = _compounding_periods(periods_per_year)
    return (1 + nominal_rate / npery) ** npery - 1


def nominal_rate(effective_rate: float, periods_per_year: float) -> float:
    """
    Calculate the nominal annual rate.

    Matches Excel's NOMINAL() function.

    Args:
        effective_rate: Effective annual rate as decimal
        periods_per_year: Compounding periods per year

    Returns:
        Nominal annual rate as decimal

    Raises:
        InvalidArgument: If periods_per_year is not positive
    """
    npery = _compounding_periods(periods_per_year)
    return npery * ((effective_rate + 1) ** (1 / npery) - 1)
