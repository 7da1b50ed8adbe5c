"""
Compound Growth Calculations

Projects an investment year by year under annual or monthly compounding,
alongside a no-interest baseline and an optional rate-variance band.
"""

import enum
import math
import sys
from typing import List, Optional
from dataclasses import dataclass, replace

MONTHS_PER_YEAR = 12
MAX_VALUE = sys.float_info.max


class CompoundingFrequency(str, enum.Enum):
    """How often interest is applied to the balance."""

    annually = "annually"
    monthly = "monthly"

    @property
    def periods_per_year(self) -> int:
        return MONTHS_PER_YEAR if self is CompoundingFrequency.monthly else 1


@dataclass
class GrowthParameters:
    """Growth calculator inputs, rates as decimals."""

    principal: float
    monthly_contribution: float
    annual_rate: float
    years: int
    compounding_frequency: CompoundingFrequency = CompoundingFrequency.monthly
    rate_variance: float = 0.0


@dataclass
class GrowthPoint:
    """Projected values at the end of one year, in whole currency units."""

    year: int
    baseline: float
    compound: float
    high_variance: Optional[float] = None
    low_variance: Optional[float] = None


def _finite(value: float) -> float:
    """Clamp an overflowed value to the largest float, NaN to 0."""
    if math.isnan(value):
        return 0.0
    return max(-MAX_VALUE, min(MAX_VALUE, value))


def calculate_baseline(principal: float, monthly_contribution: float, year: int) -> float:
    """Principal plus contributions, no interest."""
    return _finite(principal + monthly_contribution * MONTHS_PER_YEAR * year)


def calculate_future_value(
    principal: float,
    monthly_contribution: float,
    annual_rate: float,
    year: int,
    frequency: CompoundingFrequency = CompoundingFrequency.monthly,
) -> float:
    """
    Calculate the unrounded portfolio value after a number of years.

    Annual compounding applies the year's interest first and then adds the
    year's contributions, so contributions earn nothing in the year they are
    made. Monthly compounding uses the closed form

        FV = P(1 + r/n)^(nt) + PMT * ((1 + r/n)^(nt) - 1) / (r/n)

    with PMT the monthly contribution.

    Args:
        principal: Starting balance
        monthly_contribution: Amount added every month
        annual_rate: Annual rate as decimal, may be negative
        year: Number of whole years
        frequency: Compounding frequency

    Returns:
        Future value
    """
    if year <= 0:
        return principal

    if frequency is CompoundingFrequency.annually:
        value = principal
        for _ in range(year):
            value = value * (1 + annual_rate)
            value += monthly_contribution * MONTHS_PER_YEAR
        return _finite(value)

    periods_per_year = frequency.periods_per_year
    period_rate = annual_rate / periods_per_year
    periods = periods_per_year * year

    try:
        growth_factor = (1 + period_rate) ** periods
    except OverflowError:
        return MAX_VALUE if principal or monthly_contribution else 0.0
    principal_growth = principal * growth_factor

    if period_rate == 0:
        annuity_growth = monthly_contribution * periods
    else:
        annuity_growth = monthly_contribution * (growth_factor - 1) / period_rate

    return _finite(principal_growth + annuity_growth)


def project(params: GrowthParameters) -> List[GrowthPoint]:
    """
    Project the portfolio for every year from 0 to params.years inclusive.

    Values are rounded to whole currency units only when emitted. When a
    rate variance is set the projection is repeated at rate +/- variance and
    the results fill the high/low fields; otherwise those stay None.
    """
    high: Optional[List[GrowthPoint]] = None
    low: Optional[List[GrowthPoint]] = None

    if params.rate_variance > 0:
        high = project(
            replace(
                params,
                annual_rate=params.annual_rate + params.rate_variance,
                rate_variance=0.0,
            )
        )
        low = project(
            replace(
                params,
                annual_rate=params.annual_rate - params.rate_variance,
                rate_variance=0.0,
            )
        )

    points = []
    for year in range(params.years + 1):
        compound = calculate_future_value(
            params.principal,
            params.monthly_contribution,
            params.annual_rate,
            year,
            params.compounding_frequency,
        )
        points.append(
            GrowthPoint(
                year=year,
                baseline=round(
                    calculate_baseline(params.principal, params.monthly_contribution, year)
                ),
                compound=round(compound),
                high_variance=high[year].compound if high else None,
                low_variance=low[year].compound if low else None,
            )
        )

    return points


def calculate_interest_earned(point: GrowthPoint) -> float:
    """Growth attributable to interest at a projected point."""
    return point.compound - point.baseline
