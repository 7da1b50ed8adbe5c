"""
Calculator API endpoints.

These endpoints accept raw form inputs, normalize them, and return the
calculated series. Invalid inputs are replaced by defaults rather than
rejected.
"""

from fastapi import APIRouter
from pydantic import BaseModel, field_validator, model_validator
from typing import List, Optional
from datetime import date

from fincalc.calculations import amortization, compound
from fincalc.calculations.amortization import AmortizationEntry, LoanParameters
from fincalc.calculations.compound import CompoundingFrequency, GrowthParameters
from fincalc.calculations.validation import (
    MAX_GROWTH_YEARS,
    MAX_RATE_PERCENT,
    MAX_TERM_YEARS,
    MORTGAGE_DEFAULTS,
    MORTGAGE_MINIMUMS,
    parse_number,
    percent_to_rate,
    validate_down_payment,
    validate_integer,
    validate_number,
    validate_one_time_payment_month,
    validate_percentage,
    validate_positive_number,
)

router = APIRouter()


class GrowthInput(BaseModel):
    """Input for the compound growth projection."""

    principal: float = 10000
    monthly_contribution: float = 500
    annual_rate_percent: float = 7.0
    years: int = 10
    compounding_frequency: CompoundingFrequency = CompoundingFrequency.monthly
    rate_variance_percent: float = 0.0

    @field_validator("principal", "monthly_contribution", mode="before")
    @classmethod
    def non_negative(cls, v):
        return validate_positive_number(v)

    @field_validator("rate_variance_percent", mode="before")
    @classmethod
    def variance(cls, v):
        return validate_number(v, 0.0, MAX_RATE_PERCENT, 0.0)

    @field_validator("annual_rate_percent", mode="before")
    @classmethod
    def rate(cls, v):
        return validate_number(v, -MAX_RATE_PERCENT, MAX_RATE_PERCENT, 0.0)

    @field_validator("years", mode="before")
    @classmethod
    def horizon(cls, v):
        return validate_integer(v, 0, MAX_GROWTH_YEARS, 0)

    @field_validator("compounding_frequency", mode="before")
    @classmethod
    def frequency(cls, v):
        if isinstance(v, CompoundingFrequency):
            return v
        value = str(v).strip().lower()
        if value in CompoundingFrequency.__members__:
            return value
        return CompoundingFrequency.monthly

    def to_parameters(self) -> GrowthParameters:
        return GrowthParameters(
            principal=self.principal,
            monthly_contribution=self.monthly_contribution,
            annual_rate=percent_to_rate(self.annual_rate_percent),
            years=self.years,
            compounding_frequency=self.compounding_frequency,
            rate_variance=percent_to_rate(self.rate_variance_percent),
        )


class GrowthPointOut(BaseModel):
    """One projected year."""

    year: int
    baseline: float
    compound: float
    high_variance: Optional[float] = None
    low_variance: Optional[float] = None


class GrowthResponse(BaseModel):
    """Normalized inputs and projected points."""

    inputs: GrowthInput
    points: List[GrowthPointOut]
    final_value: float
    total_contributions: float
    interest_earned: float


@router.post("/compound", response_model=GrowthResponse, response_model_exclude_none=True)
async def calculate_compound(inputs: GrowthInput):
    """Project investment growth year by year."""
    points = compound.project(inputs.to_parameters())
    final = points[-1]

    return GrowthResponse(
        inputs=inputs,
        points=[GrowthPointOut(**vars(point)) for point in points],
        final_value=final.compound,
        total_contributions=final.baseline,
        interest_earned=compound.calculate_interest_earned(final),
    )


class MortgageInput(BaseModel):
    """Input for the mortgage calculator."""

    home_price: float = MORTGAGE_DEFAULTS["home_price"]
    down_payment: float = MORTGAGE_DEFAULTS["down_payment"]
    down_payment_percent: Optional[float] = None
    interest_rate_percent: float = MORTGAGE_DEFAULTS["interest_rate_percent"]
    term_years: int = MORTGAGE_DEFAULTS["term_years"]
    property_tax_annual: float = MORTGAGE_DEFAULTS["property_tax_annual"]
    insurance_annual: float = MORTGAGE_DEFAULTS["insurance_annual"]
    hoa_monthly: float = 0.0
    extra_monthly_payment: float = 0.0
    one_time_payment: float = 0.0
    one_time_payment_month: int = MORTGAGE_DEFAULTS["one_time_payment_month"]
    start_date: Optional[date] = None
    include_monthly: bool = False

    @field_validator("home_price", mode="before")
    @classmethod
    def price(cls, v):
        return validate_number(
            v, MORTGAGE_MINIMUMS["home_price"], None, MORTGAGE_DEFAULTS["home_price"]
        )

    @field_validator("interest_rate_percent", mode="before")
    @classmethod
    def rate(cls, v):
        return validate_number(
            v,
            MORTGAGE_MINIMUMS["interest_rate_percent"],
            MAX_RATE_PERCENT,
            MORTGAGE_DEFAULTS["interest_rate_percent"],
        )

    @field_validator("term_years", mode="before")
    @classmethod
    def term(cls, v):
        return validate_integer(v, 1, MAX_TERM_YEARS, MORTGAGE_DEFAULTS["term_years"])

    @field_validator("property_tax_annual", mode="before")
    @classmethod
    def property_tax(cls, v):
        return validate_positive_number(v, MORTGAGE_DEFAULTS["property_tax_annual"])

    @field_validator("insurance_annual", mode="before")
    @classmethod
    def insurance(cls, v):
        return validate_positive_number(v, MORTGAGE_DEFAULTS["insurance_annual"])

    @field_validator(
        "down_payment", "hoa_monthly", "extra_monthly_payment", "one_time_payment", mode="before"
    )
    @classmethod
    def non_negative(cls, v):
        return validate_positive_number(v)

    @field_validator("down_payment_percent", mode="before")
    @classmethod
    def down_payment_share(cls, v):
        if v is None:
            return None
        return validate_percentage(v)

    @field_validator("one_time_payment_month", mode="before")
    @classmethod
    def lump_sum_month(cls, v):
        return validate_integer(
            v, 1, MAX_TERM_YEARS * 12, MORTGAGE_DEFAULTS["one_time_payment_month"]
        )

    @model_validator(mode="after")
    def clamp_to_loan(self):
        if self.down_payment_percent is not None:
            self.down_payment = amortization.down_payment_from_percent(
                self.home_price, self.down_payment_percent
            )
        self.down_payment = validate_down_payment(self.down_payment, self.home_price)
        self.one_time_payment_month = validate_one_time_payment_month(
            self.one_time_payment_month, self.term_years
        )
        return self

    def to_parameters(self) -> LoanParameters:
        return LoanParameters(
            home_price=self.home_price,
            down_payment=self.down_payment,
            annual_rate=percent_to_rate(self.interest_rate_percent),
            term_years=self.term_years,
            property_tax_annual=self.property_tax_annual,
            insurance_annual=self.insurance_annual,
            hoa_monthly=self.hoa_monthly,
            extra_monthly_payment=self.extra_monthly_payment,
            one_time_payment=self.one_time_payment,
            one_time_payment_month=self.one_time_payment_month,
        )


def _entry_row(entry: AmortizationEntry) -> dict:
    return {
        "payment_number": entry.payment_number,
        "date": entry.date.isoformat(),
        "payment": round(entry.payment, 2),
        "principal": round(entry.principal, 2),
        "interest": round(entry.interest, 2),
        "remaining_balance": round(entry.remaining_balance, 2),
    }


@router.post("/mortgage")
async def calculate_mortgage(inputs: MortgageInput):
    """Calculate the mortgage payment, schedule, and extra-payment savings."""
    summary = amortization.calculate_mortgage(inputs.to_parameters(), inputs.start_date)
    analysis = summary.analysis

    result = {
        "principal": round(summary.principal, 2),
        "down_payment": round(summary.down_payment, 2),
        "down_payment_percent": amortization.down_payment_percent(
            inputs.home_price, summary.down_payment
        ),
        "monthly_payment": round(summary.monthly_payment, 2),
        "property_tax_monthly": round(summary.property_tax_monthly, 2),
        "insurance_monthly": round(summary.insurance_monthly, 2),
        "hoa_monthly": round(summary.hoa_monthly, 2),
        "total_monthly": round(summary.total_monthly, 2),
        "total_interest": round(analysis.total_interest_with_extra, 2),
        "payoff_months": len(summary.schedule),
        "analysis": {
            "months_saved": analysis.months_saved,
            "years_saved": analysis.years_saved,
            "months_remaining": analysis.months_remaining,
            "interest_saved": round(analysis.interest_saved, 2),
            "total_interest_base": round(analysis.total_interest_base, 2),
            "total_interest_with_extra": round(analysis.total_interest_with_extra, 2),
        },
        "breakdown": [
            {"name": item["name"], "value": round(item["value"], 2)}
            for item in summary.breakdown
        ],
        "chart": [
            {
                **point,
                "balance": round(point["balance"], 2),
                "total_interest": round(point["total_interest"], 2),
            }
            for point in summary.chart_points
        ],
        "yearly_schedule": [_entry_row(entry) for entry in summary.yearly_schedule],
    }

    if inputs.include_monthly:
        result["schedule"] = [_entry_row(entry) for entry in summary.schedule]

    return result


class PaymentInput(BaseModel):
    """Input for a bare monthly payment calculation."""

    principal: float
    annual_rate: float
    term_years: int

    @field_validator("principal", mode="before")
    @classmethod
    def number(cls, v):
        return parse_number(v)

    @field_validator("annual_rate", mode="before")
    @classmethod
    def rate(cls, v):
        return validate_number(v, None, percent_to_rate(MAX_RATE_PERCENT), 0.0)

    @field_validator("term_years", mode="before")
    @classmethod
    def whole_years(cls, v):
        return int(parse_number(v))


class PaymentResponse(BaseModel):
    monthly_payment: float


@router.post("/mortgage/payment", response_model=PaymentResponse)
async def calculate_monthly_payment(inputs: PaymentInput):
    """Calculate the monthly principal and interest payment."""
    return PaymentResponse(
        monthly_payment=amortization.calculate_payment(
            inputs.principal, inputs.annual_rate, inputs.term_years
        )
    )
