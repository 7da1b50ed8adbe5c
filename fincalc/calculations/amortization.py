"""
Mortgage Amortization Calculations

Implements the fixed monthly payment for an amortizing loan and the
payment-by-payment schedule, including extra monthly payments, a one-time
lump sum, and the monthly cost add-ons (property tax, insurance, HOA).
"""

import math
from typing import List, Dict, Optional
from datetime import date
from dataclasses import dataclass, field
from dateutil.relativedelta import relativedelta

MONTHS_PER_YEAR = 12
PAYOFF_EPSILON = 0.01


@dataclass
class LoanParameters:
    """User-editable mortgage inputs, rates as decimals."""

    home_price: float
    down_payment: float
    annual_rate: float
    term_years: int
    property_tax_annual: float = 0.0
    insurance_annual: float = 0.0
    hoa_monthly: float = 0.0
    extra_monthly_payment: float = 0.0
    one_time_payment: float = 0.0
    one_time_payment_month: int = 12

    @property
    def principal(self) -> float:
        """Loan amount after the down payment."""
        return max(0.0, self.home_price - self.down_payment)

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate / MONTHS_PER_YEAR

    @property
    def number_of_payments(self) -> int:
        return self.term_years * MONTHS_PER_YEAR


@dataclass
class AmortizationEntry:
    """One payment period of an amortization schedule."""

    payment_number: int
    date: date
    payment: float
    principal: float
    interest: float
    remaining_balance: float


@dataclass
class ExtraPaymentAnalysis:
    """Savings from extra payments versus the nominal term."""

    months_saved: int = 0
    years_saved: int = 0
    months_remaining: int = 0
    interest_saved: float = 0.0
    total_interest_base: float = 0.0
    total_interest_with_extra: float = 0.0


@dataclass
class MortgageSummary:
    """Everything the mortgage view needs for one parameter snapshot."""

    principal: float
    down_payment: float
    monthly_payment: float
    property_tax_monthly: float
    insurance_monthly: float
    hoa_monthly: float
    total_monthly: float
    schedule: List[AmortizationEntry] = field(default_factory=list)
    yearly_schedule: List[AmortizationEntry] = field(default_factory=list)
    analysis: ExtraPaymentAnalysis = field(default_factory=ExtraPaymentAnalysis)
    breakdown: List[Dict] = field(default_factory=list)
    chart_points: List[Dict] = field(default_factory=list)


def calculate_payment(principal: float, annual_rate: float, term_years: int) -> float:
    """
    Calculate the monthly principal and interest payment.

    M = P * [r(1+r)^n] / [(1+r)^n - 1], with r = annual_rate / 12 and
    n = term_years * 12.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal (e.g., 0.065 for 6.5%)
        term_years: Loan term in years

    Returns:
        Monthly payment, or 0.0 for a non-positive principal or term, a
        negative rate, or a payment too large to represent
    """
    number_of_payments = term_years * MONTHS_PER_YEAR

    if principal <= 0 or number_of_payments <= 0 or annual_rate < 0:
        return 0.0

    monthly_rate = annual_rate / MONTHS_PER_YEAR

    if monthly_rate == 0:
        return principal / number_of_payments

    try:
        factor = (1 + monthly_rate) ** number_of_payments
        payment = principal * (monthly_rate * factor) / (factor - 1)
    except OverflowError:
        # Infinite-term limit: the payment only covers interest
        payment = principal * monthly_rate

    if not math.isfinite(payment):
        return 0.0
    return payment


def generate_amortization_schedule(
    principal: float,
    monthly_payment: float,
    monthly_rate: float,
    number_of_payments: int,
    extra_monthly: float = 0.0,
    one_time_payment: float = 0.0,
    one_time_payment_month: int = 0,
    start_date: Optional[date] = None,
) -> List[AmortizationEntry]:
    """
    Generate the payment-by-payment amortization schedule.

    Stops early once the balance drops to a cent or less, so extra payments
    produce a schedule shorter than the nominal term.

    Args:
        principal: Loan principal amount
        monthly_payment: Scheduled principal and interest payment
        monthly_rate: Periodic interest rate (annual rate / 12)
        number_of_payments: Nominal number of payments
        extra_monthly: Extra principal paid every period
        one_time_payment: Lump sum applied once
        one_time_payment_month: Payment number receiving the lump sum
        start_date: Loan start; payment i falls i months later

    Returns:
        List of amortization entries in payment order
    """
    schedule: List[AmortizationEntry] = []

    if principal <= 0 or monthly_payment <= 0:
        return schedule

    if start_date is None:
        start_date = date.today()

    balance = principal
    period = 1

    while period <= number_of_payments and balance > PAYOFF_EPSILON:
        interest = balance * monthly_rate

        extra = extra_monthly
        if period == one_time_payment_month and one_time_payment > 0:
            extra += one_time_payment

        principal_pmt = monthly_payment - interest + extra
        # Never overpay, never let the balance grow
        principal_pmt = min(max(principal_pmt, 0.0), balance)

        ending_balance = balance - principal_pmt

        schedule.append(
            AmortizationEntry(
                payment_number=period,
                date=start_date + relativedelta(months=period),
                payment=monthly_payment + extra,
                principal=principal_pmt,
                interest=interest,
                remaining_balance=max(0.0, ending_balance),
            )
        )

        balance = ending_balance
        period += 1

    return schedule


def calculate_total_interest(schedule: List[AmortizationEntry]) -> float:
    """Calculate total interest paid over the schedule."""
    return sum(entry.interest for entry in schedule)


def calculate_total_principal(schedule: List[AmortizationEntry]) -> float:
    return sum(entry.principal for entry in schedule)


def calculate_monthly_costs(
    property_tax_annual: float, insurance_annual: float, hoa_monthly: float
) -> Dict[str, float]:
    """Convert the cost add-ons to monthly amounts."""
    return {
        "property_tax": property_tax_annual / MONTHS_PER_YEAR,
        "insurance": insurance_annual / MONTHS_PER_YEAR,
        "hoa": hoa_monthly,
    }


def down_payment_from_percent(home_price: float, percent: float) -> float:
    """Down payment in whole currency units for a percent of the price."""
    return float(round(home_price * percent / 100))


def down_payment_percent(home_price: float, down_payment: float) -> float:
    """Down payment as a percent of the price, to 2 decimals."""
    if home_price <= 0:
        return 0.0
    return round(down_payment / home_price * 100, 2)


def analyze_extra_payments(
    schedule: List[AmortizationEntry],
    principal: float,
    monthly_payment: float,
    number_of_payments: int,
) -> ExtraPaymentAnalysis:
    """
    Compare the actual schedule against the nominal term.

    The nominal total interest is M * n - P; the actual total is the sum of
    the schedule's interest entries.
    """
    if not schedule:
        return ExtraPaymentAnalysis()

    months_saved = number_of_payments - len(schedule)
    total_interest_base = monthly_payment * number_of_payments - principal
    total_interest_with_extra = calculate_total_interest(schedule)

    return ExtraPaymentAnalysis(
        months_saved=months_saved,
        years_saved=months_saved // MONTHS_PER_YEAR,
        months_remaining=months_saved % MONTHS_PER_YEAR,
        interest_saved=total_interest_base - total_interest_with_extra,
        total_interest_base=total_interest_base,
        total_interest_with_extra=total_interest_with_extra,
    )


def summarize_by_year(
    schedule: List[AmortizationEntry], term_years: int
) -> List[AmortizationEntry]:
    """
    Sample the last payment of each year.

    Appends the final payment when the loan is paid off mid-year.
    """
    yearly = []
    for year in range(1, term_years + 1):
        index = year * MONTHS_PER_YEAR - 1
        if index < len(schedule):
            yearly.append(schedule[index])

    if schedule and schedule[-1].payment_number % MONTHS_PER_YEAR != 0:
        yearly.append(schedule[-1])

    return yearly


def generate_balance_chart_points(
    schedule: List[AmortizationEntry], principal: float
) -> List[Dict]:
    """
    Yearly balance and cumulative interest points for the balance chart.

    Starts with a year-0 point at the full principal.
    """
    if not schedule:
        return []

    points = [{"month": 0, "year": 0.0, "balance": principal, "total_interest": 0.0}]
    cumulative_interest = 0.0
    last_index = len(schedule) - 1

    for i, entry in enumerate(schedule):
        cumulative_interest += entry.interest
        if i % MONTHS_PER_YEAR == MONTHS_PER_YEAR - 1 or i == last_index:
            month = i + 1
            points.append(
                {
                    "month": month,
                    "year": round(month / MONTHS_PER_YEAR, 1),
                    "balance": entry.remaining_balance,
                    "total_interest": cumulative_interest,
                }
            )

    return points


def calculate_payment_breakdown(
    schedule: List[AmortizationEntry], monthly_costs: Dict[str, float]
) -> List[Dict]:
    """First month's payment split into its components, zero slices dropped."""
    if not schedule:
        return []

    first = schedule[0]
    slices = [
        {"name": "Principal", "value": first.principal},
        {"name": "Interest", "value": first.interest},
        {"name": "Property Tax", "value": monthly_costs["property_tax"]},
        {"name": "Insurance", "value": monthly_costs["insurance"]},
    ]
    if monthly_costs["hoa"] > 0:
        slices.append({"name": "HOA Fees", "value": monthly_costs["hoa"]})

    return [item for item in slices if item["value"] > 0]


def calculate_mortgage(
    params: LoanParameters, start_date: Optional[date] = None
) -> MortgageSummary:
    """Run the full mortgage calculation for one parameter snapshot."""
    principal = params.principal
    monthly_payment = calculate_payment(principal, params.annual_rate, params.term_years)
    costs = calculate_monthly_costs(
        params.property_tax_annual, params.insurance_annual, params.hoa_monthly
    )

    schedule = generate_amortization_schedule(
        principal=principal,
        monthly_payment=monthly_payment,
        monthly_rate=params.monthly_rate,
        number_of_payments=params.number_of_payments,
        extra_monthly=params.extra_monthly_payment,
        one_time_payment=params.one_time_payment,
        one_time_payment_month=params.one_time_payment_month,
        start_date=start_date,
    )

    return MortgageSummary(
        principal=principal,
        down_payment=params.down_payment,
        monthly_payment=monthly_payment,
        property_tax_monthly=costs["property_tax"],
        insurance_monthly=costs["insurance"],
        hoa_monthly=costs["hoa"],
        total_monthly=monthly_payment + sum(costs.values()),
        schedule=schedule,
        yearly_schedule=summarize_by_year(schedule, params.term_years),
        analysis=analyze_extra_payments(
            schedule, principal, monthly_payment, params.number_of_payments
        ),
        breakdown=calculate_payment_breakdown(schedule, costs),
        chart_points=generate_balance_chart_points(schedule, principal),
    )
