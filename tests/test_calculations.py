"""
Tests for the growth and mortgage calculation engines.
"""

import math
import pytest
from datetime import date
from fincalc.calculations.amortization import (
    LoanParameters,
    analyze_extra_payments,
    calculate_mortgage,
    calculate_payment,
    calculate_total_interest,
    calculate_total_principal,
    down_payment_from_percent,
    down_payment_percent,
    generate_amortization_schedule,
    generate_balance_chart_points,
    summarize_by_year,
)
from fincalc.calculations.compound import (
    CompoundingFrequency,
    GrowthParameters,
    calculate_baseline,
    calculate_future_value,
    calculate_interest_earned,
    project,
)


def growth(**overrides):
    params = dict(
        principal=10000,
        monthly_contribution=500,
        annual_rate=0.07,
        years=10,
        compounding_frequency=CompoundingFrequency.monthly,
        rate_variance=0.0,
    )
    params.update(overrides)
    return GrowthParameters(**params)


def standard_schedule(principal=100000, annual_rate=0.06, years=10, **kwargs):
    payment = calculate_payment(principal, annual_rate, years)
    return generate_amortization_schedule(
        principal, payment, annual_rate / 12, years * 12, start_date=date(2025, 1, 1), **kwargs
    )


class TestCompoundGrowth:
    """Test the compound growth projection."""

    def test_zero_years_single_point(self):
        """A zero-year horizon yields only the principal."""
        points = project(growth(years=0))
        assert len(points) == 1
        assert points[0].year == 0
        assert points[0].compound == 10000
        assert points[0].baseline == 10000

    def test_one_point_per_year(self):
        points = project(growth(years=15))
        assert [p.year for p in points] == list(range(16))

    def test_year_zero_has_no_growth(self):
        points = project(growth(compounding_frequency=CompoundingFrequency.annually))
        assert points[0].compound == points[0].baseline == 10000

    @pytest.mark.parametrize("frequency", list(CompoundingFrequency))
    def test_zero_rate_matches_baseline(self, frequency):
        """Without interest, compound value equals contributions plus principal."""
        points = project(growth(annual_rate=0.0, compounding_frequency=frequency))
        for point in points:
            expected = 10000 + 500 * 12 * point.year
            assert point.compound == expected
            assert point.baseline == expected

    def test_zero_rate_future_value_exact(self):
        assert calculate_future_value(10000, 500, 0.0, 10) == 70000

    def test_zero_inputs(self):
        assert calculate_future_value(0, 0, 0.07, 10) == 0
        assert calculate_future_value(0, 500, 0.07, 0) == 0

    def test_baseline(self):
        assert calculate_baseline(10000, 500, 10) == 70000

    def test_annual_contribution_after_interest(self):
        """Annual compounding adds the year's contributions after interest."""
        value = calculate_future_value(1000, 100, 0.10, 1, CompoundingFrequency.annually)
        assert abs(value - (1000 * 1.10 + 1200)) < 1e-9

    def test_annual_iterates_each_year(self):
        value = calculate_future_value(1000, 100, 0.10, 2, CompoundingFrequency.annually)
        expected = (1000 * 1.10 + 1200) * 1.10 + 1200
        assert abs(value - expected) < 1e-9

    def test_longer_horizon_grows(self):
        """More years strictly increase the compound value."""
        points = project(growth(years=30))
        for previous, current in zip(points, points[1:]):
            assert current.compound > previous.compound

    def test_higher_rate_grows(self):
        low = project(growth(annual_rate=0.05))[-1].compound
        high = project(growth(annual_rate=0.06))[-1].compound
        assert high > low

    @pytest.mark.parametrize("years", [1, 5, 10, 30])
    def test_monthly_dominates_annual(self, years):
        monthly = project(growth(years=years))[-1].compound
        annual = project(
            growth(years=years, compounding_frequency=CompoundingFrequency.annually)
        )[-1].compound
        assert monthly >= annual

    def test_outputs_rounded_to_whole_units(self):
        for point in project(growth(annual_rate=0.0731, monthly_contribution=123.45)):
            assert point.compound == round(point.compound)
            assert point.baseline == round(point.baseline)

    def test_no_variance_fields_absent(self):
        for point in project(growth()):
            assert point.high_variance is None
            assert point.low_variance is None

    def test_variance_band(self):
        """High and low scenarios bracket the main projection."""
        points = project(growth(rate_variance=0.02))
        final = points[-1]
        assert final.high_variance > final.compound > final.low_variance
        assert final.low_variance > final.baseline

    def test_variance_consistent_with_shifted_projection(self):
        """Variance lines equal projections at the shifted rates."""
        points = project(growth(rate_variance=0.02))
        high = project(growth(annual_rate=0.07 + 0.02))
        low = project(growth(annual_rate=0.07 - 0.02))
        assert [p.high_variance for p in points] == [p.compound for p in high]
        assert [p.low_variance for p in points] == [p.compound for p in low]

    def test_negative_low_variance_rate(self):
        """A low scenario below zero still yields finite values."""
        points = project(growth(annual_rate=0.01, rate_variance=0.02))
        for point in points:
            assert math.isfinite(point.low_variance)
        assert points[-1].low_variance < points[-1].baseline

    def test_interest_earned(self):
        final = project(growth())[-1]
        assert calculate_interest_earned(final) == final.compound - 70000

    @pytest.mark.parametrize("frequency", list(CompoundingFrequency))
    def test_runaway_growth_stays_finite(self, frequency):
        """Growth past the float range is clamped, not infinite."""
        points = project(
            GrowthParameters(10000, 500, 10.0, 400, frequency)
        )
        assert len(points) == 401
        for point in points:
            assert math.isfinite(point.compound)
            assert math.isfinite(point.baseline)
        assert points[-1].compound >= points[-2].compound

    def test_wide_variance_band_stays_finite(self):
        points = project(growth(years=100, rate_variance=10.0))
        for point in points:
            assert math.isfinite(point.high_variance)
            assert math.isfinite(point.low_variance)
        assert points[-1].high_variance > points[-1].compound

    def test_overflow_without_money_is_zero(self):
        assert calculate_future_value(0, 0, 10.0, 400) == 0


class TestMonthlyPayment:
    """Test monthly payment calculation."""

    def test_zero_rate_straight_line(self):
        assert calculate_payment(100000, 0, 10) == 100000 / (10 * 12)
        assert calculate_payment(12345.67, 0.0, 7) == 12345.67 / 84

    @pytest.mark.parametrize(
        "principal,rate,years",
        [(0, 0.05, 30), (-1000, 0.05, 30), (100000, -0.05, 30), (100000, 0.05, 0), (100000, 0.05, -5)],
    )
    def test_invalid_inputs_return_zero(self, principal, rate, years):
        assert calculate_payment(principal, rate, years) == 0

    def test_small_loan(self):
        payment = calculate_payment(1000, 0.05, 5)
        assert 0 < payment < 1000

    def test_extreme_term_stays_finite(self):
        """An overflowing annuity factor falls back to interest only."""
        payment = calculate_payment(100000, 0.065, 10**6)
        assert math.isfinite(payment)
        assert abs(payment - 100000 * 0.065 / 12) < 1e-6

    @pytest.mark.parametrize(
        "principal,rate,years", [(1e300, 1e300, 30), (1e308, 1.0, 30)]
    )
    def test_unrepresentable_payment_is_zero(self, principal, rate, years):
        """A payment beyond the float range degrades to the 0 sentinel."""
        payment = calculate_payment(principal, rate, years)
        assert math.isfinite(payment)
        assert payment == 0


class TestAmortizationSchedule:
    """Test amortization schedule generation."""

    def test_schedule_length(self):
        schedule = standard_schedule()
        assert len(schedule) == 120
        assert [e.payment_number for e in schedule] == list(range(1, 121))

    def test_final_balance_zero(self):
        schedule = standard_schedule()
        last = schedule[-1]
        assert abs(last.remaining_balance) < 0.5
        assert last.principal > last.interest

    def test_principal_sums_to_loan(self):
        schedule = standard_schedule(principal=320000, annual_rate=0.065, years=30)
        assert abs(calculate_total_principal(schedule) - 320000) < 1

    def test_balance_non_increasing(self):
        schedule = standard_schedule(principal=250000, years=30, extra_monthly=50)
        for previous, current in zip(schedule, schedule[1:]):
            assert current.remaining_balance <= previous.remaining_balance
        assert all(e.remaining_balance >= 0 for e in schedule)

    def test_first_interest(self):
        schedule = standard_schedule()
        assert abs(schedule[0].interest - 500) < 1e-9

    def test_payment_dates_offset_by_months(self):
        schedule = standard_schedule()
        assert schedule[0].date == date(2025, 2, 1)
        assert schedule[11].date == date(2026, 1, 1)

    def test_payment_dates_month_end_rollover(self):
        payment = calculate_payment(10000, 0.05, 1)
        schedule = generate_amortization_schedule(
            10000, payment, 0.05 / 12, 12, start_date=date(2025, 1, 31)
        )
        assert schedule[0].date == date(2025, 2, 28)
        assert schedule[1].date == date(2025, 3, 31)

    def test_extra_monthly_shortens_schedule(self):
        base = standard_schedule(principal=300000, annual_rate=0.065, years=30)
        extra = standard_schedule(principal=300000, annual_rate=0.065, years=30, extra_monthly=100)
        assert len(extra) < len(base)
        assert calculate_total_interest(extra) < calculate_total_interest(base)
        assert abs(calculate_total_principal(extra) - 300000) < 1

    def test_extra_included_in_payment(self):
        schedule = standard_schedule(extra_monthly=100)
        payment = calculate_payment(100000, 0.06, 10)
        assert abs(schedule[0].payment - (payment + 100)) < 1e-9

    def test_one_time_payment(self):
        """The lump sum lands on its designated month only."""
        base = standard_schedule()
        lump = standard_schedule(one_time_payment=10000, one_time_payment_month=12)
        assert abs(lump[11].principal - base[11].principal - 10000) < 1e-6
        assert abs(lump[10].principal - base[10].principal) < 1e-6
        assert len(lump) < len(base)

    def test_overpayment_clamped(self):
        """A lump sum larger than the balance pays it off exactly."""
        schedule = standard_schedule(one_time_payment=500000, one_time_payment_month=3)
        assert len(schedule) == 3
        assert schedule[-1].remaining_balance == 0
        assert abs(calculate_total_principal(schedule) - 100000) < 1e-6

    def test_empty_for_no_loan(self):
        assert generate_amortization_schedule(0, 1000, 0.005, 360) == []
        assert generate_amortization_schedule(100000, 0, 0.005, 360) == []

    def test_zero_rate_schedule(self):
        schedule = standard_schedule(annual_rate=0.0)
        assert len(schedule) == 120
        assert all(e.interest == 0 for e in schedule)
        assert abs(schedule[-1].remaining_balance) < 0.01

    def test_no_nan_in_output(self):
        schedule = standard_schedule(principal=1, annual_rate=0.5, years=1, extra_monthly=1)
        for entry in schedule:
            for value in (entry.payment, entry.principal, entry.interest, entry.remaining_balance):
                assert math.isfinite(value)


class TestScheduleSummaries:
    """Test yearly summary, chart points and extra payment analysis."""

    def test_yearly_summary_full_term(self):
        schedule = standard_schedule(years=30)
        yearly = summarize_by_year(schedule, 30)
        assert len(yearly) == 30
        assert [e.payment_number for e in yearly] == [12 * y for y in range(1, 31)]

    def test_yearly_summary_includes_mid_year_payoff(self):
        schedule = standard_schedule(extra_monthly=500)
        assert len(schedule) % 12 != 0
        yearly = summarize_by_year(schedule, 10)
        assert yearly[-1] is schedule[-1]
        assert len(yearly) == len(schedule) // 12 + 1

    def test_chart_points(self):
        schedule = standard_schedule()
        points = generate_balance_chart_points(schedule, 100000)
        assert len(points) == 11
        assert points[0] == {"month": 0, "year": 0.0, "balance": 100000, "total_interest": 0.0}
        assert points[-1]["month"] == 120
        assert points[-1]["year"] == 10.0
        assert abs(points[-1]["total_interest"] - calculate_total_interest(schedule)) < 1e-6

    def test_chart_points_fractional_final_year(self):
        schedule = standard_schedule(extra_monthly=500)
        points = generate_balance_chart_points(schedule, 100000)
        assert points[-1]["month"] == len(schedule)
        assert points[-1]["year"] == round(len(schedule) / 12, 1)

    def test_chart_points_empty(self):
        assert generate_balance_chart_points([], 100000) == []

    def test_analysis_without_extras(self):
        payment = calculate_payment(100000, 0.06, 10)
        analysis = analyze_extra_payments(standard_schedule(), 100000, payment, 120)
        assert analysis.months_saved == 0
        assert abs(analysis.interest_saved) < 0.01

    def test_analysis_with_extras(self):
        payment = calculate_payment(300000, 0.065, 30)
        schedule = standard_schedule(principal=300000, annual_rate=0.065, years=30, extra_monthly=100)
        analysis = analyze_extra_payments(schedule, 300000, payment, 360)
        assert analysis.months_saved == 360 - len(schedule)
        assert analysis.years_saved == analysis.months_saved // 12
        assert analysis.months_remaining == analysis.months_saved % 12
        assert abs(analysis.total_interest_base - (payment * 360 - 300000)) < 1e-6
        assert analysis.interest_saved > 30000

    def test_analysis_empty_schedule(self):
        analysis = analyze_extra_payments([], 0, 0, 360)
        assert analysis.months_saved == 0
        assert analysis.interest_saved == 0


class TestMortgage:
    """Test the full mortgage calculation."""

    @pytest.fixture
    def params(self):
        return LoanParameters(
            home_price=400000,
            down_payment=80000,
            annual_rate=0.065,
            term_years=30,
            property_tax_annual=4800,
            insurance_annual=1200,
        )

    def test_principal_from_down_payment(self, params):
        assert params.principal == 320000

    def test_full_down_payment(self):
        assert LoanParameters(250000, 250000, 0.05, 30).principal == 0

    def test_down_payment_sync(self):
        assert down_payment_from_percent(400000, 20) == 80000
        assert down_payment_from_percent(500000, 15) == 75000
        assert down_payment_percent(500000, 100000) == 20
        assert down_payment_percent(0, 1000) == 0

    def test_summary(self, params):
        summary = calculate_mortgage(params, start_date=date(2025, 1, 1))
        assert abs(summary.monthly_payment - 2022.62) < 0.1
        assert summary.property_tax_monthly == 400
        assert summary.insurance_monthly == 100
        assert abs(summary.total_monthly - 2522.62) < 0.1
        assert len(summary.schedule) == 360
        assert len(summary.yearly_schedule) == 30
        assert len(summary.chart_points) == 31

    def test_breakdown(self, params):
        summary = calculate_mortgage(params)
        names = [item["name"] for item in summary.breakdown]
        assert names == ["Principal", "Interest", "Property Tax", "Insurance"]

    def test_breakdown_with_hoa(self, params):
        params.hoa_monthly = 150
        summary = calculate_mortgage(params)
        assert summary.breakdown[-1] == {"name": "HOA Fees", "value": 150}
        assert abs(summary.total_monthly - (summary.monthly_payment + 650)) < 1e-9

    def test_cash_purchase(self, params):
        params.down_payment = params.home_price
        summary = calculate_mortgage(params)
        assert summary.monthly_payment == 0
        assert summary.schedule == []
        assert summary.breakdown == []
        assert summary.chart_points == []
        assert summary.analysis.months_saved == 0
        assert summary.total_monthly == 500

    def test_extra_payments_analysis(self, params):
        params.extra_monthly_payment = 200
        params.one_time_payment = 10000
        params.one_time_payment_month = 12
        summary = calculate_mortgage(params)
        assert summary.analysis.months_saved > 0
        assert summary.analysis.interest_saved > 0
        assert summary.yearly_schedule[-1] is summary.schedule[-1]
