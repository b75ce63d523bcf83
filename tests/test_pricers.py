"""
Unit tests for pricers module.
"""

from datetime import date

import pytest

from curvesens.conventions import Conventions, DayCount
from curvesens.currency import CurrencyAmount
from curvesens.curves import CurveMetadata, IborIndex, InterpolatedNodalCurve, create_flat_curve
from curvesens.market_state import RatesProvider
from curvesens.pricers import (
    FixedCouponBondPaymentPeriod,
    FixedCouponBond,
    Payment,
    DiscountingFixedCouponBondPaymentPeriodPricer,
    DiscountingFixedCouponBondProductPricer,
    IborFuture,
    IborFutureTrade,
    DiscountingIborFutureProductPricer,
    DiscountingIborFutureTradePricer,
)


VAL_DATE = date(2015, 1, 28)
VAL_DATE_AFTER = date(2015, 8, 28)
NOTIONAL = 1.0e7
FIXED_RATE = 0.025
YEAR_FRACTION = 0.51
Z_SPREAD = 0.02
PERIODS_PER_YEAR = 4
TOL = 1e-12


@pytest.fixture
def curve():
    return InterpolatedNodalCurve(
        CurveMetadata.zero_rates("TestCurve", DayCount.ACT_365),
        [0.0, 10.0],
        [0.1, 0.18],
        "linear"
    )


@pytest.fixture
def period():
    return FixedCouponBondPaymentPeriod(
        currency="USD",
        notional=NOTIONAL,
        start_date=date(2015, 2, 2),
        end_date=date(2015, 8, 3),
        unadjusted_start_date=date(2015, 2, 2),
        unadjusted_end_date=date(2015, 8, 2),
        fixed_rate=FIXED_RATE,
        year_fraction=YEAR_FRACTION
    )


@pytest.fixture
def dfs(curve):
    return RatesProvider(VAL_DATE, {"USD": curve}).discount_factors("USD")


@pytest.fixture
def dfs_after(curve):
    return RatesProvider(VAL_DATE_AFTER, {"USD": curve}).discount_factors("USD")


class TestFixedCouponBondPaymentPeriodPricer:
    """Tests for the coupon period pricer."""

    pricer = DiscountingFixedCouponBondPaymentPeriodPricer()

    def test_payment_date_defaults_to_end_date(self, period):
        assert period.payment_date == date(2015, 8, 3)
        assert period.coupon_amount == pytest.approx(FIXED_RATE * NOTIONAL * YEAR_FRACTION)

    def test_present_value(self, period, dfs):
        expected = FIXED_RATE * NOTIONAL * YEAR_FRACTION * dfs.discount_factor(period.payment_date)
        assert self.pricer.present_value(period, dfs) == pytest.approx(expected, abs=NOTIONAL * TOL)

    def test_future_value(self, period, dfs):
        assert self.pricer.future_value(period, dfs) == pytest.approx(
            FIXED_RATE * NOTIONAL * YEAR_FRACTION, abs=NOTIONAL * TOL
        )

    def test_present_value_with_spread(self, period, dfs):
        for periodic, ppy in [(False, 0), (True, PERIODS_PER_YEAR)]:
            df = dfs.discount_factor_with_spread(period.payment_date, Z_SPREAD, periodic, ppy)
            expected = FIXED_RATE * NOTIONAL * YEAR_FRACTION * df
            computed = self.pricer.present_value_with_spread(period, dfs, Z_SPREAD, periodic, ppy)
            assert computed == pytest.approx(expected, abs=NOTIONAL * TOL)

    def test_spread_lowers_value(self, period, dfs):
        assert self.pricer.present_value_with_spread(period, dfs, Z_SPREAD) < self.pricer.present_value(period, dfs)

    def test_paid_period_is_worth_zero(self, period, dfs_after):
        assert self.pricer.present_value(period, dfs_after) == 0.0
        assert self.pricer.future_value(period, dfs_after) == 0.0
        assert self.pricer.present_value_with_spread(period, dfs_after, Z_SPREAD, True, PERIODS_PER_YEAR) == 0.0
        assert len(self.pricer.present_value_sensitivity(period, dfs_after)) == 0
        assert len(self.pricer.present_value_sensitivity_with_spread(period, dfs_after, Z_SPREAD)) == 0

    def test_present_value_sensitivity(self, period, dfs):
        points = self.pricer.present_value_sensitivity(period, dfs)
        expected = dfs.zero_rate_point_sensitivity(period.payment_date).multiplied_by(
            FIXED_RATE * NOTIONAL * YEAR_FRACTION
        )

        assert len(points) == 1
        point = points.sensitivities[0]
        assert point.curve_name == "TestCurve"
        assert point.date == period.payment_date
        assert point.sensitivity == pytest.approx(expected.sensitivity, abs=NOTIONAL * TOL)

    def test_present_value_sensitivity_with_spread(self, period, dfs):
        points = self.pricer.present_value_sensitivity_with_spread(
            period, dfs, Z_SPREAD, True, PERIODS_PER_YEAR
        )
        expected = dfs.zero_rate_point_sensitivity_with_spread(
            period.payment_date, Z_SPREAD, True, PERIODS_PER_YEAR
        ).multiplied_by(FIXED_RATE * NOTIONAL * YEAR_FRACTION)
        assert points.equal_with_tolerance(expected.build(), NOTIONAL * TOL)

    def test_future_value_sensitivity_is_empty(self, period, dfs):
        assert len(self.pricer.future_value_sensitivity(period, dfs)) == 0

    def test_explain_present_value(self, period, dfs):
        explain = self.pricer.explain_present_value(period, dfs)

        assert explain["entry_type"] == "FixedCouponBondPaymentPeriod"
        assert explain["payment_date"] == date(2015, 8, 3)
        assert explain["payment_currency"] == "USD"
        assert explain["start_date"] == date(2015, 2, 2)
        assert explain["unadjusted_start_date"] == date(2015, 2, 2)
        assert explain["end_date"] == date(2015, 8, 3)
        assert explain["unadjusted_end_date"] == date(2015, 8, 2)
        assert explain["accrual_days"] == 182
        assert explain["discount_factor"] == dfs.discount_factor(period.payment_date)
        assert explain["forecast_value"].amount == pytest.approx(self.pricer.future_value(period, dfs))
        assert explain["present_value"].amount == pytest.approx(self.pricer.present_value(period, dfs))

    def test_explain_paid_period(self, period, dfs_after):
        explain = self.pricer.explain_present_value(period, dfs_after)

        assert "discount_factor" not in explain
        assert explain["forecast_value"] == CurrencyAmount.zero("USD")
        assert explain["present_value"] == CurrencyAmount.zero("USD")

    def test_explain_present_value_with_spread(self, period, dfs):
        explain = self.pricer.explain_present_value_with_spread(
            period, dfs, Z_SPREAD, True, PERIODS_PER_YEAR
        )
        df = dfs.discount_factor_with_spread(period.payment_date, Z_SPREAD, True, PERIODS_PER_YEAR)

        assert explain["entry_type"] == "FixedCouponBondPaymentPeriod"
        assert explain["payment_date"] == date(2015, 8, 3)
        assert explain["accrual_days"] == 182
        assert explain["discount_factor"] == pytest.approx(df, abs=TOL)
        assert explain["discount_factor"] < dfs.discount_factor(period.payment_date)
        assert explain["forecast_value"].amount == pytest.approx(FIXED_RATE * NOTIONAL * YEAR_FRACTION)
        assert explain["present_value"].amount == pytest.approx(
            self.pricer.present_value_with_spread(period, dfs, Z_SPREAD, True, PERIODS_PER_YEAR),
            abs=NOTIONAL * TOL
        )

    def test_explain_paid_period_with_spread(self, period, dfs_after):
        explain = self.pricer.explain_present_value_with_spread(
            period, dfs_after, Z_SPREAD, True, PERIODS_PER_YEAR
        )

        assert "discount_factor" not in explain
        assert explain["forecast_value"] == CurrencyAmount.zero("USD")
        assert explain["present_value"] == CurrencyAmount.zero("USD")

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            FixedCouponBondPaymentPeriod(
                "USD", NOTIONAL, date(2015, 8, 3), date(2015, 2, 2),
                date(2015, 8, 2), date(2015, 2, 2), FIXED_RATE, YEAR_FRACTION
            )


class TestFixedCouponBondPricer:
    """Tests for the bond pricer."""

    pricer = DiscountingFixedCouponBondProductPricer()

    @pytest.fixture
    def bond(self):
        return FixedCouponBond.of_schedule(
            "USD", 1_000_000, 0.04, date(2015, 3, 16), date(2020, 3, 16), Conventions.usd_treasury()
        )

    @pytest.fixture
    def provider(self):
        return RatesProvider(VAL_DATE, {"USD": create_flat_curve("USD-Treasury", 0.03)})

    def test_schedule(self, bond):
        assert len(bond.periods) == 10
        assert bond.maturity_date == date(2020, 3, 16)
        assert bond.nominal_payment == Payment("USD", 1_000_000, date(2020, 3, 16))

    def test_present_value_sums_periods_and_nominal(self, bond, provider):
        dfs = provider.discount_factors("USD")
        expected = sum(p.coupon_amount * dfs.discount_factor(p.payment_date) for p in bond.periods)
        expected += 1_000_000 * dfs.discount_factor(bond.maturity_date)

        pv = self.pricer.present_value(bond, provider)
        assert pv.currency == "USD"
        assert pv.amount == pytest.approx(expected, rel=1e-12)

    def test_premium_bond(self, bond, provider):
        """A 4% coupon on a 3% curve is worth more than par."""
        assert self.pricer.present_value(bond, provider).amount > 1_000_000

    def test_spread_present_value(self, bond, provider):
        pv = self.pricer.present_value(bond, provider).amount
        pv_zero_spread = self.pricer.present_value_with_spread(bond, provider, 0.0).amount
        pv_spread = self.pricer.present_value_with_spread(bond, provider, 0.01, True, 2).amount
        assert pv_zero_spread == pytest.approx(pv, rel=1e-12)
        assert pv_spread < pv

    def test_present_value_sensitivity_dates(self, bond, provider):
        points = self.pricer.present_value_sensitivity(bond, provider)
        # the nominal shares the last coupon date, so entries merge
        assert len(points) == len(bond.periods)
        assert all(p.sensitivity < 0 for p in points)

    def test_currency_mismatch(self, bond):
        with pytest.raises(ValueError):
            FixedCouponBond("EUR", 1.0, 0.04, bond.periods, bond.nominal_payment)


class TestIborFuturePricer:
    """Tests for Ibor futures pricing."""

    @pytest.fixture
    def index(self):
        return IborIndex("USD-LIBOR-3M", "USD", "3M", DayCount.ACT_360)

    @pytest.fixture
    def provider(self, index):
        fwd = InterpolatedNodalCurve(
            CurveMetadata.zero_rates("USD-LIBOR-3M-FWD"),
            [0.25, 1.0, 2.0, 5.0],
            [0.010, 0.012, 0.015, 0.020],
            "natural_cubic_spline"
        )
        return RatesProvider(
            VAL_DATE, {"USD": create_flat_curve("USD-OIS", 0.01)}, {index: fwd}
        )

    @pytest.fixture
    def future(self, index):
        return IborFuture.of_index(index, date(2015, 6, 17))

    def test_accrual_factor_from_tenor(self, future):
        assert future.accrual_factor == pytest.approx(0.25)
        assert future.notional == 1_000_000

    def test_price(self, future, provider, index):
        pricer = DiscountingIborFutureProductPricer()
        rate = provider.ibor_index_rates(index).rate(future.fixing_date)
        assert pricer.price(future, provider) == pytest.approx(1.0 - rate, abs=1e-15)

    def test_price_sensitivity_sign(self, future, provider):
        pricer = DiscountingIborFutureProductPricer()
        points = pricer.price_sensitivity(future, provider)
        node_sens = provider.curve_parameter_sensitivity(points)
        # price falls when forward rates rise
        assert node_sens.total()["USD"] < 0

    def test_trade_present_value(self, future, provider):
        pricer = DiscountingIborFutureTradePricer()
        price = pricer.price(IborFutureTrade(future, 10, 0.0), provider)
        trade = IborFutureTrade(future, 10, 0.985)

        pv = pricer.present_value(trade, provider)
        assert pv.currency == "USD"
        assert pv.amount == pytest.approx((price - 0.985) * 1_000_000 * 0.25 * 10)

    def test_trade_at_reference_price_is_zero(self, future, provider):
        pricer = DiscountingIborFutureTradePricer()
        trade = IborFutureTrade(future, -5, 0.99)
        price = pricer.price(trade, provider)
        assert pricer.present_value(trade, provider, reference_price=price).amount == pytest.approx(0.0, abs=1e-9)

    def test_trade_sensitivity_scales_with_quantity(self, future, provider):
        pricer = DiscountingIborFutureTradePricer()
        one = pricer.present_value_sensitivity(IborFutureTrade(future, 1, 0.99), provider)
        ten = pricer.present_value_sensitivity(IborFutureTrade(future, 10, 0.99), provider)
        assert ten.equal_with_tolerance(one.multiplied_by(10), 1e-6)

    def test_historic_fixing_rejected(self, index, provider):
        future = IborFuture.of_index(index, date(2015, 1, 2))
        with pytest.raises(ValueError):
            DiscountingIborFutureProductPricer().price(future, provider)

    def test_invalid_future(self, index):
        with pytest.raises(ValueError):
            IborFuture(index, date(2015, 6, 17), notional=0.0)


class TestCurrencyAmount:
    """Tests for currency amounts."""

    def test_plus(self):
        total = CurrencyAmount("usd", 1.5).plus(CurrencyAmount("USD", 2.0))
        assert total == CurrencyAmount("USD", 3.5)

    def test_plus_currency_mismatch(self):
        with pytest.raises(ValueError):
            CurrencyAmount("USD", 1.0).plus(CurrencyAmount("EUR", 1.0))
