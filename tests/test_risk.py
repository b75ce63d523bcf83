"""
Unit tests for risk module.
"""

from datetime import date

import numpy as np
import pandas as pd
import pytest

from curvesens.conventions import DayCount
from curvesens.curves import CurveMetadata, IborIndex, InterpolatedNodalCurve, create_flat_curve
from curvesens.market_state import RatesProvider
from curvesens.options import BlackSwaptionPhysicalProductPricer, Swaption
from curvesens.pricers import (
    DEFAULT_BOND_PRICER,
    DEFAULT_FUTURE_TRADE_PRICER,
    FixedCouponBond,
    IborFuture,
    IborFutureTrade,
)
from curvesens.risk import (
    DEFAULT_FD_CALCULATOR,
    DEFAULT_SHIFT,
    CurveCurrencyParameterSensitivities,
    CurveCurrencyParameterSensitivity,
    PointSensitivities,
    RatesFiniteDifferenceSensitivityCalculator,
    ZeroRateSensitivity,
    curve_parameter_sensitivity,
    group_by_curve,
)


VAL_DATE = date(2015, 1, 28)
D1 = date(2015, 8, 3)
D2 = date(2016, 2, 1)

# Small shift so forward difference truncation stays well below the tolerances
FD_CALCULATOR = RatesFiniteDifferenceSensitivityCalculator(1e-7)


@pytest.fixture
def zero_curve():
    return InterpolatedNodalCurve(
        CurveMetadata.zero_rates("USD-Disc", DayCount.ACT_365),
        [0.5, 1.0, 2.0, 5.0, 10.0],
        [0.010, 0.012, 0.015, 0.020, 0.025],
        "linear"
    )


@pytest.fixture
def df_curve():
    x = np.array([0.5, 1.0, 2.0, 5.0, 10.0])
    return InterpolatedNodalCurve(
        CurveMetadata.discount_factors("EUR-Disc", DayCount.ACT_365),
        x,
        np.exp(-0.02 * x),
        "log_linear"
    )


@pytest.fixture
def provider(zero_curve, df_curve):
    return RatesProvider(
        VAL_DATE,
        {"USD": zero_curve, "EUR": df_curve},
        fx_rates={("EUR", "USD"): 1.1}
    )


class TestPointSensitivities:
    """Tests for zero-rate point sensitivities."""

    def test_entry_validation(self):
        with pytest.raises(ValueError):
            ZeroRateSensitivity("", D1, "USD", 1.0)
        with pytest.raises(ValueError):
            ZeroRateSensitivity("A", D1, "USD", float("nan"))

    def test_with_currency(self):
        point = ZeroRateSensitivity("A", D1, "USD", 2.0)
        converted = point.with_currency("EUR")
        assert converted.currency == "EUR"
        assert converted.sensitivity == 2.0
        assert point.currency == "USD"

    def test_combined_keeps_entries(self):
        a = ZeroRateSensitivity("A", D1, "USD", 1.0)
        b = ZeroRateSensitivity("A", D1, "USD", 2.0)
        combined = a.build().combined_with(b)
        assert len(combined) == 2
        assert combined.total() == pytest.approx(3.0)

    def test_normalized_merges_and_sorts(self):
        points = PointSensitivities.of(
            ZeroRateSensitivity("B", D1, "USD", 1.0),
            ZeroRateSensitivity("A", D2, "USD", 2.0),
            ZeroRateSensitivity("A", D1, "USD", 3.0),
            ZeroRateSensitivity("A", D2, "USD", 4.0),
        )
        normalized = points.normalized()

        assert [s.key for s in normalized] == [("A", "USD", D1), ("A", "USD", D2), ("B", "USD", D1)]
        assert [s.sensitivity for s in normalized] == [3.0, 6.0, 1.0]

    def test_multiplied_by(self):
        points = PointSensitivities.of(ZeroRateSensitivity("A", D1, "USD", 2.0))
        assert points.multiplied_by(-0.5).sensitivities[0].sensitivity == -1.0

    def test_equal_with_tolerance(self):
        left = PointSensitivities.of(
            ZeroRateSensitivity("A", D1, "USD", 1.0),
            ZeroRateSensitivity("A", D1, "USD", 1.0),
        )
        right = PointSensitivities.of(
            ZeroRateSensitivity("A", D1, "USD", 2.0 + 1e-9),
            ZeroRateSensitivity("A", D2, "USD", 1e-9),
        )
        assert left.equal_with_tolerance(right, 1e-8)
        assert not left.equal_with_tolerance(right, 1e-10)

    def test_curve_names(self):
        points = PointSensitivities.of(
            ZeroRateSensitivity("B", D1, "USD", 1.0),
            ZeroRateSensitivity("A", D1, "USD", 1.0),
            ZeroRateSensitivity("B", D2, "USD", 1.0),
        )
        assert points.curve_names() == ["B", "A"]

    def test_group_by_curve(self):
        points = PointSensitivities.of(
            ZeroRateSensitivity("A", D1, "USD", 1.0),
            ZeroRateSensitivity("A", D1, "EUR", 1.0),
            ZeroRateSensitivity("A", D2, "USD", 1.0),
        )
        groups = group_by_curve(points)
        assert list(groups) == [("A", "USD"), ("A", "EUR")]
        assert len(groups[("A", "USD")]) == 2


class TestParameterSensitivities:
    """Tests for curve parameter sensitivity collections."""

    meta_a = CurveMetadata.zero_rates("A")
    meta_b = CurveMetadata.zero_rates("B")

    def test_add_same_curve(self):
        s1 = CurveCurrencyParameterSensitivity(self.meta_a, "USD", [1.0, 2.0])
        s2 = CurveCurrencyParameterSensitivity(self.meta_a, "USD", [0.5, 0.5])
        combined = CurveCurrencyParameterSensitivities.of(s1).combined_with(s2)

        assert combined.size() == 1
        np.testing.assert_allclose(combined.get_sensitivity("A", "USD").sensitivity, [1.5, 2.5])

    def test_disjoint_union(self):
        s1 = CurveCurrencyParameterSensitivity(self.meta_b, "USD", [1.0])
        s2 = CurveCurrencyParameterSensitivity(self.meta_a, "USD", [1.0, 2.0])
        s3 = CurveCurrencyParameterSensitivity(self.meta_a, "EUR", [3.0, 4.0])
        combined = CurveCurrencyParameterSensitivities.of(s1, s2, s3)

        assert combined.size() == 3
        assert [s.key for s in combined] == [("A", "EUR"), ("A", "USD"), ("B", "USD")]
        assert combined.total() == {"EUR": 7.0, "USD": 4.0}

    def test_size_mismatch(self):
        s1 = CurveCurrencyParameterSensitivity(self.meta_a, "USD", [1.0, 2.0])
        s2 = CurveCurrencyParameterSensitivity(self.meta_a, "USD", [1.0])
        with pytest.raises(ValueError):
            s1.plus(s2)

    def test_find_and_get(self):
        sens = CurveCurrencyParameterSensitivities.of(
            CurveCurrencyParameterSensitivity(self.meta_a, "USD", [1.0])
        )
        assert sens.find_sensitivity("A", "EUR") is None
        with pytest.raises(ValueError):
            sens.get_sensitivity("B", "USD")

    def test_read_only_array(self):
        s = CurveCurrencyParameterSensitivity(self.meta_a, "USD", [1.0, 2.0])
        with pytest.raises(ValueError):
            s.sensitivity[0] = 5.0

    def test_multiplied_and_mapped(self):
        sens = CurveCurrencyParameterSensitivities.of(
            CurveCurrencyParameterSensitivity(self.meta_a, "USD", [1.0, -2.0])
        )
        np.testing.assert_allclose(sens.multiplied_by(2.0).get_sensitivity("A", "USD").sensitivity, [2.0, -4.0])
        np.testing.assert_allclose(sens.map_sensitivities(np.abs).get_sensitivity("A", "USD").sensitivity, [1.0, 2.0])

    def test_converted_to(self, provider):
        sens = CurveCurrencyParameterSensitivities.of(
            CurveCurrencyParameterSensitivity(self.meta_a, "USD", [1.1]),
            CurveCurrencyParameterSensitivity(self.meta_a, "EUR", [1.0]),
        )
        converted = sens.converted_to("USD", provider)

        assert converted.size() == 1
        np.testing.assert_allclose(converted.get_sensitivity("A", "USD").sensitivity, [2.2])

    def test_equal_with_tolerance_missing_entry(self):
        small = CurveCurrencyParameterSensitivities.of(
            CurveCurrencyParameterSensitivity(self.meta_a, "USD", [1e-12, 0.0])
        )
        assert small.equal_with_tolerance(CurveCurrencyParameterSensitivities.empty(), 1e-10)
        assert not small.equal_with_tolerance(CurveCurrencyParameterSensitivities.empty(), 1e-14)

    def test_to_frame(self):
        sens = CurveCurrencyParameterSensitivities.of(
            CurveCurrencyParameterSensitivity(self.meta_a, "USD", [1.0, 2.0]),
            CurveCurrencyParameterSensitivity(self.meta_b, "USD", [3.0]),
        )
        df = sens.to_frame()

        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["curve", "currency", "node", "sensitivity"]
        assert len(df) == 3
        assert df["sensitivity"].sum() == pytest.approx(6.0)

    def test_equality(self):
        s1 = CurveCurrencyParameterSensitivities.of(CurveCurrencyParameterSensitivity(self.meta_a, "USD", [1.0]))
        s2 = CurveCurrencyParameterSensitivities.of(CurveCurrencyParameterSensitivity(self.meta_a, "USD", [1.0]))
        assert s1 == s2
        assert hash(s1) == hash(s2)


class TestCurveParameterSensitivity:
    """Tests for the reduction of point sensitivities to curve nodes."""

    def test_additive(self, provider):
        dfs = provider.discount_factors("USD")
        p1 = dfs.zero_rate_point_sensitivity(D1).build()
        p2 = dfs.zero_rate_point_sensitivity(D2).multiplied_by(3.0).build()

        combined = curve_parameter_sensitivity(provider, p1.combined_with(p2))
        separate = curve_parameter_sensitivity(provider, p1).combined_with(
            curve_parameter_sensitivity(provider, p2)
        )
        assert combined.equal_with_tolerance(separate, 1e-14)

    def test_multi_curve(self, provider):
        points = provider.discount_factors("USD").zero_rate_point_sensitivity(D1).build().combined_with(
            provider.discount_factors("EUR").zero_rate_point_sensitivity(D2)
        )
        sens = provider.curve_parameter_sensitivity(points)

        assert sens.size() == 2
        assert sens.get_sensitivity("USD-Disc", "USD").parameter_count == 5
        assert sens.get_sensitivity("EUR-Disc", "EUR").parameter_count == 5

    def test_empty(self, provider):
        assert provider.curve_parameter_sensitivity(PointSensitivities.empty()).size() == 0

    def test_unknown_curve(self, provider):
        points = ZeroRateSensitivity("Missing", D1, "USD", 1.0).build()
        with pytest.raises(ValueError):
            curve_parameter_sensitivity(provider, points)


class TestFiniteDifferenceCalculator:
    """Finite difference node sensitivities against the analytic ones."""

    def test_defaults(self):
        assert DEFAULT_SHIFT == 1e-4
        assert DEFAULT_FD_CALCULATOR.shift == DEFAULT_SHIFT

    def test_invalid_shift(self):
        with pytest.raises(ValueError):
            RatesFiniteDifferenceSensitivityCalculator(0.0)

    def test_every_curve_is_bumped(self, provider):
        bond = FixedCouponBond.of_schedule("USD", 1_000_000, 0.02, date(2015, 3, 16), date(2018, 3, 16))
        sens = DEFAULT_FD_CALCULATOR.sensitivity(
            provider, lambda p: DEFAULT_BOND_PRICER.present_value(bond, p)
        )

        # the EUR curve does not move a USD bond
        assert sens.size() == 2
        np.testing.assert_allclose(sens.get_sensitivity("EUR-Disc", "USD").sensitivity, 0.0)

    def test_bond_zero_rate_curve(self, provider):
        bond = FixedCouponBond.of_schedule("USD", 1_000_000, 0.03, date(2015, 3, 16), date(2022, 3, 16))
        analytic = provider.curve_parameter_sensitivity(
            DEFAULT_BOND_PRICER.present_value_sensitivity(bond, provider)
        )
        fd = FD_CALCULATOR.sensitivity(provider, lambda p: DEFAULT_BOND_PRICER.present_value(bond, p))

        assert analytic.equal_with_tolerance(fd, 10.0)

    def test_bond_discount_factor_curve(self, provider):
        bond = FixedCouponBond.of_schedule("EUR", 1_000_000, 0.03, date(2015, 3, 16), date(2022, 3, 16))
        analytic = provider.curve_parameter_sensitivity(
            DEFAULT_BOND_PRICER.present_value_sensitivity(bond, provider)
        )
        fd = FD_CALCULATOR.sensitivity(provider, lambda p: DEFAULT_BOND_PRICER.present_value(bond, p))

        assert analytic.equal_with_tolerance(fd, 1.0)

    def test_bond_with_spread(self, provider):
        bond = FixedCouponBond.of_schedule("USD", 1_000_000, 0.03, date(2015, 3, 16), date(2022, 3, 16))
        analytic = provider.curve_parameter_sensitivity(
            DEFAULT_BOND_PRICER.present_value_sensitivity_with_spread(bond, provider, 0.01, True, 2)
        )
        fd = FD_CALCULATOR.sensitivity(
            provider, lambda p: DEFAULT_BOND_PRICER.present_value_with_spread(bond, p, 0.01, True, 2)
        )

        assert analytic.equal_with_tolerance(fd, 10.0)

    def test_ibor_future(self):
        index = IborIndex("USD-LIBOR-3M", "USD")
        fwd = InterpolatedNodalCurve(
            CurveMetadata.zero_rates("USD-LIBOR-3M-FWD"),
            [0.25, 1.0, 2.0, 5.0],
            [0.010, 0.012, 0.015, 0.020],
            "natural_cubic_spline"
        )
        provider = RatesProvider(VAL_DATE, {"USD": create_flat_curve("USD-OIS", 0.01)}, {index: fwd})
        trade = IborFutureTrade(IborFuture.of_index(index, date(2015, 9, 16)), 10, 0.99)

        analytic = provider.curve_parameter_sensitivity(
            DEFAULT_FUTURE_TRADE_PRICER.present_value_sensitivity(trade, provider)
        )
        fd = FD_CALCULATOR.sensitivity(
            provider, lambda p: DEFAULT_FUTURE_TRADE_PRICER.present_value(trade, p)
        )

        assert analytic.equal_with_tolerance(fd, 1.0)
        # futures are not discounted
        np.testing.assert_allclose(fd.get_sensitivity("USD-OIS", "USD").sensitivity, 0.0, atol=1e-6)

    @pytest.mark.parametrize("vol_type,vol", [("lognormal", 0.20), ("normal", 0.006)])
    @pytest.mark.parametrize("is_payer", [True, False])
    def test_swaption(self, provider, vol_type, vol, is_payer):
        pricer = BlackSwaptionPhysicalProductPricer(vol_type)
        swaption = Swaption.of_tenor("USD", date(2016, 1, 28), "5Y", 0.02, 1_000_000, is_payer)
        calculator = RatesFiniteDifferenceSensitivityCalculator(1e-8)

        analytic = provider.curve_parameter_sensitivity(
            pricer.present_value_sensitivity(swaption, provider, vol)
        )
        fd = calculator.sensitivity(provider, lambda p: pricer.present_value(swaption, p, vol))

        assert analytic.equal_with_tolerance(fd, 10.0)
