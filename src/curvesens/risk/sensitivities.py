"""
Analytic curve parameter sensitivities.

Reduces point sensitivities (derivatives with respect to zero rates at dates)
to node sensitivities by the chain rule through the curve interpolation:

    dV/dy = sum_j amount_j * d(zero rate at date_j)/dy

Point sensitivities are grouped by (curve name, currency); each group yields
one array per curve and the groups combine as a disjoint union.
"""

from collections import OrderedDict
from typing import Dict, List, Tuple
import logging

import numpy as np

from .parameter_sensitivity import (
    CurveCurrencyParameterSensitivities,
    CurveCurrencyParameterSensitivity
)
from .point_sensitivity import PointSensitivities, ZeroRateSensitivity

logger = logging.getLogger(__name__)


def group_by_curve(
    point_sensitivities: PointSensitivities
) -> Dict[Tuple[str, str], List[ZeroRateSensitivity]]:
    """Group point sensitivities by (curve name, currency), first-seen order."""
    groups: Dict[Tuple[str, str], List[ZeroRateSensitivity]] = OrderedDict()
    for point in point_sensitivities:
        groups.setdefault((point.curve_name, point.currency), []).append(point)
    return groups


def curve_parameter_sensitivity(
    provider,
    point_sensitivities: PointSensitivities
) -> CurveCurrencyParameterSensitivities:
    """
    Compute curve parameter sensitivities from point sensitivities.

    Args:
        provider: Rates provider resolving curve names (RatesProvider)
        point_sensitivities: Point sensitivities, possibly on several curves

    Returns:
        One sensitivity per (curve name, currency)

    Raises:
        ValueError: If a curve is not available in the provider
    """
    groups = group_by_curve(point_sensitivities)
    logger.debug(
        "Reducing %d point sensitivities on %d curve groups",
        len(point_sensitivities), len(groups)
    )

    result = []
    for (curve_name, currency), points in groups.items():
        discount_factors = provider.discount_factors_for_curve(curve_name)
        total = np.zeros(discount_factors.parameter_count)
        for point in points:
            total += discount_factors.curve_parameter_sensitivity(point).sensitivity
        result.append(
            CurveCurrencyParameterSensitivity(discount_factors.curve.metadata, currency, total)
        )

    return CurveCurrencyParameterSensitivities(result)


__all__ = ["group_by_curve", "curve_parameter_sensitivity"]
