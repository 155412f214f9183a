"""
Anomaly Evaluator: the 3-sigma test over a network window.

All values are integer pennies:
    mean = floor(sum / n)
    sd   = floor(sqrt(sum((v - mean)^2) / n))     (population sd)

A candidate is anomalous iff candidate > mean + 3 * sd (strict).
Windows with fewer than 2 purchases are never evaluated.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from anomaly_engine.core.purchase_window import PurchaseWindow

MIN_PURCHASES_FOR_ANOMALY = 2
SIGMA_MULTIPLIER = 3


@dataclass(frozen=True)
class AnomalyStats:
    mean: int
    sd: int


class AnomalyEvaluator:
    """
    Usage:
        evaluator = AnomalyEvaluator()
        stats = evaluator.evaluate(network_window, 160183)
        if stats is not None:
            print(stats.mean, stats.sd)
    """

    def __init__(
        self,
        min_purchases: int = MIN_PURCHASES_FOR_ANOMALY,
        sigma_multiplier: int = SIGMA_MULTIPLIER,
    ):
        if min_purchases < 1:
            raise ValueError(f"min_purchases must be >= 1, got {min_purchases}")
        self.min_purchases = min_purchases
        self.sigma_multiplier = sigma_multiplier

    def statistics(self, window: PurchaseWindow) -> Optional[AnomalyStats]:
        """Mean and sd of the window, or None if it is too small to judge."""
        count = window.count()
        if count < self.min_purchases:
            return None

        # object dtype keeps Python ints, so amounts past int64 stay exact
        values = np.array(window.values(), dtype=object)
        mean = values.sum() // count  # rounds down to the penny

        squared_deviations = ((values - mean) ** 2).sum()
        sd = math.isqrt(squared_deviations // count)

        return AnomalyStats(mean=mean, sd=sd)

    def evaluate(self, window: PurchaseWindow, amount_pennies: int) -> Optional[AnomalyStats]:
        """
        Returns:
            The stats the decision was based on if `amount_pennies` is an
            anomaly, otherwise None.
        """
        stats = self.statistics(window)
        if stats is None:
            return None

        if amount_pennies > stats.mean + self.sigma_multiplier * stats.sd:
            return stats
        return None
