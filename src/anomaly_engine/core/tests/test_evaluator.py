"""
Tests for the 3-sigma anomaly rule.

Precision rules under test:
    mean = floor(sum / n), sd = floor(population sd), strict inequality.
"""

import itertools

import pytest

from anomaly_engine.core.evaluator import AnomalyEvaluator, AnomalyStats
from anomaly_engine.core.purchase_window import PurchaseWindow


def window_of(*amounts, threshold=50):
    window = PurchaseWindow(threshold=threshold, sequence=itertools.count())
    for i, amount in enumerate(amounts):
        window.add(f"2017-06-13 11:33:{i:02d}", amount)
    return window


@pytest.fixture
def evaluator():
    return AnomalyEvaluator()


# ============================================================================
# TEST 1: Statistics
# ============================================================================

def test_reference_scenario(evaluator):
    """Network purchases 16.83, 59.28, 11.20 and a 1601.83 candidate."""
    window = window_of(1683, 5928, 1120)

    stats = evaluator.evaluate(window, 160183)

    assert stats == AnomalyStats(mean=2910, sd=2146)


def test_mean_and_sd_truncate(evaluator):
    # sum 10 / 3 = 3.33 -> 3; deviations -2, -1, 4 -> var 21/3 = 7 -> sd 2.64 -> 2
    stats = evaluator.statistics(window_of(1, 2, 7))

    assert stats == AnomalyStats(mean=3, sd=2)


def test_identical_amounts_have_zero_sd(evaluator):
    assert evaluator.statistics(window_of(500, 500, 500)) == AnomalyStats(mean=500, sd=0)


def test_amounts_beyond_int64_stay_exact(evaluator):
    base = 2 ** 64
    window = window_of(base, base + 200)  # mean base + 100, sd 100

    assert evaluator.statistics(window) == AnomalyStats(mean=base + 100, sd=100)
    assert evaluator.evaluate(window, base + 400) is None
    assert evaluator.evaluate(window, base + 401) == AnomalyStats(mean=base + 100, sd=100)


# ============================================================================
# TEST 2: Decision rule
# ============================================================================

def test_threshold_is_strict(evaluator):
    window = window_of(1000, 3000)  # mean 2000, sd 1000 -> limit 5000

    assert evaluator.evaluate(window, 5000) is None
    assert evaluator.evaluate(window, 5001) == AnomalyStats(mean=2000, sd=1000)


def test_normal_purchase_not_flagged(evaluator):
    assert evaluator.evaluate(window_of(1683, 5928, 1120), 4000) is None


@pytest.mark.parametrize("amounts", [(), (100,)])
def test_too_few_purchases_never_flagged(evaluator, amounts):
    window = window_of(*amounts)

    assert evaluator.statistics(window) is None
    assert evaluator.evaluate(window, 10 ** 12) is None


def test_custom_multiplier():
    window = window_of(1000, 3000)  # mean 2000, sd 1000

    assert AnomalyEvaluator(sigma_multiplier=1).evaluate(window, 3001) is not None
    assert AnomalyEvaluator(sigma_multiplier=1).evaluate(window, 3000) is None


def test_custom_minimum_sample():
    window = window_of(1000, 3000)

    assert AnomalyEvaluator(min_purchases=3).evaluate(window, 10 ** 9) is None


def test_min_purchases_must_be_positive():
    with pytest.raises(ValueError):
        AnomalyEvaluator(min_purchases=0)
