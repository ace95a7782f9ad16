"""
Tests for BatchTrainer and the recommendation bands.
"""
import pytest

from satrisk.core.domain.features import FeatureRecord
from satrisk.core.estimators.normalization import BASIC_NORMALIZERS
from satrisk.core.estimators.recommendation import (
    BASIC_RECOMMENDATIONS,
    ENHANCED_RECOMMENDATIONS,
    recommend,
    risk_band,
)
from satrisk.core.estimators.trainer import BatchTrainer


def _constant_score(value):
    return lambda features, weights: value


def test_fit_returns_new_table():
    weights = {name: 0.1 for name in BASIC_NORMALIZERS}
    samples = [FeatureRecord(kp_index=2, downtime_flag=1)]

    trained = BatchTrainer(epochs=1).fit(weights, samples, _constant_score(0.5), BASIC_NORMALIZERS)

    assert weights["kpIndex"] == 0.1
    # error 0.5 * kp 2 * rate 0.01
    assert trained["kpIndex"] == pytest.approx(0.11)


def test_fit_averages_over_batch():
    weights = {name: 0.0 for name in BASIC_NORMALIZERS}
    samples = [
        FeatureRecord(kp_index=2, downtime_flag=1),
        FeatureRecord(kp_index=0, downtime_flag=1),
    ]

    trained = BatchTrainer(epochs=1).fit(weights, samples, _constant_score(0.0), BASIC_NORMALIZERS)

    assert trained["kpIndex"] == pytest.approx(0.01)


def test_fit_empty_batch():
    weights = {"kpIndex": 0.25}
    assert BatchTrainer(epochs=5).fit(weights, [], _constant_score(0.0), BASIC_NORMALIZERS) == weights


def test_constant_rate_without_decay():
    trainer = BatchTrainer(epochs=100)
    assert trainer.rate_for(0) == trainer.rate_for(99) == 0.01


@pytest.mark.parametrize("probability, band", [
    (0.71, 0),
    (0.7, 1),
    (0.41, 1),
    (0.4, 2),
    (0.21, 2),
    (0.2, 3),
    (0.0, 3),
])
def test_risk_bands(probability, band):
    assert risk_band(probability) == band


def test_recommendation_texts():
    assert recommend(0.9) == "High downtime risk - consider backup satellite or delay mission"
    assert recommend(0.5) == "Moderate downtime risk - monitor space weather conditions"
    assert recommend(0.5, ENHANCED_RECOMMENDATIONS) == (
        "Moderate downtime risk - monitor space weather and environmental conditions"
    )
    assert recommend(0.1, ENHANCED_RECOMMENDATIONS) == (
        "Very low downtime risk - optimal conditions for satellite operations"
    )
    assert recommend(0.3) == BASIC_RECOMMENDATIONS[2]
