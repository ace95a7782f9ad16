"""
Tests for EnhancedDowntimeModel.
"""
import numpy as np
import pytest

from satrisk.core.domain.features import FeatureRecord
from satrisk.core.estimators.enhanced import EnhancedDowntimeModel
from satrisk.core.estimators.recommendation import ENHANCED_RECOMMENDATIONS
from satrisk.core.estimators.trainer import BatchTrainer


@pytest.fixture
def trained_model():
    model = EnhancedDowntimeModel(seed=7)
    model.train([
        FeatureRecord(scene_count=250, expected_scenes=250, quality_score=0.8, downtime_flag=0),
        FeatureRecord(scene_count=75, expected_scenes=250, kp_index=6, geomagnetic_storm=True, downtime_flag=1),
    ])
    return model


def test_prediction_within_noise_of_noise_free_score(trained_model):
    record = FeatureRecord(scene_count=120, kp_index=3, avg_cloud_cover=40, humidity=70, weather_quality=0.6)
    low, high = trained_model.SCORE_RANGE
    expected = max(low, min(high, trained_model.noise_free_score(record)))

    for _ in range(50):
        probability = trained_model.predict(record).downtime_probability
        assert abs(probability - expected) <= 0.025 + 1e-9


def test_probability_bounds(trained_model):
    high = FeatureRecord(kp_index=1e9, geomagnetic_storm=True, avg_cloud_cover=1e9, solar_flux=1e9)
    low = FeatureRecord(scene_count=1e9, quality_score=1e9, weather_quality=1)

    for _ in range(20):
        assert trained_model.predict(high).downtime_probability == pytest.approx(0.95)
        assert trained_model.predict(low).downtime_probability == pytest.approx(0.02)


def test_six_factor_breakdown(trained_model):
    prediction = trained_model.predict(FeatureRecord(solar_flux=150, sunspot_number=40))
    assert set(prediction.factors) == {
        "spaceWeather", "environmental", "temporal", "historical", "weather", "solar",
    }
    assert all(0 <= value <= 1 for value in prediction.factors.values())
    assert prediction.recommendation in ENHANCED_RECOMMENDATIONS


def test_noise_is_reproducible_with_seed():
    a = EnhancedDowntimeModel(rng=np.random.default_rng(3))
    b = EnhancedDowntimeModel(rng=np.random.default_rng(3))
    assert [a.noise() for _ in range(5)] == [b.noise() for _ in range(5)]


def test_weather_quality_weight_always_adds_risk():
    model = EnhancedDowntimeModel(seed=0)
    model.weights["weatherQuality"] = -0.5
    poor = FeatureRecord(weather_quality=0.0)
    good = FeatureRecord(weather_quality=1.0)
    assert model.noise_free_score(poor) > model.noise_free_score(good)


def test_default_trainer_decays():
    trainer = EnhancedDowntimeModel.default_trainer()
    assert trainer.epochs == 150
    assert trainer.rate_for(0) == pytest.approx(0.01)
    assert trainer.rate_for(75) == pytest.approx(0.005)
    assert trainer.rate_for(149) == pytest.approx(0.01 / 150)


def test_confidence_bonuses():
    model = EnhancedDowntimeModel(trainer=BatchTrainer(epochs=1), seed=0)
    bare = FeatureRecord(solar_flux=0, gpm_rainfall=0, humidity=0, weather_quality=0)
    full = FeatureRecord(solar_flux=120, gpm_rainfall=2, humidity=60, weather_quality=0)
    assert model.confidence(full) - model.confidence(bare) == pytest.approx(0.25)
