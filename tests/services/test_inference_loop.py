"""
Tests for InferenceLoop service.
"""
import threading
import time
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from satrisk.core.domain.errors import ModelNotReadyError
from satrisk.core.domain.features import FeatureRecord, RainfallSnapshot, WeatherSnapshot
from satrisk.core.domain.result import DowntimePrediction
from satrisk.core.estimators.enhanced import EnhancedDowntimeModel
from satrisk.core.services.collection import Conditions
from satrisk.core.services.inference_loop import InferenceLoop, summarize_history


@pytest.fixture
def history():
    return [
        FeatureRecord(scene_count=250, kp_index=2, avg_cloud_cover=20, gpm_rainfall=1, downtime_flag=0),
        FeatureRecord(scene_count=50, kp_index=6, geomagnetic_storm=True, avg_cloud_cover=60, gpm_rainfall=3, downtime_flag=1),
    ]


@pytest.fixture
def mock_collector(history):
    collector = MagicMock()
    current = history[-1].model_copy(update={"downtime_flag": None})
    collector.collect_current = AsyncMock(return_value=(current, history))

    async def conditions(coords, day):
        return Conditions(
            weather=WeatherSnapshot(date=day, temperature=10 + day.day, cloud_cover=40),
            solar=None,
            rainfall=RainfallSnapshot(date=day, precipitation=1.5),
        )

    collector.collect_conditions = AsyncMock(side_effect=conditions)
    return collector


@pytest.fixture
def trained_estimator(history):
    estimator = EnhancedDowntimeModel(seed=11)
    estimator.train(history)
    return estimator


def test_summarize_history(history):
    analysis = summarize_history(history)

    assert analysis.total_scenes == 300
    assert analysis.days == 2
    assert analysis.downtime_events == 1
    assert analysis.avg_kp_index == pytest.approx(4)
    assert analysis.geomagnetic_storms == 1
    assert analysis.avg_cloud_cover == pytest.approx(40)
    assert analysis.avg_rainfall == pytest.approx(2)


def test_summarize_empty_history():
    analysis = summarize_history([])
    assert analysis.days == 0
    assert analysis.to_dict()["historicalData"]["totalScenes"] == 0


@pytest.mark.asyncio
async def test_run_prediction(mock_collector, trained_estimator, nyc, summer_day):
    loop = InferenceLoop(mock_collector, trained_estimator)
    result = await loop.run_prediction("landsat-9", nyc, summer_day, 30)

    assert 0.02 <= result.prediction.downtime_probability <= 0.95
    assert result.start == summer_day - timedelta(days=30)
    assert result.analysis.downtime_events == 1

    payload = result.to_dict()
    assert payload["satellite"] == "landsat-9"
    assert set(payload["prediction"]) == {"downtimeProbability", "confidence", "recommendation"}
    assert "solar" in payload["factors"]
    assert payload["analysis"]["spaceWeather"]["geomagneticStorms"] == 1


@pytest.mark.asyncio
async def test_run_prediction_untrained(mock_collector, nyc, summer_day):
    loop = InferenceLoop(mock_collector, EnhancedDowntimeModel(seed=1))
    with pytest.raises(ModelNotReadyError):
        await loop.run_prediction("landsat-9", nyc, summer_day, 30)


@pytest.mark.asyncio
async def test_run_forecast(mock_collector, trained_estimator, nyc, summer_day):
    loop = InferenceLoop(mock_collector, trained_estimator)
    forecast = await loop.run_forecast("landsat-9", nyc, summer_day, 30)

    assert len(forecast) == 7
    assert mock_collector.collect_conditions.await_count == 7
    assert forecast[0].date == "2024-07-17"
    assert forecast[0].day_name == "Wednesday"
    assert forecast[-1].date == "2024-07-23"

    for day in forecast:
        assert 0.02 <= day.downtime_risk <= 0.95
        assert day.reliability == pytest.approx(1 - day.downtime_risk)
        assert len(day.factors) == 6
        assert day.forecast_data["kpIndex"] == 6
        assert day.forecast_data["precipitation"] == 1.5
        assert day.forecast_data["cloudCover"] == 40

    assert forecast[0].forecast_data["temperature"] == 27
    assert forecast[1].forecast_data["temperature"] == 28


@pytest.mark.asyncio
async def test_prediction_waits_for_training_off_the_event_loop(
    mock_collector, trained_estimator, nyc, summer_day, loop_stall
):
    """A prediction blocked on a concurrent training must not stall other tasks."""
    held = threading.Event()

    def train_in_progress():
        with trained_estimator._lock:
            held.set()
            time.sleep(0.3)

    trainer = threading.Thread(target=train_in_progress)
    trainer.start()
    held.wait()

    loop = InferenceLoop(mock_collector, trained_estimator)
    result, stall = await loop_stall(loop.run_prediction("landsat-9", nyc, summer_day, 30))
    trainer.join()

    assert 0.02 <= result.prediction.downtime_probability <= 0.95
    assert stall < 0.2


@pytest.mark.asyncio
async def test_forecast_scores_off_the_event_loop(mock_collector, nyc, summer_day, loop_stall):
    estimator = MagicMock()
    estimator.name = "enhanced"

    def slow_predict(record):
        time.sleep(0.25)
        return DowntimePrediction(0.3, 0.8, {}, "LOW RISK")

    estimator.predict.side_effect = slow_predict
    loop = InferenceLoop(mock_collector, estimator)

    forecast, stall = await loop_stall(loop.run_forecast("landsat-9", nyc, summer_day, 30))

    assert len(forecast) == 7
    assert estimator.predict.call_count == 7
    assert stall < 0.2
