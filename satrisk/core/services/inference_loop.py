"""
Inference Loop Service - Current downtime prediction and multi-day forecast.

Both flows collect the history window and conditions first, then score:
1. Build the current record from the latest history day
2. Fill it with the day's weather, solar and rainfall snapshots
3. Predict with the selected estimator
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date as Date, timedelta

import pandas as pd

from satrisk.core.domain.features import Coordinates, FeatureRecord
from satrisk.core.domain.result import DowntimePrediction, ForecastDay, HistoryAnalysis
from satrisk.core.ports.estimator import DowntimeEstimator
from satrisk.core.services.collection import DataCollector
from satrisk.core.services.features import enhance_features, temporal_features

logger = logging.getLogger(__name__)

FORECAST_DAYS = 7


def summarize_history(records: list[FeatureRecord]) -> HistoryAnalysis:
    if not records:
        return HistoryAnalysis(0.0, 0, 0, 0.0, 0, 0.0, 0.0)

    df = pd.DataFrame([record.model_dump() for record in records])
    return HistoryAnalysis(
        total_scenes=float(df["scene_count"].sum()),
        days=len(df),
        downtime_events=int((df["downtime_flag"] == 1).sum()),
        avg_kp_index=float(df["kp_index"].mean()),
        geomagnetic_storms=int(df["geomagnetic_storm"].sum()),
        avg_cloud_cover=float(df["avg_cloud_cover"].mean()),
        avg_rainfall=float(df["gpm_rainfall"].mean()),
    )


@dataclass
class SatellitePrediction:
    satellite: str
    start: Date
    end: Date
    features: FeatureRecord
    prediction: DowntimePrediction
    analysis: HistoryAnalysis

    def to_dict(self) -> dict:
        prediction = self.prediction.to_dict()
        return {
            "satellite": self.satellite,
            "prediction": {
                "downtimeProbability": prediction["downtimeProbability"],
                "confidence": prediction["confidence"],
                "recommendation": prediction["recommendation"],
            },
            "factors": prediction["factors"],
            "analysis": self.analysis.to_dict(),
            "features": self.features.model_dump(by_alias=True),
            "metadata": {
                "dateRange": {"startDate": self.start.isoformat(), "endDate": self.end.isoformat()},
            },
        }


class InferenceLoop:
    """
    Core service that scores current and upcoming conditions for a satellite.
    """

    def __init__(self, collector: DataCollector, estimator: DowntimeEstimator):
        """
        Args:
            collector: Collection service over the configured data source
            estimator: Trained downtime estimator
        """
        self.collector = collector
        self.estimator = estimator

    async def run_prediction(
        self,
        satellite: str,
        coords: Coordinates,
        day: Date,
        history_days: int,
    ) -> SatellitePrediction:
        logger.info(f"Predicting {self.estimator.name} downtime for {satellite} on {day}")
        current, history = await self.collector.collect_current(satellite, coords, day, history_days)

        return SatellitePrediction(
            satellite=satellite,
            start=day - timedelta(days=history_days),
            end=day,
            features=current,
            prediction=await asyncio.to_thread(self.estimator.predict, current),
            analysis=summarize_history(history),
        )

    async def run_forecast(
        self,
        satellite: str,
        coords: Coordinates,
        start: Date,
        history_days: int,
        days: int = FORECAST_DAYS,
    ) -> list[ForecastDay]:
        """
        Day-by-day risk from ``start`` onwards.

        Scene history and space weather are carried from the latest observed
        day; calendar and conditions are those of each forecast day.
        """
        logger.info(f"Forecasting {days} days of {self.estimator.name} downtime for {satellite}")
        current, _ = await self.collector.collect_current(satellite, coords, start, history_days)

        forecast_days = [start + timedelta(days=i) for i in range(days)]
        all_conditions = await asyncio.gather(
            *(self.collector.collect_conditions(coords, day) for day in forecast_days)
        )

        forecast = []
        for day, conditions in zip(forecast_days, all_conditions):
            record = current.model_copy(update=temporal_features(day))
            record = enhance_features(record, conditions.weather, conditions.solar, conditions.rainfall)
            prediction = await asyncio.to_thread(self.estimator.predict, record)

            weather = conditions.weather
            forecast.append(ForecastDay(
                date=day.isoformat(),
                day_name=day.strftime("%A"),
                downtime_risk=prediction.downtime_probability,
                confidence=prediction.confidence,
                factors=prediction.factors,
                recommendation=prediction.recommendation,
                forecast_data={
                    "cloudCover": weather.cloud_cover if weather else 0.0,
                    "kpIndex": record.kp_index,
                    "temperature": record.temperature,
                    "precipitation": record.gpm_rainfall,
                },
            ))
        return forecast
