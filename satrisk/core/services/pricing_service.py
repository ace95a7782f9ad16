"""
Pricing Service - Regional price quotes with supporting analysis.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date as Date, timedelta

from satrisk.core.domain.errors import MalformedInputError
from satrisk.core.domain.features import Coordinates, PricingFeatures
from satrisk.core.domain.result import PriceQuote
from satrisk.core.estimators.pricing import PricingModelEngine
from satrisk.core.services.collection import DataCollector, PricingInputs
from satrisk.core.services.features import extract_pricing_features

logger = logging.getLogger(__name__)

SEASON_NAMES = ("spring", "summer", "fall", "winter")
# Sunday first, matching day_of_week
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def pricing_recommendations(quote: PriceQuote, features: PricingFeatures) -> list[str]:
    recommendations = []
    if quote.multiplier >= 1.3:
        recommendations.append("High demand period - book early to secure capacity")
    elif quote.multiplier <= 0.9:
        recommendations.append("Favorable pricing window - good time to book")

    if features.weather_risk > 0.5:
        recommendations.append("Elevated weather risk - consider flexible acquisition dates")
    if features.data_quality < 0.3:
        recommendations.append("Frequent cloud cover - expect reduced image quality")
    if features.observation_density < 0.1:
        recommendations.append("Limited recent coverage - allow extra lead time")

    if not recommendations:
        recommendations.append("Standard pricing conditions")
    return recommendations


@dataclass
class QuoteResult:
    quote: PriceQuote
    features: PricingFeatures
    inputs: PricingInputs
    coords: Coordinates
    service_type: str
    start: Date
    end: Date
    collection_start: Date
    collection_end: Date
    recommendations: list[str] = field(default_factory=list)

    def analysis(self) -> dict:
        f = self.features
        return {
            "supply": {
                "observationDensity": f.observation_density,
                "averageCloudCover": f.average_cloud_cover,
                "dataQuality": f.data_quality,
                "scenesAnalyzed": len(self.inputs.scenes),
            },
            "demand": {
                "demandVolume": f.demand_volume,
                "seasonalDemand": f.seasonal_demand,
                "bookingsAnalyzed": len(self.inputs.bookings),
            },
            "environmental": {
                "weatherRisk": f.weather_risk,
                "rainfallFrequency": f.rainfall_frequency,
                "daysAnalyzed": len(self.inputs.rainfall),
            },
            "temporal": {
                "season": SEASON_NAMES[f.season],
                "month": calendar.month_name[f.month + 1],
                "dayOfWeek": DAY_NAMES[f.day_of_week],
            },
        }

    def to_dict(self) -> dict:
        return {
            "quote": self.quote.to_dict(),
            "analysis": self.analysis(),
            "recommendations": list(self.recommendations),
            "metadata": {
                "coordinates": {"lat": self.coords.lat, "lon": self.coords.lon},
                "serviceType": self.service_type,
                "dateRange": {"startDate": self.start.isoformat(), "endDate": self.end.isoformat()},
                "dataCollectionPeriod": {
                    "start": self.collection_start.isoformat(),
                    "end": self.collection_end.isoformat(),
                },
            },
        }


class PricingService:
    """
    Collects regional inputs and prices them with the pricing engine.
    """

    def __init__(self, collector: DataCollector, engine: PricingModelEngine):
        self.collector = collector
        self.engine = engine

    async def quote(
        self,
        coords: Coordinates,
        service_type: str,
        start: Date,
        end: Date,
        base_price: float,
        history_days: int,
    ) -> QuoteResult:
        """
        Price a booking from ``start`` to ``end``.

        Inputs are collected over the ``history_days`` before ``start``;
        the quote is for ``start``.
        """
        if base_price <= 0:
            raise MalformedInputError(f"Base price must be positive, got {base_price}")
        if end < start:
            raise MalformedInputError(f"End date {end} is before start date {start}")

        collection_end = start - timedelta(days=1)
        collection_start = start - timedelta(days=history_days)
        logger.info(f"Quoting {service_type} at {coords.lat},{coords.lon} for {start} to {end}")

        inputs = await self.collector.collect_pricing_inputs(coords, collection_start, collection_end)
        features = extract_pricing_features(inputs.scenes, inputs.rainfall, inputs.bookings, start)
        quote = self.engine.predict(features, base_price)

        return QuoteResult(
            quote=quote,
            features=features,
            inputs=inputs,
            coords=coords,
            service_type=service_type,
            start=start,
            end=end,
            collection_start=collection_start,
            collection_end=collection_end,
            recommendations=pricing_recommendations(quote, features),
        )
