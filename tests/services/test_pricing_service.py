"""
Tests for PricingService.
"""
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pandas as pd
import pytest

from satrisk.core.domain.errors import MalformedInputError
from satrisk.core.domain.features import PricingFeatures
from satrisk.core.domain.result import PriceQuote
from satrisk.core.estimators.pricing import PricingModelEngine
from satrisk.core.services.collection import PricingInputs
from satrisk.core.services.pricing_service import PricingService, pricing_recommendations


@pytest.fixture
def mock_collector():
    collector = MagicMock()
    collector.collect_pricing_inputs = AsyncMock(return_value=PricingInputs(
        scenes=pd.DataFrame({"cloud_cover": [10.0, 60.0]}),
        rainfall=pd.DataFrame({"precipitation": [0.0, 2.0, 8.0]}),
        bookings=pd.DataFrame({"demand_volume": [0.6, 0.3]}),
    ))
    return collector


@pytest.mark.asyncio
async def test_quote(mock_collector, nyc):
    service = PricingService(mock_collector, PricingModelEngine())
    start = date(2024, 5, 6)

    result = await service.quote(nyc, "yield-prediction", start, date(2024, 5, 10), 100, 30)

    args, _ = mock_collector.collect_pricing_inputs.call_args
    assert args[1] == date(2024, 4, 6)
    assert args[2] == date(2024, 5, 5)

    assert 0.8 <= result.quote.multiplier <= 1.6
    assert result.quote.final_price == pytest.approx(100 * result.quote.multiplier)
    assert result.recommendations

    payload = result.to_dict()
    assert payload["analysis"]["supply"]["scenesAnalyzed"] == 2
    assert payload["analysis"]["demand"]["bookingsAnalyzed"] == 2
    assert payload["analysis"]["environmental"]["daysAnalyzed"] == 3
    assert payload["analysis"]["temporal"] == {"season": "spring", "month": "May", "dayOfWeek": "Monday"}
    assert payload["metadata"]["dataCollectionPeriod"] == {"start": "2024-04-06", "end": "2024-05-05"}


@pytest.mark.asyncio
async def test_quote_rejects_bad_input(mock_collector, nyc):
    service = PricingService(mock_collector, PricingModelEngine())

    with pytest.raises(MalformedInputError):
        await service.quote(nyc, "yield-prediction", date(2024, 5, 6), date(2024, 5, 10), 0, 30)
    with pytest.raises(MalformedInputError):
        await service.quote(nyc, "yield-prediction", date(2024, 5, 6), date(2024, 5, 1), 100, 30)

    mock_collector.collect_pricing_inputs.assert_not_called()


def test_recommendations():
    quote = PriceQuote(base_price=100, multiplier=1.4, confidence=0.7, factors={})
    risky = PricingFeatures(weather_risk=0.8, data_quality=0.1, observation_density=0)
    assert pricing_recommendations(quote, risky) == [
        "High demand period - book early to secure capacity",
        "Elevated weather risk - consider flexible acquisition dates",
        "Frequent cloud cover - expect reduced image quality",
        "Limited recent coverage - allow extra lead time",
    ]

    calm = PricingFeatures(weather_risk=0.1, data_quality=0.9, observation_density=1)
    standard = PriceQuote(base_price=100, multiplier=1.1, confidence=0.7, factors={})
    assert pricing_recommendations(standard, calm) == ["Standard pricing conditions"]
