"""
Climatological estimates for feeds without a usable public API.

Both sources share these: rainfall from season and latitude, and a booking
log weighted by weekday and season.
"""

from datetime import date as Date, timedelta

import numpy as np
import pandas as pd

from satrisk.core.domain.features import Coordinates
from satrisk.core.ports.data_source import BOOKING_COLUMNS

SERVICE_TYPES = [
    "yield-prediction",
    "irrigation-optimization",
    "property-valuation",
    "emission-monitoring",
]

# Bookings below this demand are not logged
MIN_BOOKING_DEMAND = 0.2


def days_between(start: Date, end: Date) -> list[Date]:
    """Every day from ``start`` to ``end`` inclusive."""
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def estimate_rainfall(coords: Coordinates, day: Date, rng: np.random.Generator) -> float:
    """
    Rainfall in mm from the seasonal and latitudinal pattern.

    Northern-hemisphere seasons on a 0-indexed month: 5-8 wettest,
    11-2 driest. Tropical latitudes triple the base, polar ones cut it.
    """
    month = day.month - 1
    if 5 <= month <= 8:
        base = 2.0
    elif month >= 11 or month <= 2:
        base = 1.0
    else:
        base = 1.5

    lat = abs(coords.lat)
    if lat < 10:
        base *= 3.0
    elif lat < 30:
        base *= 1.5
    elif lat > 60:
        base *= 0.3

    return max(0.0, base * (0.5 + rng.random()))


def simulate_bookings(
    coords: Coordinates,
    start: Date,
    end: Date,
    rng: np.random.Generator,
) -> pd.DataFrame:
    """Booking log with weekday and spring/summer demand peaks."""
    region = f"{coords.lat:.2f},{coords.lon:.2f}"
    rows = []
    for day in days_between(start, end):
        day_of_week = (day.weekday() + 1) % 7
        month = day.month - 1

        base_demand = 0.8 if 1 <= day_of_week <= 5 else 0.3
        seasonal = 1.2 if 3 <= month <= 8 else 0.8
        demand = rng.random() * base_demand * seasonal

        if demand > MIN_BOOKING_DEMAND:
            rows.append({
                "date": day,
                "region": region,
                "service_type": SERVICE_TYPES[int(rng.integers(len(SERVICE_TYPES)))],
                "demand_volume": demand,
                "price_paid": rng.random() * 200 + 100,
            })

    return pd.DataFrame(rows, columns=BOOKING_COLUMNS)
