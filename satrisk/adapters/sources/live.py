"""
Live Data Source - HTTP client for the public satellite and weather feeds.

- USGS Landsat STAC search for scene history
- NOAA SWPC JSON feeds for Kp, GOES flux, sunspots and solar wind
- NOAA weather.gov hourly forecasts for terrestrial weather
- NASA CMR granule search for regional scenes

Rainfall and bookings have no usable public feed and come from the
climatological estimates. Errors are raised to the caller.
"""

import logging
import re
from datetime import date as Date, datetime, time, timezone

import httpx
import numpy as np
import pandas as pd
from pydantic import PrivateAttr

from satrisk.adapters.sources.climatology import days_between, estimate_rainfall, simulate_bookings
from satrisk.core.domain.features import (
    Coordinates,
    RainfallSnapshot,
    SolarSnapshot,
    WeatherSnapshot,
)
from satrisk.core.ports.data_source import (
    RAINFALL_COLUMNS,
    SCENE_COLUMNS,
    SPACE_WEATHER_COLUMNS,
    DataSource,
)

logger = logging.getLogger(__name__)

LANDSAT_COLLECTION = "landsat-c2l2-sr"
CMR_LANDSAT_COLLECTION = "C2021957657-LPCLOUD"
STORM_KP = 5
DEFAULT_SOLAR_FLUX = 100.0

# Used when a request arrives with null-island coordinates
FALLBACK_COORDS = Coordinates(lat=40.7128, lon=-74.006)

MPH_TO_MS = 0.44704

# Ordered: the first matching phrase wins
CLOUD_COVER_PHRASES = [
    (("clear", "sunny"), 0.0),
    (("partly cloudy",), 30.0),
    (("mostly cloudy",), 70.0),
    (("cloudy", "overcast"), 90.0),
    (("rain", "shower"), 80.0),
]


def fahrenheit_to_celsius(fahrenheit: float) -> float:
    return (fahrenheit - 32) * 5 / 9


def parse_wind_speed(text: str | None) -> float:
    """First integer of strings like '5 to 10 mph', in m/s."""
    if not text:
        return 0.0
    match = re.search(r"(\d+)", text)
    return int(match.group(1)) * MPH_TO_MS if match else 0.0


def parse_cloud_cover(short_forecast: str | None) -> float:
    text = (short_forecast or "").lower()
    for phrases, cover in CLOUD_COVER_PHRASES:
        if any(phrase in text for phrase in phrases):
            return cover
    return 50.0


def _value(obj: dict | None, default: float) -> float:
    """``value`` of a weather.gov quantity object, ``default`` when missing."""
    if not obj or obj.get("value") is None:
        return default
    return float(obj["value"])


def closest_entry(entries: list[dict], target: datetime) -> dict | None:
    """Entry whose ``time_tag`` (or ``date``) is nearest to ``target``."""
    if not entries:
        return None
    stamps = pd.to_datetime(
        [entry.get("time_tag") or entry.get("date") for entry in entries],
        utc=True,
        errors="coerce",
    )
    deltas = pd.Series(abs(stamps - pd.Timestamp(target)))
    if deltas.isna().all():
        return entries[0]
    return entries[int(deltas.idxmin())]


def daily_means(entries: list[dict], field: str, start: Date, end: Date) -> dict[Date, float]:
    """Mean of ``field`` per day of ``time_tag`` within [start, end]."""
    if not entries:
        return {}
    df = pd.DataFrame(entries)
    if "time_tag" not in df or field not in df:
        return {}
    df["date"] = pd.to_datetime(df["time_tag"], utc=True, errors="coerce").dt.date
    df[field] = pd.to_numeric(df[field], errors="coerce")
    df = df.dropna(subset=["date", field])
    df = df[(df["date"] >= start) & (df["date"] <= end)]
    return df.groupby("date")[field].mean().to_dict()


class LiveDataSource(DataSource):
    """
    Data source backed by the public NASA, USGS and NOAA feeds.
    Configured via Pydantic model fields.
    """
    stac_url: str = "https://landsatlook.usgs.gov/stac-server"
    cmr_url: str = "https://cmr.earthdata.nasa.gov"
    swpc_url: str = "https://services.swpc.noaa.gov"
    weather_url: str = "https://api.weather.gov"
    earthdata_token: str | None = None
    timeout: float = 10.0
    search_timeout: float = 15.0
    seed: int | None = None

    _client: httpx.AsyncClient | None = PrivateAttr(default=None)
    _rng: np.random.Generator = PrivateAttr()

    def model_post_init(self, __context):
        """Normalize URLs after initialization."""
        self.stac_url = self.stac_url.rstrip("/")
        self.cmr_url = self.cmr_url.rstrip("/")
        self.swpc_url = self.swpc_url.rstrip("/")
        self.weather_url = self.weather_url.rstrip("/")
        self._rng = np.random.default_rng(self.seed)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": "satrisk/0.1.0"},
                follow_redirects=True,
            )
        return self._client

    async def _get_json(self, url: str, **kwargs):
        client = await self._get_client()
        response = await client.get(url, **kwargs)
        response.raise_for_status()
        return response.json()

    # --- Scenes ---

    async def fetch_scenes(self, satellite: str, start: Date, end: Date) -> pd.DataFrame:
        logger.info(f"Collecting Landsat scenes for {satellite} from {start} to {end}")
        data = await self._get_json(
            f"{self.stac_url}/search",
            params={
                "collections": LANDSAT_COLLECTION,
                "datetime": f"{start.isoformat()}T00:00:00Z/{end.isoformat()}T23:59:59Z",
                "limit": 1000,
            },
        )

        rows = []
        for feature in data.get("features", []):
            props = feature.get("properties", {})
            cloud_cover = props.get("eo:cloud_cover")
            rows.append({
                "date": Date.fromisoformat(props["datetime"][:10]),
                "sat_id": props.get("platform", satellite),
                "cloud_cover": float(cloud_cover) if cloud_cover is not None else 0.0,
                "scene_id": props.get("landsat:scene_id") or feature.get("id"),
            })

        logger.info(f"Collected {len(rows)} scenes for {satellite}")
        return pd.DataFrame(rows, columns=SCENE_COLUMNS)

    async def fetch_region_scenes(
        self,
        coords: Coordinates,
        start: Date,
        end: Date,
        radius: float = 0.1,
    ) -> pd.DataFrame:
        headers = {}
        if self.earthdata_token:
            headers["Authorization"] = f"Bearer {self.earthdata_token}"

        bbox = f"{coords.lon - radius},{coords.lat - radius},{coords.lon + radius},{coords.lat + radius}"
        data = await self._get_json(
            f"{self.cmr_url}/search/granules.json",
            params={
                "collection_concept_id": CMR_LANDSAT_COLLECTION,
                "bounding_box": bbox,
                "temporal": f"{start.isoformat()}T00:00:00Z,{end.isoformat()}T23:59:59Z",
                "page_size": 2000,
            },
            headers=headers,
            timeout=self.search_timeout,
        )

        rows = []
        for granule in data.get("feed", {}).get("entry", []):
            rows.append({
                "date": Date.fromisoformat(granule["time_start"][:10]),
                "sat_id": "landsat",
                "cloud_cover": self._granule_cloud_cover(granule),
                "scene_id": granule.get("concept_id") or granule.get("id"),
            })
        return pd.DataFrame(rows, columns=SCENE_COLUMNS)

    @staticmethod
    def _granule_cloud_cover(granule: dict) -> float:
        attributes = (granule.get("umm") or {}).get("AdditionalAttributes") or []
        for attr in attributes:
            if attr.get("Name") in ("CLOUD_COVER", "Cloud Cover") and attr.get("Values"):
                return float(attr["Values"][0])
        if granule.get("cloud_cover") is not None:
            return float(granule["cloud_cover"])
        return 0.0

    # --- Space weather ---

    async def fetch_space_weather(self, start: Date, end: Date) -> pd.DataFrame:
        logger.info("Collecting space weather data from NOAA SWPC")
        kp_data = await self._get_json(f"{self.swpc_url}/json/planetary_k_index_1m.json")

        try:
            flux_data = await self._get_json(f"{self.swpc_url}/json/goes/goes-16-magnetics.json")
        except httpx.HTTPError as e:
            logger.warning(f"Solar flux feed failed, using default flux: {e}")
            flux_data = []

        kp_by_date = daily_means(kp_data, "kp_index", start, end)
        flux_by_date = daily_means(flux_data, "flux", start, end)

        rows = []
        for day in days_between(start, end):
            kp = kp_by_date.get(day, 0.0)
            rows.append({
                "date": day,
                "kp_index": kp,
                "solar_flux": flux_by_date.get(day, DEFAULT_SOLAR_FLUX),
                "geomagnetic_storm": kp >= STORM_KP,
            })

        logger.info(f"Collected space weather data for {len(rows)} days")
        return pd.DataFrame(rows, columns=SPACE_WEATHER_COLUMNS)

    async def fetch_solar(self, day: Date) -> SolarSnapshot | None:
        target = datetime.combine(day, time(), tzinfo=timezone.utc)
        flux = closest_entry(await self._get_json(f"{self.swpc_url}/json/goes/goes-16-magnetics.json"), target) or {}
        sunspots = closest_entry(await self._get_json(f"{self.swpc_url}/json/solar-cycle/sunspot-numbers.json"), target) or {}
        wind = closest_entry(await self._get_json(f"{self.swpc_url}/json/ace/ace-swepam.json"), target) or {}

        return SolarSnapshot(
            date=day,
            solar_flux=flux.get("flux") if flux.get("flux") is not None else DEFAULT_SOLAR_FLUX,
            sunspot_number=sunspots.get("sunspot_number") if sunspots.get("sunspot_number") is not None else 0.0,
            solar_wind_speed=wind.get("speed") if wind.get("speed") is not None else 400.0,
            geomagnetic_activity=flux.get("kp_index") if flux.get("kp_index") is not None else 2.0,
        )

    # --- Terrestrial weather ---

    async def fetch_weather(self, coords: Coordinates, day: Date) -> WeatherSnapshot | None:
        if coords.lat == 0 and coords.lon == 0:
            logger.info("Null-island coordinates, using the default weather location")
            coords = FALLBACK_COORDS

        points = await self._get_json(f"{self.weather_url}/points/{coords.lat},{coords.lon}")
        hourly_url = points["properties"]["forecastHourly"]
        forecast = await self._get_json(hourly_url)
        periods = forecast.get("properties", {}).get("periods", [])
        if not periods:
            return None

        target = datetime.combine(day, time(), tzinfo=timezone.utc)
        period = min(
            periods,
            key=lambda p: abs(datetime.fromisoformat(p["startTime"]) - target),
        )

        return WeatherSnapshot(
            date=day,
            temperature=fahrenheit_to_celsius(period["temperature"]),
            humidity=_value(period.get("relativeHumidity"), 50.0),
            pressure=1013.25,
            wind_speed=parse_wind_speed(period.get("windSpeed")),
            visibility=_value(period.get("visibility"), 10.0),
            cloud_cover=parse_cloud_cover(period.get("shortForecast")),
            precipitation=_value(period.get("probabilityOfPrecipitation"), 0.0),
        )

    # --- Estimated feeds ---

    async def fetch_rainfall(self, coords: Coordinates, day: Date) -> RainfallSnapshot | None:
        return RainfallSnapshot(
            date=day,
            precipitation=estimate_rainfall(coords, day, self._rng),
            quality="medium",
        )

    async def fetch_rainfall_history(self, coords: Coordinates, start: Date, end: Date) -> pd.DataFrame:
        days = days_between(start, end)
        return pd.DataFrame(
            {"date": days, "precipitation": [estimate_rainfall(coords, d, self._rng) for d in days]},
            columns=RAINFALL_COLUMNS,
        )

    async def fetch_bookings(self, coords: Coordinates, start: Date, end: Date) -> pd.DataFrame:
        return simulate_bookings(coords, start, end, self._rng)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
