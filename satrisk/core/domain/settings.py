from typing import Literal
from pydantic import BaseModel, Field

class SystemSettings(BaseModel):
    """
    Global system configuration settings.
    """
    data_source_type: Literal["live", "synthetic"] = Field(default="synthetic", description="Feature data source backend")
    log_level: str = Field(default="INFO", description="Root logging level")

    # Upstream feeds
    stac_url: str = Field(default="https://landsatlook.usgs.gov/stac-server", description="USGS Landsat STAC server")
    cmr_url: str = Field(default="https://cmr.earthdata.nasa.gov", description="NASA CMR search base URL")
    swpc_url: str = Field(default="https://services.swpc.noaa.gov", description="NOAA SWPC JSON feeds base URL")
    weather_url: str = Field(default="https://api.weather.gov", description="NOAA weather.gov API base URL")
    nasa_earthdata_token: str | None = Field(default=None, description="Bearer token for NASA Earthdata")

    # Timeouts (seconds)
    request_timeout: float = Field(default=10.0, description="Per-request timeout for most feeds")
    search_timeout: float = Field(default=15.0, description="Per-request timeout for granule searches")

    # Synthetic source / model noise
    synthetic_seed: int | None = Field(default=None, description="Seed for the synthetic data generator")
    noise_seed: int | None = Field(default=None, description="Seed for the enhanced model's score noise")

    # Request defaults
    default_satellite: str = Field(default="landsat-9", description="Satellite used when a request names none")
    default_lat: float = Field(default=40.7128, description="Latitude used when a request has no coordinates")
    default_lon: float = Field(default=-74.006, description="Longitude used when a request has no coordinates")
    history_days: int = Field(default=30, gt=0, description="Lookback window for historical collection")
