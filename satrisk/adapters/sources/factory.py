"""
Builds the configured DataSource.
"""

from satrisk.adapters.sources.live import LiveDataSource
from satrisk.adapters.sources.synthetic import SyntheticDataSource
from satrisk.core.domain.settings import SystemSettings
from satrisk.core.ports.data_source import DataSource


def build_data_source(settings: SystemSettings) -> DataSource:
    if settings.data_source_type == "live":
        return LiveDataSource(
            stac_url=settings.stac_url,
            cmr_url=settings.cmr_url,
            swpc_url=settings.swpc_url,
            weather_url=settings.weather_url,
            earthdata_token=settings.nasa_earthdata_token,
            timeout=settings.request_timeout,
            search_timeout=settings.search_timeout,
            seed=settings.synthetic_seed,
        )
    return SyntheticDataSource(seed=settings.synthetic_seed)
