import os
import yaml
from satrisk.core.domain.settings import SystemSettings

# Environment variable -> settings field
ENV_OVERRIDES = {
    "SATRISK_DATA_SOURCE": "data_source_type",
    "NASA_EARTHDATA_TOKEN": "nasa_earthdata_token",
    "SATRISK_SYNTHETIC_SEED": "synthetic_seed",
    "SATRISK_NOISE_SEED": "noise_seed",
    "SATRISK_HISTORY_DAYS": "history_days",
    "SATRISK_DEFAULT_SATELLITE": "default_satellite",
    "SATRISK_LOG_LEVEL": "log_level",
    "SATRISK_STAC_URL": "stac_url",
    "SATRISK_SWPC_URL": "swpc_url",
}


def load_settings(path: str | None = None) -> SystemSettings:
    """
    Load system settings from a YAML file.
    Environment variables take precedence over the file, the file over defaults.

    Args:
        path: Path to config.yaml. Defaults to SATRISK_CONFIG_FILE env var or "config.yaml".
    """
    if path is None:
        path = os.getenv("SATRISK_CONFIG_FILE", "config.yaml")

    config_data = {}

    if os.path.exists(path):
        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except Exception as e:
            raise RuntimeError(f"Failed to load configuration from {path}: {e}")

    for env_var, field_name in ENV_OVERRIDES.items():
        if os.getenv(env_var):
            config_data[field_name] = os.getenv(env_var)

    return SystemSettings(**config_data)
