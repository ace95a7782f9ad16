import logging
from contextlib import asynccontextmanager
from datetime import date as Date

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import Field

from satrisk.adapters.config.settings_loader import load_settings
from satrisk.adapters.sources.factory import build_data_source
from satrisk.core.domain.errors import MalformedInputError, ModelNotReadyError
from satrisk.core.domain.features import (
    CamelModel,
    Coordinates,
    FeatureRecord,
    PricingFeatures,
    PricingSample,
)
from satrisk.core.domain.settings import SystemSettings
from satrisk.core.ports.data_source import DataSource
from satrisk.core.services.collection import DataCollector
from satrisk.core.services.inference_loop import FORECAST_DAYS, InferenceLoop
from satrisk.core.services.model_registry import ModelRegistry, Variant
from satrisk.core.services.pricing_service import PricingService
from satrisk.core.services.training_loop import TrainingLoop

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


# --- Request bodies ---

class SatelliteRequest(CamelModel):
    satellite: str | None = None
    coordinates: Coordinates | None = None
    date: Date | None = None
    history_days: int | None = Field(default=None, gt=0)
    variant: Variant = "enhanced"


class ForecastRequest(SatelliteRequest):
    days: int = Field(default=FORECAST_DAYS, ge=1, le=14)


class SampleTrainRequest(CamelModel):
    samples: list[FeatureRecord]
    variant: Variant = "enhanced"


class DowntimePredictRequest(CamelModel):
    features: FeatureRecord
    variant: Variant = "enhanced"


class PricingQuoteRequest(CamelModel):
    coordinates: Coordinates
    service_type: str = "yield-prediction"
    start_date: Date
    end_date: Date
    base_price: float


class PricingPredictRequest(CamelModel):
    features: PricingFeatures
    base_price: float = 100.0


class PricingTrainRequest(CamelModel):
    samples: list[PricingSample]


def create_app(settings: SystemSettings | None = None, source: DataSource | None = None) -> FastAPI:
    """
    Build the API with its own registry and data source.

    Args:
        settings: Defaults to settings loaded from YAML and the environment
        source: Overrides the configured data source
    """
    settings = settings or load_settings()
    source = source or build_data_source(settings)
    registry = ModelRegistry.from_settings(settings)
    collector = DataCollector(source)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await source.close()

    app = FastAPI(title="SatRisk", version=VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry
    app.state.collector = collector

    @app.exception_handler(ModelNotReadyError)
    async def not_ready_handler(request: Request, exc: ModelNotReadyError):
        return JSONResponse(status_code=409, content={"success": False, "error": str(exc)})

    @app.exception_handler(MalformedInputError)
    async def malformed_handler(request: Request, exc: MalformedInputError):
        return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})

    def resolve(body: SatelliteRequest) -> tuple[str, Coordinates, Date, int]:
        return (
            body.satellite or settings.default_satellite,
            body.coordinates or Coordinates(lat=settings.default_lat, lon=settings.default_lon),
            body.date or Date.today(),
            body.history_days or settings.history_days,
        )

    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "version": VERSION,
            "dataSource": settings.data_source_type,
            "models": {
                "basic": registry.basic.is_trained,
                "enhanced": registry.enhanced.is_trained,
                "pricing": registry.pricing.is_trained,
            },
        }

    # --- Downtime ---

    @app.post("/downtime/train")
    async def train_downtime(body: SatelliteRequest):
        """
        Collect the history window for a satellite and train a downtime model.
        """
        satellite, coords, day, history_days = resolve(body)
        loop = TrainingLoop(collector, registry.downtime(body.variant))
        samples = await loop.run_training(
            satellite, coords, day, history_days, enhance=body.variant == "enhanced"
        )
        return {
            "success": True,
            "data": {"satellite": satellite, "variant": body.variant, "trainingSamples": samples},
        }

    @app.post("/downtime/train/samples")
    def train_downtime_samples(body: SampleTrainRequest):
        """Train a downtime model on supplied labeled records."""
        unlabeled = sum(1 for sample in body.samples if sample.downtime_flag is None)
        if unlabeled:
            raise MalformedInputError(f"{unlabeled} training samples have no downtimeFlag")

        loop = TrainingLoop(collector, registry.downtime(body.variant))
        samples = loop.train_samples(body.samples)
        return {"success": True, "data": {"variant": body.variant, "trainingSamples": samples}}

    @app.post("/downtime/predict")
    def predict_downtime(body: DowntimePredictRequest):
        prediction = registry.downtime(body.variant).predict(body.features)
        return {"success": True, "data": prediction.to_dict()}

    @app.post("/downtime/predict/satellite")
    async def predict_satellite(body: SatelliteRequest):
        """
        Collect current conditions for a satellite and predict its downtime risk.
        """
        satellite, coords, day, history_days = resolve(body)
        loop = InferenceLoop(collector, registry.downtime(body.variant))
        result = await loop.run_prediction(satellite, coords, day, history_days)
        return {"success": True, "data": result.to_dict()}

    @app.post("/downtime/forecast")
    async def forecast_downtime(body: ForecastRequest):
        satellite, coords, day, history_days = resolve(body)
        loop = InferenceLoop(collector, registry.downtime(body.variant))
        forecast = await loop.run_forecast(satellite, coords, day, history_days, days=body.days)
        return {
            "success": True,
            "data": {"satellite": satellite, "forecast": [d.to_dict() for d in forecast]},
        }

    @app.get("/downtime/metrics")
    def downtime_metrics(variant: Variant = "enhanced"):
        metrics = registry.downtime(variant).metrics()
        return {
            "success": True,
            "data": {**metrics.to_dict(), "featureImportance": metrics.feature_importance()},
        }

    # --- Pricing ---

    @app.post("/pricing/quote")
    async def pricing_quote(body: PricingQuoteRequest):
        """
        Collect regional supply, demand and rainfall inputs and quote a price.
        """
        service = PricingService(collector, registry.pricing)
        result = await service.quote(
            body.coordinates,
            body.service_type,
            body.start_date,
            body.end_date,
            body.base_price,
            settings.history_days,
        )
        return {"success": True, "data": result.to_dict()}

    @app.post("/pricing/predict")
    def pricing_predict(body: PricingPredictRequest):
        if body.base_price <= 0:
            raise MalformedInputError(f"Base price must be positive, got {body.base_price}")
        quote = registry.pricing.predict(body.features, body.base_price)
        return {"success": True, "data": quote.to_dict()}

    @app.post("/pricing/train")
    def pricing_train(body: PricingTrainRequest):
        registry.pricing.train(body.samples)
        return {"success": True, "data": {"trainingSamples": len(body.samples)}}

    @app.get("/pricing/metrics")
    def pricing_metrics():
        return {"success": True, "data": registry.pricing.metrics().to_dict()}

    return app


# Configuration (Load from YAML with Env Overrides)
settings = load_settings()

# Logging
logging.basicConfig(level=settings.log_level.upper())

app = create_app(settings)
