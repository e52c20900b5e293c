"""
FastAPI REST API for the Disaster Early Warning Platform

Weather proxy, alert storage and disaster risk endpoints.
"""

from fastapi import FastAPI, Depends, Body, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Any, Dict, Optional
from datetime import datetime, timezone
import logging
import sys
import os
import time

# Add parent directory to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src import config
from src.errors import PlatformError, InvalidInput
from src.api_connectors import OpenWeatherConnector, WeatherCache
from src.alerts import AlertRepository, JsonFileAlertRepository
from src.risk_scoring import RiskEngine, WeatherObservation, list_disaster_types, get_disaster_type

config.configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Disaster Early Warning API",
    description="Weather-driven disaster risk scoring and alert management",
    version="1.0.0"
)

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.CORS_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

START_TIME = time.monotonic()

# Initialize collaborators
weather_cache = WeatherCache(
    ttl_seconds=config.WEATHER_CACHE_TTL,
    max_entries=config.WEATHER_CACHE_MAX_ENTRIES
)
weather_connector = OpenWeatherConnector(cache=weather_cache)
alert_repository = JsonFileAlertRepository(config.ALERTS_FILE)
risk_engine = RiskEngine()


def get_weather_connector() -> OpenWeatherConnector:
    return weather_connector


def get_weather_cache() -> WeatherCache:
    return weather_cache


def get_alert_repository() -> AlertRepository:
    return alert_repository


def get_risk_engine() -> RiskEngine:
    return risk_engine


# Pydantic models
class AlertInput(BaseModel):
    type: Optional[str] = None
    severity: Optional[str] = None
    location: Optional[str] = None
    message: Optional[str] = None
    coordinates: Optional[Dict[str, Any]] = None


# Error envelopes

@app.exception_handler(PlatformError)
async def platform_error_handler(request: Request, exc: PlatformError):
    logger.error(f"{request.method} {request.url.path}: {exc.message} ({exc.error})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Invalid request", "error": str(exc.errors())}
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal Server Error", "error": str(exc)}
    )


def validate_coordinates(lat: float, lon: float) -> None:
    if not -90 <= lat <= 90 or not -180 <= lon <= 180:
        raise InvalidInput(
            "Latitude and longitude are required",
            error=f"Coordinates out of range: {lat}, {lon}"
        )


# API Endpoints

@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "message": "Disaster Early Warning API",
        "version": "1.0.0",
        "endpoints": {
            "health": "/api/health",
            "weather": "/api/weather/location/{lat}/{lon}",
            "alerts": "/api/alerts",
            "predictions": "/api/disasters/predict/{lat}/{lon}",
            "risk_assessment": "/api/disasters/risk/{lat}/{lon}",
            "disaster_types": "/api/disasters/"
        }
    }


@app.get("/api/health")
def health_check():
    """Health check endpoint"""
    return {
        "status": "OK",
        "message": "Disaster Early Warning System - Backend Running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - START_TIME, 3)
    }


# Weather

@app.get("/api/weather/location/{lat}/{lon}")
def get_weather_by_coordinates(
    lat: float,
    lon: float,
    connector: OpenWeatherConnector = Depends(get_weather_connector)
):
    """Current weather, cached for a few minutes per coordinate"""
    validate_coordinates(lat, lon)
    data, cached = connector.get_current_weather_cached(lat, lon)
    return {"success": True, "data": data, "cached": cached}


@app.get("/api/weather/city/{city_name}")
def get_weather_by_city(
    city_name: str,
    connector: OpenWeatherConnector = Depends(get_weather_connector)
):
    if not city_name.strip():
        raise InvalidInput("City name is required")
    return {"success": True, "data": connector.get_weather_by_city(city_name)}


@app.get("/api/weather/forecast/{lat}/{lon}")
def get_weather_forecast(
    lat: float,
    lon: float,
    connector: OpenWeatherConnector = Depends(get_weather_connector)
):
    validate_coordinates(lat, lon)
    return {"success": True, "data": connector.get_forecast(lat, lon)}


@app.get("/api/weather/all")
def get_all_weather_data(cache: WeatherCache = Depends(get_weather_cache)):
    """Everything currently in the weather cache"""
    snapshot = cache.snapshot()
    return {"success": True, "data": snapshot, "cacheSize": len(snapshot)}


# Alerts

@app.get("/api/alerts")
def get_all_alerts(repository: AlertRepository = Depends(get_alert_repository)):
    alerts = repository.list_all()
    return {"success": True, "data": alerts, "count": len(alerts)}


@app.get("/api/alerts/status/active")
def get_active_alerts(repository: AlertRepository = Depends(get_alert_repository)):
    alerts = repository.list_active()
    return {"success": True, "data": alerts, "count": len(alerts)}


@app.get("/api/alerts/type/{alert_type}")
def get_alerts_by_type(
    alert_type: str,
    repository: AlertRepository = Depends(get_alert_repository)
):
    alerts = repository.list_by_type(alert_type)
    return {"success": True, "data": alerts, "count": len(alerts)}


@app.get("/api/alerts/{alert_id}")
def get_alert_by_id(alert_id: str, repository: AlertRepository = Depends(get_alert_repository)):
    return {"success": True, "data": repository.get(alert_id)}


@app.post("/api/alerts", status_code=201)
def create_alert(
    alert: AlertInput,
    repository: AlertRepository = Depends(get_alert_repository)
):
    created = repository.create(
        type=alert.type,
        severity=alert.severity,
        location=alert.location,
        message=alert.message,
        coordinates=alert.coordinates
    )
    return {"success": True, "message": "Alert created successfully", "data": created}


@app.put("/api/alerts/{alert_id}")
def update_alert(
    alert_id: str,
    updates: Dict[str, Any] = Body(...),
    repository: AlertRepository = Depends(get_alert_repository)
):
    updated = repository.update(alert_id, updates)
    return {"success": True, "message": "Alert updated successfully", "data": updated}


@app.delete("/api/alerts/{alert_id}")
def delete_alert(alert_id: str, repository: AlertRepository = Depends(get_alert_repository)):
    repository.delete(alert_id)
    return {"success": True, "message": "Alert deleted successfully"}


# Disasters

@app.get("/api/disasters/predict/{lat}/{lon}")
def predict_disasters(
    lat: float,
    lon: float,
    connector: OpenWeatherConnector = Depends(get_weather_connector),
    engine: RiskEngine = Depends(get_risk_engine)
):
    """
    Predict disasters from the current weather at a location

    Returns only the disaster types whose trigger conditions fire.
    """
    validate_coordinates(lat, lon)
    weather_data = connector.get_current_weather(lat, lon)
    observation = WeatherObservation.from_openweather(weather_data)
    predictions = engine.predict(observation)

    description = (weather_data.get("weather") or [{}])[0].get("description")

    return {
        "success": True,
        "location": {
            "name": weather_data.get("name") or "Unknown",
            "coordinates": {"lat": lat, "lon": lon}
        },
        "predictions": [p.to_dict() for p in predictions],
        "weather": {
            "temp": observation.temperature_c,
            "humidity": observation.humidity_percent,
            "windSpeed": observation.wind_speed_ms,
            "pressure": observation.pressure_hpa,
            "description": description
        }
    }


@app.get("/api/disasters/risk/{lat}/{lon}")
def get_risk_assessment(
    lat: float,
    lon: float,
    connector: OpenWeatherConnector = Depends(get_weather_connector),
    engine: RiskEngine = Depends(get_risk_engine)
):
    """Five-category risk assessment for a location"""
    validate_coordinates(lat, lon)
    weather_data = connector.get_current_weather(lat, lon)
    assessment = engine.assess(WeatherObservation.from_openweather(weather_data))

    return {
        "success": True,
        "location": weather_data.get("name") or "Unknown",
        "riskAssessment": assessment.categories(),
        "overallRisk": assessment.overall_risk
    }


@app.get("/api/disasters/")
def get_all_disasters():
    return {"success": True, "data": list_disaster_types()}


@app.get("/api/disasters/type/{disaster_type}")
def get_disaster_by_type(disaster_type: str):
    return {"success": True, "data": get_disaster_type(disaster_type)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
