"""
API Connectors for the Disaster Early Warning Platform

- OpenWeatherMap: current conditions and forecasts
- WeatherCache: bounded, expiring cache for coordinate lookups
"""

from .weather_cache import WeatherCache
from .openweather_connector import OpenWeatherConnector

__all__ = [
    "WeatherCache",
    "OpenWeatherConnector",
]
