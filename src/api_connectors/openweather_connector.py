"""
OpenWeatherMap API Connector

Fetches current conditions and 5-day / 3-hour forecasts.
API Documentation: https://openweathermap.org/current
"""

import requests
import pandas as pd
from typing import Optional, Dict, Tuple
import logging

from src import config
from src.errors import UpstreamFailure
from .weather_cache import WeatherCache

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class OpenWeatherConnector:
    """Connector for the OpenWeatherMap REST API"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        cache: Optional[WeatherCache] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 10
    ):
        """
        Initialize OpenWeatherMap connector

        Args:
            api_key: OpenWeatherMap API key. If None, uses WEATHER_API_KEY
            base_url: API root. If None, uses WEATHER_API_URL
            cache: Optional cache for coordinate lookups
            session: HTTP session to use (a new one by default)
            timeout: Request timeout in seconds
        """
        self.api_key = api_key if api_key is not None else config.WEATHER_API_KEY
        self.base_url = (base_url or config.WEATHER_API_URL).rstrip("/")
        self.cache = cache
        self.timeout = timeout
        self.session = session or requests.Session()

        if not self.api_key:
            logger.warning("WEATHER_API_KEY is not set - OpenWeatherMap requests will be rejected")

    def _get(self, endpoint: str, params: Dict, what: str) -> Dict:
        url = f"{self.base_url}/{endpoint}"
        query = {**params, "appid": self.api_key, "units": "metric"}

        try:
            logger.info(f"Fetching {what} (params: {params})")
            response = self.session.get(url, params=query, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching {what}: {e}")
            raise UpstreamFailure(f"Failed to fetch {what}", error=str(e))
        except ValueError as e:
            logger.error(f"Invalid JSON in {what} response: {e}")
            raise UpstreamFailure(f"Failed to fetch {what}", error=str(e))

    def get_current_weather(self, latitude: float, longitude: float) -> Dict:
        """Current conditions at a point"""
        return self._get("weather", {"lat": latitude, "lon": longitude}, "weather data")

    def get_current_weather_cached(self, latitude: float, longitude: float) -> Tuple[Dict, bool]:
        """
        Current conditions, served from the cache when fresh

        Returns:
            (payload, cached) where cached tells whether the cache answered
        """
        if self.cache is None:
            return self.get_current_weather(latitude, longitude), False

        key = WeatherCache.coordinate_key(latitude, longitude)
        data = self.cache.get(key)
        if data is not None:
            return data, True

        data = self.get_current_weather(latitude, longitude)
        self.cache.set(key, data)
        return data, False

    def get_weather_by_city(self, city_name: str) -> Dict:
        """Current conditions for a city name"""
        return self._get("weather", {"q": city_name}, "weather data")

    def get_forecast(self, latitude: float, longitude: float) -> Dict:
        """5-day forecast in 3-hour steps"""
        return self._get("forecast", {"lat": latitude, "lon": longitude}, "forecast data")

    @staticmethod
    def forecast_to_dataframe(forecast: Optional[Dict]) -> pd.DataFrame:
        """
        Flatten a forecast response into one row per 3-hour step

        Returns:
            DataFrame with time, temp, humidity, wind_speed, pressure,
            rain_3h and description columns
        """
        steps = (forecast or {}).get("list", [])

        if not steps:
            return pd.DataFrame()

        records = []
        for step in steps:
            main = step.get("main", {})
            weather = step.get("weather") or [{}]

            records.append({
                "time": pd.to_datetime(step.get("dt"), unit="s"),
                "temp": main.get("temp"),
                "humidity": main.get("humidity"),
                "wind_speed": step.get("wind", {}).get("speed"),
                "pressure": main.get("pressure"),
                "rain_3h": (step.get("rain") or {}).get("3h", 0.0),
                "description": weather[0].get("description"),
            })

        df = pd.DataFrame(records)
        logger.info(f"Parsed {len(df)} forecast steps")
        return df


if __name__ == "__main__":
    print("\n" + "="*60)
    print("OPENWEATHERMAP CONNECTOR TEST")
    print("="*60 + "\n")

    connector = OpenWeatherConnector(cache=WeatherCache())

    print("Test 1: Fetching current weather for New Delhi...")
    try:
        data, cached = connector.get_current_weather_cached(28.7041, 77.1025)
        print(f"\n✓ {data.get('name')}: {data['main']['temp']}°C, {data['main']['humidity']}% humidity")
        _, cached = connector.get_current_weather_cached(28.7041, 77.1025)
        print(f"✓ Second lookup served from cache: {cached}")
    except UpstreamFailure as e:
        print(f"✗ {e.message}: {e.error}")

    print("\n" + "-"*60)
    print("Test 2: Fetching forecast for Mumbai...")
    try:
        df = connector.forecast_to_dataframe(connector.get_forecast(19.0760, 72.8777))
        print(f"\n✓ Retrieved {len(df)} forecast steps")
        print(df.head())
    except UpstreamFailure as e:
        print(f"✗ {e.message}: {e.error}")

    print("\n" + "="*60)
    print("TEST COMPLETE")
    print("="*60)
