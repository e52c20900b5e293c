"""
Risk Engine Module

Scores disaster risk from a single weather observation. Two independent
scoring paths exist and are kept separate:

- predict(): per-disaster predictions, only for the disasters whose
  trigger conditions fire, scored relative to their thresholds
- assess(): a fixed five-category assessment plus an overall average
"""

import math
import numpy as np
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Mapping, Tuple
import logging

from src.errors import InvalidInput

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeatherObservation:
    """Weather metrics at a point in time (metric units)"""

    temperature_c: float
    humidity_percent: float
    wind_speed_ms: float
    pressure_hpa: float
    rain_1h_mm: float = 0.0

    @classmethod
    def from_openweather(cls, payload: Mapping) -> "WeatherObservation":
        """
        Build an observation from an OpenWeatherMap current-weather document

        Args:
            payload: JSON body of GET /weather (units=metric)

        Returns:
            WeatherObservation

        Raises:
            InvalidInput: if main/wind fields are missing or not numeric
        """
        try:
            main = payload["main"]
            rain = payload.get("rain") or {}
            return cls(
                temperature_c=float(main["temp"]),
                humidity_percent=float(main["humidity"]),
                wind_speed_ms=float(payload["wind"]["speed"]),
                pressure_hpa=float(main["pressure"]),
                rain_1h_mm=float(rain.get("1h", 0) or 0),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidInput("Weather observation is incomplete", error=str(e))


@dataclass(frozen=True)
class DisasterPrediction:
    """One triggered disaster-type risk"""

    type: str
    risk_score: int
    indicators: List[str] = field(default_factory=list)
    recommendation: str = ""

    def to_dict(self) -> Dict:
        return {
            "type": self.type,
            "risk": self.risk_score,
            "indicators": list(self.indicators),
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class RiskAssessment:
    """Per-category risk scores and their rounded mean"""

    flood: int
    cyclone: int
    earthquake: int
    heatwave: int
    drought: int
    overall_risk: int

    def categories(self) -> Dict[str, int]:
        scores = asdict(self)
        scores.pop("overall_risk")
        return scores


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; scores round .5 upwards
    return int(math.floor(value + 0.5))


def _clamp_score(value: float) -> int:
    # Clip first so non-finite inputs never reach floor(); NaN scores 0
    return _round_half_up(np.clip(np.nan_to_num(value, nan=0.0), 0, 100))


def risk_level(score: float) -> str:
    """Classify a 0-100 score as High / Medium / Low"""
    if score >= 70:
        return "High"
    elif score >= 40:
        return "Medium"
    return "Low"


class RiskEngine:
    """Threshold-based disaster risk scoring"""

    EARTHQUAKE_BASELINE = 25

    RECOMMENDATIONS = {
        "flood": "Stay alert for flooding in low-lying areas",
        "cyclone": "Prepare for severe weather conditions",
        "heatwave": "Stay hydrated and avoid prolonged sun exposure",
        "drought": "Conserve water and monitor agricultural conditions",
    }

    @staticmethod
    def risk_score(pairs: List[Tuple[float, float]], inverse: bool = False) -> int:
        """
        Score how far observed values sit beyond their thresholds

        Each (current, threshold) pair contributes its relative excess as a
        percentage. The sum is always halved, so a single pair is halved too.

        NOTE: `inverse` applies to every pair in the call, not per pair. For
        cyclones this means wind speed only counts when it is *below* 15 m/s.
        Kept as-is so scores match the existing API; see DESIGN.md.

        Returns:
            Integer risk score 0-100
        """
        score = 0.0
        for current, threshold in pairs:
            if inverse:
                score += max(0.0, (threshold - current) / threshold) * 100
            else:
                score += max(0.0, (current - threshold) / threshold) * 100
        return _clamp_score(score / 2)

    def predict(self, observation: WeatherObservation) -> List[DisasterPrediction]:
        """
        Predict which disasters the observation points to

        Returns:
            Predictions in evaluation order: flood, cyclone, heatwave, drought
        """
        temp = observation.temperature_c
        humidity = observation.humidity_percent
        wind = observation.wind_speed_ms
        pressure = observation.pressure_hpa
        rain = observation.rain_1h_mm

        predictions = []

        if humidity > 80 or rain > 10:
            predictions.append(DisasterPrediction(
                type="flood",
                risk_score=self.risk_score([(humidity, 80), (rain, 10)]),
                indicators=["High humidity", "Heavy rainfall"],
                recommendation=self.RECOMMENDATIONS["flood"],
            ))

        if wind > 15 or pressure < 1000:
            predictions.append(DisasterPrediction(
                type="cyclone",
                risk_score=self.risk_score([(wind, 15), (pressure, 1000)], inverse=True),
                indicators=["High wind speed", "Low atmospheric pressure"],
                recommendation=self.RECOMMENDATIONS["cyclone"],
            ))

        if temp > 35:
            predictions.append(DisasterPrediction(
                type="heatwave",
                risk_score=self.risk_score([(temp, 35)]),
                indicators=["Extreme heat"],
                recommendation=self.RECOMMENDATIONS["heatwave"],
            ))

        if humidity < 30 and temp > 25:
            predictions.append(DisasterPrediction(
                type="drought",
                risk_score=self.risk_score([(humidity, 30), (temp, 25)], inverse=True),
                indicators=["Low humidity", "High temperature"],
                recommendation=self.RECOMMENDATIONS["drought"],
            ))

        logger.debug(f"predict: {[p.type for p in predictions]}")
        return predictions

    def assess(self, observation: WeatherObservation) -> RiskAssessment:
        """
        Fixed five-category risk assessment

        Independent of predict(); formulas differ on purpose and callers
        rely on either shape.
        """
        temp = observation.temperature_c
        humidity = observation.humidity_percent
        wind = observation.wind_speed_ms

        scores = {
            "flood": _clamp_score(humidity) if humidity > 80 else 0,
            "cyclone": _clamp_score(wind * 5) if wind > 10 else 0,
            "earthquake": self.EARTHQUAKE_BASELINE,
            "heatwave": _clamp_score((temp - 25) * 4) if temp > 25 else 0,
            "drought": _clamp_score((40 - humidity) * 2.5) if humidity < 40 and temp > 25 else 0,
        }

        overall = _round_half_up(np.mean(list(scores.values())))

        return RiskAssessment(overall_risk=overall, **scores)


if __name__ == "__main__":
    print("\n" + "="*60)
    print("RISK ENGINE TEST")
    print("="*60 + "\n")

    engine = RiskEngine()

    samples = {
        "Heatwave": WeatherObservation(36, 50, 5, 1013),
        "Monsoon": WeatherObservation(20, 85, 5, 1013, rain_1h_mm=12),
        "Storm": WeatherObservation(20, 50, 20, 990),
        "Dry spell": WeatherObservation(30, 20, 0, 1013),
    }

    for name, obs in samples.items():
        print(f"{name}: {obs}")
        for prediction in engine.predict(obs):
            print(f"  {prediction.type:<10} {prediction.risk_score:>3}/100  ({risk_level(prediction.risk_score)})")
        assessment = engine.assess(obs)
        print(f"  assessment: {assessment.categories()}  overall={assessment.overall_risk}")
        print()

    print("="*60)
    print("TEST COMPLETE")
    print("="*60)
