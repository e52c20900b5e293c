import itertools
import math

import pytest

from src.errors import InvalidInput
from src.risk_scoring import RiskEngine, WeatherObservation, risk_level

from conftest import openweather_payload


@pytest.fixture
def engine():
    return RiskEngine()


def obs(temp, humidity, wind, pressure, rain=0.0):
    return WeatherObservation(temp, humidity, wind, pressure, rain)


def test_heatwave_only(engine):
    predictions = engine.predict(obs(36, 50, 5, 1013))

    assert [p.type for p in predictions] == ["heatwave"]
    # (36 - 35) / 35 * 100 = 2.86, halved = 1.43
    assert predictions[0].risk_score == 1
    assert predictions[0].indicators == ["Extreme heat"]
    assert predictions[0].recommendation == "Stay hydrated and avoid prolonged sun exposure"


def test_flood_combines_humidity_and_rain(engine):
    predictions = engine.predict(obs(20, 85, 5, 1013, rain=12))

    assert [p.type for p in predictions] == ["flood"]
    # humidity 6.25 + rain 20 = 26.25, halved = 13.125
    assert predictions[0].risk_score == 13
    assert predictions[0].indicators == ["High humidity", "Heavy rainfall"]


def test_flood_triggered_by_rain_alone(engine):
    predictions = engine.predict(obs(20, 50, 5, 1013, rain=30))

    assert [p.type for p in predictions] == ["flood"]
    # rain (30 - 10) / 10 = 200; humidity below threshold adds nothing
    assert predictions[0].risk_score == 100


def test_cyclone_scores_every_pair_inversely(engine):
    predictions = engine.predict(obs(20, 50, 20, 990))

    assert [p.type for p in predictions] == ["cyclone"]
    # wind above 15 contributes nothing under inverse scoring;
    # pressure (1000 - 990) / 1000 = 1, halved = 0.5, rounded up
    assert predictions[0].risk_score == 1


def test_cyclone_high_wind_alone_scores_zero(engine):
    # Known quirk: the inverse flag also applies to wind speed
    predictions = engine.predict(obs(20, 50, 30, 1013))

    assert [p.type for p in predictions] == ["cyclone"]
    assert predictions[0].risk_score == 0


def test_drought_ignores_temperature_contribution(engine):
    predictions = engine.predict(obs(30, 20, 0, 1013))

    assert [p.type for p in predictions] == ["drought"]
    # humidity (30 - 20) / 30 = 33.3, temperature scored inversely = 0
    assert predictions[0].risk_score == 17
    assert predictions[0].indicators == ["Low humidity", "High temperature"]


def test_drought_requires_heat(engine):
    assert engine.predict(obs(20, 20, 0, 1013)) == []


def test_multiple_predictions_keep_evaluation_order(engine):
    predictions = engine.predict(obs(40, 20, 20, 990, rain=15))

    assert [p.type for p in predictions] == ["flood", "cyclone", "heatwave", "drought"]


def test_calm_weather_predicts_nothing(engine):
    assert engine.predict(obs(22, 55, 3, 1015)) == []


def test_prediction_wire_format(engine):
    prediction = engine.predict(obs(36, 50, 5, 1013))[0]

    assert prediction.to_dict() == {
        "type": "heatwave",
        "risk": 1,
        "indicators": ["Extreme heat"],
        "recommendation": "Stay hydrated and avoid prolonged sun exposure",
    }


def test_risk_score_single_pair_is_halved():
    assert RiskEngine.risk_score([(150, 100)]) == 25


def test_risk_score_clamped_to_100():
    assert RiskEngine.risk_score([(1000, 10), (1000, 10)]) == 100


def test_assess_drought_example(engine):
    assessment = engine.assess(obs(30, 20, 0, 1013))

    assert assessment.categories() == {
        "flood": 0,
        "cyclone": 0,
        "earthquake": 25,
        "heatwave": 20,
        "drought": 50,
    }
    assert assessment.overall_risk == 19


def test_assess_clamps_categories(engine):
    assessment = engine.assess(obs(60, 150, 40, 950))

    assert assessment.flood == 100
    assert assessment.cyclone == 100
    assert assessment.heatwave == 100
    assert assessment.drought == 0


def test_assess_cyclone_threshold(engine):
    assert engine.assess(obs(20, 50, 10, 1013)).cyclone == 0
    assert engine.assess(obs(20, 50, 12, 1013)).cyclone == 60


def test_scores_stay_in_range_and_earthquake_constant(engine):
    temps = [-10, 0, 25, 26, 35.5, 50]
    humidities = [0, 29.9, 39, 80.5, 100, 120]
    winds = [0, 10.5, 15.1, 60]
    pressures = [900, 999, 1000, 1040]
    rains = [0, 10.1, 200]

    for temp, humidity, wind, pressure, rain in itertools.product(temps, humidities, winds, pressures, rains):
        observation = obs(temp, humidity, wind, pressure, rain)

        for prediction in engine.predict(observation):
            assert isinstance(prediction.risk_score, int)
            assert 0 <= prediction.risk_score <= 100

        assessment = engine.assess(observation)
        scores = assessment.categories()
        assert scores["earthquake"] == 25
        for score in scores.values():
            assert isinstance(score, int)
            assert 0 <= score <= 100
        mean = sum(scores.values()) / 5
        assert assessment.overall_risk == int(mean + 0.5)


@pytest.mark.parametrize("score, level", [
    (100, "High"),
    (70, "High"),
    (69, "Medium"),
    (40, "Medium"),
    (39, "Low"),
    (0, "Low"),
])
def test_risk_level(score, level):
    assert risk_level(score) == level


def test_observation_from_openweather():
    observation = WeatherObservation.from_openweather(
        openweather_payload(temp=31.5, humidity=70, wind=4.2, pressure=1008, rain_1h=2.5)
    )

    assert observation == WeatherObservation(31.5, 70.0, 4.2, 1008.0, 2.5)


def test_observation_rain_defaults_to_zero():
    payload = openweather_payload()
    assert WeatherObservation.from_openweather(payload).rain_1h_mm == 0.0

    payload["rain"] = {"3h": 8.0}
    assert WeatherObservation.from_openweather(payload).rain_1h_mm == 0.0


def test_observation_missing_fields_is_invalid_input():
    payload = openweather_payload()
    del payload["wind"]

    with pytest.raises(InvalidInput):
        WeatherObservation.from_openweather(payload)


def test_infinite_humidity_scores_full_flood_risk(engine):
    observation = obs(20, math.inf, 5, 1013)

    predictions = engine.predict(observation)
    assert [(p.type, p.risk_score) for p in predictions] == [("flood", 100)]

    assessment = engine.assess(observation)
    assert assessment.flood == 100
    assert assessment.overall_risk == 25


def test_infinite_temperature_is_clamped(engine):
    observation = obs(math.inf, 50, 5, 1013)

    assert [(p.type, p.risk_score) for p in engine.predict(observation)] == [("heatwave", 100)]
    assert engine.assess(observation).heatwave == 100


def test_nan_reading_scores_zero(engine):
    assessment = engine.assess(obs(math.nan, 85, 12, 1013))

    assert assessment.heatwave == 0
    assert assessment.flood == 85
    assert assessment.cyclone == 60
