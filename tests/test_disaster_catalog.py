import pytest

from src.errors import NotFound
from src.risk_scoring import list_disaster_types, get_disaster_type


def test_lists_six_types_without_indicators():
    types = list_disaster_types()

    assert [d["type"] for d in types] == ["flood", "cyclone", "earthquake", "heatwave", "drought", "landslide"]
    assert all(set(d) == {"type", "description"} for d in types)


def test_lookup_is_case_insensitive():
    disaster = get_disaster_type("LandSlide")

    assert disaster == {
        "type": "landslide",
        "description": "Landslide risk",
        "indicators": ["Heavy rainfall", "Mountainous terrain"],
    }


def test_lookup_returns_a_copy():
    get_disaster_type("flood")["indicators"].append("mutated")
    assert get_disaster_type("flood")["indicators"] == ["Heavy rainfall", "High humidity"]


def test_unknown_type():
    with pytest.raises(NotFound) as exc_info:
        get_disaster_type("tsunami")
    assert exc_info.value.status_code == 404
