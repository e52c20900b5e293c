"""
Static descriptors for the disaster types the platform knows about.

Earthquake and landslide are listed for reference only; the risk engine
never predicts them.
"""

from typing import Dict, List

from src.errors import NotFound

DISASTER_TYPES = [
    {"type": "flood", "description": "Flooding risk", "indicators": ["Heavy rainfall", "High humidity"]},
    {"type": "cyclone", "description": "Cyclone/Hurricane risk", "indicators": ["High wind speed", "Low pressure"]},
    {"type": "earthquake", "description": "Earthquake risk", "indicators": ["Tectonic activity"]},
    {"type": "heatwave", "description": "Extreme heat risk", "indicators": ["High temperature"]},
    {"type": "drought", "description": "Drought risk", "indicators": ["Low humidity", "High temperature"]},
    {"type": "landslide", "description": "Landslide risk", "indicators": ["Heavy rainfall", "Mountainous terrain"]},
]


def list_disaster_types() -> List[Dict]:
    """All six disaster types, without indicators"""
    return [{"type": d["type"], "description": d["description"]} for d in DISASTER_TYPES]


def get_disaster_type(name: str) -> Dict:
    """Case-insensitive lookup of one disaster type, with indicators"""
    for disaster in DISASTER_TYPES:
        if disaster["type"].lower() == name.lower():
            return {**disaster, "indicators": list(disaster["indicators"])}
    raise NotFound("Disaster type not found")
