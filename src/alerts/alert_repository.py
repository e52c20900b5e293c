"""
Alert Storage

Alerts are plain dicts with the wire field names:
id, type, severity, location, message, coordinates, createdAt, status.

JsonFileAlertRepository reads and rewrites the whole file on every
operation, without locking.
"""

import json
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional
import logging

from src.errors import InvalidInput, NotFound, UpstreamFailure

logger = logging.getLogger(__name__)


class AlertRepository(ABC):
    """CRUD over stored alerts"""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock

    @abstractmethod
    def _load(self) -> List[Dict]:
        ...

    @abstractmethod
    def _save(self, alerts: List[Dict]) -> None:
        ...

    def list_all(self) -> List[Dict]:
        return self._load()

    def get(self, alert_id: str) -> Dict:
        for alert in self._load():
            if alert.get("id") == alert_id:
                return alert
        raise NotFound("Alert not found")

    def create(
        self,
        type: Optional[str],
        severity: Optional[str],
        location: Optional[str],
        message: Optional[str] = None,
        coordinates: Optional[Dict] = None
    ) -> Dict:
        """
        Store a new active alert

        Raises:
            InvalidInput: if type, severity or location is missing/empty
        """
        if not type or not severity or not location:
            raise InvalidInput("Type, severity, and location are required")

        alerts = self._load()
        now = self._clock()
        alert = {
            "id": self._next_id(alerts, now),
            "type": type,
            "severity": severity,
            "location": location,
            "message": message or "",
            "coordinates": coordinates or {},
            "createdAt": datetime.fromtimestamp(now, tz=timezone.utc).isoformat(),
            "status": "active",
        }
        alerts.append(alert)
        self._save(alerts)
        logger.info(f"Created {type} alert {alert['id']} for {location}")
        return alert

    def update(self, alert_id: str, updates: Dict) -> Dict:
        """Merge updates into an alert; the id never changes"""
        alerts = self._load()
        for index, alert in enumerate(alerts):
            if alert.get("id") == alert_id:
                alerts[index] = {**alert, **updates, "id": alert_id}
                self._save(alerts)
                return alerts[index]
        raise NotFound("Alert not found")

    def delete(self, alert_id: str) -> None:
        alerts = self._load()
        remaining = [a for a in alerts if a.get("id") != alert_id]
        if len(remaining) == len(alerts):
            raise NotFound("Alert not found")
        self._save(remaining)
        logger.info(f"Deleted alert {alert_id}")

    def list_by_type(self, alert_type: str) -> List[Dict]:
        wanted = alert_type.lower()
        return [a for a in self._load() if str(a.get("type", "")).lower() == wanted]

    def list_active(self) -> List[Dict]:
        return [a for a in self._load() if a.get("status") == "active"]

    @staticmethod
    def _next_id(alerts: List[Dict], now: float) -> str:
        # Millisecond timestamp, bumped if another alert already holds it
        taken = {a.get("id") for a in alerts}
        candidate = int(now * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)


class InMemoryAlertRepository(AlertRepository):
    """Keeps alerts in a list; nothing survives the process"""

    def __init__(self, alerts: Optional[List[Dict]] = None, clock: Callable[[], float] = time.time):
        super().__init__(clock)
        self._alerts = [dict(a) for a in (alerts or [])]

    def _load(self) -> List[Dict]:
        return [dict(a) for a in self._alerts]

    def _save(self, alerts: List[Dict]) -> None:
        self._alerts = [dict(a) for a in alerts]


class JsonFileAlertRepository(AlertRepository):
    """Alerts stored as a JSON array in a single file"""

    def __init__(self, path, clock: Callable[[], float] = time.time):
        super().__init__(clock)
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self._save([])

    def _load(self) -> List[Dict]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading alerts from {self.path}: {e}")
            return []
        if not isinstance(data, list):
            logger.error(f"Alerts file {self.path} does not hold a list, ignoring it")
            return []
        alerts = [a for a in data if isinstance(a, dict)]
        if len(alerts) != len(data):
            logger.error(f"Dropped {len(data) - len(alerts)} malformed entries from {self.path}")
        return alerts

    def _save(self, alerts: List[Dict]) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(alerts, f, indent=2)
        except OSError as e:
            logger.error(f"Error writing alerts to {self.path}: {e}")
            raise UpstreamFailure("Failed to save alerts", error=str(e))


def alert_summary(alert: Dict) -> str:
    """One-line markdown summary; tolerates fields an update removed or nulled"""
    alert_type = str(alert.get("type") or "unknown").title()
    severity = alert.get("severity") or "unknown"
    location = alert.get("location") or "Unknown location"
    return f"**{alert_type}** ({severity}) - {location}: {alert.get('message') or ''}"
