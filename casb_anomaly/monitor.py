from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from .baseline import BehaviorBaseline
from .config import MonitorConfig
from .detector import LoginLocationDetector
from .event_store import EventStore
from .models import ActivityEvent, Threat
from .threat_store import ThreatStore


logger = logging.getLogger(__name__)

ThreatNotifier = Callable[[Threat], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SecurityMonitor:
    """Owns the event buffer, the baselines and the detected threats.

    Appending an event and running detection over the trailing window happen
    under one lock, so the dedup check and the emit of a scan see the same
    threat store.
    """

    def __init__(
        self,
        config: MonitorConfig | None = None,
        clock: Callable[[], datetime] = _utcnow,
        notifier: Optional[ThreatNotifier] = None,
    ):
        self.config = config or MonitorConfig()
        self.clock = clock
        self.notifier = notifier
        self.events = EventStore(self.config.event_capacity)
        self.baseline = BehaviorBaseline()
        self.threats = ThreatStore()
        self.detector = LoginLocationDetector(self.baseline, self.threats, clock=clock)
        self._lock = threading.Lock()

    def ingest(self, event: ActivityEvent) -> List[Threat]:
        with self._lock:
            self.events.append(event)
            emitted = self._scan()
        self._notify(emitted)
        return emitted

    def append_event(self, event: ActivityEvent) -> None:
        """Buffer an event without scanning the window."""
        with self._lock:
            self.events.append(event)

    def run_detection(self) -> List[Threat]:
        with self._lock:
            emitted = self._scan()
        self._notify(emitted)
        return emitted

    def _scan(self) -> List[Threat]:
        window = self.events.recent_window(self.config.detection_window)
        return self.detector.scan(window)

    def _notify(self, threats: List[Threat]) -> None:
        if self.notifier is None:
            return
        for threat in threats:
            try:
                self.notifier(threat)
            except Exception as exc:  # pragma: no cover - notification is best effort
                logger.warning("Failed to dispatch notification for threat on %s: %s", threat.user, exc)

    def register_user(self, user: str, usual_country: str | None = None) -> None:
        with self._lock:
            self.baseline.register(user, usual_country or self.config.default_usual_country)

    def forget_user(self, user: str) -> None:
        with self._lock:
            self.baseline.remove(user)

    def known_users(self) -> List[str]:
        with self._lock:
            return self.baseline.known_users()

    def add_threat(self, threat: Threat) -> None:
        with self._lock:
            self.threats.prepend(threat)

    def recent_events(self) -> List[ActivityEvent]:
        with self._lock:
            return self.events.all()

    def threats_by_recency(self) -> List[Threat]:
        with self._lock:
            return self.threats.list_sorted_by_timestamp_descending()

    def summary(self) -> Dict[str, int]:
        with self._lock:
            return {
                "events_buffered": len(self.events),
                "threats_detected": len(self.threats),
                "baselined_users": len(self.baseline),
            }
