from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List

from .baseline import BehaviorBaseline
from .errors import DetectionError, MalformedEvent, UnknownUser
from .models import ActivityEvent, EventAction, Threat, ThreatStatus, ThreatType
from .threat_store import ThreatStore


logger = logging.getLogger(__name__)

LOCATION_SEPARATOR = ", "


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_country(location: str) -> str | None:
    """Return the country part of a ``"City, Country"`` location, if any."""
    _, separator, country = location.rpartition(LOCATION_SEPARATOR)
    if not separator or not country.strip():
        return None
    return country.strip()


class LoginLocationDetector:
    """Flags logins from a country other than the user's usual one."""

    def __init__(
        self,
        baseline: BehaviorBaseline,
        threats: ThreatStore,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.baseline = baseline
        self.threats = threats
        self.clock = clock

    def scan(self, events: Iterable[ActivityEvent]) -> List[Threat]:
        emitted: List[Threat] = []
        for event in events:
            try:
                threat = self._evaluate(event)
            except DetectionError as exc:
                logger.debug("Skipping event during anomaly scan: %s", exc)
                continue
            if threat is None:
                continue
            self.threats.prepend(threat)
            emitted.append(threat)
            logger.info("Anomaly detected for %s from %s: %s", threat.user, threat.ip, threat.details)
        return emitted

    def _evaluate(self, event: ActivityEvent) -> Threat | None:
        if event.action is not EventAction.LOGIN or not event.location:
            return None

        country = parse_country(event.location)
        if country is None:
            raise MalformedEvent(event.event_id, f"unparseable location {event.location!r}")

        profile = self.baseline.lookup(event.user)
        if profile is None:
            raise UnknownUser(event.event_id, f"no baseline for {event.user}")

        if country == profile.usual_country:
            return None
        if self.threats.has_source(event.event_id):
            return None
        if not event.ip:
            raise MalformedEvent(event.event_id, "login is missing an ip")

        return Threat(
            timestamp=self.clock(),
            type=ThreatType.UNUSUAL_LOGIN_LOCATION,
            user=event.user,
            ip=event.ip,
            details=(
                f"Login from {event.location} deviates from usual country {profile.usual_country}. "
                f"(Event TS: {event.timestamp.isoformat()})"
            ),
            status=ThreatStatus.ALERTED,
            source_event_id=event.event_id,
        )
