from __future__ import annotations

from collections import deque
from typing import Deque, List, Set

from .models import Threat


class ThreatStore:
    """Threats in insertion order, newest first.

    Threats emitted for an activity event record the event id so a later scan
    over the same window can tell the event was already reported.
    """

    def __init__(self):
        self.threats: Deque[Threat] = deque()
        self.reported_events: Set[str] = set()

    def prepend(self, threat: Threat) -> None:
        self.threats.appendleft(threat)
        if threat.source_event_id is not None:
            self.reported_events.add(threat.source_event_id)

    def has_source(self, event_id: str) -> bool:
        return event_id in self.reported_events

    def list_sorted_by_timestamp_descending(self) -> List[Threat]:
        # stable sort keeps newest-inserted first among equal timestamps
        return sorted(self.threats, key=lambda threat: threat.timestamp, reverse=True)

    def __len__(self) -> int:
        return len(self.threats)
