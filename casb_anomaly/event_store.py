from __future__ import annotations

from collections import deque
from itertools import islice
from typing import Deque, Iterator, List

from .models import ActivityEvent


class EventStore:
    """Rolling buffer of activity events, oldest at the head."""

    def __init__(self, capacity: int = 100):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.events: Deque[ActivityEvent] = deque(maxlen=capacity)

    def append(self, event: ActivityEvent) -> None:
        # deque(maxlen=...) drops from the head once full
        self.events.append(event)

    def recent_window(self, n: int) -> Iterator[ActivityEvent]:
        start = max(len(self.events) - max(n, 0), 0)
        return islice(self.events, start, None)

    def all(self) -> List[ActivityEvent]:
        return list(reversed(self.events))

    def __len__(self) -> int:
        return len(self.events)
