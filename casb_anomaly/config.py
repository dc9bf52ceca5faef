from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict


def _default_benign_details() -> Dict[str, str]:
    return {"app": "Microsoft 365", "file": "document.xlsx", "location": "Bhopal, India"}


def _default_anomaly_details() -> Dict[str, str]:
    return {"ip": "95.12.110.8", "location": "Frankfurt, Germany"}


@dataclass(slots=True)
class MonitorConfig:
    """Configuration for the event buffer, detection window and scheduler."""

    event_capacity: int = 100
    detection_window: int = 10
    tick_interval: timedelta = timedelta(seconds=10)
    default_usual_country: str = "India"
    benign_event_details: Dict[str, str] = field(default_factory=_default_benign_details)
    anomaly_user: str = "alice.jones@example.com"
    anomaly_event_details: Dict[str, str] = field(default_factory=_default_anomaly_details)

    @classmethod
    def from_env(cls) -> "MonitorConfig":
        return cls(
            event_capacity=int(os.getenv("CASB_EVENT_CAPACITY", "100")),
            detection_window=int(os.getenv("CASB_DETECTION_WINDOW", "10")),
            tick_interval=timedelta(seconds=float(os.getenv("CASB_TICK_INTERVAL_SECONDS", "10"))),
            default_usual_country=os.getenv("CASB_DEFAULT_COUNTRY", "India"),
        )
