"""Behavioral anomaly detection for the CASB dashboard."""

from .config import MonitorConfig
from .models import ActivityEvent, BehaviorProfile, EventAction, Threat, ThreatStatus, ThreatType
from .monitor import SecurityMonitor
from .scheduler import ActivityScheduler, AsyncioTicker, ManualTicker

__all__ = [
    "MonitorConfig",
    "ActivityEvent",
    "BehaviorProfile",
    "EventAction",
    "Threat",
    "ThreatStatus",
    "ThreatType",
    "SecurityMonitor",
    "ActivityScheduler",
    "AsyncioTicker",
    "ManualTicker",
]
