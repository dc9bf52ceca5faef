"""Demo dataset loaded when the dashboard starts."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from .models import ActivityEvent, EventAction, Threat, ThreatStatus, ThreatType, UserRecord, UserStatus
from .monitor import SecurityMonitor
from .users import UserDirectory


SEED_USERS = [
    UserRecord(101, "Admin User", "admin@casb-portal.com", "Admin", UserStatus.ACTIVE, "India"),
    UserRecord(102, "Alice Jones", "alice.jones@example.com", "User", UserStatus.ACTIVE, "India"),
    UserRecord(103, "Bob Smith", "bob.smith@example.com", "User", UserStatus.INACTIVE, "USA"),
    UserRecord(104, "Charlie Brown", "charlie.brown@example.com", "User", UserStatus.ACTIVE, "India"),
]


def _seed_threats() -> list[Threat]:
    return [
        Threat(
            timestamp=datetime(2025, 9, 2, 10, 30, 45, tzinfo=timezone.utc),
            type=ThreatType.MALWARE_DETECTED,
            user="eva.green@example.com",
            ip="203.0.113.5",
            details="Malicious file upload to Asana",
            status=ThreatStatus.REMEDIATED,
        ),
        Threat(
            timestamp=datetime(2025, 9, 2, 13, 5, 11, tzinfo=timezone.utc),
            type=ThreatType.IMPOSSIBLE_TRAVEL,
            user="diana.prince@example.com",
            ip="198.51.100.2",
            details="Login from new country",
            status=ThreatStatus.BLOCKED,
        ),
    ]


def _seed_events(now: datetime) -> list[ActivityEvent]:
    return [
        ActivityEvent(
            now - timedelta(minutes=5),
            "alice.jones@example.com",
            EventAction.LOGIN,
            {"ip": "103.27.100.5", "location": "Bhopal, India"},
        ),
        ActivityEvent(
            now - timedelta(minutes=4),
            "alice.jones@example.com",
            EventAction.FILE_UPLOAD,
            {"app": "Google Drive", "file": "project_report_final.docx"},
        ),
        ActivityEvent(
            now - timedelta(minutes=3),
            "charlie.brown@example.com",
            EventAction.LOGIN,
            {"ip": "103.27.101.21", "location": "Bhopal, India"},
        ),
        ActivityEvent(
            now - timedelta(minutes=2),
            "bob.smith@example.com",
            EventAction.LOGIN,
            {"ip": "203.0.113.5", "location": "New York, USA"},
        ),
    ]


def load_demo_data(monitor: SecurityMonitor, directory: UserDirectory) -> None:
    """Populate users, baselines, events and historical threats.

    Events are appended without running detection; the first scheduler tick
    or simulated anomaly scans them.
    """
    for record in SEED_USERS:
        directory.add(
            UserRecord(record.id, record.name, record.email, record.role, record.status, record.usual_country)
        )
    for threat in _seed_threats():
        monitor.add_threat(threat)
    for event in _seed_events(monitor.clock()):
        monitor.append_event(event)
