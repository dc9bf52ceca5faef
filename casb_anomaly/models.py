from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping, Optional
from uuid import uuid4


class EventAction(str, Enum):
    LOGIN = "Login"
    FILE_UPLOAD = "File Upload"
    FILE_ACCESS = "File Access"


class ThreatType(str, Enum):
    IMPOSSIBLE_TRAVEL = "Impossible Travel"
    MALWARE_DETECTED = "Malware Detected"
    UNUSUAL_LOGIN_LOCATION = "Unusual Login Location"


class ThreatStatus(str, Enum):
    BLOCKED = "Blocked"
    REMEDIATED = "Remediated"
    ALERTED = "Alerted"


class UserStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


def _new_event_id() -> str:
    return uuid4().hex


@dataclass(frozen=True, slots=True)
class ActivityEvent:
    timestamp: datetime
    user: str
    action: EventAction
    details: Mapping[str, str] = field(default_factory=dict)
    event_id: str = field(default_factory=_new_event_id)

    @property
    def location(self) -> Optional[str]:
        return self.details.get("location")

    @property
    def ip(self) -> Optional[str]:
        return self.details.get("ip")


@dataclass(slots=True)
class BehaviorProfile:
    user: str
    usual_country: str


@dataclass(slots=True)
class Threat:
    timestamp: datetime
    type: ThreatType
    user: str
    ip: str
    details: str
    status: ThreatStatus
    source_event_id: Optional[str] = None


@dataclass(slots=True)
class UserRecord:
    id: int
    name: str
    email: str
    role: str
    status: UserStatus = UserStatus.ACTIVE
    usual_country: str = "India"

    def toggle_status(self) -> None:
        if self.status is UserStatus.ACTIVE:
            self.status = UserStatus.INACTIVE
        else:
            self.status = UserStatus.ACTIVE
