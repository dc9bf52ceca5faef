from __future__ import annotations

import threading
from typing import Dict, List

from .errors import DuplicateUser, UserNotFound
from .models import UserRecord, UserStatus
from .monitor import SecurityMonitor


class UserDirectory:
    """Managed users; provisioning and removal keep the baselines in step."""

    def __init__(self, monitor: SecurityMonitor):
        self.monitor = monitor
        self.users: Dict[int, UserRecord] = {}
        self._lock = threading.Lock()

    def _insert(self, record: UserRecord) -> None:
        # caller holds self._lock; baselines are keyed by email
        if any(existing.email == record.email for existing in self.users.values()):
            raise DuplicateUser(record.email)
        self.users[record.id] = record

    def add(self, record: UserRecord) -> UserRecord:
        with self._lock:
            self._insert(record)
            self.monitor.register_user(record.email, record.usual_country)
        return record

    def create(self, name: str, email: str, role: str, usual_country: str | None = None) -> UserRecord:
        with self._lock:
            record = UserRecord(
                id=max(self.users, default=100) + 1,
                name=name,
                email=email,
                role=role,
                status=UserStatus.ACTIVE,
                usual_country=usual_country or self.monitor.config.default_usual_country,
            )
            self._insert(record)
            self.monitor.register_user(record.email, record.usual_country)
        return record

    def get(self, user_id: int) -> UserRecord:
        with self._lock:
            record = self.users.get(user_id)
        if record is None:
            raise UserNotFound(user_id)
        return record

    def toggle_status(self, user_id: int) -> UserRecord:
        record = self.get(user_id)
        with self._lock:
            record.toggle_status()
        return record

    def delete(self, user_id: int) -> None:
        with self._lock:
            record = self.users.pop(user_id, None)
            if record is None:
                raise UserNotFound(user_id)
            self.monitor.forget_user(record.email)

    def list_users(self) -> List[UserRecord]:
        with self._lock:
            return list(self.users.values())

    def active_count(self) -> int:
        return sum(1 for record in self.list_users() if record.status is UserStatus.ACTIVE)
