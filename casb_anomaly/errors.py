"""Error kinds raised while evaluating events and managing users."""

from __future__ import annotations


class DetectionError(Exception):
    """Base class for per-event evaluation failures.

    These never escape a detection pass; the detector logs them and treats the
    event as producing no anomaly.
    """

    def __init__(self, event_id: str, reason: str):
        super().__init__(f"event {event_id}: {reason}")
        self.event_id = event_id
        self.reason = reason


class MalformedEvent(DetectionError):
    """A login event lacks a usable location or ip."""


class UnknownUser(DetectionError):
    """The event's user has no baseline profile."""


class UserNotFound(LookupError):
    def __init__(self, user_id: int):
        super().__init__(f"user {user_id} not found")
        self.user_id = user_id


class DuplicateUser(ValueError):
    def __init__(self, email: str):
        super().__init__(f"user {email} already exists")
        self.email = email
