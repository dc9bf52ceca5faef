from __future__ import annotations

import os
from typing import Any, Mapping, Optional
from uuid import uuid4

from celery import Celery

from .models import Threat
from .notifications import build_threat_payload, deliver_webhook


def _broker_url() -> str:
    return os.getenv("CELERY_BROKER_URL", "redis://redis:6379/0")


def _result_backend() -> str:
    return os.getenv("CELERY_RESULT_BACKEND", _broker_url())


def _always_eager() -> bool:
    return os.getenv("CELERY_TASK_ALWAYS_EAGER", "false").lower() in {"1", "true", "yes"}


celery_app = Celery("casb_anomaly", broker=_broker_url(), backend=_result_backend())
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_always_eager=_always_eager(),
)


@celery_app.task(name="casb_anomaly.deliver_threat_notification")
def deliver_threat_notification(webhook_url: str, payload: Mapping[str, Any]) -> bool:
    return deliver_webhook(webhook_url, payload)


def enqueue_threat_notification(webhook_url: Optional[str], threat: Threat) -> Optional[str]:
    if not webhook_url:
        return None
    task_id = str(uuid4())
    payload = build_threat_payload(threat)
    deliver_threat_notification.apply_async(args=[webhook_url, payload], task_id=task_id)
    return task_id


class CeleryThreatNotifier:
    """Monitor notifier that hands each new threat to the Celery worker."""

    def __init__(self, webhook_url: str):
        self.webhook_url = webhook_url

    def __call__(self, threat: Threat) -> None:
        enqueue_threat_notification(self.webhook_url, threat)
