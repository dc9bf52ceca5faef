from __future__ import annotations

import logging
import os
from typing import Any, Mapping, MutableMapping, Optional

import httpx
from fastapi.encoders import jsonable_encoder

from .models import Threat


logger = logging.getLogger(__name__)


def resolve_webhook_url(default: Optional[str] = None) -> Optional[str]:
    """Return the threat webhook URL from environment or provided default."""
    return os.getenv("THREAT_WEBHOOK_URL", default)


def build_threat_payload(threat: Threat, source: str = "anomaly_detector") -> MutableMapping[str, Any]:
    """Create a JSON-serializable payload describing a detected threat."""
    payload: MutableMapping[str, Any] = {
        "source": source,
        "threat": {
            "timestamp": threat.timestamp,
            "type": threat.type.value,
            "user": threat.user,
            "ip": threat.ip,
            "details": threat.details,
            "status": threat.status.value,
            "source_event_id": threat.source_event_id,
        },
    }
    return jsonable_encoder(payload)


def deliver_webhook(
    webhook_url: Optional[str],
    payload: Mapping[str, Any],
    transport: httpx.BaseTransport | None = None,
) -> bool:
    """Send the payload to the configured webhook endpoint if present."""
    if not webhook_url:
        return False

    try:
        with httpx.Client(timeout=5.0, transport=transport) as client:
            response = client.post(str(webhook_url), json=payload)
            response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning("Failed to deliver threat webhook to %s: %s", webhook_url, exc)
        return False
    return True
