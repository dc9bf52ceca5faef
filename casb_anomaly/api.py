from __future__ import annotations

import random
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .config import MonitorConfig
from .errors import DuplicateUser, UserNotFound
from .models import ActivityEvent, Threat, UserRecord
from .monitor import SecurityMonitor
from .notifications import resolve_webhook_url
from .scheduler import ActivityScheduler, AsyncioTicker, Ticker
from .seed import load_demo_data
from .tasks import CeleryThreatNotifier
from .users import UserDirectory


class EventResponse(BaseModel):
    event_id: str
    timestamp: datetime
    user: str
    action: str
    details: Dict[str, str] = Field(default_factory=dict)


class ThreatResponse(BaseModel):
    timestamp: datetime
    type: str
    user: str
    ip: str
    details: str
    status: str
    source_event_id: Optional[str] = None


class SimulationResponse(BaseModel):
    message: str
    event: EventResponse


class StatsResponse(BaseModel):
    threats_detected: int
    events_buffered: int
    managed_users: int
    active_users: int


class UserCreateRequest(BaseModel):
    name: str
    email: str
    role: str = "User"
    usual_country: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    status: str
    usual_country: str


def _serialize_event(event: ActivityEvent) -> EventResponse:
    return EventResponse(
        event_id=event.event_id,
        timestamp=event.timestamp,
        user=event.user,
        action=event.action.value,
        details=dict(event.details),
    )


def _serialize_threat(threat: Threat) -> ThreatResponse:
    return ThreatResponse(
        timestamp=threat.timestamp,
        type=threat.type.value,
        user=threat.user,
        ip=threat.ip,
        details=threat.details,
        status=threat.status.value,
        source_event_id=threat.source_event_id,
    )


def _serialize_user(record: UserRecord) -> UserResponse:
    return UserResponse(
        id=record.id,
        name=record.name,
        email=record.email,
        role=record.role,
        status=record.status.value,
        usual_country=record.usual_country,
    )


def create_app(
    monitor: SecurityMonitor | None = None,
    ticker: Ticker | None = None,
    rng: random.Random | None = None,
    config: MonitorConfig | None = None,
    webhook_url: str | None = None,
    seed_demo_data: bool = True,
) -> FastAPI:
    """Build the dashboard API.

    ``config`` and ``webhook_url`` only apply when the monitor is built here; an
    explicit ``monitor`` already carries its own config and notifier.
    """
    if monitor is not None and (config is not None or webhook_url is not None):
        raise ValueError("pass config and webhook_url only when create_app builds the monitor")
    if monitor is None:
        config = config or MonitorConfig.from_env()
        webhook_url = webhook_url or resolve_webhook_url()
        notifier = CeleryThreatNotifier(webhook_url) if webhook_url else None
        monitor = SecurityMonitor(config, notifier=notifier)
    directory = UserDirectory(monitor)
    if seed_demo_data:
        load_demo_data(monitor, directory)
    ticker = ticker or AsyncioTicker(monitor.config.tick_interval.total_seconds())
    scheduler = ActivityScheduler(monitor, ticker, rng=rng)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        scheduler.start()
        try:
            yield
        finally:
            scheduler.stop()

    app = FastAPI(title="CASB Anomaly Detection API", version="1.0.0", lifespan=lifespan)
    app.state.monitor = monitor
    app.state.directory = directory
    app.state.scheduler = scheduler

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/events", response_model=List[EventResponse])
    def list_events() -> List[EventResponse]:
        return [_serialize_event(event) for event in app.state.monitor.recent_events()]

    @app.get("/api/threats", response_model=List[ThreatResponse])
    def list_threats() -> List[ThreatResponse]:
        return [_serialize_threat(threat) for threat in app.state.monitor.threats_by_recency()]

    @app.post("/api/simulate-anomaly", response_model=SimulationResponse)
    def simulate_anomaly() -> SimulationResponse:
        event = app.state.scheduler.simulate_anomaly()
        return SimulationResponse(message="Anomaly simulated successfully", event=_serialize_event(event))

    @app.get("/api/stats", response_model=StatsResponse)
    def stats() -> StatsResponse:
        summary = app.state.monitor.summary()
        return StatsResponse(
            threats_detected=summary["threats_detected"],
            events_buffered=summary["events_buffered"],
            managed_users=len(app.state.directory.list_users()),
            active_users=app.state.directory.active_count(),
        )

    @app.get("/api/users", response_model=List[UserResponse])
    def list_users() -> List[UserResponse]:
        return [_serialize_user(record) for record in app.state.directory.list_users()]

    @app.post("/api/users", response_model=UserResponse, status_code=201)
    def create_user(request: UserCreateRequest) -> UserResponse:
        try:
            record = app.state.directory.create(
                name=request.name,
                email=request.email,
                role=request.role,
                usual_country=request.usual_country,
            )
        except DuplicateUser as exc:
            raise HTTPException(status_code=409, detail="User already exists") from exc
        return _serialize_user(record)

    @app.post("/api/users/{user_id}/toggle-status", response_model=UserResponse)
    def toggle_user_status(user_id: int) -> UserResponse:
        try:
            record = app.state.directory.toggle_status(user_id)
        except UserNotFound as exc:
            raise HTTPException(status_code=404, detail="User not found") from exc
        return _serialize_user(record)

    @app.delete("/api/users/{user_id}")
    def delete_user(user_id: int) -> Dict[str, str]:
        try:
            app.state.directory.delete(user_id)
        except UserNotFound as exc:
            raise HTTPException(status_code=404, detail="User not found") from exc
        return {"status": "deleted"}

    return app


app = create_app()
