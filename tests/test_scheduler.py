import asyncio
import random
import time
from datetime import datetime, timezone

import pytest

from casb_anomaly import (
    ActivityEvent,
    ActivityScheduler,
    AsyncioTicker,
    EventAction,
    ManualTicker,
    MonitorConfig,
    SecurityMonitor,
    ThreatType,
)

NOW = datetime(2025, 9, 2, 12, 0, tzinfo=timezone.utc)


def build_scheduler(users=("alice.jones@example.com",), seed: int = 3):
    monitor = SecurityMonitor(MonitorConfig(), clock=lambda: NOW)
    for user in users:
        monitor.register_user(user, "India")
    ticker = ManualTicker()
    scheduler = ActivityScheduler(monitor, ticker, rng=random.Random(seed))
    scheduler.start()
    return monitor, ticker, scheduler


def test_tick_appends_one_benign_event_for_known_user():
    monitor, ticker, _ = build_scheduler()

    ticker.advance()

    events = monitor.recent_events()
    assert len(events) == 1
    event = events[0]
    assert event.user == "alice.jones@example.com"
    assert event.action is EventAction.FILE_ACCESS
    assert event.details == {"app": "Microsoft 365", "file": "document.xlsx", "location": "Bhopal, India"}
    assert event.timestamp == NOW
    assert len(monitor.threats) == 0


def test_seeded_rng_picks_reproducible_users():
    users = ("a@example.com", "b@example.com", "c@example.com")
    first, first_ticker, _ = build_scheduler(users, seed=11)
    second, second_ticker, _ = build_scheduler(users, seed=11)

    first_ticker.advance(5)
    second_ticker.advance(5)

    assert [e.user for e in first.recent_events()] == [e.user for e in second.recent_events()]


def test_tick_without_users_only_runs_detection():
    monitor, ticker, _ = build_scheduler(users=())
    ticker.advance(2)
    assert len(monitor.events) == 0


def test_simulate_anomaly_detects_synchronously():
    monitor, _, scheduler = build_scheduler()

    event = scheduler.simulate_anomaly()

    assert event.action is EventAction.LOGIN
    assert event.details["location"] == "Frankfurt, Germany"
    threats = monitor.threats_by_recency()
    assert len(threats) == 1
    assert threats[0].type is ThreatType.UNUSUAL_LOGIN_LOCATION
    assert threats[0].source_event_id == event.event_id


def test_ticks_after_simulation_do_not_duplicate_threat():
    monitor, ticker, scheduler = build_scheduler()
    scheduler.simulate_anomaly()

    ticker.advance(3)

    assert len(monitor.threats) == 1


def test_manual_ticker_requires_start():
    ticker = ManualTicker()
    with pytest.raises(RuntimeError):
        ticker.advance()


def test_stopped_scheduler_detaches_ticker():
    _, ticker, scheduler = build_scheduler()
    scheduler.stop()
    assert ticker.running is False


def test_asyncio_ticker_fires_until_stopped():
    calls = []

    async def scenario():
        ticker = AsyncioTicker(interval=0.01)
        ticker.start(lambda: calls.append(1))
        assert ticker.running
        await asyncio.sleep(0.1)
        ticker.stop()
        fired = len(calls)
        await asyncio.sleep(0.05)
        return fired

    fired = asyncio.run(scenario())
    assert fired >= 1
    # at most the tick already handed to the executor completes after stop
    assert len(calls) <= fired + 1


def test_asyncio_ticker_survives_failing_callback():
    calls = []

    def flaky():
        calls.append(1)
        raise ValueError("boom")

    async def scenario():
        ticker = AsyncioTicker(interval=0.01)
        ticker.start(flaky)
        await asyncio.sleep(0.1)
        ticker.stop()

    asyncio.run(scenario())
    assert len(calls) >= 2


def test_slow_tick_does_not_block_event_loop():
    started = []

    def slow_tick():
        started.append(time.monotonic())
        time.sleep(0.3)

    async def scenario():
        ticker = AsyncioTicker(interval=0.01)
        ticker.start(slow_tick)
        worst_gap = 0.0
        last = time.monotonic()
        for _ in range(30):
            await asyncio.sleep(0.01)
            now = time.monotonic()
            worst_gap = max(worst_gap, now - last)
            last = now
        ticker.stop()
        return worst_gap

    worst_gap = asyncio.run(scenario())
    assert started
    assert worst_gap < 0.2


def test_scheduled_notification_runs_off_the_loop():
    notified = []

    def slow_notifier(threat):
        time.sleep(0.3)
        notified.append(threat)

    monitor = SecurityMonitor(MonitorConfig(), clock=lambda: NOW, notifier=slow_notifier)
    monitor.register_user("alice.jones@example.com", "India")
    monitor.append_event(
        ActivityEvent(
            NOW,
            "alice.jones@example.com",
            EventAction.LOGIN,
            {"ip": "95.12.110.8", "location": "Frankfurt, Germany"},
        )
    )
    scheduler = ActivityScheduler(monitor, AsyncioTicker(interval=0.01), rng=random.Random(1))

    async def scenario():
        scheduler.start()
        worst_gap = 0.0
        last = time.monotonic()
        for _ in range(25):
            await asyncio.sleep(0.01)
            now = time.monotonic()
            worst_gap = max(worst_gap, now - last)
            last = now
        scheduler.stop()
        return worst_gap

    worst_gap = asyncio.run(scenario())
    assert worst_gap < 0.2
    assert len(notified) == 1
    assert notified[0].user == "alice.jones@example.com"
