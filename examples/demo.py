import logging
import random
from datetime import datetime, timedelta, timezone

from casb_anomaly import (
    ActivityEvent,
    ActivityScheduler,
    EventAction,
    ManualTicker,
    MonitorConfig,
    SecurityMonitor,
)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    now = datetime.now(timezone.utc)
    monitor = SecurityMonitor(MonitorConfig())
    monitor.register_user("alice.jones@example.com", "India")
    monitor.register_user("bob.smith@example.com", "USA")

    ticker = ManualTicker()
    scheduler = ActivityScheduler(monitor, ticker, rng=random.Random(7))
    scheduler.start()

    monitor.ingest(
        ActivityEvent(
            now - timedelta(minutes=3),
            "bob.smith@example.com",
            EventAction.LOGIN,
            {"ip": "203.0.113.5", "location": "New York, USA"},
        )
    )
    ticker.advance(3)
    event = scheduler.simulate_anomaly()
    print("Simulated event:", event.user, event.details["location"])

    # a second pass over the same window reports nothing new
    monitor.run_detection()

    print("Buffered events:", len(monitor.events))
    for threat in monitor.threats_by_recency():
        print(f"- {threat.type.value} [{threat.status.value}] {threat.user} {threat.ip} :: {threat.details}")


if __name__ == "__main__":
    main()
