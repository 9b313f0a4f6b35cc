"""
Injectable time source.

Services take a clock instead of calling ``timezone.now()`` directly so that
invoice numbers and timestamps are reproducible under test.
"""

from datetime import datetime

from django.utils import timezone


class Clock:
    """Wall clock backed by Django's timezone-aware ``now``."""

    def now(self) -> datetime:
        return timezone.now()


class FixedClock(Clock):
    """Clock frozen at a given instant; ``advance`` moves it forward."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def advance(self, delta):
        self.instant = self.instant + delta
        return self.instant
