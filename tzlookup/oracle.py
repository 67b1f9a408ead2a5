"""
tzlookup Zone Oracle

The finder never computes offsets or transition rules itself. It relies on an
oracle that answers three questions:

    is_known(zone_id)        is the identifier in the runtime zone database?
    get_zone(zone_id)        the resolved zone object, or None if unknown
    offset_at(zone, when)    (total UTC offset in seconds, DST active?)

ZoneInfoOracle answers them from the stdlib zoneinfo database (system tzdata
or the ``tzdata`` package).

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, FrozenSet, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones


class ZoneOracle(ABC):
    """Capability interface for zone identity and offset queries."""

    @abstractmethod
    def is_known(self, zone_id: str) -> bool:
        """Return True if ``zone_id`` is a recognized zone identifier."""

    @abstractmethod
    def get_zone(self, zone_id: str) -> Optional[Any]:
        """Resolve ``zone_id``; None stands in for the unknown zone."""

    @abstractmethod
    def zone_id(self, zone: Any) -> str:
        """Return the identifier of a resolved zone."""

    @abstractmethod
    def offset_at(self, zone: Any, when: datetime) -> Tuple[int, bool]:
        """Return (total UTC offset in seconds, is DST active) at ``when``."""


def as_utc_instant(when: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when


class ZoneInfoOracle(ZoneOracle):
    """ZoneOracle backed by ``zoneinfo``."""

    def __init__(self) -> None:
        self._available: Optional[FrozenSet[str]] = None
        self._lock = threading.Lock()

    def available_ids(self) -> FrozenSet[str]:
        with self._lock:
            if self._available is None:
                self._available = frozenset(available_timezones())
            return self._available

    def is_known(self, zone_id: str) -> bool:
        return zone_id in self.available_ids()

    def get_zone(self, zone_id: str) -> Optional[ZoneInfo]:
        if not self.is_known(zone_id):
            return None
        try:
            return ZoneInfo(zone_id)
        except (ZoneInfoNotFoundError, ValueError):
            return None

    def zone_id(self, zone: Any) -> str:
        return zone.key

    def offset_at(self, zone: Any, when: datetime) -> Tuple[int, bool]:
        local = as_utc_instant(when).astimezone(zone)
        offset = local.utcoffset() or timedelta(0)
        dst = local.dst() or timedelta(0)
        return int(offset.total_seconds()), dst != timedelta(0)


_default_oracle: Optional[ZoneInfoOracle] = None
_default_oracle_lock = threading.Lock()


def get_default_oracle() -> ZoneInfoOracle:
    """Get the shared zoneinfo oracle."""
    global _default_oracle
    with _default_oracle_lock:
        if _default_oracle is None:
            _default_oracle = ZoneInfoOracle()
        return _default_oracle
