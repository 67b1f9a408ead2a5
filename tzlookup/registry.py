"""
tzlookup Country Zone Registry

Validated per-country zone records and the offset/DST matching algorithm.

A CountryTimeZones record is built once per successful extraction and never
mutated afterwards; the resolved zone objects are derived from it lazily.
Runtime construction is lenient: zone ids unknown to the oracle are dropped
and an unknown default becomes None, because the document and the runtime
zone database are updated independently.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any, Iterable, Optional, Sequence, Tuple, Union

from tzlookup.observability import TzLayer, get_logger
from tzlookup.oracle import ZoneOracle, get_default_oracle

logger = get_logger("registry", TzLayer.REGISTRY)


def normalize_country_iso(country_iso: str) -> str:
    """Lowercase is the canonical form of a country code; str.lower() ignores the locale."""
    return country_iso.lower()


class CountryTimeZones:
    """
    Information about a country's time zones.

    ``time_zone_ids`` is in document ("priority") order and may be empty when
    none of the configured ids were recognized. ``default_time_zone_id`` may
    be None when the configured default was not recognized.
    """

    def __init__(
        self,
        country_iso: str,
        default_time_zone_id: Optional[str],
        time_zone_ids: Iterable[str],
        oracle: Optional[ZoneOracle] = None,
    ):
        self._country_iso = country_iso
        self._default_time_zone_id = default_time_zone_id
        self._time_zone_ids: Tuple[str, ...] = tuple(time_zone_ids)
        self._oracle = oracle or get_default_oracle()
        self._time_zones: Optional[Tuple[Any, ...]] = None
        self._lock = threading.Lock()

    @property
    def country_iso(self) -> str:
        return self._country_iso

    @property
    def default_time_zone_id(self) -> Optional[str]:
        return self._default_time_zone_id

    @property
    def time_zone_ids(self) -> Tuple[str, ...]:
        return self._time_zone_ids

    @property
    def time_zones(self) -> Tuple[Any, ...]:
        """Resolved zones in ``time_zone_ids`` order, computed once."""
        with self._lock:
            if self._time_zones is None:
                resolved = []
                for zone_id in self._time_zone_ids:
                    zone = self._oracle.get_zone(zone_id)
                    # Ids were filtered at construction; the oracle may have changed since.
                    if zone is None:
                        logger.warning("Skipping invalid zone", zone_id=zone_id,
                                       country_iso=self._country_iso)
                        continue
                    resolved.append(zone)
                self._time_zones = tuple(resolved)
            return self._time_zones

    def lookup_by_offset(
        self,
        offset_seconds: int,
        is_dst: bool,
        when: datetime,
        bias: Union[str, Any, None] = None,
    ) -> Optional[Any]:
        return lookup_by_offset(
            self.time_zones, offset_seconds, is_dst, when, bias, oracle=self._oracle,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CountryTimeZones):
            return NotImplemented
        return (
            self._country_iso == other._country_iso
            and self._default_time_zone_id == other._default_time_zone_id
            and self._time_zone_ids == other._time_zone_ids
        )

    def __hash__(self) -> int:
        return hash((self._country_iso, self._default_time_zone_id, self._time_zone_ids))

    def __repr__(self) -> str:
        return (
            f"CountryTimeZones(country_iso={self._country_iso!r}, "
            f"default_time_zone_id={self._default_time_zone_id!r}, "
            f"time_zone_ids={list(self._time_zone_ids)!r})"
        )


def create_validated_country_time_zones(
    country_iso: str,
    default_time_zone_id: str,
    country_time_zone_ids: Sequence[str],
    debug_info: str,
    oracle: Optional[ZoneOracle] = None,
) -> CountryTimeZones:
    """
    Build a record keeping only ids the oracle recognizes.

    The default is not required to be one of the country's zones at runtime;
    it only has to be recognized, otherwise it is left as None.
    """
    oracle = oracle or get_default_oracle()

    valid_ids = []
    for zone_id in country_time_zone_ids:
        if oracle.is_known(zone_id):
            valid_ids.append(zone_id)
        else:
            logger.warning("Skipping invalid zone", zone_id=zone_id, position=debug_info)

    default_id: Optional[str] = default_time_zone_id
    if not oracle.is_known(default_time_zone_id):
        logger.warning("Invalid default time zone ID", zone_id=default_time_zone_id,
                       position=debug_info)
        default_id = None

    return CountryTimeZones(country_iso, default_id, valid_ids, oracle=oracle)


def lookup_by_offset(
    candidates: Sequence[Any],
    offset_seconds: int,
    is_dst: bool,
    when: datetime,
    bias: Union[str, Any, None] = None,
    oracle: Optional[ZoneOracle] = None,
) -> Optional[Any]:
    """
    Return the zone that has (or would have had) the given total UTC offset
    and DST state at ``when``.

    Candidates are considered in order. Without a bias the first match wins.
    With a bias, a matching candidate whose id equals the bias id wins
    wherever it appears; otherwise the first match is returned.
    """
    oracle = oracle or get_default_oracle()
    bias_id: Optional[str] = None
    if bias is not None:
        bias_id = bias if isinstance(bias, str) else oracle.zone_id(bias)

    first_match = None
    for candidate in candidates:
        if not offset_matches_at_time(oracle, candidate, offset_seconds, is_dst, when):
            continue

        if first_match is None:
            if bias_id is None:
                return candidate
            first_match = candidate

        if oracle.zone_id(candidate) == bias_id:
            return candidate

    return first_match


def offset_matches_at_time(
    oracle: ZoneOracle,
    zone: Any,
    offset_seconds: int,
    is_dst: bool,
    when: datetime,
) -> bool:
    zone_offset, zone_is_dst = oracle.offset_at(zone, when)
    if zone_is_dst != is_dst:
        return False
    return zone_offset == offset_seconds
