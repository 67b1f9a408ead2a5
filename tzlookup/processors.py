"""
tzlookup Country Zones Processors

A processor receives each <country> record the walker extracts and decides
whether the traversal continues. Problems with the data are reported by
raising a TimeZoneParseError subclass, which aborts the traversal.

    CountryZonesValidator               whole-document checks, never halts
    SelectiveCountryTimeZonesExtractor  one country, halts on the match

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol, Sequence, Set

from tzlookup.errors import (
    DefaultNotInZoneList,
    DuplicateCountryCode,
    EmptyZoneList,
    NonNormalizedCountryCode,
)
from tzlookup.oracle import ZoneOracle
from tzlookup.registry import (
    CountryTimeZones,
    create_validated_country_time_zones,
    normalize_country_iso,
)


class ProcessResult(Enum):
    CONTINUE = "continue"
    HALT = "halt"


class CountryZonesProcessor(Protocol):
    def process(
        self,
        country_iso: str,
        default_time_zone_id: str,
        time_zone_ids: Sequence[str],
        debug_info: str,
    ) -> ProcessResult:
        """
        Return CONTINUE to keep reading, HALT to stop without error. Invalid
        data is reported by raising.
        """
        ...


class CountryZonesValidator:
    """
    Validates <countryzones> before a proposed installation of new data.

    Country codes must be normalized and unique, the zone list must not be
    empty and must contain the default. Zone ids are not checked against the
    runtime zone database, which may not know about newly added ids yet.
    """

    def __init__(self) -> None:
        self._known_country_codes: Set[str] = set()

    def process(
        self,
        country_iso: str,
        default_time_zone_id: str,
        time_zone_ids: Sequence[str],
        debug_info: str,
    ) -> ProcessResult:
        if normalize_country_iso(country_iso) != country_iso:
            raise NonNormalizedCountryCode(
                f"Country code: {country_iso} is not normalized", country_iso, debug_info,
            )
        if country_iso in self._known_country_codes:
            raise DuplicateCountryCode(
                f"Second entry for country code: {country_iso}", country_iso, debug_info,
            )
        if not time_zone_ids:
            raise EmptyZoneList(
                f"No time zone IDs for country code: {country_iso}", country_iso, debug_info,
            )
        if default_time_zone_id not in set(time_zone_ids):
            raise DefaultNotInZoneList(
                f"defaultTimeZoneId for country code: {country_iso} is not one of the "
                f"zones {list(time_zone_ids)}",
                country_iso,
                debug_info,
            )
        self._known_country_codes.add(country_iso)
        return ProcessResult.CONTINUE


class SelectiveCountryTimeZonesExtractor:
    """
    Extracts validated zone information for one country code and halts on
    the match. Non-matching records are skipped without validation.
    """

    def __init__(self, country_code_to_match: str, oracle: Optional[ZoneOracle] = None):
        self._country_code_to_match = country_code_to_match
        self._oracle = oracle
        self.validated_country_time_zones: Optional[CountryTimeZones] = None

    def process(
        self,
        country_iso: str,
        default_time_zone_id: str,
        time_zone_ids: Sequence[str],
        debug_info: str,
    ) -> ProcessResult:
        country_iso = normalize_country_iso(country_iso)
        if country_iso != self._country_code_to_match:
            return ProcessResult.CONTINUE

        self.validated_country_time_zones = create_validated_country_time_zones(
            country_iso, default_time_zone_id, time_zone_ids, debug_info, oracle=self._oracle,
        )
        return ProcessResult.HALT
