"""
tzlookup Finder

TimeZoneFinder answers per-country time zone questions from a tzlookup
document:

    finder = TimeZoneFinder.create_instance("/path/to/tzlookup.xml")
    finder.lookup_default_time_zone_id_by_country("GB")   # "Europe/London"
    finder.lookup_time_zone_ids_by_country("us")          # ("America/New_York", ...)
    finder.lookup_time_zone_by_country_and_offset(
        "us", -5 * 3600, False, datetime(2026, 1, 1, tzinfo=timezone.utc))

The finder remembers the last country it resolved. A lookup for another
country re-reads the document and replaces that entry only if the country is
found; failed lookups leave it untouched. Lookups never raise for bad data:
errors are logged and reported as None. validate() is the only operation that
surfaces document errors.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

from tzlookup.config import get_config
from tzlookup.errors import SourceUnavailable, TimeZoneDataError
from tzlookup.observability import TzLayer, get_logger
from tzlookup.oracle import ZoneOracle, get_default_oracle
from tzlookup.processors import CountryZonesValidator, SelectiveCountryTimeZonesExtractor
from tzlookup.registry import CountryTimeZones, normalize_country_iso
from tzlookup.sources import ReaderSupplier
from tzlookup.walker import process_xml, read_iana_version

EMPTY_DOCUMENT = "<timezones><countryzones /></timezones>"

logger = get_logger("finder", TzLayer.FINDER)


class TimeZoneFinder:
    """A structure that can find matching time zones."""

    def __init__(self, xml_source: ReaderSupplier, oracle: Optional[ZoneOracle] = None):
        self._xml_source = xml_source
        self._oracle = oracle or get_default_oracle()
        self._lock = threading.Lock()
        self._last_country_time_zones: Optional[CountryTimeZones] = None

    # ─── construction ────────────────────────────────────────────────────

    @classmethod
    def create_instance(
        cls,
        path: Union[str, Path],
        oracle: Optional[ZoneOracle] = None,
    ) -> "TimeZoneFinder":
        """
        Finder over a specific data file.

        Raises SourceUnavailable if the file does not exist or is not a
        regular file. The content is not validated, see validate().
        """
        return cls(ReaderSupplier.for_file(path), oracle=oracle)

    @classmethod
    def create_instance_for_string(
        cls,
        xml: str,
        oracle: Optional[ZoneOracle] = None,
    ) -> "TimeZoneFinder":
        return cls(ReaderSupplier.for_string(xml), oracle=oracle)

    @classmethod
    def create_instance_with_fallback(
        cls,
        *paths: Union[str, Path],
        oracle: Optional[ZoneOracle] = None,
    ) -> "TimeZoneFinder":
        """
        Finder over the first usable path.

        Files are assumed to have been validated before installation, so no
        validation cost is paid here. If none of the paths is usable an error
        is logged and a finder over an empty document is returned.
        """
        failures: List[str] = []
        for path in paths:
            try:
                return cls.create_instance(path, oracle=oracle)
            except SourceUnavailable as e:
                # The first candidate is routinely absent; only report if all fail.
                failures.append(str(e))

        logger.error(
            "No valid file found, falling back to empty data",
            error_code=SourceUnavailable.error_code,
            paths=[str(p) for p in paths],
            failures=failures,
        )
        return cls.create_instance_for_string(EMPTY_DOCUMENT, oracle=oracle)

    @property
    def source(self) -> ReaderSupplier:
        return self._xml_source

    # ─── document-level operations ───────────────────────────────────────

    def validate(self) -> None:
        """
        Read the whole document and check every <country> record.

        Raises:
            TimeZoneDataError: the document is unreadable or invalid
        """
        process_xml(self._xml_source, CountryZonesValidator())

    def get_iana_version(self) -> Optional[str]:
        """
        The IANA rules version associated with the data, or None if there is
        no version information or the document cannot be read.
        """
        return read_iana_version(self._xml_source)

    # ─── lookups ─────────────────────────────────────────────────────────

    def lookup_time_zone_by_country_and_offset(
        self,
        country_iso: str,
        offset_seconds: int,
        is_dst: bool,
        when: datetime,
        bias: Union[str, Any, None] = None,
    ) -> Optional[Any]:
        """
        Return a zone that has (or would have had) the given total UTC offset
        and DST state at ``when`` in the country.

        If several zones match and one of them is the (optional) bias zone, the
        bias is returned. Otherwise the first match in document order is.
        """
        country_time_zones = self._find_country_time_zones(normalize_country_iso(country_iso))
        if country_time_zones is None:
            return None
        return country_time_zones.lookup_by_offset(offset_seconds, is_dst, when, bias)

    def lookup_default_time_zone_id_by_country(self, country_iso: str) -> Optional[str]:
        """
        A zone id known to be used in the country and presumed to be the best
        choice when only the country is known, or None.
        """
        country_time_zones = self._find_country_time_zones(normalize_country_iso(country_iso))
        return None if country_time_zones is None else country_time_zones.default_time_zone_id

    def lookup_time_zones_by_country(self, country_iso: str) -> Optional[Tuple[Any, ...]]:
        """
        Resolved zones used in the country, or None if the country is unknown.
        May be empty when the data references only unknown zone ids.
        """
        country_time_zones = self._find_country_time_zones(normalize_country_iso(country_iso))
        return None if country_time_zones is None else country_time_zones.time_zones

    def lookup_time_zone_ids_by_country(self, country_iso: str) -> Optional[Tuple[str, ...]]:
        """
        Zone ids used in the country, or None if the country is unknown. May be
        empty when the data references only unknown zone ids.
        """
        country_time_zones = self._find_country_time_zones(normalize_country_iso(country_iso))
        return None if country_time_zones is None else country_time_zones.time_zone_ids

    def _find_country_time_zones(self, country_iso: str) -> Optional[CountryTimeZones]:
        with self._lock:
            cached = self._last_country_time_zones
        if cached is not None and cached.country_iso == country_iso:
            return cached

        extractor = SelectiveCountryTimeZonesExtractor(country_iso, oracle=self._oracle)
        try:
            process_xml(self._xml_source, extractor)
        except TimeZoneDataError as e:
            logger.warning(
                "Error reading country zones",
                error_code=e.error_code,
                country_iso=country_iso,
                error=str(e),
            )
            return None

        country_time_zones = extractor.validated_country_time_zones
        if country_time_zones is None:
            # No match: keep whatever is cached.
            return None

        with self._lock:
            self._last_country_time_zones = country_time_zones
        return country_time_zones


# =============================================================================
# DEFAULT INSTANCE
# =============================================================================

_instance: Optional[TimeZoneFinder] = None
_instance_lock = threading.Lock()


def get_instance(paths: Optional[Sequence[Union[str, Path]]] = None) -> TimeZoneFinder:
    """
    The process-wide finder, created on first use over the first usable data
    path (configured ``data.paths`` unless ``paths`` is given).
    """
    global _instance
    with _instance_lock:
        if _instance is None:
            if paths is None:
                paths = get_config().data.paths.get()
            _instance = TimeZoneFinder.create_instance_with_fallback(*paths)
        return _instance


def reset_instance() -> None:
    global _instance
    with _instance_lock:
        _instance = None
