"""
tzlookup — Country Time Zone Finder

Resolves, for a country code, the time zone identifiers used in that country,
a default identifier, and the zone matching an observed UTC offset and DST
state at a given instant. The data comes from a tzlookup.xml document that is
updated independently of the runtime zone database.

Architecture
────────────

    ┌─────────────────────────────────────────────────────────────────────────┐
    │  finder.py      TimeZoneFinder facade, last-country cache               │
    │  registry.py    CountryTimeZones records, offset/DST matching           │
    │  processors.py  Whole-document validator, selective extractor           │
    │  walker.py      <timezones>/<countryzones>/<country> traversal          │
    │  navigation.py  Depth-tracking element seeking                          │
    │  cursor.py      Pull cursor over the lxml feed parser                   │
    │                                                                          │
    │  oracle.py      zoneinfo-backed zone identity and offsets               │
    │  sources.py     Reusable reader factories                               │
    │  config.py      YAML / environment configuration                        │
    │  observability.py  Structured logging                                   │
    │  cli.py         Command-line interface                                  │
    └─────────────────────────────────────────────────────────────────────────┘

Copyright (c) 2026 Momentum. All rights reserved.
"""

__version__ = "1.0.0"


# Lazy imports keep `import tzlookup` cheap and free of lxml until needed.
def __getattr__(name):
    """Lazy import tzlookup modules on first access."""

    if name in ("TimeZoneFinder", "get_instance", "reset_instance", "EMPTY_DOCUMENT"):
        from tzlookup import finder
        return getattr(finder, name)

    if name in ("CountryTimeZones", "create_validated_country_time_zones",
                "lookup_by_offset", "normalize_country_iso"):
        from tzlookup import registry
        return getattr(registry, name)

    if name in ("ZoneOracle", "ZoneInfoOracle", "get_default_oracle"):
        from tzlookup import oracle
        return getattr(oracle, name)

    if name in ("ReaderSupplier",):
        from tzlookup import sources
        return getattr(sources, name)

    if name in ("TimeZoneDataError", "TimeZoneParseError", "SourceUnavailable",
                "CountryZonesValidationError"):
        from tzlookup import errors
        return getattr(errors, name)

    raise AttributeError(f"module 'tzlookup' has no attribute '{name}'")


__all__ = [
    "__version__",
    "TimeZoneFinder",
    "get_instance",
    "reset_instance",
    "CountryTimeZones",
    "create_validated_country_time_zones",
    "lookup_by_offset",
    "normalize_country_iso",
    "ZoneOracle",
    "ZoneInfoOracle",
    "ReaderSupplier",
    "TimeZoneDataError",
    "TimeZoneParseError",
    "SourceUnavailable",
    "CountryZonesValidationError",
]
