"""
tzlookup Error Taxonomy

Every failure raised while reading or validating a tzlookup document derives
from TimeZoneDataError, so callers that only care about "do not trust this
document" can catch a single type.

    TimeZoneDataError
    ├─ SourceUnavailable
    └─ TimeZoneParseError
       ├─ MalformedDocument
       ├─ MissingElement
       ├─ UnexpectedEof
       ├─ UnexpectedDepth
       ├─ UnexpectedEndTag
       ├─ UnexpectedTag
       ├─ MissingText
       ├─ UnexpectedTrailingContent
       ├─ MissingAttribute
       └─ CountryZonesValidationError
          ├─ DuplicateCountryCode
          ├─ EmptyZoneList
          ├─ DefaultNotInZoneList
          └─ NonNormalizedCountryCode

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

from typing import Optional


class TimeZoneDataError(Exception):
    """Base exception for tzlookup data failures."""

    error_code = "TZ_DATA"

    def __init__(self, message: str, position: Optional[str] = None):
        self.message = message
        self.position = position
        if position:
            super().__init__(f"{message} at {position}")
        else:
            super().__init__(message)


class SourceUnavailable(TimeZoneDataError):
    """The document reader could not be created or opened."""

    error_code = "TZ_SOURCE_UNAVAILABLE"


# =============================================================================
# STRUCTURAL ERRORS
# =============================================================================

class TimeZoneParseError(TimeZoneDataError):
    """The document is not structured as expected."""

    error_code = "TZ_PARSE"


class MalformedDocument(TimeZoneParseError):
    """The underlying tokenizer rejected the input."""

    error_code = "TZ_MALFORMED"


class MissingElement(TimeZoneParseError):
    error_code = "TZ_MISSING_ELEMENT"


class UnexpectedEof(TimeZoneParseError):
    error_code = "TZ_UNEXPECTED_EOF"


class UnexpectedDepth(TimeZoneParseError):
    error_code = "TZ_UNEXPECTED_DEPTH"


class UnexpectedEndTag(TimeZoneParseError):
    error_code = "TZ_UNEXPECTED_END_TAG"


class UnexpectedTag(TimeZoneParseError):
    error_code = "TZ_UNEXPECTED_TAG"


class MissingText(TimeZoneParseError):
    error_code = "TZ_MISSING_TEXT"


class UnexpectedTrailingContent(TimeZoneParseError):
    error_code = "TZ_TRAILING_CONTENT"


class MissingAttribute(TimeZoneParseError):
    error_code = "TZ_MISSING_ATTRIBUTE"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================

class CountryZonesValidationError(TimeZoneParseError):
    """A <country> record violates a whole-document invariant."""

    error_code = "TZ_INVALID_COUNTRY"

    def __init__(self, message: str, country_iso: str, position: Optional[str] = None):
        self.country_iso = country_iso
        super().__init__(message, position)


class DuplicateCountryCode(CountryZonesValidationError):
    error_code = "TZ_DUPLICATE_COUNTRY"


class EmptyZoneList(CountryZonesValidationError):
    error_code = "TZ_EMPTY_ZONE_LIST"


class DefaultNotInZoneList(CountryZonesValidationError):
    error_code = "TZ_DEFAULT_NOT_IN_ZONES"


class NonNormalizedCountryCode(CountryZonesValidationError):
    error_code = "TZ_NON_NORMALIZED_COUNTRY"
