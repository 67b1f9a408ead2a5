"""
tzlookup Document Walker

Drives structural navigation over a tzlookup document:

    <timezones ianaversion="2017b">
      <countryzones>
        <country code="us" default="America/New_York">
          <id>America/New_York</id>
          ...
          <id>America/Los_Angeles</id>
        </country>
        <country code="gb" default="Europe/London">
          <id>Europe/London</id>
        </country>
      </countryzones>
    </timezones>

Traversal states:

    SeekOuter → SeekInner → {IterateCountry}* → AssertInnerEnd
              → ConsumeTrailingToOuterEnd → AssertOuterEnd → Done

Unknown elements anywhere are skipped. Each traversal opens one reader from
the supplier and closes it on every exit path.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

from typing import Optional, Tuple

from tzlookup.cursor import DocumentCursor
from tzlookup.errors import MissingAttribute, TimeZoneDataError
from tzlookup.navigation import (
    assert_on_end,
    consume_through_end,
    find_optional_start_tag,
    find_required_start_tag,
    read_element_text,
)
from tzlookup.observability import TzLayer, get_logger, timed_operation
from tzlookup.processors import CountryZonesProcessor, ProcessResult
from tzlookup.sources import ReaderSupplier

TIMEZONES_ELEMENT = "timezones"
IANA_VERSION_ATTRIBUTE = "ianaversion"
COUNTRY_ZONES_ELEMENT = "countryzones"
COUNTRY_ELEMENT = "country"
COUNTRY_CODE_ATTRIBUTE = "code"
DEFAULT_TIME_ZONE_ID_ATTRIBUTE = "default"
ID_ELEMENT = "id"

logger = get_logger("walker", TzLayer.PARSER)


@timed_operation(logger, "process_xml")
def process_xml(supplier: ReaderSupplier, processor: CountryZonesProcessor) -> ProcessResult:
    """
    Walk the document, feeding each <country> to ``processor``.

    Returns HALT if the processor stopped the traversal early, CONTINUE if the
    whole document was read. Structural and data problems raise
    TimeZoneParseError subclasses; an unreadable source raises
    SourceUnavailable.
    """
    with supplier.open() as stream:
        cursor = DocumentCursor(stream)

        find_required_start_tag(cursor, TIMEZONES_ELEMENT)

        # ianaversion is optional metadata. Only <countryzones> is expected
        # inside <timezones>; anything before it is skipped.
        find_required_start_tag(cursor, COUNTRY_ZONES_ELEMENT)

        if process_country_zones(cursor, processor) is ProcessResult.HALT:
            return ProcessResult.HALT

        assert_on_end(cursor, COUNTRY_ZONES_ELEMENT)
        cursor.advance()

        # Skip anything up to </timezones>, which also proves the document
        # is not truncated.
        consume_through_end(cursor, TIMEZONES_ELEMENT)
        assert_on_end(cursor, TIMEZONES_ELEMENT)
    return ProcessResult.CONTINUE


def process_country_zones(cursor: DocumentCursor, processor: CountryZonesProcessor) -> ProcessResult:
    while find_optional_start_tag(cursor, COUNTRY_ELEMENT):
        code = cursor.attribute(COUNTRY_CODE_ATTRIBUTE)
        if not code:
            raise MissingAttribute("Unable to find country code", cursor.position_description)
        default_time_zone_id = cursor.attribute(DEFAULT_TIME_ZONE_ID_ATTRIBUTE)
        if not default_time_zone_id:
            raise MissingAttribute(
                "Unable to find default time zone ID", cursor.position_description,
            )

        debug_info = cursor.position_description
        time_zone_ids = parse_zone_ids(cursor)
        if processor.process(code, default_time_zone_id, time_zone_ids, debug_info) is ProcessResult.HALT:
            return ProcessResult.HALT

        assert_on_end(cursor, COUNTRY_ELEMENT)

    return ProcessResult.CONTINUE


def parse_zone_ids(cursor: DocumentCursor) -> Tuple[str, ...]:
    time_zone_ids = []
    while find_optional_start_tag(cursor, ID_ELEMENT):
        zone_id = read_element_text(cursor)
        assert_on_end(cursor, ID_ELEMENT)
        time_zone_ids.append(zone_id)
    return tuple(time_zone_ids)


def read_iana_version(supplier: ReaderSupplier) -> Optional[str]:
    """
    Return the ianaversion attribute of <timezones>, or None if it is missing
    or the document cannot be read.
    """
    try:
        with supplier.open() as stream:
            cursor = DocumentCursor(stream)
            find_required_start_tag(cursor, TIMEZONES_ELEMENT)
            return cursor.attribute(IANA_VERSION_ATTRIBUTE)
    except TimeZoneDataError as e:
        logger.debug("Unable to read IANA version", error=str(e), source=supplier.description)
        return None
