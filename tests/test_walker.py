"""
tzlookup Document Walker and Processor Tests

Covers the <timezones>/<countryzones>/<country> traversal, early halting,
whole-document validation and the IANA version accessor.

Run with: pytest tests/test_walker.py -v
"""

import pytest

from tzlookup.errors import (
    CountryZonesValidationError,
    DefaultNotInZoneList,
    DuplicateCountryCode,
    EmptyZoneList,
    MalformedDocument,
    MissingAttribute,
    MissingElement,
    MissingText,
    NonNormalizedCountryCode,
    SourceUnavailable,
    TimeZoneParseError,
    UnexpectedEof,
)
from tzlookup.processors import (
    CountryZonesValidator,
    ProcessResult,
    SelectiveCountryTimeZonesExtractor,
)
from tzlookup.sources import ReaderSupplier
from tzlookup.walker import process_xml, read_iana_version


class RecordingProcessor:
    """Records every country it sees; halts after ``halt_after`` records."""

    def __init__(self, halt_after=None):
        self.records = []
        self.halt_after = halt_after

    def process(self, country_iso, default_time_zone_id, time_zone_ids, debug_info):
        self.records.append((country_iso, default_time_zone_id, time_zone_ids))
        if self.halt_after is not None and len(self.records) >= self.halt_after:
            return ProcessResult.HALT
        return ProcessResult.CONTINUE


def walk(xml, processor=None):
    processor = processor or RecordingProcessor()
    result = process_xml(ReaderSupplier.for_string(xml), processor)
    return result, processor


def country(code, default, *ids):
    body = "".join(f"<id>{i}</id>" for i in ids)
    return f'<country code="{code}" default="{default}">{body}</country>'


def document(*countries, version="2017c"):
    return f'<timezones ianaversion="{version}"><countryzones>{"".join(countries)}</countryzones></timezones>'


# =============================================================================
# TRAVERSAL
# =============================================================================


class TestTraversal:

    def test_records_in_document_order(self, sample_xml):
        result, processor = walk(sample_xml)
        assert result is ProcessResult.CONTINUE
        assert [r[0] for r in processor.records] == ["us", "gb", "de", "au"]
        assert processor.records[0][2] == (
            "America/New_York",
            "America/Detroit",
            "America/Chicago",
            "America/Los_Angeles",
        )

    def test_zone_ids_are_immutable(self, sample_xml):
        _, processor = walk(sample_xml)
        assert isinstance(processor.records[0][2], tuple)

    def test_empty_country_zones(self):
        result, processor = walk("<timezones><countryzones /></timezones>")
        assert result is ProcessResult.CONTINUE
        assert processor.records == []

    def test_country_without_ids(self):
        _, processor = walk(document('<country code="aq" default="Antarctica/Troll"></country>'))
        assert processor.records == [("aq", "Antarctica/Troll", ())]

    def test_unknown_elements_are_skipped_everywhere(self):
        xml = (
            "<timezones>"
            "<metadata><country code=\"zz\" default=\"X\"><id>X</id></country></metadata>"
            "<countryzones>"
            "<comment>ignored</comment>"
            '<country code="gb" default="Europe/London" extra="1">'
            "<note><id>Nested/Ignored</id></note>"
            "<id>Europe/London</id>"
            "<alias>GB-Eire</alias>"
            "</country>"
            "<future><country code=\"yy\" default=\"Y\"/></future>"
            "</countryzones>"
            "<trailer><deep><deeper/></deep></trailer>"
            "</timezones>"
        )
        result, processor = walk(xml)
        assert result is ProcessResult.CONTINUE
        assert processor.records == [("gb", "Europe/London", ("Europe/London",))]

    def test_duplicates_in_raw_zone_list_are_kept(self):
        _, processor = walk(document(country("gb", "Europe/London", "Europe/London", "Europe/London")))
        assert processor.records[0][2] == ("Europe/London", "Europe/London")

    def test_halt_stops_immediately(self, sample_xml):
        result, processor = walk(sample_xml, RecordingProcessor(halt_after=2))
        assert result is ProcessResult.HALT
        assert [r[0] for r in processor.records] == ["us", "gb"]

    def test_halt_before_broken_tail_is_not_an_error(self):
        xml = document(country("gb", "Europe/London", "Europe/London"), '<country code="fr"></country>')
        result, processor = walk(xml, RecordingProcessor(halt_after=1))
        assert result is ProcessResult.HALT

    def test_debug_info_describes_position(self, sample_xml):
        seen = []

        class Capture:
            def process(self, country_iso, default_time_zone_id, time_zone_ids, debug_info):
                seen.append(debug_info)
                return ProcessResult.HALT

        walk(sample_xml, Capture())
        assert "country" in seen[0]
        assert "@line 4" in seen[0]


class TestStructuralErrors:

    def test_missing_timezones(self):
        with pytest.raises(UnexpectedEof):
            walk("<other><countryzones/></other>")

    def test_missing_countryzones(self):
        with pytest.raises(MissingElement):
            walk("<timezones><zones/></timezones>")

    @pytest.mark.parametrize("attrs", [
        'default="Europe/London"',
        'code="" default="Europe/London"',
        'code="gb"',
        'code="gb" default=""',
    ])
    def test_missing_attributes(self, attrs):
        with pytest.raises(MissingAttribute):
            walk(document(f"<country {attrs}><id>Europe/London</id></country>"))

    def test_empty_id_element(self):
        with pytest.raises(MissingText):
            walk(document('<country code="gb" default="Europe/London"><id></id></country>'))

    def test_truncated_document(self):
        truncated = '<timezones><countryzones><country code="gb" default="Europe/London"><id>Europe/London</id></country>'
        with pytest.raises(TimeZoneParseError):
            walk(truncated)

    def test_truncated_document_is_malformed(self):
        with pytest.raises(MalformedDocument):
            walk("<timezones><countryzones>")

    def test_unreadable_source(self, tmp_path):
        path = tmp_path / "tzlookup.xml"
        path.write_text("<timezones><countryzones/></timezones>")
        supplier = ReaderSupplier.for_file(path)
        path.unlink()
        with pytest.raises(SourceUnavailable):
            process_xml(supplier, RecordingProcessor())


# =============================================================================
# WHOLE-DOCUMENT VALIDATOR
# =============================================================================


class TestCountryZonesValidator:

    def test_valid_document(self, sample_xml):
        result, _ = walk(sample_xml, CountryZonesValidator())
        assert result is ProcessResult.CONTINUE

    def test_unknown_zone_ids_are_accepted(self):
        walk(document(country("xx", "Future/Zone", "Future/Zone")), CountryZonesValidator())

    def test_duplicate_country(self):
        xml = document(
            country("gb", "Europe/London", "Europe/London"),
            country("gb", "Europe/London", "Europe/London"),
        )
        with pytest.raises(DuplicateCountryCode) as exc_info:
            walk(xml, CountryZonesValidator())
        assert exc_info.value.country_iso == "gb"

    def test_empty_zone_list(self):
        with pytest.raises(EmptyZoneList):
            walk(document(country("gb", "Europe/London")), CountryZonesValidator())

    def test_default_not_in_zone_list(self):
        with pytest.raises(DefaultNotInZoneList):
            walk(document(country("gb", "Europe/Paris", "Europe/London")), CountryZonesValidator())

    def test_non_normalized_code(self):
        with pytest.raises(NonNormalizedCountryCode):
            walk(document(country("GB", "Europe/London", "Europe/London")), CountryZonesValidator())

    def test_non_ascii_upper_case_code_is_not_normalized(self):
        with pytest.raises(NonNormalizedCountryCode):
            walk(document(country("ÉS", "Europe/Paris", "Europe/Paris")), CountryZonesValidator())

    def test_validation_errors_share_a_base(self):
        for cls in (DuplicateCountryCode, EmptyZoneList, DefaultNotInZoneList, NonNormalizedCountryCode):
            assert issubclass(cls, CountryZonesValidationError)
            assert issubclass(cls, TimeZoneParseError)

    @pytest.mark.parametrize("offending", [
        country("gb", "Europe/London"),
        country("gb", "Europe/Paris", "Europe/London"),
        country("us", "America/New_York", "America/New_York"),
    ])
    def test_fails_fast_without_reading_the_rest(self, offending):
        # The tail after the offending record is truncated; the validation
        # error must be reported before the truncation is ever reached.
        head = document(country("us", "America/New_York", "America/New_York"), offending)
        broken = head[: head.index("</countryzones>")] + "<country"
        with pytest.raises(CountryZonesValidationError):
            walk(broken, CountryZonesValidator())


# =============================================================================
# SELECTIVE EXTRACTOR
# =============================================================================


class TestSelectiveExtractor:

    def test_extracts_and_halts(self, sample_xml, fake_oracle):
        extractor = SelectiveCountryTimeZonesExtractor("gb", oracle=fake_oracle)
        result, _ = walk(sample_xml, extractor)
        assert result is ProcessResult.HALT
        record = extractor.validated_country_time_zones
        assert record.country_iso == "gb"
        assert record.default_time_zone_id == "Europe/London"
        assert record.time_zone_ids == ("Europe/London",)

    def test_no_match(self, sample_xml, fake_oracle):
        extractor = SelectiveCountryTimeZonesExtractor("fr", oracle=fake_oracle)
        result, _ = walk(sample_xml, extractor)
        assert result is ProcessResult.CONTINUE
        assert extractor.validated_country_time_zones is None

    def test_document_codes_are_normalized_before_comparison(self, fake_oracle):
        extractor = SelectiveCountryTimeZonesExtractor("gb", oracle=fake_oracle)
        walk(document(country("GB", "Europe/London", "Europe/London")), extractor)
        assert extractor.validated_country_time_zones.country_iso == "gb"

    def test_non_matching_countries_are_not_validated(self, fake_oracle):
        xml = document(country("xx", "Nope", "Also/Nope"), country("gb", "Europe/London", "Europe/London"))
        extractor = SelectiveCountryTimeZonesExtractor("gb", oracle=fake_oracle)
        walk(xml, extractor)
        assert extractor.validated_country_time_zones.time_zone_ids == ("Europe/London",)


# =============================================================================
# IANA VERSION
# =============================================================================


class TestIanaVersion:

    def test_present(self, sample_xml):
        assert read_iana_version(ReaderSupplier.for_string(sample_xml)) == "2017c"

    def test_absent(self):
        assert read_iana_version(ReaderSupplier.for_string("<timezones><countryzones/></timezones>")) is None

    def test_malformed_document(self):
        assert read_iana_version(ReaderSupplier.for_string("<notxml")) is None

    def test_wrong_root(self):
        assert read_iana_version(ReaderSupplier.for_string('<other ianaversion="x"/>')) is None

    def test_only_needs_the_root_start_tag(self):
        assert read_iana_version(ReaderSupplier.for_string('<timezones ianaversion="2024a"><countryzones>')) == "2024a"
