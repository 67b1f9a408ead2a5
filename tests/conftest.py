import io
import os
import pathlib
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Tuple

import pytest


# Ensure repo root is on PYTHONPATH for direct package imports (e.g. `import tzlookup`).
_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from tzlookup.oracle import ZoneOracle  # noqa: E402
from tzlookup.sources import ReaderSupplier  # noqa: E402


def _env_flag(name: str) -> bool:
    v = (os.environ.get(name) or '').strip().lower()
    return v in {'1', 'true', 'yes', 'y', 'on'}


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "zoneinfo: tests that need the IANA database (system tzdata or the tzdata package)",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list) -> None:
    skip_zoneinfo = _env_flag('TZLOOKUP_SKIP_ZONEINFO')
    for item in items:
        if 'zoneinfo' in item.keywords and skip_zoneinfo:
            item.add_marker(pytest.mark.skip(reason='zoneinfo tests skipped; unset TZLOOKUP_SKIP_ZONEINFO'))


# ============================================================================
# FAKE ORACLE
# ============================================================================


@dataclass(frozen=True)
class FakeZone:
    zone_id: str
    offset_seconds: int
    is_dst: bool = False


class FakeOracle(ZoneOracle):
    """Zone oracle with fixed offsets; zones can be forgotten to simulate db skew."""

    def __init__(self, zones: Dict[str, Tuple[int, bool]]):
        self.zones = dict(zones)
        self.forgotten = set()
        self.resolved = []

    def forget(self, zone_id: str) -> None:
        self.forgotten.add(zone_id)

    def is_known(self, zone_id: str) -> bool:
        return zone_id in self.zones

    def get_zone(self, zone_id: str) -> Optional[FakeZone]:
        self.resolved.append(zone_id)
        if zone_id not in self.zones or zone_id in self.forgotten:
            return None
        offset, dst = self.zones[zone_id]
        return FakeZone(zone_id, offset, dst)

    def zone_id(self, zone: FakeZone) -> str:
        return zone.zone_id

    def offset_at(self, zone: FakeZone, when: datetime) -> Tuple[int, bool]:
        return zone.offset_seconds, zone.is_dst


FAKE_ZONES = {
    "America/New_York": (-5 * 3600, False),
    "America/Detroit": (-5 * 3600, False),
    "America/Chicago": (-6 * 3600, False),
    "America/Los_Angeles": (-8 * 3600, False),
    "Europe/London": (0, False),
    "Europe/Paris": (3600, False),
    "Europe/Berlin": (3600, False),
    "Europe/Busingen": (3600, False),
    "Australia/Sydney": (11 * 3600, True),
}


SAMPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<timezones ianaversion="2017c">
  <countryzones>
    <country code="us" default="America/New_York">
      <id>America/New_York</id>
      <id>America/Detroit</id>
      <id>America/Chicago</id>
      <id>America/Los_Angeles</id>
    </country>
    <country code="gb" default="Europe/London">
      <id>Europe/London</id>
    </country>
    <country code="de" default="Europe/Berlin">
      <id>Europe/Berlin</id>
      <id>Europe/Busingen</id>
    </country>
    <country code="au" default="Australia/Sydney">
      <id>Australia/Sydney</id>
    </country>
  </countryzones>
</timezones>
"""


class MutableSupplier(ReaderSupplier):
    """ReaderSupplier whose document can be swapped, counting every open()."""

    def __init__(self, xml: str):
        self.xml = xml
        self.open_count = 0
        super().__init__(self._open_current, "<mutable>")

    def _open_current(self):
        self.open_count += 1
        return io.BytesIO(self.xml.encode("utf-8"))


@pytest.fixture
def fake_oracle() -> FakeOracle:
    return FakeOracle(FAKE_ZONES)


@pytest.fixture
def sample_xml() -> str:
    return SAMPLE_XML


@pytest.fixture
def make_finder(fake_oracle):
    """Build a TimeZoneFinder over an in-memory document and the fake oracle."""
    from tzlookup.finder import TimeZoneFinder

    def _make(xml: str = SAMPLE_XML) -> TimeZoneFinder:
        return TimeZoneFinder.create_instance_for_string(xml, oracle=fake_oracle)

    return _make


@pytest.fixture
def mutable_finder(fake_oracle):
    """(finder, supplier) pair where the supplier's document can be changed."""
    from tzlookup.finder import TimeZoneFinder

    supplier = MutableSupplier(SAMPLE_XML)
    return TimeZoneFinder(supplier, oracle=fake_oracle), supplier


@pytest.fixture
def reset_config():
    from tzlookup.config import ConfigManager

    ConfigManager._instance = None
    yield
    ConfigManager._instance = None
