"""
Shared fixtures for quakeswarm tests.

Events are built around a fixed UTC origin so day boundaries are
predictable: T0 is noon UTC, well clear of midnight.
"""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from quakeswarm.events import Earthquake, datetime_to_ms

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

# Inside the san-ramon bounding box
SAN_RAMON = (37.75, -121.95)
# Inside santa-clara (listed before gilroy-south, so it wins the overlap)
SANTA_CLARA = (37.2, -121.8)

KM_PER_DEG_LAT = 111.195

_ids = itertools.count(1)


def make_eq(offset=timedelta(0), magnitude=2.0, lat=SAN_RAMON[0], lon=SAN_RAMON[1],
            depth_km=8.0, region='san-ramon', id=None, **kwargs):
    """Build an Earthquake at T0 + offset."""
    return Earthquake(
        id=id or f"nc{next(_ids):06d}",
        magnitude=magnitude,
        place=kwargs.pop('place', '5km NE of San Ramon, CA'),
        timestamp_ms=datetime_to_ms(T0 + offset),
        latitude=lat,
        longitude=lon,
        depth_km=depth_km,
        region=region,
        **kwargs,
    )


def hours(n):
    return timedelta(hours=n)


def days(n):
    return timedelta(days=n)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def usgs_feature():
    """A single USGS GeoJSON feature inside san-ramon."""
    return {
        'type': 'Feature',
        'id': 'nc75095651',
        'properties': {
            'mag': 3.1,
            'place': '4km NNE of San Ramon, CA',
            'time': datetime_to_ms(T0),
            'felt': 42,
            'sig': 148,
            'url': 'https://earthquake.usgs.gov/earthquakes/eventpage/nc75095651',
        },
        'geometry': {'type': 'Point', 'coordinates': [-121.95, 37.75, 7.9]},
    }


def to_feature(eq):
    """Inverse of Earthquake.from_usgs_feature, for writing fixture files."""
    return {
        'type': 'Feature',
        'id': eq.id,
        'properties': {
            'mag': eq.magnitude,
            'place': eq.place,
            'time': eq.timestamp_ms,
            'felt': eq.felt,
            'sig': eq.significance,
            'url': eq.url,
        },
        'geometry': {'type': 'Point', 'coordinates': [eq.longitude, eq.latitude, eq.depth_km]},
    }


@pytest.fixture
def catalog():
    """A san-ramon swarm, a quiet santa-clara event and one event outside every region."""
    swarm = [make_eq(hours(2 * i), magnitude=2.0 + 0.3 * i) for i in range(6)]
    return swarm + [
        make_eq(days(20), magnitude=3.4, lat=SANTA_CLARA[0], lon=SANTA_CLARA[1], region='santa-clara'),
        make_eq(days(40), magnitude=1.2, lat=40.0, lon=-120.0, region='unknown'),
    ]
