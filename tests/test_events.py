"""Earthquake record, region catalog and per-event helper tests."""

from datetime import date, datetime, timezone

import pytest

from quakeswarm.events import (
    Earthquake,
    datetime_to_ms,
    depth_description,
    find_biggest_earthquake,
    get_recent_activity,
    magnitude_label,
    ms_to_datetime,
    was_likely_felt,
)
from quakeswarm.regions import (
    REGIONS,
    get_region_by_id,
    region_for_coordinates,
    region_name,
)

from conftest import T0, days, hours, make_eq


class TestEarthquake:

    def test_from_usgs_feature(self, usgs_feature):
        eq = Earthquake.from_usgs_feature(usgs_feature, region='san-ramon')

        assert eq.id == 'nc75095651'
        assert eq.magnitude == 3.1
        assert eq.latitude == 37.75
        assert eq.longitude == -121.95
        assert eq.depth_km == 7.9
        assert eq.felt == 42
        assert eq.significance == 148
        assert eq.region == 'san-ramon'
        assert eq.time == T0

    def test_missing_optional_properties(self, usgs_feature):
        props = usgs_feature['properties']
        props['mag'] = None
        props['place'] = None
        props['sig'] = None
        del props['felt']

        eq = Earthquake.from_usgs_feature(usgs_feature)

        assert eq.magnitude == 0.0
        assert eq.place == 'Unknown location'
        assert eq.significance == 0
        assert eq.felt is None
        assert eq.region == 'unknown'

    def test_missing_coordinates_rejected(self, usgs_feature):
        usgs_feature['geometry']['coordinates'] = [-121.95]
        with pytest.raises(ValueError):
            Earthquake.from_usgs_feature(usgs_feature)

    def test_frozen(self):
        eq = make_eq()
        with pytest.raises(AttributeError):
            eq.magnitude = 9.0

    def test_date_is_utc(self):
        # 2024-03-01 23:30 UTC is still March 1st in UTC
        eq = make_eq(hours(11.5))
        assert eq.date == date(2024, 3, 1)

    def test_millisecond_round_trip(self):
        dt = datetime(2023, 7, 4, 5, 6, 7, 891000, tzinfo=timezone.utc)
        assert ms_to_datetime(datetime_to_ms(dt)) == dt

    def test_naive_datetime_treated_as_utc(self):
        assert datetime_to_ms(datetime(1970, 1, 1, 0, 0, 1)) == 1000

    def test_to_dict(self):
        d = make_eq(id='abc').to_dict()
        assert d['id'] == 'abc'
        assert d['time'] == T0.isoformat()
        assert d['timestamp'] == datetime_to_ms(T0)


class TestHelpers:

    def test_biggest_first_wins_ties(self):
        a = make_eq(magnitude=3.0, id='a')
        b = make_eq(magnitude=3.0, id='b')
        assert find_biggest_earthquake([make_eq(magnitude=1.0), a, b]).id == 'a'
        assert find_biggest_earthquake([]) is None

    def test_recent_activity(self):
        old = make_eq(days(-10))
        recent = [make_eq(days(-2)), make_eq(days(-1))]
        result = get_recent_activity([old] + recent, days=7, now=T0)
        assert result == list(reversed(recent))

    @pytest.mark.parametrize('mag,label', [
        (7.1, 'Major'), (6.0, 'Strong'), (5.5, 'Moderate'), (4.0, 'Light'),
        (3.2, 'Minor'), (2.0, 'Micro'), (1.9, 'Trace'),
    ])
    def test_magnitude_label(self, mag, label):
        assert magnitude_label(mag) == label

    def test_felt_depends_on_depth(self):
        assert was_likely_felt(2.2, 5.0)
        assert not was_likely_felt(1.9, 15.0)
        assert was_likely_felt(2.0, 15.0)
        assert not was_likely_felt(1.6, 25.0)

    def test_depth_description(self):
        assert depth_description(3.0) == 'Shallow'
        assert depth_description(10.0) == 'Intermediate'
        assert depth_description(30.0) == 'Deep'


class TestRegions:

    def test_catalog(self):
        assert [r.id for r in REGIONS] == [
            'san-ramon', 'berkeley-oakland', 'sf-peninsula',
            'santa-clara', 'gilroy-south', 'sonoma-north',
        ]
        assert all(r.fault_line and r.county for r in REGIONS)

    def test_assignment(self):
        assert region_for_coordinates(37.75, -121.95) == 'san-ramon'
        assert region_for_coordinates(37.87, -122.27) == 'berkeley-oakland'
        assert region_for_coordinates(38.3, -122.7) == 'sonoma-north'
        assert region_for_coordinates(36.8, -121.5) == 'gilroy-south'
        assert region_for_coordinates(40.0, -120.0) == 'unknown'

    def test_overlap_resolves_to_earlier_region(self):
        # Inside both santa-clara and gilroy-south
        assert region_for_coordinates(37.2, -121.8) == 'santa-clara'

    def test_lookup(self):
        assert get_region_by_id('sf-peninsula').fault_line == 'San Andreas Fault'
        assert get_region_by_id('nowhere') is None
        assert region_name('nowhere') == 'Unknown Region'
        assert get_region_by_id('santa-clara').to_dict()['bounds']['min_lat'] == 36.95
