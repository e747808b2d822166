"""GeoJSON loader tests."""

import copy
import json

import pytest

from quakeswarm.loader import load_earthquakes, parse_feature_collection


def feature(id, time_ms, lon=-121.95, lat=37.75, mag=2.0):
    return {
        'type': 'Feature',
        'id': id,
        'properties': {'mag': mag, 'place': 'somewhere', 'time': time_ms,
                       'felt': None, 'sig': 50, 'url': f"https://example.org/{id}"},
        'geometry': {'type': 'Point', 'coordinates': [lon, lat, 6.0]},
    }


def write_collection(path, features):
    path.write_text(json.dumps({'type': 'FeatureCollection', 'features': features}))


class TestParseFeatureCollection:

    def test_assigns_regions(self):
        data = {'features': [
            feature('a', 1000),
            feature('b', 2000, lon=-121.8, lat=37.2),
            feature('c', 3000, lon=-120.0, lat=40.0),
        ]}
        regions = [eq.region for eq in parse_feature_collection(data)]
        assert regions == ['san-ramon', 'santa-clara', 'unknown']

    def test_skips_malformed_features(self, usgs_feature):
        broken = copy.deepcopy(usgs_feature)
        broken['geometry']['coordinates'] = [None, None, None]
        no_time = copy.deepcopy(usgs_feature)
        no_time['properties']['time'] = None

        eqs = parse_feature_collection({'features': [usgs_feature, broken, no_time]})

        assert [eq.id for eq in eqs] == ['nc75095651']

    def test_no_features(self):
        assert parse_feature_collection({}) == []


class TestLoadEarthquakes:

    def test_loads_all_files_newest_first(self, tmp_path):
        write_collection(tmp_path / '2023.json', [feature('a', 1000), feature('b', 5000)])
        write_collection(tmp_path / '2024.json', [feature('c', 3000)])
        (tmp_path / 'notes.txt').write_text('ignored')

        eqs = load_earthquakes(tmp_path)

        assert [eq.id for eq in eqs] == ['b', 'c', 'a']

    def test_duplicates_dropped_first_file_wins(self, tmp_path):
        write_collection(tmp_path / 'a.json', [feature('x', 1000, mag=2.0)])
        write_collection(tmp_path / 'b.json', [feature('x', 1000, mag=9.0), feature('y', 2000)])

        eqs = load_earthquakes(tmp_path)

        assert sorted(eq.id for eq in eqs) == ['x', 'y']
        assert next(eq for eq in eqs if eq.id == 'x').magnitude == 2.0

    def test_bad_file_is_skipped(self, tmp_path, caplog):
        (tmp_path / 'a.json').write_text('{not json')
        write_collection(tmp_path / 'b.json', [feature('ok', 1000)])

        eqs = load_earthquakes(tmp_path)

        assert [eq.id for eq in eqs] == ['ok']
        assert 'a.json' in caplog.text

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_earthquakes(tmp_path / 'nope')

    def test_empty_directory(self, tmp_path):
        assert load_earthquakes(tmp_path) == []

    def test_file_without_object_root_is_skipped(self, tmp_path, caplog):
        write_collection(tmp_path / 'a.json', [feature('ok', 1000)])
        (tmp_path / 'b.json').write_text(json.dumps([1, 2, 3]))

        eqs = load_earthquakes(tmp_path)

        assert [eq.id for eq in eqs] == ['ok']
        assert 'b.json' in caplog.text


class TestMalformedCollections:

    def test_non_object_feature_is_skipped(self):
        eqs = parse_feature_collection({'features': [feature('ok', 1000), 'junk', None, 7]})
        assert [eq.id for eq in eqs] == ['ok']

    def test_non_object_geometry_is_skipped(self):
        bad = feature('bad', 2000)
        bad['geometry'] = 'POINT (0 0)'
        eqs = parse_feature_collection({'features': [bad, feature('ok', 1000)]})
        assert [eq.id for eq in eqs] == ['ok']

    def test_features_not_a_list(self, caplog):
        assert parse_feature_collection({'features': 5}, source='odd.json') == []
        assert 'odd.json' in caplog.text
