"""
loader.py - Load historical earthquakes from USGS GeoJSON files

Reads every *.json FeatureCollection in a data directory (one file per
year/month export from the USGS FDSN event service), assigns regions by
bounding box and returns a de-duplicated catalog, newest first.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Sequence, Set

from .events import Earthquake
from .regions import REGIONS, Region, region_for_coordinates

logger = logging.getLogger(__name__)


def parse_feature_collection(data: Dict,
                             regions: Sequence[Region] = REGIONS,
                             source: str = '<memory>') -> List[Earthquake]:
    """Parse a GeoJSON FeatureCollection, skipping malformed features."""
    features = data.get('features') or []
    if not isinstance(features, list):
        logger.warning(f"Skipping {source}: 'features' is not a list")
        return []

    earthquakes = []
    for feature in features:
        try:
            coords = (feature.get('geometry') or {}).get('coordinates') or []
            region = region_for_coordinates(coords[1], coords[0], regions)
            earthquakes.append(Earthquake.from_usgs_feature(feature, region))
        except (AttributeError, ValueError, TypeError, IndexError) as e:
            logger.warning(f"Skipping malformed feature in {source}: {e}")
    return earthquakes


def load_earthquakes(data_dir: Path,
                     regions: Sequence[Region] = REGIONS) -> List[Earthquake]:
    """
    Load all earthquakes from the GeoJSON files in data_dir.

    Args:
        data_dir: Directory holding *.json FeatureCollections
        regions: Region catalog used for assignment

    Returns:
        List of Earthquake, newest first, duplicate ids dropped (first file wins)

    Raises:
        FileNotFoundError: if data_dir does not exist
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise FileNotFoundError(f"Data directory not found: {data_dir}")

    earthquakes: List[Earthquake] = []
    seen: Set[str] = set()
    duplicates = 0

    for json_file in sorted(data_dir.glob('*.json')):
        try:
            with open(json_file, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not load {json_file.name}: {e}")
            continue
        if not isinstance(data, dict):
            logger.error(f"Skipping {json_file.name}: expected a FeatureCollection object, "
                         f"got {type(data).__name__}")
            continue

        for eq in parse_feature_collection(data, regions, source=json_file.name):
            if eq.id in seen:
                duplicates += 1
                continue
            seen.add(eq.id)
            earthquakes.append(eq)

    earthquakes.sort(key=lambda eq: eq.timestamp_ms, reverse=True)

    logger.info(f"Loaded {len(earthquakes)} earthquakes from {data_dir}"
                + (f" ({duplicates} duplicates dropped)" if duplicates else ""))
    return earthquakes
