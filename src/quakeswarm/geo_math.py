"""
geo_math.py - Great-circle distance and cluster centroids

Distances use the haversine formula on a spherical Earth (R = 6371 km).
Centroids are a planar mean of lat/lon, which is fine at the scale of a
single fault zone.
"""

import math
from typing import Iterable, Tuple

import numpy as np

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two points in kilometers."""
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat/2)**2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon/2)**2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def centroid(points: Iterable[Tuple[float, float]]) -> Tuple[float, float]:
    """Arithmetic mean of (lat, lon) pairs. Returns (0.0, 0.0) for no points."""
    coords = np.array(list(points), dtype=float)
    if coords.size == 0:
        return 0.0, 0.0
    lat, lon = coords.mean(axis=0)
    return float(lat), float(lon)
