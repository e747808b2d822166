"""
swarms.py - Swarm Detection

Greedy, seed-centred clustering of earthquakes into short-lived swarms.

Algorithm:
- Sort events oldest first (stable; ties keep input order)
- Each unprocessed event seeds a cluster and is marked processed
- Scan forward from the seed; stop as soon as a candidate is more than
  72 h after the seed (the list is time-sorted, nothing later can match)
- A candidate joins if it lies within 10 km of the SEED, not of any
  other member
- Clusters with >= 5 members become swarms; smaller clusters are dropped
  and only their seed stays processed

This is intentionally not a symmetric or optimal clustering. Downstream
consumers rely on the exact greedy output.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Set, Tuple

from .events import Earthquake, MS_PER_HOUR, ms_to_datetime, sort_chronological
from .geo_math import centroid, haversine_km

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

SWARM_TIME_WINDOW_HOURS = 72
SWARM_DISTANCE_KM = 10.0
SWARM_MIN_EARTHQUAKES = 5


class SwarmIntensity(str, Enum):
    LOW = 'low'
    MODERATE = 'moderate'
    HIGH = 'high'
    EXTREME = 'extreme'


@dataclass(frozen=True)
class SwarmEvent:
    """A detected swarm. Members are in chronological order."""
    id: str
    start_time: datetime
    end_time: datetime
    earthquakes: Tuple[Earthquake, ...]
    peak_magnitude: float
    total_count: int
    region: str
    center_lat: float
    center_lon: float

    @property
    def duration_hours(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 3600

    def to_dict(self, include_earthquakes: bool = True) -> Dict:
        result = {
            'id': self.id,
            'start_time': self.start_time.isoformat(),
            'end_time': self.end_time.isoformat(),
            'peak_magnitude': self.peak_magnitude,
            'total_count': self.total_count,
            'region': self.region,
            'center_lat': self.center_lat,
            'center_lon': self.center_lon,
            'intensity': swarm_intensity(self).value,
        }
        if include_earthquakes:
            result['earthquakes'] = [eq.to_dict() for eq in self.earthquakes]
        return result


def _build_swarm(seed: Earthquake, cluster: List[Earthquake]) -> SwarmEvent:
    members = tuple(sort_chronological(cluster))
    center_lat, center_lon = centroid((eq.latitude, eq.longitude) for eq in members)

    return SwarmEvent(
        id=f"swarm-{seed.id}",
        start_time=ms_to_datetime(members[0].timestamp_ms),
        end_time=ms_to_datetime(members[-1].timestamp_ms),
        earthquakes=members,
        peak_magnitude=max(eq.magnitude for eq in members),
        total_count=len(members),
        region=seed.region,
        center_lat=center_lat,
        center_lon=center_lon,
    )


def detect_swarms(earthquakes: Iterable[Earthquake],
                  time_window_hours: float = SWARM_TIME_WINDOW_HOURS,
                  distance_km: float = SWARM_DISTANCE_KM,
                  min_earthquakes: int = SWARM_MIN_EARTHQUAKES) -> List[SwarmEvent]:
    """
    Detect earthquake swarms.

    Args:
        earthquakes: Events in any order (not modified)
        time_window_hours: Max time after the seed for a member
        distance_km: Max distance from the seed for a member
        min_earthquakes: Minimum cluster size to report

    Returns:
        List of SwarmEvent, most recent start first
    """
    ordered = sort_chronological(earthquakes)
    window_ms = time_window_hours * MS_PER_HOUR
    processed: Set[str] = set()
    swarms: List[SwarmEvent] = []

    for i, seed in enumerate(ordered):
        if seed.id in processed:
            continue

        cluster = [seed]
        processed.add(seed.id)
        claimed = []

        for candidate in ordered[i + 1:]:
            if candidate.id in processed:
                continue
            if candidate.timestamp_ms - seed.timestamp_ms > window_ms:
                break

            distance = haversine_km(seed.latitude, seed.longitude,
                                    candidate.latitude, candidate.longitude)
            if distance <= distance_km:
                cluster.append(candidate)
                claimed.append(candidate.id)
                processed.add(candidate.id)

        if len(cluster) >= min_earthquakes:
            swarms.append(_build_swarm(seed, cluster))
        else:
            # Only the seed stays consumed; its would-be members can join a later seed
            processed.difference_update(claimed)

    logger.debug(f"Detected {len(swarms)} swarms in {len(ordered)} events")
    return sorted(swarms, key=lambda s: s.start_time, reverse=True)


def swarm_intensity(swarm: SwarmEvent) -> SwarmIntensity:
    """Classify a swarm by peak magnitude and event count."""
    if swarm.peak_magnitude >= 4 or swarm.total_count >= 50:
        return SwarmIntensity.EXTREME
    if swarm.peak_magnitude >= 3.5 or swarm.total_count >= 30:
        return SwarmIntensity.HIGH
    if swarm.peak_magnitude >= 3 or swarm.total_count >= 15:
        return SwarmIntensity.MODERATE
    return SwarmIntensity.LOW
