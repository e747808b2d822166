"""
events.py - Earthquake records

The immutable event record every analysis in this package consumes, plus
small per-event helpers (severity labels, felt likelihood, depth class)
and the USGS GeoJSON feature parser used by the loader.

USGS feature layout:
    {
        "id": "nc75095651",
        "properties": {"mag": 3.1, "place": "...", "time": 1702000000000,
                       "felt": 12, "sig": 148, "url": "..."},
        "geometry": {"coordinates": [lon, lat, depth_km]}
    }
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

UNKNOWN_REGION = 'unknown'

MS_PER_HOUR = 60 * 60 * 1000
MS_PER_DAY = 24 * MS_PER_HOUR

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def ms_to_datetime(timestamp_ms: int) -> datetime:
    """Epoch milliseconds -> timezone-aware UTC datetime."""
    return EPOCH + timedelta(milliseconds=timestamp_ms)


def datetime_to_ms(dt: datetime) -> int:
    """Timezone-aware datetime -> epoch milliseconds (naive input is taken as UTC)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - EPOCH) // timedelta(milliseconds=1)


@dataclass(frozen=True)
class Earthquake:
    """Single earthquake event, already tagged with a region id."""
    id: str
    magnitude: float
    place: str
    timestamp_ms: int
    latitude: float
    longitude: float
    depth_km: float
    felt: Optional[int] = None
    significance: int = 0
    url: str = ''
    region: str = UNKNOWN_REGION

    @property
    def time(self) -> datetime:
        return ms_to_datetime(self.timestamp_ms)

    @property
    def date(self) -> date:
        """UTC calendar date of the event."""
        return self.time.date()

    @classmethod
    def from_usgs_feature(cls, feature: Dict, region: str = UNKNOWN_REGION) -> 'Earthquake':
        """
        Build an Earthquake from a USGS GeoJSON feature.

        Raises:
            ValueError: if the feature has no id, time or coordinates
        """
        props = feature.get('properties') or {}
        coords = (feature.get('geometry') or {}).get('coordinates') or []

        if not feature.get('id'):
            raise ValueError("feature has no id")
        if props.get('time') is None:
            raise ValueError(f"feature {feature['id']} has no time")
        if len(coords) < 3 or any(c is None for c in coords[:3]):
            raise ValueError(f"feature {feature['id']} has incomplete coordinates")

        longitude, latitude, depth = coords[0], coords[1], coords[2]

        return cls(
            id=feature['id'],
            magnitude=float(props.get('mag') or 0.0),
            place=props.get('place') or 'Unknown location',
            timestamp_ms=int(props['time']),
            latitude=float(latitude),
            longitude=float(longitude),
            depth_km=float(depth),
            felt=props.get('felt'),
            significance=int(props.get('sig') or 0),
            url=props.get('url') or '',
            region=region,
        )

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'magnitude': self.magnitude,
            'place': self.place,
            'time': self.time.isoformat(),
            'timestamp': self.timestamp_ms,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'depth_km': self.depth_km,
            'felt': self.felt,
            'significance': self.significance,
            'url': self.url,
            'region': self.region,
        }

    def __str__(self) -> str:
        return f"M{self.magnitude:.1f} {self.place} ({self.time.strftime('%Y-%m-%d %H:%M')})"


def sort_chronological(earthquakes: Iterable[Earthquake]) -> List[Earthquake]:
    """Stable ascending sort by timestamp; ties keep input order."""
    return sorted(earthquakes, key=lambda eq: eq.timestamp_ms)


def find_biggest_earthquake(earthquakes: Iterable[Earthquake]) -> Optional[Earthquake]:
    """Largest event by magnitude; the first one wins on ties."""
    biggest = None
    for eq in earthquakes:
        if biggest is None or eq.magnitude > biggest.magnitude:
            biggest = eq
    return biggest


def get_recent_activity(earthquakes: Iterable[Earthquake],
                        days: int = 7,
                        now: Optional[datetime] = None) -> List[Earthquake]:
    """Events from the last `days` days, newest first."""
    now = now or datetime.now(timezone.utc)
    cutoff_ms = datetime_to_ms(now) - days * MS_PER_DAY
    recent = [eq for eq in earthquakes if eq.timestamp_ms >= cutoff_ms]
    return sorted(recent, key=lambda eq: eq.timestamp_ms, reverse=True)


def magnitude_label(magnitude: float) -> str:
    """Severity label for a magnitude."""
    if magnitude >= 7:
        return 'Major'
    if magnitude >= 6:
        return 'Strong'
    if magnitude >= 5:
        return 'Moderate'
    if magnitude >= 4:
        return 'Light'
    if magnitude >= 3:
        return 'Minor'
    if magnitude >= 2:
        return 'Micro'
    return 'Trace'


def was_likely_felt(magnitude: float, depth_km: float) -> bool:
    """
    Rough felt-likelihood check.

    M2.5+ is generally felt; shallow events are felt at lower magnitudes.
    """
    if depth_km < 10:
        depth_factor = 0.3
    elif depth_km < 20:
        depth_factor = 0.5
    else:
        depth_factor = 0.8
    return magnitude >= 2.5 - depth_factor


def depth_description(depth_km: float) -> str:
    # Shallow: < 10 km, Intermediate: 10-30 km, Deep: > 30 km
    if depth_km < 10:
        return 'Shallow'
    if depth_km < 30:
        return 'Intermediate'
    return 'Deep'
