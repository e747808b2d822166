"""
episodes.py - Swarm Episode Detection

Segments an event history into multi-day/multi-week episodes of sustained
activity and breaks each episode down day by day.

Pipeline:
1. Bucket events by UTC calendar date
2. Walk the active dates in order; a gap of more than 14 days between two
   active dates closes the current episode
3. Keep buffers with >= 5 events
4. Build a dense daily breakdown (quiet days included) and classify each
   day and the episode as a whole

Daily intensity:
- extreme: count >= 20 or peak >= M4.0
- high: count >= 10 or peak >= M3.5
- moderate: count >= 5 or peak >= M3.0
- low: count >= 2
- quiet: otherwise

Episode intensity:
- major: total >= 50 or peak >= M4.5 or (>= 10 active days and total >= 30)
- significant: total >= 25 or peak >= M4.0 or (>= 7 active days and total >= 15)
- moderate: total >= 12 or peak >= M3.5 or >= 5 active days
- minor: otherwise
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from .events import Earthquake, ms_to_datetime, sort_chronological
from .geo_math import centroid

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

EPISODE_GAP_DAYS = 14
EPISODE_MIN_EARTHQUAKES = 5
EPISODE_MIN_ACTIVE_DATES = 1


class DailyIntensity(str, Enum):
    QUIET = 'quiet'
    LOW = 'low'
    MODERATE = 'moderate'
    HIGH = 'high'
    EXTREME = 'extreme'


class EpisodeIntensity(str, Enum):
    MINOR = 'minor'
    MODERATE = 'moderate'
    SIGNIFICANT = 'significant'
    MAJOR = 'major'


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class DailyActivityCluster:
    """Activity on one calendar day of an episode (possibly empty)."""
    date: date
    earthquakes: Tuple[Earthquake, ...]
    count: int
    peak_magnitude: float
    avg_magnitude: float
    intensity: DailyIntensity

    def to_dict(self, include_earthquakes: bool = False) -> Dict:
        result = {
            'date': self.date.isoformat(),
            'count': self.count,
            'peak_magnitude': self.peak_magnitude,
            'avg_magnitude': self.avg_magnitude,
            'intensity': self.intensity.value,
        }
        if include_earthquakes:
            result['earthquakes'] = [eq.to_dict() for eq in self.earthquakes]
        return result


@dataclass(frozen=True)
class SwarmEpisode:
    """A sequence of sustained activity bounded by quiet gaps."""
    id: str
    start_time: datetime
    end_time: datetime
    earthquakes: Tuple[Earthquake, ...]
    daily_breakdown: Tuple[DailyActivityCluster, ...]
    total_count: int
    peak_magnitude: float
    avg_magnitude: float
    center_lat: float
    center_lon: float
    duration_days: int
    active_days: int
    peak_day: Optional[DailyActivityCluster]
    intensity: EpisodeIntensity
    region: str

    def to_dict(self, include_earthquakes: bool = False) -> Dict:
        result = {
            'id': self.id,
            'start_time': self.start_time.isoformat(),
            'end_time': self.end_time.isoformat(),
            'total_count': self.total_count,
            'peak_magnitude': self.peak_magnitude,
            'avg_magnitude': self.avg_magnitude,
            'center_lat': self.center_lat,
            'center_lon': self.center_lon,
            'duration_days': self.duration_days,
            'active_days': self.active_days,
            'peak_day': self.peak_day.to_dict() if self.peak_day else None,
            'intensity': self.intensity.value,
            'region': self.region,
            'daily_breakdown': [d.to_dict(include_earthquakes) for d in self.daily_breakdown],
        }
        if include_earthquakes:
            result['earthquakes'] = [eq.to_dict() for eq in self.earthquakes]
        return result


# =============================================================================
# CLASSIFICATION
# =============================================================================

def classify_daily_intensity(count: int, peak_magnitude: float) -> DailyIntensity:
    if count >= 20 or peak_magnitude >= 4:
        return DailyIntensity.EXTREME
    if count >= 10 or peak_magnitude >= 3.5:
        return DailyIntensity.HIGH
    if count >= 5 or peak_magnitude >= 3:
        return DailyIntensity.MODERATE
    if count >= 2:
        return DailyIntensity.LOW
    return DailyIntensity.QUIET


def classify_episode_intensity(total_count: int,
                               peak_magnitude: float,
                               active_days: int) -> EpisodeIntensity:
    if (total_count >= 50 or peak_magnitude >= 4.5
            or (active_days >= 10 and total_count >= 30)):
        return EpisodeIntensity.MAJOR
    if (total_count >= 25 or peak_magnitude >= 4
            or (active_days >= 7 and total_count >= 15)):
        return EpisodeIntensity.SIGNIFICANT
    if total_count >= 12 or peak_magnitude >= 3.5 or active_days >= 5:
        return EpisodeIntensity.MODERATE
    return EpisodeIntensity.MINOR


# =============================================================================
# EPISODE CONSTRUCTION
# =============================================================================

def _build_daily_cluster(day: date, members: List[Earthquake]) -> DailyActivityCluster:
    if members:
        mags = np.array([eq.magnitude for eq in members])
        peak = float(mags.max())
        avg = float(mags.mean())
    else:
        peak = 0.0
        avg = 0.0

    return DailyActivityCluster(
        date=day,
        earthquakes=tuple(members),
        count=len(members),
        peak_magnitude=peak,
        avg_magnitude=avg,
        intensity=classify_daily_intensity(len(members), peak),
    )


def _build_episode(members: List[Earthquake],
                   by_date: Dict[date, List[Earthquake]],
                   first_date: date,
                   last_date: date) -> SwarmEpisode:
    # Dense breakdown: every day in range, quiet days included
    daily = []
    day = first_date
    while day <= last_date:
        daily.append(_build_daily_cluster(day, by_date.get(day, [])))
        day += timedelta(days=1)

    active_days = sum(1 for d in daily if d.count >= 1)

    peak_day = None
    for d in daily:
        if d.count > (peak_day.count if peak_day else 0):
            peak_day = d

    mags = np.array([eq.magnitude for eq in members])
    peak_magnitude = float(mags.max())
    center_lat, center_lon = centroid((eq.latitude, eq.longitude) for eq in members)

    return SwarmEpisode(
        id=f"episode-{members[0].id}-{members[-1].id}",
        start_time=ms_to_datetime(members[0].timestamp_ms),
        end_time=ms_to_datetime(members[-1].timestamp_ms),
        earthquakes=tuple(members),
        daily_breakdown=tuple(daily),
        total_count=len(members),
        peak_magnitude=peak_magnitude,
        avg_magnitude=float(mags.mean()),
        center_lat=center_lat,
        center_lon=center_lon,
        duration_days=len(daily),
        active_days=active_days,
        peak_day=peak_day,
        intensity=classify_episode_intensity(len(members), peak_magnitude, active_days),
        region=members[0].region,
    )


def detect_swarm_episodes(earthquakes: Iterable[Earthquake],
                          gap_days: int = EPISODE_GAP_DAYS,
                          min_earthquakes: int = EPISODE_MIN_EARTHQUAKES) -> List[SwarmEpisode]:
    """
    Segment events into swarm episodes.

    Args:
        earthquakes: Events in any order (not modified)
        gap_days: Episodes split when two active dates are more than this apart
        min_earthquakes: Minimum events for an episode to be reported

    Returns:
        List of SwarmEpisode, most recent start first
    """
    by_date: Dict[date, List[Earthquake]] = defaultdict(list)
    for eq in sort_chronological(earthquakes):
        by_date[eq.date].append(eq)

    episodes: List[SwarmEpisode] = []
    buffer: List[Earthquake] = []
    buffer_dates: List[date] = []

    def close_buffer():
        # The active-date check always passes once the size check does
        if len(buffer) >= min_earthquakes and len(buffer_dates) >= EPISODE_MIN_ACTIVE_DATES:
            episodes.append(_build_episode(buffer, by_date, buffer_dates[0], buffer_dates[-1]))

    previous: Optional[date] = None
    for day in sorted(by_date):
        if previous is not None and (day - previous).days > gap_days:
            close_buffer()
            buffer = []
            buffer_dates = []
        buffer.extend(by_date[day])
        buffer_dates.append(day)
        previous = day

    close_buffer()

    logger.debug(f"Detected {len(episodes)} episodes across {len(by_date)} active days")
    return sorted(episodes, key=lambda e: e.start_time, reverse=True)
