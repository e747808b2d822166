"""
aggregates.py - Time series, magnitude histogram and regional rollups

Energy proxy:
    E ~ 10^(1.5 * M)
from the Gutenberg-Richter energy-magnitude relation. Absolute units are
meaningless; only ratios between buckets are.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Sequence

import numpy as np

from .events import EPOCH, MS_PER_DAY, Earthquake, ms_to_datetime, sort_chronological
from .regions import REGIONS, Region
from .swarms import detect_swarms

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_DAYS = 30
MS_PER_YEAR = 365 * MS_PER_DAY

# (label, min, max); the last bin is open-ended
MAGNITUDE_BINS = [
    ('0-1', 0, 1),
    ('1-2', 1, 2),
    ('2-3', 2, 3),
    ('3-4', 3, 4),
    ('4-5', 4, 5),
    ('5+', 5, 10),
]


@dataclass(frozen=True)
class TimeSeriesPoint:
    date: datetime
    timestamp_ms: int
    count: int
    max_magnitude: float
    avg_magnitude: float
    cumulative_energy: float

    def to_dict(self) -> Dict:
        return {
            'date': self.date.isoformat(),
            'timestamp': self.timestamp_ms,
            'count': self.count,
            'max_magnitude': self.max_magnitude,
            'avg_magnitude': self.avg_magnitude,
            'cumulative_energy': self.cumulative_energy,
        }


@dataclass(frozen=True)
class MagnitudeBucket:
    range: str
    min: float
    max: float
    count: int
    percentage: float

    def to_dict(self) -> Dict:
        return {
            'range': self.range,
            'min': self.min,
            'max': self.max,
            'count': self.count,
            'percentage': self.percentage,
        }


@dataclass(frozen=True)
class RegionStats:
    """Rollup statistics for one catalog region."""
    region_id: str
    region_name: str
    fault_line: str
    total_count: int
    avg_magnitude: float
    max_magnitude: float
    avg_depth: float
    swarm_count: int
    earthquakes_per_year: float
    last_activity: datetime

    def to_dict(self) -> Dict:
        return {
            'region_id': self.region_id,
            'region_name': self.region_name,
            'fault_line': self.fault_line,
            'total_count': self.total_count,
            'avg_magnitude': self.avg_magnitude,
            'max_magnitude': self.max_magnitude,
            'avg_depth': self.avg_depth,
            'swarm_count': self.swarm_count,
            'earthquakes_per_year': self.earthquakes_per_year,
            'last_activity': self.last_activity.isoformat(),
        }


def seismic_energy(magnitudes: Sequence[float]) -> float:
    """Summed energy proxy 10^(1.5*M) over the given magnitudes."""
    if len(magnitudes) == 0:
        return 0.0
    return float(np.sum(np.power(10.0, 1.5 * np.asarray(magnitudes, dtype=float))))


def generate_time_series(earthquakes: Iterable[Earthquake],
                         interval_days: float = DEFAULT_INTERVAL_DAYS) -> List[TimeSeriesPoint]:
    """
    Bucket events into fixed-width windows [start, start + interval).

    Windows start at the earliest event and continue until one starts
    after the latest event. Empty windows are kept with zero values.

    Raises:
        ValueError: if the interval is shorter than one millisecond
    """
    interval_ms = int(interval_days * MS_PER_DAY)
    if interval_ms <= 0:
        raise ValueError(f"interval_days must be positive, got {interval_days}")

    ordered = sort_chronological(earthquakes)
    if not ordered:
        return []

    start = ordered[0].timestamp_ms
    end = ordered[-1].timestamp_ms

    points = []
    idx = 0
    current_start = start
    while current_start <= end:
        current_end = current_start + interval_ms
        in_range = []
        while idx < len(ordered) and ordered[idx].timestamp_ms < current_end:
            in_range.append(ordered[idx])
            idx += 1

        mags = np.array([eq.magnitude for eq in in_range], dtype=float)
        points.append(TimeSeriesPoint(
            date=ms_to_datetime(current_start),
            timestamp_ms=current_start,
            count=len(in_range),
            max_magnitude=float(mags.max()) if mags.size else 0.0,
            avg_magnitude=float(mags.mean()) if mags.size else 0.0,
            cumulative_energy=seismic_energy(mags),
        ))
        current_start = current_end

    logger.debug(f"Time series: {len(points)} buckets of {interval_days} days")
    return points


def get_magnitude_distribution(earthquakes: Iterable[Earthquake]) -> List[MagnitudeBucket]:
    """
    Histogram of magnitudes over the fixed bins.

    Bins are half-open [min, max) except '5+', which takes every M >= 5.
    Negative magnitudes land in no bin but still count toward the total.
    """
    counts = [0] * len(MAGNITUDE_BINS)
    total = 0
    last = len(MAGNITUDE_BINS) - 1

    for eq in earthquakes:
        total += 1
        for i, (_, lo, hi) in enumerate(MAGNITUDE_BINS):
            if lo <= eq.magnitude < hi or (i == last and eq.magnitude >= lo):
                counts[i] += 1
                break

    return [
        MagnitudeBucket(
            range=label,
            min=lo,
            max=hi,
            count=count,
            percentage=(count / total * 100) if total > 0 else 0.0,
        )
        for (label, lo, hi), count in zip(MAGNITUDE_BINS, counts)
    ]


def _region_stats(region: Region, region_eqs: List[Earthquake], **swarm_kwargs) -> RegionStats:
    if not region_eqs:
        return RegionStats(
            region_id=region.id,
            region_name=region.name,
            fault_line=region.fault_line,
            total_count=0,
            avg_magnitude=0.0,
            max_magnitude=0.0,
            avg_depth=0.0,
            swarm_count=0,
            earthquakes_per_year=0.0,
            last_activity=EPOCH,
        )

    mags = np.array([eq.magnitude for eq in region_eqs], dtype=float)
    depths = np.array([eq.depth_km for eq in region_eqs], dtype=float)
    times = np.array([eq.timestamp_ms for eq in region_eqs], dtype=np.int64)

    min_time = int(times.min())
    max_time = int(times.max())
    # Spans under a year count as one year
    year_span = max((max_time - min_time) / MS_PER_YEAR, 1.0)

    return RegionStats(
        region_id=region.id,
        region_name=region.name,
        fault_line=region.fault_line,
        total_count=len(region_eqs),
        avg_magnitude=float(mags.mean()),
        max_magnitude=float(mags.max()),
        avg_depth=float(depths.mean()),
        swarm_count=len(detect_swarms(region_eqs, **swarm_kwargs)),
        earthquakes_per_year=len(region_eqs) / year_span,
        last_activity=ms_to_datetime(max_time),
    )


def get_region_stats(earthquakes: Iterable[Earthquake],
                     regions: Sequence[Region] = REGIONS,
                     **swarm_kwargs) -> List[RegionStats]:
    """
    Rollup statistics for each catalog region, in catalog order.

    Extra keyword arguments are passed to detect_swarms for the swarm count.
    """
    earthquakes = list(earthquakes)
    stats = []
    for region in regions:
        region_eqs = [eq for eq in earthquakes if eq.region == region.id]
        stats.append(_region_stats(region, region_eqs, **swarm_kwargs))
        logger.debug(f"{region.id}: {len(region_eqs)} events")
    return stats
