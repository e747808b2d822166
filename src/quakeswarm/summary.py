"""
summary.py - Catalog summaries and queries

Lightweight views over a catalog snapshot for dashboards and API layers:
the historical summary, paginated event queries, per-region swarm lookup
and year-by-year swarm rollups.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from .events import Earthquake, find_biggest_earthquake, ms_to_datetime
from .regions import REGIONS, Region
from .swarms import SwarmEvent, detect_swarms

logger = logging.getLogger(__name__)

MAX_SWARM_SUMMARIES = 50
DEFAULT_WEEKLY_RATE_YEARS = 15
DEFAULT_PAGE_SIZE = 50

HEADLINE_REGIONS = ('san-ramon', 'santa-clara')


# =============================================================================
# HISTORICAL SUMMARY
# =============================================================================

@dataclass
class HistoricalSummary:
    """Compact catalog summary, small enough to ship to a client."""
    total_count: int
    date_range: Dict[str, str]
    magnitude_range: Dict[str, float]
    by_region: Dict[str, int]
    biggest_quake: Optional[Dict]
    region_stats: List[Dict]
    swarm_summaries: List[Dict]
    headline_counts: Dict[str, int] = field(default_factory=dict)
    headline_swarm_counts: Dict[str, int] = field(default_factory=dict)
    avg_weekly_rate: int = 0

    def to_dict(self) -> Dict:
        return {
            'total_count': self.total_count,
            'date_range': self.date_range,
            'magnitude_range': self.magnitude_range,
            'by_region': self.by_region,
            'biggest_quake': self.biggest_quake,
            'region_stats': self.region_stats,
            'swarm_summaries': self.swarm_summaries,
            'headline_counts': self.headline_counts,
            'headline_swarm_counts': self.headline_swarm_counts,
            'avg_weekly_rate': self.avg_weekly_rate,
        }


def generate_historical_summary(earthquakes: Sequence[Earthquake],
                                regions: Sequence[Region] = REGIONS,
                                weekly_rate_years: float = DEFAULT_WEEKLY_RATE_YEARS,
                                now: Optional[datetime] = None) -> HistoricalSummary:
    """
    Summarize a catalog snapshot.

    The weekly rate is for the first headline region (San Ramon) and
    assumes the catalog covers `weekly_rate_years` years.
    """
    if not earthquakes:
        now_iso = (now or datetime.now(timezone.utc)).isoformat()
        return HistoricalSummary(
            total_count=0,
            date_range={'start': now_iso, 'end': now_iso},
            magnitude_range={'min': 0.0, 'max': 0.0, 'avg': 0.0},
            by_region={},
            biggest_quake=None,
            region_stats=[],
            swarm_summaries=[],
            headline_counts={r: 0 for r in HEADLINE_REGIONS},
            headline_swarm_counts={r: 0 for r in HEADLINE_REGIONS},
            avg_weekly_rate=0,
        )

    mags = np.array([eq.magnitude for eq in earthquakes], dtype=float)
    times = [eq.timestamp_ms for eq in earthquakes]

    by_region: Dict[str, int] = defaultdict(int)
    for eq in earthquakes:
        by_region[eq.region] += 1

    biggest = find_biggest_earthquake(earthquakes)

    region_stats = []
    for region in regions:
        region_mags = [eq.magnitude for eq in earthquakes if eq.region == region.id]
        region_stats.append({
            'region_id': region.id,
            'total_count': len(region_mags),
            'avg_magnitude': float(np.mean(region_mags)) if region_mags else 0.0,
            'max_magnitude': float(max(region_mags)) if region_mags else 0.0,
        })

    swarm_summaries = [
        s.to_dict(include_earthquakes=False)
        for s in detect_swarms(earthquakes)[:MAX_SWARM_SUMMARIES]
    ]

    headline_counts = {}
    headline_swarm_counts = {}
    for region_id in HEADLINE_REGIONS:
        region_eqs = [eq for eq in earthquakes if eq.region == region_id]
        headline_counts[region_id] = len(region_eqs)
        headline_swarm_counts[region_id] = len(detect_swarms(region_eqs))

    avg_weekly_rate = round(headline_counts[HEADLINE_REGIONS[0]] / (weekly_rate_years * 52))

    return HistoricalSummary(
        total_count=len(earthquakes),
        date_range={
            'start': ms_to_datetime(min(times)).isoformat(),
            'end': ms_to_datetime(max(times)).isoformat(),
        },
        magnitude_range={
            'min': float(mags.min()),
            'max': float(mags.max()),
            'avg': float(mags.mean()),
        },
        by_region=dict(by_region),
        biggest_quake={
            'id': biggest.id,
            'magnitude': biggest.magnitude,
            'place': biggest.place,
            'timestamp': biggest.timestamp_ms,
            'region': biggest.region,
        },
        region_stats=region_stats,
        swarm_summaries=swarm_summaries,
        headline_counts=headline_counts,
        headline_swarm_counts=headline_swarm_counts,
        avg_weekly_rate=avg_weekly_rate,
    )


# =============================================================================
# QUERIES
# =============================================================================

@dataclass
class EarthquakePage:
    earthquakes: List[Earthquake]
    total: int
    has_more: bool

    def to_dict(self) -> Dict:
        return {
            'earthquakes': [eq.to_dict() for eq in self.earthquakes],
            'total': self.total,
            'has_more': self.has_more,
        }


def get_earthquakes_page(earthquakes: Iterable[Earthquake],
                         region: Optional[str] = None,
                         page: int = 1,
                         limit: int = DEFAULT_PAGE_SIZE,
                         min_magnitude: float = 0.0,
                         start_ms: Optional[int] = None,
                         end_ms: Optional[int] = None) -> EarthquakePage:
    """
    Filter and paginate a catalog. Input order is preserved.

    Args:
        region: Region id, or None / 'all' for every region
        page: 1-based page number
        limit: Page size
        min_magnitude: Inclusive magnitude floor (ignored when <= 0)
        start_ms, end_ms: Inclusive time bounds in epoch milliseconds
    """
    filtered = list(earthquakes)
    if region and region != 'all':
        filtered = [eq for eq in filtered if eq.region == region]
    if min_magnitude > 0:
        filtered = [eq for eq in filtered if eq.magnitude >= min_magnitude]
    if start_ms is not None:
        filtered = [eq for eq in filtered if eq.timestamp_ms >= start_ms]
    if end_ms is not None:
        filtered = [eq for eq in filtered if eq.timestamp_ms <= end_ms]

    total = len(filtered)
    offset = (max(page, 1) - 1) * limit

    return EarthquakePage(
        earthquakes=filtered[offset:offset + limit],
        total=total,
        has_more=offset + limit < total,
    )


def get_swarms_for_region(earthquakes: Iterable[Earthquake], region_id: str,
                          **swarm_kwargs) -> List[SwarmEvent]:
    return detect_swarms((eq for eq in earthquakes if eq.region == region_id), **swarm_kwargs)


# =============================================================================
# YEARLY ROLLUP
# =============================================================================

@dataclass
class YearlySwarmSummary:
    """Swarm activity within one calendar year (UTC)."""
    year: int
    swarms: List[SwarmEvent]
    total_earthquakes: int
    peak_magnitude: float
    total_swarm_quakes: int
    avg_swarm_size: float
    longest_swarm_hours: float
    magnitude_counts: Dict[str, int]

    def to_dict(self) -> Dict:
        return {
            'year': self.year,
            'swarms': [s.to_dict(include_earthquakes=False) for s in self.swarms],
            'total_earthquakes': self.total_earthquakes,
            'peak_magnitude': self.peak_magnitude,
            'total_swarm_quakes': self.total_swarm_quakes,
            'avg_swarm_size': self.avg_swarm_size,
            'longest_swarm_hours': self.longest_swarm_hours,
            'magnitude_counts': self.magnitude_counts,
        }


def group_swarms_by_year(earthquakes: Iterable[Earthquake],
                         region_id: str,
                         **swarm_kwargs) -> List[YearlySwarmSummary]:
    """
    Year-by-year swarm rollup for one region, newest year first.

    Swarms are detected over the whole regional history and attributed to
    the year they started in. Years with neither events nor swarms are
    omitted.
    """
    region_eqs = [eq for eq in earthquakes if eq.region == region_id]
    swarms = detect_swarms(region_eqs, **swarm_kwargs)

    quakes_by_year: Dict[int, List[Earthquake]] = defaultdict(list)
    for eq in region_eqs:
        quakes_by_year[eq.time.year].append(eq)

    swarms_by_year: Dict[int, List[SwarmEvent]] = defaultdict(list)
    for swarm in swarms:
        swarms_by_year[swarm.start_time.year].append(swarm)

    summaries = []
    for year in sorted(set(quakes_by_year) | set(swarms_by_year), reverse=True):
        year_quakes = quakes_by_year.get(year, [])
        year_swarms = swarms_by_year.get(year, [])
        total_swarm_quakes = sum(s.total_count for s in year_swarms)
        mags = [eq.magnitude for eq in year_quakes]

        summaries.append(YearlySwarmSummary(
            year=year,
            swarms=year_swarms,
            total_earthquakes=len(year_quakes),
            peak_magnitude=max(mags) if mags else 0.0,
            total_swarm_quakes=total_swarm_quakes,
            avg_swarm_size=total_swarm_quakes / len(year_swarms) if year_swarms else 0.0,
            longest_swarm_hours=max((s.duration_hours for s in year_swarms), default=0.0),
            magnitude_counts={
                'm2plus': sum(1 for m in mags if m >= 2),
                'm3plus': sum(1 for m in mags if m >= 3),
                'm4plus': sum(1 for m in mags if m >= 4),
                'm5plus': sum(1 for m in mags if m >= 5),
            },
        ))

    logger.debug(f"{region_id}: {len(swarms)} swarms across {len(summaries)} years")
    return summaries
