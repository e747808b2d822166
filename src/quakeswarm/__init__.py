"""
quakeswarm - Seismic swarm and episode analysis.

Derives activity patterns from a catalog of region-tagged earthquakes:
short-lived swarms, multi-week episodes with daily breakdowns, and
regional/temporal rollups.

Key Components:
- events.py: Earthquake record and per-event helpers
- regions.py: Bay Area region catalog and assignment
- swarms.py: Greedy seed-centred swarm detection
- episodes.py: Gap-segmented episode detection
- aggregates.py: Time series, magnitude histogram, region stats
- cache.py: TTL snapshot cache
- service.py: Cached query service
"""

from .aggregates import (
    MagnitudeBucket,
    RegionStats,
    TimeSeriesPoint,
    generate_time_series,
    get_magnitude_distribution,
    get_region_stats,
)
from .cache import SnapshotCache
from .config import AnalysisConfig
from .episodes import (
    DailyActivityCluster,
    DailyIntensity,
    EpisodeIntensity,
    SwarmEpisode,
    detect_swarm_episodes,
)
from .events import UNKNOWN_REGION, Earthquake
from .geo_math import haversine_km
from .loader import load_earthquakes
from .regions import REGIONS, Region, region_for_coordinates
from .service import ActivityService
from .swarms import SwarmEvent, SwarmIntensity, detect_swarms

__version__ = '0.1.0'

__all__ = [
    # Events & regions
    'Earthquake',
    'UNKNOWN_REGION',
    'Region',
    'REGIONS',
    'region_for_coordinates',
    'haversine_km',
    'load_earthquakes',
    # Swarms
    'SwarmEvent',
    'SwarmIntensity',
    'detect_swarms',
    # Episodes
    'DailyActivityCluster',
    'DailyIntensity',
    'EpisodeIntensity',
    'SwarmEpisode',
    'detect_swarm_episodes',
    # Aggregates
    'MagnitudeBucket',
    'RegionStats',
    'TimeSeriesPoint',
    'generate_time_series',
    'get_magnitude_distribution',
    'get_region_stats',
    # Service
    'AnalysisConfig',
    'SnapshotCache',
    'ActivityService',
]
