"""
service.py - Cached analysis service

Binds a SnapshotCache to the pure analysis functions. Every call reads one
snapshot up front and works on it alone, so a refresh landing mid-call
cannot mix two catalogs.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

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
from .episodes import SwarmEpisode, detect_swarm_episodes
from .events import Earthquake
from .loader import load_earthquakes
from .regions import REGIONS, Region
from .summary import (
    EarthquakePage,
    HistoricalSummary,
    YearlySwarmSummary,
    generate_historical_summary,
    get_earthquakes_page,
    group_swarms_by_year,
)
from .swarms import SwarmEvent, detect_swarms

logger = logging.getLogger(__name__)

# A region id, several ids, or None for the whole catalog
RegionFilter = Union[str, Iterable[str], None]


class ActivityService:
    """
    Seismic activity queries over a cached catalog.

    Args:
        cache: Snapshot cache supplying the catalog
        config: Analysis thresholds
        regions: Region catalog
        max_workers: Thread pool size for per-region analysis
    """

    def __init__(self,
                 cache: SnapshotCache,
                 config: Optional[AnalysisConfig] = None,
                 regions: Sequence[Region] = REGIONS,
                 max_workers: int = 4):
        self.cache = cache
        self.config = config or AnalysisConfig()
        self.regions = list(regions)
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, config: AnalysisConfig,
                    clock: Optional[Callable[[], float]] = None) -> 'ActivityService':
        """Service backed by the GeoJSON files in config.data_dir."""
        data_dir = Path(config.data_dir)
        kwargs = {'clock': clock} if clock else {}
        cache = SnapshotCache(
            loader=lambda: load_earthquakes(data_dir, REGIONS),
            ttl_seconds=config.cache_ttl_seconds,
            **kwargs,
        )
        return cls(cache, config)

    def earthquakes(self, region: RegionFilter = None) -> Tuple[Earthquake, ...]:
        """Snapshot events for one region id, a collection of ids, or everything."""
        snapshot = self.cache.get()
        if region is None or region == 'all':
            return snapshot
        wanted = {region} if isinstance(region, str) else set(region)
        return tuple(eq for eq in snapshot if eq.region in wanted)

    def swarms(self, region: RegionFilter = None) -> List[SwarmEvent]:
        return detect_swarms(self.earthquakes(region), **self.config.swarm_kwargs())

    def episodes(self, region: RegionFilter = None) -> List[SwarmEpisode]:
        return detect_swarm_episodes(self.earthquakes(region), **self.config.episode_kwargs())

    def episodes_by_region(self) -> Dict[str, List[SwarmEpisode]]:
        """Episode detection for every catalog region, run in parallel."""
        snapshot = self.cache.get()
        results: Dict[str, List[SwarmEpisode]] = {}

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_region = {
                executor.submit(
                    detect_swarm_episodes,
                    [eq for eq in snapshot if eq.region == region.id],
                    **self.config.episode_kwargs(),
                ): region.id
                for region in self.regions
            }
            for future in as_completed(future_to_region):
                region_id = future_to_region[future]
                results[region_id] = future.result()
                logger.info(f"{region_id}: {len(results[region_id])} episodes")

        return {region.id: results[region.id] for region in self.regions}

    def time_series(self, region: RegionFilter = None,
                    interval_days: Optional[float] = None) -> List[TimeSeriesPoint]:
        interval = self.config.time_series_interval_days if interval_days is None else interval_days
        return generate_time_series(self.earthquakes(region), interval)

    def magnitude_distribution(self, region: RegionFilter = None) -> List[MagnitudeBucket]:
        return get_magnitude_distribution(self.earthquakes(region))

    def region_stats(self) -> List[RegionStats]:
        return get_region_stats(self.cache.get(), self.regions, **self.config.swarm_kwargs())

    def summary(self) -> HistoricalSummary:
        return generate_historical_summary(self.cache.get(), self.regions,
                                           weekly_rate_years=self.config.weekly_rate_years)

    def page(self, **filters) -> EarthquakePage:
        return get_earthquakes_page(self.cache.get(), **filters)

    def yearly_swarms(self, region_id: str) -> List[YearlySwarmSummary]:
        return group_swarms_by_year(self.cache.get(), region_id, **self.config.swarm_kwargs())

    def refresh(self) -> None:
        self.cache.invalidate()
        self.cache.get()
