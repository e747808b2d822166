#!/usr/bin/env python3
"""
run_analysis.py - Batch seismic activity analysis

Loads the historical catalog, runs swarm/episode detection and the
aggregates, prints a per-region summary and writes the results.

Usage:
    quakeswarm-analyze --data-dir data
    quakeswarm-analyze --region san-ramon --region santa-clara --output results/latest.json
    quakeswarm-analyze --csv-dir results/csv --interval-days 7
"""

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from .config import AnalysisConfig
from .events import MS_PER_DAY
from .export import (
    episode_days_to_dataframe,
    magnitude_distribution_to_dataframe,
    region_stats_to_dataframe,
    time_series_to_dataframe,
    write_csv_tables,
    write_json,
)
from .regions import REGIONS
from .service import ActivityService

logger = logging.getLogger(__name__)


def run_analysis(service: ActivityService,
                 regions: Optional[List[str]] = None,
                 interval_days: Optional[float] = None) -> Dict:
    """Run the full analysis and return a JSON-ready result."""
    known = [r.id for r in REGIONS]
    if regions:
        unknown = [r for r in regions if r not in known]
        if unknown:
            logger.warning(f"Unknown regions ignored: {unknown}. Valid: {known}")
        selected = [r for r in regions if r in known]
    else:
        selected = known
    scope = selected if regions else None

    region_results = {}
    for region_id in selected:
        episodes = service.episodes(region_id)
        region_results[region_id] = {
            'swarms': [s.to_dict(include_earthquakes=False) for s in service.swarms(region_id)],
            'episodes': [e.to_dict() for e in episodes],
            'magnitude_distribution': [b.to_dict() for b in service.magnitude_distribution(region_id)],
        }
        logger.info(f"{region_id}: {len(region_results[region_id]['swarms'])} swarms, "
                    f"{len(episodes)} episodes")

    return {
        'generated': datetime.now(timezone.utc).isoformat(),
        'config': service.config.to_dict(),
        'summary': service.summary().to_dict(),
        'region_stats': [s.to_dict() for s in service.region_stats()],
        'time_series': [p.to_dict() for p in service.time_series(scope, interval_days=interval_days)],
        'regions': region_results,
    }


def print_summary(service: ActivityService) -> None:
    print("\n" + "=" * 72)
    print("REGION SUMMARY")
    print("=" * 72)
    print(f"{'Region':<20} {'Events':>8} {'Max M':>6} {'Avg M':>6} {'Swarms':>7} {'Per yr':>8}  Last")
    print("-" * 72)
    for s in service.region_stats():
        last = s.last_activity.strftime('%Y-%m-%d') if s.total_count else '-'
        print(f"{s.region_id:<20} {s.total_count:>8} {s.max_magnitude:>6.1f} "
              f"{s.avg_magnitude:>6.2f} {s.swarm_count:>7} {s.earthquakes_per_year:>8.1f}  {last}")
    print("-" * 72)


def positive_float(value: str) -> float:
    number = float(value)
    if int(number * MS_PER_DAY) <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number of days, got {value}")
    return number


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Detect swarms and episodes in a seismic catalog')
    parser.add_argument('--data-dir', type=Path,
                        help='Directory of USGS GeoJSON files (default: from config)')
    parser.add_argument('--config', type=Path, help='Path to analysis.yaml')
    parser.add_argument('--region', action='append',
                        help='Region to analyze (repeatable, default: all). Narrows every output '
                             'except the catalog summary and region stats')
    parser.add_argument('--interval-days', type=positive_float,
                        help='Time series bucket width in days')
    parser.add_argument('--output', type=Path, help='Write JSON results here')
    parser.add_argument('--csv-dir', type=Path, help='Write CSV tables to this directory')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    config = AnalysisConfig.load(args.config)
    if args.data_dir:
        config.data_dir = args.data_dir

    if not Path(config.data_dir).is_dir():
        logger.error(f"Data directory not found: {config.data_dir}")
        return 1

    service = ActivityService.from_config(config)
    result = run_analysis(service, args.region, args.interval_days)
    print_summary(service)

    if args.output:
        write_json(result, args.output)

    if args.csv_dir:
        scope = args.region or None
        selected = args.region or [r.id for r in REGIONS]
        episodes = [e for region_id in selected for e in service.episodes(region_id)]
        write_csv_tables({
            'time_series': time_series_to_dataframe(service.time_series(scope, interval_days=args.interval_days)),
            'region_stats': region_stats_to_dataframe(service.region_stats()),
            'magnitude_distribution': magnitude_distribution_to_dataframe(service.magnitude_distribution(scope)),
            'episode_days': episode_days_to_dataframe(episodes),
        }, args.csv_dir)

    return 0


if __name__ == "__main__":
    sys.exit(main())
