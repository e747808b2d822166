"""
export.py - CSV / JSON export of analysis results

CSV files are written through pandas DataFrames so column order follows
the to_dict() layout of each result type.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Sequence

import pandas as pd

from .aggregates import MagnitudeBucket, RegionStats, TimeSeriesPoint
from .episodes import SwarmEpisode
from .events import Earthquake

logger = logging.getLogger(__name__)


def earthquakes_to_dataframe(earthquakes: Sequence[Earthquake]) -> pd.DataFrame:
    df = pd.DataFrame([eq.to_dict() for eq in earthquakes])
    if not df.empty:
        df['time'] = pd.to_datetime(df['time'], utc=True)
    return df


def time_series_to_dataframe(points: Sequence[TimeSeriesPoint]) -> pd.DataFrame:
    return pd.DataFrame([p.to_dict() for p in points],
                        columns=['date', 'timestamp', 'count', 'max_magnitude',
                                 'avg_magnitude', 'cumulative_energy'])


def region_stats_to_dataframe(stats: Sequence[RegionStats]) -> pd.DataFrame:
    return pd.DataFrame([s.to_dict() for s in stats])


def magnitude_distribution_to_dataframe(buckets: Sequence[MagnitudeBucket]) -> pd.DataFrame:
    return pd.DataFrame([b.to_dict() for b in buckets])


def episode_days_to_dataframe(episodes: Sequence[SwarmEpisode]) -> pd.DataFrame:
    """One row per (episode, day), quiet days included."""
    rows = []
    for episode in episodes:
        for day in episode.daily_breakdown:
            row = day.to_dict()
            row['episode_id'] = episode.id
            row['region'] = episode.region
            rows.append(row)
    return pd.DataFrame(rows, columns=['episode_id', 'region', 'date', 'count',
                                       'peak_magnitude', 'avg_magnitude', 'intensity'])


def write_csv_tables(tables: Dict[str, pd.DataFrame], output_dir: Path) -> List[Path]:
    """Write each DataFrame to <output_dir>/<name>.csv."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name, df in tables.items():
        path = output_dir / f"{name}.csv"
        df.to_csv(path, index=False)
        written.append(path)
        logger.info(f"Wrote {len(df)} rows to {path}")
    return written


def write_json(result: Dict, output_path: Path) -> None:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(result, f, indent=2)
    logger.info(f"Saved results to {output_path}")
