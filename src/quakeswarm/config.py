"""
config.py - Analysis configuration

Defaults live in the dataclass; config/analysis.yaml overrides them and
environment variables (optionally from a .env file) override both.

Usage:
    from quakeswarm.config import AnalysisConfig

    cfg = AnalysisConfig.load()
    swarms = detect_swarms(events, **cfg.swarm_kwargs())

YAML layout:
    data_dir: data
    cache_ttl_seconds: 3600
    swarms:
      time_window_hours: 72
      distance_km: 10
      min_earthquakes: 5
    episodes:
      gap_days: 14
      min_earthquakes: 5
    time_series:
      interval_days: 30
    summary:
      weekly_rate_years: 15

Environment:
    QUAKESWARM_DATA_DIR, QUAKESWARM_CACHE_TTL
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml
from dotenv import load_dotenv

from .aggregates import DEFAULT_INTERVAL_DAYS
from .cache import DEFAULT_TTL_SECONDS
from .episodes import EPISODE_GAP_DAYS, EPISODE_MIN_EARTHQUAKES
from .events import MS_PER_DAY
from .summary import DEFAULT_WEEKLY_RATE_YEARS
from .swarms import SWARM_DISTANCE_KM, SWARM_MIN_EARTHQUAKES, SWARM_TIME_WINDOW_HOURS

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_PATH = PROJECT_ROOT / 'config' / 'analysis.yaml'
ENV_PATH = PROJECT_ROOT / '.env'


@dataclass
class AnalysisConfig:
    """Thresholds and paths for the analysis pipeline."""

    data_dir: Path = field(default_factory=lambda: PROJECT_ROOT / 'data')
    cache_ttl_seconds: float = DEFAULT_TTL_SECONDS

    # Swarm detection
    swarm_time_window_hours: float = SWARM_TIME_WINDOW_HOURS
    swarm_distance_km: float = SWARM_DISTANCE_KM
    swarm_min_earthquakes: int = SWARM_MIN_EARTHQUAKES

    # Episode detection
    episode_gap_days: int = EPISODE_GAP_DAYS
    episode_min_earthquakes: int = EPISODE_MIN_EARTHQUAKES

    time_series_interval_days: float = DEFAULT_INTERVAL_DAYS
    weekly_rate_years: float = DEFAULT_WEEKLY_RATE_YEARS

    def __post_init__(self):
        if int(self.time_series_interval_days * MS_PER_DAY) <= 0:
            raise ValueError(f"time_series.interval_days must be positive, "
                             f"got {self.time_series_interval_days}")

    @classmethod
    def from_dict(cls, data: Dict, base_dir: Optional[Path] = None) -> 'AnalysisConfig':
        defaults = cls()
        swarms = data.get('swarms', {}) or {}
        episodes = data.get('episodes', {}) or {}
        series = data.get('time_series', {}) or {}
        summary = data.get('summary', {}) or {}

        data_dir = defaults.data_dir
        if data.get('data_dir'):
            data_dir = Path(data['data_dir'])
            if not data_dir.is_absolute() and base_dir is not None:
                data_dir = base_dir / data_dir

        return cls(
            data_dir=data_dir,
            cache_ttl_seconds=float(data.get('cache_ttl_seconds', defaults.cache_ttl_seconds)),
            swarm_time_window_hours=float(swarms.get('time_window_hours', defaults.swarm_time_window_hours)),
            swarm_distance_km=float(swarms.get('distance_km', defaults.swarm_distance_km)),
            swarm_min_earthquakes=int(swarms.get('min_earthquakes', defaults.swarm_min_earthquakes)),
            episode_gap_days=int(episodes.get('gap_days', defaults.episode_gap_days)),
            episode_min_earthquakes=int(episodes.get('min_earthquakes', defaults.episode_min_earthquakes)),
            time_series_interval_days=float(series.get('interval_days', defaults.time_series_interval_days)),
            weekly_rate_years=float(summary.get('weekly_rate_years', defaults.weekly_rate_years)),
        )

    @classmethod
    def load(cls, config_path: Optional[Path] = None,
             env_path: Optional[Path] = None) -> 'AnalysisConfig':
        """Load configuration from YAML, then apply environment overrides."""
        config_path = Path(config_path) if config_path else CONFIG_PATH
        load_dotenv(env_path or ENV_PATH)

        if not config_path.exists():
            logger.info(f"Config not found: {config_path} - using defaults")
            cfg = cls()
        else:
            try:
                with open(config_path) as f:
                    data = yaml.safe_load(f)
                if not data:
                    logger.warning(f"Empty config {config_path}, using defaults")
                    cfg = cls()
                else:
                    cfg = cls.from_dict(data, base_dir=config_path.parent.parent)
            except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
                logger.error(f"Failed to load config {config_path}: {e}")
                cfg = cls()

        cfg.apply_env()
        return cfg

    def apply_env(self) -> None:
        data_dir = os.getenv('QUAKESWARM_DATA_DIR')
        if data_dir:
            self.data_dir = Path(data_dir)

        ttl = os.getenv('QUAKESWARM_CACHE_TTL')
        if ttl:
            try:
                self.cache_ttl_seconds = float(ttl)
            except ValueError:
                logger.warning(f"Ignoring invalid QUAKESWARM_CACHE_TTL={ttl!r}")

    def swarm_kwargs(self) -> Dict:
        return {
            'time_window_hours': self.swarm_time_window_hours,
            'distance_km': self.swarm_distance_km,
            'min_earthquakes': self.swarm_min_earthquakes,
        }

    def episode_kwargs(self) -> Dict:
        return {
            'gap_days': self.episode_gap_days,
            'min_earthquakes': self.episode_min_earthquakes,
        }

    def to_dict(self) -> Dict:
        return {
            'data_dir': str(self.data_dir),
            'cache_ttl_seconds': self.cache_ttl_seconds,
            'swarms': self.swarm_kwargs(),
            'episodes': self.episode_kwargs(),
            'time_series': {'interval_days': self.time_series_interval_days},
            'summary': {'weekly_rate_years': self.weekly_rate_years},
        }
