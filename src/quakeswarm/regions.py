"""
regions.py - Monitored Bay Area regions

Each region is a lat/lon bounding box along a named fault. Events are
assigned to the first region whose box contains them; anything outside
every box is tagged 'unknown'.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .events import UNKNOWN_REGION


@dataclass(frozen=True)
class RegionBounds:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, lat: float, lon: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon


@dataclass(frozen=True)
class Region:
    """A monitored region of the catalog."""
    id: str
    name: str
    description: str
    fault_line: str
    county: str
    bounds: RegionBounds

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'fault_line': self.fault_line,
            'county': self.county,
            'bounds': {
                'min_lat': self.bounds.min_lat,
                'max_lat': self.bounds.max_lat,
                'min_lon': self.bounds.min_lon,
                'max_lon': self.bounds.max_lon,
            },
        }


# =============================================================================
# REGION CATALOG
# =============================================================================
# Order matters: overlapping boxes resolve to the earlier entry.

REGIONS: List[Region] = [
    Region(
        id='san-ramon',
        name='San Ramon / Dublin / Pleasanton',
        description='I-680/I-580 corridor along the Calaveras Fault',
        fault_line='Calaveras Fault',
        county='Contra Costa / Alameda',
        bounds=RegionBounds(37.635, 37.919, -122.109, -121.845),
    ),
    Region(
        id='berkeley-oakland',
        name='Berkeley / Oakland / Piedmont',
        description='Western East Bay along the Hayward Fault',
        fault_line='Hayward Fault',
        county='Alameda',
        bounds=RegionBounds(37.772, 38.071, -122.439, -122.047),
    ),
    Region(
        id='sf-peninsula',
        name='SF Peninsula / Millbrae / Pacifica',
        description='Peninsula along the San Andreas Fault',
        fault_line='San Andreas Fault',
        county='San Francisco / San Mateo',
        bounds=RegionBounds(37.317, 37.818, -122.533, -122.066),
    ),
    Region(
        id='santa-clara',
        name='Santa Clara / San Jose / Morgan Hill',
        description='South Bay along the Calaveras Fault',
        fault_line='Calaveras Fault',
        county='Santa Clara',
        bounds=RegionBounds(36.95, 37.455, -122.44, -121.632),
    ),
    Region(
        id='gilroy-south',
        name='Gilroy / Hollister / South Valley',
        description='Southern Santa Clara County',
        fault_line='Calaveras/San Andreas',
        county='Santa Clara / San Benito',
        bounds=RegionBounds(36.763, 37.455, -122.113, -121.443),
    ),
    Region(
        id='sonoma-north',
        name='Sonoma / Napa / North Bay',
        description='Wine Country along the Rodgers Creek Fault',
        fault_line='Rodgers Creek Fault',
        county='Sonoma / Napa',
        bounds=RegionBounds(37.81, 38.66, -123.069, -122.421),
    ),
]


def region_for_coordinates(lat: float, lon: float,
                           regions: Sequence[Region] = REGIONS) -> str:
    """Return the id of the first region containing the point, else 'unknown'."""
    for region in regions:
        if region.bounds.contains(lat, lon):
            return region.id
    return UNKNOWN_REGION


def get_region_by_id(region_id: str,
                     regions: Sequence[Region] = REGIONS) -> Optional[Region]:
    for region in regions:
        if region.id == region_id:
            return region
    return None


def region_name(region_id: str) -> str:
    region = get_region_by_id(region_id)
    return region.name if region else 'Unknown Region'
