"""
Reference table of regions: bounding boxes and district names
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    name: str
    lat_range: Tuple[float, float]
    lng_range: Tuple[float, float]
    districts: Tuple[str, ...]

    def __post_init__(self):
        for label, (lo, hi) in (("lat", self.lat_range), ("lng", self.lng_range)):
            if lo > hi:
                raise ValueError(f"Region '{self.name}': {label} range {lo}..{hi} is inverted")
        if not self.districts:
            raise ValueError(f"Region '{self.name}' has no districts")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "lat": list(self.lat_range),
            "lng": list(self.lng_range),
            "districts": list(self.districts),
        }


DEFAULT_REGIONS: Tuple[Region, ...] = (
    Region("Maharashtra", (18.0, 20.0), (72.5, 74.0), ("Mumbai", "Thane", "Navi Mumbai", "Pune")),
    Region("Uttar Pradesh", (26.0, 28.0), (80.0, 82.0), ("Lucknow", "Kanpur", "Prayagraj")),
    Region("Karnataka", (12.0, 14.0), (77.0, 78.0), ("Bengaluru", "Mysuru", "Kolar")),
    Region("Delhi", (28.4, 28.8), (76.9, 77.3), ("New Delhi", "Dwarka", "Rohini", "Saket")),
    Region("West Bengal", (22.0, 23.0), (88.0, 89.0), ("Kolkata", "Howrah", "Dum Dum")),
    Region("Tamil Nadu", (12.5, 13.5), (79.5, 80.5), ("Chennai", "Kanchipuram")),
    Region("Rajasthan", (26.5, 27.5), (75.5, 76.5), ("Jaipur", "Amer")),
    Region("Gujarat", (22.5, 23.5), (72.0, 73.0), ("Ahmedabad", "Gandhinagar")),
)


def regions_from_records(records: Sequence[Dict[str, Any]]) -> Tuple[Region, ...]:
    """Build a reference table from plain dicts (`name`, `lat`, `lng`, `districts`)"""
    regions: List[Region] = []
    seen = set()
    for rec in records:
        try:
            name = str(rec["name"])
            lat_lo, lat_hi = (float(v) for v in rec["lat"])
            lng_lo, lng_hi = (float(v) for v in rec["lng"])
            districts = tuple(str(d) for d in rec["districts"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed region record {rec!r}: {e}") from e
        if name in seen:
            raise ValueError(f"Duplicate region '{name}'")
        seen.add(name)
        regions.append(Region(name, (lat_lo, lat_hi), (lng_lo, lng_hi), districts))
    return tuple(regions)


def load_regions(path: str | Path) -> Tuple[Region, ...]:
    """Load a reference table from a JSON file holding a list of region records"""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of regions")
    regions = regions_from_records(data)
    logger.info("Loaded %d regions from %s", len(regions), path)
    return regions
