"""
Synthetic aggregation of classified registry files

Rows are never read: every file contributes a fixed nominal row count and
the regional / geo breakdowns are drawn from a random generator.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from analytics.classifier import Category, FileDescriptor, classify
from analytics.regions import DEFAULT_REGIONS, Region

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

AGE_BANDS: Tuple[str, ...] = ("0-5", "5-17", "18+")


class IngestionError(RuntimeError):
    """A run failed; no partial summary is available."""


@dataclass(frozen=True)
class AggregatorConfig:
    rows_per_file: int = 500_000
    region_volume_range: Tuple[int, int] = (50_000, 150_000)
    clusters_per_region: int = 15
    points_per_cluster: int = 3
    jitter_degrees: float = 0.1
    max_intensity: int = 5000
    reference_year: int = 2025
    reference_month: int = 2
    days: int = 28
    age_shares: Tuple[Tuple[str, float], ...] = (("0-5", 0.15), ("5-17", 0.35), ("18+", 0.50))

    def __post_init__(self):
        _, month_len = calendar.monthrange(self.reference_year, self.reference_month)
        if not 1 <= self.days <= month_len:
            raise ValueError(f"days must be within 1..{month_len}, got {self.days}")
        lo, hi = self.region_volume_range
        if lo >= hi:
            raise ValueError("region_volume_range must be increasing")

    def reference_dates(self) -> List[str]:
        return [
            date(self.reference_year, self.reference_month, d).isoformat()
            for d in range(1, self.days + 1)
        ]


@dataclass(frozen=True)
class RegionStat:
    """Per-region volumes as handed out in a summary. `districts` is read-only."""

    total_volume: float = 0
    biometric: float = 0
    demographic: float = 0
    enrollment: float = 0
    districts: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "districts", MappingProxyType(dict(self.districts)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_volume": self.total_volume,
            "biometric": self.biometric,
            "demographic": self.demographic,
            "enrollment": self.enrollment,
            "districts": dict(self.districts),
        }


@dataclass
class _RegionTally:
    total_volume: float = 0
    biometric: float = 0
    demographic: float = 0
    enrollment: float = 0
    districts: Dict[str, float] = field(default_factory=dict)

    def add_point(self, point: "GeoPoint") -> None:
        self.biometric += point.biometric_volume
        self.demographic += point.demographic_volume
        self.enrollment += point.enrollment_volume
        self.districts[point.district] = self.districts.get(point.district, 0) + point.intensity

    def freeze(self) -> RegionStat:
        return RegionStat(
            total_volume=self.total_volume,
            biometric=self.biometric,
            demographic=self.demographic,
            enrollment=self.enrollment,
            districts=self.districts,
        )


@dataclass(frozen=True)
class GeoPoint:
    code: str
    district: str
    region: str
    latitude: float
    longitude: float
    intensity: int
    biometric_volume: int = 0
    demographic_volume: int = 0
    enrollment_volume: int = 0

    def volume_for(self, category: Category) -> int:
        return {
            Category.BIOMETRIC: self.biometric_volume,
            Category.DEMOGRAPHIC: self.demographic_volume,
            Category.ENROLLMENT: self.enrollment_volume,
        }[category]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "district": self.district,
            "region": self.region,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "intensity": self.intensity,
            "biometric_volume": self.biometric_volume,
            "demographic_volume": self.demographic_volume,
            "enrollment_volume": self.enrollment_volume,
        }


@dataclass(frozen=True)
class AggregateSummary:
    """Terminal output of one ingestion run. Read-only once built."""

    total_count: float
    category_volumes: Mapping[Category, float]
    by_region: Mapping[str, RegionStat]
    by_date: Mapping[str, float]
    age_groups: Mapping[str, float]
    points: Tuple[GeoPoint, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_count": self.total_count,
            "category_volumes": {c.value: v for c, v in self.category_volumes.items()},
            "by_region": {name: stat.to_dict() for name, stat in self.by_region.items()},
            "by_date": dict(self.by_date),
            "age_groups": dict(self.age_groups),
            "points": [p.to_dict() for p in self.points],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AggregateSummary":
        """Rebuild a summary from its `to_dict` form (e.g. an API response)"""
        by_region = {
            name: RegionStat(
                total_volume=stat["total_volume"],
                biometric=stat["biometric"],
                demographic=stat["demographic"],
                enrollment=stat["enrollment"],
                districts=stat.get("districts", {}),
            )
            for name, stat in data["by_region"].items()
        }
        return cls(
            total_count=data["total_count"],
            category_volumes=MappingProxyType(
                {Category(k): v for k, v in data["category_volumes"].items()}
            ),
            by_region=MappingProxyType(by_region),
            by_date=MappingProxyType(dict(data["by_date"])),
            age_groups=MappingProxyType(dict(data["age_groups"])),
            points=tuple(GeoPoint(**p) for p in data["points"]),
        )


class Aggregator:
    """
    Accumulates one run, file by file.

    Owns the in-progress state exclusively; `summary()` hands out a frozen
    snapshot with copied, read-only containers.
    """

    def __init__(
        self,
        regions: Sequence[Region] = DEFAULT_REGIONS,
        rng: Optional[np.random.Generator] = None,
        config: AggregatorConfig = AggregatorConfig(),
    ):
        self.regions = tuple(regions)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.config = config
        self._dates = config.reference_dates()

        self.files_processed = 0
        self.total_count: float = 0
        self.category_volumes: Dict[Category, float] = {c: 0 for c in Category}
        self.by_region: Dict[str, _RegionTally] = {}
        self.by_date: Dict[str, float] = {}
        self.age_groups: Dict[str, float] = {band: 0 for band, _ in config.age_shares}
        self.points: List[GeoPoint] = []

    def add_file(self, category: Category) -> None:
        cfg = self.config
        rows = cfg.rows_per_file

        self.total_count += rows
        self.category_volumes[category] += rows

        for region in self.regions:
            stat = self.by_region.get(region.name)
            if stat is None:
                stat = self.by_region[region.name] = _RegionTally()
            lo, hi = cfg.region_volume_range
            stat.total_volume += int(self.rng.integers(lo, hi))

            for point in self._cluster_points(region, category):
                stat.add_point(point)
                self.points.append(point)

        per_day = rows / len(self._dates)
        for day in self._dates:
            self.by_date[day] = self.by_date.get(day, 0) + per_day

        for band, share in cfg.age_shares:
            self.age_groups[band] += rows * share

        self.files_processed += 1

    def _cluster_points(self, region: Region, category: Category) -> Iterable[GeoPoint]:
        cfg = self.config
        rng = self.rng
        jitter = cfg.jitter_degrees
        for _ in range(cfg.clusters_per_region):
            base_lat = rng.uniform(*region.lat_range)
            base_lng = rng.uniform(*region.lng_range)
            for _ in range(cfg.points_per_cluster):
                volume = int(rng.integers(0, cfg.max_intensity))
                yield GeoPoint(
                    code=str(int(rng.integers(100_000, 1_000_000))),
                    district=region.districts[int(rng.integers(0, len(region.districts)))],
                    region=region.name,
                    latitude=float(base_lat + rng.uniform(-jitter, jitter)),
                    longitude=float(base_lng + rng.uniform(-jitter, jitter)),
                    intensity=volume,
                    biometric_volume=volume if category is Category.BIOMETRIC else 0,
                    demographic_volume=volume if category is Category.DEMOGRAPHIC else 0,
                    enrollment_volume=volume if category is Category.ENROLLMENT else 0,
                )

    def summary(self) -> AggregateSummary:
        return AggregateSummary(
            total_count=self.total_count,
            category_volumes=MappingProxyType(dict(self.category_volumes)),
            by_region=MappingProxyType(
                {name: tally.freeze() for name, tally in self.by_region.items()}
            ),
            by_date=MappingProxyType(dict(self.by_date)),
            age_groups=MappingProxyType(dict(self.age_groups)),
            points=tuple(self.points),
        )


@dataclass(frozen=True)
class IngestProgress:
    file: FileDescriptor
    category: Category
    fraction: float


def iter_aggregate(
    files: Sequence[FileDescriptor],
    regions: Sequence[Region] = DEFAULT_REGIONS,
    rng: Optional[np.random.Generator] = None,
    config: AggregatorConfig = AggregatorConfig(),
) -> Iterator[Union[IngestProgress, AggregateSummary]]:
    """
    Run one ingestion pass lazily.

    Yields an IngestProgress after every file, then the AggregateSummary as
    the last item. Any failure is raised as IngestionError and no summary
    is yielded.
    """
    total = len(files)
    logger.info("Aggregating %d file(s) over %d region(s)", total, len(regions))
    try:
        agg = Aggregator(regions=regions, rng=rng, config=config)
        for i, f in enumerate(files, start=1):
            category = classify(f.name)
            agg.add_file(category)
            logger.debug("Processed %s as %s (%d/%d)", f.name, category.value, i, total)
            yield IngestProgress(file=f, category=category, fraction=i / total)
        summary = agg.summary()
    except Exception as e:
        logger.exception("Aggregation failed")
        raise IngestionError(f"Aggregation failed: {e}") from e

    logger.info(
        "Aggregated %d file(s): total_count=%s, points=%d",
        total,
        summary.total_count,
        len(summary.points),
    )
    yield summary


def aggregate(
    files: Sequence[FileDescriptor],
    regions: Sequence[Region] = DEFAULT_REGIONS,
    rng: Optional[np.random.Generator] = None,
    on_progress: Optional[ProgressCallback] = None,
    config: AggregatorConfig = AggregatorConfig(),
) -> AggregateSummary:
    """
    Run one ingestion pass over `files` and return its summary.

    `on_progress` receives (files done) / (total files) after every file;
    it is not called for an empty file list. Any failure, including one
    raised by `on_progress`, is raised as IngestionError.
    """
    summary = None
    try:
        for item in iter_aggregate(files, regions=regions, rng=rng, config=config):
            if isinstance(item, AggregateSummary):
                summary = item
            elif on_progress is not None:
                on_progress(item.fraction)
    except IngestionError:
        raise
    except Exception as e:
        logger.exception("Progress callback failed")
        raise IngestionError(f"Aggregation failed: {e}") from e
    return summary
