"""
pandas views of an AggregateSummary for charts and tables
"""

from typing import Optional

import pandas as pd

from analytics.aggregator import AGE_BANDS, AggregateSummary
from analytics.classifier import Category

# Column colours used by the map and the category charts
CATEGORY_COLORS = {
    None: "#00f2ff",
    Category.BIOMETRIC: "#f59e0b",
    Category.DEMOGRAPHIC: "#a855f7",
    Category.ENROLLMENT: "#3b82f6",
}

AGE_BAND_COLORS = {"0-5": "#3b82f6", "5-17": "#a855f7", "18+": "#f59e0b"}


def category_frame(summary: AggregateSummary) -> pd.DataFrame:
    rows = [
        {"category": c.value, "volume": summary.category_volumes.get(c, 0)}
        for c in Category
    ]
    return pd.DataFrame(rows, columns=["category", "volume"])


def date_frame(summary: AggregateSummary) -> pd.DataFrame:
    """Ingest velocity: one row per reference date, sorted"""
    df = pd.DataFrame(
        sorted(summary.by_date.items()), columns=["date", "volume"]
    )
    df["date"] = pd.to_datetime(df["date"])
    return df


def age_frame(summary: AggregateSummary) -> pd.DataFrame:
    rows = [
        {"band": band, "volume": summary.age_groups.get(band, 0), "color": AGE_BAND_COLORS[band]}
        for band in AGE_BANDS
    ]
    return pd.DataFrame(rows, columns=["band", "volume", "color"])


def region_frame(summary: AggregateSummary, top: Optional[int] = None) -> pd.DataFrame:
    """Per-region volumes, largest total first"""
    rows = [
        {
            "region": name,
            "total_volume": stat.total_volume,
            "biometric": stat.biometric,
            "demographic": stat.demographic,
            "enrollment": stat.enrollment,
            "districts": len(stat.districts),
        }
        for name, stat in summary.by_region.items()
    ]
    df = pd.DataFrame(
        rows,
        columns=["region", "total_volume", "biometric", "demographic", "enrollment", "districts"],
    )
    df = df.sort_values("total_volume", ascending=False, kind="stable").reset_index(drop=True)
    if top is not None:
        df = df.head(top)
    return df


def district_frame(summary: AggregateSummary, region: str) -> pd.DataFrame:
    stat = summary.by_region.get(region)
    if stat is None:
        raise KeyError(f"Unknown region '{region}'")
    df = pd.DataFrame(sorted(stat.districts.items()), columns=["district", "volume"])
    return df.sort_values("volume", ascending=False, kind="stable").reset_index(drop=True)


def points_frame(summary: AggregateSummary, category: Optional[Category] = None) -> pd.DataFrame:
    """
    Geo points for the map.

    `volume` is the point's intensity, or its volume in `category` when one
    is given; points with nothing in that category are dropped.
    """
    df = pd.DataFrame(
        [p.to_dict() for p in summary.points],
        columns=[
            "code", "district", "region", "latitude", "longitude", "intensity",
            "biometric_volume", "demographic_volume", "enrollment_volume",
        ],
    )
    if category is None:
        df["volume"] = df["intensity"]
    else:
        df["volume"] = [p.volume_for(category) for p in summary.points]
        df = df[df["volume"] > 0].reset_index(drop=True)
    return df
