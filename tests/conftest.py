"""
Shared fixtures: a small deterministic reference table and seeded generators.
"""

from __future__ import annotations

import numpy as np
import pytest

from analytics.classifier import FileDescriptor
from analytics.regions import Region


@pytest.fixture()
def small_regions() -> tuple[Region, ...]:
    return (
        Region("Alpha", (10.0, 11.0), (70.0, 71.0), ("A1", "A2")),
        Region("Beta", (20.0, 20.5), (80.0, 80.5), ("B1",)),
    )


@pytest.fixture()
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture()
def mixed_files() -> list[FileDescriptor]:
    return [
        FileDescriptor("Biometric_Jan.csv", 1024),
        FileDescriptor("demographic_feb.csv", 2048),
        FileDescriptor("enrol_mar.csv", 0),
    ]
