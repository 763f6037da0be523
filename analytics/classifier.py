"""
Filename-based classification of uploaded registry files
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List


class Category(str, Enum):
    BIOMETRIC = "BIOMETRIC"
    DEMOGRAPHIC = "DEMOGRAPHIC"
    ENROLLMENT = "ENROLLMENT"


@dataclass(frozen=True)
class FileDescriptor:
    """Name and byte size of a selected file. Contents are never read."""

    name: str
    size_bytes: int = 0


# Checked in order; anything unmatched is enrollment data
_KEYWORDS = (
    ("biometric", Category.BIOMETRIC),
    ("demographic", Category.DEMOGRAPHIC),
)


def classify(name: str) -> Category:
    """Category for a filename by case-insensitive substring match"""
    lowered = name.lower()
    for keyword, category in _KEYWORDS:
        if keyword in lowered:
            return category
    return Category.ENROLLMENT


def classify_files(files: Iterable[FileDescriptor]) -> List[Category]:
    """One category per descriptor, in input order"""
    return [classify(f.name) for f in files]
