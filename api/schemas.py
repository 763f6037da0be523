from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from analytics.classifier import Category, FileDescriptor


class FileIn(BaseModel):
    name: str
    size_bytes: int = Field(default=0, ge=0)

    def to_descriptor(self) -> FileDescriptor:
        return FileDescriptor(name=self.name, size_bytes=self.size_bytes)


class IngestRequest(BaseModel):
    files: List[FileIn] = Field(default_factory=list)
    seed: Optional[int] = Field(default=None, description="Fixes the random draws for a reproducible run")


class ClassifiedFile(BaseModel):
    name: str
    size_bytes: int
    category: Category


class InsightRequest(BaseModel):
    total_count: float = 0
    age_groups: Dict[str, float] = Field(default_factory=dict)
    region_names: List[str] = Field(default_factory=list)


class InsightResponse(BaseModel):
    text: str
    fallback: bool
