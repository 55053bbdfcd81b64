# keywords: [challenge descriptor, pydantic, validation, grid types]
"""Validated descriptor models for challenge grid worlds."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from interfaces import DIRECTIONS


class CellSpec(BaseModel):
    """A grid cell in descriptor form: ``{"r": row, "c": col}``."""
    model_config = ConfigDict(frozen=True)

    r: int
    c: int

    def as_cell(self):
        return (self.r, self.c)


class StartSpec(CellSpec):
    """Declared start cell and facing."""
    dir: str = "right"

    @field_validator("dir")
    @classmethod
    def _known_direction(cls, value: str) -> str:
        value = value.lower()
        if value not in DIRECTIONS:
            raise ValueError(f"dir must be one of {DIRECTIONS}, got {value!r}")
        return value


class GridSpec(BaseModel):
    """Grid dimensions."""
    rows: int = Field(..., gt=0)
    cols: int = Field(..., gt=0)


class ChallengeSpec(BaseModel):
    """Complete challenge descriptor as stored in the challenge catalog."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Catalog metadata
    id: str = "custom"
    title: str = ""
    description: str = ""
    difficulty: str = "easy"
    max_blocks: Optional[int] = Field(None, alias="maxBlocks", ge=0)

    # World
    grid: GridSpec
    obstacles: List[CellSpec] = Field(default_factory=list)
    goal: Optional[CellSpec] = None
    stars: List[CellSpec] = Field(default_factory=list)
    start: StartSpec
