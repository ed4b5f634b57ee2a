from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class StoreSettings(BaseModel):
    strict_references: bool = False
    unique_ids: bool = False


class ChangesSettings(BaseModel):
    delimiter: str = ","
    comment: str = "#"

    @field_validator("delimiter")
    @classmethod
    def _single_char_delimiter(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("delimiter must be a single character")
        return value

    @field_validator("comment")
    @classmethod
    def _non_empty_comment(cls, value: str) -> str:
        if not value:
            raise ValueError("comment prefix must not be empty")
        return value


class SnapshotSettings(BaseModel):
    indent: int = Field(default=2, ge=0)


class Settings(BaseModel):
    store: StoreSettings = StoreSettings()
    changes: ChangesSettings = ChangesSettings()
    snapshot: SnapshotSettings = SnapshotSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        if not explicit_path.exists():
            raise FileNotFoundError(f"Config file not found: {explicit_path}")
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "mixtape.yaml", cwd / "mixtape.yml"):
        if candidate.exists():
            return candidate
    return None
