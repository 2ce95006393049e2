# sheetmerge/config.py

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .reader import read_first_row


@dataclass(frozen=True)
class MergeConfig:
    sheet_name: Optional[str] = None   # mapping worksheet; first sheet when None
    key_column: Optional[str] = None   # join column; no enrichment when None


@dataclass(frozen=True)
class MergePaths:
    source_a: str
    source_b: str
    mapping:  str
    config:   str
    output:   str

    @classmethod
    def from_directory(cls, directory: str) -> "MergePaths":
        """The conventional layout: a.xlsx, b.xlsx, mapping.xlsx, conf.xlsx -> merge.xlsx."""
        return cls(
            source_a=os.path.join(directory, "a.xlsx"),
            source_b=os.path.join(directory, "b.xlsx"),
            mapping=os.path.join(directory, "mapping.xlsx"),
            config=os.path.join(directory, "conf.xlsx"),
            output=os.path.join(directory, "merge.xlsx"),
        )


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def read_config(path: str) -> MergeConfig:
    """
    Read the config record: the first row's first two cells, taken
    positionally as (sheet_name, key_column). There is no header row.
    """
    first = read_first_row(path)
    sheet_name = first[0] if len(first) > 0 else None
    key_column = first[1] if len(first) > 1 else None
    return MergeConfig(sheet_name=_clean(sheet_name), key_column=_clean(key_column))


def resolve_output_path(output: str) -> str:
    """Add a timestamp to `output` if a file already exists there."""
    if not os.path.exists(output):
        return output
    directory, file_name = os.path.split(output)
    base, ext = os.path.splitext(file_name)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join(directory, f"{base}_{timestamp}{ext}")
