# sheetmerge/__init__.py

from .merger         import MergerFacade, MergeResult
from .config         import MergeConfig, MergePaths, read_config, resolve_output_path
from .reader         import read_table
from .merge_service  import (
    ColumnUnion,
    MergedRow,
    Table,
    apply_mapping,
    build_mapping_index,
    merge_tables,
    resolve_columns,
)
from .formatter      import write_table
from .logging_config import setup_logging

__all__ = [
    "MergerFacade",
    "MergeResult",
    "MergeConfig",
    "MergePaths",
    "read_config",
    "resolve_output_path",
    "read_table",
    "ColumnUnion",
    "MergedRow",
    "Table",
    "apply_mapping",
    "build_mapping_index",
    "merge_tables",
    "resolve_columns",
    "write_table",
    "setup_logging",
]
