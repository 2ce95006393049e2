# sheetmerge/merger.py

"""
Facade for sheet merging: orchestrates config, reading, merging and writing.
"""
from dataclasses import dataclass
from typing import List

import pandas as pd
from loguru import logger
from openpyxl.utils.exceptions import IllegalCharacterError

from .config import MergeConfig, MergePaths, read_config
from .formatter import DEFAULT_SHEET_TITLE, write_table
from .merge_service import (
    ColumnUnion,
    MergedRow,
    build_mapping_index,
    merge_tables,
    resolve_columns,
)
from .reader import read_table


@dataclass(frozen=True)
class MergeResult:
    config:  MergeConfig
    columns: ColumnUnion
    rows:    List[MergedRow]
    output_path: str
    written: bool

    def to_frame(self) -> pd.DataFrame:
        """Merged rows as a DataFrame of strings, columns in union order."""
        return pd.DataFrame(
            [row.values for row in self.rows],
            columns=list(self.columns),
            dtype=str,
        )


class MergerFacade:
    """
    High-level facade: one batch run from the five paths to the output workbook.
    """

    @staticmethod
    def run_merge(
        paths: MergePaths,
        *,
        sheet_title: str = DEFAULT_SHEET_TITLE,
    ) -> MergeResult:
        # 1) Config record (mapping sheet + key column)
        logger.info("Reading config from {}", paths.config)
        config = read_config(paths.config)
        logger.info("Config: sheet={}, key_column={}", config.sheet_name, config.key_column)

        # 2) Source tables
        table_a = read_table(paths.source_a)
        table_b = read_table(paths.source_b)
        logger.info("Source A records: {}, Source B records: {}", len(table_a), len(table_b))

        # 3) Mapping table and its index
        mapping_table = read_table(paths.mapping, config.sheet_name)
        mapping_index = build_mapping_index(mapping_table, config.key_column)
        logger.info("Mapping records: {}, distinct keys: {}", len(mapping_table), len(mapping_index))
        if not config.key_column:
            logger.warning("No key column configured; rows will not be enriched")

        # 4) Merge
        columns = resolve_columns(table_a.columns, table_b.columns, mapping_table.columns)
        logger.info("Merged columns: {}", list(columns))
        rows = merge_tables(table_a, table_b, columns, mapping_index, config.key_column)
        logger.info("Merged records: {}", len(rows))

        # 5) Write; a failed write is reported but the merge result is kept
        written = False
        try:
            write_table(paths.output, sheet_title, list(columns), [row.values for row in rows])
            written = True
            logger.info("Wrote {}", paths.output)
        except (OSError, IllegalCharacterError):
            logger.exception("Failed to write merged workbook {}", paths.output)

        return MergeResult(
            config=config,
            columns=columns,
            rows=rows,
            output_path=paths.output,
            written=written,
        )
