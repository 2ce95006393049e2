# sheetmerge/merge_service.py

"""
Column-union merge and key-based enrichment of two record tables.

Everything in here is pure: tables go in, immutable rows come out. Reading,
writing and logging live in the surrounding modules.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

Record = Mapping[str, str]
MappingIndex = Dict[str, Record]


@dataclass(frozen=True)
class Table:
    """Header (row 1 of the sheet) plus the data records read beneath it."""
    header: Tuple[str, ...] = ()
    records: Tuple[Record, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    @property
    def columns(self) -> Tuple[str, ...]:
        """Columns this table contributes to a union: none when it has no rows."""
        return self.header if self.records else ()


@dataclass(frozen=True)
class ColumnUnion:
    """Insertion-ordered, duplicate-free column names."""
    names: Tuple[str, ...] = ()
    _positions: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        positions: Dict[str, int] = {}
        for name in self.names:
            if name in positions:
                raise ValueError(f"Duplicate column '{name}' in column union")
            positions[name] = len(positions)
        object.__setattr__(self, "_positions", positions)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self._positions

    def position(self, name: str) -> int:
        return self._positions[name]


@dataclass(frozen=True)
class MergedRow:
    """
    One output row. The key set is the column union it was built against,
    so every row of a merge has exactly the same columns.
    """
    columns: ColumnUnion
    values: Tuple[str, ...]

    def __post_init__(self):
        if len(self.values) != len(self.columns):
            raise ValueError(
                f"Row has {len(self.values)} values for {len(self.columns)} columns"
            )

    @classmethod
    def from_record(cls, columns: ColumnUnion, record: Record) -> "MergedRow":
        return cls(columns, tuple(record.get(name, "") or "" for name in columns))

    def __getitem__(self, name: str) -> str:
        return self.values[self.columns.position(name)]

    def get(self, name: str, default: str = "") -> str:
        if name in self.columns:
            return self[name]
        return default

    def overlay(self, fields: Record) -> "MergedRow":
        """Return a copy with every field of `fields` written over; unknown columns are dropped."""
        values = list(self.values)
        for name, value in fields.items():
            if name in self.columns:
                values[self.columns.position(name)] = "" if value is None else value
        return MergedRow(self.columns, tuple(values))

    def as_dict(self) -> Dict[str, str]:
        return dict(zip(self.columns, self.values))


def resolve_columns(*headers: Iterable[str]) -> ColumnUnion:
    """
    Build the column union of the given headers, in argument order.

    Callers pass Source A's header, then Source B's, then the mapping table's;
    that order is the output column order.
    """
    seen: Dict[str, None] = {}
    for header in headers:
        for name in header:
            seen.setdefault(name, None)
    return ColumnUnion(tuple(seen))


def build_mapping_index(mapping_table: Table, key_column: Optional[str]) -> MappingIndex:
    """
    Index mapping records by their value at `key_column`.

    Records without a key value are skipped. When a key repeats, the later
    record replaces the earlier one.
    """
    index: MappingIndex = {}
    if not key_column:
        return index
    for record in mapping_table.records:
        key = record.get(key_column)
        if key is None:
            continue
        index[key] = record
    return index


def normalize_records(tables: Sequence[Table], columns: ColumnUnion) -> List[MergedRow]:
    """Column-complete every record, tables concatenated in the order given."""
    return [
        MergedRow.from_record(columns, record)
        for table in tables
        for record in table.records
    ]


def apply_mapping(
    rows: Iterable[MergedRow],
    mapping_index: MappingIndex,
    key_column: Optional[str],
) -> List[MergedRow]:
    """
    Overlay the matching mapping record onto each row, keyed by the row's
    value at `key_column`. Without a key column rows are returned as-is.
    """
    rows = list(rows)
    if not key_column:
        return rows

    enriched: List[MergedRow] = []
    for row in rows:
        match = mapping_index.get(row.get(key_column, ""))
        enriched.append(row.overlay(match) if match is not None else row)
    return enriched


def merge_tables(
    table_a: Table,
    table_b: Table,
    columns: ColumnUnion,
    mapping_index: MappingIndex,
    key_column: Optional[str],
) -> List[MergedRow]:
    """
    Merge Source A and Source B into one list of rows over `columns`.

    A's rows come first, then B's, each in their original order. Rows whose
    key matches an entry of `mapping_index` get that entry's fields.
    """
    rows = normalize_records([table_a, table_b], columns)
    return apply_mapping(rows, mapping_index, key_column)
