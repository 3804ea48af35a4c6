from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Tuple

from ..exceptions import RowArityError, RowValueError, SchemaError


class ValueType(str, Enum):
    """Supported column types; the value is the DDL type string"""

    integer = "INT"
    date = "DATE"
    text = "VARCHAR(255)"

    @property
    def ddl(self) -> str:
        return self.value

    def literal(self, value: Any) -> str:
        """Render a Python value as an SQL literal of this type"""
        if self is ValueType.integer:
            return _format_integer(value)
        if self is ValueType.date:
            return _format_date(value)
        return _format_text(value)


def _format_integer(value: Any) -> str:
    if isinstance(value, bool):
        raise RowValueError(f"Boolean is not an integer value: {value!r}")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str):
        try:
            return str(int(value))
        except ValueError:
            pass
    raise RowValueError(f"Not an integer value: {value!r}")


def _format_date(value: Any) -> str:
    if isinstance(value, datetime):
        value = value.date()
    elif isinstance(value, str):
        try:
            value = date.fromisoformat(value)
        except ValueError:
            raise RowValueError(f"Not an ISO date: {value!r}")
    if not isinstance(value, date):
        raise RowValueError(f"Not a date value: {value!r}")
    return f"'{value.isoformat()}'"


def _format_text(value: Any) -> str:
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"


@dataclass(frozen=True)
class Column:
    name: str
    type: ValueType
    constraints: Tuple[str, ...] = ()

    @property
    def definition(self) -> str:
        return " ".join([self.name, self.type.ddl, *self.constraints])


@dataclass(frozen=True)
class Row:
    """Formatted literals for one row of a specific table, in column order"""

    schema: "TableSchema"
    literals: Tuple[str, ...]


@dataclass(frozen=True)
class TableSchema:
    """Table name plus ordered columns; column order drives positional binding"""

    name: str
    columns: Tuple[Column, ...]

    def __post_init__(self):
        # accept lists from callers but keep the schema immutable
        object.__setattr__(self, "columns", tuple(self.columns))
        if not self.name:
            raise SchemaError("Table name must not be empty")
        if not self.columns:
            raise SchemaError(f"Table {self.name} needs at least one column")
        names = [c.name.upper() for c in self.columns]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise SchemaError(
                f"Duplicate column names in {self.name}: {', '.join(duplicates)}"
            )

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def row(self, *values: Any) -> Row:
        """Build a typed row, checking arity and formatting each value"""
        if len(values) != len(self.columns):
            raise RowArityError(
                f"{self.name} expects {len(self.columns)} values "
                f"({', '.join(self.column_names)}), got {len(values)}"
            )
        literals = tuple(
            column.type.literal(value) for column, value in zip(self.columns, values)
        )
        return Row(schema=self, literals=literals)

    def row_from_mapping(self, values: Mapping[str, Any]) -> Row:
        by_name: Dict[str, Any] = {k.upper(): v for k, v in values.items()}
        unknown = set(by_name) - {c.name.upper() for c in self.columns}
        missing = [c.name for c in self.columns if c.name.upper() not in by_name]
        if unknown or missing:
            raise RowArityError(
                f"{self.name} row mismatch: missing={missing} unknown={sorted(unknown)}"
            )
        return self.row(*(by_name[c.name.upper()] for c in self.columns))
