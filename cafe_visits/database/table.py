import logging
from typing import Sequence, Union

from ..exceptions import RowArityError, SchemaError
from .executor import ExecutionResult, ResultSet, StatementExecutor
from .query_builder import SQLQuery, build_query
from .types import Row, TableSchema

logger = logging.getLogger(__name__)


class Table:
    """A table schema bound to the shared executor"""

    def __init__(self, schema: TableSchema, executor: StatementExecutor):
        self.schema = schema
        self.executor = executor

    @property
    def name(self) -> str:
        return self.schema.name

    def create(self) -> ExecutionResult:
        result = self.executor.run(build_query(SQLQuery.create, self.schema))
        if result.ok:
            logger.info(f"Table {self.name} created")
        return result

    def drop(self) -> ExecutionResult:
        result = self.executor.run(build_query(SQLQuery.drop, self.schema))
        if result.ok:
            logger.info(f"Table {self.name} dropped")
        return result

    def insert(self, values: Union[Row, Sequence[str]], *modifiers: str) -> ExecutionResult:
        """Insert one row given as a typed Row or as pre-formatted SQL literals"""
        if isinstance(values, Row):
            if values.schema != self.schema:
                raise SchemaError(
                    f"Row built for {values.schema.name} inserted into {self.name}"
                )
            literals = list(values.literals)
        else:
            literals = list(values)
            if len(literals) != len(self.schema.columns):
                raise RowArityError(
                    f"{self.name} expects {len(self.schema.columns)} values, "
                    f"got {len(literals)}"
                )
        return self.executor.run(
            build_query(SQLQuery.insert, self.schema, literals, *modifiers)
        )

    def fetch(
        self, projection: Sequence[str], result_columns: Sequence[str], *modifiers: str
    ) -> ExecutionResult:
        if not result_columns:
            raise ValueError("fetch needs at least one result column")
        query = build_query(SQLQuery.select, self.schema, projection, *modifiers)
        return self.executor.run(query, *result_columns)

    def select(
        self, projection: Sequence[str], result_columns: Sequence[str], *modifiers: str
    ) -> ResultSet:
        """Column-oriented rows keyed by ``result_columns``; ``{}`` if the query failed"""
        return self.fetch(projection, result_columns, *modifiers).columns
