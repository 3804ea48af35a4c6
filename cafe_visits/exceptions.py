class CafeVisitsError(Exception):
    """Base class for errors raised by the cafe visits service"""


class StorageConnectionError(CafeVisitsError):
    """The storage engine could not be reached at start-up"""


class StatementError(CafeVisitsError):
    """A statement failed inside the executor"""

    def __init__(self, statement: str, cause: Exception):
        super().__init__(f"{cause} [statement: {statement}]")
        self.statement = statement
        self.cause = cause


class SchemaError(CafeVisitsError):
    """Invalid table schema or a row used with the wrong table"""


class QueryBuildError(CafeVisitsError):
    pass


class RowArityError(CafeVisitsError, ValueError):
    """Row values do not match the schema columns"""


class RowValueError(CafeVisitsError, ValueError):
    """A value cannot be formatted for its column type"""


class EmptyEntityListError(CafeVisitsError):
    """The generator was given no cafes to pick from"""
