from dataclasses import dataclass, field
from typing import List, Optional

from .config import Settings
from .database.executor import StatementExecutor
from .database.table import Table
from .generator.scheduler import FixedRateScheduler
from .generator.visits import VisitGenerator


@dataclass
class CafeContext:
    """Everything the process shares: one executor, the tables, the generator"""

    settings: Settings
    executor: StatementExecutor
    cafe_table: Table
    visit_table: Table
    cafes: List[str] = field(default_factory=list)
    generator: Optional[VisitGenerator] = None
    scheduler: Optional[FixedRateScheduler] = None

    def close(self) -> None:
        if self.scheduler is not None:
            self.scheduler.stop()
        self.executor.close()
