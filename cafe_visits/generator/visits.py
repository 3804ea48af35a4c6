import logging
import random
from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum
from typing import Optional, Sequence, Tuple

from ..database.table import Table
from ..database.types import Row, TableSchema
from ..exceptions import EmptyEntityListError

logger = logging.getLogger(__name__)


class SelectionMode(str, Enum):
    round_robin = "round_robin"
    random = "random"


@dataclass(frozen=True)
class GeneratorState:
    simulated_date: date
    generation_counter: int = 0
    cafe_cursor: int = 0


@dataclass(frozen=True)
class Visit:
    id: int
    cafe: str
    date: date
    visit_count: int

    def as_row(self, schema: TableSchema) -> Row:
        return schema.row(self.id, self.cafe, self.date, self.visit_count)


def next_state(
    state: GeneratorState,
    cafes: Sequence[str],
    generations_per_day: int,
    visit_limit: int,
    mode: SelectionMode = SelectionMode.round_robin,
    rng: Optional[random.Random] = None,
) -> Tuple[GeneratorState, Visit]:
    """Produce the visit for the current state and the state that follows it.

    The simulated date moves forward one day each time the generation counter
    reaches a multiple of ``generations_per_day``, independent of wall-clock
    time. In round-robin mode the cafe cursor wraps around the cafe list.
    """
    if not cafes:
        raise EmptyEntityListError("No cafes to generate visits for")
    if generations_per_day <= 0:
        raise ValueError(f"generations_per_day must be positive: {generations_per_day}")
    if visit_limit <= 0:
        raise ValueError(f"visit_limit must be positive: {visit_limit}")
    rng = rng or random

    if mode == SelectionMode.random:
        cafe = rng.choice(cafes)
        cursor = state.cafe_cursor
    else:
        cafe = cafes[state.cafe_cursor % len(cafes)]
        cursor = (state.cafe_cursor + 1) % len(cafes)

    visit = Visit(
        id=state.generation_counter,
        cafe=cafe,
        date=state.simulated_date,
        visit_count=rng.randrange(visit_limit),
    )

    counter = state.generation_counter + 1
    simulated_date = state.simulated_date
    if counter % generations_per_day == 0:
        simulated_date += timedelta(days=1)

    return (
        replace(
            state,
            simulated_date=simulated_date,
            generation_counter=counter,
            cafe_cursor=cursor,
        ),
        visit,
    )


class VisitGenerator:
    """Holds the generator state and writes one visit row per tick"""

    def __init__(
        self,
        table: Table,
        cafes: Sequence[str],
        generations_per_day: int,
        visit_limit: int,
        mode: SelectionMode = SelectionMode.round_robin,
        start_date: Optional[date] = None,
        rng: Optional[random.Random] = None,
    ):
        if not cafes:
            raise EmptyEntityListError("Cafe list must be populated before generating visits")
        if generations_per_day <= 0 or visit_limit <= 0:
            raise ValueError("generations_per_day and visit_limit must be positive")
        self.table = table
        self.cafes = list(cafes)
        self.generations_per_day = generations_per_day
        self.visit_limit = visit_limit
        self.mode = SelectionMode(mode)
        self.rng = rng or random.Random()
        self._state = GeneratorState(simulated_date=start_date or date.today())

    @property
    def state(self) -> GeneratorState:
        return self._state

    def tick(self) -> Visit:
        """Generate and store one visit; state advances even if the insert fails"""
        self._state, visit = next_state(
            self._state,
            self.cafes,
            self.generations_per_day,
            self.visit_limit,
            self.mode,
            self.rng,
        )
        result = self.table.insert(visit.as_row(self.table.schema))
        if result.ok:
            logger.debug(f"Visit generated: {visit}")
        else:
            logger.warning(f"Visit {visit.id} for {visit.cafe} was not stored")
        return visit
