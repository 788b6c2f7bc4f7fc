#!/usr/bin/env python3
"""
Animals setup-and-demo script

Opens (or creates) the animals store and walks through the basic SQL
operations in a fixed order:

1. open the store
2. ensure the Animals table exists
3. insert three sample records
4. read every record, then the records living longer than 50 years
5. flag the dog as endangered, then delete it
6. close the connection

Every step runs only after the previous one returned. A failing step is
logged and reported but does not stop the run, except a failed open, after
which there is no connection to use.

Usage:
    python -m database.animals_demo
"""

from __future__ import annotations

import logging
import sqlite3
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from config.app_config import ConfigurationError, load_config
from models.animal import SAMPLE_ANIMALS, Animal
from utils.logger import Logger
from utils.structured_logging import setup_logging

from .animals_db import AnimalsDatabase
from .initialize_db import DatabaseManager

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

LOGGER = logging.getLogger(__name__)

LIFE_EXPECTANCY_THRESHOLD = 50
ENDANGERED_ANIMAL = "Dog"


class DemoStep(str, Enum):
    """Demo steps; also the failure taxonomy reported per step."""

    OPEN = "open"
    SCHEMA = "schema"
    INSERT = "insert"
    QUERY = "query"
    UPDATE = "update"
    DELETE = "delete"
    CLOSE = "close"


@dataclass
class StepOutcome:
    step: DemoStep
    success: bool
    message: str
    error: str | None = None
    data: Any = None


@dataclass
class DemoReport:
    """Ordered record of what each step did."""

    db_path: Path
    outcomes: list[StepOutcome] = field(default_factory=list)

    def add(self, outcome: StepOutcome) -> StepOutcome:
        self.outcomes.append(outcome)
        return outcome

    def outcomes_for(self, step: DemoStep) -> list[StepOutcome]:
        return [o for o in self.outcomes if o.step is step]

    @property
    def failures(self) -> list[StepOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def succeeded(self) -> bool:
        return bool(self.outcomes) and not self.failures

    @property
    def opened(self) -> bool:
        return any(o.success for o in self.outcomes_for(DemoStep.OPEN))


def _describe(animals: Iterable[Animal]) -> list[dict[str, Any]]:
    return [animal.to_dict() for animal in animals]


class AnimalsDemo:
    """Runs the demo steps against one DatabaseManager connection."""

    def __init__(
        self,
        db_path: Path | str | None = None,
        user_feedback: Callable[[str], None] | None = None,
        samples: Iterable[Animal] = SAMPLE_ANIMALS,
    ):
        self.user_feedback = user_feedback or print
        self.samples = tuple(samples)
        self.logger = Logger()
        self.manager = DatabaseManager(db_path, self.user_feedback)
        self.animals_db = AnimalsDatabase(self.manager)
        self.report = DemoReport(self.manager.db_path)

    def _ok(self, step: DemoStep, message: str, data: Any = None) -> StepOutcome:
        self.user_feedback(message)
        LOGGER.debug("%s step succeeded", step.value, extra={"step": step.value})
        return self.report.add(StepOutcome(step, True, message, data=data))

    def _fail(self, step: DemoStep, message: str, error: BaseException | str) -> StepOutcome:
        text = f"{message}: {error}"
        self.logger.error(text, step=step.value)
        self.user_feedback(f"[ERROR] {text}")
        return self.report.add(StepOutcome(step, False, message, error=str(error)))

    def run(self) -> DemoReport:
        """Run every step in order and return the report."""
        with self.manager:
            if not self.open_store().success:
                return self.report
            self.ensure_schema()
            self.insert_samples()
            self.query_all()
            self.query_long_lived()
            self.mark_endangered()
            self.delete_endangered()
            self.close_store()
        return self.report

    def open_store(self) -> StepOutcome:
        try:
            self.manager.connect()
        except (sqlite3.Error, RuntimeError, OSError) as e:
            return self._fail(DemoStep.OPEN, "Error opening database", e)
        return self._ok(DemoStep.OPEN, "Connected to the animals database.")

    def ensure_schema(self) -> StepOutcome:
        try:
            self.manager.ensure_schema()
        except sqlite3.Error as e:
            return self._fail(DemoStep.SCHEMA, "Error creating table", e)
        return self._ok(DemoStep.SCHEMA, "Animals table created (if it didn't already exist).")

    def insert_samples(self) -> list[StepOutcome]:
        outcomes = []
        for animal in self.samples:
            result = self.animals_db.create_animal(animal)
            if result["success"]:
                outcomes.append(
                    self._ok(
                        DemoStep.INSERT,
                        f"A row has been inserted with rowid {result['id']}",
                        data=result["id"],
                    )
                )
            else:
                # create_animal already logged the engine error
                message = f"Error inserting {animal.name}"
                self.user_feedback(f"[ERROR] {message}: {result['error']}")
                outcomes.append(
                    self.report.add(
                        StepOutcome(DemoStep.INSERT, False, message, error=result["error"])
                    )
                )
        return outcomes

    def query_all(self) -> StepOutcome:
        try:
            animals = self.animals_db.get_all_animals()
        except sqlite3.Error as e:
            return self._fail(DemoStep.QUERY, "Error fetching data", e)
        rows = _describe(animals)
        return self._ok(DemoStep.QUERY, f"All Animals: {rows}", data=animals)

    def query_long_lived(self, threshold: int = LIFE_EXPECTANCY_THRESHOLD) -> StepOutcome:
        try:
            animals = self.animals_db.get_animals_by_min_life_expectancy(threshold)
        except sqlite3.Error as e:
            return self._fail(DemoStep.QUERY, "Error fetching data", e)
        rows = _describe(animals)
        return self._ok(
            DemoStep.QUERY,
            f"Animals with life expectancy over {threshold} years: {rows}",
            data=animals,
        )

    def mark_endangered(self, name: str = ENDANGERED_ANIMAL) -> StepOutcome:
        try:
            changes = self.animals_db.set_in_danger(name, True)
        except sqlite3.Error as e:
            return self._fail(DemoStep.UPDATE, "Error updating data", e)
        return self._ok(DemoStep.UPDATE, f"Rows updated: {changes}", data=changes)

    def delete_endangered(self, name: str = ENDANGERED_ANIMAL) -> StepOutcome:
        try:
            changes = self.animals_db.delete_animal(name)
        except sqlite3.Error as e:
            return self._fail(DemoStep.DELETE, "Error deleting data", e)
        return self._ok(DemoStep.DELETE, f"Rows deleted: {changes}", data=changes)

    def close_store(self) -> StepOutcome:
        try:
            self.manager.close()
        except sqlite3.Error as e:
            return self._fail(DemoStep.CLOSE, "Error closing the database", e)
        return self._ok(DemoStep.CLOSE, "Database connection closed.")


def run_demo(
    db_path: Path | str | None = None,
    user_feedback: Callable[[str], None] | None = None,
) -> DemoReport:
    """Run the setup-and-demo steps against db_path

    Args:
        db_path: Store file (defaults to configuration, then animals.db)
        user_feedback: Function to provide step feedback (defaults to print)

    Returns:
        DemoReport: One outcome per executed step, in order

    Raises:
        ConfigurationError: If db_path is None and the configuration is invalid.
            Nothing has been opened at that point; main() reports it and exits 1.
    """
    return AnimalsDemo(db_path, user_feedback).run()


def main() -> int:
    try:
        config = load_config()
    except ConfigurationError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    setup_logging(level=config.log_level, log_format=config.log_format, log_dir=config.log_dir)
    report = run_demo(config.db_path)
    return 0 if report.opened else 1


if __name__ == "__main__":
    sys.exit(main())
