from __future__ import annotations

import sqlite3
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass
class Animal:
    """Animal record with bool in the model layer and 0/1 in the DB layer.

    Constraints on stored rows are the engine's (NOT NULL on name and
    habitat); records read back are taken as the store holds them.
    """

    name: str
    habitat: str
    life_expectancy: int | None = None
    in_danger: bool = False
    # Assigned by the store on insert
    id: int | None = None

    def __post_init__(self) -> None:
        self.in_danger = bool(self.in_danger)

    def validate(self) -> None:
        """Reject records missing a name or habitat.

        Raises:
            ValueError: If name or habitat is empty.
        """
        if not self.name or not str(self.name).strip():
            raise ValueError("Animal name must be a non-empty string")
        if not self.habitat or not str(self.habitat).strip():
            raise ValueError("Animal habitat must be a non-empty string")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Animal:
        """Create a validated Animal from caller-supplied data.

        Raises:
            ValueError: If a required field is empty or life_expectancy is not an integer.
        """
        life_raw = data.get("life_expectancy")
        id_raw = data.get("id")
        animal = cls(
            id=int(id_raw) if id_raw is not None else None,
            name=str(data.get("name") or ""),
            habitat=str(data.get("habitat") or ""),
            life_expectancy=int(life_raw) if life_raw is not None else None,
            in_danger=bool(data.get("in_danger") or 0),
        )
        animal.validate()
        return animal

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Animal:
        """Create Animal from a row of SELECT * FROM Animals without re-validating it.

        Values SQLite could not coerce to INTEGER (text life expectancy) are kept as stored.
        """
        return cls(
            id=row["id"],
            name=row["name"],
            habitat=row["habitat"],
            life_expectancy=row["life_expectancy"],
            in_danger=bool(row["in_danger"] or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with model-layer format (in_danger as bool)."""
        return {
            "id": self.id,
            "name": self.name,
            "habitat": self.habitat,
            "life_expectancy": self.life_expectancy,
            "in_danger": self.in_danger,
        }

    def to_db_params(self) -> tuple[str, str, int | None, int]:
        """Insert parameters in column order, with in_danger stored as 0/1."""
        return (self.name, self.habitat, self.life_expectancy, 1 if self.in_danger else 0)


# Literal rows inserted by the setup-and-demo script
SAMPLE_ANIMALS: tuple[Animal, ...] = (
    Animal(name="Elephant", habitat="Savannah", life_expectancy=60, in_danger=True),
    Animal(name="Turtle", habitat="Ocean", life_expectancy=100, in_danger=False),
    Animal(name="Dog", habitat="Domestic", life_expectancy=13, in_danger=False),
)
