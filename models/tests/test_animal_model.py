import sqlite3
from contextlib import closing

import pytest

from models.animal import SAMPLE_ANIMALS, Animal


def test_in_danger_coerced_to_bool():
    a = Animal(name="Frog", habitat="Pond", in_danger=1)
    if a.in_danger is not True:
        raise AssertionError


@pytest.mark.parametrize(
    ("name", "habitat"),
    [("", "Pond"), ("   ", "Pond"), ("Frog", ""), ("Frog", None)],
)
def test_empty_required_fields_rejected(name, habitat):
    with pytest.raises(ValueError):
        Animal.from_dict({"name": name, "habitat": habitat})


def test_from_dict_rejects_non_integer_life_expectancy():
    with pytest.raises(ValueError):
        Animal.from_dict({"name": "Cat", "habitat": "Home", "life_expectancy": "unknown"})


def test_to_db_params_stores_flag_as_int():
    a = Animal(name="Elephant", habitat="Savannah", life_expectancy=60, in_danger=True)
    if a.to_db_params() != ("Elephant", "Savannah", 60, 1):
        raise AssertionError
    b = Animal(name="Dog", habitat="Domestic", life_expectancy=None)
    if b.to_db_params() != ("Dog", "Domestic", None, 0):
        raise AssertionError


def test_from_dict_converts_db_values():
    a = Animal.from_dict(
        {"id": 7, "name": "Turtle", "habitat": "Ocean", "life_expectancy": 100, "in_danger": 0}
    )
    if a.id != 7 or a.in_danger is not False or a.life_expectancy != 100:
        raise AssertionError


def test_from_dict_handles_missing_optionals():
    a = Animal.from_dict({"name": "Moth", "habitat": "Attic", "in_danger": None})
    if a.id is not None or a.life_expectancy is not None or a.in_danger is not False:
        raise AssertionError


def test_from_row_reads_sqlite_row():
    with closing(sqlite3.connect(":memory:")) as conn:
        conn.row_factory = sqlite3.Row
        row = conn.execute(
            "SELECT 3 AS id, 'Owl' AS name, 'Forest' AS habitat, "
            "20 AS life_expectancy, 1 AS in_danger"
        ).fetchone()
        a = Animal.from_row(row)
    if a.to_dict() != {
        "id": 3,
        "name": "Owl",
        "habitat": "Forest",
        "life_expectancy": 20,
        "in_danger": True,
    }:
        raise AssertionError


def test_sample_animals_are_the_demo_rows():
    rows = [a.to_db_params() for a in SAMPLE_ANIMALS]
    assert rows == [
        ("Elephant", "Savannah", 60, 1),
        ("Turtle", "Ocean", 100, 0),
        ("Dog", "Domestic", 13, 0),
    ]
    assert all(a.id is None for a in SAMPLE_ANIMALS)


def test_from_row_keeps_values_the_engine_accepted():
    """Rows are read back as stored, even ones a caller could not create"""
    with closing(sqlite3.connect(":memory:")) as conn:
        conn.row_factory = sqlite3.Row
        rows = conn.execute(
            "SELECT 1 AS id, '' AS name, 'Nowhere' AS habitat, 5 AS life_expectancy, "
            "0 AS in_danger "
            "UNION ALL SELECT 2, 'Cat', 'Home', 'unknown', NULL"
        ).fetchall()
        empty_name, text_life = (Animal.from_row(row) for row in rows)

    if empty_name.name != "" or empty_name.life_expectancy != 5:
        raise AssertionError
    if text_life.life_expectancy != "unknown" or text_life.in_danger is not False:
        raise AssertionError
