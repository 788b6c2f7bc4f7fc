"""
Lightweight repo-local models for database layer decoupling.
Provides minimal DTOs used by database/*.
"""

from .animal import SAMPLE_ANIMALS, Animal


__all__ = [
    "Animal",
    "SAMPLE_ANIMALS",
]
