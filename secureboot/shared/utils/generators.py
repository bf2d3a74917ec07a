"""Identifier generation for persisted records (CUID2)."""

from cuid2 import Cuid

_ID_LENGTH = 25

_id_generator = Cuid(length=_ID_LENGTH)


def generate_id() -> str:
    """Return a new collision-resistant identifier for a primary key."""
    return _id_generator.generate()
