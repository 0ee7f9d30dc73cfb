"""
Measurebook Backend - Identifier Generator
============================================

What:  Produces globally unique string identifiers for projects and records.
How:   Random UUID4, rendered in its canonical 36-character form.
Who:   Used by ProjectService (project ids) and the record normalizer (record ids).
"""

import uuid
from typing import Callable

# Anything that returns a fresh identifier on each call.
# Tests inject counters to get predictable ids.
IdFactory = Callable[[], str]


def new_id() -> str:
    """Return a new random UUID4 string."""
    return str(uuid.uuid4())
