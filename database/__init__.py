"""Database package: ORM models, session factories and catalog seeding."""

from .database import (
    ReadSessionLocal,
    WriteSessionLocal,
    init_db,
    seed_reference_data,
)
from . import models

__all__ = ["ReadSessionLocal", "WriteSessionLocal", "init_db", "seed_reference_data", "models"]
