"""
Declarative base shared by every table.

All four tables hang off one MetaData so DatabaseManager.init_db() can
create the whole schema with a single create_all call.
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

metadata = MetaData()


class Base(DeclarativeBase):
    """Declarative base for Adaptation Survival models."""

    metadata = metadata
