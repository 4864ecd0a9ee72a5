"""
Repository layer for data access.

A Repository wraps one table with tenant-aware CRUD built from generated
SQL; the UnitOfWork hands out repositories that share one executor (and,
inside a transaction, one connection).
"""

from .base import Repository  # noqa: F401
from .unit_of_work import UnitOfWork  # noqa: F401
