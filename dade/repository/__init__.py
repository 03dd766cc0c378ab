"""
Repository pattern: unit of work, lazily started context and generic sets over one transaction.
"""

from .base import DadeSet, IDadeSet
from .context import ContextState, DadeContext, IDadeContext
from .factory import IUnitOfWorkFactory, UnitOfWorkFactory
from .mapper import EntityMapper, SQLModelMapper
from .unit_of_work import IUnitOfWork, UnitOfWork, UnitOfWorkState

__all__ = [
    "DadeSet",
    "IDadeSet",
    "ContextState",
    "DadeContext",
    "IDadeContext",
    "IUnitOfWorkFactory",
    "UnitOfWorkFactory",
    "EntityMapper",
    "SQLModelMapper",
    "IUnitOfWork",
    "UnitOfWork",
    "UnitOfWorkState",
]
