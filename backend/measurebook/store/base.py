"""
Measurebook Backend - Abstract Project Store
==============================================

What:  The persistence contract for the project collection.
How:   Concrete stores implement `_read_projects()` and `save_all()`;
       `load_all()` wraps the raw read and normalizes every record tree.
Who:   Used by ProjectService; selected through the `get_project_store`
       dependency in routes/projects.py.

Contract:
    - load_all() never raises. A missing or unreadable collection is [].
    - save_all() replaces the whole collection or raises StoreError.
    - Storage is whole-collection only; there are no per-project writes.

Implementations:
    - JsonFileProjectStore: one JSON document on disk (default)
    - MemoryProjectStore: in-process list (tests, embedding)
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from measurebook.ids import IdFactory, new_id
from measurebook.services.normalizer import ensure_and_sort_records

logger = logging.getLogger(__name__)

Project = Dict[str, Any]


def normalize_projects(projects: List[Project], id_factory: IdFactory = new_id) -> List[Project]:
    """Normalize the `records` tree of every project in place and return the list."""
    for project in projects:
        project["records"] = ensure_and_sort_records(project.get("records"), id_factory)
    return projects


class ProjectStore(ABC):
    """
    Whole-collection persistence for projects.

    Attributes:
        write_lock: Serializes read-modify-write cycles. ProjectService holds
                    it from load to save for every mutation, so concurrent
                    writers cannot overwrite each other's changes.
        id_factory: Identifier source used when normalizing on load.
    """

    def __init__(self, id_factory: IdFactory = new_id):
        self.write_lock = asyncio.Lock()
        self.id_factory = id_factory

    async def load_all(self) -> List[Project]:
        """
        Load every project with normalized records.

        Returns:
            A fresh list the caller may mutate freely. Entries that are not
            JSON objects are dropped with a warning.
        """
        raw = await self._read_projects()
        projects = []
        for entry in raw:
            if isinstance(entry, dict):
                projects.append(entry)
            else:
                logger.warning("Skipping malformed project entry of type %s", type(entry).__name__)
        return normalize_projects(projects, self.id_factory)

    @abstractmethod
    async def _read_projects(self) -> List[Any]:
        """
        Return the raw persisted collection, or [] if there is none.

        Must not raise: read failures are logged and masked as [].
        """
        ...

    @abstractmethod
    async def save_all(self, projects: List[Project]) -> None:
        """
        Overwrite the persisted collection with `projects`.

        Raises:
            StoreError: The collection could not be persisted.
        """
        ...

    async def health_check(self) -> bool:
        """Return True if the store can currently accept writes."""
        return True
