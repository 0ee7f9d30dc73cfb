"""
Measurebook Backend - In-Memory Project Store
===============================================

What:  ProjectStore backed by a Python list living in the process.
Who:   Tests, and embedders that want the API without touching disk.

Loads and saves deep-copy the collection, so mutating a loaded project
never changes the stored one until save_all() is called. That matches
the file store, where every load parses a fresh object graph.
"""

import copy
from typing import Any, List, Optional

from measurebook.ids import IdFactory, new_id
from measurebook.store.base import Project, ProjectStore


class MemoryProjectStore(ProjectStore):
    def __init__(self, projects: Optional[List[Any]] = None, id_factory: IdFactory = new_id):
        super().__init__(id_factory=id_factory)
        self._projects: List[Any] = copy.deepcopy(projects) if projects else []
        self.save_count = 0

    async def _read_projects(self) -> List[Any]:
        return copy.deepcopy(self._projects)

    async def save_all(self, projects: List[Project]) -> None:
        self._projects = copy.deepcopy(projects)
        self.save_count += 1

    @property
    def snapshot(self) -> List[Any]:
        """A copy of what is currently stored, without normalization."""
        return copy.deepcopy(self._projects)
