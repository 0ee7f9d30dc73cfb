"""
Measurebook Backend - Project Store Package
=============================================

What:  Whole-collection persistence for projects.

Store Inventory:
    - base.py:       ProjectStore contract (load_all / save_all) + normalize_projects
    - json_file.py:  JsonFileProjectStore (single JSON document, atomic overwrite)
    - memory.py:     MemoryProjectStore (in-process list)
"""

from measurebook.store.base import ProjectStore, normalize_projects
from measurebook.store.json_file import JsonFileProjectStore
from measurebook.store.memory import MemoryProjectStore

__all__ = [
    "ProjectStore",
    "JsonFileProjectStore",
    "MemoryProjectStore",
    "normalize_projects",
]
