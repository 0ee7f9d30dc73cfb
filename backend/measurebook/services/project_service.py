"""
Measurebook Backend - Project Service (Business Logic)
========================================================

What:  List, read, create, update, delete and bulk-save projects.
How:   Every operation loads the whole collection from a ProjectStore.
       Mutations change it in memory and write the whole collection back.
Who:   Called by the route handlers in routes/projects.py.

Read-Modify-Write Cycle (create / update / delete / save):
    ┌──────────────┐    ┌────────────┐    ┌─────────────┐    ┌──────────────┐
    │ acquire      │───▶│ load_all() │───▶│ mutate in   │───▶│ save_all()   │
    │ write_lock   │    │ (normalize)│    │ memory      │    │ release lock │
    └──────────────┘    └────────────┘    └─────────────┘    └──────────────┘

    The lock lives on the store, so two requests touching different projects
    still run one after the other and neither write is lost.

ProjectService is stateless apart from its id and clock sources: the store is
passed in on every call, so tests can hand it an in-memory store.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from measurebook.exceptions import MeasurebookError, NotFoundError, StoreError, ValidationError
from measurebook.ids import IdFactory, new_id
from measurebook.services.normalizer import ensure_and_sort_records
from measurebook.store.base import Project, ProjectStore

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = ("id", "name", "details", "createdAt", "updatedAt")

# Keys the bulk-save merge may never overwrite
IMMUTABLE_FIELDS = frozenset({"id", "createdAt"})


def utc_now_iso() -> str:
    """Current UTC time as ISO 8601 with milliseconds and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _clean_name(value: Any) -> Optional[str]:
    """Trimmed name, or None when the value is not a usable name."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def _find_index(projects: List[Project], project_id: str) -> int:
    for index, project in enumerate(projects):
        if project.get("id") == project_id:
            return index
    raise NotFoundError(resource="project", resource_id=project_id)


class ProjectService:
    """
    Business logic layer for project operations.

    Args:
        id_factory: Source of project and record identifiers.
        clock: Returns the timestamp string stamped into createdAt/updatedAt.

    Error Handling Strategy:
        ValidationError and NotFoundError are raised before anything is
        written. Failures while persisting are raised as StoreError; any
        unexpected exception from a store is wrapped in StoreError too.
    """

    def __init__(self, id_factory: IdFactory = new_id, clock: Callable[[], str] = utc_now_iso):
        self.id_factory = id_factory
        self.clock = clock

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_projects(self, store: ProjectStore) -> List[Dict[str, Any]]:
        """Return every project's metadata, without records, in stored order."""
        projects = await store.load_all()
        return [{field: project.get(field) for field in SUMMARY_FIELDS} for project in projects]

    async def get_project(self, store: ProjectStore, project_id: str) -> Project:
        """
        Return one project with its normalized record tree.

        Raises:
            NotFoundError: No project has this id (→ 404)
        """
        projects = await store.load_all()
        project = projects[_find_index(projects, project_id)]
        project["records"] = ensure_and_sort_records(project.get("records"), self.id_factory)
        return project

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_project(
        self,
        store: ProjectStore,
        name: Any,
        details: Optional[str] = None,
        records: Any = None,
    ) -> Project:
        """
        Create a project and append it to the collection.

        Raises:
            ValidationError: `name` is missing, not a string, or blank (→ 400).
                The store is not touched in that case.
            StoreError: The collection could not be saved (→ 500)
        """
        clean_name = _clean_name(name)
        if clean_name is None:
            raise ValidationError(message="Project name is required", field="name")

        now = self.clock()
        project: Project = {
            "id": self.id_factory(),
            "name": clean_name,
            "details": details or "",
            "records": ensure_and_sort_records(records if records is not None else [], self.id_factory),
            "createdAt": now,
            "updatedAt": now,
        }

        async with store.write_lock:
            projects = await store.load_all()
            projects.append(project)
            await self._persist(store, projects)

        logger.info("Project %s created (%d records)", project["id"], len(project["records"]))
        return project

    async def update_project(self, store: ProjectStore, project_id: str, changes: Dict[str, Any]) -> Project:
        """
        Apply the fields present in `changes` to one project.

        Field rules:
            name:    replaced only by a non-blank string (trimmed)
            details: replaced whenever the key is present; None becomes ""
            records: replaced when present and not None; either way the
                     resulting tree is re-normalized

        Raises:
            NotFoundError: No project has this id (→ 404)
            StoreError: The collection could not be saved (→ 500)
        """
        async with store.write_lock:
            projects = await store.load_all()
            index = _find_index(projects, project_id)
            current = projects[index]

            new_name = _clean_name(changes.get("name"))
            records = changes.get("records")
            if records is None:
                records = current.get("records")

            updated = dict(current)
            updated["name"] = new_name or current.get("name")
            if "details" in changes:
                updated["details"] = changes["details"] or ""
            updated["records"] = ensure_and_sort_records(records, self.id_factory)
            updated["updatedAt"] = self.clock()

            projects[index] = updated
            await self._persist(store, projects)

        logger.info("Project %s updated (fields: %s)", project_id, ", ".join(sorted(changes)) or "none")
        return updated

    async def delete_project(self, store: ProjectStore, project_id: str) -> None:
        """
        Remove a project from the collection.

        Raises:
            NotFoundError: No project has this id (→ 404); nothing is written
            StoreError: The collection could not be saved (→ 500)
        """
        async with store.write_lock:
            projects = await store.load_all()
            remaining = [project for project in projects if project.get("id") != project_id]
            if len(remaining) == len(projects):
                raise NotFoundError(resource="project", resource_id=project_id)
            await self._persist(store, remaining)

        logger.info("Project %s deleted", project_id)

    async def save_project(
        self,
        store: ProjectStore,
        project_id: str,
        project_data: Optional[Dict[str, Any]],
    ) -> Project:
        """
        Merge a client-side project snapshot over the stored project.

        Every key of `project_data` is copied over except `id` and
        `createdAt`. `name` only applies when it is a non-blank string,
        `details: None` becomes "", `records: None` (or absent) keeps the
        stored tree. The merged tree is re-normalized and updatedAt refreshed.

        Raises:
            ValidationError: `details` is present but neither a string nor
                None (→ 400); nothing is written
            NotFoundError: No project has this id (→ 404)
            StoreError: The collection could not be saved (→ 500)
        """
        data = project_data or {}
        details = data.get("details")
        if details is not None and not isinstance(details, str):
            raise ValidationError(message="Project details must be a string", field="details")

        async with store.write_lock:
            projects = await store.load_all()
            index = _find_index(projects, project_id)
            current = projects[index]

            merged = dict(current)
            merged.update({key: value for key, value in data.items() if key not in IMMUTABLE_FIELDS})

            merged["name"] = _clean_name(data.get("name")) or current.get("name")
            if "details" in data and data["details"] is None:
                merged["details"] = ""

            records = data.get("records")
            if records is None:
                records = current.get("records")
            merged["records"] = ensure_and_sort_records(records, self.id_factory)
            merged["updatedAt"] = self.clock()

            projects[index] = merged
            await self._persist(store, projects)

        logger.info("Project %s saved (%d records)", project_id, len(merged["records"]))
        return merged

    # ── Internals ─────────────────────────────────────────────────────────

    async def _persist(self, store: ProjectStore, projects: List[Project]) -> None:
        try:
            await store.save_all(projects)
        except MeasurebookError:
            raise
        except Exception as e:
            logger.error("Unexpected error saving projects: %s", str(e), exc_info=True)
            raise StoreError(message="Failed to save projects", cause=e)


# ── Singleton Instance ────────────────────────────────────────────────────
project_service = ProjectService()
