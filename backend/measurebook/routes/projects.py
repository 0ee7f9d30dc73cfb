"""
Measurebook Backend - Project Route Handlers
==============================================

What:  The /api/projects REST surface.
How:   Parses bodies into request schemas, delegates to ProjectService and
       returns the result through response models. Errors are raised as
       application exceptions and formatted by the handlers in main.py.
Who:   Called by the measurement sheet frontend.

Route Inventory:
    GET    /api/projects              → 200 list of project summaries
    GET    /api/projects/{id}         → 200 full project        | 404
    POST   /api/projects              → 201 created project     | 400
    PUT    /api/projects/{id}         → 200 updated project     | 404
    DELETE /api/projects/{id}         → 200 confirmation        | 404
    POST   /api/projects/{id}/save    → 200 merged project      | 400, 404
    Any of them → 500 when the store cannot be written.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends

from measurebook.config import settings
from measurebook.schemas.project import (
    ErrorResponse,
    MessageResponse,
    ProjectCreateRequest,
    ProjectResponse,
    ProjectSaveRequest,
    ProjectSummary,
    ProjectUpdateRequest,
)
from measurebook.services.project_service import ProjectService, project_service
from measurebook.store import JsonFileProjectStore, ProjectStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Projects"])

_default_store = JsonFileProjectStore(settings.data_file)


# ── Dependencies ──────────────────────────────────────────────────────────
# Overridable through app.dependency_overrides (tests swap in MemoryProjectStore)

def get_project_store() -> ProjectStore:
    return _default_store


def get_project_service() -> ProjectService:
    return project_service


NOT_FOUND = {404: {"description": "Project not found", "model": ErrorResponse}}
STORE_FAILURE = {500: {"description": "Store failure", "model": ErrorResponse}}


@router.get(
    "/projects",
    response_model=List[ProjectSummary],
    responses={**STORE_FAILURE},
    summary="List projects (metadata only)",
)
async def list_projects(
    store: ProjectStore = Depends(get_project_store),
    service: ProjectService = Depends(get_project_service),
):
    return await service.list_projects(store)


@router.get(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    responses={**NOT_FOUND, **STORE_FAILURE},
    summary="Get a project with its normalized records",
)
async def get_project(
    project_id: str,
    store: ProjectStore = Depends(get_project_store),
    service: ProjectService = Depends(get_project_service),
):
    return await service.get_project(store, project_id)


@router.post(
    "/projects",
    status_code=201,
    response_model=ProjectResponse,
    responses={
        400: {"description": "Project name missing or blank", "model": ErrorResponse},
        **STORE_FAILURE,
    },
    summary="Create a project",
)
async def create_project(
    payload: Optional[ProjectCreateRequest] = Body(default=None),
    store: ProjectStore = Depends(get_project_store),
    service: ProjectService = Depends(get_project_service),
):
    """
    Create a project.

    The body is optional so that an empty request gets the same 400
    "Project name is required" answer as `{}`.
    """
    payload = payload or ProjectCreateRequest()
    return await service.create_project(
        store,
        name=payload.name,
        details=payload.details,
        records=payload.records,
    )


@router.put(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    responses={**NOT_FOUND, **STORE_FAILURE},
    summary="Update name, details and/or records of a project",
)
async def update_project(
    project_id: str,
    payload: Optional[ProjectUpdateRequest] = Body(default=None),
    store: ProjectStore = Depends(get_project_store),
    service: ProjectService = Depends(get_project_service),
):
    # exclude_unset keeps "details absent" distinct from "details: null"
    changes = payload.model_dump(exclude_unset=True) if payload else {}
    return await service.update_project(store, project_id, changes)


@router.delete(
    "/projects/{project_id}",
    response_model=MessageResponse,
    responses={**NOT_FOUND, **STORE_FAILURE},
    summary="Delete a project",
)
async def delete_project(
    project_id: str,
    store: ProjectStore = Depends(get_project_store),
    service: ProjectService = Depends(get_project_service),
):
    await service.delete_project(store, project_id)
    return MessageResponse(message="Project deleted successfully")


@router.post(
    "/projects/{project_id}/save",
    response_model=ProjectResponse,
    responses={
        400: {"description": "Non-string details in projectData", "model": ErrorResponse},
        **NOT_FOUND,
        **STORE_FAILURE,
    },
    summary="Merge a full project snapshot into the stored project",
)
async def save_project(
    project_id: str,
    payload: Optional[ProjectSaveRequest] = Body(default=None),
    store: ProjectStore = Depends(get_project_store),
    service: ProjectService = Depends(get_project_service),
):
    project_data = payload.project_data if payload else None
    return await service.save_project(store, project_id, project_data)
