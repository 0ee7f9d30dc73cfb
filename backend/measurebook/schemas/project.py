"""
Measurebook Backend - Pydantic Request/Response Schemas
=========================================================

What:  Pydantic models defining the API contract between frontend and backend.
How:   FastAPI validates request bodies against the *Request models and
       serializes responses through the response models, by alias, so the
       wire format keeps the camelCase keys of the stored JSON
       (createdAt, updatedAt, projectData, subRecords).
Who:   Used by routes/projects.py and routes/health.py.

Records are deliberately untyped here (plain dicts, or Any on input).
Their shape is owned by the record normalizer, which accepts anything and
degrades gracefully, so the schema layer must not reject what the
normalizer would repair.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models - What the client sends
# ══════════════════════════════════════════════════════════════════════════


class ProjectCreateRequest(BaseModel):
    """
    Body of POST /api/projects.

    `name` is optional at the schema level so that a missing or blank
    name produces the API's own 400 validation error rather than a 422.
    """
    name: Optional[str] = Field(default=None, description="Project name (required, trimmed)")
    details: Optional[str] = Field(default=None, description="Free-form project description")
    records: Any = Field(default=None, description="Record tree; ids are assigned where missing")


class ProjectUpdateRequest(BaseModel):
    """Body of PUT /api/projects/{id}. Only the keys actually sent are applied."""
    name: Optional[str] = Field(default=None, description="New name; blank keeps the current one")
    details: Optional[str] = Field(default=None, description="New details; null clears them")
    records: Any = Field(default=None, description="Replacement record tree; null keeps the current one")


class ProjectSaveRequest(BaseModel):
    """Body of POST /api/projects/{id}/save."""
    project_data: Optional[Dict[str, Any]] = Field(
        default=None,
        alias="projectData",
        description="Fields merged over the stored project (id and createdAt are ignored)",
    )

    model_config = ConfigDict(populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models - What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class ProjectSummary(BaseModel):
    """
    What:  Project metadata without its record tree.
    Who:   Array items of GET /api/projects.
    """
    id: str = Field(description="Unique project identifier (UUID)")
    name: Optional[str] = Field(default=None, description="Project name")
    details: str = Field(default="", description="Project description")
    created_at: Optional[str] = Field(default=None, alias="createdAt", description="Creation time (UTC ISO 8601)")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt", description="Last mutation time (UTC ISO 8601)")

    model_config = ConfigDict(populate_by_name=True)

    # Stored files may predate the current write rules (details: null, no name,
    # numeric ids), so responses coerce rather than reject what load_all returns.

    @field_validator("id", mode="before")
    @classmethod
    def id_as_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("details", mode="before")
    @classmethod
    def details_as_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("name", "created_at", "updated_at", mode="before")
    @classmethod
    def text_or_none(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None


class ProjectResponse(ProjectSummary):
    """
    What:  Full project including its normalized record tree.
    Who:   Returned by every endpoint that reads or writes a single project.

    Extra keys merged in through the save endpoint are kept and returned.
    """
    records: List[Dict[str, Any]] = Field(default_factory=list, description="Normalized record tree")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class MessageResponse(BaseModel):
    message: str = Field(description="Human-readable confirmation")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Project with ID 'abc' was not found",
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    store: str = Field(description="Project store status: writable, read_only")
    uptime_seconds: float = Field(description="Seconds since service started")
