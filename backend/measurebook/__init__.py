"""
Measurebook Backend - Application Package Initializer
=======================================================

What: REST backend for measurement sheet projects, persisted as one JSON document.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (ProjectService,         │  ← Validation, merging,
    │             record normalizer)      │    normalization
    ├─────────────────────────────────────┤
    │         Schemas (Pydantic)          │  ← API contracts
    ├─────────────────────────────────────┤
    │   Store (JSON file / in-memory)     │  ← Whole-collection load/save
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
