"""
Measurebook Backend - Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── sequential_ids: Predictable, sortable id factory ("rec-0001", ...)
    ├── ticking_clock: Timestamp source that advances one second per call
    ├── memory_store: Fresh MemoryProjectStore
    ├── json_store: JsonFileProjectStore in a temporary directory
    ├── project_service: ProjectService wired to sequential_ids and ticking_clock
    └── test_client: HTTPX AsyncClient talking to the app with the above injected
"""

import os
import tempfile
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run BEFORE any measurebook import so the settings singleton and the
# default JSON store never point at the real ./data directory.
os.environ["DATA_FILE"] = os.path.join(
    tempfile.mkdtemp(prefix="measurebook_test_"), "projects.json"
)
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["STORE_RETRY_WAIT"] = "0"

from measurebook.services.project_service import ProjectService  # noqa: E402
from measurebook.store import JsonFileProjectStore, MemoryProjectStore  # noqa: E402


class SequentialIds:
    """Id factory yielding rec-0001, rec-0002, ... (lexicographically increasing)."""

    def __init__(self, prefix: str = "rec"):
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count:04d}"


class TickingClock:
    """Returns a new, strictly later ISO timestamp on every call."""

    def __init__(self):
        self.ticks = 0

    def __call__(self) -> str:
        self.ticks += 1
        minutes, seconds = divmod(self.ticks, 60)
        return f"2024-01-15T12:{minutes:02d}:{seconds:02d}.000Z"


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def sequential_ids():
    return SequentialIds()


@pytest.fixture
def ticking_clock():
    return TickingClock()


@pytest.fixture
def memory_store():
    return MemoryProjectStore()


@pytest.fixture
def json_store(tmp_path):
    """
    File store rooted in pytest's tmp_path.

    The nested directory does not exist yet, which exercises directory
    creation on the first save.
    """
    return JsonFileProjectStore(tmp_path / "data" / "projects.json", write_attempts=2, retry_wait=0)


@pytest.fixture
def project_service(sequential_ids, ticking_clock):
    return ProjectService(id_factory=sequential_ids, clock=ticking_clock)


@pytest.fixture
def sample_records():
    """A two-level record tree with missing ids and string sequence numbers."""
    return [
        {"sn": "2", "label": "Wall A", "length": 3.2},
        {
            "id": "b-existing",
            "sn": "1",
            "label": "Floor",
            "subRecords": [
                {"sn": "10", "label": "Tile row 10"},
                {"id": "a-sub", "sn": 9, "label": "Tile row 9"},
            ],
        },
    ]


@pytest_asyncio.fixture
async def test_client(memory_store, project_service) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    The store and service dependencies are overridden, so tests can inspect
    `memory_store` directly and ids/timestamps are predictable.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/projects")
            assert response.status_code == 200
    """
    from measurebook.main import app
    from measurebook.routes.projects import get_project_service, get_project_store

    app.dependency_overrides[get_project_store] = lambda: memory_store
    app.dependency_overrides[get_project_service] = lambda: project_service
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
