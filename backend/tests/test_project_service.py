"""
Measurebook Backend - Project Service Unit Tests
==================================================

What:  Tests for ProjectService business logic against in-memory stores.
How:   Sequential ids and a ticking clock make every result predictable.

What we test:
    ✅ Create: name validation (store untouched on failure), defaults, timestamps
    ✅ Get / list: not-found handling, summaries without records
    ✅ Update: field-by-field merge rules, updatedAt refresh
    ✅ Delete: removal, not-found leaves the store alone
    ✅ Save: merge of projectData, immutable id/createdAt
    ✅ Concurrent writes are serialized (no lost updates)
    ✅ Unexpected store failures become StoreError
"""

import asyncio

import pytest

from measurebook.exceptions import NotFoundError, StoreError, ValidationError
from measurebook.store import MemoryProjectStore


class SlowMemoryStore(MemoryProjectStore):
    """Yields to the event loop inside load and save, like real file I/O does."""

    async def _read_projects(self):
        await asyncio.sleep(0.001)
        return await super()._read_projects()

    async def save_all(self, projects):
        await asyncio.sleep(0.001)
        await super().save_all(projects)


class ExplodingStore(MemoryProjectStore):
    async def save_all(self, projects):
        raise RuntimeError("disk on fire")


class TestCreateProject:

    @pytest.mark.asyncio
    async def test_create_minimal(self, project_service, memory_store):
        project = await project_service.create_project(memory_store, name="Kitchen")

        assert project["id"] == "rec-0001"
        assert project["name"] == "Kitchen"
        assert project["details"] == ""
        assert project["records"] == []
        assert project["createdAt"] == project["updatedAt"]
        assert memory_store.snapshot == [project]

    @pytest.mark.asyncio
    async def test_name_trimmed(self, project_service, memory_store):
        project = await project_service.create_project(memory_store, name="  Bathroom \n")
        assert project["name"] == "Bathroom"

    @pytest.mark.parametrize("name", [None, "", "   ", 12])
    @pytest.mark.asyncio
    async def test_invalid_name_rejected_without_touching_store(self, project_service, memory_store, name):
        with pytest.raises(ValidationError, match="name is required"):
            await project_service.create_project(memory_store, name=name)
        assert memory_store.save_count == 0

    @pytest.mark.asyncio
    async def test_records_normalized_on_create(self, project_service, memory_store):
        project = await project_service.create_project(
            memory_store, name="Kitchen", records=[{"sn": "3"}, {"sn": "1"}]
        )

        # rec-0001 is the project id; the records get rec-0002 and rec-0003
        assert project["records"] == [
            {"id": "rec-0002", "sn": 3},
            {"id": "rec-0003", "sn": 1},
        ]

    @pytest.mark.asyncio
    async def test_appends_to_existing_collection(self, project_service):
        store = MemoryProjectStore([{"id": "old", "name": "Old", "records": []}])
        await project_service.create_project(store, name="New")
        assert [p["id"] for p in store.snapshot] == ["old", "rec-0001"]


class TestReadProjects:

    @pytest.mark.asyncio
    async def test_get_existing(self, project_service, memory_store):
        created = await project_service.create_project(memory_store, name="Kitchen")
        fetched = await project_service.get_project(memory_store, created["id"])
        assert fetched == created

    @pytest.mark.asyncio
    async def test_get_missing_raises(self, project_service, memory_store):
        with pytest.raises(NotFoundError):
            await project_service.get_project(memory_store, "nope")

    @pytest.mark.asyncio
    async def test_get_heals_stale_records(self, project_service, sequential_ids):
        store = MemoryProjectStore(
            [{"id": "p1", "name": "Kitchen", "records": [{"id": "b"}, {"sn": "4"}]}],
            id_factory=sequential_ids,
        )
        project = await project_service.get_project(store, "p1")
        assert project["records"] == [{"id": "b"}, {"id": "rec-0001", "sn": 4}]

    @pytest.mark.asyncio
    async def test_list_returns_summaries_only(self, project_service, memory_store):
        await project_service.create_project(memory_store, name="A", records=[{"id": "r"}])
        await project_service.create_project(memory_store, name="B", details="second")

        summaries = await project_service.list_projects(memory_store)

        assert [s["name"] for s in summaries] == ["A", "B"]
        assert all(set(s) == {"id", "name", "details", "createdAt", "updatedAt"} for s in summaries)

    @pytest.mark.asyncio
    async def test_list_empty(self, project_service, memory_store):
        assert await project_service.list_projects(memory_store) == []


class TestUpdateProject:

    @pytest.mark.asyncio
    async def test_details_only(self, project_service, memory_store):
        created = await project_service.create_project(
            memory_store, name="Kitchen", records=[{"id": "r1", "sn": 1}]
        )

        updated = await project_service.update_project(memory_store, created["id"], {"details": "new"})

        assert updated["details"] == "new"
        assert updated["name"] == "Kitchen"
        assert updated["records"] == created["records"]
        assert updated["createdAt"] == created["createdAt"]
        assert updated["updatedAt"] > created["updatedAt"]
        assert memory_store.snapshot[0] == updated

    @pytest.mark.asyncio
    async def test_blank_name_keeps_current(self, project_service, memory_store):
        created = await project_service.create_project(memory_store, name="Kitchen")
        updated = await project_service.update_project(memory_store, created["id"], {"name": "  "})
        assert updated["name"] == "Kitchen"

    @pytest.mark.asyncio
    async def test_name_replaced_and_trimmed(self, project_service, memory_store):
        created = await project_service.create_project(memory_store, name="Kitchen")
        updated = await project_service.update_project(memory_store, created["id"], {"name": " Pantry "})
        assert updated["name"] == "Pantry"

    @pytest.mark.asyncio
    async def test_null_details_cleared(self, project_service, memory_store):
        created = await project_service.create_project(memory_store, name="Kitchen", details="old")
        updated = await project_service.update_project(memory_store, created["id"], {"details": None})
        assert updated["details"] == ""

    @pytest.mark.asyncio
    async def test_records_replaced_and_normalized(self, project_service, memory_store):
        created = await project_service.create_project(memory_store, name="Kitchen", records=[{"id": "old"}])

        updated = await project_service.update_project(
            memory_store, created["id"], {"records": [{"id": "z"}, {"id": "m", "sn": "8"}]}
        )

        assert updated["records"] == [{"id": "m", "sn": 8}, {"id": "z"}]

    @pytest.mark.asyncio
    async def test_empty_records_list_clears_records(self, project_service, memory_store):
        created = await project_service.create_project(memory_store, name="Kitchen", records=[{"id": "old"}])
        updated = await project_service.update_project(memory_store, created["id"], {"records": []})
        assert updated["records"] == []

    @pytest.mark.asyncio
    async def test_null_records_keep_current(self, project_service, memory_store):
        created = await project_service.create_project(memory_store, name="Kitchen", records=[{"id": "old"}])
        updated = await project_service.update_project(memory_store, created["id"], {"records": None})
        assert updated["records"] == [{"id": "old"}]

    @pytest.mark.asyncio
    async def test_missing_project(self, project_service, memory_store):
        with pytest.raises(NotFoundError):
            await project_service.update_project(memory_store, "nope", {"details": "x"})
        assert memory_store.save_count == 0


class TestDeleteProject:

    @pytest.mark.asyncio
    async def test_delete_only_project(self, project_service, memory_store):
        created = await project_service.create_project(memory_store, name="Kitchen")

        await project_service.delete_project(memory_store, created["id"])

        assert memory_store.snapshot == []
        assert await project_service.list_projects(memory_store) == []

    @pytest.mark.asyncio
    async def test_delete_keeps_others(self, project_service, memory_store):
        first = await project_service.create_project(memory_store, name="A")
        second = await project_service.create_project(memory_store, name="B")

        await project_service.delete_project(memory_store, first["id"])

        assert [p["id"] for p in memory_store.snapshot] == [second["id"]]

    @pytest.mark.asyncio
    async def test_delete_missing(self, project_service, memory_store):
        await project_service.create_project(memory_store, name="Kitchen")
        with pytest.raises(NotFoundError):
            await project_service.delete_project(memory_store, "nope")
        assert memory_store.save_count == 1
        assert len(memory_store.snapshot) == 1


class TestSaveProject:

    @pytest.mark.asyncio
    async def test_merges_project_data(self, project_service, memory_store):
        created = await project_service.create_project(memory_store, name="Kitchen")

        saved = await project_service.save_project(
            memory_store,
            created["id"],
            {
                "name": "Kitchen v2",
                "unit": "mm",
                "records": [{"sn": "2", "label": "Counter"}],
            },
        )

        assert saved["name"] == "Kitchen v2"
        assert saved["unit"] == "mm"
        assert saved["records"] == [{"id": "rec-0002", "sn": 2, "label": "Counter"}]
        assert saved["updatedAt"] > created["updatedAt"]
        assert memory_store.snapshot[0]["unit"] == "mm"

    @pytest.mark.asyncio
    async def test_id_and_created_at_immutable(self, project_service, memory_store):
        created = await project_service.create_project(memory_store, name="Kitchen")

        saved = await project_service.save_project(
            memory_store, created["id"], {"id": "hijack", "createdAt": "1999-01-01T00:00:00.000Z"}
        )

        assert saved["id"] == created["id"]
        assert saved["createdAt"] == created["createdAt"]

    @pytest.mark.parametrize("project_data", [None, {}, {"records": None}])
    @pytest.mark.asyncio
    async def test_without_records_keeps_current(self, project_service, memory_store, project_data):
        created = await project_service.create_project(memory_store, name="Kitchen", records=[{"id": "r1"}])
        saved = await project_service.save_project(memory_store, created["id"], project_data)
        assert saved["records"] == [{"id": "r1"}]
        assert saved["name"] == "Kitchen"

    @pytest.mark.asyncio
    async def test_invalid_name_and_null_details(self, project_service, memory_store):
        created = await project_service.create_project(memory_store, name="Kitchen", details="d")
        saved = await project_service.save_project(memory_store, created["id"], {"name": "", "details": None})
        assert saved["name"] == "Kitchen"
        assert saved["details"] == ""

    @pytest.mark.parametrize("details", [5, 1.5, ["x"], {"a": 1}, False])
    @pytest.mark.asyncio
    async def test_non_string_details_rejected(self, project_service, memory_store, details):
        created = await project_service.create_project(memory_store, name="Kitchen", details="d")

        with pytest.raises(ValidationError) as exc_info:
            await project_service.save_project(memory_store, created["id"], {"details": details})

        assert exc_info.value.field == "details"
        assert memory_store.save_count == 1
        assert memory_store.snapshot[0]["details"] == "d"

    @pytest.mark.asyncio
    async def test_missing_project(self, project_service, memory_store):
        with pytest.raises(NotFoundError):
            await project_service.save_project(memory_store, "nope", {"name": "x"})


class TestConcurrencyAndFailures:

    @pytest.mark.asyncio
    async def test_concurrent_creates_are_all_persisted(self, project_service):
        store = SlowMemoryStore()

        await asyncio.gather(
            *(project_service.create_project(store, name=f"P{i}") for i in range(10))
        )

        assert sorted(p["name"] for p in store.snapshot) == sorted(f"P{i}" for i in range(10))

    @pytest.mark.asyncio
    async def test_concurrent_updates_to_different_projects(self, project_service):
        store = SlowMemoryStore()
        a = await project_service.create_project(store, name="A")
        b = await project_service.create_project(store, name="B")

        await asyncio.gather(
            project_service.update_project(store, a["id"], {"details": "from A"}),
            project_service.update_project(store, b["id"], {"details": "from B"}),
        )

        details = {p["name"]: p["details"] for p in store.snapshot}
        assert details == {"A": "from A", "B": "from B"}

    @pytest.mark.asyncio
    async def test_unexpected_store_error_wrapped(self, project_service):
        with pytest.raises(StoreError) as exc_info:
            await project_service.create_project(ExplodingStore(), name="Kitchen")
        assert exc_info.value.context["cause"] == "disk on fire"
