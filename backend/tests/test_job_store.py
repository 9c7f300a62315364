"""Tests for the in-memory job document store."""

import pytest

from services.job_store import InMemoryDocumentStore


class TestInMemoryDocumentStore:
    @pytest.mark.asyncio
    async def test_set_and_get_copy(self):
        store = InMemoryDocumentStore()
        doc = {"basicInfo": {"title": "JE"}}
        await store.set("job-1", doc)
        doc["basicInfo"]["title"] = "changed"

        stored = await store.get("job-1")
        assert stored == {"basicInfo": {"title": "JE"}}
        stored["basicInfo"]["title"] = "also changed"
        assert (await store.get("job-1"))["basicInfo"]["title"] == "JE"

    @pytest.mark.asyncio
    async def test_dotted_update_keeps_siblings(self):
        store = InMemoryDocumentStore()
        await store.set("job-1", {"metadata": {"status": "pending", "needsReview": False}})
        await store.update("job-1", {"metadata.needsReview": True, "metadata.parsingRunId": "parse_1_x"})

        doc = await store.get("job-1")
        assert doc["metadata"] == {"status": "pending", "needsReview": True, "parsingRunId": "parse_1_x"}

    @pytest.mark.asyncio
    async def test_update_creates_missing_document(self):
        store = InMemoryDocumentStore()
        await store.update("job-2", {"metadata.needsReview": True})
        assert await store.get("job-2") == {"metadata": {"needsReview": True}}
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_get_missing(self):
        assert await InMemoryDocumentStore().get("nope") is None
