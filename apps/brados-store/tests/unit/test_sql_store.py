import asyncio
from types import SimpleNamespace

import pytest

from brados.db import database
from brados.db.collection import WriteOp, array_union
from brados.errors import BatchLimitError, DocumentNotFoundError


@pytest.mark.asyncio
async def test_set_get_roundtrip_and_missing_document(store):
    ref = store.collection("plans").document("p1")
    await ref.set({"name": "Push", "duration_weeks": 6})

    snapshot = await ref.get()
    assert snapshot.exists
    assert snapshot.data == {"name": "Push", "duration_weeks": 6}

    missing = await store.collection("plans").document("nope").get()
    assert not missing.exists
    assert missing.data is None


@pytest.mark.asyncio
async def test_returned_bodies_are_copies(store):
    ref = store.collection("plans").document("p1")
    await ref.set({"tags": ["a"]})
    snapshot = await ref.get()
    snapshot.data["tags"].append("mutated")
    assert (await ref.get()).data == {"tags": ["a"]}


@pytest.mark.asyncio
async def test_update_merges_fields_and_applies_array_union(store):
    ref = store.collection("sessions").document("s1")
    await ref.set({"history": ["a"], "plan": [], "is_finalized": False})
    await ref.update({"history": array_union("a", "b"), "is_finalized": True})
    assert (await ref.get()).data == {"history": ["a", "b"], "plan": [], "is_finalized": True}


@pytest.mark.asyncio
async def test_update_missing_document_raises(store):
    with pytest.raises(DocumentNotFoundError):
        await store.collection("plans").document("ghost").update({"name": "x"})


@pytest.mark.asyncio
async def test_delete_is_silent_for_missing_document(store):
    ref = store.collection("plans").document("p1")
    await ref.set({"name": "Push"})
    await ref.delete()
    await ref.delete()
    assert not (await ref.get()).exists


@pytest.mark.asyncio
async def test_queries_are_scoped_to_collection_path(store):
    await store.collection("users/u1/cyclingActivities").document("a").set({"date": "2024-01-01"})
    await store.collection("users/u2/cyclingActivities").document("b").set({"date": "2024-01-02"})
    results = await store.collection("users/u1/cyclingActivities").order_by("date", "desc").get()
    assert [snap.id for snap in results] == ["a"]


@pytest.mark.asyncio
async def test_batch_commit_is_atomic(store):
    await store.collection("plans").document("p1").set({"name": "Push"})
    ops = [
        WriteOp("set", "plans", "p2", {"name": "Pull"}),
        WriteOp("update", "plans", "missing", {"name": "x"}),
    ]
    with pytest.raises(DocumentNotFoundError):
        await store.commit(ops)
    assert not (await store.collection("plans").document("p2").get()).exists


@pytest.mark.asyncio
async def test_batch_over_store_limit_is_rejected(store):
    ops = [WriteOp("set", "plans", f"p{index}", {"n": index}) for index in range(store.batch_limit + 1)]
    with pytest.raises(BatchLimitError):
        await store.commit(ops)


@pytest.mark.asyncio
async def test_write_batch_commits_all_operations(store):
    batch = store.batch()
    plans = store.collection("plans")
    batch.set(plans.document("p1"), {"name": "Push"})
    batch.set(plans.document("p2"), {"name": "Pull"})
    batch.delete(plans.document("p1"))
    assert len(batch) == 3
    await batch.commit()
    assert len(batch) == 0
    assert [snap.id for snap in await plans.get()] == ["p2"]


def test_sqlite_engines_serialize_session_work(store):
    assert store.serialize is True
    server_engine = SimpleNamespace(dialect=SimpleNamespace(name="postgresql"), pool=object())
    assert database.requires_serial_access(server_engine) is False


@pytest.mark.asyncio
async def test_overlapping_writes_and_reads_on_shared_connection(store):
    plans = store.collection("plans")

    await asyncio.gather(*(plans.document(f"p{index:03d}").set({"n": index}) for index in range(100)))
    await asyncio.gather(
        *(plans.document(f"p{index:03d}").update({"n": index + 1000}) for index in range(100)),
        *(plans.get() for _ in range(20)),
        *(plans.document(f"p{index:03d}").get() for index in range(20)),
    )

    snapshots = await plans.get()
    assert len(snapshots) == 100
    assert all(snap.data["n"] >= 1000 for snap in snapshots)
