from unittest.mock import AsyncMock, Mock

import pytest

from brados.db.collection import (
    DocumentSnapshot,
    FieldFilter,
    QuerySpec,
    apply_query,
    apply_update,
    array_union,
    collection,
)


def _snaps(*bodies):
    return [DocumentSnapshot(f"doc-{index}", body) for index, body in enumerate(bodies)]


class TestApplyQuery:
    def test_equality_does_not_confuse_booleans_and_numbers(self):
        snaps = _snaps({"v": True}, {"v": 1}, {"v": 1.0})
        result = apply_query(snaps, QuerySpec(filters=(FieldFilter("v", "==", 1),)))
        assert [snap.id for snap in result] == ["doc-1", "doc-2"]

    def test_order_by_excludes_documents_missing_the_field(self):
        snaps = _snaps({"name": "b"}, {"other": 1}, {"name": "a"})
        result = apply_query(snaps, QuerySpec(orders=(("name", "asc"),)))
        assert [snap.data["name"] for snap in result] == ["a", "b"]

    def test_descending_order_with_limit(self):
        snaps = _snaps({"d": "2024-01-01"}, {"d": "2024-03-01"}, {"d": "2024-02-01"})
        result = apply_query(snaps, QuerySpec(orders=(("d", "desc"),), limit=2))
        assert [snap.data["d"] for snap in result] == ["2024-03-01", "2024-02-01"]

    def test_mixed_types_order_by_type_rank(self):
        snaps = _snaps({"v": "text"}, {"v": 3}, {"v": None}, {"v": False})
        result = apply_query(snaps, QuerySpec(orders=(("v", "asc"),)))
        assert [snap.data["v"] for snap in result] == [None, False, 3, "text"]

    def test_range_filters_only_match_same_type(self):
        snaps = _snaps({"at": "2024-01-10"}, {"at": 20240110}, {"at": None}, {"at": "2023-12-31"})
        spec = QuerySpec(filters=(FieldFilter("at", ">=", "2024-01-01"), FieldFilter("at", "<=", "2024-01-31")))
        assert [snap.id for snap in apply_query(snaps, spec)] == ["doc-0"]

    def test_in_filter(self):
        snaps = _snaps({"meal_id": "m1"}, {"meal_id": "m2"}, {"meal_id": "m3"})
        spec = QuerySpec(filters=(FieldFilter("meal_id", "in", ["m1", "m3"]),))
        assert [snap.id for snap in apply_query(snaps, spec)] == ["doc-0", "doc-2"]

    def test_projection_keeps_only_selected_fields(self):
        snaps = _snaps({"title": "t", "segments": [1, 2]})
        result = apply_query(snaps, QuerySpec(projection=("title",)))
        assert result[0].data == {"title": "t"}

    def test_ties_break_on_document_id(self):
        snaps = [DocumentSnapshot("b", {"n": 1}), DocumentSnapshot("a", {"n": 1})]
        result = apply_query(snaps, QuerySpec(orders=(("n", "asc"),)))
        assert [snap.id for snap in result] == ["a", "b"]


def test_apply_update_merges_and_unions_arrays():
    existing = {"history": [{"role": "user", "content": "hi"}], "plan": [1], "keep": True}
    merged = apply_update(
        existing,
        {
            "history": array_union({"role": "user", "content": "hi"}, {"role": "assistant", "content": "ok"}),
            "plan": [2],
        },
    )
    assert merged["history"] == [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "ok"}]
    assert merged["plan"] == [2]
    assert merged["keep"] is True
    assert existing["plan"] == [1]


def test_array_union_on_missing_field_creates_array():
    assert apply_update({}, {"tags": array_union("a", "a", "b")}) == {"tags": ["a", "b"]}


class TestBuilders:
    def test_query_builders_are_immutable(self):
        store = Mock()
        base = collection(store, "exercises")
        filtered = base.where("is_custom", "==", True).order_by("name").limit(5)
        assert base.spec == QuerySpec()
        assert filtered.spec.filters == (FieldFilter("is_custom", "==", True),)
        assert filtered.spec.orders == (("name", "asc"),)
        assert filtered.spec.limit == 5

    def test_unknown_operator_rejected(self):
        with pytest.raises(ValueError):
            collection(Mock(), "exercises").where("name", "~=", "x")

    @pytest.mark.asyncio
    async def test_query_get_delegates_to_store(self):
        store = Mock()
        store.run_query = AsyncMock(return_value=[])
        query = collection(store, "workouts").where("status", "==", "completed")
        assert await query.get() == []
        store.run_query.assert_awaited_once_with("workouts", query.spec)

    def test_subcollection_paths(self):
        store = Mock()
        ref = collection(store, "users").document("u1").collection("cyclingActivities").document("a1")
        assert ref.path == "users/u1/cyclingActivities"
        assert ref.id == "a1"

    @pytest.mark.asyncio
    async def test_add_uses_store_assigned_id(self):
        store = Mock()
        store.new_document_id.return_value = "generated"
        store.set_document = AsyncMock()
        ref = await collection(store, "plans").add({"name": "Push"})
        assert ref.id == "generated"
        store.set_document.assert_awaited_once_with("plans", "generated", {"name": "Push"})
