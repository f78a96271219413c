import pytest

from brados.db.repositories import GuidedMeditationRepository, MeditationSessionRepository
from brados.db.schemas import GuidedMeditationScriptCreate, MeditationSessionCreate


def _script(category="sleep", title="Drift", order_index=1, segments=None):
    return GuidedMeditationScriptCreate(
        category=category,
        title=title,
        subtitle="A short wind-down",
        order_index=order_index,
        duration_seconds=600,
        segments=segments
        if segments is not None
        else [
            {"startSeconds": 0, "text": "Settle in", "phase": "opening"},
            {"startSeconds": 300, "text": "Notice the breath", "phase": "teachings"},
        ],
        interjections=[{"windowStartSeconds": 60, "windowEndSeconds": 120, "textOptions": ["Relax"]}],
    )


@pytest.fixture
def scripts(store, clock, id_factory):
    return GuidedMeditationRepository(store, clock=clock, id_factory=id_factory)


class TestGuidedMeditations:
    @pytest.mark.asyncio
    async def test_create_assigns_segment_ids(self, scripts):
        script = await scripts.create(_script())

        assert [segment.id for segment in script.segments] == ["id-1", "id-2"]
        stored = (await scripts.collection.document(script.id).get()).data
        assert stored["segments"][0] == {"startSeconds": 0, "text": "Settle in", "phase": "opening", "id": "id-1"}
        assert stored["orderIndex"] == 1
        assert "created_at" in stored
        assert await scripts.find_by_id(script.id) == script

    @pytest.mark.asyncio
    async def test_update_regenerates_segment_ids(self, scripts):
        script = await scripts.create(_script())

        updated = await scripts.update(
            script.id, {"segments": [{"startSeconds": 0, "text": "Begin again", "phase": "opening"}]}
        )

        assert [segment.id for segment in updated.segments] == ["id-3"]
        assert updated.title == "Drift"

    @pytest.mark.asyncio
    async def test_update_without_segments_keeps_ids(self, scripts):
        script = await scripts.create(_script())
        updated = await scripts.update(script.id, {"title": "Drift Off"})
        assert [segment.id for segment in updated.segments] == ["id-1", "id-2"]

    @pytest.mark.asyncio
    async def test_bad_segment_phase_rejects_script(self, scripts):
        script = await scripts.create(_script())
        ref = scripts.collection.document(script.id)
        body = (await ref.get()).data
        body["segments"][1]["phase"] = "middle"
        await ref.set(body)

        assert await scripts.find_by_id(script.id) is None

    @pytest.mark.asyncio
    async def test_listing_by_category_omits_body(self, scripts):
        second = await scripts.create(_script(title="Deep", order_index=2))
        first = await scripts.create(_script(title="Drift", order_index=1))
        await scripts.create(_script(category="focus"))

        listings = await scripts.find_all_by_category("sleep")

        assert [listing.id for listing in listings] == [first.id, second.id]
        assert not hasattr(listings[0], "segments")
        assert listings[0].duration_seconds == 600

    @pytest.mark.asyncio
    async def test_categories_in_first_seen_order(self, scripts):
        await scripts.collection.document("a").set({"category": "sleep"})
        await scripts.collection.document("b").set({"category": "focus"})
        await scripts.collection.document("c").set({"category": "sleep"})
        await scripts.collection.document("d").set({"category": 7})

        categories = await scripts.get_categories()

        assert [(c.name, c.script_count) for c in categories] == [("sleep", 2), ("focus", 1)]
        assert categories[0].id == "sleep"

    @pytest.mark.asyncio
    async def test_seed_shares_timestamps(self, scripts):
        seeded = await scripts.seed([_script(title="One"), _script(title="Two", order_index=2)])

        assert len(seeded) == 2
        assert seeded[0].created_at == seeded[1].created_at
        assert [s.title for s in await scripts.find_all()] == ["One", "Two"]


def _session(completed_at, actual=600, **overrides):
    fields = dict(
        completed_at=completed_at,
        session_type="breathing",
        planned_duration_seconds=600,
        actual_duration_seconds=actual,
        completed_fully=True,
    )
    fields.update(overrides)
    return MeditationSessionCreate(**fields)


@pytest.fixture
def meditation_sessions(store, id_factory):
    return MeditationSessionRepository(store, id_factory=id_factory)


class TestMeditationSessions:
    @pytest.mark.asyncio
    async def test_create_stores_camel_case(self, meditation_sessions):
        session = await meditation_sessions.create(_session("2024-01-01T08:00:00.000Z"))

        assert session.id == "id-1"
        stored = (await meditation_sessions.collection.document("id-1").get()).data
        assert stored["completedAt"] == "2024-01-01T08:00:00.000Z"
        assert stored["actualDurationSeconds"] == 600
        assert await meditation_sessions.find_by_id("id-1") == session

    @pytest.mark.asyncio
    async def test_find_latest(self, meditation_sessions):
        assert await meditation_sessions.find_latest() is None
        await meditation_sessions.create(_session("2024-01-01T08:00:00.000Z"))
        await meditation_sessions.create(_session("2024-01-03T08:00:00.000Z"))
        await meditation_sessions.create(_session("2024-01-02T08:00:00.000Z"))

        assert (await meditation_sessions.find_latest()).completed_at == "2024-01-03T08:00:00.000Z"

    @pytest.mark.asyncio
    async def test_find_in_date_range_is_ascending(self, meditation_sessions):
        await meditation_sessions.create(_session("2024-01-02T23:00:00.000Z"))
        await meditation_sessions.create(_session("2024-01-02T01:00:00.000Z"))
        await meditation_sessions.create(_session("2024-01-03T00:00:00.000Z"))

        found = await meditation_sessions.find_in_date_range("2024-01-02", "2024-01-02")
        assert [s.completed_at for s in found] == ["2024-01-02T01:00:00.000Z", "2024-01-02T23:00:00.000Z"]

    @pytest.mark.asyncio
    async def test_stats_floor_minutes_and_skip_malformed(self, meditation_sessions):
        await meditation_sessions.create(_session("2024-01-01T08:00:00.000Z", actual=90))
        await meditation_sessions.create(_session("2024-01-02T08:00:00.000Z", actual=100))
        await meditation_sessions.collection.document("bad").set({"completedAt": "2024-01-03T08:00:00.000Z"})

        stats = await meditation_sessions.get_stats()
        assert stats.total_sessions == 2
        assert stats.total_minutes == 3

    @pytest.mark.asyncio
    async def test_stats_empty(self, meditation_sessions):
        stats = await meditation_sessions.get_stats()
        assert (stats.total_sessions, stats.total_minutes) == (0, 0)

    @pytest.mark.asyncio
    async def test_delete_checks_existence_only(self, meditation_sessions):
        await meditation_sessions.collection.document("bad").set({"completedAt": 5})
        assert await meditation_sessions.delete("bad") is True
        assert await meditation_sessions.delete("bad") is False
