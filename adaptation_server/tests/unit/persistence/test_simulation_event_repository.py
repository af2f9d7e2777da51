"""
Tests for SimulationEventRepository.
"""

from adaptation_server.persistence.repositories.simulation_event_repository import SimulationEventRepository


class TestSimulationEventRepository:
    """Tests for recording and listing simulation events."""

    async def test_record_event_persists_all_fields(self, event_repository: SimulationEventRepository) -> None:
        """Test that a recorded event round-trips through the database."""
        recorded = await event_repository.record_event(
            environment_id="desert",
            event_type="Food shortage",
            description="Food shortage in the desert environment",
            survivors=["a", "b"],
            extinct_count=3,
        )

        events = await event_repository.list_events()

        assert len(events) == 1
        data = events[0].to_dict()
        assert data["id"] == recorded.id
        assert data["environmentId"] == "desert"
        assert data["eventType"] == "Food shortage"
        assert data["description"] == "Food shortage in the desert environment"
        assert data["survivors"] == ["a", "b"]
        assert data["extinctCount"] == 3
        assert data["createdAt"]

    async def test_list_events_newest_first_with_filter_and_limit(
        self, event_repository: SimulationEventRepository
    ) -> None:
        """Test ordering, environment filtering and the limit."""
        older = await event_repository.record_event("marine", "Disease outbreak", "d", [], 0)
        await event_repository.record_event("desert", "Extreme weather", "d", [], 1)
        newer = await event_repository.record_event("marine", "Predator invasion", "d", [], 2)

        marine_events = await event_repository.list_events(environment_id="marine")
        assert [event.id for event in marine_events] == [newer.id, older.id]

        latest = await event_repository.list_events(limit=1)
        assert [event.id for event in latest] == [newer.id]
