"""Tests for milestones: ownership, ordering and the completion toggle."""

import asyncio
from datetime import date

import pytest

from goaltracker.errors import NotFoundError, ValidationError


@pytest.fixture
async def goal_id(app, alice):
    return await app.create_goal(alice, "Run 5k")


class TestMilestoneCrud:
    async def test_round_trip(self, app, alice, goal_id):
        milestone_id = await app.create_milestone(alice, goal_id, "Run 5k", due="2025-01-01")

        milestone = await app._core.services.milestone.get_milestone(milestone_id, alice.id)
        assert milestone.title == "Run 5k"
        assert milestone.due == date(2025, 1, 1)
        assert milestone.user_id == alice.id
        assert milestone.goal_id == goal_id
        assert milestone.is_complete is False

    async def test_blank_title_rejected_before_storage(self, app, alice, goal_id, database):
        with pytest.raises(ValidationError) as exc_info:
            await app.create_milestone(alice, goal_id, "  ", due="tomorrow")
        assert set(exc_info.value.errors) == {"title", "due"}
        assert "insert_one" not in database.get_collection("milestones").operations

    async def test_cannot_add_to_foreign_goal(self, app, bob, goal_id, database):
        with pytest.raises(NotFoundError):
            await app.create_milestone(bob, goal_id, "Sneaky")
        assert database.get_collection("milestones").docs == []

    async def test_update(self, app, alice, goal_id):
        milestone_id = await app.create_milestone(alice, goal_id, "Run 2k")
        await app.update_milestone(alice, milestone_id, "Run 3k", due="2025-03-01")

        milestone = await app._core.services.milestone.get_milestone(milestone_id, alice.id)
        assert milestone.title == "Run 3k"
        assert milestone.due == date(2025, 3, 1)

    async def test_foreign_update_and_delete_report_not_found(self, app, alice, bob, goal_id):
        milestone_id = await app.create_milestone(alice, goal_id, "Run 2k")
        with pytest.raises(NotFoundError):
            await app.update_milestone(bob, milestone_id, "Mine now")
        with pytest.raises(NotFoundError):
            await app.delete_milestone(bob, goal_id, milestone_id)
        with pytest.raises(NotFoundError):
            await app.toggle_milestone(bob, goal_id, milestone_id)

        milestone = await app._core.services.milestone.get_milestone(milestone_id, alice.id)
        assert milestone.title == "Run 2k"
        assert milestone.is_complete is False

    async def test_delete(self, app, alice, goal_id):
        milestone_id = await app.create_milestone(alice, goal_id, "Run 2k")
        await app.delete_milestone(alice, goal_id, milestone_id)
        assert await app.list_milestones(alice, goal_id) == []

    async def test_toggle_and_delete_under_other_goal_report_not_found(self, app, alice, goal_id):
        milestone_id = await app.create_milestone(alice, goal_id, "Run 2k")
        other_goal_id = await app.create_goal(alice, "Read more")

        with pytest.raises(NotFoundError):
            await app.toggle_milestone(alice, other_goal_id, milestone_id)
        with pytest.raises(NotFoundError):
            await app.delete_milestone(alice, other_goal_id, milestone_id)

        milestone = await app._core.services.milestone.get_milestone(milestone_id, alice.id, goal_id)
        assert milestone.is_complete is False

    async def test_list_for_foreign_goal_is_not_found(self, app, bob, goal_id):
        with pytest.raises(NotFoundError):
            await app.list_milestones(bob, goal_id)

    async def test_ordered_by_due_undated_last(self, app, alice, goal_id):
        await app.create_milestone(alice, goal_id, "Whenever")
        await app.create_milestone(alice, goal_id, "Second", due="2025-02-01")
        await app.create_milestone(alice, goal_id, "First", due="2025-01-01")

        titles = [m.title for m in await app.list_milestones(alice, goal_id)]
        assert titles == ["First", "Second", "Whenever"]

    async def test_list_for_owner_spans_goals(self, app, alice, bob, goal_id):
        other_goal_id = await app.create_goal(alice, "Read more")
        await app.create_milestone(alice, goal_id, "Run 2k")
        await app.create_milestone(alice, other_goal_id, "Pick a book")
        bob_goal_id = await app.create_goal(bob, "Bob's goal")
        await app.create_milestone(bob, bob_goal_id, "Bob's step")

        milestones = await app._core.services.milestone.list_milestones(alice.id)
        assert sorted(m.title for m in milestones) == ["Pick a book", "Run 2k"]


class TestToggleComplete:
    async def test_toggle_flips_state(self, app, alice, goal_id):
        milestone_id = await app.create_milestone(alice, goal_id, "Run 2k")
        assert await app.toggle_milestone(alice, goal_id, milestone_id) is True
        milestone = await app._core.services.milestone.get_milestone(milestone_id, alice.id)
        assert milestone.is_complete is True

    async def test_toggle_twice_restores_original_state(self, app, alice, goal_id):
        milestone_id = await app.create_milestone(alice, goal_id, "Run 2k")
        await app.toggle_milestone(alice, goal_id, milestone_id)
        assert await app.toggle_milestone(alice, goal_id, milestone_id) is False
        milestone = await app._core.services.milestone.get_milestone(milestone_id, alice.id)
        assert milestone.is_complete is False

    async def test_concurrent_toggles_last_writer_wins(self, app, alice, goal_id):
        """Known limitation: toggle reads then writes without a compare-and-swap.

        Two toggles that both read before either writes each store the same
        negated value, so one of the flips is lost instead of cancelling out.
        """
        milestone_id = await app.create_milestone(alice, goal_id, "Run 2k")

        results = await asyncio.gather(
            app.toggle_milestone(alice, goal_id, milestone_id),
            app.toggle_milestone(alice, goal_id, milestone_id),
        )

        assert results == [True, True]
        milestone = await app._core.services.milestone.get_milestone(milestone_id, alice.id)
        assert milestone.is_complete is True
