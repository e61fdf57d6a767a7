"""VoteResolver tests: toggle, switch and retract against a real session."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from ideahub.exceptions import InvalidStateError, NotFoundError
from ideahub.models.idea import IdeaStatus
from ideahub.models.vote import Vote, VoteType
from ideahub.services.voting import VoteOutcome, VoteResolver
from ideahub.storage import VoteCounts

UP = VoteType.UPVOTE
DOWN = VoteType.DOWNVOTE


async def _rows_for(storage, idea_id: int, user_id: int) -> int:
    result = await storage.session.execute(
        select(func.count(Vote.id)).where(Vote.idea_id == idea_id, Vote.user_id == user_id)
    )
    return result.scalar()


@pytest.mark.asyncio()
async def test_scenario_create_remove_create_update(storage, make_user, make_idea) -> None:
    user, _ = await make_user()
    idea = await make_idea(user.id)
    resolver = VoteResolver(storage)

    assert await resolver.resolve(idea.id, user.id, UP) == VoteOutcome.CREATED
    assert await storage.get_vote_counts(idea.id) == VoteCounts(upvotes=1, downvotes=0)

    assert await resolver.resolve(idea.id, user.id, UP) == VoteOutcome.REMOVED
    assert await storage.get_vote_counts(idea.id) == VoteCounts(upvotes=0, downvotes=0)

    assert await resolver.resolve(idea.id, user.id, DOWN) == VoteOutcome.CREATED
    assert await storage.get_vote_counts(idea.id) == VoteCounts(upvotes=0, downvotes=1)

    assert await resolver.resolve(idea.id, user.id, UP) == VoteOutcome.UPDATED
    assert await storage.get_vote_counts(idea.id) == VoteCounts(upvotes=1, downvotes=0)


@pytest.mark.asyncio()
async def test_same_direction_twice_cancels(storage, make_user, make_idea) -> None:
    user, _ = await make_user()
    idea = await make_idea(user.id)
    resolver = VoteResolver(storage)

    await resolver.resolve(idea.id, user.id, DOWN)
    assert await resolver.resolve(idea.id, user.id, DOWN) == VoteOutcome.REMOVED
    assert await storage.get_vote(idea.id, user.id) is None


@pytest.mark.asyncio()
async def test_switch_leaves_single_row(storage, make_user, make_idea) -> None:
    user, _ = await make_user()
    idea = await make_idea(user.id)
    resolver = VoteResolver(storage)

    await resolver.resolve(idea.id, user.id, UP)
    await resolver.resolve(idea.id, user.id, DOWN)

    vote = await storage.get_vote(idea.id, user.id)
    assert vote.vote_type == DOWN
    assert await _rows_for(storage, idea.id, user.id) == 1
    assert await storage.get_vote_counts(idea.id) == VoteCounts(upvotes=0, downvotes=1)


@pytest.mark.asyncio()
async def test_at_most_one_row_over_any_sequence(storage, make_user, make_idea) -> None:
    user, _ = await make_user()
    idea = await make_idea(user.id)
    resolver = VoteResolver(storage)

    for direction in [UP, DOWN, DOWN, UP, UP, UP, DOWN, UP]:
        await resolver.resolve(idea.id, user.id, direction)
        assert await _rows_for(storage, idea.id, user.id) <= 1


@pytest.mark.asyncio()
async def test_votes_from_different_users_are_independent(storage, make_user, make_idea) -> None:
    alice, _ = await make_user("alice")
    bob, _ = await make_user("bob")
    idea = await make_idea(alice.id)
    resolver = VoteResolver(storage)

    await resolver.resolve(idea.id, alice.id, UP)
    await resolver.resolve(idea.id, bob.id, UP)
    await resolver.resolve(idea.id, bob.id, DOWN)

    assert await storage.get_vote_counts(idea.id) == VoteCounts(upvotes=1, downvotes=1)


@pytest.mark.asyncio()
async def test_missing_idea_is_not_found(storage, make_user) -> None:
    user, _ = await make_user()
    with pytest.raises(NotFoundError):
        await VoteResolver(storage).resolve(999, user.id, UP)


@pytest.mark.asyncio()
@pytest.mark.parametrize("status", [IdeaStatus.PENDING, IdeaStatus.REJECTED])
async def test_unapproved_idea_is_invalid_state(storage, make_user, make_idea, status) -> None:
    user, _ = await make_user()
    idea = await make_idea(user.id, status=status)
    with pytest.raises(InvalidStateError):
        await VoteResolver(storage).resolve(idea.id, user.id, UP)
    assert await storage.get_vote(idea.id, user.id) is None


@pytest.mark.asyncio()
async def test_unapproved_idea_rejects_even_with_prior_vote(storage, make_user, make_idea) -> None:
    user, _ = await make_user()
    idea = await make_idea(user.id)
    resolver = VoteResolver(storage)
    await resolver.resolve(idea.id, user.id, UP)

    await storage.update_idea(await storage.get_idea(idea.id), status=IdeaStatus.REJECTED)

    with pytest.raises(InvalidStateError):
        await resolver.resolve(idea.id, user.id, UP)
    assert await storage.get_vote_counts(idea.id) == VoteCounts(upvotes=1, downvotes=0)


@pytest.mark.asyncio()
async def test_insert_conflict_becomes_update(storage, make_user, make_idea, monkeypatch) -> None:
    user, _ = await make_user()
    idea = await make_idea(user.id)

    # Another request has already stored an upvote...
    await storage.create_vote(idea.id, user.id, UP)
    await storage.commit()

    # ...but this request's lookup ran before that insert landed.
    real_get_vote = storage.get_vote
    calls = []

    async def stale_get_vote(idea_id, user_id):
        calls.append((idea_id, user_id))
        if len(calls) == 1:
            return None
        return await real_get_vote(idea_id, user_id)

    monkeypatch.setattr(storage, "get_vote", stale_get_vote)

    outcome = await VoteResolver(storage).resolve(idea.id, user.id, DOWN)

    assert outcome == VoteOutcome.UPDATED
    assert len(calls) == 2
    assert await _rows_for(storage, idea.id, user.id) == 1
    assert await storage.get_vote_counts(idea.id) == VoteCounts(upvotes=0, downvotes=1)


@pytest.mark.asyncio()
async def test_insert_conflict_same_direction_retracts(storage, make_user, make_idea, monkeypatch) -> None:
    user, _ = await make_user()
    idea = await make_idea(user.id)

    await storage.create_vote(idea.id, user.id, UP)
    await storage.commit()

    real_get_vote = storage.get_vote
    calls = []

    async def stale_get_vote(idea_id, user_id):
        calls.append((idea_id, user_id))
        if len(calls) == 1:
            return None
        return await real_get_vote(idea_id, user_id)

    monkeypatch.setattr(storage, "get_vote", stale_get_vote)

    outcome = await VoteResolver(storage).resolve(idea.id, user.id, UP)

    assert outcome == VoteOutcome.REMOVED
    assert await _rows_for(storage, idea.id, user.id) == 0
    assert await storage.get_vote_counts(idea.id) == VoteCounts(upvotes=0, downvotes=0)


@pytest.mark.asyncio()
async def test_unrelated_integrity_error_propagates(storage, make_user, make_idea, monkeypatch) -> None:
    user, _ = await make_user()
    idea = await make_idea(user.id)

    async def failing_create(idea_id, user_id, vote_type):
        raise IntegrityError("INSERT INTO votes", {}, Exception("boom"))

    monkeypatch.setattr(storage, "create_vote", failing_create)

    with pytest.raises(IntegrityError):
        await VoteResolver(storage).resolve(idea.id, user.id, UP)


def test_outcome_messages() -> None:
    assert VoteOutcome.CREATED.message == "Vote created"
    assert VoteOutcome.UPDATED.message == "Vote updated"
    assert VoteOutcome.REMOVED.message == "Vote removed"
