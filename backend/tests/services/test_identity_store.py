"""Identity Store — unique names, idempotent login, conflict recovery."""

import pytest

from app.core.errors import ConflictError
from app.services.identity_store import IdentityStore


async def test_find_by_name_returns_none_for_unknown(identities):
    assert await identities.find_by_name("nobody") is None


async def test_create_then_find(identities):
    created = await identities.create("alice")
    found = await identities.find_by_name("alice")
    assert found.id == created.id


async def test_create_duplicate_raises_conflict(identities):
    await identities.create("alice")
    with pytest.raises(ConflictError):
        await identities.create("alice")
    assert await identities.count() == 1


async def test_login_twice_creates_exactly_one_user(identities):
    first = await identities.get_or_create("bob")
    count_after_first = await identities.count()
    second = await identities.get_or_create("bob")

    assert first.created is True
    assert second.created is False
    assert first.user_id == second.user_id
    assert await identities.count() == count_after_first == 1


async def test_distinct_names_create_distinct_users(identities):
    a = await identities.get_or_create("alice")
    b = await identities.get_or_create("bob")
    assert a.user_id != b.user_id
    assert await identities.count() == 2


async def test_get_or_create_recovers_from_lost_race(identities, test_session_factory):
    """Concurrent login inserted the name between our lookup and our insert."""
    async with test_session_factory() as other:
        winner = await IdentityStore(other).create("carol")
        winner_id = winner.id

    real_find = identities.find_by_name
    calls = []

    async def stale_first_lookup(name):
        calls.append(name)
        if len(calls) == 1:
            return None
        return await real_find(name)

    identities.find_by_name = stale_first_lookup
    result = await identities.get_or_create("carol")

    assert result.created is False
    assert result.user_id == winner_id
    assert await identities.count() == 1


async def test_get_returns_user_by_id(identities):
    created = await identities.create("dave")
    assert (await identities.get(created.id)).name == "dave"
    assert await identities.get(created.id + 100) is None
