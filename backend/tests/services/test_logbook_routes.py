"""Logbook routes — listing, login/logout cookies, record creation and redirects.

Invariants:
    - POST routes answer 303 to the listing
    - /create threads its category into the redirect
    - Anonymous /create appends nothing
    - Malformed page input never errors

Design Decisions:
    - Listing page size is 2 (services/conftest.py) so paging needs few records
    - httpx client keeps cookies between calls, mirroring a browser
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.infrastructure.database import get_db
from app.main import app
from app.models.record import Record
from app.models.user import User
from app.services.record_store import RecordStore


async def _login(client, name="alice"):
    res = await client.post("/login", json={"name": name})
    assert res.status_code == 303
    return res


async def _create(client, payload, category=None):
    body = {"payload": payload}
    if category is not None:
        body["category"] = category
    return await client.post("/create", json=body)


async def _count(test_db, model):
    result = await test_db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


async def test_empty_listing(client):
    res = await client.get("/")
    assert res.status_code == 200
    body = res.json()
    assert body["items"] == []
    assert body["page"] == 0
    assert body["next_page"] == 1
    assert body["has_next"] is False
    assert body["identity"] is None


async def test_login_sets_cookie_and_redirects_to_fresh_listing(client, registry):
    res = await _login(client)
    assert res.headers["location"] == "/"
    assert "logbook_session" in res.cookies
    assert len(registry) == 1

    listing = await client.get("/")
    assert listing.json()["identity"] == "alice"


async def test_login_is_idempotent(client, test_db):
    await _login(client, "bob")
    await _login(client, "bob")
    result = await test_db.execute(select(User).where(User.name == "bob"))
    assert len(result.scalars().all()) == 1


async def test_login_rejects_blank_name(client):
    res = await client.post("/login", json={"name": "  "})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_create_appends_owned_record_and_keeps_category(client):
    await _login(client)
    res = await _create(client, "coffee beans", "food")
    assert res.status_code == 303
    assert res.headers["location"] == "/?category=food"

    items = (await client.get("/", params={"category": "food"})).json()["items"]
    assert len(items) == 1
    assert items[0]["payload"] == "coffee beans"
    assert items[0]["owner"] == "alice"


async def test_create_without_category_redirects_to_root(client):
    await _login(client)
    res = await _create(client, "misc")
    assert res.headers["location"] == "/"


async def test_anonymous_create_is_silent_noop(client, test_db):
    res = await _create(client, "sneaky", "food")
    assert res.status_code == 303
    assert res.headers["location"] == "/?category=food"
    assert await _count(test_db, Record) == 0


async def test_logout_clears_session(client, registry, test_db):
    await _login(client)
    res = await client.post("/logout")
    assert res.status_code == 303
    assert res.headers["location"] == "/"
    assert len(registry) == 0

    assert (await client.get("/")).json()["identity"] is None
    await _create(client, "after logout")
    assert await _count(test_db, Record) == 0


async def test_logout_when_anonymous_still_redirects(client):
    res = await client.post("/logout")
    assert res.status_code == 303


async def test_unknown_session_cookie_is_anonymous(client):
    client.cookies.set("logbook_session", "forged-token")
    assert (await client.get("/")).json()["identity"] is None


async def test_paging_threads_filter_through_next_url(client):
    await _login(client)
    for i in range(3):
        await _create(client, f"meal {i}", "food")
    await _create(client, "novel", "books")

    first = (await client.get("/", params={"category": "food"})).json()
    assert len(first["items"]) == 2
    assert first["has_next"] is True
    assert first["next_url"] == "/?category=food&page=1"

    second = (await client.get(first["next_url"])).json()
    assert second["category"] == "food"
    assert len(second["items"]) == 1
    assert second["has_next"] is False
    assert second["next_url"] is None

    seen = {i["id"] for i in first["items"]} | {i["id"] for i in second["items"]}
    assert len(seen) == 3


async def test_listing_is_newest_first(client):
    await _login(client)
    await _create(client, "older")
    await _create(client, "newer")
    items = (await client.get("/")).json()["items"]
    assert [i["payload"] for i in items] == ["newer", "older"]


async def test_malformed_page_defaults_to_zero(client):
    for raw in ("abc", "-3", ""):
        body = (await client.get("/", params={"page": raw})).json()
        assert body["page"] == 0


async def test_unknown_category_yields_empty_listing(client):
    await _login(client)
    await _create(client, "coffee", "food")
    body = (await client.get("/", params={"category": "nope"})).json()
    assert body["items"] == []
    assert body["category"] == "nope"


async def test_huge_page_is_an_empty_last_page(client):
    await _login(client)
    await _create(client, "only one")
    for raw in ("9223372036854775807", "99999999999999999999"):
        res = await client.get("/", params={"page": raw})
        assert res.status_code == 200
        body = res.json()
        assert body["items"] == []
        assert body["has_next"] is False
        assert body["page"] == int(raw)


async def test_store_failure_returns_503_without_partial_write(
    client, test_db, monkeypatch, caplog,
):
    """Runs through the real get_db so the session manager maps the failure."""
    await _login(client)
    app.dependency_overrides.pop(get_db)

    async def failing_append(self, *args, **kwargs):
        raise OperationalError("INSERT INTO records", {}, Exception("disk I/O error"))

    monkeypatch.setattr(RecordStore, "append", failing_append)
    caplog.set_level(logging.INFO)

    res = await _create(client, "lost", "food")

    assert res.status_code == 503
    assert res.json()["error"]["code"] == "STORE_UNAVAILABLE"
    assert await _count(test_db, Record) == 0
    assert any(
        r.levelno == logging.CRITICAL and getattr(r, "path", None) == "/create"
        for r in caplog.records
    )
