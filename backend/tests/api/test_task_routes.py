"""Task Routes — owner-scoped CRUD over HTTP.

Tests cover:
    - create defaults and 400s for bad bodies
    - another owner's task answers exactly like a missing one
    - PATCH partial semantics, DELETE 204 then 404
    - list filters, clamping and query validation
"""

import pytest


async def _create(client, user, **fields) -> dict:
    payload = {"title": "Buy milk", **fields}
    res = await client.post("/tasks", json=payload, headers=user["headers"])
    assert res.status_code == 201, res.text
    return res.json()


# ─── create ──────────────────────────────────────────────────────

async def test_create_returns_defaults(client, alice):
    task = await _create(client, alice)
    assert isinstance(task["id"], int)
    assert task["owner_id"] == alice["user"]["id"]
    assert task["status"] == "todo"
    assert task["priority"] == "medium"
    assert task["description"] is None
    assert task["due_date"] is None
    assert task["created_at"] == task["updated_at"]


async def test_owner_id_in_body_is_rejected(client, alice, bob):
    res = await client.post(
        "/tasks",
        json={"title": "x", "owner_id": bob["user"]["id"]},
        headers=alice["headers"],
    )
    assert res.status_code == 400


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"title": ""},
        {"title": "   "},
        {"title": "x" * 501},
        {"title": "x", "status": "archived"},
        {"title": "x", "priority": "urgent"},
        {"title": "x", "due_date": "next tuesday"},
    ],
)
async def test_create_rejects_bad_bodies(client, alice, payload):
    res = await client.post("/tasks", json=payload, headers=alice["headers"])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    listing = await client.get("/tasks", headers=alice["headers"])
    assert listing.json()["total"] == 0


async def test_validation_error_names_the_field(client, alice):
    res = await client.post(
        "/tasks", json={"title": "x", "status": "archived"}, headers=alice["headers"],
    )
    fields = res.json()["error"]["details"]["fields"]
    assert any(f["field"] == "status" for f in fields)


# ─── ownership ───────────────────────────────────────────────────

async def test_foreign_task_looks_like_missing_task(client, alice, bob):
    task = await _create(client, alice, title="Private")
    foreign = await client.get(f"/tasks/{task['id']}", headers=bob["headers"])
    missing = await client.get(f"/tasks/{task['id'] + 1000}", headers=bob["headers"])
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()


async def test_foreign_update_and_delete_leave_task_untouched(client, alice, bob):
    task = await _create(client, alice, title="Private")
    res = await client.patch(
        f"/tasks/{task['id']}", json={"title": "Hijacked"}, headers=bob["headers"],
    )
    assert res.status_code == 404
    res = await client.delete(f"/tasks/{task['id']}", headers=bob["headers"])
    assert res.status_code == 404

    res = await client.get(f"/tasks/{task['id']}", headers=alice["headers"])
    assert res.status_code == 200
    assert res.json()["title"] == "Private"


async def test_list_shows_only_own_tasks(client, alice, bob):
    await _create(client, alice, title="A")
    await _create(client, bob, title="B")
    res = await client.get("/tasks", headers=bob["headers"])
    body = res.json()
    assert body["total"] == 1
    assert [t["title"] for t in body["data"]] == ["B"]


# ─── update ──────────────────────────────────────────────────────

async def test_patch_changes_only_sent_fields(client, alice):
    task = await _create(client, alice, description="2 litres", priority="high")
    res = await client.patch(
        f"/tasks/{task['id']}", json={"status": "done"}, headers=alice["headers"],
    )
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "done"
    assert body["description"] == "2 litres"
    assert body["priority"] == "high"
    assert body["updated_at"] >= task["updated_at"]


async def test_patch_explicit_null_clears_description(client, alice):
    task = await _create(client, alice, description="2 litres")
    res = await client.patch(
        f"/tasks/{task['id']}", json={"description": None}, headers=alice["headers"],
    )
    assert res.json()["description"] is None


@pytest.mark.parametrize(
    "payload",
    [{"title": ""}, {"title": None}, {"status": None}, {"priority": "urgent"}, {"colour": "red"}],
)
async def test_patch_rejects_bad_bodies(client, alice, payload):
    task = await _create(client, alice)
    res = await client.patch(
        f"/tasks/{task['id']}", json=payload, headers=alice["headers"],
    )
    assert res.status_code == 400
    res = await client.get(f"/tasks/{task['id']}", headers=alice["headers"])
    assert res.json()["title"] == "Buy milk"


async def test_non_integer_task_id_is_validation_error(client, alice):
    res = await client.get("/tasks/abc", headers=alice["headers"])
    assert res.status_code == 400


# ─── delete ──────────────────────────────────────────────────────

async def test_delete_twice(client, alice):
    task = await _create(client, alice)
    first = await client.delete(f"/tasks/{task['id']}", headers=alice["headers"])
    assert first.status_code == 204
    assert first.content == b""
    second = await client.delete(f"/tasks/{task['id']}", headers=alice["headers"])
    assert second.status_code == 404


# ─── list ────────────────────────────────────────────────────────

async def test_list_filters_and_echoes_window(client, alice):
    await _create(client, alice, title="1", status="done", priority="high")
    await _create(client, alice, title="2", status="done", priority="low")
    await _create(client, alice, title="3", priority="high")

    res = await client.get(
        "/tasks", params={"status": "done", "priority": "high"}, headers=alice["headers"],
    )
    body = res.json()
    assert [t["title"] for t in body["data"]] == ["1"]
    assert (body["total"], body["page"], body["limit"]) == (1, 1, 20)


async def test_list_is_newest_first(client, alice):
    for title in ("first", "second", "third"):
        await _create(client, alice, title=title)
    res = await client.get("/tasks", headers=alice["headers"])
    assert [t["title"] for t in res.json()["data"]] == ["third", "second", "first"]


async def test_list_clamps_out_of_range_window(client, alice):
    await _create(client, alice)
    res = await client.get(
        "/tasks", params={"page": 0, "limit": 500}, headers=alice["headers"],
    )
    assert res.status_code == 200
    body = res.json()
    assert (body["page"], body["limit"]) == (1, 100)


async def test_page_past_the_end_is_empty_with_total(client, alice):
    await _create(client, alice)
    res = await client.get("/tasks", params={"page": 9}, headers=alice["headers"])
    body = res.json()
    assert body["data"] == []
    assert body["total"] == 1


@pytest.mark.parametrize(
    "params", [{"status": "archived"}, {"priority": "urgent"}, {"page": "two"}],
)
async def test_list_rejects_bad_query(client, alice, params):
    res = await client.get("/tasks", params=params, headers=alice["headers"])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.parametrize(
    "task_id", ["9223372036854775808", "99999999999999999999", "0", "-1"],
)
async def test_unstorable_task_id_is_not_found(client, alice, task_id):
    h = alice["headers"]
    responses = [
        await client.get(f"/tasks/{task_id}", headers=h),
        await client.patch(f"/tasks/{task_id}", json={"status": "done"}, headers=h),
        await client.delete(f"/tasks/{task_id}", headers=h),
    ]
    assert [r.status_code for r in responses] == [404, 404, 404]
    assert all(r.json()["error"]["code"] == "RESOURCE_NOT_FOUND" for r in responses)
