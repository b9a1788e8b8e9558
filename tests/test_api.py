# tests/test_api.py

from __future__ import annotations

from timeplanner.db.models import Account, Category, Task, TaskTemplate

from .helpers import PASSWORD, count

API = "/api/v1"

BUNDLE = {
    "categories": [{"id": "c1", "name": "Work", "color": "#336699"}],
    "templates": [{"id": "t1", "title": "Standup", "duration": 0.25, "categoryId": "c1"}],
    "tasks": [
        {"title": "Standup", "start": "2030-01-07T09:00:00Z", "duration": 0.25,
         "categoryId": "c1", "templateId": "t1"},
        {"title": "Orphan", "start": "2030-01-07T12:00:00Z", "duration": 1, "categoryId": "c-gone"},
    ],
}


def test_health(client) -> None:
    r = client.get(f"{API}/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_protected_routes_require_a_token(client) -> None:
    r = client.get(f"{API}/categories")
    assert r.status_code == 401
    assert r.json()["error"] == "unauthorized"

    r = client.get(f"{API}/categories", headers={"Authorization": "Bearer nope"})
    assert r.status_code == 401


def test_register_validation_is_field_level(client) -> None:
    r = client.post(f"{API}/auth/register", json={"email": "not-an-email", "password": "short"})
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "validation_failed"
    assert {e["field"] for e in body["errors"]} == {"email", "password"}


def test_register_rejects_malformed_email_and_lowercases(client) -> None:
    r = client.post(f"{API}/auth/register", json={"email": "a@...", "password": PASSWORD})
    assert r.status_code == 400
    assert [e["field"] for e in r.json()["errors"]] == ["email"]

    r = client.post(f"{API}/auth/register", json={"email": "Mixed.Case@Example.com", "password": PASSWORD})
    assert r.status_code == 201
    r = client.post(f"{API}/auth/login", json={"email": "mixed.case@example.com", "password": PASSWORD})
    assert r.status_code == 200


def test_register_duplicate_email_conflict(client, auth) -> None:
    auth("dup@example.com")
    r = client.post(f"{API}/auth/register", json={"email": "DUP@example.com", "password": PASSWORD})
    assert r.status_code == 409
    assert r.json()["error"] == "conflict"


def test_login_issues_a_working_token(client, auth) -> None:
    auth("me@example.com")
    bad = client.post(f"{API}/auth/login", json={"email": "me@example.com", "password": "Wr0ng-pass"})
    assert bad.status_code == 401

    r = client.post(f"{API}/auth/login", json={"email": "me@example.com", "password": PASSWORD})
    assert r.status_code == 200
    headers = {"Authorization": f"Bearer {r.json()['access_token']}"}
    assert client.get(f"{API}/categories", headers=headers).status_code == 200


def test_register_with_migration_reports_counts(client) -> None:
    r = client.post(
        f"{API}/auth/register",
        json={"email": "mig@example.com", "password": PASSWORD, "migrationData": BUNDLE},
    )
    assert r.status_code == 201, r.text
    report = r.json()["migration"]
    assert report == {
        "categories_created": 1,
        "templates_created": 1,
        "templates_skipped": 0,
        "tasks_created": 1,
        "tasks_skipped": 1,
    }

    headers = {"Authorization": f"Bearer {r.json()['access_token']}"}
    tasks = client.get(f"{API}/tasks", params={"start_date": "2030-01-07", "end_date": "2030-01-07"},
                       headers=headers).json()
    assert [t["title"] for t in tasks] == ["Standup"]
    assert tasks[0]["category_name"] == "Work"
    assert tasks[0]["template_id"] is not None


def test_failed_migration_is_a_distinct_error_and_leaves_nothing(client, engine) -> None:
    broken = dict(BUNDLE, tasks=[{"title": "x", "start": "yesterday", "duration": 1, "categoryId": "c1"}])
    r = client.post(
        f"{API}/auth/register",
        json={"email": "fail@example.com", "password": PASSWORD, "migrationData": broken},
    )
    assert r.status_code == 422
    assert r.json()["error"] == "migration_failed"

    assert count(engine, Account, email="fail@example.com") == 0
    assert count(engine, Category) == 0
    assert count(engine, TaskTemplate) == 0
    assert count(engine, Task) == 0

    # the address is free again
    r = client.post(f"{API}/auth/register", json={"email": "fail@example.com", "password": PASSWORD})
    assert r.status_code == 201


def test_overlap_flow(client, auth) -> None:
    headers = auth()
    cat = client.post(f"{API}/categories", json={"name": "Work", "color": "#336699"}, headers=headers)
    assert cat.status_code == 201
    cat_id = cat.json()["id"]

    def task(start, duration=1):
        return client.post(
            f"{API}/tasks",
            json={"title": "t", "start": start, "duration": duration, "category_id": cat_id},
            headers=headers,
        )

    first = task("2030-01-07T09:00:00Z")
    assert first.status_code == 201

    clash = task("2030-01-07T09:30:00Z")
    assert clash.status_code == 409
    assert clash.json()["error"] == "conflict"

    assert task("2030-01-07T10:00:00Z").status_code == 201

    # same interval on itself is fine
    task_id = first.json()["id"]
    r = client.put(
        f"{API}/tasks/{task_id}",
        json={"title": "renamed", "start": "2030-01-07T09:00:00Z", "duration": 1, "category_id": cat_id},
        headers=headers,
    )
    assert r.status_code == 200
    assert r.json()["title"] == "renamed"

    bad = task("2030-01-07T12:00:00Z", duration=0)
    assert bad.status_code == 400
    assert bad.json()["errors"][0]["field"] == "duration"


def test_category_delete_and_fallback_over_http(client, auth) -> None:
    headers = auth()
    cat_id = client.post(f"{API}/categories", json={"name": "Gym", "color": "#00ff00"}, headers=headers).json()["id"]
    tpl = client.post(
        f"{API}/task-templates", json={"title": "Lift", "duration": 1, "category_id": cat_id}, headers=headers
    )
    assert tpl.status_code == 201

    assert client.delete(f"{API}/categories/{cat_id}", headers=headers).status_code == 204

    cats = client.get(f"{API}/categories", headers=headers).json()
    assert [c["name"] for c in cats] == ["Other"]
    templates = client.get(f"{API}/task-templates", headers=headers).json()
    assert templates[0]["category_id"] == cats[0]["id"]

    r = client.delete(f"{API}/categories/{cats[0]['id']}", headers=headers)
    assert r.status_code == 409

    r = client.delete(f"{API}/categories/{cat_id}", headers=headers)
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"


def test_accounts_cannot_see_each_other(client, auth) -> None:
    alice = auth("alice@example.com")
    bob = auth("bob@example.com")
    cat_id = client.post(f"{API}/categories", json={"name": "Work", "color": "#336699"}, headers=alice).json()["id"]

    assert client.get(f"{API}/categories", headers=bob).json() == []
    r = client.post(
        f"{API}/tasks",
        json={"title": "t", "start": "2030-01-07T09:00:00Z", "duration": 1, "category_id": cat_id},
        headers=bob,
    )
    assert r.status_code == 404
