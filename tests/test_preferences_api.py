# File: /tests/test_preferences_api.py | Version: 1.0 | Title: Default-view & column preferences
from __future__ import annotations


def test_default_view_preferences_overwrite(client, login):
    headers = login("prefs@example.com")
    assert client.get("/api/user-project-preferences", headers=headers).json() is None

    r = client.post(
        "/api/user-project-preferences",
        json={"default_view_type": "dashboard", "default_view_id": "d-1"},
        headers=headers,
    )
    assert r.status_code == 200, r.text

    # Full overwrite: the id is cleared when not sent
    client.post("/api/user-project-preferences", json={"default_view_type": "calendar"}, headers=headers)
    stored = client.get("/api/user-project-preferences", headers=headers).json()
    assert stored["default_view_type"] == "calendar"
    assert stored["default_view_id"] is None

    assert client.delete("/api/user-project-preferences", headers=headers).status_code == 200
    assert client.get("/api/user-project-preferences", headers=headers).json() is None


def test_unknown_view_type_is_rejected(client, login):
    r = client.post(
        "/api/user-project-preferences",
        json={"default_view_type": "gallery"},
        headers=login("badprefs@example.com"),
    )
    assert r.status_code == 422


def test_column_preferences_upsert(client, login):
    headers = login("cols@example.com")
    assert client.get("/api/column-preferences", headers=headers).json() is None

    body = {
        "view_type": "projects-list",
        "column_order": ["client", "status", "dueDate"],
        "visible_columns": ["client", "dueDate"],
        "column_widths": {"client": 240},
    }
    first = client.post("/api/column-preferences", json=body, headers=headers).json()
    second = client.post(
        "/api/column-preferences",
        json={**body, "visible_columns": ["client"]},
        headers=headers,
    ).json()
    assert first["id"] == second["id"]

    stored = client.get("/api/column-preferences", params={"view_type": "projects-list"}, headers=headers).json()
    assert stored["visible_columns"] == ["client"]
    assert stored["column_widths"] == {"client": 240}
