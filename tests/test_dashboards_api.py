# File: /tests/test_dashboards_api.py | Version: 1.0 | Title: Dashboards CRUD & sharing
from __future__ import annotations

import json
from typing import Any, Dict


def _dashboard(**overrides: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "name": "Ops",
        "description": "Weekly ops",
        "filters": json.dumps({"serviceFilter": "Payroll"}),
        "widgets": [{"id": "widget-1", "type": "bar", "title": "By type", "group_by": "projectType"}],
    }
    body.update(overrides)
    return body


def test_dashboard_lifecycle(client, login):
    headers = login("dash@example.com")
    r = client.post("/api/dashboards", json=_dashboard(), headers=headers)
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["visibility"] == "private"
    assert created["widgets"][0]["group_by"] == "projectType"

    r = client.patch(
        f"/api/dashboards/{created['id']}",
        json={"is_homescreen_dashboard": True, "widgets": []},
        headers=headers,
    )
    assert r.status_code == 200
    assert r.json()["is_homescreen_dashboard"] is True
    assert r.json()["widgets"] == []
    assert r.json()["name"] == "Ops"

    assert client.delete(f"/api/dashboards/{created['id']}", headers=headers).status_code == 200
    assert client.get("/api/dashboards", headers=headers).json() == []


def test_unknown_widget_grouping_is_rejected(client, login):
    bad = _dashboard(widgets=[{"id": "w", "type": "bar", "title": "T", "group_by": "colour"}])
    assert client.post("/api/dashboards", json=bad, headers=login("bad@example.com")).status_code == 422


def test_private_dashboards_are_hidden_from_others(client, login):
    owner = login("priv-owner@example.com")
    other = login("priv-other@example.com")
    dash_id = client.post("/api/dashboards", json=_dashboard(), headers=owner).json()["id"]

    assert client.get("/api/dashboards", headers=other).json() == []
    assert client.get(f"/api/dashboards/{dash_id}", headers=other).status_code == 404
    assert client.delete(f"/api/dashboards/{dash_id}", headers=other).status_code == 404


def test_shared_dashboards_are_read_only_for_others(client, login):
    owner = login("share-owner@example.com")
    other = login("share-other@example.com")
    dash_id = client.post("/api/dashboards", json=_dashboard(visibility="shared"), headers=owner).json()["id"]

    assert [d["id"] for d in client.get("/api/dashboards", headers=other).json()] == [dash_id]
    assert client.get(f"/api/dashboards/{dash_id}", headers=other).status_code == 200
    assert client.patch(f"/api/dashboards/{dash_id}", json={"name": "Mine"}, headers=other).status_code == 403
    assert client.delete(f"/api/dashboards/{dash_id}", headers=other).status_code == 403
