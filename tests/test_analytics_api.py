# File: /tests/test_analytics_api.py | Version: 1.0 | Title: Dashboard widget aggregations
from __future__ import annotations


def _series(client, headers, group_by, **filters):
    r = client.post("/api/analytics", json={"filters": filters, "group_by": group_by}, headers=headers)
    assert r.status_code == 200, r.text
    return [(p["label"], p["value"]) for p in r.json()["series"]]


def test_group_by_project_type(client, login, seed):
    headers = login("charts@example.com")
    assert _series(client, headers, "projectType") == [("Year End", 2), ("Payroll Run", 1)]
    assert _series(client, headers, "projectType", showArchived=True) == [("Payroll Run", 2), ("Year End", 2)]


def test_group_by_status_follows_stage_order(client, login, seed):
    headers = login("charts@example.com")
    assert _series(client, headers, "status", showArchived=True) == [("Draft", 2), ("Intake", 1), ("Processing", 1)]


def test_group_by_people(client, login, seed):
    headers = login("charts@example.com")
    assert _series(client, headers, "assignee") == [("Unassigned", 2), ("Alice Ng", 1)]
    assert _series(client, headers, "serviceOwner") == [("Unassigned", 2), ("Bob Roy", 1)]


def test_days_overdue_buckets(client, login, seed):
    headers = login("charts@example.com")
    assert _series(client, headers, "daysOverdue") == [("Not overdue", 2), ("1-30 days", 1)]


def test_filters_narrow_the_series(client, login, seed):
    headers = login("charts@example.com")
    assert _series(client, headers, "projectType", serviceFilter=seed.payroll.id) == [("Payroll Run", 1)]
    assert _series(client, headers, "projectType", clientFilter=seed.globex.id) == [("Year End", 2)]
    assert _series(client, headers, "projectType", dynamicDateFilter="overdue") == [("Payroll Run", 1), ("Year End", 1)]


def test_unknown_grouping_is_rejected(client, login):
    r = client.post("/api/analytics", json={"filters": {}, "group_by": "colour"}, headers=login("x@example.com"))
    assert r.status_code == 422
