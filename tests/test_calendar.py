from __future__ import annotations

from datetime import date

from money_app.models import today_local


def _next_year() -> int:
    return today_local().year + 1


def _add_rule(client, wallet, start: date, frequency: str, **extra):
    res = client.post(
        "/api/recurring",
        json={
            "wallet_id": wallet["id"],
            "amount": 150_000,
            "type": "expense",
            "frequency": frequency,
            "start_date": start.isoformat(),
            **extra,
        },
    )
    assert res.status_code == 201
    return res.json()


def test_monthly_rule_lands_on_clamped_month_end(client, wallet, categories):
    year = _next_year()
    rule = _add_rule(
        client,
        wallet,
        date(year, 1, 31),
        "monthly",
        description="Listrik",
        category_id=categories["Tagihan"]["id"],
    )

    body = client.get("/api/calendar/events", params={"year": year, "month": 2}).json()
    assert body["year"] == year and body["month"] == 2
    assert len(body["events"]) == 1
    event = body["events"][0]
    feb_end = date(year, 3, 1).toordinal() - 1
    assert event["date"] == date.fromordinal(feb_end).isoformat()
    assert event["title"] == "Listrik"
    assert event["amount"] == 150_000
    assert event["type"] == "expense"
    assert event["source"] == "recurring"
    assert event["source_id"] == rule["id"]


def test_weekly_rule_repeats_within_month(client, wallet):
    year = _next_year()
    _add_rule(client, wallet, date(year, 1, 1), "weekly", description="Laundry")

    events = client.get("/api/calendar/events", params={"year": year, "month": 1}).json()["events"]
    assert [e["date"] for e in events] == [date(year, 1, d).isoformat() for d in (1, 8, 15, 22, 29)]


def test_rule_starting_later_has_no_events_before_start(client, wallet):
    year = _next_year()
    _add_rule(client, wallet, date(year, 3, 5), "daily")

    events = client.get("/api/calendar/events", params={"year": year, "month": 2}).json()["events"]
    assert events == []


def test_unpaid_debts_show_on_due_date(client, wallet):
    year = _next_year()
    client.post(
        "/api/debts",
        json={
            "type": "payable",
            "person_name": "Budi",
            "amount": 500_000,
            "description": "Sewa",
            "due_date": date(year, 4, 20).isoformat(),
        },
    )
    client.post(
        "/api/debts",
        json={"type": "receivable", "person_name": "Sari", "amount": 75_000, "due_date": date(year, 4, 3).isoformat()},
    )
    paid = client.post(
        "/api/debts",
        json={"type": "payable", "person_name": "Andi", "amount": 10_000, "due_date": date(year, 4, 10).isoformat()},
    ).json()
    client.patch(f"/api/debts/{paid['id']}", json={"status": "paid"})

    events = client.get("/api/calendar/events", params={"year": year, "month": 4}).json()["events"]
    assert [(e["date"], e["type"], e["title"]) for e in events] == [
        (date(year, 4, 3).isoformat(), "debt_receivable", "Sari"),
        (date(year, 4, 20).isoformat(), "debt_payable", "Budi - Sewa"),
    ]
    assert all(e["source"] == "debt" for e in events)


def test_defaults_to_current_month(client):
    today = today_local()
    body = client.get("/api/calendar/events").json()
    assert (body["year"], body["month"]) == (today.year, today.month)


def test_month_out_of_range_is_rejected(client):
    assert client.get("/api/calendar/events", params={"month": 13}).status_code == 422
    assert client.get("/api/calendar/events", params={"month": 0}).status_code == 422
