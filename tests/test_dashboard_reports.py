from __future__ import annotations

import pytest


@pytest.fixture()
def ledger(client, categories):
    def post(category: str, txn_type: str, amount: float, day: str) -> None:
        res = client.post(
            "/api/transactions",
            json={
                "category_id": categories[category]["id"],
                "type": txn_type,
                "amount": amount,
                "occurred_at": day,
            },
        )
        assert res.status_code == 201, res.text

    post("Gaji", "income", 8_000_000, "2024-02-01")
    post("Makanan", "expense", 1_000_000, "2024-02-10")
    post("Gaji", "income", 10_000_000, "2024-03-01")
    post("Makanan", "expense", 2_000_000, "2024-03-05")
    post("Belanja", "expense", 1_000_000, "2024-03-06")
    client.post("/api/budgets", json={"category_id": categories["Makanan"]["id"], "amount": 2_100_000})
    client.post("/api/budgets", json={"category_id": categories["Belanja"]["id"], "amount": 5_000_000})
    return categories


def test_monthly_dashboard(client, ledger):
    res = client.get("/api/dashboard/summary", params={"period": "monthly", "reference_date": "2024-03-15"})
    assert res.status_code == 200
    data = res.json()
    assert (data["period_start"], data["period_end"]) == ("2024-03-01", "2024-03-31")
    assert data["total_income"] == 10_000_000
    assert data["total_expense"] == 3_000_000
    assert data["net"] == 7_000_000
    assert data["transaction_count"] == 3
    assert data["income_change_pct"] == 25.0
    assert data["expense_change_pct"] == 200.0
    assert data["monthly_income"] == 10_000_000
    assert data["balance"] == 14_000_000

    spending = data["category_spending"]
    assert [c["category_name"] for c in spending] == ["Makanan", "Belanja"]
    assert spending[0]["percentage"] == 66.67
    assert spending[0]["change_pct"] == 100.0
    assert spending[1]["percentage"] == 33.33
    # no spending last month: capped new-activity signal
    assert spending[1]["change_pct"] == 100.0

    progress = {b["category_name"]: b for b in data["budget_progress"]}
    assert progress["Makanan"]["status"] == "warning"
    assert progress["Makanan"]["percentage"] == 95.24
    assert progress["Belanja"]["status"] == "ok"
    assert [a["category_name"] for a in data["budget_alerts"]] == ["Makanan"]

    assert len(data["daily_trends"]) == 31
    trend = {d["date"]: d for d in data["daily_trends"]}
    assert trend["2024-03-05"]["expense"] == 2_000_000
    assert trend["2024-03-02"] == {"date": "2024-03-02", "income": 0, "expense": 0}

    recent = data["recent_transactions"]
    assert len(recent) == 5
    assert recent[0]["occurred_at"] == "2024-03-06"


def test_weekly_dashboard(client, ledger):
    data = client.get(
        "/api/dashboard/summary", params={"period": "weekly", "reference_date": "2024-03-06"}
    ).json()
    assert (data["period_start"], data["period_end"]) == ("2024-03-04", "2024-03-10")
    assert data["total_expense"] == 3_000_000
    assert data["income_change_pct"] == -100.0
    assert data["expense_change_pct"] == 100.0
    assert len(data["daily_trends"]) == 7


def test_dashboard_rejects_unknown_period(client):
    res = client.get("/api/dashboard/summary", params={"period": "fortnightly"})
    assert res.status_code == 400
    assert "fortnightly" in res.json()["detail"]


def test_monthly_report(client, ledger):
    res = client.get("/api/reports/monthly", params={"year": 2024, "month": 3})
    assert res.status_code == 200
    data = res.json()
    assert data["total_income"] == 10_000_000
    assert data["total_expense"] == 3_000_000
    assert data["net_savings"] == 7_000_000
    assert data["savings_rate"] == 70.0
    assert data["transaction_count"] == 3
    assert [c["category_name"] for c in data["category_breakdown"]] == ["Makanan", "Belanja"]
    assert data["comparison"] == {"income_change": 25.0, "expense_change": 200.0, "savings_change": 0.0}
    assert len(data["daily_trend"]) == 31


def test_empty_month_report(client):
    data = client.get("/api/reports/monthly", params={"year": 2023, "month": 1}).json()
    assert data["total_income"] == data["total_expense"] == 0
    assert data["savings_rate"] == 0
    assert data["category_breakdown"] == []
    assert data["comparison"] == {"income_change": 0.0, "expense_change": 0.0, "savings_change": 0.0}


def test_report_validates_month(client):
    assert client.get("/api/reports/monthly", params={"year": 2024, "month": 13}).status_code == 422


def test_score_endpoint(client, ledger):
    data = client.get("/api/analytics/score").json()
    for key in ("score", "consistency_score", "savings_score", "spending_score"):
        assert 0 <= data[key] <= 100
    assert isinstance(data["tips"], list)
