from __future__ import annotations

from money_app.models import today_local


def _balance(client, wallet_id: int) -> float:
    return client.get(f"/api/wallets/{wallet_id}").json()["balance"]


def _post(client, **payload):
    res = client.post("/api/transactions", json=payload)
    assert res.status_code == 201, res.text
    return res.json()


def test_create_defaults_and_balance(client, wallet, categories):
    tx = _post(client, category_id=categories["Gaji"]["id"], type="income", amount=5_000_000)
    assert tx["wallet_id"] == wallet["id"]
    assert tx["occurred_at"] == today_local().isoformat()
    assert tx["currency"] == "IDR"
    assert tx["category"]["name"] == "Gaji"
    assert _balance(client, wallet["id"]) == 5_000_000

    _post(client, category_id=categories["Makanan"]["id"], type="expense", amount=75_000, date="2024-03-10")
    assert _balance(client, wallet["id"]) == 4_925_000


def test_foreign_amount_fields_are_stored(client, categories):
    tx = _post(
        client,
        category_id=categories["Belanja"]["id"],
        type="expense",
        amount=160_000,
        original_amount=10,
        currency="usd",
        exchange_rate=16_000,
    )
    assert tx["currency"] == "USD"
    assert tx["original_amount"] == 10
    assert tx["exchange_rate"] == 16_000


def test_validation_errors(client, categories):
    res = client.post("/api/transactions", json={"type": "expense", "amount": -1})
    assert res.status_code == 422
    res = client.post("/api/transactions", json={"type": "expense", "amount": 1, "currency": "RUPIAH"})
    assert res.status_code == 422
    res = client.post("/api/transactions", json={"type": "expense", "amount": 1, "category_id": 9999})
    assert res.status_code == 404


def test_update_moves_balance_between_wallets(client, wallet, categories):
    other = client.post("/api/wallets", json={"name": "Bank"}).json()
    tx = _post(client, wallet_id=wallet["id"], category_id=categories["Makanan"]["id"], type="expense", amount=100)
    assert _balance(client, wallet["id"]) == -100

    res = client.patch(f"/api/transactions/{tx['id']}", json={"wallet_id": other["id"], "amount": 250})
    assert res.status_code == 200
    assert _balance(client, wallet["id"]) == 0
    assert _balance(client, other["id"]) == -250

    client.patch(f"/api/transactions/{tx['id']}", json={"type": "income"})
    assert _balance(client, other["id"]) == 250

    assert client.delete(f"/api/transactions/{tx['id']}").status_code == 204
    assert _balance(client, other["id"]) == 0
    assert client.get(f"/api/transactions/{tx['id']}").status_code == 404


def test_list_filters_and_pagination(client, categories):
    food = categories["Makanan"]["id"]
    for day in range(1, 6):
        _post(
            client,
            category_id=food,
            type="expense",
            amount=day * 1000,
            occurred_at=f"2024-03-0{day}",
            description=f"makan siang {day}",
        )
    _post(client, category_id=categories["Gaji"]["id"], type="income", amount=9000, occurred_at="2024-03-03", notes="Bonus")

    page = client.get("/api/transactions", params={"limit": 2, "page": 1}).json()
    assert page["total"] == 6
    assert page["limit"] == 2
    assert [t["occurred_at"] for t in page["transactions"]] == ["2024-03-05", "2024-03-04"]

    ranged = client.get("/api/transactions", params={"start_date": "2024-03-02", "end_date": "2024-03-04"}).json()
    assert ranged["total"] == 4

    expenses = client.get("/api/transactions", params={"type": "expense", "category_id": food}).json()
    assert expenses["total"] == 5

    found = client.get("/api/transactions", params={"search": "BONUS"}).json()
    assert [t["amount"] for t in found["transactions"]] == [9000]

    assert client.get("/api/transactions", params={"limit": 101}).status_code == 422
    assert client.get("/api/transactions", params={"page": 0}).status_code == 422


def test_transfer_between_wallets(client, wallet):
    bank = client.post("/api/wallets", json={"name": "Bank", "balance": 1_000_000}).json()
    res = client.post(
        "/api/transactions/transfer",
        json={"source_wallet_id": bank["id"], "target_wallet_id": wallet["id"], "amount": 400_000},
    )
    assert res.status_code == 201
    data = res.json()
    assert data["expense"]["type"] == "expense"
    assert data["income"]["type"] == "income"
    assert data["expense"]["category"]["name"] == "Transfer"
    assert _balance(client, bank["id"]) == 600_000
    assert _balance(client, wallet["id"]) == 400_000

    # transfers are neither income nor expense
    summary = client.get("/api/dashboard/summary", params={"period": "daily"}).json()
    assert summary["total_income"] == 0
    assert summary["total_expense"] == 0
    assert summary["transaction_count"] == 0


def test_transfer_rejects_same_wallet(client, wallet):
    res = client.post(
        "/api/transactions/transfer",
        json={"source_wallet_id": wallet["id"], "target_wallet_id": wallet["id"], "amount": 1},
    )
    assert res.status_code == 400
