"""End-to-end API checks through the ASGI app."""

import pytest


async def _create_asset(client, ticker="AAPL", category="Stock"):
    resp = await client.post("/api/assets", json={
        "name": f"{ticker} Inc", "ticker": ticker.lower(), "category": category, "currency": "usd",
    })
    assert resp.status_code == 200, resp.text
    return resp.json()


async def _trade(client, asset_id, tx_type, day, quantity, price, fees=0.0):
    return await client.post("/api/transactions", json={
        "asset_id": asset_id, "date": day, "type": tx_type,
        "quantity": quantity, "unit_price": price, "fees": fees,
    })


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_account(client):
    resp = await client.get("/api/account")
    assert resp.status_code == 200
    assert resp.json()["portfolio_name"] == "Test Portfolio"

    resp = await client.patch("/api/account", json={"portfolio_name": "Pension"})
    assert resp.status_code == 200
    assert resp.json()["portfolio_name"] == "Pension"


@pytest.mark.asyncio
async def test_asset_crud(client):
    asset = await _create_asset(client)
    assert asset["ticker"] == "AAPL"
    assert asset["category"] == "stocks"

    resp = await client.patch(f"/api/assets/{asset['id']}", json={"sector": "Technology"})
    assert resp.status_code == 200
    assert resp.json()["sector"] == "Technology"

    resp = await client.get("/api/assets")
    assert [a["id"] for a in resp.json()] == [asset["id"]]

    resp = await client.delete(f"/api/assets/{asset['id']}")
    assert resp.status_code == 200
    assert (await client.get(f"/api/assets/{asset['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_overview_after_trades(client):
    asset = await _create_asset(client)
    resp = await _trade(client, asset["id"], "BUY", "2024-01-02", 6, 50)
    assert resp.status_code == 200, resp.text
    assert resp.json()["type"] == "BUY"

    resp = await client.post("/api/prices", json={"asset_id": asset["id"], "date": "2024-02-01", "close_price": 55})
    assert resp.status_code == 200, resp.text

    resp = await client.get("/api/portfolio/overview")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_value"] == pytest.approx(330)
    assert body["total_invested"] == pytest.approx(300)
    assert body["total_pl_percent"] == pytest.approx(10)
    holding = body["holdings"][0]
    assert holding["asset"]["ticker"] == "AAPL"
    assert holding["has_price"] is True
    assert holding["unrealized_pl"] == pytest.approx(30)
    assert body["allocation_by_category"] == [
        {"category": "stocks", "value": pytest.approx(330), "percentage": pytest.approx(100)},
    ]

    resp = await client.get("/api/portfolio/overview", params={"as_of": "2024-01-31"})
    holding = resp.json()["holdings"][0]
    assert holding["has_price"] is False
    assert holding["market_value"] == 0


@pytest.mark.asyncio
async def test_oversell_is_rejected(client):
    asset = await _create_asset(client)
    await _trade(client, asset["id"], "BUY", "2024-01-02", 5, 10)

    resp = await _trade(client, asset["id"], "SELL", "2024-01-03", 6, 12)
    assert resp.status_code == 400
    assert "Insufficient position" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_closed_position_round_trip(client):
    asset = await _create_asset(client)
    await _trade(client, asset["id"], "BUY", "2024-01-10", 10, 100, fees=1)
    await _trade(client, asset["id"], "SELL", "2024-03-10", 10, 120, fees=2)

    resp = await client.get("/api/portfolio/closed-positions")
    assert resp.status_code == 200
    closed = resp.json()
    assert len(closed) == 1
    assert closed[0]["realized_pl"] == pytest.approx(197)
    assert closed[0]["holding_period_days"] == 60
    assert closed[0]["first_buy_date"] == "2024-01-10"

    resp = await client.get("/api/portfolio/overview")
    assert resp.json()["holdings"] == []

    resp = await client.delete(f"/api/portfolio/closed-positions/{closed[0]['cycle_id']}")
    assert resp.status_code == 200
    assert resp.json()["transactions"] == 2
    assert (await client.get("/api/transactions")).json() == []


@pytest.mark.asyncio
async def test_snapshot_endpoints(client):
    resp = await client.post("/api/portfolio/snapshots", json={"month": 1, "year": 2024})
    assert resp.status_code == 200, resp.text
    snapshot = resp.json()
    assert snapshot["total_value"] == 0

    resp = await client.patch(f"/api/portfolio/snapshots/{snapshot['id']}", json={"total_value": 123.0})
    assert resp.json()["total_value"] == 123.0

    resp = await client.get("/api/portfolio/snapshots")
    assert len(resp.json()) == 1

    resp = await client.delete(f"/api/portfolio/snapshots/{snapshot['id']}")
    assert resp.status_code == 200
    assert (await client.get("/api/portfolio/snapshots")).json() == []


@pytest.mark.asyncio
async def test_asset_snapshot_generation(client):
    asset = await _create_asset(client)
    await _trade(client, asset["id"], "BUY", "2024-01-02", 1, 10)

    resp = await client.post(f"/api/assets/{asset['id']}/snapshots/generate")
    assert resp.status_code == 200
    generated = resp.json()
    assert generated[0]["date"] == "2024-01-31"
    assert all(s["quantity"] == 1 for s in generated)

    resp = await client.get(f"/api/assets/{asset['id']}/snapshots")
    assert len(resp.json()) == len(generated)


@pytest.mark.asyncio
async def test_income_endpoints(client):
    asset = await _create_asset(client)
    resp = await client.post("/api/dividends", json={
        "asset_id": asset["id"], "payment_date": "2020-05-01", "amount": 4.2,
    })
    assert resp.status_code == 200, resp.text
    assert (await client.get("/api/dividends/summary")).json()["ytd"] == 0

    await client.post("/api/cash-movements", json={"date": "2024-01-01", "type": "deposit", "amount": 500})
    await client.post("/api/cash-movements", json={"date": "2024-02-01", "type": "withdraw", "amount": 200})
    resp = await client.get("/api/cash-movements/summary")
    assert resp.json() == {"total_deposits": 500, "total_withdrawals": 200, "balance": 300}

    resp = await client.get("/api/portfolio/summary")
    assert resp.status_code == 200
    assert resp.json()["net_deposited"] == 300


@pytest.mark.asyncio
@pytest.mark.parametrize("method, path", [
    ("get", "/api/assets/999"),
    ("delete", "/api/transactions/999"),
    ("delete", "/api/portfolio/snapshots/999"),
    ("delete", "/api/portfolio/closed-positions/1-1-2024-01-01"),
    ("post", "/api/assets/999/snapshots/generate"),
])
async def test_missing_rows_return_404(client, method, path):
    resp = await getattr(client, method)(path)
    assert resp.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"month": 13, "year": 2024},
    {"month": 0, "year": 2024},
    {"month": 5},
])
async def test_snapshot_validation(client, payload):
    resp = await client.post("/api/portfolio/snapshots", json=payload)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_negative_quantity_is_rejected(client):
    asset = await _create_asset(client)
    resp = await _trade(client, asset["id"], "BUY", "2024-01-02", -1, 10)
    assert resp.status_code == 422
