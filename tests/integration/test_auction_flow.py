# tests/integration/test_auction_flow.py
"""End-to-end submit → close → results → reset against PostgreSQL + Redis."""

import asyncio

import pytest

pytestmark = [pytest.mark.integration, pytest.mark.asyncio(loop_scope="session")]


async def _bid(client, auction_id, item_id, bidder, qty, price):
    return await client.post(f"/api/v1/auctions/{auction_id}/bids", json={
        "item_id": item_id,
        "bidder_name": bidder,
        "quantity": qty,
        "price_per_unit_cents": price,
    })


class TestSubmission:
    async def test_below_minimum_rejected(self, client, auction):
        a, item = auction["auction"], auction["item"]
        resp = await _bid(client, a["id"], item["id"], "low", 1, 9_999)
        assert resp.status_code == 422
        assert resp.json()["code"] == 4001

        resp = await client.get(f"/api/v1/auctions/{a['id']}/bids?bidder_name=low")
        assert resp.json()["data"]["items"] == []

    async def test_resubmission_overwrites(self, client, auction):
        a, item = auction["auction"], auction["item"]
        await _bid(client, a["id"], item["id"], "carol", 2, 11_000)
        await _bid(client, a["id"], item["id"], "carol", 3, 12_000)

        resp = await client.get(f"/api/v1/auctions/{a['id']}/bids?bidder_name=carol")
        bids = resp.json()["data"]["items"]
        assert len(bids) == 1
        assert bids[0]["quantity_requested"] == 3
        assert bids[0]["price_per_unit_cents"] == 12_000

    async def test_concurrent_resubmissions_leave_one_bid(self, client, auction):
        a, item = auction["auction"], auction["item"]
        await asyncio.gather(*[
            _bid(client, a["id"], item["id"], "racer", 1, 10_000 + i) for i in range(5)
        ])
        resp = await client.get(f"/api/v1/auctions/{a['id']}/bids?bidder_name=racer")
        assert len(resp.json()["data"]["items"]) == 1

    async def test_zero_quantity_withdraws(self, client, auction):
        a, item = auction["auction"], auction["item"]
        await _bid(client, a["id"], item["id"], "dave", 1, 10_000)
        resp = await _bid(client, a["id"], item["id"], "dave", 0, 0)
        assert resp.json()["data"]["bid_id"] is None

        resp = await client.get(f"/api/v1/auctions/{a['id']}/bids?bidder_name=dave")
        assert resp.json()["data"]["items"] == []

    async def test_quantity_above_inventory(self, client, auction):
        a, item = auction["auction"], auction["item"]
        resp = await _bid(client, a["id"], item["id"], "eve", 11, 10_000)
        assert resp.json()["code"] == 4002


class TestCloseResultsReset:
    async def test_partial_fill_flow(self, client, auction):
        a, item = auction["auction"], auction["item"]
        await _bid(client, a["id"], item["id"], "A", 6, 15_000)
        await _bid(client, a["id"], item["id"], "B", 6, 14_000)

        resp = await client.post(f"/api/v1/auctions/{a['id']}/close")
        assert resp.status_code == 200
        closing = resp.json()["data"]
        mango = closing["items"][0]
        assert mango["clearing_price_cents"] == 14_000
        assert mango["average_price_cents"] == 14_600
        won = {w["bidder_name"]: w["quantity_won"] for w in mango["winners"]}
        assert won == {"A": 6, "B": 4}

        # Bids after close are rejected
        resp = await _bid(client, a["id"], item["id"], "late", 1, 99_000)
        assert resp.json()["code"] == 3002

        resp = await client.get(f"/api/v1/auctions/{a['id']}/results")
        results = resp.json()["data"]
        bidder_a = next(b for b in results["bidders"] if b["bidder_name"] == "A")
        assert bidder_a["total_refund_cents"] == 6_000

        # Recalculation reproduces the same result set
        first = (await client.post(f"/api/v1/auctions/{a['id']}/recalculate")).json()["data"]
        second = (await client.post(f"/api/v1/auctions/{a['id']}/recalculate")).json()["data"]
        assert first["items"] == second["items"]

    async def test_close_twice_rejected(self, client, auction):
        a = auction["auction"]
        assert (await client.post(f"/api/v1/auctions/{a['id']}/close")).status_code == 200
        resp = await client.post(f"/api/v1/auctions/{a['id']}/close")
        assert resp.json()["code"] == 3003

    async def test_paused_close_rejected(self, client, auction):
        a = auction["auction"]
        await client.post(f"/api/v1/auctions/{a['id']}/pause")
        resp = await client.post(f"/api/v1/auctions/{a['id']}/close")
        assert resp.json()["code"] == 3003

    async def test_reset_clears_everything(self, client, auction):
        a, item = auction["auction"], auction["item"]
        await _bid(client, a["id"], item["id"], "A", 2, 12_000)
        await client.post(f"/api/v1/auctions/{a['id']}/close")

        resp = await client.post(f"/api/v1/auctions/{a['id']}/reset", json={"confirm": True})
        data = resp.json()["data"]
        assert data["status"] == "draft"
        assert data["slug"] != a["slug"]
        assert data["deleted_bids"] == 1

        await client.post(f"/api/v1/auctions/{a['id']}/start")
        resp = await client.post(f"/api/v1/auctions/{a['id']}/close")
        assert resp.json()["data"]["total_units_sold"] == 0
        assert resp.json()["data"]["items"][0]["winners"] == []
