"""End-to-end tests through the FastAPI app with an isolated in-memory store."""

import pytest
from fastapi.testclient import TestClient

from mydeal.db.seed import seed_demo_data
from mydeal.db.store import get_store
from mydeal.main import app
from mydeal.schemas.ai import SpecificationResult
from mydeal.services import ai_service


@pytest.fixture
def client(store):
    seed_demo_data(store)
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _login(client, **payload) -> dict:
    resp = client.post("/v1/users/login", json=payload)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    return {"Authorization": f"Bearer {body['access_token']}", "user": body["user"]}


def _auth(session: dict) -> dict:
    return {"Authorization": session["Authorization"]}


class TestBrowsing:
    def test_anonymous_sees_open_requests_in_city_newest_first(self, client) -> None:
        resp = client.get("/v1/requests/", params={"city": "Pune"})
        assert resp.status_code == 200
        ids = [r["id"] for r in resp.json()["requests"]]
        assert ids == ["req-5", "req-2", "req-6"]

    def test_default_city(self, client) -> None:
        body = client.get("/v1/requests/").json()
        assert body["city"] == "Satara"
        assert [r["id"] for r in body["requests"]] == ["req-1", "req-4"]

    def test_category_filter(self, client) -> None:
        body = client.get("/v1/requests/", params={"city": "Satara", "category": "Refrigerator"}).json()
        assert [r["id"] for r in body["requests"]] == ["req-1"]

    def test_detail_has_ranked_bids(self, client) -> None:
        body = client.get("/v1/requests/req-1").json()
        assert [b["id"] for b in body["ranked_bids"]] == ["bid-2", "bid-1"]
        assert body["lowest_bid"] == 38900

    def test_unknown_request(self, client) -> None:
        assert client.get("/v1/requests/nope").status_code == 404

    def test_invalid_token(self, client) -> None:
        resp = client.get("/v1/requests/", headers={"Authorization": "Bearer bogus"})
        assert resp.status_code == 401

    def test_categories_and_vendors(self, client) -> None:
        assert client.get("/v1/requests/categories").json()[0] == "All"
        assert "Kolhapur" in client.get("/v1/users/vendors").json()["vendors"]


class TestDealFlow:
    def test_post_bid_accept_and_notify(self, client) -> None:
        buyer = _login(client, role="BUYER", name="Ravi", email="ravi@example.com", is_signup=True)
        orange = _login(client, role="SELLER", city="Kolhapur")
        nove = _login(client, role="SELLER", name="N", city="Kolhapur", vendor_name="NOVE APPLIANCES", is_signup=True)

        resp = client.post("/v1/requests/", headers=_auth(buyer), json={
            "title": "Voltas 1.5 Ton Split AC",
            "category": "AC",
            "estimated_market_price": {"min": 35000, "max": 40000},
            "city": "Kolhapur",
        })
        assert resp.status_code == 201, resp.text
        request_id = resp.json()["id"]

        resp = client.post(f"/v1/requests/{request_id}/bids", headers=_auth(orange),
                           json={"amount": 36000, "delivery_days": 2, "notes": "free install"})
        assert resp.status_code == 201, resp.text
        assert resp.json()["notified_competitors"] == 0

        resp = client.post(f"/v1/requests/{request_id}/bids", headers=_auth(nove),
                           json={"amount": 35500, "delivery_days": 3})
        assert resp.json()["notified_competitors"] == 1
        nove_bid_id = resp.json()["bid"]["id"]

        resp = client.post(f"/v1/requests/{request_id}/bids", headers=_auth(nove),
                           json={"amount": 35000, "delivery_days": 3})
        assert resp.status_code == 409

        orange_notes = client.get("/v1/notifications/", headers=_auth(orange)).json()
        assert orange_notes["unread"] == 1
        assert "35,500" in orange_notes["notifications"][0]["message"]

        resp = client.post(f"/v1/requests/{request_id}/bids/{nove_bid_id}/select", headers=_auth(buyer))
        assert resp.status_code == 200
        assert client.get(f"/v1/requests/{request_id}", headers=_auth(buyer)).json()["request"]["status"] == "OPEN"

        resp = client.post(f"/v1/requests/{request_id}/payment", headers=_auth(buyer), json={"method": "COD"})
        assert resp.status_code == 200, resp.text
        deal = resp.json()
        assert deal["request"]["status"] == "CLOSED"
        assert deal["request"]["winning_bid_id"] == nove_bid_id
        assert deal["request"]["payment_method"] == "COD"

        resp = client.post(f"/v1/requests/{request_id}/payment", headers=_auth(buyer), json={"method": "ONLINE"})
        assert resp.status_code == 409

        nove_notes = client.get("/v1/notifications/", headers=_auth(nove)).json()["notifications"]
        assert [n["type"] for n in nove_notes] == ["success"]
        orange_types = [n["type"] for n in client.get("/v1/notifications/", headers=_auth(orange)).json()["notifications"]]
        assert "success" not in orange_types

        dashboard = client.get("/v1/dashboard/", headers=_auth(nove)).json()
        assert dashboard["total_revenue"] == 35500

        buyer_view = client.get("/v1/requests/", headers=_auth(buyer)).json()
        assert [r["id"] for r in buyer_view["requests"]] == [request_id]

    def test_seller_cannot_post_and_buyer_cannot_bid(self, client) -> None:
        buyer = _login(client, role="BUYER")
        seller = _login(client, role="SELLER", city="Satara")
        resp = client.post("/v1/requests/", headers=_auth(seller), json={
            "title": "x", "category": "TV", "estimated_market_price": {"min": 1, "max": 2}, "city": "Satara",
        })
        assert resp.status_code == 403
        resp = client.post("/v1/requests/req-1/bids", headers=_auth(buyer), json={"amount": 1, "delivery_days": 1})
        assert resp.status_code == 403

    def test_non_positive_bid_rejected(self, client, store) -> None:
        seller = _login(client, role="SELLER", city="Satara", name="E", vendor_name="E STORE", is_signup=True)
        resp = client.post("/v1/requests/req-4/bids", headers=_auth(seller), json={"amount": 0, "delivery_days": 2})
        assert resp.status_code == 422
        assert store.get_request("req-4").bids == ()

    @pytest.mark.parametrize("amount", [True, "42000", 42000.0])
    def test_bid_values_are_not_coerced(self, client, store, amount) -> None:
        seller = _login(client, role="SELLER", city="Satara", name="E", vendor_name="E STORE", is_signup=True)
        resp = client.post("/v1/requests/req-4/bids", headers=_auth(seller), json={"amount": amount, "delivery_days": 2})
        assert resp.status_code == 422
        resp = client.post("/v1/requests/req-4/bids", headers=_auth(seller), json={"amount": 42000, "delivery_days": True})
        assert resp.status_code == 422
        assert store.get_request("req-4").bids == ()

    def test_seller_cannot_bid_outside_own_city(self, client, store) -> None:
        seller = _login(client, role="SELLER", city="Pune")
        resp = client.post("/v1/requests/req-4/bids", headers=_auth(seller), json={"amount": 42000, "delivery_days": 2})
        assert resp.status_code == 403
        assert store.get_request("req-4").bids == ()

    def test_anonymous_cannot_bid(self, client) -> None:
        resp = client.post("/v1/requests/req-1/bids", json={"amount": 1, "delivery_days": 1})
        assert resp.status_code == 401

    def test_cancel_payment(self, client, store) -> None:
        buyer = _login(client, role="BUYER")
        seller = _login(client, role="SELLER", city="Satara")
        resp = client.post("/v1/requests/", headers=_auth(buyer), json={
            "title": "Sony TV", "category": "TV", "estimated_market_price": {"min": 1000, "max": 2000},
            "city": "Satara",
        })
        request_id = resp.json()["id"]
        bid_id = client.post(f"/v1/requests/{request_id}/bids", headers=_auth(seller),
                             json={"amount": 1500, "delivery_days": 1}).json()["bid"]["id"]
        client.post(f"/v1/requests/{request_id}/bids/{bid_id}/select", headers=_auth(buyer))

        assert client.delete(f"/v1/requests/{request_id}/payment", headers=_auth(buyer)).status_code == 200
        resp = client.post(f"/v1/requests/{request_id}/payment", headers=_auth(buyer), json={"method": "COD"})
        assert resp.status_code == 409
        assert store.get_request(request_id).status.value == "OPEN"


class TestDetailVisibility:
    def _closed_deal(self, client):
        buyer = _login(client, role="BUYER", name="Ravi", email="ravi@example.com", is_signup=True)
        seller = _login(client, role="SELLER", city="Satara")
        request_id = client.post("/v1/requests/", headers=_auth(buyer), json={
            "title": "Sony Bravia 55", "category": "TV", "estimated_market_price": {"min": 50000, "max": 60000},
            "city": "Satara",
        }).json()["id"]
        bid_id = client.post(f"/v1/requests/{request_id}/bids", headers=_auth(seller),
                             json={"amount": 52000, "delivery_days": 2}).json()["bid"]["id"]
        client.post(f"/v1/requests/{request_id}/bids/{bid_id}/select", headers=_auth(buyer))
        resp = client.post(f"/v1/requests/{request_id}/payment", headers=_auth(buyer), json={"method": "COD"})
        assert resp.status_code == 200
        return request_id, buyer, seller

    def test_anonymous_cannot_open_closed_deal(self, client) -> None:
        request_id, _, _ = self._closed_deal(client)
        assert client.get(f"/v1/requests/{request_id}").status_code == 404
        assert client.get(f"/v1/requests/{request_id}", params={"city": "Satara"}).status_code == 404

    def test_owner_and_winner_still_see_closed_deal(self, client) -> None:
        request_id, buyer, seller = self._closed_deal(client)
        for session in (buyer, seller):
            resp = client.get(f"/v1/requests/{request_id}", headers=_auth(session))
            assert resp.status_code == 200
            assert resp.json()["request"]["payment_method"] == "COD"

    def test_other_buyer_cannot_open_requirement(self, client) -> None:
        other = _login(client, role="BUYER")
        assert client.get("/v1/requests/req-1", headers=_auth(other)).status_code == 404

    def test_anonymous_detail_follows_selected_city(self, client) -> None:
        assert client.get("/v1/requests/req-2").status_code == 404
        assert client.get("/v1/requests/req-2", params={"city": "Pune"}).status_code == 200

    def test_bid_suggestion_hidden_outside_seller_city(self, client, monkeypatch) -> None:
        async def advisor(title, market_price, current_bids):
            return ai_service.BidSuggestion(suggested_price=1, reasoning="", win_probability="Low")

        monkeypatch.setattr("mydeal.api.v1.endpoints.ai.get_bid_suggestion", advisor)
        seller = _login(client, role="SELLER", city="Pune")
        assert client.post("/v1/ai/bid-suggestion/req-1", headers=_auth(seller)).status_code == 404


class TestNotificationsApi:
    def test_mark_read_and_clear(self, client) -> None:
        rajdhani = _login(client, role="SELLER", city="Satara")
        shisa = _login(client, role="SELLER", city="Satara", name="S", vendor_name="Shisa Appliances", is_signup=True)
        estore = _login(client, role="SELLER", city="Satara", name="E", vendor_name="E STORE", is_signup=True)

        client.post("/v1/requests/req-1/bids", headers=_auth(estore), json={"amount": 38000, "delivery_days": 1})

        notes = client.get("/v1/notifications/", headers=_auth(rajdhani)).json()["notifications"]
        assert len(notes) == 1
        note_id = notes[0]["id"]

        assert client.post(f"/v1/notifications/{note_id}/read", headers=_auth(shisa)).status_code == 404
        resp = client.post(f"/v1/notifications/{note_id}/read", headers=_auth(rajdhani))
        assert resp.json()["read"] is True

        resp = client.delete("/v1/notifications/", headers=_auth(rajdhani))
        assert resp.json()["removed"] == 1
        assert client.get("/v1/notifications/", headers=_auth(rajdhani)).json()["notifications"] == []
        assert len(client.get("/v1/notifications/", headers=_auth(shisa)).json()["notifications"]) == 1


class TestAiEndpoints:
    def test_analyze_no_result_is_502_and_store_untouched(self, client, store, monkeypatch) -> None:
        async def no_result(text, category=None):
            return None

        monkeypatch.setattr("mydeal.api.v1.endpoints.ai.analyze_requirement", no_result)
        before = len(store.requests)
        resp = client.post("/v1/ai/analyze", json={"text": "a fridge"})
        assert resp.status_code == 502
        assert len(store.requests) == before

    def test_analyze_returns_structured_result(self, client, monkeypatch) -> None:
        async def resolved(text, category=None):
            return SpecificationResult(
                title="Samsung 260L", category="Fridge", specs={"brand": "Samsung"},
                estimated_market_price={"min": 25000, "max": 30000}, suggested_max_budget=28000,
            )

        monkeypatch.setattr("mydeal.api.v1.endpoints.ai.analyze_requirement", resolved)
        resp = client.post("/v1/ai/analyze", json={"text": "double door fridge", "category": "Fridge"})
        assert resp.status_code == 200
        assert resp.json()["estimated_market_price"] == {"min": 25000, "max": 30000}

    def test_bid_suggestion_passes_current_bids(self, client, monkeypatch) -> None:
        seen = {}

        async def advisor(title, market_price, current_bids):
            seen["bids"] = current_bids
            return ai_service.BidSuggestion(suggested_price=38500, reasoning="undercut", win_probability="High")

        monkeypatch.setattr("mydeal.api.v1.endpoints.ai.get_bid_suggestion", advisor)
        seller = _login(client, role="SELLER", city="Satara")
        resp = client.post("/v1/ai/bid-suggestion/req-1", headers=_auth(seller))
        assert resp.status_code == 200
        assert sorted(seen["bids"]) == [38900, 39500]
