import httpx
import pytest
from fastapi.testclient import TestClient

import deploy.app as app_module
from audience_adapter.adapter.adapter import AudienceNetworkAdapter
from audience_adapter.transport.http import HttpTransport

placement_id = "test-placement-id"


@pytest.fixture
def client(monkeypatch):
    def network(request):
        return httpx.Response(200, json={"errors": [], "bids": {placement_id: [{
            "placement_id": placement_id,
            "bid_id": "test-bid-id",
            "bid_price_cents": 250,
            "bid_price_currency": "usd",
            "bid_price_model": "cpm",
        }]}})

    transport = HttpTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(network)))
    adapter = AudienceNetworkAdapter(transport=transport, log_error=app_module.count_error)
    monkeypatch.setattr(app_module, "adapter", adapter)
    return TestClient(app_module.app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["bidder"] == "audienceNetwork"


def test_bids_endpoint(client):
    payload = {
        "bidderCode": "audienceNetwork",
        "bids": [
            {"bidder": "audienceNetwork", "placementCode": "slot-a", "params": {"placementId": placement_id}, "sizes": [[300, 250]]},
            {"bidder": "audienceNetwork", "placementCode": "slot-b", "params": {"placementId": "unknown"}, "sizes": ["native"]},
            {"bidder": "audienceNetwork", "placementCode": "slot-c", "sizes": ["native"]},
        ],
    }
    response = client.post("/bids", json=payload)
    assert response.status_code == 200
    bids = response.json()
    assert [b["placementCode"] for b in bids] == ["slot-a", "slot-b"]
    assert bids[0]["statusCode"] == 1
    assert bids[0]["cpm"] == 2.5
    assert (bids[0]["width"], bids[0]["height"]) == (300, 250)
    assert bids[1]["statusCode"] == 2


def test_metrics_exposed(client):
    client.post("/bids", json={"bidderCode": "audienceNetwork", "bids": []})
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "an_adapter_requests_total" in response.text
