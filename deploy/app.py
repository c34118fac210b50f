import logging
import time
from typing import List

from fastapi import FastAPI
import uvicorn
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from audience_adapter.adapter.adapter import AudienceNetworkAdapter
from audience_adapter.adapter.config import AdapterConfig
from audience_adapter.adapter.schema import BidderRequest, BidResponse

logger = logging.getLogger(__name__)

# --- Metrics ---
REQUEST_COUNT = Counter('an_adapter_requests_total', 'Total auction rounds received')
LATENCY = Histogram('an_adapter_latency_seconds', 'Auction round latency in seconds', buckets=[0.005, 0.010, 0.025, 0.050, 0.100, 0.250, 0.500, 1.0])
BID_CPM = Histogram('an_adapter_bid_cpm', 'Cpm of GOOD bids', buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0])
BID_COUNT = Counter('an_adapter_bids_total', 'Bid responses emitted', ['status'])
ERROR_COUNT = Counter('an_adapter_errors_total', 'Errors reported by the adapter')


def count_error(message: str) -> None:
    ERROR_COUNT.inc()
    logger.error(message)


# Initialize App & Adapter
app = FastAPI(title="Audience Network Adapter", version="1.0.0")
adapter = AudienceNetworkAdapter(conf=AdapterConfig.from_env(), log_error=count_error)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting adapter for bidder {adapter.get_bidder_code()}...")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down...")
    await adapter.transport.close()


@app.get("/metrics")
async def metrics():
    """Expose Prometheus metrics."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "audience-network-adapter", "bidder": adapter.get_bidder_code()}


@app.post("/bids", response_model=List[BidResponse])
async def call_bids(request: BidderRequest):
    """
    Run one auction round and return the bid responses in descriptor order.
    """
    start_time = time.perf_counter()
    REQUEST_COUNT.inc()

    collected: List[BidResponse] = []

    def add_bid_response(placement_code: str, bid_response: BidResponse) -> None:
        BID_COUNT.labels(status=bid_response.statusCode.name).inc()
        if bid_response.cpm > 0:
            BID_CPM.observe(bid_response.cpm)
        collected.append(bid_response)

    await adapter.call_bids(request, add_bid_response)
    LATENCY.observe(time.perf_counter() - start_time)
    return collected


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
