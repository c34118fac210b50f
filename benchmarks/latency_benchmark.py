import json
import time
import statistics
import random
import httpx
import psutil

from audience_adapter.adapter.adapter import AudienceNetworkAdapter
from audience_adapter.adapter.schema import BidderRequest, BidRequestDescriptor
from audience_adapter.transport.http import HttpTransport

SIZE_CHOICES = [[300, 250], [320, 50], "300x250", "320x50", "fullwidth", "native", "728x90", None]


def generate_random_request(i, n_slots=5):
    bids = [
        BidRequestDescriptor(
            bidder="audienceNetwork",
            placementCode=f"/bench/{i}/{j}",
            params={"placementId": f"{random.randint(1, 500)}_{j}"},
            sizes=random.sample(SIZE_CHOICES, k=3),
        )
        for j in range(n_slots)
    ]
    return BidderRequest(bidderCode="audienceNetwork", bids=bids)


def canned_response(request):
    bids = {}
    for bid in request.bids:
        pid = bid.params["placementId"]
        if random.random() < 0.7:
            bids[pid] = [{
                "placement_id": pid,
                "bid_id": f"bid_{pid}",
                "bid_price_cents": random.randint(1, 1000),
                "bid_price_currency": "usd",
                "bid_price_model": "cpm",
            }]
    return json.dumps({"errors": [], "bids": bids})


def benchmark(n=10000):
    print("Initializing adapter...")
    # Only the transport-free pipeline is timed; the offline client is never called
    offline = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(204)))
    adapter = AudienceNetworkAdapter(transport=HttpTransport(client=offline), log_error=lambda message: None)
    sink = lambda placement_code, bid_response: None

    print(f"Generating {n} batches...")
    batches = [(req, canned_response(req)) for req in (generate_random_request(i) for i in range(n))]

    print("Warming up...")
    for req, body in batches[:100]:
        slots, _ = adapter.prepare(req)
        adapter.interpret_response(slots, body, sink)

    print("Running benchmark...")
    latencies = []
    start_mem = psutil.Process().memory_info().rss / 1024 / 1024

    for req, body in batches:
        t0 = time.perf_counter_ns()
        slots, _ = adapter.prepare(req)
        adapter.interpret_response(slots, body, sink)
        t1 = time.perf_counter_ns()
        latencies.append((t1 - t0) / 1_000_000.0) # ms

    end_mem = psutil.Process().memory_info().rss / 1024 / 1024

    avg = statistics.mean(latencies)
    p50 = statistics.median(latencies)
    p95 = sorted(latencies)[int(n * 0.95)]
    p99 = sorted(latencies)[int(n * 0.99)]

    print("\n" + "="*30)
    print(" BENCHMARK RESULTS")
    print("="*30)
    print(f"Batches processed:  {n}")
    print(f"Average Latency:    {avg:.4f} ms")
    print(f"P50 Latency:        {p50:.4f} ms")
    print(f"P95 Latency:        {p95:.4f} ms")
    print(f"P99 Latency:        {p99:.4f} ms")
    print("-" * 30)
    print(f"Memory Usage:       {end_mem:.2f} MB")
    print(f"Memory Growth:      {end_mem - start_mem:.2f} MB")
    print("="*30)

    if avg > 1.0:
        print("FAILED: Average latency > 1ms")
        exit(1)
    else:
        print("PASSED: Latency is within SLA")


if __name__ == "__main__":
    benchmark(10000)
