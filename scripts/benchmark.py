"""HTTP latency benchmark for the cards API endpoints."""
import asyncio
import argparse
import time
import statistics
import httpx

DEFAULT_BASE_URL = "http://localhost:8000"


async def benchmark_endpoint(client: httpx.AsyncClient, name: str, method: str, path: str,
                             iterations: int = 50, json: dict | None = None):
    times = []
    query_counts = []
    errors = 0
    created_ids = []

    for _ in range(iterations):
        try:
            start = time.perf_counter()
            resp = await client.request(method, path, json=json)
            elapsed = (time.perf_counter() - start) * 1000

            if resp.is_success:
                times.append(elapsed)
                qc = resp.headers.get("X-Query-Count")
                if qc is not None:
                    query_counts.append(int(qc))
                if method == "POST":
                    created_ids.append(resp.json()["id"])
            else:
                errors += 1
        except httpx.HTTPError:
            errors += 1

    # Don't leave benchmark cards behind.
    for card_id in created_ids:
        await client.delete(f"/api/v1/cards/{card_id}")

    if not times:
        return {"name": name, "error": f"All {iterations} requests failed"}

    ordered = sorted(times)
    return {
        "name": name,
        "avg_ms": round(statistics.mean(times), 2),
        "p50_ms": round(ordered[len(ordered) // 2], 2),
        "p95_ms": round(ordered[int(len(ordered) * 0.95)], 2),
        "p99_ms": round(ordered[int(len(ordered) * 0.99)], 2),
        "queries": round(statistics.mean(query_counts), 1) if query_counts else "N/A",
        "errors": errors,
    }


async def run_benchmark(base_url: str, iterations: int = 50):
    print("=" * 80)
    print(f"Cards API Benchmark — {iterations} iterations per endpoint")
    print(f"Target: {base_url}")
    print("=" * 80)

    async with httpx.AsyncClient(base_url=base_url) as client:
        try:
            resp = await client.get("/health")
            resp.raise_for_status()
            print(f"Health: {resp.json()}")
        except httpx.HTTPError as e:
            print(f"ERROR: Cannot reach {base_url} — {e}")
            return

        # One fixture card for the read/update endpoints.
        resp = await client.post("/api/v1/cards", json={"title": "Benchmark", "description": "Fixture card"})
        resp.raise_for_status()
        card_id = resp.json()["id"]

        endpoints = [
            ("POST /api/v1/cards", "POST", "/api/v1/cards", {"title": "Bench", "description": "Created"}),
            ("GET /api/v1/cards", "GET", "/api/v1/cards", None),
            ("GET /api/v1/cards/{id}", "GET", f"/api/v1/cards/{card_id}", None),
            ("PATCH /api/v1/cards/{id}", "PATCH", f"/api/v1/cards/{card_id}", {"title": "Bench renamed"}),
            ("GET /health", "GET", "/health", None),
        ]

        print()
        print(f"{'Endpoint':<45} {'Avg':>8} {'P50':>8} {'P95':>8} {'P99':>8} {'Queries':>8} {'Err':>4}")
        print("-" * 80)

        for name, method, path, body in endpoints:
            result = await benchmark_endpoint(client, name, method, path, iterations, json=body)
            if "error" in result:
                print(f"{result['name']:<45} {'ERROR':>8}")
            else:
                print(
                    f"{result['name']:<45} "
                    f"{result['avg_ms']:>7.1f}ms "
                    f"{result['p50_ms']:>7.1f}ms "
                    f"{result['p95_ms']:>7.1f}ms "
                    f"{result['p99_ms']:>7.1f}ms "
                    f"{str(result['queries']):>8} "
                    f"{result['errors']:>4}"
                )

        await client.delete(f"/api/v1/cards/{card_id}")
        print("-" * 80)
        print("\nBenchmark complete.")


def main():
    parser = argparse.ArgumentParser(description="Benchmark the cards API")
    parser.add_argument("-n", "--iterations", type=int, default=50, help="Iterations per endpoint")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="API base URL")
    args = parser.parse_args()
    asyncio.run(run_benchmark(args.base_url, args.iterations))


if __name__ == "__main__":
    main()
