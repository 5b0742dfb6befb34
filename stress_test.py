import asyncio
import aiohttp
import time
import random

QUERIES = [
    "payment",
    "paymnt systems",
    "react",
    "python",
    "kubernetes",
    "microservices",
    "design system",
    "typescript",
    "scalable",
    "api gateway",
    "Hi",
    "medium",
    "data pipeline",
    "leadership",
    "mobile app"
]

async def send_request(session, i):
    query = random.choice(QUERIES)
    try:
        start = time.time()
        async with session.get(
            "http://127.0.0.1:8000/search",
            params={"q": query, "limit": 5},
            timeout=aiohttp.ClientTimeout(total=10.0)
        ) as response:
            duration = time.time() - start
            text = await response.text()
            if response.status != 200:
                print(f"Req {i}: Failed {response.status} - {text[:50]}")
            return response.status, duration
    except Exception as e:
        print(f"Req {i}: Error - {str(e)}")
        return 0, 0.0

async def main():
    print("Starting stress test...")
    async with aiohttp.ClientSession() as session:
        # Invalidate first so the burst below hits a cold cache and coalesces
        await session.post("http://127.0.0.1:8000/search/invalidate")

        tasks = [send_request(session, i) for i in range(50)]
        start = time.time()
        outcomes = await asyncio.gather(*tasks)
        elapsed = time.time() - start

        async with session.get("http://127.0.0.1:8000/search/stats") as response:
            stats = await response.json()

    statuses = [status for status, _ in outcomes]
    durations = sorted(d for status, d in outcomes if status == 200)
    print(f"Finished 50 requests in {elapsed:.2f}s")
    print(f"200: {statuses.count(200)} | 400: {statuses.count(400)} | other: {len(statuses) - statuses.count(200) - statuses.count(400)}")
    if durations:
        print(f"p50: {durations[len(durations) // 2] * 1000:.1f}ms | max: {durations[-1] * 1000:.1f}ms")
    print(f"Cache: {stats.get('cache')}")

if __name__ == "__main__":
    asyncio.run(main())
