#!/usr/bin/env python3
"""Check a running transit snapshot service end to end."""

import asyncio
import sys
from datetime import datetime

import httpx


async def smoke_check(base_url: str) -> int:
    print("Transit Snapshot Smoke Check")
    print("=" * 50)
    failures = 0
    
    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        print("\n1. API root...")
        try:
            response = await client.get("/api")
            response.raise_for_status()
            print(f"   OK: {response.json()['message']}")
        except httpx.HTTPError as e:
            print(f"   FAILED: {e}")
            return 1
        
        print("\n2. Route geometry...")
        response = await client.get("/api/shapes_merged")
        if response.status_code == 200:
            features = response.json()["features"]
            lines = sum(len(f["geometry"]["coordinates"]) for f in features)
            print(f"   OK: {len(features)} route/directions, {lines} lines")
        elif response.status_code == 503:
            print(f"   NOT READY: {response.json()['detail']}")
            failures += 1
        else:
            print(f"   FAILED: HTTP {response.status_code}")
            failures += 1
        
        print("\n3. Vehicle snapshot...")
        response = await client.get("/api/vehicles")
        if response.status_code == 200:
            data = response.json()
            print(f"   Vehicles: {len(data['vehicles'])}")
            for url, error in data["errors"].items():
                print(f"   Feed error {url}: {error['kind']} {error['detail']}")
            if data["all_failed"]:
                print("   WARNING: every feed failed")
                failures += 1
        else:
            print(f"   FAILED: HTTP {response.status_code}")
            failures += 1
    
    print("\n" + "=" * 50)
    print(f"Done at {datetime.now().isoformat()} with {failures} problem(s)")
    return 1 if failures else 0


if __name__ == "__main__":
    base = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"
    sys.exit(asyncio.run(smoke_check(base)))
