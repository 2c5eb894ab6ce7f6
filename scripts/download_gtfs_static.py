#!/usr/bin/env python3
"""
Download and extract a GTFS static dataset into the configured data directory.
"""

import asyncio
import sys
from pathlib import Path

from transitmap.config import get_settings
from transitmap.gtfs.download import download_gtfs_static


async def main() -> int:
    settings = get_settings()
    url = sys.argv[1] if len(sys.argv) > 1 else settings.gtfs_static_url
    if not url:
        print("usage: download_gtfs_static.py URL  (or set GTFS_STATIC_URL)")
        return 2
    
    output_dir = await download_gtfs_static(url, Path(settings.gtfs_data_dir))
    
    for table in ("shapes.txt", "trips.txt"):
        path = output_dir / table
        if path.exists():
            with open(path, "r", encoding="utf-8-sig") as f:
                rows = sum(1 for _ in f) - 1
            print(f"{table} contains {rows} rows")
        else:
            print(f"{table} is missing from the archive")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
