#!/usr/bin/env python3
"""Verify the configured geocoding service answers and resolves an address."""

import asyncio
import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from contractor_kit.config import settings
from contractor_kit.services.geocoding.client import GeocodeClient, check_health


async def _resolve(address: str):
    async with GeocodeClient() as client:
        return await client.resolve(address)


def main() -> int:
    print("=" * 60)
    print("Geocoder Connection Test")
    print("=" * 60)
    print()

    print("1. Configuration")
    print(f"   [OK] Base URL: {settings.geocoder_base_url}")
    print(f"   [OK] User-Agent: {settings.geocoder_user_agent}")
    print()

    print("2. Health check")
    if not check_health():
        print("   [ERROR] Geocoder is not responding")
        return 1
    print("   [OK] Geocoder is healthy")
    print()

    address = sys.argv[1] if len(sys.argv) > 1 else "1600 Pennsylvania Avenue NW, Washington, DC"
    print(f"3. Resolving '{address}'")
    coordinate = asyncio.run(_resolve(address))
    if coordinate is None:
        print("   [ERROR] Address could not be resolved")
        return 1
    print(f"   [OK] {coordinate.latitude:.6f}, {coordinate.longitude:.6f}")
    print()

    print("=" * 60)
    print("[SUCCESS] Geocoder is connected and working!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
