#!/usr/bin/env python3
"""Manual check that the travel time provider answers and batches correctly."""

import sys
import time
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from booking_assistant.config import settings
from booking_assistant.data.ingestion import parse_address
from booking_assistant.services.travel.distance_matrix_client import DistanceMatrixClient, check_health
from booking_assistant.services.travel.oracle import TravelTimeOracle

SAMPLE_ORIGINS = [
    "Drottninggatan 1, Stockholm",
    "Kungsgatan 10, Uppsala",
    "Storgatan 5, Västerås",
    "Stora Torget 1, Enköping",
]
SAMPLE_DESTINATION = "Sergels torg, Stockholm"


def main() -> int:
    print("=" * 60)
    print("Travel Time Provider Check")
    print("=" * 60)

    if not settings.google_maps_api_key:
        print("[ERROR] BOOKING_GOOGLE_MAPS_API_KEY is not configured")
        return 1
    print(f"[OK] Provider URL: {settings.travel_provider_url}")
    print(f"[OK] Batch size: {settings.travel_batch_size}")

    print("1. Health probe...")
    if not check_health():
        print("   [ERROR] Provider did not return a usable duration")
        return 1
    print("   [OK] Provider responded")

    print("2. Resolving sample origins through the oracle...")
    oracle = TravelTimeOracle(DistanceMatrixClient(), batch_size=2)
    origins = [parse_address(text) for text in SAMPLE_ORIGINS]
    destination = parse_address(SAMPLE_DESTINATION)
    started = time.time()
    minutes = oracle.resolve(origins, destination)
    elapsed = time.time() - started
    for origin in origins:
        print(f"   {origin.text:<35} {minutes[origin.key]:>4} min")
    print(f"   [OK] {oracle.provider_calls} provider calls in {elapsed:.2f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
