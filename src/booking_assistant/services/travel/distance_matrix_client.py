"""HTTP client for the driving-time (distance matrix) provider."""

from __future__ import annotations

import logging
import math
import time
from typing import Sequence

import httpx

from ...config import settings

logger = logging.getLogger(__name__)


class TravelTimeProviderError(RuntimeError):
    """A provider call failed for the whole batch."""


class DistanceMatrixClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        language: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise ValueError("Travel time provider API key is not configured.")
        self.base_url = base_url or settings.travel_provider_url
        self.timeout = timeout if timeout is not None else settings.travel_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.travel_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.travel_backoff_seconds
        self.language = language or settings.travel_language
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            transport=self._transport,
        )

    def _request(self, params: dict) -> dict:
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(self.base_url, params=params)
                    response.raise_for_status()
                    return response.json()
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise TravelTimeProviderError(f"Travel time provider unreachable: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Travel provider network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
                except (httpx.HTTPError, ValueError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise TravelTimeProviderError(f"Travel time provider request failed: {e}") from e
                    time.sleep(self.backoff_seconds * attempt)
        finally:
            client.close()

    def durations(self, origins: Sequence[str], destination: str) -> list[int | None]:
        """Driving minutes from each origin to the destination, rounded up.

        Elements the provider could not route are returned as None.
        """
        if not origins:
            return []
        params = {
            "origins": "|".join(origins),
            "destinations": destination,
            "mode": "driving",
            "language": self.language,
            "key": self.api_key,
        }
        data = self._request(params)
        status = data.get("status")
        if status != "OK":
            raise TravelTimeProviderError(f"Travel time provider returned status {status!r}: {data.get('error_message', '')}")

        rows = data.get("rows") or []
        minutes: list[int | None] = []
        for index in range(len(origins)):
            try:
                element = rows[index]["elements"][0]
            except (IndexError, KeyError, TypeError):
                minutes.append(None)
                continue
            if element.get("status") != "OK":
                minutes.append(None)
                continue
            minutes.append(math.ceil(element["duration"]["value"] / 60))
        return minutes


def check_health(client: DistanceMatrixClient | None = None) -> bool:
    """Probe the provider with a trivial lookup."""
    try:
        client = client or DistanceMatrixClient(max_retries=0)
        result = client.durations(["Stockholm"], "Uppsala")
        return bool(result) and result[0] is not None
    except (ValueError, TravelTimeProviderError):
        return False
