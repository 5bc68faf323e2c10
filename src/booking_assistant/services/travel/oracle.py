"""Request-scoped travel time resolution with batching and fallbacks."""

from __future__ import annotations

import logging
import threading
import time
from typing import Iterable, Protocol, Sequence

from ...config import settings
from ...models.domain import Address

logger = logging.getLogger(__name__)


class TravelTimeProvider(Protocol):
    def durations(self, origins: Sequence[str], destination: str) -> list[int | None]:
        ...


class TravelTimeOracle:
    """Resolves driving minutes between addresses for a single request.

    Identical addresses short-circuit without a provider call. Remaining
    origins go out in batches, one batch at a time with a pause between
    them. A failing batch resolves every origin in it to the default
    estimate. Results are memoized for the lifetime of the instance only.
    """

    def __init__(
        self,
        provider: TravelTimeProvider | None,
        *,
        batch_size: int | None = None,
        batch_pause_seconds: float | None = None,
        default_minutes: int | None = None,
        same_address_minutes: int | None = None,
    ) -> None:
        self.provider = provider
        self.batch_size = batch_size or settings.travel_batch_size
        self.batch_pause_seconds = (
            batch_pause_seconds if batch_pause_seconds is not None else settings.travel_batch_pause_seconds
        )
        self.default_minutes = default_minutes if default_minutes is not None else settings.travel_default_minutes
        self.same_address_minutes = (
            same_address_minutes if same_address_minutes is not None else settings.travel_same_address_minutes
        )
        self._cache: dict[tuple[str, str], int] = {}
        self._lock = threading.Lock()
        self._last_call: float | None = None
        self.provider_calls = 0

    def resolve(self, origins: Iterable[Address], destination: Address) -> dict[str, int]:
        """Minutes from each origin to the destination, keyed by origin key."""
        unique: dict[str, Address] = {}
        for origin in origins:
            unique.setdefault(origin.key, origin)

        with self._lock:
            pending: list[Address] = []
            for key, origin in unique.items():
                if (key, destination.key) in self._cache:
                    continue
                if key == destination.key:
                    self._cache[(key, destination.key)] = self.same_address_minutes
                else:
                    pending.append(origin)

            for start in range(0, len(pending), self.batch_size):
                self._resolve_batch(pending[start : start + self.batch_size], destination)

            return {key: self._cache[(key, destination.key)] for key in unique}

    def minutes(self, origin: Address, destination: Address) -> int:
        return self.resolve([origin], destination)[origin.key]

    def _resolve_batch(self, batch: list[Address], destination: Address) -> None:
        if self.provider is None:
            for origin in batch:
                self._cache[(origin.key, destination.key)] = self.default_minutes
            return

        self._throttle()
        self.provider_calls += 1
        try:
            results = self.provider.durations([origin.text for origin in batch], destination.text)
        except Exception as e:
            logger.warning(
                f"Travel time batch of {len(batch)} origins failed, using default {self.default_minutes} min: {e}"
            )
            results = [None] * len(batch)
        finally:
            self._last_call = time.monotonic()

        for index, origin in enumerate(batch):
            value = results[index] if index < len(results) else None
            if value is None:
                logger.debug(f"No travel time for '{origin.text}' -> '{destination.text}', using default")
                value = self.default_minutes
            self._cache[(origin.key, destination.key)] = value

    def _throttle(self) -> None:
        if self._last_call is None or self.batch_pause_seconds <= 0:
            return
        remaining = self.batch_pause_seconds - (time.monotonic() - self._last_call)
        if remaining > 0:
            time.sleep(remaining)
