# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Background name lookups streamed back over a queue."""

import logging
import queue
import threading
import time
from collections.abc import Iterable
from typing import Callable

from ess.lookup_client import LookupClient, LookupFailure
from ess.model import Failed, ResolutionEvent, ResolutionStatus, Resolved

logger = logging.getLogger(__name__)


def unique_identifiers(identifiers: Iterable[str]) -> list[str]:
    """Deduplicate identifiers and sort them ascending as strings."""
    return sorted(set(identifiers))


class ResolutionChannel:
    """Receiving end of one enrichment run."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[ResolutionEvent]" = queue.Queue()
        self._done = threading.Event()

    def put(self, event: ResolutionEvent) -> None:
        self._queue.put(event)

    def close(self) -> None:
        self._done.set()

    def drain(self) -> list[ResolutionEvent]:
        """Return every event produced so far without blocking.

        Returns:
            Events in production order; empty if none are available.
        """
        events: list[ResolutionEvent] = []
        try:
            while True:
                events.append(self._queue.get_nowait())
        except queue.Empty:
            pass
        return events

    @property
    def finished(self) -> bool:
        """Whether the producer has pushed its last event."""
        return self._done.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the producer finishes.

        Args:
            timeout: Maximum seconds to wait; ``None`` waits indefinitely.

        Returns:
            Whether the producer finished within ``timeout``.
        """
        return self._done.wait(timeout)


class EnrichmentWorker:
    """Resolve display names for identifiers on a background thread."""

    def __init__(
        self,
        lookup_client: LookupClient,
        pacing_seconds: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the worker.

        Args:
            lookup_client: Client used for each name lookup.
            pacing_seconds: Delay between successive lookups.
            sleep: Sleep function, replaceable in tests.

        Raises:
            ValueError: If ``pacing_seconds`` is negative.
        """
        if pacing_seconds < 0:
            raise ValueError("pacing_seconds must be >= 0")
        self._lookup_client = lookup_client
        self._pacing_seconds = pacing_seconds
        self._sleep = sleep

    def start(
        self, identifiers: Iterable[str], generation: int | None = None
    ) -> ResolutionChannel:
        """Start looking up names and return immediately.

        Args:
            identifiers: Identifiers to resolve; duplicates are allowed.
            generation: Scan generation to tag every event with.

        Returns:
            Channel that receives one event per unique identifier.
        """
        batch = unique_identifiers(identifiers)
        channel = ResolutionChannel()
        thread = threading.Thread(
            target=self.run,
            args=(batch, channel, generation),
            name=f"name-lookup-{generation}",
            daemon=True,
        )
        thread.start()
        return channel

    def run(
        self,
        identifiers: list[str],
        channel: ResolutionChannel,
        generation: int | None = None,
    ) -> None:
        """Resolve ``identifiers`` in order, pushing each result as it arrives.

        Args:
            identifiers: Deduplicated, ordered identifiers.
            channel: Channel to push events onto.
            generation: Scan generation to tag every event with.
        """
        total = len(identifiers)
        failed = 0
        try:
            for index, identifier in enumerate(identifiers):
                if index > 0 and self._pacing_seconds > 0:
                    self._sleep(self._pacing_seconds)
                status = self._resolve(identifier)
                if isinstance(status, Failed):
                    failed += 1
                channel.put(
                    ResolutionEvent(
                        identifier=identifier, status=status, generation=generation
                    )
                )
                logger.info(
                    "name_lookup_progress completed=%s total=%s failed=%s generation=%s",
                    index + 1,
                    total,
                    failed,
                    generation,
                )
        finally:
            channel.close()

    def _resolve(self, identifier: str) -> ResolutionStatus:
        try:
            return Resolved(self._lookup_client.lookup_name(identifier))
        except LookupFailure as exc:
            logger.warning(
                f"Name lookup failed (identifier={identifier} error={exc})"
            )
            return Failed(str(exc))
        except Exception as exc:
            logger.warning(
                f"Name lookup raised unexpectedly (identifier={identifier} "
                f"error_type={type(exc).__name__} error={exc})"
            )
            return Failed(str(exc) or type(exc).__name__)
