# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Composition of scanning, background lookups and copying."""

import logging
import time
from collections.abc import Iterable
from typing import Callable

from ess.config import SyncConfig
from ess.copier import CopyEngine, CopyError
from ess.enrichment import EnrichmentWorker, ResolutionChannel
from ess.lookup_client import LookupClient
from ess.model import CopyOutcome
from ess.scanner import ScanError, SettingsScanner
from ess.state import StateStore

logger = logging.getLogger(__name__)

WorkerFactory = Callable[[LookupClient, float], EnrichmentWorker]


def _default_worker_factory(
    lookup_client: LookupClient, pacing_seconds: float
) -> EnrichmentWorker:
    return EnrichmentWorker(lookup_client=lookup_client, pacing_seconds=pacing_seconds)


class SettingsSyncController:
    """Drive one settings root: scan it, resolve names, copy between records."""

    def __init__(
        self,
        config: SyncConfig,
        lookup_client: LookupClient,
        copy_engine: CopyEngine | None = None,
        worker_factory: WorkerFactory = _default_worker_factory,
        scanner: SettingsScanner | None = None,
    ) -> None:
        self.config = config
        self.store = StateStore()
        self.error_message: str | None = None
        self.status_message: str | None = None
        self.status_ok = False
        self._lookup_client = lookup_client
        self._copy_engine = copy_engine or CopyEngine()
        self._worker_factory = worker_factory
        self._scanner = scanner or SettingsScanner()
        self._channel: ResolutionChannel | None = None

    def scan(self, root_path: str | None = None) -> bool:
        """Rescan the settings root and start a new generation.

        Args:
            root_path: Root override; defaults to ``config.root_path``.

        Returns:
            Whether the scan succeeded. On failure the record list is empty
            and ``error_message`` explains why.
        """
        path = root_path if root_path is not None else self.config.root_path
        self.store.selection.clear()
        try:
            records = self._scanner.scan(path)
        except ScanError as exc:
            self.store.seed([])
            self._channel = None
            self.error_message = str(exc)
            return False

        generation = self.store.seed(records)
        self.error_message = None
        if self.config.lookup_names and records:
            self.start_enrichment(self.store.identifiers(), generation=generation)
        else:
            self._channel = None
        return True

    def start_enrichment(
        self, identifiers: Iterable[str], generation: int | None = None
    ) -> ResolutionChannel:
        """Start background name lookups; the previous run is left to finish."""
        worker = self._worker_factory(self._lookup_client, self.config.pacing_seconds)
        self._channel = worker.start(identifiers, generation=generation)
        return self._channel

    def tick(self) -> int:
        """Drain pending lookup results into the store without blocking.

        Returns:
            Number of events applied.
        """
        if self._channel is None:
            return 0
        return self.store.apply_events(self._channel.drain())

    def is_enriching(self) -> bool:
        return self._channel is not None and not self._channel.finished

    def wait_for_enrichment(
        self, poll_interval: float = 0.1, timeout: float | None = None
    ) -> bool:
        """Tick until the current lookup run is finished and fully drained.

        Args:
            poll_interval: Seconds between ticks.
            timeout: Maximum seconds to wait; ``None`` waits indefinitely.

        Returns:
            Whether the run finished within ``timeout``.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while self.is_enriching():
            self.tick()
            if deadline is not None and time.monotonic() >= deadline:
                logger.warning(f"Name lookups still running (timeout={timeout})")
                return False
            time.sleep(poll_interval)
        self.tick()
        return True

    def copy(
        self,
        source: str | None = None,
        destinations: Iterable[str] | None = None,
    ) -> CopyOutcome | None:
        """Copy the source settings onto the destinations.

        Arguments default to the current selection. A precondition failure
        leaves the selection untouched; an attempted copy clears it.

        Returns:
            The copy outcome, or ``None`` if a precondition failed.
        """
        selection = self.store.selection
        chosen_source = source if source is not None else selection.source
        chosen_destinations = (
            set(destinations) if destinations is not None else set(selection.destinations)
        )
        try:
            outcome = self._copy_engine.copy(
                chosen_source, chosen_destinations, self.store
            )
        except CopyError as exc:
            self.status_message = str(exc)
            self.status_ok = False
            return None

        self.status_message = outcome.summary()
        self.status_ok = outcome.succeeded
        selection.clear()
        return outcome
