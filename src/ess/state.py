# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Single-owner store reconciling scanned records with lookup results."""

import logging
from collections.abc import Iterable
from dataclasses import replace

from ess.model import (
    PENDING,
    CopySelection,
    Pending,
    Record,
    ResolutionEvent,
    ResolutionStatus,
    Resolved,
)

logger = logging.getLogger(__name__)


class StateStore:
    """Own the scanned record list, lookup statuses and copy selection.

    The store is not thread-safe. Background lookups reach it only through
    :meth:`apply_event`, called from the thread that drains their channel.
    """

    def __init__(self) -> None:
        self._records: list[Record] = []
        self._statuses: dict[str, ResolutionStatus] = {}
        self._generation = 0
        self.selection = CopySelection()

    @property
    def generation(self) -> int:
        """Number of the current scan generation; ``0`` before any seed."""
        return self._generation

    def seed(self, records: Iterable[Record]) -> int:
        """Replace all records and reset every status to pending.

        Args:
            records: Records from a fresh scan.

        Returns:
            The new generation number.
        """
        self._generation += 1
        self._records = [replace(record, resolution=PENDING) for record in records]
        self._statuses = {record.identifier: PENDING for record in self._records}
        logger.debug(
            f"State seeded (generation={self._generation} records={len(self._records)} "
            f"identifiers={len(self._statuses)})"
        )
        return self._generation

    def apply_event(self, event: ResolutionEvent) -> bool:
        """Apply one lookup result to every record sharing its identifier.

        Events tagged with an older generation are discarded; untagged events
        always apply.

        Args:
            event: Lookup result.

        Returns:
            Whether the event was applied.
        """
        if event.generation is not None and event.generation != self._generation:
            logger.debug(
                f"Discarding stale lookup result (identifier={event.identifier} "
                f"event_generation={event.generation} generation={self._generation})"
            )
            return False
        self._statuses[event.identifier] = event.status
        self._records = [
            replace(record, resolution=event.status)
            if record.identifier == event.identifier
            else record
            for record in self._records
        ]
        return True

    def apply_events(self, events: Iterable[ResolutionEvent]) -> int:
        """Apply events in order; returns how many were applied."""
        return sum(1 for event in events if self.apply_event(event))

    def records(self) -> list[Record]:
        """Return the records in scan order."""
        return list(self._records)

    def identifiers(self) -> list[str]:
        """Return record identifiers in scan order, duplicates included."""
        return [record.identifier for record in self._records]

    def status_of(self, identifier: str) -> ResolutionStatus | None:
        return self._statuses.get(identifier)

    def find_record(self, identifier: str) -> Record | None:
        """Return the first record carrying ``identifier``, if any."""
        for record in self._records:
            if record.identifier == identifier:
                return record
        return None

    def has_pending(self) -> bool:
        return any(isinstance(status, Pending) for status in self._statuses.values())

    def display_label(self, identifier: str) -> str:
        """Return the resolved name for ``identifier``, or the identifier itself."""
        status = self._statuses.get(identifier)
        if isinstance(status, Resolved):
            return status.display_name
        return identifier
