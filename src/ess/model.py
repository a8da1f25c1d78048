# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for discovered settings files and copy operations."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pending:
    """Name lookup has not finished yet."""


@dataclass(frozen=True)
class Resolved:
    """Name lookup succeeded.

    Attributes:
        display_name: Human-readable name returned by the lookup service.
    """

    display_name: str


@dataclass(frozen=True)
class Failed:
    """Name lookup failed.

    Attributes:
        reason: Human-readable failure description.
    """

    reason: str


ResolutionStatus = Pending | Resolved | Failed

PENDING = Pending()


def is_terminal(status: ResolutionStatus) -> bool:
    """Return whether ``status`` is a final lookup outcome."""
    return isinstance(status, (Resolved, Failed))


@dataclass(frozen=True)
class Record:
    """Represent one discovered character settings file.

    Attributes:
        path: Absolute location of the settings file.
        filename: Matched file name.
        identifier: Digit run extracted from the file name.
        resolution: Current name lookup state.
    """

    path: Path
    filename: str
    identifier: str
    resolution: ResolutionStatus = PENDING


@dataclass(frozen=True)
class ResolutionEvent:
    """Carry one lookup result from the enrichment worker to the state store.

    Attributes:
        identifier: Identifier the lookup was made for.
        status: Terminal lookup outcome.
        generation: Scan generation the lookup belongs to; ``None`` if untagged.
    """

    identifier: str
    status: ResolutionStatus
    generation: int | None = None


@dataclass
class CopySelection:
    """Track the copy source and destination identifiers picked by the user."""

    source: str | None = None
    destinations: set[str] = field(default_factory=set)

    def select_source(self, identifier: str | None) -> None:
        """Set or clear the source, dropping it from the destinations.

        Args:
            identifier: New source identifier, or ``None`` to clear it.
        """
        self.source = identifier
        if identifier is not None:
            self.destinations.discard(identifier)

    def add_destination(self, identifier: str) -> bool:
        """Add a destination unless it is the current source.

        Returns:
            Whether the identifier is now a destination.
        """
        if identifier == self.source:
            logger.debug(
                f"Refusing to add source as destination (identifier={identifier})"
            )
            return False
        self.destinations.add(identifier)
        return True

    def remove_destination(self, identifier: str) -> None:
        self.destinations.discard(identifier)

    def toggle_destination(self, identifier: str) -> bool:
        """Flip destination membership; returns the new membership state."""
        if identifier in self.destinations:
            self.remove_destination(identifier)
            return False
        return self.add_destination(identifier)

    def clear(self) -> None:
        self.source = None
        self.destinations.clear()

    def is_ready(self) -> bool:
        """Return whether a copy can be attempted."""
        return self.source is not None and bool(self.destinations)


@dataclass(frozen=True)
class DestinationFailure:
    """Represent one destination that could not be written."""

    identifier: str
    reason: str


@dataclass(frozen=True)
class CopyOutcome:
    """Summarize one copy attempt.

    Attributes:
        success_count: Number of destinations written.
        failures: Destinations that failed, in attempt order.
    """

    success_count: int
    failures: list[DestinationFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        """Render the user-facing result message."""
        if self.succeeded:
            return (
                f"Successfully copied settings to {self.success_count} character(s)"
            )
        details = ", ".join(
            f"{failure.identifier}: {failure.reason}" for failure in self.failures
        )
        return (
            f"Copied to {self.success_count} character(s), "
            f"but {len(self.failures)} failed: {details}"
        )
