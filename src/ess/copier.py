# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Copy one settings file onto several others."""

import logging
from collections.abc import Iterable

from ess.model import CopyOutcome, DestinationFailure
from ess.state import StateStore

logger = logging.getLogger(__name__)


class CopyError(RuntimeError):
    """Represent a copy failure detected before any destination was written."""


class NoSourceSelectedError(CopyError):
    def __init__(self) -> None:
        super().__init__("No source selected")


class NoDestinationsSelectedError(CopyError):
    def __init__(self) -> None:
        super().__init__("No destinations selected")


class SourceNotFoundError(CopyError):
    def __init__(self, identifier: str) -> None:
        super().__init__("Source file not found")
        self.identifier = identifier


class SourceReadError(CopyError):
    def __init__(self, identifier: str, reason: str) -> None:
        super().__init__(f"Failed to read source: {reason}")
        self.identifier = identifier


class CopyEngine:
    """Read a source settings file once and write it to every destination."""

    def copy(
        self,
        source: str | None,
        destinations: Iterable[str],
        store: StateStore,
    ) -> CopyOutcome:
        """Overwrite each destination file with the source file's bytes.

        Destinations are written independently; a failed write is recorded
        and the remaining destinations are still attempted. Identifiers
        without a record in ``store`` are skipped.

        Args:
            source: Source identifier.
            destinations: Destination identifiers.
            store: State store used to resolve identifiers to paths.

        Returns:
            Success count and per-destination failures.

        Raises:
            NoSourceSelectedError: If ``source`` is ``None``.
            NoDestinationsSelectedError: If ``destinations`` is empty.
            SourceNotFoundError: If no record carries ``source``.
            SourceReadError: If the source file cannot be read.
        """
        if source is None:
            raise NoSourceSelectedError()
        targets = sorted(set(destinations))
        if not targets:
            raise NoDestinationsSelectedError()

        source_record = store.find_record(source)
        if source_record is None:
            logger.warning(f"Copy source has no record (identifier={source})")
            raise SourceNotFoundError(source)
        try:
            contents = source_record.path.read_bytes()
        except OSError as exc:
            logger.warning(
                f"Failed to read copy source (path={source_record.path} error={exc})"
            )
            raise SourceReadError(source, str(exc)) from exc

        success_count = 0
        failures: list[DestinationFailure] = []
        for identifier in targets:
            record = store.find_record(identifier)
            if record is None:
                logger.debug(f"Skipping unknown destination (identifier={identifier})")
                continue
            try:
                record.path.write_bytes(contents)
            except OSError as exc:
                logger.warning(
                    f"Failed to write destination (identifier={identifier} "
                    f"path={record.path} error={exc})"
                )
                failures.append(DestinationFailure(identifier=identifier, reason=str(exc)))
                continue
            success_count += 1

        logger.info(
            f"Copy completed (source={source} successes={success_count} "
            f"failures={len(failures)} bytes={len(contents)})"
        )
        return CopyOutcome(success_count=success_count, failures=failures)
