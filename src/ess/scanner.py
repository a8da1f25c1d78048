# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Discovery of character settings files beneath an EVE settings root."""

import logging
import re
from pathlib import Path

from ess.model import Record

logger = logging.getLogger(__name__)

SETTINGS_DIR_PREFIX: str = "settings_"
CHARACTER_FILE_PATTERN: re.Pattern[str] = re.compile(r"^core_char_(\d+)\.dat$")


class ScanError(RuntimeError):
    """Represent a scan failure that yields no records."""


class PathNotFoundError(ScanError):
    """Raised when the scan root does not exist."""

    def __init__(self, root_path: str | Path) -> None:
        super().__init__(f"Path does not exist: {root_path}")
        self.root_path = str(root_path)


class SettingsScanner:
    """Find ``core_char_<id>.dat`` files two directory levels below a root."""

    def scan(self, root_path: str | Path) -> list[Record]:
        """Scan a settings root for character settings files.

        The expected layout is ``root/<profile>/settings_*/core_char_<id>.dat``.
        Unreadable directories below the root are treated as empty.

        Args:
            root_path: Settings root directory.

        Returns:
            Records sorted by identifier using string comparison.

        Raises:
            PathNotFoundError: If ``root_path`` does not exist.
        """
        root = Path(root_path).expanduser()
        if not root.exists():
            logger.warning(f"Scan root does not exist (root_path={root_path})")
            raise PathNotFoundError(root_path)

        records: list[Record] = []
        for profile_dir in _list_dir(root):
            if not _is_dir(profile_dir):
                continue
            for settings_dir in _list_dir(profile_dir):
                if not (
                    _is_dir(settings_dir)
                    and settings_dir.name.startswith(SETTINGS_DIR_PREFIX)
                ):
                    continue
                records.extend(_match_files(settings_dir))

        records.sort(key=lambda record: record.identifier)
        logger.info(f"Scan completed (root_path={root} records={len(records)})")
        return records


def scan_settings_files(root_path: str | Path) -> list[Record]:
    """Scan ``root_path`` with a default :class:`SettingsScanner`."""
    return SettingsScanner().scan(root_path)


def _list_dir(directory: Path) -> list[Path]:
    try:
        return sorted(directory.iterdir())
    except OSError as exc:
        logger.warning(
            f"Skipping unreadable directory (path={directory} error={exc})"
        )
        return []


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError as exc:
        logger.warning(f"Skipping unreadable entry (path={path} error={exc})")
        return False


def _is_file(path: Path) -> bool:
    try:
        return not path.is_dir()
    except OSError as exc:
        logger.warning(f"Skipping unreadable entry (path={path} error={exc})")
        return False


def _match_files(settings_dir: Path) -> list[Record]:
    matched: list[Record] = []
    for entry in _list_dir(settings_dir):
        match = CHARACTER_FILE_PATTERN.match(entry.name)
        if match is None or not _is_file(entry):
            continue
        matched.append(
            Record(
                path=entry.absolute(),
                filename=entry.name,
                identifier=match.group(1),
            )
        )
    return matched
