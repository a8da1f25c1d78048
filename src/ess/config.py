# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Runtime configuration and fixed service constants."""

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

ESI_DEFAULT_BASE_URL: str = "https://esi.evetech.net/latest"
ESI_DATASOURCE: str = "tranquility"
DEFAULT_TIMEOUT_SECONDS: float = 10.0
DEFAULT_PACING_SECONDS: float = 0.5
USER_AGENT: str = "eve-settings-sync/1.0.0"

EVE_SETTINGS_RELATIVE_PATH: str = (
    ".steam/steam/steamapps/compatdata/8500/pfx/drive_c/users/steamuser"
    "/AppData/Local/CCP/EVE"
)


@dataclass(frozen=True)
class SyncConfig:
    """Describe all values needed to scan, enrich and copy.

    Attributes:
        root_path: Settings root directory to scan.
        esi_base_url: Base URL of the character lookup service.
        datasource: ESI datasource query parameter.
        timeout_seconds: Per-request timeout for name lookups.
        pacing_seconds: Delay between successive name lookups.
        lookup_names: Whether a scan starts background name lookups.
    """

    root_path: str
    esi_base_url: str = ESI_DEFAULT_BASE_URL
    datasource: str = ESI_DATASOURCE
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    pacing_seconds: float = DEFAULT_PACING_SECONDS
    lookup_names: bool = True


def default_settings_path(home: Path | None = None) -> str:
    """Return the EVE settings directory of a Steam/Proton install.

    Args:
        home: Home directory override; defaults to the current user's home.

    Returns:
        The absolute path if it exists, otherwise the unexpanded ``~`` form.
    """
    try:
        home_dir = home if home is not None else Path.home()
    except RuntimeError as exc:
        logger.debug(f"Home directory is not available (error={exc})")
        home_dir = None
    if home_dir is not None:
        candidate = home_dir / EVE_SETTINGS_RELATIVE_PATH
        if candidate.exists():
            return str(candidate)
    return f"~/{EVE_SETTINGS_RELATIVE_PATH}"
