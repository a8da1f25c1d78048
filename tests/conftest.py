import sys
from pathlib import Path
from typing import Callable

import pytest


def _add_src_to_path() -> None:
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


_add_src_to_path()


@pytest.fixture
def write_settings(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing ``core_char_<id>.dat`` under ``tmp_path``."""

    def _write(
        profile: str,
        identifier: str,
        content: bytes,
        settings_dir: str = "settings_Default",
    ) -> Path:
        path = tmp_path / profile / settings_dir / f"core_char_{identifier}.dat"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    return _write
