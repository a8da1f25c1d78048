from pathlib import Path

import pytest

from ess.copier import (
    CopyEngine,
    CopyError,
    NoDestinationsSelectedError,
    NoSourceSelectedError,
    SourceNotFoundError,
    SourceReadError,
)
from ess.model import Record
from ess.state import StateStore


def _store(tmp_path: Path, contents: dict[str, bytes]) -> StateStore:
    records = []
    for identifier, data in contents.items():
        path = tmp_path / "profile" / "settings_Default" / f"core_char_{identifier}.dat"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        records.append(
            Record(path=path, filename=path.name, identifier=identifier)
        )
    store = StateStore()
    store.seed(records)
    return store


def _read(store: StateStore, identifier: str) -> bytes:
    record = store.find_record(identifier)
    assert record is not None
    return record.path.read_bytes()


def test_copy_001_writes_source_bytes_to_every_destination(tmp_path: Path) -> None:
    payload = b"\x00\x01window-layout\xff"
    store = _store(tmp_path, {"1": payload, "2": b"old-2", "3": b"old-3"})

    outcome = CopyEngine().copy("1", {"2", "3"}, store)

    assert outcome.success_count == 2
    assert outcome.failures == []
    assert outcome.succeeded
    assert _read(store, "2") == payload
    assert _read(store, "3") == payload
    assert _read(store, "1") == payload


def test_copy_002_missing_source_fails_without_writes(tmp_path: Path) -> None:
    store = _store(tmp_path, {"1": b"src", "2": b"old"})

    with pytest.raises(NoSourceSelectedError) as exc_info:
        CopyEngine().copy(None, {"1"}, store)

    assert isinstance(exc_info.value, CopyError)
    assert str(exc_info.value) == "No source selected"
    assert _read(store, "1") == b"src"


def test_copy_003_empty_destinations_fails_without_writes(tmp_path: Path) -> None:
    store = _store(tmp_path, {"1": b"src", "2": b"old"})

    with pytest.raises(NoDestinationsSelectedError):
        CopyEngine().copy("1", set(), store)

    assert _read(store, "2") == b"old"


def test_copy_004_unknown_source_fails(tmp_path: Path) -> None:
    store = _store(tmp_path, {"2": b"old"})

    with pytest.raises(SourceNotFoundError) as exc_info:
        CopyEngine().copy("1", {"2"}, store)

    assert str(exc_info.value) == "Source file not found"
    assert _read(store, "2") == b"old"


def test_copy_005_unreadable_source_aborts_before_writes(tmp_path: Path) -> None:
    store = _store(tmp_path, {"1": b"src", "2": b"old"})
    source = store.find_record("1")
    assert source is not None
    source.path.unlink()

    with pytest.raises(SourceReadError) as exc_info:
        CopyEngine().copy("1", {"2"}, store)

    assert str(exc_info.value).startswith("Failed to read source: ")
    assert _read(store, "2") == b"old"


def test_copy_006_failed_destination_does_not_stop_the_others(tmp_path: Path) -> None:
    store = _store(tmp_path, {"1": b"src", "2": b"old"})
    blocked = tmp_path / "other" / "settings_Default" / "core_char_3.dat"
    blocked.mkdir(parents=True)
    records = store.records() + [
        Record(path=blocked, filename=blocked.name, identifier="3")
    ]
    store.seed(records)

    outcome = CopyEngine().copy("1", {"2", "3"}, store)

    assert outcome.success_count == 1
    assert [failure.identifier for failure in outcome.failures] == ["3"]
    assert outcome.failures[0].reason
    assert _read(store, "2") == b"src"


def test_copy_007_vanished_destination_directory_is_reported(tmp_path: Path) -> None:
    store = _store(tmp_path, {"1": b"src"})
    gone = tmp_path / "gone" / "settings_Default" / "core_char_2.dat"
    store.seed(store.records() + [Record(path=gone, filename=gone.name, identifier="2")])

    outcome = CopyEngine().copy("1", ["2"], store)

    assert outcome.success_count == 0
    assert [failure.identifier for failure in outcome.failures] == ["2"]
    assert not gone.exists()


def test_copy_008_unknown_destination_is_skipped(tmp_path: Path) -> None:
    store = _store(tmp_path, {"1": b"src", "2": b"old"})

    outcome = CopyEngine().copy("1", {"2", "999"}, store)

    assert outcome.success_count == 1
    assert outcome.failures == []


def test_copy_009_reads_source_once(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    store = _store(tmp_path, {"1": b"src", "2": b"a", "3": b"b", "4": b"c"})
    reads: list[Path] = []
    original_read_bytes = Path.read_bytes

    def _read_bytes(self: Path) -> bytes:
        reads.append(self)
        return original_read_bytes(self)

    monkeypatch.setattr(Path, "read_bytes", _read_bytes)

    outcome = CopyEngine().copy("1", {"2", "3", "4"}, store)

    assert outcome.success_count == 3
    assert len(reads) == 1
