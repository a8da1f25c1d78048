import threading

import pytest

from ess.enrichment import EnrichmentWorker, ResolutionChannel, unique_identifiers
from ess.lookup_client import LookupClient, NotFoundError, TransportError
from ess.model import Failed, Resolved


class _RecordingLookupClient(LookupClient):
    def __init__(self, failures: dict[str, Exception] | None = None) -> None:
        self._failures = failures or {}
        self.calls: list[str] = []

    def lookup_name(self, identifier: str) -> str:
        self.calls.append(identifier)
        if identifier in self._failures:
            raise self._failures[identifier]
        return f"pilot-{identifier}"


class _GatedLookupClient(LookupClient):
    def __init__(self) -> None:
        self.release = threading.Event()

    def lookup_name(self, identifier: str) -> str:
        self.release.wait(timeout=5)
        return f"pilot-{identifier}"


def test_enrich_001_unique_identifiers_dedupes_and_sorts_as_strings() -> None:
    assert unique_identifiers(["2", "10", "2", "1", "10"]) == ["1", "10", "2"]


def test_enrich_002_one_lookup_and_one_event_per_unique_identifier() -> None:
    client = _RecordingLookupClient()
    sleeps: list[float] = []
    worker = EnrichmentWorker(client, pacing_seconds=0.5, sleep=sleeps.append)

    channel = worker.start(["7", "3", "7", "12", "3"], generation=4)

    assert channel.wait(timeout=5)
    events = channel.drain()
    assert client.calls == ["12", "3", "7"]
    assert [event.identifier for event in events] == ["12", "3", "7"]
    assert [event.status for event in events] == [
        Resolved("pilot-12"),
        Resolved("pilot-3"),
        Resolved("pilot-7"),
    ]
    assert {event.generation for event in events} == {4}
    assert sleeps == [0.5, 0.5]


def test_enrich_003_failures_become_failed_events_without_aborting() -> None:
    client = _RecordingLookupClient(
        failures={
            "1": NotFoundError("Character not found"),
            "2": TransportError("HTTP 502 Bad Gateway"),
        }
    )
    worker = EnrichmentWorker(client, pacing_seconds=0)
    channel = ResolutionChannel()

    worker.run(["1", "2", "3"], channel)

    events = channel.drain()
    assert [event.status for event in events] == [
        Failed("Character not found"),
        Failed("HTTP 502 Bad Gateway"),
        Resolved("pilot-3"),
    ]
    assert all(event.generation is None for event in events)
    assert channel.finished


def test_enrich_004_start_does_not_block_on_lookups() -> None:
    client = _GatedLookupClient()
    worker = EnrichmentWorker(client, pacing_seconds=0)

    channel = worker.start(["1", "2"])

    assert channel.drain() == []
    assert not channel.finished
    client.release.set()
    assert channel.wait(timeout=5)
    assert [event.identifier for event in channel.drain()] == ["1", "2"]
    assert channel.drain() == []


def test_enrich_005_no_pacing_before_first_or_for_single_lookup() -> None:
    sleeps: list[float] = []
    worker = EnrichmentWorker(
        _RecordingLookupClient(), pacing_seconds=0.5, sleep=sleeps.append
    )
    channel = ResolutionChannel()

    worker.run(["1"], channel)

    assert sleeps == []
    assert len(channel.drain()) == 1


def test_enrich_006_empty_input_finishes_immediately() -> None:
    client = _RecordingLookupClient()
    channel = EnrichmentWorker(client, pacing_seconds=0).start([])

    assert channel.wait(timeout=5)
    assert channel.drain() == []
    assert client.calls == []


def test_enrich_007_rejects_negative_pacing() -> None:
    with pytest.raises(ValueError):
        EnrichmentWorker(_RecordingLookupClient(), pacing_seconds=-1)


def test_enrich_008_unexpected_client_error_fails_only_that_identifier() -> None:
    client = _RecordingLookupClient(failures={"1": RuntimeError("socket exploded")})
    worker = EnrichmentWorker(client, pacing_seconds=0)

    channel = worker.start(["1", "2", "3"])

    assert channel.wait(timeout=5)
    events = channel.drain()
    assert client.calls == ["1", "2", "3"]
    assert [event.status for event in events] == [
        Failed("socket exploded"),
        Resolved("pilot-2"),
        Resolved("pilot-3"),
    ]
    assert channel.finished
