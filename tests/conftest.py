import os
from typing import Any

import pytest

from softver.softver_sequence import NodeSequence

# Monkeypatch coverage to bypass teardown crash in act/docker
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


@pytest.fixture  # type: ignore[misc]
def trace_log() -> list[tuple[str, list[Any]]]:
    """Collects (pass_name, snapshot) pairs from a Reducer trace sink."""
    return []


@pytest.fixture  # type: ignore[misc]
def trace_sink(trace_log: list[tuple[str, list[Any]]]) -> Any:
    def sink(pass_name: str, sequence: NodeSequence) -> None:
        trace_log.append((pass_name, list(sequence)))

    return sink
