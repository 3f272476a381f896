from __future__ import annotations

from collections import Counter
from typing import List

import pytest


@pytest.fixture(autouse=True)
def _strict_operators(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test in strict operator mode unless it opts in explicitly."""
    monkeypatch.delenv("TALLY_PERMISSIVE_OPS", raising=False)
    monkeypatch.delenv("TALLY_DEBUG_PY_TRACE", raising=False)


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Scenario tables rely on unique ids; refuse to run when two collide."""
    del session, config

    counts = Counter(item.nodeid for item in items)
    clashes = sorted(nodeid for nodeid, seen in counts.items() if seen > 1)
    if clashes:
        listing = "\n".join(f"  {nodeid}" for nodeid in clashes)
        raise pytest.UsageError(f"Scenario ids collide:\n{listing}")
