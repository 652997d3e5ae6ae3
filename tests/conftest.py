from __future__ import annotations

import pytest

from trainroutes.logging_utils import get_logger


@pytest.fixture(scope="session", autouse=True)
def _structured_logger() -> None:
    # Bind the stream handler to the session-level stderr, not a per-test capsys stream.
    get_logger()
