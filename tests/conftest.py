from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    # CLI commands bind structlog to the runner's stderr; don't leak it into later tests
    yield
    structlog.reset_defaults()
