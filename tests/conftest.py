from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

# Import from local source instead of installed package.
def _project_root(start: Path) -> Path:
    current = start.resolve()
    for candidate in current.parents:
        if (candidate / "src" / "gagara_boost").exists():
            return candidate
    raise RuntimeError("Unable to locate gagara-boost project root from test path")

sys.path.insert(0, str(_project_root(Path(__file__)) / "src"))

from gagara_boost import GagaraBoost, HttpxTransport  # noqa: E402

from helpers import BASE_URL  # noqa: E402


@pytest.fixture
def mock_client() -> Callable[..., Any]:
    """Build a client whose default transport is backed by ``httpx.MockTransport``."""

    def factory(handler: Callable[[httpx.Request], httpx.Response], **config: Any) -> Any:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return GagaraBoost({"base_url": BASE_URL, "transport": HttpxTransport(http), **config})

    return factory
