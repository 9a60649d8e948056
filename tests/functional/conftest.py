from __future__ import annotations

import os

import pytest

from core.config import AppSettings


def pytest_collection_modifyitems(config, items):
    if os.environ.get("VALET_LIVE_TESTS") == "1":
        return
    skip_live = pytest.mark.skip(reason="set VALET_LIVE_TESTS=1 to hit the live Valet API")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.fixture
def live_settings() -> AppSettings:
    return AppSettings()
