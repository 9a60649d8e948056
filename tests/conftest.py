"""Fixtures compartidas: settings de test y clientes con httpx.MockTransport."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from adapters.http_client import ApiClient, build_async_client
from core.config import AppSettings

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(base_url="https://valet.example.invalid", http_timeout_seconds=2.0)


@pytest.fixture
def make_client(settings: AppSettings) -> Callable[[Handler], ApiClient]:
    def _make(handler: Handler) -> ApiClient:
        http_client = build_async_client(settings, transport=httpx.MockTransport(handler))
        return ApiClient(settings, client=http_client)

    return _make


@pytest.fixture
def recorded() -> list[httpx.Request]:
    return []
