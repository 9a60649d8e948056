from __future__ import annotations

import asyncio
import json
import logging

import httpx
import pytest

from adapters.http_client import ApiClient
from adapters.request_builder import RequestBuilder
from core.domain.models import RequestDescriptor
from tests.valet_fakes import json_response, valet_payload


def test_dispatch_returns_envelope_for_200(make_client, recorded) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        recorded.append(request)
        return json_response(200, valet_payload("FXUSDCAD", ["1.35"]), request)

    client = make_client(handler)
    request = (
        RequestBuilder()
        .set_base_url("https://valet.example.invalid")
        .set_endpoint("/valet/observations/FXUSDCAD/json")
        .add_param("recent", 1)
        .set_header("X-Test", "1")
        .build()
    )

    response = asyncio.run(client.dispatch(request))

    assert response is not None
    assert response.status == 200
    assert response.ok
    assert response.data["observations"][0]["FXUSDCAD"]["v"] == "1.35"
    assert response.headers["content-type"] == "application/json"
    assert str(recorded[0].url) == "https://valet.example.invalid/valet/observations/FXUSDCAD/json?recent=1"
    assert recorded[0].headers["X-Test"] == "1"
    assert recorded[0].headers["User-Agent"].startswith("valet-harness/")


def test_dispatch_returns_error_statuses_without_raising(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return json_response(400, {"message": "Bad recent observations request parameters"}, request)

    client = make_client(handler)
    response = asyncio.run(client.get("https://valet.example.invalid/valet/observations/FXUSDCAD/jsonxx"))

    assert response is not None
    assert response.status == 400
    assert not response.ok
    assert response.message() == "Bad recent observations request parameters"


def test_dispatch_logs_server_errors(make_client, caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return json_response(503, {"message": "down"}, request)

    client = make_client(handler)
    with caplog.at_level(logging.WARNING, logger="adapters.http_client"):
        response = asyncio.run(client.get("https://valet.example.invalid/x"))

    assert response is not None and response.status == 503
    assert any("error status 503" in r.getMessage() for r in caplog.records)


def test_dispatch_returns_none_when_no_response(make_client, caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    client = make_client(handler)
    with caplog.at_level(logging.ERROR, logger="adapters.http_client"):
        response = asyncio.run(client.get("https://valet.example.invalid/x"))

    assert response is None
    assert any("No response received" in r.getMessage() for r in caplog.records)


def test_dispatch_returns_none_on_network_error(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)
    assert asyncio.run(client.get("https://valet.example.invalid/x")) is None


def test_dispatch_returns_none_when_request_cannot_be_sent(settings) -> None:
    client = ApiClient(settings)
    response = asyncio.run(client.dispatch(RequestDescriptor(url="ftp://valet.example.invalid/x")))
    assert response is None


def test_injected_logger_is_used(settings) -> None:
    log = logging.getLogger("tests.injected")
    records: list[logging.LogRecord] = []

    class _Collect(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    handler = _Collect()
    log.addHandler(handler)
    try:
        client = ApiClient(settings, log=log)
        asyncio.run(client.dispatch(RequestDescriptor(url="ftp://valet.example.invalid/x")))
    finally:
        log.removeHandler(handler)

    assert records and records[0].levelno == logging.ERROR
    assert getattr(records[0], "url") == "ftp://valet.example.invalid/x"


def test_post_sends_json_body(make_client, recorded) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        recorded.append(request)
        return httpx.Response(201, text="created", request=request)

    client = make_client(handler)
    response = asyncio.run(client.post("https://valet.example.invalid/items", {"a": 1}))

    assert response is not None
    assert response.status == 201
    assert response.data == "created"
    assert recorded[0].method == "POST"
    assert json.loads(recorded[0].content) == {"a": 1}
    assert recorded[0].headers["Content-Type"] == "application/json"


def test_put_sends_raw_body(make_client, recorded) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        recorded.append(request)
        return httpx.Response(200, text="updated", request=request)

    client = make_client(handler)
    response = asyncio.run(client.put("https://valet.example.invalid/items/1", "raw text"))

    assert response is not None
    assert response.data == "updated"
    assert recorded[0].method == "PUT"
    assert recorded[0].content == b"raw text"


def test_delete_without_body(make_client, recorded) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        recorded.append(request)
        return httpx.Response(204, request=request)

    client = make_client(handler)
    response = asyncio.run(client.delete("https://valet.example.invalid/items/1"))

    assert response is not None
    assert response.status == 204
    assert response.data is None
    assert recorded[0].method == "DELETE"
    assert recorded[0].content == b""


@pytest.mark.parametrize(
    "request_kwargs",
    [
        {"method": "GET", "headers": {"X-Name": "café ✓"}},
        {"method": "POST", "body": {"ids": {1, 2}}},
    ],
    ids=["non-ascii-header", "unserializable-body"],
)
def test_unsendable_request_returns_none(make_client, recorded, caplog, request_kwargs) -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
        recorded.append(request)
        return httpx.Response(200, request=request)

    client = make_client(handler)
    request = RequestDescriptor(url="https://valet.example.invalid/items", **request_kwargs)

    with caplog.at_level(logging.ERROR, logger="adapters.http_client"):
        response = asyncio.run(client.dispatch(request))

    assert response is None
    assert recorded == []
    assert "Request could not be built" in caplog.text


@pytest.mark.parametrize("status", [999, 600, 99])
def test_non_standard_status_is_returned(make_client, status) -> None:
    client = make_client(lambda r: httpx.Response(status, text="odd", request=r))

    response = asyncio.run(client.get("https://valet.example.invalid/odd"))

    assert response is not None
    assert response.status == status
    assert response.data == "odd"
    assert not response.ok
